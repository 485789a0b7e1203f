from .stamp import Stamp
from .uuid import UUID, NIL
from .local_parameterization import LocalParameterization, EuclideanParameterization
from .variable import Variable
from .fixed_size_variable import FixedSizeVariable
from .options import ProblemOptions
from .problem import Problem, ParameterBlock

__all__ = [
    "Stamp",
    "UUID",
    "NIL",
    "LocalParameterization",
    "EuclideanParameterization",
    "Variable",
    "FixedSizeVariable",
    "ProblemOptions",
    "Problem",
    "ParameterBlock"
]
