# Top-level __init__.py for torchfuse package

# Import key classes and functions to make them available at the top level of the package

# Core components
from .core.stamp import Stamp
from .core.uuid import UUID, NIL
from .core.variable import Variable
from .core.fixed_size_variable import FixedSizeVariable
from .core.local_parameterization import LocalParameterization, EuclideanParameterization

# Engine adapter
from .core.options import ProblemOptions
from .core.problem import Problem, ParameterBlock

# Variables
from .variables.stamped import Stamped
from .variables.point import Point2D, Point3D
from .variables.orientation import Orientation2D, Orientation3D
from .variables.pinhole_camera import PinholeCamera

# Utilities (device and dtype every variable allocates its storage with)
from .utils.misc import DEVICE, DEFAULT_DTYPE

__all__ = [
    "Stamp", "UUID", "NIL",
    "Variable", "FixedSizeVariable",
    "LocalParameterization", "EuclideanParameterization",
    "ProblemOptions", "Problem", "ParameterBlock",
    "Stamped", "Point2D", "Point3D", "Orientation2D", "Orientation3D", "PinholeCamera",
    "DEVICE", "DEFAULT_DTYPE"
]

__version__ = "0.1.0"
