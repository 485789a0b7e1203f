from .so2 import wrap_angle
from .so3 import (
    quaternion_multiply, quaternion_conjugate, quaternion_normalize,
    quaternion_exp, quaternion_log, quaternion_to_rotation_matrix
)

__all__ = [
    "wrap_angle",
    "quaternion_multiply",
    "quaternion_conjugate",
    "quaternion_normalize",
    "quaternion_exp",
    "quaternion_log",
    "quaternion_to_rotation_matrix"
]
