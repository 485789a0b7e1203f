import math
import torch
from typing import Optional

from ..core.fixed_size_variable import FixedSizeVariable
from ..core.local_parameterization import LocalParameterization
from ..core.stamp import Stamp
from ..core.uuid import UUID, NIL
from ..lie_math.so2 import wrap_angle
from ..lie_math.so3 import quaternion_multiply, quaternion_conjugate, quaternion_normalize, \
    quaternion_exp, quaternion_log
from .stamped import Stamped


class Orientation2DLocalParameterization(LocalParameterization):
    """
    Additive update of a heading angle, wrapped back into [-pi, pi).

    Sizes are equal (1, 1); the parameterization exists only to handle the
    discontinuity at +/- pi.
    """
    @property
    def global_size(self) -> int:
        return 1

    @property
    def local_size(self) -> int:
        return 1

    def _plus(self, x: torch.Tensor, delta: torch.Tensor) -> torch.Tensor:
        return wrap_angle(x + delta)

    def _minus(self, x1: torch.Tensor, x2: torch.Tensor) -> torch.Tensor:
        return wrap_angle(x2 - x1)

    def compute_jacobian(self, x: torch.Tensor) -> torch.Tensor:
        self._check_shape(x, 1, "x")
        return torch.ones((1, 1), device=x.device, dtype=x.dtype)

    def compute_minus_jacobian(self, x: torch.Tensor) -> torch.Tensor:
        self._check_shape(x, 1, "x")
        return torch.ones((1, 1), device=x.device, dtype=x.dtype)


class Orientation3DLocalParameterization(LocalParameterization):
    """
    Unit quaternion [w, x, y, z] updated by a rotation vector in the body frame.

    plus(q, delta) = normalize(q * exp(delta))
    minus(q1, q2) = log(conj(q1) * q2)
    """
    @property
    def global_size(self) -> int:
        return 4

    @property
    def local_size(self) -> int:
        return 3

    def _plus(self, x: torch.Tensor, delta: torch.Tensor) -> torch.Tensor:
        return quaternion_normalize(quaternion_multiply(x, quaternion_exp(delta)))

    def _minus(self, x1: torch.Tensor, x2: torch.Tensor) -> torch.Tensor:
        return quaternion_log(quaternion_multiply(quaternion_conjugate(x1), x2))


class Orientation2D(Stamped, FixedSizeVariable):
    """
    A 2D heading (yaw, radians) at a given time.

    The stored angle is kept in [-pi, pi). Updates wrap around through
    Orientation2DLocalParameterization.

    Args:
        stamp (Stamp): Timestamp of the heading.
        device_id (UUID, optional): Id of the device the heading belongs to. Defaults to NIL.
        yaw (float, optional): Initial heading. Defaults to 0.
    """
    TYPE = "torchfuse.variables.Orientation2D"
    SIZE = 1

    def __init__(self, stamp: Stamp, device_id: UUID = NIL, yaw: float = 0.0):
        Stamped.__init__(self, stamp, device_id)
        FixedSizeVariable.__init__(self, [wrap_angle(float(yaw))])
        self._uuid = self.stamped_uuid()

    def uuid(self) -> UUID:
        return self._uuid

    @property
    def yaw(self) -> float:
        return self._data[0].item()

    def local_parameterization(self) -> Optional[LocalParameterization]:
        return Orientation2DLocalParameterization()


class Orientation3D(Stamped, FixedSizeVariable):
    """
    A 3D orientation stored as a unit quaternion [w, x, y, z] at a given time.

    Size is 4 but there are only 3 degrees of freedom; engines optimize over the
    3-dimensional tangent space through Orientation3DLocalParameterization.

    Args:
        stamp (Stamp): Timestamp of the orientation.
        device_id (UUID, optional): Id of the device the orientation belongs to. Defaults to NIL.
        initial_value (optional): Initial quaternion [w, x, y, z], normalized on
                                  construction. Defaults to the identity [1, 0, 0, 0].
    """
    TYPE = "torchfuse.variables.Orientation3D"
    SIZE = 4

    def __init__(self, stamp: Stamp, device_id: UUID = NIL, initial_value=None):
        Stamped.__init__(self, stamp, device_id)
        FixedSizeVariable.__init__(self, [1.0, 0.0, 0.0, 0.0] if initial_value is None else initial_value)
        if not torch.isfinite(self._data).all():
            raise ValueError(f"Orientation3D requires a finite quaternion, got {self._data.tolist()}")
        norm = torch.linalg.norm(self._data).item()
        if not 1e-12 < norm < math.inf:
            raise ValueError(f"Orientation3D requires a non-zero quaternion, got {self._data.tolist()}")
        self._data.div_(norm)
        self._uuid = self.stamped_uuid()

    def uuid(self) -> UUID:
        return self._uuid

    @property
    def w(self) -> float:
        return self._data[0].item()

    @property
    def x(self) -> float:
        return self._data[1].item()

    @property
    def y(self) -> float:
        return self._data[2].item()

    @property
    def z(self) -> float:
        return self._data[3].item()

    def local_parameterization(self) -> Optional[LocalParameterization]:
        return Orientation3DLocalParameterization()
