from ..core.fixed_size_variable import FixedSizeVariable
from ..core.stamp import Stamp
from ..core.uuid import UUID, NIL
from .stamped import Stamped


class Point2D(Stamped, FixedSizeVariable):
    """
    A 2D position (x, y) at a given time. Updated additively.

    Args:
        stamp (Stamp): Timestamp of the position.
        device_id (UUID, optional): Id of the device the position belongs to. Defaults to NIL.
        initial_value (optional): Initial (x, y). Defaults to the origin.
    """
    TYPE = "torchfuse.variables.Point2D"
    SIZE = 2

    def __init__(self, stamp: Stamp, device_id: UUID = NIL, initial_value=None):
        Stamped.__init__(self, stamp, device_id)
        FixedSizeVariable.__init__(self, initial_value)
        self._uuid = self.stamped_uuid()

    def uuid(self) -> UUID:
        return self._uuid

    @property
    def x(self) -> float:
        return self._data[0].item()

    @property
    def y(self) -> float:
        return self._data[1].item()


class Point3D(Stamped, FixedSizeVariable):
    """
    A 3D position (x, y, z) at a given time. Updated additively.

    Args:
        stamp (Stamp): Timestamp of the position.
        device_id (UUID, optional): Id of the device the position belongs to. Defaults to NIL.
        initial_value (optional): Initial (x, y, z). Defaults to the origin.
    """
    TYPE = "torchfuse.variables.Point3D"
    SIZE = 3

    def __init__(self, stamp: Stamp, device_id: UUID = NIL, initial_value=None):
        Stamped.__init__(self, stamp, device_id)
        FixedSizeVariable.__init__(self, initial_value)
        self._uuid = self.stamped_uuid()

    def uuid(self) -> UUID:
        return self._uuid

    @property
    def x(self) -> float:
        return self._data[0].item()

    @property
    def y(self) -> float:
        return self._data[1].item()

    @property
    def z(self) -> float:
        return self._data[2].item()
