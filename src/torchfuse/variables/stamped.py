from ..core.stamp import Stamp
from ..core.uuid import UUID, NIL, generate_from_stamp


class Stamped:
    """
    Mixin for variables identified by a timestamp and the device that produced them.

    Two stamped variables of the same kind with the same stamp and device id are
    the same variable; the UUID derived here is what the graph merges them on.

    Args:
        stamp (Stamp): Timestamp of the variable. Required.
        device_id (UUID, optional): Id of the robot/device the variable belongs to. Defaults to NIL.
    """
    def __init__(self, stamp: Stamp, device_id: UUID = NIL):
        if stamp is None:
            raise ValueError(f"{self.__class__.__name__} requires a stamp")
        if not isinstance(stamp, Stamp):
            raise TypeError(f"stamp must be a Stamp, got {type(stamp).__name__}")
        if device_id is None or not isinstance(device_id, UUID):
            raise TypeError(f"device_id must be a UUID, got {type(device_id).__name__}")
        self._stamp = stamp
        self._device_id = device_id

    @property
    def stamp(self) -> Stamp:
        return self._stamp

    @property
    def device_id(self) -> UUID:
        return self._device_id

    def stamped_uuid(self) -> UUID:
        """UUID derived from the kind's type() string, the stamp and the device id."""
        return generate_from_stamp(self.type(), self._stamp, self._device_id)

    def _describe(self) -> str:
        return f"  stamp: {self._stamp}\n  device_id: {self._device_id}\n"
