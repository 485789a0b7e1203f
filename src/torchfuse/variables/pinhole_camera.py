from ..core.fixed_size_variable import FixedSizeVariable
from ..core.uuid import UUID, generate_from_id


class PinholeCamera(FixedSizeVariable):
    """
    Pinhole camera intrinsics (fx, fy, cx, cy) of one physical camera.

    Unlike stamped variables, the calibration is identified by the camera id
    alone: every measurement from the same camera refers to the same variable.

    Args:
        camera_id (int): Non-negative id of the camera.
        initial_value (optional): Initial (fx, fy, cx, cy). Defaults to zeros.
    """
    TYPE = "torchfuse.variables.PinholeCamera"
    SIZE = 4

    def __init__(self, camera_id: int, initial_value=None):
        if camera_id is None:
            raise ValueError("PinholeCamera requires a camera_id")
        self._camera_id = camera_id
        self._uuid = generate_from_id(self.type(), camera_id)
        super().__init__(initial_value)

    @property
    def camera_id(self) -> int:
        return self._camera_id

    def uuid(self) -> UUID:
        return self._uuid

    @property
    def fx(self) -> float:
        return self._data[0].item()

    @property
    def fy(self) -> float:
        return self._data[1].item()

    @property
    def cx(self) -> float:
        return self._data[2].item()

    @property
    def cy(self) -> float:
        return self._data[3].item()

    def _describe(self) -> str:
        return f"  camera_id: {self._camera_id}\n"
