import torch
from typing import Optional, TextIO

from .variable import Variable, default_stream
from ..utils.misc import DEVICE, DEFAULT_DTYPE


class FixedSizeVariable(Variable):
    """
    A variable whose number of stored scalars is a constant of its kind.

    Storage is a single 1-D contiguous tensor of `SIZE` elements allocated at
    construction. data() and mutable_data() return that tensor itself, so a
    write through mutable_data() is visible in every later read.

    Args:
        initial_value (optional): Initial values, anything torch.as_tensor accepts
                                  with exactly `SIZE` elements. Defaults to zeros.

    Raises:
        ValueError: If the kind declares no SIZE, or initial_value has the wrong number of elements.

    Attributes:
        SIZE (int): Number of stored scalars, declared by each concrete kind.
    """
    SIZE: int = 0

    def __init__(self, initial_value=None):
        if self.SIZE < 1:
            raise ValueError(f"{self.__class__.__name__} must declare SIZE >= 1, got {self.SIZE}")
        if initial_value is None:
            storage = torch.zeros(self.SIZE, device=DEVICE, dtype=DEFAULT_DTYPE)
        else:
            storage = torch.as_tensor(initial_value).to(device=DEVICE, dtype=DEFAULT_DTYPE)
            storage = storage.detach().reshape(-1).clone().contiguous()
        if storage.numel() != self.SIZE:
            raise ValueError(f"{self.__class__.__name__} expects {self.SIZE} values, got {storage.numel()}")
        self._data = storage

    def size(self) -> int:
        return self.SIZE

    def data(self) -> torch.Tensor:
        return self._data

    def mutable_data(self) -> torch.Tensor:
        return self._data

    def _describe(self) -> str:
        """Extra metadata lines for print(); overridden by kinds with metadata."""
        return ""

    def print(self, stream: Optional[TextIO] = None) -> None:
        out = default_stream(stream)
        out.write(f"{self.type()}:\n")
        out.write(f"  uuid: {self.uuid()}\n")
        out.write(self._describe())
        out.write(f"  size: {self.size()}\n")
        out.write(f"  data: {self._data.tolist()}\n")
