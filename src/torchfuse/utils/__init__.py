from .misc import DEVICE, DEFAULT_DTYPE

__all__ = [
    "DEVICE",
    "DEFAULT_DTYPE"
]
