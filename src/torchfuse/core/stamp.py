import math
import struct
from dataclasses import dataclass

_NSEC_PER_SEC = 1_000_000_000


@dataclass(frozen=True, order=True)
class Stamp:
    """
    Immutable timestamp used as defining metadata of stamped variables.

    Stored as whole seconds plus nanoseconds so that the byte encoding used for
    identity derivation is exact and reproducible (no float rounding).

    Args:
        sec (int): Whole seconds, non-negative.
        nsec (int, optional): Nanoseconds in [0, 1e9). Defaults to 0.
    """
    sec: int
    nsec: int = 0

    def __post_init__(self):
        for field_name in ("sec", "nsec"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"Stamp.{field_name} must be an int, got {type(value).__name__}")
        if self.sec < 0:
            raise ValueError(f"Stamp.sec must be non-negative, got {self.sec}")
        if not 0 <= self.nsec < _NSEC_PER_SEC:
            raise ValueError(f"Stamp.nsec must be in [0, 1e9), got {self.nsec}")

    @classmethod
    def from_sec(cls, seconds: float) -> "Stamp":
        """Builds a stamp from floating point seconds, rounded to the nearest nanosecond."""
        if not math.isfinite(seconds):
            raise ValueError(f"Cannot build a Stamp from non-finite seconds {seconds}")
        return cls.from_nsec(int(round(seconds * _NSEC_PER_SEC)))

    @classmethod
    def from_nsec(cls, nanoseconds: int) -> "Stamp":
        if nanoseconds < 0:
            raise ValueError(f"Cannot build a Stamp from negative nanoseconds {nanoseconds}")
        sec, nsec = divmod(int(nanoseconds), _NSEC_PER_SEC)
        return cls(sec, nsec)

    def to_sec(self) -> float:
        return self.sec + self.nsec / _NSEC_PER_SEC

    def to_nsec(self) -> int:
        return self.sec * _NSEC_PER_SEC + self.nsec

    def to_bytes(self) -> bytes:
        """12-byte little-endian encoding (int64 seconds, uint32 nanoseconds)."""
        return struct.pack("<qI", self.sec, self.nsec)

    def __str__(self):
        return f"{self.sec}.{self.nsec:09d}"
