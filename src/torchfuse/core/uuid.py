"""
Deterministic identity keys for variables.

A variable's UUID must be a pure function of its defining metadata: two
variables describing the same physical unknown (e.g. the robot position at the
same timestamp, reported by the same device) must produce the same UUID in any
process, and the graph merges variables solely on UUID equality.

Keys are name-based (SHA-1, version 5) UUIDs. Every variable kind derives a
namespace UUID from its type string, and then derives the instance UUID from
the metadata bytes inside that namespace, so identical metadata under two kinds
never collides.
"""
import hashlib
import struct
import uuid as _uuid
from typing import Optional, Union

from .stamp import Stamp

UUID = _uuid.UUID

NIL = _uuid.UUID(int=0)
"""The all-zero UUID. Used as the default device id."""

BytesLike = Union[bytes, bytearray, memoryview]


def _name_based(namespace: UUID, data: bytes) -> UUID:
    # Same construction as uuid.uuid5, but accepting raw bytes on every Python 3 version.
    digest = hashlib.sha1(namespace.bytes + bytes(data)).digest()
    return _uuid.UUID(bytes=digest[:16], version=5)


def generate(namespace: str, data: Optional[BytesLike] = None) -> UUID:
    """
    Generates a deterministic UUID.

    Args:
        namespace (str): Namespace string, typically the variable's type() string.
        data (bytes-like, optional): Metadata bytes identifying a specific instance.
                                     If None, the namespace UUID itself is returned.

    Returns:
        UUID: The derived name-based UUID.
    """
    if not isinstance(namespace, str):
        raise TypeError(f"UUID namespace must be a str, got {type(namespace).__name__}")
    namespace_uuid = _name_based(NIL, namespace.encode("utf-8"))
    if data is None:
        return namespace_uuid
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"UUID data must be bytes-like, got {type(data).__name__}")
    return _name_based(namespace_uuid, data)


def generate_from_stamp(namespace: str, stamp: Stamp, device_id: UUID = NIL) -> UUID:
    """
    Generates a UUID from a timestamp and an optional device id.

    Args:
        namespace (str): Namespace string, typically the variable's type() string.
        stamp (Stamp): The timestamp associated with the variable.
        device_id (UUID, optional): Identifies the robot/device the variable belongs to. Defaults to NIL.
    """
    if not isinstance(stamp, Stamp):
        raise TypeError(f"stamp must be a Stamp, got {type(stamp).__name__}")
    if not isinstance(device_id, UUID):
        raise TypeError(f"device_id must be a UUID, got {type(device_id).__name__}")
    return generate(namespace, stamp.to_bytes() + device_id.bytes)


def generate_from_id(namespace: str, user_id: int) -> UUID:
    """Generates a UUID from a non-negative integer id (e.g. a camera or landmark id)."""
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise TypeError(f"user_id must be an int, got {type(user_id).__name__}")
    if not 0 <= user_id < 2 ** 64:
        raise ValueError(f"user_id must fit in an unsigned 64-bit integer, got {user_id}")
    return generate(namespace, struct.pack("<Q", user_id))


def random() -> UUID:
    """A random (version 4) UUID, for entities without reproducible metadata."""
    return _uuid.uuid4()


def to_string(value: UUID) -> str:
    return str(value)


def from_string(text: str) -> UUID:
    """Parses the canonical 8-4-4-4-12 hex form. Raises ValueError on malformed input."""
    return _uuid.UUID(text)
