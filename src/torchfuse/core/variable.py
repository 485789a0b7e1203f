import torch
import abc
import copy
import io
import sys
from typing import Optional, TextIO

from .uuid import UUID
from .local_parameterization import LocalParameterization


class Variable(abc.ABC):
    """
    Base class for optimization variables.

    A variable is a semantically meaningful block of one or more scalar values
    (a 2D point, a quaternion, a set of camera intrinsics) that an optimization
    engine treats as a single parameter block. Generic graph code manages
    variables only through this interface.

    Contract for derived kinds:
        - the values live in one contiguous 1-D tensor of exactly size() elements,
          owned by the variable and never replaced or resized after construction;
        - uuid() is a pure function of the metadata fixed at construction
          (timestamp, device id, ...) and never of the stored values;
        - mutable_data() is the only sanctioned path for external mutation.

    Views returned by data() and mutable_data(), and any parameterization
    returned by local_parameterization(), are only meaningful while the variable
    itself is alive and registered with the engine that borrowed them.

    Attributes:
        TYPE (str): Unique name of the concrete kind. Kinds that do not declare
            one are given their fully-qualified class name.
    """
    TYPE: str = ""

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if "TYPE" not in cls.__dict__ or not cls.__dict__["TYPE"]:
            cls.TYPE = f"{cls.__module__}.{cls.__qualname__}"

    def type(self) -> str:
        """Returns the unique name of this variable kind."""
        return self.TYPE

    @abc.abstractmethod
    def uuid(self) -> UUID:
        """
        Returns the identity key of this variable.

        Variables with the same defining metadata return equal UUIDs, in any
        process; the engine treats equal UUIDs as the same variable.
        """
        pass

    @abc.abstractmethod
    def size(self) -> int:
        """
        Returns the number of stored scalars.

        Usually the number of degrees of freedom, except for over-parameterized
        kinds: a quaternion orientation has 3 degrees of freedom but size 4.
        """
        pass

    @abc.abstractmethod
    def data(self) -> torch.Tensor:
        """Read access to the storage: a 1-D contiguous view of size() elements. Do not write through it."""
        pass

    @abc.abstractmethod
    def mutable_data(self) -> torch.Tensor:
        """Read-write access to the storage: a 1-D contiguous view of size() elements."""
        pass

    @abc.abstractmethod
    def print(self, stream: Optional[TextIO] = None) -> None:
        """
        Prints a human-readable description of the variable.

        Args:
            stream (Optional[TextIO], optional): The stream to write to. Defaults to stdout.
        """
        pass

    def clone(self) -> "Variable":
        """
        Returns a deep copy of the variable.

        The copy has the same concrete class, UUID and values, and owns separate
        storage: writes to one never show up in the other.
        """
        return copy.deepcopy(self)

    def local_parameterization(self) -> Optional[LocalParameterization]:
        """
        Creates the manifold update strategy for this kind, or None if ordinary
        additive updates are valid on every dimension.

        The caller owns the returned object. The result depends only on the kind.
        """
        return None

    def __str__(self):
        stream = io.StringIO()
        self.print(stream)
        return stream.getvalue()

    def __repr__(self):
        return f"{self.__class__.__name__}(uuid={self.uuid()})"


def default_stream(stream: Optional[TextIO]) -> TextIO:
    """Resolves the print() stream argument, falling back to stdout."""
    return stream if stream is not None else sys.stdout
