import torch
from collections import OrderedDict
from typing import Dict, Iterator, List, Optional, OrderedDict as OrderedDictType

from .options import ProblemOptions
from .uuid import UUID
from .variable import Variable
from .local_parameterization import LocalParameterization, EuclideanParameterization
from ..utils.misc import DEVICE, DEFAULT_DTYPE


class ParameterBlock:
    """
    One variable as seen by the optimization engine.

    Args:
        variable (Variable): The registered variable. Not owned: the graph keeps
                             ownership, the block only borrows its storage.
        parameterization (LocalParameterization): Update rule for this block, owned by the problem.

    Attributes:
        ambient_offset (int): Start of this block in the packed state vector.
        tangent_offset (int): Start of this block in the packed increment vector.
    """
    def __init__(self, variable: Variable, parameterization: LocalParameterization):
        self.variable = variable
        self.parameterization = parameterization
        self.ambient_offset = 0
        self.tangent_offset = 0

    @property
    def ambient_size(self) -> int:
        return self.parameterization.global_size

    @property
    def tangent_size(self) -> int:
        return self.parameterization.local_size

    def __repr__(self):
        return (f"ParameterBlock({self.variable.type()}, uuid={self.variable.uuid()}, "
                f"ambient=[{self.ambient_offset}:{self.ambient_offset + self.ambient_size}], "
                f"tangent=[{self.tangent_offset}:{self.tangent_offset + self.tangent_size}])")


class Problem:
    """
    Engine-side view of a set of variables.

    Registers variables as parameter blocks keyed by UUID, owns the local
    parameterization of each block, and moves values between the variables'
    storage and the flat state/increment vectors an optimizer works with.
    It does not build residuals or run iterations.

    Variables must stay alive while registered: blocks hold their storage views,
    and clear() or remove_variable() must run before the owner discards a variable.

    Args:
        options (Optional[ProblemOptions], optional): Adapter configuration. Defaults to ProblemOptions().

    Attributes:
        ambient_size (int): Total number of stored scalars over all blocks.
        tangent_size (int): Total number of free parameters over all blocks.
    """
    def __init__(self, options: Optional[ProblemOptions] = None):
        self.options = options if options else ProblemOptions()
        self._blocks: OrderedDictType[UUID, ParameterBlock] = OrderedDict()
        # type() -> parameterization, or None for additive kinds
        self._parameterizations: Dict[str, Optional[LocalParameterization]] = {}
        self.ambient_size: int = 0
        self.tangent_size: int = 0

    def __len__(self) -> int:
        return len(self._blocks)

    def __contains__(self, key: UUID) -> bool:
        return key in self._blocks

    def add_variable(self, variable: Variable) -> bool:
        """
        Registers a variable as a parameter block.

        Args:
            variable (Variable): The variable to register.

        Returns:
            bool: True if the variable was added, False if a variable with the same
                  UUID is already registered (the existing block is kept).

        Raises:
            ValueError: If the variable violates the storage contract, or its
                        parameterization disagrees with its size.
        """
        key = variable.uuid()
        if key in self._blocks:
            if self.options.verbose:
                print(f"Skipping {variable.type()} {key}: already registered.")
            return False

        parameterization = self._parameterization_for(variable)
        if self.options.check_contract:
            self._check_contract(variable, parameterization)

        self._blocks[key] = ParameterBlock(variable, parameterization)
        self._reindex()
        if self.options.verbose:
            print(f"Added {variable.type()} {key}: size {parameterization.global_size}, "
                  f"tangent size {parameterization.local_size}.")
        return True

    def remove_variable(self, key: UUID) -> bool:
        """Unregisters a variable, discarding its block. Returns False if it was not registered."""
        if key not in self._blocks:
            return False
        del self._blocks[key]
        self._reindex()
        if self.options.verbose:
            print(f"Removed variable {key}.")
        return True

    def has_variable(self, key: UUID) -> bool:
        return key in self._blocks

    def get_variable(self, key: UUID) -> Variable:
        """Returns the registered variable with this UUID. Raises KeyError if absent."""
        return self._blocks[key].variable

    def parameter_block(self, key: UUID) -> ParameterBlock:
        return self._blocks[key]

    def parameterization(self, key: UUID) -> LocalParameterization:
        """Returns the update rule used for a registered variable (Euclidean for additive kinds)."""
        return self._blocks[key].parameterization

    def variables(self) -> Iterator[Variable]:
        """Iterates over the registered variables in insertion order."""
        for block in self._blocks.values():
            yield block.variable

    def clear(self):
        """Discards all blocks and every owned parameterization."""
        self._blocks.clear()
        self._parameterizations.clear()
        self.ambient_size = 0
        self.tangent_size = 0

    def pack_state(self) -> torch.Tensor:
        """
        Concatenates the values of all registered variables.

        Returns:
            torch.Tensor: A new tensor of shape (ambient_size,). Independent of the variables' storage.
        """
        if not self._blocks:
            return torch.empty(0, device=DEVICE, dtype=DEFAULT_DTYPE)
        return torch.cat([block.variable.data().detach().reshape(-1) for block in self._blocks.values()]).clone()

    def unpack_state(self, x: torch.Tensor):
        """
        Writes a packed state vector back into the variables, in place.

        Args:
            x (torch.Tensor): State vector of shape (ambient_size,), in block order.
        """
        self._check_vector(x, self.ambient_size, "state")
        with torch.no_grad():
            for block in self._blocks.values():
                start = block.ambient_offset
                block.variable.mutable_data().copy_(x[start : start + block.ambient_size])

    def apply_increment(self, delta: torch.Tensor):
        """
        Applies a tangent space increment to every registered variable, in place.

        Each block's slice of `delta` is composed with the current value through
        the block's parameterization, and the result is written through the
        variable's mutable_data() view. `delta` itself is not modified.

        Args:
            delta (torch.Tensor): Increment of shape (tangent_size,), in block order.

        Raises:
            ValueError: If `delta` has the wrong shape, or a parameterization returns a
                        value of the wrong size. No variable is modified in that case.
        """
        self._check_vector(delta, self.tangent_size, "increment")
        with torch.no_grad():
            # All blocks are updated only once every plus() has succeeded.
            new_values: List[torch.Tensor] = []
            for block in self._blocks.values():
                start = block.tangent_offset
                delta_block = delta[start : start + block.tangent_size]
                current = block.variable.mutable_data().detach().clone()
                new_values.append(block.parameterization.plus(current, delta_block))
            for block, new_value in zip(self._blocks.values(), new_values):
                block.variable.mutable_data().copy_(new_value)
        if self.options.verbose:
            step_norm = torch.linalg.norm(delta).item() if delta.numel() > 0 else 0.0
            print(f"Applied increment to {len(self._blocks)} blocks, step norm {step_norm:.6e}.")

    def local_coordinates(self, x_from: torch.Tensor, x_to: torch.Tensor) -> torch.Tensor:
        """
        Computes the tangent space increment taking one packed state to another.

        Args:
            x_from (torch.Tensor): Packed state of shape (ambient_size,).
            x_to (torch.Tensor): Packed state of shape (ambient_size,).

        Returns:
            torch.Tensor: Increment of shape (tangent_size,) such that applying it at
                          x_from yields x_to.
        """
        self._check_vector(x_from, self.ambient_size, "state")
        self._check_vector(x_to, self.ambient_size, "state")
        if not self._blocks:
            return torch.empty(0, device=DEVICE, dtype=DEFAULT_DTYPE)
        pieces: List[torch.Tensor] = []
        for block in self._blocks.values():
            start = block.ambient_offset
            stop = start + block.ambient_size
            pieces.append(block.parameterization.minus(x_from[start:stop], x_to[start:stop]))
        return torch.cat(pieces)

    def get_values(self) -> Dict[UUID, torch.Tensor]:
        """Returns a copy of every registered variable's values, keyed by UUID."""
        return {key: block.variable.data().detach().clone() for key, block in self._blocks.items()}

    def snapshot(self) -> Dict[UUID, Variable]:
        """
        Deep-copies every registered variable.

        The clones share no storage with the live variables, so the snapshot can
        be modified (or the live problem optimized further) independently.
        """
        return {key: block.variable.clone() for key, block in self._blocks.items()}

    def _parameterization_for(self, variable: Variable) -> LocalParameterization:
        kind = variable.type()
        if self.options.cache_parameterizations and kind in self._parameterizations:
            parameterization = self._parameterizations[kind]
        else:
            parameterization = variable.local_parameterization()
            if self.options.cache_parameterizations:
                self._parameterizations[kind] = parameterization
        if parameterization is None:
            return EuclideanParameterization(variable.size())
        return parameterization

    def _reindex(self):
        ambient_offset = 0
        tangent_offset = 0
        for block in self._blocks.values():
            block.ambient_offset = ambient_offset
            block.tangent_offset = tangent_offset
            ambient_offset += block.ambient_size
            tangent_offset += block.tangent_size
        self.ambient_size = ambient_offset
        self.tangent_size = tangent_offset

    @staticmethod
    def _check_contract(variable: Variable, parameterization: LocalParameterization):
        name = f"{variable.type()} {variable.uuid()}"
        size = variable.size()
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            raise ValueError(f"{name}: size() must be a positive int, got {size!r}")

        read_view = variable.data()
        write_view = variable.mutable_data()
        for label, view in (("data()", read_view), ("mutable_data()", write_view)):
            if not isinstance(view, torch.Tensor):
                raise ValueError(f"{name}: {label} must return a torch.Tensor, got {type(view).__name__}")
            if view.ndim != 1 or view.numel() != size:
                raise ValueError(f"{name}: {label} has shape {tuple(view.shape)}, expected ({size},)")
            if not view.is_contiguous():
                raise ValueError(f"{name}: {label} is not contiguous")
        if read_view.data_ptr() != write_view.data_ptr():
            raise ValueError(f"{name}: data() and mutable_data() must view the same storage")

        if parameterization.global_size != size:
            raise ValueError(f"{name}: parameterization ambient size {parameterization.global_size} "
                             f"does not match size() {size}")
        if not 1 <= parameterization.local_size <= parameterization.global_size:
            raise ValueError(f"{name}: parameterization tangent size {parameterization.local_size} "
                             f"must be in [1, {parameterization.global_size}]")

    @staticmethod
    def _check_vector(value: torch.Tensor, expected: int, label: str):
        if value.ndim != 1 or value.shape[0] != expected:
            raise ValueError(f"{label} vector must have shape ({expected},), got {tuple(value.shape)}")
