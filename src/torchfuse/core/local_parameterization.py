import torch
import abc


class LocalParameterization(abc.ABC):
    """
    Abstract base class for manifold update strategies.

    A local parameterization maps an increment in a minimal (tangent) space of
    dimension `local_size` onto the stored representation of dimension
    `global_size`. It lets an engine optimize over the true degrees of freedom
    of an over-parameterized variable (e.g. 3 for a unit quaternion stored as 4
    values) and keeps updated values on the constraint manifold.

    Instances are stateless: they encode only the update rule and never hold a
    reference to a variable's storage. An engine may therefore own and cache
    one instance per variable kind for as long as it likes.
    """

    @property
    @abc.abstractmethod
    def global_size(self) -> int:
        """int: Number of stored (ambient) scalars."""
        pass

    @property
    @abc.abstractmethod
    def local_size(self) -> int:
        """int: Number of free parameters (tangent dimension), <= global_size."""
        pass

    @abc.abstractmethod
    def _plus(self, x: torch.Tensor, delta: torch.Tensor) -> torch.Tensor:
        pass

    @abc.abstractmethod
    def _minus(self, x1: torch.Tensor, x2: torch.Tensor) -> torch.Tensor:
        pass

    def plus(self, x: torch.Tensor, delta: torch.Tensor) -> torch.Tensor:
        """
        Applies a tangent space increment to a stored value.

        Args:
            x (torch.Tensor): Current stored value, shape (global_size,).
            delta (torch.Tensor): Increment, shape (local_size,). Not modified.

        Returns:
            torch.Tensor: New stored value, shape (global_size,), on the manifold.
        """
        self._check_shape(x, self.global_size, "x")
        self._check_shape(delta, self.local_size, "delta")
        result = self._plus(x, delta)
        self._check_shape(result, self.global_size, "plus result")
        return result

    def minus(self, x1: torch.Tensor, x2: torch.Tensor) -> torch.Tensor:
        """
        Computes the increment that takes x1 to x2, i.e. plus(x1, minus(x1, x2)) == x2.

        Args:
            x1 (torch.Tensor): Starting value, shape (global_size,).
            x2 (torch.Tensor): Ending value, shape (global_size,).

        Returns:
            torch.Tensor: Increment, shape (local_size,).
        """
        self._check_shape(x1, self.global_size, "x1")
        self._check_shape(x2, self.global_size, "x2")
        result = self._minus(x1, x2)
        self._check_shape(result, self.local_size, "minus result")
        return result

    def compute_jacobian(self, x: torch.Tensor) -> torch.Tensor:
        """
        Jacobian of plus(x, delta) with respect to delta, evaluated at delta = 0.

        Returns:
            torch.Tensor: Shape (global_size, local_size).
        """
        self._check_shape(x, self.global_size, "x")
        x = x.detach()
        zero_delta = torch.zeros(self.local_size, device=x.device, dtype=x.dtype)
        jac = torch.autograd.functional.jacobian(lambda d: self._plus(x, d), zero_delta,
                                                 strict=False, vectorize=False, create_graph=False)
        return jac.reshape(self.global_size, self.local_size)

    def compute_minus_jacobian(self, x: torch.Tensor) -> torch.Tensor:
        """
        Jacobian of minus(x, y) with respect to y, evaluated at y = x.

        Returns:
            torch.Tensor: Shape (local_size, global_size).
        """
        self._check_shape(x, self.global_size, "x")
        x = x.detach()
        jac = torch.autograd.functional.jacobian(lambda y: self._minus(x, y), x.clone(),
                                                 strict=False, vectorize=False, create_graph=False)
        return jac.reshape(self.local_size, self.global_size)

    @staticmethod
    def _check_shape(value: torch.Tensor, expected: int, label: str):
        if not isinstance(value, torch.Tensor):
            raise ValueError(f"{label} must be a torch.Tensor, got {type(value).__name__}")
        if value.ndim != 1 or value.shape[0] != expected:
            raise ValueError(f"{label} must have shape ({expected},), got {tuple(value.shape)}")

    def __repr__(self):
        return f"{self.__class__.__name__}(global_size={self.global_size}, local_size={self.local_size})"


class EuclideanParameterization(LocalParameterization):
    """
    Ordinary additive update on every dimension.

    Engines use this for variables whose local_parameterization() returns None.

    Args:
        size (int): Number of stored scalars.
    """
    def __init__(self, size: int):
        assert size >= 1, f"EuclideanParameterization size must be >= 1, got {size}"
        self._size = size

    @property
    def global_size(self) -> int:
        return self._size

    @property
    def local_size(self) -> int:
        return self._size

    def _plus(self, x: torch.Tensor, delta: torch.Tensor) -> torch.Tensor:
        return x + delta

    def _minus(self, x1: torch.Tensor, x2: torch.Tensor) -> torch.Tensor:
        return x2 - x1

    def compute_jacobian(self, x: torch.Tensor) -> torch.Tensor:
        self._check_shape(x, self.global_size, "x")
        return torch.eye(self._size, device=x.device, dtype=x.dtype)

    def compute_minus_jacobian(self, x: torch.Tensor) -> torch.Tensor:
        self._check_shape(x, self.global_size, "x")
        return torch.eye(self._size, device=x.device, dtype=x.dtype)
