import torch

# --- Configuration ---
DEVICE = torch.device("cuda" if torch.cuda.is_available() else "cpu")
"""The device (CPU or CUDA GPU) on which variable storage is allocated."""

DEFAULT_DTYPE = torch.float64
"""The floating point precision of variable storage. Solvers expect double precision."""
