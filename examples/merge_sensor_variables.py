import torch
import tyro # For CLI argument parsing

from torchfuse.core.stamp import Stamp
from torchfuse.core.problem import Problem
from torchfuse.core.options import ProblemOptions
from torchfuse.variables.point import Point2D
from torchfuse.variables.orientation import Orientation3D
from torchfuse.utils.misc import DEVICE, DEFAULT_DTYPE


def main(num_stamps: int = 3, step: float = 0.1, verbose: bool = True):
    """
    Registers variables reported by two independent sensors and applies one update step.

    Both sensors create their own Point2D / Orientation3D instances for the same
    timestamps; the engine adapter merges them on UUID, so each physical unknown
    ends up as a single parameter block.

    Args:
        num_stamps: Number of timestamps reported by each sensor.
        step: Magnitude of the tangent space increment applied to every block.
        verbose: Whether to print adapter diagnostics.
    """
    print(f"TorchFuse Variable Merge Example - Using {DEVICE} with {DEFAULT_DTYPE}")

    problem = Problem(ProblemOptions(verbose=verbose))

    # 1. Two sensors report variables for the same timestamps
    for sensor in ("odometry", "imu"):
        for sec in range(num_stamps):
            stamp = Stamp(sec)
            added_point = problem.add_variable(Point2D(stamp, initial_value=[float(sec), 0.0]))
            added_orientation = problem.add_variable(Orientation3D(stamp))
            print(f"{sensor} @ {stamp}: point added={added_point}, orientation added={added_orientation}")

    print(f"Blocks: {len(problem)}, ambient size: {problem.ambient_size}, tangent size: {problem.tangent_size}")

    # 2. Keep a copy of the current state before updating
    snapshot = problem.snapshot()

    # 3. Apply one increment through the writable views
    delta = torch.full((problem.tangent_size,), step, device=DEVICE, dtype=DEFAULT_DTYPE)
    problem.apply_increment(delta)

    for variable in problem.variables():
        before = snapshot[variable.uuid()].data().tolist()
        print(f"{variable.type()} @ {variable.stamp}: {before} -> {variable.data().tolist()}")

    # 4. Quaternions stay on the unit sphere
    for variable in problem.variables():
        if isinstance(variable, Orientation3D):
            print(f"|q| at {variable.stamp}: {torch.linalg.norm(variable.data()).item():.12f}")


if __name__ == "__main__":
    # Use tyro to parse CLI arguments for main function
    tyro.cli(main)
