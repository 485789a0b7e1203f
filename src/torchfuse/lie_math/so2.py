import torch
import math
from typing import Union

TWO_PI = 2.0 * math.pi


def wrap_angle(angle: Union[torch.Tensor, float]) -> Union[torch.Tensor, float]:
    """
    Wraps angle(s) into the interval [-pi, pi).

    Args:
        angle (Union[torch.Tensor, float]): Angle(s) in radians, any shape.
    Returns:
        Union[torch.Tensor, float]: Wrapped angle(s), same type and shape as the input.
    """
    if isinstance(angle, torch.Tensor):
        return torch.remainder(angle + math.pi, TWO_PI) - math.pi
    return (angle + math.pi) % TWO_PI - math.pi
