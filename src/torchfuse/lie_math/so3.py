import torch

# All quaternions are stored as [w, x, y, z] in the last dimension.

_SMALL_ANGLE_SQ = 1e-12


def quaternion_multiply(q1: torch.Tensor, q2: torch.Tensor) -> torch.Tensor:
    """
    Hamilton product q1 * q2.
    Args:
        q1 (torch.Tensor): Quaternion(s) of shape (..., 4).
        q2 (torch.Tensor): Quaternion(s) of shape (..., 4). Broadcasts against q1.
    Returns:
        torch.Tensor: Product quaternion(s) of shape (..., 4).
    """
    w1, x1, y1, z1 = q1.unbind(dim=-1)
    w2, x2, y2, z2 = q2.unbind(dim=-1)
    return torch.stack([
        w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
        w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
        w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
        w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
    ], dim=-1)


def quaternion_conjugate(q: torch.Tensor) -> torch.Tensor:
    """Conjugate [w, -x, -y, -z]; the inverse rotation for unit quaternions."""
    return torch.cat((q[..., :1], -q[..., 1:]), dim=-1)


def quaternion_normalize(q: torch.Tensor) -> torch.Tensor:
    """Scales quaternion(s) of shape (..., 4) to unit norm."""
    return q / torch.linalg.norm(q, dim=-1, keepdim=True)


def quaternion_exp(omega: torch.Tensor) -> torch.Tensor:
    """
    SO(3) exponential map from a rotation vector to a unit quaternion.
    Args:
        omega (torch.Tensor): Rotation vector(s) (axis * angle) of shape (..., 3).
    Returns:
        torch.Tensor: Unit quaternion(s) of shape (..., 4).
    """
    theta_sq = (omega * omega).sum(dim=-1, keepdim=True)  # (..., 1)
    small = theta_sq < _SMALL_ANGLE_SQ
    # Keep the unused branch finite so autograd through torch.where stays NaN-free at zero.
    theta = torch.sqrt(torch.where(small, torch.ones_like(theta_sq), theta_sq))
    half_theta = 0.5 * theta

    # Taylor expansion near zero: cos(t/2) ~ 1 - t^2/8, sin(t/2)/t ~ 1/2 - t^2/48
    w = torch.where(small, 1.0 - theta_sq / 8.0, torch.cos(half_theta))
    scale = torch.where(small, 0.5 - theta_sq / 48.0, torch.sin(half_theta) / theta)
    return torch.cat((w, scale * omega), dim=-1)


def quaternion_log(q: torch.Tensor) -> torch.Tensor:
    """
    SO(3) logarithm map from a quaternion to a rotation vector.

    The quaternion is normalized first, and q and -q map to the same (shortest)
    rotation vector, with angle in [0, pi].
    Args:
        q (torch.Tensor): Quaternion(s) of shape (..., 4).
    Returns:
        torch.Tensor: Rotation vector(s) of shape (..., 3).
    """
    q = quaternion_normalize(q)
    q = torch.where(q[..., :1] < 0, -q, q)
    w = q[..., :1]  # (..., 1)
    v = q[..., 1:]  # (..., 3)

    v_sq = (v * v).sum(dim=-1, keepdim=True)
    small = v_sq < _SMALL_ANGLE_SQ
    v_norm = torch.sqrt(torch.where(small, torch.ones_like(v_sq), v_sq))
    w_safe = torch.where(small, w, torch.ones_like(w))

    # theta = 2 atan2(|v|, w); near zero, 2 atan(|v|/w)/|v| ~ (2/w) (1 - |v|^2 / (3 w^2))
    scale = torch.where(small,
                        (2.0 / w_safe) * (1.0 - v_sq / (3.0 * w_safe * w_safe)),
                        2.0 * torch.atan2(v_norm, w) / v_norm)
    return scale * v


def quaternion_to_rotation_matrix(
    q: torch.Tensor,
) -> torch.Tensor:
    """
    Convert quaternion(s) [w, x, y, z] to rotation matrix(ices).

    Args:
        q: Tensor of shape (..., 4) representing quaternion(s) [w, x, y, z].
    Returns:
        Tensor of shape (..., 3, 3) corresponding rotation matrix(ices).
    """
    w, x, y, z = quaternion_normalize(q).unbind(dim=-1)
    ww, xx, yy, zz = w * w, x * x, y * y, z * z
    wx, wy, wz = w * x, w * y, w * z
    xy, xz, yz = x * y, x * z, y * z
    return torch.stack(
        [ww + xx - yy - zz, 2 * (xy - wz), 2 * (xz + wy),
         2 * (xy + wz), ww - xx + yy - zz, 2 * (yz - wx),
         2 * (xz - wy), 2 * (yz + wx), ww - xx - yy + zz],
        dim=-1,
    ).reshape(*q.shape[:-1], 3, 3)
