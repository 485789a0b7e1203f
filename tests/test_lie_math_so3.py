import math
import torch
import unittest

from torchfuse.lie_math.so2 import wrap_angle
from torchfuse.lie_math.so3 import quaternion_multiply, quaternion_conjugate, quaternion_normalize, \
    quaternion_exp, quaternion_log, quaternion_to_rotation_matrix
from torchfuse.utils.misc import DEVICE, DEFAULT_DTYPE


class TestSO3Math(unittest.TestCase):
    """Tests for quaternion exponential and logarithmic maps."""

    def setUp(self):
        """Set up test parameters and tensors."""
        self.identity = torch.tensor([1.0, 0.0, 0.0, 0.0], device=DEVICE, dtype=DEFAULT_DTYPE)
        self.omega_zero = torch.zeros(3, device=DEVICE, dtype=DEFAULT_DTYPE)
        self.omega_small = torch.tensor([1e-4, -2e-4, 3e-4], device=DEVICE, dtype=DEFAULT_DTYPE)
        self.omega_large = torch.tensor([0.5, -1.2, 0.8], device=DEVICE, dtype=DEFAULT_DTYPE)
        self.omega_near_pi = torch.tensor([math.pi - 1e-3, 0.0, 0.0], device=DEVICE, dtype=DEFAULT_DTYPE)
        self.omega_batch = torch.stack([self.omega_zero, self.omega_small, self.omega_large, self.omega_near_pi], dim=0)

    def test_exp_log_identity(self):
        """exp(0) == identity and log(identity) == 0."""
        self.assertTrue(torch.allclose(quaternion_exp(self.omega_zero), self.identity, atol=1e-15))
        self.assertTrue(torch.allclose(quaternion_log(self.identity), self.omega_zero, atol=1e-15))

    def test_exp_unit_norm(self):
        q_batch = quaternion_exp(self.omega_batch)
        self.assertEqual(q_batch.shape, (4, 4))
        self.assertTrue(torch.allclose(torch.linalg.norm(q_batch, dim=-1),
                                       torch.ones(4, device=DEVICE, dtype=DEFAULT_DTYPE), atol=1e-12))

    def test_exp_log_inversion(self):
        """log(exp(omega)) == omega for rotation angles below pi."""
        recovered = quaternion_log(quaternion_exp(self.omega_batch))
        self.assertTrue(torch.allclose(recovered, self.omega_batch, atol=1e-9),
                        f"SO3 exp/log inversion failed. Expected {self.omega_batch}, got {recovered}")

    def test_log_sign_invariance(self):
        q = quaternion_exp(self.omega_large)
        self.assertTrue(torch.allclose(quaternion_log(-q), quaternion_log(q), atol=1e-12))

    def test_multiply_and_conjugate(self):
        q = quaternion_exp(self.omega_large)
        self.assertTrue(torch.allclose(quaternion_multiply(q, self.identity), q, atol=1e-15))
        self.assertTrue(torch.allclose(quaternion_multiply(self.identity, q), q, atol=1e-15))
        self.assertTrue(torch.allclose(quaternion_multiply(q, quaternion_conjugate(q)), self.identity, atol=1e-12))

    def test_exp_is_homomorphism_on_one_axis(self):
        a = torch.tensor([0.0, 0.0, 0.3], device=DEVICE, dtype=DEFAULT_DTYPE)
        b = torch.tensor([0.0, 0.0, 0.4], device=DEVICE, dtype=DEFAULT_DTYPE)
        self.assertTrue(torch.allclose(quaternion_multiply(quaternion_exp(a), quaternion_exp(b)),
                                       quaternion_exp(a + b), atol=1e-12))

    def test_normalize(self):
        q = torch.tensor([[2.0, 0.0, 0.0, 0.0], [1.0, 1.0, 1.0, 1.0]], device=DEVICE, dtype=DEFAULT_DTYPE)
        expected = torch.tensor([[1.0, 0.0, 0.0, 0.0], [0.5, 0.5, 0.5, 0.5]], device=DEVICE, dtype=DEFAULT_DTYPE)
        self.assertTrue(torch.allclose(quaternion_normalize(q), expected))

    def test_rotation_matrix(self):
        """A quarter turn about z maps the x axis onto the y axis."""
        q = quaternion_exp(torch.tensor([0.0, 0.0, math.pi / 2.0], device=DEVICE, dtype=DEFAULT_DTYPE))
        R = quaternion_to_rotation_matrix(q)
        self.assertEqual(R.shape, (3, 3))
        x_axis = torch.tensor([1.0, 0.0, 0.0], device=DEVICE, dtype=DEFAULT_DTYPE)
        y_axis = torch.tensor([0.0, 1.0, 0.0], device=DEVICE, dtype=DEFAULT_DTYPE)
        self.assertTrue(torch.allclose(R @ x_axis, y_axis, atol=1e-12))
        self.assertTrue(torch.allclose(R @ R.T, torch.eye(3, device=DEVICE, dtype=DEFAULT_DTYPE), atol=1e-12))

    def test_gradients_finite_at_identity(self):
        omega = self.omega_zero.clone().requires_grad_(True)
        quaternion_log(quaternion_exp(omega)).sum().backward()
        self.assertTrue(torch.isfinite(omega.grad).all())
        self.assertTrue(torch.allclose(omega.grad, torch.ones(3, device=DEVICE, dtype=DEFAULT_DTYPE), atol=1e-9))


class TestSO2Math(unittest.TestCase):
    """Tests for angle wrapping."""

    def test_wrap_angle(self):
        self.assertAlmostEqual(wrap_angle(0.5), 0.5)
        self.assertAlmostEqual(wrap_angle(math.pi), -math.pi)
        self.assertAlmostEqual(wrap_angle(-math.pi), -math.pi)
        self.assertAlmostEqual(wrap_angle(5.0 * math.pi / 2.0), math.pi / 2.0)
        angles = torch.tensor([0.0, 4.0, -4.0], device=DEVICE, dtype=DEFAULT_DTYPE)
        expected = torch.tensor([0.0, 4.0 - 2.0 * math.pi, 2.0 * math.pi - 4.0], device=DEVICE, dtype=DEFAULT_DTYPE)
        self.assertTrue(torch.allclose(wrap_angle(angles), expected))


if __name__ == '__main__':
    unittest.main()
