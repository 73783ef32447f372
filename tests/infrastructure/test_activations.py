import unittest

import numpy as np

from densecore.domain import ActivationType, StaleCacheError
from densecore.infrastructure import Activation, Tensor
from densecore.infrastructure._function import (
    ACTIVATION_FUNCTIONS,
    GELU_COEF,
    SELU_ALPHA,
    SELU_LAMBDA,
)

# Samples kept away from the kinks at 0.
X_SAMPLES = np.array([[-2.5, -1.3, -0.4, 0.3, 0.9, 2.1]], dtype=np.float64)
W_SAMPLES = np.array([[0.7, -1.1, 0.4, 1.5, -0.3, 0.9]], dtype=np.float64)


def tensor_from_np(arr, dtype=np.float64) -> Tensor:
    return Tensor.from_numpy(np.asarray(arr, dtype=dtype), dtype=dtype)


def finite_diff_grad_x(act: Activation, x_np: np.ndarray, w_np: np.ndarray, eps=1e-6):
    """
    Central difference gradient of L(x) = sum(act(x) * w).
    """
    grad = np.zeros_like(x_np)
    for idx in np.ndindex(*x_np.shape):
        xp = x_np.copy()
        xm = x_np.copy()
        xp[idx] += eps
        xm[idx] -= eps
        lp = float(np.sum(act.forward(tensor_from_np(xp)).to_numpy() * w_np))
        lm = float(np.sum(act.forward(tensor_from_np(xm)).to_numpy() * w_np))
        grad[idx] = (lp - lm) / (2.0 * eps)
    return grad


def analytic_grad_x(act: Activation, x_np: np.ndarray, w_np: np.ndarray):
    act.forward(tensor_from_np(x_np))
    return act.backward(tensor_from_np(w_np)).to_numpy()


class TestActivationRegistry(unittest.TestCase):
    def test_every_kind_has_an_implementation(self):
        self.assertEqual(set(ACTIVATION_FUNCTIONS), set(ActivationType))

    def test_unknown_kind_raises(self):
        with self.assertRaises(ValueError):
            Activation("swishy")


class TestActivationForward(unittest.TestCase):
    def test_forward_values(self):
        x = np.array([[-1.0, 0.0, 2.0]])
        cases = {
            "step": [0.0, 0.0, 1.0],
            "linear": [-1.0, 0.0, 2.0],
            "relu": [0.0, 0.0, 2.0],
            "leaky_relu": [-0.01, 0.0, 2.0],
            "prelu": [-0.01, 0.0, 2.0],
            "tanh": np.tanh([-1.0, 0.0, 2.0]),
            "sigmoid": 1.0 / (1.0 + np.exp(-np.array([-1.0, 0.0, 2.0]))),
            "elu": [0.01 * (np.exp(-1.0) - 1.0), 0.0, 2.0],
            "selu": [SELU_LAMBDA * SELU_ALPHA * (np.exp(-1.0) - 1.0), 0.0, SELU_LAMBDA * 2.0],
        }
        for kind, expected in cases.items():
            with self.subTest(kind=kind):
                y = Activation(kind).forward(tensor_from_np(x)).to_numpy()
                np.testing.assert_allclose(y[0], expected, rtol=1e-7, atol=1e-12)

    def test_swish_uses_beta(self):
        x = np.array([[1.5]])
        y = Activation("swish", beta=2.0).forward(tensor_from_np(x)).to_numpy()
        np.testing.assert_allclose(y, 1.5 / (1.0 + np.exp(-3.0)), rtol=1e-7)

    def test_sigmoid_is_stable_for_large_inputs(self):
        x = np.array([[-1000.0, 1000.0]], dtype=np.float32)
        y = Activation("sigmoid").forward(tensor_from_np(x, np.float32)).to_numpy()
        self.assertTrue(np.all(np.isfinite(y)))
        np.testing.assert_allclose(y, [[0.0, 1.0]], atol=1e-6)

    def test_output_keeps_input_dtype(self):
        x = tensor_from_np([[1.0, -1.0]], np.float32)
        for kind in ActivationType:
            with self.subTest(kind=kind):
                self.assertEqual(Activation(kind).forward(x).dtype, np.float32)

    def test_softmax_rows_sum_to_one_with_large_logits(self):
        x = tensor_from_np([[1000.0, 1.0, 0.0], [0.1, 0.2, 0.3]], np.float32)
        y = Activation("softmax").forward(x).to_numpy()
        self.assertTrue(np.all(np.isfinite(y)))
        np.testing.assert_allclose(y.sum(axis=1), [1.0, 1.0], rtol=1e-6)
        np.testing.assert_allclose(y[0], [1.0, 0.0, 0.0], atol=1e-6)


class TestActivationBackward(unittest.TestCase):
    def test_matches_finite_differences(self):
        kinds = [
            "linear",
            "relu",
            "leaky_relu",
            "prelu",
            "sigmoid",
            "tanh",
            "elu",
            "selu",
            "swish",
        ]
        for kind in kinds:
            with self.subTest(kind=kind):
                act = Activation(kind, alpha=0.2, beta=1.3)
                g_num = finite_diff_grad_x(act, X_SAMPLES, W_SAMPLES)
                g_ana = analytic_grad_x(act, X_SAMPLES, W_SAMPLES)
                np.testing.assert_allclose(g_ana, g_num, rtol=1e-4, atol=1e-6)

    def test_step_gradient_is_zero(self):
        g = analytic_grad_x(Activation("step"), X_SAMPLES, W_SAMPLES)
        np.testing.assert_array_equal(g, np.zeros_like(X_SAMPLES))

    def test_gelu_uses_gate_approximation(self):
        act = Activation("gelu")
        g = analytic_grad_x(act, X_SAMPLES, W_SAMPLES)

        u = np.sqrt(2.0 / np.pi) * (X_SAMPLES + GELU_COEF * X_SAMPLES**3)
        expected = W_SAMPLES * 0.5 * (1.0 + np.tanh(u))
        np.testing.assert_allclose(g, expected, rtol=1e-10)

        # The approximation drops the x * sech^2 term; it stays close but
        # not exact.
        g_num = finite_diff_grad_x(act, X_SAMPLES, np.ones_like(X_SAMPLES))
        g_one = analytic_grad_x(act, X_SAMPLES, np.ones_like(X_SAMPLES))
        np.testing.assert_allclose(g_one, g_num, atol=0.3)

    def test_softmax_backward_is_pass_through(self):
        act = Activation("softmax")
        act.forward(tensor_from_np([[0.2, 0.5, 0.3]]))
        grad = tensor_from_np([[0.1, -0.4, 0.3]])
        out = act.backward(grad)
        np.testing.assert_array_equal(out.to_numpy(), grad.to_numpy())

    def test_backward_before_forward_raises(self):
        with self.assertRaises(StaleCacheError):
            Activation("relu").backward(tensor_from_np([[1.0]]))

    def test_backward_shape_mismatch_raises(self):
        act = Activation("tanh")
        act.forward(tensor_from_np([[1.0, 2.0]]))
        with self.assertRaises(StaleCacheError):
            act.backward(tensor_from_np([[1.0, 2.0, 3.0]]))

    def test_cache_is_independent_of_caller_buffers(self):
        act = Activation("relu")
        x = tensor_from_np([[1.0, -1.0]])
        act.forward(x)
        x.fill(-5.0)
        g = act.backward(tensor_from_np([[1.0, 1.0]])).to_numpy()
        np.testing.assert_array_equal(g, [[1.0, 0.0]])


class TestActivationConfig(unittest.TestCase):
    def test_config_round_trip(self):
        act = Activation("leaky-relu", alpha=0.2)
        cfg = act.get_config()
        self.assertEqual(cfg, {"kind": "leaky_relu", "alpha": 0.2, "beta": 1.0})
        clone = Activation.from_config(cfg)
        self.assertIs(clone.kind, ActivationType.LEAKY_RELU)
        self.assertEqual(clone.alpha, 0.2)


if __name__ == "__main__":
    unittest.main()
