import unittest

import numpy as np

from densecore.domain import ShapeMismatchError, StaleCacheError
from densecore.infrastructure import DenseLayer, Tensor


def tensor_from_np(arr, dtype=np.float64) -> Tensor:
    return Tensor.from_numpy(np.asarray(arr, dtype=dtype), dtype=dtype)


def make_layer(activation="tanh", seed=0) -> DenseLayer:
    rng = np.random.default_rng(seed)
    layer = DenseLayer(3, 2, activation, dtype=np.float64, name="fc")
    layer.weight.copy_from_numpy(rng.normal(size=(3, 2)))
    layer.bias.copy_from_numpy(rng.normal(size=(1, 2)))
    return layer


def objective(layer: DenseLayer, x: np.ndarray, w: np.ndarray) -> float:
    return float(np.sum(layer.forward(tensor_from_np(x)).to_numpy() * w))


def finite_diff(fn, arr: np.ndarray, eps: float = 1e-6) -> np.ndarray:
    """Central differences of fn() with respect to `arr`, mutated in place."""
    grad = np.zeros_like(arr)
    for idx in np.ndindex(*arr.shape):
        old = arr[idx]
        arr[idx] = old + eps
        fp = fn()
        arr[idx] = old - eps
        fm = fn()
        arr[idx] = old
        grad[idx] = (fp - fm) / (2.0 * eps)
    return grad


class TestDenseForward(unittest.TestCase):
    def test_forward_matches_numpy(self):
        layer = make_layer("linear")
        x = np.array([[1.0, -2.0, 0.5], [0.0, 1.0, 1.0]])
        y = layer.forward(tensor_from_np(x)).to_numpy()
        expected = x @ layer.W.to_numpy() + layer.b.to_numpy()
        np.testing.assert_allclose(y, expected, rtol=1e-12)

    def test_defaults(self):
        layer = DenseLayer(4, 2)
        self.assertEqual(layer.W.shape, (4, 2))
        self.assertEqual(layer.b.shape, (1, 2))
        np.testing.assert_array_equal(layer.W.to_numpy(), np.zeros((4, 2)))
        self.assertIsNone(layer.grad_W)
        self.assertEqual([p.name for p in layer.parameters()], ["dense.W", "dense.b"])

    def test_wrong_input_width_raises(self):
        with self.assertRaises(ShapeMismatchError):
            make_layer().forward(tensor_from_np([[1.0, 2.0]]))

    def test_invalid_construction(self):
        with self.assertRaises(ValueError):
            DenseLayer(0, 2)
        with self.assertRaises(ValueError):
            DenseLayer(2, 2, initializer="orthogonal")
        with self.assertRaises(ValueError):
            DenseLayer(2, 2, "cosine")


class TestDenseBackward(unittest.TestCase):
    def test_gradients_match_finite_differences(self):
        for activation in ("tanh", "sigmoid", "linear", "elu"):
            with self.subTest(activation=activation):
                layer = make_layer(activation)
                x = np.array([[0.3, -1.2, 0.8], [1.1, 0.4, -0.6]])
                w = np.array([[0.5, -1.0], [2.0, 0.25]])

                layer.forward(tensor_from_np(x))
                dx = layer.backward(tensor_from_np(w)).to_numpy()
                dW = layer.grad_W.to_numpy()
                db = layer.grad_b.to_numpy()

                W = layer.W.data
                b = layer.b.data
                np.testing.assert_allclose(
                    dW, finite_diff(lambda: objective(layer, x, w), W), rtol=1e-5, atol=1e-8
                )
                np.testing.assert_allclose(
                    db, finite_diff(lambda: objective(layer, x, w), b), rtol=1e-5, atol=1e-8
                )
                np.testing.assert_allclose(
                    dx, finite_diff(lambda: objective(layer, x, w), x), rtol=1e-5, atol=1e-8
                )

    def test_gradients_overwrite(self):
        layer = make_layer()
        x = tensor_from_np([[0.1, 0.2, 0.3]])
        g = tensor_from_np([[1.0, 1.0]])
        layer.forward(x)
        layer.backward(g)
        first = layer.grad_W.to_numpy()
        layer.backward(g)
        np.testing.assert_allclose(layer.grad_W.to_numpy(), first)

    def test_input_is_cached_by_value(self):
        layer = make_layer("linear")
        x = tensor_from_np([[1.0, 2.0, 3.0]])
        layer.forward(x)
        x.fill(0.0)
        layer.backward(tensor_from_np([[1.0, 1.0]]))
        np.testing.assert_allclose(layer.grad_W.to_numpy(), [[1.0, 1.0], [2.0, 2.0], [3.0, 3.0]])

    def test_backward_before_forward_raises(self):
        with self.assertRaises(StaleCacheError):
            make_layer().backward(tensor_from_np([[1.0, 1.0]]))

    def test_backward_shape_mismatch_raises(self):
        layer = make_layer()
        layer.forward(tensor_from_np([[0.1, 0.2, 0.3]]))
        with self.assertRaises(ShapeMismatchError):
            layer.backward(tensor_from_np([[1.0, 1.0, 1.0]]))
        with self.assertRaises(ShapeMismatchError):
            layer.backward(tensor_from_np([[1.0, 1.0], [1.0, 1.0]]))

    def test_zero_grad(self):
        layer = make_layer()
        layer.forward(tensor_from_np([[0.1, 0.2, 0.3]]))
        layer.backward(tensor_from_np([[1.0, 1.0]]))
        layer.zero_grad()
        self.assertIsNone(layer.grad_W)
        self.assertIsNone(layer.grad_b)


class TestDenseConfig(unittest.TestCase):
    def test_config_round_trip(self):
        layer = DenseLayer(5, 3, "leaky_relu", alpha=0.2, initializer="xavier_uniform", name="h1")
        clone = DenseLayer.from_config(layer.get_config())
        self.assertEqual(clone.get_config(), layer.get_config())
        self.assertEqual(clone.W.shape, (5, 3))


if __name__ == "__main__":
    unittest.main()
