import unittest

import numpy as np

from densecore.domain import ShapeMismatchError
from densecore.infrastructure.tensor import (
    Tensor,
    add_bias,
    argmax,
    argmax_rows,
    column_sum,
    matmul,
    one_hot,
    transpose,
)


def tensor_from_np(arr, dtype=np.float32) -> Tensor:
    return Tensor.from_numpy(np.asarray(arr, dtype=dtype), dtype=dtype)


class TestTensorStorage(unittest.TestCase):
    def test_new_tensor_is_zero_filled(self):
        t = Tensor(2, 3)
        self.assertEqual(t.shape, (2, 3))
        self.assertEqual(t.size, 6)
        self.assertEqual(len(t), 6)
        self.assertEqual(t.dtype, np.float32)
        np.testing.assert_array_equal(t.to_numpy(), np.zeros((2, 3)))

    def test_vector_is_single_row(self):
        v = Tensor.vector(4)
        self.assertEqual(v.shape, (1, 4))

    def test_from_numpy_promotes_1d_to_row_and_copies(self):
        a = np.array([1.0, 2.0, 3.0], dtype=np.float32)
        t = Tensor.from_numpy(a)
        a[0] = 100.0
        self.assertEqual(t.shape, (1, 3))
        self.assertEqual(t[0], 1.0)

    def test_from_numpy_rejects_3d(self):
        with self.assertRaises(ValueError):
            Tensor.from_numpy(np.zeros((2, 2, 2)))

    def test_negative_dimensions_raise(self):
        with self.assertRaises(ValueError):
            Tensor(-1, 2)

    def test_element_access(self):
        t = Tensor(2, 2)
        t[1, 0] = 5.0
        t[1] = 7.0
        self.assertEqual(t[1, 0], 5.0)
        self.assertEqual(t[0, 1], 7.0)

    def test_flat_is_row_major_and_writes_through(self):
        t = tensor_from_np([[1, 2], [3, 4]])
        np.testing.assert_array_equal(t.flat, [1, 2, 3, 4])
        t.flat[3] = 9.0
        self.assertEqual(t[1, 1], 9.0)

    def test_copy_from_numpy_accepts_same_size(self):
        t = Tensor(2, 2)
        t.copy_from_numpy(np.arange(4, dtype=np.float32))
        np.testing.assert_array_equal(t.to_numpy(), [[0, 1], [2, 3]])
        with self.assertRaises(ShapeMismatchError):
            t.copy_from_numpy(np.zeros(5))

    def test_clone_is_independent(self):
        t = tensor_from_np([[1, 2]])
        c = t.clone()
        c.fill(0.0)
        np.testing.assert_array_equal(t.to_numpy(), [[1, 2]])

    def test_copy_from_requires_same_shape(self):
        with self.assertRaises(ShapeMismatchError):
            Tensor(2, 2).copy_from(Tensor(1, 4))


class TestAlgebra(unittest.TestCase):
    def test_matmul_two_by_two(self):
        a = tensor_from_np([[1, 2], [3, 4]])
        b = tensor_from_np([[5, 6], [7, 8]])
        np.testing.assert_array_equal(matmul(a, b).to_numpy(), [[19, 22], [43, 50]])

    def test_transpose_of_product(self):
        a = tensor_from_np([[1, 2], [3, 4]])
        b = tensor_from_np([[5, 6], [7, 8]])
        ab_t = transpose(matmul(a, b))
        np.testing.assert_array_equal(ab_t.to_numpy(), [[19, 43], [22, 50]])
        np.testing.assert_array_equal(
            matmul(transpose(b), transpose(a)).to_numpy(), ab_t.to_numpy()
        )

    def test_matmul_shape_mismatch(self):
        with self.assertRaises(ShapeMismatchError) as cm:
            matmul(Tensor(2, 3), Tensor(2, 3))
        self.assertEqual(cm.exception.op, "matmul")

    def test_transpose(self):
        a = tensor_from_np([[1, 2, 3], [4, 5, 6]])
        t = transpose(a)
        self.assertEqual(t.shape, (3, 2))
        np.testing.assert_array_equal(t.to_numpy(), [[1, 4], [2, 5], [3, 6]])
        np.testing.assert_array_equal(transpose(t).to_numpy(), a.to_numpy())

    def test_add_bias_in_place_every_row(self):
        a = tensor_from_np([[1, 2], [3, 4]])
        buf = a.data
        self.assertIsNone(add_bias(a, tensor_from_np([[10, 20]])))
        np.testing.assert_array_equal(a.to_numpy(), [[11, 22], [13, 24]])
        add_bias(a, [1, 1])
        np.testing.assert_array_equal(a.to_numpy(), [[12, 23], [14, 25]])
        self.assertIs(a.data, buf)

    def test_add_bias_length_mismatch(self):
        with self.assertRaises(ShapeMismatchError):
            add_bias(Tensor(2, 2), [1.0, 2.0, 3.0])

    def test_argmax_uses_row_zero_and_first_tie(self):
        a = tensor_from_np([[0.1, 0.7, 0.7], [9.0, 0.0, 0.0]])
        self.assertEqual(argmax(a), 1)
        self.assertEqual(argmax_rows(a), [1, 0])

    def test_argmax_empty_raises(self):
        with self.assertRaises(ShapeMismatchError):
            argmax(Tensor(1, 0))

    def test_column_sum(self):
        s = column_sum(tensor_from_np([[1, 2], [3, 4], [5, 6]]))
        self.assertEqual(s.shape, (1, 2))
        np.testing.assert_array_equal(s.to_numpy(), [[9, 12]])

    def test_one_hot(self):
        oh = one_hot([2, 0], 3)
        np.testing.assert_array_equal(oh.to_numpy(), [[0, 0, 1], [1, 0, 0]])
        with self.assertRaises(ShapeMismatchError):
            one_hot([3], 3)

    def test_results_keep_float64(self):
        a = tensor_from_np([[1, 2]], dtype=np.float64)
        b = tensor_from_np([[1], [1]], dtype=np.float64)
        self.assertEqual(matmul(a, b).dtype, np.float64)


if __name__ == "__main__":
    unittest.main()
