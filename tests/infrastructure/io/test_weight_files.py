import os
import tempfile
import unittest

import numpy as np

from densecore.domain import WeightIOError
from densecore.infrastructure import Tensor
from densecore.infrastructure.io import (
    load_input_txt,
    load_label_txt,
    load_weights_bin,
    save_weights_bin,
)


class TestBinaryWeights(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = self._tmp.name

    def tearDown(self):
        self._tmp.cleanup()

    def test_round_trip_is_bit_exact(self):
        rng = np.random.default_rng(0)
        src = Tensor.from_numpy(rng.standard_normal((3, 5)).astype(np.float32))
        src[0, 0] = np.float32(1e-38)
        src[2, 4] = -0.0

        path = os.path.join(self.root, "nested", "dense1_W.bin")
        save_weights_bin(path, src)
        self.assertEqual(os.path.getsize(path), 15 * 4)

        dst = Tensor(3, 5)
        self.assertIs(load_weights_bin(path, dst), dst)
        self.assertEqual(dst.to_numpy().tobytes(), src.to_numpy().tobytes())

    def test_file_is_raw_little_endian_float32(self):
        path = os.path.join(self.root, "b.bin")
        save_weights_bin(path, Tensor.from_numpy([[1.0, -2.5]]))
        with open(path, "rb") as f:
            raw = f.read()
        self.assertEqual(raw, np.array([1.0, -2.5], dtype="<f4").tobytes())

    def test_missing_file_raises(self):
        with self.assertRaises(WeightIOError) as cm:
            load_weights_bin(os.path.join(self.root, "nope.bin"), Tensor(1, 2))
        self.assertTrue(cm.exception.path.endswith("nope.bin"))

    def test_wrong_length_raises(self):
        path = os.path.join(self.root, "short.bin")
        np.zeros(3, dtype="<f4").tofile(path)
        dst = Tensor(2, 2)
        with self.assertRaises(WeightIOError):
            load_weights_bin(path, dst)
        np.testing.assert_array_equal(dst.to_numpy(), np.zeros((2, 2)))

    def test_weight_io_error_is_an_os_error(self):
        with self.assertRaises(OSError):
            load_weights_bin(os.path.join(self.root, "nope.bin"), Tensor(1, 1))


class TestTextInputs(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = self._tmp.name

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, name: str, text: str) -> str:
        path = os.path.join(self.root, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def test_load_input(self):
        path = self._write("x.txt", "0.5 1.5\n-2 3e-1 99\n")
        x = load_input_txt(path, 4)
        self.assertEqual(x.shape, (1, 4))
        np.testing.assert_allclose(x.to_numpy(), [[0.5, 1.5, -2.0, 0.3]], rtol=1e-6)

    def test_load_input_too_short(self):
        path = self._write("x.txt", "1 2 3")
        with self.assertRaises(WeightIOError):
            load_input_txt(path, 4)

    def test_load_input_malformed(self):
        path = self._write("x.txt", "1 two 3")
        with self.assertRaises(WeightIOError):
            load_input_txt(path, 3)

    def test_load_input_invalid_utf8(self):
        path = os.path.join(self.root, "x.txt")
        with open(path, "wb") as f:
            f.write(b"1.0 \xff\xfe 2.0")
        with self.assertRaises(WeightIOError):
            load_input_txt(path, 2)

    def test_load_label(self):
        self.assertEqual(load_label_txt(self._write("y.txt", " 7\n")), 7)

    def test_load_label_errors(self):
        with self.assertRaises(WeightIOError):
            load_label_txt(self._write("empty.txt", ""))
        with self.assertRaises(WeightIOError):
            load_label_txt(self._write("bad.txt", "seven"))
        with self.assertRaises(WeightIOError):
            load_label_txt(os.path.join(self.root, "missing.txt"))

    def test_load_label_invalid_utf8(self):
        path = os.path.join(self.root, "y.txt")
        with open(path, "wb") as f:
            f.write(b"\xff3")
        with self.assertRaises(WeightIOError):
            load_label_txt(path)


if __name__ == "__main__":
    unittest.main()
