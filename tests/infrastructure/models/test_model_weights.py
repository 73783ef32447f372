import os
import tempfile
import unittest

import numpy as np

from densecore.domain import WeightIOError
from densecore.infrastructure import DenseLayer, Model


def _model(seed=None) -> Model:
    rng = np.random.default_rng(seed) if seed is not None else None
    init = "xavier_uniform" if seed is not None else "zeros"
    return Model(
        [
            DenseLayer(4, 3, "relu", initializer=init, rng=rng),
            DenseLayer(3, 2, "softmax", initializer=init, rng=rng),
        ]
    )


class TestModelWeightFiles(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = self._tmp.name

    def tearDown(self):
        self._tmp.cleanup()

    def test_save_writes_numbered_files(self):
        _model(seed=0).save_weights(self.root)
        self.assertEqual(
            sorted(os.listdir(self.root)),
            ["dense1_W.bin", "dense1_b.bin", "dense2_W.bin", "dense2_b.bin"],
        )
        self.assertEqual(os.path.getsize(os.path.join(self.root, "dense1_W.bin")), 4 * 3 * 4)

    def test_load_restores_saved_weights(self):
        src = _model(seed=0)
        for layer in src.layers:
            layer.bias.copy_from_numpy(np.full(layer.b.shape, 0.25, dtype=np.float32))
        src.save_weights(self.root)

        dst = _model()
        dst.load_weights(self.root)

        for a, b in zip(src.parameters(), dst.parameters()):
            np.testing.assert_array_equal(a.to_numpy(), b.to_numpy())

        x = np.array([[0.1, -0.2, 0.3, 0.4]], dtype=np.float32)
        np.testing.assert_array_equal(src.predict(x).to_numpy(), dst.predict(x).to_numpy())

    def test_load_missing_directory_raises(self):
        with self.assertRaises(WeightIOError):
            _model().load_weights(os.path.join(self.root, "missing"))

    def test_load_mismatched_architecture_raises(self):
        _model(seed=0).save_weights(self.root)
        other = Model([DenseLayer(5, 3), DenseLayer(3, 2)])
        with self.assertRaises(WeightIOError):
            other.load_weights(self.root)


if __name__ == "__main__":
    unittest.main()
