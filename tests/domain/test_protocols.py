import unittest

from densecore.domain import ILayer, IOptimizer, IParameter
from densecore.infrastructure import SGD, RMSProp, Adam, DenseLayer, Parameter


class TestOptimizerProtocol(unittest.TestCase):
    def test_optimizers_conform_to_ioptimizer(self):
        for opt in (SGD(lr=1e-3), RMSProp(lr=1e-3), Adam(lr=1e-3)):
            self.assertIsInstance(opt, IOptimizer)

    def test_plain_object_does_not_conform(self):
        self.assertNotIsInstance(object(), IOptimizer)


class TestParameterProtocol(unittest.TestCase):
    def test_parameter_conforms_to_iparameter(self):
        self.assertIsInstance(Parameter(1, 2), IParameter)


class TestLayerProtocol(unittest.TestCase):
    def test_dense_layer_conforms_to_ilayer(self):
        self.assertIsInstance(DenseLayer(2, 3), ILayer)


if __name__ == "__main__":
    unittest.main()
