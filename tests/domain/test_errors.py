import unittest

from densecore.domain import (
    NotCompiledError,
    PreconditionViolationError,
    ShapeMismatchError,
    StaleCacheError,
    WeightIOError,
)


class TestErrorHierarchy(unittest.TestCase):
    def test_precondition_errors_share_base(self):
        for cls in (ShapeMismatchError, StaleCacheError, NotCompiledError):
            self.assertTrue(issubclass(cls, PreconditionViolationError))
            self.assertTrue(issubclass(cls, RuntimeError))

    def test_weight_io_error_is_os_error_not_precondition(self):
        self.assertTrue(issubclass(WeightIOError, OSError))
        self.assertFalse(issubclass(WeightIOError, PreconditionViolationError))

    def test_shape_mismatch_carries_op(self):
        e = ShapeMismatchError("matmul", "A(2, 3) @ B(2, 2)")
        self.assertEqual(e.op, "matmul")
        self.assertIn("matmul", str(e))
        self.assertIn("A(2, 3)", str(e))

    def test_stale_cache_carries_component(self):
        e = StaleCacheError("Activation[relu]", "called before any forward pass")
        self.assertEqual(e.component, "Activation[relu]")
        self.assertIn("backward", str(e))

    def test_weight_io_error_path(self):
        e = WeightIOError("cannot open", path="weights/dense1_W.bin")
        self.assertEqual(e.path, "weights/dense1_W.bin")
        self.assertIsNone(WeightIOError("x").path)


if __name__ == "__main__":
    unittest.main()
