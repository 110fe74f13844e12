import unittest

from datalayer.lifecycle import DatalayerState, Lifecycle, NotInitializedError


class TestLifecycle(unittest.TestCase):
    def test_transitions_to_ready(self) -> None:
        lifecycle = Lifecycle()
        self.assertFalse(lifecycle.is_started)
        lifecycle.begin()
        self.assertEqual(lifecycle.state, DatalayerState.INITIALIZING)
        lifecycle.mark_ready()
        self.assertTrue(lifecycle.is_ready)

    def test_begin_only_from_uninitialized(self) -> None:
        lifecycle = Lifecycle()
        lifecycle.begin()
        with self.assertRaises(RuntimeError):
            lifecycle.begin()

    def test_ready_requires_initializing(self) -> None:
        with self.assertRaises(RuntimeError):
            Lifecycle().mark_ready()

    def test_abort_returns_to_uninitialized(self) -> None:
        lifecycle = Lifecycle()
        lifecycle.begin()
        lifecycle.abort()
        self.assertEqual(lifecycle.state, DatalayerState.UNINITIALIZED)

    def test_abort_does_not_leave_ready(self) -> None:
        lifecycle = Lifecycle(state=DatalayerState.READY)
        lifecycle.abort()
        self.assertEqual(lifecycle.state, DatalayerState.READY)

    def test_require_ready(self) -> None:
        lifecycle = Lifecycle()
        with self.assertRaises(NotInitializedError):
            lifecycle.require_ready("get_data")
        lifecycle.begin()
        with self.assertRaises(NotInitializedError):
            lifecycle.require_ready("get_data")
        lifecycle.mark_ready()
        lifecycle.require_ready("get_data")


if __name__ == "__main__":
    unittest.main()
