import unittest

from datalayer.lifecycle import DatalayerState, Lifecycle, NotInitializedError
from datalayer.queue import EventQueue, InvalidSubscriberError
from datalayer.registry import PluginRegistry


class MockPlugin:
    def __init__(self, host, data, config) -> None:
        self.host = host
        self.data = data
        self.config = config
        self.events = []

    @staticmethod
    def get_id() -> str:
        return "test/mockPlugin"

    def handle_event(self, name, payload, timestamp_ms) -> None:
        self.events.append((name, payload))


class OtherPlugin(MockPlugin):
    @staticmethod
    def get_id() -> str:
        return "test/otherPlugin"


class SilentPlugin:
    def __init__(self, host, data, config) -> None:
        pass

    @staticmethod
    def get_id() -> str:
        return "test/silent"


def _registry(state: DatalayerState = DatalayerState.READY) -> tuple[PluginRegistry, EventQueue]:
    queue = EventQueue()
    return PluginRegistry(lifecycle=Lifecycle(state=state), queue=queue), queue


class TestPluginRegistry(unittest.TestCase):
    def test_admit_passes_host_live_data_and_config(self) -> None:
        registry, _ = _registry()
        host = object()
        data = {"page": {}}

        plugin = registry.admit(MockPlugin, {"a": 1}, host=host, global_data=data, global_config={})
        data["late"] = True

        self.assertIs(plugin.host, host)
        self.assertIs(plugin.data, data)
        self.assertTrue(plugin.data["late"])
        self.assertEqual(plugin.config, {"a": 1})

    def test_global_config_overrides_local_config(self) -> None:
        registry, _ = _registry()
        plugin = registry.admit(
            MockPlugin,
            {"a": 1},
            host=None,
            global_data={},
            global_config={"test/mockPlugin": {"a": 2}},
        )
        self.assertEqual(plugin.config, {"a": 2})

    def test_admission_catches_up_on_history(self) -> None:
        registry, queue = _registry()
        queue.broadcast_event("first", 1)
        queue.broadcast_event("second", 2)

        plugin = registry.admit(MockPlugin, None, host=None, global_data={}, global_config={})
        queue.broadcast_event("third", 3)

        self.assertEqual(plugin.events, [("first", 1), ("second", 2), ("third", 3)])
        self.assertIn(plugin, queue.subscribers)

    def test_admission_rejects_plugin_without_handle_event(self) -> None:
        registry, queue = _registry()
        with self.assertRaises(InvalidSubscriberError):
            registry.admit(SilentPlugin, None, host=None, global_data={}, global_config={})
        self.assertEqual(len(registry), 0)
        self.assertEqual(queue.subscribers, ())

    def test_admission_rejects_factory_without_get_id(self) -> None:
        registry, _ = _registry()
        with self.assertRaises(InvalidSubscriberError):
            registry.admit(lambda *args: None, None, host=None, global_data={}, global_config={})

    def test_get_by_id_returns_first_match_or_none(self) -> None:
        registry, _ = _registry()
        first = registry.admit(MockPlugin, None, host=None, global_data={}, global_config={})
        registry.admit(MockPlugin, None, host=None, global_data={}, global_config={})
        other = registry.admit(OtherPlugin, None, host=None, global_data={}, global_config={})

        self.assertIs(registry.get_by_id("test/mockPlugin"), first)
        self.assertIs(registry.get_by_id("test/otherPlugin"), other)
        self.assertIsNone(registry.get_by_id("test/missing"))
        self.assertEqual(len(registry.plugins), 3)

    def test_get_by_id_uses_id_from_callable_factory(self) -> None:
        class AnonymousPlugin:
            def handle_event(self, name, payload, timestamp_ms) -> None:
                pass

        class Factory:
            def get_id(self) -> str:
                return "test/fromFactory"

            def __call__(self, host, data, config):
                return AnonymousPlugin()

        registry, _ = _registry()
        plugin = registry.admit(Factory(), None, host=None, global_data={}, global_config={})

        self.assertIs(registry.get_by_id("test/fromFactory"), plugin)
        self.assertIsNone(registry.get_by_id("test/mockPlugin"))

    def test_staged_plugin_is_not_registered_until_enlisted(self) -> None:
        registry, queue = _registry()
        queue.broadcast_event("first", 1)

        entry = registry.stage(MockPlugin, None, host=None, global_data={}, global_config={})

        self.assertEqual(entry.plugin_id, "test/mockPlugin")
        self.assertEqual(entry.plugin.events, [])
        self.assertEqual(len(registry), 0)
        self.assertEqual(queue.subscribers, ())

        self.assertIs(registry.enlist(entry), entry.plugin)
        self.assertEqual(entry.plugin.events, [("first", 1)])
        self.assertIs(registry.get_by_id("test/mockPlugin"), entry.plugin)

    def test_get_by_id_requires_ready(self) -> None:
        registry, _ = _registry(DatalayerState.UNINITIALIZED)
        registry.admit(MockPlugin, None, host=None, global_data={}, global_config={})
        with self.assertRaises(NotInitializedError):
            registry.get_by_id("test/mockPlugin")


if __name__ == "__main__":
    unittest.main()
