from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from datalayer.contracts import GlobalData, Plugin, PluginFactory
from datalayer.lifecycle import Lifecycle
from datalayer.observability import Observability, null_observability
from datalayer.queue import EventQueue, InvalidSubscriberError, ensure_subscriber


@dataclass(frozen=True)
class PluginEntry:
    """A constructed plugin with the id resolved from its factory."""

    plugin_id: str
    plugin: Plugin
    global_override: bool = False


@dataclass
class PluginRegistry:
    _entries: list[PluginEntry]

    def __init__(
        self,
        *,
        lifecycle: Lifecycle,
        queue: EventQueue,
        observability: Observability | None = None,
    ) -> None:
        self._entries = []
        self._lifecycle = lifecycle
        self._queue = queue
        self._observability = observability or null_observability()

    @property
    def plugins(self) -> tuple[Plugin, ...]:
        return tuple(entry.plugin for entry in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def admit(
        self,
        factory: PluginFactory,
        config: object = None,
        *,
        host: Any,
        global_data: GlobalData,
        global_config: Mapping[str, object],
    ) -> Plugin:
        return self.enlist(
            self.stage(
                factory,
                config,
                host=host,
                global_data=global_data,
                global_config=global_config,
            )
        )

    def stage(
        self,
        factory: PluginFactory,
        config: object = None,
        *,
        host: Any,
        global_data: GlobalData,
        global_config: Mapping[str, object],
    ) -> PluginEntry:
        """Construct a plugin without registering or subscribing it.

        A config registered under the plugin id in ``global_config`` wins over
        the per-call ``config``.
        """
        plugin_id = plugin_id_of(factory)
        global_override = plugin_id in global_config
        effective_config = global_config[plugin_id] if global_override else config
        plugin = factory(host, global_data, effective_config)
        ensure_subscriber(plugin)
        return PluginEntry(plugin_id=plugin_id, plugin=plugin, global_override=global_override)

    def enlist(self, entry: PluginEntry) -> Plugin:
        """Catch a staged plugin up on past events, then subscribe and register it."""
        replayed = self._queue.subscribe(entry.plugin, replay_history=True)
        self._entries.append(entry)
        self._observability.log_plugin_admitted(
            plugin_id=entry.plugin_id,
            replayed=replayed,
            global_override=entry.global_override,
        )
        return entry.plugin

    def get_by_id(self, plugin_id: str) -> Plugin | None:
        self._lifecycle.require_ready("get_plugin_by_id")
        for entry in self._entries:
            if entry.plugin_id == plugin_id:
                return entry.plugin
        return None


def plugin_id_of(factory: object) -> str:
    get_id = getattr(factory, "get_id", None)
    if not callable(get_id):
        raise InvalidSubscriberError(
            f"plugin factory {getattr(factory, '__name__', type(factory).__name__)} has no get_id"
        )
    return str(get_id())
