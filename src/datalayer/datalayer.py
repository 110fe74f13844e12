from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping, Sequence

from datalayer.config import DatalayerSettings, validate_settings
from datalayer.contracts import (
    EVENT_INITIALIZE,
    Event,
    GlobalData,
    Plugin,
    PluginFactory,
    PluginSpec,
)
from datalayer.lifecycle import Lifecycle
from datalayer.markup import (
    HANDLED_EVENT_ATTRIBUTE,
    MarkupElement,
    MetadataCollector,
    NullMetadataCollector,
)
from datalayer.observability import (
    HealthStatus,
    Observability,
    compute_health,
    default_observability,
)
from datalayer.queue import EventQueue
from datalayer.readiness import ReadinessLatch
from datalayer.registry import PluginEntry, PluginRegistry, plugin_id_of
from datalayer.rules import evaluate_rule
from datalayer.testmode import CookieStore, InMemoryCookieStore, resolve_test_mode
from datalayer.validation import validate_global_data


class Datalayer:
    """Aggregates page data, admits plugins and broadcasts events to them.

    Events broadcast at any point, including before ``initialize``, are kept
    in the queue history and replayed to every plugin admitted later. The
    test-mode flag is resolved once, at construction.
    """

    def __init__(
        self,
        *,
        cookies: CookieStore | None = None,
        query_string: str = "",
        document: object | None = None,
        metadata_collector: MetadataCollector | None = None,
        settings: DatalayerSettings | None = None,
        observability: Observability | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._settings = settings or DatalayerSettings()
        validate_settings(self._settings)
        self._observability = observability or default_observability()
        self._document = document
        self._collector = metadata_collector or NullMetadataCollector()
        self._global_data: GlobalData = {}
        self._global_config: Mapping[str, object] = {}
        self._lifecycle = Lifecycle()
        self._readiness = ReadinessLatch()
        self._queue = EventQueue(
            clock=clock,
            handler_errors=self._settings.delivery.handler_errors,
            observability=self._observability,
        )
        self._registry = PluginRegistry(
            lifecycle=self._lifecycle,
            queue=self._queue,
            observability=self._observability,
        )
        self._test_mode_active = resolve_test_mode(
            cookies if cookies is not None else InMemoryCookieStore(),
            query_string,
            settings=self._settings.test_mode,
        )

    @property
    def settings(self) -> DatalayerSettings:
        return self._settings

    @property
    def queue(self) -> EventQueue:
        return self._queue

    @property
    def plugins(self) -> tuple[Plugin, ...]:
        return self._registry.plugins

    def when_ready(self, loop: asyncio.AbstractEventLoop | None = None) -> asyncio.Future[None]:
        return self._readiness.when_ready(loop)

    def is_ready(self) -> bool:
        return self._lifecycle.is_ready

    def in_test_mode(self) -> bool:
        return self._test_mode_active is True

    def health(self) -> HealthStatus:
        return compute_health(self._lifecycle, self._registry, self._queue)

    def validate_rule(self, rule: object) -> object:
        return evaluate_rule(
            rule,
            self._global_data,
            self._test_mode_active,
            observability=self._observability,
        )

    def get_data(self) -> GlobalData:
        self._lifecycle.require_ready("get_data")
        return self._global_data

    def get_plugin_by_id(self, plugin_id: str) -> Plugin | None:
        return self._registry.get_by_id(plugin_id)

    def broadcast(self, name: str, data: object = None) -> Event:
        return self._queue.broadcast_event(name, data)

    def add_plugin(self, factory: PluginFactory, config: object = None) -> Plugin:
        return self._registry.admit(
            factory,
            config,
            host=self,
            global_data=self._global_data,
            global_config=self._global_config,
        )

    def scan_for_data_markup(
        self, root: object | None = None, *, target: GlobalData | None = None
    ) -> object:
        return self._collector.collect_metadata(
            f"{self._settings.meta_prefix}data",
            _ignore_metadata,
            root if root is not None else self._document,
            target if target is not None else self._global_data,
        )

    def scan_for_event_markup(self, root: object | None = None) -> object:
        def on_event(
            error: Exception | None, element: MarkupElement | None, payload: object
        ) -> None:
            if error is not None:
                self._observability.log_failure(
                    domain="markup",
                    error_kind=type(error).__name__,
                    error_detail=str(error),
                )
                return
            if element is None or not isinstance(payload, Mapping):
                return
            if element.has_attribute(HANDLED_EVENT_ATTRIBUTE):
                return
            element.set_attribute(HANDLED_EVENT_ATTRIBUTE, "1")
            self.broadcast(str(payload.get("name")), payload.get("data"))

        return self._collector.collect_metadata(
            f"{self._settings.meta_prefix}event",
            on_event,
            root if root is not None else self._document,
            None,
        )

    def initialize(
        self,
        *,
        data: GlobalData | None = None,
        config: Mapping[str, object] | None = None,
        plugins: Sequence[PluginSpec | Mapping[str, object]] | None = None,
    ) -> bool:
        if self._lifecycle.is_started:
            self._observability.log_already_initialized(state=self._lifecycle.state)
            return False

        self._lifecycle.begin()
        previous_data = dict(self._global_data)
        previous_config = self._global_config
        candidates: list[PluginSpec] = []
        try:
            candidates = [_as_plugin_spec(item) for item in plugins or ()]
            collected: GlobalData = data if data is not None else {}
            self.scan_for_data_markup(self._document, target=collected)
            validate_global_data(collected)
            self._global_data.update(collected)
            self._global_config = config or {}
            staged = self._stage_candidates(candidates)
        except Exception:
            self._global_data.clear()
            self._global_data.update(previous_data)
            self._global_config = previous_config
            self._lifecycle.abort()
            raise

        # committed from here on; a raising handler reaches the caller only
        # after the state is READY and every waiter is released
        try:
            try:
                for entry in staged:
                    self._registry.enlist(entry)
            finally:
                self._lifecycle.mark_ready()
                self._observability.log_initialized(
                    plugin_count=len(self._registry),
                    candidate_count=len(candidates),
                    test_mode=self._test_mode_active,
                )
            self.broadcast(EVENT_INITIALIZE, self._global_data)
            self.scan_for_event_markup(self._document)
        finally:
            self._readiness.resolve()
        return True

    def _stage_candidates(self, candidates: Sequence[PluginSpec]) -> list[PluginEntry]:
        staged: list[PluginEntry] = []
        for candidate in candidates:
            if not evaluate_rule(
                candidate.rule,
                self._global_data,
                self._test_mode_active,
                observability=self._observability,
            ):
                self._observability.log_plugin_skipped(plugin_id=plugin_id_of(candidate.type))
                continue
            staged.append(
                self._registry.stage(
                    candidate.type,
                    candidate.config,
                    host=self,
                    global_data=self._global_data,
                    global_config=self._global_config,
                )
            )
        return staged


def _as_plugin_spec(item: PluginSpec | Mapping[str, object]) -> PluginSpec:
    if isinstance(item, PluginSpec):
        return item
    if isinstance(item, Mapping):
        return PluginSpec.from_mapping(item)
    raise ValueError(f"unsupported plugin entry: {type(item).__name__}")


def _ignore_metadata(
    error: Exception | None, element: MarkupElement | None, payload: object
) -> None:
    return None
