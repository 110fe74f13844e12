from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from datalayer.contracts import Event
from datalayer.lifecycle import DatalayerState, Lifecycle

if TYPE_CHECKING:
    from datalayer.queue import EventQueue
    from datalayer.registry import PluginRegistry


class StructuredLogger(Protocol):
    def log(self, level: int, message: str, fields: Mapping[str, object]) -> None: ...


class MetricsRecorder(Protocol):
    def increment(
        self, name: str, value: int = 1, tags: Mapping[str, str] | None = None
    ) -> None: ...

    def observe(
        self, name: str, value: float, tags: Mapping[str, str] | None = None
    ) -> None: ...

    def gauge(
        self, name: str, value: float, tags: Mapping[str, str] | None = None
    ) -> None: ...


@dataclass(frozen=True)
class StdlibLogger:
    logger: logging.Logger

    def log(self, level: int, message: str, fields: Mapping[str, object]) -> None:
        self.logger.log(level, message, extra={"fields": dict(fields)})


@dataclass(frozen=True)
class NullLogger:
    def log(self, level: int, message: str, fields: Mapping[str, object]) -> None:
        return None


@dataclass(frozen=True)
class NullMetrics:
    def increment(
        self, name: str, value: int = 1, tags: Mapping[str, str] | None = None
    ) -> None:
        return None

    def observe(
        self, name: str, value: float, tags: Mapping[str, str] | None = None
    ) -> None:
        return None

    def gauge(
        self, name: str, value: float, tags: Mapping[str, str] | None = None
    ) -> None:
        return None


@dataclass(frozen=True)
class HealthStatus:
    ready: bool
    state: str
    plugin_count: int
    history_length: int
    subscriber_count: int


@dataclass(frozen=True)
class Observability:
    logger: StructuredLogger
    metrics: MetricsRecorder

    def log_initialized(self, *, plugin_count: int, candidate_count: int, test_mode: bool) -> None:
        self.logger.log(
            logging.INFO,
            "datalayer.initialized",
            {
                "plugin_count": plugin_count,
                "candidate_count": candidate_count,
                "test_mode": test_mode,
            },
        )

    def log_already_initialized(self, *, state: DatalayerState) -> None:
        self.logger.log(
            logging.WARNING,
            "datalayer.already_initialized",
            {"state": state.value},
        )

    def log_plugin_admitted(self, *, plugin_id: str, replayed: int, global_override: bool) -> None:
        self.logger.log(
            logging.DEBUG,
            "datalayer.plugin.admitted",
            {
                "plugin_id": plugin_id,
                "replayed": replayed,
                "global_override": global_override,
            },
        )
        self.metrics.increment("datalayer.plugin.admitted", tags={"plugin_id": plugin_id})

    def log_plugin_skipped(self, *, plugin_id: str) -> None:
        self.logger.log(logging.DEBUG, "datalayer.plugin.skipped", {"plugin_id": plugin_id})

    def log_invalid_rule(self, *, rule: object) -> None:
        self.logger.log(
            logging.WARNING,
            "datalayer.rule.invalid",
            {"rule_type": type(rule).__name__},
        )

    def log_broadcast(self, event: Event, *, subscriber_count: int, history_length: int) -> None:
        self.logger.log(
            logging.DEBUG,
            "datalayer.broadcast",
            {
                "event_name": event.name,
                "timestamp_ms": event.timestamp_ms,
                "subscriber_count": subscriber_count,
                "history_length": history_length,
            },
        )

    def log_replay(self, *, subscriber: object, replayed: int) -> None:
        self.logger.log(
            logging.DEBUG,
            "datalayer.replay",
            {"subscriber": type(subscriber).__name__, "replayed": replayed},
        )

    def log_failure(
        self,
        *,
        domain: str,
        error_kind: str,
        error_detail: str,
        event_name: str | None = None,
    ) -> None:
        fields: dict[str, object] = {
            "failure_domain": domain,
            "error_kind": error_kind,
            "error_detail": error_detail,
        }
        if event_name is not None:
            fields["event_name"] = event_name
        self.logger.log(logging.WARNING, "datalayer.failure", fields)

    def record_broadcast_metrics(self, event: Event) -> None:
        self.metrics.increment("datalayer.broadcast.count", tags={"event_name": event.name})

    def record_replay_metrics(self, *, replayed: int) -> None:
        self.metrics.observe("datalayer.replay.events", float(replayed))

    def record_handler_failure(self, *, event_name: str) -> None:
        self.metrics.increment("datalayer.handler.failures", tags={"event_name": event_name})


def null_observability() -> Observability:
    return Observability(logger=NullLogger(), metrics=NullMetrics())


def default_observability() -> Observability:
    return Observability(
        logger=StdlibLogger(logging.getLogger("datalayer")),
        metrics=NullMetrics(),
    )


def compute_health(
    lifecycle: Lifecycle, registry: "PluginRegistry", queue: "EventQueue"
) -> HealthStatus:
    return HealthStatus(
        ready=lifecycle.state == DatalayerState.READY,
        state=str(lifecycle.state.value),
        plugin_count=len(registry),
        history_length=len(queue),
        subscriber_count=len(queue.subscribers),
    )
