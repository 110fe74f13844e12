from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from datalayer.config import HANDLER_ERRORS_ISOLATE, HANDLER_ERRORS_PROPAGATE
from datalayer.contracts import Event, Subscriber
from datalayer.observability import Observability, null_observability


class InvalidSubscriberError(TypeError):
    """Raised when a subscriber does not expose a callable handle_event."""


def ensure_subscriber(subscriber: object) -> None:
    if not callable(getattr(subscriber, "handle_event", None)):
        raise InvalidSubscriberError(
            f"subscriber {type(subscriber).__name__} has no handle_event method"
        )


@dataclass
class EventQueue:
    """Broadcast primitive that keeps every event it has ever delivered.

    History is append-only and doubles as the replay source for late
    subscribers. Subscribers are never removed.
    """

    _history: list[Event]
    _subscribers: list[Subscriber]

    def __init__(
        self,
        *,
        clock: Callable[[], int] | None = None,
        handler_errors: str = HANDLER_ERRORS_PROPAGATE,
        observability: Observability | None = None,
    ) -> None:
        if handler_errors not in {HANDLER_ERRORS_PROPAGATE, HANDLER_ERRORS_ISOLATE}:
            raise ValueError(f"unknown handler_errors policy: {handler_errors}")
        self._history = []
        self._subscribers = []
        self._clock = clock or _now_ms
        self._handler_errors = handler_errors
        self._observability = observability or null_observability()

    @property
    def history(self) -> tuple[Event, ...]:
        return tuple(self._history)

    @property
    def subscribers(self) -> tuple[Subscriber, ...]:
        return tuple(self._subscribers)

    def __len__(self) -> int:
        return len(self._history)

    def subscribe(self, subscriber: Subscriber, *, replay_history: bool = False) -> int:
        """Add ``subscriber`` and return the number of replayed events.

        The replay walks the live history by index, so events broadcast from
        inside a replayed handler are delivered in order by the same loop
        rather than live.
        """
        ensure_subscriber(subscriber)
        replayed = 0
        if replay_history:
            while replayed < len(self._history):
                self._deliver(subscriber, self._history[replayed])
                replayed += 1
            self._observability.log_replay(subscriber=subscriber, replayed=replayed)
            self._observability.record_replay_metrics(replayed=replayed)
        self._subscribers.append(subscriber)
        return replayed

    def broadcast_event(self, name: str, payload: object = None) -> Event:
        event = Event(name=name, payload=payload, timestamp_ms=self._clock())
        self._history.append(event)
        # subscribers added by a handler only see this event through replay
        subscribers = tuple(self._subscribers)
        self._observability.log_broadcast(
            event,
            subscriber_count=len(subscribers),
            history_length=len(self._history),
        )
        self._observability.record_broadcast_metrics(event)
        for subscriber in subscribers:
            self._deliver(subscriber, event)
        return event

    def _deliver(self, subscriber: Subscriber, event: Event) -> None:
        if self._handler_errors == HANDLER_ERRORS_PROPAGATE:
            subscriber.handle_event(event.name, event.payload, event.timestamp_ms)
            return
        try:
            subscriber.handle_event(event.name, event.payload, event.timestamp_ms)
        except Exception as exc:
            self._observability.log_failure(
                domain="delivery",
                error_kind=type(exc).__name__,
                error_detail=str(exc),
                event_name=event.name,
            )
            self._observability.record_handler_failure(event_name=event.name)


def _now_ms() -> int:
    return int(time.time() * 1000)
