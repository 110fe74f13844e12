from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, Union

EVENT_INITIALIZE = "initialize"

GlobalData = dict[str, Any]
Predicate = Callable[[GlobalData], object]


@dataclass(frozen=True)
class Event:
    name: str
    payload: object
    timestamp_ms: int


class Subscriber(Protocol):
    def handle_event(self, name: str, payload: object, timestamp_ms: int) -> None: ...


class Plugin(Subscriber, Protocol):
    @classmethod
    def get_id(cls) -> str: ...


class PluginFactory(Protocol):
    def get_id(self) -> str: ...

    def __call__(self, datalayer: Any, data: GlobalData, config: object) -> Plugin: ...


@dataclass(frozen=True)
class StaticRule:
    enabled: bool


@dataclass(frozen=True)
class PredicateRule:
    predicate: Predicate


@dataclass(frozen=True)
class GatedRule:
    """Evaluates ``rule`` only when the test gate allows it.

    ``test=True`` restricts the rule to test mode and a falsy ``test``
    evaluates it regardless of mode. Any other truthy value never evaluates.
    """

    rule: Predicate
    test: object = False


LoadRule = Union[StaticRule, PredicateRule, GatedRule]


@dataclass(frozen=True)
class PluginSpec:
    type: PluginFactory
    config: object | None = None
    rule: object = True

    @classmethod
    def from_mapping(cls, payload: Mapping[str, object]) -> "PluginSpec":
        if "type" not in payload:
            raise ValueError("plugin entries must define a type")
        rule = payload.get("rule")
        return cls(
            type=payload["type"],  # type: ignore[arg-type]
            config=payload.get("config"),
            rule=True if rule is None else rule,
        )
