from __future__ import annotations

from collections.abc import Callable, MutableMapping
from dataclasses import dataclass
from typing import Protocol

HANDLED_EVENT_ATTRIBUTE = "data-dal-handled-event"

MetadataCallback = Callable[[Exception | None, "MarkupElement | None", object], None]


class MarkupElement(Protocol):
    def has_attribute(self, name: str) -> bool: ...

    def set_attribute(self, name: str, value: str) -> None: ...


class MetadataCollector(Protocol):
    """Scans page markup for ``<prefix>`` metadata.

    Every parsed entry is merged into ``target`` (when given) and reported to
    ``callback`` along with the element it came from.
    """

    def collect_metadata(
        self,
        prefix: str,
        callback: MetadataCallback,
        root: object | None,
        target: MutableMapping[str, object] | None,
    ) -> object: ...


@dataclass(frozen=True)
class NullMetadataCollector:
    def collect_metadata(
        self,
        prefix: str,
        callback: MetadataCallback,
        root: object | None,
        target: MutableMapping[str, object] | None,
    ) -> object:
        return target
