from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class NotInitializedError(RuntimeError):
    """Raised when an accessor that needs a ready datalayer is called too early."""


class DatalayerState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


@dataclass
class Lifecycle:
    state: DatalayerState = DatalayerState.UNINITIALIZED

    def begin(self) -> None:
        if self.state != DatalayerState.UNINITIALIZED:
            raise RuntimeError(f"cannot initialize from {self.state.value}")
        self.state = DatalayerState.INITIALIZING

    def mark_ready(self) -> None:
        if self.state != DatalayerState.INITIALIZING:
            raise RuntimeError(f"cannot become ready from {self.state.value}")
        self.state = DatalayerState.READY

    def abort(self) -> None:
        if self.state == DatalayerState.INITIALIZING:
            self.state = DatalayerState.UNINITIALIZED

    @property
    def is_ready(self) -> bool:
        return self.state == DatalayerState.READY

    @property
    def is_started(self) -> bool:
        return self.state != DatalayerState.UNINITIALIZED

    def require_ready(self, operation: str) -> None:
        if self.state != DatalayerState.READY:
            raise NotInitializedError(
                f".{operation} called before .initialize (always wait for when_ready())"
            )
