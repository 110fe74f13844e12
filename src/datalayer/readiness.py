from __future__ import annotations

import asyncio
from dataclasses import dataclass


@dataclass
class ReadinessLatch:
    """One-shot readiness signal handed out as asyncio futures.

    Each ``when_ready`` call returns a fresh future. Futures created before
    ``resolve`` complete in creation order once it runs; their continuations
    are scheduled by the loop, never run inside ``resolve``. The latch has no
    failure path.
    """

    _resolved: bool
    _waiters: list[asyncio.Future[None]]

    def __init__(self) -> None:
        self._resolved = False
        self._waiters = []

    @property
    def resolved(self) -> bool:
        return self._resolved

    def when_ready(self, loop: asyncio.AbstractEventLoop | None = None) -> asyncio.Future[None]:
        target_loop = loop or asyncio.get_running_loop()
        future: asyncio.Future[None] = target_loop.create_future()
        if self._resolved:
            future.set_result(None)
        else:
            self._waiters.append(future)
        return future

    def resolve(self) -> None:
        if self._resolved:
            return
        self._resolved = True
        waiters, self._waiters = self._waiters, []
        for future in waiters:
            if not future.done():
                future.set_result(None)
