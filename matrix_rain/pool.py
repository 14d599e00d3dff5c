# matrix_rain/pool.py
from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional, Protocol, Set

from .drop import Drop
from .errors import FeedError
from .feed import FeedPayload

log = logging.getLogger(__name__)


class Feed(Protocol):
    async def fetch(self, size: int) -> List[FeedPayload]: ...


class Pool:
    """
    Self-replenishing buffer of drops.

    Once scheduled, the pool tops itself up to ``capacity`` every
    ``poll_interval`` seconds, asking the feed only for the deficit. The first
    time the buffer reaches half of its capacity ``on_ready`` is called; that
    latch never resets.
    """

    def __init__(self, feed: Feed, capacity: int = 200, poll_interval: float = 5.0) -> None:
        self._feed = feed
        self._capacity = capacity
        self._poll_interval = poll_interval
        self._buffer: List[Drop] = []

        self._ready = False
        self._scheduling = False
        self._on_ready: Optional[Callable[[], None]] = None

        self._timer: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def scheduling(self) -> bool:
        return self._scheduling

    def next(self) -> Optional[Drop]:
        """Most recently fetched drop, or None when the buffer is empty."""
        return self._buffer.pop() if self._buffer else None

    def has_next(self) -> bool:
        return bool(self._buffer)

    def set_capacity(self, size: int) -> None:
        self._capacity = size

    def schedule(self, on_ready: Callable[[], None]) -> None:
        """Start replenishing in the background. Must be called on a running loop."""
        if self._scheduling:
            return

        loop = asyncio.get_running_loop()

        log.debug("scheduling pool")
        self._ready = False
        self._on_ready = on_ready
        self._scheduling = True

        self._spawn()
        self._timer = loop.create_task(self._poll())

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        for task in list(self._inflight):
            task.cancel()
        self._inflight.clear()

    async def replenish(self) -> int:
        """One top-up attempt. Returns how many drops were added."""
        fetch_size = self._capacity - len(self._buffer)
        if fetch_size <= 0:
            return 0

        log.debug("fetching: %s", fetch_size)
        try:
            payloads = await self._feed.fetch(fetch_size)
        except FeedError as exc:
            log.info("feed unavailable, retrying on next poll: %s", exc)
            return 0

        self._buffer.extend(Drop(p) for p in payloads)

        if not self._ready and len(self._buffer) >= self._capacity / 2:
            log.info("pool is ready")
            self._ready = True
            if self._on_ready is not None:
                self._on_ready()
        return len(payloads)

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self._poll_interval)
            self._spawn()

    def _spawn(self) -> None:
        # Slow responses may overlap with the next poll; each one appends on its own
        task = asyncio.get_running_loop().create_task(self.replenish())
        self._inflight.add(task)
        task.add_done_callback(self._finished)

    def _finished(self, task: asyncio.Task) -> None:
        self._inflight.discard(task)
        if not task.cancelled() and task.exception() is not None:
            log.error("pool replenishment crashed", exc_info=task.exception())
