# matrix_rain/util/debounce.py
from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional


class Debouncer:
    """
    Delay calls to ``fn`` until ``wait`` seconds have passed without another
    call; only the arguments of the last call are used.
    """

    def __init__(self, fn: Callable[..., Any], wait: float) -> None:
        self.fn = fn
        self.wait = wait
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def __call__(self, *args: Any) -> None:
        self.cancel()
        self._handle = asyncio.get_running_loop().call_later(self.wait, self._fire, args)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, args: tuple) -> None:
        self._handle = None
        self.fn(*args)
