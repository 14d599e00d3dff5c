# matrix_rain/feed.py
from __future__ import annotations

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, List, Optional

import requests

from .errors import FeedError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedPayload:
    """One commit from the feed: who pushed it and a slice of its code."""

    user: str
    code: str

    @classmethod
    def from_record(cls, record: Any) -> Optional["FeedPayload"]:
        if not isinstance(record, dict):
            return None
        user, code = record.get("user"), record.get("code")
        if not isinstance(user, str) or not isinstance(code, str):
            return None
        return cls(user=user, code=code)


class FeedClient:
    """
    HTTP client for the commit feed.

    The endpoint takes a single ``fetchSize`` query parameter and answers with
    a JSON array of ``{"user": ..., "code": ...}`` records.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_sync(self, size: int) -> List[FeedPayload]:
        """Blocking fetch of up to ``size`` payloads."""
        params = {"fetchSize": size, "_": int(time.time() * 1000)}
        try:
            resp = self.session.get(
                self.url,
                params=params,
                headers={"Cache-Control": "no-cache"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as exc:
            raise FeedError(f"Feed request failed: {exc}") from exc
        except ValueError as exc:
            raise FeedError(f"Feed returned invalid JSON: {exc}") from exc

        if not isinstance(data, list):
            raise FeedError(f"Feed returned {type(data).__name__}, expected a list")

        payloads = []
        for record in data:
            payload = FeedPayload.from_record(record)
            if payload is None:
                log.debug("skipping malformed feed record: %r", record)
                continue
            payloads.append(payload)
        return payloads

    async def fetch(self, size: int) -> List[FeedPayload]:
        """
        Fetch on a daemon thread so the render loop keeps ticking. The thread
        is not joined: quitting mid-request does not wait for ``timeout``.
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()

        def _deliver(result: Optional[List[FeedPayload]], exc: Optional[BaseException]) -> None:
            if future.done():
                return
            if exc is not None:
                future.set_exception(exc)
            else:
                future.set_result(result)

        def _run() -> None:
            result, exc = None, None
            try:
                result = self.fetch_sync(size)
            except Exception as e:
                exc = e
            try:
                loop.call_soon_threadsafe(_deliver, result, exc)
            except RuntimeError:
                # The loop closed while the request was in flight
                log.debug("dropping feed response after shutdown")

        threading.Thread(target=_run, name="feed-fetch", daemon=True).start()
        return await future

    def close(self) -> None:
        self.session.close()
