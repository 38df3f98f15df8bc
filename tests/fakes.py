from __future__ import annotations

import time
from typing import List, Optional


class FakeConnection:
    def __init__(self, backend: "FakeBackend"):
        self.backend = backend
        self.submitted: List[str] = []
        self._log = list(backend.log_lines)
        self._listing = list(backend.listing_lines)
        self.flush_calls = {"log": 0, "listing": 0}

    def submit(self, code: str) -> None:
        self.backend.events.append("submit")
        if self.backend.submit_delay:
            time.sleep(self.backend.submit_delay)
        if self.backend.submit_error is not None:
            raise self.backend.submit_error
        self.submitted.append(code)

    def flush_log(self, max_lines: int) -> List[str]:
        return self._flush("log", self._log, max_lines)

    def flush_listing(self, max_lines: int) -> List[str]:
        return self._flush("listing", self._listing, max_lines)

    def _flush(self, kind: str, buf: List[str], max_lines: int) -> List[str]:
        self.flush_calls[kind] += 1
        self.backend.events.append(f"flush_{kind}")
        fail_at = self.backend.drain_fail_at.get(kind)
        if fail_at is not None and self.flush_calls[kind] == fail_at:
            raise IOError(f"{kind} buffer unavailable")
        chunk = buf[:max_lines]
        del buf[:max_lines]
        return chunk

    def close(self) -> None:
        self.backend.events.append("close")
        self.backend.closes += 1


class FakeBackend:
    """In-memory SessionBackend with scripted failures."""

    def __init__(
        self,
        log_lines: Optional[List[str]] = None,
        listing_lines: Optional[List[str]] = None,
        connect_error: Optional[Exception] = None,
        submit_error: Optional[Exception] = None,
        drain_fail_at: Optional[dict] = None,
        submit_delay: float = 0,
    ):
        self.log_lines = log_lines or []
        self.listing_lines = listing_lines or []
        self.connect_error = connect_error
        self.submit_error = submit_error
        self.drain_fail_at = drain_fail_at or {}
        self.submit_delay = submit_delay
        self.opens = 0
        self.closes = 0
        self.events: List[str] = []
        self.connections: List[FakeConnection] = []
        self.last_credentials = None

    def open(self, host, port, username, secret):
        self.opens += 1
        self.events.append("open")
        self.last_credentials = (host, port, username, secret)
        if self.connect_error is not None:
            raise self.connect_error
        conn = FakeConnection(self)
        self.connections.append(conn)
        return conn


class RecordingReporter:
    def __init__(self) -> None:
        self.reports: List[float] = []

    def report(self, elapsed_seconds: float) -> None:
        self.reports.append(elapsed_seconds)
