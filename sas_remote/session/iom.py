"""
IOM backend: SAS workspace servers reached over the Integrated Object Model.

The wire protocol is handled by saspy's IOM access method (a Java bridge), so this
module only maps saspy's session onto the BackendConnection contract.

saspy returns the whole log/listing once submit() completes; they are buffered
here and handed out in bounded line chunks.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Deque, List, Optional

from sas_remote.core.models import Secret

logger = logging.getLogger("sasr.session.iom")


class _LineBuffer:
    """Append-only buffer drained from the front."""

    def __init__(self) -> None:
        self._lines: Deque[str] = deque()

    def extend(self, text: str) -> None:
        if text:
            self._lines.extend(text.splitlines())

    def take(self, max_lines: int) -> List[str]:
        out = []
        while self._lines and len(out) < max_lines:
            out.append(self._lines.popleft())
        return out

    def __len__(self) -> int:
        return len(self._lines)


class IOMConnection:
    def __init__(self, sas_session: Any):
        self._sas = sas_session
        self._log = _LineBuffer()
        self._listing = _LineBuffer()

    def submit(self, code: str) -> None:
        result = self._sas.submit(code, results="TEXT")
        self._log.extend(result.get("LOG", ""))
        self._listing.extend(result.get("LST", ""))
        logger.debug(f"Submission returned {len(self._log)} log lines, {len(self._listing)} listing lines")

    def flush_log(self, max_lines: int) -> List[str]:
        return self._log.take(max_lines)

    def flush_listing(self, max_lines: int) -> List[str]:
        return self._listing.take(max_lines)

    def close(self) -> None:
        self._sas.endsas()


class IOMBackend:
    """Opens saspy IOM sessions against a workspace server."""

    def __init__(self, java_path: str = "java", cfgname: Optional[str] = None):
        """
        Args:
            java_path: Java executable used by saspy's IOM bridge
            cfgname: Optional saspy configuration name (sascfg_personal.py) to start from
        """
        self.java_path = java_path
        self.cfgname = cfgname

    def open(self, host: str, port: int, username: str, secret: Secret) -> IOMConnection:
        import saspy  # heavy import (py4j bridge), only needed when actually connecting

        kwargs = {
            "java": self.java_path,
            "iomhost": host,
            "iomport": port,
            "omruser": username,
            "omrpw": secret.reveal(),
            "results": "TEXT",
        }
        if self.cfgname:
            kwargs["cfgname"] = self.cfgname

        sas = saspy.SASsession(**kwargs)
        return IOMConnection(sas)
