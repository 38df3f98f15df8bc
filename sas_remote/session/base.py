from __future__ import annotations
from typing import List, Protocol

from sas_remote.core.models import Secret


class BackendConnection(Protocol):
    """
    One live session on the execution host, as exposed by a vendor backend.

    No error mapping, no option handling: RemoteSessionClient does that.
    """

    def submit(self, code: str) -> None:
        """Run code, blocking until the remote execution finishes."""
        ...

    def flush_log(self, max_lines: int) -> List[str]:
        """Return up to max_lines new log lines; [] once the log is exhausted."""
        ...

    def flush_listing(self, max_lines: int) -> List[str]:
        """Return up to max_lines new listing lines; [] once the listing is exhausted."""
        ...

    def close(self) -> None: ...


class SessionBackend(Protocol):
    def open(self, host: str, port: int, username: str, secret: Secret) -> BackendConnection: ...
