from __future__ import annotations

import logging
from typing import List, Sequence

from sas_remote.config import DEFAULT_SUBMIT_OPTIONS
from sas_remote.core.models import ConnectionState, Secret
from sas_remote.errors import DrainError, RemoteConnectionError, SubmissionError
from sas_remote.session.base import BackendConnection, SessionBackend

logger = logging.getLogger("sasr.session.client")


class Connection:
    """Handle for one remote session, owned by a single worker thread."""

    def __init__(self, host: str, port: int, username: str, backend_conn: BackendConnection):
        self.host = host
        self.port = port
        self.username = username
        self.state = ConnectionState.CONNECTED
        self._backend_conn = backend_conn

    def __repr__(self) -> str:
        return f"Connection({self.username}@{self.host}:{self.port}, state={self.state.value})"


class RemoteSessionClient:
    """
    Remote Session Client.

    Wraps a vendor backend with the job-level contract:
    - connect: one authenticated session, failures raise RemoteConnectionError
    - submit: prepends the submission-time options, blocks until the program finishes
    - drain_log / drain_listing: bounded chunks of lines, [] means exhausted
    - close: idempotent, never raises
    """

    def __init__(self, backend: SessionBackend, submit_options: Sequence[str] = DEFAULT_SUBMIT_OPTIONS):
        """
        Args:
            backend: Vendor backend that knows how to open connections
            submit_options: Statements prepended to every submitted program, in order
        """
        self.backend = backend
        self.submit_options = tuple(submit_options)

    def connect(self, host: str, port: int, username: str, secret: Secret) -> Connection:
        logger.info(f"Connecting to {host}:{port} as {username}")
        try:
            backend_conn = self.backend.open(host, port, username, secret)
        except RemoteConnectionError:
            raise
        except Exception as e:
            raise RemoteConnectionError(f"Could not connect to {host}:{port} as {username}: {e}") from e

        logger.info(f"Connected to {host}:{port}")
        return Connection(host, port, username, backend_conn)

    def build_payload(self, source_text: str) -> str:
        """Return the code actually sent: options first, then the caller's program."""
        if not self.submit_options:
            return source_text
        return "\n".join(self.submit_options) + "\n" + source_text

    def submit(self, connection: Connection, source_text: str) -> None:
        """
        Submit a program and wait for it to finish.

        Errors inside the SAS program itself end up in the log, not here.

        Raises:
            SubmissionError: If the connection is not usable or the backend fails to run the code
        """
        self._require_connected(connection, SubmissionError)
        payload = self.build_payload(source_text)
        logger.debug(f"Submitting {len(payload)} characters ({len(self.submit_options)} option statements)")
        try:
            connection._backend_conn.submit(payload)
        except Exception as e:
            connection.state = ConnectionState.FAILED
            raise SubmissionError(f"Submission to {connection.host} failed: {e}") from e

    def drain_log(self, connection: Connection, chunk_size: int) -> List[str]:
        return self._drain(connection, chunk_size, "log")

    def drain_listing(self, connection: Connection, chunk_size: int) -> List[str]:
        return self._drain(connection, chunk_size, "listing")

    def close(self, connection: Connection) -> None:
        if connection.state is ConnectionState.CLOSED:
            return
        connection.state = ConnectionState.CLOSED
        try:
            connection._backend_conn.close()
            logger.info(f"Closed connection to {connection.host}")
        except Exception as e:
            logger.error(f"Failed to close connection to {connection.host}: {e}")

    # ---- internals ----

    def _drain(self, connection: Connection, chunk_size: int, kind: str) -> List[str]:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self._require_connected(connection, DrainError)

        flush = connection._backend_conn.flush_log if kind == "log" else connection._backend_conn.flush_listing
        try:
            lines = flush(chunk_size)
        except Exception as e:
            connection.state = ConnectionState.FAILED
            raise DrainError(f"Reading the {kind} from {connection.host} failed: {e}") from e
        return list(lines or [])

    @staticmethod
    def _require_connected(connection: Connection, error_cls) -> None:
        if connection.state is not ConnectionState.CONNECTED:
            raise error_cls(f"Connection to {connection.host} is {connection.state.value}")
