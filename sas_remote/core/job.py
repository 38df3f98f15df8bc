from __future__ import annotations

import logging
import queue
import time
from typing import Optional

from sas_remote.core.artifacts import drain_to_artifact
from sas_remote.core.models import JobRequest, OutputArtifact
from sas_remote.session.client import RemoteSessionClient

# Use "sasr" namespace so logs appear at INFO level
logger = logging.getLogger("sasr.core.job")


class SubmissionJob:
    """
    The worker unit of a run: everything that touches the remote session.

    Flow (strictly sequential, the server session is single-threaded):
    1. connect
    2. submit (blocks for the whole remote execution)
    3. drain the log to exhaustion
    4. drain the listing to exhaustion
    5. close, on every path once connected

    Status lines are posted to `notifications` for the supervisor to relay;
    the output files are written only from this unit.
    """

    def __init__(
        self,
        request: JobRequest,
        client: RemoteSessionClient,
        log: OutputArtifact,
        listing: OutputArtifact,
        notifications: Optional["queue.Queue[str]"] = None,
    ):
        self.request = request
        self.client = client
        self.log = log
        self.listing = listing
        self.notifications = notifications if notifications is not None else queue.Queue()

    def run(self) -> None:
        """
        Execute the job. Returns normally on completion; any SasRemoteError propagates.
        """
        req = self.request
        conn = self.client.connect(req.host, req.port, req.username, req.secret)
        self._notify(f"Connected to {req.host}:{req.port}")
        try:
            t0 = time.time()
            self._notify(f"Submitting {req.source_path.name}")
            self.client.submit(conn, req.source_text)
            self._notify(f"Remote execution finished in {time.time() - t0:.1f}s")

            drain_to_artifact(lambda: self.client.drain_log(conn, req.chunk_size), self.log)
            self._notify(f"Log: {self.log.lines_written} lines")

            drain_to_artifact(lambda: self.client.drain_listing(conn, req.chunk_size), self.listing)
            self._notify(f"Listing: {self.listing.lines_written} lines")
        finally:
            self.client.close(conn)

    def _notify(self, message: str) -> None:
        logger.debug(message)
        self.notifications.put(message)
