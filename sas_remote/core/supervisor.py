from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Callable, Optional

from sas_remote.core.artifacts import build_artifacts
from sas_remote.core.job import SubmissionJob
from sas_remote.core.models import JobOutcome, JobRequest, JobState
from sas_remote.core.progress import LoggingProgressReporter, ProgressReporter
from sas_remote.session.client import RemoteSessionClient

logger = logging.getLogger("sasr.core.supervisor")


class WorkerThread(threading.Thread):
    """
    Runs one unit of work and records its terminal state.

    Daemon thread: the remote call cannot be interrupted, so an external kill
    (Ctrl+C) must be able to end the process without waiting for it.
    """

    def __init__(self, target: Callable[[], None], name: str = "sasr-job"):
        super().__init__(name=name, daemon=True)
        self._target_fn = target
        self._state = JobState.RUNNING
        self._lock = threading.Lock()
        self.error: Optional[BaseException] = None

    @property
    def state(self) -> JobState:
        with self._lock:
            return self._state

    def run(self) -> None:
        try:
            self._target_fn()
        except BaseException as e:  # captured and re-surfaced by the supervisor
            self.error = e
            self._finish(JobState.FAILED)
        else:
            self._finish(JobState.COMPLETED)

    def _finish(self, state: JobState) -> None:
        with self._lock:
            if self._state is JobState.RUNNING:
                self._state = state


class JobSupervisor:
    """
    Runs a unit of work on a worker thread and waits for it with a bounded timeout.

    Each timeout produces one progress report with the elapsed time since spawn,
    then the wait is repeated. A timeout never cancels the worker.
    """

    def __init__(
        self,
        reporter: Optional[ProgressReporter] = None,
        report_interval_seconds: float = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            reporter: Receives report(elapsed_seconds) on every tick (default: log line)
            report_interval_seconds: Bounded wait between ticks
            clock: Monotonic time source
        """
        if report_interval_seconds <= 0:
            raise ValueError(f"report_interval_seconds must be positive, got {report_interval_seconds}")
        self.reporter = reporter or LoggingProgressReporter()
        self.report_interval_seconds = report_interval_seconds
        self.clock = clock

        self.progress_reports = 0
        self.elapsed_seconds = 0.0

    def supervise(
        self,
        work: Callable[[], None],
        notifications: Optional["queue.Queue[str]"] = None,
    ) -> WorkerThread:
        """
        Spawn work and poll it until it reaches a terminal state.

        Args:
            work: Zero-argument callable run on the worker thread
            notifications: Status messages posted by the worker, relayed to the log

        Returns:
            The finished worker (state is COMPLETED or FAILED, error set on failure)
        """
        worker = WorkerThread(work)
        start = self.clock()
        worker.start()
        logger.debug(f"Worker started, reporting every {self.report_interval_seconds}s")

        while True:
            worker.join(timeout=self.report_interval_seconds)
            if not worker.is_alive():
                break
            self.progress_reports += 1
            self.reporter.report(self.clock() - start)
            self._relay(notifications)

        self.elapsed_seconds = self.clock() - start
        self._relay(notifications)

        if worker.state is JobState.FAILED:
            logger.error(f"Job failed after {self.elapsed_seconds:.1f}s: {worker.error}")
        else:
            logger.info(f"Job completed in {self.elapsed_seconds:.1f}s")
        return worker

    @staticmethod
    def _relay(notifications: Optional["queue.Queue[str]"]) -> None:
        if notifications is None:
            return
        while True:
            try:
                message = notifications.get_nowait()
            except queue.Empty:
                return
            logger.info(f"[job] {message}")


def run_submission(
    request: JobRequest,
    client: RemoteSessionClient,
    reporter: Optional[ProgressReporter] = None,
    clock: Callable[[], float] = time.monotonic,
) -> JobOutcome:
    """
    Run one job end to end: build artifact paths, supervise the worker, collect the outcome.

    Never raises for job failures; the error is carried in JobOutcome.error.
    """
    log, listing = build_artifacts(request.source_path, request.output_dir, request.started_at)
    notifications: "queue.Queue[str]" = queue.Queue()
    job = SubmissionJob(request, client, log, listing, notifications)

    supervisor = JobSupervisor(reporter, request.report_interval_seconds, clock=clock)
    worker = supervisor.supervise(job.run, notifications)

    return JobOutcome(
        state=worker.state,
        log=log,
        listing=listing,
        elapsed_seconds=supervisor.elapsed_seconds,
        progress_reports=supervisor.progress_reports,
        error=worker.error,
    )
