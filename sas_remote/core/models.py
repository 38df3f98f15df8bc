from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple


class Secret:
    """Opaque credential. Never rendered by repr/str so it cannot leak into logs."""

    __slots__ = ("_value",)

    def __init__(self, value: str):
        self._value = value

    def reveal(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return "Secret('********')"

    __str__ = __repr__

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Secret) and other._value == self._value

    def __hash__(self) -> int:
        return hash(self._value)


class JobState(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not JobState.RUNNING


class ConnectionState(str, Enum):
    CONNECTED = "connected"
    FAILED = "failed"
    CLOSED = "closed"


@dataclass(frozen=True)
class JobRequest:
    username: str
    secret_path: Path          # absolute
    secret: Secret = field(repr=False)
    host: str
    port: int
    source_path: Path          # absolute, regular file
    output_dir: Path           # absolute, existing directory
    started_at: datetime       # captured once, shared by both artifacts
    source_text: str = field(repr=False)  # decoded at validation time
    report_interval_seconds: float = 60
    chunk_size: int = 1000
    submit_options: Tuple[str, ...] = ()


@dataclass
class OutputArtifact:
    kind: str                  # "log" or "listing"
    path: Path
    lines_written: int = 0
    chunks_written: int = 0

    @property
    def has_content(self) -> bool:
        return self.chunks_written > 0


@dataclass(frozen=True)
class JobOutcome:
    state: JobState
    log: OutputArtifact
    listing: OutputArtifact
    elapsed_seconds: float
    progress_reports: int = 0
    error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.state is JobState.COMPLETED
