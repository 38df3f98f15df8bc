from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from sas_remote.core.models import JobRequest, Secret
from sas_remote.errors import ValidationError
from sas_remote.logging_setup import register_secret

logger = logging.getLogger("sasr.core.validation")


def resolve_file(value: str, label: str) -> Path:
    """Expand, make absolute and require an existing regular file."""
    path = Path(value).expanduser().resolve()
    if not path.exists():
        raise ValidationError(f"{label} not found: {path}")
    if not path.is_file():
        raise ValidationError(f"{label} is not a regular file: {path}")
    return path


def resolve_dir(value: str, label: str) -> Path:
    path = Path(value).expanduser().resolve()
    if not path.exists():
        raise ValidationError(f"{label} not found: {path}")
    if not path.is_dir():
        raise ValidationError(f"{label} is not a directory: {path}")
    return path


def load_secret(path: Path) -> Secret:
    """
    Load the opaque secret stored at path.

    The file content is handed to the connection layer as-is, minus a trailing
    newline. Its value is registered for masking and never logged.
    """
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ValidationError(f"Cannot read secret file {path}: {e}") from e
    try:
        value = raw.decode("utf-8").rstrip("\r\n")
    except UnicodeDecodeError as e:
        raise ValidationError(f"Secret file {path} is not valid UTF-8") from e
    if not value:
        raise ValidationError(f"Secret file {path} is empty")
    secret = Secret(value)
    register_secret(secret)
    logger.debug(f"Loaded secret from {path}")
    return secret


def read_source(path: Path, encoding: str = "utf-8") -> str:
    """Read and decode the program text up front so a bad file fails before connecting."""
    try:
        return path.read_text(encoding=encoding)
    except LookupError as e:
        raise ValidationError(f"Unknown source encoding: {encoding}") from e
    except UnicodeDecodeError as e:
        raise ValidationError(
            f"Source file {path} is not valid {encoding} (byte offset {e.start}); pass --source-encoding"
        ) from e
    except OSError as e:
        raise ValidationError(f"Cannot read source file {path}: {e}") from e


def build_request(
    username: str,
    secret_file: str,
    host: str,
    source: str,
    output_dir: str,
    port: int,
    report_interval_seconds: float = 60,
    chunk_size: int = 1000,
    submit_options: Sequence[str] = (),
    source_encoding: str = "utf-8",
    started_at: Optional[datetime] = None,
) -> JobRequest:
    """
    Validate caller arguments and build an immutable JobRequest.

    All checks run before any connection is attempted.

    Raises:
        ValidationError: On the first invalid argument
    """
    if not username or not username.strip():
        raise ValidationError("username must not be empty")
    if not host or not host.strip():
        raise ValidationError("host must not be empty")
    if port <= 0:
        raise ValidationError(f"port must be a positive integer, got {port}")
    if report_interval_seconds <= 0:
        raise ValidationError(f"report interval must be positive, got {report_interval_seconds}")
    if chunk_size <= 0:
        raise ValidationError(f"chunk size must be positive, got {chunk_size}")

    secret_path = resolve_file(secret_file, "Secret file")
    source_path = resolve_file(source, "Source file")
    out_dir = resolve_dir(output_dir, "Output directory")

    return JobRequest(
        username=username.strip(),
        secret_path=secret_path,
        secret=load_secret(secret_path),
        host=host.strip(),
        port=port,
        source_path=source_path,
        output_dir=out_dir,
        started_at=started_at or datetime.now(),
        source_text=read_source(source_path, source_encoding),
        report_interval_seconds=report_interval_seconds,
        chunk_size=chunk_size,
        submit_options=tuple(submit_options),
    )
