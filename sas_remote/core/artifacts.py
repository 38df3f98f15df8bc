from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Tuple

from sas_remote.core.models import OutputArtifact

logger = logging.getLogger("sasr.core.artifacts")

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
LOG_SUFFIX = ".log"
LISTING_SUFFIX = ".lst"


def artifact_stem(source_path: Path, started_at: datetime) -> str:
    """
    Compute the shared file stem for one invocation.

    Format: {source file name}__{YYYYmmddHHMMSS}

    Example:
       - source_path=/work/demo.sas, started_at=2024-03-01 09:15:02
       - result = "demo.sas__20240301091502"
    """
    return f"{source_path.name}__{started_at.strftime(TIMESTAMP_FORMAT)}"


def build_artifacts(source_path: Path, output_dir: Path, started_at: datetime) -> Tuple[OutputArtifact, OutputArtifact]:
    """Return the (log, listing) artifacts for a run. Nothing is created on disk yet."""
    stem = artifact_stem(source_path, started_at)
    return (
        OutputArtifact(kind="log", path=output_dir / f"{stem}{LOG_SUFFIX}"),
        OutputArtifact(kind="listing", path=output_dir / f"{stem}{LISTING_SUFFIX}"),
    )


def drain_to_artifact(drain: Callable[[], List[str]], artifact: OutputArtifact) -> OutputArtifact:
    """
    Call drain() until it returns no lines, appending each chunk to the artifact file.

    The file is created on the first non-empty chunk and opened in append mode,
    so a partially written artifact survives a DrainError on a later call.

    Args:
        drain: Zero-argument callable returning the next chunk of lines ([] = exhausted)
        artifact: Destination; its counters are updated in place

    Returns:
        The same artifact, for chaining
    """
    while True:
        lines = drain()
        if not lines:
            break
        with artifact.path.open("a", encoding="utf-8", newline="\n") as f:
            f.writelines(f"{line}\n" for line in lines)
        artifact.lines_written += len(lines)
        artifact.chunks_written += 1
        logger.debug(f"Appended {len(lines)} lines to {artifact.path.name}")

    if artifact.has_content:
        logger.info(f"Wrote {artifact.kind}: {artifact.path} ({artifact.lines_written} lines)")
    else:
        logger.info(f"No {artifact.kind} output")
    return artifact
