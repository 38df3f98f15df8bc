from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from sas_remote.core.artifacts import artifact_stem, build_artifacts, drain_to_artifact
from sas_remote.core.models import OutputArtifact


def _chunked(chunks):
    pending = list(chunks)
    calls = []

    def drain():
        calls.append(1)
        return pending.pop(0) if pending else []

    return drain, calls


def test_artifact_names_use_source_name_and_timestamp(tmp_path: Path) -> None:
    started = datetime(2024, 3, 1, 9, 15, 2)
    log, listing = build_artifacts(Path("/work/demo.sas"), tmp_path, started)

    assert log.path == tmp_path / "demo.sas__20240301091502.log"
    assert listing.path == tmp_path / "demo.sas__20240301091502.lst"
    assert not log.path.exists()


def test_runs_a_second_apart_never_collide() -> None:
    a = artifact_stem(Path("demo.sas"), datetime(2024, 3, 1, 9, 15, 2))
    b = artifact_stem(Path("demo.sas"), datetime(2024, 3, 1, 9, 15, 3))

    assert a != b


def test_drain_is_exhaustive_and_ordered(tmp_path: Path) -> None:
    chunks = [[f"chunk{k} line{i}" for i in range(3)] for k in range(4)]
    drain, calls = _chunked(chunks)
    artifact = OutputArtifact(kind="log", path=tmp_path / "x.log")

    drain_to_artifact(drain, artifact)

    assert len(calls) == len(chunks) + 1
    assert artifact.chunks_written == 4
    assert artifact.lines_written == 12
    expected = "".join(f"{line}\n" for chunk in chunks for line in chunk)
    assert artifact.path.read_text(encoding="utf-8") == expected


def test_no_file_when_buffer_is_empty(tmp_path: Path) -> None:
    drain, calls = _chunked([])
    artifact = OutputArtifact(kind="listing", path=tmp_path / "x.lst")

    drain_to_artifact(drain, artifact)

    assert len(calls) == 1
    assert not artifact.path.exists()
    assert not artifact.has_content


def test_partial_output_survives_drain_failure(tmp_path: Path) -> None:
    responses = [["first"], ["second"]]

    def drain():
        if responses:
            return responses.pop(0)
        raise RuntimeError("buffer gone")

    artifact = OutputArtifact(kind="log", path=tmp_path / "x.log")
    with pytest.raises(RuntimeError):
        drain_to_artifact(drain, artifact)

    assert artifact.path.read_text(encoding="utf-8") == "first\nsecond\n"
    assert artifact.chunks_written == 2


def test_existing_content_is_appended_not_truncated(tmp_path: Path) -> None:
    path = tmp_path / "x.log"
    path.write_text("earlier\n", encoding="utf-8")
    drain, _ = _chunked([["later"]])

    drain_to_artifact(drain, OutputArtifact(kind="log", path=path))

    assert path.read_text(encoding="utf-8") == "earlier\nlater\n"
