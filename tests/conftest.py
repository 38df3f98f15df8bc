from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from sas_remote.core.models import JobRequest, Secret


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    (tmp_path / "out").mkdir()
    (tmp_path / "demo.sas").write_text("proc print data=sashelp.class; run;\n", encoding="utf-8")
    (tmp_path / "secret.bin").write_text("s3cr3t-value\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def make_request(workspace: Path):
    def _make(**overrides) -> JobRequest:
        fields = dict(
            username="analyst",
            secret_path=workspace / "secret.bin",
            secret=Secret("s3cr3t-value"),
            host="sas.example.org",
            port=8591,
            source_path=workspace / "demo.sas",
            output_dir=workspace / "out",
            started_at=datetime(2024, 3, 1, 9, 15, 2),
            source_text=(workspace / "demo.sas").read_text(encoding="utf-8"),
            report_interval_seconds=5,
            chunk_size=2,
            submit_options=("options validvarname=any;", "options pagesize=max;"),
        )
        fields.update(overrides)
        return JobRequest(**fields)

    return _make
