from __future__ import annotations

import pytest

from sas_remote.core.models import Secret
from sas_remote.errors import RemoteConnectionError
from sas_remote.session.client import RemoteSessionClient
from sas_remote.session.iom import IOMBackend, IOMConnection

saspy = pytest.importorskip("saspy")


class _RecordingSession:
    def __init__(self, **kwargs):
        self.kwargs = kwargs

    def submit(self, code, results="HTML"):
        return {"LOG": "NOTE: done.", "LST": ""}

    def endsas(self):
        pass


@pytest.fixture
def recording_sessions(monkeypatch):
    monkeypatch.setattr(saspy, "SASsession", _RecordingSession)


def test_open_passes_connection_settings(recording_sessions) -> None:
    backend = IOMBackend(java_path="/opt/jre/bin/java", cfgname="winiomlinux")

    conn = backend.open("sas.example.org", 8591, "analyst", Secret("s3cr3t-value"))

    assert isinstance(conn, IOMConnection)
    assert conn._sas.kwargs == {
        "java": "/opt/jre/bin/java",
        "iomhost": "sas.example.org",
        "iomport": 8591,
        "omruser": "analyst",
        "omrpw": "s3cr3t-value",
        "results": "TEXT",
        "cfgname": "winiomlinux",
    }


def test_secret_only_passed_as_password(recording_sessions) -> None:
    conn = IOMBackend().open("sas.example.org", 8591, "analyst", Secret("s3cr3t-value"))

    assert [k for k, v in conn._sas.kwargs.items() if v == "s3cr3t-value"] == ["omrpw"]
    assert "cfgname" not in conn._sas.kwargs


def test_session_start_failure_becomes_connection_error(monkeypatch) -> None:
    def refuse(**kwargs):
        raise RuntimeError("No SAS process attached. SAS process has terminated unexpectedly.")

    monkeypatch.setattr(saspy, "SASsession", refuse)
    client = RemoteSessionClient(IOMBackend())

    with pytest.raises(RemoteConnectionError, match="sas.example.org:8591 as analyst") as exc:
        client.connect("sas.example.org", 8591, "analyst", Secret("s3cr3t-value"))

    assert isinstance(exc.value.__cause__, RuntimeError)
    assert "s3cr3t" not in str(exc.value)
