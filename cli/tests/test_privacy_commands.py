from __future__ import annotations

from typer.testing import CliRunner

from reviewhub_cli.commands import privacy_cmd
from reviewhub_cli.config import default_config
from reviewhub_client import ApiError, NetworkError

runner = CliRunner()


class _FakeClient:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def request_data_export(self, export_format):
        self.calls.append(("request_data_export", export_format))
        return {"export_request": {"id": 14, "status": "pending"}}

    def save_export(self, request_id, dest):
        self.calls.append(("save_export", request_id))
        if request_id == 404:
            raise ApiError(404, "Export not found")
        if request_id == 500:
            raise NetworkError("connection reset")
        dest.write_bytes(b"{}")
        return 2

    def update_privacy_settings(self, settings):
        self.calls.append(("update_privacy_settings", settings))
        return {"settings": settings}

    def get_privacy_settings(self):
        self.calls.append(("get_privacy_settings",))
        return {"settings": {"profile_visibility": "public"}}

    def record_consent(self, consent_type, granted):
        self.calls.append(("record_consent", consent_type, granted))

    def close(self) -> None:
        return None


def _patch(monkeypatch) -> _FakeClient:
    client = _FakeClient()
    monkeypatch.setattr(privacy_cmd, "load_config", default_config)
    monkeypatch.setattr(privacy_cmd, "make_client", lambda *_args, **_kwargs: client)
    return client


def test_export_request_reports_id(monkeypatch) -> None:
    client = _patch(monkeypatch)

    result = runner.invoke(privacy_cmd.app, ["export", "--format", "CSV"])

    assert result.exit_code == 0, result.output
    assert client.calls == [("request_data_export", "csv")]
    assert "id=14" in result.output


def test_export_rejects_unknown_format(monkeypatch) -> None:
    client = _patch(monkeypatch)

    result = runner.invoke(privacy_cmd.app, ["export", "--format", "pdf"])

    assert result.exit_code == 2
    assert client.calls == []


def test_download_writes_file(monkeypatch, tmp_path) -> None:
    client = _patch(monkeypatch)
    out = tmp_path / "export.json"

    result = runner.invoke(privacy_cmd.app, ["download", "7", "-o", str(out)])

    assert result.exit_code == 0, result.output
    assert client.calls == [("save_export", 7)]
    assert out.read_bytes() == b"{}"


def test_download_failure_exits(monkeypatch, tmp_path) -> None:
    _patch(monkeypatch)

    result = runner.invoke(privacy_cmd.app, ["download", "404", "-o", str(tmp_path / "x.json")])

    assert result.exit_code == 2
    assert "Export not found" in result.output


def test_download_interrupted_exits_cleanly(monkeypatch, tmp_path) -> None:
    _patch(monkeypatch)

    result = runner.invoke(privacy_cmd.app, ["download", "500", "-o", str(tmp_path / "x.json")])

    assert result.exit_code == 2
    assert "backend unreachable" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)


def test_settings_update_parses_booleans(monkeypatch) -> None:
    client = _patch(monkeypatch)

    result = runner.invoke(
        privacy_cmd.app, ["settings", "--set", "profile_visibility=private", "--set", "show_email=false"]
    )

    assert result.exit_code == 0, result.output
    assert client.calls == [
        ("update_privacy_settings", {"profile_visibility": "private", "show_email": False})
    ]


def test_settings_without_updates_reads(monkeypatch) -> None:
    client = _patch(monkeypatch)

    result = runner.invoke(privacy_cmd.app, ["settings"])

    assert result.exit_code == 0
    assert client.calls == [("get_privacy_settings",)]


def test_settings_rejects_malformed_pair(monkeypatch) -> None:
    client = _patch(monkeypatch)

    result = runner.invoke(privacy_cmd.app, ["settings", "--set", "nonsense"])

    assert result.exit_code == 2
    assert client.calls == []


def test_consent_deny(monkeypatch) -> None:
    client = _patch(monkeypatch)

    result = runner.invoke(privacy_cmd.app, ["consent", "marketing", "--deny"])

    assert result.exit_code == 0
    assert client.calls == [("record_consent", "marketing", False)]
