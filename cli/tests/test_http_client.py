from __future__ import annotations

import pytest
import typer

from reviewhub_cli import config, http
from reviewhub_client import ApiError, AuthError, NetworkError
from reviewhub_client.config_types import ENV_BASE_URL


def test_make_client_resolves_base_url_and_token_provider(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(config, "user_config_dir", lambda _: str(tmp_path))
    monkeypatch.delenv(ENV_BASE_URL, raising=False)
    captured = {}

    class _FakeClient:
        def __init__(self, client_cfg):
            captured["base_url"] = client_cfg.base_url
            captured["cfg"] = client_cfg

    monkeypatch.setattr("reviewhub_cli.http.ReviewHubClient", _FakeClient)
    cfg = config.default_config()
    cfg.base_url = "http://configured.test/api"

    http.make_client(cfg, base_url_override=None)
    assert captured["base_url"] == "http://configured.test/api"

    saved = config.default_config()
    saved.auth.access_token = "on-disk"
    config.save_config(saved)
    assert captured["cfg"].current_token() == "on-disk"


def test_make_client_normalizes_base_url_override(monkeypatch) -> None:
    captured = {}

    class _FakeClient:
        def __init__(self, client_cfg):
            captured["base_url"] = client_cfg.base_url

    monkeypatch.setattr("reviewhub_cli.http.ReviewHubClient", _FakeClient)

    http.make_client(config.default_config(), base_url_override="example.com/api/")

    assert captured["base_url"] == "https://example.com/api"


@pytest.mark.parametrize(
    "exc, expected",
    [
        (AuthError(401, "Token has expired"), "Unauthorized (401)"),
        (ApiError(409, "Already voted"), "Failed to vote: Already voted"),
        (NetworkError("connection refused"), "backend unreachable"),
    ],
)
def test_fail_reports_and_exits(exc, expected, capsys) -> None:
    with pytest.raises(typer.Exit) as raised:
        http.fail("vote", exc)

    assert raised.value.exit_code == 2
    assert expected in capsys.readouterr().out


def test_fail_shows_backend_details(capsys) -> None:
    exc = ApiError(
        400,
        "Validation failed",
        details='{"error": "Validation failed", "details": {"rating": "must be between 1 and 5"}}',
    )

    with pytest.raises(typer.Exit):
        http.fail("create review", exc)

    out = capsys.readouterr().out
    assert "Failed to create review: Validation failed" in out
    assert "must be between 1 and 5" in out


def test_fail_without_json_details_prints_one_line(capsys) -> None:
    with pytest.raises(typer.Exit):
        http.fail("create review", ApiError(502, "HTTP error! status: 502", details="<html>Bad Gateway</html>"))

    out = capsys.readouterr().out
    assert "Bad Gateway" not in out
