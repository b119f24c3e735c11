from __future__ import annotations

from typer.testing import CliRunner

from reviewhub_cli import config, main
from reviewhub_cli.auth_state import AuthContext
from reviewhub_cli.commands import settings_cmd

runner = CliRunner()


def _use_tmp_config(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(config, "user_config_dir", lambda _: str(tmp_path))


def test_settings_group_available(monkeypatch) -> None:
    monkeypatch.setattr(main, "resolve_auth_context", lambda **_kwargs: AuthContext(state="no_token"))
    app = main._build_app()
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "settings" in result.output


def test_set_base_url_adds_scheme(tmp_path, monkeypatch) -> None:
    _use_tmp_config(tmp_path, monkeypatch)

    result = runner.invoke(settings_cmd.app, ["set", "--base-url", "reviews.example.com/api/"])

    assert result.exit_code == 0, result.output
    assert config.load_config().base_url == "https://reviews.example.com/api"


def test_show_masks_token(tmp_path, monkeypatch) -> None:
    _use_tmp_config(tmp_path, monkeypatch)
    monkeypatch.delenv("REVIEWHUB_API_BASE_URL", raising=False)
    cfg = config.default_config()
    cfg.auth.access_token = "secret-token"
    config.save_config(cfg)

    result = runner.invoke(settings_cmd.app, ["show"])

    assert result.exit_code == 0
    assert "secret-token" not in result.output
    assert "access_token=(set)" in result.output
    assert "effective=http://localhost:5000/api" in result.output


def test_reset_clears_token(tmp_path, monkeypatch) -> None:
    _use_tmp_config(tmp_path, monkeypatch)
    cfg = config.default_config()
    cfg.auth.access_token = "tok"
    config.save_config(cfg)

    result = runner.invoke(settings_cmd.app, ["reset", "--yes"])

    assert result.exit_code == 0
    assert config.load_config().auth.access_token == ""
