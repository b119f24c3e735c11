from __future__ import annotations

from reviewhub_cli import config
from reviewhub_client.config_types import DEFAULT_BASE_URL, ENV_BASE_URL


def _use_tmp_config(tmp_path, monkeypatch) -> None:
    def _config_dir(_: str) -> str:
        return str(tmp_path)

    monkeypatch.setattr(config, "user_config_dir", _config_dir)


def test_save_and_load_round_trip(tmp_path, monkeypatch) -> None:
    _use_tmp_config(tmp_path, monkeypatch)
    cfg = config.AppConfig(
        base_url="http://reviews.test/api",
        auth=config.AuthConfig(access_token="tok-1", token_type="bearer"),
    )

    path = config.save_config(cfg)
    contents = tmp_path.joinpath("config.toml").read_text(encoding="utf-8")

    assert path.endswith("config.toml")
    assert 'access_token = "tok-1"' in contents
    assert config.load_config() == cfg


def test_load_config_missing_file_gives_defaults(tmp_path, monkeypatch) -> None:
    _use_tmp_config(tmp_path, monkeypatch)

    cfg = config.load_config()

    assert cfg.base_url == ""
    assert cfg.auth.access_token == ""


def test_stored_token_is_reread_each_time(tmp_path, monkeypatch) -> None:
    _use_tmp_config(tmp_path, monkeypatch)
    assert config.stored_token() is None

    cfg = config.default_config()
    cfg.auth.access_token = "fresh"
    config.save_config(cfg)
    assert config.stored_token() == "fresh"

    cfg.auth.access_token = ""
    config.save_config(cfg)
    assert config.stored_token() is None


def test_resolve_base_url_precedence(monkeypatch) -> None:
    cfg = config.default_config()
    monkeypatch.delenv(ENV_BASE_URL, raising=False)
    assert config.resolve_base_url(cfg) == DEFAULT_BASE_URL

    cfg.base_url = "http://from-config.test/api"
    assert config.resolve_base_url(cfg) == "http://from-config.test/api"

    monkeypatch.setenv(ENV_BASE_URL, "http://from-env.test/api/")
    assert config.resolve_base_url(cfg) == "http://from-env.test/api"

    assert config.resolve_base_url(cfg, "https://override.test/api") == "https://override.test/api"


def test_normalize_base_url_defaults_to_https() -> None:
    assert config.normalize_base_url("reviews.example.com/api") == "https://reviews.example.com/api"


def test_normalize_base_url_defaults_to_http_for_localhost() -> None:
    assert config.normalize_base_url("localhost:5000/api") == "http://localhost:5000/api"


def test_normalize_base_url_strips_trailing_slash() -> None:
    assert config.normalize_base_url("https://example.com/api/") == "https://example.com/api"
