from __future__ import annotations

import os
import sys
import tomllib
from dataclasses import dataclass
from typing import Any

import tomli_w
from platformdirs import user_config_dir
from reviewhub_client.config_types import DEFAULT_BASE_URL, ENV_BASE_URL

from . import console

APP_NAME = "reviewhub"
CONFIG_FILENAME = "config.toml"

_WARNED_BASE_URL_SCHEME = False


@dataclass
class AuthConfig:
    access_token: str = ""
    token_type: str = "bearer"


@dataclass
class AppConfig:
    base_url: str
    auth: AuthConfig


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig(base_url="", auth=AuthConfig())


def normalize_base_url(raw: str | None, *, warn: bool = False) -> str:
    value = (raw or "").strip()
    if not value:
        return ""
    value = value.rstrip("/")
    lowered = value.lower()
    if lowered.startswith("http://") or lowered.startswith("https://"):
        return value

    host = value.split("/", 1)[0]
    host = host.split(":", 1)[0].lower()
    scheme = "http://" if host in {"localhost", "127.0.0.1", "0.0.0.0"} else "https://"

    normalized = f"{scheme}{value}"
    if warn:
        _warn_missing_scheme(normalized)
    return normalized


def _warn_missing_scheme(normalized: str) -> None:
    global _WARNED_BASE_URL_SCHEME
    if _WARNED_BASE_URL_SCHEME:
        return
    if not (sys.stderr.isatty() or sys.stdout.isatty()):
        return
    console.warn(f"base_url missing scheme, assuming {normalized}")
    _WARNED_BASE_URL_SCHEME = True


def resolve_base_url(cfg: AppConfig, override: str | None = None) -> str:
    """--base-url, then the environment, then the config file, then the default."""
    if override:
        return normalize_base_url(override, warn=True)
    env_value = os.getenv(ENV_BASE_URL, "").strip()
    if env_value:
        return normalize_base_url(env_value)
    return cfg.base_url or DEFAULT_BASE_URL


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    return {
        "base_url": cfg.base_url,
        "auth": {
            "access_token": cfg.auth.access_token,
            "token_type": cfg.auth.token_type,
        },
    }


def from_toml(data: dict[str, Any]) -> AppConfig:
    base_url = normalize_base_url(str(data.get("base_url") or ""), warn=True)
    auth_raw = data.get("auth") or {}
    access_token = ""
    token_type = "bearer"
    if isinstance(auth_raw, dict):
        access_token = str(auth_raw.get("access_token") or "")
        token_type = str(auth_raw.get("token_type") or "bearer")
    return AppConfig(base_url=base_url, auth=AuthConfig(access_token=access_token, token_type=token_type))


def load_config() -> AppConfig:
    path = config_path()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return from_toml(data)
    except FileNotFoundError:
        return default_config()


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(to_toml(cfg)).encode("utf-8"))
    os.chmod(path, 0o600)
    return path


def stored_token() -> str | None:
    """Current access token, read from disk on every call."""
    return load_config().auth.access_token.strip() or None
