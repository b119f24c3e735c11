from __future__ import annotations

from importlib import metadata
from typing import NoReturn

import typer
from reviewhub_client import ApiError, AuthError, NetworkError, ReviewHubClient
from reviewhub_client.config_types import ClientConfig
from reviewhub_client.errors import error_payload

from . import console
from .config import AppConfig, resolve_base_url, stored_token


def cli_version() -> str:
    try:
        return metadata.version("reviewhub-client")
    except metadata.PackageNotFoundError:
        return "0.0.0"


def make_client(cfg: AppConfig, *, base_url_override: str | None) -> ReviewHubClient:
    return ReviewHubClient(
        ClientConfig(
            base_url=resolve_base_url(cfg, base_url_override),
            token_provider=stored_token,
            client_version=cli_version(),
        )
    )


def fail(action: str, exc: ApiError | NetworkError) -> NoReturn:
    if isinstance(exc, AuthError):
        console.err(f"Unauthorized ({exc.status_code}): {exc}. Run `reviewhub auth login` first.")
    elif isinstance(exc, NetworkError):
        console.err(f"Failed to {action}: backend unreachable ({exc})")
    else:
        console.err(f"Failed to {action}: {exc}")
        hint = _error_hint(exc)
        if hint:
            console.info(hint)
    raise typer.Exit(code=2)


def _error_hint(exc: ApiError) -> str | None:
    payload = error_payload(exc.details)
    if not payload:
        return None
    for key in ("details", "errors", "message"):
        value = payload.get(key)
        if value and value != str(exc):
            return f"{key}: {value}"
    return None
