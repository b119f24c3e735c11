from __future__ import annotations

import typer
from reviewhub_client import ApiError, NetworkError

from .. import console
from ..auth_state import resolve_auth_context
from ..config import load_config, resolve_base_url
from ..http import fail, make_client


def health(
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
) -> None:
    """Check that the ReviewHub API is up and whether the stored token is accepted."""
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.health_check()
    except (ApiError, NetworkError) as e:
        fail("reach the API", e)
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    status = data.get("status") if isinstance(data, dict) else None
    console.ok(f"API is up at {resolve_base_url(cfg, base_url)} (status={status or 'unknown'})")

    auth = resolve_auth_context(base_url_override=base_url)
    if auth.state == "authed":
        console.info(f"Token accepted (role={auth.role or 'user'}).")
    elif auth.state == "invalid_token":
        console.warn("Stored token was rejected. Run `reviewhub auth login`.")
    elif auth.state == "no_token":
        console.info("Not logged in.")
    else:
        console.warn(f"Could not verify the stored token ({auth.state}).")
