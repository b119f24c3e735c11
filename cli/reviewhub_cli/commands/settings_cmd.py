from __future__ import annotations

import typer

from .. import console
from ..config import config_path, default_config, load_config, normalize_base_url, resolve_base_url, save_config

app = typer.Typer(help="Manage local CLI settings (~/.config/reviewhub/config.toml).")


@app.command("show")
def show_settings():
    cfg = load_config()
    token_state = "(set)" if cfg.auth.access_token.strip() else "(empty)"
    console.console.print(f"config={config_path()}")
    console.console.print(f"base_url={cfg.base_url or '-'} effective={resolve_base_url(cfg)}")
    console.console.print(f"access_token={token_state} token_type={cfg.auth.token_type}")


@app.command("set")
def set_setting(
        base_url: str | None = typer.Option(None, "--base-url", help="API base URL like http://localhost:5000/api"),
):
    cfg = load_config()
    if base_url is not None:
        cfg.base_url = normalize_base_url(base_url, warn=True)
    saved = save_config(cfg)
    console.ok(f"Settings updated: {saved}")


@app.command("reset")
def reset_settings(
        yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
):
    if not yes and not typer.confirm("Reset settings and forget the stored token?", default=False):
        raise typer.Exit(code=0)
    saved = save_config(default_config())
    console.ok(f"Settings reset: {saved}")
