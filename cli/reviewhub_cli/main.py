from __future__ import annotations

import typer

from .auth_state import resolve_auth_context
from .commands import admin_cmd, auth_cmd, health_cmd, privacy_cmd, products_cmd, reviews_cmd, search_cmd, settings_cmd
from .logging_ import setup_logging


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="reviewhub",
        help="ReviewHub CLI",
        no_args_is_help=True,
    )

    ctx = resolve_auth_context(check_remote=False)

    # Always available
    app.add_typer(settings_cmd.app, name="settings")
    app.add_typer(auth_cmd.app, name="auth")
    app.add_typer(products_cmd.app, name="products")
    app.add_typer(reviews_cmd.app, name="reviews")
    app.add_typer(search_cmd.app, name="search")
    app.command("health")(health_cmd.health)

    if ctx.state != "no_token":
        app.command("whoami")(auth_cmd.whoami_impl)
        app.add_typer(privacy_cmd.app, name="privacy")
        # The backend enforces admin rights; the group is hidden only from anonymous users.
        app.add_typer(admin_cmd.app, name="admin")

    @app.callback()
    def _main(
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
    ):
        setup_logging(verbose)

    return app


app = _build_app()
