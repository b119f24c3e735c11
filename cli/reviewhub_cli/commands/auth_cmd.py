from __future__ import annotations

from pathlib import Path

import typer
from reviewhub_client import ApiError, NetworkError

from .. import console
from ..config import load_config, save_config
from ..http import fail, make_client
from .reviews_cmd import image_part

app = typer.Typer(help="Auth commands.")


def _extract_token(data) -> str | None:
    if isinstance(data, dict):
        token = data.get("access_token")
        if isinstance(token, str) and token:
            return token
    return None


@app.command("login")
def login(
        email: str = typer.Option(..., "--email", prompt=True, help="Account email."),
        password: str = typer.Option(..., "--password", prompt=True, hide_input=True, help="Account password."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.login(email=email, password=password)
    except (ApiError, NetworkError) as e:
        console.err(f"Login failed: {e}")
        raise typer.Exit(code=2)
    finally:
        client.close()

    token = _extract_token(data)
    if not token:
        console.err("Login failed: response did not include an access_token.")
        raise typer.Exit(code=2)

    cfg.auth.access_token = token
    cfg.auth.token_type = "bearer"
    save_path = save_config(cfg)
    console.ok(f"Login successful. Token saved to {save_path}.")


@app.command("logout")
def logout(
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    if cfg.auth.access_token:
        client = make_client(cfg, base_url_override=base_url)
        try:
            client.logout()
        except (ApiError, NetworkError) as e:
            console.warn(f"Server-side logout failed ({e}); clearing the local token anyway.")
        finally:
            client.close()

    cfg.auth.access_token = ""
    save_path = save_config(cfg)
    console.ok(f"Token cleared from {save_path}.")


@app.command("register")
def register(
        username: str = typer.Option(..., "--username", prompt=True, help="Public username."),
        email: str = typer.Option(..., "--email", prompt=True, help="Account email."),
        password: str = typer.Option(
            ..., "--password", prompt=True, hide_input=True, confirmation_prompt=True, help="Account password."
        ),
        first_name: str | None = typer.Option(None, "--first-name", help="First name."),
        last_name: str | None = typer.Option(None, "--last-name", help="Last name."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    user_data = {"username": username, "email": email, "password": password}
    if first_name:
        user_data["first_name"] = first_name
    if last_name:
        user_data["last_name"] = last_name

    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.register(user_data)
    except (ApiError, NetworkError) as e:
        fail("register", e)
    finally:
        client.close()

    message = data.get("message") if isinstance(data, dict) else None
    console.ok(message or "Account created.")
    token = _extract_token(data)
    if token:
        cfg.auth.access_token = token
        save_config(cfg)
        console.info("Logged in as the new account.")
    else:
        console.info("Check your inbox for the verification email, then run `reviewhub auth login`.")


def whoami_impl(
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.get_profile()
    except (ApiError, NetworkError) as e:
        fail("fetch profile", e)
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    user = data.get("user") if isinstance(data, dict) and isinstance(data.get("user"), dict) else data
    if not isinstance(user, dict):
        console.print_json(data)
        return
    console.console.print(f"id: {user.get('id')}")
    console.console.print(f"username: {user.get('username')}")
    console.console.print(f"email: {user.get('email')}")
    console.console.print(f"admin: {'yes' if user.get('is_admin') else 'no'}")
    console.console.print(f"verified: {'yes' if user.get('email_verified') else 'no'}")


app.command("whoami")(whoami_impl)


@app.command("verify-email")
def verify_email(
        token: str = typer.Argument(..., help="Verification token from the email."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.verify_email(token)
    except (ApiError, NetworkError) as e:
        fail("verify email", e)
    finally:
        client.close()
    console.ok("Email verified.")


@app.command("resend-verification")
def resend_verification(
        email: str = typer.Option(..., "--email", prompt=True, help="Account email."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.resend_verification_email(email)
    except (ApiError, NetworkError) as e:
        fail("resend verification email", e)
    finally:
        client.close()
    console.ok(f"Verification email sent to {email}.")


@app.command("forgot-password")
def forgot_password(
        email: str = typer.Option(..., "--email", prompt=True, help="Account email."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.forgot_password(email)
    except (ApiError, NetworkError) as e:
        fail("request a password reset", e)
    finally:
        client.close()
    console.ok("If the account exists, a reset link is on its way.")


@app.command("reset-password")
def reset_password(
        token: str = typer.Argument(..., help="Reset token from the email."),
        password: str = typer.Option(
            ..., "--password", prompt=True, hide_input=True, confirmation_prompt=True, help="New password."
        ),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.reset_password(token, password)
    except (ApiError, NetworkError) as e:
        fail("reset password", e)
    finally:
        client.close()
    console.ok("Password updated. You can log in now.")


@app.command("change-password")
def change_password(
        current_password: str = typer.Option(
            ..., "--current-password", prompt=True, hide_input=True, help="Current password."
        ),
        new_password: str = typer.Option(
            ..., "--new-password", prompt=True, hide_input=True, confirmation_prompt=True, help="New password."
        ),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.change_password({"current_password": current_password, "new_password": new_password})
    except (ApiError, NetworkError) as e:
        fail("change password", e)
    finally:
        client.close()
    console.ok("Password changed.")


@app.command("avatar")
def upload_avatar(
        image: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Profile picture."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.upload_profile_image(image_part(image))
    except (ApiError, NetworkError) as e:
        fail("upload profile image", e)
    finally:
        client.close()
    console.ok("Profile image updated.")


@app.command("update-profile")
def update_profile(
        first_name: str | None = typer.Option(None, "--first-name", help="First name."),
        last_name: str | None = typer.Option(None, "--last-name", help="Last name."),
        bio: str | None = typer.Option(None, "--bio", help="Short bio."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    profile_data = {k: v for k, v in (("first_name", first_name), ("last_name", last_name), ("bio", bio)) if v}
    if not profile_data:
        console.err("Nothing to update. Pass --first-name, --last-name or --bio.")
        raise typer.Exit(code=2)

    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.update_profile(profile_data)
    except (ApiError, NetworkError) as e:
        fail("update profile", e)
    finally:
        client.close()
    console.ok("Profile updated.")
