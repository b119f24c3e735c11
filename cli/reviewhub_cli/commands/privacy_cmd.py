from __future__ import annotations

from pathlib import Path

import typer
from reviewhub_client import ApiError, NetworkError
from rich.table import Table

from .. import console
from ..config import load_config
from ..formatting import format_date, items_of
from ..http import fail, make_client

app = typer.Typer(help="GDPR consent, data export and privacy settings.")

EXPORT_FORMATS = ("json", "csv", "xml")


@app.command("consents")
def list_consents(
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.get_user_consents()
    except (ApiError, NetworkError) as e:
        fail("fetch consents", e)
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    table = Table(title="Consents")
    table.add_column("type", style="bold")
    table.add_column("granted")
    table.add_column("updated")
    for c in items_of(data, "consents"):
        if not isinstance(c, dict):
            continue
        table.add_row(
            str(c.get("consent_type") or "-"),
            "yes" if c.get("granted") else "no",
            format_date(c.get("updated_at") or c.get("created_at")),
        )
    console.console.print(table)


@app.command("consent")
def grant_consent(
        consent_type: str = typer.Argument(..., help="Consent type, e.g. marketing, analytics."),
        granted: bool = typer.Option(True, "--grant/--deny", help="Grant or deny the consent."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.record_consent(consent_type, granted)
    except (ApiError, NetworkError) as e:
        fail("record consent", e)
    finally:
        client.close()
    console.ok(f"Consent '{consent_type}' {'granted' if granted else 'denied'}.")


@app.command("withdraw")
def withdraw_consent(
        consent_type: str = typer.Argument(..., help="Consent type to withdraw."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.withdraw_consent(consent_type)
    except (ApiError, NetworkError) as e:
        fail("withdraw consent", e)
    finally:
        client.close()
    console.ok(f"Consent '{consent_type}' withdrawn.")


@app.command("report")
def privacy_report(
        retention: bool = typer.Option(False, "--retention", help="Show data retention info instead."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.get_data_retention_info() if retention else client.get_privacy_report()
    except (ApiError, NetworkError) as e:
        fail("fetch privacy report", e)
    finally:
        client.close()
    console.print_json(data)


@app.command("export")
def request_export(
        export_format: str = typer.Option("json", "--format", help="Export format: json, csv or xml."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    export_format = export_format.strip().lower()
    if export_format not in EXPORT_FORMATS:
        console.err(f"Unsupported format: {export_format}. Use one of: {', '.join(EXPORT_FORMATS)}.")
        raise typer.Exit(code=2)

    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.request_data_export(export_format)
    except (ApiError, NetworkError) as e:
        fail("request data export", e)
    finally:
        client.close()

    request = data.get("export_request") if isinstance(data, dict) else None
    request_id = request.get("id") if isinstance(request, dict) else None
    console.ok(f"Export requested{f' (id={request_id})' if request_id is not None else ''}.")
    console.info("Run `reviewhub privacy exports` to check its status.")


@app.command("exports")
def list_exports(
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.get_export_requests()
    except (ApiError, NetworkError) as e:
        fail("list export requests", e)
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    table = Table(title="Export requests")
    table.add_column("id", style="bold")
    table.add_column("format")
    table.add_column("status")
    table.add_column("requested")
    table.add_column("expires")
    for r in items_of(data, "export_requests", "requests"):
        if not isinstance(r, dict):
            continue
        table.add_row(
            str(r.get("id", "-")),
            str(r.get("export_format") or "-"),
            str(r.get("status") or "-"),
            format_date(r.get("created_at")),
            format_date(r.get("expires_at")),
        )
    console.console.print(table)


@app.command("download")
def download_export(
        request_id: int = typer.Argument(..., help="Export request ID."),
        output: Path = typer.Option(..., "--output", "-o", dir_okay=False, help="Where to write the export."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        written = client.save_export(request_id, output)
    except (ApiError, NetworkError) as e:
        fail("download export", e)
    finally:
        client.close()
    console.ok(f"Saved {written} bytes to {output}.")


@app.command("delete-account")
def delete_account(
        reason: str | None = typer.Option(None, "--reason", help="Why the account should be deleted."),
        yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    if not yes and not typer.confirm("Request deletion of your account and all its data?", default=False):
        raise typer.Exit(code=0)

    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.request_data_deletion(reason)
    except (ApiError, NetworkError) as e:
        fail("request data deletion", e)
    finally:
        client.close()
    console.ok("Deletion requested. An administrator will process it.")


@app.command("settings")
def privacy_settings(
        set_values: list[str] = typer.Option(
            [], "--set", help="Update a setting, e.g. --set profile_visibility=private (repeatable)."
        ),
        reset: bool = typer.Option(False, "--reset", help="Restore default privacy settings."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    updates: dict[str, object] = {}
    for item in set_values:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            console.err(f"Invalid --set value: {item!r}. Expected key=value.")
            raise typer.Exit(code=2)
        updates[key.strip()] = _parse_setting(value.strip())

    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        if reset:
            data = client.reset_privacy_settings()
        elif updates:
            data = client.update_privacy_settings(updates)
        else:
            data = client.get_privacy_settings()
    except (ApiError, NetworkError) as e:
        fail("update privacy settings" if reset or updates else "fetch privacy settings", e)
    finally:
        client.close()
    console.print_json(data)


def _parse_setting(value: str):
    lowered = value.lower()
    if lowered in {"true", "yes", "on"}:
        return True
    if lowered in {"false", "no", "off"}:
        return False
    return value
