from __future__ import annotations

from pathlib import Path

import typer
from reviewhub_client import ApiError, NetworkError

from .. import console
from ..config import load_config
from ..formatting import items_of
from ..http import fail, make_client
from .products_cmd import show_products
from .reviews_cmd import image_part

app = typer.Typer(help="Voice and visual product search.")


@app.command("voice")
def voice_search(
        text: str = typer.Argument(..., help="Transcribed voice query, e.g. 'cheap wireless headphones'."),
        parse_only: bool = typer.Option(False, "--parse-only", help="Only show how the query is understood."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.process_voice_query(text) if parse_only else client.voice_search(text)
    except (ApiError, NetworkError) as e:
        fail("run voice search", e)
    finally:
        client.close()

    if parse_only:
        console.print_json(data)
        return
    show_products(f"Results for '{text}'", data, json_out)


@app.command("suggest")
def suggest(
        partial_text: str = typer.Argument(..., help="Beginning of a query."),
        limit: int = typer.Option(5, "--limit", help="Max suggestions."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.get_voice_search_suggestions(partial_text, limit=limit)
    except (ApiError, NetworkError) as e:
        fail("fetch suggestions", e)
    finally:
        client.close()

    suggestions = items_of(data, "suggestions")
    if not suggestions:
        console.info("No suggestions.")
        return
    for s in suggestions:
        console.console.print(f"  {s.get('text') if isinstance(s, dict) else s}")


@app.command("visual")
def visual_search(
        image: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Query image."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        uploaded = client.upload_image_for_visual_search(image_part(image))
        search_id = uploaded.get("search_id") if isinstance(uploaded, dict) else None
        if not search_id:
            console.err("Visual search upload did not return a search_id.")
            raise typer.Exit(code=2)
        data = client.search_visually_similar(search_id)
    except (ApiError, NetworkError) as e:
        fail("run visual search", e)
    finally:
        client.close()

    show_products("Visually similar", data, json_out)
