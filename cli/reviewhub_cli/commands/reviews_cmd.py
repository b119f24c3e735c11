from __future__ import annotations

import mimetypes
from pathlib import Path

import typer
from reviewhub_client import ApiError, NetworkError
from rich.table import Table

from .. import console
from ..config import load_config
from ..formatting import format_date, format_rating, items_of, truncate
from ..http import fail, make_client

app = typer.Typer(help="Read, write and vote on reviews.")


def image_part(path: Path) -> tuple[str, bytes, str]:
    content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return path.name, path.read_bytes(), content_type


@app.command("list")
def list_reviews(
        product_id: int | None = typer.Option(None, "--product", help="Only reviews for this product."),
        user_id: int | None = typer.Option(None, "--user", help="Only reviews by this user."),
        sort_by: str | None = typer.Option(None, "--sort-by", help="created_at, rating or helpful_count."),
        page: int | None = typer.Option(None, "--page", help="Page number."),
        per_page: int | None = typer.Option(None, "--per-page", help="Page size."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        if user_id is not None:
            data = client.get_user_reviews(user_id, product_id=product_id, sort_by=sort_by, page=page,
                                           per_page=per_page)
        else:
            data = client.get_reviews(product_id=product_id, sort_by=sort_by, page=page, per_page=per_page)
    except (ApiError, NetworkError) as e:
        fail("list reviews", e)
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    reviews = items_of(data, "reviews")
    if not reviews:
        console.info("No reviews found.")
        return

    table = Table(title="Reviews")
    table.add_column("id", style="bold")
    table.add_column("product")
    table.add_column("rating")
    table.add_column("title")
    table.add_column("helpful", justify="right")
    table.add_column("created")
    for r in reviews:
        if not isinstance(r, dict):
            continue
        table.add_row(
            str(r.get("id", "-")),
            str(r.get("product_id", "-")),
            format_rating(r.get("rating")),
            truncate(r.get("title"), 40) or "-",
            str(r.get("helpful_count", 0)),
            format_date(r.get("created_at")),
        )
    console.console.print(table)


@app.command("show")
def show_review(
        review_id: int = typer.Argument(..., help="Review ID."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.get_review(review_id)
    except (ApiError, NetworkError) as e:
        fail("fetch review", e)
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    review = data.get("review") if isinstance(data, dict) and isinstance(data.get("review"), dict) else data
    if not isinstance(review, dict):
        console.print_json(data)
        return
    console.ok(f"Review {review.get('id')}: {review.get('title') or '(untitled)'}")
    console.console.print(f"  product: {review.get('product_id')}")
    console.console.print(f"  rating: {format_rating(review.get('rating'))}")
    console.console.print(f"  created: {format_date(review.get('created_at'))}")
    console.console.print(f"  helpful: {review.get('helpful_count', 0)}")
    if review.get("content"):
        console.console.print(f"  {review.get('content')}")


@app.command("create")
def create_review(
        product_id: int = typer.Option(..., "--product", help="Product being reviewed."),
        rating: int = typer.Option(..., "--rating", min=1, max=5, help="Rating from 1 to 5."),
        content: str = typer.Option(..., "--content", prompt=True, help="Review text."),
        title: str | None = typer.Option(None, "--title", help="Short headline."),
        pros: str | None = typer.Option(None, "--pros", help="What you liked."),
        cons: str | None = typer.Option(None, "--cons", help="What you did not like."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    review_data = {"product_id": product_id, "rating": rating, "content": content}
    for key, value in (("title", title), ("pros", pros), ("cons", cons)):
        if value:
            review_data[key] = value

    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.create_review(review_data)
    except (ApiError, NetworkError) as e:
        fail("create review", e)
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return
    review = data.get("review") if isinstance(data, dict) else None
    review_id = review.get("id") if isinstance(review, dict) else None
    console.ok(f"Review created{f' (id={review_id})' if review_id is not None else ''}.")


@app.command("delete")
def delete_review(
        review_id: int = typer.Argument(..., help="Review ID."),
        yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    if not yes and not typer.confirm(f"Delete review {review_id}?", default=False):
        raise typer.Exit(code=0)

    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.delete_review(review_id)
    except (ApiError, NetworkError) as e:
        fail("delete review", e)
    finally:
        client.close()
    console.ok(f"Review {review_id} deleted.")


@app.command("vote")
def vote_review(
        review_id: int = typer.Argument(..., help="Review ID."),
        helpful: bool = typer.Option(True, "--helpful/--not-helpful", help="Mark as helpful or not."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.vote_review(review_id, helpful)
    except (ApiError, NetworkError) as e:
        fail("vote on review", e)
    finally:
        client.close()
    console.ok(f"Voted {'helpful' if helpful else 'not helpful'} on review {review_id}.")


@app.command("unvote")
def remove_vote(
        review_id: int = typer.Argument(..., help="Review ID."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.remove_vote(review_id)
    except (ApiError, NetworkError) as e:
        fail("remove vote", e)
    finally:
        client.close()
    console.ok(f"Vote removed from review {review_id}.")


@app.command("add-image")
def add_image(
        review_id: int = typer.Argument(..., help="Review ID."),
        images: list[Path] = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Image files."),
        caption: str = typer.Option("", "--caption", help="Caption (single image only)."),
        alt_text: str = typer.Option("", "--alt-text", help="Alt text (single image only)."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        if len(images) == 1:
            client.upload_review_image(image_part(images[0]), review_id=review_id, alt_text=alt_text,
                                       caption=caption)
        else:
            client.upload_multiple_review_images([image_part(p) for p in images], review_id=review_id)
    except (ApiError, NetworkError) as e:
        fail("upload images", e)
    finally:
        client.close()
    console.ok(f"Uploaded {len(images)} image(s) to review {review_id}.")
