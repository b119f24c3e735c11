from __future__ import annotations

import typer
from reviewhub_client import ApiError, NetworkError
from rich.table import Table

from .. import console
from ..config import load_config
from ..formatting import format_date, format_rating, items_of, truncate
from ..http import fail, make_client

app = typer.Typer(help="Admin commands (admin only).")


@app.command("dashboard")
def dashboard(
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.get_admin_dashboard()
    except (ApiError, NetworkError) as e:
        fail("load admin dashboard", e)
    finally:
        client.close()

    stats = data.get("stats") if isinstance(data, dict) else None
    if json_out or not isinstance(stats, dict):
        console.print_json(data)
        return

    table = Table(title="Dashboard")
    table.add_column("metric", style="bold")
    table.add_column("value", justify="right")
    for key, value in stats.items():
        if isinstance(value, (dict, list)):
            continue
        table.add_row(key.replace("_", " "), str(value))
    console.console.print(table)


@app.command("users")
def list_users(
        search: str = typer.Option("", "--search", help="Match username or email."),
        page: int = typer.Option(1, "--page", help="Page number."),
        per_page: int = typer.Option(20, "--per-page", help="Page size."),
        sort_by: str = typer.Option("created_at", "--sort-by", help="Sort field."),
        order: str = typer.Option("desc", "--order", help="asc or desc."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.get_admin_users(page=page, per_page=per_page, search=search, sort_by=sort_by, order=order)
    except (ApiError, NetworkError) as e:
        fail("list users", e)
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    table = Table(title="Users")
    table.add_column("id", style="bold")
    table.add_column("username")
    table.add_column("email")
    table.add_column("admin")
    table.add_column("active")
    table.add_column("joined")
    for u in items_of(data, "users"):
        if not isinstance(u, dict):
            continue
        table.add_row(
            str(u.get("id", "-")),
            str(u.get("username") or "-"),
            str(u.get("email") or "-"),
            "yes" if u.get("is_admin") else "no",
            "yes" if u.get("is_active", True) else "no",
            format_date(u.get("created_at")),
        )
    console.console.print(table)


@app.command("user-status")
def user_status(
        user_id: int = typer.Argument(..., help="User ID."),
        active: bool = typer.Option(..., "--active/--inactive", help="Activate or deactivate the account."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.update_user_status(user_id, active)
    except (ApiError, NetworkError) as e:
        fail("update user status", e)
    finally:
        client.close()
    console.ok(f"User {user_id} {'activated' if active else 'deactivated'}.")


@app.command("reviews")
def list_reviews(
        search: str = typer.Option("", "--search", help="Match title or content."),
        product_id: int | None = typer.Option(None, "--product", help="Filter by product."),
        user_id: int | None = typer.Option(None, "--user", help="Filter by author."),
        rating: int | None = typer.Option(None, "--rating", min=1, max=5, help="Filter by rating."),
        page: int = typer.Option(1, "--page", help="Page number."),
        per_page: int = typer.Option(20, "--per-page", help="Page size."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.get_admin_reviews(
            page=page,
            per_page=per_page,
            search=search,
            product_id=product_id,
            user_id=user_id,
            rating=rating,
        )
    except (ApiError, NetworkError) as e:
        fail("list reviews", e)
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    table = Table(title="Reviews")
    table.add_column("id", style="bold")
    table.add_column("product")
    table.add_column("user")
    table.add_column("rating")
    table.add_column("title")
    table.add_column("active")
    for r in items_of(data, "reviews"):
        if not isinstance(r, dict):
            continue
        table.add_row(
            str(r.get("id", "-")),
            str(r.get("product_id", "-")),
            str(r.get("user_id", "-")),
            format_rating(r.get("rating")),
            truncate(r.get("title"), 40) or "-",
            "yes" if r.get("is_active", True) else "no",
        )
    console.console.print(table)


@app.command("review-status")
def review_status(
        review_ids: list[int] = typer.Argument(..., help="Review IDs."),
        active: bool = typer.Option(..., "--active/--inactive", help="Publish or hide the reviews."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        if len(review_ids) == 1:
            client.update_review_status(review_ids[0], active)
        else:
            client.bulk_update_reviews(review_ids, {"is_active": active})
    except (ApiError, NetworkError) as e:
        fail("update review status", e)
    finally:
        client.close()
    console.ok(f"{len(review_ids)} review(s) {'published' if active else 'hidden'}.")


@app.command("product-status")
def product_status(
        product_ids: list[int] = typer.Argument(..., help="Product IDs."),
        active: bool = typer.Option(..., "--active/--inactive", help="List or unlist the products."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        if len(product_ids) == 1:
            client.update_product_status(product_ids[0], active)
        else:
            client.bulk_update_products(product_ids, {"is_active": active})
    except (ApiError, NetworkError) as e:
        fail("update product status", e)
    finally:
        client.close()
    console.ok(f"{len(product_ids)} product(s) {'listed' if active else 'unlisted'}.")


@app.command("add-category")
def add_category(
        name: str = typer.Argument(..., help="Category name."),
        description: str | None = typer.Option(None, "--description", help="Short description."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    category_data = {"name": name}
    if description:
        category_data["description"] = description

    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.create_admin_category(category_data)
    except (ApiError, NetworkError) as e:
        fail("create category", e)
    finally:
        client.close()
    console.ok(f"Category '{name}' created.")


@app.command("analytics")
def analytics(
        days: int = typer.Option(30, "--days", help="Window in days."),
        voice: bool = typer.Option(False, "--voice", help="Voice search analytics instead of site analytics."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.get_voice_search_analytics(days=days) if voice else client.get_admin_analytics(days=days)
    except (ApiError, NetworkError) as e:
        fail("fetch analytics", e)
    finally:
        client.close()
    console.print_json(data)


@app.command("metrics")
def metrics(
        cache: bool = typer.Option(False, "--cache", help="Show cache statistics instead."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.get_cache_stats() if cache else client.get_performance_metrics()
    except (ApiError, NetworkError) as e:
        fail("fetch metrics", e)
    finally:
        client.close()
    console.print_json(data)


@app.command("cache-clear")
def cache_clear(
        pattern: str = typer.Option("*", "--pattern", help="Key pattern to evict."),
        warm: bool = typer.Option(False, "--warm", help="Warm the cache again afterwards."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.clear_cache(pattern)
        if warm:
            client.warm_cache()
    except (ApiError, NetworkError) as e:
        fail("clear cache", e)
    finally:
        client.close()
    console.ok(f"Cache cleared (pattern={pattern}){' and warmed' if warm else ''}.")


@app.command("optimize-db")
def optimize_db(
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.optimize_database()
    except (ApiError, NetworkError) as e:
        fail("optimize database", e)
    finally:
        client.close()
    console.print_json(data)


@app.command("deletion-requests")
def deletion_requests(
        status: str = typer.Option("pending", "--status", help="pending, processing, completed or rejected."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.admin_get_deletion_requests(status=status)
    except (ApiError, NetworkError) as e:
        fail("list deletion requests", e)
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    table = Table(title=f"Deletion requests ({status})")
    table.add_column("id", style="bold")
    table.add_column("user")
    table.add_column("reason")
    table.add_column("requested")
    for r in items_of(data, "deletion_requests", "requests"):
        if not isinstance(r, dict):
            continue
        table.add_row(
            str(r.get("id", "-")),
            str(r.get("user_id", "-")),
            truncate(r.get("reason"), 50) or "-",
            format_date(r.get("created_at")),
        )
    console.console.print(table)


@app.command("process-deletion")
def process_deletion(
        request_id: int = typer.Argument(..., help="Deletion request ID."),
        yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    if not yes and not typer.confirm(f"Permanently delete the data behind request {request_id}?", default=False):
        raise typer.Exit(code=0)

    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.admin_process_deletion_request(request_id)
    except (ApiError, NetworkError) as e:
        fail("process deletion request", e)
    finally:
        client.close()
    console.ok(f"Deletion request {request_id} processed.")


@app.command("exports")
def export_maintenance(
        cleanup: bool = typer.Option(False, "--cleanup", help="Remove expired export files."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.admin_cleanup_exports() if cleanup else client.admin_get_export_stats()
    except (ApiError, NetworkError) as e:
        fail("clean up exports" if cleanup else "fetch export stats", e)
    finally:
        client.close()
    console.print_json(data)


@app.command("visual-search")
def visual_search_maintenance(
        reindex: bool = typer.Option(False, "--reindex", help="Rebuild the product image index."),
        cleanup_days: int | None = typer.Option(None, "--cleanup", help="Drop query uploads older than N days."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        if reindex:
            data = client.admin_reindex_visual_search()
        elif cleanup_days is not None:
            data = client.admin_cleanup_visual_search(days=cleanup_days)
        else:
            data = client.get_visual_search_stats()
    except (ApiError, NetworkError) as e:
        fail("run visual search maintenance", e)
    finally:
        client.close()
    console.print_json(data)
