from __future__ import annotations

import typer
from reviewhub_client import ApiError, NetworkError
from rich.table import Table

from .. import console
from ..config import load_config
from ..formatting import format_rating, items_of, truncate
from ..http import fail, make_client

app = typer.Typer(help="Browse products, categories and recommendations.")


def _products_table(title: str, products: list) -> Table:
    table = Table(title=title)
    table.add_column("id", style="bold")
    table.add_column("name")
    table.add_column("brand")
    table.add_column("price", justify="right")
    table.add_column("rating")
    table.add_column("reviews", justify="right")
    for p in products:
        if not isinstance(p, dict):
            continue
        price = p.get("price")
        table.add_row(
            str(p.get("id", "-")),
            truncate(p.get("name"), 40) or "-",
            str(p.get("brand") or "-"),
            f"{float(price):.2f}" if isinstance(price, (int, float)) else "-",
            format_rating(p.get("average_rating")),
            str(p.get("review_count", "-")),
        )
    return table


def show_products(title: str, data, json_out: bool) -> None:
    if json_out:
        console.print_json(data)
        return
    products = items_of(data, "products", "recommendations", "similar_products", "trending_products")
    if not products:
        console.info("No products found.")
        return
    console.console.print(_products_table(title, products))
    pagination = data.get("pagination") if isinstance(data, dict) else None
    if isinstance(pagination, dict):
        console.info(
            f"page={pagination.get('page')} pages={pagination.get('pages')} total={pagination.get('total')}"
        )


@app.command("list")
def list_products(
        category_id: int | None = typer.Option(None, "--category", help="Filter by category id."),
        search: str = typer.Option("", "--search", help="Full-text search."),
        sort_by: str | None = typer.Option(None, "--sort-by", help="Sort field, e.g. name, price, rating."),
        order: str | None = typer.Option(None, "--order", help="asc or desc."),
        page: int | None = typer.Option(None, "--page", help="Page number."),
        per_page: int | None = typer.Option(None, "--per-page", help="Page size."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.get_products(
            category_id=category_id,
            search=search,
            sort_by=sort_by,
            order=order,
            page=page,
            per_page=per_page,
        )
    except (ApiError, NetworkError) as e:
        fail("list products", e)
    finally:
        client.close()

    show_products("Products", data, json_out)


@app.command("show")
def show_product(
        product_id: int = typer.Argument(..., help="Product ID."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.get_product(product_id)
    except (ApiError, NetworkError) as e:
        if isinstance(e, ApiError) and e.status_code == 404:
            console.err(f"Product {product_id} not found.")
            raise typer.Exit(code=2)
        fail("fetch product", e)
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    product = data.get("product") if isinstance(data, dict) and isinstance(data.get("product"), dict) else data
    if not isinstance(product, dict):
        console.print_json(data)
        return
    console.ok(f"{product.get('name')} (id={product.get('id')})")
    console.console.print(f"  brand: {product.get('brand') or '-'}")
    console.console.print(f"  price: {product.get('price', '-')}")
    console.console.print(f"  rating: {format_rating(product.get('average_rating'))} "
                          f"({product.get('review_count', 0)} reviews)")
    if product.get("description"):
        console.console.print(f"  {truncate(product.get('description'), 200)}")


@app.command("categories")
def list_categories(
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.get_categories()
    except (ApiError, NetworkError) as e:
        fail("list categories", e)
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    table = Table(title="Categories")
    table.add_column("id", style="bold")
    table.add_column("name")
    table.add_column("description")
    for c in items_of(data, "categories"):
        if not isinstance(c, dict):
            continue
        table.add_row(str(c.get("id", "-")), str(c.get("name") or "-"), truncate(c.get("description"), 50))
    console.console.print(table)


@app.command("similar")
def similar_products(
        product_id: int = typer.Argument(..., help="Product ID."),
        limit: int = typer.Option(5, "--limit", help="Max products to return."),
        visual: bool = typer.Option(False, "--visual", help="Use visual similarity instead of recommendations."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        if visual:
            data = client.get_visually_similar_products(product_id)
        else:
            data = client.get_similar_products(product_id, limit=limit)
    except (ApiError, NetworkError) as e:
        fail("fetch similar products", e)
    finally:
        client.close()

    show_products(f"Similar to {product_id}", data, json_out)


@app.command("trending")
def trending_products(
        category_id: int | None = typer.Option(None, "--category", help="Restrict to one category."),
        limit: int = typer.Option(10, "--limit", help="Max products to return."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.get_trending_products(category_id=category_id, limit=limit)
    except (ApiError, NetworkError) as e:
        fail("fetch trending products", e)
    finally:
        client.close()

    show_products("Trending", data, json_out)


@app.command("recommended")
def recommended_products(
        limit: int = typer.Option(10, "--limit", help="Max products to return."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.get_user_recommendations(limit=limit)
    except (ApiError, NetworkError) as e:
        fail("fetch recommendations", e)
    finally:
        client.close()

    show_products("Recommended for you", data, json_out)
