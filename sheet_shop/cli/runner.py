# sheet_shop/cli/runner.py

"""Headless CLI for browsing the catalog and filling the cart."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from sheet_shop.catalog.loader import load_products
from sheet_shop.filters.product_filter import ProductFilter, format_price
from sheet_shop.models.product import CartLine, Product
from sheet_shop.services.cart_store import CartStore, StaticCatalog
from sheet_shop.services.notifier import ConsoleNotifier
from sheet_shop.storage.cart_repository import JsonFileCartRepository
from sheet_shop.storage.catalog_cache import CatalogCache

logger = logging.getLogger("sheet_shop.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)

VIEWS: tuple[str, ...] = (
    "list",
    "featured",
    "favorites",
    "category",
    "search",
)

_EMPTY_MESSAGES: dict[str, str] = {
    "list": "No products available. Please check your Google Sheets data.",
    "featured": "No featured products available",
    "favorites": "No favorite products available",
    "category": "No products in this category",
    "search": "No products found",
}


def select_products(
    products: list[Product],
    view: str,
    argument: str | None = None,
) -> list[Product]:
    """Apply the filter behind a CLI view to the loaded catalog."""
    if view == "featured":
        return ProductFilter.featured(products)
    if view == "favorites":
        return ProductFilter.favorites(products)
    if view == "category":
        return ProductFilter.by_category(products, argument)
    if view == "search":
        return ProductFilter.search(products, argument or "")
    return list(products)


def _products_to_dicts(products: list[Product]) -> list[dict[str, object]]:
    """Serialise a product list to plain dicts for JSON output."""
    return [
        {
            "id": p.id,
            "name": p.name,
            "category": p.category,
            "description": p.description,
            "price": p.price,
            "unit": p.unit,
            "image": p.image,
            "featured": p.featured,
            "favorite": p.favorite,
        }
        for p in products
    ]


def _print_products(products: list[Product]) -> None:
    """Render a Rich table of products in catalog order."""
    table = Table(
        title="Products",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Name", max_width=40)
    table.add_column("Category", style="magenta")
    table.add_column("Description", max_width=60, overflow="fold")
    table.add_column("Price", justify="right", style="green")

    for p in products:
        table.add_row(
            str(p.id),
            p.name,
            p.category,
            p.description,
            format_price(p),
        )

    Console().print(table)


def _print_cart(lines: list[CartLine], total: float) -> None:
    """Render the cart with line subtotals and the grand total."""
    table = Table(
        title="Cart",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Name", max_width=40)
    table.add_column("Price", justify="right")
    table.add_column("Qty", justify="right")
    table.add_column("Subtotal", justify="right", style="green")

    for line in lines:
        table.add_row(
            str(line.id),
            line.product.name,
            format_price(line.product),
            str(line.quantity),
            f"${line.subtotal:.2f}",
        )
    table.add_row("", "[bold]Total[/bold]", "", "", f"[bold]${total:.2f}[/bold]")

    Console().print(table)


def build_cart_store(cache: CatalogCache | None = None) -> CartStore:
    """Wire the file-backed cart to a cached catalog and console toasts."""
    return CartStore(
        repository=JsonFileCartRepository(),
        catalog=cache or CatalogCache(load_products),
        notifier=ConsoleNotifier(_err),
        on_count=lambda count: _err.print(
            f"[dim]Cart items: {count}[/dim]"
        ),
    )


async def cli_browse(
    view: str,
    argument: str | None,
    output_format: str,
) -> int:
    """Load the catalog, apply a view and print it (0=ok, 1=empty)."""
    products = await load_products()
    selected = select_products(products, view, argument)

    if not selected:
        _err.print(f"[yellow]{_EMPTY_MESSAGES[view]}[/yellow]")
        return 1

    if output_format == "table":
        _print_products(selected)
    else:
        json.dump(
            _products_to_dicts(selected),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    return 0


async def cli_add(product_ids: list[str]) -> int:
    """Add each id to the cart once; 1 if any id was not found."""
    store = build_cart_store()
    exit_code = 0
    for product_id in product_ids:
        result = await store.add_to_cart(product_id)
        if not result.ok:
            exit_code = 1
    return exit_code


def cli_cart(output_format: str) -> int:
    """Print the persisted cart and its total."""
    store = CartStore(
        repository=JsonFileCartRepository(),
        catalog=StaticCatalog([]),
    )
    lines = store.get_cart()
    total = store.cart_total()

    if output_format == "table":
        if not lines:
            _err.print("[yellow]Your cart is empty.[/yellow]")
            return 0
        _print_cart(lines, total)
    else:
        json.dump(
            {
                "items": [line.to_dict() for line in lines],
                "count": sum(line.quantity for line in lines),
                "total": total,
            },
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    return 0


def cli_clear_cart() -> int:
    """Drop the persisted cart key."""
    removed = JsonFileCartRepository().clear()
    if removed:
        _err.print("[green]✓ Cart cleared[/green]")
    else:
        _err.print("[dim]Cart was already empty[/dim]")
    return 0
