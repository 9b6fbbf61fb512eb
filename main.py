# main.py

"""Entry point for the sheet_shop command-line storefront."""

import argparse
import asyncio
import logging
import sys

from sheet_shop.config.logging_config import setup_logging

logger = logging.getLogger("sheet_shop.main")


def _add_format_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="table",
        dest="output_format",
        help="Output format (default: table).",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="sheet_shop",
        description="Browse the spreadsheet catalog and manage your cart.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("list", "Show every product in the catalog."),
        ("featured", "Show featured products."),
        ("favorites", "Show the owner's favorite products."),
    ):
        _add_format_option(commands.add_parser(name, help=help_text))

    category = commands.add_parser(
        "category", help="Show products in one category ('all' for every)."
    )
    category.add_argument("argument", metavar="CATEGORY")
    _add_format_option(category)

    search = commands.add_parser(
        "search", help="Search name, description and category."
    )
    search.add_argument("argument", metavar="TERM")
    _add_format_option(search)

    add = commands.add_parser("add", help="Add products to the cart by id.")
    add.add_argument("product_ids", nargs="+", metavar="ID")

    cart = commands.add_parser("cart", help="Show the cart and its total.")
    _add_format_option(cart)

    commands.add_parser("clear-cart", help="Empty the persisted cart.")
    return parser


def _dispatch(args: argparse.Namespace) -> int:
    """Run the selected command and return its exit code."""
    from sheet_shop.cli.runner import (
        VIEWS,
        cli_add,
        cli_browse,
        cli_cart,
        cli_clear_cart,
    )

    if args.command in VIEWS:
        return asyncio.run(
            cli_browse(
                view=args.command,
                argument=getattr(args, "argument", None),
                output_format=args.output_format,
            )
        )
    if args.command == "add":
        return asyncio.run(cli_add(args.product_ids))
    if args.command == "cart":
        return cli_cart(args.output_format)
    return cli_clear_cart()


def main(argv: list[str] | None = None) -> None:
    """Parse arguments, run one command and exit with its code."""
    log_file = setup_logging()
    logger.info("sheet_shop starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        exit_code = _dispatch(args)
    except Exception:
        logger.critical("Fatal error during CLI run", exc_info=True)
        raise
    finally:
        logger.info("sheet_shop shutting down")
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
