# tests/test_runner.py

"""Tests for the headless CLI runner and entry point."""

import asyncio
import io
import json
import unittest
from unittest.mock import AsyncMock, patch

import main
from sheet_shop.cli import runner
from sheet_shop.models.product import Product
from sheet_shop.storage.cart_repository import JsonFileCartRepository

CATALOG = [
    Product(id=1, name="Apple", category="Fruit", price=0.5, unit="each", featured=True),
    Product(id=2, name="Honey", category="Pantry", price=8.0, unit="jar", favorite=True),
]

LOAD_PATH = "sheet_shop.cli.runner.load_products"


class TestSelectProducts(unittest.TestCase):
    """select_products maps views to filters."""

    def test_views(self) -> None:
        cases = {
            ("list", None): [1, 2],
            ("featured", None): [1],
            ("favorites", None): [2],
            ("category", "fruit"): [1],
            ("search", "hon"): [2],
        }
        for (view, arg), expected in cases.items():
            with self.subTest(view=view):
                selected = runner.select_products(CATALOG, view, arg)
                self.assertEqual([p.id for p in selected], expected)


class TestCliBrowse(unittest.TestCase):
    """cli_browse output and exit codes."""

    def test_json_output(self) -> None:
        out = io.StringIO()
        with patch(LOAD_PATH, AsyncMock(return_value=CATALOG)), patch(
            "sys.stdout", out
        ):
            code = asyncio.run(runner.cli_browse("featured", None, "json"))
        self.assertEqual(code, 0)
        data = json.loads(out.getvalue())
        self.assertEqual([d["name"] for d in data], ["Apple"])
        self.assertEqual(data[0]["price"], 0.5)

    def test_empty_catalog_exit_code(self) -> None:
        with patch(LOAD_PATH, AsyncMock(return_value=[])):
            code = asyncio.run(runner.cli_browse("list", None, "table"))
        self.assertEqual(code, 1)

    def test_no_search_hits_exit_code(self) -> None:
        with patch(LOAD_PATH, AsyncMock(return_value=CATALOG)):
            code = asyncio.run(runner.cli_browse("search", "durian", "table"))
        self.assertEqual(code, 1)


class TestCliCart(unittest.TestCase):
    """cli_add / cli_cart / cli_clear_cart against the temp cart file."""

    def test_add_then_show(self) -> None:
        loader = AsyncMock(return_value=CATALOG)
        with patch(LOAD_PATH, loader):
            code = asyncio.run(runner.cli_add(["1", "1", "2"]))
        self.assertEqual(code, 0)
        # One catalog fetch serves every id in the command
        self.assertEqual(loader.await_count, 1)

        out = io.StringIO()
        with patch("sys.stdout", out):
            self.assertEqual(runner.cli_cart("json"), 0)
        data = json.loads(out.getvalue())
        self.assertEqual(
            [(i["id"], i["quantity"]) for i in data["items"]],
            [(1, 2), (2, 1)],
        )
        self.assertEqual(data["count"], 3)
        self.assertEqual(data["total"], 9.0)

    def test_add_unknown_id_fails(self) -> None:
        with patch(LOAD_PATH, AsyncMock(return_value=CATALOG)):
            code = asyncio.run(runner.cli_add(["99"]))
        self.assertEqual(code, 1)
        self.assertIsNone(JsonFileCartRepository().load())

    def test_clear_cart(self) -> None:
        with patch(LOAD_PATH, AsyncMock(return_value=CATALOG)):
            asyncio.run(runner.cli_add(["2"]))
        self.assertEqual(runner.cli_clear_cart(), 0)
        self.assertIsNone(JsonFileCartRepository().load())

    def test_empty_cart_table(self) -> None:
        self.assertEqual(runner.cli_cart("table"), 0)

    def test_show_cart_never_fetches_catalog(self) -> None:
        """Reading the cart works from stored lines alone."""
        loader = AsyncMock(return_value=CATALOG)
        with patch(LOAD_PATH, loader), patch("sys.stdout", io.StringIO()):
            self.assertEqual(runner.cli_cart("json"), 0)
        loader.assert_not_called()


class TestMain(unittest.TestCase):
    """main() argument parsing and exit codes."""

    def test_parser_requires_command(self) -> None:
        with self.assertRaises(SystemExit):
            main._build_parser().parse_args([])

    def test_search_args(self) -> None:
        args = main._build_parser().parse_args(
            ["search", "honey", "-f", "json"]
        )
        self.assertEqual(args.command, "search")
        self.assertEqual(args.argument, "honey")
        self.assertEqual(args.output_format, "json")

    def test_add_args(self) -> None:
        args = main._build_parser().parse_args(["add", "1", "2"])
        self.assertEqual(args.product_ids, ["1", "2"])

    def test_main_exits_with_command_code(self) -> None:
        with patch(LOAD_PATH, AsyncMock(return_value=[])), patch(
            "main.setup_logging"
        ):
            with self.assertRaises(SystemExit) as ctx:
                main.main(["list"])
        self.assertEqual(ctx.exception.code, 1)


if __name__ == "__main__":
    unittest.main()
