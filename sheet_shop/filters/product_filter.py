# sheet_shop/filters/product_filter.py

"""Category, search and highlight filters over the loaded catalog."""

import logging

from sheet_shop.models.product import Product

logger = logging.getLogger("sheet_shop.filters")

ALL_CATEGORIES = "all"


class ProductFilter:
    """Order-preserving filters over a normalised product list."""

    @staticmethod
    def by_category(
        products: list[Product],
        category: str | None,
    ) -> list[Product]:
        """Keep products whose category equals *category*, ignoring case.

        ``None``, an empty string and ``"all"`` keep everything.
        """
        if not category or category.lower() == ALL_CATEGORIES:
            return list(products)

        wanted = category.lower()
        kept = [p for p in products if p.category.lower() == wanted]
        logger.debug(
            "Category '%s' matched %d of %d products",
            category,
            len(kept),
            len(products),
        )
        return kept

    @staticmethod
    def search(
        products: list[Product],
        term: str,
    ) -> list[Product]:
        """Case-insensitive substring match on name, description, category."""
        needle = term.lower()
        kept = [
            p
            for p in products
            if needle in p.name.lower()
            or needle in p.description.lower()
            or needle in p.category.lower()
        ]
        logger.debug(
            "Search '%s' matched %d of %d products",
            term,
            len(kept),
            len(products),
        )
        return kept

    @staticmethod
    def featured(products: list[Product]) -> list[Product]:
        return [p for p in products if p.featured]

    @staticmethod
    def favorites(products: list[Product]) -> list[Product]:
        return [p for p in products if p.favorite]


def format_price(product: Product) -> str:
    """Render a price like ``$12.50 / kg`` (unit omitted when blank)."""
    price = f"${product.price:.2f}"
    return f"{price} / {product.unit}" if product.unit else price
