# sheet_shop/services/cart_store.py

"""Persisted shopping cart keyed by canonical product id."""

import json
import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from sheet_shop.models.product import MISSING_ID, CartLine, Product
from sheet_shop.services.notifier import LogNotifier, Notification, Notifier
from sheet_shop.storage.cart_repository import CartRepository

logger = logging.getLogger("sheet_shop.cart")

_ID_RE = re.compile(r"[+-]?\d+")


class AddOutcome(str, Enum):
    """What an ``add_to_cart`` call did to the cart."""

    ADDED = "added"
    INCREMENTED = "incremented"
    NOT_FOUND = "not_found"


@dataclass
class AddResult:
    """Result of a single ``add_to_cart`` call."""

    outcome: AddOutcome
    product: Product | None = None
    quantity: int = 0
    cart_count: int = 0

    @property
    def ok(self) -> bool:
        return self.outcome is not AddOutcome.NOT_FOUND


class CatalogProvider(Protocol):
    """Anything that can resolve a canonical id to a product."""

    async def find(self, product_id: int) -> Product | None: ...


class StaticCatalog:
    """Catalog provider over an already-loaded product list."""

    def __init__(self, products: Iterable[Product]) -> None:
        self._by_id: dict[int, Product] = {}
        for product in products:
            # First row wins when the sheet repeats an id
            self._by_id.setdefault(product.id, product)

    async def find(self, product_id: int) -> Product | None:
        return self._by_id.get(product_id)


def canonical_id(value: Any) -> int | None:
    """Map an incoming product id to the single ``int`` form.

    Ints pass through and digit strings (optionally signed, surrounding
    whitespace allowed) are parsed.  Anything else yields ``None``.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if _ID_RE.fullmatch(text):
            return int(text)
    return None


def serialize_cart(lines: Iterable[CartLine]) -> str:
    """Encode cart lines as the stored JSON array."""
    return json.dumps(
        [line.to_dict() for line in lines], ensure_ascii=False
    )


def deserialize_cart(blob: str | None) -> list[CartLine]:
    """Decode a stored cart, treating anything unreadable as empty.

    Malformed entries are dropped individually.  Entries repeating an
    id are merged into the first one so the one-line-per-id rule holds
    even for externally edited storage.
    """
    if blob is None:
        return []
    try:
        data: Any = json.loads(blob)
    except ValueError as exc:
        logger.warning("Corrupt cart state, starting empty: %s", exc)
        return []
    if data is None:
        return []
    if not isinstance(data, list):
        logger.warning(
            "Cart state is %s, not a list; starting empty",
            type(data).__name__,
        )
        return []

    lines: list[CartLine] = []
    index_by_id: dict[int, int] = {}
    for position, item in enumerate(data):
        try:
            if not isinstance(item, dict):
                msg = f"expected an object, got {type(item).__name__}"
                raise TypeError(msg)
            line = CartLine.from_dict(item)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning(
                "Dropped malformed cart line %d: %s", position, exc
            )
            continue
        if line.id in index_by_id:
            logger.warning(
                "Merged duplicate cart line for product %d", line.id
            )
            lines[index_by_id[line.id]].quantity += line.quantity
            continue
        index_by_id[line.id] = len(lines)
        lines.append(line)
    return lines


class CartStore:
    """Read, grow and count the persisted cart.

    Lines only ever appear or grow by one; there is no removal.  Every
    mutation is written back to the repository before the call returns.
    """

    def __init__(
        self,
        repository: CartRepository,
        catalog: CatalogProvider,
        notifier: Notifier | None = None,
        on_count: Callable[[int], None] | None = None,
    ) -> None:
        self.repository = repository
        self.catalog = catalog
        self.notifier: Notifier = notifier or LogNotifier()
        self.on_count = on_count

    def get_cart(self) -> list[CartLine]:
        """Return the persisted cart; missing or corrupt state is empty."""
        try:
            blob = self.repository.load()
        except OSError as exc:
            logger.warning("Cart storage unreadable: %s", exc)
            return []
        return deserialize_cart(blob)

    def _save(self, lines: list[CartLine]) -> None:
        self.repository.save(serialize_cart(lines))

    async def add_to_cart(self, product_id: Any) -> AddResult:
        """Add one unit of a product, merging with an existing line.

        Unknown ids, and the reserved missing-id value, leave the stored cart untouched and produce a
        ``NOT_FOUND`` result plus an error notification.
        """
        key = canonical_id(product_id)
        product = None
        if key is not None and key != MISSING_ID:
            product = await self.catalog.find(key)

        if product is None:
            logger.error("Product not found: %r", product_id)
            self.notifier.notify(
                Notification("Product not found!", level="error")
            )
            return AddResult(
                outcome=AddOutcome.NOT_FOUND,
                cart_count=self.update_cart_count(),
            )

        # No awaits between load and save
        lines = self.get_cart()
        existing = next(
            (line for line in lines if line.id == product.id), None
        )
        if existing is not None:
            existing.quantity += 1
            quantity = existing.quantity
            outcome = AddOutcome.INCREMENTED
            message = f"Added another {product.name} to cart!"
        else:
            lines.append(CartLine(product=product, quantity=1))
            quantity = 1
            outcome = AddOutcome.ADDED
            message = f"{product.name} added to cart!"

        self._save(lines)
        logger.info(
            "Cart %s product %d (quantity=%d)",
            outcome.value,
            product.id,
            quantity,
        )
        self.notifier.notify(Notification(message))

        return AddResult(
            outcome=outcome,
            product=product,
            quantity=quantity,
            cart_count=self.update_cart_count(),
        )

    def update_cart_count(self) -> int:
        """Total units in the cart, pushed to the badge callback if set."""
        total = sum(line.quantity for line in self.get_cart())
        if self.on_count is not None:
            self.on_count(total)
        return total

    def cart_total(self) -> float:
        """Cart value at stored prices, rounded to cents."""
        return round(
            sum(line.subtotal for line in self.get_cart()), 2
        )
