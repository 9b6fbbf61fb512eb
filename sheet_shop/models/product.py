# sheet_shop/models/product.py

"""Catalog and cart data models."""

import math
from dataclasses import asdict, dataclass, fields
from typing import Any

from sheet_shop.config.settings import Settings

# Sheet rows without a parsable id normalise to this value; it never
# identifies a real product.
MISSING_ID = 0


@dataclass(frozen=True)
class Product:
    """A single normalised catalog entry.

    Every field always holds a value; the normaliser substitutes the
    defaults below for anything missing or unparsable in the sheet.
    """

    id: int = MISSING_ID
    name: str = ""
    category: str = ""
    description: str = ""
    price: float = 0.0
    unit: str = ""
    image: str = Settings.DEFAULT_IMAGE
    featured: bool = False
    favorite: bool = False


PRODUCT_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(Product))

# Stored cart lines must carry these types; ints are accepted for price
_STORED_TYPES: dict[str, tuple[type, ...]] = {
    "id": (int,),
    "name": (str,),
    "category": (str,),
    "description": (str,),
    "price": (int, float),
    "unit": (str,),
    "image": (str,),
    "featured": (bool,),
    "favorite": (bool,),
}


def _check_stored_field(name: str, value: Any) -> None:
    """Raise ``TypeError``/``ValueError`` if a stored field is unusable."""
    allowed = _STORED_TYPES[name]
    wrong_bool = isinstance(value, bool) and bool not in allowed
    if wrong_bool or not isinstance(value, allowed):
        msg = f"{name} must be {allowed[0].__name__}, got {value!r}"
        raise TypeError(msg)
    if name == "price" and not (math.isfinite(value) and value >= 0):
        msg = f"price must be a non-negative number, got {value!r}"
        raise ValueError(msg)


@dataclass
class CartLine:
    """One product's entry in the cart with its own quantity."""

    product: Product
    quantity: int = 1

    @property
    def id(self) -> int:
        return self.product.id

    @property
    def subtotal(self) -> float:
        return self.product.price * self.quantity

    def to_dict(self) -> dict[str, Any]:
        """Flatten to the stored layout: product fields plus ``quantity``."""
        data = asdict(self.product)
        data["quantity"] = self.quantity
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CartLine":
        """Rebuild a line from its stored layout.

        ``id`` and ``quantity`` are required; other product fields may be
        missing and take their defaults, but a present field of the wrong
        type is rejected.  Raises ``KeyError``/``TypeError``/``ValueError``
        for malformed entries; the cart store decides how to treat them.
        """
        quantity = data["quantity"]
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            msg = f"quantity must be an int, got {quantity!r}"
            raise TypeError(msg)
        if quantity < 1:
            msg = f"quantity must be >= 1, got {quantity}"
            raise ValueError(msg)
        if "id" not in data:
            raise KeyError("id")
        values = {name: data[name] for name in PRODUCT_FIELDS if name in data}
        for name, value in values.items():
            _check_stored_field(name, value)
        if "price" in values:
            values["price"] = float(values["price"])
        return cls(product=Product(**values), quantity=quantity)
