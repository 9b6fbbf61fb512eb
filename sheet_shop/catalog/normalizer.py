# sheet_shop/catalog/normalizer.py

"""Coerce loosely-typed spreadsheet rows into :class:`Product` objects.

The sheet endpoint returns every cell as a string and the header row is
not consistently cased, so each attribute is looked up under its
lower-case name first and its capitalised name second.  Nothing in here
raises on bad data: unparsable or missing cells fall back to the
:class:`Product` defaults.
"""

import logging
import math
import re
from collections.abc import Iterable, Mapping
from typing import Any

from sheet_shop.config.settings import Settings
from sheet_shop.models.product import MISSING_ID, Product

logger = logging.getLogger("sheet_shop.normalizer")

# Header spellings tried in order for each Product field
FIELD_ALIASES: dict[str, tuple[str, str]] = {
    "id": ("id", "ID"),
    "name": ("name", "Name"),
    "category": ("category", "Category"),
    "description": ("description", "Description"),
    "price": ("price", "Price"),
    "unit": ("unit", "Unit"),
    "image": ("image", "Image"),
    "featured": ("featured", "Featured"),
    "favorite": ("favorite", "Favorite"),
}

_TRUTHY_STRINGS: frozenset[str] = frozenset({"TRUE", "true", "1"})

_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX_RE = re.compile(
    r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)


def _is_present(value: Any) -> bool:
    """A cell counts as present unless it is ``None`` or an empty string."""
    return value is not None and value != ""


def pick(record: Mapping[str, Any], field_name: str) -> Any:
    """Return the first present value among the field's header aliases.

    Returns ``None`` when no alias carries a value.
    """
    for key in FIELD_ALIASES[field_name]:
        value = record.get(key)
        if _is_present(value):
            return value
    return None


def coerce_int(value: Any, default: int = 0) -> int:
    """Parse an integer id, accepting a leading numeric prefix ("12abc" -> 12)."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    if not isinstance(value, str):
        return default
    match = _INT_PREFIX_RE.match(value)
    return int(match.group(1)) if match else default


def coerce_price(value: Any, default: float = 0.0) -> float:
    """Parse a non-negative price, accepting a leading numeric prefix.

    Negative, infinite and NaN values fall back to *default*.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _FLOAT_PREFIX_RE.match(value)
        if not match:
            return default
        number = float(match.group(1))
    else:
        return default
    if not math.isfinite(number) or number < 0:
        return default
    return number


def coerce_bool(value: Any) -> bool:
    """Only ``True``, the number ``1`` and "TRUE"/"true"/"1" are truthy."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    if isinstance(value, str):
        return value in _TRUTHY_STRINGS
    return False


def _coerce_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def normalize_record(record: Mapping[str, Any]) -> Product:
    """Build a fully-populated :class:`Product` from one raw sheet row."""
    return Product(
        id=coerce_int(pick(record, "id"), MISSING_ID),
        name=_coerce_str(pick(record, "name")),
        category=_coerce_str(pick(record, "category")),
        description=_coerce_str(pick(record, "description")),
        price=coerce_price(pick(record, "price")),
        unit=_coerce_str(pick(record, "unit")),
        image=_coerce_str(
            pick(record, "image"), Settings.DEFAULT_IMAGE
        ),
        featured=coerce_bool(pick(record, "featured")),
        favorite=coerce_bool(pick(record, "favorite")),
    )


def normalize_records(records: Iterable[Any]) -> list[Product]:
    """Normalise a sequence of raw rows, preserving their order.

    Entries that are not key-value mappings cannot be a row at all and
    are skipped.
    """
    products: list[Product] = []
    skipped = 0
    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            logger.debug(
                "Skipped non-object row at index %d: %r",
                index,
                record,
            )
            skipped += 1
            continue
        products.append(normalize_record(record))

    if skipped:
        logger.info("Normalisation skipped %d non-object rows", skipped)

    return products
