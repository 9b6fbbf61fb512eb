# sheet_shop/storage/catalog_cache.py

"""In-memory TTL cache in front of the catalog loader."""

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from sheet_shop.config.settings import Settings
from sheet_shop.models.product import Product

logger = logging.getLogger("sheet_shop.cache")

CatalogSource = Callable[[], Awaitable[list[Product]]]


@dataclass
class CacheEntry:
    """A loaded catalog and the moment it was stored."""

    products: list[Product]
    timestamp: float


class CatalogCache:
    """Hold the last successfully loaded catalog for ``ttl`` seconds.

    Cart additions resolve product ids through this cache, so a burst of
    "add to cart" clicks costs one sheet fetch instead of one per click.
    An empty load is treated as a failed fetch and is not cached; the
    next :meth:`get` tries the network again.
    """

    def __init__(
        self,
        source: CatalogSource,
        ttl: float | None = None,
    ) -> None:
        self._source = source
        self._ttl: float = (
            Settings.CATALOG_CACHE_TTL if ttl is None else ttl
        )
        self._entry: CacheEntry | None = None

    def _is_fresh(self, now: float) -> bool:
        return (
            self._entry is not None
            and now - self._entry.timestamp < self._ttl
        )

    async def get(self) -> list[Product]:
        """Return the cached catalog, reloading it once expired."""
        now = time.time()
        if self._entry is not None and self._is_fresh(now):
            logger.debug(
                "Catalog cache hit (%d products)",
                len(self._entry.products),
            )
            return list(self._entry.products)

        if self._entry is not None:
            logger.debug("Catalog cache expired, reloading")
            self._entry = None

        products = await self._source()
        if products:
            self._entry = CacheEntry(
                products=list(products), timestamp=time.time()
            )
            logger.info("Cached catalog of %d products", len(products))
        else:
            logger.warning("Catalog load returned nothing; not cached")
        return list(products)

    async def find(self, product_id: int) -> Product | None:
        """Return the product with exactly this canonical id, if any."""
        for product in await self.get():
            if product.id == product_id:
                return product
        return None

    def invalidate(self) -> bool:
        """Drop the cached catalog.

        Returns ``True`` if an entry was removed.
        """
        had_entry = self._entry is not None
        self._entry = None
        if had_entry:
            logger.info("Catalog cache manually purged")
        return had_entry
