# sheet_shop/catalog/loader.py

"""Fetch the product sheet and hand its rows to the normaliser."""

import asyncio
import json
import logging
from typing import Any

from curl_cffi import requests as curl_requests

from sheet_shop.catalog.normalizer import normalize_records
from sheet_shop.config.settings import Settings
from sheet_shop.models.product import Product


class CatalogLoader:
    """Single-shot loader for the spreadsheet-backed catalog endpoint.

    A failed fetch is never retried and never raised: the caller gets an
    empty catalog and the details go to the ``sheet_shop.catalog`` log.
    """

    def __init__(self, url: str | None = None) -> None:
        self.settings = Settings()
        self.url = url or self.settings.CATALOG_URL
        self.logger = logging.getLogger("sheet_shop.catalog")
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def _fetch_rows(self) -> list[Any] | None:
        """GET the sheet and decode its JSON body.

        Returns ``None`` on a non-2xx status.  Transport and decoding
        errors propagate to :meth:`fetch`.
        """
        resp = self.session.get(
            self.url,
            headers=self.settings.DEFAULT_HEADERS,
            timeout=self._request_timeout,
        )
        if not 200 <= resp.status_code < 300:
            self.logger.error(
                "Catalog fetch failed: HTTP %d from %s",
                resp.status_code,
                self.url,
            )
            return None

        text = resp.text
        if not text or not text.strip():
            return []

        data: Any = json.loads(text)
        if data is None:
            return []
        if not isinstance(data, list):
            self.logger.error(
                "Catalog body is not a JSON array (got %s)",
                type(data).__name__,
            )
            return None
        return data

    def fetch(self) -> list[Product]:
        """Blocking load: fetch, decode and normalise the catalog."""
        try:
            rows = self._fetch_rows()
            if rows is None:
                return []

            self.logger.debug("Raw rows from sheet: %r", rows)

            if not rows:
                self.logger.warning(
                    "No products returned from %s", self.url
                )
                return []

            products = normalize_records(rows)
            self.logger.info(
                "Loaded %d products from %s",
                len(products),
                self.url,
            )
            return products
        except Exception as exc:
            self.logger.error(
                "Error loading products from %s: %s",
                self.url,
                exc,
                exc_info=True,
            )
            return []

    async def load_products(self) -> list[Product]:
        """Load the catalog without blocking the event loop."""
        return await asyncio.to_thread(self.fetch)


async def load_products(
    loader: CatalogLoader | None = None,
) -> list[Product]:
    """Fetch and normalise the configured catalog.

    Always resolves; an unreachable or malformed source yields ``[]``.
    """
    return await (loader or CatalogLoader()).load_products()
