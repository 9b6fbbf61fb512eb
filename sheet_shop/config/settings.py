# sheet_shop/config/settings.py

"""Central configuration for the sheet_shop catalog and cart."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the sheet_shop catalog and cart."""

    # --- Catalog source ---
    CATALOG_URL: str = os.getenv(
        "SHEET_SHOP_CATALOG_URL",
        "https://opensheet.elk.sh/"
        "15wr4ZZbQEA1dDQIdALdmFW2Cjmt1nlJ9woiSPNBnhOA/products",
    )
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    CATALOG_CACHE_TTL: float = 300.0    # Seconds a loaded catalog stays fresh

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json,text/plain;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Product defaults ---
    DEFAULT_IMAGE: str = "img/default.jpg"

    # --- Cart ---
    CART_STORAGE_KEY: str = "cart"

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = BASE_DIR / "data"
    LOGS_DIR: Path = BASE_DIR / "logs"
    CART_FILE: Path = Path(
        os.getenv(
            "SHEET_SHOP_CART_FILE",
            str(DATA_DIR / "storage.json"),
        )
    )
