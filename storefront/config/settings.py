# storefront/config/settings.py

"""Central configuration for the storefront engine."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the storefront engine."""

    # --- Catalog API ---
    CATALOG_BASE_URL: str = os.getenv(
        "STOREFRONT_API_URL", "https://fakestoreapi.com"
    ).rstrip("/")
    REQUEST_DELAY: float = 0.5          # Seconds between retries
    REQUEST_TIMEOUT: int = int(
        os.getenv("STOREFRONT_REQUEST_TIMEOUT", "15")
    )
    MAX_RETRIES: int = 3                # Retry count on transient failures
    CATALOG_CACHE_TTL: float = 300.0    # Catalog response cache (secs)

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json, text/plain, */*",
        "Accept-Language": "en-US,en;q=0.9",
        "sec-ch-ua": (
            '"Google Chrome";v="131", '
            '"Chromium";v="131", '
            '"Not_A Brand";v="24"'
        ),
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
    }

    # --- Cart ---
    CART_ADD_DELAY: float = 0.3         # Simulated backend latency (secs)
    CART_UPDATE_DELAY: float = 0.2
    CART_REMOVE_DELAY: float = 0.2
    CART_CLEAR_DELAY: float = 0.3
    CONFIRMATION_TIMEOUT: float = 3.0   # Auto-hide "added to cart"

    # --- Search ---
    RECENT_SEARCHES_KEY: str = "recentSearches"
    RECENT_SEARCHES_LIMIT: int = 5
    SUGGESTION_LIMIT: int = 5
    SUGGESTED_CATEGORY_LIMIT: int = 4
    TRENDING_SEARCH_LIMIT: int = 6
    POPULAR_PRODUCTS_LIMIT: int = 8
    TRENDING_PRODUCTS_LIMIT: int = 8

    # --- Logging ---
    LOG_CONSOLE_LEVEL: str = os.getenv("STOREFRONT_LOG_LEVEL", "WARNING")
    LOG_LEVELS: str = os.getenv("STOREFRONT_LOG_LEVELS", "")  # "cart=INFO,..."

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
    DATA_DIR: Path = Path(
        os.getenv("STOREFRONT_DATA_DIR", str(BASE_DIR / "data"))
    )
    KV_STORE_PATH: Path = DATA_DIR / "storefront_state.json"
