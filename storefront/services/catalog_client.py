# storefront/services/catalog_client.py

"""HTTP client for the public product catalog API."""

import json
import logging
import time
from typing import Any, Literal
from urllib.parse import quote

import cloudscraper  # type: ignore[import-untyped]
from curl_cffi import requests as curl_requests

from storefront.config.settings import Settings
from storefront.filters.product_validator import ProductValidator
from storefront.models.product import Product
from storefront.storage.catalog_cache import CatalogCache

logger = logging.getLogger("storefront.catalog")

_GENERIC_ERROR = "Network error or invalid response"

# Statuses worth another attempt; other 4xx responses fail immediately
_RETRY_STATUSES: frozenset[int] = frozenset({403, 429, 500, 502, 503, 504})


class CatalogError(Exception):
    """A catalog request failed or returned an unusable response."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class CatalogClient:
    """Fetch products and categories from the catalog API.

    Requests go through a browser-impersonating ``curl_cffi`` session
    with retries; when every attempt fails the request is replayed once
    through ``cloudscraper`` to get past Cloudflare challenge pages.
    Decoded responses are cached per URL.
    """

    # Cloudflare challenge page markers
    _CF_CHALLENGE_MARKERS: list[str] = [
        "challenges.cloudflare.com",
        "cdn-cgi/challenge-platform",
        "just a moment",
        "cf-turnstile",
    ]

    def __init__(
        self,
        base_url: str | None = None,
        cache: CatalogCache | None = None,
    ) -> None:
        self.settings = Settings()
        self.base_url = (base_url or self.settings.CATALOG_BASE_URL).rstrip("/")
        self.cache = cache if cache is not None else CatalogCache()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT
        self._current_delay: float = self.settings.REQUEST_DELAY

    # ── Transport ────────────────────────────────────────

    def _is_challenge(self, text: str) -> bool:
        """Check whether a 200 response is a challenge page, not JSON."""
        if text.lstrip().startswith(("{", "[")):
            return False
        lower = text.lower()
        for marker in self._CF_CHALLENGE_MARKERS:
            if marker in lower:
                logger.warning(
                    "Cloudflare challenge detected (marker: '%s')", marker
                )
                return True
        return False

    def _escalate_delay(self) -> None:
        """Double the current delay, capped at 8x the base delay."""
        self._current_delay = min(
            self._current_delay * 2, self.settings.REQUEST_DELAY * 8
        )
        logger.warning(
            "Rate-limited, delay escalated to %.1fs", self._current_delay
        )

    def _fetch_text(self, url: str) -> str | None:
        """GET *url* with retries; ``None`` when every attempt failed.

        Raises :class:`CatalogError` straight away for client errors
        such as 404 that a retry cannot fix.
        """
        headers = dict(self.settings.DEFAULT_HEADERS)
        for attempt in range(self.settings.MAX_RETRIES):
            try:
                resp = self.session.get(
                    url,
                    headers=headers,
                    timeout=self._request_timeout,
                )
            except Exception as exc:
                logger.warning(
                    "Request error on attempt %d for %s: %s",
                    attempt + 1,
                    url,
                    exc,
                    exc_info=True,
                )
                time.sleep(self._current_delay * (attempt + 1))
                continue

            if resp.status_code == 200:
                if self._is_challenge(resp.text):
                    self._escalate_delay()
                    time.sleep(self._current_delay)
                    continue
                self._current_delay = self.settings.REQUEST_DELAY
                return str(resp.text)

            logger.warning(
                "HTTP %d on attempt %d for %s",
                resp.status_code,
                attempt + 1,
                url,
            )
            if resp.status_code not in _RETRY_STATUSES:
                raise CatalogError(
                    f"API request failed: HTTP {resp.status_code}",
                    resp.status_code,
                )
            if resp.status_code in (403, 429):
                self._escalate_delay()
            time.sleep(self._current_delay)
        return None

    def _fetch_fallback(self, url: str) -> str | None:
        """Single cloudscraper attempt after the primary transport gave up."""
        logger.info("curl_cffi exhausted, falling back to cloudscraper")
        try:
            _cs: Any = cloudscraper
            scraper: Any = _cs.create_scraper()
            resp: Any = scraper.get(
                url,
                headers=dict(self.settings.DEFAULT_HEADERS),
                timeout=self._request_timeout,
            )
        except Exception as exc:
            logger.error(
                "cloudscraper fallback also failed: %s", exc, exc_info=True
            )
            return None
        if resp.status_code != 200:
            logger.error(
                "cloudscraper fallback returned HTTP %d", resp.status_code
            )
            return None
        return str(resp.text)

    def _request(self, endpoint: str) -> Any:
        """Fetch and decode a JSON endpoint, using the cache when fresh."""
        url = f"{self.base_url}{endpoint}"
        cached = self.cache.get(url)
        if cached is not None:
            return cached

        text = self._fetch_text(url)
        if text is None:
            text = self._fetch_fallback(url)
        if text is None:
            logger.error("Catalog request failed for %s", url)
            raise CatalogError(_GENERIC_ERROR)

        if not text.strip():
            # The API answers unknown ids with an empty 200 body
            return None
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.error("Undecodable response from %s: %s", url, exc)
            raise CatalogError(_GENERIC_ERROR) from exc

        self.cache.store(url, payload)
        return payload

    def _request_products(self, endpoint: str) -> list[Product]:
        payload = self._request(endpoint)
        if not isinstance(payload, list):
            raise CatalogError(_GENERIC_ERROR)
        products, _dropped = ProductValidator.validate(payload)
        logger.info(
            "Fetched %d products from %s", len(products), endpoint
        )
        return products

    # ── Catalog endpoints ────────────────────────────────

    def get_all_products(self) -> list[Product]:
        """Every product in the catalog."""
        return self._request_products("/products")

    def get_product(self, product_id: int) -> Product:
        """One product; raises :class:`CatalogError` (404) when unknown."""
        payload = self._request(f"/products/{int(product_id)}")
        if not isinstance(payload, dict):
            raise CatalogError(f"Product {product_id} not found", 404)
        products, _dropped = ProductValidator.validate([payload])
        if not products:
            raise CatalogError(_GENERIC_ERROR)
        return products[0]

    def get_products_by_category(self, category: str) -> list[Product]:
        """Products of a single category."""
        return self._request_products(
            f"/products/category/{quote(category, safe='')}"
        )

    def get_categories(self) -> list[str]:
        """Flat list of category names."""
        payload = self._request("/products/categories")
        if not isinstance(payload, list):
            raise CatalogError(_GENERIC_ERROR)
        return [str(c) for c in payload]

    def get_limited_products(self, limit: int) -> list[Product]:
        """The first *limit* products."""
        return self._request_products(f"/products?limit={int(limit)}")

    def get_sorted_products(
        self, sort: Literal["asc", "desc"],
    ) -> list[Product]:
        """All products ordered by id as the API sorts them."""
        if sort not in ("asc", "desc"):
            raise ValueError(f"sort must be 'asc' or 'desc', got {sort!r}")
        return self._request_products(f"/products?sort={sort}")
