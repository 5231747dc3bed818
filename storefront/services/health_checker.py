# storefront/services/health_checker.py

"""Catalog API connectivity health check."""

import asyncio
import logging
import time
from dataclasses import dataclass

from storefront.services.catalog_client import CatalogClient

logger = logging.getLogger("storefront.health")

_HEALTH_TIMEOUT = 10  # seconds per endpoint
_SLOW_MS = 5000

HEALTH_ENDPOINTS: list[str] = ["/products/categories", "/products?limit=1"]


@dataclass
class HealthResult:
    """Result of probing one catalog endpoint."""

    endpoint: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


def check_endpoint(client: CatalogClient, endpoint: str) -> HealthResult:
    """Single uncached GET against *endpoint*."""
    url = f"{client.base_url}{endpoint}"
    start = time.monotonic()
    try:
        resp = client.session.get(
            url,
            headers=dict(client.settings.DEFAULT_HEADERS),
            timeout=_HEALTH_TIMEOUT,
        )
    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult(endpoint, "down", elapsed_ms, str(exc)[:80])

    elapsed_ms = (time.monotonic() - start) * 1000
    if resp.status_code != 200:
        return HealthResult(
            endpoint, "down", elapsed_ms, f"HTTP {resp.status_code}"
        )
    if elapsed_ms > _SLOW_MS:
        return HealthResult(endpoint, "slow", elapsed_ms, "High latency")
    return HealthResult(endpoint, "ok", elapsed_ms, "")


class HealthChecker:
    """Runs concurrent checks against the catalog endpoints."""

    def __init__(self, client: CatalogClient | None = None) -> None:
        self.client = client or CatalogClient()

    async def check_all(self) -> list[HealthResult]:
        """Check every endpoint concurrently."""
        tasks = [
            asyncio.to_thread(check_endpoint, self.client, endpoint)
            for endpoint in HEALTH_ENDPOINTS
        ]
        results: list[HealthResult] = list(await asyncio.gather(*tasks))
        for r in results:
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.endpoint,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
