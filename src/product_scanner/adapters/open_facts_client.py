"""Open Food Facts family API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from product_scanner.domain.errors import ProductLookupError
from product_scanner.domain.products import ProductDomain


class ProductDatabaseClient(Protocol):
    """Interface for product database lookups."""

    async def fetch_product(
        self, barcode: str, domain: ProductDomain
    ) -> dict[str, object]:
        """Fetch a product by barcode and return raw API data."""


@dataclass
class HttpxOpenFactsClient(ProductDatabaseClient):
    """HTTPX-backed client for the food, pet food and beauty databases."""

    base_urls: dict[ProductDomain, str]
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10.0

    @classmethod
    def create(
        cls,
        base_urls: dict[ProductDomain, str],
        user_agent: str,
        timeout_seconds: float = 10.0,
    ) -> "HttpxOpenFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_urls=base_urls,
            http_client=httpx.AsyncClient(headers={"User-Agent": user_agent}),
            timeout_seconds=timeout_seconds,
        )

    def product_url(self, barcode: str, domain: ProductDomain) -> str:
        """Build the product endpoint URL for a domain."""
        return f"{self.base_urls[domain]}/api/v0/product/{barcode}.json"

    async def fetch_product(
        self, barcode: str, domain: ProductDomain
    ) -> dict[str, object]:
        """Fetch a product; "not found" payloads are returned, not raised."""
        url = self.product_url(barcode, domain)
        try:
            response = await self.http_client.get(url, timeout=self.timeout_seconds)
            if response.status_code == httpx.codes.NOT_FOUND:
                payload = _json_or_none(response)
                if isinstance(payload, dict) and payload.get("status") == 0:
                    return payload
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise ProductLookupError(f"Request to {url} failed: {exc}") from exc
        except ValueError as exc:
            raise ProductLookupError(f"Invalid JSON from {url}") from exc
        if not isinstance(payload, dict):
            raise ProductLookupError(f"Unexpected payload from {url}")
        return payload

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _json_or_none(response: httpx.Response) -> object | None:
    try:
        return response.json()
    except ValueError:
        return None
