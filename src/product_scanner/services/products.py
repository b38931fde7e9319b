"""Product resolution with caching."""

import logging
from dataclasses import dataclass

from product_scanner.adapters.open_facts_client import ProductDatabaseClient
from product_scanner.domain.errors import ProductLookupError, ProductNotFound
from product_scanner.domain.nutrition import NutritionFacts
from product_scanner.domain.products import (
    UNKNOWN_PRODUCT_NAME,
    ProductDomain,
    ResolvedProduct,
)
from product_scanner.services.advisory import generate_advice
from product_scanner.services.cache import Cache

KJ_PER_KCAL = 4.184
NUTRISCORE_GRADES = frozenset("ABCDE")

_logger = logging.getLogger(__name__)


@dataclass
class ProductService:
    """Resolves barcodes to normalized products, one network call per product."""

    client: ProductDatabaseClient
    cache: Cache
    product_ttl_seconds: int | None = None
    debug: bool = False

    async def resolve(self, barcode: str, domain: ProductDomain) -> ResolvedProduct:
        """Return the product for a barcode in a domain.

        Raises ProductNotFound when the database has no such product and
        ProductLookupError when the database cannot be queried. Failures are
        not retried.
        """
        cache_key = f"product:{domain}:{barcode}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, ResolvedProduct):
            return cached

        try:
            payload = await self.client.fetch_product(barcode, domain)
        except ProductLookupError as exc:
            _logger.warning(
                "Product lookup failed: barcode=%s domain=%s: %s", barcode, domain, exc
            )
            raise
        product = normalize_product(barcode, domain, payload)
        product = product.with_advice(generate_advice(product))
        self.cache.set(cache_key, product, ttl_seconds=self.product_ttl_seconds)
        if self.debug:
            _logger.info("Product resolved: barcode=%s domain=%s", barcode, domain)
        return product


def normalize_product(
    barcode: str, domain: ProductDomain, payload: dict[str, object]
) -> ResolvedProduct:
    """Map a raw database payload to a ResolvedProduct without advice."""
    raw_product = payload.get("product")
    if payload.get("status") == 0 or not isinstance(raw_product, dict):
        raise ProductNotFound(barcode)

    grade = (_text(raw_product.get("nutriscore_grade")) or "").upper()
    return ResolvedProduct(
        barcode=barcode,
        domain=domain,
        name=_text(raw_product.get("product_name")) or UNKNOWN_PRODUCT_NAME,
        brand=_text(raw_product.get("brands")),
        image_url=_text(raw_product.get("image_url")),
        grade=grade if grade in NUTRISCORE_GRADES else None,
        quantity=_text(raw_product.get("quantity")),
        nutrition=_extract_nutrition(raw_product.get("nutriments")),
        ingredients_text=_text(raw_product.get("ingredients_text")),
        categories=_text(raw_product.get("categories")),
    )


def _extract_nutrition(nutriments: object) -> NutritionFacts:
    """Extract per-100g values; energy in kJ is converted to kcal."""
    if not isinstance(nutriments, dict):
        return NutritionFacts()
    calories = _number(nutriments.get("energy-kcal_100g"))
    if calories is None:
        energy_kj = _number(nutriments.get("energy_100g"))
        calories = energy_kj / KJ_PER_KCAL if energy_kj is not None else 0.0
    return NutritionFacts(
        calories=calories,
        fat=_number(nutriments.get("fat_100g")) or 0.0,
        sugars=_number(nutriments.get("sugars_100g")) or 0.0,
        proteins=_number(nutriments.get("proteins_100g")) or 0.0,
    )


def _number(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.replace(",", "."))
        except ValueError:
            return None
    return None


def _text(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None
