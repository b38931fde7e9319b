"""Product domain models."""

from dataclasses import dataclass, replace
from enum import StrEnum

from product_scanner.domain.nutrition import NutritionFacts, package_multiplier

UNKNOWN_PRODUCT_NAME = "Unknown Product"


class ProductDomain(StrEnum):
    """Product category that selects the database and advisory rules."""

    FOOD = "food"
    PET = "pet"
    COSMETIC = "cosmetic"


@dataclass(frozen=True)
class DomainProfile:
    """Presentation and lookup data for a product domain."""

    label: str
    icon: str
    color: str
    base_url: str


DOMAIN_PROFILES: dict[ProductDomain, DomainProfile] = {
    ProductDomain.FOOD: DomainProfile(
        label="Food",
        icon="apple",
        color="emerald",
        base_url="https://world.openfoodfacts.org",
    ),
    ProductDomain.PET: DomainProfile(
        label="Pet food",
        icon="paw-print",
        color="amber",
        base_url="https://world.openpetfoodfacts.org",
    ),
    ProductDomain.COSMETIC: DomainProfile(
        label="Cosmetics",
        icon="sparkles",
        color="pink",
        base_url="https://world.openbeautyfacts.org",
    ),
}


@dataclass(frozen=True)
class ResolvedProduct:
    """Normalized product snapshot for a barcode within a domain."""

    barcode: str
    domain: ProductDomain
    name: str
    nutrition: NutritionFacts
    advice: str = ""
    brand: str | None = None
    image_url: str | None = None
    grade: str | None = None
    quantity: str | None = None
    ingredients_text: str | None = None
    categories: str | None = None

    def with_advice(self, advice: str) -> "ResolvedProduct":
        """Return a copy carrying the given advisory text."""
        return replace(self, advice=advice)

    def package_nutrition(self) -> NutritionFacts | None:
        """Return nutrition scaled to the whole package, if the size is known."""
        multiplier = package_multiplier(self.quantity)
        if multiplier is None:
            return None
        return self.nutrition.scaled(multiplier)
