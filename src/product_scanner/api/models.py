"""Pydantic models for API responses."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from product_scanner.domain.nutrition import NutritionFacts
from product_scanner.domain.products import (
    DOMAIN_PROFILES,
    ProductDomain,
    ResolvedProduct,
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NutritionalData(_CamelModel):
    """Nutrient values for a reference amount."""

    calories: float
    fat: float
    sugars: float
    proteins: float

    @classmethod
    def from_facts(cls, facts: NutritionFacts) -> "NutritionalData":
        return cls(
            calories=facts.calories,
            fat=facts.fat,
            sugars=facts.sugars,
            proteins=facts.proteins,
        )


class ProductResponse(_CamelModel):
    """Resolved product as returned by the product endpoint."""

    barcode: str
    name: str
    brand: str | None = None
    image_url: str | None = None
    nutriscore_grade: str | None = None
    quantity: str | None = None
    nutritional_data: NutritionalData
    package_nutritional_data: NutritionalData | None = None
    health_advice: str
    type: ProductDomain

    @classmethod
    def from_product(cls, product: ResolvedProduct) -> "ProductResponse":
        package = product.package_nutrition()
        return cls(
            barcode=product.barcode,
            name=product.name,
            brand=product.brand,
            image_url=product.image_url,
            nutriscore_grade=product.grade,
            quantity=product.quantity,
            nutritional_data=NutritionalData.from_facts(product.nutrition),
            package_nutritional_data=(
                NutritionalData.from_facts(package) if package else None
            ),
            health_advice=product.advice,
            type=product.domain,
        )


class DomainResponse(_CamelModel):
    """Display data for a product domain."""

    type: ProductDomain
    label: str
    icon: str
    color: str


def domain_responses() -> list[DomainResponse]:
    """List display data for every domain."""
    return [
        DomainResponse(
            type=domain, label=profile.label, icon=profile.icon, color=profile.color
        )
        for domain, profile in DOMAIN_PROFILES.items()
    ]
