"""Canned advisory texts selected from grade and nutrition thresholds."""

import zlib
from collections.abc import Callable

from product_scanner.domain.products import ProductDomain, ResolvedProduct

FOOD_GRADE_ADVICE = {
    "A": (
        "Excellent nutritional choice! This product is among the recommended "
        "foods for a healthy and balanced diet."
    ),
    "B": (
        "Good choice! This product has good nutritional quality. "
        "Consume as part of a varied diet."
    ),
    "C": (
        "Decent nutritional quality. Consume in moderation as part of a "
        "balanced diet."
    ),
    "D": (
        "Caution! This product is high in fats, sugars or salt. "
        "Limit in your daily diet."
    ),
    "E": (
        "Avoid daily consumption. Very high in fats, sugars or salt. "
        "Reserve for exceptional occasions."
    ),
}
FOOD_YOGURT_ADVICE = (
    "Excellent choice! This yogurt is a great source of protein and probiotics, "
    "perfect for a healthy snack or balanced breakfast."
)
FOOD_PRODUCE_ADVICE = (
    "Perfect! Fruits and vegetables are essential for a balanced diet. "
    "Rich in vitamins and fiber."
)
FOOD_LOW_CALORIE_ADVICE = "Low-calorie product, good for maintaining a healthy weight."
FOOD_HIGH_PROTEIN_ADVICE = (
    "High in protein! Ideal for growth and maintaining muscle mass."
)
FOOD_HIGH_SUGAR_ADVICE = (
    "Watch the sugar content! Consume in moderation, especially between meals."
)
FOOD_DEFAULT_ADVICE = (
    "Remember to vary your diet and consume this product as part of a "
    "balanced diet."
)

PET_GRADE_ADVICE = {
    "A": (
        "Excellent choice for your pet! This product has an optimal "
        "nutritional composition."
    ),
    "B": "Good choice! This product is suitable for your pet's diet.",
    "C": "Decent quality. Can be part of a balanced diet for your pet.",
    "D": (
        "Caution! This product has nutritional imbalances. "
        "Should be limited in your pet's diet."
    ),
    "E": "Poor nutritional quality. Not recommended for regular feeding.",
}
PET_HIGH_PROTEIN_ADVICE = "High in protein! Ideal for your pet's muscle development."
PET_HIGH_FAT_ADVICE = (
    "Watch the fat content. Check if this suits your pet's activity level."
)
PET_DEFAULT_ADVICE = (
    "Verify that this product meets your pet's specific dietary needs."
)

COSMETIC_PARABEN_ADVICE = (
    "Contains parabens. Consider paraben-free alternatives if you have "
    "sensitive skin."
)
COSMETIC_SULFATE_ADVICE = (
    "Contains sulfates. May cause dryness for sensitive skin types."
)
COSMETIC_NATURAL_ADVICE = (
    "Natural/organic product. Generally gentler on skin and environmentally "
    "friendly."
)
COSMETIC_NAME_ADVICE: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("sensitive", "sensible", "hypoallergenic"),
        "Perfect for sensitive skin! This product is formulated to minimize "
        "irritation risks.",
    ),
    (
        ("spf", "sun", "solaire"),
        "Essential sun protection! Remember to apply generously and reapply "
        "regularly.",
    ),
    (
        ("anti-age", "anti-aging", "rides"),
        "Effective anti-aging care! Use regularly for optimal results on "
        "aging signs.",
    ),
    (
        ("hydrat", "moistur"),
        "Optimal hydration! This product helps maintain your skin's moisture "
        "balance.",
    ),
)
COSMETIC_CHECK_INGREDIENTS_ADVICE = (
    "Check ingredients for any known allergens. Patch test recommended for "
    "sensitive skin."
)
COSMETIC_GENERIC_TIPS = (
    "Check ingredients for potential allergens before use.",
    "Perform a patch test if you have sensitive skin.",
    "Store in a cool, dry place away from direct sunlight.",
    "Check expiration date and replace when expired.",
)


def food_advice(product: ResolvedProduct) -> str:
    """Advice for food products."""
    grade = product.grade
    name = product.name.lower()
    if grade == "A":
        if _contains_any(name, ("yaourt", "yogurt")):
            return FOOD_YOGURT_ADVICE
        if _contains_any(name, ("fruit", "légume")):
            return FOOD_PRODUCE_ADVICE
    if grade in FOOD_GRADE_ADVICE:
        return FOOD_GRADE_ADVICE[grade]

    nutrition = product.nutrition
    if nutrition.calories < 100:
        return FOOD_LOW_CALORIE_ADVICE
    if nutrition.proteins > 10:
        return FOOD_HIGH_PROTEIN_ADVICE
    if nutrition.sugars > 15:
        return FOOD_HIGH_SUGAR_ADVICE
    return FOOD_DEFAULT_ADVICE


def pet_advice(product: ResolvedProduct) -> str:
    """Advice for pet food."""
    if product.grade in PET_GRADE_ADVICE:
        return PET_GRADE_ADVICE[product.grade]
    if product.nutrition.proteins > 25:
        return PET_HIGH_PROTEIN_ADVICE
    if product.nutrition.fat > 15:
        return PET_HIGH_FAT_ADVICE
    return PET_DEFAULT_ADVICE


def cosmetic_advice(product: ResolvedProduct) -> str:
    """Advice for cosmetics, driven by ingredient and category hints."""
    ingredients = (product.ingredients_text or "").lower()
    categories = (product.categories or "").lower()
    name = product.name.lower()
    if "paraben" in ingredients:
        return COSMETIC_PARABEN_ADVICE
    if "sulfate" in ingredients:
        return COSMETIC_SULFATE_ADVICE
    if _contains_any(categories, ("organic", "natural")) or _contains_any(
        name, ("organic", "natural", "naturel", "bio")
    ):
        return COSMETIC_NATURAL_ADVICE
    for keywords, advice in COSMETIC_NAME_ADVICE:
        if _contains_any(name, keywords):
            return advice
    if ingredients or categories:
        return COSMETIC_CHECK_INGREDIENTS_ADVICE
    # Stable per barcode so cached and re-fetched snapshots agree.
    index = zlib.crc32(product.barcode.encode("utf-8")) % len(COSMETIC_GENERIC_TIPS)
    return COSMETIC_GENERIC_TIPS[index]


ADVISORY_RULES: dict[ProductDomain, Callable[[ResolvedProduct], str]] = {
    ProductDomain.FOOD: food_advice,
    ProductDomain.PET: pet_advice,
    ProductDomain.COSMETIC: cosmetic_advice,
}


def generate_advice(product: ResolvedProduct) -> str:
    """Return the advisory text for a product in its domain."""
    return ADVISORY_RULES[product.domain](product)


def _contains_any(text: str, needles: tuple[str, ...]) -> bool:
    return any(needle in text for needle in needles)
