"""Nutrition values and package size helpers."""

import re
from dataclasses import dataclass

# Unit suffixes like "gr", "grammes" or "litre" are allowed; "lb" is not.
_QUANTITY_PATTERN = re.compile(r"(\d+(?:[.,]\d+)?)\s*(kg|ml|g|l)(?!b)", re.IGNORECASE)
_GRAMS_PER_UNIT = {"g": 1.0, "ml": 1.0, "kg": 1000.0, "l": 1000.0}


@dataclass(frozen=True)
class NutritionFacts:
    """Nutrient values per 100g."""

    calories: float = 0.0
    fat: float = 0.0
    sugars: float = 0.0
    proteins: float = 0.0

    def scaled(self, multiplier: float) -> "NutritionFacts":
        """Return the values multiplied by a factor."""
        return NutritionFacts(
            calories=self.calories * multiplier,
            fat=self.fat * multiplier,
            sugars=self.sugars * multiplier,
            proteins=self.proteins * multiplier,
        )


def package_weight_grams(quantity: str | None) -> float | None:
    """Extract a package weight in grams from free text like "250g" or "1,5 kg".

    Liquids are treated as 1 ml = 1 g.
    """
    if not quantity:
        return None
    match = _QUANTITY_PATTERN.search(quantity)
    if match is None:
        return None
    value = float(match.group(1).replace(",", "."))
    return value * _GRAMS_PER_UNIT[match.group(2).lower()]


def package_multiplier(quantity: str | None) -> float | None:
    """Return the factor converting per-100g values to per-package values."""
    weight = package_weight_grams(quantity)
    if weight is None or weight <= 0:
        return None
    return weight / 100
