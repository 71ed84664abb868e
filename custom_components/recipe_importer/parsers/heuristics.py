"""
Heuristic scalar parsers.

Turn the loose values found in schema.org data (ISO durations, yield text,
nutrition strings, category labels) into the numbers and tags a recipe
stores. Every parser is total: unparseable input degrades to a default or
None and never raises.
"""
from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any

from ..const import DEFAULT_SERVINGS
from ..models.recipe import NutritionInfo
from ..vocabulary import CATEGORY_KEYWORDS, DEFAULT_CATEGORY

_DURATION_PATTERN = re.compile(
    r"P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?", re.IGNORECASE)
_DIGITS_PATTERN = re.compile(r"\d+")
_NUTRITION_RANGE_PATTERN = re.compile(
    r"(\d+(?:\.\d+)?)\s*-\s*(\d+(?:\.\d+)?)\s*"
    r"(mg|g|gram|grams|milligram|milligrams)?")
_NUTRITION_SINGLE_PATTERN = re.compile(
    r"(\d+(?:\.\d+)?)\s*"
    r"(mg|g|gram|grams|milligram|milligrams|calorie|calories|cal|kcal)?")

# schema.org NutritionInformation keys, preferred key first
_NUTRITION_KEYS = {
    "calories": ("calories",),
    "protein": ("proteinContent", "protein"),
    "fat": ("fatContent", "fat"),
    "carbohydrates": ("carbohydrateContent", "carbohydrates"),
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_milligram_unit(unit: str | None) -> bool:
    return unit is not None and unit.startswith("m")


def parse_duration(duration: Any) -> int:
    """Convert an ISO 8601 duration to whole minutes.

    Seconds are rounded up to the next minute.

    Examples:
        >>> parse_duration("PT30M")
        30
        >>> parse_duration("PT1H30M")
        90
        >>> parse_duration("P1DT2H")
        1560
    """
    if not isinstance(duration, str) or not duration:
        return 0

    match = _DURATION_PATTERN.search(duration)
    if not match:
        return 0

    days, hours, minutes, seconds = (
        int(group) if group else 0 for group in match.groups())
    return days * 24 * 60 + hours * 60 + minutes + math.ceil(seconds / 60)


def parse_servings(recipe_yield: Any) -> int:
    """Extract the serving count from a recipe yield.

    The first run of digits wins ("Serves 4-6" -> 4); anything without
    digits falls back to the default of 4 servings.
    """
    if isinstance(recipe_yield, (list, tuple)):
        recipe_yield = recipe_yield[0] if recipe_yield else None
    if _is_number(recipe_yield):
        recipe_yield = str(recipe_yield)
    if not isinstance(recipe_yield, str):
        return DEFAULT_SERVINGS

    match = _DIGITS_PATTERN.search(recipe_yield)
    return int(match.group()) if match else DEFAULT_SERVINGS


def parse_nutrition_value(value: Any) -> int | None:
    """Parse a nutrition amount into a whole number.

    Handles ranges, milligram to gram conversion and calorie counts. The
    result is always rounded up.

    Examples:
        >>> parse_nutrition_value("20g")
        20
        >>> parse_nutrition_value("1500mg")
        2
        >>> parse_nutrition_value("10-15g")
        15
        >>> parse_nutrition_value("300 calories")
        300
        >>> parse_nutrition_value("0.5g")
        1

    Returns:
        The amount, or None when no number could be found
    """
    if _is_number(value):
        if not math.isfinite(value) or value < 0:
            return None
        return math.ceil(value)
    if not isinstance(value, str) or not value:
        return None

    normalized = value.lower().strip()

    range_match = _NUTRITION_RANGE_PATTERN.search(normalized)
    if range_match:
        low = float(range_match.group(1))
        high = float(range_match.group(2))
        unit = range_match.group(3)

        # A wide range takes the midpoint, a narrow one the upper bound
        threshold = 100 if _is_milligram_unit(unit) else 10
        amount = (low + high) / 2 if high - low > threshold else high

        if _is_milligram_unit(unit):
            amount = amount / 1000
        return math.ceil(amount)

    single_match = _NUTRITION_SINGLE_PATTERN.search(normalized)
    if single_match:
        amount = float(single_match.group(1))
        if _is_milligram_unit(single_match.group(2)):
            amount = amount / 1000
        return math.ceil(amount)

    return None


def parse_nutrition(nutrition: Any) -> NutritionInfo | None:
    """Build a complete NutritionInfo from schema.org nutrition data.

    Returns:
        NutritionInfo when all four values parse, otherwise None
    """
    if not isinstance(nutrition, Mapping):
        return None

    parsed = {}
    for field, keys in _NUTRITION_KEYS.items():
        raw = next(
            (nutrition[key] for key in keys if nutrition.get(key) not in (None, "")),
            None)
        parsed[field] = parse_nutrition_value(raw)

    if any(amount is None for amount in parsed.values()):
        return None
    return NutritionInfo(**parsed)


def map_category(schema_category: Any) -> str:
    """Map free-text category labels onto the recipe category taxonomy.

    Labels are matched by substring against a fixed keyword order
    (breakfast, lunch, dinner, dessert, appetizer, snack, side,
    beverage/drink); the earliest keyword found wins and "main" is the
    fallback.
    """
    if isinstance(schema_category, str):
        labels = [schema_category]
    elif isinstance(schema_category, (list, tuple)):
        labels = [label for label in schema_category if isinstance(label, str)]
    else:
        labels = []

    lowered = [label.lower() for label in labels]
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in label for label in lowered for keyword in keywords):
            return category

    return DEFAULT_CATEGORY
