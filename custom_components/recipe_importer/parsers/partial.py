"""
Partial recipe recovery.

When a model response fails the strict schema, the fields that are still
usable are salvaged so the user can finish the recipe by hand.
"""
from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any

from ..models.recipe import MethodStep, NutritionInfo, PartialRecipe, StructuredIngredient
from ..vocabulary import RECIPE_CATEGORIES
from .canonicalize import canonicalize_preparation, canonicalize_unit

_LOGGER = logging.getLogger(__name__)

# A partial recipe with fewer populated fields is not worth offering
MIN_PARTIAL_FIELDS = 2

_NUTRITION_FIELDS = ("calories", "protein", "fat", "carbohydrates")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _non_empty_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _whole_number(value: Any) -> int | None:
    if not _is_number(value) or value < 0:
        return None
    if isinstance(value, float):
        return math.ceil(value) if math.isfinite(value) else None
    return value


def _partial_ingredients(value: Any) -> list[StructuredIngredient] | None:
    if not isinstance(value, list):
        return None

    ingredients = []
    for item in value:
        if not isinstance(item, Mapping):
            continue
        name = _non_empty_str(item.get("name"))
        if name is None:
            continue
        amount = item.get("amount")
        ingredients.append(StructuredIngredient(
            name=name,
            amount=amount if _is_number(amount) else None,
            unit=canonicalize_unit(item.get("unit")),
            preparation=canonicalize_preparation(item.get("preparation")),
        ))
    return ingredients or None


def _partial_method(value: Any) -> list[MethodStep] | None:
    if not isinstance(value, list):
        return None

    steps = []
    for item in value:
        if not isinstance(item, Mapping):
            continue
        title = _non_empty_str(item.get("title"))
        if title is None:
            continue
        description = item.get("description")
        steps.append(MethodStep(
            title=title,
            description=description if isinstance(description, str) else None,
        ))
    return steps or None


def _partial_nutrition(value: Any) -> NutritionInfo | None:
    if not isinstance(value, Mapping):
        return None

    amounts = {field: value.get(field) for field in _NUTRITION_FIELDS}
    if not all(_is_number(amount) and math.isfinite(amount) and amount >= 0
               for amount in amounts.values()):
        return None
    return NutritionInfo(**amounts)


def extract_partial_recipe(raw: Any) -> PartialRecipe | None:
    """Salvage the usable fields of a model response that failed validation.

    Each field is kept only if it is individually valid. Fractional times
    and servings are rounded up; negative ones and blank strings are
    dropped. Ingredient units and preparations are canonicalized and
    nutrition is kept only when all four values are present. This never
    raises.

    Args:
        raw: The decoded model response (anything JSON can hold)

    Returns:
        A partial recipe, or None when fewer than two fields survive
    """
    try:
        if not isinstance(raw, Mapping):
            return None

        category = raw.get("category")
        fields = {
            "title": _non_empty_str(raw.get("title")),
            "description": _non_empty_str(raw.get("description")),
            "prep_time": _whole_number(raw.get("prep_time")),
            "cook_time": _whole_number(raw.get("cook_time")),
            "serves": _whole_number(raw.get("serves")),
            "category": category if (
                isinstance(category, str) and category in RECIPE_CATEGORIES) else None,
            "ingredients": _partial_ingredients(raw.get("ingredients")),
            "method": _partial_method(raw.get("method")),
            "nutrition": _partial_nutrition(raw.get("nutrition")),
        }
        populated = {key: value for key, value in fields.items() if value is not None}

        if len(populated) < MIN_PARTIAL_FIELDS:
            _LOGGER.debug(
                "Only %d usable field(s) in model response, no partial recipe",
                len(populated))
            return None

        return PartialRecipe(**populated)
    except Exception as e:
        _LOGGER.error("Partial recipe recovery failed: %s", e, exc_info=True)
        return None
