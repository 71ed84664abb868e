"""
Field canonicalizers.

Map free-text units and preparations onto the canonical vocabularies and
clean ingredient and method lists coming out of a model response.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from ..models.recipe import MethodStep, StructuredIngredient
from ..vocabulary import (
    PREPARATION_SYNONYMS,
    PREPARATIONS,
    UNIT_SYNONYMS,
    UNITS_FLAT,
)


def _normalize(raw: Any) -> str | None:
    if not isinstance(raw, str):
        return None
    normalized = " ".join(raw.lower().split())
    return normalized or None


def canonicalize_unit(raw: str | None) -> str | None:
    """Map a unit string onto the canonical unit vocabulary.

    Args:
        raw: The unit as written, e.g. 'Teaspoons' or 'tbsp.'

    Returns:
        The canonical unit, or None if the unit is unknown
    """
    normalized = _normalize(raw)
    if normalized is None:
        return None

    for candidate in (normalized, normalized.rstrip(".")):
        if candidate in UNITS_FLAT:
            return candidate
        if candidate in UNIT_SYNONYMS:
            return UNIT_SYNONYMS[candidate]
    return None


def canonicalize_preparation(raw: str | None) -> str | None:
    """Map a preparation string onto the canonical preparation vocabulary.

    Args:
        raw: The preparation as written, e.g. 'Dice'

    Returns:
        The canonical preparation, or None if the preparation is unknown
    """
    normalized = _normalize(raw)
    if normalized is None:
        return None

    if normalized in PREPARATIONS:
        return normalized
    return PREPARATION_SYNONYMS.get(normalized)


def _get(item: Any, key: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(key)
    return getattr(item, key, None)


def _numeric_amount(value: Any) -> float | None:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return None


def clean_ingredients(ingredients: Iterable[Any]) -> list[StructuredIngredient]:
    """Clean ingredients from a model response.

    Nulls become absent fields and unit/preparation are canonicalized, so
    the result never carries a unit or preparation outside the vocabularies.

    Args:
        ingredients: Candidate ingredients (models or mappings)

    Returns:
        List of structured ingredients
    """
    return [
        StructuredIngredient(
            name=_get(ingredient, "name"),
            amount=_numeric_amount(_get(ingredient, "amount")),
            unit=canonicalize_unit(_get(ingredient, "unit")),
            preparation=canonicalize_preparation(
                _get(ingredient, "preparation")),
        )
        for ingredient in ingredients
    ]


def clean_method_steps(steps: Iterable[Any]) -> list[MethodStep]:
    """Clean method steps from a model response, dropping null descriptions."""
    cleaned = []
    for step in steps:
        description = _get(step, "description")
        if description is None:
            cleaned.append(MethodStep(title=_get(step, "title")))
        else:
            cleaned.append(MethodStep(
                title=_get(step, "title"), description=description))
    return cleaned
