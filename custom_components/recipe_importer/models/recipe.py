"""
Recipe data models for the Recipe Importer integration.

This module defines the Pydantic models for recipes that leave the
extraction pipeline: the fully normalized recipe handed to storage and the
partial recipe offered for manual completion.
"""
from __future__ import annotations

import math
from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from ..vocabulary import PREPARATIONS, UNITS_FLAT, RecipeCategory


class StructuredIngredient(BaseModel):
    """A structured representation of a single ingredient.

    Attributes:
        name: The name of the ingredient (e.g., 'chicken breast')
        amount: Optional numeric amount (e.g., 2.5, 250)
        unit: Optional canonical unit (e.g., 'cups', 'g', 'clove')
        preparation: Optional canonical preparation (e.g., 'diced')
    """

    name: str = Field(
        min_length=1,
        description="The name of the ingredient, e.g., 'all-purpose flour'"
    )
    amount: float | None = Field(
        default=None,
        description="The numeric amount, e.g., 2.5"
    )
    unit: str | None = Field(
        default=None,
        description="A unit from the canonical unit vocabulary"
    )
    preparation: str | None = Field(
        default=None,
        description="A preparation from the canonical preparation vocabulary"
    )

    @field_validator("unit")
    @classmethod
    def _unit_is_canonical(cls, value: str | None) -> str | None:
        if value is not None and value not in UNITS_FLAT:
            raise ValueError(f"Unit '{value}' is not a canonical unit")
        return value

    @field_validator("preparation")
    @classmethod
    def _preparation_is_canonical(cls, value: str | None) -> str | None:
        if value is not None and value not in PREPARATIONS:
            raise ValueError(
                f"Preparation '{value}' is not a canonical preparation")
        return value


class MethodStep(BaseModel):
    """A single method step with a short title and the full instruction."""

    title: str = Field(description="Short descriptive title (3-5 words)")
    description: str | None = Field(
        default=None,
        description="Complete instruction text"
    )


class NutritionInfo(BaseModel):
    """Per-serving nutrition.

    All four values are always present. Protein, fat and carbohydrates are
    whole grams; calories are a plain count. Fractional input is rounded up.
    """

    calories: int = Field(ge=0)
    protein: int = Field(ge=0)
    fat: int = Field(ge=0)
    carbohydrates: int = Field(ge=0)

    @field_validator("calories", "protein", "fat", "carbohydrates", mode="before")
    @classmethod
    def _round_up(cls, value):
        if isinstance(value, float) and math.isfinite(value):
            return math.ceil(value)
        return value


class RecipeRating(BaseModel):
    """Aggregate rating as published by the source page."""

    value: str | float | None = None
    count: int | None = None


class NormalizedRecipe(BaseModel):
    """A fully validated recipe ready to be stored.

    Units and preparations are canonical or absent, the category belongs to
    the fixed taxonomy and nutrition is either complete or absent.
    """

    title: str = Field(min_length=1)
    description: str | None = None
    prep_time: int = Field(ge=0, description="Preparation time in minutes")
    cook_time: int = Field(ge=0, description="Cooking time in minutes")
    serves: int = Field(ge=0)
    category: RecipeCategory
    ingredients: list[StructuredIngredient]
    method: list[MethodStep]
    nutrition: NutritionInfo | None = None

    # Attribution & source information
    image_url: str | None = None
    original_url: str | None = None
    original_author: str | None = None
    original_published_date: str | None = None
    rating: RecipeRating | None = None
    imported_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc))


class PartialRecipe(BaseModel):
    """Whatever could be recovered from an incomplete extraction.

    Every field is optional; absent fields are None and are left out when
    the record is dumped with ``exclude_none``.
    """

    title: str | None = None
    description: str | None = None
    prep_time: int | None = None
    cook_time: int | None = None
    serves: int | None = None
    category: RecipeCategory | None = None
    ingredients: list[StructuredIngredient] | None = None
    method: list[MethodStep] | None = None
    nutrition: NutritionInfo | None = None
