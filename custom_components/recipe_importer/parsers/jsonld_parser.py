"""
JSON-LD Recipe Parser.

This module handles schema.org Recipe data embedded in web pages as JSON-LD:
locating the Recipe object, reading its loosely typed fields, splitting
ingredient lines (English, German, Danish, Swedish) and assembling the
normalized recipe.
"""
from __future__ import annotations

import html
import json
import logging
import re
from collections.abc import Iterator
from typing import Any

from bs4 import BeautifulSoup
from pydantic import BaseModel, Field

from ..models.recipe import MethodStep, NormalizedRecipe, RecipeRating, StructuredIngredient
from ..models.schema import StructuredDataCandidate
from .canonicalize import (
    canonicalize_preparation,
    canonicalize_unit,
    clean_ingredients,
    clean_method_steps,
)
from .heuristics import map_category, parse_duration, parse_nutrition, parse_servings

_LOGGER = logging.getLogger(__name__)

# Unit abbreviations and full names (English + German/Danish/Swedish)
_UNITS = (
    r"(?:cups?|tablespoons?|tbsp?|teaspoons?|tsp?|ounces?|oz|pounds?|lbs?|"
    r"grams?|g|kilograms?|kg|milligrams?|mg|milliliters?|ml|liters?|l|"
    r"pints?|quarts?|pinch(?:es)?|dash(?:es)?|cloves?|pieces?|slices?|"
    r"cans?|sprigs?|bunch(?:es)?|"
    r"tl|el|teelöffel|esslöffel|messerspitze|tsk|spsk|knsp|msk|dl)"
)
_QUANTITY = r"[\d./½⅓⅔¼¾⅛⅜⅝⅞]+"
_QUANTITY_GROUP = rf"({_QUANTITY}(?:\s+{_QUANTITY})?)"

# "250g flour"
_COMPACT_PATTERN = re.compile(rf"^({_QUANTITY})({_UNITS})\b\s+(.+)$", re.IGNORECASE)
# "1 1/2 cups sugar"
_QUANTITY_UNIT_PATTERN = re.compile(
    rf"^{_QUANTITY_GROUP}\s+({_UNITS})\b\.?\s+(.+)$", re.IGNORECASE)
# "TL Korianderpulver 0.5"
_UNIT_NAME_QUANTITY_PATTERN = re.compile(
    rf"^({_UNITS})\b\s+(.+?)\s+{_QUANTITY_GROUP}$", re.IGNORECASE)
# "Große Zwiebel(n) 1"
_NAME_QUANTITY_PATTERN = re.compile(rf"^(.+?)\s+{_QUANTITY_GROUP}$", re.IGNORECASE)
# "2 eggs"
_QUANTITY_NAME_PATTERN = re.compile(rf"^{_QUANTITY_GROUP}\s+(.+)$", re.IGNORECASE)

_UNICODE_FRACTIONS = {
    "½": 0.5,
    "⅓": 0.333,
    "⅔": 0.667,
    "¼": 0.25,
    "¾": 0.75,
    "⅛": 0.125,
    "⅜": 0.375,
    "⅝": 0.625,
    "⅞": 0.875,
}

# Kitchen units outside English that map onto the canonical vocabulary
_FOREIGN_UNITS = {
    "tl": "tsp",
    "teelöffel": "tsp",
    "tsk": "tsp",
    "el": "tbsp",
    "esslöffel": "tbsp",
    "spsk": "tbsp",
    "msk": "tbsp",
    "messerspitze": "pinch",
    "knsp": "pinch",
}


def _parse_fraction(fraction_str: str) -> float:
    """Parse a fraction string like '1/2' or '3/4'.

    Raises:
        ValueError: If the fraction string is invalid
        ZeroDivisionError: If denominator is zero
    """
    if "/" not in fraction_str:
        return float(fraction_str)

    parts = fraction_str.strip().split("/")
    if len(parts) != 2:
        raise ValueError(f"Invalid fraction format: {fraction_str}")

    numerator = float(parts[0].strip())
    denominator = float(parts[1].strip())

    if denominator == 0:
        raise ZeroDivisionError(
            f"Fraction has zero denominator: {fraction_str}")

    return numerator / denominator


def _apply_unicode_fractions(text: str) -> str:
    """Replace unicode fraction characters with decimal equivalents.

    Mixed numbers are converted by adding the decimal: 2½ -> 2.5
    """
    for fraction_char, decimal_value in _UNICODE_FRACTIONS.items():
        text = re.sub(
            rf"(\d+){re.escape(fraction_char)}",
            lambda match: str(int(match.group(1)) + decimal_value),
            text,
        )
        text = text.replace(fraction_char, str(decimal_value))
    return text


def _parse_quantity_string(quantity_str: str) -> float | None:
    """Parse a quantity string like '2', '1/2', '2 1/2', '2.5' or '2½'.

    Returns:
        Parsed value or None if parsing fails
    """
    try:
        parts = _apply_unicode_fractions(quantity_str).split()
        return sum(_parse_fraction(part) for part in parts)
    except (ValueError, TypeError, ZeroDivisionError) as e:
        _LOGGER.debug("Failed to parse quantity '%s': %s", quantity_str, e)
        return None


def _resolve_unit(unit: str) -> str | None:
    canonical = canonicalize_unit(unit)
    if canonical is None:
        canonical = _FOREIGN_UNITS.get(unit.lower())
    return canonical


def _split_preparation(name: str) -> tuple[str, str | None]:
    """Split a trailing ', softened' style preparation off an ingredient name."""
    head, separator, tail = name.rpartition(",")
    if not separator or not head.strip():
        return name, None
    preparation = canonicalize_preparation(tail)
    if preparation is None:
        return name, None
    return head.strip(), preparation


def _build_ingredient(name: str, quantity_str: str | None, unit: str | None) -> StructuredIngredient:
    name, preparation = _split_preparation(name.strip())
    return StructuredIngredient(
        name=name,
        amount=_parse_quantity_string(quantity_str) if quantity_str else None,
        unit=_resolve_unit(unit) if unit else None,
        preparation=preparation,
    )


def parse_ingredient_line(ingredient_text: str) -> StructuredIngredient:
    """Parse a JSON-LD ingredient string into a structured ingredient.

    Supports multiple formats:
    - Compact: "250g flour"
    - Standard English: "1 cup butter, softened"
    - German/Danish: "TL Salz 0.5"
    - Name-quantity: "Große Zwiebel(n) 1"
    - Quantity-name: "1 große Zwiebel"

    Units outside the canonical vocabulary are dropped.

    Args:
        ingredient_text: Raw, non-empty ingredient string

    Returns:
        Structured ingredient
    """
    text = ingredient_text.strip()

    match = _COMPACT_PATTERN.match(text) or _QUANTITY_UNIT_PATTERN.match(text)
    if match:
        quantity_str, unit, name = match.groups()
        return _build_ingredient(name, quantity_str, unit)

    match = _UNIT_NAME_QUANTITY_PATTERN.match(text)
    if match:
        unit, name, quantity_str = match.groups()
        return _build_ingredient(name, quantity_str, unit)

    match = _NAME_QUANTITY_PATTERN.match(text)
    if match:
        name, quantity_str = match.groups()
        return _build_ingredient(name, quantity_str, None)

    match = _QUANTITY_NAME_PATTERN.match(text)
    if match:
        quantity_str, name = match.groups()
        return _build_ingredient(name, quantity_str, None)

    # No pattern matched, just return the text as name
    return StructuredIngredient(name=text)


def _is_recipe(item: Any) -> bool:
    """Check if a JSON-LD item represents a Recipe."""
    if not isinstance(item, dict):
        return False
    item_type = item.get("@type")
    if isinstance(item_type, str):
        return item_type == "Recipe"
    if isinstance(item_type, list):
        return "Recipe" in item_type
    return False


def _iter_jsonld_items(data: Any) -> Iterator[Any]:
    if isinstance(data, list):
        for item in data:
            yield from _iter_jsonld_items(item)
    elif isinstance(data, dict):
        yield data
        graph = data.get("@graph")
        if isinstance(graph, list):
            yield from graph


def find_recipe_jsonld(soup: BeautifulSoup) -> dict[str, Any] | None:
    """Find the first schema.org Recipe in the page's JSON-LD scripts.

    Top-level objects, arrays and ``@graph`` containers are searched;
    malformed scripts are skipped.

    Args:
        soup: Parsed page

    Returns:
        The Recipe object, or None if the page has none
    """
    json_lds = soup.find_all("script", type="application/ld+json")
    _LOGGER.debug("Found %d JSON-LD scripts", len(json_lds))

    for idx, json_ld in enumerate(json_lds):
        raw = json_ld.string or json_ld.get_text()
        if not raw or not raw.strip():
            continue
        try:
            parsed_data = json.loads(raw)
        except json.JSONDecodeError as e:
            _LOGGER.debug("Failed to parse JSON-LD script %d: %s", idx, e)
            continue

        recipe = next(
            (item for item in _iter_jsonld_items(parsed_data) if _is_recipe(item)), None)
        if recipe is not None:
            _LOGGER.debug("Found recipe data in JSON-LD script %d", idx)
            return recipe

    return None


def _decode(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    decoded = html.unescape(value).strip()
    return decoded or None


def _string_list(value: Any) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [decoded for decoded in map(_decode, value) if decoded]


def _first(value: Any) -> Any:
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _extract_image(image: Any) -> str | None:
    image = _first(image)
    if isinstance(image, dict):
        image = image.get("url")
    return image if isinstance(image, str) and image else None


def _extract_author(author: Any) -> str | None:
    author = _first(author)
    if isinstance(author, dict):
        author = author.get("name")
    return _decode(author)


def _extract_yield(recipe_yield: Any) -> str | None:
    recipe_yield = _first(recipe_yield)
    if isinstance(recipe_yield, dict):
        recipe_yield = recipe_yield.get("value")
    if isinstance(recipe_yield, (int, float)) and not isinstance(recipe_yield, bool):
        return str(recipe_yield)
    return recipe_yield if isinstance(recipe_yield, str) and recipe_yield else None


def _extract_instructions(instructions: Any) -> list[str]:
    """Flatten strings, HowToStep objects and nested HowToSection lists."""
    if isinstance(instructions, str):
        return [line for line in map(_decode, instructions.split("\n")) if line]
    if isinstance(instructions, dict):
        instructions = [instructions]
    if not isinstance(instructions, list):
        return []

    extracted = []
    for item in instructions:
        if isinstance(item, str):
            text = _decode(item)
            if text:
                extracted.append(text)
        elif isinstance(item, dict):
            if "itemListElement" in item:
                extracted.extend(_extract_instructions(item["itemListElement"]))
                continue
            text = _decode(item.get("text")) or _decode(item.get("name"))
            if text:
                extracted.append(text)
    return extracted


def _extract_nutrition(nutrition: Any) -> dict[str, Any] | None:
    if not isinstance(nutrition, dict):
        return None
    return {
        key: value for key, value in nutrition.items()
        if not key.startswith("@") and isinstance(value, (str, int, float))
    }


def _extract_rating(rating: Any) -> RecipeRating | None:
    if not isinstance(rating, dict):
        return None
    value = rating.get("ratingValue")
    count = rating.get("reviewCount", rating.get("ratingCount"))
    if isinstance(count, str) and count.isdigit():
        count = int(count)
    return RecipeRating(
        value=value if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None,
        count=count if isinstance(count, int) and not isinstance(count, bool) else None,
    )


class SchemaOrgRecipe(BaseModel):
    """The parts of a schema.org Recipe the importer uses.

    Values are kept as published; durations, yield and nutrition are parsed
    later by the heuristic parsers.
    """

    name: str | None = None
    description: str | None = None
    image: str | None = None
    prep_time: str | None = None
    cook_time: str | None = None
    total_time: str | None = None
    recipe_yield: str | None = None
    category: list[str] = Field(default_factory=list)
    cuisine: list[str] = Field(default_factory=list)
    ingredients: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    author: str | None = None
    date_published: str | None = None
    nutrition: dict[str, Any] | None = None
    rating: RecipeRating | None = None

    @classmethod
    def from_jsonld(cls, item: dict[str, Any]) -> SchemaOrgRecipe:
        """Read a JSON-LD Recipe object, ignoring values of unexpected types."""
        prep_time = item.get("prepTime")
        cook_time = item.get("cookTime")
        total_time = item.get("totalTime")
        date_published = item.get("datePublished")
        return cls(
            name=_decode(item.get("name")),
            description=_decode(item.get("description")),
            image=_extract_image(item.get("image")),
            prep_time=prep_time if isinstance(prep_time, str) else None,
            cook_time=cook_time if isinstance(cook_time, str) else None,
            total_time=total_time if isinstance(total_time, str) else None,
            recipe_yield=_extract_yield(item.get("recipeYield")),
            category=_string_list(item.get("recipeCategory")),
            cuisine=_string_list(item.get("recipeCuisine")),
            ingredients=_string_list(item.get("recipeIngredient")),
            instructions=_extract_instructions(item.get("recipeInstructions")),
            author=_extract_author(item.get("author")),
            date_published=date_published if isinstance(date_published, str) else None,
            nutrition=_extract_nutrition(item.get("nutrition")),
            rating=_extract_rating(item.get("aggregateRating")),
        )


def build_recipe_from_schema(
    schema: SchemaOrgRecipe,
    structured: StructuredDataCandidate | None = None,
    original_url: str | None = None,
) -> NormalizedRecipe:
    """Assemble a normalized recipe from schema.org data.

    Args:
        schema: The page's Recipe data; ``name`` must be set
        structured: Model-structured ingredients, category and method, or
            None to fall back to regex ingredient parsing and "Step N" titles
        original_url: The page the recipe came from

    Returns:
        The normalized recipe
    """
    if structured is not None:
        ingredients = clean_ingredients(structured.ingredients)
        method = clean_method_steps(structured.method)
        category = structured.category
    else:
        ingredients = [parse_ingredient_line(line) for line in schema.ingredients]
        method = [
            MethodStep(title=f"Step {index}", description=instruction)
            for index, instruction in enumerate(schema.instructions, start=1)
        ]
        category = map_category(schema.category)

    return NormalizedRecipe(
        title=schema.name,
        description=schema.description,
        prep_time=parse_duration(schema.prep_time),
        cook_time=parse_duration(schema.cook_time),
        serves=parse_servings(schema.recipe_yield),
        category=category,
        ingredients=ingredients,
        method=method,
        nutrition=parse_nutrition(schema.nutrition),
        image_url=schema.image,
        original_url=original_url,
        original_author=schema.author,
        original_published_date=schema.date_published,
        rating=schema.rating,
    )
