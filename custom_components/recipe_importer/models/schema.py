"""
Strict extraction schemas for the generative model.

The candidate models below describe exactly what the model has to return.
Optional values are declared nullable *and* required (no default), so every
property appears in the response schema's required list and the model has
to emit an explicit null instead of leaving a key out. A payload that fails
validation against these models is treated as incomplete, not discarded.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..vocabulary import RecipeCategory

# Keywords understood by the Gemini response schema (OpenAPI subset)
_SCHEMA_KEYWORDS = ("type", "format", "description", "enum", "minimum", "maximum")


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class CandidateIngredient(_StrictModel):
    name: str = Field(
        min_length=1,
        description="Ingredient name only, without amount, unit or preparation",
    )
    amount: float | None = Field(
        description="Numeric amount with fractions as decimals (1/2 = 0.5)")
    unit: str | None = Field(
        description="One of the available units, or null")
    preparation: str | None = Field(
        description="One of the available preparations, or null")


class CandidateMethodStep(_StrictModel):
    title: str = Field(description="Short descriptive title (3-5 words)")
    description: str | None = Field(description="Complete instruction text")


class CandidateNutrition(_StrictModel):
    calories: float = Field(ge=0, description="Calories per serving")
    protein: float = Field(ge=0, description="Protein per serving in grams")
    fat: float = Field(ge=0, description="Fat per serving in grams")
    carbohydrates: float = Field(
        ge=0, description="Carbohydrates per serving in grams")


class StructuredDataCandidate(_StrictModel):
    """Structuring of ingredient and instruction strings taken from JSON-LD."""

    ingredients: list[CandidateIngredient]
    category: RecipeCategory
    method: list[CandidateMethodStep]


class PageRecipeCandidate(_StrictModel):
    """A recipe read from the visible text of a web page."""

    title: str = Field(min_length=1)
    description: str | None
    prep_time: int = Field(ge=0, description="Preparation time in minutes")
    cook_time: int = Field(ge=0, description="Cooking time in minutes")
    serves: int = Field(ge=0)
    category: RecipeCategory
    ingredients: list[CandidateIngredient]
    method: list[CandidateMethodStep]
    nutrition: CandidateNutrition | None
    image_url: str | None = Field(description="Recipe image URL, or null")
    author: str | None = Field(description="Recipe author, or null")


class TextRecipeCandidate(_StrictModel):
    """A recipe read from pasted text or photographs.

    ``success``/``error_message`` let the model report input that is not a
    recipe at all. Nutrition is always required.
    """

    success: bool
    error_message: str
    title: str
    description: str
    prep_time: int = Field(ge=0, description="Preparation time in minutes")
    cook_time: int = Field(ge=0, description="Cooking time in minutes")
    serves: int = Field(ge=0)
    category: RecipeCategory
    ingredients: list[CandidateIngredient]
    method: list[CandidateMethodStep]
    nutrition: CandidateNutrition


def response_schema(model: type[BaseModel]) -> dict[str, Any]:
    """Convert a candidate model into a Gemini response schema.

    Pydantic emits JSON Schema; the Gemini API accepts an OpenAPI subset.
    References are inlined, ``anyOf [X, null]`` becomes ``X`` with
    ``nullable: true``, every property is listed as required and keywords
    the API does not understand are dropped.

    Args:
        model: A candidate model class

    Returns:
        A response schema dictionary

    Raises:
        ValueError: If the model uses a union other than ``X | None``
    """
    json_schema = model.model_json_schema()
    return _convert_node(json_schema, json_schema.get("$defs", {}))


def _convert_node(node: dict[str, Any], definitions: dict[str, Any]) -> dict[str, Any]:
    if "$ref" in node:
        name = node["$ref"].rsplit("/", 1)[-1]
        merged = {**definitions[name], **
                  {k: v for k, v in node.items() if k != "$ref"}}
        return _convert_node(merged, definitions)

    if "allOf" in node and len(node["allOf"]) == 1:
        merged = {**node["allOf"][0], **
                  {k: v for k, v in node.items() if k != "allOf"}}
        return _convert_node(merged, definitions)

    if "anyOf" in node:
        options = [option for option in node["anyOf"]
                   if option.get("type") != "null"]
        if len(options) != 1:
            raise ValueError(
                f"Unsupported union in response schema: {node['anyOf']}")
        converted = _convert_node(options[0], definitions)
        if "description" in node:
            converted["description"] = node["description"]
        if len(options) != len(node["anyOf"]):
            converted["nullable"] = True
        return converted

    result: dict[str, Any] = {}
    if "const" in node:
        result["type"] = "string"
        result["enum"] = [node["const"]]
    for keyword in _SCHEMA_KEYWORDS:
        if keyword in node:
            result[keyword] = node[keyword]

    if "properties" in node:
        properties = {
            name: _convert_node(child, definitions)
            for name, child in node["properties"].items()
        }
        result["type"] = "object"
        result["properties"] = properties
        result["required"] = list(properties)
        result["propertyOrdering"] = list(properties)

    if "items" in node:
        result["items"] = _convert_node(node["items"], definitions)

    return result
