"""Outcome of a single extraction call."""
from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from .recipe import NormalizedRecipe, PartialRecipe


class ExtractionSuccess(BaseModel):
    """The source produced a complete, normalized recipe."""

    status: Literal["success"] = "success"
    recipe: NormalizedRecipe


class ExtractionIncomplete(BaseModel):
    """The model output did not satisfy the schema.

    ``partial_recipe`` holds what could be recovered, or None when nothing
    usable was left.
    """

    status: Literal["incomplete"] = "incomplete"
    error: str
    partial_recipe: PartialRecipe | None = None


class ExtractionFailure(BaseModel):
    """The call failed outright; there is never partial data."""

    status: Literal["failure"] = "failure"
    error: str


ExtractionResult = Annotated[
    Union[ExtractionSuccess, ExtractionIncomplete, ExtractionFailure],
    Field(discriminator="status"),
]

EXTRACTION_RESULT_ADAPTER: TypeAdapter[ExtractionResult] = TypeAdapter(
    ExtractionResult)
