"""
Gemini client for structured recipe extraction.

The model is asked for JSON matching a candidate schema; the answer is then
validated against the same pydantic model. A response that is not valid
JSON or fails validation raises SchemaNotSatisfiedError carrying whatever
the model did return, so the caller can salvage a partial recipe.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any, TypeVar

from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import BaseModel, ValidationError

from ..const import DEFAULT_GENERATION_TIMEOUT, DEFAULT_MODEL
from ..exceptions import GenerationError, SchemaNotSatisfiedError
from ..models.schema import response_schema

_LOGGER = logging.getLogger(__name__)

CandidateT = TypeVar("CandidateT", bound=BaseModel)


class GeminiRecipeClient:
    """Calls Gemini in JSON mode and validates the answer.

    Args:
        api_key: Gemini API key
        model_id: Model to use, e.g. 'gemini-2.5-flash'
        timeout: Request timeout in seconds
        temperature: Sampling temperature
    """

    def __init__(
        self,
        api_key: str,
        model_id: str = DEFAULT_MODEL,
        timeout: float = DEFAULT_GENERATION_TIMEOUT,
        temperature: float = 0.1,
    ) -> None:
        if not api_key:
            raise ValueError("A Gemini API key is required")

        self.model_id = model_id
        self.temperature = temperature
        # HttpOptions takes the timeout in milliseconds
        self._client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )
        _LOGGER.debug("Initialized GeminiRecipeClient with model: %s", model_id)

    def generate(
        self,
        candidate_model: type[CandidateT],
        system_prompt: str,
        contents: Sequence[Any],
    ) -> CandidateT:
        """Ask the model for a payload matching ``candidate_model``.

        Args:
            candidate_model: Strict candidate model describing the answer
            system_prompt: System instruction for the model
            contents: User content: text and ``types.Part`` image parts

        Returns:
            The validated candidate

        Raises:
            GenerationError: If the API call fails or times out
            SchemaNotSatisfiedError: If the answer does not satisfy the schema
        """
        config = types.GenerateContentConfig(
            system_instruction=system_prompt,
            response_mime_type="application/json",
            response_schema=response_schema(candidate_model),
            temperature=self.temperature,
        )

        _LOGGER.debug("Requesting %s from %s",
                      candidate_model.__name__, self.model_id)
        try:
            response = self._client.models.generate_content(
                model=self.model_id,
                contents=list(contents),
                config=config,
            )
        except genai_errors.APIError as e:
            raise GenerationError(f"Gemini API error: {e}") from e
        except Exception as e:
            # Transport errors (timeouts, connection resets) come from httpx
            raise GenerationError(f"Gemini request failed: {e}") from e

        text = response.text
        if not text:
            raise SchemaNotSatisfiedError("The model returned no content")

        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise SchemaNotSatisfiedError(
                f"The model returned invalid JSON: {e}", raw=text) from e

        try:
            return candidate_model.model_validate(raw)
        except ValidationError as e:
            _LOGGER.warning("Model response failed %s validation: %d error(s)",
                            candidate_model.__name__, e.error_count())
            raise SchemaNotSatisfiedError(
                f"The model response did not match the recipe schema: {e}",
                raw=raw) from e


def image_part(data: bytes, mime_type: str) -> types.Part:
    """Wrap raw image bytes as a Gemini content part."""
    return types.Part.from_bytes(data=data, mime_type=mime_type)
