"""
Service Handlers.

This module contains the Home Assistant service handler functions for
extracting recipes from text, web pages and photos.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from homeassistant.core import HomeAssistant, ServiceCall
from homeassistant.exceptions import ServiceValidationError

from ..const import (
    DATA_ERROR,
    DATA_IMAGES,
    DATA_MODEL,
    DATA_PARTIAL_RECIPE,
    DATA_RECIPE,
    DATA_SOURCE,
    DATA_TEXT,
    DATA_URL,
    DOMAIN,
    EVENT_EXTRACTION_FAILED,
    EVENT_EXTRACTION_STARTED,
    EVENT_RECIPE_EXTRACTED,
    EVENT_RECIPE_INCOMPLETE,
)
from ..extractors import GeminiRecipeClient, RecipeExtractor
from ..models.result import ExtractionFailure, ExtractionIncomplete, ExtractionSuccess

_LOGGER = logging.getLogger(__name__)


def get_entry_config(hass: HomeAssistant) -> dict[str, Any] | None:
    """Get configuration from the first available config entry.

    Returns:
        Configuration dict or None if no entries exist
    """
    if not hass.data.get(DOMAIN):
        return None

    # Get first entry's config (services are shared across all entries)
    entry_id = next(iter(hass.data[DOMAIN]))
    return hass.data[DOMAIN][entry_id]


def build_extractor(api_key: str, model: str, timeout: float) -> RecipeExtractor:
    """Create an extractor for one service call."""
    return RecipeExtractor(GeminiRecipeClient(api_key, model_id=model, timeout=timeout))


async def _run_extraction(
    hass: HomeAssistant,
    call: ServiceCall,
    source: str,
    event_data: dict[str, Any],
    extract: Callable[[RecipeExtractor], Any],
) -> dict[str, Any]:
    config = get_entry_config(hass)
    if not config:
        _LOGGER.error("No configuration found for Recipe Importer")
        raise ServiceValidationError("Recipe Importer is not configured")

    model = call.data.get(DATA_MODEL) or config["default_model"]
    _LOGGER.info("Extracting recipe from %s using model %s", source, model)

    event_data = {DATA_SOURCE: source, **event_data}
    hass.bus.async_fire(EVENT_EXTRACTION_STARTED, event_data)

    def _extract():
        try:
            extractor = build_extractor(
                config["api_key"], model, config["generation_timeout"])
        except Exception as e:
            _LOGGER.error("Could not create the Gemini client: %s", e, exc_info=True)
            return ExtractionFailure(error=f"Could not initialize the AI model: {e}")
        return extract(extractor)

    # Run extraction in executor (blocking I/O)
    result = await hass.async_add_executor_job(_extract)
    response = result.model_dump(mode="json", exclude_none=True)

    if isinstance(result, ExtractionSuccess):
        hass.bus.async_fire(
            EVENT_RECIPE_EXTRACTED,
            {**event_data, DATA_RECIPE: response[DATA_RECIPE]},
        )
        _LOGGER.info("Recipe extraction from %s successful: '%s'",
                     source, result.recipe.title)
    elif isinstance(result, ExtractionIncomplete):
        hass.bus.async_fire(
            EVENT_RECIPE_INCOMPLETE,
            {
                **event_data,
                DATA_ERROR: result.error,
                DATA_PARTIAL_RECIPE: response.get(DATA_PARTIAL_RECIPE),
            },
        )
        _LOGGER.warning("Recipe extraction from %s incomplete: %s",
                        source, result.error)
    else:
        hass.bus.async_fire(
            EVENT_EXTRACTION_FAILED,
            {**event_data, DATA_ERROR: result.error},
        )
        _LOGGER.warning("Recipe extraction from %s failed: %s",
                        source, result.error)

    return response


async def handle_extract_from_text(hass: HomeAssistant, call: ServiceCall) -> dict[str, Any]:
    """Handle the extract from text service call.

    Args:
        hass: Home Assistant instance
        call: Service call with text and optional model

    Returns:
        The extraction result as a dictionary
    """
    text = call.data[DATA_TEXT]
    return await _run_extraction(
        hass, call, "text", {},
        lambda extractor: extractor.extract_from_text(text),
    )


async def handle_extract_from_url(hass: HomeAssistant, call: ServiceCall) -> dict[str, Any]:
    """Handle the extract from URL service call.

    Args:
        hass: Home Assistant instance
        call: Service call with url and optional model

    Returns:
        The extraction result as a dictionary
    """
    url = call.data[DATA_URL]
    return await _run_extraction(
        hass, call, "url", {DATA_URL: url},
        lambda extractor: extractor.extract_from_url(url),
    )


async def handle_extract_from_images(hass: HomeAssistant, call: ServiceCall) -> dict[str, Any]:
    """Handle the extract from images service call.

    Args:
        hass: Home Assistant instance
        call: Service call with a list of base64 images and optional model

    Returns:
        The extraction result as a dictionary
    """
    images = list(call.data[DATA_IMAGES])
    return await _run_extraction(
        hass, call, "images", {},
        lambda extractor: extractor.extract_from_images(images),
    )
