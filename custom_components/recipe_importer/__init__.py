"""
Recipe Importer Integration for Home Assistant.

This integration provides services to turn pasted recipe text, recipe web
pages and recipe photos into normalized, structured recipes using
schema.org data where available and Gemini otherwise.
"""
from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, ServiceCall, SupportsResponse
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.typing import ConfigType

from .const import (
    DOMAIN,
    CONF_API_KEY,
    CONF_MODEL,
    CONF_DEFAULT_MODEL,
    CONF_GENERATION_TIMEOUT,
    DEFAULT_MODEL,
    DEFAULT_GENERATION_TIMEOUT,
    MAX_PHOTO_IMAGES,
    SERVICE_EXTRACT_FROM_TEXT,
    SERVICE_EXTRACT_FROM_URL,
    SERVICE_EXTRACT_FROM_IMAGES,
    DATA_TEXT,
    DATA_URL,
    DATA_IMAGES,
    DATA_MODEL,
)
from .services.service_handlers import (
    handle_extract_from_images,
    handle_extract_from_text,
    handle_extract_from_url,
)

_LOGGER = logging.getLogger(__name__)

# Config flow only - no YAML support
CONFIG_SCHEMA = cv.empty_config_schema(DOMAIN)

# Service schemas
SERVICE_EXTRACT_FROM_TEXT_SCHEMA = vol.Schema(
    {
        vol.Required(DATA_TEXT): cv.string,
        vol.Optional(DATA_MODEL): cv.string,
    }
)

SERVICE_EXTRACT_FROM_URL_SCHEMA = vol.Schema(
    {
        vol.Required(DATA_URL): cv.url,
        vol.Optional(DATA_MODEL): cv.string,
    }
)

SERVICE_EXTRACT_FROM_IMAGES_SCHEMA = vol.Schema(
    {
        vol.Required(DATA_IMAGES): vol.All(
            cv.ensure_list, [cv.string], vol.Length(min=1, max=MAX_PHOTO_IMAGES)),
        vol.Optional(DATA_MODEL): cv.string,
    }
)

SERVICES = (
    (SERVICE_EXTRACT_FROM_TEXT, handle_extract_from_text, SERVICE_EXTRACT_FROM_TEXT_SCHEMA),
    (SERVICE_EXTRACT_FROM_URL, handle_extract_from_url, SERVICE_EXTRACT_FROM_URL_SCHEMA),
    (SERVICE_EXTRACT_FROM_IMAGES, handle_extract_from_images, SERVICE_EXTRACT_FROM_IMAGES_SCHEMA),
)


async def async_setup(hass: HomeAssistant, config: ConfigType) -> bool:
    """Set up the Recipe Importer integration."""
    # Initialize integration data storage
    hass.data.setdefault(DOMAIN, {})
    _LOGGER.debug("Recipe Importer integration setup complete")
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Recipe Importer from a config entry."""
    _LOGGER.info("Setting up Recipe Importer config entry")

    # Get configuration from options (preferred) or data
    api_key = entry.options.get(
        CONF_API_KEY) or entry.data.get(CONF_API_KEY, "")
    default_model = entry.options.get(
        CONF_DEFAULT_MODEL) or entry.data.get(CONF_MODEL, DEFAULT_MODEL)
    generation_timeout = entry.options.get(
        CONF_GENERATION_TIMEOUT, DEFAULT_GENERATION_TIMEOUT)

    if not api_key:
        _LOGGER.error("No API key configured for Recipe Importer")
        raise HomeAssistantError("Recipe Importer requires an API key")

    # Store entry configuration in hass.data
    hass.data.setdefault(DOMAIN, {})
    hass.data[DOMAIN][entry.entry_id] = {
        "api_key": api_key,
        "default_model": default_model,
        "generation_timeout": generation_timeout,
    }

    # Set up services only once (for the first entry)
    if len(hass.data[DOMAIN]) == 1:
        _setup_services(hass)
        _LOGGER.info("Recipe Importer services registered")

    # Listen for options updates
    entry.async_on_unload(entry.add_update_listener(async_reload_entry))

    _LOGGER.debug("Recipe Importer config entry setup complete")
    return True


async def async_reload_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the config entry when options change."""
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    _LOGGER.info("Unloading Recipe Importer config entry")

    # Remove entry data
    hass.data[DOMAIN].pop(entry.entry_id, None)

    # Remove services only if this is the last entry
    if not hass.data[DOMAIN]:
        for service, _handler, _schema in SERVICES:
            hass.services.async_remove(DOMAIN, service)
        _LOGGER.info("Recipe Importer services unregistered")

    return True


def _setup_services(hass: HomeAssistant) -> None:
    """Set up the integration services."""

    def _bind(handler):
        async def _handle(call: ServiceCall) -> dict[str, Any]:
            """Wrapper for a service handler that injects hass."""
            return await handler(hass, call)
        return _handle

    # Register the services with supports_response
    for service, handler, schema in SERVICES:
        hass.services.async_register(
            DOMAIN,
            service,
            _bind(handler),
            schema=schema,
            supports_response=SupportsResponse.ONLY,
        )
