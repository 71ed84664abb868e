"""Config flow for Recipe Importer integration."""
from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.data_entry_flow import FlowResult
from homeassistant.helpers import selector

from .const import (
    DOMAIN,
    AVAILABLE_MODELS,
    DEFAULT_MODEL,
    DEFAULT_GENERATION_TIMEOUT,
    CONF_API_KEY,
    CONF_DEFAULT_MODEL,
    CONF_GENERATION_TIMEOUT,
)

_LOGGER = logging.getLogger(__name__)


def _model_selector() -> selector.SelectSelector:
    return selector.SelectSelector(
        selector.SelectSelectorConfig(
            options=AVAILABLE_MODELS,
            mode=selector.SelectSelectorMode.DROPDOWN,
            custom_value=True,
        ),
    )


def _timeout_selector() -> selector.NumberSelector:
    return selector.NumberSelector(
        selector.NumberSelectorConfig(
            min=10,
            max=300,
            step=5,
            unit_of_measurement="s",
            mode=selector.NumberSelectorMode.BOX,
        ),
    )


def _api_key_selector() -> selector.TextSelector:
    return selector.TextSelector(
        selector.TextSelectorConfig(
            type=selector.TextSelectorType.PASSWORD,
        ),
    )


def _clean_input(user_input: dict[str, Any], errors: dict[str, str]) -> dict[str, Any]:
    """Strip the API key and flag it when empty."""
    cleaned = dict(user_input)
    api_key = (cleaned.get(CONF_API_KEY) or "").strip()
    if not api_key:
        errors[CONF_API_KEY] = "api_key_required"
    cleaned[CONF_API_KEY] = api_key
    return cleaned


class RecipeImporterConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Recipe Importer."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Handle the initial step."""
        errors: dict[str, str] = {}

        # Check if already configured
        await self.async_set_unique_id(DOMAIN)
        self._abort_if_unique_id_configured()

        if user_input is not None:
            options = _clean_input(user_input, errors)
            if not errors:
                _LOGGER.info("Creating Recipe Importer config entry")
                # Create the config entry with options
                return self.async_create_entry(
                    title="Recipe Importer",
                    data={},
                    options=options,
                )

        # Show the configuration form with all options
        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(
                {
                    vol.Required(CONF_API_KEY): _api_key_selector(),
                    vol.Optional(
                        CONF_DEFAULT_MODEL,
                        default=DEFAULT_MODEL,
                    ): _model_selector(),
                    vol.Optional(
                        CONF_GENERATION_TIMEOUT,
                        default=DEFAULT_GENERATION_TIMEOUT,
                    ): _timeout_selector(),
                }
            ),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> RecipeImporterOptionsFlow:
        """Get the options flow for this handler."""
        return RecipeImporterOptionsFlow()


class RecipeImporterOptionsFlow(config_entries.OptionsFlow):
    """Handle options flow for Recipe Importer."""

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Manage the options."""
        errors: dict[str, str] = {}

        if user_input is not None:
            options = _clean_input(user_input, errors)
            if not errors:
                _LOGGER.info("Updating Recipe Importer options")
                return self.async_create_entry(title="", data=options)

        # Get current options with proper defaults
        current = self.config_entry.options

        return self.async_show_form(
            step_id="init",
            data_schema=vol.Schema(
                {
                    vol.Optional(
                        CONF_API_KEY,
                        default=current.get(CONF_API_KEY, ""),
                    ): _api_key_selector(),
                    vol.Optional(
                        CONF_DEFAULT_MODEL,
                        default=current.get(CONF_DEFAULT_MODEL, DEFAULT_MODEL),
                    ): _model_selector(),
                    vol.Optional(
                        CONF_GENERATION_TIMEOUT,
                        default=current.get(
                            CONF_GENERATION_TIMEOUT, DEFAULT_GENERATION_TIMEOUT),
                    ): _timeout_selector(),
                }
            ),
            errors=errors,
        )
