# File: config_flow.py
"""Config flow for the Brawldle integration.

A single step collects the backend URL and API key, plus an optional remote
user id and access token for streak sync. The backend is checked before the
entry is created.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from . import const
from .api import BrawldleApiClient
from .options_flow import BrawldleOptionsFlowHandler


def _user_schema(defaults: dict[str, Any]) -> vol.Schema:
    return vol.Schema(
        {
            vol.Required(
                const.CONF_API_URL, default=defaults.get(const.CONF_API_URL, "")
            ): cv.string,
            vol.Required(
                const.CONF_API_KEY, default=defaults.get(const.CONF_API_KEY, "")
            ): cv.string,
            vol.Optional(
                const.CONF_USER_ID, default=defaults.get(const.CONF_USER_ID, "")
            ): cv.string,
            vol.Optional(
                const.CONF_ACCESS_TOKEN,
                default=defaults.get(const.CONF_ACCESS_TOKEN, ""),
            ): cv.string,
        }
    )


class BrawldleConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for Brawldle."""

    VERSION = 1

    async def async_step_user(self, user_input: dict[str, Any] | None = None):
        """Collect and validate backend settings."""
        if any(self._async_current_entries()):
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        errors: dict[str, str] = {}
        if user_input is not None:
            try:
                api_url = cv.url(user_input[const.CONF_API_URL].strip())
            except vol.Invalid:
                errors[const.CONF_API_URL] = const.TRANS_KEY_ERROR_INVALID_URL
            else:
                api = BrawldleApiClient(
                    async_get_clientsession(self.hass),
                    api_url,
                    user_input[const.CONF_API_KEY],
                    user_input.get(const.CONF_ACCESS_TOKEN) or None,
                )
                if await api.async_check_connection():
                    data = {**user_input, const.CONF_API_URL: api_url}
                    const.LOGGER.info("INFO: Creating Brawldle entry for %s", api_url)
                    return self.async_create_entry(
                        title=const.BRAWLDLE_TITLE, data=data
                    )
                errors[const.TRANS_KEY_ERROR_BASE] = (
                    const.TRANS_KEY_ERROR_CANNOT_CONNECT
                )

        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_USER,
            data_schema=_user_schema(user_input or {}),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Return the Options Flow."""
        return BrawldleOptionsFlowHandler()
