"""Options Flow for the Brawldle integration.

Lets the user change the remote profile (user id / access token) used for
streak sync. The entry reloads when options change.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.helpers import config_validation as cv

from . import const


class BrawldleOptionsFlowHandler(config_entries.OptionsFlow):
    """Options Flow for the remote profile settings."""

    async def async_step_init(self, user_input: dict[str, Any] | None = None):
        """Show and save the profile options."""
        if user_input is not None:
            const.LOGGER.debug("DEBUG: Updating Brawldle options")
            return self.async_create_entry(title="", data=user_input)

        current = {**self.config_entry.data, **self.config_entry.options}
        schema = vol.Schema(
            {
                vol.Optional(
                    const.CONF_USER_ID, default=current.get(const.CONF_USER_ID, "")
                ): cv.string,
                vol.Optional(
                    const.CONF_ACCESS_TOKEN,
                    default=current.get(const.CONF_ACCESS_TOKEN, ""),
                ): cv.string,
            }
        )
        return self.async_show_form(
            step_id=const.OPTIONS_FLOW_STEP_INIT, data_schema=schema
        )
