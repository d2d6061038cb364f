"""Diagnostics support for Brawldle integration.

Returns the raw content of each store keyed by its storage key, plus the
config entry with secrets redacted.
"""

from __future__ import annotations

from typing import Any

from homeassistant.components.diagnostics import async_redact_data
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from . import const
from .coordinator import BrawldleCoordinator

TO_REDACT = {const.CONF_API_KEY, const.CONF_ACCESS_TOKEN, const.CONF_USER_ID}


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    coordinator: BrawldleCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]

    return {
        "entry": async_redact_data(
            {"data": dict(entry.data), "options": dict(entry.options)}, TO_REDACT
        ),
        "roster_size": len(coordinator.roster),
        "storage": {key: store.snapshot() for key, store in coordinator.stores.items()},
    }
