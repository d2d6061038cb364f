# File: __init__.py
"""Initialization file for the Brawldle integration.

Handles setting up the integration, including loading configuration entries,
initializing data storage, and preparing the coordinator for data handling.

Key Features:
- Config entry setup, unload and removal support.
- Coordinator initialization (stores, roster, managers).
- Service registration for gameplay actions.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from . import const
from .api import BrawldleApiClient
from .coordinator import BrawldleCoordinator, build_stores
from .roster import RosterProvider
from .services import async_setup_services, async_unload_services


def _entry_option(entry: ConfigEntry, key: str) -> str | None:
    """Options override the values captured by the config flow."""
    return entry.options.get(key, entry.data.get(key)) or None


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("INFO: Starting setup for Brawldle entry: %s", entry.entry_id)

    api = BrawldleApiClient(
        async_get_clientsession(hass),
        entry.data[const.CONF_API_URL],
        entry.data[const.CONF_API_KEY],
        _entry_option(entry, const.CONF_ACCESS_TOKEN),
    )

    roster = RosterProvider()
    await roster.async_load(hass)

    coordinator = BrawldleCoordinator(hass, entry, api, roster)
    await coordinator.async_initialize()

    try:
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady as e:
        const.LOGGER.error("ERROR: Failed to refresh coordinator data: %s", e)
        raise

    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
    }

    async_setup_services(hass)

    await hass.config_entries.async_forward_entry_setups(entry, const.PLATFORMS)
    entry.async_on_unload(entry.add_update_listener(_async_update_listener))

    const.LOGGER.info("INFO: Brawldle setup complete for entry: %s", entry.entry_id)
    return True


async def _async_update_listener(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload so a changed remote profile takes effect."""
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading Brawldle entry: %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, const.PLATFORMS)

    if unload_ok:
        hass.data[const.DOMAIN].pop(entry.entry_id)
        if not hass.data[const.DOMAIN]:
            await async_unload_services(hass)

    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle removal of a config entry: delete every store."""
    const.LOGGER.info("INFO: Removing Brawldle entry: %s", entry.entry_id)

    for store in build_stores(hass).values():
        await store.async_delete_storage()

    const.LOGGER.info("INFO: Brawldle entry data cleared: %s", entry.entry_id)
