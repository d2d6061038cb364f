# File: store.py
"""Handles persistent data storage for the Brawldle integration.

Uses Home Assistant's Storage helper to save and load game state, ensuring
the state is preserved across restarts. Each record (daily progress, survival
game, streak, survival settings defaults) lives under its own storage key with
its own schema version, so a schema change to one never migrates the others.
"""

from __future__ import annotations

from collections.abc import Callable
import copy
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.storage import Store

from . import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


class _VersionedStore(Store[dict[str, Any]]):
    """Store that upgrades older records by filling in new default keys."""

    def __init__(
        self,
        hass: HomeAssistant,
        version: int,
        key: str,
        default_factory: Callable[[], dict[str, Any]],
    ) -> None:
        super().__init__(hass, version, key)
        self._default_factory = default_factory

    async def _async_migrate_func(
        self, old_major_version: int, old_minor_version: int, old_data: dict
    ) -> dict[str, Any]:
        const.LOGGER.info(
            "INFO: Migrating storage '%s' from version %s.%s to %s",
            self.key,
            old_major_version,
            old_minor_version,
            self.version,
        )
        return {**self._default_factory(), **(old_data or {})}


class BrawldleStore:
    """Handles persistent storage operations for one Brawldle record.

    Thin wrapper around Home Assistant's Store API for loading, saving, and
    accessing a single namespaced dict.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        storage_key: str,
        version: int,
        default_factory: Callable[[], dict[str, Any]],
    ) -> None:
        """Initialize the store.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location.
            version: Schema version of this record.
            default_factory: Builds the empty record for fresh installs.

        """
        self.hass = hass
        self._storage_key = storage_key
        self._default_factory = default_factory
        self._store = _VersionedStore(hass, version, storage_key, default_factory)
        self._data: dict[str, Any] = {}  # In-memory data cache for quick access.

    async def async_initialize(self) -> None:
        """Load data from storage during startup.

        If no data exists, initializes with the default structure. Missing keys
        in existing data are filled from the defaults.
        """
        const.LOGGER.debug("DEBUG: BrawldleStore: Loading '%s'", self._storage_key)
        try:
            existing_data = await self._store.async_load()
        except (OSError, ValueError) as err:
            const.LOGGER.error(
                "ERROR: Failed to load storage '%s': %s. Starting from defaults",
                self._storage_key,
                err,
            )
            existing_data = None

        if existing_data is None:
            const.LOGGER.info(
                "INFO: No existing storage found for '%s'. Initializing new data",
                self._storage_key,
            )
            self._data = self._default_factory()
        else:
            self._data = {**self._default_factory(), **existing_data}
            const.LOGGER.debug(
                "DEBUG: Loaded existing data for '%s': %s keys",
                self._storage_key,
                len(self._data.keys()),
            )

    @property
    def data(self) -> dict[str, Any]:
        """Retrieve the in-memory data cache."""
        return self._data

    def set_data(self, new_data: dict[str, Any]) -> None:
        """Replace the entire in-memory data structure."""
        self._data = new_data

    def snapshot(self) -> dict[str, Any]:
        """Return a deep copy of the current data (for diagnostics/sensors)."""
        return copy.deepcopy(self._data)

    async def async_save(self) -> None:
        """Save the current data structure to storage asynchronously.

        Errors are logged but do not stop execution.
        """
        try:
            await self._store.async_save(self._data)
            const.LOGGER.debug("DEBUG: Data saved successfully to '%s'", self._storage_key)
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )
        except TypeError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to non-serializable data: %s. "
                "Data contains types that cannot be converted to JSON",
                err,
            )
        except ValueError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to invalid data format: %s. "
                "Data structure may be corrupted",
                err,
            )

    def schedule_save(self, delay: float) -> None:
        """Coalesce frequent writes (e.g. timer ticks) into one delayed save."""
        self._store.async_delay_save(lambda: self._data, delay)

    async def async_delete_storage(self) -> None:
        """Delete the storage file completely from disk."""
        self._data = self._default_factory()
        try:
            await self._store.async_remove()
            const.LOGGER.info(
                "INFO: Storage file removed successfully: %s",
                self._store.path,
            )
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to remove storage file %s: %s. Check file permissions",
                self._store.path,
                err,
            )
