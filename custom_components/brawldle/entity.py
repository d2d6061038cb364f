"""Base entity classes for Brawldle integration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from . import const
from .coordinator import BrawldleCoordinator

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry


class BrawldleCoordinatorEntity(CoordinatorEntity[BrawldleCoordinator]):
    """Base entity class for Brawldle sensors with typed coordinator access.

    All entities of one config entry share a single service device.
    """

    _attr_has_entity_name = True

    def __init__(
        self, coordinator: BrawldleCoordinator, entry: ConfigEntry, key: str
    ) -> None:
        """Initialize the entity.

        Args:
            coordinator: BrawldleCoordinator instance for data access.
            entry: ConfigEntry for this integration instance.
            key: Sensor key, used for the unique id and translation key.
        """
        super().__init__(coordinator)
        self._attr_unique_id = f"{entry.entry_id}_{key}"
        self._attr_translation_key = key
        self._attr_device_info = DeviceInfo(
            identifiers={(const.DOMAIN, entry.entry_id)},
            name=const.BRAWLDLE_TITLE,
            entry_type=DeviceEntryType.SERVICE,
        )

    @property
    def coordinator(self) -> BrawldleCoordinator:
        """Return typed coordinator."""
        return object.__getattribute__(self, "_coordinator")

    @coordinator.setter
    def coordinator(self, value: BrawldleCoordinator) -> None:
        object.__setattr__(self, "_coordinator", value)
