# File: coordinator.py
"""Coordinator for the Brawldle integration.

Owns the four stores, the roster, the backend client and the three managers.
The periodic refresh (every minute) rolls the daily record over at the UTC+2
day boundary, refreshes the reset countdown and expires lapsed streaks, so
those happen even while nobody plays.

All "today" decisions go through `clock`, which tests replace to simulate
day changes.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from . import const
from .engines.daily_engine import DailyEngine
from .engines.streak_engine import StreakEngine
from .managers import DailyManager, StreakManager, SurvivalManager
from .managers.survival_manager import default_settings, empty_game_state
from .store import BrawldleStore
from .utils.dt_utils import dt_now_utc, dt_today_iso, dt_yesterday_iso

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

    from .api import BrawldleApiClient
    from .roster import RosterProvider


def build_stores(hass: HomeAssistant) -> dict[str, BrawldleStore]:
    """Create one independently versioned store per record."""
    return {
        const.STORAGE_KEY_DAILY: BrawldleStore(
            hass,
            const.STORAGE_KEY_DAILY,
            const.STORAGE_VERSION_DAILY,
            lambda: dict(DailyEngine.empty_game_state("")),
        ),
        const.STORAGE_KEY_SURVIVAL: BrawldleStore(
            hass,
            const.STORAGE_KEY_SURVIVAL,
            const.STORAGE_VERSION_SURVIVAL,
            lambda: dict(empty_game_state()),
        ),
        const.STORAGE_KEY_STREAK: BrawldleStore(
            hass,
            const.STORAGE_KEY_STREAK,
            const.STORAGE_VERSION_STREAK,
            lambda: dict(StreakEngine.empty_streak()),
        ),
        const.STORAGE_KEY_SURVIVAL_SETTINGS: BrawldleStore(
            hass,
            const.STORAGE_KEY_SURVIVAL_SETTINGS,
            const.STORAGE_VERSION_SURVIVAL_SETTINGS,
            lambda: dict(default_settings()),
        ),
    }


class BrawldleCoordinator(DataUpdateCoordinator[dict[str, Any]]):
    """Coordinator for the Brawldle integration."""

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        api: BrawldleApiClient,
        roster: RosterProvider,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the BrawldleCoordinator."""
        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=timedelta(minutes=const.DEFAULT_UPDATE_INTERVAL),
        )
        self.config_entry = config_entry
        self.api = api
        self.roster = roster
        self.clock: Callable[[], datetime] = clock or dt_now_utc
        self.stores = build_stores(hass)

        user_id = config_entry.options.get(
            const.CONF_USER_ID, config_entry.data.get(const.CONF_USER_ID)
        )
        self.daily_manager = DailyManager(
            hass, self, self.stores[const.STORAGE_KEY_DAILY], api
        )
        self.survival_manager = SurvivalManager(
            hass,
            self,
            self.stores[const.STORAGE_KEY_SURVIVAL],
            self.stores[const.STORAGE_KEY_SURVIVAL_SETTINGS],
            roster,
        )
        self.streak_manager = StreakManager(
            hass,
            self,
            self.stores[const.STORAGE_KEY_STREAK],
            api,
            user_id=user_id or None,
        )

    # -------------------------------------------------------------------------------------
    # Clock
    # -------------------------------------------------------------------------------------

    def now(self) -> datetime:
        """Return the current instant from the injected clock."""
        return self.clock()

    def today_iso(self) -> str:
        """Return today's game date (UTC+2) as ISO string."""
        return dt_today_iso(self.clock())

    def yesterday_iso(self) -> str:
        """Return yesterday's game date (UTC+2) as ISO string."""
        return dt_yesterday_iso(self.clock())

    # -------------------------------------------------------------------------------------
    # Setup / Refresh
    # -------------------------------------------------------------------------------------

    async def async_initialize(self) -> None:
        """Load stores, then let each manager restore its state."""
        for store in self.stores.values():
            await store.async_initialize()

        # Streak listens before daily can report a completed day
        await self.streak_manager.async_setup()
        await self.survival_manager.async_setup()
        await self.daily_manager.async_setup()
        self.data = self._build_data()

        const.LOGGER.info(
            "INFO: Brawldle coordinator ready (%s characters, streak %s)",
            len(self.roster),
            self.streak_manager.count,
        )

    async def _async_update_data(self) -> dict[str, Any]:
        """Periodic update: rollover, countdown and streak expiry."""
        try:
            await self.daily_manager.async_ensure_current()
            self.daily_manager.update_countdown()
            self.streak_manager.check_expiry()
        except Exception as err:  # pylint: disable=broad-exception-caught
            raise UpdateFailed(f"Error updating Brawldle data: {err}") from err
        return self._build_data()

    def _build_data(self) -> dict[str, Any]:
        return {
            const.STORAGE_KEY_DAILY: self.daily_manager.state,
            const.STORAGE_KEY_SURVIVAL: self.survival_manager.state,
            const.STORAGE_KEY_STREAK: self.streak_manager.streak,
        }

    # -------------------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------------------

    def _persist(self, store: BrawldleStore) -> None:
        """Save one store in the background."""
        self.hass.async_create_task(store.async_save())

    def _persist_and_update(self, store: BrawldleStore) -> None:
        """Save one store and notify entities."""
        self._persist(store)
        self.data = self._build_data()
        self.async_update_listeners()
