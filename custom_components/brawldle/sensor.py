# File: sensor.py
"""Sensors for the Brawldle integration.

Three sensors per config entry:
1. DailyProgressSensor - completed daily modes (0-5) with per-mode detail
2. StreakSensor - consecutive days with every mode completed
3. SurvivalSensor - survival game status with the active round
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Any

from homeassistant.components.sensor import SensorEntity, SensorStateClass

from . import const
from .entity import BrawldleCoordinatorEntity
from .utils.dt_utils import dt_format_duration

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from .coordinator import BrawldleCoordinator


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up sensors for Brawldle integration."""
    coordinator: BrawldleCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]
    async_add_entities(
        [
            DailyProgressSensor(coordinator, entry),
            StreakSensor(coordinator, entry),
            SurvivalSensor(coordinator, entry),
        ]
    )


class DailyProgressSensor(BrawldleCoordinatorEntity, SensorEntity):
    """Number of daily modes completed today.

    Attributes carry each mode's guess count and completion, the countdown to
    the next reset and yesterday's answers.
    """

    _attr_icon = "mdi:calendar-check"
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(self, coordinator: BrawldleCoordinator, entry: ConfigEntry) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_KEY_DAILY_PROGRESS)

    @property
    def native_value(self) -> int:
        """Return completed mode count."""
        completed, _total = self.coordinator.daily_manager.completion_progress()
        return completed

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return per-mode progress (targets are never exposed)."""
        manager = self.coordinator.daily_manager
        state = manager.state
        _completed, total = manager.completion_progress()
        countdown = state.get(const.DATA_DAILY_TIME_UNTIL_NEXT, {})
        stored_modes = state.get(const.DATA_DAILY_MODES, {})
        modes = {
            mode: {
                const.DATA_MODE_GUESS_COUNT: stored_modes.get(mode, {}).get(
                    const.DATA_MODE_GUESS_COUNT, 0
                ),
                const.DATA_MODE_IS_COMPLETED: stored_modes.get(mode, {}).get(
                    const.DATA_MODE_IS_COMPLETED, False
                ),
            }
            for mode in const.DAILY_MODES
        }
        return {
            const.ATTR_CURRENT_DATE: state.get(const.DATA_DAILY_CURRENT_DATE),
            const.ATTR_TOTAL: total,
            const.ATTR_ALL_COMPLETED: manager.all_modes_completed(),
            const.ATTR_MODES: modes,
            const.ATTR_TIME_UNTIL_NEXT: dt_format_duration(
                timedelta(
                    hours=countdown.get(const.DATA_TIME_HOURS, 0),
                    minutes=countdown.get(const.DATA_TIME_MINUTES, 0),
                )
            ),
            const.ATTR_YESTERDAY_TARGETS: state.get(
                const.DATA_DAILY_YESTERDAY_TARGETS, {}
            ),
        }


class StreakSensor(BrawldleCoordinatorEntity, SensorEntity):
    """Consecutive days on which all daily modes were completed."""

    _attr_icon = "mdi:fire"
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(self, coordinator: BrawldleCoordinator, entry: ConfigEntry) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_KEY_STREAK)

    @property
    def native_value(self) -> int:
        """Return the streak length."""
        return self.coordinator.streak_manager.count

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return the last completed date."""
        return {
            const.ATTR_LAST_COMPLETED_DATE: self.coordinator.streak_manager.streak.get(
                const.DATA_STREAK_LAST_COMPLETED_DATE
            )
        }


class SurvivalSensor(BrawldleCoordinatorEntity, SensorEntity):
    """Survival game status (setup, playing, paused, gameover)."""

    _attr_icon = "mdi:sword-cross"

    def __init__(self, coordinator: BrawldleCoordinator, entry: ConfigEntry) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_KEY_SURVIVAL)

    @property
    def native_value(self) -> str:
        """Return the game status."""
        return self.coordinator.survival_manager.status

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return round counters and score; the round's character stays hidden."""
        manager = self.coordinator.survival_manager
        state = manager.state
        active = manager.active_round or {}
        return {
            const.DATA_SURVIVAL_CURRENT_ROUND: state.get(
                const.DATA_SURVIVAL_CURRENT_ROUND, 0
            ),
            const.DATA_SURVIVAL_TOTAL_SCORE: state.get(
                const.DATA_SURVIVAL_TOTAL_SCORE, 0
            ),
            const.DATA_SURVIVAL_LAST_ROUND_POINTS: state.get(
                const.DATA_SURVIVAL_LAST_ROUND_POINTS, 0
            ),
            const.DATA_ROUND_MODE: active.get(const.DATA_ROUND_MODE),
            const.DATA_ROUND_GUESS_QUOTA: active.get(const.DATA_ROUND_GUESS_QUOTA),
            const.DATA_ROUND_GUESSES_LEFT: active.get(const.DATA_ROUND_GUESSES_LEFT),
            const.DATA_ROUND_TIMER_LEFT: active.get(const.DATA_ROUND_TIMER_LEFT),
            const.DATA_ROUND_IS_ACTIVE: active.get(const.DATA_ROUND_IS_ACTIVE, False),
        }
