"""Daily Manager - Daily challenge progress across the five sub-modes.

This manager handles all daily challenge operations:
- Day rollover (fixed UTC+2 boundary) and fetching of the day's targets
- Guess recording with duplicate protection
- Mode completion and the all-modes-completed signal
- Retry resets and the countdown to the next reset

ARCHITECTURE:
- DailyManager = STATEFUL owner of the daily store
- DailyEngine = Pure state transitions and payload parsing (STATELESS)
- StreakManager listens to ALL_MODES_COMPLETED events (Event Bus coupling)
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from .. import const
from ..api import FetchFailureError
from ..engines.daily_engine import DailyEngine
from ..utils.dt_utils import dt_time_until_next_reset
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..api import BrawldleApiClient
    from ..coordinator import BrawldleCoordinator
    from ..store import BrawldleStore
    from ..type_defs import (
        Character,
        DailyGameState,
        DailyModeState,
        GameMode,
        ISODate,
    )


class DailyManager(BaseManager):
    """Manager for the daily challenge record.

    Responsibilities:
    - Roll the record over when the game date changes
    - Fetch each mode's target independently, falling back on failure
    - Record guesses and completions
    - Emit SIGNAL_SUFFIX_MODE_COMPLETED / SIGNAL_SUFFIX_ALL_MODES_COMPLETED

    NOT responsible for:
    - Streak bookkeeping (handled by StreakManager via the event bus)
    - Deciding whether a guess is correct for the UI (service layer asks)
    """

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: BrawldleCoordinator,
        store: BrawldleStore,
        api: BrawldleApiClient,
    ) -> None:
        """Initialize the DailyManager.

        Args:
            hass: Home Assistant instance
            coordinator: The main Brawldle coordinator
            store: Store holding the DailyGameState
            api: Backend client used for challenge fetches
        """
        super().__init__(hass, coordinator)
        self._store = store
        self._api = api
        self._init_lock = asyncio.Lock()

    async def async_setup(self) -> None:
        """Load today's challenge state."""
        await self.async_initialize()

    # =========================================================================
    # STATE ACCESS
    # =========================================================================

    @property
    def state(self) -> DailyGameState:
        """Return the live daily record."""
        return self._store.data  # type: ignore[return-value]

    def get_mode_state(self, mode: GameMode) -> DailyModeState:
        """Return the record for `mode`, creating it if missing."""
        modes = self.state.setdefault(const.DATA_DAILY_MODES, {})
        if mode not in modes:
            modes[mode] = DailyEngine.empty_mode_state()
        return modes[mode]

    # =========================================================================
    # INITIALIZATION / ROLLOVER
    # =========================================================================

    async def async_initialize(self, today: ISODate | None = None) -> None:
        """Bring the daily record up to date for `today`.

        Rolls over when the stored date differs, fetches targets when they
        were not fetched for today, and always recomputes the countdown.
        Concurrent calls are serialised.
        """
        async with self._init_lock:
            today = today or self.coordinator.today_iso()

            if DailyEngine.needs_rollover(self.state, today):
                previous_date = self.state.get(const.DATA_DAILY_CURRENT_DATE)
                const.LOGGER.info(
                    "INFO: Daily rollover from %s to %s", previous_date, today
                )
                self._store.set_data(dict(DailyEngine.empty_game_state(today)))
                self.emit(
                    const.SIGNAL_SUFFIX_DAILY_ROLLOVER,
                    previous_date=previous_date,
                    current_date=today,
                )

            if DailyEngine.needs_fetch(self.state, today):
                await self._async_fetch_day(today)

            self.update_countdown()

        self.coordinator._persist_and_update(self._store)

    async def async_ensure_current(self) -> None:
        """Roll over first if the game date moved since the last check."""
        if DailyEngine.needs_rollover(self.state, self.coordinator.today_iso()):
            await self.async_initialize()

    async def async_refresh(self) -> None:
        """Force a re-fetch of today's targets, keeping guesses."""
        const.LOGGER.info("INFO: Forcing refresh of daily challenges")
        self.state[const.DATA_DAILY_LAST_FETCH_DATE] = None
        await self.async_initialize()

    async def _async_fetch_day(self, today: ISODate) -> None:
        clock_day = self.coordinator.today_iso()
        results = await asyncio.gather(
            *(self._async_fetch_target(mode, today) for mode in const.DAILY_MODES)
        )
        yesterday_targets = await self._async_fetch_yesterday_targets(today)

        if self.coordinator.today_iso() != clock_day:
            # Day changed mid-fetch; the next refresh rolls over and refetches
            const.LOGGER.warning(
                "WARNING: Discarding daily targets for %s fetched across a day change",
                today,
            )
            return

        for mode, (target_name, mode_payload) in zip(
            const.DAILY_MODES, results, strict=True
        ):
            mode_state = self.get_mode_state(mode)
            mode_state[const.DATA_MODE_TARGET_NAME] = target_name
            mode_state[const.DATA_MODE_PAYLOAD] = mode_payload

        self.state[const.DATA_DAILY_YESTERDAY_TARGETS] = yesterday_targets
        self.state[const.DATA_DAILY_LAST_FETCH_DATE] = today
        const.LOGGER.debug(
            "DEBUG: Daily targets set for %s across %s modes",
            today,
            len(const.DAILY_MODES),
        )

    async def _async_fetch_target(
        self, mode: GameMode, today: ISODate
    ) -> tuple[str, dict[str, Any] | None]:
        """Return (target name, mode payload); falls back on any failure."""
        try:
            payload = await self._api.async_fetch_daily_challenge(mode, today)
        except FetchFailureError as err:
            const.LOGGER.warning(
                "WARNING: Failed to fetch %s challenge for %s: %s. Using fallback",
                mode,
                today,
                err,
            )
            return DailyEngine.fallback_target(mode), None

        target_name = DailyEngine.extract_target_name(payload)
        if target_name is None:
            const.LOGGER.warning(
                "WARNING: No %s challenge available for %s. Using fallback",
                mode,
                today,
            )
            return DailyEngine.fallback_target(mode), None
        return target_name, DailyEngine.extract_mode_payload(payload)

    async def _async_fetch_yesterday_targets(
        self, today: ISODate
    ) -> dict[GameMode, str | None]:
        targets: dict[GameMode, str | None] = {}
        for mode in const.DAILY_MODES:
            try:
                payload = await self._api.async_fetch_yesterday_challenge(mode, today)
            except FetchFailureError as err:
                const.LOGGER.debug(
                    "DEBUG: Yesterday's %s challenge unavailable: %s", mode, err
                )
                payload = None
            targets[mode] = DailyEngine.extract_target_name(payload)
        return targets

    def update_countdown(self) -> None:
        """Recompute hours/minutes until the next reset."""
        hours, minutes = dt_time_until_next_reset(self.coordinator.now())
        self.state[const.DATA_DAILY_TIME_UNTIL_NEXT] = {
            const.DATA_TIME_HOURS: hours,
            const.DATA_TIME_MINUTES: minutes,
        }

    # =========================================================================
    # GAMEPLAY OPERATIONS
    # =========================================================================

    def submit_guess(self, mode: GameMode, guess: Character) -> bool:
        """Record a guess for `mode`.

        Returns:
            False if the character was already guessed today (no change).
        """
        updated = DailyEngine.apply_guess(self.get_mode_state(mode), guess)
        if updated is None:
            const.LOGGER.debug(
                "DEBUG: Ignoring duplicate %s guess '%s'",
                mode,
                guess[const.DATA_CHARACTER_NAME],
            )
            return False

        self.state[const.DATA_DAILY_MODES][mode] = updated
        self.coordinator._persist_and_update(self._store)
        return True

    def complete_mode(self, mode: GameMode) -> bool:
        """Mark `mode` completed for the current game date.

        Returns:
            True on the first completion. False if it was already completed
            or the target is not among the guesses yet.
        """
        today = self.state[const.DATA_DAILY_CURRENT_DATE]
        updated = DailyEngine.apply_completion(self.get_mode_state(mode), today)
        if updated is None:
            const.LOGGER.debug("DEBUG: Daily %s not completable", mode)
            return False

        self.state[const.DATA_DAILY_MODES][mode] = updated
        self.coordinator._persist_and_update(self._store)

        completed, total = DailyEngine.completion_progress(self.state)
        const.LOGGER.info(
            "INFO: Daily %s completed (%s/%s) for %s", mode, completed, total, today
        )
        self.emit(const.SIGNAL_SUFFIX_MODE_COMPLETED, mode=mode, date=today)

        if completed == total:
            self.emit(const.SIGNAL_SUFFIX_ALL_MODES_COMPLETED, date=today)
        return True

    def reset_guess_count(self, mode: GameMode) -> None:
        """Clear guesses and completion of `mode` for a retry."""
        self.state[const.DATA_DAILY_MODES][mode] = DailyEngine.apply_reset(
            self.get_mode_state(mode)
        )
        const.LOGGER.debug("DEBUG: Reset daily %s progress", mode)
        self.coordinator._persist_and_update(self._store)

    def is_correct_guess(self, mode: GameMode, name: str) -> bool:
        """Return True if `name` is today's target for `mode`."""
        return DailyEngine.is_correct_guess(self.get_mode_state(mode), name)

    def has_guessed_target(self, mode: GameMode) -> bool:
        """Return True if today's target for `mode` has been guessed."""
        return DailyEngine.has_guessed_target(self.get_mode_state(mode))

    def all_modes_completed(self) -> bool:
        """Return True iff all five sub-modes are completed."""
        return DailyEngine.all_modes_completed(self.state)

    def completion_progress(self) -> tuple[int, int]:
        """Return (completed modes, total modes)."""
        return DailyEngine.completion_progress(self.state)
