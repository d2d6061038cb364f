"""Survival Manager - Round state machine for the endless survival game.

This manager handles all survival operations:
- Game lifecycle (setup -> playing <-> paused -> gameover)
- Round start with quota, character/mode selection and cooldown window
- Guess accounting, round scoring and the per-second round timer
- Persisting settings as defaults for the next session

ARCHITECTURE:
- SurvivalManager = STATEFUL owner of the survival store and round timer
- SurvivalEngine = Pure quota, selection and scoring (STATELESS)

Selection errors caused by configuration (no modes, empty roster) are
returned as an error SelectionOutcome; any other failure degrades to the
first character and mode so the round loop never stops.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Any

from homeassistant.core import CALLBACK_TYPE, callback
from homeassistant.helpers.event import async_track_time_interval

from .. import const
from ..engines.survival_engine import (
    EmptyRosterError,
    InvalidConfigurationError,
    Selection,
    SelectionOutcome,
    SurvivalEngine,
)
from .base_manager import BaseManager

if TYPE_CHECKING:
    from datetime import datetime
    import random

    from homeassistant.core import HomeAssistant

    from ..coordinator import BrawldleCoordinator
    from ..roster import RosterProvider
    from ..store import BrawldleStore
    from ..type_defs import (
        Character,
        GameMode,
        SurvivalGameState,
        SurvivalRoundState,
        SurvivalSettings,
    )


# Timer ticks are persisted lazily (seconds)
TIMER_SAVE_DELAY = 5
TIMER_TICK_INTERVAL = timedelta(seconds=1)


def default_settings() -> SurvivalSettings:
    """Return settings used when nothing was saved yet."""
    return {
        const.DATA_SETTINGS_ENABLED_MODES: list(const.DEFAULT_SURVIVAL_MODES),
        const.DATA_SETTINGS_ROTATION: const.DEFAULT_ROTATION,
        const.DATA_SETTINGS_ROUND_TIMER_SECONDS: const.DEFAULT_ROUND_TIMER_SECONDS,
    }


def empty_game_state(settings: SurvivalSettings | None = None) -> SurvivalGameState:
    """Return the initial (setup) survival record."""
    return {
        const.DATA_SURVIVAL_SETTINGS: settings,
        const.DATA_SURVIVAL_CURRENT_ROUND: 0,
        const.DATA_SURVIVAL_STATUS: const.SURVIVAL_STATUS_SETUP,
        const.DATA_SURVIVAL_ACTIVE_ROUND: None,
        const.DATA_SURVIVAL_RECENTLY_USED: [],
        const.DATA_SURVIVAL_PREVIOUS_MODE: SurvivalEngine.reset_selection_memory(),
        const.DATA_SURVIVAL_TOTAL_SCORE: 0,
        const.DATA_SURVIVAL_LAST_ROUND_POINTS: 0,
    }


def normalize_settings(raw: dict[str, Any] | None) -> SurvivalSettings:
    """Coerce user or stored settings into valid SurvivalSettings.

    Unknown and duplicate modes are dropped, keeping order. Invalid rotation
    or timer values fall back to the defaults.

    Raises:
        InvalidConfigurationError: No valid sub-mode remains enabled.
    """
    raw = raw or {}
    modes: list[GameMode] = []
    for mode in raw.get(const.DATA_SETTINGS_ENABLED_MODES) or []:
        if mode in const.SURVIVAL_MODES and mode not in modes:
            modes.append(mode)
    if not modes:
        raise InvalidConfigurationError("At least one game mode must be enabled")

    rotation = raw.get(const.DATA_SETTINGS_ROTATION)
    if rotation not in const.ROTATION_POLICIES:
        rotation = const.DEFAULT_ROTATION

    try:
        timer = int(raw.get(const.DATA_SETTINGS_ROUND_TIMER_SECONDS))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        timer = const.DEFAULT_ROUND_TIMER_SECONDS
    if timer <= 0:
        timer = const.DEFAULT_ROUND_TIMER_SECONDS

    return {
        const.DATA_SETTINGS_ENABLED_MODES: modes,
        const.DATA_SETTINGS_ROTATION: rotation,
        const.DATA_SETTINGS_ROUND_TIMER_SECONDS: timer,
    }


class SurvivalManager(BaseManager):
    """Manager for the survival game record and its round timer.

    Responsibilities:
    - Drive the status state machine
    - Start rounds and report ok/degraded/error selection outcomes
    - Score won rounds and end the game on an exhausted quota or timer
    - Emit SIGNAL_SUFFIX_SURVIVAL_GAME_OVER

    NOT responsible for:
    - Choosing characters or modes (SurvivalEngine)
    - Looking up characters by name (service layer via RosterProvider)
    """

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: BrawldleCoordinator,
        store: BrawldleStore,
        settings_store: BrawldleStore,
        roster: RosterProvider,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the SurvivalManager.

        Args:
            hass: Home Assistant instance
            coordinator: The main Brawldle coordinator
            store: Store holding the SurvivalGameState
            settings_store: Store holding the default SurvivalSettings
            roster: Character roster
            rng: Random source for selection (OS randomness when None)
        """
        super().__init__(hass, coordinator)
        self._store = store
        self._settings_store = settings_store
        self._roster = roster
        self.rng = rng
        self._unsub_timer: CALLBACK_TYPE | None = None

    async def async_setup(self) -> None:
        """Restore the saved game; a game left running resumes paused."""
        self.coordinator.config_entry.async_on_unload(self._cancel_timer)

        if self.state.get(const.DATA_SURVIVAL_STATUS) == const.SURVIVAL_STATUS_PLAYING:
            const.LOGGER.info(
                "INFO: Restored survival game in round %s as paused",
                self.state.get(const.DATA_SURVIVAL_CURRENT_ROUND),
            )
            self.state[const.DATA_SURVIVAL_STATUS] = const.SURVIVAL_STATUS_PAUSED
            self.coordinator._persist(self._store)

    # =========================================================================
    # STATE ACCESS
    # =========================================================================

    @property
    def state(self) -> SurvivalGameState:
        """Return the live survival record."""
        return self._store.data  # type: ignore[return-value]

    @property
    def status(self) -> str:
        """Return the current game status."""
        return self.state.get(const.DATA_SURVIVAL_STATUS, const.SURVIVAL_STATUS_SETUP)

    @property
    def active_round(self) -> SurvivalRoundState | None:
        """Return the round in progress, if any."""
        return self.state.get(const.DATA_SURVIVAL_ACTIVE_ROUND)

    @property
    def default_settings(self) -> SurvivalSettings:
        """Return the settings saved by the last session."""
        try:
            return normalize_settings(self._settings_store.data)
        except InvalidConfigurationError:
            return default_settings()

    @property
    def settings(self) -> SurvivalSettings | None:
        """Return the settings of the current game."""
        return self.state.get(const.DATA_SURVIVAL_SETTINGS)

    @property
    def timer_running(self) -> bool:
        """Return True while the round timer is scheduled."""
        return self._unsub_timer is not None

    # =========================================================================
    # GAME LIFECYCLE
    # =========================================================================

    def initialize_game(self, settings: dict[str, Any] | None = None) -> None:
        """Start a fresh game in `playing` without starting round 1.

        Raises:
            InvalidConfigurationError: No valid sub-mode enabled.
        """
        validated = normalize_settings(settings or self.default_settings)
        self._cancel_timer()

        state = empty_game_state(validated)
        state[const.DATA_SURVIVAL_STATUS] = const.SURVIVAL_STATUS_PLAYING
        self._store.set_data(dict(state))
        self._settings_store.set_data(dict(validated))

        const.LOGGER.info(
            "INFO: Survival game initialized with modes %s (%s rotation)",
            validated[const.DATA_SETTINGS_ENABLED_MODES],
            validated[const.DATA_SETTINGS_ROTATION],
        )
        self.coordinator._persist(self._settings_store)
        self.coordinator._persist_and_update(self._store)

    def start_next_round(self, explicit_mode: GameMode | None = None) -> SelectionOutcome:
        """Advance to the next round.

        Returns:
            SelectionOutcome tagged ok, degraded (fallback used) or error
            (game left untouched).
        """
        if self.status != const.SURVIVAL_STATUS_PLAYING:
            return SelectionOutcome.error(const.ERROR_GAME_NOT_STARTED)

        settings = self.settings
        recently_used = list(self.state.get(const.DATA_SURVIVAL_RECENTLY_USED, []))
        characters = self._roster.list_characters()

        try:
            selection = SurvivalEngine.select_next(
                characters,
                settings,  # type: ignore[arg-type]
                recently_used,
                previous_mode=self.state.get(const.DATA_SURVIVAL_PREVIOUS_MODE),
                explicit_mode=explicit_mode,
                rng=self.rng,
            )
            outcome = SelectionOutcome.ok(selection)
        except (InvalidConfigurationError, EmptyRosterError) as err:
            const.LOGGER.warning("WARNING: Cannot start survival round: %s", err)
            return SelectionOutcome.error(str(err))
        except Exception as err:  # pylint: disable=broad-exception-caught
            const.LOGGER.error(
                "ERROR: Survival selection failed, using fallback: %s", err
            )
            selection = Selection(
                characters[0][const.DATA_CHARACTER_ID],
                explicit_mode
                or settings[const.DATA_SETTINGS_ENABLED_MODES][0],  # type: ignore[index]
            )
            outcome = SelectionOutcome.degraded(selection, repr(err))

        round_number = self.state.get(const.DATA_SURVIVAL_CURRENT_ROUND, 0) + 1
        quota = SurvivalEngine.next_guess_quota(round_number)
        timer_seconds = settings[const.DATA_SETTINGS_ROUND_TIMER_SECONDS]  # type: ignore[index]

        self.state[const.DATA_SURVIVAL_CURRENT_ROUND] = round_number
        self.state[const.DATA_SURVIVAL_PREVIOUS_MODE] = selection.mode
        self.state[const.DATA_SURVIVAL_RECENTLY_USED] = (
            SurvivalEngine.update_recently_used(recently_used, selection.character_id)
        )
        self.state[const.DATA_SURVIVAL_ACTIVE_ROUND] = {
            const.DATA_ROUND_NUMBER: round_number,
            const.DATA_ROUND_CHARACTER_ID: selection.character_id,
            const.DATA_ROUND_MODE: selection.mode,
            const.DATA_ROUND_GUESS_QUOTA: quota,
            const.DATA_ROUND_GUESSES_LEFT: quota,
            const.DATA_ROUND_TIMER_LEFT: timer_seconds,
            const.DATA_ROUND_TIMER_SECONDS: timer_seconds,
            const.DATA_ROUND_IS_ACTIVE: True,
        }

        const.LOGGER.debug(
            "DEBUG: Survival round %s started (%s, quota %s, outcome %s)",
            round_number,
            selection.mode,
            quota,
            outcome.status,
        )
        self._start_timer(round_number)
        self.coordinator._persist_and_update(self._store)
        return outcome

    def pause_game(self) -> bool:
        """Pause a playing game; returns False when not playing."""
        if self.status != const.SURVIVAL_STATUS_PLAYING:
            return False
        self._cancel_timer()
        self.state[const.DATA_SURVIVAL_STATUS] = const.SURVIVAL_STATUS_PAUSED
        self.coordinator._persist_and_update(self._store)
        return True

    def resume_game(self) -> bool:
        """Resume a paused game; returns False when not paused."""
        if self.status != const.SURVIVAL_STATUS_PAUSED:
            return False
        self.state[const.DATA_SURVIVAL_STATUS] = const.SURVIVAL_STATUS_PLAYING
        active = self.active_round
        if active and active.get(const.DATA_ROUND_IS_ACTIVE):
            self._start_timer(active[const.DATA_ROUND_NUMBER])
        self.coordinator._persist_and_update(self._store)
        return True

    def game_over(self) -> None:
        """End the game; the active round becomes inactive."""
        if self.status == const.SURVIVAL_STATUS_GAMEOVER:
            return
        self._cancel_timer()
        self.state[const.DATA_SURVIVAL_STATUS] = const.SURVIVAL_STATUS_GAMEOVER
        active = self.active_round
        if active is not None:
            active[const.DATA_ROUND_IS_ACTIVE] = False

        const.LOGGER.info(
            "INFO: Survival game over at round %s with %s points",
            self.state.get(const.DATA_SURVIVAL_CURRENT_ROUND),
            self.state.get(const.DATA_SURVIVAL_TOTAL_SCORE),
        )
        self.coordinator._persist_and_update(self._store)
        self.emit(
            const.SIGNAL_SUFFIX_SURVIVAL_GAME_OVER,
            round=self.state.get(const.DATA_SURVIVAL_CURRENT_ROUND),
            total_score=self.state.get(const.DATA_SURVIVAL_TOTAL_SCORE),
        )

    def quit_game(self) -> None:
        """Return to setup, keeping the settings for a quick restart."""
        self._cancel_timer()
        self._store.set_data(dict(empty_game_state(self.settings)))
        const.LOGGER.info("INFO: Survival game quit")
        self.coordinator._persist_and_update(self._store)

    def reset_survival(self) -> None:
        """Discard the game record entirely (settings included)."""
        self._cancel_timer()
        self._store.set_data(dict(empty_game_state()))
        const.LOGGER.info("INFO: Survival game reset")
        self.coordinator._persist_and_update(self._store)

    def update_settings(self, **changes: Any) -> SurvivalSettings:
        """Change settings for the next rounds and the next session.

        Raises:
            InvalidConfigurationError: The change leaves no valid mode enabled.
        """
        current = self.settings or self.default_settings
        validated = normalize_settings({**current, **changes})

        self._settings_store.set_data(dict(validated))
        self.coordinator._persist(self._settings_store)
        if self.settings is not None:
            self.state[const.DATA_SURVIVAL_SETTINGS] = validated
        self.coordinator._persist_and_update(self._store)
        return validated

    # =========================================================================
    # ROUND OPERATIONS
    # =========================================================================

    def decrement_guess(self) -> int | None:
        """Use up one guess; returns guesses left (None without a round)."""
        active = self.active_round
        if active is None:
            return None
        if active[const.DATA_ROUND_GUESSES_LEFT] <= 0:
            return 0
        active[const.DATA_ROUND_GUESSES_LEFT] -= 1
        self.coordinator._persist_and_update(self._store)
        return active[const.DATA_ROUND_GUESSES_LEFT]

    def set_timer_left(self, seconds: int) -> None:
        """Overwrite the remaining round time (no-op without a round)."""
        active = self.active_round
        if active is None:
            return
        active[const.DATA_ROUND_TIMER_LEFT] = seconds
        self._store.schedule_save(TIMER_SAVE_DELAY)
        self.coordinator.async_update_listeners()

    def record_round_won(self) -> int:
        """Score the active round, close it and add to the total.

        The winning guess counts as used.

        Returns:
            Points awarded (0 when no round is active).
        """
        active = self.active_round
        if active is None or not active.get(const.DATA_ROUND_IS_ACTIVE):
            return 0

        settings = self.settings or self.default_settings
        guesses_used = (
            active[const.DATA_ROUND_GUESS_QUOTA]
            - active[const.DATA_ROUND_GUESSES_LEFT]
            + 1
        )
        # Rounds saved before the timer length was recorded use the settings
        elapsed = SurvivalEngine.elapsed_seconds(
            active.get(
                const.DATA_ROUND_TIMER_SECONDS,
                settings[const.DATA_SETTINGS_ROUND_TIMER_SECONDS],
            ),
            active.get(const.DATA_ROUND_TIMER_LEFT),
        )
        points = SurvivalEngine.calculate_round_points(guesses_used, elapsed)

        self._cancel_timer()
        active[const.DATA_ROUND_IS_ACTIVE] = False
        self.state[const.DATA_SURVIVAL_LAST_ROUND_POINTS] = points
        self.state[const.DATA_SURVIVAL_TOTAL_SCORE] = (
            self.state.get(const.DATA_SURVIVAL_TOTAL_SCORE, 0) + points
        )
        const.LOGGER.info(
            "INFO: Survival round %s won: %s points (%s guesses, %ss)",
            active[const.DATA_ROUND_NUMBER],
            points,
            guesses_used,
            elapsed,
        )
        self.coordinator._persist_and_update(self._store)
        return points

    def submit_guess(self, character: Character) -> dict[str, Any]:
        """Check a guess against the active round.

        A correct guess scores the round; a wrong one costs a guess and ends
        the game when none are left.

        Raises:
            InvalidConfigurationError: No active round accepts guesses.
        """
        active = self.active_round
        if (
            self.status != const.SURVIVAL_STATUS_PLAYING
            or active is None
            or not active.get(const.DATA_ROUND_IS_ACTIVE)
        ):
            raise InvalidConfigurationError(const.ERROR_NO_ACTIVE_ROUND)

        correct = (
            character[const.DATA_CHARACTER_ID] == active[const.DATA_ROUND_CHARACTER_ID]
        )
        points = 0
        if correct:
            points = self.record_round_won()
        elif self.decrement_guess() == 0:
            self.game_over()

        return {
            const.RESPONSE_CORRECT: correct,
            const.RESPONSE_POINTS: points,
            const.RESPONSE_GUESSES_LEFT: active[const.DATA_ROUND_GUESSES_LEFT],
            const.RESPONSE_STATUS: self.status,
            const.RESPONSE_ROUND: active[const.DATA_ROUND_NUMBER],
        }

    # =========================================================================
    # ROUND TIMER
    # =========================================================================

    def _start_timer(self, round_number: int) -> None:
        self._cancel_timer()

        @callback
        def _tick(_now: datetime) -> None:
            self.async_tick(round_number)

        self._unsub_timer = async_track_time_interval(
            self.hass, _tick, TIMER_TICK_INTERVAL
        )

    @callback
    def _cancel_timer(self) -> None:
        if self._unsub_timer is not None:
            self._unsub_timer()
            self._unsub_timer = None

    @callback
    def async_tick(self, round_number: int) -> None:
        """Count the round timer down by one second.

        Ticks for a round that is no longer the active one are ignored.
        """
        active = self.active_round
        if (
            self.status != const.SURVIVAL_STATUS_PLAYING
            or active is None
            or not active.get(const.DATA_ROUND_IS_ACTIVE)
            or active.get(const.DATA_ROUND_NUMBER) != round_number
        ):
            const.LOGGER.debug(
                "DEBUG: Ignoring stale survival timer tick for round %s", round_number
            )
            return

        remaining = max(0, (active.get(const.DATA_ROUND_TIMER_LEFT) or 0) - 1)
        self.set_timer_left(remaining)
        if remaining == 0:
            const.LOGGER.info("INFO: Survival round %s timed out", round_number)
            self.game_over()
