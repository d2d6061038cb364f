"""Survival Engine - Pure logic for survival round selection and scoring.

This engine provides stateless, pure Python functions for:
- Guess quota per round (shrinking step table)
- Next character + sub-mode selection under rotation and cooldown rules
- Cooldown window maintenance
- Round scoring (base + guess bonus + time bonus)

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data.
The "previous mode" memory is passed in and returned explicitly, so two games
never share selection state. State management belongs in SurvivalManager.
"""

from __future__ import annotations

from dataclasses import dataclass
import random
import secrets
from typing import TYPE_CHECKING

from .. import const

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..type_defs import Character, CharacterId, GameMode, SurvivalSettings


# =============================================================================
# EXCEPTIONS
# =============================================================================


class InvalidConfigurationError(Exception):
    """Raised when survival settings cannot produce a round (no sub-modes)."""


class EmptyRosterError(Exception):
    """Raised when there are no characters to select from."""


# =============================================================================
# SELECTION RESULT STRUCTURES
# =============================================================================


@dataclass(frozen=True)
class Selection:
    """Character and sub-mode chosen for a round."""

    character_id: CharacterId
    mode: GameMode


@dataclass(frozen=True)
class SelectionOutcome:
    """Tagged result of a round start.

    Attributes:
        status: SELECTION_STATUS_OK, SELECTION_STATUS_DEGRADED or
                SELECTION_STATUS_ERROR
        selection: The selection used (None on error)
        reason: Why the round degraded or failed (None when ok)
    """

    status: str
    selection: Selection | None = None
    reason: str | None = None

    @classmethod
    def ok(cls, selection: Selection) -> SelectionOutcome:
        """Selection worked as intended."""
        return cls(const.SELECTION_STATUS_OK, selection)

    @classmethod
    def degraded(cls, selection: Selection, reason: str) -> SelectionOutcome:
        """Selection recovered from a bad state with a fallback."""
        return cls(const.SELECTION_STATUS_DEGRADED, selection, reason)

    @classmethod
    def error(cls, reason: str) -> SelectionOutcome:
        """No round could be started."""
        return cls(const.SELECTION_STATUS_ERROR, None, reason)

    @property
    def is_error(self) -> bool:
        """Return True when no selection was produced."""
        return self.status == const.SELECTION_STATUS_ERROR


def _default_rng() -> random.Random:
    """Return the OS-backed RNG, or a seeded PRNG if the OS source is missing."""
    try:
        rng: random.Random = secrets.SystemRandom()
        rng.random()
    except NotImplementedError:
        const.LOGGER.warning(
            "WARNING: OS randomness unavailable, using pseudo-random selection"
        )
        return random.Random()
    return rng


# =============================================================================
# SURVIVAL ENGINE
# =============================================================================


class SurvivalEngine:
    """Pure logic engine for survival rounds.

    All methods are static - no instance state. This enables easy unit testing
    without any Home Assistant mocking.

    Selection Flow:
        1. Manager passes roster, settings, cooldown ids and previous mode
        2. Engine validates, picks mode (rotation policy) and character (cooldown)
        3. Engine returns the Selection; manager stores the new previous mode
           and cooldown window and persists the round
    """

    @staticmethod
    def next_guess_quota(round_number: int) -> int:
        """Return the guesses allowed for the round about to start.

        Canonical table: 1-3 → 9, 4-6 → 8, 7-9 → 7, 10-12 → 6, 13-15 → 5,
        16-18 → 4, 19+ → 3. Rounds below 1 are treated as round 1.
        """
        round_number = max(1, round_number)
        for last_round, quota in const.GUESS_QUOTA_TABLE:
            if round_number <= last_round:
                return quota
        return const.GUESS_QUOTA_FLOOR

    @staticmethod
    def reset_selection_memory() -> GameMode | None:
        """Return fresh selection memory for a new game (no previous mode)."""
        return None

    @staticmethod
    def select_mode(
        settings: SurvivalSettings,
        previous_mode: GameMode | None,
        rng: random.Random,
    ) -> GameMode:
        """Pick the next sub-mode according to the rotation policy.

        Never repeats the previous mode back-to-back when another is enabled.
        """
        modes = list(settings[const.DATA_SETTINGS_ENABLED_MODES])
        if len(modes) == 1:
            return modes[0]

        if settings.get(const.DATA_SETTINGS_ROTATION) == const.ROTATION_CYCLE:
            if previous_mode not in modes:
                return modes[0]
            return modes[(modes.index(previous_mode) + 1) % len(modes)]

        candidates = [mode for mode in modes if mode != previous_mode]
        return rng.choice(candidates)

    @staticmethod
    def select_character(
        characters: Sequence[Character],
        recently_used: Sequence[CharacterId],
        rng: random.Random,
    ) -> Character:
        """Pick a character, skipping the cooldown window when possible.

        If the cooldown would leave nobody to pick, the full roster is used.
        """
        cooldown = set(recently_used)
        candidates = [
            character
            for character in characters
            if character[const.DATA_CHARACTER_ID] not in cooldown
        ]
        if not candidates:
            const.LOGGER.debug(
                "DEBUG: Cooldown excludes whole roster (%s characters), ignoring it",
                len(characters),
            )
            candidates = list(characters)

        return candidates[rng.randrange(len(candidates))]

    @staticmethod
    def select_next(
        characters: Sequence[Character],
        settings: SurvivalSettings,
        recently_used: Sequence[CharacterId],
        previous_mode: GameMode | None = None,
        explicit_mode: GameMode | None = None,
        rng: random.Random | None = None,
    ) -> Selection:
        """Select the character and sub-mode for the next round.

        Args:
            characters: Full roster
            settings: Survival settings (enabled modes, rotation)
            recently_used: Character ids in the cooldown window
            previous_mode: Mode chosen last round (selection memory)
            explicit_mode: Forces the mode; the character cooldown still applies
            rng: Random source (defaults to OS-backed randomness)

        Returns:
            Selection; its mode is the caller's next previous_mode

        Raises:
            InvalidConfigurationError: No sub-modes enabled
            EmptyRosterError: Roster is empty
        """
        if not settings or not settings.get(const.DATA_SETTINGS_ENABLED_MODES):
            raise InvalidConfigurationError("No game modes enabled in settings")
        if not characters:
            raise EmptyRosterError("No characters available for selection")

        rng = rng or _default_rng()
        mode = explicit_mode or SurvivalEngine.select_mode(settings, previous_mode, rng)
        character = SurvivalEngine.select_character(characters, recently_used, rng)

        const.LOGGER.debug(
            "DEBUG: Survival selection: %s (ID: %s) in mode '%s' from %s characters",
            character[const.DATA_CHARACTER_NAME],
            character[const.DATA_CHARACTER_ID],
            mode,
            len(characters),
        )
        return Selection(character[const.DATA_CHARACTER_ID], mode)

    @staticmethod
    def update_recently_used(
        recently_used: Sequence[CharacterId],
        character_id: CharacterId,
        window: int = const.COOLDOWN_WINDOW,
    ) -> list[CharacterId]:
        """Prepend the new character id, keeping only the last `window` ids."""
        return [character_id, *recently_used][:window]

    # =========================================================================
    # SCORING
    # =========================================================================

    @staticmethod
    def elapsed_seconds(round_timer_seconds: int, timer_left: int | None) -> int:
        """Seconds spent in the round; a missing timer counts as no time spent."""
        if timer_left is None:
            return 0
        return max(0, round_timer_seconds - timer_left)

    @staticmethod
    def calculate_round_points(guesses_used: int, elapsed_seconds: int) -> int:
        """Return points for a round won.

        base 100 + max(0, 55 - 5 * guesses_used)
                 + max(0, 30 - elapsed_seconds // 5)

        Example:
            3 guesses, 12 seconds → 100 + 40 + 28 = 168
        """
        guess_bonus = max(
            0,
            const.SCORE_GUESS_BONUS_START - guesses_used * const.SCORE_GUESS_BONUS_STEP,
        )
        time_bonus = max(
            0,
            const.SCORE_TIME_BONUS_START
            - elapsed_seconds // const.SCORE_TIME_BONUS_INTERVAL_SECONDS,
        )
        return const.SCORE_BASE_POINTS + guess_bonus + time_bonus
