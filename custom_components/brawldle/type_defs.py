"""Type definitions for Brawldle data structures.

All stored records are plain JSON-serialisable dicts. TypedDicts describe the
fixed-key structures; per-mode maps keyed by mode name use dict[str, ...].

IMPORTANT: This file must NOT import from coordinator.py, managers, or any
module that imports the coordinator, to avoid circular dependencies.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime validation lives in the
managers and the service schemas.
"""

from typing import Any, Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

CharacterId = int
GameMode = str  # One of const.DAILY_MODES
ISODate = str  # ISO 8601 date string (no time) "2026-01-18"

SurvivalStatus = Literal["setup", "playing", "paused", "gameover"]
RotationPolicy = Literal["cycle", "repeat"]
SelectionStatus = Literal["ok", "degraded", "error"]


# =============================================================================
# Roster
# =============================================================================


class Character(TypedDict):
    """A playable character supplied by the roster."""

    id: CharacterId
    name: str
    rarity: NotRequired[str]
    # "class" is a keyword, so category fields are read with .get()
    movement: NotRequired[str]
    range: NotRequired[str]
    reload: NotRequired[str]
    release_year: NotRequired[int]


# =============================================================================
# Daily
# =============================================================================


class TimeUntilNext(TypedDict):
    """Countdown to the next daily reset."""

    hours: int
    minutes: int


class DailyModeState(TypedDict):
    """Progress for one daily sub-mode."""

    target_name: str
    mode_payload: NotRequired[dict[str, Any] | None]
    guess_count: int
    is_completed: bool
    last_completed_date: ISODate | None
    guesses: list[Character]


class DailyGameState(TypedDict):
    """Whole daily record (one store)."""

    current_date: ISODate
    modes: dict[GameMode, DailyModeState]
    last_fetch_date: ISODate | None
    time_until_next: TimeUntilNext
    yesterday_targets: dict[GameMode, str | None]


# =============================================================================
# Survival
# =============================================================================


class SurvivalSettings(TypedDict):
    """Player-chosen survival settings."""

    enabled_modes: list[GameMode]
    rotation: RotationPolicy
    round_timer_seconds: int


class SurvivalRoundState(TypedDict):
    """The round in progress (replaced wholesale every round)."""

    round_number: int
    current_character_id: CharacterId | None
    current_mode: GameMode | None
    guess_quota: int
    guesses_left: int
    timer_left: int | None
    round_timer_seconds: int
    is_active: bool


class SurvivalGameState(TypedDict):
    """Whole survival record (one store)."""

    settings: SurvivalSettings | None
    current_round: int
    status: SurvivalStatus
    active_round: SurvivalRoundState | None
    recently_used: list[CharacterId]
    previous_mode: GameMode | None
    total_score: int
    last_round_points: int


# =============================================================================
# Streak
# =============================================================================


class StreakData(TypedDict):
    """Consecutive-day completion streak."""

    count: int
    last_completed_date: ISODate | None


class RemoteProfile(TypedDict):
    """Streak fields of the remote user profile."""

    current_streak: int
    last_completed_date: ISODate | None
