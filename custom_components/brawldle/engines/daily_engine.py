"""Daily Engine - Pure logic for daily challenge progress.

This engine provides stateless, pure Python functions for:
- Building empty per-mode and whole-day state records
- Rollover detection against the stored game date
- Duplicate-safe guess recording
- Completion bookkeeping and aggregate progress
- Normalising challenge payloads into a target name

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data and return
new records instead of mutating their inputs. State management belongs in
DailyManager.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const

if TYPE_CHECKING:
    from ..type_defs import (
        Character,
        DailyGameState,
        DailyModeState,
        GameMode,
        ISODate,
    )


class DailyEngine:
    """Pure logic engine for the five daily sub-modes.

    All methods are static - no instance state. This enables easy unit testing
    without any Home Assistant mocking.
    """

    @staticmethod
    def empty_mode_state() -> DailyModeState:
        """Return a fresh, untouched mode record."""
        return {
            const.DATA_MODE_TARGET_NAME: "",
            const.DATA_MODE_PAYLOAD: None,
            const.DATA_MODE_GUESS_COUNT: 0,
            const.DATA_MODE_IS_COMPLETED: False,
            const.DATA_MODE_LAST_COMPLETED_DATE: None,
            const.DATA_MODE_GUESSES: [],
        }

    @staticmethod
    def empty_game_state(today: ISODate) -> DailyGameState:
        """Return a fresh daily record for `today`."""
        return {
            const.DATA_DAILY_CURRENT_DATE: today,
            const.DATA_DAILY_MODES: {
                mode: DailyEngine.empty_mode_state() for mode in const.DAILY_MODES
            },
            const.DATA_DAILY_LAST_FETCH_DATE: None,
            const.DATA_DAILY_TIME_UNTIL_NEXT: {
                const.DATA_TIME_HOURS: 0,
                const.DATA_TIME_MINUTES: 0,
            },
            const.DATA_DAILY_YESTERDAY_TARGETS: {
                mode: None for mode in const.DAILY_MODES
            },
        }

    @staticmethod
    def needs_rollover(state: DailyGameState, today: ISODate) -> bool:
        """Return True when the stored day is not today."""
        return state.get(const.DATA_DAILY_CURRENT_DATE) != today

    @staticmethod
    def needs_fetch(state: DailyGameState, today: ISODate) -> bool:
        """Return True when today's targets have not been fetched yet."""
        return state.get(const.DATA_DAILY_LAST_FETCH_DATE) != today

    @staticmethod
    def is_duplicate_guess(mode_state: DailyModeState, name: str) -> bool:
        """Return True if `name` was already guessed (case-insensitive)."""
        wanted = name.strip().casefold()
        return any(
            str(guess.get(const.DATA_CHARACTER_NAME, "")).casefold() == wanted
            for guess in mode_state.get(const.DATA_MODE_GUESSES, [])
        )

    @staticmethod
    def apply_guess(
        mode_state: DailyModeState, guess: Character
    ) -> DailyModeState | None:
        """Return the mode record with `guess` recorded, or None if duplicate.

        The guess list and the counter change together so that
        guess_count == len(guesses) always holds.
        """
        if DailyEngine.is_duplicate_guess(mode_state, guess[const.DATA_CHARACTER_NAME]):
            return None

        guesses = [*mode_state.get(const.DATA_MODE_GUESSES, []), dict(guess)]
        return {
            **mode_state,
            const.DATA_MODE_GUESSES: guesses,
            const.DATA_MODE_GUESS_COUNT: mode_state.get(const.DATA_MODE_GUESS_COUNT, 0)
            + 1,
        }

    @staticmethod
    def apply_completion(
        mode_state: DailyModeState, today: ISODate
    ) -> DailyModeState | None:
        """Return the completed mode record.

        Returns None if the mode is already completed or the target has not
        been guessed yet; a completed mode always holds the winning guess.
        """
        if mode_state.get(const.DATA_MODE_IS_COMPLETED):
            return None
        if not DailyEngine.has_guessed_target(mode_state):
            return None
        return {
            **mode_state,
            const.DATA_MODE_IS_COMPLETED: True,
            const.DATA_MODE_LAST_COMPLETED_DATE: today,
        }

    @staticmethod
    def apply_reset(mode_state: DailyModeState) -> DailyModeState:
        """Clear guesses and completion for a retry, keeping the target."""
        return {
            **mode_state,
            const.DATA_MODE_GUESS_COUNT: 0,
            const.DATA_MODE_IS_COMPLETED: False,
            const.DATA_MODE_GUESSES: [],
        }

    @staticmethod
    def is_correct_guess(mode_state: DailyModeState, name: str) -> bool:
        """Return True if `name` matches the day's target (case-insensitive)."""
        target = mode_state.get(const.DATA_MODE_TARGET_NAME) or ""
        return bool(target) and target.casefold() == name.strip().casefold()

    @staticmethod
    def has_guessed_target(mode_state: DailyModeState) -> bool:
        """Return True if the guesses include the day's target."""
        return any(
            DailyEngine.is_correct_guess(
                mode_state, str(guess.get(const.DATA_CHARACTER_NAME, ""))
            )
            for guess in mode_state.get(const.DATA_MODE_GUESSES, [])
        )

    @staticmethod
    def all_modes_completed(state: DailyGameState) -> bool:
        """Return True iff every daily sub-mode is completed."""
        modes = state.get(const.DATA_DAILY_MODES, {})
        return all(
            modes.get(mode, {}).get(const.DATA_MODE_IS_COMPLETED, False)
            for mode in const.DAILY_MODES
        )

    @staticmethod
    def completion_progress(state: DailyGameState) -> tuple[int, int]:
        """Return (completed modes, total modes)."""
        modes = state.get(const.DATA_DAILY_MODES, {})
        completed = sum(
            1
            for mode in const.DAILY_MODES
            if modes.get(mode, {}).get(const.DATA_MODE_IS_COMPLETED, False)
        )
        return completed, len(const.DAILY_MODES)

    # =========================================================================
    # CHALLENGE PAYLOADS
    # =========================================================================

    @staticmethod
    def fallback_target(mode: GameMode) -> str:
        """Return the target used when a mode's challenge is unavailable."""
        return const.FALLBACK_TARGETS.get(mode, const.DEFAULT_FALLBACK_TARGET)

    @staticmethod
    def extract_target_name(payload: Any) -> str | None:
        """Pull the target character name out of a challenge payload.

        Payloads are either a bare name ("Spike") or an object naming the
        character under one of CHALLENGE_PAYLOAD_TARGET_KEYS.
        """
        if isinstance(payload, str):
            return payload.strip() or None
        if isinstance(payload, dict):
            for key in const.CHALLENGE_PAYLOAD_TARGET_KEYS:
                value = payload.get(key)
                if isinstance(value, str) and value.strip():
                    return value.strip()
        return None

    @staticmethod
    def extract_mode_payload(payload: Any) -> dict[str, Any] | None:
        """Return the mode-specific extras (gadget name, audio file, ...)."""
        if not isinstance(payload, dict):
            return None
        extras = {
            key: value
            for key, value in payload.items()
            if key not in const.CHALLENGE_PAYLOAD_TARGET_KEYS
        }
        return extras or None
