"""Unit tests for DailyEngine - pure Python logic tests.

Test Categories:
- Empty records and rollover detection
- Duplicate-safe guess recording
- Completion, reset and aggregate progress
- Challenge payload parsing and fallbacks
"""

from __future__ import annotations

import pytest

from custom_components.brawldle import const
from custom_components.brawldle.engines.daily_engine import DailyEngine

SPIKE = {const.DATA_CHARACTER_ID: 6, const.DATA_CHARACTER_NAME: "Spike"}
COLT = {const.DATA_CHARACTER_ID: 2, const.DATA_CHARACTER_NAME: "Colt"}


def _with_target(name: str) -> dict:
    return {**DailyEngine.empty_mode_state(), const.DATA_MODE_TARGET_NAME: name}


# =============================================================================
# Test: Records and rollover
# =============================================================================


class TestEmptyState:
    """Tests for fresh records."""

    def test_game_state_has_all_modes(self) -> None:
        """A new day tracks every daily mode, nothing fetched yet."""
        state = DailyEngine.empty_game_state("2024-01-05")
        assert state[const.DATA_DAILY_CURRENT_DATE] == "2024-01-05"
        assert set(state[const.DATA_DAILY_MODES]) == set(const.DAILY_MODES)
        assert state[const.DATA_DAILY_LAST_FETCH_DATE] is None

    def test_mode_state_is_untouched(self) -> None:
        """A new mode has no guesses and is not completed."""
        mode_state = DailyEngine.empty_mode_state()
        assert mode_state[const.DATA_MODE_GUESS_COUNT] == 0
        assert mode_state[const.DATA_MODE_GUESSES] == []
        assert mode_state[const.DATA_MODE_IS_COMPLETED] is False

    def test_mode_states_are_independent(self) -> None:
        """Each mode gets its own guess list."""
        state = DailyEngine.empty_game_state("2024-01-05")
        state[const.DATA_DAILY_MODES][const.MODE_CLASSIC][
            const.DATA_MODE_GUESSES
        ].append(SPIKE)
        assert state[const.DATA_DAILY_MODES][const.MODE_GADGET][
            const.DATA_MODE_GUESSES
        ] == []


class TestRolloverDetection:
    """Tests for needs_rollover / needs_fetch."""

    def test_same_day(self) -> None:
        """No rollover on the stored day."""
        state = DailyEngine.empty_game_state("2024-01-05")
        assert not DailyEngine.needs_rollover(state, "2024-01-05")

    def test_new_day(self) -> None:
        """A different date triggers rollover."""
        state = DailyEngine.empty_game_state("2024-01-05")
        assert DailyEngine.needs_rollover(state, "2024-01-06")

    def test_fetch_needed_until_marked(self) -> None:
        """Targets are fetched once per day."""
        state = DailyEngine.empty_game_state("2024-01-05")
        assert DailyEngine.needs_fetch(state, "2024-01-05")
        state[const.DATA_DAILY_LAST_FETCH_DATE] = "2024-01-05"
        assert not DailyEngine.needs_fetch(state, "2024-01-05")


# =============================================================================
# Test: Guesses
# =============================================================================


class TestApplyGuess:
    """Tests for duplicate-safe guesses."""

    def test_guess_recorded_with_count(self) -> None:
        """Guess list and counter move together."""
        updated = DailyEngine.apply_guess(DailyEngine.empty_mode_state(), SPIKE)
        assert updated is not None
        assert updated[const.DATA_MODE_GUESS_COUNT] == 1
        assert updated[const.DATA_MODE_GUESSES] == [SPIKE]

    def test_duplicate_is_rejected_case_insensitively(self) -> None:
        """The same name in another case is a duplicate."""
        first = DailyEngine.apply_guess(DailyEngine.empty_mode_state(), SPIKE)
        again = DailyEngine.apply_guess(
            first, {const.DATA_CHARACTER_ID: 6, const.DATA_CHARACTER_NAME: "sPiKe"}
        )
        assert again is None
        assert first[const.DATA_MODE_GUESS_COUNT] == 1

    def test_input_not_mutated(self) -> None:
        """apply_guess returns a new record."""
        original = DailyEngine.empty_mode_state()
        DailyEngine.apply_guess(original, COLT)
        assert original[const.DATA_MODE_GUESSES] == []
        assert original[const.DATA_MODE_GUESS_COUNT] == 0

    def test_count_matches_guesses(self) -> None:
        """After several guesses the counter equals the list length."""
        mode_state = DailyEngine.empty_mode_state()
        for guess in (SPIKE, COLT, SPIKE):
            mode_state = DailyEngine.apply_guess(mode_state, guess) or mode_state
        assert mode_state[const.DATA_MODE_GUESS_COUNT] == len(
            mode_state[const.DATA_MODE_GUESSES]
        ) == 2


class TestCorrectGuess:
    """Tests for target comparison."""

    def test_match_ignores_case_and_spaces(self) -> None:
        """Target comparison is case-insensitive."""
        mode_state = {**DailyEngine.empty_mode_state(), const.DATA_MODE_TARGET_NAME: "El Primo"}
        assert DailyEngine.is_correct_guess(mode_state, " el primo ")
        assert not DailyEngine.is_correct_guess(mode_state, "Primo")

    def test_no_target_never_matches(self) -> None:
        """An empty target matches nothing."""
        assert not DailyEngine.is_correct_guess(DailyEngine.empty_mode_state(), "")


# =============================================================================
# Test: Completion and progress
# =============================================================================


class TestCompletion:
    """Tests for completion, reset and progress."""

    def test_first_completion(self) -> None:
        """Completion records the date."""
        mode_state = DailyEngine.apply_guess(_with_target("Colt"), COLT)
        updated = DailyEngine.apply_completion(mode_state, "2024-01-05")
        assert updated[const.DATA_MODE_IS_COMPLETED] is True
        assert updated[const.DATA_MODE_LAST_COMPLETED_DATE] == "2024-01-05"

    def test_second_completion_is_noop(self) -> None:
        """Completing twice returns None."""
        mode_state = DailyEngine.apply_guess(_with_target("Colt"), COLT)
        once = DailyEngine.apply_completion(mode_state, "2024-01-05")
        assert DailyEngine.apply_completion(once, "2024-01-05") is None

    @pytest.mark.parametrize("guesses", [[], [SPIKE]])
    def test_completion_needs_target_guess(self, guesses: list) -> None:
        """A mode without the target among its guesses stays open."""
        mode_state = _with_target("Colt")
        for guess in guesses:
            mode_state = DailyEngine.apply_guess(mode_state, guess)

        assert not DailyEngine.has_guessed_target(mode_state)
        assert DailyEngine.apply_completion(mode_state, "2024-01-05") is None

    def test_target_guess_matches_case_insensitively(self) -> None:
        """A stored guess counts regardless of case."""
        mode_state = DailyEngine.apply_guess(_with_target("colt"), COLT)
        assert DailyEngine.has_guessed_target(mode_state)

    def test_reset_keeps_target(self) -> None:
        """Reset clears progress but not the target."""
        mode_state = {
            **DailyEngine.empty_mode_state(),
            const.DATA_MODE_TARGET_NAME: "Colt",
        }
        mode_state = DailyEngine.apply_guess(mode_state, SPIKE)
        mode_state = DailyEngine.apply_guess(mode_state, COLT)
        mode_state = DailyEngine.apply_completion(mode_state, "2024-01-05")

        reset = DailyEngine.apply_reset(mode_state)
        assert reset[const.DATA_MODE_TARGET_NAME] == "Colt"
        assert reset[const.DATA_MODE_GUESS_COUNT] == 0
        assert reset[const.DATA_MODE_GUESSES] == []
        assert reset[const.DATA_MODE_IS_COMPLETED] is False

    def test_progress_and_all_completed(self) -> None:
        """All modes complete only after the fifth completion."""
        state = DailyEngine.empty_game_state("2024-01-05")
        for index, mode in enumerate(const.DAILY_MODES, start=1):
            assert not DailyEngine.all_modes_completed(state)
            mode_state = DailyEngine.apply_guess(_with_target("Colt"), COLT)
            state[const.DATA_DAILY_MODES][mode] = DailyEngine.apply_completion(
                mode_state, "2024-01-05"
            )
            assert DailyEngine.completion_progress(state) == (index, 5)
        assert DailyEngine.all_modes_completed(state)


# =============================================================================
# Test: Payloads
# =============================================================================


class TestPayloads:
    """Tests for challenge payload parsing."""

    @pytest.mark.parametrize(
        ("payload", "expected"),
        [
            ("Spike", "Spike"),
            ("  Colt ", "Colt"),
            ({"brawler": "Bull", "gadget": "Stomper"}, "Bull"),
            ({"brawlerName": "Crow"}, "Crow"),
            ({"target_name": "Leon", "brawler": "Nita"}, "Leon"),
            ({"gadget": "Stomper"}, None),
            ("", None),
            (None, None),
            (42, None),
        ],
    )
    def test_extract_target_name(self, payload, expected) -> None:
        """Target names come from a string or a known key."""
        assert DailyEngine.extract_target_name(payload) == expected

    def test_mode_payload_drops_target_keys(self) -> None:
        """Mode extras keep only non-target fields."""
        payload = {"brawler": "Bull", "gadget": "Stomper"}
        assert DailyEngine.extract_mode_payload(payload) == {"gadget": "Stomper"}
        assert DailyEngine.extract_mode_payload({"brawler": "Bull"}) is None
        assert DailyEngine.extract_mode_payload("Bull") is None

    def test_fallback_targets(self) -> None:
        """Star power falls back to Bo, everything else to Spike."""
        assert DailyEngine.fallback_target(const.MODE_STARPOWER) == "Bo"
        for mode in (const.MODE_CLASSIC, const.MODE_GADGET, const.MODE_AUDIO, const.MODE_PIXELS):
            assert DailyEngine.fallback_target(mode) == "Spike"
