"""Unit tests for StreakEngine - pure Python logic tests.

Test Categories:
- Normalisation and remote field mapping
- Grace-period expiry
- Completion increments
- Local/remote reconciliation
"""

from __future__ import annotations

from custom_components.brawldle import const
from custom_components.brawldle.engines.streak_engine import (
    RECONCILE_WRITE_LOCAL,
    RECONCILE_WRITE_REMOTE,
    StreakEngine,
)

TODAY = "2024-01-05"
YESTERDAY = "2024-01-04"


def streak(count: int, last: str | None) -> dict:
    """Build a streak record."""
    return {
        const.DATA_STREAK_COUNT: count,
        const.DATA_STREAK_LAST_COMPLETED_DATE: last,
    }


class TestNormalize:
    """Tests for data coercion."""

    def test_empty_input(self) -> None:
        """Missing data becomes the empty streak."""
        assert StreakEngine.normalize(None) == streak(0, None)
        assert StreakEngine.normalize({}) == streak(0, None)

    def test_bad_count(self) -> None:
        """Non-numeric or negative counts become zero."""
        assert StreakEngine.normalize({const.DATA_STREAK_COUNT: "x"})[
            const.DATA_STREAK_COUNT
        ] == 0
        assert StreakEngine.normalize({const.DATA_STREAK_COUNT: -4})[
            const.DATA_STREAK_COUNT
        ] == 0

    def test_remote_round_trip_fields(self) -> None:
        """Remote profile fields map onto the streak and back."""
        profile = {"current_streak": 7, "last_completed_date": YESTERDAY}
        local = StreakEngine.from_remote(profile)
        assert local == streak(7, YESTERDAY)
        assert StreakEngine.to_remote(local) == profile

    def test_missing_profile(self) -> None:
        """No remote profile is the empty streak."""
        assert StreakEngine.from_remote(None) == streak(0, None)


class TestExpire:
    """Tests for the one-day grace period."""

    def test_completed_today_survives(self) -> None:
        """Today's completion keeps the streak."""
        assert StreakEngine.expire(streak(4, TODAY), TODAY, YESTERDAY) is None

    def test_completed_yesterday_survives(self) -> None:
        """Yesterday's completion keeps the streak (grace day)."""
        assert StreakEngine.expire(streak(4, YESTERDAY), TODAY, YESTERDAY) is None

    def test_two_days_ago_resets(self) -> None:
        """A missed full day resets to zero."""
        assert StreakEngine.expire(streak(4, "2024-01-03"), TODAY, YESTERDAY) == streak(
            0, None
        )

    def test_empty_streak_unchanged(self) -> None:
        """Nothing to expire on an empty streak."""
        assert StreakEngine.expire(streak(0, None), TODAY, YESTERDAY) is None


class TestRecordCompletion:
    """Tests for counting a completed day."""

    def test_continues_from_yesterday(self) -> None:
        """Yesterday's streak grows by one."""
        assert StreakEngine.record_completion(
            streak(4, YESTERDAY), TODAY, YESTERDAY
        ) == streak(5, TODAY)

    def test_restarts_after_gap(self) -> None:
        """An older last date restarts at one."""
        assert StreakEngine.record_completion(
            streak(9, "2023-12-30"), TODAY, YESTERDAY
        ) == streak(1, TODAY)

    def test_first_ever(self) -> None:
        """No previous completion starts at one."""
        assert StreakEngine.record_completion(
            streak(0, None), TODAY, YESTERDAY
        ) == streak(1, TODAY)

    def test_same_day_not_double_counted(self) -> None:
        """Completing again today changes nothing."""
        assert StreakEngine.record_completion(streak(5, TODAY), TODAY, YESTERDAY) is None


class TestReconcile:
    """Tests for choosing between local and remote copies."""

    def test_higher_local_count_written_to_remote(self) -> None:
        """(3, 01-05) beats (2, 01-04) and overwrites the remote."""
        local = streak(3, "2024-01-05")
        remote = streak(2, "2024-01-04")
        winner, side = StreakEngine.reconcile(local, remote)
        assert winner == streak(3, "2024-01-05")
        assert side == RECONCILE_WRITE_REMOTE

    def test_higher_remote_count_written_to_local(self) -> None:
        """The remote copy wins with a greater count."""
        winner, side = StreakEngine.reconcile(streak(1, TODAY), streak(6, YESTERDAY))
        assert winner == streak(6, YESTERDAY)
        assert side == RECONCILE_WRITE_LOCAL

    def test_tie_broken_by_later_date(self) -> None:
        """Equal counts: the later date wins."""
        winner, side = StreakEngine.reconcile(streak(3, YESTERDAY), streak(3, TODAY))
        assert winner == streak(3, TODAY)
        assert side == RECONCILE_WRITE_LOCAL

    def test_missing_date_loses_tie(self) -> None:
        """A dated copy beats an undated one with the same count."""
        winner, side = StreakEngine.reconcile(streak(0, TODAY), streak(0, None))
        assert winner == streak(0, TODAY)
        assert side == RECONCILE_WRITE_REMOTE

    def test_identical_copies_write_nothing(self) -> None:
        """Full tie needs no write."""
        _winner, side = StreakEngine.reconcile(streak(2, TODAY), streak(2, TODAY))
        assert side is None
