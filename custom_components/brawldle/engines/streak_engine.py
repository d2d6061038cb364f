"""Streak Engine - Pure logic for the consecutive-day completion streak.

This engine provides stateless, pure Python functions for:
- Grace-period expiry (one missed day is allowed before loss)
- Recording a day on which all daily sub-modes were completed
- Reconciling the local streak with the remote profile copy

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data.
State management and remote sync belong in StreakManager.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const

if TYPE_CHECKING:
    from ..type_defs import ISODate, RemoteProfile, StreakData


# Which copy has to be overwritten after reconciliation
RECONCILE_WRITE_LOCAL = "local"
RECONCILE_WRITE_REMOTE = "remote"


class StreakEngine:
    """Pure logic engine for streak evaluation.

    All methods are static - no instance state.
    """

    @staticmethod
    def empty_streak() -> StreakData:
        """Return a streak with no completions."""
        return {
            const.DATA_STREAK_COUNT: 0,
            const.DATA_STREAK_LAST_COMPLETED_DATE: None,
        }

    @staticmethod
    def normalize(data: dict[str, Any] | None) -> StreakData:
        """Coerce stored or remote data into a valid StreakData."""
        if not data:
            return StreakEngine.empty_streak()
        try:
            count = max(0, int(data.get(const.DATA_STREAK_COUNT) or 0))
        except (TypeError, ValueError):
            count = 0
        last = data.get(const.DATA_STREAK_LAST_COMPLETED_DATE)
        return {
            const.DATA_STREAK_COUNT: count,
            const.DATA_STREAK_LAST_COMPLETED_DATE: last or None,
        }

    @staticmethod
    def from_remote(profile: RemoteProfile | dict[str, Any] | None) -> StreakData:
        """Map remote profile fields onto a StreakData."""
        if not profile:
            return StreakEngine.empty_streak()
        return StreakEngine.normalize(
            {
                const.DATA_STREAK_COUNT: profile.get(const.API_FIELD_CURRENT_STREAK),
                const.DATA_STREAK_LAST_COMPLETED_DATE: profile.get(
                    const.API_FIELD_LAST_COMPLETED_DATE
                ),
            }
        )

    @staticmethod
    def to_remote(streak: StreakData) -> dict[str, Any]:
        """Map a StreakData onto remote profile fields."""
        return {
            const.API_FIELD_CURRENT_STREAK: streak[const.DATA_STREAK_COUNT],
            const.API_FIELD_LAST_COMPLETED_DATE: streak[
                const.DATA_STREAK_LAST_COMPLETED_DATE
            ],
        }

    @staticmethod
    def expire(
        streak: StreakData, today: ISODate, yesterday: ISODate
    ) -> StreakData | None:
        """Return the reset streak if its grace period ran out, else None.

        A streak survives while its last completion is today or yesterday.
        """
        last = streak.get(const.DATA_STREAK_LAST_COMPLETED_DATE)
        if last in (today, yesterday):
            return None
        if last is None and streak.get(const.DATA_STREAK_COUNT, 0) == 0:
            return None
        return StreakEngine.empty_streak()

    @staticmethod
    def record_completion(
        streak: StreakData, today: ISODate, yesterday: ISODate
    ) -> StreakData | None:
        """Return the streak after completing every mode today.

        Returns None when today was already counted, so a repeated signal
        never double-counts.
        """
        last = streak.get(const.DATA_STREAK_LAST_COMPLETED_DATE)
        if last == today:
            return None

        if last == yesterday:
            count = streak.get(const.DATA_STREAK_COUNT, 0) + 1
        else:
            count = 1

        return {
            const.DATA_STREAK_COUNT: count,
            const.DATA_STREAK_LAST_COMPLETED_DATE: today,
        }

    @staticmethod
    def reconcile(
        local: StreakData, remote: StreakData
    ) -> tuple[StreakData, str | None]:
        """Pick the authoritative streak copy.

        The strictly greater count wins; on a tie the later completion date
        wins. Identical copies need no write.

        Returns:
            (winner, side to overwrite) where side is RECONCILE_WRITE_LOCAL,
            RECONCILE_WRITE_REMOTE or None.
        """
        local_count = local[const.DATA_STREAK_COUNT]
        remote_count = remote[const.DATA_STREAK_COUNT]
        if local_count > remote_count:
            return local, RECONCILE_WRITE_REMOTE
        if remote_count > local_count:
            return remote, RECONCILE_WRITE_LOCAL

        # ISO dates compare correctly as strings; a missing date is oldest
        local_date = local[const.DATA_STREAK_LAST_COMPLETED_DATE] or ""
        remote_date = remote[const.DATA_STREAK_LAST_COMPLETED_DATE] or ""
        if local_date > remote_date:
            return local, RECONCILE_WRITE_REMOTE
        if remote_date > local_date:
            return remote, RECONCILE_WRITE_LOCAL
        return local, None
