"""Streak Manager - Consecutive-day completion streak with remote sync.

This manager handles all streak operations:
- Grace-period expiry on load and on every coordinator refresh
- Reconciliation with the remote profile when a user is configured
- Recording a completed day when DailyManager reports all modes done
- Fire-and-forget push of the new streak to the remote profile

ARCHITECTURE:
- StreakManager = STATEFUL owner of the streak store
- StreakEngine = Pure expiry/increment/reconcile rules (STATELESS)
- Listens to SIGNAL_SUFFIX_ALL_MODES_COMPLETED (Event Bus coupling)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const
from ..api import FetchFailureError
from ..engines.streak_engine import (
    RECONCILE_WRITE_LOCAL,
    RECONCILE_WRITE_REMOTE,
    StreakEngine,
)
from ..utils.dt_utils import dt_previous_day_iso
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..api import BrawldleApiClient
    from ..coordinator import BrawldleCoordinator
    from ..store import BrawldleStore
    from ..type_defs import StreakData


class StreakManager(BaseManager):
    """Manager for the local streak and its remote copy."""

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: BrawldleCoordinator,
        store: BrawldleStore,
        api: BrawldleApiClient,
        user_id: str | None = None,
    ) -> None:
        """Initialize the StreakManager.

        Args:
            hass: Home Assistant instance
            coordinator: The main Brawldle coordinator
            store: Store holding the StreakData
            api: Backend client for the remote profile
            user_id: Remote profile id; None disables remote sync
        """
        super().__init__(hass, coordinator)
        self._store = store
        self._api = api
        self.user_id = user_id

    async def async_setup(self) -> None:
        """Expire, reconcile with the remote copy, then start listening."""
        self._store.set_data(dict(StreakEngine.normalize(self._store.data)))
        self.check_expiry()
        if self.user_id:
            await self.async_sync_remote()

        self.listen(
            const.SIGNAL_SUFFIX_ALL_MODES_COMPLETED, self._on_all_modes_completed
        )

    @property
    def streak(self) -> StreakData:
        """Return the live streak record."""
        return self._store.data  # type: ignore[return-value]

    @property
    def count(self) -> int:
        """Return the current streak length."""
        return self.streak.get(const.DATA_STREAK_COUNT, 0)

    def check_expiry(self) -> bool:
        """Reset the streak if its grace period ran out.

        Returns:
            True when the streak was reset.
        """
        expired = StreakEngine.expire(
            self.streak, self.coordinator.today_iso(), self.coordinator.yesterday_iso()
        )
        if expired is None:
            return False

        const.LOGGER.info(
            "INFO: Streak of %s expired (last completed %s)",
            self.count,
            self.streak.get(const.DATA_STREAK_LAST_COMPLETED_DATE),
        )
        self._store.set_data(dict(expired))
        self.coordinator._persist_and_update(self._store)
        return True

    async def async_sync_remote(self) -> None:
        """Reconcile with the remote profile; failures keep the local copy."""
        if not self.user_id:
            return
        try:
            profile = await self._api.async_get_profile(self.user_id)
        except FetchFailureError as err:
            const.LOGGER.warning(
                "WARNING: Could not load remote streak, keeping local: %s", err
            )
            return

        remote = StreakEngine.from_remote(profile)
        remote_expired = StreakEngine.expire(
            remote, self.coordinator.today_iso(), self.coordinator.yesterday_iso()
        )
        if remote_expired is not None:
            remote = remote_expired

        winner, write_side = StreakEngine.reconcile(self.streak, remote)
        const.LOGGER.debug(
            "DEBUG: Streak reconcile local=%s remote=%s -> write %s",
            self.streak,
            remote,
            write_side,
        )
        if write_side == RECONCILE_WRITE_LOCAL:
            self._store.set_data(dict(winner))
            self.coordinator._persist_and_update(self._store)
        elif write_side == RECONCILE_WRITE_REMOTE:
            await self._async_push(winner)

    async def _on_all_modes_completed(self, payload: dict[str, Any]) -> None:
        """Count the day once every daily mode is completed."""
        today = payload.get("date") or self.coordinator.today_iso()
        yesterday = dt_previous_day_iso(today) or self.coordinator.yesterday_iso()
        updated = StreakEngine.record_completion(self.streak, today, yesterday)
        if updated is None:
            const.LOGGER.debug("DEBUG: Streak already counted for %s", today)
            return

        self._store.set_data(dict(updated))
        const.LOGGER.info(
            "INFO: Streak is now %s (completed %s)", self.count, today
        )
        self.coordinator._persist_and_update(self._store)

        if self.user_id:
            # Remote failure must not roll back the local increment
            self.hass.async_create_task(self._async_push(dict(updated)))

    async def _async_push(self, streak: StreakData | dict[str, Any]) -> None:
        if not self.user_id:
            return
        try:
            await self._api.async_upsert_profile(
                self.user_id,
                StreakEngine.to_remote(StreakEngine.normalize(streak)),
            )
        except FetchFailureError as err:
            const.LOGGER.warning("WARNING: Failed to push streak to profile: %s", err)
            return
        const.LOGGER.debug("DEBUG: Streak pushed to remote profile %s", self.user_id)
