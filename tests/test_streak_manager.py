"""Tests for StreakManager.

Covers expiry on load and refresh, counting a fully completed day and the
local/remote reconciliation.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.brawldle import const
from custom_components.brawldle.api import FetchFailureError
from custom_components.brawldle.coordinator import BrawldleCoordinator

from tests.conftest import (
    TEST_API_KEY,
    TEST_API_URL,
    TEST_TODAY,
    TEST_USER_ID,
    TEST_YESTERDAY,
    FakeClock,
    setup_integration,
    solve_mode,
    storage_record,
    teardown_integration,
)


@pytest.fixture
def synced_entry() -> MockConfigEntry:
    """Return a config entry with a remote profile configured."""
    return MockConfigEntry(
        domain=const.DOMAIN,
        title=const.BRAWLDLE_TITLE,
        data={const.CONF_API_URL: TEST_API_URL, const.CONF_API_KEY: TEST_API_KEY},
        options={const.CONF_USER_ID: TEST_USER_ID},
        entry_id="synced_entry_id",
    )


def _store_streak(hass_storage: dict[str, Any], count: int, last: str | None) -> None:
    hass_storage[const.STORAGE_KEY_STREAK] = storage_record(
        const.STORAGE_KEY_STREAK,
        {
            const.DATA_STREAK_COUNT: count,
            const.DATA_STREAK_LAST_COMPLETED_DATE: last,
        },
    )


async def _complete_day(hass: HomeAssistant, coordinator: BrawldleCoordinator) -> None:
    for mode in const.DAILY_MODES:
        solve_mode(coordinator, mode)
    await hass.async_block_till_done()


# =============================================================================
# Local streak
# =============================================================================


async def test_completed_day_starts_streak(
    hass: HomeAssistant, coordinator: BrawldleCoordinator, mock_api: MagicMock
) -> None:
    """Completing every mode counts the day once."""
    await _complete_day(hass, coordinator)

    assert coordinator.streak_manager.count == 1
    assert coordinator.streak_manager.streak[
        const.DATA_STREAK_LAST_COMPLETED_DATE
    ] == TEST_TODAY

    # Completing again (after a retry) does not double count
    coordinator.daily_manager.reset_guess_count(const.MODE_CLASSIC)
    solve_mode(coordinator, const.MODE_CLASSIC)
    await hass.async_block_till_done()
    assert coordinator.streak_manager.count == 1

    # No user configured: nothing is pushed
    mock_api.async_upsert_profile.assert_not_awaited()


async def test_partial_day_does_not_count(
    hass: HomeAssistant, coordinator: BrawldleCoordinator
) -> None:
    """Four of five modes leave the streak alone."""
    for mode in const.DAILY_MODES[:-1]:
        solve_mode(coordinator, mode)
    await hass.async_block_till_done()

    assert coordinator.streak_manager.count == 0


async def test_streak_continues_from_yesterday(
    hass: HomeAssistant,
    hass_storage: dict[str, Any],
    mock_config_entry: MockConfigEntry,
    mock_api: MagicMock,
    fake_clock: FakeClock,
) -> None:
    """Yesterday's streak survives the restart and grows today."""
    _store_streak(hass_storage, 4, TEST_YESTERDAY)

    coordinator = await setup_integration(hass, mock_config_entry, fake_clock)
    assert coordinator.streak_manager.count == 4

    await _complete_day(hass, coordinator)
    assert coordinator.streak_manager.count == 5

    await teardown_integration(hass, mock_config_entry)


async def test_lapsed_streak_expires_on_load(
    hass: HomeAssistant,
    hass_storage: dict[str, Any],
    mock_config_entry: MockConfigEntry,
    mock_api: MagicMock,
    fake_clock: FakeClock,
) -> None:
    """A streak last completed two days ago is reset at startup."""
    _store_streak(hass_storage, 6, "2024-01-03")

    coordinator = await setup_integration(hass, mock_config_entry, fake_clock)

    assert coordinator.streak_manager.count == 0
    assert coordinator.streak_manager.streak[
        const.DATA_STREAK_LAST_COMPLETED_DATE
    ] is None

    await teardown_integration(hass, mock_config_entry)


async def test_streak_expires_on_refresh(
    hass: HomeAssistant,
    hass_storage: dict[str, Any],
    mock_config_entry: MockConfigEntry,
    mock_api: MagicMock,
    fake_clock: FakeClock,
) -> None:
    """The periodic refresh expires a streak once the grace day has passed."""
    _store_streak(hass_storage, 3, TEST_YESTERDAY)
    coordinator = await setup_integration(hass, mock_config_entry, fake_clock)
    assert coordinator.streak_manager.count == 3

    fake_clock.advance(days=1)
    await coordinator.async_refresh()

    assert coordinator.streak_manager.count == 0

    await teardown_integration(hass, mock_config_entry)


# =============================================================================
# Remote sync
# =============================================================================


async def test_local_wins_and_is_pushed(
    hass: HomeAssistant,
    hass_storage: dict[str, Any],
    synced_entry: MockConfigEntry,
    mock_api: MagicMock,
    fake_clock: FakeClock,
) -> None:
    """A longer local streak overwrites the remote profile."""
    _store_streak(hass_storage, 3, TEST_TODAY)
    mock_api.async_get_profile.return_value = {
        const.API_FIELD_CURRENT_STREAK: 2,
        const.API_FIELD_LAST_COMPLETED_DATE: TEST_YESTERDAY,
    }

    coordinator = await setup_integration(hass, synced_entry, fake_clock)

    assert coordinator.streak_manager.count == 3
    mock_api.async_get_profile.assert_awaited_once_with(TEST_USER_ID)
    mock_api.async_upsert_profile.assert_awaited_once_with(
        TEST_USER_ID,
        {
            const.API_FIELD_CURRENT_STREAK: 3,
            const.API_FIELD_LAST_COMPLETED_DATE: TEST_TODAY,
        },
    )

    await teardown_integration(hass, synced_entry)


async def test_remote_wins_and_is_stored(
    hass: HomeAssistant,
    hass_storage: dict[str, Any],
    synced_entry: MockConfigEntry,
    mock_api: MagicMock,
    fake_clock: FakeClock,
) -> None:
    """A longer remote streak replaces the local copy without a push."""
    _store_streak(hass_storage, 1, TEST_TODAY)
    mock_api.async_get_profile.return_value = {
        const.API_FIELD_CURRENT_STREAK: 8,
        const.API_FIELD_LAST_COMPLETED_DATE: TEST_YESTERDAY,
    }

    coordinator = await setup_integration(hass, synced_entry, fake_clock)

    assert coordinator.streak_manager.streak == {
        const.DATA_STREAK_COUNT: 8,
        const.DATA_STREAK_LAST_COMPLETED_DATE: TEST_YESTERDAY,
    }
    mock_api.async_upsert_profile.assert_not_awaited()

    await teardown_integration(hass, synced_entry)


async def test_lapsed_remote_streak_does_not_win(
    hass: HomeAssistant,
    hass_storage: dict[str, Any],
    synced_entry: MockConfigEntry,
    mock_api: MagicMock,
    fake_clock: FakeClock,
) -> None:
    """An expired remote streak is treated as zero before comparing."""
    _store_streak(hass_storage, 2, TEST_TODAY)
    mock_api.async_get_profile.return_value = {
        const.API_FIELD_CURRENT_STREAK: 30,
        const.API_FIELD_LAST_COMPLETED_DATE: "2023-12-01",
    }

    coordinator = await setup_integration(hass, synced_entry, fake_clock)

    assert coordinator.streak_manager.count == 2
    mock_api.async_upsert_profile.assert_awaited_once()

    await teardown_integration(hass, synced_entry)


async def test_remote_unreachable_keeps_local(
    hass: HomeAssistant,
    hass_storage: dict[str, Any],
    synced_entry: MockConfigEntry,
    mock_api: MagicMock,
    fake_clock: FakeClock,
) -> None:
    """Setup succeeds with the local streak when the profile cannot load."""
    _store_streak(hass_storage, 2, TEST_YESTERDAY)
    mock_api.async_get_profile.side_effect = FetchFailureError("offline")

    coordinator = await setup_integration(hass, synced_entry, fake_clock)

    assert coordinator.streak_manager.count == 2
    mock_api.async_upsert_profile.assert_not_awaited()

    await teardown_integration(hass, synced_entry)


async def test_completion_pushed_and_push_failure_kept(
    hass: HomeAssistant,
    synced_entry: MockConfigEntry,
    mock_api: MagicMock,
    fake_clock: FakeClock,
) -> None:
    """A failed push never rolls back the local increment."""
    mock_api.async_upsert_profile.side_effect = FetchFailureError("rejected")

    coordinator = await setup_integration(hass, synced_entry, fake_clock)
    await _complete_day(hass, coordinator)

    assert coordinator.streak_manager.count == 1
    mock_api.async_upsert_profile.assert_awaited_with(
        TEST_USER_ID,
        {
            const.API_FIELD_CURRENT_STREAK: 1,
            const.API_FIELD_LAST_COMPLETED_DATE: TEST_TODAY,
        },
    )

    await teardown_integration(hass, synced_entry)
