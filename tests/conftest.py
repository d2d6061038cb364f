"""Shared fixtures for Brawldle tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Generator
from datetime import UTC, datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from homeassistant.config_entries import ConfigEntryState
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.brawldle import const
from custom_components.brawldle.coordinator import BrawldleCoordinator

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name

TEST_API_URL = "https://brawldle.example.supabase.co"
TEST_API_KEY = "test-anon-key"
TEST_USER_ID = "user-123"

# 2024-01-05 12:00 in UTC+2
TEST_NOW = datetime(2024, 1, 5, 10, 0, tzinfo=UTC)
TEST_TODAY = "2024-01-05"
TEST_YESTERDAY = "2024-01-04"

# Today's challenge payloads in the shapes the backend serves
TEST_CHALLENGES: dict[str, Any] = {
    const.MODE_CLASSIC: "Colt",
    const.MODE_GADGET: {"brawler": "Bull", "gadget": "Stomper"},
    const.MODE_STARPOWER: {"brawlerName": "Crow", "starPower": "Extra Toxic"},
    const.MODE_AUDIO: {"brawler": "Leon", "audioFile": "leon_spawn.ogg"},
    const.MODE_PIXELS: {"target_name": "Nita"},
}


class FakeClock:
    """Callable clock the coordinator reads 'now' from."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        """Move the clock forward."""
        self.now += timedelta(**kwargs)


def storage_record(key: str, data: dict[str, Any], version: int = 1) -> dict[str, Any]:
    """Build a hass_storage entry as Home Assistant writes it."""
    return {"version": version, "minor_version": 1, "key": key, "data": data}


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
def fake_clock() -> FakeClock:
    """Return a clock fixed at TEST_NOW."""
    return FakeClock(TEST_NOW)


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry without a remote user."""
    return MockConfigEntry(
        domain=const.DOMAIN,
        title=const.BRAWLDLE_TITLE,
        data={
            const.CONF_API_URL: TEST_API_URL,
            const.CONF_API_KEY: TEST_API_KEY,
        },
        options={},
        entry_id="test_entry_id",
    )


@pytest.fixture
def mock_api() -> Generator[MagicMock]:
    """Patch the backend client used by the integration setup."""

    async def _fetch(mode: str, date: str) -> Any:
        return TEST_CHALLENGES[mode]

    api = MagicMock()
    api.async_fetch_daily_challenge = AsyncMock(side_effect=_fetch)
    api.async_fetch_yesterday_challenge = AsyncMock(return_value=None)
    api.async_get_profile = AsyncMock(return_value=None)
    api.async_upsert_profile = AsyncMock(return_value=None)
    api.async_check_connection = AsyncMock(return_value=True)

    with patch("custom_components.brawldle.BrawldleApiClient", return_value=api):
        yield api


async def setup_integration(
    hass: HomeAssistant, entry: MockConfigEntry, clock: FakeClock
) -> BrawldleCoordinator:
    """Set up the integration for `entry` with `clock` injected."""
    if hass.config_entries.async_get_entry(entry.entry_id) is None:
        entry.add_to_hass(hass)
    with patch("custom_components.brawldle.coordinator.dt_now_utc", clock):
        assert await hass.config_entries.async_setup(entry.entry_id)
        await hass.async_block_till_done()
    return hass.data[const.DOMAIN][entry.entry_id][const.COORDINATOR]


def solve_mode(coordinator: BrawldleCoordinator, mode: str) -> bool:
    """Guess today's target for `mode` and complete it."""
    manager = coordinator.daily_manager
    target = manager.get_mode_state(mode)[const.DATA_MODE_TARGET_NAME]
    manager.submit_guess(mode, coordinator.roster.find_by_name(target))
    return manager.complete_mode(mode)


async def teardown_integration(hass: HomeAssistant, entry: MockConfigEntry) -> None:
    """Unload `entry` so timers and listeners are released."""
    if entry.state is ConfigEntryState.LOADED:
        await hass.config_entries.async_unload(entry.entry_id)
        await hass.async_block_till_done()


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,
    mock_api: MagicMock,
    fake_clock: FakeClock,
) -> AsyncGenerator[MockConfigEntry]:
    """Set up the integration with a mocked backend and a fixed clock."""
    # pylint: disable=unused-argument
    await setup_integration(hass, mock_config_entry, fake_clock)
    yield mock_config_entry
    await teardown_integration(hass, mock_config_entry)


@pytest.fixture
def coordinator(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> BrawldleCoordinator:
    """Return the coordinator of the set-up entry."""
    return hass.data[const.DOMAIN][init_integration.entry_id][const.COORDINATOR]
