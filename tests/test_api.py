"""Tests for the backend client."""

from __future__ import annotations

import aiohttp
import pytest
from homeassistant.core import HomeAssistant
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from pytest_homeassistant_custom_component.test_util.aiohttp import (
    AiohttpClientMocker,
)

from custom_components.brawldle import const
from custom_components.brawldle.api import BrawldleApiClient, FetchFailureError

from tests.conftest import TEST_API_KEY, TEST_API_URL

CHALLENGES_URL = f"{TEST_API_URL}{const.API_PATH_DAILY_CHALLENGES}"
PROFILES_URL = f"{TEST_API_URL}{const.API_PATH_PROFILES}"


@pytest.fixture
async def client(
    hass: HomeAssistant, aioclient_mock: AiohttpClientMocker
) -> BrawldleApiClient:
    """Return a client using the mocked shared session."""
    return BrawldleApiClient(async_get_clientsession(hass), f"{TEST_API_URL}/", TEST_API_KEY)


async def test_fetch_daily_challenge_returns_payload(
    client: BrawldleApiClient, aioclient_mock: AiohttpClientMocker
) -> None:
    """The first row's challenge_data is returned."""
    aioclient_mock.get(
        CHALLENGES_URL,
        json=[{"id": 1, "mode": "gadget", "challenge_data": {"brawler": "Bull"}}],
    )

    payload = await client.async_fetch_daily_challenge(const.MODE_GADGET, "2024-01-05")

    assert payload == {"brawler": "Bull"}
    assert aioclient_mock.call_count == 1
    method, url, _data, _headers = aioclient_mock.mock_calls[0]
    assert method.upper() == "GET"
    assert url.path == const.API_PATH_DAILY_CHALLENGES


async def test_fetch_daily_challenge_without_row(
    client: BrawldleApiClient, aioclient_mock: AiohttpClientMocker
) -> None:
    """No row for the day is not an error."""
    aioclient_mock.get(CHALLENGES_URL, json=[])
    assert await client.async_fetch_daily_challenge(const.MODE_CLASSIC, "2024-01-05") is None


@pytest.mark.parametrize(
    "mock_kwargs",
    [
        {"status": 500},
        {"status": 401},
        {"exc": aiohttp.ClientError()},
        {"exc": TimeoutError()},
        {"json": {"message": "not a list"}},
        {"json": [["Spike"]]},
        {"json": ["Spike"]},
    ],
)
async def test_fetch_failures_raise(
    client: BrawldleApiClient, aioclient_mock: AiohttpClientMocker, mock_kwargs
) -> None:
    """HTTP errors, transport errors and bad shapes all raise FetchFailureError."""
    aioclient_mock.get(CHALLENGES_URL, **mock_kwargs)
    with pytest.raises(FetchFailureError):
        await client.async_fetch_daily_challenge(const.MODE_CLASSIC, "2024-01-05")


async def test_fetch_yesterday_uses_previous_day(
    client: BrawldleApiClient, aioclient_mock: AiohttpClientMocker
) -> None:
    """Yesterday's lookup queries the same table."""
    aioclient_mock.get(CHALLENGES_URL, json=[{"challenge_data": "Colt"}])
    assert (
        await client.async_fetch_yesterday_challenge(const.MODE_CLASSIC, "2024-01-05")
        == "Colt"
    )
    assert await client.async_fetch_yesterday_challenge(const.MODE_CLASSIC, "bad") is None
    assert aioclient_mock.call_count == 1


async def test_check_connection(
    client: BrawldleApiClient, aioclient_mock: AiohttpClientMocker
) -> None:
    """Connection check is True on success and False on failure."""
    aioclient_mock.get(CHALLENGES_URL, json=[])
    assert await client.async_check_connection() is True

    aioclient_mock.clear_requests()
    aioclient_mock.get(CHALLENGES_URL, status=503)
    assert await client.async_check_connection() is False


async def test_get_profile(
    client: BrawldleApiClient, aioclient_mock: AiohttpClientMocker
) -> None:
    """Profile rows map to the remote streak fields."""
    aioclient_mock.get(
        PROFILES_URL,
        json=[{"current_streak": 4, "last_completed_date": "2024-01-04"}],
    )
    profile = await client.async_get_profile("user-123")
    assert profile == {"current_streak": 4, "last_completed_date": "2024-01-04"}


async def test_get_missing_profile(
    client: BrawldleApiClient, aioclient_mock: AiohttpClientMocker
) -> None:
    """Unknown users have no profile."""
    aioclient_mock.get(PROFILES_URL, json=[])
    assert await client.async_get_profile("nobody") is None


async def test_get_profile_malformed_row(
    client: BrawldleApiClient, aioclient_mock: AiohttpClientMocker
) -> None:
    """A profile row that is not an object raises FetchFailureError."""
    aioclient_mock.get(PROFILES_URL, json=[["x"]])
    with pytest.raises(FetchFailureError):
        await client.async_get_profile("user-123")


async def test_upsert_profile_posts(
    client: BrawldleApiClient, aioclient_mock: AiohttpClientMocker
) -> None:
    """Upserts POST to the profiles table and accept an empty reply."""
    aioclient_mock.post(PROFILES_URL, status=204)

    await client.async_upsert_profile(
        "user-123", {"current_streak": 5, "last_completed_date": "2024-01-05"}
    )

    method, url, _data, _headers = aioclient_mock.mock_calls[0]
    assert method.upper() == "POST"
    assert url.path == const.API_PATH_PROFILES


async def test_upsert_profile_failure(
    client: BrawldleApiClient, aioclient_mock: AiohttpClientMocker
) -> None:
    """A rejected upsert raises."""
    aioclient_mock.post(PROFILES_URL, status=403)
    with pytest.raises(FetchFailureError):
        await client.async_upsert_profile("user-123", {"current_streak": 1})
