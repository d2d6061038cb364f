# File: api.py
"""Client for the hosted Brawldle backend.

The backend exposes PostgREST-style tables:
- daily_challenges(mode, date, challenge_data): one row per sub-mode per day
- profiles(id, current_streak, last_completed_date): per-user streak copy

Every failure surfaces as FetchFailureError; callers decide on fallbacks.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import aiohttp
from homeassistant.exceptions import HomeAssistantError

from . import const
from .utils.dt_utils import dt_previous_day_iso

if TYPE_CHECKING:
    from .type_defs import GameMode, ISODate, RemoteProfile


class FetchFailureError(HomeAssistantError):
    """Raised when the backend cannot be reached or returns an error."""


def _first_row(rows: Any, what: str) -> dict[str, Any] | None:
    """Return the first row of a PostgREST list response, or None if empty.

    Raises:
        FetchFailureError: The response is not a list of objects.
    """
    if not isinstance(rows, list):
        raise FetchFailureError(f"Unexpected {what}")
    if not rows:
        return None
    if not isinstance(rows[0], dict):
        raise FetchFailureError(f"Malformed row in {what}")
    return rows[0]


class BrawldleApiClient:
    """Thin async client for challenge and profile data."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: str,
        api_key: str,
        access_token: str | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            session: Shared aiohttp session (from Home Assistant).
            base_url: Backend root URL, e.g. "https://xyz.supabase.co".
            api_key: Public API key sent with every request.
            access_token: Optional user JWT; the API key is used otherwise.
        """
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._access_token = access_token

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._access_token or self._api_key}",
            "Accept": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        payload: Any = None,
        extra_headers: dict[str, str] | None = None,
    ) -> Any:
        url = f"{self._base_url}{path}"
        headers = {**self._headers(), **(extra_headers or {})}
        try:
            async with asyncio.timeout(const.API_TIMEOUT_SECONDS):
                async with self._session.request(
                    method, url, params=params, json=payload, headers=headers
                ) as response:
                    if response.status >= 400:
                        raise FetchFailureError(
                            f"HTTP {response.status} from {method} {path}"
                        )
                    if response.status == 204:
                        return None
                    return await response.json(content_type=None)
        except (aiohttp.ClientError, TimeoutError, ValueError) as err:
            raise FetchFailureError(f"{method} {path} failed: {err}") from err

    async def async_check_connection(self) -> bool:
        """Return True if the challenge table can be queried."""
        try:
            await self._request(
                "GET",
                const.API_PATH_DAILY_CHALLENGES,
                params={"select": "id", "limit": "1"},
            )
        except FetchFailureError as err:
            const.LOGGER.warning("WARNING: Backend connection check failed: %s", err)
            return False
        return True

    async def async_fetch_daily_challenge(self, mode: GameMode, date: ISODate) -> Any:
        """Return the challenge payload for `mode` on `date`, or None if absent.

        Raises:
            FetchFailureError: Backend unreachable or malformed response.
        """
        rows = await self._request(
            "GET",
            const.API_PATH_DAILY_CHALLENGES,
            params={
                "select": "id,mode,challenge_data,date",
                const.API_FIELD_MODE: f"eq.{mode}",
                const.API_FIELD_DATE: f"eq.{date}",
            },
        )
        row = _first_row(rows, f"challenge response for {mode}")
        if row is None:
            return None
        return row.get(const.API_FIELD_CHALLENGE_DATA)

    async def async_fetch_yesterday_challenge(
        self, mode: GameMode, today: ISODate
    ) -> Any:
        """Return the previous day's payload for `mode` (display only)."""
        yesterday = dt_previous_day_iso(today)
        if yesterday is None:
            return None
        return await self.async_fetch_daily_challenge(mode, yesterday)

    async def async_get_profile(self, user_id: str) -> RemoteProfile | None:
        """Return the user's remote streak fields, or None if no profile."""
        rows = await self._request(
            "GET",
            const.API_PATH_PROFILES,
            params={
                "select": (
                    f"{const.API_FIELD_CURRENT_STREAK},"
                    f"{const.API_FIELD_LAST_COMPLETED_DATE}"
                ),
                const.API_FIELD_PROFILE_ID: f"eq.{user_id}",
            },
        )
        return _first_row(rows, "profile response")

    async def async_upsert_profile(self, user_id: str, fields: dict[str, Any]) -> None:
        """Create or update the user's profile row."""
        await self._request(
            "POST",
            const.API_PATH_PROFILES,
            payload={const.API_FIELD_PROFILE_ID: user_id, **fields},
            extra_headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
        )
