# File: services.py
"""Defines custom services for the Brawldle integration.

These services are the gameplay surface: a dashboard or automation submits
guesses, completes modes and drives the survival game through them.
Guess services return response data (accepted/correct/points).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import voluptuous as vol
from homeassistant.core import HomeAssistant, ServiceCall, SupportsResponse
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv

from . import const
from .engines.survival_engine import InvalidConfigurationError

if TYPE_CHECKING:
    from .coordinator import BrawldleCoordinator
    from .type_defs import Character

# --- Service Schemas ---
MODE_SCHEMA = vol.Schema({vol.Required(const.FIELD_MODE): vol.In(const.DAILY_MODES)})

SUBMIT_GUESS_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_MODE): vol.In(const.DAILY_MODES),
        vol.Required(const.FIELD_CHARACTER_NAME): cv.string,
    }
)

EMPTY_SCHEMA = vol.Schema({})

SURVIVAL_SETTINGS_FIELDS = {
    vol.Optional(const.FIELD_ENABLED_MODES): vol.All(
        cv.ensure_list, [vol.In(const.SURVIVAL_MODES)], vol.Length(min=1)
    ),
    vol.Optional(const.FIELD_ROTATION): vol.In(const.ROTATION_POLICIES),
    vol.Optional(const.FIELD_ROUND_TIMER_SECONDS): vol.All(
        vol.Coerce(int), vol.Range(min=10, max=600)
    ),
}

START_SURVIVAL_SCHEMA = vol.Schema(SURVIVAL_SETTINGS_FIELDS)
UPDATE_SURVIVAL_SETTINGS_SCHEMA = vol.Schema(SURVIVAL_SETTINGS_FIELDS)

NEXT_ROUND_SCHEMA = vol.Schema(
    {vol.Optional(const.FIELD_MODE): vol.In(const.SURVIVAL_MODES)}
)

SURVIVAL_GUESS_SCHEMA = vol.Schema(
    {vol.Required(const.FIELD_CHARACTER_NAME): cv.string}
)


def _get_coordinator(hass: HomeAssistant) -> BrawldleCoordinator:
    """Return the coordinator of the (single) Brawldle entry."""
    domain_entries = hass.data.get(const.DOMAIN)
    if not domain_entries:
        raise HomeAssistantError(const.ERROR_NO_ENTRY_FOUND)
    entry_data = next(iter(domain_entries.values()))
    return entry_data[const.COORDINATOR]


def _find_character(coordinator: BrawldleCoordinator, name: str) -> Character:
    character = coordinator.roster.find_by_name(name)
    if character is None:
        const.LOGGER.warning(
            "WARNING: %s", const.ERROR_CHARACTER_NOT_FOUND_FMT.format(name)
        )
        raise HomeAssistantError(const.ERROR_CHARACTER_NOT_FOUND_FMT.format(name))
    return character


def _settings_from_call(call: ServiceCall) -> dict[str, Any]:
    return {
        key: call.data[field]
        for field, key in (
            (const.FIELD_ENABLED_MODES, const.DATA_SETTINGS_ENABLED_MODES),
            (const.FIELD_ROTATION, const.DATA_SETTINGS_ROTATION),
            (const.FIELD_ROUND_TIMER_SECONDS, const.DATA_SETTINGS_ROUND_TIMER_SECONDS),
        )
        if field in call.data
    }


def async_setup_services(hass: HomeAssistant) -> None:
    """Register Brawldle services."""

    # --- Daily ---

    async def handle_submit_guess(call: ServiceCall) -> dict[str, Any]:
        """Record a daily guess; a correct guess completes the mode."""
        coordinator = _get_coordinator(hass)
        mode = call.data[const.FIELD_MODE]
        character = _find_character(coordinator, call.data[const.FIELD_CHARACTER_NAME])

        manager = coordinator.daily_manager
        await manager.async_ensure_current()
        accepted = manager.submit_guess(mode, character)
        correct = manager.is_correct_guess(mode, character[const.DATA_CHARACTER_NAME])
        if accepted and correct:
            manager.complete_mode(mode)

        return {
            const.RESPONSE_ACCEPTED: accepted,
            const.RESPONSE_CORRECT: correct,
            const.RESPONSE_COMPLETED: manager.get_mode_state(mode)[
                const.DATA_MODE_IS_COMPLETED
            ],
        }

    async def handle_complete_mode(call: ServiceCall) -> None:
        """Mark a daily mode completed once its target has been guessed."""
        coordinator = _get_coordinator(hass)
        mode = call.data[const.FIELD_MODE]
        manager = coordinator.daily_manager
        await manager.async_ensure_current()
        if not manager.has_guessed_target(mode):
            raise HomeAssistantError(const.ERROR_TARGET_NOT_GUESSED_FMT.format(mode))
        manager.complete_mode(mode)

    async def handle_reset_mode(call: ServiceCall) -> None:
        """Clear a daily mode's guesses for a retry."""
        coordinator = _get_coordinator(hass)
        await coordinator.daily_manager.async_ensure_current()
        coordinator.daily_manager.reset_guess_count(call.data[const.FIELD_MODE])

    async def handle_refresh_daily(call: ServiceCall) -> None:
        """Re-fetch today's targets."""
        coordinator = _get_coordinator(hass)
        await coordinator.daily_manager.async_refresh()

    # --- Survival ---

    def _round_response(coordinator: BrawldleCoordinator, status: str) -> dict[str, Any]:
        active = coordinator.survival_manager.active_round or {}
        return {
            const.RESPONSE_STATUS: status,
            const.RESPONSE_ROUND: active.get(const.DATA_ROUND_NUMBER, 0),
            const.RESPONSE_GUESSES_LEFT: active.get(const.DATA_ROUND_GUESSES_LEFT, 0),
        }

    async def handle_start_survival(call: ServiceCall) -> dict[str, Any]:
        """Start a new survival game and its first round."""
        coordinator = _get_coordinator(hass)
        manager = coordinator.survival_manager
        settings = {**manager.default_settings, **_settings_from_call(call)}
        try:
            manager.initialize_game(settings)
        except InvalidConfigurationError as err:
            raise HomeAssistantError(
                const.ERROR_CANNOT_START_ROUND_FMT.format(err)
            ) from err

        outcome = manager.start_next_round()
        if outcome.is_error:
            raise HomeAssistantError(
                const.ERROR_CANNOT_START_ROUND_FMT.format(outcome.reason)
            )
        return _round_response(coordinator, outcome.status)

    async def handle_next_round(call: ServiceCall) -> dict[str, Any]:
        """Start the next survival round."""
        coordinator = _get_coordinator(hass)
        outcome = coordinator.survival_manager.start_next_round(
            call.data.get(const.FIELD_MODE)
        )
        if outcome.is_error:
            raise HomeAssistantError(
                const.ERROR_CANNOT_START_ROUND_FMT.format(outcome.reason)
            )
        return _round_response(coordinator, outcome.status)

    async def handle_survival_guess(call: ServiceCall) -> dict[str, Any]:
        """Guess the active round's character."""
        coordinator = _get_coordinator(hass)
        character = _find_character(coordinator, call.data[const.FIELD_CHARACTER_NAME])
        try:
            return coordinator.survival_manager.submit_guess(character)
        except InvalidConfigurationError as err:
            raise HomeAssistantError(str(err)) from err

    async def handle_pause_survival(call: ServiceCall) -> None:
        """Pause the survival game."""
        _get_coordinator(hass).survival_manager.pause_game()

    async def handle_resume_survival(call: ServiceCall) -> None:
        """Resume the survival game."""
        _get_coordinator(hass).survival_manager.resume_game()

    async def handle_quit_survival(call: ServiceCall) -> None:
        """Quit to setup, keeping settings."""
        _get_coordinator(hass).survival_manager.quit_game()

    async def handle_reset_survival(call: ServiceCall) -> None:
        """Discard the survival game."""
        _get_coordinator(hass).survival_manager.reset_survival()

    async def handle_update_survival_settings(call: ServiceCall) -> None:
        """Change survival settings for upcoming rounds."""
        coordinator = _get_coordinator(hass)
        try:
            coordinator.survival_manager.update_settings(**_settings_from_call(call))
        except InvalidConfigurationError as err:
            raise HomeAssistantError(str(err)) from err

    registrations: list[tuple[str, Any, vol.Schema, SupportsResponse]] = [
        (const.SERVICE_SUBMIT_GUESS, handle_submit_guess, SUBMIT_GUESS_SCHEMA, SupportsResponse.OPTIONAL),
        (const.SERVICE_COMPLETE_MODE, handle_complete_mode, MODE_SCHEMA, SupportsResponse.NONE),
        (const.SERVICE_RESET_MODE, handle_reset_mode, MODE_SCHEMA, SupportsResponse.NONE),
        (const.SERVICE_REFRESH_DAILY, handle_refresh_daily, EMPTY_SCHEMA, SupportsResponse.NONE),
        (const.SERVICE_START_SURVIVAL, handle_start_survival, START_SURVIVAL_SCHEMA, SupportsResponse.OPTIONAL),
        (const.SERVICE_NEXT_ROUND, handle_next_round, NEXT_ROUND_SCHEMA, SupportsResponse.OPTIONAL),
        (const.SERVICE_SURVIVAL_GUESS, handle_survival_guess, SURVIVAL_GUESS_SCHEMA, SupportsResponse.OPTIONAL),
        (const.SERVICE_PAUSE_SURVIVAL, handle_pause_survival, EMPTY_SCHEMA, SupportsResponse.NONE),
        (const.SERVICE_RESUME_SURVIVAL, handle_resume_survival, EMPTY_SCHEMA, SupportsResponse.NONE),
        (const.SERVICE_QUIT_SURVIVAL, handle_quit_survival, EMPTY_SCHEMA, SupportsResponse.NONE),
        (const.SERVICE_UPDATE_SURVIVAL_SETTINGS, handle_update_survival_settings, UPDATE_SURVIVAL_SETTINGS_SCHEMA, SupportsResponse.NONE),
        (const.SERVICE_RESET_SURVIVAL, handle_reset_survival, EMPTY_SCHEMA, SupportsResponse.NONE),
    ]  # fmt: skip

    for service, handler, schema, supports_response in registrations:
        if hass.services.has_service(const.DOMAIN, service):
            continue
        hass.services.async_register(
            const.DOMAIN,
            service,
            handler,
            schema=schema,
            supports_response=supports_response,
        )


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister Brawldle services when unloading the integration."""
    for service in const.SERVICES:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: Brawldle services have been unregistered")
