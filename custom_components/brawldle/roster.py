# File: roster.py
"""Character roster for the Brawldle integration.

The roster is read once from the bundled JSON file and treated as immutable
for the lifetime of the config entry. Character ids are assigned in file
order starting at 1 and are stable as long as the file order is.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from . import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from .type_defs import Character, CharacterId


def build_roster(raw_entries: list[dict[str, Any]]) -> list[Character]:
    """Turn raw roster entries into Characters with sequential ids.

    Entries without a name are skipped; duplicate names (case-insensitive)
    keep their first occurrence.
    """
    characters: list[Character] = []
    seen: set[str] = set()
    for entry in raw_entries:
        name = str(entry.get(const.DATA_CHARACTER_NAME) or "").strip()
        if not name or name.casefold() in seen:
            const.LOGGER.warning("WARNING: Skipping invalid roster entry: %s", entry)
            continue
        seen.add(name.casefold())
        character: Character = {
            **entry,  # type: ignore[typeddict-item]
            const.DATA_CHARACTER_ID: len(characters) + 1,
            const.DATA_CHARACTER_NAME: name,
        }
        characters.append(character)
    return characters


class RosterProvider:
    """Read-only access to the playable characters."""

    def __init__(self, characters: list[Character] | None = None) -> None:
        """Initialize the provider, optionally with a preloaded roster."""
        self._characters: list[Character] = list(characters or [])
        self._by_id: dict[CharacterId, Character] = {}
        self._by_name: dict[str, Character] = {}
        self._index()

    def _index(self) -> None:
        self._by_id = {c[const.DATA_CHARACTER_ID]: c for c in self._characters}
        self._by_name = {
            c[const.DATA_CHARACTER_NAME].casefold(): c for c in self._characters
        }

    @staticmethod
    def default_path() -> Path:
        """Return the path of the bundled roster file."""
        return Path(__file__).parent / const.ROSTER_DIRECTORY / const.ROSTER_FILENAME

    async def async_load(self, hass: HomeAssistant, path: Path | None = None) -> None:
        """Load the roster file in the executor."""
        roster_path = path or self.default_path()

        def _read() -> list[dict[str, Any]]:
            return json.loads(roster_path.read_text(encoding="utf-8"))

        try:
            raw_entries = await hass.async_add_executor_job(_read)
        except (OSError, ValueError) as err:
            const.LOGGER.error(
                "ERROR: Failed to load roster from %s: %s", roster_path, err
            )
            raw_entries = []

        self._characters = build_roster(raw_entries)
        self._index()
        const.LOGGER.info(
            "INFO: Loaded %s characters from %s",
            len(self._characters),
            roster_path.name,
        )

    def list_characters(self) -> list[Character]:
        """Return all characters in roster order."""
        return list(self._characters)

    def get_by_id(self, character_id: CharacterId | None) -> Character | None:
        """Return the character with `character_id`, if any."""
        if character_id is None:
            return None
        return self._by_id.get(character_id)

    def find_by_name(self, name: str) -> Character | None:
        """Return the character named `name` (case-insensitive), if any."""
        return self._by_name.get(name.strip().casefold())

    def __len__(self) -> int:
        return len(self._characters)
