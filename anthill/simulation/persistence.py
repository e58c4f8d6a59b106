"""Persistence — save-game encoding and the on-disk save file.

The persisted shape is a JSON object::

    {resources, upgrades, achievements, level, enemiesKilled,
     totalCoinsEarned, gameTime, timestamp}

Decoding never fails: each field is checked on its own and replaced by
its default when missing or malformed.  Loaded food is raised to at
least 500 so a restored game can always afford to rebuild.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from anthill.progression.engine import Progress
from anthill.progression.resources import Resources, Upgrades

logger = logging.getLogger(__name__)

MIN_LOADED_FOOD = 500
MAX_LOADED_NUMBER = 1e15


@dataclass
class SavedState:
    """Everything restored from a save file."""

    resources: Resources = field(default_factory=Resources)
    upgrades: Upgrades = field(default_factory=Upgrades)
    progress: Progress = field(default_factory=Progress)
    timestamp: int | None = None


def _number(
    value: Any,
    default: float,
    minimum: float = 0,
    maximum: float = MAX_LOADED_NUMBER,
) -> float:
    """Return ``value`` if it is a number in ``[minimum, maximum]``.

    NaN and infinities fail the range check and fall back to ``default``.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if not minimum <= value <= maximum:
        return default
    return value


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


class PersistenceCodec:
    """Converts game state to and from the persisted JSON shape."""

    def __init__(self, defaults: Resources | None = None) -> None:
        self.defaults = defaults if defaults is not None else Resources()

    def encode(
        self,
        resources: Resources,
        upgrades: Upgrades,
        progress: Progress,
        timestamp: int | None = None,
    ) -> dict[str, Any]:
        """Build the persisted payload.

        Args:
            resources: Current resource pool.
            upgrades: Current upgrade levels.
            progress: Level, counters and achievements.
            timestamp: Save time in epoch milliseconds; now if None.

        Returns:
            A JSON-serialisable dict.
        """
        if timestamp is None:
            timestamp = int(time.time() * 1000)
        return {
            "resources": resources.to_dict(),
            "upgrades": upgrades.to_dict(),
            "achievements": dict(progress.achievements),
            "level": progress.level,
            "enemiesKilled": progress.enemies_killed,
            "totalCoinsEarned": progress.total_coins_earned,
            "gameTime": progress.game_time,
            "timestamp": timestamp,
        }

    def decode(self, payload: Any) -> SavedState:
        """Rebuild state from a payload, substituting defaults field by field.

        Args:
            payload: Parsed JSON; anything that is not an object yields
                a default state.

        Returns:
            The restored state.
        """
        data = _mapping(payload)
        if payload is not None and not isinstance(payload, dict):
            logger.warning("Save payload is not an object; using defaults")

        raw = _mapping(data.get("resources"))
        resources = Resources(
            **{
                f.name: _number(raw.get(f.name), getattr(self.defaults, f.name))
                for f in fields(Resources)
            },
        )
        resources.food = max(resources.food, MIN_LOADED_FOOD)

        upgrades = Upgrades.from_dict(_mapping(data.get("upgrades")))

        achievements = {
            str(key): True
            for key, value in _mapping(data.get("achievements")).items()
            if value is True
        }
        progress = Progress(
            level=int(_number(data.get("level"), 1, minimum=1)),
            enemies_killed=int(_number(data.get("enemiesKilled"), 0)),
            total_coins_earned=_number(data.get("totalCoinsEarned"), 0),
            game_time=_number(data.get("gameTime"), 0.0),
            achievements=achievements,
        )
        timestamp = data.get("timestamp")
        return SavedState(
            resources=resources,
            upgrades=upgrades,
            progress=progress,
            timestamp=timestamp if isinstance(timestamp, int) else None,
        )

    def dumps(self, payload: dict[str, Any]) -> str:
        return json.dumps(payload)

    def loads(self, text: str) -> SavedState:
        """Parse JSON text; unparsable text decodes to defaults."""
        try:
            payload = json.loads(text)
        except ValueError:
            logger.warning("Save data is not valid JSON; using defaults")
            payload = None
        return self.decode(payload)


class SaveStore:
    """A save file on disk.

    Attributes:
        path: Location of the JSON save file.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def write(self, text: str) -> bool:
        """Write the save text; returns False (and logs) on I/O failure."""
        try:
            self.path.write_text(text, encoding="utf-8")
        except OSError:
            logger.warning("Could not write save file %s", self.path, exc_info=True)
            return False
        return True

    def read(self) -> str | None:
        """Return the save text, or None if missing or unreadable."""
        if not self.exists():
            return None
        try:
            return self.path.read_text(encoding="utf-8")
        except OSError:
            logger.warning("Could not read save file %s", self.path, exc_info=True)
            return None

    def delete(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError:
            logger.warning("Could not delete save file %s", self.path, exc_info=True)
