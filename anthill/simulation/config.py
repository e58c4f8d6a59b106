"""Config — load game parameters from YAML files.

Arena geometry, tick rate, economy costs and starting resources live in
YAML and are parsed into a typed dataclass here.  Keys missing from the
file keep their defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml


def _default_starting_resources() -> dict[str, float]:
    return {"coins": 1000, "food": 500, "water": 100, "ants": 1, "dirt": 0}


@dataclass
class SimulationConfig:
    """Top-level game configuration.

    Attributes:
        seed: RNG seed for deterministic replay; None seeds from the OS.
        arena_width: Arena width in world units.
        arena_height: Arena height in world units.
        map_width: Tunnel grid columns.
        map_height: Tunnel grid rows.
        cell_size: World units per tunnel grid cell.
        tick_rate: Ticks per in-game second.
        max_tunnels: Maximum number of dig actions per game.
        dig_cost: Dirt spent per dig.
        spawn_food_cost: Food spent per manual ant spawn.
        auto_save: Save once per in-game minute.
        particles_enabled: Emit visual effect particles.
        save_path: Where the save file lives.
        message_history: Player messages kept for display.
        starting_resources: Resource pool at the start of a game.
    """

    seed: int | None = 42
    arena_width: float = 800.0
    arena_height: float = 600.0
    map_width: int = 50
    map_height: int = 50
    cell_size: float = 16.0
    tick_rate: int = 60
    max_tunnels: int = 50
    dig_cost: int = 10
    spawn_food_cost: int = 10
    auto_save: bool = True
    particles_enabled: bool = True
    save_path: Path = Path("anthill_save.json")
    message_history: int = 100
    starting_resources: dict[str, float] = field(
        default_factory=_default_starting_resources,
    )

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        known = {f.name for f in fields(cls)}
        kwargs = {key: value for key, value in data.items() if key in known}
        if "save_path" in kwargs:
            kwargs["save_path"] = Path(kwargs["save_path"])
        if "starting_resources" in kwargs:
            kwargs["starting_resources"] = {
                **_default_starting_resources(),
                **(kwargs["starting_resources"] or {}),
            }
        return cls(**kwargs)
