"""Shared fixtures for the Anthill test suite."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from numpy.random import Generator

from anthill.colony.colony import Colony
from anthill.effects.particles import ParticleSystem
from anthill.progression.resources import Resources, Upgrades
from anthill.simulation.config import SimulationConfig
from anthill.simulation.context import SimulationContext
from anthill.simulation.engine import SimulationEngine
from anthill.world.tunnel_map import TunnelMap


class ScriptedRng:
    """Stand-in for ``numpy.random.Generator`` with scripted draws.

    ``random`` pops from ``randoms`` and falls back to 0.999 so chance
    events miss once the script runs out.  ``integers`` pops from
    ``integers`` and falls back to ``low``; ``uniform`` returns the
    midpoint.
    """

    def __init__(
        self,
        randoms: list[float] | None = None,
        integers: list[int] | None = None,
    ) -> None:
        self.randoms = list(randoms or [])
        self.ints = list(integers or [])

    def random(self) -> float:
        return self.randoms.pop(0) if self.randoms else 0.999

    def integers(self, low: int, high: int | None = None) -> int:
        return self.ints.pop(0) if self.ints else low

    def uniform(self, low: float, high: float) -> float:
        return (low + high) / 2


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def scripted() -> type[ScriptedRng]:
    """The scripted RNG class, for tests that need exact draws."""
    return ScriptedRng


@pytest.fixture
def ctx() -> SimulationContext:
    """An 800x600 arena with one common ant at the centre."""
    return SimulationContext(
        resources=Resources(),
        upgrades=Upgrades(),
        colony=Colony.founded(400.0, 300.0),
        tunnel_map=TunnelMap(width=50, height=50),
        particles=ParticleSystem(),
        arena_width=800.0,
        arena_height=600.0,
    )


@pytest.fixture
def default_config(tmp_path: Path) -> SimulationConfig:
    """Default config (no YAML file needed) saving under ``tmp_path``."""
    return SimulationConfig(save_path=tmp_path / "save.json")


@pytest.fixture
def engine(default_config: SimulationConfig) -> SimulationEngine:
    """A fresh engine on the default config."""
    return SimulationEngine(config=default_config)
