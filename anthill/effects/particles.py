"""Particles — short-lived visual effects (coin bursts and the like).

Particles have no effect on gameplay.  They drift, fall under a little
gravity, shrink, and are dropped once their life counter runs out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from numpy.random import Generator

PARTICLE_LIFE = 60
GRAVITY = 0.1
SHRINK = 0.98
MAX_DRIFT = 2.0
COIN_COLOR = "#FFD700"


@dataclass
class Particle:
    """A single effect particle.

    Attributes:
        x: Horizontal position.
        y: Vertical position.
        vx: Horizontal velocity per tick.
        vy: Vertical velocity per tick.
        color: Display colour.
        kind: Effect kind, e.g. ``"coin"``.
        life: Ticks left before removal.
        size: Display radius; shrinks every tick.
    """

    x: float
    y: float
    vx: float
    vy: float
    color: str
    kind: str = "coin"
    life: int = PARTICLE_LIFE
    size: float = 3.0

    @classmethod
    def burst(
        cls,
        x: float,
        y: float,
        color: str,
        rng: Generator,
        kind: str = "coin",
    ) -> Particle:
        """Create a particle with a random drift velocity."""
        return cls(
            x=x,
            y=y,
            vx=float(rng.uniform(-MAX_DRIFT, MAX_DRIFT)),
            vy=float(rng.uniform(-MAX_DRIFT, MAX_DRIFT)),
            color=color,
            kind=kind,
            size=3.0 if kind == "coin" else 2.0,
        )

    @property
    def is_alive(self) -> bool:
        return self.life > 0

    def update(self) -> None:
        self.x += self.vx
        self.y += self.vy
        self.vy += GRAVITY
        self.life -= 1
        self.size *= SHRINK


@dataclass
class ParticleSystem:
    """Owns all live particles.

    Attributes:
        enabled: When False, ``emit`` is a no-op.
        particles: Live particles.
    """

    enabled: bool = True
    particles: list[Particle] = field(default_factory=list)

    def emit(
        self,
        x: float,
        y: float,
        color: str,
        rng: Generator,
        kind: str = "coin",
    ) -> Particle | None:
        if not self.enabled:
            return None
        particle = Particle.burst(x, y, color, rng, kind=kind)
        self.particles.append(particle)
        return particle

    def update(self) -> None:
        """Advance every particle and drop the expired ones."""
        for particle in self.particles:
            particle.update()
        self.particles = [p for p in self.particles if p.is_alive]

    def clear(self) -> None:
        self.particles.clear()
