"""Entity records owned by the simulation engine.

Enemies and projectiles are plain mutable dataclasses stored in an
``EntityArena``; they hold no reference back to the arena or engine.
The core is a singleton whose only mutable field is ``hp``.
"""

from __future__ import annotations

from dataclasses import dataclass

from bastion.units import get_kind

from .geometry import Vector


@dataclass
class Enemy:
    """A live enemy walking toward the core."""

    id: int
    kind: str
    position: Vector
    hp: int
    radius: float

    @property
    def speed(self) -> float:
        return get_kind(self.kind).stats.speed

    @property
    def color(self) -> str:
        return get_kind(self.kind).color

    @property
    def alive(self) -> bool:
        return self.hp > 0


@dataclass
class Projectile:
    """A turret round flying in a straight line.

    ``direction`` is a unit vector fixed at the moment of firing.
    """

    id: int
    position: Vector
    direction: Vector
    radius: float = 5.0


@dataclass
class Core:
    """The defended objective at the viewport center."""

    position: Vector
    radius: float
    hp: int
    initial_hp: int

    @property
    def destroyed(self) -> bool:
        return self.hp <= 0
