"""Immutable render-state contracts handed to drawing collaborators.

A RenderState is a copy: renderers may hold onto it across frames and it
never aliases the engine's live entities.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .entities import Core, Enemy, Projectile

# Fill colors used by the reference renderer
CORE_COLOR = "lightblue"
PROJECTILE_COLOR = "yellow"


@dataclass(frozen=True)
class CoreState:
    position: tuple[float, float]
    radius: float
    hp: int
    initial_hp: int
    color: str = CORE_COLOR


@dataclass(frozen=True)
class EnemyState:
    id: int
    position: tuple[float, float]
    radius: float
    kind: str
    hp: int
    color: str


@dataclass(frozen=True)
class ProjectileState:
    id: int
    position: tuple[float, float]
    radius: float
    color: str = PROJECTILE_COLOR


@dataclass(frozen=True)
class RenderState:
    """Top-level render frame emitted by the engine."""

    core: CoreState
    enemies: tuple[EnemyState, ...]
    projectiles: tuple[ProjectileState, ...]
    wave: int
    state: str
    viewport: tuple[float, float]
    frame: int = 0

    @classmethod
    def capture(
        cls,
        core: Core,
        enemies: list[Enemy],
        projectiles: list[Projectile],
        wave: int,
        state: str,
        viewport: tuple[float, float],
        frame: int = 0,
    ) -> RenderState:
        return cls(
            core=CoreState(core.position, core.radius, core.hp, core.initial_hp),
            enemies=tuple(
                EnemyState(e.id, e.position, e.radius, e.kind, e.hp, e.color)
                for e in enemies
            ),
            projectiles=tuple(
                ProjectileState(p.id, p.position, p.radius) for p in projectiles
            ),
            wave=wave,
            state=state,
            viewport=viewport,
            frame=frame,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "core": {
                "position": {"x": self.core.position[0], "y": self.core.position[1]},
                "radius": self.core.radius,
                "hp": self.core.hp,
                "initial_hp": self.core.initial_hp,
                "color": self.core.color,
            },
            "enemies": [
                {
                    "id": e.id,
                    "position": {"x": e.position[0], "y": e.position[1]},
                    "radius": e.radius,
                    "kind": e.kind,
                    "hp": e.hp,
                    "color": e.color,
                }
                for e in self.enemies
            ],
            "projectiles": [
                {
                    "id": p.id,
                    "position": {"x": p.position[0], "y": p.position[1]},
                    "radius": p.radius,
                    "color": p.color,
                }
                for p in self.projectiles
            ],
            "wave": self.wave,
            "state": self.state,
            "viewport": {"width": self.viewport[0], "height": self.viewport[1]},
            "frame": self.frame,
        }
