"""Base classes for the enemy-kind system.

EnemyStats -- frozen dataclass for hit points / radius / speed
EnemyKind  -- abstract base every concrete kind subclasses
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class EnemyStats:
    """Immutable stat profile for an enemy kind."""
    hp: int
    radius: float
    speed: float  # units per second toward the core


class EnemyKind:
    """Abstract base for every enemy kind definition.

    Subclasses MUST set ``kind_id``, ``display_name`` and ``stats``.  The
    registry discovers concrete subclasses automatically at import time.
    """

    # -- identity --
    kind_id: ClassVar[str]
    display_name: ClassVar[str]

    # -- stats --
    stats: ClassVar[EnemyStats]

    # -- rendering hint --
    color: ClassVar[str] = "red"

    # -- helpers --

    @classmethod
    def hp(cls) -> int:
        return cls.stats.hp

    @classmethod
    def radius(cls) -> float:
        return cls.stats.radius

    @classmethod
    def speed(cls) -> float:
        return cls.stats.speed

    def __repr__(self) -> str:
        return f"<EnemyKind {self.kind_id}>"
