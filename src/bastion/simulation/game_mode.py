"""Game state and WaveDirector — wave spawning and victory.

State machine
-------------
  playing -> game_over   (core hit points depleted, decided by the engine)
  playing -> victory     (next wave number missing from the catalog)

Both terminal states are absorbing.  The director never leaves a terminal
state and refuses to spawn once one is reached.

Spawning
--------
``spawn_wave(n)`` looks wave *n* up by number.  On a hit it *replaces* the
live enemy set: for each group it builds ``count`` enemies of that kind,
each on a uniformly chosen viewport edge and pushed outward by the kind's
radius so it starts just off screen.  On a miss it declares victory and
leaves the enemy set untouched.

Events published on EventBus:
  - ``wave_start``: new wave spawned
  - ``victory``: no wave data for the requested number
  - ``game_state_change``: any state transition
"""

from __future__ import annotations

import random
from collections import Counter
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

from bastion.units import get_kind

from .arena import EntityArena
from .catalog import WaveCatalog
from .entities import Enemy
from .geometry import Vector

if TYPE_CHECKING:
    from bastion.comms.event_bus import EventBus


class GameState(str, Enum):
    PLAYING = "playing"
    GAME_OVER = "game_over"
    VICTORY = "victory"

    @property
    def terminal(self) -> bool:
        return self is not GameState.PLAYING


# Edge indices, clockwise from the top
_EDGES = ("top", "right", "bottom", "left")


class WaveDirector:
    """Owns the wave catalog, the current wave number and the game state."""

    def __init__(
        self,
        event_bus: EventBus,
        enemies: EntityArena[Enemy],
        width: float,
        height: float,
        rng: random.Random | None = None,
    ) -> None:
        self._event_bus = event_bus
        self._enemies = enemies
        self._width = width
        self._height = height
        self._rng = rng or random.Random()

        self.catalog: WaveCatalog | None = None
        self.current_wave: int = 0
        self.state: GameState = GameState.PLAYING

    # -- Public interface -------------------------------------------------------

    @property
    def catalog_loaded(self) -> bool:
        return self.catalog is not None

    def install_catalog(self, catalog: WaveCatalog) -> bool:
        """Install the catalog once and bootstrap wave 1.

        Returns False (and changes nothing) if a catalog is already
        installed; the catalog is never replaced after startup.
        """
        if self.catalog is not None:
            logger.warning("Wave catalog already installed, ignoring reload")
            return False
        self.catalog = catalog
        if self.current_wave == 0 and not self.state.terminal:
            self.spawn_wave(1)
        return True

    def spawn_wave(self, number: int) -> bool:
        """Spawn wave *number*, or declare victory if the catalog lacks it.

        Returns True if enemies were spawned.
        """
        if self.state.terminal:
            return False
        if self.catalog is None:
            logger.warning(f"spawn_wave({number}) before the wave catalog loaded")
            return False
        wave = self.catalog.get(number)
        if wave is None:
            self._declare_victory(number)
            return False

        new_enemies: list[Enemy] = []
        counts: Counter[str] = Counter()
        for group in wave.groups:
            kind = get_kind(group.kind)
            counts[group.kind] += group.count
            for _ in range(group.count):
                new_enemies.append(Enemy(
                    id=self._enemies.next_id(),
                    kind=group.kind,
                    position=self.edge_position(kind.stats.radius),
                    hp=kind.stats.hp,
                    radius=kind.stats.radius,
                ))
        self._enemies.replace(new_enemies)
        self.current_wave = number

        logger.info(f"Wave {number}: spawned {len(new_enemies)} enemies {dict(counts)}")
        self._event_bus.publish("wave_start", {
            "wave_number": number,
            "enemy_count": len(new_enemies),
            "kinds": dict(counts),
        })
        return True

    def declare_game_over(self, core_hp: int) -> None:
        if self.state.terminal:
            return
        self.state = GameState.GAME_OVER
        logger.info(f"Game over on wave {self.current_wave} (core hp {core_hp})")
        self._event_bus.publish("game_over", {
            "wave_number": self.current_wave,
            "core_hp": core_hp,
        })
        self._publish_state_change()

    def edge_position(self, radius: float) -> Vector:
        """Random point on a random viewport edge, *radius* outside the bounds."""
        edge = _EDGES[self._rng.randrange(4)]
        if edge == "top":
            return (self._rng.uniform(0.0, self._width), -radius)
        elif edge == "right":
            return (self._width + radius, self._rng.uniform(0.0, self._height))
        elif edge == "bottom":
            return (self._rng.uniform(0.0, self._width), self._height + radius)
        else:
            return (-radius, self._rng.uniform(0.0, self._height))

    def get_state(self) -> dict:
        return {
            "state": self.state.value,
            "wave": self.current_wave,
            "total_waves": len(self.catalog) if self.catalog is not None else 0,
            "catalog_loaded": self.catalog_loaded,
        }

    # -- Internals --------------------------------------------------------------

    def _declare_victory(self, number: int) -> None:
        self.state = GameState.VICTORY
        logger.info(f"Victory: no wave {number} in catalog (cleared {self.current_wave})")
        self._event_bus.publish("victory", {
            "waves_completed": self.current_wave,
            "requested_wave": number,
        })
        self._publish_state_change()

    def _publish_state_change(self) -> None:
        self._event_bus.publish("game_state_change", self.get_state())
