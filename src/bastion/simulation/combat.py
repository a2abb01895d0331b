"""Combat — turret targeting and projectile/enemy hit detection.

Architecture
------------
FireController is the core's automatic turret.  The engine calls
``tick()`` on a fixed wall-clock cadence (``fire_interval``), independent of
the frame rate.  Each tick:

  1. If no enemy is alive, nothing happens.
  2. The enemy nearest the core (plain Euclidean distance, first one wins
     a tie) is selected.
  3. One projectile is emitted from the core's center along the unit
     vector toward that enemy's *current* position.  It is never re-aimed.

The controller only reads the enemy arena and only appends to the
projectile arena; the engine holds its lock around ``tick()``.

``find_hits()`` is the pure pairwise collision pass used by the frame
step.  It reports which projectiles hit something and how much damage
each enemy accumulated, without mutating anything.

Events published on the EventBus:
  - ``projectile_fired``: new round in the air
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from loguru import logger

from .arena import EntityArena
from .entities import Core, Enemy, Projectile
from .geometry import distance, normalize, sub

if TYPE_CHECKING:
    from bastion.comms.event_bus import EventBus


def nearest_enemy(origin: tuple[float, float], enemies: Iterable[Enemy]) -> tuple[Enemy, float] | None:
    """Return ``(enemy, distance)`` for the enemy closest to *origin*.

    Strict ``<`` comparison, so the first of several equidistant enemies
    wins.  None if *enemies* is empty.
    """
    best: Enemy | None = None
    best_dist = float("inf")
    for enemy in enemies:
        d = distance(enemy.position, origin)
        if d < best_dist:
            best = enemy
            best_dist = d
    if best is None:
        return None
    return best, best_dist


def find_hits(
    projectiles: Iterable[Projectile],
    enemies: Iterable[Enemy],
    damage: int,
) -> tuple[set[int], dict[int, int]]:
    """Pairwise projectile/enemy overlap test.

    A pair overlaps when the center distance is strictly less than the sum
    of the radii.  Returns ``(hit_projectile_ids, damage_by_enemy_id)``.
    A projectile that overlaps several enemies is reported once but deals
    full *damage* to each of them.
    """
    enemy_list = list(enemies)
    hit: set[int] = set()
    dealt: dict[int, int] = {}
    for proj in projectiles:
        for enemy in enemy_list:
            if distance(proj.position, enemy.position) < proj.radius + enemy.radius:
                hit.add(proj.id)
                dealt[enemy.id] = dealt.get(enemy.id, 0) + damage
    return hit, dealt


class FireController:
    """Auto-turret: one projectile per tick at the enemy nearest the core."""

    def __init__(
        self,
        event_bus: EventBus,
        core: Core,
        enemies: EntityArena[Enemy],
        projectiles: EntityArena[Projectile],
        projectile_radius: float = 5.0,
    ) -> None:
        self._event_bus = event_bus
        self._core = core
        self._enemies = enemies
        self._projectiles = projectiles
        self._projectile_radius = projectile_radius
        self.shots_fired: int = 0

    def tick(self) -> Projectile | None:
        """Fire at the nearest enemy.  Returns the new Projectile, or None."""
        found = nearest_enemy(self._core.position, self._enemies)
        if found is None:
            return None
        target, dist = found
        if dist == 0:
            # No defined aim direction; the core collision resolves this enemy
            logger.debug(f"Enemy {target.id} sits on the core center, holding fire")
            return None

        direction = normalize(sub(target.position, self._core.position))
        proj = self._projectiles.insert(Projectile(
            id=self._projectiles.next_id(),
            position=self._core.position,
            direction=direction,
            radius=self._projectile_radius,
        ))
        self.shots_fired += 1

        logger.debug(f"Fired projectile {proj.id} at enemy {target.id} ({dist:.1f} away)")
        self._event_bus.publish("projectile_fired", {
            "id": proj.id,
            "target_id": target.id,
            "origin": {"x": proj.position[0], "y": proj.position[1]},
            "direction": {"dx": direction[0], "dy": direction[1]},
        })
        return proj
