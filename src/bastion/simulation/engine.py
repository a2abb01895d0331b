"""SimulationEngine — frame-stepped combat loop around the core.

Architecture
------------
The engine is the authoritative owner of the core, the enemy arena and
the projectile arena.  Two scheduled tasks drive it:

  1. frame-clock: calls ``step(dt)`` once per frame with the measured
     elapsed time (variable delta, semi-implicit Euler).

  2. fire-control: calls ``fire()`` every ``fire_interval`` seconds;
     the FireController aims one projectile at the enemy nearest the core.

Both take ``self._lock`` for their whole body, so enemy and projectile
arenas have exactly one writer at a time.  The wave catalog is loaded
once on a background thread; its arrival installs the catalog and spawns
wave 1 under the same lock, so a frame never observes a loaded catalog
with no wave bootstrapped.

Frame step (order matters):
  1. advance projectiles, mark the ones now outside the viewport
  2. projectile/enemy overlap: mark projectiles, accumulate damage
  3. apply accumulated damage
  4. cull enemies at hp <= 0 (they deal no core damage this frame)
  5. enemy/core overlap: mark enemy, damage core
  6. move survivors straight at the core (no move at zero distance)
  7. commit removals and core hp
  8. core hp <= 0 -> game over; else empty enemy set -> next wave

Every collision test in a frame reads the same pre-removal snapshot;
nothing is removed until step 7.

Once the game is terminal, ``step`` and ``fire`` return without touching
any state and both scheduled tasks are told to stop.

Events published on EventBus:
  - ``enemy_destroyed``: killed by projectiles
  - ``core_hit``: one or more enemies reached the core this frame
  - ``catalog_loaded`` / ``catalog_unavailable``
  - plus everything WaveDirector and FireController publish
"""

from __future__ import annotations

import math
import random
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loguru import logger

from bastion.units import get_kind

from .arena import EntityArena
from .catalog import CatalogUnavailable, WaveCatalog, load_wave_catalog
from .clock import FrameClock, PeriodicTask
from .combat import FireController, find_hits
from .entities import Core, Enemy, Projectile
from .game_mode import GameState, WaveDirector
from .geometry import Vector, add, distance, in_rect, mul, normalize, sub
from .render_state import RenderState

if TYPE_CHECKING:
    from bastion.comms.event_bus import EventBus
    from bastion.config import Settings


@dataclass
class FrameReport:
    """What one ``step()`` changed."""

    frame: int
    dt: float
    state: GameState
    removed_projectiles: list[int] = field(default_factory=list)
    killed_enemies: list[int] = field(default_factory=list)
    breached_enemies: list[int] = field(default_factory=list)
    core_damage: int = 0
    wave_advanced: bool = False
    skipped: bool = False


class SimulationEngine:
    """Owns the core, the live entity arenas and the scheduled tasks."""

    def __init__(
        self,
        event_bus: EventBus,
        settings: Settings | None = None,
        width: float | None = None,
        height: float | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if settings is None:
            from bastion.config import settings as default_settings
            settings = default_settings
        self._event_bus = event_bus
        self._settings = settings
        self._lock = threading.Lock()

        self.width = float(width if width is not None else settings.viewport_width)
        self.height = float(height if height is not None else settings.viewport_height)

        self.projectile_speed = settings.projectile_speed
        self.projectile_damage = settings.projectile_damage
        self.core_collision_damage = settings.core_collision_damage

        self.core = Core(
            position=(self.width / 2, self.height / 2),
            radius=settings.core_radius,
            hp=settings.core_initial_hp,
            initial_hp=settings.core_initial_hp,
        )
        self.enemies: EntityArena[Enemy] = EntityArena()
        self.projectiles: EntityArena[Projectile] = EntityArena()

        self.game_mode = WaveDirector(event_bus, self.enemies, self.width, self.height, rng=rng)
        self.fire_control = FireController(
            event_bus, self.core, self.enemies, self.projectiles,
            projectile_radius=settings.projectile_radius,
        )

        self._frame = 0
        self._frame_clock: FrameClock | None = None
        self._fire_task: PeriodicTask | None = None

        # Catalog load bookkeeping
        self.catalog_error: CatalogUnavailable | None = None
        self._catalog_thread: threading.Thread | None = None
        self._catalog_done = threading.Event()
        self._finished = threading.Event()

    # -- Read access ----------------------------------------------------------

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def state(self) -> GameState:
        return self.game_mode.state

    @property
    def current_wave(self) -> int:
        return self.game_mode.current_wave

    @property
    def frame(self) -> int:
        return self._frame

    @property
    def is_running(self) -> bool:
        return self._frame_clock is not None and self._frame_clock.is_running

    def snapshot(self) -> RenderState:
        """Copy of everything a renderer needs for the current frame."""
        with self._lock:
            return RenderState.capture(
                self.core,
                self.enemies.values(),
                self.projectiles.values(),
                wave=self.game_mode.current_wave,
                state=self.game_mode.state.value,
                viewport=(self.width, self.height),
                frame=self._frame,
            )

    # -- Entity helpers -------------------------------------------------------

    def add_enemy(self, kind: str, position: Vector, hp: int | None = None) -> Enemy:
        """Insert a single enemy outside of wave spawning (tools and tests)."""
        stats = get_kind(kind).stats
        with self._lock:
            return self.enemies.insert(Enemy(
                id=self.enemies.next_id(),
                kind=kind,
                position=position,
                hp=stats.hp if hp is None else hp,
                radius=stats.radius,
            ))

    def add_projectile(self, position: Vector, direction: Vector) -> Projectile:
        with self._lock:
            return self.projectiles.insert(Projectile(
                id=self.projectiles.next_id(),
                position=position,
                direction=direction,
                radius=self._settings.projectile_radius,
            ))

    # -- Wave catalog ---------------------------------------------------------

    def install_catalog(self, catalog: WaveCatalog) -> None:
        """Install the catalog and bootstrap wave 1 atomically."""
        with self._lock:
            installed = self.game_mode.install_catalog(catalog)
            if self.game_mode.state.terminal:
                self._on_terminal()
        if installed:
            self._event_bus.publish("catalog_loaded", {
                "waves": len(catalog),
                "wave_numbers": catalog.wave_numbers,
            })
        self._catalog_done.set()

    def load_catalog(self, source: str | None = None, background: bool = True) -> None:
        """Fetch the wave catalog once and bootstrap wave 1 on arrival.

        Failure never raises out of the background thread: it is stored on
        ``catalog_error`` and published as ``catalog_unavailable``.  With
        ``background=False`` the CatalogUnavailable propagates to the caller.
        """
        source = source or self._settings.wave_catalog_source
        if background:
            if self._catalog_thread is not None:
                return
            self._catalog_thread = threading.Thread(
                target=self._load_catalog_worker, args=(source,),
                name="catalog-loader", daemon=True,
            )
            self._catalog_thread.start()
            return
        catalog = load_wave_catalog(source, timeout=self._settings.catalog_fetch_timeout)
        self.install_catalog(catalog)

    def wait_for_catalog(self, timeout: float | None = None) -> bool:
        """Block until the catalog load has succeeded or failed."""
        return self._catalog_done.wait(timeout)

    def _load_catalog_worker(self, source: str) -> None:
        try:
            catalog = load_wave_catalog(source, timeout=self._settings.catalog_fetch_timeout)
            self.install_catalog(catalog)
        except CatalogUnavailable as e:
            self._catalog_failed(e)
        except Exception as e:
            logger.exception("Wave catalog loader crashed")
            self._catalog_failed(CatalogUnavailable(source, f"loader error: {e!r}"))
        finally:
            # Waiters must wake even if the load died
            self._catalog_done.set()

    def _catalog_failed(self, error: CatalogUnavailable) -> None:
        self.catalog_error = error
        logger.warning(f"Wave catalog unavailable, not starting waves: {error.reason}")
        self._event_bus.publish("catalog_unavailable", {
            "source": error.source,
            "reason": error.reason,
        })

    def spawn_wave(self, number: int) -> bool:
        with self._lock:
            spawned = self.game_mode.spawn_wave(number)
            if self.game_mode.state.terminal:
                self._on_terminal()
            return spawned

    # -- Lifecycle --------------------------------------------------------------

    def start(self) -> None:
        """Start the frame clock and the fire-control cadence."""
        if self._frame_clock is not None:
            return
        if self.state.terminal:
            logger.info(f"Engine not started: game already {self.state.value}")
            return
        self._frame_clock = FrameClock(self.step, self._settings.frame_interval, name="frame-clock")
        self._fire_task = PeriodicTask(self.fire, self._settings.fire_interval, name="fire-control")
        self._frame_clock.start()
        self._fire_task.start()
        logger.info(
            f"Simulation started ({self.width:.0f}x{self.height:.0f}, "
            f"fire every {self._settings.fire_interval}s)"
        )

    def stop(self) -> None:
        if self._frame_clock is not None:
            self._frame_clock.stop()
            self._frame_clock = None
        if self._fire_task is not None:
            self._fire_task.stop()
            self._fire_task = None

    def wait_until_finished(self, timeout: float | None = None) -> bool:
        """Block until the game reaches a terminal state."""
        return self._finished.wait(timeout)

    # -- Fire control -----------------------------------------------------------

    def fire(self) -> Projectile | None:
        """One fire-control tick."""
        with self._lock:
            if self.game_mode.state.terminal:
                return None
            return self.fire_control.tick()

    # -- Frame step -------------------------------------------------------------

    def step(self, dt: float) -> FrameReport:
        """Advance the simulation by *dt* seconds."""
        with self._lock:
            return self._do_step(dt)

    def _do_step(self, dt: float) -> FrameReport:
        gm = self.game_mode
        if gm.state.terminal:
            return FrameReport(frame=self._frame, dt=0.0, state=gm.state, skipped=True)
        if not math.isfinite(dt) or dt < 0:
            dt = 0.0
        self._frame += 1
        report = FrameReport(frame=self._frame, dt=dt, state=gm.state)

        projectiles = self.projectiles.values()
        enemies = self.enemies.values()
        core = self.core

        # 1. Advance projectiles
        doomed_projectiles: set[int] = set()
        travel = self.projectile_speed * dt
        for proj in projectiles:
            proj.position = add(proj.position, mul(proj.direction, travel))
            if not in_rect(proj.position, self.width, self.height):
                doomed_projectiles.add(proj.id)

        # 2. Projectile/enemy overlap
        hit, dealt = find_hits(projectiles, enemies, self.projectile_damage)
        doomed_projectiles |= hit

        # 3-6. Damage, cull, core overlap, movement
        for enemy in enemies:
            enemy.hp -= dealt.get(enemy.id, 0)
            if not enemy.alive:
                report.killed_enemies.append(enemy.id)
                continue

            dist = distance(enemy.position, core.position)
            if dist < core.radius + enemy.radius:
                report.breached_enemies.append(enemy.id)
                report.core_damage += self.core_collision_damage
                continue

            # Zero distance normalizes to (0, 0): no move
            heading = normalize(sub(core.position, enemy.position))
            enemy.position = add(enemy.position, mul(heading, enemy.speed * dt))

        # 7. Commit
        self.projectiles.retain(lambda p: p.id not in doomed_projectiles)
        gone = set(report.killed_enemies) | set(report.breached_enemies)
        self.enemies.retain(lambda e: e.id not in gone)
        report.removed_projectiles = sorted(doomed_projectiles)

        by_id = {e.id: e for e in enemies}
        for eid in report.killed_enemies:
            dead = by_id[eid]
            logger.debug(f"Enemy {eid} ({dead.kind}) destroyed")
            self._event_bus.publish("enemy_destroyed", {
                "id": eid,
                "kind": dead.kind,
                "position": {"x": dead.position[0], "y": dead.position[1]},
                "wave_number": gm.current_wave,
            })

        if report.core_damage:
            core.hp -= report.core_damage
            logger.debug(f"Core hit by {len(report.breached_enemies)} enemies, hp {core.hp}")
            self._event_bus.publish("core_hit", {
                "enemy_ids": list(report.breached_enemies),
                "damage": report.core_damage,
                "core_hp": core.hp,
            })

        # 8. State transition
        if core.destroyed:
            gm.declare_game_over(core.hp)
        elif not self.enemies and gm.catalog_loaded:
            report.wave_advanced = gm.spawn_wave(gm.current_wave + 1)

        if gm.state.terminal:
            self._on_terminal()
        report.state = gm.state
        return report

    def _on_terminal(self) -> None:
        # Called with self._lock held: signal only, never join here
        if self._frame_clock is not None:
            self._frame_clock.request_stop()
        if self._fire_task is not None:
            self._fire_task.request_stop()
        self._finished.set()
