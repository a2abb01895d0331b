"""Unit tests for WaveDirector — wave spawning, edges, victory."""

from __future__ import annotations

import queue
import random
import threading

import pytest

from bastion.simulation.arena import EntityArena
from bastion.simulation.catalog import WaveCatalog
from bastion.simulation.entities import Enemy
from bastion.simulation.game_mode import GameState, WaveDirector


class SimpleEventBus:
    """Minimal EventBus for unit testing."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[queue.Queue]] = {}
        self._lock = threading.Lock()

    def publish(self, topic: str, data: object = None) -> None:
        with self._lock:
            for q in self._subscribers.get(topic, []):
                q.put(data)

    def subscribe(self, topic: str) -> queue.Queue:
        q: queue.Queue = queue.Queue()
        with self._lock:
            self._subscribers.setdefault(topic, []).append(q)
        return q


pytestmark = pytest.mark.unit

W, H = 800.0, 600.0

_CATALOG = [
    {"wave": 1, "enemies": [{"type": "normal", "count": 4}]},
    {"wave": 2, "enemies": [{"type": "normal", "count": 3}, {"type": "tank", "count": 2}]},
]


def _director(seed: int = 7, bus: SimpleEventBus | None = None) -> tuple[WaveDirector, EntityArena[Enemy]]:
    enemies: EntityArena[Enemy] = EntityArena()
    gm = WaveDirector(bus or SimpleEventBus(), enemies, W, H, rng=random.Random(seed))
    return gm, enemies


# --------------------------------------------------------------------------
# Initial state and catalog install
# --------------------------------------------------------------------------

class TestInitialState:
    def test_starts_playing_with_no_wave(self):
        gm, enemies = _director()
        assert gm.state is GameState.PLAYING
        assert gm.current_wave == 0
        assert not gm.catalog_loaded
        assert len(enemies) == 0

    def test_spawn_before_catalog_is_noop(self):
        gm, enemies = _director()
        assert gm.spawn_wave(1) is False
        assert gm.state is GameState.PLAYING
        assert len(enemies) == 0

    def test_install_bootstraps_wave_one(self):
        gm, enemies = _director()
        assert gm.install_catalog(WaveCatalog.from_list(_CATALOG)) is True
        assert gm.current_wave == 1
        assert len(enemies) == 4

    def test_catalog_never_replaced(self):
        gm, _ = _director()
        first = WaveCatalog.from_list(_CATALOG)
        gm.install_catalog(first)
        assert gm.install_catalog(WaveCatalog.from_list([])) is False
        assert gm.catalog is first

    def test_empty_catalog_is_immediate_victory(self):
        gm, enemies = _director()
        gm.install_catalog(WaveCatalog.from_list([]))
        assert gm.state is GameState.VICTORY
        assert gm.current_wave == 0


# --------------------------------------------------------------------------
# Spawning
# --------------------------------------------------------------------------

class TestSpawnWave:
    def test_counts_and_hp_per_kind(self):
        gm, enemies = _director()
        gm.install_catalog(WaveCatalog.from_list(_CATALOG))
        assert gm.spawn_wave(2) is True
        kinds = sorted(e.kind for e in enemies)
        assert kinds == ["normal", "normal", "normal", "tank", "tank"]
        for e in enemies:
            assert e.hp == (50 if e.kind == "tank" else 10)
            assert e.radius == (25.0 if e.kind == "tank" else 15.0)

    def test_spawn_replaces_live_set(self):
        gm, enemies = _director()
        gm.install_catalog(WaveCatalog.from_list(_CATALOG))
        old_ids = {e.id for e in enemies}
        gm.spawn_wave(2)
        assert old_ids.isdisjoint([e.id for e in enemies])
        assert len(enemies) == 5

    def test_ids_unique_across_waves(self):
        gm, enemies = _director()
        gm.install_catalog(WaveCatalog.from_list(_CATALOG))
        seen = [e.id for e in enemies]
        gm.spawn_wave(2)
        seen += [e.id for e in enemies]
        assert len(seen) == len(set(seen))

    def test_lookup_by_wave_field(self):
        gm, enemies = _director()
        gm.install_catalog(WaveCatalog.from_list([
            {"wave": 2, "enemies": [{"type": "fast", "count": 1}]},
            {"wave": 1, "enemies": [{"type": "tank", "count": 1}]},
        ]))
        assert [e.kind for e in enemies] == ["tank"]

    def test_unknown_kind_uses_default_profile(self):
        gm, enemies = _director()
        gm.install_catalog(WaveCatalog.from_list([
            {"wave": 1, "enemies": [{"type": "boss", "count": 2}]},
        ]))
        for e in enemies:
            assert e.kind == "boss"
            assert e.hp == 10
            assert e.radius == 15.0
            assert e.speed == 50.0

    def test_zero_count_group(self):
        gm, enemies = _director()
        gm.install_catalog(WaveCatalog.from_list([
            {"wave": 1, "enemies": [{"type": "fast", "count": 0}]},
        ]))
        assert gm.current_wave == 1
        assert len(enemies) == 0
        assert gm.state is GameState.PLAYING

    def test_wave_start_event(self):
        bus = SimpleEventBus()
        q = bus.subscribe("wave_start")
        gm, _ = _director(bus=bus)
        gm.install_catalog(WaveCatalog.from_list(_CATALOG))
        gm.spawn_wave(2)
        first, second = q.get_nowait(), q.get_nowait()
        assert first["wave_number"] == 1
        assert second == {"wave_number": 2, "enemy_count": 5, "kinds": {"normal": 3, "tank": 2}}


class TestEdgePlacement:
    @pytest.mark.parametrize("seed", range(5))
    def test_every_enemy_just_outside_an_edge(self, seed):
        gm, enemies = _director(seed=seed)
        gm.install_catalog(WaveCatalog.from_list([
            {"wave": 1, "enemies": [{"type": "normal", "count": 20}, {"type": "tank", "count": 20}]},
        ]))
        for e in enemies:
            x, y = e.position
            r = e.radius
            on_top = y == -r and 0.0 <= x <= W
            on_right = x == W + r and 0.0 <= y <= H
            on_bottom = y == H + r and 0.0 <= x <= W
            on_left = x == -r and 0.0 <= y <= H
            assert on_top or on_right or on_bottom or on_left, e.position

    def test_all_four_edges_used(self):
        gm, _ = _director(seed=3)
        rs = 15.0
        seen = set()
        for _ in range(200):
            x, y = gm.edge_position(rs)
            if y == -rs:
                seen.add("top")
            elif x == W + rs:
                seen.add("right")
            elif y == H + rs:
                seen.add("bottom")
            elif x == -rs:
                seen.add("left")
        assert seen == {"top", "right", "bottom", "left"}

    def test_same_seed_same_positions(self):
        a, ea = _director(seed=11)
        b, eb = _director(seed=11)
        a.install_catalog(WaveCatalog.from_list(_CATALOG))
        b.install_catalog(WaveCatalog.from_list(_CATALOG))
        assert [e.position for e in ea] == [e.position for e in eb]


# --------------------------------------------------------------------------
# Terminal states
# --------------------------------------------------------------------------

class TestVictory:
    def test_missing_wave_is_victory(self):
        bus = SimpleEventBus()
        q = bus.subscribe("victory")
        gm, enemies = _director(bus=bus)
        gm.install_catalog(WaveCatalog.from_list(_CATALOG))
        before = [e.id for e in enemies]
        assert gm.spawn_wave(3) is False
        assert gm.state is GameState.VICTORY
        assert [e.id for e in enemies] == before
        assert gm.current_wave == 1
        assert q.get_nowait() == {"waves_completed": 1, "requested_wave": 3}

    def test_no_spawn_after_victory(self):
        gm, enemies = _director()
        gm.install_catalog(WaveCatalog.from_list(_CATALOG))
        gm.spawn_wave(3)
        assert gm.spawn_wave(2) is False
        assert gm.current_wave == 1
        assert len(enemies) == 4


class TestGameOver:
    def test_declare_game_over(self):
        bus = SimpleEventBus()
        q = bus.subscribe("game_over")
        gm, _ = _director(bus=bus)
        gm.declare_game_over(0)
        assert gm.state is GameState.GAME_OVER
        assert gm.state.terminal
        assert q.get_nowait() == {"wave_number": 0, "core_hp": 0}

    def test_game_over_is_absorbing(self):
        gm, _ = _director()
        gm.install_catalog(WaveCatalog.from_list(_CATALOG))
        gm.declare_game_over(-10)
        assert gm.spawn_wave(3) is False
        assert gm.state is GameState.GAME_OVER

    def test_get_state(self):
        gm, _ = _director()
        gm.install_catalog(WaveCatalog.from_list(_CATALOG))
        assert gm.get_state() == {
            "state": "playing",
            "wave": 1,
            "total_waves": 2,
            "catalog_loaded": True,
        }
