"""Unit tests for EntityArena — id-keyed live entity sets."""

from __future__ import annotations

import pytest

from bastion.simulation.arena import EntityArena
from bastion.simulation.entities import Projectile

pytestmark = pytest.mark.unit


def _proj(arena: EntityArena[Projectile], x: float = 0.0) -> Projectile:
    return arena.insert(Projectile(id=arena.next_id(), position=(x, 0.0), direction=(1.0, 0.0)))


class TestArenaIds:
    def test_ids_start_at_one_and_increase(self):
        arena: EntityArena[Projectile] = EntityArena()
        ids = [_proj(arena).id for _ in range(3)]
        assert ids == [1, 2, 3]

    def test_ids_never_reused_after_removal(self):
        arena: EntityArena[Projectile] = EntityArena()
        first = _proj(arena)
        arena.retain(lambda p: p.id != first.id)
        assert _proj(arena).id != first.id

    def test_duplicate_insert_rejected(self):
        arena: EntityArena[Projectile] = EntityArena()
        p = _proj(arena)
        with pytest.raises(ValueError, match="duplicate"):
            arena.insert(Projectile(id=p.id, position=(0.0, 0.0), direction=(0.0, 1.0)))


class TestArenaOperations:
    def test_retain_returns_removed_ids(self):
        arena: EntityArena[Projectile] = EntityArena()
        for x in (1.0, 5.0, 9.0):
            _proj(arena, x)
        removed = arena.retain(lambda p: p.position[0] < 6.0)
        assert removed == [3]
        assert len(arena) == 2

    def test_retain_nothing_empties_arena(self):
        arena: EntityArena[Projectile] = EntityArena()
        p = _proj(arena)
        assert arena.retain(lambda _: False) == [p.id]
        assert not arena
        assert arena.retain(lambda _: False) == []

    def test_replace_swaps_contents_in_order(self):
        arena: EntityArena[Projectile] = EntityArena()
        _proj(arena)
        fresh = [
            Projectile(id=arena.next_id(), position=(float(i), 0.0), direction=(1.0, 0.0))
            for i in range(3)
        ]
        arena.replace(fresh)
        assert [p.position[0] for p in arena] == [0.0, 1.0, 2.0]
        assert 1 not in arena

    def test_iteration_is_a_snapshot(self):
        arena: EntityArena[Projectile] = EntityArena()
        a = _proj(arena)
        _proj(arena)
        seen = []
        for p in arena:
            seen.append(p.id)
            arena.retain(lambda q: q.id != a.id)
        assert seen == [1, 2]

    def test_values_and_membership(self):
        arena: EntityArena[Projectile] = EntityArena()
        p = _proj(arena)
        assert arena.values() == [p]
        assert p.id in arena
        assert 42 not in arena
