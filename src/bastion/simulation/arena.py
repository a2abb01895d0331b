"""EntityArena — live entity set keyed by stable integer identity.

Ids come from a per-arena counter and are never reused, so two entities
alive at the same time (or one alive now and one removed earlier) never
share an id.  Iteration follows insertion order, which the fire controller
relies on for tie-breaking.

Not thread-safe on its own; the engine serializes access under its lock.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterable, Iterator
from typing import Generic, Protocol, TypeVar


class _HasId(Protocol):
    id: int


T = TypeVar("T", bound=_HasId)


class EntityArena(Generic[T]):
    """Ordered id -> entity map with insert / retain / replace operations."""

    def __init__(self) -> None:
        self._items: dict[int, T] = {}
        self._ids = itertools.count(1)

    def next_id(self) -> int:
        """Reserve a fresh id for an entity about to be inserted."""
        return next(self._ids)

    def insert(self, entity: T) -> T:
        if entity.id in self._items:
            raise ValueError(f"duplicate entity id {entity.id}")
        self._items[entity.id] = entity
        return entity

    def replace(self, entities: Iterable[T]) -> None:
        """Drop every live entity and insert *entities* in order."""
        self._items.clear()
        for e in entities:
            self.insert(e)

    def retain(self, keep: Callable[[T], bool]) -> list[int]:
        """Keep only entities for which *keep* is true.  Returns removed ids."""
        removed = [eid for eid, e in self._items.items() if not keep(e)]
        for eid in removed:
            del self._items[eid]
        return removed

    def values(self) -> list[T]:
        return list(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items.values()))

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._items
