"""Enemy-kind registry.

Every concrete ``EnemyKind`` subclass in ``bastion.units.enemies`` is
registered by its ``kind_id``.  ``get_kind`` is total: tags missing from
the registry resolve to ``DEFAULT_KIND`` rather than raising.
"""

from __future__ import annotations

from bastion.units.base import EnemyKind, EnemyStats
from bastion.units.enemies import Normal  # importing registers every kind

DEFAULT_KIND: type[EnemyKind] = Normal


def _collect(base: type[EnemyKind]) -> dict[str, type[EnemyKind]]:
    found: dict[str, type[EnemyKind]] = {}
    for sub in base.__subclasses__():
        if "kind_id" in sub.__dict__:
            found[sub.kind_id] = sub
        found.update(_collect(sub))
    return found


_REGISTRY: dict[str, type[EnemyKind]] = _collect(EnemyKind)


def get_kind(kind_id: str) -> type[EnemyKind]:
    """Return the kind class for *kind_id*, or ``DEFAULT_KIND`` if unknown."""
    return _REGISTRY.get(kind_id, DEFAULT_KIND)


def get_stats(kind_id: str) -> EnemyStats:
    return get_kind(kind_id).stats


def is_known(kind_id: str) -> bool:
    return kind_id in _REGISTRY


def all_kinds() -> list[type[EnemyKind]]:
    return list(_REGISTRY.values())


__all__ = [
    "DEFAULT_KIND",
    "EnemyKind",
    "EnemyStats",
    "all_kinds",
    "get_kind",
    "get_stats",
    "is_known",
]
