"""Wave catalog — data model and one-time loader.

The catalog is an ordered list of wave records:

    [
      {"wave": 1, "enemies": [{"type": "normal", "count": 5}]},
      {"wave": 2, "enemies": [{"type": "normal", "count": 5},
                              {"type": "fast", "count": 3}]}
    ]

Waves are looked up by their ``wave`` field, not by list position.  A
lookup miss is not an error: the wave director treats it as victory.

Usage:
    catalog = load_wave_catalog("waves.json")
    catalog = load_wave_catalog("https://example.org/waves.json")
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx
from loguru import logger


class CatalogUnavailable(RuntimeError):
    """The wave catalog could not be fetched or parsed."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"wave catalog unavailable from {source!r}: {reason}")
        self.source = source
        self.reason = reason


@dataclass(frozen=True)
class EnemyGroup:
    """``count`` enemies of one ``kind`` within a wave."""

    kind: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "count": self.count}


@dataclass(frozen=True)
class Wave:
    number: int
    groups: tuple[EnemyGroup, ...]

    @property
    def total_count(self) -> int:
        return sum(g.count for g in self.groups)

    def to_dict(self) -> dict[str, Any]:
        return {"wave": self.number, "enemies": [g.to_dict() for g in self.groups]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Wave:
        number = data["wave"]
        if isinstance(number, bool) or not isinstance(number, int) or number < 1:
            raise ValueError(f"wave number must be a positive integer, got {number!r}")
        groups = []
        for g in data.get("enemies", []):
            kind = g["type"]
            count = g["count"]
            if not isinstance(kind, str):
                raise TypeError(f"enemy type must be a string, got {kind!r}")
            if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                raise ValueError(f"enemy count must be a non-negative integer, got {count!r}")
            groups.append(EnemyGroup(kind=kind, count=count))
        return cls(number=number, groups=tuple(groups))


class WaveCatalog:
    """Immutable, ordered collection of waves indexed by wave number."""

    def __init__(self, waves: list[Wave]) -> None:
        self._waves: tuple[Wave, ...] = tuple(waves)
        self._by_number: dict[int, Wave] = {}
        for w in self._waves:
            # First record wins on duplicate numbers
            self._by_number.setdefault(w.number, w)

    def get(self, number: int) -> Wave | None:
        return self._by_number.get(number)

    @property
    def waves(self) -> tuple[Wave, ...]:
        return self._waves

    @property
    def wave_numbers(self) -> list[int]:
        return [w.number for w in self._waves]

    def __len__(self) -> int:
        return len(self._waves)

    def __contains__(self, number: object) -> bool:
        return number in self._by_number

    def to_list(self) -> list[dict[str, Any]]:
        return [w.to_dict() for w in self._waves]

    @classmethod
    def from_list(cls, data: list[dict[str, Any]]) -> WaveCatalog:
        if not isinstance(data, list):
            raise TypeError(f"wave catalog must be a JSON array, got {type(data).__name__}")
        return cls([Wave.from_dict(w) for w in data])


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _fetch_json(source: str, timeout: float) -> Any:
    if _is_url(source):
        with httpx.Client(timeout=timeout) as client:
            resp = client.get(source)
            resp.raise_for_status()
        return resp.json()
    return json.loads(Path(source).read_text(encoding="utf-8"))


def load_wave_catalog(source: str | Path, timeout: float = 10.0) -> WaveCatalog:
    """Load a WaveCatalog from a JSON file path or an http(s) URL.

    Raises:
        CatalogUnavailable: the source was unusable or could not be read,
            the payload was not valid (or too deeply nested) JSON, or a
            record was missing/ill-typed.  The underlying error is
            chained as ``__cause__``.
    """
    source = str(source)
    try:
        data = _fetch_json(source, timeout)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise CatalogUnavailable(source, f"fetch failed: {e}") from e
    except OSError as e:
        raise CatalogUnavailable(source, f"read failed: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
        raise CatalogUnavailable(source, f"invalid JSON: {e!r}") from e
    except ValueError as e:
        # e.g. a path with an embedded NUL byte
        raise CatalogUnavailable(source, f"bad source: {e}") from e

    try:
        catalog = WaveCatalog.from_list(data)
    except (KeyError, TypeError, ValueError) as e:
        raise CatalogUnavailable(source, f"malformed wave record: {e!r}") from e

    logger.info(f"Wave catalog: loaded {len(catalog)} waves from {source}")
    return catalog
