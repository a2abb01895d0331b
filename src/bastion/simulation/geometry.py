"""2-D vector helpers shared by the combat and movement code."""

from __future__ import annotations

import math

Vector = tuple[float, float]


def add(a: Vector, b: Vector) -> Vector:
    return a[0] + b[0], a[1] + b[1]


def sub(a: Vector, b: Vector) -> Vector:
    return a[0] - b[0], a[1] - b[1]


def mul(a: Vector, scalar: float) -> Vector:
    return a[0] * scalar, a[1] * scalar


def length(a: Vector) -> float:
    return math.hypot(a[0], a[1])


def distance(a: Vector, b: Vector) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def normalize(a: Vector) -> Vector:
    """Unit vector along *a*; the zero vector maps to ``(0.0, 0.0)``."""
    mag = length(a)
    if mag == 0:
        return 0.0, 0.0
    return a[0] / mag, a[1] / mag


def in_rect(p: Vector, width: float, height: float) -> bool:
    """True if *p* lies inside the closed rectangle [0, width] x [0, height]."""
    return 0.0 <= p[0] <= width and 0.0 <= p[1] <= height
