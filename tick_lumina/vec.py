"""2D vector helpers operating on plain ``(x, y)`` tuples."""
from __future__ import annotations

import math

from tick_lumina.types import Vec2

ZERO: Vec2 = (0.0, 0.0)


def add(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] + b[0], a[1] + b[1])


def sub(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] - b[0], a[1] - b[1])


def scale(v: Vec2, s: float) -> Vec2:
    return (v[0] * s, v[1] * s)


def dot(a: Vec2, b: Vec2) -> float:
    return a[0] * b[0] + a[1] * b[1]


def length_sq(v: Vec2) -> float:
    return v[0] * v[0] + v[1] * v[1]


def length(v: Vec2) -> float:
    return math.hypot(v[0], v[1])


def distance_sq(a: Vec2, b: Vec2) -> float:
    return length_sq(sub(a, b))


def distance(a: Vec2, b: Vec2) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def normalize_or_zero(v: Vec2) -> Vec2:
    mag = length(v)
    if mag == 0.0:
        return ZERO
    return (v[0] / mag, v[1] / mag)


def lerp(a: Vec2, b: Vec2, t: float) -> Vec2:
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def clamp_length(v: Vec2, max_len: float) -> Vec2:
    if length_sq(v) <= max_len * max_len:
        return v
    return scale(normalize_or_zero(v), max_len)
