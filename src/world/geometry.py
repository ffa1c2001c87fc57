# src/world/geometry.py
"""Small vector helpers over plain (x, y, z) float tuples."""

from __future__ import annotations

import math
from typing import Sequence

from contracts.types import Vec3


def vec_add(a: Sequence[float], b: Sequence[float]) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def vec_sub(a: Sequence[float], b: Sequence[float]) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def vec_scale(a: Sequence[float], k: float) -> Vec3:
    return (a[0] * k, a[1] * k, a[2] * k)


def vec_dot(a: Sequence[float], b: Sequence[float]) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def vec_cross(a: Sequence[float], b: Sequence[float]) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def vec_length(a: Sequence[float]) -> float:
    return math.sqrt(vec_dot(a, a))


def vec_distance(a: Sequence[float], b: Sequence[float]) -> float:
    return vec_length(vec_sub(a, b))


def sphere_intersects_box(
    center: Sequence[float],
    radius: float,
    box_center: Sequence[float],
    half_extents: Sequence[float],
) -> bool:
    """
    Sphere vs axis-aligned box overlap.

    Clamp the sphere center into the box and compare the squared distance
    against the squared radius. Touching counts as a hit.
    """
    dist_sq = 0.0
    for axis in range(3):
        lo = box_center[axis] - half_extents[axis]
        hi = box_center[axis] + half_extents[axis]
        v = center[axis]
        if v < lo:
            dist_sq += (lo - v) ** 2
        elif v > hi:
            dist_sq += (v - hi) ** 2
    return dist_sq <= radius * radius
