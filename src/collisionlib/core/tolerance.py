"""Tolerance-based comparisons and vector coercion shared by the predicates."""

from __future__ import annotations

from typing import Iterable, Optional

from pyrr import Vector3

from ..config import settings


def close_enough(a: float, b: float, epsilon: Optional[float] = None) -> bool:
    """
    Symmetric float comparison: relative for values above 1, absolute below.

    close_enough(a, b) == close_enough(b, a) for every pair.
    """

    if epsilon is None:
        epsilon = settings.EPSILON
    return abs(a - b) <= epsilon * max(1.0, abs(a), abs(b))


def vectors_close(u, v, epsilon: Optional[float] = None) -> bool:
    """Component-wise close_enough() on two 3-component vectors."""

    return (
        close_enough(float(u[0]), float(v[0]), epsilon)
        and close_enough(float(u[1]), float(v[1]), epsilon)
        and close_enough(float(u[2]), float(v[2]), epsilon)
    )


def as_vector3(value: Iterable[float]) -> Vector3:
    """Convert an iterable to a float64 Vector3."""

    data = [float(v) for v in value]
    if len(data) != 3:
        raise ValueError(f"Expected 3 components, got {data}")
    return Vector3(data)
