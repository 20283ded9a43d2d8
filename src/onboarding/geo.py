"""
Great-circle distance and nearest-candidate matching.

Pure functions; acquiring the user's position lives in location.py.
"""

import math
from typing import Any, Sequence, TypeVar

from .errors import NoCandidatesError
from .state import Coordinate

EARTH_RADIUS_METERS = 6_371_000.0

T = TypeVar("T")


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance between two points on a spherical Earth."""
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Clamp: rounding can push h a hair outside [0, 1]
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def nearest(point: Coordinate, candidates: Sequence[tuple[Any, Coordinate]]) -> tuple[Any, Coordinate]:
    """
    Pick the (id, coordinate) pair closest to `point`.

    Ties go to the earliest candidate. Raises NoCandidatesError on an empty list.
    """
    if not candidates:
        raise NoCandidatesError()

    best = candidates[0]
    best_distance = distance_meters(point, best[1])
    for candidate in candidates[1:]:
        d = distance_meters(point, candidate[1])
        if d < best_distance:
            best, best_distance = candidate, d
    return best


def nearest_item(point: Coordinate, items: Sequence[T], coordinate_of) -> T:
    """nearest() over arbitrary objects, given a coordinate accessor."""
    index, _ = nearest(point, [(i, coordinate_of(item)) for i, item in enumerate(items)])
    return items[index]
