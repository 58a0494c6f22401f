"""Plane geometry used by the 360 tracking extractor."""

from __future__ import annotations

import math
from typing import Any, List, Optional, Sequence, Tuple

from football_db.ingest.value_extractors import get_float

Point = Tuple[float, float]


def polygon_points(flat: Any) -> List[Point]:
    """Pair up a flat ``[x1, y1, x2, y2, ...]`` coordinate list.

    A trailing odd value or any non-numeric coordinate yields an empty list.
    """

    if not isinstance(flat, Sequence) or isinstance(flat, str) or len(flat) % 2:
        return []
    values = [get_float(value) for value in flat]
    if any(value is None for value in values):
        return []
    return [(values[i], values[i + 1]) for i in range(0, len(values), 2)]  # type: ignore[misc]


def shoelace_area(flat: Any) -> Optional[float]:
    """Area of the polygon described by a flat coordinate list.

    At least three points (six values) are required; a closing point equal to
    the first one contributes nothing to the sum.
    """

    points = polygon_points(flat)
    if len(points) < 3:
        return None
    twice_area = 0.0
    for (x1, y1), (x2, y2) in zip(points, points[1:] + points[:1]):
        twice_area += x1 * y2 - x2 * y1
    return abs(twice_area) / 2


def distance(a: Optional[Point], b: Optional[Point]) -> Optional[float]:
    if a is None or b is None:
        return None
    return math.hypot(a[0] - b[0], a[1] - b[1])


def point_in_polygon(point: Optional[Point], flat: Any) -> Optional[bool]:
    """Ray-casting test; ``None`` when either the point or the polygon is unusable."""

    points = polygon_points(flat)
    if point is None or len(points) < 3:
        return None

    x, y = point
    inside = False
    for (x1, y1), (x2, y2) in zip(points, points[1:] + points[:1]):
        if (y1 > y) != (y2 > y):
            crossing = x1 + (y - y1) * (x2 - x1) / (y2 - y1)
            if x < crossing:
                inside = not inside
    return inside


__all__ = ["Point", "polygon_points", "shoelace_area", "distance", "point_in_polygon"]
