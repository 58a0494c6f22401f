from __future__ import annotations

import pytest

from football_db.ingest.geometry import distance, point_in_polygon, polygon_points, shoelace_area

SQUARE = [0.0, 0.0, 10.0, 0.0, 10.0, 10.0, 0.0, 10.0]


def test_polygon_points_pairs_coordinates() -> None:
    assert polygon_points([1, 2, 3, 4]) == [(1.0, 2.0), (3.0, 4.0)]
    assert polygon_points([1, 2, 3]) == []
    assert polygon_points(None) == []


def test_shoelace_area_needs_three_points() -> None:
    assert shoelace_area(SQUARE) == pytest.approx(100.0)
    assert shoelace_area(SQUARE + [0.0, 0.0]) == pytest.approx(100.0)
    assert shoelace_area([0.0, 0.0, 5.0, 5.0]) is None


def test_distance() -> None:
    assert distance((0.0, 0.0), (3.0, 4.0)) == pytest.approx(5.0)
    assert distance(None, (1.0, 1.0)) is None


def test_point_in_polygon() -> None:
    assert point_in_polygon((5.0, 5.0), SQUARE) is True
    assert point_in_polygon((15.0, 5.0), SQUARE) is False
    assert point_in_polygon(None, SQUARE) is None
    assert point_in_polygon((5.0, 5.0), [0.0, 0.0, 1.0, 1.0]) is None
