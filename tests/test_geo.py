"""
Tests for haversine distance and nearest-building matching.
"""

import pytest

from onboarding.errors import NoCandidatesError
from onboarding.geo import EARTH_RADIUS_METERS, distance_meters, nearest
from onboarding.location import find_nearest_building
from onboarding.state import CampusBuilding, Coordinate


class TestDistanceMeters:
    """Tests for distance_meters."""

    @pytest.mark.parametrize("point", [
        Coordinate(0, 0),
        Coordinate(40.343, -74.651),
        Coordinate(-33.8688, 151.2093),
        Coordinate(89.9, 179.9),
    ])
    def test_same_point_is_zero(self, point):
        assert distance_meters(point, point) == 0

    def test_symmetric(self):
        a = Coordinate(40.343, -74.651)
        b = Coordinate(51.5074, -0.1278)
        assert distance_meters(a, b) == distance_meters(b, a)

    def test_one_degree_of_longitude_at_equator(self):
        expected = EARTH_RADIUS_METERS * 3.141592653589793 / 180
        assert distance_meters(Coordinate(0, 0), Coordinate(0, 1)) == pytest.approx(expected)

    def test_antipodes_is_half_circumference(self):
        d = distance_meters(Coordinate(0, 0), Coordinate(0, 180))
        assert d == pytest.approx(EARTH_RADIUS_METERS * 3.141592653589793)

    def test_non_negative(self):
        assert distance_meters(Coordinate(10, 20), Coordinate(-10, -20)) > 0


class TestNearest:
    """Tests for nearest()."""

    def test_empty_candidates_raises(self):
        with pytest.raises(NoCandidatesError):
            nearest(Coordinate(0, 0), [])

    def test_picks_closer_of_two_equator_points(self):
        """User at (0, 0.4): 0.4° to the first point vs 0.6° to the second."""
        user = Coordinate(0, 0.4)
        candidates = [("a", Coordinate(0, 0)), ("b", Coordinate(0, 1))]

        assert distance_meters(user, candidates[0][1]) == pytest.approx(44_478, abs=1)
        assert distance_meters(user, candidates[1][1]) == pytest.approx(66_717, abs=1)
        assert nearest(user, candidates)[0] == "a"

    def test_tie_goes_to_first_occurrence(self):
        user = Coordinate(0, 0.5)
        candidates = [("first", Coordinate(0, 0)), ("second", Coordinate(0, 1))]
        assert nearest(user, candidates)[0] == "first"

        # Same coordinate listed twice
        same = [("x", Coordinate(1, 1)), ("y", Coordinate(1, 1))]
        assert nearest(Coordinate(0, 0), same)[0] == "x"

    def test_result_is_one_of_the_candidates(self):
        candidates = [
            (1, Coordinate(40.0, -74.0)),
            (2, Coordinate(41.0, -75.0)),
            (3, Coordinate(39.5, -73.5)),
        ]
        for point in [Coordinate(0, 0), Coordinate(40.9, -74.9), Coordinate(-80, 100)]:
            assert nearest(point, candidates) in candidates

    def test_single_candidate(self):
        only = (99, Coordinate(10, 10))
        assert nearest(Coordinate(-10, -10), [only]) == only


class TestFindNearestBuilding:
    """Tests for building-level matching."""

    def test_finds_nearest_building(self):
        buildings = [
            CampusBuilding(id=7, name="Firestone Library", latitude=40.3496, longitude=-74.6574),
            CampusBuilding(id=42, name="Nassau Hall", latitude=40.343, longitude=-74.651),
        ]
        building = find_nearest_building(Coordinate(40.3431, -74.6512), buildings)
        assert building.id == 42

    def test_no_buildings_loaded(self):
        with pytest.raises(NoCandidatesError):
            find_nearest_building(Coordinate(40.343, -74.651), [])
