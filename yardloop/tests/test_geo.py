import math
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from yardloop.services.geo import (
    EARTH_RADIUS_KM,
    GeoPoint,
    SearchCriteria,
    bounding_box,
    distance_from,
    great_circle_km,
)
from yardloop.services.geo.distance import BoundingBox
from yardloop.services.geo.filters import within_radius
from yardloop.services.geo.ranking import rank_results

ORLANDO = GeoPoint(28.5383, -81.3792)


def test_identical_points_are_zero_apart():
    assert great_circle_km(28.5383, -81.3792, 28.5383, -81.3792) == 0.0


def test_nearly_identical_points_do_not_fail():
    distance = great_circle_km(45.0, 10.0, 45.0, 10.0 + 1e-12)
    assert not math.isnan(distance)
    assert distance == pytest.approx(0.0, abs=1e-6)


def test_one_degree_of_latitude():
    assert great_circle_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(
        EARTH_RADIUS_KM * math.pi / 180
    )


def test_antipodal_points():
    assert great_circle_km(0.0, 0.0, 0.0, 180.0) == pytest.approx(
        EARTH_RADIUS_KM * math.pi
    )


def test_distance_is_symmetric():
    there = great_circle_km(28.5383, -81.3792, 27.9506, -82.4572)
    back = great_circle_km(27.9506, -82.4572, 28.5383, -81.3792)
    assert there == pytest.approx(back)
    # Orlando to Tampa
    assert there == pytest.approx(124, abs=3)


@pytest.mark.parametrize(
    "origin, latitude, longitude",
    [(None, 1.0, 2.0), (ORLANDO, None, 2.0), (ORLANDO, 1.0, None)],
)
def test_distance_from_missing_coordinates(origin, latitude, longitude):
    assert distance_from(origin, latitude, longitude) is None


def test_within_radius_rejects_rows_without_distance():
    assert within_radius(4.9, 5)
    assert within_radius(5.0, 5)
    assert not within_radius(5.1, 5)
    assert not within_radius(None, 5)


def test_bounding_box_contains_the_circle():
    box = bounding_box(ORLANDO, 10)
    assert isinstance(box, BoundingBox)
    assert box.min_latitude < ORLANDO.latitude < box.max_latitude
    assert box.min_longitude < ORLANDO.longitude < box.max_longitude

    # points right on the radius in each direction stay inside the box
    delta_lat = math.degrees(10 / EARTH_RADIUS_KM)
    assert box.max_latitude >= ORLANDO.latitude + delta_lat
    east = ORLANDO.longitude + delta_lat / math.cos(math.radians(ORLANDO.latitude))
    assert great_circle_km(
        ORLANDO.latitude, ORLANDO.longitude, ORLANDO.latitude, east
    ) == pytest.approx(10, rel=1e-3)
    assert box.max_longitude >= east - 1e-3


def test_bounding_box_near_pole_drops_longitude():
    box = bounding_box(GeoPoint(89.99, 0.0), 50)
    assert box.min_longitude is None and box.max_longitude is None
    assert box.max_latitude == 90.0


def test_bounding_box_across_antimeridian_drops_longitude():
    box = bounding_box(GeoPoint(0.0, 179.99), 50)
    assert box.min_longitude is None


def test_bounding_box_for_whole_sphere():
    assert bounding_box(ORLANDO, EARTH_RADIUS_KM * 4) is None


def test_criteria_needs_both_coordinates():
    criteria = SearchCriteria(latitude=28.5, radius_km=5)
    assert criteria.origin is None
    assert not criteria.location_active
    assert not criteria.radius_active

    criteria = SearchCriteria(latitude=28.5, longitude=-81.3, radius_km=5)
    assert criteria.origin == GeoPoint(28.5, -81.3)
    assert criteria.radius_active


def test_criteria_blank_query_matches_everything():
    assert SearchCriteria(query="   ").query is None
    assert SearchCriteria(query="  star ").query == "star"
    assert SearchCriteria(category="").category is None


@pytest.mark.parametrize(
    "fields",
    [{"latitude": 91}, {"longitude": -181}, {"radius_km": -1}, {"radius_km": math.nan}],
)
def test_criteria_rejects_out_of_range_values(fields):
    with pytest.raises(ValidationError):
        SearchCriteria(**fields)


def result(id_, minutes_ago, distance=None):
    now = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)
    return SimpleNamespace(
        id=id_, created_at=now - timedelta(minutes=minutes_ago), distance_km=distance
    )


def test_ranking_without_location_is_newest_first():
    ranked = rank_results([result(1, 30), result(2, 10), result(3, 20)], False)
    assert [r.id for r in ranked] == [2, 3, 1]


def test_ranking_equal_timestamps_break_ties_by_id():
    ranked = rank_results([result(1, 5), result(3, 5), result(2, 5)], False)
    assert [r.id for r in ranked] == [3, 2, 1]


def test_ranking_with_location_is_nearest_first():
    ranked = rank_results(
        [result(1, 1, 5.0), result(2, 50, 1.0), result(3, 10, None), result(4, 2, 1.0)],
        True,
    )
    # equal distances fall back to recency, missing distances go last
    assert [r.id for r in ranked] == [4, 2, 1, 3]
