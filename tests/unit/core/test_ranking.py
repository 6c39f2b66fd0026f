"""
근접 정렬 모듈 단위 테스트

이 모듈은 거리 부여, 정렬, 반경 필터, 개수 제한을 테스트합니다.
"""

import math
import pytest
from traffiscan.core.models import Coordinate, Incident, Ranked
from traffiscan.core.ranking import (
    record_location, distance_between, distance_from,
    rank_by_distance, filter_nearby, take_nearest, nearby
)

KM_PER_DEGREE = 6371.0 * math.pi / 180


class TestRecordLocation:
    """레코드 좌표 읽기 테스트"""

    def test_incident(self, make_incident):
        assert record_location(make_incident("a", 1.5, 2.5)) == (1.5, 2.5)

    def test_incident_without_location(self):
        incident = Incident(id="x", type="traffic", timestamp="t")
        assert record_location(incident) is None

    def test_nested_mapping(self):
        assert record_location({"location": {"lat": 1, "lng": 2}}) == (1.0, 2.0)

    def test_flat_mapping_with_lon(self):
        assert record_location({"lat": "3.5", "lon": "4.5"}) == (3.5, 4.5)

    def test_tuple(self):
        assert record_location((5, 6)) == (5.0, 6.0)

    @pytest.mark.parametrize("record", [
        {"location": None},
        {"lat": 1},
        {"lat": "abc", "lng": 2},
        "not a record",
        None,
        (1, 2, 3),
    ])
    def test_unreadable(self, record):
        assert record_location(record) is None


class TestDistance:
    """거리 계산 테스트"""

    def test_distance_between_accepts_coordinates_and_tuples(self, origin):
        assert distance_between(origin, (0.0, 1.0)) == pytest.approx(KM_PER_DEGREE)

    def test_distance_from_missing_coordinate_is_nan(self, origin):
        assert math.isnan(distance_from(origin, {"id": "no-location"}))


class TestRankByDistance:
    """거리순 정렬 테스트"""

    def test_orders_nearest_first(self, origin, equator_incidents):
        ranked = rank_by_distance(origin, equator_incidents)

        assert [r.record.id for r in ranked] == ["near", "mid", "far"]
        assert ranked[0].distance == pytest.approx(1.11, abs=0.01)
        assert ranked[1].distance == pytest.approx(2.22, abs=0.01)
        assert ranked[2].distance == pytest.approx(3.34, abs=0.01)

    def test_does_not_mutate_input(self, origin, equator_incidents):
        before = [i.model_dump() for i in equator_incidents]
        order = [i.id for i in equator_incidents]

        ranked = rank_by_distance(origin, equator_incidents)

        assert [i.model_dump() for i in equator_incidents] == before
        assert [i.id for i in equator_incidents] == order
        assert ranked[0].record is equator_incidents[1]

    def test_ties_keep_input_order(self, origin, make_incident):
        records = [
            make_incident("east", 0.0, 0.01),
            make_incident("north", 0.01, 0.0),
            make_incident("west", 0.0, -0.01),
        ]
        ranked = rank_by_distance(origin, records)
        assert [r.record.id for r in ranked] == ["east", "north", "west"]

    def test_viewer_on_record_is_zero(self, make_incident):
        ranked = rank_by_distance((10.0, 20.0), [make_incident("here", 10.0, 20.0)])
        assert ranked[0].distance == 0.0

    def test_unknown_distance_goes_last(self, origin, make_incident):
        records = [
            {"id": "missing-1"},
            make_incident("b", 0.0, 0.02),
            {"id": "missing-2", "location": {"lat": None, "lng": None}},
            make_incident("a", 0.0, 0.01),
        ]
        ranked = rank_by_distance(origin, records)

        assert [getattr(r.record, "id", None) for r in ranked[:2]] == ["a", "b"]
        assert [r.record["id"] for r in ranked[2:]] == ["missing-1", "missing-2"]
        assert all(math.isnan(r.distance) for r in ranked[2:])

    def test_custom_locator(self, origin):
        records = [{"where": (0.0, 0.05)}, {"where": (0.0, 0.01)}]
        ranked = rank_by_distance(origin, records, locate=lambda r: r["where"])
        assert ranked[0].record["where"] == (0.0, 0.01)

    def test_empty(self, origin):
        assert rank_by_distance(origin, []) == []

    def test_idempotent(self, origin, equator_incidents):
        first = rank_by_distance(origin, equator_incidents)
        second = rank_by_distance(origin, equator_incidents)
        assert [(r.record.id, r.distance) for r in first] == [(r.record.id, r.distance) for r in second]

    def test_recomputed_for_new_viewer(self, equator_incidents):
        at_origin = rank_by_distance(Coordinate(lat=0, lng=0), equator_incidents)
        moved = rank_by_distance(Coordinate(lat=0, lng=0.03), equator_incidents)

        assert at_origin[0].record.id == "near"
        assert moved[0].record.id == "far"
        assert moved[0].distance == 0.0


class TestFilterAndTruncate:
    """반경 필터와 개수 제한 테스트"""

    def _ranked(self, distances):
        return [Ranked(record=f"r{d}", distance=d) for d in distances]

    def test_filter_nearby_radius(self):
        result = filter_nearby(self._ranked([1, 4, 6, 9]), 5)
        assert [r.distance for r in result] == [1, 4]

    def test_filter_nearby_preserves_order(self):
        result = filter_nearby(self._ranked([6, 4, 9, 1]), 5)
        assert [r.distance for r in result] == [4, 1]

    def test_filter_nearby_inclusive_boundary(self):
        assert len(filter_nearby(self._ranked([5.0]), 5.0)) == 1

    def test_filter_nearby_excludes_nan(self):
        result = filter_nearby(self._ranked([1, math.nan, 2]), 100)
        assert [r.distance for r in result] == [1, 2]

    def test_take_nearest(self):
        ranked = self._ranked([1, 2, 3])
        assert [r.distance for r in take_nearest(ranked, 2)] == [1, 2]
        assert take_nearest(ranked, 0) == []
        assert len(take_nearest(ranked, None)) == 3
        assert len(take_nearest(ranked, 10)) == 3

    def test_nearby_on_equator(self, origin, make_incident):
        records = [
            make_incident(f"d{km}", 0.0, km / KM_PER_DEGREE)
            for km in (9, 1, 6, 4)
        ]
        result = nearby(origin, records, radius_km=5)
        assert [r.record.id for r in result] == ["d1", "d4"]

    def test_nearby_emergency_thresholds(self, origin, make_incident):
        records = [make_incident(f"d{km}", 0.0, km / KM_PER_DEGREE) for km in (7, 1, 3, 9)]
        result = nearby(origin, records, radius_km=8, max_count=2)
        assert [r.record.id for r in result] == ["d1", "d3"]
