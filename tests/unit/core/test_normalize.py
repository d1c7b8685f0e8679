"""
정규화 함수 단위 테스트
"""

import pytest
from hazardwatch.core.models import HazardStatus
from hazardwatch.core.normalize import to_hazard_event, to_hazard_report


class TestToHazardReport:
    """레코드 → HazardReport 변환 테스트"""

    def test_db_row(self, raw_row):
        h = to_hazard_report(raw_row(location_name="Calle Crisologo"))
        assert h.id == "h1"
        assert h.hazard_type == "flooding"
        assert h.location.lat == 17.5750
        assert h.location.lon == 120.3870
        assert h.location_name == "Calle Crisologo"
        assert h.status == HazardStatus.PENDING
        assert h.created_at is not None

    def test_nested_location_and_camel_case(self):
        h = to_hazard_report({
            "id": 7,
            "hazardType": "structural damage",
            "description": "Cracked wall on the old house",
            "location": {"lat": "17.57", "lng": "120.38"},
            "status": "verified",
        })
        assert h.id == "7"
        assert h.hazard_type == "structural damage"
        assert h.location.lat == 17.57
        assert h.status == HazardStatus.VERIFIED

    def test_missing_coordinates(self, raw_row):
        row = raw_row()
        del row["latitude"]
        with pytest.raises(ValueError, match="좌표 누락"):
            to_hazard_report(row)

    def test_unparseable_coordinates(self, raw_row):
        with pytest.raises(ValueError):
            to_hazard_report(raw_row(lat="north"))

    @pytest.mark.parametrize("lat,lon", [(123.0, 120.3870), (17.5750, -200.0), (float("nan"), 120.3870)])
    def test_out_of_range_coordinates(self, raw_row, lat, lon):
        with pytest.raises(ValueError, match="좌표 범위 초과"):
            to_hazard_report(raw_row(lat=lat, lon=lon))

    def test_not_a_dict(self):
        with pytest.raises(ValueError):
            to_hazard_report(None)


class TestToHazardEvent:
    """변경 피드 페이로드 → HazardEvent 변환 테스트"""

    def test_insert(self, raw_row):
        ev = to_hazard_event({"kind": "insert", "current": raw_row()})
        assert ev.kind == "insert"
        assert ev.previous_status is None

    def test_realtime_update_format(self, raw_row):
        ev = to_hazard_event({
            "eventType": "UPDATE",
            "new": raw_row(status="fixed"),
            "old": {"id": "h1", "status": "pending"},
        })
        assert ev.kind == "update"
        assert ev.current.status == HazardStatus.FIXED
        assert ev.previous_status == HazardStatus.PENDING

    def test_update_with_key_only_old_record(self, raw_row):
        ev = to_hazard_event({"kind": "update", "current": raw_row(status="fixed"), "previous": {"id": "h1"}})
        assert ev.previous_status is None

    def test_unknown_kind(self, raw_row):
        with pytest.raises(ValueError, match="알 수 없는 이벤트 종류"):
            to_hazard_event({"kind": "delete", "current": raw_row()})

    def test_missing_current(self):
        with pytest.raises(ValueError):
            to_hazard_event({"kind": "insert"})
