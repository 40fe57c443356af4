"""지오펜스 판정 테스트.

Geofence tests — distance, classification and the check-in annotation.
"""

from datetime import datetime, timezone
from types import SimpleNamespace
from uuid import uuid4

import pytest

from hr_attendance.config import settings
from hr_attendance.models.geofence import GeofenceLocation
from hr_attendance.services.attendance_service import attendance_service
from hr_attendance.services.geofence_service import (
    classify,
    geofence_service,
    haversine_distance,
    validate_coordinates,
)
from hr_attendance.utils.exceptions import BadRequestError

from tests.conftest import WORK_DATE

# 서울 시청 부근 — Near Seoul City Hall
OFFICE_LAT, OFFICE_LON = 37.5665, 126.9780


def fence(lat: float, lon: float, radius: int) -> SimpleNamespace:
    return SimpleNamespace(id=uuid4(), latitude=lat, longitude=lon, radius_meters=radius)


class TestHaversine:
    """대원 거리 계산 테스트."""

    def test_same_point_is_zero(self):
        assert haversine_distance(OFFICE_LAT, OFFICE_LON, OFFICE_LAT, OFFICE_LON) == 0

    def test_one_degree_latitude_is_about_111km(self):
        distance = haversine_distance(0.0, 0.0, 1.0, 0.0)
        assert 111_000 < distance < 111_400

    def test_symmetric(self):
        a = haversine_distance(37.5, 127.0, 35.1, 129.0)
        b = haversine_distance(35.1, 129.0, 37.5, 127.0)
        assert a == pytest.approx(b)


class TestClassify:
    """좌표 판정 테스트."""

    def test_inside_reports_matching_fence(self):
        office = fence(OFFICE_LAT, OFFICE_LON, 200)
        result = classify(OFFICE_LAT + 0.0005, OFFICE_LON, [office])
        assert result.is_within is True
        assert result.geofence_id == office.id
        assert result.distance_meters < 200

    def test_outside_reports_nearest_fence(self):
        near = fence(OFFICE_LAT, OFFICE_LON, 50)
        far = fence(OFFICE_LAT + 1, OFFICE_LON, 50)
        result = classify(OFFICE_LAT + 0.01, OFFICE_LON, [far, near])
        assert result.is_within is False
        assert result.geofence_id == near.id

    def test_nearest_containing_fence_wins(self):
        """겹치는 지오펜스 중 가장 가까운 것을 보고."""
        wide = fence(OFFICE_LAT + 0.003, OFFICE_LON, 5000)
        tight = fence(OFFICE_LAT, OFFICE_LON, 100)
        result = classify(OFFICE_LAT, OFFICE_LON, [wide, tight])
        assert result.is_within is True
        assert result.geofence_id == tight.id

    def test_no_fences(self):
        result = classify(OFFICE_LAT, OFFICE_LON, [])
        assert result.is_within is False
        assert result.geofence_id is None
        assert result.distance_meters is None


class TestValidateCoordinates:
    def test_latitude_out_of_range(self):
        with pytest.raises(BadRequestError):
            validate_coordinates(91, 0)

    def test_longitude_out_of_range(self):
        with pytest.raises(BadRequestError):
            validate_coordinates(0, -181)


class TestGeofenceService:
    """DB 기반 지오펜스 관리 및 출근 판정 테스트."""

    async def _office(self, db):
        location = GeofenceLocation(
            name="HQ", code="HQ", latitude=OFFICE_LAT, longitude=OFFICE_LON, radius_meters=150,
        )
        db.add(location)
        await db.flush()
        await db.refresh(location)
        return location

    async def test_inactive_fences_are_ignored(self, db):
        location = await self._office(db)
        location.is_active = False
        await db.flush()
        result = await geofence_service.classify_point(db, OFFICE_LAT, OFFICE_LON)
        assert result.is_within is False
        assert result.geofence_id is None

    async def test_disabled_geofencing_skips_classification(self, db, monkeypatch):
        await self._office(db)
        monkeypatch.setattr(settings, "GEOFENCING_ENABLED", False)
        assert await geofence_service.classify_point(db, OFFICE_LAT, OFFICE_LON) is None

    async def test_check_in_outside_is_annotated_not_blocked(self, db, employee_on_shift, employee_auth):
        """지오펜스 밖 출근은 허용되지만 메모와 경고가 남음."""
        await self._office(db)
        result = await attendance_service.check_in(
            db,
            employee_auth,
            employee_on_shift.id,
            datetime(2025, 3, 3, 8, 55, tzinfo=timezone.utc),
            latitude=OFFICE_LAT + 0.05,
            longitude=OFFICE_LON,
        )
        assert result.record.work_date == WORK_DATE
        assert result.record.is_within_geofence is False
        assert "[Outside geofence]" in result.record.notes
        assert "outside_geofence" in result.warnings

        logs = await attendance_service.get_location_logs(db, employee_auth, result.record.id)
        assert len(logs) == 1
        assert logs[0].is_within_geofence is False

    async def test_check_in_inside_records_geofence(self, db, employee_on_shift, employee_auth):
        location = await self._office(db)
        result = await attendance_service.check_in(
            db,
            employee_auth,
            employee_on_shift.id,
            datetime(2025, 3, 3, 8, 55, tzinfo=timezone.utc),
            latitude=OFFICE_LAT,
            longitude=OFFICE_LON,
        )
        assert result.record.is_within_geofence is True
        assert result.record.geofence_id == location.id
        assert result.warnings == []
