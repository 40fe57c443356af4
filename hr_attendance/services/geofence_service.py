"""지오펜스 서비스 — 위치 판정과 근무 위치 관리.

Geofence Service — Classifies coordinates against approved circular work
locations and manages those locations.

Classification is an annotation only: it never blocks a check-in or
check-out. When ``settings.GEOFENCING_ENABLED`` is off, coordinates are still
stored but not classified.
"""

import math
from dataclasses import dataclass
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.config import settings
from hr_attendance.models.geofence import GeofenceLocation
from hr_attendance.repositories.geofence_repository import geofence_repository
from hr_attendance.utils.auth_context import AuthContext
from hr_attendance.utils.exceptions import BadRequestError, DuplicateError, NotFoundError

# 지구 평균 반지름(m) — Mean Earth radius in metres
EARTH_RADIUS_METERS: int = 6_371_000


@dataclass(frozen=True)
class GeofenceMatch:
    """좌표 판정 결과.

    Outcome of classifying one coordinate. ``geofence_id`` and
    ``distance_meters`` refer to the matching geofence when inside, and to the
    nearest geofence when outside (both None when no geofence exists).
    """

    geofence_id: UUID | None
    distance_meters: float | None
    is_within: bool


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """두 좌표 사이의 대원 거리(m)를 계산합니다.

    Great-circle distance in metres between two points given in degrees.
    """
    phi1: float = math.radians(lat1)
    phi2: float = math.radians(lat2)
    d_phi: float = math.radians(lat2 - lat1)
    d_lambda: float = math.radians(lon2 - lon1)

    a: float = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def validate_coordinates(latitude: float, longitude: float) -> None:
    """위도/경도 범위를 검사합니다 (Reject coordinates outside the valid range)."""
    if not -90 <= latitude <= 90:
        raise BadRequestError("latitude must be between -90 and 90")
    if not -180 <= longitude <= 180:
        raise BadRequestError("longitude must be between -180 and 180")


def classify(latitude: float, longitude: float, geofences: Sequence[Any]) -> GeofenceMatch:
    """좌표를 지오펜스 목록에 대해 판정합니다.

    Classify a coordinate. Inside means within the radius of at least one
    geofence; the nearest such geofence is reported. Otherwise the nearest
    geofence overall is reported with ``is_within=False``.

    Args:
        latitude: 위도 (Latitude in degrees)
        longitude: 경도 (Longitude in degrees)
        geofences: 활성 지오펜스 목록 (Active geofences with latitude/longitude/radius_meters)

    Returns:
        GeofenceMatch: 판정 결과 (Classification)
    """
    nearest_inside: tuple[float, Any] | None = None
    nearest_any: tuple[float, Any] | None = None

    for fence in geofences:
        distance: float = haversine_distance(latitude, longitude, fence.latitude, fence.longitude)
        if nearest_any is None or distance < nearest_any[0]:
            nearest_any = (distance, fence)
        if distance <= fence.radius_meters and (nearest_inside is None or distance < nearest_inside[0]):
            nearest_inside = (distance, fence)

    if nearest_inside is not None:
        return GeofenceMatch(geofence_id=nearest_inside[1].id, distance_meters=nearest_inside[0], is_within=True)
    if nearest_any is not None:
        return GeofenceMatch(geofence_id=nearest_any[1].id, distance_meters=nearest_any[0], is_within=False)
    return GeofenceMatch(geofence_id=None, distance_meters=None, is_within=False)


class GeofenceService:
    """지오펜스 서비스.

    Geofence service covering point classification and location CRUD.
    """

    async def classify_point(
        self,
        db: AsyncSession,
        latitude: float,
        longitude: float,
    ) -> GeofenceMatch | None:
        """활성 지오펜스에 대해 좌표를 판정합니다.

        Classify a coordinate against active geofences.

        Returns:
            GeofenceMatch | None: 판정 결과, 기능 비활성 시 None (None when geofencing is disabled)
        """
        validate_coordinates(latitude, longitude)
        if not settings.GEOFENCING_ENABLED:
            return None
        fences: Sequence[GeofenceLocation] = await geofence_repository.get_active(db)
        return classify(latitude, longitude, fences)

    async def create_geofence(
        self,
        db: AsyncSession,
        auth: AuthContext,
        data: dict[str, Any],
    ) -> GeofenceLocation:
        """근무 위치를 등록합니다.

        Register an approved work location.

        Raises:
            ForbiddenError: 관리자가 아닐 때 (Caller is not an admin)
            DuplicateError: 코드 중복 (Code already exists)
        """
        auth.require_admin()
        validate_coordinates(data["latitude"], data["longitude"])
        if await geofence_repository.get_by_code(db, data["code"]) is not None:
            raise DuplicateError(f"Geofence code '{data['code']}' already exists")
        return await geofence_repository.create(db, data)

    async def list_geofences(self, db: AsyncSession, active_only: bool = False) -> Sequence[GeofenceLocation]:
        if active_only:
            return await geofence_repository.get_active(db)
        return await geofence_repository.get_all(db, order_by=GeofenceLocation.code)

    async def get_geofence(self, db: AsyncSession, geofence_id: UUID) -> GeofenceLocation:
        geofence: GeofenceLocation | None = await geofence_repository.get_by_id(db, geofence_id)
        if geofence is None:
            raise NotFoundError("Geofence not found")
        return geofence

    async def update_geofence(
        self,
        db: AsyncSession,
        auth: AuthContext,
        geofence_id: UUID,
        data: dict[str, Any],
    ) -> GeofenceLocation:
        """근무 위치를 수정합니다 (Update an approved work location)."""
        auth.require_admin()
        geofence: GeofenceLocation = await self.get_geofence(db, geofence_id)

        new_code: str | None = data.get("code")
        if new_code is not None and new_code != geofence.code:
            if await geofence_repository.get_by_code(db, new_code) is not None:
                raise DuplicateError(f"Geofence code '{new_code}' already exists")
        validate_coordinates(
            data.get("latitude", geofence.latitude),
            data.get("longitude", geofence.longitude),
        )

        updated: GeofenceLocation | None = await geofence_repository.update(db, geofence_id, data)
        if updated is None:
            raise NotFoundError("Geofence not found")
        return updated

    async def deactivate_geofence(self, db: AsyncSession, auth: AuthContext, geofence_id: UUID) -> GeofenceLocation:
        return await self.update_geofence(db, auth, geofence_id, {"is_active": False})

    def build_response(self, geofence: GeofenceLocation) -> dict:
        """지오펜스 응답 딕셔너리를 구성합니다 (Build a geofence response dict)."""
        return {
            "id": str(geofence.id),
            "name": geofence.name,
            "code": geofence.code,
            "latitude": geofence.latitude,
            "longitude": geofence.longitude,
            "radius_meters": geofence.radius_meters,
            "address": geofence.address,
            "is_active": geofence.is_active,
        }

    def build_match_response(self, match: GeofenceMatch | None) -> dict:
        if match is None:
            return {"enabled": False, "geofence_id": None, "distance_meters": None, "is_within": None}
        return {
            "enabled": True,
            "geofence_id": str(match.geofence_id) if match.geofence_id else None,
            "distance_meters": round(match.distance_meters, 2) if match.distance_meters is not None else None,
            "is_within": match.is_within,
        }


# 싱글턴 인스턴스 — Singleton instance
geofence_service: GeofenceService = GeofenceService()
