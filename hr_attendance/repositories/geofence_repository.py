"""지오펜스 레포지토리 — 근무 위치 DB 쿼리 담당.

Geofence Repository — Database queries for approved work locations.
"""

from typing import Sequence

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.models.geofence import GeofenceLocation
from hr_attendance.repositories.base import BaseRepository


class GeofenceRepository(BaseRepository[GeofenceLocation]):
    """지오펜스 레포지토리.

    Geofence repository.

    Extends:
        BaseRepository[GeofenceLocation]
    """

    def __init__(self) -> None:
        super().__init__(GeofenceLocation)

    async def get_active(self, db: AsyncSession) -> Sequence[GeofenceLocation]:
        """활성 지오펜스 목록 (Active geofences used for classification)."""
        query: Select = (
            select(GeofenceLocation)
            .where(GeofenceLocation.is_active.is_(True))
            .order_by(GeofenceLocation.code)
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def get_by_code(self, db: AsyncSession, code: str) -> GeofenceLocation | None:
        result = await db.execute(select(GeofenceLocation).where(GeofenceLocation.code == code))
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instance
geofence_repository: GeofenceRepository = GeofenceRepository()
