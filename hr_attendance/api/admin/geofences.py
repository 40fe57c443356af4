"""관리자 지오펜스 라우터 — 승인된 근무 위치 관리 API.

Admin Geofence Router — CRUD endpoints for approved work locations.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.api.deps import require_admin, require_manager
from hr_attendance.database import get_db
from hr_attendance.schemas.geofence import GeofenceCreate, GeofenceResponse, GeofenceUpdate
from hr_attendance.services.geofence_service import geofence_service
from hr_attendance.utils.auth_context import AuthContext

router: APIRouter = APIRouter()


@router.get("", response_model=list[GeofenceResponse])
async def list_geofences(
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_manager)],
    active_only: Annotated[bool, Query()] = False,
) -> list[dict]:
    """근무 위치 목록을 조회합니다 (List work locations)."""
    geofences = await geofence_service.list_geofences(db, active_only=active_only)
    return [geofence_service.build_response(g) for g in geofences]


@router.post("", response_model=GeofenceResponse, status_code=201)
async def create_geofence(
    data: GeofenceCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_admin)],
) -> dict:
    """근무 위치를 등록합니다.

    Register an approved work location.

    Args:
        data: 위치 데이터 (Location data)
        db: 비동기 데이터베이스 세션 (Async database session)
        auth: 관리자 요청자 (Admin caller)

    Returns:
        dict: 생성된 위치 (Created location)
    """
    geofence = await geofence_service.create_geofence(db, auth, data.model_dump())
    await db.commit()
    return geofence_service.build_response(geofence)


@router.get("/{geofence_id}", response_model=GeofenceResponse)
async def get_geofence(
    geofence_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_manager)],
) -> dict:
    geofence = await geofence_service.get_geofence(db, geofence_id)
    return geofence_service.build_response(geofence)


@router.put("/{geofence_id}", response_model=GeofenceResponse)
async def update_geofence(
    geofence_id: UUID,
    data: GeofenceUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_admin)],
) -> dict:
    geofence = await geofence_service.update_geofence(db, auth, geofence_id, data.model_dump(exclude_unset=True))
    await db.commit()
    return geofence_service.build_response(geofence)


@router.delete("/{geofence_id}", response_model=GeofenceResponse)
async def deactivate_geofence(
    geofence_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_admin)],
) -> dict:
    """근무 위치를 비활성화합니다 (Deactivate a location; past records keep their reference)."""
    geofence = await geofence_service.deactivate_geofence(db, auth, geofence_id)
    await db.commit()
    return geofence_service.build_response(geofence)
