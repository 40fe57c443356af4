"""앱 지오펜스 라우터 — 출근 전 위치 사전 확인.

App Geofence Router — lets an employee check a coordinate against the
approved work locations before checking in.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.api.deps import get_auth_context
from hr_attendance.database import get_db
from hr_attendance.schemas.geofence import GeofenceMatchResponse, GeofenceValidateRequest
from hr_attendance.services.geofence_service import geofence_service
from hr_attendance.utils.auth_context import AuthContext

router: APIRouter = APIRouter()


@router.post("/validate", response_model=GeofenceMatchResponse)
async def validate_location(
    data: GeofenceValidateRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(get_auth_context)],
) -> dict:
    """좌표가 승인된 근무 위치 안에 있는지 확인합니다.

    Classify a coordinate against active geofences. Nothing is recorded.
    """
    match = await geofence_service.classify_point(db, data.latitude, data.longitude)
    return geofence_service.build_match_response(match)
