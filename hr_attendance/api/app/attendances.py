"""앱 근태 라우터 — 내 출퇴근 API.

App Attendance Router — API endpoints for the caller's own attendance.
Provides check-in, check-out, today's record and history.
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.api.deps import get_auth_context
from hr_attendance.database import get_db
from hr_attendance.schemas.attendance import (
    AttendanceResponse,
    CheckInRequest,
    CheckInResponse,
    CheckOutRequest,
    CheckOutResponse,
)
from hr_attendance.schemas.common import PaginatedResponse
from hr_attendance.services.attendance_service import attendance_service
from hr_attendance.utils.auth_context import AuthContext

router: APIRouter = APIRouter()


@router.post("/check-in", response_model=CheckInResponse)
async def check_in(
    data: CheckInRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(get_auth_context)],
) -> dict:
    """출근을 기록합니다.

    Record a check-in at the current server time. Coordinates outside every
    approved location are accepted with an ``outside_geofence`` warning.

    Args:
        data: 출근 요청 데이터 (Check-in request data)
        db: 비동기 데이터베이스 세션 (Async database session)
        auth: 인증된 요청자 (Authenticated caller)

    Returns:
        dict: 기록, 지각 여부, 경고 (Record, lateness and warnings)
    """
    result = await attendance_service.check_in(
        db,
        auth,
        auth.actor_id,
        latitude=data.latitude,
        longitude=data.longitude,
        location=data.location,
        notes=data.notes,
    )
    await db.commit()
    return {
        "record": attendance_service.build_response(result.record),
        "is_late": result.is_late,
        "late_minutes": result.late_minutes,
        "warnings": result.warnings,
    }


@router.post("/check-out", response_model=CheckOutResponse)
async def check_out(
    data: CheckOutRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(get_auth_context)],
) -> dict:
    """퇴근을 기록합니다.

    Record a check-out and finalize the day's working, overtime and status
    values.
    """
    result = await attendance_service.check_out(
        db,
        auth,
        auth.actor_id,
        latitude=data.latitude,
        longitude=data.longitude,
        notes=data.notes,
    )
    await db.commit()
    return {
        "record": attendance_service.build_response(result.record),
        "is_early_departure": result.is_early_departure,
        "overtime_minutes": result.overtime_minutes,
        "warnings": result.warnings,
    }


@router.get("/today", response_model=AttendanceResponse | None)
async def get_my_today_attendance(
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(get_auth_context)],
) -> dict | None:
    """오늘 내 근태 기록을 조회합니다.

    Get today's attendance record for the caller, or None.
    """
    record = await attendance_service.get_today(db, auth)
    if record is None:
        return None
    return attendance_service.build_response(record)


@router.get("/history", response_model=PaginatedResponse)
async def get_my_attendance_history(
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    date_from: Annotated[date | None, Query()] = None,
    date_to: Annotated[date | None, Query()] = None,
    page: int = 1,
    per_page: int = 20,
) -> dict:
    records, total = await attendance_service.get_history(
        db, auth, date_from=date_from, date_to=date_to, page=page, per_page=per_page
    )
    return {
        "items": [attendance_service.build_response(r) for r in records],
        "total": total,
        "page": page,
        "per_page": per_page,
    }
