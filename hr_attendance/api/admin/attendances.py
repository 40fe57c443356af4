"""관리자 근태 라우터 — 근태 기록 관리 API.

Admin Attendance Router — API endpoints for attendance record management.
Provides list and detail views, manual entry, absence and leave marking,
bulk actions and record purge.
"""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.api.deps import require_admin, require_manager
from hr_attendance.database import get_db
from hr_attendance.models.enums import AttendanceStatus
from hr_attendance.schemas.attendance import (
    AttendanceResponse,
    BulkCheckInRequest,
    BulkMarkAbsentRequest,
    LocationLogResponse,
    ManualEntryRequest,
    MarkAbsentRequest,
    MarkOnLeaveRequest,
)
from hr_attendance.schemas.common import BulkResult, MessageResponse, PaginatedResponse
from hr_attendance.services.attendance_service import attendance_service
from hr_attendance.utils.auth_context import AuthContext

router: APIRouter = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_attendances(
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_manager)],
    employee_id: Annotated[UUID | None, Query()] = None,
    department_id: Annotated[UUID | None, Query()] = None,
    date_from: Annotated[date | None, Query()] = None,
    date_to: Annotated[date | None, Query()] = None,
    status: Annotated[AttendanceStatus | None, Query()] = None,
    page: int = 1,
    per_page: int = 20,
) -> dict:
    """근태 기록 목록을 필터링하여 조회합니다.

    List attendance records with optional filters. Managers only see
    their own department.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        auth: 매니저 이상 요청자 (Manager+ caller)
        employee_id: 직원 필터, 선택 (Optional employee filter)
        department_id: 부서 필터, 선택 (Optional department filter)
        date_from / date_to: 기간 필터, 선택 (Optional inclusive date range)
        status: 상태 필터, 선택 (Optional status filter)
        page: 페이지 번호 (Page number)
        per_page: 페이지당 항목 수 (Items per page)

    Returns:
        dict: 페이지네이션된 근태 목록 (Paginated attendance list)
    """
    records, total = await attendance_service.list_records(
        db,
        auth,
        employee_id=employee_id,
        department_id=department_id,
        date_from=date_from,
        date_to=date_to,
        status=status,
        page=page,
        per_page=per_page,
    )
    return {
        "items": [attendance_service.build_response(r) for r in records],
        "total": total,
        "page": page,
        "per_page": per_page,
    }


@router.post("/manual-entry", response_model=AttendanceResponse)
async def manual_entry(
    data: ManualEntryRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_admin)],
) -> dict:
    """관리자 수기 입력으로 하루 기록을 작성합니다.

    Write one employee-day from administrator-entered times.
    """
    record = await attendance_service.manual_entry(
        db,
        auth,
        employee_id=data.employee_id,
        work_date=data.work_date,
        check_in=data.check_in,
        check_out=data.check_out,
        notes=data.notes,
    )
    await db.commit()
    return attendance_service.build_response(record)


@router.post("/mark-absent", response_model=AttendanceResponse)
async def mark_absent(
    data: MarkAbsentRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_admin)],
) -> dict:
    record = await attendance_service.mark_absent(db, auth, data.employee_id, data.work_date, data.reason)
    await db.commit()
    return attendance_service.build_response(record)


@router.post("/mark-on-leave", response_model=AttendanceResponse)
async def mark_on_leave(
    data: MarkOnLeaveRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_admin)],
) -> dict:
    """직원을 휴가 처리합니다 (출근 기록이 없는 날만).

    Mark an employee on leave for a day without a check-in.
    """
    record = await attendance_service.mark_on_leave(db, auth, data.employee_id, data.work_date, data.reason)
    await db.commit()
    return attendance_service.build_response(record)


@router.post("/bulk-check-in", response_model=BulkResult)
async def bulk_check_in(
    data: BulkCheckInRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_admin)],
) -> dict:
    """여러 직원을 일괄 출근 처리합니다.

    Check in many employees at once. The response lists every id as either
    successful or failed with a reason.
    """
    result: dict = await attendance_service.bulk_check_in(
        db, auth, data.employee_ids, timestamp=data.timestamp, notes=data.notes
    )
    await db.commit()
    return result


@router.post("/bulk-mark-absent", response_model=BulkResult)
async def bulk_mark_absent(
    data: BulkMarkAbsentRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_admin)],
) -> dict:
    result: dict = await attendance_service.bulk_mark_absent(
        db, auth, data.employee_ids, data.work_date, data.reason
    )
    await db.commit()
    return result


@router.get("/{attendance_id}", response_model=AttendanceResponse)
async def get_attendance(
    attendance_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_manager)],
) -> dict:
    """근태 기록 상세를 조회합니다 (Get attendance record detail)."""
    record = await attendance_service.get_record(db, auth, attendance_id)
    return attendance_service.build_response(record)


@router.get("/{attendance_id}/location-logs", response_model=list[LocationLogResponse])
async def get_location_logs(
    attendance_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_manager)],
) -> list[dict]:
    """출퇴근 위치 기록을 조회합니다 (Coordinate logs captured at check-in/out)."""
    logs = await attendance_service.get_location_logs(db, auth, attendance_id)
    return [attendance_service.build_location_log_response(log) for log in logs]


@router.delete("/{attendance_id}", response_model=MessageResponse)
async def purge_attendance(
    attendance_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_admin)],
) -> dict:
    """근태 기록을 영구 삭제합니다 (관리자 전용).

    Permanently delete an attendance record (admin only).
    """
    await attendance_service.purge_record(db, auth, attendance_id)
    await db.commit()
    return {"message": "근태 기록이 삭제되었습니다 (Attendance record deleted)"}
