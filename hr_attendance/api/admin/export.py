"""관리자 근태 내보내기 라우터.

Admin Export Router — flat attendance rows for a date range, ordered by
date then employee code.
"""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.api.deps import require_manager
from hr_attendance.database import get_db
from hr_attendance.models.enums import AttendanceStatus
from hr_attendance.schemas.report import ExportRow
from hr_attendance.services.export_service import export_service
from hr_attendance.utils.auth_context import AuthContext

router: APIRouter = APIRouter()


@router.get("", response_model=list[ExportRow])
async def export_attendance(
    start_date: Annotated[date, Query()],
    end_date: Annotated[date, Query()],
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_manager)],
    employee_id: Annotated[UUID | None, Query()] = None,
    department_id: Annotated[UUID | None, Query()] = None,
    status: Annotated[AttendanceStatus | None, Query()] = None,
) -> list[dict]:
    """기간 내 근태 기록을 내보냅니다.

    Export attendance rows for ``[start_date, end_date]``.

    Args:
        start_date: 시작일 (First date, inclusive)
        end_date: 종료일 (Last date, inclusive)
        db: 비동기 데이터베이스 세션 (Async database session)
        auth: 매니저 이상 요청자 (Manager+ caller)
        employee_id: 직원 필터, 선택 (Optional employee filter)
        department_id: 부서 필터, 선택 (Optional department filter)
        status: 상태 필터, 선택 (Optional status filter)

    Returns:
        list[dict]: 내보내기 행 목록 (Export rows)
    """
    return await export_service.export_range(
        db,
        auth,
        start_date,
        end_date,
        employee_id=employee_id,
        department_id=department_id,
        status=status,
    )
