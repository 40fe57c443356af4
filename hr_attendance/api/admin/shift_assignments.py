"""관리자 시프트 배정 라우터.

Admin Shift Assignment Router — assign shifts to one or many employees
and inspect an employee's assignment history.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.api.deps import require_admin, require_manager
from hr_attendance.database import get_db
from hr_attendance.schemas.common import BulkResult
from hr_attendance.schemas.shift import (
    BulkShiftAssignmentCreate,
    ShiftAssignmentCreate,
    ShiftAssignmentResponse,
)
from hr_attendance.services.shift_service import shift_service
from hr_attendance.utils.auth_context import AuthContext

router: APIRouter = APIRouter()


@router.get("", response_model=list[ShiftAssignmentResponse])
async def list_assignments(
    employee_id: Annotated[UUID, Query()],
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_manager)],
) -> list[dict]:
    """직원의 시프트 배정 이력을 조회합니다.

    List an employee's shift assignments, newest first.
    """
    assignments = await shift_service.list_assignments(db, employee_id)
    return [shift_service.build_assignment_response(a) for a in assignments]


@router.post("", response_model=ShiftAssignmentResponse, status_code=201)
async def assign_shift(
    data: ShiftAssignmentCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_admin)],
) -> dict:
    """직원에게 시프트를 배정합니다.

    Assign a shift to an employee. Any previously active assignment is
    deactivated.

    Args:
        data: 배정 요청 데이터 (Assignment request data)
        db: 비동기 데이터베이스 세션 (Async database session)
        auth: 관리자 요청자 (Admin caller)

    Returns:
        dict: 생성된 배정 (Created assignment)
    """
    assignment = await shift_service.assign_shift(
        db,
        auth,
        employee_id=data.employee_id,
        shift_id=data.shift_id,
        effective_from=data.effective_from,
        effective_to=data.effective_to,
    )
    await db.commit()
    return shift_service.build_assignment_response(assignment)


@router.post("/bulk", response_model=BulkResult)
async def bulk_assign_shift(
    data: BulkShiftAssignmentCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_admin)],
) -> dict:
    """여러 직원에게 같은 시프트를 배정합니다 (항목별 성공/실패).

    Assign one shift to many employees; each id succeeds or fails on its own.
    """
    result: dict = await shift_service.bulk_assign_shift(
        db,
        auth,
        employee_ids=data.employee_ids,
        shift_id=data.shift_id,
        effective_from=data.effective_from,
        effective_to=data.effective_to,
    )
    await db.commit()
    return result
