"""관리자 시프트 라우터 — 시프트 정책 CRUD 엔드포인트.

Admin Shift Router — CRUD endpoints for shift policies.
Reads are open to managers; writes require an admin.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.api.deps import require_admin, require_manager
from hr_attendance.database import get_db
from hr_attendance.schemas.shift import ShiftCreate, ShiftResponse, ShiftUpdate
from hr_attendance.services.shift_service import shift_service
from hr_attendance.utils.auth_context import AuthContext

router: APIRouter = APIRouter()


@router.get("", response_model=list[ShiftResponse])
async def list_shifts(
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_manager)],
    active_only: Annotated[bool, Query()] = False,
) -> list[dict]:
    """시프트 정책 목록을 조회합니다.

    List shift policies ordered by code.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        auth: 매니저 이상 요청자 (Manager+ caller)
        active_only: 활성 시프트만 조회 (Only active shifts)

    Returns:
        list[dict]: 시프트 목록 (Shift list)
    """
    shifts = await shift_service.list_shifts(db, active_only=active_only)
    return [shift_service.build_response(s) for s in shifts]


@router.post("", response_model=ShiftResponse, status_code=201)
async def create_shift(
    data: ShiftCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_admin)],
) -> dict:
    """새 시프트 정책을 생성합니다.

    Create a new shift policy.
    """
    shift = await shift_service.create_shift(db, auth, data.model_dump())
    await db.commit()
    return shift_service.build_response(shift)


@router.get("/{shift_id}", response_model=ShiftResponse)
async def get_shift(
    shift_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_manager)],
) -> dict:
    shift = await shift_service.get_shift(db, shift_id)
    return shift_service.build_response(shift)


@router.put("/{shift_id}", response_model=ShiftResponse)
async def update_shift(
    shift_id: UUID,
    data: ShiftUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_admin)],
) -> dict:
    """시프트 정책을 수정합니다 (보낸 필드만 변경).

    Update a shift policy. Only the fields sent are changed. Returns 409
    when a timing field changes on a shift that attendance records use.
    """
    shift = await shift_service.update_shift(db, auth, shift_id, data.model_dump(exclude_unset=True))
    await db.commit()
    return shift_service.build_response(shift)


@router.delete("/{shift_id}", response_model=ShiftResponse)
async def deactivate_shift(
    shift_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_admin)],
) -> dict:
    """시프트를 비활성화합니다 (Deactivate a shift; existing records are kept)."""
    shift = await shift_service.deactivate_shift(db, auth, shift_id)
    await db.commit()
    return shift_service.build_response(shift)
