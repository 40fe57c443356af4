"""앱 정정 요청 라우터 — 내 근태 정정 요청 API.

App Correction Router — submit and track the caller's own correction requests.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.api.deps import get_auth_context
from hr_attendance.database import get_db
from hr_attendance.models.enums import CorrectionStatus
from hr_attendance.schemas.common import PaginatedResponse
from hr_attendance.schemas.correction import CorrectionCreate, CorrectionResponse
from hr_attendance.services.correction_service import correction_service
from hr_attendance.utils.auth_context import AuthContext

router: APIRouter = APIRouter()


@router.post("", response_model=CorrectionResponse, status_code=201)
async def create_correction(
    data: CorrectionCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(get_auth_context)],
) -> dict:
    """근태 정정 요청을 제출합니다.

    Submit a correction request for one of the caller's days. Managers of
    the caller's department are notified.

    Args:
        data: 정정 요청 데이터 (Correction request data)
        db: 비동기 데이터베이스 세션 (Async database session)
        auth: 인증된 요청자 (Authenticated caller)

    Returns:
        dict: 생성된 요청 (Created pending request)
    """
    request = await correction_service.request_correction(
        db,
        auth,
        work_date=data.work_date,
        request_type=data.request_type,
        reason=data.reason,
        requested_check_in=data.requested_check_in,
        requested_check_out=data.requested_check_out,
    )
    await db.commit()
    return correction_service.build_response(request)


@router.get("", response_model=PaginatedResponse)
async def list_my_corrections(
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    status: Annotated[CorrectionStatus | None, Query()] = None,
    page: int = 1,
    per_page: int = 20,
) -> dict:
    requests, total = await correction_service.list_own_requests(
        db, auth, status=status, page=page, per_page=per_page
    )
    return {
        "items": [correction_service.build_response(r) for r in requests],
        "total": total,
        "page": page,
        "per_page": per_page,
    }


@router.get("/{request_id}", response_model=CorrectionResponse)
async def get_my_correction(
    request_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(get_auth_context)],
) -> dict:
    request = await correction_service.get_request(db, auth, request_id)
    return correction_service.build_response(request)
