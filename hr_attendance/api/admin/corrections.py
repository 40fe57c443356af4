"""관리자 정정 요청 라우터 — 검토 API.

Admin Correction Router — list, inspect and review correction requests.
Reviewers must be managers or admins in the requester's department.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.api.deps import require_manager
from hr_attendance.database import get_db
from hr_attendance.models.enums import CorrectionStatus
from hr_attendance.schemas.common import PaginatedResponse
from hr_attendance.schemas.correction import CorrectionResponse, CorrectionReview
from hr_attendance.services.correction_service import correction_service
from hr_attendance.utils.auth_context import AuthContext

router: APIRouter = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_corrections(
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_manager)],
    employee_id: Annotated[UUID | None, Query()] = None,
    status: Annotated[CorrectionStatus | None, Query()] = None,
    page: int = 1,
    per_page: int = 20,
) -> dict:
    """검토할 정정 요청 목록을 조회합니다.

    List correction requests for review.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        auth: 매니저 이상 요청자 (Manager+ caller)
        employee_id: 직원 필터, 선택 (Optional employee filter)
        status: 상태 필터, 선택 (Optional status filter, e.g. pending)
        page: 페이지 번호 (Page number)
        per_page: 페이지당 항목 수 (Items per page)

    Returns:
        dict: 페이지네이션된 요청 목록 (Paginated request list)
    """
    requests, total = await correction_service.list_requests(
        db, auth, employee_id=employee_id, status=status, page=page, per_page=per_page
    )
    return {
        "items": [correction_service.build_response(r) for r in requests],
        "total": total,
        "page": page,
        "per_page": per_page,
    }


@router.get("/{request_id}", response_model=CorrectionResponse)
async def get_correction(
    request_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_manager)],
) -> dict:
    request = await correction_service.get_request(db, auth, request_id)
    return correction_service.build_response(request)


@router.post("/{request_id}/review", response_model=CorrectionResponse)
async def review_correction(
    request_id: UUID,
    data: CorrectionReview,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_manager)],
) -> dict:
    """정정 요청을 승인 또는 반려합니다.

    Approve or reject a pending correction request. Approval rewrites the
    day's record through the time computation.
    """
    request = await correction_service.review_correction(
        db, auth, request_id, decision=data.decision, review_notes=data.review_notes
    )
    await db.commit()
    return correction_service.build_response(request)
