"""관리자 월간 요약 라우터.

Admin Summary Router — generate and list monthly attendance summaries.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.api.deps import require_admin
from hr_attendance.database import get_db
from hr_attendance.schemas.common import PaginatedResponse
from hr_attendance.schemas.report import SummaryGenerateRequest, SummaryResponse
from hr_attendance.services.summary_service import summary_service
from hr_attendance.utils.auth_context import AuthContext

router: APIRouter = APIRouter()


@router.post("/generate", response_model=list[SummaryResponse])
async def generate_summaries(
    data: SummaryGenerateRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_admin)],
) -> list[dict]:
    """월간 요약을 생성(재생성)합니다.

    Generate or regenerate monthly summaries. Rerunning over unchanged
    records yields identical results.

    Args:
        data: 대상 월/연도, 직원 선택 (Target month/year, optional employee)
        db: 비동기 데이터베이스 세션 (Async database session)
        auth: 관리자 요청자 (Admin caller)

    Returns:
        list[dict]: 생성된 요약 목록 (Generated summaries)
    """
    summaries = await summary_service.generate_summary(
        db, auth, month=data.month, year=data.year, employee_id=data.employee_id
    )
    await db.commit()
    return [summary_service.build_response(s) for s in summaries]


@router.get("", response_model=PaginatedResponse)
async def list_summaries(
    month: Annotated[int, Query(ge=1, le=12)],
    year: Annotated[int, Query(ge=1, le=9999)],
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_admin)],
    employee_id: Annotated[UUID | None, Query()] = None,
    page: int = 1,
    per_page: int = 20,
) -> dict:
    summaries, total = await summary_service.list_summaries(
        db, auth, month, year, employee_id=employee_id, page=page, per_page=per_page
    )
    return {
        "items": [summary_service.build_response(s) for s in summaries],
        "total": total,
        "page": page,
        "per_page": per_page,
    }
