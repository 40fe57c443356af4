"""앱 월간 요약 라우터 — 내 월간 근태 요약.

App Summary Router — the caller's stored monthly summary.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.api.deps import get_auth_context
from hr_attendance.database import get_db
from hr_attendance.schemas.report import SummaryResponse
from hr_attendance.services.summary_service import summary_service
from hr_attendance.utils.auth_context import AuthContext

router: APIRouter = APIRouter()


@router.get("", response_model=SummaryResponse)
async def get_my_summary(
    month: Annotated[int, Query(ge=1, le=12)],
    year: Annotated[int, Query(ge=1, le=9999)],
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(get_auth_context)],
) -> dict:
    summary = await summary_service.get_own_summary(db, auth, month, year)
    return summary_service.build_response(summary)
