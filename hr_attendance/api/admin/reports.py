"""관리자 일간 보고서 라우터.

Admin Report Router — org-wide daily attendance reports.
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.api.deps import require_admin
from hr_attendance.database import get_db
from hr_attendance.schemas.report import DailyReportRequest, DailyReportResponse
from hr_attendance.services.summary_service import summary_service
from hr_attendance.utils.auth_context import AuthContext

router: APIRouter = APIRouter()


@router.post("/daily", response_model=DailyReportResponse)
async def generate_daily_report(
    data: DailyReportRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_admin)],
) -> dict:
    """일간 보고서를 생성(재생성)합니다.

    Generate the daily report for a date. The response also lists active
    employees with no record that day.
    """
    report: dict = await summary_service.generate_daily_report(db, auth, data.report_date)
    await db.commit()
    return report


@router.get("/daily/{report_date}", response_model=DailyReportResponse)
async def get_daily_report(
    report_date: date,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_admin)],
) -> dict:
    """저장된 일간 보고서를 조회합니다 (Fetch a stored daily report)."""
    report = await summary_service.get_daily_report(db, auth, report_date)
    return summary_service.build_daily_report_response(report)
