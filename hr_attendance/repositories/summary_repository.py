"""근태 집계 레포지토리 — 월간 요약 및 일간 보고서 DB 쿼리 담당.

Summary Repository — Database queries for monthly summaries and daily reports.
"""

from datetime import date
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.models.summary import AttendanceSummary, DailyAttendanceReport
from hr_attendance.repositories.base import BaseRepository


class SummaryRepository(BaseRepository[AttendanceSummary]):
    """월간 근태 요약 레포지토리.

    Monthly attendance summary repository.

    Extends:
        BaseRepository[AttendanceSummary]
    """

    def __init__(self) -> None:
        super().__init__(AttendanceSummary)

    async def get_for_period(
        self,
        db: AsyncSession,
        user_id: UUID,
        month: int,
        year: int,
    ) -> AttendanceSummary | None:
        """직원+기간 요약을 조회합니다 (Summary for an employee and month)."""
        query: Select = select(AttendanceSummary).where(
            AttendanceSummary.user_id == user_id,
            AttendanceSummary.month == month,
            AttendanceSummary.year == year,
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def list_for_period(
        self,
        db: AsyncSession,
        month: int,
        year: int,
        user_id: UUID | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[AttendanceSummary], int]:
        """기간의 요약 목록을 페이지네이션하여 조회합니다 (Paginated summaries of a month)."""
        query: Select = select(AttendanceSummary).where(
            AttendanceSummary.month == month,
            AttendanceSummary.year == year,
        )
        if user_id is not None:
            query = query.where(AttendanceSummary.user_id == user_id)
        query = query.order_by(AttendanceSummary.user_id)
        return await self.get_paginated(db, query, page, per_page)


class DailyReportRepository(BaseRepository[DailyAttendanceReport]):
    """일간 근태 보고서 레포지토리.

    Daily attendance report repository.

    Extends:
        BaseRepository[DailyAttendanceReport]
    """

    def __init__(self) -> None:
        super().__init__(DailyAttendanceReport)

    async def get_for_date(self, db: AsyncSession, report_date: date) -> DailyAttendanceReport | None:
        result = await db.execute(
            select(DailyAttendanceReport).where(DailyAttendanceReport.report_date == report_date)
        )
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instances
summary_repository: SummaryRepository = SummaryRepository()
daily_report_repository: DailyReportRepository = DailyReportRepository()
