"""근태 집계 서비스 — 월간 요약, 일간 보고서, 주기 집계.

Summary Service — Monthly per-employee summaries and org-wide daily reports.

Aggregation is a full rescan of the period followed by an upsert keyed by
(employee, month, year) or by report date, so rerunning it over unchanged
records yields identical output. Working days come from the configured
calendar (``WORKING_WEEKDAYS`` minus ``HOLIDAYS``).
"""

import asyncio
import logging
from collections import Counter, defaultdict
from collections.abc import Callable
from datetime import date, timedelta
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.models.attendance import AttendanceRecord
from hr_attendance.models.enums import AttendanceStatus
from hr_attendance.models.summary import AttendanceSummary, DailyAttendanceReport
from hr_attendance.models.user import User
from hr_attendance.repositories.attendance_repository import attendance_repository
from hr_attendance.repositories.summary_repository import daily_report_repository, summary_repository
from hr_attendance.repositories.user_repository import user_repository
from hr_attendance.utils.auth_context import AuthContext
from hr_attendance.utils.exceptions import BadRequestError, NotFoundError
from hr_attendance.utils.timeutils import local_date, now_utc
from hr_attendance.utils.working_days import count_working_days, month_bounds

logger = logging.getLogger(__name__)

# 출근으로 집계되는 상태 — Statuses counted as attended
ATTENDED_STATUSES: frozenset[AttendanceStatus] = frozenset(
    {AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.EARLY_DEPARTURE}
)


def attendance_percentage(present: int, working_days: int) -> float:
    """출근율(%)을 계산합니다. 근무일이 없으면 0 (Attendance rate; 0 without working days)."""
    if working_days <= 0:
        return 0.0
    return round(present / working_days * 100, 2)


def tally_month(records: Sequence[AttendanceRecord], working_days: int) -> dict[str, Any]:
    """한 직원의 월간 기록을 집계합니다.

    Tally one employee's records for a month into summary fields.

    Args:
        records: 해당 월의 근태 기록 (The employee's records for the month)
        working_days: 해당 월의 근무일 수 (Working days in the month)

    Returns:
        dict: 요약 필드 (Summary column values)
    """
    statuses: Counter = Counter(record.status for record in records)
    present_days: int = sum(statuses[s] for s in ATTENDED_STATUSES)
    return {
        "total_working_days": working_days,
        "present_days": present_days,
        "absent_days": statuses[AttendanceStatus.ABSENT],
        "late_days": statuses[AttendanceStatus.LATE],
        "half_days": statuses[AttendanceStatus.HALF_DAY],
        "leave_days": statuses[AttendanceStatus.ON_LEAVE],
        "early_departure_days": statuses[AttendanceStatus.EARLY_DEPARTURE],
        "total_working_minutes": sum(record.working_minutes or 0 for record in records),
        "total_overtime_minutes": sum(record.overtime_minutes or 0 for record in records),
        "attendance_percentage": attendance_percentage(present_days, working_days),
    }


class SummaryService:
    """근태 집계 서비스.

    Summary aggregation service producing idempotent monthly summaries and
    daily reports.
    """

    # === 월간 요약 (Monthly summaries) ===

    async def generate_summary(
        self,
        db: AsyncSession,
        auth: AuthContext,
        month: int,
        year: int,
        employee_id: UUID | None = None,
    ) -> list[AttendanceSummary]:
        """월간 요약을 생성(재생성)합니다.

        Generate monthly summaries for one employee, or for every active
        employee when ``employee_id`` is None.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            auth: 요청자 컨텍스트 (Caller context, admin only)
            month: 월 1-12 (Month)
            year: 연도 (Year)
            employee_id: 직원 UUID, None이면 전체 (Employee, or None for all)

        Returns:
            list[AttendanceSummary]: 저장된 요약 목록 (Upserted summaries)

        Raises:
            BadRequestError: 잘못된 월/연도 (Invalid month or year)
            NotFoundError: 직원 없음 (Employee not found)
        """
        auth.require_admin()
        if not 1 <= month <= 12:
            raise BadRequestError("월은 1~12 사이여야 합니다 (Month must be between 1 and 12)")
        if not 1 <= year <= 9999:
            raise BadRequestError("잘못된 연도입니다 (Invalid year)")

        if employee_id is not None:
            employee: User | None = await user_repository.get_by_id(db, employee_id)
            if employee is None:
                raise NotFoundError("직원을 찾을 수 없습니다 (Employee not found)")
            employees: Sequence[User] = [employee]
        else:
            employees = await user_repository.get_active_users(db)

        return await self._summarize(db, employees, month, year, employee_id)

    async def _summarize(
        self,
        db: AsyncSession,
        employees: Sequence[User],
        month: int,
        year: int,
        employee_id: UUID | None = None,
    ) -> list[AttendanceSummary]:
        start, end = month_bounds(year, month)
        working_days: int = count_working_days(start, end)

        by_user: dict[UUID, list[AttendanceRecord]] = defaultdict(list)
        for record in await attendance_repository.get_range(db, start, end, employee_id):
            by_user[record.user_id].append(record)

        summaries: list[AttendanceSummary] = []
        for employee in employees:
            values: dict[str, Any] = tally_month(by_user.get(employee.id, []), working_days)
            summaries.append(await self._upsert_summary(db, employee.id, month, year, values))

        logger.info("Generated %d summaries for %04d-%02d", len(summaries), year, month)
        return summaries

    async def _upsert_summary(
        self,
        db: AsyncSession,
        user_id: UUID,
        month: int,
        year: int,
        values: dict[str, Any],
    ) -> AttendanceSummary:
        existing: AttendanceSummary | None = await summary_repository.get_for_period(db, user_id, month, year)
        if existing is None:
            try:
                async with db.begin_nested():
                    return await summary_repository.create(
                        db, {"user_id": user_id, "month": month, "year": year, **values}
                    )
            except IntegrityError:
                # 동시 생성 — Created concurrently; fall through to update
                existing = await summary_repository.get_for_period(db, user_id, month, year)
                if existing is None:
                    raise
        updated: AttendanceSummary | None = await summary_repository.update(db, existing.id, values)
        if updated is None:
            raise NotFoundError("요약을 찾을 수 없습니다 (Summary not found)")
        return updated

    async def list_summaries(
        self,
        db: AsyncSession,
        auth: AuthContext,
        month: int,
        year: int,
        employee_id: UUID | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[AttendanceSummary], int]:
        auth.require_admin()
        return await summary_repository.list_for_period(db, month, year, employee_id, page, per_page)

    async def get_own_summary(self, db: AsyncSession, auth: AuthContext, month: int, year: int) -> AttendanceSummary:
        """본인의 저장된 월간 요약 (Caller's stored summary for a month)."""
        summary: AttendanceSummary | None = await summary_repository.get_for_period(db, auth.actor_id, month, year)
        if summary is None:
            raise NotFoundError("요약이 아직 생성되지 않았습니다 (Summary has not been generated)")
        return summary

    # === 일간 보고서 (Daily reports) ===

    async def generate_daily_report(
        self,
        db: AsyncSession,
        auth: AuthContext,
        report_date: date,
    ) -> dict:
        """일간 전사 근태 보고서를 생성(재생성)합니다.

        Generate the org-wide daily report for a date, including the active
        employees who have no record that day.

        Returns:
            dict: 저장된 보고서와 미기록 직원 목록 (Stored report plus not-marked employees)
        """
        auth.require_admin()
        return await self._daily_report(db, report_date)

    async def _daily_report(self, db: AsyncSession, report_date: date) -> dict:
        employees: Sequence[User] = await user_repository.get_active_users(db)
        records: Sequence[AttendanceRecord] = await attendance_repository.get_range(db, report_date, report_date)
        recorded: set[UUID] = {record.user_id for record in records}
        statuses: Counter = Counter(record.status for record in records)

        not_marked: list[User] = [employee for employee in employees if employee.id not in recorded]
        present_count: int = sum(statuses[s] for s in ATTENDED_STATUSES)
        values: dict[str, Any] = {
            "total_employees": len(employees),
            "present_count": present_count,
            "absent_count": statuses[AttendanceStatus.ABSENT],
            "late_count": statuses[AttendanceStatus.LATE],
            "half_day_count": statuses[AttendanceStatus.HALF_DAY],
            "on_leave_count": statuses[AttendanceStatus.ON_LEAVE],
            "early_departure_count": statuses[AttendanceStatus.EARLY_DEPARTURE],
            "not_marked_count": len(not_marked),
            "total_working_minutes": sum(record.working_minutes or 0 for record in records),
            "total_overtime_minutes": sum(record.overtime_minutes or 0 for record in records),
            "attendance_percentage": attendance_percentage(present_count, len(employees)),
        }

        report: DailyAttendanceReport | None = await daily_report_repository.get_for_date(db, report_date)
        if report is None:
            report = await daily_report_repository.create(db, {"report_date": report_date, **values})
        else:
            report = await daily_report_repository.update(db, report.id, values)
            if report is None:
                raise NotFoundError("보고서를 찾을 수 없습니다 (Report not found)")

        logger.info("Generated daily report for %s (%d not marked)", report_date, len(not_marked))
        return {
            **self.build_daily_report_response(report),
            "not_marked": [
                {
                    "employee_id": str(employee.id),
                    "employee_code": employee.employee_code,
                    "full_name": employee.full_name,
                }
                for employee in not_marked
            ],
        }

    async def get_daily_report(self, db: AsyncSession, auth: AuthContext, report_date: date) -> DailyAttendanceReport:
        auth.require_admin()
        report: DailyAttendanceReport | None = await daily_report_repository.get_for_date(db, report_date)
        if report is None:
            raise NotFoundError("보고서가 아직 생성되지 않았습니다 (Report has not been generated)")
        return report

    # === 주기 집계 (Periodic aggregation) ===

    async def run_cycle(self, db: AsyncSession) -> None:
        """어제 일간 보고서와 이번 달 요약을 재생성합니다.

        One scheduler cycle: yesterday's daily report and the current
        month's summaries for every active employee.
        """
        today: date = local_date(now_utc())
        await self._daily_report(db, today - timedelta(days=1))
        await self._summarize(db, await user_repository.get_active_users(db), today.month, today.year)

    # === 응답 구성 (Response builders) ===

    def build_response(self, summary: AttendanceSummary) -> dict:
        """월간 요약 응답 — 재실행 시 동일하도록 시각 필드 제외.

        Build a summary response dict. Timestamps are left out so reruns
        over unchanged records produce identical output.
        """
        return {
            "employee_id": str(summary.user_id),
            "month": summary.month,
            "year": summary.year,
            "total_working_days": summary.total_working_days,
            "present_days": summary.present_days,
            "absent_days": summary.absent_days,
            "late_days": summary.late_days,
            "half_days": summary.half_days,
            "leave_days": summary.leave_days,
            "early_departure_days": summary.early_departure_days,
            "total_working_minutes": summary.total_working_minutes,
            "total_overtime_minutes": summary.total_overtime_minutes,
            "attendance_percentage": summary.attendance_percentage,
        }

    def build_daily_report_response(self, report: DailyAttendanceReport) -> dict:
        return {
            "report_date": report.report_date,
            "total_employees": report.total_employees,
            "present_count": report.present_count,
            "absent_count": report.absent_count,
            "late_count": report.late_count,
            "half_day_count": report.half_day_count,
            "on_leave_count": report.on_leave_count,
            "early_departure_count": report.early_departure_count,
            "not_marked_count": report.not_marked_count,
            "total_working_minutes": report.total_working_minutes,
            "total_overtime_minutes": report.total_overtime_minutes,
            "attendance_percentage": report.attendance_percentage,
        }


async def run_summary_scheduler(
    session_factory: Callable[[], AsyncSession],
    interval_minutes: int,
) -> None:
    """주기적으로 집계를 실행하는 백그라운드 루프.

    Background loop started from the application lifespan. A failed cycle
    is rolled back and logged; the loop keeps running until cancelled.
    """
    logger.info("Summary scheduler started (every %d min)", interval_minutes)
    while True:
        async with session_factory() as db:
            try:
                await summary_service.run_cycle(db)
                await db.commit()
            except Exception:
                await db.rollback()
                logger.exception("Summary scheduler cycle failed")
        await asyncio.sleep(interval_minutes * 60)


# 싱글턴 인스턴스 — Singleton instance
summary_service: SummaryService = SummaryService()
