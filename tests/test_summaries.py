"""근태 집계 테스트.

Summary tests — monthly tallies, working-day calendar, idempotent reruns
and the org-wide daily report.
"""

from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from sqlalchemy import func, select

from hr_attendance.config import settings
from hr_attendance.models.enums import AttendanceStatus
from hr_attendance.models.summary import AttendanceSummary
from hr_attendance.services.attendance_service import attendance_service
from hr_attendance.services.summary_service import attendance_percentage, summary_service, tally_month
from hr_attendance.utils.exceptions import BadRequestError, ForbiddenError, NotFoundError
from hr_attendance.utils.working_days import count_working_days

from tests.conftest import WORK_DATE


def at(hour: int, minute: int = 0, day: date = WORK_DATE) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc)


def record(status: AttendanceStatus, working: int = 0, overtime: int = 0) -> SimpleNamespace:
    return SimpleNamespace(status=status, working_minutes=working, overtime_minutes=overtime)


class TestTally:
    """순수 집계 함수 테스트."""

    def test_present_counts_late_and_early_departure(self):
        records = [
            record(AttendanceStatus.PRESENT, 480),
            record(AttendanceStatus.LATE, 470, 30),
            record(AttendanceStatus.EARLY_DEPARTURE, 400),
            record(AttendanceStatus.HALF_DAY, 200),
            record(AttendanceStatus.ABSENT),
            record(AttendanceStatus.ON_LEAVE),
        ]
        values = tally_month(records, 20)
        assert values["present_days"] == 3
        assert values["late_days"] == 1
        assert values["early_departure_days"] == 1
        assert values["half_days"] == 1
        assert values["absent_days"] == 1
        assert values["leave_days"] == 1
        assert values["total_working_minutes"] == 1550
        assert values["total_overtime_minutes"] == 30
        assert values["attendance_percentage"] == 15.0

    def test_percentage_without_working_days(self):
        assert attendance_percentage(3, 0) == 0.0

    def test_percentage_is_rounded(self):
        assert attendance_percentage(2, 21) == 9.52


class TestWorkingDays:
    def test_march_2025_weekdays(self):
        assert count_working_days(date(2025, 3, 1), date(2025, 3, 31)) == 21

    def test_holidays_are_excluded(self, monkeypatch):
        monkeypatch.setattr(settings, "HOLIDAYS", [date(2025, 3, 3), date(2025, 3, 8)])
        assert count_working_days(date(2025, 3, 1), date(2025, 3, 31)) == 20

    def test_empty_range(self):
        assert count_working_days(date(2025, 3, 2), date(2025, 3, 1)) == 0


class TestMonthlySummary:
    """월간 요약 생성 테스트."""

    async def _fill_week(self, db, admin_auth, employee):
        await attendance_service.manual_entry(db, admin_auth, employee.id, WORK_DATE, at(9, 0), at(18, 0))
        day2 = WORK_DATE + timedelta(days=1)
        await attendance_service.manual_entry(db, admin_auth, employee.id, day2, at(9, 30, day2), at(18, 30, day2))
        await attendance_service.mark_absent(db, admin_auth, employee.id, WORK_DATE + timedelta(days=2))
        await attendance_service.mark_on_leave(db, admin_auth, employee.id, WORK_DATE + timedelta(days=3))

    async def test_summary_for_employee(self, db, admin_auth, employee_on_shift):
        await self._fill_week(db, admin_auth, employee_on_shift)
        [summary] = await summary_service.generate_summary(db, admin_auth, 3, 2025, employee_on_shift.id)

        assert summary.total_working_days == 21
        assert summary.present_days == 2
        assert summary.late_days == 1
        assert summary.absent_days == 1
        assert summary.leave_days == 1
        assert summary.total_working_minutes == 480 + 480
        assert summary.attendance_percentage == 9.52

    async def test_rerun_is_idempotent(self, db, admin_auth, employee_on_shift):
        await self._fill_week(db, admin_auth, employee_on_shift)
        first = await summary_service.generate_summary(db, admin_auth, 3, 2025, employee_on_shift.id)
        first_view = [summary_service.build_response(s) for s in first]
        second = await summary_service.generate_summary(db, admin_auth, 3, 2025, employee_on_shift.id)

        assert [summary_service.build_response(s) for s in second] == first_view
        count = await db.execute(select(func.count()).select_from(AttendanceSummary))
        assert count.scalar() == 1

    async def test_all_active_employees(self, db, admin_auth, employee_on_shift, second_employee):
        summaries = await summary_service.generate_summary(db, admin_auth, 3, 2025)
        by_user = {s.user_id: s for s in summaries}
        assert {employee_on_shift.id, second_employee.id, admin_auth.actor_id} <= set(by_user)
        assert by_user[second_employee.id].present_days == 0
        assert by_user[second_employee.id].attendance_percentage == 0.0

    async def test_invalid_month(self, db, admin_auth):
        with pytest.raises(BadRequestError):
            await summary_service.generate_summary(db, admin_auth, 13, 2025)

    async def test_manager_cannot_generate(self, db, manager_auth):
        with pytest.raises(ForbiddenError):
            await summary_service.generate_summary(db, manager_auth, 3, 2025)

    async def test_own_summary_requires_generation(self, db, employee_auth):
        with pytest.raises(NotFoundError):
            await summary_service.get_own_summary(db, employee_auth, 3, 2025)


class TestDailyReport:
    """일간 보고서 테스트."""

    async def test_daily_report_lists_not_marked(self, db, admin_auth, employee_on_shift, second_employee):
        await attendance_service.manual_entry(db, admin_auth, employee_on_shift.id, WORK_DATE, at(9, 0), at(18, 0))
        await attendance_service.mark_absent(db, admin_auth, second_employee.id, WORK_DATE)

        report = await summary_service.generate_daily_report(db, admin_auth, WORK_DATE)
        assert report["total_employees"] == 3
        assert report["present_count"] == 1
        assert report["absent_count"] == 1
        assert report["not_marked_count"] == 1
        assert [e["employee_code"] for e in report["not_marked"]] == ["ADM-001"]
        assert report["attendance_percentage"] == 33.33

    async def test_daily_report_rerun_updates_in_place(self, db, admin_auth, employee_on_shift):
        first = await summary_service.generate_daily_report(db, admin_auth, WORK_DATE)
        assert first["present_count"] == 0

        await attendance_service.manual_entry(db, admin_auth, employee_on_shift.id, WORK_DATE, at(9, 0), at(18, 0))
        second = await summary_service.generate_daily_report(db, admin_auth, WORK_DATE)
        assert second["present_count"] == 1

        stored = await summary_service.get_daily_report(db, admin_auth, WORK_DATE)
        assert stored.present_count == 1
