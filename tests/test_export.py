"""근태 내보내기 테스트.

Export tests — row shape, local time rendering, ordering and department scope.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from hr_attendance.config import settings
from hr_attendance.services.attendance_service import attendance_service
from hr_attendance.services.export_service import EXPORT_COLUMNS, export_service
from hr_attendance.utils.exceptions import BadRequestError, ForbiddenError

from tests.conftest import WORK_DATE


def at(hour: int, minute: int = 0, day: date = WORK_DATE) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc)


class TestExport:
    """근태 내보내기 테스트."""

    async def test_row_shape(self, db, admin_auth, employee_on_shift):
        await attendance_service.manual_entry(
            db, admin_auth, employee_on_shift.id, WORK_DATE, at(9, 5), at(18, 47), notes="onsite"
        )
        [row] = await export_service.export_range(db, admin_auth, WORK_DATE, WORK_DATE)

        assert tuple(row) == EXPORT_COLUMNS
        assert row["date"] == "2025-03-03"
        assert row["employee_code"] == "EMP-001"
        assert row["department"] == "Operations"
        assert row["check_in"] == "09:05"
        assert row["check_out"] == "18:47"
        assert row["working_hours"] == "8h 42m"
        assert row["status"] == "present"
        assert row["overtime_minutes"] == 17
        assert row["notes"] == "onsite"

    async def test_times_rendered_in_local_timezone(self, db, admin_auth, employee_user, monkeypatch):
        monkeypatch.setattr(settings, "TIMEZONE", "Asia/Seoul")
        await attendance_service.manual_entry(db, admin_auth, employee_user.id, WORK_DATE, at(0, 0), at(9, 0))
        [row] = await export_service.export_range(db, admin_auth, WORK_DATE, WORK_DATE)
        assert row["check_in"] == "09:00"
        assert row["check_out"] == "18:00"

    async def test_rows_ordered_by_date_then_code(self, db, admin_auth, employee_on_shift, second_employee):
        day2 = WORK_DATE + timedelta(days=1)
        await attendance_service.mark_absent(db, admin_auth, second_employee.id, day2)
        await attendance_service.mark_absent(db, admin_auth, employee_on_shift.id, day2)
        await attendance_service.mark_absent(db, admin_auth, second_employee.id, WORK_DATE)

        rows = await export_service.export_range(db, admin_auth, WORK_DATE, day2)
        assert [(r["date"], r["employee_code"]) for r in rows] == [
            ("2025-03-03", "EMP-002"),
            ("2025-03-04", "EMP-001"),
            ("2025-03-04", "EMP-002"),
        ]
        assert rows[0]["check_in"] is None
        assert rows[0]["working_hours"] == "0h 0m"

    async def test_manager_limited_to_department(self, db, admin_auth, manager_auth, employee_user, outside_employee):
        await attendance_service.mark_absent(db, admin_auth, employee_user.id, WORK_DATE)
        await attendance_service.mark_absent(db, admin_auth, outside_employee.id, WORK_DATE)

        rows = await export_service.export_range(db, manager_auth, WORK_DATE, WORK_DATE)
        assert [r["employee_code"] for r in rows] == ["EMP-001"]

        with pytest.raises(ForbiddenError):
            await export_service.export_range(
                db, manager_auth, WORK_DATE, WORK_DATE, department_id=outside_employee.department_id
            )

    async def test_inverted_range(self, db, admin_auth):
        with pytest.raises(BadRequestError):
            await export_service.export_range(db, admin_auth, WORK_DATE, WORK_DATE - timedelta(days=1))
