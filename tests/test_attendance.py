"""근태 기록 서비스 테스트.

Attendance service tests — check-in/out state machine, administrative
overrides, manual entry, bulk actions and the per-day lock.
"""

import asyncio
from datetime import date, datetime, time, timedelta, timezone
from uuid import uuid4

import pytest
from sqlalchemy import select

from hr_attendance.models.attendance import AttendanceAlert, AttendanceRecord
from hr_attendance.models.enums import AlertSeverity, AlertType, AttendanceStatus
from hr_attendance.models.shift import ShiftPolicy
from hr_attendance.services.attendance_service import attendance_service
from hr_attendance.utils.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    BadRequestError,
    ForbiddenError,
    InvalidStateError,
    NotCheckedInError,
)
from hr_attendance.utils.locks import KeyedLocks
from hr_attendance.utils.timeutils import ensure_utc

from tests.conftest import WORK_DATE, assign, context_for


def at(hour: int, minute: int = 0, day: date = WORK_DATE) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc)


async def alerts_for(db, user_id) -> list[AttendanceAlert]:
    result = await db.execute(select(AttendanceAlert).where(AttendanceAlert.user_id == user_id))
    return list(result.scalars().all())


async def day_record(db, user_id, work_date: date) -> AttendanceRecord:
    result = await db.execute(
        select(AttendanceRecord).where(AttendanceRecord.user_id == user_id, AttendanceRecord.work_date == work_date)
    )
    return result.scalar_one()


async def night_worker(db, user):
    """22:00-06:00 야간 시프트(휴게 30분)를 배정하고 직원 컨텍스트를 돌려줍니다."""
    night = ShiftPolicy(
        name="Night",
        code="NIGHT",
        start_time=time(22, 0),
        end_time=time(6, 0),
        is_night_shift=True,
        break_minutes=30,
    )
    db.add(night)
    await db.flush()
    await assign(db, user, night)
    return context_for(user, "employee", 3)


class TestCheckIn:
    """출근 테스트."""

    async def test_on_time_check_in(self, db, employee_on_shift, employee_auth):
        result = await attendance_service.check_in(db, employee_auth, employee_on_shift.id, at(8, 55))
        assert result.is_late is False
        assert result.late_minutes == 0
        assert result.warnings == []
        assert result.record.status == AttendanceStatus.PRESENT
        assert result.record.work_date == WORK_DATE
        assert await alerts_for(db, employee_on_shift.id) == []

    async def test_late_check_in_raises_medium_alert(self, db, employee_on_shift, employee_auth):
        """09:20 출근 → 5분 지각, 보통 심각도 경고."""
        result = await attendance_service.check_in(db, employee_auth, employee_on_shift.id, at(9, 20))
        assert result.is_late is True
        assert result.late_minutes == 5
        assert result.record.status == AttendanceStatus.LATE

        alerts = await alerts_for(db, employee_on_shift.id)
        assert len(alerts) == 1
        assert alerts[0].alert_type == AlertType.LATE_ARRIVAL
        assert alerts[0].severity == AlertSeverity.MEDIUM
        assert alerts[0].attendance_id == result.record.id

    async def test_very_late_check_in_is_high_severity(self, db, employee_on_shift, employee_auth):
        await attendance_service.check_in(db, employee_auth, employee_on_shift.id, at(9, 50))
        alerts = await alerts_for(db, employee_on_shift.id)
        assert alerts[0].severity == AlertSeverity.HIGH

    async def test_duplicate_check_in_rejected(self, db, employee_on_shift, employee_auth):
        await attendance_service.check_in(db, employee_auth, employee_on_shift.id, at(8, 55))
        with pytest.raises(AlreadyCheckedInError):
            await attendance_service.check_in(db, employee_auth, employee_on_shift.id, at(9, 5))

    async def test_without_shift_warns_and_is_present(self, db, employee_user, employee_auth):
        result = await attendance_service.check_in(db, employee_auth, employee_user.id, at(11, 0))
        assert result.is_late is False
        assert "no_active_shift" in result.warnings
        assert result.record.status == AttendanceStatus.PRESENT
        assert result.record.shift_id is None

    async def test_employee_cannot_check_in_someone_else(self, db, employee_auth, second_employee):
        with pytest.raises(ForbiddenError):
            await attendance_service.check_in(db, employee_auth, second_employee.id, at(9, 0))

    async def test_admin_can_check_in_for_employee(self, db, admin_auth, employee_on_shift):
        result = await attendance_service.check_in(db, admin_auth, employee_on_shift.id, at(9, 0))
        assert result.record.user_id == employee_on_shift.id

    async def test_check_in_on_absent_day_rejected(self, db, admin_auth, employee_on_shift, employee_auth):
        await attendance_service.mark_absent(db, admin_auth, employee_on_shift.id, WORK_DATE, "sick")
        with pytest.raises(InvalidStateError):
            await attendance_service.check_in(db, employee_auth, employee_on_shift.id, at(9, 0))


class TestCheckOut:
    """퇴근 테스트."""

    async def test_full_day_with_overtime(self, db, employee_on_shift, employee_auth):
        await attendance_service.check_in(db, employee_auth, employee_on_shift.id, at(9, 0))
        result = await attendance_service.check_out(db, employee_auth, employee_on_shift.id, at(19, 0))

        record = result.record
        assert result.is_early_departure is False
        assert result.overtime_minutes == 30
        assert record.working_minutes == 540
        assert record.break_minutes == 60
        assert record.status == AttendanceStatus.PRESENT
        assert record.working_minutes + record.break_minutes == 600

    async def test_late_arrival_survives_check_out(self, db, employee_on_shift, employee_auth):
        await attendance_service.check_in(db, employee_auth, employee_on_shift.id, at(9, 20))
        result = await attendance_service.check_out(db, employee_auth, employee_on_shift.id, at(18, 30))
        assert result.record.status == AttendanceStatus.LATE
        assert result.record.late_minutes == 5

    async def test_early_departure_raises_alert(self, db, employee_on_shift, employee_auth):
        """17:00 퇴근 → 45분 조퇴, 높은 심각도."""
        await attendance_service.check_in(db, employee_auth, employee_on_shift.id, at(9, 0))
        result = await attendance_service.check_out(db, employee_auth, employee_on_shift.id, at(17, 0))
        assert result.is_early_departure is True
        assert result.record.early_departure_minutes == 45
        assert result.record.status == AttendanceStatus.EARLY_DEPARTURE

        alerts = await alerts_for(db, employee_on_shift.id)
        assert [a.alert_type for a in alerts] == [AlertType.EARLY_DEPARTURE]
        assert alerts[0].severity == AlertSeverity.HIGH

    async def test_short_day_is_half_day(self, db, employee_on_shift, employee_auth):
        await attendance_service.check_in(db, employee_auth, employee_on_shift.id, at(9, 0))
        result = await attendance_service.check_out(db, employee_auth, employee_on_shift.id, at(12, 0))
        assert result.record.status == AttendanceStatus.HALF_DAY

    async def test_check_out_without_check_in(self, db, employee_on_shift, employee_auth):
        with pytest.raises(NotCheckedInError):
            await attendance_service.check_out(db, employee_auth, employee_on_shift.id, at(18, 0))

    async def test_second_check_out_rejected(self, db, employee_on_shift, employee_auth):
        await attendance_service.check_in(db, employee_auth, employee_on_shift.id, at(9, 0))
        await attendance_service.check_out(db, employee_auth, employee_on_shift.id, at(18, 0))
        with pytest.raises(AlreadyCheckedOutError):
            await attendance_service.check_out(db, employee_auth, employee_on_shift.id, at(18, 5))

    async def test_check_out_before_check_in_rejected(self, db, employee_on_shift, employee_auth):
        await attendance_service.check_in(db, employee_auth, employee_on_shift.id, at(9, 0))
        with pytest.raises(BadRequestError):
            await attendance_service.check_out(db, employee_auth, employee_on_shift.id, at(8, 0))

    async def test_without_shift_no_break_deducted(self, db, employee_user, employee_auth):
        await attendance_service.check_in(db, employee_auth, employee_user.id, at(9, 0))
        result = await attendance_service.check_out(db, employee_auth, employee_user.id, at(17, 0))
        assert result.record.working_minutes == 480
        assert result.record.break_minutes == 0
        assert result.record.status == AttendanceStatus.PRESENT
        assert "no_active_shift" in result.warnings

    async def test_night_shift_closes_previous_day(self, db, second_employee):
        """자정을 넘는 야간 근무는 전날 기록을 마감함."""
        auth = await night_worker(db, second_employee)

        await attendance_service.check_in(db, auth, second_employee.id, at(22, 0))
        next_morning = at(6, 45, WORK_DATE + timedelta(days=1))
        result = await attendance_service.check_out(db, auth, second_employee.id, next_morning)

        assert result.record.work_date == WORK_DATE
        assert result.record.working_minutes == 495
        assert result.overtime_minutes == 15
        assert result.is_early_departure is False

    async def test_forgotten_day_shift_check_out_stays_open(self, db, employee_on_shift, employee_auth):
        """주간 근무의 전날 미퇴근 기록은 다음 날 퇴근으로 닫히지 않음."""
        await attendance_service.check_in(db, employee_auth, employee_on_shift.id, at(9, 0))
        with pytest.raises(NotCheckedInError):
            await attendance_service.check_out(
                db, employee_auth, employee_on_shift.id, at(17, 0, WORK_DATE + timedelta(days=1))
            )

        record = await day_record(db, employee_on_shift.id, WORK_DATE)
        assert record.check_out is None
        assert record.working_minutes == 0

    async def test_night_shift_check_out_window_is_bounded(self, db, second_employee):
        """야간 근무 종료 후 허용 시간을 넘긴 퇴근은 거부."""
        auth = await night_worker(db, second_employee)
        await attendance_service.check_in(db, auth, second_employee.id, at(22, 0))

        with pytest.raises(NotCheckedInError):
            await attendance_service.check_out(db, auth, second_employee.id, at(13, 0, WORK_DATE + timedelta(days=1)))

    async def test_after_midnight_arrival_belongs_to_previous_night(self, db, second_employee):
        """00:30 도착은 전날 22:00 야간 근무의 지각."""
        auth = await night_worker(db, second_employee)
        next_day = WORK_DATE + timedelta(days=1)

        checked_in = await attendance_service.check_in(db, auth, second_employee.id, at(0, 30, next_day))
        assert checked_in.record.work_date == WORK_DATE
        assert checked_in.is_late is True
        assert checked_in.late_minutes == 135

        result = await attendance_service.check_out(db, auth, second_employee.id, at(6, 0, next_day))
        assert result.record.work_date == WORK_DATE
        assert result.is_early_departure is False
        assert result.record.early_departure_minutes == 0
        assert result.record.working_minutes == 300
        assert result.record.status == AttendanceStatus.LATE


class TestAdministrativeStates:
    """결근/휴가/수기 입력 테스트."""

    async def test_mark_absent_overwrites_checked_in_day(self, db, admin_auth, employee_on_shift, employee_auth):
        await attendance_service.check_in(
            db, employee_auth, employee_on_shift.id, at(9, 0), latitude=37.5665, longitude=126.978, location="HQ"
        )
        record = await attendance_service.mark_absent(db, admin_auth, employee_on_shift.id, WORK_DATE, "no show")
        assert record.status == AttendanceStatus.ABSENT
        assert record.check_in is None
        assert record.working_minutes == 0
        assert record.approved_by == admin_auth.actor_id
        assert record.notes == "no show"
        # 이전 출근의 위치/시프트 흔적이 남지 않음 (Nothing from the earlier check-in survives)
        assert record.location is None
        assert record.latitude is None and record.longitude is None
        assert record.shift_id is None
        assert record.is_manual_entry is False

    async def test_employee_cannot_mark_absent(self, db, employee_auth, second_employee):
        with pytest.raises(ForbiddenError):
            await attendance_service.mark_absent(db, employee_auth, second_employee.id, WORK_DATE)

    async def test_on_leave_blocks_check_in(self, db, admin_auth, employee_on_shift, employee_auth):
        record = await attendance_service.mark_on_leave(db, admin_auth, employee_on_shift.id, WORK_DATE, "vacation")
        assert record.status == AttendanceStatus.ON_LEAVE
        with pytest.raises(InvalidStateError):
            await attendance_service.check_in(db, employee_auth, employee_on_shift.id, at(9, 0))

    async def test_on_leave_rejected_after_check_in(self, db, admin_auth, employee_on_shift, employee_auth):
        await attendance_service.check_in(db, employee_auth, employee_on_shift.id, at(9, 0))
        with pytest.raises(InvalidStateError):
            await attendance_service.mark_on_leave(db, admin_auth, employee_on_shift.id, WORK_DATE)

    async def test_continuous_absence_alert(self, db, admin_auth, employee_on_shift):
        """7일 내 3회 결근 → 연속 결근 경고."""
        for offset in range(3):
            await attendance_service.mark_absent(
                db, admin_auth, employee_on_shift.id, WORK_DATE + timedelta(days=offset)
            )
        alerts = await alerts_for(db, employee_on_shift.id)
        assert [a.alert_type for a in alerts] == [AlertType.CONTINUOUS_ABSENCE]
        assert alerts[0].severity == AlertSeverity.HIGH
        assert alerts[0].alert_date == WORK_DATE + timedelta(days=2)

    async def test_manual_entry_uses_same_computation(self, db, admin_auth, employee_on_shift):
        record = await attendance_service.manual_entry(
            db, admin_auth, employee_on_shift.id, WORK_DATE, at(9, 30), at(18, 0), notes="badge reader down"
        )
        assert record.is_manual_entry is True
        assert record.is_late is True
        assert record.late_minutes == 15
        assert record.working_minutes == 450
        assert record.status == AttendanceStatus.LATE
        assert record.notes == "badge reader down"

    async def test_manual_entry_rejects_inverted_times(self, db, admin_auth, employee_on_shift):
        with pytest.raises(BadRequestError):
            await attendance_service.manual_entry(
                db, admin_auth, employee_on_shift.id, WORK_DATE, at(18, 0), at(9, 0)
            )

    async def test_purge_record(self, db, admin_auth, employee_on_shift, employee_auth):
        result = await attendance_service.check_in(db, employee_auth, employee_on_shift.id, at(9, 0))
        await attendance_service.purge_record(db, admin_auth, result.record.id)
        remaining = await db.execute(select(AttendanceRecord).where(AttendanceRecord.id == result.record.id))
        assert remaining.scalar_one_or_none() is None


class TestBulkActions:
    """일괄 처리 테스트 — 항목별 성공/실패."""

    async def test_bulk_check_in_reports_each_id(self, db, admin_auth, employee_on_shift, second_employee):
        unknown = uuid4()
        outcome = await attendance_service.bulk_check_in(
            db, admin_auth, [employee_on_shift.id, unknown, second_employee.id, employee_on_shift.id], at(9, 0)
        )
        assert outcome["successful"] == [str(employee_on_shift.id), str(second_employee.id)]
        assert len(outcome["failed"]) == 1
        assert outcome["failed"][0]["employee_id"] == str(unknown)
        assert outcome["failed"][0]["reason"]

    async def test_bulk_check_in_skips_already_checked_in(self, db, admin_auth, employee_on_shift, employee_auth, second_employee):
        await attendance_service.check_in(db, employee_auth, employee_on_shift.id, at(8, 50))
        outcome = await attendance_service.bulk_check_in(
            db, admin_auth, [employee_on_shift.id, second_employee.id], at(9, 0)
        )
        assert outcome["successful"] == [str(second_employee.id)]
        assert outcome["failed"][0]["employee_id"] == str(employee_on_shift.id)

        result = await db.execute(select(AttendanceRecord).where(AttendanceRecord.user_id == employee_on_shift.id))
        assert ensure_utc(result.scalar_one().check_in) == at(8, 50)

    async def test_bulk_mark_absent_skips_checked_in(self, db, admin_auth, employee_on_shift, employee_auth, second_employee):
        await attendance_service.check_in(db, employee_auth, employee_on_shift.id, at(9, 0))
        outcome = await attendance_service.bulk_mark_absent(
            db, admin_auth, [employee_on_shift.id, second_employee.id], WORK_DATE, "office closed"
        )
        assert outcome["successful"] == [str(second_employee.id)]
        assert outcome["failed"][0]["employee_id"] == str(employee_on_shift.id)

    async def test_bulk_requires_admin(self, db, manager_auth, employee_user):
        with pytest.raises(ForbiddenError):
            await attendance_service.bulk_mark_absent(db, manager_auth, [employee_user.id], WORK_DATE)


class TestListing:
    """조회 권한 테스트."""

    async def test_manager_sees_only_own_department(
        self, db, manager_auth, admin_auth, employee_on_shift, outside_employee
    ):
        await attendance_service.manual_entry(db, admin_auth, employee_on_shift.id, WORK_DATE, at(9, 0))
        await attendance_service.manual_entry(db, admin_auth, outside_employee.id, WORK_DATE, at(9, 0))

        items, total = await attendance_service.list_records(db, manager_auth)
        assert total == 1
        assert items[0].user_id == employee_on_shift.id

        _, admin_total = await attendance_service.list_records(db, admin_auth)
        assert admin_total == 2

    async def test_manager_cannot_request_other_department(self, db, manager_auth, other_department):
        with pytest.raises(ForbiddenError):
            await attendance_service.list_records(db, manager_auth, department_id=other_department.id)

    async def test_history_is_scoped_to_caller(self, db, admin_auth, employee_on_shift, second_employee, employee_auth):
        await attendance_service.manual_entry(db, admin_auth, employee_on_shift.id, WORK_DATE, at(9, 0))
        await attendance_service.manual_entry(db, admin_auth, second_employee.id, WORK_DATE, at(9, 0))
        items, total = await attendance_service.get_history(db, employee_auth)
        assert total == 1
        assert items[0].user_id == employee_on_shift.id


class TestKeyedLocks:
    """키 단위 잠금 테스트."""

    async def test_same_key_is_serialized(self):
        locks = KeyedLocks()
        events: list[str] = []

        async def worker(name: str) -> None:
            async with locks.hold(("emp", WORK_DATE)):
                events.append(f"{name}-start")
                await asyncio.sleep(0.01)
                events.append(f"{name}-end")

        await asyncio.gather(worker("a"), worker("b"))
        assert events in (
            ["a-start", "a-end", "b-start", "b-end"],
            ["b-start", "b-end", "a-start", "a-end"],
        )
        assert len(locks) == 0

    async def test_different_keys_run_in_parallel(self):
        locks = KeyedLocks()
        inside: list[int] = []
        peak: list[int] = []

        async def worker(key: str) -> None:
            async with locks.hold(key):
                inside.append(1)
                peak.append(len(inside))
                await asyncio.sleep(0.01)
                inside.pop()

        await asyncio.gather(worker("a"), worker("b"))
        assert max(peak) == 2
