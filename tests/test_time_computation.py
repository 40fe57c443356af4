"""근태 시간 계산 엔진 테스트.

Time computation engine tests — lateness, early departure, overtime,
working minutes, status derivation and shift windows.
"""

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from hr_attendance.models.enums import AttendanceStatus
from hr_attendance.services.time_computation import (
    ShiftRules,
    compute_check_in,
    compute_check_out,
    derive_status,
    early_departure,
    format_working_hours,
    lateness,
    overtime,
    shift_window,
    working_minutes,
)

UTC = timezone.utc
DAY = date(2025, 3, 3)
RULES = ShiftRules(start_time=time(9, 0), end_time=time(18, 0))


def at(hour: int, minute: int = 0, day: date = DAY) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=UTC)


class TestLateness:
    """지각 계산 테스트."""

    def test_late_minutes_counted_from_grace_end(self):
        """09:00 시작, 유예 15분, 09:20 출근 → 5분 지각."""
        result = lateness(at(9, 20), at(9, 0), 15)
        assert result.is_late is True
        assert result.late_minutes == 5

    def test_check_in_at_grace_boundary_is_on_time(self):
        result = lateness(at(9, 15), at(9, 0), 15)
        assert result.is_late is False
        assert result.late_minutes == 0

    def test_partial_minutes_are_floored(self):
        check_in = at(9, 15) + timedelta(seconds=59)
        result = lateness(check_in, at(9, 0), 15)
        assert result.is_late is True
        assert result.late_minutes == 0

    def test_negative_grace_rejected(self):
        with pytest.raises(ValueError):
            lateness(at(9, 20), at(9, 0), -1)

    def test_naive_instant_rejected(self):
        with pytest.raises(ValueError):
            lateness(datetime(2025, 3, 3, 9, 20), at(9, 0), 15)


class TestEarlyDepartureAndOvertime:
    """조퇴/초과근무 계산 테스트."""

    def test_early_minutes_counted_to_threshold_start(self):
        """18:00 종료, 기준 15분, 17:30 퇴근 → 15분 조퇴."""
        result = early_departure(at(17, 30), at(18, 0), 15)
        assert result.is_early is True
        assert result.early_minutes == 15

    def test_check_out_inside_threshold_is_not_early(self):
        result = early_departure(at(17, 50), at(18, 0), 15)
        assert result.is_early is False
        assert result.early_minutes == 0

    def test_overtime_after_offset(self):
        assert overtime(at(19, 0), at(18, 0), 30) == 30

    def test_overtime_within_offset_is_zero(self):
        assert overtime(at(18, 20), at(18, 0), 30) == 0

    def test_overtime_never_negative_before_shift_end(self):
        assert overtime(at(17, 0), at(18, 0), 0) == 0


class TestWorkingMinutes:
    """실 근무 시간 계산 테스트."""

    def test_break_deducted(self):
        assert working_minutes(at(9, 0), at(18, 0), 60) == (480, 60)

    def test_break_capped_at_elapsed(self):
        """짧은 근무에서 휴게는 경과 시간을 넘지 않음."""
        worked, applied = working_minutes(at(9, 0), at(9, 30), 60)
        assert worked == 0
        assert applied == 30

    def test_check_out_must_follow_check_in(self):
        with pytest.raises(ValueError):
            working_minutes(at(9, 0), at(9, 0), 0)


class TestDeriveStatus:
    """상태 결정 우선순위 테스트."""

    def test_half_day_takes_precedence_over_late(self):
        assert derive_status(200, 480, True, True) == AttendanceStatus.HALF_DAY

    def test_late_before_early_departure(self):
        assert derive_status(400, 480, True, True) == AttendanceStatus.LATE

    def test_early_departure(self):
        assert derive_status(400, 480, False, True) == AttendanceStatus.EARLY_DEPARTURE

    def test_exactly_half_of_minimum_is_not_half_day(self):
        assert derive_status(240, 480, False, False) == AttendanceStatus.PRESENT


class TestShiftWindow:
    """시프트 구간 계산 테스트."""

    def test_night_shift_ends_next_day(self):
        rules = ShiftRules(start_time=time(22, 0), end_time=time(6, 0), is_night_shift=True)
        start, end = shift_window(DAY, rules, UTC)
        assert start == at(22, 0)
        assert end == at(6, 0, DAY + timedelta(days=1))

    def test_dst_transition_shortens_shift(self):
        """서머타임 시작일에는 00:00-08:00 시프트가 7시간."""
        rules = ShiftRules(start_time=time(0, 0), end_time=time(8, 0))
        start, end = shift_window(date(2025, 3, 9), rules, ZoneInfo("America/New_York"))
        assert end - start == timedelta(hours=7)


class TestComputeDay:
    """출퇴근 전체 계산 테스트."""

    def test_check_in_without_shift_is_present(self):
        result = compute_check_in(at(11, 0), DAY, None, UTC)
        assert result.status == AttendanceStatus.PRESENT
        assert result.is_late is False
        assert result.shift_applied is False

    def test_late_check_in_is_provisionally_late(self):
        result = compute_check_in(at(9, 20), DAY, RULES, UTC)
        assert result.status == AttendanceStatus.LATE
        assert result.late_minutes == 5

    def test_full_day_with_overtime(self):
        result = compute_check_out(at(9, 0), at(19, 0), DAY, RULES, UTC)
        assert result.working_minutes == 540
        assert result.break_minutes == 60
        assert result.overtime_minutes == 30
        assert result.status == AttendanceStatus.PRESENT

    def test_working_plus_break_equals_elapsed(self):
        result = compute_check_out(at(9, 7), at(17, 43), DAY, RULES, UTC)
        assert result.working_minutes + result.break_minutes == 8 * 60 + 36

    def test_short_day_is_half_day(self):
        result = compute_check_out(at(9, 0), at(12, 0), DAY, RULES, UTC)
        assert result.working_minutes == 120
        assert result.is_early_departure is True
        assert result.status == AttendanceStatus.HALF_DAY

    def test_without_shift_no_break_is_deducted(self):
        result = compute_check_out(at(9, 0), at(17, 0), DAY, None, UTC)
        assert result.working_minutes == 480
        assert result.break_minutes == 0
        assert result.overtime_minutes == 0
        assert result.status == AttendanceStatus.PRESENT

    def test_night_shift_overtime_after_midnight_end(self):
        rules = ShiftRules(start_time=time(22, 0), end_time=time(6, 0), is_night_shift=True, break_minutes=30)
        result = compute_check_out(at(22, 0), at(7, 0, DAY + timedelta(days=1)), DAY, rules, UTC)
        assert result.working_minutes == 510
        assert result.overtime_minutes == 30
        assert result.is_early_departure is False


def test_format_working_hours():
    assert format_working_hours(485) == "8h 5m"
    assert format_working_hours(0) == "0h 0m"
