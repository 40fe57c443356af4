"""근태 시간 계산 엔진 — 순수 함수 모음.

Time computation engine — Pure, stateless functions that turn check-in/out
instants and a shift policy into lateness, early departure, overtime,
working minutes and the attendance status. Nothing here touches the
database; given the same inputs every function returns the same output.

Conventions:
    - Instants are timezone-aware; arithmetic is done in UTC so DST
      transitions in the local zone do not distort durations.
    - Shift start/end are local wall-clock times anchored on the work date.
      An end time that is not after the start belongs to the next day.
    - Durations are whole minutes, floored.
    - Lateness is measured from the end of the grace window and early
      departure up to the start of the threshold window
      (09:00 start, 15 min grace, 09:20 check-in => 5 late minutes).
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any

from hr_attendance.models.enums import AttendanceStatus


@dataclass(frozen=True)
class ShiftRules:
    """시프트 정책의 계산용 스냅샷.

    Calculation snapshot of a shift policy, decoupled from the ORM row.

    Attributes:
        start_time: 시작 시각 (Local start time)
        end_time: 종료 시각 (Local end time)
        grace_period_minutes: 지각 유예 (Grace period)
        early_departure_threshold_minutes: 조퇴 기준 (Early departure threshold)
        overtime_start_after_minutes: 초과근무 시작 기준 (Overtime start offset)
        minimum_work_minutes: 최소 근무 시간 (Minimum working minutes)
        break_minutes: 휴게 시간 (Break minutes)
        is_night_shift: 야간 시프트 여부 (Night shift flag)
    """

    start_time: time
    end_time: time
    grace_period_minutes: int = 15
    early_departure_threshold_minutes: int = 15
    overtime_start_after_minutes: int = 30
    minimum_work_minutes: int = 480
    break_minutes: int = 60
    is_night_shift: bool = False

    @classmethod
    def from_policy(cls, policy: Any) -> "ShiftRules":
        """ShiftPolicy ORM 객체에서 규칙을 만듭니다 (Build from a ShiftPolicy row)."""
        return cls(
            start_time=policy.start_time,
            end_time=policy.end_time,
            grace_period_minutes=policy.grace_period_minutes,
            early_departure_threshold_minutes=policy.early_departure_threshold_minutes,
            overtime_start_after_minutes=policy.overtime_start_after_minutes,
            minimum_work_minutes=policy.minimum_work_minutes,
            break_minutes=policy.break_minutes,
            is_night_shift=policy.is_night_shift,
        )


@dataclass(frozen=True)
class LatenessResult:
    is_late: bool
    late_minutes: int


@dataclass(frozen=True)
class EarlyDepartureResult:
    is_early: bool
    early_minutes: int


@dataclass(frozen=True)
class CheckInComputation:
    """출근 시점 계산 결과 (Result of evaluating a check-in)."""

    is_late: bool
    late_minutes: int
    status: AttendanceStatus
    shift_applied: bool


@dataclass(frozen=True)
class CheckOutComputation:
    """퇴근 시점 계산 결과 — 하루 전체의 최종 판정.

    Result of evaluating a full check-in/check-out pair.
    ``working_minutes + break_minutes`` always equals the elapsed minutes.
    """

    working_minutes: int
    break_minutes: int
    overtime_minutes: int
    is_late: bool
    late_minutes: int
    is_early_departure: bool
    early_departure_minutes: int
    status: AttendanceStatus
    shift_applied: bool


def whole_minutes(delta: timedelta) -> int:
    """timedelta를 분 단위로 내림합니다 (Floor a timedelta to whole minutes)."""
    return int(delta.total_seconds() // 60)


def _require_aware(value: datetime, name: str) -> datetime:
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware")
    return value.astimezone(timezone.utc)


def shift_window(work_date: date, rules: ShiftRules, tz: tzinfo) -> tuple[datetime, datetime]:
    """근무일 기준 시프트 시작/종료 시각을 UTC로 계산합니다.

    Anchor the shift on the work date in the local timezone and return the
    start and end as UTC instants. An end time at or before the start time
    is interpreted as the following calendar day.

    Args:
        work_date: 근무일 (Local work date)
        rules: 시프트 규칙 (Shift rules)
        tz: 현지 타임존 (Local timezone)

    Returns:
        tuple[datetime, datetime]: (시작, 종료) UTC 시각 (Start and end, UTC)
    """
    start_local: datetime = datetime.combine(work_date, rules.start_time, tzinfo=tz)
    end_date: date = work_date
    if rules.end_time <= rules.start_time:
        end_date = work_date + timedelta(days=1)
    end_local: datetime = datetime.combine(end_date, rules.end_time, tzinfo=tz)
    return start_local.astimezone(timezone.utc), end_local.astimezone(timezone.utc)


def lateness(check_in: datetime, shift_start: datetime, grace_minutes: int) -> LatenessResult:
    """지각 여부와 지각 분을 계산합니다.

    Late iff the check-in is strictly after shift start plus grace.
    Late minutes are counted from the end of the grace window.

    Raises:
        ValueError: 유예 시간이 음수일 때 (Negative grace period)
    """
    if grace_minutes < 0:
        raise ValueError("grace_minutes must be >= 0")
    check_in = _require_aware(check_in, "check_in")
    cutoff: datetime = _require_aware(shift_start, "shift_start") + timedelta(minutes=grace_minutes)
    if check_in > cutoff:
        return LatenessResult(is_late=True, late_minutes=whole_minutes(check_in - cutoff))
    return LatenessResult(is_late=False, late_minutes=0)


def early_departure(check_out: datetime, shift_end: datetime, threshold_minutes: int) -> EarlyDepartureResult:
    """조퇴 여부와 조퇴 분을 계산합니다.

    Early iff the check-out is strictly before shift end minus threshold.
    Early minutes are counted up to the start of the threshold window.

    Raises:
        ValueError: 기준이 음수일 때 (Negative threshold)
    """
    if threshold_minutes < 0:
        raise ValueError("threshold_minutes must be >= 0")
    check_out = _require_aware(check_out, "check_out")
    cutoff: datetime = _require_aware(shift_end, "shift_end") - timedelta(minutes=threshold_minutes)
    if check_out < cutoff:
        return EarlyDepartureResult(is_early=True, early_minutes=whole_minutes(cutoff - check_out))
    return EarlyDepartureResult(is_early=False, early_minutes=0)


def overtime(check_out: datetime, shift_end: datetime, overtime_start_after_minutes: int) -> int:
    """초과근무 분을 계산합니다.

    Minutes worked after shift end, minus the overtime start offset; never negative.
    """
    minutes_after_shift: int = max(
        0, whole_minutes(_require_aware(check_out, "check_out") - _require_aware(shift_end, "shift_end"))
    )
    return max(0, minutes_after_shift - overtime_start_after_minutes)


def working_minutes(check_in: datetime, check_out: datetime, break_minutes: int) -> tuple[int, int]:
    """실 근무 시간과 실제 차감된 휴게 시간을 계산합니다.

    Compute working minutes net of break. The break deducted is capped at
    the elapsed time, so working minutes are never negative and
    ``working + break == elapsed`` holds for every valid pair.

    Returns:
        tuple[int, int]: (실 근무 분, 차감 휴게 분) (Working minutes, break deducted)

    Raises:
        ValueError: 퇴근이 출근 이후가 아닐 때 (check_out not after check_in)
    """
    check_in = _require_aware(check_in, "check_in")
    check_out = _require_aware(check_out, "check_out")
    if check_out <= check_in:
        raise ValueError("check_out must be after check_in")
    elapsed: int = whole_minutes(check_out - check_in)
    applied_break: int = min(max(0, break_minutes), elapsed)
    return elapsed - applied_break, applied_break


def derive_status(
    working: int,
    minimum_work_minutes: int,
    is_late: bool,
    is_early: bool,
) -> AttendanceStatus:
    """근무 결과로부터 상태를 결정합니다.

    half_day if working < minimum/2, else late, else early_departure, else present.
    """
    if working * 2 < minimum_work_minutes:
        return AttendanceStatus.HALF_DAY
    if is_late:
        return AttendanceStatus.LATE
    if is_early:
        return AttendanceStatus.EARLY_DEPARTURE
    return AttendanceStatus.PRESENT


def compute_check_in(
    check_in: datetime,
    work_date: date,
    rules: ShiftRules | None,
    tz: tzinfo,
) -> CheckInComputation:
    """출근 이벤트를 평가합니다.

    Evaluate a check-in. Without shift rules no lateness is computed and the
    provisional status is present.
    """
    _require_aware(check_in, "check_in")
    if rules is None:
        return CheckInComputation(is_late=False, late_minutes=0, status=AttendanceStatus.PRESENT, shift_applied=False)

    shift_start, _ = shift_window(work_date, rules, tz)
    result: LatenessResult = lateness(check_in, shift_start, rules.grace_period_minutes)
    status: AttendanceStatus = AttendanceStatus.LATE if result.is_late else AttendanceStatus.PRESENT
    return CheckInComputation(
        is_late=result.is_late,
        late_minutes=result.late_minutes,
        status=status,
        shift_applied=True,
    )


def compute_check_out(
    check_in: datetime,
    check_out: datetime,
    work_date: date,
    rules: ShiftRules | None,
    tz: tzinfo,
) -> CheckOutComputation:
    """출퇴근 한 쌍을 평가하여 하루의 최종 판정을 계산합니다.

    Evaluate a full check-in/check-out pair. Without shift rules the
    lateness, early departure and overtime steps are skipped, no break is
    deducted and the status is present.

    Args:
        check_in: 출근 시각 (Check-in instant, aware)
        check_out: 퇴근 시각 (Check-out instant, aware, after check_in)
        work_date: 근무일 (Local work date the shift is anchored on)
        rules: 시프트 규칙 또는 None (Shift rules, or None without assignment)
        tz: 현지 타임존 (Local timezone)

    Returns:
        CheckOutComputation: 계산 결과 (Computed fields for the record)

    Raises:
        ValueError: 퇴근이 출근 이후가 아닐 때 (check_out not after check_in)
    """
    if rules is None:
        worked, applied_break = working_minutes(check_in, check_out, 0)
        return CheckOutComputation(
            working_minutes=worked,
            break_minutes=applied_break,
            overtime_minutes=0,
            is_late=False,
            late_minutes=0,
            is_early_departure=False,
            early_departure_minutes=0,
            status=AttendanceStatus.PRESENT,
            shift_applied=False,
        )

    worked, applied_break = working_minutes(check_in, check_out, rules.break_minutes)
    shift_start, shift_end = shift_window(work_date, rules, tz)
    late: LatenessResult = lateness(check_in, shift_start, rules.grace_period_minutes)
    early: EarlyDepartureResult = early_departure(check_out, shift_end, rules.early_departure_threshold_minutes)
    extra: int = overtime(check_out, shift_end, rules.overtime_start_after_minutes)

    return CheckOutComputation(
        working_minutes=worked,
        break_minutes=applied_break,
        overtime_minutes=extra,
        is_late=late.is_late,
        late_minutes=late.late_minutes,
        is_early_departure=early.is_early,
        early_departure_minutes=early.early_minutes,
        status=derive_status(worked, rules.minimum_work_minutes, late.is_late, early.is_early),
        shift_applied=True,
    )


def format_working_hours(minutes: int) -> str:
    """분을 "{H}h {M}m" 형식으로 변환합니다 (Format minutes as "{H}h {M}m")."""
    minutes = max(0, minutes)
    return f"{minutes // 60}h {minutes % 60}m"
