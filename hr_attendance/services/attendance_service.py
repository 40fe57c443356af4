"""근태 관리 서비스 — 출퇴근 상태 머신과 관리자 근태 처리.

Attendance Service — Per-employee-per-day record store.

State machine per (employee, date)::

    NotMarked ──check_in──▶ CheckedIn ──check_out──▶ CheckedOut
        │
        ├──mark_absent──▶ Absent
        └──mark_on_leave──▶ OnLeave

Every computed field comes from ``time_computation``; this module only
decides which transition is legal, resolves the shift and geofence inputs,
and persists the result. Writes to one employee-day are serialized by an
in-process keyed lock, guarded across processes by conditional UPDATEs and
the (user_id, work_date) unique constraint.
"""

import logging
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.config import settings
from hr_attendance.models.attendance import AttendanceLocationLog, AttendanceRecord
from hr_attendance.models.enums import AttendanceStatus, LocationLogType
from hr_attendance.models.shift import ShiftPolicy
from hr_attendance.models.user import User
from hr_attendance.repositories.attendance_repository import ADMINISTRATIVE_STATUSES, attendance_repository
from hr_attendance.repositories.user_repository import user_repository
from hr_attendance.services.alert_service import alert_service
from hr_attendance.services.bulk import run_per_item
from hr_attendance.services.geofence_service import GeofenceMatch, geofence_service
from hr_attendance.services.shift_service import shift_service
from hr_attendance.services.time_computation import (
    CheckInComputation,
    CheckOutComputation,
    ShiftRules,
    compute_check_in,
    compute_check_out,
    format_working_hours,
    shift_window,
)
from hr_attendance.utils.auth_context import AuthContext
from hr_attendance.utils.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    BadRequestError,
    ForbiddenError,
    InvalidStateError,
    NotCheckedInError,
    NotFoundError,
)
from hr_attendance.utils.locks import KeyedLocks
from hr_attendance.utils.timeutils import ensure_utc, local_date, local_tz, now_utc
from hr_attendance.utils.working_days import is_holiday

logger = logging.getLogger(__name__)

# 경고 코드 — Non-fatal warning codes returned with a mutation
NO_ACTIVE_SHIFT: str = "no_active_shift"
OUTSIDE_GEOFENCE: str = "outside_geofence"

OUTSIDE_GEOFENCE_NOTE: str = "[Outside geofence]"


@dataclass
class CheckInResult:
    """출근 결과 (Check-in outcome)."""

    record: AttendanceRecord
    is_late: bool
    late_minutes: int
    warnings: list[str] = field(default_factory=list)


@dataclass
class CheckOutResult:
    """퇴근 결과 (Check-out outcome)."""

    record: AttendanceRecord
    is_early_departure: bool
    overtime_minutes: int
    warnings: list[str] = field(default_factory=list)


def _append_note(notes: str | None, suffix: str) -> str:
    return f"{notes} {suffix}" if notes else suffix


def _check_out_values(result: CheckOutComputation) -> dict[str, Any]:
    return {
        "working_minutes": result.working_minutes,
        "break_minutes": result.break_minutes,
        "overtime_minutes": result.overtime_minutes,
        "status": result.status,
        "is_late": result.is_late,
        "late_minutes": result.late_minutes,
        "is_early_departure": result.is_early_departure,
        "early_departure_minutes": result.early_departure_minutes,
    }


class AttendanceService:
    """근태 관리 서비스.

    Attendance service covering employee check-in/out, administrative
    overrides, bulk actions and record queries.
    """

    def __init__(self) -> None:
        # (직원, 근무일) 단위 잠금 — Per (employee, work date) locks
        self._day_locks: KeyedLocks = KeyedLocks()

    # === 내부 헬퍼 (Internal helpers) ===

    async def _get_employee(self, db: AsyncSession, employee_id: UUID) -> User:
        employee: User | None = await user_repository.get_by_id(db, employee_id)
        if employee is None or not employee.is_active:
            raise NotFoundError("Employee not found or inactive")
        return employee

    async def _resolve_rules(
        self,
        db: AsyncSession,
        employee_id: UUID,
        work_date: date,
    ) -> tuple[ShiftRules | None, UUID | None]:
        shift: ShiftPolicy | None = await shift_service.get_active_shift(db, employee_id, work_date)
        if shift is None:
            return None, None
        return ShiftRules.from_policy(shift), shift.id

    async def _night_shift_window(
        self,
        db: AsyncSession,
        employee_id: UUID,
        work_date: date,
    ) -> tuple[datetime, datetime] | None:
        """근무일의 야간 시프트 구간 (UTC start/end of a midnight-crossing shift, else None)."""
        rules, _ = await self._resolve_rules(db, employee_id, work_date)
        if rules is None or not (rules.is_night_shift or rules.end_time <= rules.start_time):
            return None
        return shift_window(work_date, rules, local_tz())

    async def _resolve_work_date(self, db: AsyncSession, employee_id: UUID, checked_in_at: datetime) -> date:
        """출근 시각이 속하는 근무일을 결정합니다.

        An arrival after midnight that falls inside the previous day's night
        shift belongs to that previous day; anything else uses the local date.
        """
        today: date = local_date(checked_in_at)
        previous_date: date = today - timedelta(days=1)
        window: tuple[datetime, datetime] | None = await self._night_shift_window(db, employee_id, previous_date)
        if window is not None and window[0] <= checked_in_at <= window[1]:
            return previous_date
        return today

    @staticmethod
    def _authorize_self_or_admin(auth: AuthContext, employee_id: UUID) -> None:
        if auth.actor_id != employee_id:
            auth.require_admin()

    @staticmethod
    def _ensure_mutable_day(day: date) -> None:
        """휴일 차단 설정 시 휴일 관리자 처리 거부 (Reject admin actions on holidays when configured)."""
        if settings.BLOCK_MUTATIONS_ON_HOLIDAYS and is_holiday(day):
            raise BadRequestError(f"{day.isoformat()} is a company holiday")

    async def _write_location_log(
        self,
        db: AsyncSession,
        record: AttendanceRecord,
        log_type: LocationLogType,
        latitude: float,
        longitude: float,
        match: GeofenceMatch | None,
        logged_at: datetime,
    ) -> AttendanceLocationLog:
        return await attendance_repository.create_location_log(
            db,
            {
                "attendance_id": record.id,
                "user_id": record.user_id,
                "log_type": log_type,
                "latitude": latitude,
                "longitude": longitude,
                "geofence_id": match.geofence_id if match else None,
                "distance_meters": match.distance_meters if match else None,
                "is_within_geofence": bool(match and match.is_within),
                "logged_at": logged_at,
            },
        )

    async def _upsert_day(
        self,
        db: AsyncSession,
        employee_id: UUID,
        work_date: date,
        values: dict[str, Any],
    ) -> AttendanceRecord:
        """하루 기록을 덮어쓰거나 생성합니다 (Overwrite or create the day's record)."""
        existing: AttendanceRecord | None = await attendance_repository.get_for_day(db, employee_id, work_date)
        if existing is not None:
            updated: AttendanceRecord | None = await attendance_repository.update(db, existing.id, values)
            if updated is None:
                raise NotFoundError("Attendance record not found")
            return updated
        return await attendance_repository.create(
            db, {"user_id": employee_id, "work_date": work_date, **values}
        )

    # === 출근 (Check-in) ===

    async def check_in(
        self,
        db: AsyncSession,
        auth: AuthContext,
        employee_id: UUID,
        timestamp: datetime | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
        location: str | None = None,
        notes: str | None = None,
    ) -> CheckInResult:
        """출근을 기록합니다.

        Record a check-in. The work date is the local date of the timestamp,
        except for an after-midnight arrival inside the previous night shift.
        Geofence classification annotates the record but never blocks it.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            auth: 요청자 컨텍스트 (Caller context; self, or admin for others)
            employee_id: 직원 UUID (Employee UUID)
            timestamp: 출근 시각, 기본 현재 (Check-in instant, default now)
            latitude / longitude: 좌표, 선택 (Optional coordinates)
            location: 위치 설명, 선택 (Optional free-text location)
            notes: 메모, 선택 (Optional notes)

        Returns:
            CheckInResult: 기록, 지각 여부/분, 경고 (Record, lateness and warnings)

        Raises:
            AlreadyCheckedInError: 이미 출근함 (Day already has a check-in)
            InvalidStateError: 결근/휴가 처리된 날 (Day is marked absent or on leave)
            NotFoundError: 직원 없음 (Employee not found or inactive)
        """
        self._authorize_self_or_admin(auth, employee_id)
        await self._get_employee(db, employee_id)

        checked_in_at: datetime = ensure_utc(timestamp) if timestamp is not None else now_utc()
        work_date: date = await self._resolve_work_date(db, employee_id, checked_in_at)

        match: GeofenceMatch | None = None
        if latitude is not None and longitude is not None:
            match = await geofence_service.classify_point(db, latitude, longitude)

        warnings: list[str] = []

        async with self._day_locks.hold((employee_id, work_date)):
            rules, shift_id = await self._resolve_rules(db, employee_id, work_date)
            if rules is None:
                warnings.append(NO_ACTIVE_SHIFT)
            computed: CheckInComputation = compute_check_in(checked_in_at, work_date, rules, local_tz())

            if match is not None and not match.is_within:
                warnings.append(OUTSIDE_GEOFENCE)
                notes = _append_note(notes, OUTSIDE_GEOFENCE_NOTE)

            values: dict[str, Any] = {
                "check_in": checked_in_at,
                "shift_id": shift_id,
                "status": computed.status,
                "is_late": computed.is_late,
                "late_minutes": computed.late_minutes,
                "location": location,
                "latitude": latitude,
                "longitude": longitude,
                "geofence_id": match.geofence_id if match else None,
                "is_within_geofence": match.is_within if match else None,
                "notes": notes,
            }

            record: AttendanceRecord | None = await attendance_repository.get_for_day(db, employee_id, work_date)
            if record is None:
                try:
                    async with db.begin_nested():
                        record = await attendance_repository.create(
                            db, {"user_id": employee_id, "work_date": work_date, **values}
                        )
                except IntegrityError:
                    raise AlreadyCheckedInError()
            else:
                if record.check_in is not None:
                    raise AlreadyCheckedInError()
                if record.status in ADMINISTRATIVE_STATUSES:
                    raise InvalidStateError(f"Day is already marked {record.status.value}")
                if not await attendance_repository.claim_check_in(db, record.id, values):
                    raise AlreadyCheckedInError()
                await db.refresh(record)

            if latitude is not None and longitude is not None:
                await self._write_location_log(
                    db, record, LocationLogType.CHECK_IN, latitude, longitude, match, checked_in_at
                )

        logger.info(
            "Check-in user=%s date=%s late=%s (%d min)",
            employee_id, work_date, computed.is_late, computed.late_minutes,
        )
        await alert_service.on_check_in(db, record)
        return CheckInResult(
            record=record,
            is_late=computed.is_late,
            late_minutes=computed.late_minutes,
            warnings=warnings,
        )

    # === 퇴근 (Check-out) ===

    async def _find_open_day(self, db: AsyncSession, employee_id: UUID, checked_out_at: datetime) -> date:
        """퇴근할 기록의 근무일을 찾습니다.

        Today's record wins when it has a check-in. Otherwise an open record
        from the previous day is closed only when that day ran a night shift
        and the check-out lands within NIGHT_SHIFT_CHECKOUT_WINDOW_HOURS of
        its end. A forgotten day-shift check-out stays open.
        """
        work_date: date = local_date(checked_out_at)
        today: AttendanceRecord | None = await attendance_repository.get_for_day(db, employee_id, work_date)
        if today is not None and today.check_in is not None:
            return work_date

        previous_date: date = work_date - timedelta(days=1)
        previous: AttendanceRecord | None = await attendance_repository.get_for_day(db, employee_id, previous_date)
        if previous is None or previous.check_in is None or previous.check_out is not None:
            raise NotCheckedInError()

        window: tuple[datetime, datetime] | None = await self._night_shift_window(db, employee_id, previous_date)
        if window is None:
            raise NotCheckedInError()
        if checked_out_at > window[1] + timedelta(hours=settings.NIGHT_SHIFT_CHECKOUT_WINDOW_HOURS):
            raise NotCheckedInError("Night shift check-out window has passed; request a correction")
        return previous_date

    async def check_out(
        self,
        db: AsyncSession,
        auth: AuthContext,
        employee_id: UUID,
        timestamp: datetime | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
        notes: str | None = None,
    ) -> CheckOutResult:
        """퇴근을 기록하고 하루를 최종 계산합니다.

        Record a check-out and compute the day's final values.

        Returns:
            CheckOutResult: 기록, 조퇴 여부, 초과근무 분, 경고 (Record, early flag, overtime, warnings)

        Raises:
            NotCheckedInError: 열린 출근 기록 없음 (No open record)
            AlreadyCheckedOutError: 이미 퇴근함 (Already checked out)
            BadRequestError: 퇴근이 출근 이후가 아님 (check_out not after check_in)
        """
        self._authorize_self_or_admin(auth, employee_id)
        await self._get_employee(db, employee_id)

        checked_out_at: datetime = ensure_utc(timestamp) if timestamp is not None else now_utc()
        work_date: date = await self._find_open_day(db, employee_id, checked_out_at)

        match: GeofenceMatch | None = None
        if latitude is not None and longitude is not None:
            match = await geofence_service.classify_point(db, latitude, longitude)

        warnings: list[str] = []

        async with self._day_locks.hold((employee_id, work_date)):
            record: AttendanceRecord | None = await attendance_repository.get_for_day(db, employee_id, work_date)
            if record is None or record.check_in is None:
                raise NotCheckedInError()
            if record.check_out is not None:
                raise AlreadyCheckedOutError()

            checked_in_at: datetime = ensure_utc(record.check_in)
            if checked_out_at <= checked_in_at:
                raise BadRequestError("Check-out must be after check-in")

            rules, shift_id = await self._resolve_rules(db, employee_id, work_date)
            if rules is None:
                warnings.append(NO_ACTIVE_SHIFT)
            computed: CheckOutComputation = compute_check_out(
                checked_in_at, checked_out_at, work_date, rules, local_tz()
            )

            values: dict[str, Any] = {"check_out": checked_out_at, "shift_id": shift_id, **_check_out_values(computed)}
            if match is not None and not match.is_within:
                warnings.append(OUTSIDE_GEOFENCE)
            if notes:
                values["notes"] = _append_note(record.notes, notes)

            if not await attendance_repository.claim_check_out(db, record.id, values):
                raise AlreadyCheckedOutError()
            await db.refresh(record)

            if latitude is not None and longitude is not None:
                await self._write_location_log(
                    db, record, LocationLogType.CHECK_OUT, latitude, longitude, match, checked_out_at
                )

        logger.info(
            "Check-out user=%s date=%s worked=%d status=%s",
            employee_id, work_date, computed.working_minutes, computed.status.value,
        )
        await alert_service.on_check_out(db, record)
        return CheckOutResult(
            record=record,
            is_early_departure=computed.is_early_departure,
            overtime_minutes=computed.overtime_minutes,
            warnings=warnings,
        )

    # === 관리자 처리 (Administrative overrides) ===

    async def mark_absent(
        self,
        db: AsyncSession,
        auth: AuthContext,
        employee_id: UUID,
        absence_date: date,
        reason: str | None = None,
    ) -> AttendanceRecord:
        """직원을 결근 처리합니다. 같은 날 기록은 덮어씁니다.

        Mark an employee absent, overwriting any record for that day.
        Times, location, shift and manual-entry flags are cleared and the
        minute counters reset to zero.

        Raises:
            ForbiddenError: 관리자가 아닐 때 (Caller is not an admin)
            NotFoundError: 직원 없음 (Employee not found)
        """
        auth.require_admin()
        await self._get_employee(db, employee_id)

        async with self._day_locks.hold((employee_id, absence_date)):
            record: AttendanceRecord = await self._upsert_day(
                db,
                employee_id,
                absence_date,
                {
                    "check_in": None,
                    "check_out": None,
                    "shift_id": None,
                    "working_minutes": 0,
                    "break_minutes": 0,
                    "overtime_minutes": 0,
                    "status": AttendanceStatus.ABSENT,
                    "is_late": False,
                    "late_minutes": 0,
                    "is_early_departure": False,
                    "early_departure_minutes": 0,
                    "geofence_id": None,
                    "is_within_geofence": None,
                    "location": None,
                    "latitude": None,
                    "longitude": None,
                    "is_manual_entry": False,
                    "notes": reason,
                    "approved_by": auth.actor_id,
                    "approved_at": now_utc(),
                },
            )

        logger.info("Marked absent user=%s date=%s by=%s", employee_id, absence_date, auth.actor_id)
        await alert_service.on_absence(db, employee_id, absence_date)
        return record

    async def mark_on_leave(
        self,
        db: AsyncSession,
        auth: AuthContext,
        employee_id: UUID,
        leave_date: date,
        reason: str | None = None,
    ) -> AttendanceRecord:
        """직원을 휴가 처리합니다 (출근 전 날에만 가능).

        Mark an employee on leave for a day that has no check-in yet.

        Raises:
            InvalidStateError: 이미 출근한 날 (Day already has a check-in)
        """
        auth.require_admin()
        await self._get_employee(db, employee_id)

        async with self._day_locks.hold((employee_id, leave_date)):
            existing: AttendanceRecord | None = await attendance_repository.get_for_day(db, employee_id, leave_date)
            if existing is not None and existing.check_in is not None:
                raise InvalidStateError("Cannot mark leave on a day with a check-in")
            record: AttendanceRecord = await self._upsert_day(
                db,
                employee_id,
                leave_date,
                {
                    "working_minutes": 0,
                    "break_minutes": 0,
                    "overtime_minutes": 0,
                    "status": AttendanceStatus.ON_LEAVE,
                    "notes": reason,
                    "approved_by": auth.actor_id,
                    "approved_at": now_utc(),
                },
            )
        return record

    async def apply_times(
        self,
        db: AsyncSession,
        employee_id: UUID,
        work_date: date,
        check_in: datetime,
        check_out: datetime | None,
        extra: dict[str, Any],
    ) -> AttendanceRecord:
        """주어진 출퇴근 시각으로 하루를 다시 계산해 저장합니다.

        Recompute a day from explicit times using the shift in effect on that
        date, then overwrite or create the record. Shared by manual entry and
        approved corrections. Caller must hold the day lock.

        Raises:
            BadRequestError: 퇴근이 출근 이후가 아님 (check_out not after check_in)
        """
        check_in = ensure_utc(check_in)
        if check_out is not None:
            check_out = ensure_utc(check_out)
            if check_out <= check_in:
                raise BadRequestError("Check-out must be after check-in")

        rules, shift_id = await self._resolve_rules(db, employee_id, work_date)
        values: dict[str, Any] = {"check_in": check_in, "check_out": check_out, "shift_id": shift_id}
        if check_out is not None:
            values.update(_check_out_values(compute_check_out(check_in, check_out, work_date, rules, local_tz())))
        else:
            computed: CheckInComputation = compute_check_in(check_in, work_date, rules, local_tz())
            values.update(
                {
                    "working_minutes": 0,
                    "break_minutes": 0,
                    "overtime_minutes": 0,
                    "status": computed.status,
                    "is_late": computed.is_late,
                    "late_minutes": computed.late_minutes,
                    "is_early_departure": False,
                    "early_departure_minutes": 0,
                }
            )
        values.update(extra)
        return await self._upsert_day(db, employee_id, work_date, values)

    async def manual_entry(
        self,
        db: AsyncSession,
        auth: AuthContext,
        employee_id: UUID,
        work_date: date,
        check_in: datetime,
        check_out: datetime | None = None,
        notes: str | None = None,
    ) -> AttendanceRecord:
        """관리자 수기 입력으로 하루 기록을 작성합니다.

        Write a day's record from administrator-entered times through the same
        computation path as live check-in/out.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            auth: 요청자 컨텍스트 (Caller context, admin only)
            employee_id: 직원 UUID (Employee UUID)
            work_date: 근무일 (Work date)
            check_in: 출근 시각 (Check-in instant)
            check_out: 퇴근 시각, 선택 (Optional check-out instant)
            notes: 메모, 선택 (Optional notes)

        Returns:
            AttendanceRecord: 저장된 기록 (Stored record, is_manual_entry=True)
        """
        auth.require_admin()
        await self._get_employee(db, employee_id)

        async with self._day_locks.hold((employee_id, work_date)):
            record: AttendanceRecord = await self.apply_times(
                db,
                employee_id,
                work_date,
                check_in,
                check_out,
                {
                    "notes": notes,
                    "is_manual_entry": True,
                    "approved_by": auth.actor_id,
                    "approved_at": now_utc(),
                },
            )

        logger.info("Manual entry user=%s date=%s by=%s", employee_id, work_date, auth.actor_id)
        if record.check_out is not None:
            await alert_service.on_check_out(db, record)
        return record

    def hold_day(self, employee_id: UUID, work_date: date) -> AbstractAsyncContextManager[None]:
        """외부 서비스가 같은 잠금을 쓰도록 노출 (Expose the day lock to other services)."""
        return self._day_locks.hold((employee_id, work_date))

    # === 일괄 처리 (Bulk actions) ===

    async def bulk_check_in(
        self,
        db: AsyncSession,
        auth: AuthContext,
        employee_ids: Sequence[UUID],
        timestamp: datetime | None = None,
        notes: str | None = None,
    ) -> dict:
        """여러 직원을 일괄 출근 처리합니다 (항목별 독립 처리).

        Check in many employees; each id succeeds or fails on its own.
        """
        auth.require_admin()
        checked_in_at: datetime = ensure_utc(timestamp) if timestamp is not None else now_utc()

        async def _check_in(employee_id: UUID) -> None:
            self._ensure_mutable_day(local_date(checked_in_at))
            await self.check_in(db, auth, employee_id, checked_in_at, notes=notes)

        return await run_per_item(db, employee_ids, _check_in)

    async def bulk_mark_absent(
        self,
        db: AsyncSession,
        auth: AuthContext,
        employee_ids: Sequence[UUID],
        absence_date: date,
        reason: str | None = None,
    ) -> dict:
        """여러 직원을 일괄 결근 처리합니다. 이미 출근한 직원은 건너뜁니다.

        Mark many employees absent. Ids that already checked in that day are
        reported as failures and left untouched.
        """
        auth.require_admin()

        async def _mark(employee_id: UUID) -> None:
            self._ensure_mutable_day(absence_date)
            existing: AttendanceRecord | None = await attendance_repository.get_for_day(db, employee_id, absence_date)
            if existing is not None and existing.check_in is not None:
                raise InvalidStateError("Employee already checked in on this date")
            await self.mark_absent(db, auth, employee_id, absence_date, reason)

        return await run_per_item(db, employee_ids, _mark)

    async def purge_record(self, db: AsyncSession, auth: AuthContext, record_id: UUID) -> None:
        """근태 기록을 삭제합니다 (Explicitly delete a record, admin only)."""
        auth.require_admin()
        if not await attendance_repository.delete(db, record_id):
            raise NotFoundError("Attendance record not found")
        logger.info("Purged attendance record %s by=%s", record_id, auth.actor_id)

    # === 조회 (Queries) ===

    async def get_today(self, db: AsyncSession, auth: AuthContext) -> AttendanceRecord | None:
        """본인의 오늘 기록 (Caller's record for the current local date)."""
        return await attendance_repository.get_for_day(db, auth.actor_id, local_date(now_utc()))

    async def get_history(
        self,
        db: AsyncSession,
        auth: AuthContext,
        date_from: date | None = None,
        date_to: date | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[AttendanceRecord], int]:
        """본인의 근태 이력 (Caller's own attendance history)."""
        return await attendance_repository.get_by_filters(
            db, user_id=auth.actor_id, date_from=date_from, date_to=date_to, page=page, per_page=per_page
        )

    async def list_records(
        self,
        db: AsyncSession,
        auth: AuthContext,
        employee_id: UUID | None = None,
        department_id: UUID | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        status: AttendanceStatus | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[AttendanceRecord], int]:
        """근태 기록 목록을 조회합니다. 매니저는 자기 부서로 제한됩니다.

        List attendance records; managers are restricted to their department.

        Raises:
            ForbiddenError: 권한 부족 또는 다른 부서 요청 (Insufficient role or foreign department)
        """
        auth.require_manager()
        if not auth.is_admin:
            if department_id is not None and department_id != auth.department_id:
                raise ForbiddenError("Cannot view another department")
            if auth.department_id is None:
                raise ForbiddenError("Manager has no department")
            department_id = auth.department_id
        return await attendance_repository.get_by_filters(
            db,
            user_id=employee_id,
            department_id=department_id,
            date_from=date_from,
            date_to=date_to,
            status=status,
            page=page,
            per_page=per_page,
        )

    async def get_record(self, db: AsyncSession, auth: AuthContext, record_id: UUID) -> AttendanceRecord:
        """근태 기록 단건을 조회합니다 (Single record, visible to owner, department manager or admin)."""
        record: AttendanceRecord | None = await attendance_repository.get_by_id(db, record_id)
        if record is None:
            raise NotFoundError("Attendance record not found")
        if record.user_id != auth.actor_id:
            employee: User | None = await user_repository.get_by_id(db, record.user_id)
            if not auth.can_view_department(employee.department_id if employee else None):
                raise ForbiddenError("Cannot view this attendance record")
        return record

    async def get_location_logs(
        self,
        db: AsyncSession,
        auth: AuthContext,
        record_id: UUID,
    ) -> Sequence[AttendanceLocationLog]:
        record: AttendanceRecord = await self.get_record(db, auth, record_id)
        return await attendance_repository.get_location_logs(db, record.id)

    # === 응답 구성 (Response builders) ===

    def build_response(self, record: AttendanceRecord) -> dict:
        """근태 응답 딕셔너리를 구성합니다.

        Build an attendance response dict. Instants are returned in UTC.
        """
        return {
            "id": str(record.id),
            "employee_id": str(record.user_id),
            "work_date": record.work_date,
            "shift_id": str(record.shift_id) if record.shift_id else None,
            "check_in": ensure_utc(record.check_in) if record.check_in else None,
            "check_out": ensure_utc(record.check_out) if record.check_out else None,
            "status": record.status.value,
            "working_minutes": record.working_minutes,
            "working_hours": format_working_hours(record.working_minutes),
            "break_minutes": record.break_minutes,
            "overtime_minutes": record.overtime_minutes,
            "is_late": record.is_late,
            "late_minutes": record.late_minutes,
            "is_early_departure": record.is_early_departure,
            "early_departure_minutes": record.early_departure_minutes,
            "location": record.location,
            "latitude": record.latitude,
            "longitude": record.longitude,
            "geofence_id": str(record.geofence_id) if record.geofence_id else None,
            "is_within_geofence": record.is_within_geofence,
            "notes": record.notes,
            "is_manual_entry": record.is_manual_entry,
            "approved_by": str(record.approved_by) if record.approved_by else None,
        }

    def build_location_log_response(self, log: AttendanceLocationLog) -> dict:
        return {
            "id": str(log.id),
            "log_type": log.log_type.value,
            "latitude": log.latitude,
            "longitude": log.longitude,
            "geofence_id": str(log.geofence_id) if log.geofence_id else None,
            "distance_meters": log.distance_meters,
            "is_within_geofence": log.is_within_geofence,
            "logged_at": ensure_utc(log.logged_at),
        }


# 싱글턴 인스턴스 — Singleton instance
attendance_service: AttendanceService = AttendanceService()
