"""시프트 정책 서비스 — 시프트 정의와 직원 배정 비즈니스 로직.

Shift Service — Business logic for shift policies and effective-dated
employee shift assignments. Resolves the shift in effect for an employee
on a given date for the attendance engine.

A policy is frozen once an attendance record was computed under it: its
timing fields can no longer change, so later corrections and manual entries
for past dates recompute with the rules that were in force. New rules go
into a new shift that employees are reassigned to.
"""

from datetime import date
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.models.shift import EmployeeShiftAssignment, ShiftPolicy
from hr_attendance.repositories.attendance_repository import attendance_repository
from hr_attendance.repositories.shift_repository import shift_assignment_repository, shift_repository
from hr_attendance.repositories.user_repository import user_repository
from hr_attendance.services.bulk import run_per_item
from hr_attendance.utils.auth_context import AuthContext
from hr_attendance.utils.exceptions import BadRequestError, ConflictError, DuplicateError, NotFoundError

# 계산에 쓰이는 필드 — Fields that feed the time computation
COMPUTATION_FIELDS: tuple[str, ...] = (
    "start_time",
    "end_time",
    "grace_period_minutes",
    "early_departure_threshold_minutes",
    "overtime_start_after_minutes",
    "minimum_work_minutes",
    "half_day_threshold_minutes",
    "break_minutes",
    "is_night_shift",
)


class ShiftService:
    """시프트 정책 서비스.

    Shift policy service covering shift CRUD, assignment and resolution.
    """

    # === 시프트 정의 (Shift definitions) ===

    async def create_shift(
        self,
        db: AsyncSession,
        auth: AuthContext,
        data: dict[str, Any],
    ) -> ShiftPolicy:
        """새 시프트 정책을 생성합니다.

        Create a new shift policy. A shift whose end time is not after its
        start time is stored as a night shift.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            auth: 요청자 컨텍스트 (Caller context, admin only)
            data: 시프트 데이터 (Shift fields)

        Returns:
            ShiftPolicy: 생성된 시프트 (Created shift)

        Raises:
            ForbiddenError: 관리자가 아닐 때 (Caller is not an admin)
            DuplicateError: 코드 중복 (Shift code already exists)
        """
        auth.require_admin()
        if await shift_repository.get_by_code(db, data["code"]) is not None:
            raise DuplicateError(f"Shift code '{data['code']}' already exists")

        if data["end_time"] <= data["start_time"]:
            data["is_night_shift"] = True
        return await shift_repository.create(db, data)

    async def list_shifts(self, db: AsyncSession, active_only: bool = False) -> Sequence[ShiftPolicy]:
        return await shift_repository.list_shifts(db, active_only)

    async def get_shift(self, db: AsyncSession, shift_id: UUID) -> ShiftPolicy:
        """시프트를 조회합니다 (Fetch a shift or raise 404)."""
        shift: ShiftPolicy | None = await shift_repository.get_by_id(db, shift_id)
        if shift is None:
            raise NotFoundError("Shift not found")
        return shift

    async def update_shift(
        self,
        db: AsyncSession,
        auth: AuthContext,
        shift_id: UUID,
        data: dict[str, Any],
    ) -> ShiftPolicy:
        """시프트 정책을 수정합니다.

        Update a shift policy. Name, code, description and the active flag can
        always change; timing fields only while no attendance record references
        the shift.

        Raises:
            ForbiddenError: 관리자가 아닐 때 (Caller is not an admin)
            NotFoundError: 시프트 없음 (Shift not found)
            DuplicateError: 코드 중복 (New code already used)
            ConflictError: 기록이 참조하는 시프트의 계산 필드 변경 (Timing change on a referenced shift)
        """
        auth.require_admin()
        shift: ShiftPolicy = await self.get_shift(db, shift_id)

        new_code: str | None = data.get("code")
        if new_code is not None and new_code != shift.code:
            if await shift_repository.get_by_code(db, new_code) is not None:
                raise DuplicateError(f"Shift code '{new_code}' already exists")

        start = data.get("start_time", shift.start_time)
        end = data.get("end_time", shift.end_time)
        if end <= start:
            data["is_night_shift"] = True

        changed: list[str] = [
            name for name in COMPUTATION_FIELDS if name in data and data[name] != getattr(shift, name)
        ]
        if changed and await attendance_repository.is_shift_referenced(db, shift_id):
            raise ConflictError(
                f"Shift '{shift.code}' is used by attendance records; cannot change {', '.join(changed)}. "
                "Create a new shift and reassign employees instead"
            )

        updated: ShiftPolicy | None = await shift_repository.update(db, shift_id, data)
        if updated is None:
            raise NotFoundError("Shift not found")
        return updated

    async def deactivate_shift(self, db: AsyncSession, auth: AuthContext, shift_id: UUID) -> ShiftPolicy:
        """시프트를 비활성화합니다 — 신규 배정 불가 (Deactivate; no new assignments)."""
        return await self.update_shift(db, auth, shift_id, {"is_active": False})

    # === 직원 배정 (Employee assignments) ===

    async def assign_shift(
        self,
        db: AsyncSession,
        auth: AuthContext,
        employee_id: UUID,
        shift_id: UUID,
        effective_from: date,
        effective_to: date | None = None,
    ) -> EmployeeShiftAssignment:
        """직원에게 시프트를 배정합니다. 기존 활성 배정은 비활성화됩니다.

        Assign a shift to an employee. Prior active assignments are
        deactivated so at most one assignment is active.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            auth: 요청자 컨텍스트 (Caller context, admin only)
            employee_id: 직원 UUID (Employee UUID)
            shift_id: 시프트 UUID (Shift UUID)
            effective_from: 적용 시작일 (First effective date)
            effective_to: 적용 종료일, 선택 (Optional last effective date)

        Returns:
            EmployeeShiftAssignment: 생성된 배정 (Created assignment)

        Raises:
            ForbiddenError: 관리자가 아닐 때 (Caller is not an admin)
            NotFoundError: 직원/시프트 없음 (Employee or shift not found)
            BadRequestError: 비활성 시프트, 잘못된 기간 (Inactive shift or invalid range)
        """
        auth.require_admin()
        if effective_to is not None and effective_to < effective_from:
            raise BadRequestError("effective_to must not be before effective_from")

        employee = await user_repository.get_by_id(db, employee_id)
        if employee is None or not employee.is_active:
            raise NotFoundError("Employee not found or inactive")

        shift: ShiftPolicy = await self.get_shift(db, shift_id)
        if not shift.is_active:
            raise BadRequestError("Cannot assign an inactive shift")

        await shift_assignment_repository.deactivate_for_user(db, employee_id, effective_from)
        return await shift_assignment_repository.create(
            db,
            {
                "user_id": employee_id,
                "shift_id": shift_id,
                "effective_from": effective_from,
                "effective_to": effective_to,
                "is_active": True,
                "assigned_by": auth.actor_id,
            },
        )

    async def bulk_assign_shift(
        self,
        db: AsyncSession,
        auth: AuthContext,
        employee_ids: Sequence[UUID],
        shift_id: UUID,
        effective_from: date,
        effective_to: date | None = None,
    ) -> dict:
        """여러 직원에게 같은 시프트를 배정합니다 (항목별 독립 처리).

        Assign one shift to many employees; each id succeeds or fails on its own.
        """
        auth.require_admin()

        async def _assign(employee_id: UUID) -> None:
            await self.assign_shift(db, auth, employee_id, shift_id, effective_from, effective_to)

        return await run_per_item(db, employee_ids, _assign)

    async def list_assignments(self, db: AsyncSession, employee_id: UUID) -> Sequence[EmployeeShiftAssignment]:
        return await shift_assignment_repository.list_for_user(db, employee_id)

    async def get_active_shift(
        self,
        db: AsyncSession,
        employee_id: UUID,
        on_date: date,
    ) -> ShiftPolicy | None:
        """직원의 해당 날짜 유효 시프트를 반환합니다.

        Resolve the shift policy in effect for an employee on a date.

        Returns:
            ShiftPolicy | None: 유효 시프트 또는 None (Shift, or None without assignment)
        """
        assignment = await shift_assignment_repository.resolve_for_date(db, employee_id, on_date)
        if assignment is None:
            return None
        return await shift_repository.get_by_id(db, assignment.shift_id)

    # === 응답 구성 (Response builders) ===

    def build_response(self, shift: ShiftPolicy) -> dict:
        """시프트 응답 딕셔너리를 구성합니다 (Build a shift response dict)."""
        return {
            "id": str(shift.id),
            "name": shift.name,
            "code": shift.code,
            "start_time": shift.start_time,
            "end_time": shift.end_time,
            "grace_period_minutes": shift.grace_period_minutes,
            "early_departure_threshold_minutes": shift.early_departure_threshold_minutes,
            "overtime_start_after_minutes": shift.overtime_start_after_minutes,
            "minimum_work_minutes": shift.minimum_work_minutes,
            "half_day_threshold_minutes": shift.half_day_threshold_minutes,
            "break_minutes": shift.break_minutes,
            "is_night_shift": shift.is_night_shift,
            "is_active": shift.is_active,
            "description": shift.description,
        }

    def build_assignment_response(self, assignment: EmployeeShiftAssignment) -> dict:
        return {
            "id": str(assignment.id),
            "employee_id": str(assignment.user_id),
            "shift_id": str(assignment.shift_id),
            "effective_from": assignment.effective_from,
            "effective_to": assignment.effective_to,
            "is_active": assignment.is_active,
            "assigned_by": str(assignment.assigned_by) if assignment.assigned_by else None,
        }


# 싱글턴 인스턴스 — Singleton instance
shift_service: ShiftService = ShiftService()
