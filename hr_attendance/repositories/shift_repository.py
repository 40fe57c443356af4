"""시프트 정책 레포지토리 — 시프트 및 직원 배정 DB 쿼리 담당.

Shift Repository — Database queries for shift policies and effective-dated
employee shift assignments.
"""

from datetime import date, timedelta
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.models.shift import EmployeeShiftAssignment, ShiftPolicy
from hr_attendance.repositories.base import BaseRepository


class ShiftPolicyRepository(BaseRepository[ShiftPolicy]):
    """시프트 정책 레포지토리.

    Shift policy repository.

    Extends:
        BaseRepository[ShiftPolicy]
    """

    def __init__(self) -> None:
        super().__init__(ShiftPolicy)

    async def get_by_code(self, db: AsyncSession, code: str) -> ShiftPolicy | None:
        """코드로 시프트를 조회합니다 (Find a shift by its unique code)."""
        result = await db.execute(select(ShiftPolicy).where(ShiftPolicy.code == code))
        return result.scalar_one_or_none()

    async def list_shifts(
        self,
        db: AsyncSession,
        active_only: bool = False,
    ) -> Sequence[ShiftPolicy]:
        """시프트 목록을 이름순으로 조회합니다 (List shifts ordered by name)."""
        query: Select = select(ShiftPolicy)
        if active_only:
            query = query.where(ShiftPolicy.is_active.is_(True))
        result = await db.execute(query.order_by(ShiftPolicy.name))
        return result.scalars().all()


class ShiftAssignmentRepository(BaseRepository[EmployeeShiftAssignment]):
    """직원 시프트 배정 레포지토리.

    Employee shift assignment repository with effective-date resolution.

    Extends:
        BaseRepository[EmployeeShiftAssignment]
    """

    def __init__(self) -> None:
        super().__init__(EmployeeShiftAssignment)

    async def get_active_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> EmployeeShiftAssignment | None:
        """직원의 현재 활성 배정을 조회합니다 (Current active assignment)."""
        query: Select = (
            select(EmployeeShiftAssignment)
            .where(
                EmployeeShiftAssignment.user_id == user_id,
                EmployeeShiftAssignment.is_active.is_(True),
            )
            .order_by(EmployeeShiftAssignment.effective_from.desc())
            .limit(1)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def resolve_for_date(
        self,
        db: AsyncSession,
        user_id: UUID,
        on_date: date,
    ) -> EmployeeShiftAssignment | None:
        """특정 날짜에 유효한 배정을 찾습니다.

        Resolve the assignment in effect on a date. The active assignment wins
        when it covers the date; otherwise a closed historical assignment whose
        range covers the date is used (e.g. corrections for past days).

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 직원 UUID (Employee UUID)
            on_date: 대상일 (Date to resolve)

        Returns:
            EmployeeShiftAssignment | None: 유효 배정 또는 None (Assignment or None)
        """
        covers_date = and_(
            EmployeeShiftAssignment.user_id == user_id,
            EmployeeShiftAssignment.effective_from <= on_date,
            or_(
                EmployeeShiftAssignment.effective_to.is_(None),
                EmployeeShiftAssignment.effective_to >= on_date,
            ),
        )
        # 활성 배정 우선 — Active assignment first
        active_query: Select = (
            select(EmployeeShiftAssignment)
            .where(covers_date, EmployeeShiftAssignment.is_active.is_(True))
            .limit(1)
        )
        active = (await db.execute(active_query)).scalar_one_or_none()
        if active is not None:
            return active

        # 종료된 과거 배정 — Closed historical assignment covering the date
        history_query: Select = (
            select(EmployeeShiftAssignment)
            .where(
                covers_date,
                EmployeeShiftAssignment.is_active.is_(False),
                EmployeeShiftAssignment.effective_to.is_not(None),
            )
            .order_by(EmployeeShiftAssignment.effective_from.desc())
            .limit(1)
        )
        return (await db.execute(history_query)).scalar_one_or_none()

    async def deactivate_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        new_effective_from: date,
    ) -> int:
        """직원의 기존 활성 배정을 비활성화하고 기간을 닫습니다.

        Deactivate the employee's active assignments. Assignments that started
        before the new one are closed the day before it starts so they keep
        resolving for historical dates; later-starting ones are simply superseded.

        Returns:
            int: 비활성화된 배정 수 (Number of deactivated assignments)
        """
        close_on: date = new_effective_from - timedelta(days=1)
        closed = await db.execute(
            update(EmployeeShiftAssignment)
            .where(
                EmployeeShiftAssignment.user_id == user_id,
                EmployeeShiftAssignment.is_active.is_(True),
                EmployeeShiftAssignment.effective_from < new_effective_from,
                or_(
                    EmployeeShiftAssignment.effective_to.is_(None),
                    EmployeeShiftAssignment.effective_to > close_on,
                ),
            )
            .values(is_active=False, effective_to=close_on)
            .execution_options(synchronize_session="fetch")
        )
        superseded = await db.execute(
            update(EmployeeShiftAssignment)
            .where(
                EmployeeShiftAssignment.user_id == user_id,
                EmployeeShiftAssignment.is_active.is_(True),
            )
            .values(is_active=False)
            .execution_options(synchronize_session="fetch")
        )
        await db.flush()
        return closed.rowcount + superseded.rowcount

    async def list_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> Sequence[EmployeeShiftAssignment]:
        """직원의 배정 이력을 최신순으로 조회합니다 (Assignment history, newest first)."""
        query: Select = (
            select(EmployeeShiftAssignment)
            .where(EmployeeShiftAssignment.user_id == user_id)
            .order_by(EmployeeShiftAssignment.effective_from.desc(), EmployeeShiftAssignment.created_at.desc())
        )
        result = await db.execute(query)
        return result.scalars().all()


# 싱글턴 인스턴스 — Singleton instances
shift_repository: ShiftPolicyRepository = ShiftPolicyRepository()
shift_assignment_repository: ShiftAssignmentRepository = ShiftAssignmentRepository()
