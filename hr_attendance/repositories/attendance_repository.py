"""근태 기록 레포지토리 — 근태 기록 및 위치 로그 DB 쿼리 담당.

Attendance Repository — Handles attendance record and location log queries.
State transitions on an existing record go through conditional UPDATE
statements (compare-and-swap) whose rowcount tells the caller whether it
won the transition.
"""

from datetime import date
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.models.attendance import AttendanceLocationLog, AttendanceRecord
from hr_attendance.models.enums import AttendanceStatus
from hr_attendance.models.organization import Department
from hr_attendance.models.user import User
from hr_attendance.repositories.base import BaseRepository

# 관리자 지정 상태 — Administrative side-states that block a live check-in
ADMINISTRATIVE_STATUSES: tuple[AttendanceStatus, ...] = (AttendanceStatus.ABSENT, AttendanceStatus.ON_LEAVE)


class AttendanceRepository(BaseRepository[AttendanceRecord]):
    """근태 기록 레포지토리.

    Attendance record repository with per-day lookup, filtered listing,
    compare-and-swap transitions and range scans for aggregation.

    Extends:
        BaseRepository[AttendanceRecord]
    """

    def __init__(self) -> None:
        super().__init__(AttendanceRecord)

    async def get_for_day(
        self,
        db: AsyncSession,
        user_id: UUID,
        work_date: date,
    ) -> AttendanceRecord | None:
        """직원의 특정 날짜 근태 기록을 조회합니다.

        Retrieve the attendance record for one employee-day.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 직원 UUID (Employee UUID)
            work_date: 근무일 (Work date)

        Returns:
            AttendanceRecord | None: 근태 기록 또는 None (Record or None)
        """
        query: Select = (
            select(AttendanceRecord)
            .where(AttendanceRecord.user_id == user_id)
            .where(AttendanceRecord.work_date == work_date)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_filters(
        self,
        db: AsyncSession,
        user_id: UUID | None = None,
        department_id: UUID | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        status: AttendanceStatus | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[AttendanceRecord], int]:
        """필터 조건에 맞는 근태 기록을 페이지네이션하여 조회합니다.

        Retrieve paginated attendance records matching the given filters.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 직원 UUID 필터, 선택 (Optional employee filter)
            department_id: 부서 UUID 필터, 선택 (Optional department filter)
            date_from: 시작일 필터, 선택 (Optional date range start)
            date_to: 종료일 필터, 선택 (Optional date range end)
            status: 상태 필터, 선택 (Optional status filter)
            page: 페이지 번호, 1부터 시작 (Page number, 1-based)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[Sequence[AttendanceRecord], int]: (근태 목록, 전체 개수)
        """
        query: Select = select(AttendanceRecord)

        if department_id is not None:
            query = query.join(User, User.id == AttendanceRecord.user_id).where(User.department_id == department_id)
        if user_id is not None:
            query = query.where(AttendanceRecord.user_id == user_id)
        if date_from is not None:
            query = query.where(AttendanceRecord.work_date >= date_from)
        if date_to is not None:
            query = query.where(AttendanceRecord.work_date <= date_to)
        if status is not None:
            query = query.where(AttendanceRecord.status == status)

        query = query.order_by(AttendanceRecord.work_date.desc(), AttendanceRecord.created_at.desc())

        return await self.get_paginated(db, query, page, per_page)

    async def claim_check_in(
        self,
        db: AsyncSession,
        record_id: UUID,
        values: dict[str, Any],
    ) -> bool:
        """출근 전 기록에 출근을 기록합니다 (조건부 UPDATE).

        Compare-and-swap: write check-in values only while the record has no
        check-in and is not in an administrative side-state.

        Returns:
            bool: 전이 성공 여부 (True if this call performed the transition)
        """
        result = await db.execute(
            update(AttendanceRecord)
            .where(
                AttendanceRecord.id == record_id,
                AttendanceRecord.check_in.is_(None),
                AttendanceRecord.status.not_in(ADMINISTRATIVE_STATUSES),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await db.flush()
        return result.rowcount > 0

    async def claim_check_out(
        self,
        db: AsyncSession,
        record_id: UUID,
        values: dict[str, Any],
    ) -> bool:
        """출근 상태인 기록에 퇴근을 기록합니다 (조건부 UPDATE).

        Compare-and-swap: write check-out values only while the record has a
        check-in and no check-out yet.

        Returns:
            bool: 전이 성공 여부 (True if this call performed the transition)
        """
        result = await db.execute(
            update(AttendanceRecord)
            .where(
                AttendanceRecord.id == record_id,
                AttendanceRecord.check_in.is_not(None),
                AttendanceRecord.check_out.is_(None),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await db.flush()
        return result.rowcount > 0

    async def count_status_between(
        self,
        db: AsyncSession,
        user_id: UUID,
        status: AttendanceStatus,
        date_from: date,
        date_to: date,
    ) -> int:
        """기간 내 특정 상태의 일수를 셉니다 (Count days with a status in a range)."""
        query: Select = (
            select(func.count())
            .select_from(AttendanceRecord)
            .where(
                AttendanceRecord.user_id == user_id,
                AttendanceRecord.status == status,
                AttendanceRecord.work_date >= date_from,
                AttendanceRecord.work_date <= date_to,
            )
        )
        return (await db.execute(query)).scalar() or 0

    async def is_shift_referenced(self, db: AsyncSession, shift_id: UUID) -> bool:
        """시프트를 참조하는 기록 존재 여부 (Whether any record was computed under a shift)."""
        query: Select = select(AttendanceRecord.id).where(AttendanceRecord.shift_id == shift_id).limit(1)
        return (await db.execute(query)).first() is not None

    async def get_range(
        self,
        db: AsyncSession,
        date_from: date,
        date_to: date,
        user_id: UUID | None = None,
    ) -> Sequence[AttendanceRecord]:
        """기간 내 근태 기록 전체를 조회합니다 (All records in a date range)."""
        query: Select = select(AttendanceRecord).where(
            AttendanceRecord.work_date >= date_from,
            AttendanceRecord.work_date <= date_to,
        )
        if user_id is not None:
            query = query.where(AttendanceRecord.user_id == user_id)
        result = await db.execute(query.order_by(AttendanceRecord.work_date, AttendanceRecord.user_id))
        return result.scalars().all()

    async def get_export_rows(
        self,
        db: AsyncSession,
        date_from: date,
        date_to: date,
        user_id: UUID | None = None,
        department_id: UUID | None = None,
        status: AttendanceStatus | None = None,
    ) -> Sequence[tuple[AttendanceRecord, User, str | None]]:
        """내보내기용 근태 기록을 직원/부서 정보와 함께 조회합니다.

        Retrieve records joined with employee and department name for export,
        ordered by date then employee code.

        Returns:
            Sequence[tuple[AttendanceRecord, User, str | None]]: (기록, 직원, 부서명)
        """
        query: Select = (
            select(AttendanceRecord, User, Department.name)
            .join(User, User.id == AttendanceRecord.user_id)
            .outerjoin(Department, Department.id == User.department_id)
            .where(
                AttendanceRecord.work_date >= date_from,
                AttendanceRecord.work_date <= date_to,
            )
        )
        if user_id is not None:
            query = query.where(AttendanceRecord.user_id == user_id)
        if department_id is not None:
            query = query.where(User.department_id == department_id)
        if status is not None:
            query = query.where(AttendanceRecord.status == status)
        query = query.order_by(AttendanceRecord.work_date, User.employee_code)

        result = await db.execute(query)
        return [(row[0], row[1], row[2]) for row in result.all()]

    async def create_location_log(
        self,
        db: AsyncSession,
        data: dict[str, Any],
    ) -> AttendanceLocationLog:
        """위치 로그를 생성합니다 (Append a location log row)."""
        log: AttendanceLocationLog = AttendanceLocationLog(**data)
        db.add(log)
        await db.flush()
        return log

    async def get_location_logs(
        self,
        db: AsyncSession,
        attendance_id: UUID,
    ) -> Sequence[AttendanceLocationLog]:
        """근태 기록의 위치 로그를 시간순으로 조회합니다 (Location logs of a record)."""
        query: Select = (
            select(AttendanceLocationLog)
            .where(AttendanceLocationLog.attendance_id == attendance_id)
            .order_by(AttendanceLocationLog.logged_at)
        )
        result = await db.execute(query)
        return result.scalars().all()


# 싱글턴 인스턴스 — Singleton instance
attendance_repository: AttendanceRepository = AttendanceRepository()
