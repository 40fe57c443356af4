"""정정 요청 레포지토리 — 근태 정정 요청 DB 쿼리 담당.

Correction Repository — Database queries for attendance correction requests.
The pending → terminal transition is a conditional UPDATE so that exactly
one reviewer wins it.
"""

from datetime import date, datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.models.attendance import CorrectionRequest
from hr_attendance.models.enums import CorrectionStatus
from hr_attendance.models.user import User
from hr_attendance.repositories.base import BaseRepository


class CorrectionRepository(BaseRepository[CorrectionRequest]):
    """정정 요청 레포지토리.

    Correction request repository.

    Extends:
        BaseRepository[CorrectionRequest]
    """

    def __init__(self) -> None:
        super().__init__(CorrectionRequest)

    async def get_pending_for_day(
        self,
        db: AsyncSession,
        user_id: UUID,
        work_date: date,
    ) -> CorrectionRequest | None:
        """직원의 해당 날짜 대기 중 요청을 조회합니다 (Pending request for an employee-day)."""
        query: Select = (
            select(CorrectionRequest)
            .where(
                CorrectionRequest.user_id == user_id,
                CorrectionRequest.work_date == work_date,
                CorrectionRequest.status == CorrectionStatus.PENDING,
            )
            .limit(1)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_filters(
        self,
        db: AsyncSession,
        user_id: UUID | None = None,
        department_id: UUID | None = None,
        status: CorrectionStatus | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[CorrectionRequest], int]:
        """필터 조건에 맞는 정정 요청을 페이지네이션하여 조회합니다.

        Retrieve paginated correction requests, newest first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 요청 직원 필터 (Optional requester filter)
            department_id: 요청자 부서 필터 (Optional requester department filter)
            status: 상태 필터 (Optional status filter)
            page: 페이지 번호 (Page number)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[Sequence[CorrectionRequest], int]: (요청 목록, 전체 개수)
        """
        query: Select = select(CorrectionRequest)
        if department_id is not None:
            query = query.join(User, User.id == CorrectionRequest.user_id).where(User.department_id == department_id)
        if user_id is not None:
            query = query.where(CorrectionRequest.user_id == user_id)
        if status is not None:
            query = query.where(CorrectionRequest.status == status)
        query = query.order_by(CorrectionRequest.created_at.desc())
        return await self.get_paginated(db, query, page, per_page)

    async def transition(
        self,
        db: AsyncSession,
        request_id: UUID,
        new_status: CorrectionStatus,
        reviewed_by: UUID,
        reviewed_at: datetime,
        review_notes: str | None,
    ) -> bool:
        """대기 중 요청을 종결 상태로 전이합니다 (조건부 UPDATE).

        Move a pending request to a terminal status. The WHERE clause on the
        current status makes the transition fire at most once.

        Returns:
            bool: 전이 성공 여부 (True if this call performed the transition)
        """
        result = await db.execute(
            update(CorrectionRequest)
            .where(
                CorrectionRequest.id == request_id,
                CorrectionRequest.status == CorrectionStatus.PENDING,
            )
            .values(
                status=new_status,
                reviewed_by=reviewed_by,
                reviewed_at=reviewed_at,
                review_notes=review_notes,
            )
            .execution_options(synchronize_session=False)
        )
        await db.flush()
        return result.rowcount > 0

    async def link_attendance(
        self,
        db: AsyncSession,
        request_id: UUID,
        attendance_id: UUID,
    ) -> None:
        """승인으로 생성된 근태 기록을 요청에 연결합니다 (Link the record created on approval)."""
        await db.execute(
            update(CorrectionRequest)
            .where(CorrectionRequest.id == request_id)
            .values(attendance_id=attendance_id)
            .execution_options(synchronize_session=False)
        )
        await db.flush()


# 싱글턴 인스턴스 — Singleton instance
correction_repository: CorrectionRepository = CorrectionRepository()
