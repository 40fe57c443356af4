"""근태 경고 레포지토리 — 경고 DB 쿼리 담당.

Alert Repository — Database queries for append-only attendance alerts.
"""

from datetime import date, datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.models.attendance import AttendanceAlert
from hr_attendance.models.enums import AlertSeverity, AlertType
from hr_attendance.models.user import User
from hr_attendance.repositories.base import BaseRepository


class AlertRepository(BaseRepository[AttendanceAlert]):
    """근태 경고 레포지토리.

    Attendance alert repository.

    Extends:
        BaseRepository[AttendanceAlert]
    """

    def __init__(self) -> None:
        super().__init__(AttendanceAlert)

    async def get_by_filters(
        self,
        db: AsyncSession,
        user_id: UUID | None = None,
        department_id: UUID | None = None,
        alert_type: AlertType | None = None,
        severity: AlertSeverity | None = None,
        is_resolved: bool | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[AttendanceAlert], int]:
        """필터 조건에 맞는 경고를 최신순으로 조회합니다.

        Retrieve paginated alerts matching the filters, newest first.
        """
        query: Select = select(AttendanceAlert)
        if department_id is not None:
            query = query.join(User, User.id == AttendanceAlert.user_id).where(User.department_id == department_id)
        if user_id is not None:
            query = query.where(AttendanceAlert.user_id == user_id)
        if alert_type is not None:
            query = query.where(AttendanceAlert.alert_type == alert_type)
        if severity is not None:
            query = query.where(AttendanceAlert.severity == severity)
        if is_resolved is not None:
            query = query.where(AttendanceAlert.is_resolved.is_(is_resolved))
        if date_from is not None:
            query = query.where(AttendanceAlert.alert_date >= date_from)
        if date_to is not None:
            query = query.where(AttendanceAlert.alert_date <= date_to)
        query = query.order_by(AttendanceAlert.created_at.desc())
        return await self.get_paginated(db, query, page, per_page)

    async def resolve(
        self,
        db: AsyncSession,
        alert_id: UUID,
        resolved_by: UUID,
        resolved_at: datetime,
    ) -> bool:
        """미처리 경고를 처리 완료로 표시합니다 (Mark an unresolved alert resolved)."""
        result = await db.execute(
            update(AttendanceAlert)
            .where(AttendanceAlert.id == alert_id, AttendanceAlert.is_resolved.is_(False))
            .values(is_resolved=True, resolved_by=resolved_by, resolved_at=resolved_at)
            .execution_options(synchronize_session=False)
        )
        await db.flush()
        return result.rowcount > 0


# 싱글턴 인스턴스 — Singleton instance
alert_repository: AlertRepository = AlertRepository()
