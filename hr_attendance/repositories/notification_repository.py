"""알림 레포지토리 — 근태 알림 수신함 쿼리.

Notification Repository — Inbox queries for attendance notifications.
Rows are written one per recipient by the database gateway and point back
at their source through (reference_type, reference_id): a correction
request or an attendance alert.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.models.notification import Notification
from hr_attendance.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """알림 레포지토리 (Per-recipient inbox rows)."""

    def __init__(self) -> None:
        super().__init__(Notification)

    @staticmethod
    def _inbox(user_id: UUID, unread_only: bool = False, notification_type: str | None = None) -> Select:
        query: Select = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            query = query.where(Notification.is_read.is_(False))
        if notification_type is not None:
            query = query.where(Notification.type == notification_type)
        return query

    async def list_inbox(
        self,
        db: AsyncSession,
        user_id: UUID,
        page: int = 1,
        per_page: int = 20,
        unread_only: bool = False,
        notification_type: str | None = None,
    ) -> tuple[Sequence[Notification], int]:
        """수신함을 최신순으로 조회합니다.

        One page of a recipient's inbox, newest first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 수신자 UUID (Recipient UUID)
            page: 페이지 번호 (1-based page)
            per_page: 페이지 크기 (Page size)
            unread_only: 안 읽은 알림만 (Only unread rows)
            notification_type: 유형 필터, 예 "attendance_alert" (Type filter)

        Returns:
            tuple[Sequence[Notification], int]: (알림 목록, 전체 개수) (Rows, total)
        """
        query: Select = self._inbox(user_id, unread_only, notification_type).order_by(
            Notification.created_at.desc(), Notification.id
        )
        return await self.get_paginated(db, query, page, per_page)

    async def count_unread(self, db: AsyncSession, user_id: UUID) -> int:
        query: Select = select(func.count()).select_from(self._inbox(user_id, unread_only=True).subquery())
        return (await db.execute(query)).scalar() or 0

    async def get_for_reference(
        self,
        db: AsyncSession,
        reference_type: str,
        reference_id: UUID,
    ) -> Sequence[Notification]:
        """원본 엔티티에서 파생된 알림들 (Every notification fanned out for one source)."""
        result = await db.execute(
            select(Notification)
            .where(
                Notification.reference_type == reference_type,
                Notification.reference_id == reference_id,
            )
            .order_by(Notification.created_at, Notification.user_id)
        )
        return result.scalars().all()

    async def mark_read(
        self,
        db: AsyncSession,
        user_id: UUID,
        notification_id: UUID | None = None,
    ) -> int:
        """읽음 처리 — 하나 또는 전부 (Mark one row, or the whole inbox when no id is given).

        Rows owned by another user are never touched. Returns the number of
        rows that flipped from unread to read.
        """
        statement = update(Notification).where(
            Notification.user_id == user_id,
            Notification.is_read.is_(False),
        )
        if notification_id is not None:
            statement = statement.where(Notification.id == notification_id)
        result = await db.execute(statement.values(is_read=True))
        await db.flush()
        return result.rowcount


# 싱글턴 인스턴스 — Singleton instance
notification_repository: NotificationRepository = NotificationRepository()
