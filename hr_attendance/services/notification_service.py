"""알림 서비스 — 알림 게이트웨이와 수신함 비즈니스 로직.

Notification Service — Best-effort notification delivery and the employee inbox.

Delivery is fire-and-forget from the caller's point of view: each message
is written inside its own SAVEPOINT, and any failure is rolled back to that
savepoint and logged. A failed notification never fails or rolls back the
attendance mutation that produced it.
"""

import logging
from typing import Protocol, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.models.notification import Notification
from hr_attendance.repositories.notification_repository import notification_repository

logger = logging.getLogger(__name__)


class NotificationGateway(Protocol):
    """알림 전송 인터페이스 (Notification transport interface)."""

    async def send(
        self,
        db: AsyncSession,
        user_id: UUID,
        notification_type: str,
        message: str,
        reference_type: str | None = None,
        reference_id: UUID | None = None,
    ) -> None: ...


class DatabaseNotificationGateway:
    """알림 테이블에 기록하는 기본 게이트웨이.

    Default gateway that stores notifications in the notifications table,
    where the employee inbox endpoints read them.
    """

    async def send(
        self,
        db: AsyncSession,
        user_id: UUID,
        notification_type: str,
        message: str,
        reference_type: str | None = None,
        reference_id: UUID | None = None,
    ) -> None:
        await notification_repository.create(
            db,
            {
                "user_id": user_id,
                "type": notification_type,
                "message": message,
                "reference_type": reference_type,
                "reference_id": reference_id,
            },
        )


class NotificationService:
    """알림 서비스.

    Notification service providing best-effort delivery through a gateway
    and the shared read/unread operations of the inbox.

    Attributes:
        gateway: 알림 전송 게이트웨이 (Notification transport)
    """

    def __init__(self, gateway: NotificationGateway) -> None:
        self.gateway: NotificationGateway = gateway

    # --- 전송 (Delivery) ---

    async def notify(
        self,
        db: AsyncSession,
        recipients: Sequence[UUID],
        notification_type: str,
        message: str,
        reference_type: str | None = None,
        reference_id: UUID | None = None,
    ) -> int:
        """수신자들에게 알림을 전송합니다 (실패는 기록만 함).

        Deliver a notification to each recipient. Every delivery runs in its
        own savepoint; failures are logged and skipped.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            recipients: 수신자 UUID 목록 (Recipient user UUIDs)
            notification_type: 알림 유형 (Notification type)
            message: 알림 메시지 (Message)
            reference_type: 참조 유형, 선택 (Optional reference kind)
            reference_id: 참조 ID, 선택 (Optional reference UUID)

        Returns:
            int: 전송 성공 수 (Number of successful deliveries)
        """
        delivered: int = 0
        for user_id in recipients:
            try:
                async with db.begin_nested():
                    await self.gateway.send(
                        db,
                        user_id=user_id,
                        notification_type=notification_type,
                        message=message,
                        reference_type=reference_type,
                        reference_id=reference_id,
                    )
                delivered += 1
            except Exception:
                logger.exception(
                    "Notification delivery failed (type=%s, user=%s, ref=%s)",
                    notification_type,
                    user_id,
                    reference_id,
                )
        return delivered

    # --- 수신함 (Inbox) ---

    async def list_notifications(
        self,
        db: AsyncSession,
        user_id: UUID,
        page: int = 1,
        per_page: int = 20,
        unread_only: bool = False,
        notification_type: str | None = None,
    ) -> tuple[Sequence[Notification], int]:
        """사용자의 알림 목록을 페이지네이션하여 조회합니다.

        List paginated notifications for a user, optionally only unread ones
        or one notification type.
        """
        return await notification_repository.list_inbox(
            db, user_id, page, per_page, unread_only=unread_only, notification_type=notification_type
        )

    async def list_for_reference(
        self,
        db: AsyncSession,
        reference_type: str,
        reference_id: UUID,
    ) -> Sequence[Notification]:
        """정정 요청/경고 하나에서 나간 알림 (Notifications sent for one correction or alert)."""
        return await notification_repository.get_for_reference(db, reference_type, reference_id)

    async def get_unread_count(self, db: AsyncSession, user_id: UUID) -> int:
        return await notification_repository.count_unread(db, user_id)

    async def mark_read(self, db: AsyncSession, notification_id: UUID, user_id: UUID) -> bool:
        """알림 하나를 읽음 처리합니다.

        False only when the notification does not exist or belongs to someone
        else; marking an already-read notification again succeeds.
        """
        if await notification_repository.mark_read(db, user_id, notification_id):
            return True
        notification: Notification | None = await notification_repository.get_by_id(db, notification_id)
        return notification is not None and notification.user_id == user_id

    async def mark_all_read(self, db: AsyncSession, user_id: UUID) -> int:
        return await notification_repository.mark_read(db, user_id)

    def build_response(self, notification: Notification) -> dict:
        """알림 응답 딕셔너리를 구성합니다 (Build a notification response dict)."""
        return {
            "id": str(notification.id),
            "type": notification.type,
            "message": notification.message,
            "reference_type": notification.reference_type,
            "reference_id": str(notification.reference_id) if notification.reference_id else None,
            "is_read": notification.is_read,
            "created_at": notification.created_at,
        }


# 싱글턴 인스턴스 — Singleton instance
notification_service: NotificationService = NotificationService(DatabaseNotificationGateway())
