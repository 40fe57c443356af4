"""앱 알림 라우터 — 내 알림 API.

App Notification Router — API endpoints for the caller's notifications.
Provides list, unread count, mark read, and mark all read operations.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.api.deps import get_auth_context
from hr_attendance.database import get_db
from hr_attendance.schemas.common import MessageResponse, PaginatedResponse, UnreadCountResponse
from hr_attendance.services.notification_service import notification_service
from hr_attendance.utils.auth_context import AuthContext
from hr_attendance.utils.exceptions import NotFoundError

router: APIRouter = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_notifications(
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    page: int = 1,
    per_page: int = 20,
    unread_only: bool = False,
    notification_type: str | None = None,
) -> dict:
    """내 알림 목록을 조회합니다.

    List notifications for the caller, newest first.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        auth: 인증된 요청자 (Authenticated caller)
        page: 페이지 번호 (Page number)
        per_page: 페이지당 항목 수 (Items per page)
        unread_only: 안 읽은 알림만 (Only unread notifications)
        notification_type: 알림 유형 필터 (Notification type filter)

    Returns:
        dict: 페이지네이션된 알림 목록 (Paginated notification list)
    """
    notifications, total = await notification_service.list_notifications(
        db,
        user_id=auth.actor_id,
        page=page,
        per_page=per_page,
        unread_only=unread_only,
        notification_type=notification_type,
    )
    return {
        "items": [notification_service.build_response(n) for n in notifications],
        "total": total,
        "page": page,
        "per_page": per_page,
    }


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(get_auth_context)],
) -> dict:
    count: int = await notification_service.get_unread_count(db, user_id=auth.actor_id)
    return {"unread_count": count}


@router.patch("/read-all", response_model=MessageResponse)
async def mark_all_read(
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(get_auth_context)],
) -> dict:
    """모든 읽지 않은 알림을 읽음 처리합니다 (Mark all unread notifications as read)."""
    count: int = await notification_service.mark_all_read(db, user_id=auth.actor_id)
    await db.commit()
    return {"message": f"{count}개의 알림이 읽음 처리되었습니다 ({count} notifications marked as read)"}


@router.patch("/{notification_id}/read", response_model=MessageResponse)
async def mark_read(
    notification_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(get_auth_context)],
) -> dict:
    """단일 알림을 읽음 처리합니다.

    Mark a single notification as read.

    Raises:
        NotFoundError: 알림 없음 또는 타인의 알림 (Missing or not the caller's)
    """
    success: bool = await notification_service.mark_read(
        db,
        notification_id=notification_id,
        user_id=auth.actor_id,
    )
    if not success:
        raise NotFoundError("알림을 찾을 수 없습니다 (Notification not found)")
    await db.commit()
    return {"message": "알림이 읽음 처리되었습니다 (Notification marked as read)"}
