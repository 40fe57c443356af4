"""공통 Pydantic 요청/응답 스키마 정의.

Common Pydantic request/response schema definitions shared across the
attendance API: notifications, pagination, bulk results and generic messages.
"""

from typing import Any
from pydantic import BaseModel


# === 알림 (Notification) 스키마 ===

class UnreadCountResponse(BaseModel):
    unread_count: int


# === 일괄 처리 (Bulk) 스키마 ===

class BulkFailure(BaseModel):
    """일괄 처리 실패 항목 (One failed id of a bulk action)."""

    employee_id: str  # 실패한 직원 UUID (Employee UUID that failed)
    reason: str  # 실패 사유 (Failure reason)


class BulkResult(BaseModel):
    """일괄 처리 결과 스키마.

    Bulk action result. Every requested id appears in exactly one list.

    Attributes:
        successful: 성공한 직원 UUID 목록 (Employee UUIDs processed successfully)
        failed: 실패 목록과 사유 (Failures with reasons)
    """

    successful: list[str]
    failed: list[BulkFailure]


# === 공통 (Common) 스키마 ===

class PaginatedResponse(BaseModel):
    """페이지네이션 응답 스키마.

    Paginated response wrapper schema.
    Wraps a list of items with pagination metadata.

    Attributes:
        items: 항목 목록 (List of result items)
        total: 전체 항목 수 (Total count across all pages)
        page: 현재 페이지 번호 (Current page number, 1-based)
        per_page: 페이지당 항목 수 (Items per page)
    """

    items: list[Any]  # 결과 항목 목록 (List of items for the current page)
    total: int  # 전체 항목 수 (Total item count)
    page: int  # 현재 페이지 — 1부터 시작 (Current page, 1-indexed)
    per_page: int  # 페이지당 항목 수 (Items per page)


class MessageResponse(BaseModel):
    """범용 메시지 응답 스키마.

    Generic message response schema for simple confirmations such as
    deletes and mark-as-read actions.

    Attributes:
        message: 응답 메시지 (Response message string)
    """

    message: str  # 응답 메시지 (Human-readable confirmation message)
