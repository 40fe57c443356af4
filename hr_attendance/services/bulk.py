"""일괄 처리 헬퍼 — 항목별 독립 처리와 결과 수집.

Bulk processing helper. Each item runs inside its own SAVEPOINT so a failed
item rolls back only its own writes; the batch always runs to the end and
reports a success list and a failure list with reasons.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


async def run_per_item(
    db: AsyncSession,
    item_ids: Iterable[UUID],
    handler: Callable[[UUID], Awaitable[object]],
) -> dict:
    """각 항목을 독립적으로 처리하고 결과를 모읍니다.

    Process each id independently and collect per-id outcomes.
    Duplicate ids are processed once, in first-seen order.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        item_ids: 처리할 직원 UUID 목록 (Employee UUIDs to process)
        handler: 항목 처리 코루틴 함수 (Coroutine processing one id)

    Returns:
        dict: {"successful": [...], "failed": [{"employee_id", "reason"}]}
    """
    successful: list[str] = []
    failed: list[dict[str, str]] = []

    for item_id in dict.fromkeys(item_ids):
        try:
            async with db.begin_nested():
                await handler(item_id)
            successful.append(str(item_id))
        except HTTPException as exc:
            failed.append({"employee_id": str(item_id), "reason": str(exc.detail)})
        except IntegrityError:
            logger.warning("Bulk item %s hit a concurrent write", item_id)
            failed.append({"employee_id": str(item_id), "reason": "Conflicting concurrent write"})
        except Exception:
            logger.exception("Bulk item %s failed unexpectedly", item_id)
            failed.append({"employee_id": str(item_id), "reason": "Internal error"})

    return {"successful": successful, "failed": failed}
