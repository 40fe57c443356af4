"""관리자 근태 경고 라우터.

Admin Alert Router — list attendance alerts and mark them resolved.
"""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.api.deps import require_manager
from hr_attendance.database import get_db
from hr_attendance.models.enums import AlertSeverity, AlertType
from hr_attendance.schemas.common import PaginatedResponse
from hr_attendance.schemas.report import AlertResponse
from hr_attendance.services.alert_service import alert_service
from hr_attendance.utils.auth_context import AuthContext

router: APIRouter = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_alerts(
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_manager)],
    employee_id: Annotated[UUID | None, Query()] = None,
    alert_type: Annotated[AlertType | None, Query()] = None,
    severity: Annotated[AlertSeverity | None, Query()] = None,
    is_resolved: Annotated[bool | None, Query()] = None,
    date_from: Annotated[date | None, Query()] = None,
    date_to: Annotated[date | None, Query()] = None,
    page: int = 1,
    per_page: int = 20,
) -> dict:
    """근태 경고 목록을 조회합니다.

    List attendance alerts, newest first. Managers only see their department.
    """
    alerts, total = await alert_service.list_alerts(
        db,
        auth,
        employee_id=employee_id,
        alert_type=alert_type,
        severity=severity,
        is_resolved=is_resolved,
        date_from=date_from,
        date_to=date_to,
        page=page,
        per_page=per_page,
    )
    return {
        "items": [alert_service.build_response(a) for a in alerts],
        "total": total,
        "page": page,
        "per_page": per_page,
    }


@router.patch("/{alert_id}/resolve", response_model=AlertResponse)
async def resolve_alert(
    alert_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    auth: Annotated[AuthContext, Depends(require_manager)],
) -> dict:
    """경고를 처리 완료로 표시합니다 (Mark an alert resolved)."""
    alert = await alert_service.resolve_alert(db, auth, alert_id)
    await db.commit()
    return alert_service.build_response(alert)
