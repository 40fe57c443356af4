"""근태 경고 서비스 — 기록 변경에서 파생되는 경고 생성과 관리.

Alert Service — Derives append-only alerts from attendance mutations and
delivers them to the employee's department managers.

Alert generation is best-effort: each alert is persisted inside its own
SAVEPOINT and any failure is logged and swallowed, so the mutation that
triggered it always stands.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.config import settings
from hr_attendance.models.attendance import AttendanceAlert, AttendanceRecord
from hr_attendance.models.enums import AlertSeverity, AlertType, AttendanceStatus
from hr_attendance.models.user import User
from hr_attendance.repositories.alert_repository import alert_repository
from hr_attendance.repositories.attendance_repository import attendance_repository
from hr_attendance.repositories.user_repository import user_repository
from hr_attendance.services.notification_service import notification_service
from hr_attendance.utils.auth_context import AuthContext
from hr_attendance.utils.exceptions import ForbiddenError, InvalidStateError, NotFoundError
from hr_attendance.utils.timeutils import now_utc

logger = logging.getLogger(__name__)


def severity_for_minutes(minutes: int) -> AlertSeverity:
    """지연/조퇴 분에 따른 심각도 (High above the configured minutes, else medium)."""
    if minutes > settings.ALERT_HIGH_SEVERITY_MINUTES:
        return AlertSeverity.HIGH
    return AlertSeverity.MEDIUM


class AlertService:
    """근태 경고 서비스.

    Attendance alert service: generation hooks called by the record store,
    plus listing and resolution for managers and admins.
    """

    # === 경고 생성 훅 (Generation hooks) ===

    async def on_check_in(self, db: AsyncSession, record: AttendanceRecord) -> AttendanceAlert | None:
        """출근 후 지각 경고를 생성합니다 (Late arrival alert after a check-in)."""
        if not record.is_late:
            return None
        return await self._emit(
            db,
            user_id=record.user_id,
            attendance_id=record.id,
            alert_type=AlertType.LATE_ARRIVAL,
            severity=severity_for_minutes(record.late_minutes),
            alert_date=record.work_date,
            message=f"Late arrival on {record.work_date.isoformat()}: {record.late_minutes} minutes late",
        )

    async def on_check_out(self, db: AsyncSession, record: AttendanceRecord) -> AttendanceAlert | None:
        """퇴근 후 조퇴 경고를 생성합니다.

        Early departure alert after a check-out, manual entry or approved correction.
        """
        if not record.is_early_departure:
            return None
        return await self._emit(
            db,
            user_id=record.user_id,
            attendance_id=record.id,
            alert_type=AlertType.EARLY_DEPARTURE,
            severity=severity_for_minutes(record.early_departure_minutes),
            alert_date=record.work_date,
            message=(
                f"Early departure on {record.work_date.isoformat()}: "
                f"left {record.early_departure_minutes} minutes early"
            ),
        )

    async def on_absence(self, db: AsyncSession, user_id: UUID, absence_date: date) -> AttendanceAlert | None:
        """결근 처리 후 연속 결근 경고를 검사합니다.

        Count absences in the trailing window ending on ``absence_date`` and
        raise a high-severity alert once the threshold is reached.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 직원 UUID (Employee UUID)
            absence_date: 결근일 (Date just marked absent)

        Returns:
            AttendanceAlert | None: 생성된 경고 또는 None (Alert, or None below threshold)
        """
        window_start: date = absence_date - timedelta(days=settings.CONTINUOUS_ABSENCE_WINDOW_DAYS - 1)
        absences: int = await attendance_repository.count_status_between(
            db, user_id, AttendanceStatus.ABSENT, window_start, absence_date
        )
        if absences < settings.CONTINUOUS_ABSENCE_THRESHOLD:
            return None
        return await self._emit(
            db,
            user_id=user_id,
            attendance_id=None,
            alert_type=AlertType.CONTINUOUS_ABSENCE,
            severity=AlertSeverity.HIGH,
            alert_date=absence_date,
            message=(
                f"{absences} absences in the {settings.CONTINUOUS_ABSENCE_WINDOW_DAYS} days "
                f"ending {absence_date.isoformat()}"
            ),
        )

    async def _emit(
        self,
        db: AsyncSession,
        user_id: UUID,
        attendance_id: UUID | None,
        alert_type: AlertType,
        severity: AlertSeverity,
        alert_date: date,
        message: str,
    ) -> AttendanceAlert | None:
        """경고를 저장하고 부서 매니저에게 알립니다 (실패는 기록만 함).

        Persist an alert in a savepoint, then notify the department managers.
        """
        try:
            async with db.begin_nested():
                alert: AttendanceAlert = await alert_repository.create(
                    db,
                    {
                        "user_id": user_id,
                        "attendance_id": attendance_id,
                        "alert_type": alert_type,
                        "severity": severity,
                        "alert_date": alert_date,
                        "message": message,
                    },
                )
        except Exception:
            logger.exception("Failed to persist %s alert for user %s on %s", alert_type.value, user_id, alert_date)
            return None

        logger.info("Alert %s (%s) raised for user %s on %s", alert_type.value, severity.value, user_id, alert_date)

        employee: User | None = await user_repository.get_by_id(db, user_id)
        if employee is not None:
            managers: Sequence[User] = await user_repository.get_department_managers(db, employee.department_id)
            await notification_service.notify(
                db,
                [manager.id for manager in managers if manager.id != user_id],
                notification_type="attendance_alert",
                message=f"{employee.full_name}: {message}",
                reference_type="attendance_alert",
                reference_id=alert.id,
            )
        return alert

    # === 조회/처리 (Listing and resolution) ===

    async def list_alerts(
        self,
        db: AsyncSession,
        auth: AuthContext,
        employee_id: UUID | None = None,
        alert_type: AlertType | None = None,
        severity: AlertSeverity | None = None,
        is_resolved: bool | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[AttendanceAlert], int]:
        """경고 목록을 조회합니다. 매니저는 자기 부서만 봅니다.

        List alerts; managers are restricted to their own department.
        """
        auth.require_manager()
        department_id: UUID | None = None if auth.is_admin else auth.department_id
        if not auth.is_admin and department_id is None:
            raise ForbiddenError("Manager has no department")
        return await alert_repository.get_by_filters(
            db,
            user_id=employee_id,
            department_id=department_id,
            alert_type=alert_type,
            severity=severity,
            is_resolved=is_resolved,
            date_from=date_from,
            date_to=date_to,
            page=page,
            per_page=per_page,
        )

    async def resolve_alert(self, db: AsyncSession, auth: AuthContext, alert_id: UUID) -> AttendanceAlert:
        """경고를 처리 완료로 표시합니다.

        Mark an alert resolved. Resolving twice is a state conflict.

        Raises:
            NotFoundError: 경고 없음 (Alert not found)
            ForbiddenError: 다른 부서 경고 (Alert outside the manager's department)
            InvalidStateError: 이미 처리됨 (Already resolved)
        """
        auth.require_manager()
        alert: AttendanceAlert | None = await alert_repository.get_by_id(db, alert_id)
        if alert is None:
            raise NotFoundError("Alert not found")

        employee: User | None = await user_repository.get_by_id(db, alert.user_id)
        if not auth.can_view_department(employee.department_id if employee else None):
            raise ForbiddenError("Cannot resolve alerts outside your department")

        resolved_at: datetime = now_utc()
        if not await alert_repository.resolve(db, alert_id, auth.actor_id, resolved_at):
            raise InvalidStateError("Alert is already resolved")
        await db.refresh(alert)
        return alert

    def build_response(self, alert: AttendanceAlert) -> dict:
        """경고 응답 딕셔너리를 구성합니다 (Build an alert response dict)."""
        return {
            "id": str(alert.id),
            "employee_id": str(alert.user_id),
            "attendance_id": str(alert.attendance_id) if alert.attendance_id else None,
            "alert_type": alert.alert_type.value,
            "severity": alert.severity.value,
            "message": alert.message,
            "alert_date": alert.alert_date,
            "is_resolved": alert.is_resolved,
            "resolved_by": str(alert.resolved_by) if alert.resolved_by else None,
            "resolved_at": alert.resolved_at,
            "created_at": alert.created_at,
        }


# 싱글턴 인스턴스 — Singleton instance
alert_service: AlertService = AlertService()
