"""근태 내보내기 서비스 — 기간별 근태 기록을 행 목록으로 변환.

Export Service — Flattens attendance records in a date range into rows for
downstream reporting. Times are rendered as local ``HH:MM`` and working
time as ``"{H}h {M}m"``; rendering to CSV or spreadsheets happens outside
this service.
"""

from datetime import date, datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.models.enums import AttendanceStatus
from hr_attendance.repositories.attendance_repository import attendance_repository
from hr_attendance.services.time_computation import format_working_hours
from hr_attendance.utils.auth_context import AuthContext
from hr_attendance.utils.exceptions import BadRequestError, ForbiddenError
from hr_attendance.utils.timeutils import to_local

# 내보내기 열 순서 — Export column order
EXPORT_COLUMNS: tuple[str, ...] = (
    "date",
    "employee_name",
    "employee_code",
    "department",
    "check_in",
    "check_out",
    "working_hours",
    "status",
    "late_minutes",
    "early_departure_minutes",
    "overtime_minutes",
    "location",
    "notes",
)


def _local_hhmm(value: datetime | None) -> str | None:
    if value is None:
        return None
    return to_local(value).strftime("%H:%M")


class ExportService:
    """근태 내보내기 서비스 (Attendance export service)."""

    async def export_range(
        self,
        db: AsyncSession,
        auth: AuthContext,
        start_date: date,
        end_date: date,
        employee_id: UUID | None = None,
        department_id: UUID | None = None,
        status: AttendanceStatus | None = None,
    ) -> list[dict]:
        """기간 내 근태 기록을 내보내기 행으로 변환합니다.

        Export records in ``[start_date, end_date]`` ordered by date then
        employee code. Managers are limited to their own department.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            auth: 요청자 컨텍스트 (Caller context, manager or admin)
            start_date: 시작일 (First date, inclusive)
            end_date: 종료일 (Last date, inclusive)
            employee_id: 직원 필터, 선택 (Optional employee filter)
            department_id: 부서 필터, 선택 (Optional department filter)
            status: 상태 필터, 선택 (Optional status filter)

        Returns:
            list[dict]: 내보내기 행 목록 (Export rows keyed by EXPORT_COLUMNS)

        Raises:
            BadRequestError: 시작일이 종료일 이후 (start_date after end_date)
            ForbiddenError: 권한 부족 또는 다른 부서 (Insufficient role or foreign department)
        """
        auth.require_manager()
        if start_date > end_date:
            raise BadRequestError("시작일은 종료일 이전이어야 합니다 (start_date must not be after end_date)")
        if not auth.is_admin:
            if auth.department_id is None or (department_id is not None and department_id != auth.department_id):
                raise ForbiddenError("다른 부서는 내보낼 수 없습니다 (Cannot export another department)")
            department_id = auth.department_id

        rows = await attendance_repository.get_export_rows(
            db, start_date, end_date, user_id=employee_id, department_id=department_id, status=status
        )
        return [
            {
                "date": record.work_date.isoformat(),
                "employee_name": employee.full_name,
                "employee_code": employee.employee_code,
                "department": department_name,
                "check_in": _local_hhmm(record.check_in),
                "check_out": _local_hhmm(record.check_out),
                "working_hours": format_working_hours(record.working_minutes or 0),
                "status": record.status.value,
                "late_minutes": record.late_minutes,
                "early_departure_minutes": record.early_departure_minutes,
                "overtime_minutes": record.overtime_minutes,
                "location": record.location,
                "notes": record.notes,
            }
            for record, employee, department_name in rows
        ]


# 싱글턴 인스턴스 — Singleton instance
export_service: ExportService = ExportService()
