"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    organization: 부서 (Department)
    user: 역할 및 직원 (Role and User)
    shift: 시프트 정책 및 배정 (Shift policies and effective-dated assignments)
    geofence: 지오펜스 위치 (Geofence locations)
    attendance: 근태 기록, 위치 로그, 정정 요청, 경고 (Records, location logs, corrections, alerts)
    summary: 월간 요약 및 일간 보고서 (Monthly summaries and daily reports)
    notification: 알림 (User notifications)
"""

from hr_attendance.models.organization import Department
from hr_attendance.models.user import Role, User
from hr_attendance.models.shift import ShiftPolicy, EmployeeShiftAssignment
from hr_attendance.models.geofence import GeofenceLocation
from hr_attendance.models.attendance import AttendanceRecord, AttendanceLocationLog, CorrectionRequest, AttendanceAlert
from hr_attendance.models.summary import AttendanceSummary, DailyAttendanceReport
from hr_attendance.models.notification import Notification

__all__ = [
    "Department",
    "Role", "User",
    "ShiftPolicy", "EmployeeShiftAssignment",
    "GeofenceLocation",
    "AttendanceRecord", "AttendanceLocationLog", "CorrectionRequest", "AttendanceAlert",
    "AttendanceSummary", "DailyAttendanceReport",
    "Notification",
]
