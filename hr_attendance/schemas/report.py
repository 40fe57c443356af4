"""근태 집계/경고/내보내기 Pydantic 스키마.

Schemas for monthly summaries, daily reports, alerts and export rows.
"""

from datetime import date, datetime
from uuid import UUID
from pydantic import BaseModel, Field


# === 월간 요약 (Monthly summary) ===

class SummaryGenerateRequest(BaseModel):
    """월간 요약 생성 요청.

    Generate summaries for one employee, or for all active employees when
    ``employee_id`` is omitted.
    """

    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=1, le=9999)
    employee_id: UUID | None = None


class SummaryResponse(BaseModel):
    """월간 요약 응답 — 재실행 시 동일한 값 (Identical across reruns)."""

    employee_id: str
    month: int
    year: int
    total_working_days: int
    present_days: int  # present + late + early_departure
    absent_days: int
    late_days: int
    half_days: int
    leave_days: int
    early_departure_days: int
    total_working_minutes: int
    total_overtime_minutes: int
    attendance_percentage: float


# === 일간 보고서 (Daily report) ===

class DailyReportRequest(BaseModel):
    report_date: date


class NotMarkedEmployee(BaseModel):
    employee_id: str
    employee_code: str
    full_name: str


class DailyReportResponse(BaseModel):
    """일간 전사 보고서 응답 (Org-wide daily rollup)."""

    report_date: date
    total_employees: int
    present_count: int
    absent_count: int
    late_count: int
    half_day_count: int
    on_leave_count: int
    early_departure_count: int
    not_marked_count: int
    total_working_minutes: int
    total_overtime_minutes: int
    attendance_percentage: float
    not_marked: list[NotMarkedEmployee] = []  # 생성 시에만 포함 (Only on generation)


# === 경고 (Alerts) ===

class AlertResponse(BaseModel):
    id: str
    employee_id: str
    attendance_id: str | None
    alert_type: str  # late_arrival|early_departure|continuous_absence
    severity: str  # medium|high
    message: str
    alert_date: date
    is_resolved: bool
    resolved_by: str | None
    resolved_at: datetime | None
    created_at: datetime


# === 내보내기 (Export) ===

class ExportRow(BaseModel):
    """내보내기 행 스키마.

    One exported attendance row. Times are local ``HH:MM``.
    """

    date: str
    employee_name: str
    employee_code: str
    department: str | None
    check_in: str | None
    check_out: str | None
    working_hours: str  # "{H}h {M}m"
    status: str
    late_minutes: int
    early_departure_minutes: int
    overtime_minutes: int
    location: str | None
    notes: str | None
