"""근태 기록 Pydantic 스키마.

Attendance record request/response schemas for employee check-in/out and
administrative actions (manual entry, absence, leave, bulk actions).
"""

from datetime import date, datetime
from uuid import UUID
from pydantic import BaseModel, Field


# === 직원 출퇴근 (Employee check-in/out) ===

class CheckInRequest(BaseModel):
    """출근 요청 스키마.

    Employee check-in request. The server clock sets the check-in instant.

    Attributes:
        latitude / longitude: 좌표, 선택 (Optional coordinates for geofence annotation)
        location: 위치 설명, 선택 (Optional free-text location)
        notes: 메모, 선택 (Optional notes)
    """

    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    location: str | None = Field(None, max_length=255)
    notes: str | None = None


class CheckOutRequest(BaseModel):
    """퇴근 요청 스키마 (Employee check-out request)."""

    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    notes: str | None = None


class AttendanceResponse(BaseModel):
    """근태 기록 응답 스키마.

    Attendance record response. Instants are UTC; ``working_hours`` is the
    ``"{H}h {M}m"`` rendering of ``working_minutes``.
    """

    id: str  # 근태 UUID 문자열 (Record UUID as string)
    employee_id: str  # 직원 UUID (Employee UUID)
    work_date: date  # 근무일 (Local work date)
    shift_id: str | None  # 적용 시프트 (Shift applied, null without assignment)
    check_in: datetime | None  # 출근 시각 UTC (Check-in instant)
    check_out: datetime | None  # 퇴근 시각 UTC (Check-out instant)
    status: str  # 상태 — present|late|absent|half_day|on_leave|early_departure
    working_minutes: int
    working_hours: str
    break_minutes: int
    overtime_minutes: int
    is_late: bool
    late_minutes: int
    is_early_departure: bool
    early_departure_minutes: int
    location: str | None
    latitude: float | None
    longitude: float | None
    geofence_id: str | None
    is_within_geofence: bool | None  # 지오펜스 내부 여부 — 판정 안 함이면 null (Null when not classified)
    notes: str | None
    is_manual_entry: bool
    approved_by: str | None


class CheckInResponse(BaseModel):
    record: AttendanceResponse
    is_late: bool
    late_minutes: int
    warnings: list[str] = []  # 비치명적 경고 — "no_active_shift"|"outside_geofence"


class CheckOutResponse(BaseModel):
    record: AttendanceResponse
    is_early_departure: bool
    overtime_minutes: int
    warnings: list[str] = []


class LocationLogResponse(BaseModel):
    id: str
    log_type: str
    latitude: float
    longitude: float
    geofence_id: str | None
    distance_meters: float | None
    is_within_geofence: bool
    logged_at: datetime


# === 관리자 처리 (Administrative actions) ===

class ManualEntryRequest(BaseModel):
    """관리자 수기 입력 요청 스키마.

    Administrator-entered times for one employee-day. Goes through the same
    computation as a live check-in/out.
    """

    employee_id: UUID
    work_date: date
    check_in: datetime
    check_out: datetime | None = None
    notes: str | None = None


class MarkAbsentRequest(BaseModel):
    employee_id: UUID
    work_date: date
    reason: str | None = None


class MarkOnLeaveRequest(BaseModel):
    employee_id: UUID
    work_date: date
    reason: str | None = None


class BulkCheckInRequest(BaseModel):
    """일괄 출근 요청 스키마 (timestamp 생략 시 현재 시각).

    Bulk check-in request; ``timestamp`` defaults to now.
    """

    employee_ids: list[UUID] = Field(..., min_length=1)
    timestamp: datetime | None = None
    notes: str | None = None


class BulkMarkAbsentRequest(BaseModel):
    employee_ids: list[UUID] = Field(..., min_length=1)
    work_date: date
    reason: str | None = None
