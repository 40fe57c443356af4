"""시프트 정책 Pydantic 스키마.

Shift policy and shift assignment request/response schemas.
"""

from datetime import date, time
from uuid import UUID
from pydantic import BaseModel, Field


class ShiftCreate(BaseModel):
    """시프트 정책 생성 요청 스키마.

    Shift policy creation request. An end time at or before the start time
    makes the shift end on the following day.

    Attributes:
        name: 시프트 이름 (Display name)
        code: 시프트 코드 (Unique code)
        start_time / end_time: 현지 시작/종료 시각 (Local wall-clock times)
        grace_period_minutes: 지각 유예 (Grace period)
        early_departure_threshold_minutes: 조퇴 기준 (Early departure threshold)
        overtime_start_after_minutes: 초과근무 시작 기준 (Overtime offset after shift end)
        minimum_work_minutes: 최소 근무 시간 (Minimum working minutes)
        half_day_threshold_minutes: 반차 기준 (Half-day threshold, informational)
        break_minutes: 휴게 시간 (Break deducted on check-out)
    """

    name: str = Field(..., min_length=1, max_length=100)
    code: str = Field(..., min_length=1, max_length=50)
    start_time: time
    end_time: time
    grace_period_minutes: int = Field(15, ge=0)
    early_departure_threshold_minutes: int = Field(15, ge=0)
    overtime_start_after_minutes: int = Field(30, ge=0)
    minimum_work_minutes: int = Field(480, ge=0)
    half_day_threshold_minutes: int = Field(240, ge=0)
    break_minutes: int = Field(60, ge=0)
    is_night_shift: bool = False
    description: str | None = None


class ShiftUpdate(BaseModel):
    """시프트 정책 수정 요청 스키마 (부분 업데이트).

    Partial update; only fields sent are changed. Timing fields are locked
    once attendance records reference the shift.
    """

    name: str | None = Field(None, min_length=1, max_length=100)
    code: str | None = Field(None, min_length=1, max_length=50)
    start_time: time | None = None
    end_time: time | None = None
    grace_period_minutes: int | None = Field(None, ge=0)
    early_departure_threshold_minutes: int | None = Field(None, ge=0)
    overtime_start_after_minutes: int | None = Field(None, ge=0)
    minimum_work_minutes: int | None = Field(None, ge=0)
    half_day_threshold_minutes: int | None = Field(None, ge=0)
    break_minutes: int | None = Field(None, ge=0)
    is_night_shift: bool | None = None
    is_active: bool | None = None
    description: str | None = None


class ShiftResponse(BaseModel):
    id: str
    name: str
    code: str
    start_time: time
    end_time: time
    grace_period_minutes: int
    early_departure_threshold_minutes: int
    overtime_start_after_minutes: int
    minimum_work_minutes: int
    half_day_threshold_minutes: int
    break_minutes: int
    is_night_shift: bool
    is_active: bool
    description: str | None


class ShiftAssignmentCreate(BaseModel):
    """시프트 배정 요청 스키마 (Assign a shift to one employee)."""

    employee_id: UUID
    shift_id: UUID
    effective_from: date
    effective_to: date | None = None


class BulkShiftAssignmentCreate(BaseModel):
    """시프트 일괄 배정 요청 스키마 (Assign one shift to many employees)."""

    employee_ids: list[UUID] = Field(..., min_length=1)
    shift_id: UUID
    effective_from: date
    effective_to: date | None = None


class ShiftAssignmentResponse(BaseModel):
    id: str
    employee_id: str
    shift_id: str
    effective_from: date
    effective_to: date | None
    is_active: bool
    assigned_by: str | None
