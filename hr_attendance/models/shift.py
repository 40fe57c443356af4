"""근무 시프트 정책 관련 SQLAlchemy ORM 모델 정의.

Shift policy SQLAlchemy ORM model definitions.
A shift policy is a named, time-boxed work window with the thresholds used
to classify a day (grace period, early-departure threshold, overtime start).
Employees are assigned to shifts with effective dating.

Tables:
    - shift_policies: 시프트 정책 (Shift policies)
    - employee_shift_assignments: 직원별 시프트 배정 (Effective-dated employee→shift assignments)
"""

import uuid
from datetime import date, datetime, time, timezone

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, Text, Time, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from hr_attendance.database import Base


class ShiftPolicy(Base):
    """시프트 정책 모델 — 근무 시간대와 판정 기준.

    Shift policy model — Work window and classification thresholds.
    An end time that is not after the start time means the shift ends on the
    following calendar day (night shift).

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 시프트 이름 (Shift display name)
        code: 시프트 코드 (Unique shift code)
        start_time: 시작 시각 (Local start time of day)
        end_time: 종료 시각 (Local end time of day)
        grace_period_minutes: 지각 유예 시간 (Minutes after start before a check-in is late)
        early_departure_threshold_minutes: 조퇴 기준 (Minutes before end before a check-out is early)
        overtime_start_after_minutes: 초과근무 시작 기준 (Minutes after end before overtime counts)
        minimum_work_minutes: 최소 근무 시간 (Minimum minutes for a full day)
        half_day_threshold_minutes: 반일 기준 (Half-day threshold, informational)
        break_minutes: 휴게 시간 (Unpaid break deducted from working time)
        is_night_shift: 야간 시프트 여부 (Spans midnight)
        is_active: 활성 상태 (Inactive shifts cannot be newly assigned)
        description: 설명 (Optional description)
    """

    __tablename__ = "shift_policies"

    # 시프트 고유 식별자 — Shift unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 시프트 이름 — Display name (e.g. "Morning", "Night")
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # 시프트 코드 — Unique short code (e.g. "DAY", "NIGHT")
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    # 시작/종료 시각 — Local time-of-day window
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    # 판정 기준(분) — Classification thresholds in minutes
    grace_period_minutes: Mapped[int] = mapped_column(Integer, default=15)
    early_departure_threshold_minutes: Mapped[int] = mapped_column(Integer, default=15)
    overtime_start_after_minutes: Mapped[int] = mapped_column(Integer, default=30)
    minimum_work_minutes: Mapped[int] = mapped_column(Integer, default=480)
    half_day_threshold_minutes: Mapped[int] = mapped_column(Integer, default=240)
    break_minutes: Mapped[int] = mapped_column(Integer, default=60)
    # 야간 시프트 여부 — Night shift flag
    is_night_shift: Mapped[bool] = mapped_column(Boolean, default=False)
    # 활성 상태 — Whether new assignments may reference this shift
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # 설명 — Optional description
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))


class EmployeeShiftAssignment(Base):
    """직원 시프트 배정 모델 — 유효 기간이 있는 배정.

    Employee shift assignment — Effective-dated link between an employee and a shift.
    At most one assignment per employee is active; assigning a new shift
    deactivates the previous one and closes its effective range.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 직원 FK (Employee)
        shift_id: 시프트 FK (Shift policy)
        effective_from: 적용 시작일 (First effective date, inclusive)
        effective_to: 적용 종료일 (Last effective date, inclusive; None = open)
        is_active: 현재 활성 배정 여부 (Current active assignment flag)
        assigned_by: 배정자 FK (Admin who assigned)
        created_at: 생성 일시 UTC (Creation timestamp)
    """

    __tablename__ = "employee_shift_assignments"

    # 배정 고유 식별자 — Assignment unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 직원 FK — Assigned employee (CASCADE: 사용자 삭제 시 배정도 삭제)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # 시프트 FK — Shift policy (삭제 제한, restricted)
    shift_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("shift_policies.id"), nullable=False)
    # 유효 기간 — Effective date range (inclusive)
    effective_from: Mapped[date] = mapped_column(Date, nullable=False)
    effective_to: Mapped[date | None] = mapped_column(Date, nullable=True)
    # 활성 상태 — Only one active assignment per employee
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # 배정자 FK — Admin who made the assignment
    assigned_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
