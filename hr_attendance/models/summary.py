"""근태 집계 관련 SQLAlchemy ORM 모델 정의.

Attendance aggregate SQLAlchemy ORM model definitions.
Both tables are rebuilt by a full rescan of their period and upserted on
their natural key, so re-running an aggregation yields the same row.

Tables:
    - attendance_summaries: 직원별 월간 요약 (Monthly per-employee summary)
    - daily_attendance_reports: 일간 전사 보고서 (Daily organisation-wide report)
"""

import uuid
from datetime import date, datetime, timezone
from sqlalchemy import Date, DateTime, Float, ForeignKey, Integer, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from hr_attendance.database import Base


class AttendanceSummary(Base):
    """월간 근태 요약 모델.

    Monthly attendance summary per employee, keyed by (user_id, month, year).

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 직원 FK (Employee)
        month / year: 기간 (Period)
        total_working_days: 기간 내 근무일 수 (Working days in the period)
        present_days: 출근일 수 (present, late, early_departure)
        absent_days / late_days / half_days / leave_days / early_departure_days: 상태별 일수
        total_working_minutes / total_overtime_minutes: 합계(분) (Minute totals)
        attendance_percentage: 출근율 (present_days / total_working_days * 100)

    Constraints:
        uq_summary_user_period: 직원+월+연도 고유 (One summary per employee per month)
    """

    __tablename__ = "attendance_summaries"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    total_working_days: Mapped[int] = mapped_column(Integer, default=0)
    present_days: Mapped[int] = mapped_column(Integer, default=0)
    absent_days: Mapped[int] = mapped_column(Integer, default=0)
    late_days: Mapped[int] = mapped_column(Integer, default=0)
    half_days: Mapped[int] = mapped_column(Integer, default=0)
    leave_days: Mapped[int] = mapped_column(Integer, default=0)
    early_departure_days: Mapped[int] = mapped_column(Integer, default=0)
    total_working_minutes: Mapped[int] = mapped_column(Integer, default=0)
    total_overtime_minutes: Mapped[int] = mapped_column(Integer, default=0)
    attendance_percentage: Mapped[float] = mapped_column(Float, default=0.0)
    # 생성/수정 일시 — Timestamps (응답에는 포함하지 않음, excluded from output)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("user_id", "month", "year", name="uq_summary_user_period"),
    )


class DailyAttendanceReport(Base):
    """일간 근태 보고서 모델 — 날짜별 전사 집계.

    Daily attendance report — Organisation-wide counts for one date.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        report_date: 보고 대상일 (Report date, unique)
        total_employees: 활성 직원 수 (Active employees)
        present_count / absent_count / late_count / half_day_count
        on_leave_count / early_departure_count: 상태별 인원 (Counts per status)
        not_marked_count: 기록 없는 인원 (Active employees with no record)
        total_working_minutes / total_overtime_minutes: 합계(분) (Minute totals)
        attendance_percentage: 출근율 (present / total_employees * 100)
    """

    __tablename__ = "daily_attendance_reports"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    report_date: Mapped[date] = mapped_column(Date, nullable=False, unique=True)
    total_employees: Mapped[int] = mapped_column(Integer, default=0)
    present_count: Mapped[int] = mapped_column(Integer, default=0)
    absent_count: Mapped[int] = mapped_column(Integer, default=0)
    late_count: Mapped[int] = mapped_column(Integer, default=0)
    half_day_count: Mapped[int] = mapped_column(Integer, default=0)
    on_leave_count: Mapped[int] = mapped_column(Integer, default=0)
    early_departure_count: Mapped[int] = mapped_column(Integer, default=0)
    not_marked_count: Mapped[int] = mapped_column(Integer, default=0)
    total_working_minutes: Mapped[int] = mapped_column(Integer, default=0)
    total_overtime_minutes: Mapped[int] = mapped_column(Integer, default=0)
    attendance_percentage: Mapped[float] = mapped_column(Float, default=0.0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
