"""근태 관리 관련 SQLAlchemy ORM 모델 정의.

Attendance management SQLAlchemy ORM model definitions.
Includes the per-employee-per-day attendance record, the location log
written on each check-in/out, employee correction requests, and the
append-only alerts derived from record mutations.

Tables:
    - attendance_records: 일별 근태 기록 (Daily attendance records per employee)
    - attendance_location_logs: 출퇴근 위치 로그 (Check-in/out location log)
    - correction_requests: 근태 정정 요청 (Employee correction requests)
    - attendance_alerts: 근태 경고 (Derived attendance alerts)
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from hr_attendance.database import Base
from hr_attendance.models.enums import (
    AlertSeverity,
    AlertType,
    AttendanceStatus,
    CorrectionStatus,
    CorrectionType,
    LocationLogType,
)


def _enum_column(enum_cls: type) -> Enum:
    """값(value)을 저장하는 비네이티브 Enum 컬럼 타입 (Non-native enum storing values)."""
    return Enum(
        enum_cls,
        native_enum=False,
        length=30,
        values_callable=lambda members: [m.value for m in members],
    )


class AttendanceRecord(Base):
    """근태 기록 모델 — 직원별 일별 출퇴근 기록.

    Attendance record model — One row per employee per calendar date.

    Lifecycle: NotMarked → CheckedIn → CheckedOut, with administrative
    side-states Absent and OnLeave. ``status`` is always the output of the
    time computation engine except for those two overrides.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 직원 FK (Employee)
        work_date: 근무일 (Local calendar date)
        shift_id: 적용된 시프트 FK (Shift policy applied, None without assignment)
        check_in: 출근 시각 UTC (Check-in instant)
        check_out: 퇴근 시각 UTC (Check-out instant, after check_in)
        working_minutes: 실 근무 시간(분) (Worked minutes net of break, never negative)
        break_minutes: 휴게 시간(분) (Break minutes deducted)
        overtime_minutes: 초과근무(분) (Overtime minutes)
        status: 근태 상태 (Closed status enum)
        is_late / late_minutes: 지각 여부와 분 (Lateness)
        is_early_departure / early_departure_minutes: 조퇴 여부와 분 (Early departure)
        location: 위치 설명 (Free-text location)
        latitude / longitude: 출근 좌표 (Check-in coordinates)
        geofence_id: 판정된 지오펜스 FK (Nearest matching geofence)
        is_within_geofence: 지오펜스 내부 여부 (None when not classified)
        notes: 메모 (Notes)
        is_manual_entry: 수기 입력 여부 (Entered by an administrator)
        approved_by / approved_at: 승인자와 승인 시각 (Authorizing actor and time)

    Constraints:
        uq_attendance_user_date: 동일 직원+날짜 중복 불가 (One record per employee per day)
        ck_attendance_checkout_after_checkin: 퇴근은 출근 이후 (check_out > check_in)
    """

    __tablename__ = "attendance_records"

    # 근태 고유 식별자 — Attendance unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 직원 FK — Employee (CASCADE: 사용자 삭제 시 기록도 삭제)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    # 근무일 — Local calendar date of attendance
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    # 적용 시프트 FK — Shift policy applied at computation time
    shift_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("shift_policies.id", ondelete="SET NULL"), nullable=True)
    # 출퇴근 시각 — Check-in/out instants (UTC)
    check_in: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    check_out: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # 계산 결과(분) — Computed minutes
    working_minutes: Mapped[int] = mapped_column(Integer, default=0)
    break_minutes: Mapped[int] = mapped_column(Integer, default=0)
    overtime_minutes: Mapped[int] = mapped_column(Integer, default=0)
    # 상태 — Closed status enum
    status: Mapped[AttendanceStatus] = mapped_column(_enum_column(AttendanceStatus), default=AttendanceStatus.PRESENT)
    # 지각 — Lateness
    is_late: Mapped[bool] = mapped_column(Boolean, default=False)
    late_minutes: Mapped[int] = mapped_column(Integer, default=0)
    # 조퇴 — Early departure
    is_early_departure: Mapped[bool] = mapped_column(Boolean, default=False)
    early_departure_minutes: Mapped[int] = mapped_column(Integer, default=0)
    # 위치 — Location annotation
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    geofence_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("geofence_locations.id", ondelete="SET NULL"), nullable=True)
    is_within_geofence: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    # 메모 — Notes (reasons, geofence flags)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 수기 입력 — Manual entry flag and authorizing actor
    is_manual_entry: Mapped[bool] = mapped_column(Boolean, default=False)
    approved_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("user_id", "work_date", name="uq_attendance_user_date"),
        CheckConstraint(
            "check_out IS NULL OR check_in IS NULL OR check_out > check_in",
            name="ck_attendance_checkout_after_checkin",
        ),
        CheckConstraint("working_minutes >= 0", name="ck_attendance_working_minutes"),
    )


class AttendanceLocationLog(Base):
    """출퇴근 위치 로그 모델 — 체크인/체크아웃마다 한 행.

    Location log model — One row per check-in or check-out that carried
    coordinates, with the geofence classification at that moment.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        attendance_id: 근태 기록 FK (Attendance record)
        user_id: 직원 FK (Employee)
        log_type: 로그 유형 (check_in | check_out)
        latitude / longitude: 좌표 (Coordinates)
        geofence_id: 가장 가까운 지오펜스 FK (Nearest geofence)
        distance_meters: 지오펜스 중심까지 거리 (Distance to that geofence centre)
        is_within_geofence: 내부 여부 (Inside flag)
        logged_at: 기록 시각 UTC (Event instant)
    """

    __tablename__ = "attendance_location_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    attendance_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("attendance_records.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    log_type: Mapped[LocationLogType] = mapped_column(_enum_column(LocationLogType), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    geofence_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("geofence_locations.id", ondelete="SET NULL"), nullable=True)
    distance_meters: Mapped[float | None] = mapped_column(Float, nullable=True)
    is_within_geofence: Mapped[bool] = mapped_column(Boolean, default=False)
    logged_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class CorrectionRequest(Base):
    """근태 정정 요청 모델 — 직원이 제출하는 출퇴근 시각 정정 요청.

    Correction request model — Employee-initiated appeal to amend a day's
    check-in/out times. Transitions exactly once from pending to approved or rejected.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 요청 직원 FK (Requesting employee)
        attendance_id: 근태 기록 FK (Existing record, None if none existed)
        work_date: 정정 대상일 (Date being corrected)
        request_type: 요청 유형 (Correction type)
        original_check_in / original_check_out: 요청 시점 스냅샷 (Snapshot at request time)
        requested_check_in / requested_check_out: 요청 값 (Requested values)
        reason: 사유 (Employee reason)
        status: 상태 (pending | approved | rejected)
        reviewed_by / reviewed_at / review_notes: 검토 정보 (Review data)
    """

    __tablename__ = "correction_requests"

    # 요청 고유 식별자 — Request unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 요청 직원 FK — Requesting employee
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # 근태 기록 FK — Linked record (승인 시 생성될 수 있음, may be created on approval)
    attendance_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("attendance_records.id", ondelete="SET NULL"), nullable=True)
    # 정정 대상일 — Date being corrected
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    # 요청 유형 — Correction type
    request_type: Mapped[CorrectionType] = mapped_column(_enum_column(CorrectionType), nullable=False)
    # 원본 스냅샷 — Original times captured at request time
    original_check_in: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    original_check_out: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # 요청 값 — Requested times
    requested_check_in: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    requested_check_out: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # 사유 — Employee reason
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    # 상태 — pending → approved | rejected
    status: Mapped[CorrectionStatus] = mapped_column(_enum_column(CorrectionStatus), default=CorrectionStatus.PENDING)
    # 검토 정보 — Review data
    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    review_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))


class AttendanceAlert(Base):
    """근태 경고 모델 — 기록 변경에서 파생된 관찰 (추가 전용).

    Attendance alert model — Append-only observation derived from a record
    mutation. Alerts never alter the attendance record that produced them.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 대상 직원 FK (Employee)
        attendance_id: 근태 기록 FK (Triggering record, optional)
        alert_type: 경고 유형 (late_arrival | early_departure | continuous_absence)
        severity: 심각도 (medium | high)
        message: 메시지 (Human-readable message)
        alert_date: 대상일 (Date the alert refers to)
        is_resolved: 처리 여부 (Resolved by an administrator)
        resolved_by / resolved_at: 처리자와 처리 시각 (Resolution data)
    """

    __tablename__ = "attendance_alerts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    attendance_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("attendance_records.id", ondelete="SET NULL"), nullable=True)
    alert_type: Mapped[AlertType] = mapped_column(_enum_column(AlertType), nullable=False)
    severity: Mapped[AlertSeverity] = mapped_column(_enum_column(AlertSeverity), nullable=False)
    message: Mapped[str] = mapped_column(String(1000), nullable=False)
    alert_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_resolved: Mapped[bool] = mapped_column(Boolean, default=False)
    resolved_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
