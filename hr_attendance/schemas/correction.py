"""근태 정정 요청 Pydantic 스키마.

Correction request submission, review and response schemas.
"""

from datetime import date, datetime
from pydantic import BaseModel, Field

from hr_attendance.models.enums import CorrectionType, ReviewDecision


class CorrectionCreate(BaseModel):
    """정정 요청 생성 스키마.

    Employee correction request for their own day. At least one requested
    time must be present.

    Attributes:
        work_date: 정정 대상일 (Date to correct)
        request_type: 요청 유형 (missed_check_in|missed_check_out|wrong_time|forgot_punch)
        requested_check_in: 요청 출근 시각 (Requested check-in, optional)
        requested_check_out: 요청 퇴근 시각 (Requested check-out, optional)
        reason: 사유 (Reason, required)
    """

    work_date: date
    request_type: CorrectionType
    requested_check_in: datetime | None = None
    requested_check_out: datetime | None = None
    reason: str = Field(..., min_length=1)


class CorrectionReview(BaseModel):
    """정정 요청 검토 스키마 — 반려 시 메모 필수.

    Review decision; ``review_notes`` is required when rejecting.
    """

    decision: ReviewDecision
    review_notes: str | None = None


class CorrectionResponse(BaseModel):
    id: str
    employee_id: str
    attendance_id: str | None
    work_date: date
    request_type: str
    original_check_in: datetime | None  # 요청 시점 스냅샷 (Snapshot at request time)
    original_check_out: datetime | None
    requested_check_in: datetime | None
    requested_check_out: datetime | None
    reason: str
    status: str  # pending|approved|rejected
    reviewed_by: str | None
    reviewed_at: datetime | None
    review_notes: str | None
    created_at: datetime
