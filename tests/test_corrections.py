"""근태 정정 워크플로우 테스트.

Correction workflow tests — submission rules, department-scoped review,
approval recomputation and the single pending → terminal transition.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from hr_attendance.models.enums import AttendanceStatus, CorrectionStatus, CorrectionType, ReviewDecision
from hr_attendance.repositories.attendance_repository import attendance_repository
from hr_attendance.services.attendance_service import attendance_service
from hr_attendance.services.correction_service import correction_service
from hr_attendance.services.notification_service import notification_service
from hr_attendance.utils.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
)
from hr_attendance.utils.timeutils import ensure_utc

from tests.conftest import WORK_DATE, context_for


def at(hour: int, minute: int = 0, day: date = WORK_DATE) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc)


async def late_day(db, employee_auth, employee):
    """09:20 출근, 18:00 퇴근한 지각 기록을 만듭니다."""
    await attendance_service.check_in(db, employee_auth, employee.id, at(9, 20))
    await attendance_service.check_out(db, employee_auth, employee.id, at(18, 0))


class TestRequestCorrection:
    """정정 요청 생성 테스트."""

    async def test_request_snapshots_current_times(self, db, employee_on_shift, employee_auth, manager_user):
        await late_day(db, employee_auth, employee_on_shift)
        request = await correction_service.request_correction(
            db, employee_auth, WORK_DATE, CorrectionType.WRONG_TIME, "Traffic", at(9, 0)
        )
        assert request.status == CorrectionStatus.PENDING
        assert request.attendance_id is not None
        assert ensure_utc(request.original_check_in) == at(9, 20)
        assert ensure_utc(request.original_check_out) == at(18, 0)
        notifications, _ = await notification_service.list_notifications(db, manager_user.id)
        assert "correction_requested" in [n.type for n in notifications]

    async def test_requires_a_requested_time(self, db, employee_on_shift, employee_auth):
        with pytest.raises(BadRequestError):
            await correction_service.request_correction(
                db, employee_auth, WORK_DATE, CorrectionType.FORGOT_PUNCH, "Forgot"
            )

    async def test_rejects_inverted_times(self, db, employee_on_shift, employee_auth):
        with pytest.raises(BadRequestError):
            await correction_service.request_correction(
                db, employee_auth, WORK_DATE, CorrectionType.WRONG_TIME, "Oops", at(18, 0), at(9, 0)
            )

    async def test_rejects_future_date(self, db, employee_on_shift, employee_auth):
        future = date.today() + timedelta(days=30)
        with pytest.raises(BadRequestError):
            await correction_service.request_correction(
                db, employee_auth, future, CorrectionType.MISSED_CHECK_IN, "Later", at(9, 0, future)
            )

    async def test_rejects_blank_reason(self, db, employee_on_shift, employee_auth):
        with pytest.raises(BadRequestError):
            await correction_service.request_correction(
                db, employee_auth, WORK_DATE, CorrectionType.MISSED_CHECK_IN, "   ", at(9, 0)
            )

    async def test_one_pending_request_per_day(self, db, employee_on_shift, employee_auth):
        await correction_service.request_correction(
            db, employee_auth, WORK_DATE, CorrectionType.MISSED_CHECK_IN, "First", at(9, 0)
        )
        with pytest.raises(ConflictError):
            await correction_service.request_correction(
                db, employee_auth, WORK_DATE, CorrectionType.MISSED_CHECK_IN, "Second", at(9, 1)
            )


class TestReviewCorrection:
    """정정 요청 검토 테스트."""

    async def test_approve_recomputes_record(self, db, employee_on_shift, employee_auth, manager_auth):
        """승인 시 요청 시각으로 지각이 해소됨."""
        await late_day(db, employee_auth, employee_on_shift)
        request = await correction_service.request_correction(
            db, employee_auth, WORK_DATE, CorrectionType.WRONG_TIME, "Badge reader lag", at(9, 0)
        )

        reviewed = await correction_service.review_correction(
            db, manager_auth, request.id, ReviewDecision.APPROVE
        )
        assert reviewed.status == CorrectionStatus.APPROVED
        assert reviewed.reviewed_by == manager_auth.actor_id

        record = await attendance_repository.get_for_day(db, employee_on_shift.id, WORK_DATE)
        assert ensure_utc(record.check_in) == at(9, 0)
        assert ensure_utc(record.check_out) == at(18, 0)
        assert record.is_late is False
        assert record.working_minutes == 480
        assert record.status == AttendanceStatus.PRESENT
        assert record.approved_by == manager_auth.actor_id
        assert await notification_service.get_unread_count(db, employee_on_shift.id) == 1

    async def test_approve_creates_missing_record(self, db, employee_on_shift, employee_auth, manager_auth):
        request = await correction_service.request_correction(
            db, employee_auth, WORK_DATE, CorrectionType.FORGOT_PUNCH, "Forgot both", at(9, 0), at(18, 0)
        )
        assert request.attendance_id is None

        reviewed = await correction_service.review_correction(db, manager_auth, request.id, ReviewDecision.APPROVE)
        record = await attendance_repository.get_for_day(db, employee_on_shift.id, WORK_DATE)
        assert record is not None
        assert reviewed.attendance_id == record.id
        assert record.status == AttendanceStatus.PRESENT

    async def test_reject_requires_notes(self, db, employee_on_shift, employee_auth, manager_auth):
        request = await correction_service.request_correction(
            db, employee_auth, WORK_DATE, CorrectionType.MISSED_CHECK_IN, "Missed", at(9, 0)
        )
        with pytest.raises(BadRequestError):
            await correction_service.review_correction(db, manager_auth, request.id, ReviewDecision.REJECT)

        reviewed = await correction_service.review_correction(
            db, manager_auth, request.id, ReviewDecision.REJECT, "No evidence"
        )
        assert reviewed.status == CorrectionStatus.REJECTED
        assert reviewed.review_notes == "No evidence"
        assert await attendance_repository.get_for_day(db, employee_on_shift.id, WORK_DATE) is None

    async def test_second_review_is_invalid(self, db, employee_on_shift, employee_auth, manager_auth):
        request = await correction_service.request_correction(
            db, employee_auth, WORK_DATE, CorrectionType.MISSED_CHECK_IN, "Missed", at(9, 0)
        )
        await correction_service.review_correction(db, manager_auth, request.id, ReviewDecision.APPROVE)
        with pytest.raises(InvalidStateError):
            await correction_service.review_correction(db, manager_auth, request.id, ReviewDecision.REJECT, "late")
        # 메모 없는 반려도 상태 충돌이 우선 (Terminal state wins over missing notes)
        with pytest.raises(InvalidStateError):
            await correction_service.review_correction(db, manager_auth, request.id, ReviewDecision.REJECT)
        with pytest.raises(InvalidStateError):
            await correction_service.review_correction(db, manager_auth, request.id, ReviewDecision.APPROVE)

    async def test_reviewer_must_share_department(
        self, db, employee_on_shift, employee_auth, outside_employee
    ):
        """다른 부서 소속이면 관리자라도 검토 불가."""
        request = await correction_service.request_correction(
            db, employee_auth, WORK_DATE, CorrectionType.MISSED_CHECK_IN, "Missed", at(9, 0)
        )
        foreign_admin = context_for(outside_employee, "admin", 1)
        with pytest.raises(ForbiddenError):
            await correction_service.review_correction(db, foreign_admin, request.id, ReviewDecision.APPROVE)

    async def test_employee_cannot_review(self, db, employee_on_shift, employee_auth, second_employee):
        request = await correction_service.request_correction(
            db, employee_auth, WORK_DATE, CorrectionType.MISSED_CHECK_IN, "Missed", at(9, 0)
        )
        peer = context_for(second_employee, "employee", 3)
        with pytest.raises(ForbiddenError):
            await correction_service.review_correction(db, peer, request.id, ReviewDecision.APPROVE)

    async def test_unknown_request(self, db, manager_auth):
        from uuid import uuid4
        with pytest.raises(NotFoundError):
            await correction_service.review_correction(db, manager_auth, uuid4(), ReviewDecision.APPROVE)
