"""근태 정정 서비스 — 직원 정정 요청과 매니저 검토 워크플로우.

Correction Service — Employee correction requests and their review.

A request moves from pending to approved or rejected exactly once. The
transition is a conditional UPDATE on the pending status, so two reviewers
racing on the same request cannot both succeed. Approval rewrites the
attendance record through the same computation path as a live check-out,
using the shift in effect on the corrected date.
"""

import logging
from datetime import date, datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hr_attendance.models.attendance import AttendanceRecord, CorrectionRequest
from hr_attendance.models.enums import CorrectionStatus, CorrectionType, ReviewDecision
from hr_attendance.models.user import User
from hr_attendance.repositories.attendance_repository import attendance_repository
from hr_attendance.repositories.correction_repository import correction_repository
from hr_attendance.repositories.user_repository import user_repository
from hr_attendance.services.alert_service import alert_service
from hr_attendance.services.attendance_service import attendance_service
from hr_attendance.services.notification_service import notification_service
from hr_attendance.utils.auth_context import AuthContext
from hr_attendance.utils.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
)
from hr_attendance.utils.timeutils import ensure_utc, local_date, now_utc

logger = logging.getLogger(__name__)


class CorrectionService:
    """근태 정정 서비스.

    Correction request service: submission by employees, department-scoped
    review by managers, and request queries.
    """

    # === 요청 (Submission) ===

    async def request_correction(
        self,
        db: AsyncSession,
        auth: AuthContext,
        work_date: date,
        request_type: CorrectionType,
        reason: str,
        requested_check_in: datetime | None = None,
        requested_check_out: datetime | None = None,
    ) -> CorrectionRequest:
        """본인의 근태 정정 요청을 생성합니다.

        Submit a correction request for the caller's own day. The current
        record times are snapshotted onto the request.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            auth: 요청자 컨텍스트 (Caller context; the requesting employee)
            work_date: 정정 대상일 (Date to correct)
            request_type: 요청 유형 (Correction type)
            reason: 사유 (Reason, required)
            requested_check_in: 요청 출근 시각, 선택 (Requested check-in)
            requested_check_out: 요청 퇴근 시각, 선택 (Requested check-out)

        Returns:
            CorrectionRequest: 생성된 요청 (Created pending request)

        Raises:
            BadRequestError: 요청 시각 없음, 잘못된 순서, 미래 날짜, 빈 사유
                             (No requested time, bad order, future date, empty reason)
            ConflictError: 같은 날 대기 중 요청 존재 (Pending request exists for the day)
        """
        if not reason or not reason.strip():
            raise BadRequestError("사유를 입력해야 합니다 (Reason is required)")
        if requested_check_in is None and requested_check_out is None:
            raise BadRequestError(
                "요청 출근 또는 퇴근 시각이 필요합니다 (At least one requested time is required)"
            )
        if requested_check_in is not None:
            requested_check_in = ensure_utc(requested_check_in)
        if requested_check_out is not None:
            requested_check_out = ensure_utc(requested_check_out)
        if (
            requested_check_in is not None
            and requested_check_out is not None
            and requested_check_out <= requested_check_in
        ):
            raise BadRequestError("퇴근은 출근 이후여야 합니다 (Check-out must be after check-in)")
        if work_date > local_date(now_utc()):
            raise BadRequestError("미래 날짜는 정정할 수 없습니다 (Cannot correct a future date)")

        if await correction_repository.get_pending_for_day(db, auth.actor_id, work_date) is not None:
            raise ConflictError(
                "해당 날짜에 대기 중인 정정 요청이 있습니다 (A pending request already exists for this date)"
            )

        record: AttendanceRecord | None = await attendance_repository.get_for_day(db, auth.actor_id, work_date)
        request: CorrectionRequest = await correction_repository.create(
            db,
            {
                "user_id": auth.actor_id,
                "attendance_id": record.id if record else None,
                "work_date": work_date,
                "request_type": request_type,
                "original_check_in": record.check_in if record else None,
                "original_check_out": record.check_out if record else None,
                "requested_check_in": requested_check_in,
                "requested_check_out": requested_check_out,
                "reason": reason.strip(),
                "status": CorrectionStatus.PENDING,
            },
        )

        requester: User | None = await user_repository.get_by_id(db, auth.actor_id)
        if requester is not None:
            managers: Sequence[User] = await user_repository.get_department_managers(db, requester.department_id)
            await notification_service.notify(
                db,
                [manager.id for manager in managers if manager.id != auth.actor_id],
                notification_type="correction_requested",
                message=f"{requester.full_name} requested an attendance correction for {work_date.isoformat()}",
                reference_type="correction_request",
                reference_id=request.id,
            )
        return request

    # === 검토 (Review) ===

    async def review_correction(
        self,
        db: AsyncSession,
        auth: AuthContext,
        request_id: UUID,
        decision: ReviewDecision,
        review_notes: str | None = None,
    ) -> CorrectionRequest:
        """정정 요청을 승인 또는 반려합니다.

        Approve or reject a pending request. The reviewer must be a manager or
        admin in the requester's department. Approval recomputes the record.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            auth: 검토자 컨텍스트 (Reviewer context)
            request_id: 요청 UUID (Request UUID)
            decision: 승인/반려 (approve | reject)
            review_notes: 검토 메모, 반려 시 필수 (Notes, required on reject)

        Returns:
            CorrectionRequest: 종결된 요청 (Request in its terminal state)

        Raises:
            NotFoundError: 요청 없음 (Unknown request)
            ForbiddenError: 권한 없음 또는 다른 부서 (Not a manager of the requester's department)
            BadRequestError: 반려 사유 없음, 적용할 시각 없음 (Missing notes or no usable times)
            InvalidStateError: 이미 처리된 요청 (Request already reviewed)
        """
        request: CorrectionRequest | None = await correction_repository.get_by_id(db, request_id)
        if request is None:
            raise NotFoundError("정정 요청을 찾을 수 없습니다 (Correction request not found)")

        auth.require_manager()
        requester: User | None = await user_repository.get_by_id(db, request.user_id)
        if requester is None or auth.department_id is None or requester.department_id != auth.department_id:
            raise ForbiddenError(
                "같은 부서의 요청만 검토할 수 있습니다 (Can only review requests from your own department)"
            )

        if request.status != CorrectionStatus.PENDING:
            raise InvalidStateError(
                f"이미 처리된 요청입니다 (Request is already {request.status.value})"
            )

        notes: str | None = review_notes.strip() if review_notes else None
        if decision == ReviewDecision.REJECT and not notes:
            raise BadRequestError("반려 시 검토 메모가 필요합니다 (Review notes are required to reject)")

        if decision == ReviewDecision.APPROVE:
            return await self._approve(db, auth, request, requester, notes)
        return await self._reject(db, auth, request, requester, notes)

    async def _approve(
        self,
        db: AsyncSession,
        auth: AuthContext,
        request: CorrectionRequest,
        requester: User,
        notes: str | None,
    ) -> CorrectionRequest:
        reviewed_at: datetime = now_utc()

        async with attendance_service.hold_day(request.user_id, request.work_date):
            record: AttendanceRecord | None = await attendance_repository.get_for_day(
                db, request.user_id, request.work_date
            )
            check_in: datetime | None = request.requested_check_in or (record.check_in if record else None)
            check_out: datetime | None = request.requested_check_out or (record.check_out if record else None)
            if check_in is None:
                raise BadRequestError(
                    "적용할 출근 시각이 없습니다 (No check-in time available to apply)"
                )
            if check_out is not None and ensure_utc(check_out) <= ensure_utc(check_in):
                raise BadRequestError("퇴근은 출근 이후여야 합니다 (Check-out must be after check-in)")

            if not await correction_repository.transition(
                db, request.id, CorrectionStatus.APPROVED, auth.actor_id, reviewed_at, notes
            ):
                raise InvalidStateError("이미 처리된 요청입니다 (Request was already reviewed)")

            record = await attendance_service.apply_times(
                db,
                request.user_id,
                request.work_date,
                check_in,
                check_out,
                {"approved_by": auth.actor_id, "approved_at": reviewed_at},
            )
            if request.attendance_id is None:
                await correction_repository.link_attendance(db, request.id, record.id)

        logger.info("Correction %s approved by %s", request.id, auth.actor_id)
        if record.check_out is not None:
            await alert_service.on_check_out(db, record)

        await db.refresh(request)
        await notification_service.notify(
            db,
            [requester.id],
            notification_type="correction_approved",
            message=f"Your attendance correction for {request.work_date.isoformat()} was approved",
            reference_type="correction_request",
            reference_id=request.id,
        )
        return request

    async def _reject(
        self,
        db: AsyncSession,
        auth: AuthContext,
        request: CorrectionRequest,
        requester: User,
        notes: str | None,
    ) -> CorrectionRequest:
        if not await correction_repository.transition(
            db, request.id, CorrectionStatus.REJECTED, auth.actor_id, now_utc(), notes
        ):
            raise InvalidStateError("이미 처리된 요청입니다 (Request was already reviewed)")

        logger.info("Correction %s rejected by %s", request.id, auth.actor_id)
        await db.refresh(request)
        await notification_service.notify(
            db,
            [requester.id],
            notification_type="correction_rejected",
            message=f"Your attendance correction for {request.work_date.isoformat()} was rejected: {notes}",
            reference_type="correction_request",
            reference_id=request.id,
        )
        return request

    # === 조회 (Queries) ===

    async def list_own_requests(
        self,
        db: AsyncSession,
        auth: AuthContext,
        status: CorrectionStatus | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[CorrectionRequest], int]:
        """본인의 정정 요청 목록 (Caller's own requests)."""
        return await correction_repository.get_by_filters(
            db, user_id=auth.actor_id, status=status, page=page, per_page=per_page
        )

    async def list_requests(
        self,
        db: AsyncSession,
        auth: AuthContext,
        employee_id: UUID | None = None,
        status: CorrectionStatus | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[CorrectionRequest], int]:
        """검토용 정정 요청 목록 — 매니저는 자기 부서만.

        List requests for review. Admins see every department, managers their own.
        """
        auth.require_manager()
        department_id: UUID | None = None
        if not auth.is_admin:
            if auth.department_id is None:
                raise ForbiddenError("부서가 지정되지 않았습니다 (Manager has no department)")
            department_id = auth.department_id
        return await correction_repository.get_by_filters(
            db, user_id=employee_id, department_id=department_id, status=status, page=page, per_page=per_page
        )

    async def get_request(self, db: AsyncSession, auth: AuthContext, request_id: UUID) -> CorrectionRequest:
        """정정 요청 단건 조회 (Single request, visible to its owner or a permitted reviewer)."""
        request: CorrectionRequest | None = await correction_repository.get_by_id(db, request_id)
        if request is None:
            raise NotFoundError("정정 요청을 찾을 수 없습니다 (Correction request not found)")
        if request.user_id != auth.actor_id:
            requester: User | None = await user_repository.get_by_id(db, request.user_id)
            if not auth.can_view_department(requester.department_id if requester else None):
                raise ForbiddenError("이 요청을 볼 권한이 없습니다 (Cannot view this request)")
        return request

    def build_response(self, request: CorrectionRequest) -> dict:
        """정정 요청 응답 딕셔너리를 구성합니다 (Build a correction request response dict)."""

        def _utc(value: datetime | None) -> datetime | None:
            return ensure_utc(value) if value is not None else None

        return {
            "id": str(request.id),
            "employee_id": str(request.user_id),
            "attendance_id": str(request.attendance_id) if request.attendance_id else None,
            "work_date": request.work_date,
            "request_type": request.request_type.value,
            "original_check_in": _utc(request.original_check_in),
            "original_check_out": _utc(request.original_check_out),
            "requested_check_in": _utc(request.requested_check_in),
            "requested_check_out": _utc(request.requested_check_out),
            "reason": request.reason,
            "status": request.status.value,
            "reviewed_by": str(request.reviewed_by) if request.reviewed_by else None,
            "reviewed_at": _utc(request.reviewed_at),
            "review_notes": request.review_notes,
            "created_at": request.created_at,
        }


# 싱글턴 인스턴스 — Singleton instance
correction_service: CorrectionService = CorrectionService()
