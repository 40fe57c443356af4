"""알림 수신함 테스트.

Notification inbox tests — filters, read marking, and the fan-out rows
kept per source correction request.
"""

from datetime import datetime, timezone
from uuid import uuid4

from httpx import AsyncClient

from hr_attendance.models.enums import CorrectionType
from hr_attendance.services.correction_service import correction_service
from hr_attendance.services.notification_service import notification_service

from tests.conftest import WORK_DATE, auth_header


async def fill_inbox(db, user_id) -> None:
    await notification_service.notify(db, [user_id], "attendance_alert", "Late arrival")
    await notification_service.notify(db, [user_id], "correction_approved", "Approved")
    await notification_service.notify(db, [user_id], "attendance_alert", "Early departure")


class TestInbox:
    """수신함 조회/읽음 처리 테스트."""

    async def test_filters_by_type_and_unread(self, db, employee_user):
        await fill_inbox(db, employee_user.id)

        alerts, total = await notification_service.list_notifications(
            db, employee_user.id, notification_type="attendance_alert"
        )
        assert total == 2
        assert {n.message for n in alerts} == {"Late arrival", "Early departure"}

        assert await notification_service.mark_read(db, alerts[0].id, employee_user.id) is True
        unread, unread_total = await notification_service.list_notifications(db, employee_user.id, unread_only=True)
        assert unread_total == 2
        assert alerts[0].id not in {n.id for n in unread}
        assert await notification_service.get_unread_count(db, employee_user.id) == 2

    async def test_mark_read_is_idempotent_and_owner_only(self, db, employee_user, second_employee):
        await notification_service.notify(db, [employee_user.id], "attendance_alert", "Late arrival")
        [notification], _ = await notification_service.list_notifications(db, employee_user.id)

        assert await notification_service.mark_read(db, notification.id, employee_user.id) is True
        assert await notification_service.mark_read(db, notification.id, employee_user.id) is True
        assert await notification_service.mark_read(db, notification.id, second_employee.id) is False
        assert await notification_service.mark_read(db, uuid4(), employee_user.id) is False

    async def test_mark_all_read_counts_only_unread(self, db, employee_user, second_employee):
        await fill_inbox(db, employee_user.id)
        await notification_service.notify(db, [second_employee.id], "attendance_alert", "Not yours")
        [first, *_], _ = await notification_service.list_notifications(db, employee_user.id)
        await notification_service.mark_read(db, first.id, employee_user.id)

        assert await notification_service.mark_all_read(db, employee_user.id) == 2
        assert await notification_service.mark_all_read(db, employee_user.id) == 0
        assert await notification_service.get_unread_count(db, second_employee.id) == 1


class TestReferenceFanOut:
    """원본 엔티티 기준 알림 조회 테스트."""

    async def test_correction_request_fans_out_to_managers(
        self, db, employee_on_shift, employee_auth, manager_user
    ):
        request = await correction_service.request_correction(
            db,
            employee_auth,
            WORK_DATE,
            CorrectionType.MISSED_CHECK_IN,
            "Badge reader down",
            datetime(2025, 3, 3, 9, 0, tzinfo=timezone.utc),
        )

        sent = await notification_service.list_for_reference(db, "correction_request", request.id)
        assert manager_user.id in {n.user_id for n in sent}
        assert employee_on_shift.id not in {n.user_id for n in sent}
        assert {n.type for n in sent} == {"correction_requested"}


class TestInboxApi:
    """수신함 API 테스트."""

    async def test_unread_filter_over_http(self, client: AsyncClient, db, employee_user, employee_token: str):
        await fill_inbox(db, employee_user.id)
        headers = auth_header(employee_token)

        response = await client.get(
            "/api/v1/app/my/notifications",
            params={"notification_type": "correction_approved"},
            headers=headers,
        )
        assert response.status_code == 200
        [item] = response.json()["items"]

        marked = await client.patch(f"/api/v1/app/my/notifications/{item['id']}/read", headers=headers)
        assert marked.status_code == 200

        unread = await client.get("/api/v1/app/my/notifications", params={"unread_only": True}, headers=headers)
        assert unread.json()["total"] == 2
