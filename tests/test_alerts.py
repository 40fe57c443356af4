"""근태 경고 테스트.

Alert tests — manager notification, department-scoped listing, resolution
and best-effort persistence.
"""

from datetime import date, datetime, timezone

import pytest

from hr_attendance.models.enums import AlertType
from hr_attendance.repositories.alert_repository import alert_repository
from hr_attendance.services.alert_service import alert_service, severity_for_minutes
from hr_attendance.services.attendance_service import attendance_service
from hr_attendance.services.notification_service import notification_service
from hr_attendance.utils.exceptions import ForbiddenError, InvalidStateError

from tests.conftest import WORK_DATE, assign, context_for


def at(hour: int, minute: int = 0, day: date = WORK_DATE) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc)


async def late_arrival(db, employee):
    auth = context_for(employee, "employee", 3)
    return await attendance_service.check_in(db, auth, employee.id, at(9, 40))


def test_severity_threshold():
    assert severity_for_minutes(30).value == "medium"
    assert severity_for_minutes(31).value == "high"


class TestAlertDelivery:
    """경고 알림 전송 테스트."""

    async def test_department_managers_are_notified(self, db, employee_on_shift, manager_user, admin_user):
        await late_arrival(db, employee_on_shift)

        for manager in (manager_user, admin_user):
            notifications, total = await notification_service.list_notifications(db, manager.id)
            assert total == 1
            assert notifications[0].type == "attendance_alert"
            assert "Test Employee" in notifications[0].message
        assert await notification_service.get_unread_count(db, employee_on_shift.id) == 0

    async def test_persistence_failure_does_not_block_check_in(self, db, employee_on_shift, monkeypatch):
        async def _boom(*args, **kwargs):
            raise RuntimeError("alert store unavailable")

        monkeypatch.setattr(alert_repository, "create", _boom)
        result = await late_arrival(db, employee_on_shift)
        assert result.is_late is True
        assert result.record.check_in is not None


class TestAlertManagement:
    """경고 조회/처리 테스트."""

    async def test_manager_lists_own_department(
        self, db, employee_on_shift, outside_employee, day_shift, manager_auth, admin_auth
    ):
        await assign(db, outside_employee, day_shift)
        await late_arrival(db, employee_on_shift)
        await late_arrival(db, outside_employee)

        items, total = await alert_service.list_alerts(db, manager_auth)
        assert total == 1
        assert items[0].user_id == employee_on_shift.id

        _, admin_total = await alert_service.list_alerts(db, admin_auth, alert_type=AlertType.LATE_ARRIVAL)
        assert admin_total == 2

    async def test_employee_cannot_list(self, db, employee_auth):
        with pytest.raises(ForbiddenError):
            await alert_service.list_alerts(db, employee_auth)

    async def test_resolve_once(self, db, employee_on_shift, manager_auth):
        await late_arrival(db, employee_on_shift)
        [alert], _ = await alert_service.list_alerts(db, manager_auth)

        resolved = await alert_service.resolve_alert(db, manager_auth, alert.id)
        assert resolved.is_resolved is True
        assert resolved.resolved_by == manager_auth.actor_id

        with pytest.raises(InvalidStateError):
            await alert_service.resolve_alert(db, manager_auth, alert.id)

        unresolved, total = await alert_service.list_alerts(db, manager_auth, is_resolved=False)
        assert total == 0

    async def test_foreign_manager_cannot_resolve(self, db, outside_employee, day_shift, manager_auth):
        await assign(db, outside_employee, day_shift)
        await late_arrival(db, outside_employee)
        [alert], _ = await alert_repository.get_by_filters(db, user_id=outside_employee.id)
        with pytest.raises(ForbiddenError):
            await alert_service.resolve_alert(db, manager_auth, alert.id)
