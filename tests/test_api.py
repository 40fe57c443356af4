"""HTTP API 통합 테스트.

HTTP API integration tests — authentication, role guards and the main
employee and administrator flows through the FastAPI routers.
"""

from httpx import AsyncClient

from tests.conftest import WORK_DATE, auth_header

ADMIN = "/api/v1/admin"
APP = "/api/v1/app"


class TestAuth:
    """인증/권한 테스트."""

    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    async def test_missing_token(self, client: AsyncClient):
        response = await client.get(f"{APP}/my/attendance/today")
        assert response.status_code in (401, 403)

    async def test_invalid_token(self, client: AsyncClient):
        response = await client.get(f"{APP}/my/attendance/today", headers=auth_header("not-a-jwt"))
        assert response.status_code == 401

    async def test_employee_blocked_from_admin_routes(self, client: AsyncClient, employee_token: str):
        response = await client.get(f"{ADMIN}/attendances", headers=auth_header(employee_token))
        assert response.status_code == 403

    async def test_manager_blocked_from_admin_only_routes(self, client: AsyncClient, manager_token: str):
        response = await client.post(
            f"{ADMIN}/shifts",
            json={"name": "Day", "code": "DAY", "start_time": "09:00:00", "end_time": "18:00:00"},
            headers=auth_header(manager_token),
        )
        assert response.status_code == 403


class TestEmployeeFlow:
    """직원 출퇴근 흐름 테스트."""

    async def test_check_in_then_today_then_duplicate(
        self, client: AsyncClient, employee_on_shift, employee_token: str
    ):
        headers = auth_header(employee_token)

        response = await client.post(f"{APP}/my/attendance/check-in", json={"notes": "hello"}, headers=headers)
        assert response.status_code == 200
        body = response.json()
        assert body["record"]["employee_id"] == str(employee_on_shift.id)
        assert body["record"]["check_in"] is not None
        assert isinstance(body["warnings"], list)

        today = await client.get(f"{APP}/my/attendance/today", headers=headers)
        assert today.status_code == 200
        assert today.json()["id"] == body["record"]["id"]

        duplicate = await client.post(f"{APP}/my/attendance/check-in", json={}, headers=headers)
        assert duplicate.status_code == 409

    async def test_check_out_without_check_in(self, client: AsyncClient, employee_on_shift, employee_token: str):
        response = await client.post(f"{APP}/my/attendance/check-out", json={}, headers=auth_header(employee_token))
        assert response.status_code == 404

    async def test_invalid_coordinates_rejected(self, client: AsyncClient, employee_on_shift, employee_token: str):
        response = await client.post(
            f"{APP}/my/attendance/check-in",
            json={"latitude": 123.0, "longitude": 0.0},
            headers=auth_header(employee_token),
        )
        assert response.status_code == 422

    async def test_correction_round_trip(
        self, client: AsyncClient, employee_on_shift, employee_token: str, manager_token: str
    ):
        """정정 요청 → 매니저 승인 → 기록 반영."""
        created = await client.post(
            f"{APP}/my/corrections",
            json={
                "work_date": WORK_DATE.isoformat(),
                "request_type": "forgot_punch",
                "requested_check_in": "2025-03-03T09:00:00Z",
                "requested_check_out": "2025-03-03T18:00:00Z",
                "reason": "Phone died",
            },
            headers=auth_header(employee_token),
        )
        assert created.status_code == 201
        request_id = created.json()["id"]
        assert created.json()["status"] == "pending"

        reviewed = await client.post(
            f"{ADMIN}/corrections/{request_id}/review",
            json={"decision": "approve"},
            headers=auth_header(manager_token),
        )
        assert reviewed.status_code == 200
        assert reviewed.json()["status"] == "approved"

        history = await client.get(
            f"{APP}/my/attendance/history",
            params={"date_from": WORK_DATE.isoformat(), "date_to": WORK_DATE.isoformat()},
            headers=auth_header(employee_token),
        )
        items = history.json()["items"]
        assert len(items) == 1
        assert items[0]["working_hours"] == "8h 0m"
        assert items[0]["status"] == "present"

        unread = await client.get(f"{APP}/my/notifications/unread-count", headers=auth_header(employee_token))
        assert unread.json() == {"unread_count": 1}


class TestAdminFlow:
    """관리자 흐름 테스트."""

    async def test_shift_lifecycle_and_assignment(self, client: AsyncClient, employee_user, admin_token: str):
        headers = auth_header(admin_token)
        created = await client.post(
            f"{ADMIN}/shifts",
            json={"name": "Night", "code": "NIGHT", "start_time": "22:00:00", "end_time": "06:00:00"},
            headers=headers,
        )
        assert created.status_code == 201
        shift = created.json()
        assert shift["is_night_shift"] is True

        duplicate = await client.post(
            f"{ADMIN}/shifts",
            json={"name": "Night 2", "code": "NIGHT", "start_time": "22:00:00", "end_time": "06:00:00"},
            headers=headers,
        )
        assert duplicate.status_code == 409

        assigned = await client.post(
            f"{ADMIN}/shift-assignments",
            json={"employee_id": str(employee_user.id), "shift_id": shift["id"], "effective_from": "2025-01-01"},
            headers=headers,
        )
        assert assigned.status_code == 201

        deactivated = await client.delete(f"{ADMIN}/shifts/{shift['id']}", headers=headers)
        assert deactivated.json()["is_active"] is False

    async def test_manual_entry_and_export(self, client: AsyncClient, employee_on_shift, admin_token: str):
        headers = auth_header(admin_token)
        entry = await client.post(
            f"{ADMIN}/attendances/manual-entry",
            json={
                "employee_id": str(employee_on_shift.id),
                "work_date": WORK_DATE.isoformat(),
                "check_in": "2025-03-03T09:20:00Z",
                "check_out": "2025-03-03T18:00:00Z",
            },
            headers=headers,
        )
        assert entry.status_code == 200
        assert entry.json()["status"] == "late"
        assert entry.json()["is_manual_entry"] is True

        exported = await client.get(
            f"{ADMIN}/export",
            params={"start_date": WORK_DATE.isoformat(), "end_date": WORK_DATE.isoformat()},
            headers=headers,
        )
        assert exported.status_code == 200
        [row] = exported.json()
        assert row["check_in"] == "09:20"
        assert row["late_minutes"] == 5

    async def test_bulk_mark_absent_partial_failure(
        self, client: AsyncClient, employee_on_shift, second_employee, admin_token: str
    ):
        headers = auth_header(admin_token)
        await client.post(
            f"{ADMIN}/attendances/manual-entry",
            json={
                "employee_id": str(employee_on_shift.id),
                "work_date": WORK_DATE.isoformat(),
                "check_in": "2025-03-03T09:00:00Z",
            },
            headers=headers,
        )
        response = await client.post(
            f"{ADMIN}/attendances/bulk-mark-absent",
            json={
                "employee_ids": [str(employee_on_shift.id), str(second_employee.id)],
                "work_date": WORK_DATE.isoformat(),
            },
            headers=headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["successful"] == [str(second_employee.id)]
        assert body["failed"][0]["employee_id"] == str(employee_on_shift.id)

    async def test_summary_generation_and_own_view(
        self, client: AsyncClient, employee_on_shift, admin_token: str, employee_token: str
    ):
        generated = await client.post(
            f"{ADMIN}/summaries/generate",
            json={"month": 3, "year": 2025, "employee_id": str(employee_on_shift.id)},
            headers=auth_header(admin_token),
        )
        assert generated.status_code == 200
        assert generated.json()[0]["total_working_days"] == 21

        mine = await client.get(
            f"{APP}/my/summary", params={"month": 3, "year": 2025}, headers=auth_header(employee_token)
        )
        assert mine.status_code == 200
        assert mine.json()["attendance_percentage"] == 0.0

    async def test_unknown_record_is_404(self, client: AsyncClient, admin_token: str):
        response = await client.get(
            f"{ADMIN}/attendances/00000000-0000-0000-0000-000000000000", headers=auth_header(admin_token)
        )
        assert response.status_code == 404
