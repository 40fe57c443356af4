"""관리자 API 라우터 패키지 — 모든 관리자 엔드포인트 통합.

Admin API Router package — Aggregates all admin-facing endpoints
into a single router for inclusion in the FastAPI application.

Included routers (Policy):
    - shifts: 시프트 정책 관리 (Shift policy management)
    - shift_assignments: 직원 시프트 배정 (Employee shift assignments)
    - geofences: 근무 위치 관리 (Approved work location management)

Included routers (Attendance):
    - attendances: 근태 기록 관리 (Attendance records, manual entry, bulk actions)
    - corrections: 정정 요청 검토 (Correction request review)
    - alerts: 근태 경고 (Attendance alerts)

Included routers (Reporting):
    - summaries: 월간 요약 (Monthly summaries)
    - reports: 일간 보고서 (Daily reports)
    - export: 근태 내보내기 (Attendance export)
"""

from fastapi import APIRouter

# Policy 라우터 임포트
from hr_attendance.api.admin.shifts import router as shifts_router
from hr_attendance.api.admin.shift_assignments import router as shift_assignments_router
from hr_attendance.api.admin.geofences import router as geofences_router

# Attendance 라우터 임포트
from hr_attendance.api.admin.attendances import router as attendances_router
from hr_attendance.api.admin.corrections import router as corrections_router
from hr_attendance.api.admin.alerts import router as alerts_router

# Reporting 라우터 임포트
from hr_attendance.api.admin.summaries import router as summaries_router
from hr_attendance.api.admin.reports import router as reports_router
from hr_attendance.api.admin.export import router as export_router

admin_router: APIRouter = APIRouter()

# ---------------------------------------------------------------------------
# Policy 라우터 등록 — Register policy routers
# ---------------------------------------------------------------------------
admin_router.include_router(shifts_router, prefix="/shifts", tags=["Shifts"])
admin_router.include_router(shift_assignments_router, prefix="/shift-assignments", tags=["Shift Assignments"])
admin_router.include_router(geofences_router, prefix="/geofences", tags=["Geofences"])

# ---------------------------------------------------------------------------
# Attendance 라우터 등록 — Register attendance routers
# ---------------------------------------------------------------------------
admin_router.include_router(attendances_router, prefix="/attendances", tags=["Attendances"])
admin_router.include_router(corrections_router, prefix="/corrections", tags=["Corrections"])
admin_router.include_router(alerts_router, prefix="/alerts", tags=["Alerts"])

# ---------------------------------------------------------------------------
# Reporting 라우터 등록 — Register reporting routers
# ---------------------------------------------------------------------------
admin_router.include_router(summaries_router, prefix="/summaries", tags=["Summaries"])
admin_router.include_router(reports_router, prefix="/reports", tags=["Reports"])
admin_router.include_router(export_router, prefix="/export", tags=["Export"])
