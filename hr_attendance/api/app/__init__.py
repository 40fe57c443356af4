"""앱 API 라우터 패키지 — 모든 앱(직원용) 엔드포인트 통합.

App API Router package — Aggregates all app-facing (employee) endpoints
into a single router for inclusion in the FastAPI application.

Included routers:
    - attendances: 내 출퇴근 (My check-in/out, today, history)
    - corrections: 내 정정 요청 (My correction requests)
    - geofence: 위치 사전 확인 (Location pre-check)
    - summaries: 내 월간 요약 (My monthly summary)
    - notifications: 내 알림 (My notifications)
"""

from fastapi import APIRouter

from hr_attendance.api.app.attendances import router as attendance_router
from hr_attendance.api.app.corrections import router as corrections_router
from hr_attendance.api.app.geofence import router as geofence_router
from hr_attendance.api.app.summaries import router as summaries_router
from hr_attendance.api.app.notifications import router as notifications_router

app_router: APIRouter = APIRouter()

# ---------------------------------------------------------------------------
# 근태 라우터 등록 — Register attendance routers
# ---------------------------------------------------------------------------
# 내 근태: /my/attendance 하위 (My attendance: check-in/out, today, history)
app_router.include_router(attendance_router, prefix="/my/attendance", tags=["My Attendance"])
app_router.include_router(corrections_router, prefix="/my/corrections", tags=["My Corrections"])
app_router.include_router(geofence_router, prefix="/my/geofence", tags=["My Geofence"])
app_router.include_router(summaries_router, prefix="/my/summary", tags=["My Summary"])

# ---------------------------------------------------------------------------
# 알림 라우터 등록 — Register notification routers
# ---------------------------------------------------------------------------
app_router.include_router(notifications_router, prefix="/my/notifications", tags=["My Notifications"])
