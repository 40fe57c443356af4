"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어, 라우터, 주기 집계 등록.

FastAPI application entry point — Middleware and router registration.
Configures logging, CORS, the Axiom request log, health check, and the
optional periodic summary loop tied to the application lifespan.
"""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hr_attendance.config import settings
from hr_attendance.database import async_session
from hr_attendance.middleware.axiom_logging import AxiomLoggingMiddleware
from hr_attendance.services.summary_service import run_summary_scheduler

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """앱 수명 주기 — 주기 집계 작업 시작/종료.

    Start the summary scheduler on startup when enabled and cancel it on
    shutdown.
    """
    task: asyncio.Task | None = None
    if settings.SUMMARY_SCHEDULER_ENABLED:
        task = asyncio.create_task(
            run_summary_scheduler(async_session, settings.SUMMARY_SCHEDULER_INTERVAL_MINUTES)
        )
    try:
        yield
    finally:
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
            logger.info("Summary scheduler stopped")


app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Axiom API 로깅 미들웨어 — Axiom API request/response logging
# CORS보다 먼저 등록하여 모든 요청을 캡처 (Registered before CORS to capture all requests)
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# ---------------------------------------------------------------------------
# admin_router: 정책/근태 관리/보고 (Policy, attendance management, reporting)
# app_router: 직원 본인 출퇴근/정정/알림 (Employee self-service)
from hr_attendance.api.admin import admin_router  # noqa: E402
from hr_attendance.api.app import app_router  # noqa: E402

app.include_router(admin_router, prefix="/api/v1/admin")
app.include_router(app_router, prefix="/api/v1/app")
