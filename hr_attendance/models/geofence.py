"""지오펜스 관련 SQLAlchemy ORM 모델 정의.

Geofence SQLAlchemy ORM model definitions.

Tables:
    - geofence_locations: 승인된 근무 위치 (Approved circular work locations)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Boolean, DateTime, Float, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from hr_attendance.database import Base


class GeofenceLocation(Base):
    """지오펜스 위치 모델 — 중심 좌표와 반경으로 정의된 원형 영역.

    Geofence location model — Circular region (centre + radius) used to
    annotate whether a check-in/out happened at an approved location.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 위치 이름 (Location name)
        code: 위치 코드 (Unique location code)
        latitude / longitude: 중심 좌표 (Centre coordinates, degrees)
        radius_meters: 반경(m) (Radius in metres)
        address: 주소 (Optional address)
        is_active: 활성 상태 (Only active geofences are matched)
    """

    __tablename__ = "geofence_locations"

    # 지오펜스 고유 식별자 — Geofence unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 위치 이름/코드 — Display name and unique code
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    # 중심 좌표 — Centre coordinates in degrees
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    # 반경 — Radius in metres
    radius_meters: Mapped[int] = mapped_column(Integer, default=100)
    # 주소 — Optional postal address
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # 활성 상태 — Inactive geofences are ignored by classification
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
