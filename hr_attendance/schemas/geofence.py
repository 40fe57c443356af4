"""지오펜스 Pydantic 스키마.

Geofence location request/response schemas.
"""

from pydantic import BaseModel, Field


class GeofenceCreate(BaseModel):
    """근무 위치 등록 요청 스키마.

    Approved work location creation request.

    Attributes:
        name: 위치 이름 (Location name)
        code: 위치 코드 (Unique code)
        latitude / longitude: 중심 좌표 (Centre, degrees)
        radius_meters: 반경 (Radius in metres, default 100)
        address: 주소, 선택 (Optional address)
    """

    name: str = Field(..., min_length=1, max_length=255)
    code: str = Field(..., min_length=1, max_length=50)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    radius_meters: int = Field(100, gt=0)
    address: str | None = None


class GeofenceUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    code: str | None = Field(None, min_length=1, max_length=50)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    radius_meters: int | None = Field(None, gt=0)
    address: str | None = None
    is_active: bool | None = None


class GeofenceResponse(BaseModel):
    id: str
    name: str
    code: str
    latitude: float
    longitude: float
    radius_meters: int
    address: str | None
    is_active: bool


class GeofenceValidateRequest(BaseModel):
    """좌표 사전 확인 요청 (Pre-check a coordinate before checking in)."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class GeofenceMatchResponse(BaseModel):
    """좌표 판정 결과 응답.

    Classification result. ``enabled`` is False when geofencing is turned off,
    in which case the other fields are null.
    """

    enabled: bool
    geofence_id: str | None
    distance_meters: float | None
    is_within: bool | None
