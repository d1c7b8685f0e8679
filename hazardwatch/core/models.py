"""
Core domain models for HazardWatch.

This module defines the core domain models using Pydantic v2
for type safety and boundary validation.
"""

from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

# 알림 심각도 (프레젠테이션 레이어의 토스트 종류)
Severity = Literal["info", "warning"]

# 변경 피드 이벤트 종류
EventKind = Literal["insert", "update"]

# 알림 대상 생애주기 이벤트 종류
LifecycleKind = Literal["created", "resolved"]


class Coordinate(BaseModel):
    """WGS-84 좌표 (도 단위, 불변)"""
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)

    def as_tuple(self) -> tuple:
        return (self.lat, self.lon)


class HazardStatus(str, Enum):
    """위험 신고 상태 (pending → verified → fixed, 되돌아가지 않음)"""
    PENDING = "pending"
    VERIFIED = "verified"
    FIXED = "fixed"

    @classmethod
    def parse(cls, value) -> "HazardStatus":
        """문자열 상태를 변환합니다. "resolved"는 fixed의 별칭입니다."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if text == "resolved":
            return cls.FIXED
        return cls(text)


class HazardReport(BaseModel):
    """시민이 제출한 위험 신고 (엔진에서는 읽기 전용)"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: Optional[str] = Field(default=None, max_length=100)
    hazard_type: str = Field(min_length=1, max_length=100)
    description: str = ""
    location: Coordinate
    location_name: Optional[str] = Field(default=None, max_length=500)
    image_url: Optional[str] = None
    status: HazardStatus = HazardStatus.PENDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    fixed_at: Optional[datetime] = None

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, v):
        return HazardStatus.parse(v)

    @property
    def is_resolved(self) -> bool:
        return self.status == HazardStatus.FIXED

    @property
    def display_name(self) -> str:
        return self.name or self.hazard_type


class SafeZone(BaseModel):
    """정적 대피 안전 구역 카탈로그 항목"""
    model_config = ConfigDict(frozen=True)

    name: str
    location: Coordinate
    address: str = ""


class RankedSafeZone(BaseModel):
    """기준점으로부터의 거리가 계산된 안전 구역 (저장하지 않음)"""
    zone: SafeZone
    distance_km: float

    @property
    def name(self) -> str:
        return self.zone.name


class Route(BaseModel):
    """대피 경로. coordinates는 실제 경로 지오메트리 또는 경유지"""
    id: str
    name: str = ""
    status: Literal["clear", "closed"] = "clear"
    description: str = ""
    coordinates: List[Coordinate] = Field(default_factory=list)


class HazardEvent(BaseModel):
    """위험 신고 변경 피드 이벤트"""
    kind: EventKind
    current: HazardReport
    previous_status: Optional[HazardStatus] = None


class NotificationIntent(BaseModel):
    """프레젠테이션 레이어로 전달되는 알림 의도"""
    severity: Severity
    title: str
    body: str
    hazard_id: str
    kind: LifecycleKind
    distance_km: float
