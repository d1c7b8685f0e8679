"""
Normalization functions for HazardWatch.

This module contains pure functions for converting raw change-feed
payloads and catalog rows into internal domain models.
"""

from typing import Any, Dict, Optional
from hazardwatch.common.geo import validate_coordinates
from .models import Coordinate, HazardEvent, HazardReport, HazardStatus

# 변경 피드 종류 매핑 (PostgREST/Supabase realtime 표기 포함)
_KIND_MAP = {
    "insert": "insert",
    "INSERT": "insert",
    "created": "insert",
    "update": "update",
    "UPDATE": "update",
    "updated": "update",
}

def _pick(raw: Dict[str, Any], *keys: str) -> Any:
    for k in keys:
        if raw.get(k) is not None:
            return raw[k]
    return None

def to_hazard_report(raw: Dict[str, Any]) -> HazardReport:
    """
    DB 행 또는 이벤트 레코드를 HazardReport로 변환합니다.

    Raises:
        ValueError: 좌표 누락 등 잘못된 레코드 (pydantic ValidationError 포함)
    """
    if not isinstance(raw, dict):
        raise ValueError(f"레코드가 dict가 아님: {type(raw).__name__}")

    lat = _pick(raw, "latitude", "lat")
    lon = _pick(raw, "longitude", "lon", "lng")
    location = raw.get("location")
    if (lat is None or lon is None) and isinstance(location, dict):
        lat = _pick(location, "latitude", "lat")
        lon = _pick(location, "longitude", "lon", "lng")
    if lat is None or lon is None:
        raise ValueError(f"좌표 누락: id={raw.get('id')}")

    try:
        lat, lon = float(lat), float(lon)
    except (TypeError, ValueError) as e:
        raise ValueError(f"좌표 변환 실패: lat={lat} lon={lon} error={e}") from e
    if not validate_coordinates(lat, lon):
        raise ValueError(f"좌표 범위 초과: lat={lat} lon={lon}")
    coord = Coordinate(lat=lat, lon=lon)

    hazard_id = raw.get("id")
    return HazardReport(
        id=str(hazard_id) if hazard_id is not None else "",
        name=raw.get("name"),
        hazard_type=_pick(raw, "hazard_type", "hazardType") or "",
        description=raw.get("description") or "",
        location=coord,
        location_name=_pick(raw, "location_name", "locationName"),
        image_url=_pick(raw, "image_url", "imageUrl"),
        status=raw.get("status") or HazardStatus.PENDING,
        created_at=_pick(raw, "created_at", "createdAt"),
        updated_at=_pick(raw, "updated_at", "updatedAt"),
        fixed_at=_pick(raw, "fixed_at", "fixedAt"),
    )

def _previous_status(previous: Any) -> Optional[HazardStatus]:
    # 기본키만 복제하는 피드는 old 레코드에 status가 없음
    if not isinstance(previous, dict) or previous.get("status") is None:
        return None
    return HazardStatus.parse(previous["status"])

def to_hazard_event(raw: Dict[str, Any]) -> HazardEvent:
    """
    변경 피드 페이로드를 HazardEvent로 변환합니다.

    지원 형식:
        {"kind": "insert"|"update", "current": {...}, "previous": {...}}
        {"eventType": "INSERT"|"UPDATE", "new": {...}, "old": {...}}

    Raises:
        ValueError: 알 수 없는 이벤트 종류나 잘못된 레코드
    """
    if not isinstance(raw, dict):
        raise ValueError(f"이벤트가 dict가 아님: {type(raw).__name__}")

    raw_kind = _pick(raw, "kind", "eventType", "type")
    kind = _KIND_MAP.get(str(raw_kind)) if raw_kind is not None else None
    if kind is None:
        raise ValueError(f"알 수 없는 이벤트 종류: {raw_kind}")

    current = _pick(raw, "current", "new", "record")
    previous = _pick(raw, "previous", "old", "old_record")

    return HazardEvent(
        kind=kind,
        current=to_hazard_report(current),
        previous_status=_previous_status(previous),
    )
