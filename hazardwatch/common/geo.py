"""
Geographic utilities for HazardWatch.

This module provides great-circle distance calculation over WGS-84
coordinates and the distance label used by the presentation layer.
"""

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hazardwatch.core.models import Coordinate

# 지구 반지름 (킬로미터)
EARTH_RADIUS_KM = 6371.0

def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    두 지점 간의 Haversine 거리를 계산합니다 (킬로미터).

    입력 범위는 검증하지 않습니다. NaN이나 범위를 벗어난 값은 예외 없이
    의미 없는 숫자를 반환하며, 검증은 Coordinate 생성 시점의 책임입니다.

    Args:
        lat1: 첫 번째 지점의 위도
        lon1: 첫 번째 지점의 경도
        lat2: 두 번째 지점의 위도
        lon2: 두 번째 지점의 경도

    Returns:
        두 지점 간의 거리 (킬로미터)
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (math.sin(dlat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2)
    # 부동소수 오차로 a가 [0, 1]을 살짝 벗어나는 경우 보정
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c

def distance_km(a: "Coordinate", b: "Coordinate") -> float:
    """두 Coordinate 사이의 대원 거리 (킬로미터)."""
    return haversine_distance(a.lat, a.lon, b.lat, b.lon)

def format_distance(km: float) -> str:
    """
    표시용 거리 문자열을 만듭니다.

    1km 미만은 미터 정수("650 m"), 그 외는 소수점 한 자리 킬로미터("2.8 km").
    """
    if km < 1:
        return f"{round(km * 1000)} m"
    return f"{km:.1f} km"

def validate_coordinates(lat: float, lon: float) -> bool:
    """
    좌표가 유효한지 확인합니다.

    Args:
        lat: 위도
        lon: 경도

    Returns:
        좌표가 유효하면 True (NaN은 False)
    """
    return -90 <= lat <= 90 and -180 <= lon <= 180
