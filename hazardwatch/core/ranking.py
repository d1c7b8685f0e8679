"""
Safe zone ranking for HazardWatch.

Orders a safe-zone catalog by great-circle distance from a reference point.
"""

from typing import Iterable, List
from hazardwatch.common.geo import distance_km
from .models import Coordinate, RankedSafeZone, SafeZone

DEFAULT_LIMIT = 5

def rank_safe_zones(
    zones: Iterable[SafeZone],
    origin: Coordinate,
    limit: int = DEFAULT_LIMIT,
) -> List[RankedSafeZone]:
    """
    안전 구역을 기준점에서 가까운 순으로 정렬합니다.

    거리가 같으면 카탈로그 순서를 유지합니다 (list.sort는 안정 정렬).

    Args:
        zones: 안전 구역 카탈로그
        origin: 기준 좌표 (사용자 위치)
        limit: 반환할 최대 개수 (0 이하이면 빈 목록)

    Returns:
        거리 오름차순 RankedSafeZone 목록
    """
    if limit <= 0:
        return []
    ranked = [RankedSafeZone(zone=z, distance_km=distance_km(origin, z.location)) for z in zones]
    ranked.sort(key=lambda r: r.distance_km)
    return ranked[:limit]
