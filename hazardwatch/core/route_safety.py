"""
Route safety scoring for HazardWatch.

This module scores evacuation routes from 0 (unsafe) to 100 (no detected
risk) by sampling the route geometry against active hazard reports.
"""

from typing import Dict, Iterable, List, Sequence
from hazardwatch.common.geo import distance_km
from .models import Coordinate, HazardReport, Route

MAX_SCORE = 100

# 기본 샘플링 간격 (경로 좌표 5개마다 1개 평가)
DEFAULT_SAMPLE_STRIDE = 5

# (거리 상한 km, 패널티) - 가까운 구간부터
PENALTY_BANDS = (
    (0.5, 10),
    (1.0, 5),
    (2.0, 2),
)

def proximity_penalty(distance: float) -> int:
    """
    위험 지점까지의 거리에 대한 패널티를 반환합니다.

    < 0.5km: 10, < 1km: 5, < 2km: 2, 그 이상: 0
    """
    for upper, penalty in PENALTY_BANDS:
        if distance < upper:
            return penalty
    return 0

def sample_points(coordinates: Sequence[Coordinate], stride: int = DEFAULT_SAMPLE_STRIDE) -> List[Coordinate]:
    """0, stride, 2*stride ... 위치의 좌표만 뽑습니다."""
    if stride < 1:
        raise ValueError(f"stride는 1 이상이어야 합니다: {stride}")
    return list(coordinates[::stride])

def score_route(
    route_coordinates: Sequence[Coordinate],
    hazards: Iterable[HazardReport],
    *,
    sample_stride: int = DEFAULT_SAMPLE_STRIDE,
) -> int:
    """
    경로의 안전 점수를 계산합니다.

    해결(fixed)된 위험은 제외하고, 샘플링된 경로 좌표와 활성 위험 사이의
    거리 패널티를 합산해 100에서 뺍니다. 순수 함수이며 캐시하지 않습니다.

    Args:
        route_coordinates: 경로 지오메트리
        hazards: 위험 신고 목록
        sample_stride: 샘플링 간격

    Returns:
        0~100 사이 정수 점수
    """
    active = [h for h in hazards if not h.is_resolved]
    if not active:
        return MAX_SCORE

    penalty = 0
    for point in sample_points(route_coordinates, sample_stride):
        for hazard in active:
            penalty += proximity_penalty(distance_km(point, hazard.location))

    return max(0, MAX_SCORE - penalty)

def score_routes(
    routes: Iterable[Route],
    hazards: Iterable[HazardReport],
    *,
    sample_stride: int = DEFAULT_SAMPLE_STRIDE,
) -> Dict[str, int]:
    """경로 ID → 안전 점수 매핑을 계산합니다."""
    hazard_list = list(hazards)
    return {
        r.id: score_route(r.coordinates, hazard_list, sample_stride=sample_stride)
        for r in routes
    }
