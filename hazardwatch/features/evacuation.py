"""
Evacuation guidance for HazardWatch.

This module combines route geometry lookup, route safety scoring and
safe-zone ranking into the derived views consumed by the map UI.
"""

import asyncio
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from hazardwatch.core.models import Coordinate, HazardReport, RankedSafeZone, Route, SafeZone
from hazardwatch.core.ranking import DEFAULT_LIMIT, rank_safe_zones
from hazardwatch.core.route_safety import DEFAULT_SAMPLE_STRIDE, score_route
from hazardwatch.ports.routing import RoutingError, RoutingPort
from hazardwatch.observability import metrics
from hazardwatch.observability.logging_setup import get_logger

log = get_logger("hazardwatch.evacuation")

PathKey = Tuple[str, Tuple[Tuple[float, float], ...]]

def active_hazard_counts(hazards: Iterable[HazardReport]) -> Dict[str, int]:
    """해결되지 않은 위험을 유형별로 집계합니다 (지도 범례용)."""
    return dict(Counter(h.hazard_type for h in hazards if not h.is_resolved))

class EvacuationAdvisor:
    """대피 경로 및 안전 구역 안내"""

    def __init__(self,
                 routes: Sequence[Route],
                 safe_zones: Sequence[SafeZone],
                 *,
                 routing: Optional[RoutingPort] = None,
                 sample_stride: int = DEFAULT_SAMPLE_STRIDE,
                 default_limit: int = DEFAULT_LIMIT):
        """
        초기화합니다.

        Args:
            routes: 대피 경로 카탈로그 (좌표는 경유지)
            safe_zones: 안전 구역 카탈로그
            routing: 라우팅 협력자 (None이면 경유지를 직선 경로로 사용)
            sample_stride: 경로 샘플링 간격
            default_limit: 안전 구역 기본 반환 개수
        """
        self.routes = list(routes)
        self.safe_zones = list(safe_zones)
        self.routing = routing
        self.sample_stride = sample_stride
        self.default_limit = default_limit
        # (경로 ID, 경유지) → 도로 경로
        self._paths: Dict[PathKey, List[Coordinate]] = {}

    @staticmethod
    def _key(route: Route) -> PathKey:
        return (route.id, tuple(p.as_tuple() for p in route.coordinates))

    async def _fetch_path(self, route: Route) -> List[Coordinate]:
        if self.routing is None:
            return list(route.coordinates)
        try:
            path = await self.routing.get_road_path(list(route.coordinates))
        except (RoutingError, asyncio.TimeoutError) as e:
            metrics.route_geometry_fallbacks.inc()
            log.warning(f"경로 조회 실패, 직선 경로 사용 route:{route.id} error:{e}")
            return list(route.coordinates)
        if not path:
            metrics.route_geometry_fallbacks.inc()
            log.warning(f"빈 경로 응답, 직선 경로 사용 route:{route.id}")
            return list(route.coordinates)
        return path

    async def refresh_paths(self, force: bool = False) -> None:
        """경로마다 한 번씩 라우팅 협력자를 호출해 지오메트리를 갱신합니다."""
        pending = [r for r in self.routes if force or self._key(r) not in self._paths]
        if not pending:
            return
        paths = await asyncio.gather(*(self._fetch_path(r) for r in pending))
        for route, path in zip(pending, paths):
            self._paths[self._key(route)] = path
        log.info(f"경로 지오메트리 갱신됨 count:{len(pending)}")

    def path_for(self, route: Route) -> List[Coordinate]:
        """캐시된 도로 경로. 아직 조회하지 않았으면 경유지를 반환합니다."""
        return self._paths.get(self._key(route), list(route.coordinates))

    def score_routes(self, hazards: Iterable[HazardReport]) -> Dict[str, int]:
        """경로 ID → 안전 점수. 호출마다 새로 계산합니다."""
        hazard_list = list(hazards)
        return {
            r.id: score_route(self.path_for(r), hazard_list, sample_stride=self.sample_stride)
            for r in self.routes
        }

    def nearest_safe_zones(self, origin: Coordinate, limit: Optional[int] = None) -> List[RankedSafeZone]:
        return rank_safe_zones(self.safe_zones, origin, self.default_limit if limit is None else limit)
