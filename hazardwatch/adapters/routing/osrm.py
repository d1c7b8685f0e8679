"""
OSRM routing client for HazardWatch.

This module implements RoutingPort against the OSRM HTTP route service.
Any failure is raised as RoutingError; the caller decides how to degrade.
"""

import aiohttp
import asyncio
from typing import List, Optional
from hazardwatch.core.models import Coordinate
from hazardwatch.ports.routing import RoutingError
from hazardwatch.common.retry import retry_with_backoff
from hazardwatch.observability.logging_setup import get_logger

log = get_logger("hazardwatch.routing")

def encode_waypoints(waypoints: List[Coordinate]) -> str:
    """OSRM 좌표 문자열 (경도,위도;경도,위도...)"""
    return ";".join(f"{p.lon:.6f},{p.lat:.6f}" for p in waypoints)

def decode_geometry(data: dict) -> List[Coordinate]:
    """
    OSRM 응답에서 GeoJSON 경로 좌표를 추출합니다.

    Raises:
        RoutingError: 응답 코드가 Ok가 아니거나 경로가 없음
    """
    if not isinstance(data, dict) or data.get("code") != "Ok":
        raise RoutingError(f"OSRM 응답 오류: {data.get('code') if isinstance(data, dict) else data}")
    routes = data.get("routes") or []
    if not routes:
        raise RoutingError("OSRM 경로 없음")
    try:
        coords = routes[0]["geometry"]["coordinates"]
        return [Coordinate(lat=float(lat), lon=float(lon)) for lon, lat in coords]
    except (KeyError, TypeError, ValueError) as e:
        raise RoutingError(f"OSRM 지오메트리 파싱 실패: {e}") from e

class OSRMRoutingClient:
    """
    OSRM 라우팅 클라이언트.

    async with로 진입하면 세션을 공유하고, 그렇지 않으면 호출마다
    자체 세션을 엽니다. 동시 호출이 서로의 세션을 닫지 않습니다.
    """

    def __init__(self,
                 base_url: str,
                 profile: str = "driving",
                 timeout: float = 8.0,
                 max_retries: int = 2):
        self.base_url = base_url.rstrip('/')
        self.profile = profile
        self.timeout = timeout
        self.max_retries = max_retries
        self.session: Optional[aiohttp.ClientSession] = None

    def _new_session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout))

    async def __aenter__(self):
        self.session = self._new_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.session:
            await self.session.close()
            self.session = None

    async def get_road_path(self, waypoints: List[Coordinate]) -> List[Coordinate]:
        """
        경유지를 잇는 도로 경로를 반환합니다.

        Args:
            waypoints: 경유지 목록 (2개 미만이면 그대로 반환)

        Raises:
            RoutingError: 서비스 실패, 타임아웃, 잘못된 응답
        """
        if len(waypoints) < 2:
            return list(waypoints)
        if self.session:
            return await self._route(self.session, waypoints)
        async with self._new_session() as session:
            return await self._route(session, waypoints)

    async def _route(self, session: aiohttp.ClientSession, waypoints: List[Coordinate]) -> List[Coordinate]:
        url = f"{self.base_url}/route/v1/{self.profile}/{encode_waypoints(waypoints)}"
        params = {"overview": "full", "geometries": "geojson"}

        async def _request():
            async with session.get(url, params=params) as response:
                response.raise_for_status()
                return await response.json()

        try:
            data = await retry_with_backoff(
                _request,
                max_retries=self.max_retries,
                base_delay=0.5,
                max_delay=4.0,
                retry_on=(aiohttp.ClientError, asyncio.TimeoutError),
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RoutingError(f"OSRM 요청 실패: {e}") from e
        except ValueError as e:
            # JSON 콘텐츠 타입이지만 본문이 JSON이 아님
            raise RoutingError(f"OSRM 응답 디코딩 실패: {e}") from e

        path = decode_geometry(data)
        log.debug(f"OSRM 경로 수신 waypoints:{len(waypoints)} points:{len(path)}")
        return path
