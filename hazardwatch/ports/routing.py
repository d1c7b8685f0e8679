"""
Routing port interface.

This module defines the protocol for road-following path lookup.
"""

from typing import List, Protocol
from hazardwatch.core.models import Coordinate

class RoutingError(Exception):
    """라우팅 서비스 호출 실패"""

class RoutingPort(Protocol):
    """라우팅 포트 인터페이스"""

    async def get_road_path(self, waypoints: List[Coordinate]) -> List[Coordinate]:
        """
        경유지를 잇는 도로 경로를 반환합니다.

        Raises:
            RoutingError: 서비스 실패 또는 타임아웃
        """
        ...
