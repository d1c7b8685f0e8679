"""
Location provider port interface.
"""

from typing import Optional, Protocol
from hazardwatch.core.models import Coordinate

class LocationPort(Protocol):
    """사용자 위치 포트 인터페이스"""

    async def current_location(self) -> Optional[Coordinate]:
        """현재 위치. 알 수 없으면 None"""
        ...
