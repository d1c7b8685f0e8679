"""
Hazard source port interface.

This module defines the protocol for querying the current hazard set.
"""

from typing import List, Protocol
from hazardwatch.core.models import HazardReport

class HazardSourceError(Exception):
    """위험 신고 조회 실패 (연결, 타임아웃, 잘못된 응답 본문)"""

class HazardSourcePort(Protocol):
    """위험 신고 조회 포트 인터페이스"""

    async def list_hazards(self) -> List[HazardReport]:
        """
        현재 위험 신고 목록을 조회합니다.

        Returns:
            HazardReport 목록

        Raises:
            HazardSourceError: 조회 실패
        """
        ...
