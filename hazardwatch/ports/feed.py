"""
Hazard change-feed port interface.

This module defines the protocol for the hazard change feed.
"""

from typing import AsyncIterator, Protocol

class HazardFeedPort(Protocol):
    """위험 신고 변경 피드 포트 인터페이스"""

    def recv(self) -> AsyncIterator[dict]:
        """
        변경 이벤트를 수신 순서대로 비동기적으로 내보냅니다.

        Yields:
            {"kind": "insert"|"update", "current": {...}, "previous": {...}} 형태의 딕셔너리
        """
        ...

    async def stop(self) -> None:
        """구독을 해제합니다."""
        ...
