"""
Notification dispatch port interface.

This module defines the protocol for delivering notification intents
to the presentation layer.
"""

from typing import Protocol
from hazardwatch.core.models import NotificationIntent

class NotificationDispatchPort(Protocol):
    """알림 발송 포트 인터페이스"""

    async def dispatch(self, intent: NotificationIntent) -> None:
        """
        알림 의도를 발송합니다.

        Args:
            intent: 알림 의도
        """
        ...
