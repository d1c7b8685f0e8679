"""
Home Assistant notification dispatcher for HazardWatch.

Delivers notification intents through a Home Assistant notify service
(mobile app push or persistent_notification).
"""

from hazardwatch.core.models import NotificationIntent
from hazardwatch.observability.logging_setup import get_logger
from .client import HAClient

log = get_logger("hazardwatch.ha.notify")

# 심각도별 푸시 옵션 (warning은 긴급 알림음)
PUSH_OPTIONS = {
    "warning": {"push": {"sound": {"name": "default", "critical": 1, "volume": 1.0}}},
    "info": {},
}

class HANotificationDispatcher:
    """HA notify 서비스 알림 발송기"""

    def __init__(self, ha: HAClient, service: str):
        self.ha = ha
        self.service = service

    async def dispatch(self, intent: NotificationIntent) -> None:
        data = dict(PUSH_OPTIONS.get(intent.severity, {}))
        data["tag"] = f"hazard-{intent.hazard_id}-{intent.kind}"
        if self.ha.session:
            await self.ha.notify(self.service, intent.title, intent.body, data=data)
            return
        async with self.ha:
            await self.ha.notify(self.service, intent.title, intent.body, data=data)
