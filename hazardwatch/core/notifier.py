"""
Proximity notifier for HazardWatch.

This module turns hazard insert/update events into deduplicated,
radius-gated notification intents.

Per hazard id the lifecycle is unseen → notified-created → notified-resolved.
"Created" and "resolved" are gated independently: a resolution is detected
from the event's own previous/new status, not from whether a creation
notification was ever surfaced for that id.
"""

from typing import Any, Dict, Optional
from hazardwatch.common.geo import distance_km
from hazardwatch.observability import metrics
from hazardwatch.observability.logging_setup import get_logger
from . import normalize
from .dedup import HazardEventDeduplicator, event_key
from .models import (
    Coordinate,
    HazardEvent,
    HazardReport,
    HazardStatus,
    LifecycleKind,
    NotificationIntent,
)

log = get_logger("hazardwatch.notifier")

DEFAULT_RADIUS_KM = 5.0
DEFAULT_PREVIEW_CHARS = 80

def truncate(text: str, limit: int = DEFAULT_PREVIEW_CHARS) -> str:
    """limit자를 넘으면 잘라내고 "..."를 붙입니다."""
    if len(text) > limit:
        return text[:limit] + "..."
    return text

def is_resolution(previous_status: Optional[HazardStatus], new_status: HazardStatus) -> bool:
    """이전 상태가 해결이 아니고 새 상태가 해결이면 True (이전 상태 누락은 미해결로 간주)"""
    return previous_status != HazardStatus.FIXED and new_status == HazardStatus.FIXED

class ProximityNotifier:
    """세션 하나의 위험 알림 상태 기계"""

    def __init__(self,
                 user_location: Coordinate,
                 *,
                 radius_km: float = DEFAULT_RADIUS_KM,
                 dedup: Optional[HazardEventDeduplicator] = None,
                 preview_chars: int = DEFAULT_PREVIEW_CHARS):
        """
        초기화합니다.

        Args:
            user_location: 사용자 위치
            radius_km: 알림 반경 (킬로미터)
            dedup: 세션 전용 중복 제거 필터 (None이면 새로 생성)
            preview_chars: 알림 본문에 포함할 설명 길이
        """
        self.user_location = user_location
        self.radius_km = radius_km
        self.dedup = dedup if dedup is not None else HazardEventDeduplicator()
        self.preview_chars = preview_chars

    def update_location(self, location: Coordinate) -> None:
        """이후 이벤트에만 적용됩니다. 과거 이벤트는 재평가하지 않습니다."""
        self.user_location = location

    def handle_raw(self, raw: Dict[str, Any]) -> Optional[NotificationIntent]:
        """
        원시 변경 피드 페이로드를 처리합니다.

        잘못된 페이로드는 로그만 남기고 버리며 중복 제거 집합에 기록하지 않습니다.
        """
        try:
            event = normalize.to_hazard_event(raw)
        except ValueError as e:
            metrics.hazard_events_invalid.inc()
            log.warning(f"잘못된 위험 이벤트 무시: {e}")
            return None
        return self.process(event)

    def process(self, event: HazardEvent) -> Optional[NotificationIntent]:
        """검증된 이벤트 하나를 평가해 알림 의도를 반환합니다 (없으면 None)."""
        metrics.hazard_events_received.labels(kind=event.kind).inc()
        with metrics.event_processing_seconds.time():
            if event.kind == "insert":
                intent = self._evaluate(event.current, "created")
            elif is_resolution(event.previous_status, event.current.status):
                intent = self._evaluate(event.current, "resolved")
            else:
                # 설명 수정 등 다른 업데이트는 알림 대상이 아님
                intent = None
        metrics.notified_keys.set(len(self.dedup))
        return intent

    def _evaluate(self, hazard: HazardReport, kind: LifecycleKind) -> Optional[NotificationIntent]:
        if not self.dedup.should_surface(event_key(hazard.id, kind)):
            metrics.notifications_suppressed.labels(reason="duplicate").inc()
            log.debug(f"중복 위험 이벤트 필터링됨 id:{hazard.id} kind:{kind}")
            return None

        distance = distance_km(self.user_location, hazard.location)
        if distance > self.radius_km:
            metrics.notifications_suppressed.labels(reason="out_of_radius").inc()
            log.debug(f"반경 밖 위험 id:{hazard.id} kind:{kind} distance:{distance:.2f}km")
            return None

        intent = self._build_intent(hazard, kind, distance)
        metrics.notifications_emitted.labels(kind=kind).inc()
        log.info(f"위험 알림 생성 id:{hazard.id} kind:{kind} distance:{distance:.2f}km")
        return intent

    def _build_intent(self, hazard: HazardReport, kind: LifecycleKind, distance: float) -> NotificationIntent:
        if kind == "created":
            return NotificationIntent(
                severity="warning",
                title=f"New hazard reported {distance:.1f}km from your location",
                body=f"{hazard.display_name} - {truncate(hazard.description, self.preview_chars)}",
                hazard_id=hazard.id,
                kind=kind,
                distance_km=distance,
            )
        return NotificationIntent(
            severity="info",
            title=f"Hazard resolved {distance:.1f}km from your location",
            body=f"{hazard.hazard_type} has been fixed by authorities",
            hazard_id=hazard.id,
            kind=kind,
            distance_km=distance,
        )
