"""
Core domain models and pure functions for HazardWatch.

This module contains the domain models and pure business logic
that are independent of external I/O and infrastructure concerns.
"""

from .models import (
    Coordinate, HazardStatus, HazardReport, SafeZone, RankedSafeZone,
    Route, HazardEvent, NotificationIntent,
)
from .normalize import to_hazard_event, to_hazard_report
from .ranking import rank_safe_zones
from .route_safety import score_route, score_routes
from .dedup import HazardEventDeduplicator, event_key
from .notifier import ProximityNotifier

__all__ = [
    "Coordinate", "HazardStatus", "HazardReport", "SafeZone", "RankedSafeZone",
    "Route", "HazardEvent", "NotificationIntent",
    "to_hazard_event", "to_hazard_report", "rank_safe_zones",
    "score_route", "score_routes", "HazardEventDeduplicator", "event_key",
    "ProximityNotifier",
]
