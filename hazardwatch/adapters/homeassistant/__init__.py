"""
Home Assistant adapters for HazardWatch.

Location lookup (zone.home) and push notification delivery.
"""

from .client import HAClient
from .notify import HANotificationDispatcher

__all__ = ["HAClient", "HANotificationDispatcher"]
