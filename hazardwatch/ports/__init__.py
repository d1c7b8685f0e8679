"""
Port interfaces for HazardWatch hexagonal architecture.

This module defines the port interfaces (Protocols) that define
the contracts between the engine and external collaborators.
"""

from .feed import HazardFeedPort
from .hazard_source import HazardSourceError, HazardSourcePort
from .routing import RoutingPort, RoutingError
from .location import LocationPort
from .dispatch import NotificationDispatchPort

__all__ = [
    "HazardFeedPort", "HazardSourceError", "HazardSourcePort", "RoutingPort", "RoutingError",
    "LocationPort", "NotificationDispatchPort",
]
