"""
Adapters for HazardWatch hexagonal architecture.

This module contains the concrete implementations of port interfaces
that handle external I/O and infrastructure concerns.
"""

from .mqtt_remote.client_async import RemoteMqttHazardFeed
from .mqtt_local.publisher_async import MqttNotificationPublisher
from .homeassistant.client import HAClient
from .homeassistant.notify import HANotificationDispatcher
from .hazard_source.postgrest import PostgRESTHazardSource
from .routing.osrm import OSRMRoutingClient

__all__ = [
    "RemoteMqttHazardFeed", "MqttNotificationPublisher", "HAClient",
    "HANotificationDispatcher", "PostgRESTHazardSource", "OSRMRoutingClient",
]
