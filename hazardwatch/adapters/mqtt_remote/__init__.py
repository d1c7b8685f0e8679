"""
Remote MQTT change-feed adapter for HazardWatch.

This module provides the implementation of HazardFeedPort
for receiving hazard insert/update events from an MQTT broker.
"""

from .client_async import RemoteMqttHazardFeed

__all__ = ["RemoteMqttHazardFeed"]
