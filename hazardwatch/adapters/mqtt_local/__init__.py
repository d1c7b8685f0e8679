"""
Local MQTT publishing adapter for HazardWatch.

This module provides the implementation of NotificationDispatchPort
for publishing notification intents to a local MQTT broker.
"""

from .publisher_async import MqttNotificationPublisher

__all__ = ["MqttNotificationPublisher"]
