"""
Orchestrators for HazardWatch.

This module contains the orchestrators that coordinate
the flow between ports, adapters and the notification engine.
"""
from .session import HazardWatchSession

__all__ = ["HazardWatchSession"]
