"""
Routing adapter for HazardWatch.

Road-following path lookup through an OSRM server.
"""

from .osrm import OSRMRoutingClient

__all__ = ["OSRMRoutingClient"]
