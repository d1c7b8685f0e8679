"""
Hazard source adapter for HazardWatch.

Queries the current hazard report set from a PostgREST endpoint.
"""

from .postgrest import PostgRESTHazardSource

__all__ = ["PostgRESTHazardSource"]
