"""
HazardWatch: community hazard awareness and evacuation guidance engine.

Geospatial proximity, safe-zone ranking, route safety scoring and
deduplicated proximity notifications over a hazard change feed.
"""

__version__ = "0.1.0"
