"""
Built-in reference data for HazardWatch.

Safe zones and evacuation routes for Vigan, Ilocos Sur. Route coordinates
are waypoints; road-following geometry comes from the routing collaborator.
"""

from typing import List
from .models import Coordinate, Route, SafeZone

VIGAN_CENTER = Coordinate(lat=17.5747, lon=120.3869)

DEFAULT_SAFE_ZONES: List[SafeZone] = [
    SafeZone(name="Vigan City Hall", location=Coordinate(lat=17.5741, lon=120.3868)),
    SafeZone(name="Vigan Convention Center", location=Coordinate(lat=17.5720, lon=120.3890)),
    SafeZone(name="Bantay Church", location=Coordinate(lat=17.5920, lon=120.3890)),
]

def _path(*points) -> List[Coordinate]:
    return [Coordinate(lat=lat, lon=lon) for lat, lon in points]

DEFAULT_ROUTES: List[Route] = [
    Route(
        id="route-a",
        name="Coastal Highway Route",
        status="clear",
        description="Clear - Recommended",
        coordinates=_path(
            (17.5747, 120.3869),
            (17.5800, 120.3900),
            (17.5850, 120.3950),
            (17.5920, 120.3890),
        ),
    ),
    Route(
        id="route-b",
        name="Heritage Village Route",
        status="clear",
        description="Clear - Alternative route",
        coordinates=_path(
            (17.5747, 120.3869),
            (17.5750, 120.3850),
            (17.5780, 120.3820),
            (17.5741, 120.3868),
        ),
    ),
    Route(
        id="route-c",
        name="River Road",
        status="closed",
        description="Closed - Flooding reported",
        coordinates=_path(
            (17.5747, 120.3869),
            (17.5700, 120.3850),
            (17.5650, 120.3830),
            (17.5600, 120.3810),
        ),
    ),
]
