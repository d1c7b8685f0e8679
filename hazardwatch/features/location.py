"""
User location resolution for HazardWatch.
"""

import aiohttp
import asyncio
from typing import Optional
from hazardwatch.core.models import Coordinate
from hazardwatch.ports.location import LocationPort
from hazardwatch.observability.logging_setup import get_logger

log = get_logger("hazardwatch.location")

async def resolve_location(provider: Optional[LocationPort], fallback: Coordinate) -> Coordinate:
    """위치 제공자가 없거나 실패하면 설정된 대체 좌표를 사용합니다."""
    if provider is None:
        return fallback
    try:
        coord = await provider.current_location()
    except (aiohttp.ClientError, asyncio.TimeoutError, RuntimeError) as e:
        log.warning(f"위치 조회 실패, 대체 좌표 사용: {e}")
        return fallback
    if coord is None:
        log.warning(f"위치를 알 수 없음, 대체 좌표 사용 lat:{fallback.lat} lon:{fallback.lon}")
        return fallback
    return coord
