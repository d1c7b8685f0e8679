"""
Home Assistant API client for HazardWatch.

This module provides a client for the Home Assistant REST API
used as the user's location provider and notification channel.
"""

import aiohttp
import asyncio
from typing import Dict, Optional
from hazardwatch.core.models import Coordinate
from hazardwatch.common.retry import retry_with_backoff
from hazardwatch.observability.logging_setup import get_logger

log = get_logger("hazardwatch.ha")

class HAClient:
    """Home Assistant API 클라이언트"""

    def __init__(self,
                 base_url: str,
                 token: str,
                 timeout: int = 30,
                 max_retries: int = 3):
        """
        초기화합니다.

        Args:
            base_url: Home Assistant API 기본 URL
            token: Home Assistant 장기 토큰
            timeout: 요청 타임아웃 (초)
            max_retries: 요청 재시도 횟수
        """
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = timeout
        self.max_retries = max_retries
        self.session: Optional[aiohttp.ClientSession] = None

        log.info("Home Assistant 클라이언트 초기화됨")

    async def __aenter__(self):
        """비동기 컨텍스트 매니저 진입"""
        self.session = aiohttp.ClientSession(
            headers={
                "Authorization": f"Bearer {self.token}",
                "Content-Type": "application/json"
            },
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """비동기 컨텍스트 매니저 종료"""
        if self.session:
            await self.session.close()
            self.session = None

    async def _make_request(self, method: str, endpoint: str, **kwargs) -> Dict:
        """
        API 요청을 수행합니다.

        Args:
            method: HTTP 메서드
            endpoint: API 엔드포인트
            **kwargs: 추가 요청 매개변수

        Returns:
            응답 데이터
        """
        if not self.session:
            raise RuntimeError("세션이 초기화되지 않았습니다. async with를 사용하세요.")

        url = f"{self.base_url}{endpoint}"

        async def _request():
            async with self.session.request(method, url, **kwargs) as response:
                response.raise_for_status()
                return await response.json()

        return await retry_with_backoff(
            _request,
            max_retries=self.max_retries,
            retry_on=(aiohttp.ClientError, asyncio.TimeoutError),
        )

    async def get_zone_home(self) -> Optional[Coordinate]:
        """
        zone.home의 좌표를 가져옵니다.

        Returns:
            Coordinate 또는 None
        """
        try:
            data = await self._make_request("GET", "/api/states/zone.home")
            attrs = (data or {}).get("attributes", {})
            if "latitude" in attrs and "longitude" in attrs:
                coord = Coordinate(lat=float(attrs["latitude"]), lon=float(attrs["longitude"]))
                log.info(f"zone.home 좌표 가져옴 lat:{coord.lat} lon:{coord.lon}")
                return coord

            log.warning("zone.home 좌표를 찾을 수 없습니다")
            return None

        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError, TypeError) as e:
            log.error(f"zone.home 좌표 가져오기 실패 error:{str(e)}")
            return None

    async def current_location(self) -> Optional[Coordinate]:
        """LocationPort 구현. 세션이 없으면 요청 동안만 세션을 엽니다."""
        if self.session:
            return await self.get_zone_home()
        async with self:
            return await self.get_zone_home()

    async def notify(self, service: str, title: str, message: str,
                     data: Optional[Dict] = None) -> Dict:
        """notify 서비스로 푸시 알림을 발송합니다."""
        payload = {"title": title, "message": message}
        if data:
            payload["data"] = data
        try:
            result = await self._make_request(
                "POST", f"/api/services/notify/{service}", json=payload
            )
            log.info(f"푸시 알림 발송 성공 service:{service} title:{title}")
            return result
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            log.error(f"푸시 알림 발송 실패 service:{service} error:{str(e)}")
            raise
