"""
PostgREST hazard source for HazardWatch.

Reads the hazard_reports table through a PostgREST (e.g. Supabase) REST
endpoint. The engine only reads; it never mutates hazard records.
"""

import aiohttp
import asyncio
from typing import List, Optional
from hazardwatch.core.models import HazardReport
from hazardwatch.core.normalize import to_hazard_report
from hazardwatch.common.retry import retry_with_backoff
from hazardwatch.ports.hazard_source import HazardSourceError
from hazardwatch.observability.logging_setup import get_logger

log = get_logger("hazardwatch.hazard_source")

class PostgRESTHazardSource:
    """PostgREST 위험 신고 조회 클라이언트"""

    def __init__(self,
                 base_url: str,
                 api_key: str,
                 table: str = "hazard_reports",
                 timeout: int = 10,
                 max_retries: int = 2):
        """
        초기화합니다.

        Args:
            base_url: PostgREST 루트 URL
            api_key: API 키 (apikey 헤더와 Bearer 토큰으로 사용)
            table: 위험 신고 테이블명
            timeout: 요청 타임아웃 (초)
            max_retries: 재시도 횟수
        """
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.table = table
        self.timeout = timeout
        self.max_retries = max_retries
        self.session: Optional[aiohttp.ClientSession] = None

    def _new_session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(
            headers={
                "apikey": self.api_key,
                "Authorization": f"Bearer {self.api_key}",
                "Accept": "application/json",
            },
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        )

    async def __aenter__(self):
        self.session = self._new_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.session:
            await self.session.close()
            self.session = None

    async def _fetch_rows(self, session: aiohttp.ClientSession) -> list:
        """
        테이블 행을 조회합니다.

        Raises:
            HazardSourceError: 연결/타임아웃 실패 또는 JSON 배열이 아닌 응답
        """
        url = f"{self.base_url}/{self.table}"
        params = {"select": "*", "order": "created_at.desc"}

        async def _request():
            async with session.get(url, params=params) as response:
                response.raise_for_status()
                return await response.json()

        try:
            rows = await retry_with_backoff(
                _request,
                max_retries=self.max_retries,
                retry_on=(aiohttp.ClientError, asyncio.TimeoutError),
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise HazardSourceError(f"위험 신고 조회 실패: {e}") from e
        except ValueError as e:
            raise HazardSourceError(f"위험 신고 응답 디코딩 실패: {e}") from e

        if not isinstance(rows, list):
            raise HazardSourceError(f"위험 신고 응답이 배열이 아님: {type(rows).__name__}")
        return rows

    async def list_hazards(self) -> List[HazardReport]:
        """
        현재 위험 신고 목록을 조회합니다.

        잘못된 행은 경고 로그를 남기고 건너뜁니다. async with 밖에서 호출하면
        호출마다 자체 세션을 사용합니다.
        """
        if self.session:
            rows = await self._fetch_rows(self.session)
        else:
            async with self._new_session() as session:
                rows = await self._fetch_rows(session)

        hazards: List[HazardReport] = []
        for row in rows:
            try:
                hazards.append(to_hazard_report(row))
            except ValueError as e:
                log.warning(f"잘못된 위험 신고 행 건너뜀 id:{row.get('id') if isinstance(row, dict) else None} error:{e}")
        log.info(f"위험 신고 조회됨 count:{len(hazards)}")
        return hazards
