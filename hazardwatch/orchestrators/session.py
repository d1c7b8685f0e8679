"""
Per-user notification session for HazardWatch.

This module runs the change feed → queue → notifier → dispatch pipeline
for a single user location context. Each session owns its own notifier
and dedup set; sessions never share state.
"""

import asyncio
from typing import List, Optional
from hazardwatch.core.models import Coordinate, NotificationIntent
from hazardwatch.core.notifier import ProximityNotifier
from hazardwatch.ports.dispatch import NotificationDispatchPort
from hazardwatch.ports.feed import HazardFeedPort
from hazardwatch.observability import metrics
from hazardwatch.observability.logging_setup import get_logger

log = get_logger("hazardwatch.session")

class HazardWatchSession:
    """사용자 세션 하나의 위험 알림 파이프라인"""

    def __init__(self,
                 feed: HazardFeedPort,
                 dispatcher: NotificationDispatchPort,
                 notifier: ProximityNotifier,
                 *,
                 session_id: str = "default",
                 queue_maxsize: int = 1000,
                 drop_on_full: bool = False):
        """
        초기화합니다.

        Args:
            feed: 위험 변경 피드
            dispatcher: 알림 발송 포트
            notifier: 이 세션 전용 ProximityNotifier
            session_id: 로그용 세션 식별자
            queue_maxsize: 큐 최대 크기
            drop_on_full: 큐가 가득 찰 때 이벤트 드롭 여부
        """
        self.feed = feed
        self.dispatcher = dispatcher
        self.notifier: Optional[ProximityNotifier] = notifier
        self.session_id = session_id
        self.q: asyncio.Queue = asyncio.Queue(maxsize=queue_maxsize)
        self.drop_on_full = drop_on_full
        self._tasks: List[asyncio.Task] = []
        self._closed = False
        self.log = log.bind(session=session_id)

    @property
    def closed(self) -> bool:
        return self._closed

    def update_location(self, location: Coordinate) -> None:
        """사용자 위치를 갱신합니다. 이후 이벤트에만 적용됩니다."""
        if self.notifier is not None:
            self.notifier.update_location(location)
            self.log.info(f"사용자 위치 갱신 lat:{location.lat} lon:{location.lon}")

    async def start(self) -> None:
        """프로듀서와 단일 컨슈머 태스크를 시작합니다."""
        if self._closed:
            raise RuntimeError("이미 종료된 세션입니다")
        self._tasks = [
            asyncio.create_task(self._producer()),
            asyncio.create_task(self._consumer()),
        ]
        metrics.active_sessions.inc()
        self.log.info("알림 세션 시작됨")

    async def wait(self) -> None:
        """세션 태스크가 끝날 때까지 대기합니다."""
        await asyncio.gather(*self._tasks)

    async def stop(self) -> None:
        """
        세션을 종료합니다.

        구독을 해제하고 태스크를 취소한 뒤 중복 제거 집합을 폐기합니다.
        종료 이후에는 어떤 알림도 발송하지 않습니다.
        """
        if self._closed:
            return
        self._closed = True
        await self.feed.stop()
        for t in self._tasks:
            t.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        self.notifier = None
        metrics.active_sessions.dec()
        self.log.info("알림 세션 종료됨")

    async def _producer(self):
        """변경 피드 이벤트를 수신 순서대로 큐에 추가하는 프로듀서"""
        async for raw in self.feed.recv():
            if self._closed:
                break
            try:
                self.q.put_nowait(raw)
            except asyncio.QueueFull:
                if self.drop_on_full:
                    self.log.warning("큐가 가득 찼습니다. 이벤트를 드롭합니다.")
                    continue
                await self.q.put(raw)
            metrics.queue_depth.set(self.q.qsize())

    async def _consumer(self):
        """큐에서 이벤트를 하나씩 처리하는 컨슈머"""
        while True:
            raw = await self.q.get()
            try:
                await self.handle(raw)
            except Exception as e:
                # 발송 실패 등은 로그만 남기고 다음 이벤트 처리
                self.log.error(f"이벤트 처리 오류: {e}")
            finally:
                self.q.task_done()
                metrics.queue_depth.set(self.q.qsize())

    async def handle(self, raw: dict) -> Optional[NotificationIntent]:
        """이벤트 하나를 평가하고 알림이 있으면 발송합니다."""
        if self._closed or self.notifier is None:
            return None
        intent = self.notifier.handle_raw(raw)
        if intent is None or self._closed:
            return None
        await self.dispatcher.dispatch(intent)
        return intent
