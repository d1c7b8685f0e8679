"""
Local MQTT publisher adapter for HazardWatch.

This module publishes notification intents as JSON to a local
MQTT broker for the toast/alert presentation layer.
"""

import json
from contextlib import AsyncExitStack
from typing import Optional
from aiomqtt import Client, MqttError, Will
from hazardwatch.common.retry import retry_with_backoff
from hazardwatch.core.models import NotificationIntent
from hazardwatch.observability.logging_setup import get_logger

log = get_logger("hazardwatch.mqtt_local")

class MqttNotificationPublisher:
    """로컬 MQTT 알림 발송 어댑터"""

    def __init__(self,
                 *,
                 broker_host: str,
                 broker_port: int,
                 topic_prefix: str,
                 username: str | None = None,
                 password: str | None = None,
                 client_id: str | None = None,
                 keepalive: int = 30,
                 lwt_topic: str = "hazardwatch/state",
                 qos: int = 1,
                 retain: bool = False,
                 backoff_initial: float = 0.5,
                 backoff_max: float = 30.0,
                 max_retries: int = 3):
        """
        초기화합니다.

        Args:
            broker_host: MQTT 브로커 호스트
            broker_port: MQTT 브로커 포트
            topic_prefix: 토픽 접두사
            username: 사용자명
            password: 비밀번호
            client_id: 클라이언트 ID
            keepalive: keepalive 시간
            lwt_topic: Last Will and Testament 토픽
            qos: 발송 QoS
            retain: retain 플래그
            backoff_initial: 초기 백오프 시간
            backoff_max: 최대 백오프 시간
            max_retries: 최대 재시도 횟수
        """
        self.broker_host = broker_host
        self.broker_port = broker_port
        self.topic_prefix = topic_prefix.rstrip("/")
        self.username = username
        self.password = password
        self.client_id = client_id
        self.keepalive = keepalive
        self.lwt_topic = lwt_topic
        self.qos = qos
        self.retain = retain
        self.backoff_initial = backoff_initial
        self.backoff_max = backoff_max
        self.max_retries = max_retries

        self.client: Optional[Client] = None
        self._stack: Optional[AsyncExitStack] = None

    def topic_for(self, intent: NotificationIntent) -> str:
        return f"{self.topic_prefix}/notifications/{intent.kind}"

    async def _connect(self) -> Client:
        """MQTT 브로커에 연결합니다."""
        stack = AsyncExitStack()
        client = Client(
            hostname=self.broker_host,
            port=self.broker_port,
            username=self.username,
            password=self.password,
            identifier=self.client_id,
            keepalive=self.keepalive,
            will=Will(topic=self.lwt_topic, payload=b"offline", qos=1, retain=True),
        )
        await stack.enter_async_context(client)
        await client.publish(self.lwt_topic, b"online", qos=1, retain=True)
        self._stack, self.client = stack, client
        log.info(f"로컬 MQTT 브로커 연결됨: {self.broker_host}:{self.broker_port}")
        return client

    async def _disconnect(self) -> None:
        stack, self._stack, self.client = self._stack, None, None
        if stack is not None:
            try:
                await stack.aclose()
            except MqttError as e:
                log.warning(f"로컬 MQTT 연결 종료 중 오류: {e}")

    async def dispatch(self, intent: NotificationIntent) -> None:
        """알림 의도를 JSON으로 발송합니다. 실패하면 재연결 후 재시도합니다."""
        topic = self.topic_for(intent)
        payload = json.dumps(intent.model_dump(), ensure_ascii=False).encode("utf-8")

        async def _publish():
            client = self.client or await self._connect()
            try:
                await client.publish(topic, payload, qos=self.qos, retain=self.retain)
            except MqttError:
                await self._disconnect()
                raise

        await retry_with_backoff(
            _publish,
            max_retries=self.max_retries,
            base_delay=self.backoff_initial,
            max_delay=self.backoff_max,
            retry_on=(MqttError,),
        )
        log.info(f"알림 발송 성공 topic:{topic} hazard:{intent.hazard_id}")

    async def stop(self) -> None:
        """발송을 중지합니다."""
        await self._disconnect()
        log.info("로컬 MQTT 연결 종료됨")
