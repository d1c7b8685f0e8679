"""
Remote MQTT change-feed adapter for HazardWatch.

Subscribes to the hazard_reports change feed and yields decoded
JSON payloads in arrival order, reconnecting with exponential backoff.
"""

import json
import ssl
from typing import AsyncIterator, Dict
from aiomqtt import Client, MqttError, Will
from hazardwatch.common.retry import exponential_backoff
from hazardwatch.observability.logging_setup import get_logger
log = get_logger("hazardwatch.mqtt_remote")

def decode_payload(payload) -> Dict:
    """MQTT 페이로드(bytes/str)를 JSON 딕셔너리로 변환합니다."""
    if isinstance(payload, (bytes, bytearray)):
        payload = payload.decode("utf-8")
    data = json.loads(payload)
    if not isinstance(data, dict):
        raise ValueError(f"JSON 객체가 아님: {type(data).__name__}")
    return data

class RemoteMqttHazardFeed:
    """원격 MQTT 위험 변경 피드 어댑터"""

    def __init__(
        self,
        host: str,
        port: int,
        topic: str,
        *,
        qos: int = 1,
        username: str | None = None,
        password: str | None = None,
        tls: bool = False,
        client_id: str | None = None,
        keepalive: int = 30,
        clean_session: bool = False,
        lwt_topic: str = "hazardwatch/state",
        lwt_payload: str = "offline",
        lwt_qos: int = 1,
        lwt_retain: bool = True,
        reconnect_delay_sec: float = 5.0,
        reconnect_max_sec: float = 60.0,
    ):
        self.host = host
        self.port = port
        self.topic = topic
        self.qos = qos
        self.username = username
        self.password = password
        self.tls = tls
        self.client_id = client_id
        self.keepalive = keepalive
        self.clean_session = clean_session
        self.lwt_topic = lwt_topic
        self.lwt_payload = lwt_payload
        self.lwt_qos = lwt_qos
        self.lwt_retain = lwt_retain
        self.reconnect_delay_sec = reconnect_delay_sec
        self.reconnect_max_sec = reconnect_max_sec

        self._running = False

    def _make_client(self) -> Client:
        tls_context = ssl.create_default_context() if self.tls else None
        will = Will(
            topic=self.lwt_topic,
            payload=self.lwt_payload.encode("utf-8"),
            qos=self.lwt_qos,
            retain=self.lwt_retain,
        )
        return Client(
            hostname=self.host,
            port=self.port,
            username=self.username,
            password=self.password,
            identifier=self.client_id,
            keepalive=self.keepalive,
            clean_session=self.clean_session,
            tls_context=tls_context,
            will=will,
        )

    async def recv(self) -> AsyncIterator[Dict]:
        """변경 이벤트를 수신 순서대로 내보냅니다. 연결이 끊기면 재연결합니다."""
        self._running = True
        failures = 0
        while self._running:
            try:
                async with self._make_client() as client:
                    await client.subscribe(self.topic, qos=self.qos)
                    log.info(f"변경 피드 구독됨: {self.host}:{self.port} topic:{self.topic}")
                    failures = 0
                    async for message in client.messages:
                        if not self._running:
                            break
                        try:
                            yield decode_payload(message.payload)
                        except (ValueError, UnicodeDecodeError) as e:
                            # JSONDecodeError는 ValueError의 하위 클래스
                            log.error(f"변경 피드 페이로드 파싱 오류: {e}")
            except MqttError as e:
                failures += 1
                log.error(f"MQTT 오류 (재연결 {failures}회차): {e}")
                if self._running:
                    await exponential_backoff(failures, self.reconnect_delay_sec, self.reconnect_max_sec)

    async def stop(self) -> None:
        self._running = False
        log.info("변경 피드 구독 해제됨")
