"""
MQTT 어댑터 테스트 (원격 변경 피드, 로컬 알림 발송)
"""

import json
import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch
from aiomqtt import MqttError
from hazardwatch.adapters.mqtt_local.publisher_async import MqttNotificationPublisher
from hazardwatch.adapters.mqtt_remote.client_async import RemoteMqttHazardFeed, decode_payload
from hazardwatch.core.models import NotificationIntent


@pytest.fixture
def intent():
    return NotificationIntent(
        severity="warning",
        title="New hazard reported 0.0km from your location",
        body="flooding - Knee-deep water",
        hazard_id="h1",
        kind="created",
        distance_km=0.03,
    )


class FakeClient:
    """aiomqtt.Client 대역"""

    def __init__(self, payloads):
        self.payloads = payloads
        self.subscribed = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def subscribe(self, topic, qos=0):
        self.subscribed = (topic, qos)

    @property
    def messages(self):
        return self._messages()

    async def _messages(self):
        for p in self.payloads:
            yield SimpleNamespace(payload=p)


class TestDecodePayload:
    def test_bytes(self):
        assert decode_payload(b'{"kind": "insert"}') == {"kind": "insert"}

    def test_str(self):
        assert decode_payload('{"a": 1}') == {"a": 1}

    @pytest.mark.parametrize("payload", [b"not json", b"[1, 2]", b"\xff\xfe"])
    def test_invalid(self, payload):
        with pytest.raises(ValueError):
            decode_payload(payload)


class TestRemoteMqttHazardFeed:
    """원격 변경 피드 테스트"""

    async def test_recv_skips_bad_payloads(self):
        feed = RemoteMqttHazardFeed("broker.invalid", 1883, "hazards/changes/#", qos=1)
        fake = FakeClient([b'{"kind": "insert", "seq": 1}', b"garbage", b'{"kind": "update", "seq": 2}'])
        with patch.object(feed, "_make_client", return_value=fake):
            agen = feed.recv()
            first = await agen.__anext__()
            second = await agen.__anext__()
            await feed.stop()
            await agen.aclose()
        assert [first["seq"], second["seq"]] == [1, 2]
        assert fake.subscribed == ("hazards/changes/#", 1)


class TestMqttNotificationPublisher:
    """로컬 알림 발송 테스트"""

    def _publisher(self, **kwargs):
        return MqttNotificationPublisher(
            broker_host="localhost", broker_port=1883, topic_prefix="hazardwatch/",
            backoff_initial=0.0, backoff_max=0.0, **kwargs,
        )

    def test_topic_for(self, intent):
        assert self._publisher().topic_for(intent) == "hazardwatch/notifications/created"

    async def test_dispatch_publishes_json(self, intent):
        publisher = self._publisher(qos=1, retain=False)
        publisher.client = AsyncMock()
        await publisher.dispatch(intent)

        args, kwargs = publisher.client.publish.call_args
        assert args[0] == "hazardwatch/notifications/created"
        body = json.loads(args[1].decode("utf-8"))
        assert body["hazard_id"] == "h1"
        assert body["severity"] == "warning"
        assert kwargs == {"qos": 1, "retain": False}

    async def test_dispatch_reconnects_after_error(self, intent):
        publisher = self._publisher()
        broken = AsyncMock()
        broken.publish.side_effect = MqttError("connection lost")
        fresh = AsyncMock()
        publisher.client = broken
        with patch.object(publisher, "_connect", AsyncMock(return_value=fresh)) as connect:
            await publisher.dispatch(intent)
        connect.assert_awaited_once()
        fresh.publish.assert_awaited_once()

    async def test_dispatch_gives_up(self, intent):
        publisher = self._publisher(max_retries=1)
        broken = AsyncMock()
        broken.publish.side_effect = MqttError("connection lost")
        with patch.object(publisher, "_connect", AsyncMock(return_value=broken)):
            with pytest.raises(MqttError):
                await publisher.dispatch(intent)
        assert broken.publish.await_count == 2


class BrokenClient(FakeClient):
    async def __aenter__(self):
        raise MqttError("connection refused")


async def test_recv_reconnects_after_broker_error():
    feed = RemoteMqttHazardFeed("broker.invalid", 1883, "hazards/changes/#", reconnect_delay_sec=0.0)
    clients = [BrokenClient([]), FakeClient([b'{"kind": "insert"}'])]
    with patch.object(feed, "_make_client", side_effect=clients):
        agen = feed.recv()
        assert await agen.__anext__() == {"kind": "insert"}
        await feed.stop()
        await agen.aclose()
