"""
환경 변수 설정 로딩 테스트
"""

from hazardwatch.main import build_dispatcher, build_settings
from hazardwatch.adapters.homeassistant.client import HAClient
from hazardwatch.adapters.homeassistant.notify import HANotificationDispatcher
from hazardwatch.adapters.mqtt_local.publisher_async import MqttNotificationPublisher


def test_defaults(monkeypatch):
    for name in ("NOTIFY_RADIUS_KM", "DEDUP_MAX_KEYS", "ROUTE_SAMPLE_STRIDE", "HA_NOTIFY_SERVICE"):
        monkeypatch.delenv(name, raising=False)
    s = build_settings()
    assert s.notifier.radius_km == 5.0
    assert s.notifier.dedup_max_keys is None
    assert s.scoring.sample_stride == 5
    assert s.hazard_feed.topic == "hazards/changes/#"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("NOTIFY_RADIUS_KM", "2.5")
    monkeypatch.setenv("DEDUP_MAX_KEYS", "100")
    monkeypatch.setenv("ROUTE_SAMPLE_STRIDE", "1")
    monkeypatch.setenv("ROUTING_ENABLED", "false")
    monkeypatch.setenv("FALLBACK_LAT", "14.5995")
    monkeypatch.setenv("HAZARD_FEED_TLS", "yes")
    s = build_settings()
    assert s.notifier.radius_km == 2.5
    assert s.notifier.dedup_max_keys == 100
    assert s.scoring.sample_stride == 1
    assert s.routing.enabled is False
    assert s.location.fallback_lat == 14.5995
    assert s.hazard_feed.tls is True


def test_supervisor_token(monkeypatch):
    monkeypatch.delenv("HA_TOKEN", raising=False)
    monkeypatch.setenv("SUPERVISOR_TOKEN", "sup-token")
    assert build_settings().ha.token == "sup-token"


def test_build_dispatcher(monkeypatch):
    monkeypatch.delenv("HA_NOTIFY_SERVICE", raising=False)
    s = build_settings()
    ha = HAClient(s.ha.base_url, s.ha.token)
    assert isinstance(build_dispatcher(s, ha), MqttNotificationPublisher)

    s.ha.notify_service = "mobile_app_phone"
    dispatcher = build_dispatcher(s, ha)
    assert isinstance(dispatcher, HANotificationDispatcher)
    assert dispatcher.service == "mobile_app_phone"
