# hazardwatch/main.py
import os, asyncio, signal
from typing import Optional
import uvicorn
from hazardwatch.settings import Settings
from hazardwatch.core.catalog import DEFAULT_ROUTES
from hazardwatch.core.dedup import HazardEventDeduplicator
from hazardwatch.core.models import Coordinate
from hazardwatch.core.notifier import ProximityNotifier
from hazardwatch.features.evacuation import EvacuationAdvisor
from hazardwatch.features.location import resolve_location
from hazardwatch.features.safe_zone_catalog import load_catalog
from hazardwatch.observability.health import create_app
from hazardwatch.observability.logging_setup import setup_logging, get_logger
from hazardwatch.adapters.mqtt_remote.client_async import RemoteMqttHazardFeed
from hazardwatch.adapters.mqtt_local.publisher_async import MqttNotificationPublisher
from hazardwatch.adapters.homeassistant.client import HAClient
from hazardwatch.adapters.homeassistant.notify import HANotificationDispatcher
from hazardwatch.adapters.hazard_source.postgrest import PostgRESTHazardSource
from hazardwatch.adapters.routing.osrm import OSRMRoutingClient
from hazardwatch.orchestrators.session import HazardWatchSession

def _b(name, default=False): return os.getenv(name, str(default)).lower() in ("1","true","yes","on")

def _opt_int(name, default):
    v = os.getenv(name)
    return int(v) if v not in (None, "") else default

def build_settings() -> Settings:
    s = Settings()

    # 변경 피드 (원격 MQTT)
    s.hazard_feed.host = os.getenv("HAZARD_FEED_HOST", s.hazard_feed.host)
    s.hazard_feed.port = int(os.getenv("HAZARD_FEED_PORT", s.hazard_feed.port))
    s.hazard_feed.username = os.getenv("HAZARD_FEED_USERNAME", s.hazard_feed.username)
    s.hazard_feed.password = os.getenv("HAZARD_FEED_PASSWORD", s.hazard_feed.password)
    s.hazard_feed.client_id = os.getenv("HAZARD_FEED_CLIENT_ID", s.hazard_feed.client_id)
    s.hazard_feed.tls = _b("HAZARD_FEED_TLS", s.hazard_feed.tls)
    s.hazard_feed.topic = os.getenv("HAZARD_FEED_TOPIC", s.hazard_feed.topic)

    # 로컬 MQTT (알림 발송)
    s.local_mqtt.host = os.getenv("LOCAL_MQTT_HOST", s.local_mqtt.host)
    s.local_mqtt.port = int(os.getenv("LOCAL_MQTT_PORT", s.local_mqtt.port))
    s.local_mqtt.username = os.getenv("LOCAL_MQTT_USERNAME", s.local_mqtt.username)
    s.local_mqtt.password = os.getenv("LOCAL_MQTT_PASSWORD", s.local_mqtt.password)
    s.local_mqtt.topic_prefix = os.getenv("LOCAL_TOPIC_PREFIX", s.local_mqtt.topic_prefix)

    # HA
    s.ha.base_url = os.getenv("HA_BASE_URL", s.ha.base_url)
    s.ha.token = os.getenv("HA_TOKEN", os.getenv("SUPERVISOR_TOKEN", s.ha.token))
    s.ha.notify_service = os.getenv("HA_NOTIFY_SERVICE", s.ha.notify_service)

    # 위험 신고 조회
    s.hazard_source.base_url = os.getenv("HAZARD_SOURCE_URL", s.hazard_source.base_url)
    s.hazard_source.api_key = os.getenv("HAZARD_SOURCE_API_KEY", s.hazard_source.api_key)
    s.hazard_source.table = os.getenv("HAZARD_SOURCE_TABLE", s.hazard_source.table)

    # 라우팅
    s.routing.enabled = _b("ROUTING_ENABLED", s.routing.enabled)
    s.routing.base_url = os.getenv("OSRM_BASE_URL", s.routing.base_url)
    s.routing.profile = os.getenv("OSRM_PROFILE", s.routing.profile)

    # 알림
    s.notifier.radius_km = float(os.getenv("NOTIFY_RADIUS_KM", s.notifier.radius_km))
    s.notifier.dedup_max_keys = _opt_int("DEDUP_MAX_KEYS", s.notifier.dedup_max_keys)

    # 위치
    s.location.fallback_lat = float(os.getenv("FALLBACK_LAT", s.location.fallback_lat))
    s.location.fallback_lon = float(os.getenv("FALLBACK_LON", s.location.fallback_lon))
    s.location.use_home_assistant = _b("USE_HA_LOCATION", s.location.use_home_assistant)

    # 점수/카탈로그
    s.scoring.sample_stride = int(os.getenv("ROUTE_SAMPLE_STRIDE", s.scoring.sample_stride))
    s.catalog.safe_zones_path = os.getenv("SAFE_ZONES_PATH", s.catalog.safe_zones_path)
    s.catalog.default_limit = int(os.getenv("SAFE_ZONES_LIMIT", s.catalog.default_limit))

    # 관측성
    s.observability.metrics_enabled = _b("METRICS_ENABLED", s.observability.metrics_enabled)
    s.observability.http_port = int(os.getenv("HTTP_PORT", s.observability.http_port))
    s.observability.log_level = os.getenv("LOG_LEVEL", s.observability.log_level)
    s.observability.log_json = _b("LOG_JSON", s.observability.log_json)

    # 신뢰성
    s.reliability.queue_maxsize = int(os.getenv("QUEUE_MAXSIZE", s.reliability.queue_maxsize))
    s.reliability.drop_on_full = _b("DROP_ON_FULL", s.reliability.drop_on_full)

    return s

def build_dispatcher(s: Settings, ha: HAClient):
    if s.ha.notify_service:
        return HANotificationDispatcher(ha, s.ha.notify_service)
    return MqttNotificationPublisher(
        broker_host=s.local_mqtt.host,
        broker_port=s.local_mqtt.port,
        topic_prefix=s.local_mqtt.topic_prefix,
        username=s.local_mqtt.username,
        password=s.local_mqtt.password,
        client_id=s.local_mqtt.client_id,
        keepalive=s.local_mqtt.keepalive,
        lwt_topic=s.local_mqtt.lwt_topic,
        qos=s.local_mqtt.qos,
        retain=s.local_mqtt.retain,
        backoff_initial=s.reliability.backoff_initial_sec,
        backoff_max=s.reliability.backoff_max_sec,
    )

async def start_http(settings: Settings, advisor: EvacuationAdvisor,
                     hazard_source: Optional[PostgRESTHazardSource]) -> asyncio.Task:
    app = create_app(settings, advisor=advisor, hazard_source=hazard_source)
    return asyncio.create_task(uvicorn.Server(
        uvicorn.Config(app, host="0.0.0.0", port=settings.observability.http_port, log_level="info")
    ).serve())

async def main():
    s = build_settings()
    setup_logging(s.observability.log_level, s.observability.log_json)
    log = get_logger()
    log.info("설정 로드 완료")

    ha = HAClient(base_url=s.ha.base_url, token=s.ha.token, timeout=s.ha.timeout_sec)
    fallback = Coordinate(lat=s.location.fallback_lat, lon=s.location.fallback_lon)
    location = await resolve_location(ha if s.location.use_home_assistant else None, fallback)
    log.info(f"사용자 위치 lat:{location.lat} lon:{location.lon}")

    routing = None
    if s.routing.enabled:
        routing = OSRMRoutingClient(s.routing.base_url, s.routing.profile,
                                    s.routing.timeout_sec, s.routing.max_retries)
    advisor = EvacuationAdvisor(
        DEFAULT_ROUTES,
        load_catalog(s.catalog.safe_zones_path),
        routing=routing,
        sample_stride=s.scoring.sample_stride,
        default_limit=s.catalog.default_limit,
    )
    hazard_source = None
    if s.hazard_source.base_url:
        hazard_source = PostgRESTHazardSource(s.hazard_source.base_url, s.hazard_source.api_key,
                                              s.hazard_source.table, s.hazard_source.timeout_sec)

    feed = RemoteMqttHazardFeed(
        s.hazard_feed.host,
        s.hazard_feed.port,
        s.hazard_feed.topic,
        qos=s.hazard_feed.qos,
        username=s.hazard_feed.username,
        password=s.hazard_feed.password,
        tls=s.hazard_feed.tls,
        client_id=s.hazard_feed.client_id,
        keepalive=s.hazard_feed.keepalive,
        clean_session=s.hazard_feed.clean_session,
        lwt_topic=s.hazard_feed.lwt_topic,
        lwt_payload=s.hazard_feed.lwt_payload,
        reconnect_delay_sec=s.hazard_feed.reconnect_delay_sec,
        reconnect_max_sec=s.hazard_feed.reconnect_max_sec,
    )
    notifier = ProximityNotifier(
        location,
        radius_km=s.notifier.radius_km,
        dedup=HazardEventDeduplicator(s.notifier.dedup_max_keys),
        preview_chars=s.notifier.description_preview_chars,
    )
    dispatcher = build_dispatcher(s, ha)
    session = HazardWatchSession(feed, dispatcher, notifier,
                                 queue_maxsize=s.reliability.queue_maxsize,
                                 drop_on_full=s.reliability.drop_on_full)

    http_task = await start_http(s, advisor, hazard_source)
    log.info("HTTP 서버 시작됨")

    stop = asyncio.Future()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        try: loop.add_signal_handler(sig, lambda: (not stop.done()) and stop.set_result(True))
        except NotImplementedError: pass

    await session.start()
    await stop
    await session.stop()
    if isinstance(dispatcher, MqttNotificationPublisher):
        await dispatcher.stop()
    http_task.cancel()
    log.info("종료 완료")

def run():
    asyncio.run(main())

if __name__ == "__main__":
    run()
