# hazardwatch/settings.py
from __future__ import annotations
from pydantic import BaseModel, Field

class MqttCommon(BaseModel):
    host: str = "localhost"
    port: int = 1883
    username: str | None = None
    password: str | None = None
    tls: bool = False
    client_id: str | None = None
    keepalive: int = 30
    clean_session: bool = False
    lwt_topic: str = "hazardwatch/state"
    lwt_payload: str = "offline"
    lwt_qos: int = 1
    lwt_retain: bool = True

class HazardFeed(MqttCommon):
    topic: str = "hazards/changes/#"
    qos: int = 1
    reconnect_delay_sec: float = 5.0
    reconnect_max_sec: float = 60.0

class LocalMQTT(MqttCommon):
    topic_prefix: str = "hazardwatch"
    qos: int = 1
    retain: bool = False

class HAConfig(BaseModel):
    base_url: str = "http://supervisor/core/api"
    token: str = ""
    timeout_sec: int = 5
    notify_service: str = ""                  # 빈 값이면 HA 알림 비활성화

class HazardSource(BaseModel):
    base_url: str = ""                        # PostgREST 루트 (예: https://xyz.supabase.co/rest/v1)
    api_key: str = ""
    table: str = "hazard_reports"
    timeout_sec: int = 10

class Routing(BaseModel):
    enabled: bool = True
    base_url: str = "https://router.project-osrm.org"
    profile: str = "driving"
    timeout_sec: float = 8.0
    max_retries: int = 2

class Notifier(BaseModel):
    radius_km: float = 5.0
    description_preview_chars: int = 80
    dedup_max_keys: int | None = None         # None이면 세션 동안 축출 없음

class Location(BaseModel):
    fallback_lat: float = 17.5747             # Vigan, Ilocos Sur
    fallback_lon: float = 120.3869
    use_home_assistant: bool = True

class Scoring(BaseModel):
    sample_stride: int = 5

class Catalog(BaseModel):
    safe_zones_path: str = ""                 # 빈 값이면 내장 카탈로그 사용
    default_limit: int = 5

class Observability(BaseModel):
    http_port: int = 8099
    metrics_enabled: bool = True
    service_name: str = "HazardWatch"
    build_version: str = "0.1.0"
    build_date: str = "2025-11-13"
    log_level: str = "INFO"
    log_json: bool = False                    # True면 JSON 한 줄 로그

class Reliability(BaseModel):
    queue_maxsize: int = 1000
    drop_on_full: bool = False
    backoff_initial_sec: float = 0.5
    backoff_max_sec: float = 30.0

class Settings(BaseModel):

    hazard_feed: HazardFeed = Field(default_factory=HazardFeed)
    local_mqtt: LocalMQTT = Field(default_factory=LocalMQTT)
    ha: HAConfig = Field(default_factory=HAConfig)
    hazard_source: HazardSource = Field(default_factory=HazardSource)
    routing: Routing = Field(default_factory=Routing)
    notifier: Notifier = Field(default_factory=Notifier)
    location: Location = Field(default_factory=Location)
    scoring: Scoring = Field(default_factory=Scoring)
    catalog: Catalog = Field(default_factory=Catalog)
    observability: Observability = Field(default_factory=Observability)
    reliability: Reliability = Field(default_factory=Reliability)
