"""
테스트 설정 및 픽스처

이 모듈은 pytest 설정과 공통 픽스처를 제공합니다.
"""

import pytest
import inspect
import tempfile
import os
from typing import Callable
from aiohttp import web
from aiohttp.test_utils import TestServer
from hazardwatch.settings import Settings
from hazardwatch.core.models import Coordinate, HazardReport, SafeZone


VIGAN = Coordinate(lat=17.5747, lon=120.3869)


@pytest.fixture
def vigan():
    """기준 사용자 위치 (Vigan 중심)"""
    return VIGAN


@pytest.fixture
def temp_file_path():
    """임시 파일 경로"""
    with tempfile.NamedTemporaryFile(delete=False) as f:
        temp_path = f.name
    yield temp_path
    if os.path.exists(temp_path):
        os.unlink(temp_path)


@pytest.fixture
def sample_settings():
    """테스트용 설정"""
    settings = Settings()
    settings.observability.service_name = "test-service"
    settings.observability.build_version = "1.0.0"
    settings.observability.http_port = 8080
    return settings


@pytest.fixture
def make_hazard() -> Callable[..., HazardReport]:
    """HazardReport 팩토리"""
    def _make(hazard_id: str = "h1", lat: float = 17.5750, lon: float = 120.3870,
              status: str = "pending", hazard_type: str = "fallen tree",
              name: str | None = None, description: str = "Large tree blocking the road") -> HazardReport:
        return HazardReport(
            id=hazard_id,
            name=name,
            hazard_type=hazard_type,
            description=description,
            location=Coordinate(lat=lat, lon=lon),
            status=status,
        )
    return _make


@pytest.fixture
def raw_row():
    """변경 피드 레코드 팩토리"""
    def _row(hazard_id: str = "h1", lat: float = 17.5750, lon: float = 120.3870,
             status: str = "pending", **extra) -> dict:
        row = {
            "id": hazard_id,
            "name": None,
            "hazard_type": "flooding",
            "description": "Knee-deep water on the street near the plaza",
            "latitude": lat,
            "longitude": lon,
            "status": status,
            "created_at": "2025-11-13T01:36:17+00:00",
        }
        row.update(extra)
        return row
    return _row


@pytest.fixture
def sample_safe_zones():
    """테스트용 안전 구역 데이터"""
    return [
        SafeZone(name="Vigan City Hall", location=Coordinate(lat=17.5741, lon=120.3868)),
        SafeZone(name="Vigan Convention Center", location=Coordinate(lat=17.5720, lon=120.3890)),
        SafeZone(name="Bantay Church", location=Coordinate(lat=17.5920, lon=120.3890)),
    ]


@pytest.fixture
async def stub_server():
    """로컬 aiohttp 서버 팩토리. (메서드, 경로, 핸들러) 목록을 받아 기본 URL을 반환"""
    servers = []

    async def _start(routes) -> str:
        app = web.Application()
        for method, path, handler in routes:
            app.router.add_route(method, path, handler)
        server = TestServer(app)
        await server.start_server()
        servers.append(server)
        return f"http://{server.host}:{server.port}"

    yield _start
    for server in servers:
        await server.close()


def pytest_configure(config):
    """pytest 설정"""
    config.addinivalue_line("markers", "asyncio: 비동기 테스트 마커")
    config.addinivalue_line("markers", "integration: 통합 테스트 마커")


def pytest_collection_modifyitems(config, items):
    """테스트 아이템 수정"""
    for item in items:
        # 비동기 테스트에 asyncio 마커 추가
        if inspect.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)
        if "integration" in item.name or "end_to_end" in item.name:
            item.add_marker(pytest.mark.integration)
