"""
대피 안내 (경로 점수, 안전 구역 순위) 테스트
"""

import asyncio
import pytest
from aiohttp import web
from prometheus_client import REGISTRY
from unittest.mock import AsyncMock, MagicMock
from hazardwatch.adapters.routing.osrm import OSRMRoutingClient
from hazardwatch.core.catalog import DEFAULT_ROUTES, DEFAULT_SAFE_ZONES
from hazardwatch.core.models import Coordinate, Route
from hazardwatch.features.evacuation import EvacuationAdvisor, active_hazard_counts
from hazardwatch.ports.routing import RoutingError


def _routing(**kwargs):
    routing = MagicMock()
    routing.get_road_path = AsyncMock(**kwargs)
    return routing


@pytest.fixture
def short_route():
    return Route(
        id="r1",
        name="Test Route",
        coordinates=[Coordinate(lat=17.5747, lon=120.3869), Coordinate(lat=17.5800, lon=120.3900)],
    )


class TestRefreshPaths:
    """경로 지오메트리 조회 테스트"""

    async def test_one_call_per_route(self):
        routing = _routing(side_effect=lambda wps: list(wps))
        advisor = EvacuationAdvisor(DEFAULT_ROUTES, DEFAULT_SAFE_ZONES, routing=routing)
        await advisor.refresh_paths()
        assert routing.get_road_path.await_count == len(DEFAULT_ROUTES)

    async def test_cached_between_refreshes(self, short_route):
        routing = _routing(side_effect=lambda wps: list(wps))
        advisor = EvacuationAdvisor([short_route], [], routing=routing)
        await advisor.refresh_paths()
        await advisor.refresh_paths()
        assert routing.get_road_path.await_count == 1
        await advisor.refresh_paths(force=True)
        assert routing.get_road_path.await_count == 2

    async def test_road_geometry_used(self, short_route):
        road = [Coordinate(lat=17.57 + i * 0.001, lon=120.38) for i in range(20)]
        advisor = EvacuationAdvisor([short_route], [], routing=_routing(return_value=road))
        await advisor.refresh_paths()
        assert advisor.path_for(short_route) == road

    async def test_routing_error_falls_back(self, short_route):
        advisor = EvacuationAdvisor([short_route], [], routing=_routing(side_effect=RoutingError("NoRoute")))
        await advisor.refresh_paths()
        assert advisor.path_for(short_route) == short_route.coordinates

    async def test_empty_path_falls_back(self, short_route):
        advisor = EvacuationAdvisor([short_route], [], routing=_routing(return_value=[]))
        await advisor.refresh_paths()
        assert advisor.path_for(short_route) == short_route.coordinates

    async def test_without_routing(self, short_route):
        advisor = EvacuationAdvisor([short_route], [])
        await advisor.refresh_paths()
        assert advisor.path_for(short_route) == short_route.coordinates


OSRM_PATH = "/route/v1/{profile}/{coords}"


def _fallbacks() -> float:
    return REGISTRY.get_sample_value("route_geometry_fallbacks_total") or 0.0


def _echo_geometry(coords: str) -> dict:
    """요청 경유지에 마지막 점을 한 번 더 붙인 경로 응답"""
    pairs = [[float(v) for v in p.split(",")] for p in coords.split(";")]
    return {"code": "Ok", "routes": [{"geometry": {"type": "LineString", "coordinates": pairs + [pairs[-1]]}}]}


class TestRefreshPathsWithOSRM:
    """실제 OSRM 클라이언트와 로컬 서버를 사용한 경로 조회 테스트"""

    async def test_concurrent_routes_with_staggered_responses(self, stub_server):
        calls = []

        async def handler(request):
            calls.append(request.match_info["coords"])
            # 첫 응답만 빠르게, 나머지는 느리게
            await asyncio.sleep(0.05 if len(calls) == 1 else 0.5)
            return web.json_response(_echo_geometry(request.match_info["coords"]))

        base_url = await stub_server([("GET", OSRM_PATH, handler)])
        advisor = EvacuationAdvisor(DEFAULT_ROUTES, DEFAULT_SAFE_ZONES,
                                    routing=OSRMRoutingClient(base_url, max_retries=1))
        before = _fallbacks()
        await advisor.refresh_paths()

        assert len(calls) == len(DEFAULT_ROUTES)
        assert _fallbacks() == before
        for route in DEFAULT_ROUTES:
            path = advisor.path_for(route)
            assert len(path) == len(route.coordinates) + 1
            assert path[:-1] == route.coordinates

    async def test_undecodable_body_falls_back(self, stub_server):
        async def handler(request):
            return web.Response(text="{not json", content_type="application/json")

        base_url = await stub_server([("GET", OSRM_PATH, handler)])
        advisor = EvacuationAdvisor(DEFAULT_ROUTES, DEFAULT_SAFE_ZONES,
                                    routing=OSRMRoutingClient(base_url, max_retries=0))
        before = _fallbacks()
        await advisor.refresh_paths()

        assert _fallbacks() == before + len(DEFAULT_ROUTES)
        for route in DEFAULT_ROUTES:
            assert advisor.path_for(route) == route.coordinates

    async def test_service_unavailable_falls_back(self, stub_server):
        async def handler(request):
            return web.Response(status=503)

        base_url = await stub_server([("GET", OSRM_PATH, handler)])
        advisor = EvacuationAdvisor(DEFAULT_ROUTES, DEFAULT_SAFE_ZONES,
                                    routing=OSRMRoutingClient(base_url, max_retries=0))
        await advisor.refresh_paths()
        assert all(advisor.path_for(r) == r.coordinates for r in DEFAULT_ROUTES)

    async def test_no_route_code_falls_back(self, stub_server):
        async def handler(request):
            return web.json_response({"code": "NoRoute", "routes": []})

        base_url = await stub_server([("GET", OSRM_PATH, handler)])
        advisor = EvacuationAdvisor(DEFAULT_ROUTES[:1], [], routing=OSRMRoutingClient(base_url))
        await advisor.refresh_paths()
        assert advisor.path_for(DEFAULT_ROUTES[0]) == DEFAULT_ROUTES[0].coordinates


class TestScoreRoutes:
    """경로 점수 테스트"""

    def test_unrefreshed_uses_waypoints(self, short_route, make_hazard):
        advisor = EvacuationAdvisor([short_route], [])
        # 첫 경유지 바로 옆 위험 → 10점 감점
        scores = advisor.score_routes([make_hazard(lat=17.5748, lon=120.3869)])
        assert scores == {"r1": 90}

    def test_default_catalog_without_hazards(self):
        advisor = EvacuationAdvisor(DEFAULT_ROUTES, DEFAULT_SAFE_ZONES)
        assert advisor.score_routes([]) == {"route-a": 100, "route-b": 100, "route-c": 100}

    def test_recomputed_on_each_call(self, short_route, make_hazard):
        advisor = EvacuationAdvisor([short_route], [])
        hazard = make_hazard(lat=17.5748, lon=120.3869)
        assert advisor.score_routes([hazard])["r1"] == 90
        assert advisor.score_routes([])["r1"] == 100


class TestNearestSafeZones:
    def test_default_limit(self, vigan, sample_safe_zones):
        advisor = EvacuationAdvisor([], sample_safe_zones, default_limit=2)
        ranked = advisor.nearest_safe_zones(vigan)
        assert [r.name for r in ranked] == ["Vigan City Hall", "Vigan Convention Center"]

    def test_explicit_limit(self, vigan, sample_safe_zones):
        advisor = EvacuationAdvisor([], sample_safe_zones)
        assert len(advisor.nearest_safe_zones(vigan, limit=1)) == 1
        assert advisor.nearest_safe_zones(vigan, limit=0) == []


def test_active_hazard_counts(make_hazard):
    hazards = [
        make_hazard("h1", hazard_type="flooding"),
        make_hazard("h2", hazard_type="flooding"),
        make_hazard("h3", hazard_type="fallen tree"),
        make_hazard("h4", hazard_type="flooding", status="fixed"),
    ]
    assert active_hazard_counts(hazards) == {"flooding": 2, "fallen tree": 1}
