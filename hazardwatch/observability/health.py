"""
HTTP endpoints for HazardWatch.

This module implements health, readiness, metrics and info endpoints,
plus the read-only evacuation views (safe-zone ranking, route scores,
hazard summary) consumed by the map UI.
"""

import aiohttp
import asyncio
import time
from typing import List, Optional
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import Response, JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from hazardwatch.settings import Settings
from hazardwatch.common.geo import format_distance
from hazardwatch.core.catalog import DEFAULT_ROUTES
from hazardwatch.core.models import Coordinate, HazardReport
from hazardwatch.features.evacuation import EvacuationAdvisor, active_hazard_counts
from hazardwatch.features.safe_zone_catalog import load_catalog
from hazardwatch.ports.hazard_source import HazardSourceError, HazardSourcePort
from hazardwatch.observability import metrics as _metrics
from hazardwatch.observability.logging_setup import get_logger

log = get_logger("hazardwatch.http")

def create_app(settings: Settings,
               advisor: Optional[EvacuationAdvisor] = None,
               hazard_source: Optional[HazardSourcePort] = None) -> FastAPI:
    """FastAPI 애플리케이션을 생성합니다."""
    app = FastAPI(
        title=settings.observability.service_name,
        version=settings.observability.build_version,
        description="HazardWatch hazard awareness and evacuation guidance service"
    )

    if advisor is None:
        advisor = EvacuationAdvisor(
            DEFAULT_ROUTES,
            load_catalog(settings.catalog.safe_zones_path),
            sample_stride=settings.scoring.sample_stride,
            default_limit=settings.catalog.default_limit,
        )
    fallback = Coordinate(lat=settings.location.fallback_lat, lon=settings.location.fallback_lon)
    start_time = time.time()

    async def _current_hazards() -> List[HazardReport]:
        # 조회 실패 시 빈 목록으로 강등 (점수는 100)
        if hazard_source is None:
            return []
        try:
            return await hazard_source.list_hazards()
        except (HazardSourceError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            log.warning(f"위험 신고 조회 실패, 빈 목록 사용 error:{e}")
            return []

    @app.get("/health")
    async def health():
        """헬스 체크 엔드포인트"""
        return JSONResponse({
            "status": "ok",
            "service": settings.observability.service_name,
            "timestamp": time.time()
        })

    @app.get("/ready")
    async def ready():
        """레디니스 체크 엔드포인트"""
        return JSONResponse({
            "status": "ready",
            "service": settings.observability.service_name,
            "safe_zones": len(advisor.safe_zones),
            "routes": len(advisor.routes),
            "timestamp": time.time()
        })

    @app.get("/metrics")
    async def metrics():
        """Prometheus 메트릭 엔드포인트"""
        if not settings.observability.metrics_enabled:
            raise HTTPException(status_code=503, detail="Metrics disabled")
        _metrics.uptime_seconds.set(time.time() - start_time)
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/info")
    async def info():
        """서비스 정보 엔드포인트"""
        return JSONResponse({
            "service": settings.observability.service_name,
            "version": settings.observability.build_version,
            "build_date": settings.observability.build_date,
            "uptime_seconds": int(time.time() - start_time),
            "metrics_enabled": settings.observability.metrics_enabled,
            "log_level": settings.observability.log_level,
            "notify_radius_km": settings.notifier.radius_km,
        })

    @app.get("/safe-zones")
    async def safe_zones(lat: Optional[float] = Query(default=None),
                         lon: Optional[float] = Query(default=None),
                         limit: Optional[int] = Query(default=None, ge=0)):
        """기준점에서 가까운 안전 구역 목록"""
        if (lat is None) != (lon is None):
            raise HTTPException(status_code=400, detail="lat and lon must be given together")
        if lat is None:
            origin = fallback
        else:
            try:
                origin = Coordinate(lat=lat, lon=lon)
            except ValueError:
                raise HTTPException(status_code=422, detail="coordinates out of range")

        ranked = advisor.nearest_safe_zones(origin, limit)
        return {
            "origin": {"lat": origin.lat, "lon": origin.lon},
            "safe_zones": [
                {
                    "name": r.zone.name,
                    "address": r.zone.address,
                    "lat": r.zone.location.lat,
                    "lon": r.zone.location.lon,
                    "distance_km": r.distance_km,
                    "distance_label": format_distance(r.distance_km),
                }
                for r in ranked
            ],
        }

    @app.get("/routes/scores")
    async def route_scores():
        """현재 위험 신고 기준 대피 경로 안전 점수"""
        await advisor.refresh_paths()
        hazards = await _current_hazards()
        scores = advisor.score_routes(hazards)
        return {
            "scores": scores,
            "routes": [
                {"id": r.id, "name": r.name, "status": r.status, "score": scores[r.id]}
                for r in advisor.routes
            ],
            "active_hazards": sum(1 for h in hazards if not h.is_resolved),
        }

    @app.get("/hazards/summary")
    async def hazard_summary():
        """해결되지 않은 위험 신고의 유형별 개수"""
        hazards = await _current_hazards()
        return {"by_type": active_hazard_counts(hazards)}

    @app.get("/")
    async def root():
        """루트 엔드포인트"""
        return JSONResponse({
            "service": settings.observability.service_name,
            "version": settings.observability.build_version,
            "endpoints": {
                "health": "/health",
                "ready": "/ready",
                "metrics": "/metrics",
                "info": "/info",
                "safe_zones": "/safe-zones",
                "route_scores": "/routes/scores",
                "hazard_summary": "/hazards/summary"
            }
        })

    return app
