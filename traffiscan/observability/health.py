"""
HTTP endpoints for TraffiScan.

This module implements health, readiness, metrics and info endpoints
together with the traffic data, nearby incident, weather impact and
alerts board endpoints consumed by the front end.
"""

import math
from datetime import datetime, timezone
from typing import Optional
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import Response, JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from pydantic import BaseModel, Field
import time
from traffiscan.adapters.weather.client import WeatherUnavailableError
from traffiscan.core.classify import classify_weather, describe_weather_code
from traffiscan.core.incidents import traffic_level
from traffiscan.core.models import Coordinate
from traffiscan.core.ranking import rank_by_distance, nearby
from traffiscan.features.alerts_board import AlertsBoard, resolve_viewer, to_nearby_incident
from traffiscan.observability.logging_setup import get_logger
from traffiscan.observability import metrics
from traffiscan.settings import Settings

log = get_logger("traffiscan.http")

class TrafficDataRequest(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    radius: float = Field(default=5000, gt=0, description="조회 반경 (미터)")

def create_app(settings: Settings, board: Optional[AlertsBoard] = None) -> FastAPI:
    """FastAPI 애플리케이션을 생성합니다."""
    app = FastAPI(
        title=settings.observability.service_name,
        version=settings.observability.build_version,
        description="TraffiScan nearby incident and traffic impact service"
    )

    start_time = time.time()

    def _require_board() -> AlertsBoard:
        if board is None:
            raise HTTPException(status_code=503, detail="alerts board not configured")
        return board

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
            "status": "ready" if board is not None else "degraded",
            "service": settings.observability.service_name,
            "board": board is not None,
            "timestamp": time.time()
        })

    @app.get("/metrics")
    async def metrics_endpoint():
        """Prometheus 메트릭 엔드포인트"""
        if not settings.observability.metrics_enabled:
            raise HTTPException(status_code=503, detail="Metrics disabled")

        metrics.uptime_seconds.set(time.time() - start_time)
        return Response(
            generate_latest(),
            media_type=CONTENT_TYPE_LATEST
        )

    @app.get("/info")
    async def info():
        """서비스 정보 엔드포인트"""
        uptime = time.time() - start_time
        return JSONResponse({
            "service": settings.observability.service_name,
            "version": settings.observability.build_version,
            "build_date": settings.observability.build_date,
            "uptime_seconds": int(uptime),
            "metrics_enabled": settings.observability.metrics_enabled,
            "log_level": settings.observability.log_level,
            "ranking": settings.ranking.model_dump()
        })

    @app.post("/traffic-data")
    async def traffic_data(req: TrafficDataRequest):
        """중심 좌표 주변 사고와 전체 교통 수준을 반환합니다."""
        source = _require_board().incidents
        center = Coordinate(lat=req.lat, lng=req.lng)

        records = await source.fetch(center, req.radius / 1000.0)
        ranked = rank_by_distance(center, records)
        metrics.incidents_ranked.inc(len(ranked))

        incidents = []
        for item in ranked:
            # 좌표가 없는 사고는 거리순 목록에서 제외
            if math.isnan(item.distance):
                continue
            data = item.record.model_dump()
            data["distance"] = item.distance
            incidents.append(data)

        log.info(f"traffic-data 처리 완료 lat:{req.lat} lng:{req.lng} count:{len(incidents)}")
        return {
            "success": True,
            "location": {"lat": req.lat, "lng": req.lng},
            "incidents": incidents,
            "trafficLevel": traffic_level(records),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/incidents/nearby")
    async def incidents_nearby(
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        radius_km: Optional[float] = Query(default=None, gt=0),
        max_count: Optional[int] = Query(default=None, ge=0),
    ):
        """뷰어 주변 사고를 가까운 순으로 반환합니다."""
        source = _require_board().incidents
        viewer = resolve_viewer(lat, lng, settings)
        radius = radius_km if radius_km is not None else settings.ranking.radius_km
        limit = max_count if max_count is not None else settings.ranking.max_count

        records = await source.fetch(viewer, radius)
        near = nearby(viewer, records, radius_km=radius, max_count=limit)
        return {
            "viewer": viewer.model_dump(),
            "radius_km": radius,
            "incidents": [to_nearby_incident(item).model_dump() for item in near],
        }

    @app.get("/weather/impact")
    async def weather_impact(code: int, wind: float = Query(default=0.0, ge=0)):
        """날씨 코드와 풍속의 교통 영향도를 반환합니다."""
        impact = classify_weather(code, wind)
        return {
            "code": code,
            "wind_speed": wind,
            "condition": describe_weather_code(code),
            "impact": impact.level,
            "alerts": impact.alerts,
        }

    @app.get("/weather")
    async def weather(lat: Optional[float] = None, lng: Optional[float] = None):
        """뷰어 위치의 현재 날씨 스냅샷을 반환합니다."""
        b = _require_board()
        if b.weather is None:
            raise HTTPException(status_code=503, detail="weather not configured")
        viewer = resolve_viewer(lat, lng, settings)
        try:
            snapshot = await b.weather.current(viewer)
        except WeatherUnavailableError as e:
            raise HTTPException(status_code=503, detail=f"Weather unavailable: {e}")
        return snapshot.model_dump()

    @app.get("/alerts")
    async def alerts(
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        hour: Optional[int] = Query(default=None, ge=0, le=23),
    ):
        """근처 사고, 날씨, 예측 경보를 묶은 알림 보드를 반환합니다."""
        b = _require_board()
        viewer = resolve_viewer(lat, lng, settings)
        # 요청마다 독립 계산: 배경 갱신이나 다른 뷰어 요청과 순번을 공유하지 않음
        state = await b.snapshot(viewer, hour=hour)
        return state.model_dump()

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
                "traffic_data": "/traffic-data",
                "incidents_nearby": "/incidents/nearby",
                "weather": "/weather",
                "weather_impact": "/weather/impact",
                "alerts": "/alerts"
            }
        })

    return app
