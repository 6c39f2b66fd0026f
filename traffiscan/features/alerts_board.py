"""
Nearby alerts board for TraffiScan.

This module combines the incident feed, the weather lookup, proximity
ranking and severity classification into the board shown on the map,
emergency and predictive alert views.
"""

import asyncio
import math
import time
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from traffiscan.adapters.weather.client import WeatherUnavailableError
from traffiscan.common.geo import validate_coordinates
from traffiscan.core.classify import severity_probability
from traffiscan.core.incidents import traffic_level
from traffiscan.core.models import (
    Coordinate, PredictiveAlert, Ranked, TrafficLevel, WeatherImpact, WeatherSnapshot
)
from traffiscan.core.predictive import predict_alerts
from traffiscan.core.ranking import filter_nearby, rank_by_distance, take_nearest
from traffiscan.observability.logging_setup import get_logger, with_context
from traffiscan.observability import metrics
from traffiscan.ports import IncidentSourcePort, WeatherPort
from traffiscan.settings import Settings

log = get_logger("traffiscan.board")

class NearbyIncident(BaseModel):
    """화면 표시용 근처 사고"""
    id: str
    type: str
    description: str
    severity: str
    lat: float
    lng: float
    distance_km: float
    probability: int

class BoardState(BaseModel):
    """알림 보드 스냅샷"""
    viewer: Coordinate
    incidents: List[NearbyIncident] = Field(default_factory=list)
    emergency: List[NearbyIncident] = Field(default_factory=list)
    traffic_level: TrafficLevel = "light"
    weather: Optional[WeatherSnapshot] = None
    predictive: List[PredictiveAlert] = Field(default_factory=list)
    generated_at: float

def resolve_viewer(lat: Optional[float], lng: Optional[float], settings: Settings) -> Coordinate:
    """
    뷰어 좌표를 결정합니다.

    유효한 좌표가 주어지지 않으면 (위치 권한 거부 등) 설정의 기본 좌표를 사용합니다.
    """
    if lat is not None and lng is not None and validate_coordinates(lat, lng):
        return Coordinate(lat=lat, lng=lng)
    log.debug(f"기본 좌표 사용 lat:{lat} lng:{lng}")
    return Coordinate(lat=settings.location.fallback_lat, lng=settings.location.fallback_lng)

def to_nearby_incident(item: Ranked) -> NearbyIncident:
    incident = item.record
    return NearbyIncident(
        id=incident.id,
        type=incident.type,
        description=incident.description,
        severity=incident.severity,
        lat=incident.location.lat,
        lng=incident.location.lng,
        distance_km=round(item.distance, 3),
        probability=severity_probability(incident.severity),
    )

class AlertsBoard:
    """근처 사고/날씨 알림 보드"""

    def __init__(self, incidents: IncidentSourcePort, weather: Optional[WeatherPort], settings: Settings):
        """
        초기화합니다.

        Args:
            incidents: 사고 데이터 소스
            weather: 날씨 조회 포트 (None이면 날씨 생략)
            settings: 애플리케이션 설정
        """
        self.incidents = incidents
        self.weather = weather
        self.settings = settings
        self.state: Optional[BoardState] = None
        self._generation = 0
        self._weather: Optional[WeatherSnapshot] = None
        self._weather_at: Optional[Coordinate] = None
        self._weather_fetched = 0.0

    async def _current_weather(self, viewer: Coordinate) -> Optional[WeatherSnapshot]:
        if self.weather is None:
            return None
        fresh = (self._weather is not None
                 and self._weather_at == viewer
                 and time.monotonic() - self._weather_fetched < self.settings.refresh.weather_sec)
        if fresh:
            return self._weather
        try:
            snapshot = await self.weather.current(viewer)
        except WeatherUnavailableError as e:
            # 갱신을 건너뛰고 이전 스냅샷 유지
            log.warning(f"날씨 갱신 건너뜀 error:{e}")
            return self._weather
        self._weather = snapshot
        self._weather_at = viewer
        self._weather_fetched = time.monotonic()
        return snapshot

    async def _fetch(self, viewer: Coordinate):
        fetch_radius = max(self.settings.ranking.radius_km, self.settings.ranking.emergency_radius_km)
        return await asyncio.gather(
            self.incidents.fetch(viewer, fetch_radius),
            self._current_weather(viewer),
        )

    def _build(self, viewer: Coordinate, records, weather: Optional[WeatherSnapshot],
               hour: Optional[int]) -> BoardState:
        ranking = self.settings.ranking
        with metrics.rank_seconds.time():
            ranked = rank_by_distance(viewer, records)
        metrics.incidents_ranked.inc(len(ranked))
        unlocated = sum(1 for item in ranked if math.isnan(item.distance))
        if unlocated:
            metrics.incidents_unlocated.inc(unlocated)

        near = take_nearest(filter_nearby(ranked, ranking.radius_km), ranking.max_count)
        emergency = take_nearest(filter_nearby(ranked, ranking.emergency_radius_km),
                                 ranking.emergency_max_count)

        impact = WeatherImpact(level=weather.impact, alerts=weather.alerts) if weather else None
        if hour is None:
            hour = datetime.now().hour

        return BoardState(
            viewer=viewer,
            incidents=[to_nearby_incident(item) for item in near],
            emergency=[to_nearby_incident(item) for item in emergency],
            traffic_level=traffic_level(records),
            weather=weather,
            predictive=predict_alerts(hour, impact, near),
            generated_at=time.time(),
        )

    async def snapshot(self, viewer: Coordinate, hour: Optional[int] = None) -> BoardState:
        """
        요청한 뷰어의 보드를 계산해 돌려줍니다.

        refresh와 달리 보드 상태와 갱신 순번을 건드리지 않으므로
        서로 다른 뷰어의 동시 요청이 서로의 결과를 버리지 않습니다.
        """
        with with_context(viewer=f"{viewer.lat:.4f},{viewer.lng:.4f}"):
            records, weather = await self._fetch(viewer)
            state = self._build(viewer, records, weather, hour)
            log.debug(f"알림 보드 조회 nearby:{len(state.incidents)} level:{state.traffic_level}")
            return state

    async def refresh(self, viewer: Coordinate, hour: Optional[int] = None) -> Optional[BoardState]:
        """
        보드를 새로 계산합니다.

        이 호출이 끝나기 전에 더 새로운 refresh가 시작되었다면 결과를 버리고
        None을 반환합니다 (마지막 요청 우선).

        Args:
            viewer: 뷰어 좌표
            hour: 예측 경보 계산용 시각 (None이면 현재 시각)

        Returns:
            새 보드 상태 또는 None
        """
        self._generation += 1
        generation = self._generation
        started = time.perf_counter()

        with with_context(viewer=f"{viewer.lat:.4f},{viewer.lng:.4f}", generation=generation):
            records, weather = await self._fetch(viewer)

            if generation != self._generation:
                metrics.stale_refreshes.inc()
                log.debug(f"오래된 갱신 결과 폐기 latest:{self._generation}")
                return None

            state = self._build(viewer, records, weather, hour)
            self.state = state
            metrics.nearby_incidents.set(len(state.incidents))
            metrics.refresh_seconds.observe(time.perf_counter() - started)
            log.info(f"알림 보드 갱신 완료 nearby:{len(state.incidents)} level:{state.traffic_level} "
                     f"weather:{weather.impact if weather else 'n/a'}")
            return state

    async def run(self, viewer: Coordinate, interval_sec: float):
        """주기적으로 보드를 갱신합니다. 취소될 때까지 실행됩니다."""
        while True:
            try:
                await self.refresh(viewer)
            except Exception as e:
                log.error(f"알림 보드 갱신 실패 error:{e}")
            await asyncio.sleep(interval_sec)
