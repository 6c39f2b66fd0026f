# traffiscan/settings.py
from __future__ import annotations
from pydantic import BaseModel, Field

class LocationConfig(BaseModel):
    # 위치 권한이 거부되었을 때 사용하는 기본 좌표 (New York)
    fallback_lat: float = 40.7128
    fallback_lng: float = -74.006

class RankingConfig(BaseModel):
    radius_km: float = 5.0
    max_count: int = 5
    emergency_radius_km: float = 8.0
    emergency_max_count: int = 2

class WeatherConfig(BaseModel):
    base_url: str = "https://api.open-meteo.com/v1/forecast"
    timeout_sec: int = 10
    max_retries: int = 2
    backoff_initial_sec: float = 0.5
    backoff_max_sec: float = 5.0

class RefreshConfig(BaseModel):
    # 갱신 주기 (초). 0이면 백그라운드 갱신 안 함
    alerts_sec: int = 30
    weather_sec: int = 300

class IncidentsConfig(BaseModel):
    simulated: bool = True
    file_path: str | None = None

class Observability(BaseModel):
    http_port: int = 8099
    metrics_enabled: bool = True
    service_name: str = "TraffiScan"
    build_version: str = "0.1.0"
    build_date: str = "2026-10-01"
    log_level: str = "INFO"

class Settings(BaseModel):
    location: LocationConfig = Field(default_factory=LocationConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    weather: WeatherConfig = Field(default_factory=WeatherConfig)
    refresh: RefreshConfig = Field(default_factory=RefreshConfig)
    incidents: IncidentsConfig = Field(default_factory=IncidentsConfig)
    observability: Observability = Field(default_factory=Observability)
