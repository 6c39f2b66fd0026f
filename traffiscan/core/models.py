"""
Core domain models for TraffiScan.

This module defines the core domain models using Pydantic v2
for type safety and validation.
"""

from typing import Any, List, Literal, Optional
from pydantic import BaseModel, Field

# 심각도/영향도 타입 정의 (낮음 -> 높음)
Severity = Literal["low", "medium", "high"]
ImpactLevel = Literal["low", "medium", "high"]

IncidentType = Literal[
    "accident", "congestion", "road_closure", "construction", "weather", "traffic"
]

TrafficLevel = Literal["light", "moderate", "heavy", "critical"]

class Coordinate(BaseModel):
    """WGS-84 좌표 모델 (도 단위)"""
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)

    def as_tuple(self) -> tuple[float, float]:
        return (self.lat, self.lng)

class Incident(BaseModel):
    """교통 사고/경보 레코드 모델"""
    id: str
    type: IncidentType
    description: str = ""
    location: Optional[Coordinate] = None
    severity: Severity = "low"
    timestamp: str

class Ranked(BaseModel):
    """거리가 부여된 레코드 뷰. 원본 레코드는 변경하지 않습니다."""
    record: Any
    distance: float

class WeatherImpact(BaseModel):
    """날씨의 교통 영향 분류 결과"""
    level: ImpactLevel
    alerts: List[str] = Field(default_factory=list)

class WeatherSnapshot(BaseModel):
    """현재 날씨 스냅샷"""
    temperature: float
    humidity: float
    wind_speed: float
    weather_code: int
    condition: str
    impact: ImpactLevel = "low"
    alerts: List[str] = Field(default_factory=list)

class PredictiveAlert(BaseModel):
    """예측 경보 모델"""
    id: str
    type: Literal["traffic", "weather", "accident"]
    message: str
    location: str
    probability: int
    timeframe: str
