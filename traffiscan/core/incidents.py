"""
Simulated traffic incidents for TraffiScan.

This module generates randomized incidents around a location
and summarizes a set of incidents into an overall traffic level.
"""

import random
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from traffiscan.core.models import Coordinate, Incident, TrafficLevel

INCIDENT_TYPES = ["accident", "congestion", "road_closure", "construction"]
SEVERITIES = ["low", "medium", "high"]

# 중심 좌표 기준 최대 오프셋 (도). ±0.01도는 약 1km
MAX_OFFSET_DEG = 0.01

DESCRIPTIONS: Dict[str, List[str]] = {
    "accident": ["Multi-vehicle collision", "Minor fender bender", "Vehicle rollover"],
    "congestion": ["Heavy traffic ahead", "Slow moving traffic", "Traffic jam"],
    "road_closure": ["Road maintenance", "Emergency closure", "Construction work"],
    "construction": ["Lane closure ahead", "Road work in progress", "Utility maintenance"],
}

def describe_incident(incident_type: str, rng: random.Random) -> str:
    options = DESCRIPTIONS.get(incident_type, ["Traffic incident"])
    return rng.choice(options)

def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))

def generate_incidents(center: Coordinate,
                       rng: Optional[random.Random] = None,
                       now: Optional[datetime] = None,
                       min_count: int = 2,
                       max_count: int = 5) -> List[Incident]:
    """
    중심 좌표 주변에 임의의 교통 사고를 생성합니다.

    Args:
        center: 중심 좌표
        rng: 난수 생성기 (테스트에서 시드 고정용)
        now: 생성 시각
        min_count: 최소 생성 개수
        max_count: 최대 생성 개수

    Returns:
        생성된 사고 목록 (생성 순서)
    """
    rng = rng or random.Random()
    now = now or datetime.now(timezone.utc)
    stamp = int(now.timestamp() * 1000)

    incidents = []
    for i in range(rng.randint(min_count, max_count)):
        lat = _clamp(center.lat + (rng.random() - 0.5) * 2 * MAX_OFFSET_DEG, -90, 90)
        lng = _clamp(center.lng + (rng.random() - 0.5) * 2 * MAX_OFFSET_DEG, -180, 180)
        incident_type = rng.choice(INCIDENT_TYPES)
        incidents.append(Incident(
            id=f"incident_{stamp}_{i}",
            type=incident_type,
            location=Coordinate(lat=lat, lng=lng),
            severity=rng.choice(SEVERITIES),
            description=describe_incident(incident_type, rng),
            timestamp=now.isoformat(),
        ))
    return incidents

def traffic_level(incidents: Iterable[Incident]) -> TrafficLevel:
    """
    사고 심각도 분포로 전체 교통 수준을 계산합니다.

    high 2건 이상은 critical, high 1건 또는 medium 3건 이상은 heavy,
    medium 1건 이상은 moderate, 그 외는 light.
    """
    severities = [i.severity for i in incidents]
    high = severities.count("high")
    medium = severities.count("medium")

    if high >= 2:
        return "critical"
    if high >= 1 or medium >= 3:
        return "heavy"
    if medium >= 1:
        return "moderate"
    return "light"
