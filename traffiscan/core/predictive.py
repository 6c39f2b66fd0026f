"""
Predictive alerts for TraffiScan.

This module turns the time of day, the current weather impact and
nearby incidents into short-horizon alerts for the driver.
"""

from typing import Iterable, List, Optional

from traffiscan.core.classify import IMPACT_ORDER, severity_probability
from traffiscan.core.models import Incident, PredictiveAlert, Ranked, WeatherImpact

def _rush_hour_alerts(hour: int) -> List[PredictiveAlert]:
    alerts = []
    if 7 <= hour <= 9:
        alerts.append(PredictiveAlert(
            id="traffic-morning",
            type="traffic",
            message="Traffic likely to increase on main arterials in 15 min due to morning rush",
            location="Main arterials",
            probability=85,
            timeframe="Next 15 min",
        ))
    if 17 <= hour <= 19:
        alerts.append(PredictiveAlert(
            id="traffic-evening",
            type="traffic",
            message="Heavy congestion expected on commuter routes based on historical patterns",
            location="Commuter routes",
            probability=90,
            timeframe="Next 30 min",
        ))
    if hour >= 22 or hour <= 5:
        alerts.append(PredictiveAlert(
            id="accident-night",
            type="accident",
            message="Accident probability rising based on historical trends and low visibility",
            location="Local roads",
            probability=65,
            timeframe="Next hour",
        ))
    return alerts

def predict_alerts(hour: int,
                   weather: Optional[WeatherImpact] = None,
                   nearby: Iterable[Ranked] = ()) -> List[PredictiveAlert]:
    """
    예측 경보 목록을 생성합니다.

    Args:
        hour: 현재 시각 (0-23)
        weather: 현재 날씨 영향도 (medium 이상이면 날씨 경보 추가)
        nearby: 거리순으로 정렬된 근처 사고

    Returns:
        예측 경보 목록
    """
    alerts = _rush_hour_alerts(hour)

    if weather is not None and IMPACT_ORDER[weather.level] >= IMPACT_ORDER["medium"]:
        alerts.append(PredictiveAlert(
            id="weather-impact",
            type="weather",
            message=weather.alerts[0] if weather.alerts else "Weather expected to affect road conditions",
            location="Major highways",
            probability=75,
            timeframe="Next 2 hours",
        ))

    for item in nearby:
        incident = item.record
        if not isinstance(incident, Incident) or incident.severity == "low":
            continue
        alerts.append(PredictiveAlert(
            id=f"nearby-{incident.id}",
            type="accident",
            message=f"{incident.description or incident.type} {item.distance:.1f} km away",
            location=f"{item.distance:.1f} km",
            probability=severity_probability(incident.severity),
            timeframe="Now",
        ))

    return alerts
