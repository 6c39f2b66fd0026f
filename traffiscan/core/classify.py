"""
Severity classification for TraffiScan.

This module maps weather conditions and incident severities onto
the three-level low/medium/high scale shown to drivers, together
with the advisory messages attached to each level.
"""

from typing import List, Optional

from traffiscan.core.models import ImpactLevel, Severity, WeatherImpact

# 영향도 순서 정의 (낮음 -> 높음)
IMPACT_ORDER = {
    "low": 0,
    "medium": 1,
    "high": 2
}
_LEVELS: List[ImpactLevel] = ["low", "medium", "high"]

# Open-Meteo WMO 코드 구간
RAIN_CODES = range(51, 68)
SNOW_CODES = range(71, 78)
STORM_MIN_CODE = 95

WIND_ESCALATION_MPH = 25

RAIN_ALERT = "Rainy conditions: reduced visibility and slippery roads"
SNOW_ALERT = "Snow conditions: reduce speed and increase following distance"
STORM_ALERT = "Severe weather: consider delaying travel"
WIND_ALERT = "High winds: watch for crosswinds on open roads and bridges"

# 심각도별 표시 확률 (%)
SEVERITY_PROBABILITY = {
    "high": 90,
    "medium": 70,
    "low": 50
}

def max_level(*levels: ImpactLevel) -> ImpactLevel:
    """가장 높은 영향도를 반환합니다. 인자가 없으면 low."""
    if not levels:
        return "low"
    return max(levels, key=lambda lv: IMPACT_ORDER[lv])

def escalate(level: ImpactLevel) -> ImpactLevel:
    """영향도를 한 단계 올립니다 (high는 그대로)."""
    return _LEVELS[min(IMPACT_ORDER[level] + 1, len(_LEVELS) - 1)]

def classify_weather(code: int, wind_speed_mph: float) -> WeatherImpact:
    """
    날씨 코드와 풍속으로 교통 영향도를 분류합니다.

    각 규칙은 독립적으로 평가되고 가장 높은 영향도가 채택됩니다.
    강풍(25mph 초과)은 그 결과를 한 단계 올립니다. 알 수 없는 코드는
    오류 없이 low로 처리됩니다.

    Args:
        code: WMO 날씨 코드 (Open-Meteo)
        wind_speed_mph: 풍속 (mph)

    Returns:
        영향도와 안내 메시지
    """
    level: ImpactLevel = "low"
    alerts: List[str] = []

    if code in RAIN_CODES:
        level = max_level(level, "medium")
        alerts.append(RAIN_ALERT)
    if code in SNOW_CODES:
        level = max_level(level, "high")
        alerts.append(SNOW_ALERT)
    if code >= STORM_MIN_CODE:
        level = max_level(level, "high")
        alerts.append(STORM_ALERT)

    if wind_speed_mph > WIND_ESCALATION_MPH:
        level = escalate(level)
        alerts.append(WIND_ALERT)

    return WeatherImpact(level=level, alerts=alerts)

def describe_weather_code(code: int) -> str:
    """WMO 코드를 표시용 날씨 상태로 변환합니다."""
    if code == 0:
        return "Clear"
    if code in (45, 48):
        return "Fog"
    if code in RAIN_CODES:
        return "Rain"
    if code in SNOW_CODES:
        return "Snow"
    if 80 <= code <= 82:
        return "Rain Showers"
    if code in (85, 86):
        return "Snow Showers"
    if code >= STORM_MIN_CODE:
        return "Thunderstorm"
    return "Partly Cloudy"

def severity_probability(severity: Optional[Severity]) -> int:
    """심각도를 표시용 확률(%)로 변환합니다."""
    return SEVERITY_PROBABILITY.get(severity, SEVERITY_PROBABILITY["low"])
