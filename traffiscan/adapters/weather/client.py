"""
Open-Meteo weather client for TraffiScan.

This module fetches current conditions for a coordinate and
classifies them into a traffic impact snapshot.
"""

import aiohttp
from typing import Dict, Optional
from traffiscan.core.classify import classify_weather, describe_weather_code
from traffiscan.core.models import Coordinate, WeatherSnapshot
from traffiscan.common.retry import retry_with_backoff
from traffiscan.observability.logging_setup import get_logger
from traffiscan.observability import metrics

log = get_logger("traffiscan.weather")

CURRENT_FIELDS = "temperature_2m,relative_humidity_2m,wind_speed_10m,weather_code"

class WeatherUnavailableError(RuntimeError):
    """날씨 API를 사용할 수 없을 때 발생합니다."""

def parse_current(data: Dict) -> WeatherSnapshot:
    """
    Open-Meteo 응답을 분류된 날씨 스냅샷으로 변환합니다.

    Args:
        data: Open-Meteo forecast 응답

    Returns:
        날씨 스냅샷

    Raises:
        ValueError: current 블록이 없거나 값이 잘못된 경우
    """
    current = data.get("current")
    if not isinstance(current, dict):
        raise ValueError("응답에 current 블록이 없습니다")

    try:
        code = int(current["weather_code"])
        wind = float(current["wind_speed_10m"])
        temperature = float(current["temperature_2m"])
        humidity = float(current["relative_humidity_2m"])
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"current 값 변환 실패: {e}") from e

    impact = classify_weather(code, wind)
    metrics.weather_impact.labels(level=impact.level).inc()

    return WeatherSnapshot(
        temperature=temperature,
        humidity=humidity,
        wind_speed=wind,
        weather_code=code,
        condition=describe_weather_code(code),
        impact=impact.level,
        alerts=impact.alerts,
    )

class OpenMeteoClient:
    """Open-Meteo API 클라이언트"""

    def __init__(self,
                 base_url: str = "https://api.open-meteo.com/v1/forecast",
                 timeout: int = 10,
                 max_retries: int = 2,
                 backoff_initial: float = 0.5,
                 backoff_max: float = 5.0):
        """
        초기화합니다.

        Args:
            base_url: forecast 엔드포인트 URL
            timeout: 요청 타임아웃 (초)
            max_retries: 최대 재시도 횟수
            backoff_initial: 첫 재시도 지연 (초)
            backoff_max: 최대 재시도 지연 (초)
        """
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_initial = backoff_initial
        self.backoff_max = backoff_max
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """비동기 컨텍스트 매니저 진입"""
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """비동기 컨텍스트 매니저 종료"""
        if self.session:
            await self.session.close()
            self.session = None

    async def _get_json(self, params: Dict) -> Dict:
        if not self.session:
            raise RuntimeError("세션이 초기화되지 않았습니다. async with를 사용하세요.")

        async def _request():
            async with self.session.get(self.base_url, params=params) as response:
                response.raise_for_status()
                return await response.json()

        return await retry_with_backoff(
            _request,
            max_retries=self.max_retries,
            base_delay=self.backoff_initial,
            max_delay=self.backoff_max,
            retry_on=(aiohttp.ClientError, TimeoutError),
        )

    async def current(self, location: Coordinate) -> WeatherSnapshot:
        """
        좌표의 현재 날씨를 가져와 분류합니다.

        Raises:
            WeatherUnavailableError: 재시도 후에도 조회에 실패한 경우
        """
        params = {
            "latitude": f"{location.lat:.4f}",
            "longitude": f"{location.lng:.4f}",
            "current": CURRENT_FIELDS,
            "temperature_unit": "fahrenheit",
            "wind_speed_unit": "mph",
        }
        try:
            data = await self._get_json(params)
            snapshot = parse_current(data)
        except (aiohttp.ClientError, TimeoutError, ValueError) as e:
            metrics.weather_fetches.labels(outcome="error").inc()
            log.warning(f"날씨 조회 실패 lat:{location.lat} lng:{location.lng} error:{e}")
            raise WeatherUnavailableError(str(e)) from e

        metrics.weather_fetches.labels(outcome="ok").inc()
        log.debug(f"날씨 조회 완료 code:{snapshot.weather_code} impact:{snapshot.impact}")
        return snapshot
