"""
알림 보드 Feature 단위 테스트

이 모듈은 뷰어 좌표 결정, 보드 갱신, 날씨 실패 처리,
오래된 갱신 결과 폐기를 테스트합니다.
"""

import asyncio
import math
import pytest
from unittest.mock import AsyncMock
from traffiscan.adapters.weather.client import WeatherUnavailableError
from traffiscan.core.models import Coordinate, Incident, WeatherSnapshot
from traffiscan.features.alerts_board import AlertsBoard, resolve_viewer

KM_PER_DEGREE = 6371.0 * math.pi / 180


def _snapshot(impact="medium", alerts=("Rainy conditions",)):
    return WeatherSnapshot(
        temperature=60, humidity=90, wind_speed=8, weather_code=61,
        condition="Rain", impact=impact, alerts=list(alerts),
    )


class TestResolveViewer:
    """뷰어 좌표 결정 테스트"""

    def test_uses_given_coordinate(self, sample_settings):
        viewer = resolve_viewer(25.2, 55.3, sample_settings)
        assert viewer == Coordinate(lat=25.2, lng=55.3)

    @pytest.mark.parametrize("lat,lng", [(None, None), (None, 10), (95, 10), (10, 200), (math.nan, 0)])
    def test_falls_back(self, sample_settings, lat, lng):
        viewer = resolve_viewer(lat, lng, sample_settings)
        assert viewer.lat == sample_settings.location.fallback_lat
        assert viewer.lng == sample_settings.location.fallback_lng


class TestAlertsBoard:
    """알림 보드 갱신 테스트"""

    @pytest.fixture
    def incidents(self, make_incident):
        return [
            make_incident(f"d{km}", 0.0, km / KM_PER_DEGREE, severity=sev)
            for km, sev in ((9, "high"), (1, "medium"), (6, "low"), (4, "high"), (3, "low"), (2, "low"))
        ] + [Incident(id="nowhere", type="traffic", timestamp="t")]

    @pytest.mark.asyncio
    async def test_refresh_ranks_filters_and_classifies(self, sample_settings, static_source, incidents, origin):
        weather = AsyncMock()
        weather.current.return_value = _snapshot()
        sample_settings.ranking.max_count = 3
        board = AlertsBoard(static_source(incidents), weather, sample_settings)

        state = await board.refresh(origin, hour=12)

        assert [i.id for i in state.incidents] == ["d1", "d2", "d3"]
        assert state.incidents[0].distance_km == pytest.approx(1.0, abs=0.001)
        assert state.incidents[0].probability == 70
        assert [i.id for i in state.emergency] == ["d1", "d2"]
        assert state.traffic_level == "critical"
        assert state.weather.impact == "medium"
        assert [a.id for a in state.predictive] == ["weather-impact", "nearby-d1"]
        assert board.state is state

    @pytest.mark.asyncio
    async def test_fetch_radius_covers_emergency_view(self, sample_settings, static_source, origin):
        source = static_source([])
        board = AlertsBoard(source, None, sample_settings)
        await board.refresh(origin, hour=12)
        assert source.calls == [(origin, sample_settings.ranking.emergency_radius_km)]

    @pytest.mark.asyncio
    async def test_without_weather(self, sample_settings, static_source, origin):
        board = AlertsBoard(static_source([]), None, sample_settings)
        state = await board.refresh(origin, hour=12)
        assert state.weather is None
        assert state.incidents == []
        assert state.traffic_level == "light"

    @pytest.mark.asyncio
    async def test_weather_failure_keeps_previous_snapshot(self, sample_settings, static_source, origin):
        weather = AsyncMock()
        weather.current.side_effect = [_snapshot(), WeatherUnavailableError("down")]
        sample_settings.refresh.weather_sec = 0
        board = AlertsBoard(static_source([]), weather, sample_settings)

        first = await board.refresh(origin, hour=12)
        second = await board.refresh(origin, hour=12)

        assert first.weather.impact == "medium"
        assert second.weather == first.weather
        assert weather.current.call_count == 2

    @pytest.mark.asyncio
    async def test_weather_reused_within_interval(self, sample_settings, static_source, origin):
        weather = AsyncMock()
        weather.current.return_value = _snapshot(impact="low", alerts=())
        board = AlertsBoard(static_source([]), weather, sample_settings)

        await board.refresh(origin, hour=12)
        await board.refresh(origin, hour=12)
        await board.refresh(Coordinate(lat=1, lng=1), hour=12)

        assert weather.current.call_count == 2

    @pytest.mark.asyncio
    async def test_stale_refresh_is_discarded(self, sample_settings, make_incident, origin):
        release = asyncio.Event()

        class SlowSource:
            def __init__(self):
                self.calls = 0

            async def fetch(self, center, radius_km):
                self.calls += 1
                if self.calls == 1:
                    await release.wait()
                    return [make_incident("old", 0.0, 0.01)]
                return [make_incident("new", 0.0, 0.02)]

        board = AlertsBoard(SlowSource(), None, sample_settings)

        older = asyncio.create_task(board.refresh(origin, hour=12))
        await asyncio.sleep(0)
        newer = await board.refresh(Coordinate(lat=0, lng=0.02), hour=12)
        release.set()
        stale = await older

        assert stale is None
        assert [i.id for i in newer.incidents] == ["new"]
        assert board.state is newer

    @pytest.mark.asyncio
    async def test_snapshot_leaves_pending_refresh_alone(self, sample_settings, make_incident, origin):
        release = asyncio.Event()

        class ViewerSource:
            async def fetch(self, center, radius_km):
                if center == origin:
                    await release.wait()
                    return [make_incident("home", 0.0, 0.01)]
                return [make_incident("away", center.lat, center.lng + 0.01)]

        board = AlertsBoard(ViewerSource(), None, sample_settings)

        pending = asyncio.create_task(board.refresh(origin, hour=12))
        await asyncio.sleep(0)
        other = await board.snapshot(Coordinate(lat=48.85, lng=2.35), hour=12)
        release.set()
        refreshed = await pending

        assert [i.id for i in other.incidents] == ["away"]
        assert other.viewer == Coordinate(lat=48.85, lng=2.35)
        assert refreshed is not None
        assert [i.id for i in refreshed.incidents] == ["home"]
        assert board.state is refreshed

    @pytest.mark.asyncio
    async def test_snapshot_does_not_touch_state(self, sample_settings, static_source, make_incident, origin):
        board = AlertsBoard(static_source([make_incident("a", 0.0, 0.01)]), None, sample_settings)
        state = await board.snapshot(origin, hour=12)
        assert [i.id for i in state.incidents] == ["a"]
        assert board.state is None
