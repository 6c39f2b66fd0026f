# traffiscan/main.py
import os, asyncio
from typing import Optional
import uvicorn
from traffiscan.settings import Settings
from traffiscan.observability.health import create_app
from traffiscan.observability.logging_setup import setup_logging_dev, get_logger
from traffiscan.adapters.weather.client import OpenMeteoClient
from traffiscan.adapters.incidents.sources import SimulatedIncidentSource, FileIncidentSource
from traffiscan.features.alerts_board import AlertsBoard, resolve_viewer

def _b(name, default=False): return os.getenv(name, str(default)).lower() in ("1","true","yes","on")

def build_settings() -> Settings:
    s = Settings()

    # 위치
    s.location.fallback_lat = float(os.getenv("FALLBACK_LAT", s.location.fallback_lat))
    s.location.fallback_lng = float(os.getenv("FALLBACK_LNG", s.location.fallback_lng))

    # 근접 정렬
    s.ranking.radius_km = float(os.getenv("NEARBY_RADIUS_KM", s.ranking.radius_km))
    s.ranking.max_count = int(os.getenv("NEARBY_MAX_COUNT", s.ranking.max_count))
    s.ranking.emergency_radius_km = float(os.getenv("EMERGENCY_RADIUS_KM", s.ranking.emergency_radius_km))
    s.ranking.emergency_max_count = int(os.getenv("EMERGENCY_MAX_COUNT", s.ranking.emergency_max_count))

    # 날씨
    s.weather.base_url = os.getenv("WEATHER_BASE_URL", s.weather.base_url)
    s.weather.timeout_sec = int(os.getenv("WEATHER_TIMEOUT_SEC", s.weather.timeout_sec))
    s.weather.max_retries = int(os.getenv("WEATHER_MAX_RETRIES", s.weather.max_retries))

    # 갱신 주기
    s.refresh.alerts_sec = int(os.getenv("ALERTS_REFRESH_SEC", s.refresh.alerts_sec))
    s.refresh.weather_sec = int(os.getenv("WEATHER_REFRESH_SEC", s.refresh.weather_sec))

    # 사고 데이터
    s.incidents.simulated = _b("SIMULATED_INCIDENTS", s.incidents.simulated)
    s.incidents.file_path = os.getenv("INCIDENTS_FILE", s.incidents.file_path)

    # 관측성
    s.observability.metrics_enabled = _b("METRICS_ENABLED", s.observability.metrics_enabled)
    s.observability.http_port = int(os.getenv("HTTP_PORT", s.observability.http_port))
    s.observability.log_level = os.getenv("LOG_LEVEL", s.observability.log_level)

    return s

def build_incident_source(s: Settings):
    if s.incidents.file_path and not s.incidents.simulated:
        return FileIncidentSource(s.incidents.file_path)
    return SimulatedIncidentSource()

async def start_refresh(board: AlertsBoard, s: Settings) -> Optional[asyncio.Task]:
    if s.refresh.alerts_sec <= 0: return None
    viewer = resolve_viewer(None, None, s)
    return asyncio.create_task(board.run(viewer, s.refresh.alerts_sec))

async def main():
    s = build_settings()
    setup_logging_dev(level=s.observability.log_level)
    log = get_logger()
    log.info("설정 로드 완료")

    async with OpenMeteoClient(
        base_url=s.weather.base_url,
        timeout=s.weather.timeout_sec,
        max_retries=s.weather.max_retries,
        backoff_initial=s.weather.backoff_initial_sec,
        backoff_max=s.weather.backoff_max_sec,
    ) as weather:
        board = AlertsBoard(build_incident_source(s), weather, s)
        refresh_task = await start_refresh(board, s)

        app = create_app(s, board)
        server = uvicorn.Server(
            uvicorn.Config(app, host="0.0.0.0", port=s.observability.http_port, log_level="info")
        )
        log.info(f"HTTP 서버 시작 port:{s.observability.http_port}")
        try:
            await server.serve()
        finally:
            if refresh_task:
                refresh_task.cancel()
                try:
                    await refresh_task
                except asyncio.CancelledError:
                    pass
            log.info("종료 완료")

def cli():
    asyncio.run(main())

if __name__ == "__main__":
    cli()
