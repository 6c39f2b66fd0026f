"""
HTTP server runner for TraffiScan.

This module provides a simple way to run the FastAPI server
without the background alerts board refresh.
"""

import uvicorn
from traffiscan.adapters.incidents.sources import SimulatedIncidentSource
from traffiscan.features.alerts_board import AlertsBoard
from traffiscan.observability.health import create_app
from traffiscan.settings import Settings
from traffiscan.observability.logging_setup import setup_logging_dev, get_logger

def run_http_server(settings: Settings, host: str = "0.0.0.0", port: int | None = None):
    """
    HTTP 서버를 실행합니다 (시뮬레이션 사고, 날씨 없음).
    
    Args:
        settings: 애플리케이션 설정
        host: 바인딩할 호스트
        port: 바인딩할 포트 (None이면 설정에서 가져옴)
    """
    setup_logging_dev(level=settings.observability.log_level)
    log = get_logger("traffiscan.observability")
    
    if port is None:
        port = settings.observability.http_port
    
    board = AlertsBoard(SimulatedIncidentSource(), None, settings)
    app = create_app(settings, board)
    
    log.info(f"HTTP 서버 시작 중 host:{host} port:{port}")
    
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=settings.observability.log_level.lower(),
        access_log=True
    )

if __name__ == "__main__":
    run_http_server(Settings())
