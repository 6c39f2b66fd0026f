"""
Weather source port interface.

This module defines the protocol for current weather lookups.
"""

from typing import Protocol
from traffiscan.core.models import Coordinate, WeatherSnapshot

class WeatherPort(Protocol):
    """날씨 조회 포트 인터페이스"""
    
    async def current(self, location: Coordinate) -> WeatherSnapshot:
        """
        좌표의 현재 날씨를 분류된 스냅샷으로 반환합니다.
        
        Args:
            location: 조회할 좌표
        """
        ...
