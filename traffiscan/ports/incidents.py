"""
Incident source port interface.

This module defines the protocol for incident feeds.
"""

from typing import List, Protocol
from traffiscan.core.models import Coordinate, Incident

class IncidentSourcePort(Protocol):
    """사고 데이터 포트 인터페이스"""
    
    async def fetch(self, center: Coordinate, radius_km: float) -> List[Incident]:
        """
        중심 좌표 주변의 사고 목록을 가져옵니다.
        
        Args:
            center: 중심 좌표
            radius_km: 조회 반경 (킬로미터)
        """
        ...
