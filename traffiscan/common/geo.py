"""
Geographic utilities for TraffiScan.

This module provides the great-circle distance calculation
and coordinate range checks used by proximity ranking.
"""

import math

# 지구 반지름 (킬로미터)
EARTH_RADIUS_KM = 6371.0

def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    두 지점 간의 Haversine 거리를 계산합니다 (킬로미터).
    
    고도와 타원체 편평률은 무시합니다. 수 킬로미터 단위의 "근처 경보"
    용도이며 미터 이하 정밀도를 가정하면 안 됩니다.
    
    Args:
        lat1: 첫 번째 지점의 위도
        lng1: 첫 번째 지점의 경도
        lat2: 두 번째 지점의 위도
        lng2: 두 번째 지점의 경도
        
    Returns:
        두 지점 간의 거리 (킬로미터). 입력에 NaN이 있으면 NaN
    """
    # 도를 라디안으로 변환
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)
    
    # Haversine 공식
    a = (math.sin(dlat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlng / 2) ** 2)
    # 범위 밖 위도나 부동소수점 오차로 [0, 1]을 벗어나는 경우 (NaN은 그대로 통과)
    a = min(max(a, 0.0), 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    
    return EARTH_RADIUS_KM * c

def validate_coordinates(lat: float, lng: float) -> bool:
    """
    좌표가 유효한지 확인합니다.
    
    Args:
        lat: 위도
        lng: 경도
        
    Returns:
        좌표가 유효하면 True (NaN은 False)
    """
    return -90 <= lat <= 90 and -180 <= lng <= 180
