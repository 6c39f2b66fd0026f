"""
Proximity ranking for TraffiScan.

This module decorates incident-like records with their distance
from the viewer and orders, filters and truncates them for display.
All functions are pure: records are never mutated.
"""

import math
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple

from traffiscan.common.geo import haversine_distance
from traffiscan.core.models import Coordinate, Incident, Ranked

LatLng = Tuple[float, float]
Locator = Callable[[Any], Optional[LatLng]]

def _as_lat_lng(point: Any) -> LatLng:
    if isinstance(point, Coordinate):
        return point.lat, point.lng
    lat, lng = point
    return float(lat), float(lng)

def record_location(record: Any) -> Optional[LatLng]:
    """
    레코드에서 (위도, 경도)를 읽습니다.

    Incident, {"location": {"lat", "lng"}} 형태의 딕셔너리,
    최상위 lat/lng(lon) 키를 가진 딕셔너리, (위도, 경도) 튜플을 지원합니다.

    Returns:
        (위도, 경도) 또는 읽을 수 없으면 None
    """
    try:
        if isinstance(record, Incident):
            return record.location.as_tuple() if record.location else None
        if isinstance(record, Coordinate):
            return record.as_tuple()
        if isinstance(record, Mapping):
            src = record.get("location", record)
            if isinstance(src, Coordinate):
                return src.as_tuple()
            if not isinstance(src, Mapping):
                return None
            lat = src.get("lat", src.get("latitude"))
            lng = src.get("lng", src.get("lon", src.get("longitude")))
            if lat is None or lng is None:
                return None
            return float(lat), float(lng)
        if isinstance(record, (tuple, list)) and len(record) == 2:
            return float(record[0]), float(record[1])
    except (TypeError, ValueError):
        return None
    return None

def distance_between(a: Any, b: Any) -> float:
    """두 좌표 간 거리 (킬로미터)"""
    lat1, lng1 = _as_lat_lng(a)
    lat2, lng2 = _as_lat_lng(b)
    return haversine_distance(lat1, lng1, lat2, lng2)

def distance_from(viewer: Any, record: Any, locate: Locator = record_location) -> float:
    """
    뷰어에서 레코드까지의 거리를 계산합니다.

    좌표를 읽을 수 없는 레코드는 NaN ("알 수 없는 거리")을 반환합니다.
    """
    loc = locate(record)
    if loc is None:
        return math.nan
    return distance_between(viewer, loc)

def _sort_key(item: Ranked) -> Tuple[bool, float]:
    # NaN은 맨 뒤로
    unknown = math.isnan(item.distance)
    return (unknown, 0.0 if unknown else item.distance)

def rank_by_distance(viewer: Any,
                     records: Iterable[Any],
                     locate: Locator = record_location) -> List[Ranked]:
    """
    레코드에 거리를 부여하고 가까운 순으로 정렬합니다.

    정렬은 안정적이며 (동일 거리는 원래 순서 유지), 거리를 알 수 없는
    레코드는 원래 순서대로 맨 뒤에 놓입니다. 원본 레코드는 변경하지 않고
    새 Ranked 뷰를 만듭니다.

    Args:
        viewer: 뷰어 좌표 (Coordinate 또는 (위도, 경도))
        records: 좌표를 가진 레코드들
        locate: 레코드에서 좌표를 읽는 함수

    Returns:
        거리가 부여된 Ranked 목록 (가까운 순)
    """
    decorated = [Ranked(record=r, distance=distance_from(viewer, r, locate)) for r in records]
    return sorted(decorated, key=_sort_key)

def filter_nearby(ranked: Iterable[Ranked], radius_km: float) -> List[Ranked]:
    """반경 이내의 레코드만 남깁니다. NaN 거리는 제외되며 순서는 유지됩니다."""
    return [item for item in ranked if item.distance <= radius_km]

def take_nearest(ranked: Iterable[Ranked], max_count: Optional[int]) -> List[Ranked]:
    """표시용으로 앞에서 max_count 개만 남깁니다. None이면 전부."""
    items = list(ranked)
    if max_count is None:
        return items
    return items[:max(0, max_count)]

def nearby(viewer: Any,
           records: Iterable[Any],
           *,
           radius_km: float = 5.0,
           max_count: Optional[int] = None,
           locate: Locator = record_location) -> List[Ranked]:
    """정렬 → 반경 필터 → 개수 제한을 한 번에 수행합니다."""
    ranked = rank_by_distance(viewer, records, locate)
    return take_nearest(filter_nearby(ranked, radius_km), max_count)
