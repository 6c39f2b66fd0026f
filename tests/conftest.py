"""
테스트 설정 및 픽스처

이 모듈은 pytest 설정과 공통 픽스처를 제공합니다.
"""

import math
import random
import pytest
from traffiscan.settings import Settings
from traffiscan.core.models import Coordinate, Incident

# 적도에서 경도 1도의 거리 (킬로미터)
KM_PER_DEGREE = 6371.0 * math.pi / 180


def incident_at(incident_id, lat, lng, severity="low", incident_type="accident"):
    """테스트용 사고 생성 헬퍼"""
    return Incident(
        id=incident_id,
        type=incident_type,
        description=f"{incident_type} {incident_id}",
        location=Coordinate(lat=lat, lng=lng),
        severity=severity,
        timestamp="2026-01-01T00:00:00+00:00",
    )


class StaticIncidentSource:
    """고정된 사고 목록을 돌려주는 테스트용 소스"""

    def __init__(self, incidents):
        self.incidents = list(incidents)
        self.calls = []

    async def fetch(self, center, radius_km):
        self.calls.append((center, radius_km))
        return list(self.incidents)


@pytest.fixture
def sample_settings():
    """테스트용 설정"""
    settings = Settings()
    settings.observability.service_name = "test-service"
    settings.observability.build_version = "1.0.0"
    settings.observability.log_level = "INFO"
    settings.observability.http_port = 8080
    return settings


@pytest.fixture
def origin():
    """적도/본초자오선 원점"""
    return Coordinate(lat=0.0, lng=0.0)


@pytest.fixture
def equator_incidents():
    """원점에서 동쪽으로 3, 1, 2 km 떨어진 사고 (입력 순서)"""
    return [
        incident_at("far", 0.0, 0.03, severity="high"),
        incident_at("near", 0.0, 0.01, severity="medium"),
        incident_at("mid", 0.0, 0.02, severity="low"),
    ]


@pytest.fixture
def seeded_rng():
    """시드가 고정된 난수 생성기"""
    return random.Random(42)


@pytest.fixture
def make_incident():
    """사고 생성 팩토리"""
    return incident_at


@pytest.fixture
def static_source():
    """고정 사고 소스 팩토리"""
    return StaticIncidentSource
