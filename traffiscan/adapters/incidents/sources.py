"""
Incident sources for TraffiScan.

This module provides the simulated incident feed and a file-backed
feed that loads incidents from CSV or Excel exports.
"""

import asyncio
import os
import csv
import random
from datetime import datetime, timezone
from typing import List, Optional
import openpyxl
from pydantic import ValidationError
from traffiscan.core.incidents import generate_incidents
from traffiscan.core.models import Coordinate, Incident
from traffiscan.core.ranking import filter_nearby, rank_by_distance
from traffiscan.observability.logging_setup import get_logger

log = get_logger("traffiscan.incidents")

REQUIRED_COLUMNS = ("id", "type", "lat", "lng")

def _row_to_incident(row: dict, row_num: int) -> Optional[Incident]:
    try:
        return Incident(
            id=str(row["id"]).strip(),
            type=str(row["type"]).strip(),
            description=str(row.get("description") or "").strip(),
            location=Coordinate(lat=float(row["lat"]), lng=float(row["lng"])),
            severity=str(row.get("severity") or "low").strip(),
            timestamp=str(row.get("timestamp") or datetime.now(timezone.utc).isoformat()),
        )
    except (KeyError, TypeError, ValueError, ValidationError) as e:
        log.warning(f"행 {row_num} 사고 데이터 변환 오류 건너뜀: {row} error:{e}")
        return None

def load_incidents(path: str) -> List[Incident]:
    """사고 데이터를 CSV/XLSX 파일에서 로드합니다."""
    ext = os.path.splitext(path)[1].lower()
    raw_rows: List[dict] = []

    if ext == ".csv":
        with open(path, newline="", encoding="utf-8") as f:
            raw_rows = list(csv.DictReader(f))
    elif ext == ".xlsx":
        wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
        try:
            ws = wb.active
            rows = ws.iter_rows(values_only=True)
            headers = [str(h).strip() if h is not None else "" for h in next(rows, ())]
            for values in rows:
                if not any(v is not None for v in values):
                    continue
                raw_rows.append(dict(zip(headers, values)))
        finally:
            wb.close()
    else:
        raise ValueError(f"지원하지 않는 파일 형식: {ext}")

    if raw_rows:
        missing = [c for c in REQUIRED_COLUMNS if c not in raw_rows[0]]
        if missing:
            raise ValueError(f"필수 컬럼을 찾을 수 없습니다: {missing}")

    incidents = []
    for row_num, row in enumerate(raw_rows, start=2):
        incident = _row_to_incident(row, row_num)
        if incident is not None:
            incidents.append(incident)

    log.info(f"사고 데이터 로드됨 path:{path} count:{len(incidents)}")
    return incidents

class SimulatedIncidentSource:
    """중심 좌표 주변에 임의의 사고를 만들어내는 소스"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    async def fetch(self, center: Coordinate, radius_km: float) -> List[Incident]:
        incidents = generate_incidents(center, rng=self.rng)
        log.debug(f"시뮬레이션 사고 생성됨 count:{len(incidents)}")
        return incidents

class FileIncidentSource:
    """파일에서 읽은 사고 중 반경 이내의 것을 돌려주는 소스"""

    def __init__(self, path: str):
        self.path = path
        self._incidents: List[Incident] = []
        self._loaded = False

    def load(self):
        """사고 데이터를 로드합니다. 빈 파일이어도 한 번만 읽습니다."""
        self._incidents = load_incidents(self.path)
        self._loaded = True

    async def fetch(self, center: Coordinate, radius_km: float) -> List[Incident]:
        if not self._loaded:
            # csv/openpyxl 읽기는 블로킹이므로 스레드에서 실행
            await asyncio.to_thread(self.load)
        ranked = filter_nearby(rank_by_distance(center, self._incidents), radius_km)
        return [item.record for item in ranked]
