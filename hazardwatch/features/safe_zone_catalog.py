"""
Safe zone catalog loading for HazardWatch.

This module loads safe-zone reference data from CSV or Excel files,
the external configuration that extends the built-in catalog.
"""

import os
import csv
from typing import List
import openpyxl
from hazardwatch.common.geo import validate_coordinates
from hazardwatch.core.catalog import DEFAULT_SAFE_ZONES
from hazardwatch.core.models import Coordinate, SafeZone
from hazardwatch.observability.logging_setup import get_logger

log = get_logger("hazardwatch.catalog")

# 엑셀 헤더 후보 (소문자 비교)
NAME_COLUMNS = ("name", "facility name", "safe zone")
LAT_COLUMNS = ("lat", "latitude", "latitude (epsg4326)")
LON_COLUMNS = ("lon", "lng", "longitude", "longitude (epsg4326)")
ADDRESS_COLUMNS = ("address", "location", "lot-based full address")

def _cell(row: tuple, i):
    if i is None or i >= len(row):
        return None
    return row[i]

def _find_column(idx: dict, candidates: tuple, required: bool = True):
    for c in candidates:
        if c in idx:
            return idx[c]
    if required:
        raise ValueError(f"필수 컬럼을 찾을 수 없습니다: {candidates}. 사용 가능한 컬럼: {list(idx.keys())}")
    return None

def _make_zone(name, lat, lon, address, where: str):
    if not name or lat in (None, "") or lon in (None, ""):
        log.warning(f"{where} 이름/좌표가 비어있음: {name}")
        return None
    try:
        lat, lon = float(lat), float(lon)
    except (ValueError, TypeError) as e:
        log.warning(f"{where} 좌표 변환 실패 건너뜀: name={name} lat={lat} lon={lon} error={e}")
        return None
    if not validate_coordinates(lat, lon):
        log.warning(f"{where} 좌표 범위 초과 건너뜀: name={name} lat={lat} lon={lon}")
        return None
    try:
        return SafeZone(
            name=str(name).strip(),
            location=Coordinate(lat=lat, lon=lon),
            address=str(address).strip() if address else "",
        )
    except (ValueError, TypeError) as e:
        log.warning(f"{where} 안전 구역 변환 실패 건너뜀: name={name} lat={lat} lon={lon} error={e}")
        return None

def load_safe_zones(path: str) -> List[SafeZone]:
    """안전 구역 데이터를 CSV 또는 XLSX 파일에서 로드합니다."""
    ext = os.path.splitext(path)[1].lower()
    zones: List[SafeZone] = []

    if ext == ".csv":
        with open(path, newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            idx = {h.strip().lower(): h for h in (reader.fieldnames or [])}
            name_col = _find_column(idx, NAME_COLUMNS)
            lat_col = _find_column(idx, LAT_COLUMNS)
            lon_col = _find_column(idx, LON_COLUMNS)
            addr_col = _find_column(idx, ADDRESS_COLUMNS, required=False)
            for row_num, r in enumerate(reader, start=2):
                zone = _make_zone(r.get(name_col), r.get(lat_col), r.get(lon_col),
                                  r.get(addr_col) if addr_col else "", f"행 {row_num}")
                if zone:
                    zones.append(zone)
    elif ext in (".xlsx", ".xlsm"):
        wb = openpyxl.load_workbook(path, data_only=True, read_only=True)
        ws = wb.active
        rows = ws.iter_rows(values_only=True)
        headers = next(rows, None) or ()
        idx = {str(h).strip().lower(): i for i, h in enumerate(headers) if h is not None}
        name_i = _find_column(idx, NAME_COLUMNS)
        lat_i = _find_column(idx, LAT_COLUMNS)
        lon_i = _find_column(idx, LON_COLUMNS)
        addr_i = _find_column(idx, ADDRESS_COLUMNS, required=False)
        for row_num, row in enumerate(rows, start=2):
            if not row or all(v is None for v in row):
                continue
            zone = _make_zone(_cell(row, name_i), _cell(row, lat_i), _cell(row, lon_i),
                              _cell(row, addr_i), f"행 {row_num}")
            if zone:
                zones.append(zone)
        wb.close()
    else:
        raise ValueError(f"지원하지 않는 파일 형식: {ext}")

    log.info(f"안전 구역 데이터 로드됨 path:{path} count:{len(zones)}")
    return zones

def load_catalog(path: str = "") -> List[SafeZone]:
    """경로가 비어 있으면 내장 카탈로그, 아니면 파일 카탈로그를 반환합니다."""
    if not path:
        return list(DEFAULT_SAFE_ZONES)
    return load_safe_zones(path)
