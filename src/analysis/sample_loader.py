"""
src/analysis/sample_loader.py

CSV / JSONL 샘플 파일 → DataFrame → 샘플 목록 변환 파이프라인

DoD:
- CSV (.csv) 또는 JSONL (.jsonl / .log) 로드
- 잘못된 JSON 라인 스킵 (경고 로그)
- 컬럼 → float 목록 (NaN 제거), (t, v) point 목록
"""

import json
import logging
from pathlib import Path
from typing import List

import pandas as pd

from .trend_analyzer import ScalingPoint, TimedSample

logger = logging.getLogger(__name__)


def load_samples(file_path: Path) -> pd.DataFrame:
    """
    샘플 파일 로드

    Args:
        file_path: .csv 또는 .jsonl/.log 파일

    Returns:
        pd.DataFrame: 로드된 샘플 (빈 파일 → 빈 DataFrame)

    Raises:
        FileNotFoundError: 파일이 존재하지 않으면
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Sample file not found: {file_path}")

    if file_path.suffix == ".csv":
        try:
            return pd.read_csv(file_path)
        except pd.errors.EmptyDataError:
            return pd.DataFrame()

    records = []
    with open(file_path, "r", encoding="utf-8") as f:
        for line_num, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue  # 빈 라인 스킵
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as e:
                logger.warning(f"Invalid JSON at {file_path}:{line_num} - {e}")

    return pd.DataFrame(records)


def column_values(df: pd.DataFrame, column: str) -> List[float]:
    """
    컬럼 → float 목록 (NaN / 숫자 변환 불가 값 제외)

    Raises:
        ValueError: 컬럼 없음
    """
    if column not in df.columns:
        raise ValueError(f"Column not found: {column} (available: {list(df.columns)})")
    series = pd.to_numeric(df[column], errors="coerce").dropna()
    return [float(v) for v in series]


def timed_samples(df: pd.DataFrame, time_column: str, value_column: str) -> List[TimedSample]:
    """
    (t, v) point 목록 (시간순 정렬)

    Raises:
        ValueError: 컬럼 없음
    """
    frame = _numeric_pair(df, time_column, value_column).sort_values(time_column)
    return [TimedSample(t=float(t), v=float(v)) for t, v in zip(frame[time_column], frame[value_column])]


def scaling_points(df: pd.DataFrame, x_column: str, y_column: str) -> List[ScalingPoint]:
    """
    (x, y) point 목록

    Raises:
        ValueError: 컬럼 없음
    """
    frame = _numeric_pair(df, x_column, y_column)
    return [ScalingPoint(x=float(x), y=float(y)) for x, y in zip(frame[x_column], frame[y_column])]


def _numeric_pair(df: pd.DataFrame, first: str, second: str) -> pd.DataFrame:
    for column in (first, second):
        if column not in df.columns:
            raise ValueError(f"Column not found: {column} (available: {list(df.columns)})")
    frame = df[[first, second]].apply(pd.to_numeric, errors="coerce")
    return frame.dropna()
