"""
src/analysis/benchmark.py
Latency Benchmark — 요구사항 검증, 등급, regression 탐지

Purpose:
- Statistics vs LatencyRequirements (average/p95/p99/max) 검증
- 요구사항 대비 비율 → 등급 (EXCELLENT ~ UNACCEPTABLE)
- Baseline 대비 평균 latency 악화 (> 5%) 탐지
- 최적화 권고 / 텍스트 histogram

Exports:
- LatencyRequirements, Regression
- validate_benchmark(), rating_from_ratio(), worst_ratio()
- detect_regressions(), recommendations(), render_histogram()
- summarize(), latency_report(): JSON report dict
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .sample_statistics import Histogram, Statistics

logger = logging.getLogger(__name__)


DEFAULT_REGRESSION_THRESHOLD_PCT = 5.0

# (상한 비율, 등급), 오름차순
RATING_BANDS = (
    (1.0, "EXCELLENT"),
    (1.5, "GOOD"),
    (2.0, "ACCEPTABLE"),
    (3.0, "POOR"),
)


@dataclass(frozen=True)
class LatencyRequirements:
    """Operation별 latency 요구사항 (ms)"""
    average_ms: float
    p95_ms: float
    p99_ms: float
    max_ms: float


@dataclass(frozen=True)
class Regression:
    """Baseline 대비 악화 metric"""
    metric: str
    degradation_pct: float


def validate_benchmark(stats: Statistics, requirements: LatencyRequirements) -> bool:
    """
    요구사항 충족 여부 (네 항목 모두 strict <)
    """
    return (
        stats.mean < requirements.average_ms
        and stats.p95 < requirements.p95_ms
        and stats.p99 < requirements.p99_ms
        and stats.max < requirements.max_ms
    )


def rating_from_ratio(ratio: float) -> str:
    """
    실측/요구 비율 → 등급

    <= 1.0 EXCELLENT, <= 1.5 GOOD, <= 2.0 ACCEPTABLE, <= 3.0 POOR, 그 외 UNACCEPTABLE
    """
    for upper, rating in RATING_BANDS:
        if ratio <= upper:
            return rating
    return "UNACCEPTABLE"


def worst_ratio(stats: Statistics, requirements: LatencyRequirements) -> float:
    """average/p95/p99 중 요구사항 대비 가장 나쁜 비율"""
    return max(
        stats.mean / requirements.average_ms,
        stats.p95 / requirements.p95_ms,
        stats.p99 / requirements.p99_ms,
    )


def detect_regressions(
    baselines: Mapping[str, Statistics],
    current: Mapping[str, Statistics],
    threshold_pct: float = DEFAULT_REGRESSION_THRESHOLD_PCT,
) -> List[Regression]:
    """
    Baseline 대비 평균 latency 악화 탐지

    Args:
        baselines: metric → baseline Statistics
        current: metric → 현재 Statistics (baseline에 없는 metric은 무시)
        threshold_pct: 악화 임계값 (%, 기본 5.0)

    Returns:
        List[Regression]: 임계값 초과 metric (baseline 순서)

    Note:
        baseline 평균이 0인 metric은 비율 정의 불가 → skip
    """
    regressions = []
    for metric, baseline in baselines.items():
        now = current.get(metric)
        if now is None or baseline.mean == 0:
            continue
        degradation = (now.mean - baseline.mean) / baseline.mean * 100
        if degradation > threshold_pct:
            logger.warning(
                f"Latency regression: {metric} average {baseline.mean:.3f}ms → "
                f"{now.mean:.3f}ms (+{degradation:.1f}%)"
            )
            regressions.append(Regression(metric=metric, degradation_pct=degradation))
    return regressions


def recommendations(
    operation: str,
    stats: Statistics,
    requirements: LatencyRequirements
) -> List[str]:
    """
    최적화 권고

    - 평균이 한도의 80% 초과 → 한도 근접
    - std > 평균의 50% → 일관성 부족
    - max > 한도의 2배 → outlier spike
    """
    hints = []
    if stats.mean > requirements.average_ms * 0.8:
        hints.append(f"Optimize {operation} - approaching latency limit")
    if stats.std_dev > stats.mean * 0.5:
        hints.append(f"Improve {operation} consistency - high variance detected")
    if stats.max > requirements.max_ms * 2:
        hints.append(f"Investigate {operation} outliers - extreme latency spikes detected")
    return hints


def render_histogram(histogram: Histogram, max_bins: int = 10, width: int = 20) -> str:
    """
    텍스트 histogram (가장 큰 bin 기준 막대 길이)

    Example:
        0.1ms: ████████████████████ 120
    """
    bins = histogram.bins[:max_bins]
    if not bins:
        return ""

    max_count = max(b.count for b in histogram.bins) or 1
    lines = []
    for b in bins:
        bar_length = round(b.count / max_count * width)
        bar = "█" * bar_length + "░" * (width - bar_length)
        lines.append(f"{b.lower_bound:.1f}ms: {bar} {b.count}")
    return "\n".join(lines)


def summarize(stats_by_operation: Dict[str, Statistics]) -> Dict[str, Dict[str, float]]:
    """Operation별 요약 dict (mean/p95/p99/max), report/JSON 출력용"""
    return {
        name: {"mean": s.mean, "p95": s.p95, "p99": s.p99, "max": s.max}
        for name, s in stats_by_operation.items()
    }


def latency_report(
    operation: str,
    stats: Statistics,
    requirements: Optional[LatencyRequirements] = None
) -> Dict[str, Any]:
    """
    Operation 단일 report dict (JSON 출력용)

    summarize() 항목 (mean/p95/p99/max) + count/median/std_dev/min/p50/p999.
    requirements 지정 시 passed / rating / recommendations 추가.
    """
    report: Dict[str, Any] = {"operation": operation, "count": stats.count}
    report.update(summarize({operation: stats})[operation])
    report.update(
        median=stats.median,
        std_dev=stats.std_dev,
        min=stats.min,
        p50=stats.p50,
        p999=stats.p999,
    )

    if requirements is not None:
        report["passed"] = validate_benchmark(stats, requirements)
        report["rating"] = rating_from_ratio(worst_ratio(stats, requirements))
        report["recommendations"] = recommendations(operation, stats, requirements)
    return report
