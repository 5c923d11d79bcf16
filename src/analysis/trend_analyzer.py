"""
src/analysis/trend_analyzer.py
Trend Analyzer — 시간 추세 / 부하 대비 scaling 분석

Purpose:
- Memory/resource 샘플의 선형 증가 탐지 (leak 의심)
- Stability score (분산 / 평균² 기반)
- 부하(x) 대비 비용(y) 선형 회귀 (R² = linearity score)

원칙:
1. 강한 선형 추세 (|r| > 0.8) → leak 의심, flat/noisy → 정상 GC 패턴
2. 상수 series / 평균 0 → 예외 대신 fallback (correlation 0, stability 0)
3. Stateless calculator

Exports:
- TimedSample / ScalingPoint: 입력 point
- TrendResult / ScalingResult: 결과
- TrendAnalyzer: 분석기
"""

import logging
import math
import statistics
from dataclasses import dataclass
from typing import List, Sequence

try:
    from scipy import stats
except ImportError:
    raise ImportError(
        "scipy is required for scaling regression. "
        "Install it with: pip install scipy"
    )

from .errors import DegenerateInputError, EmptyInputError

logger = logging.getLogger(__name__)


DEFAULT_LINEAR_GROWTH_THRESHOLD = 0.8
MIN_TREND_POINTS = 3


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class TimedSample:
    """시간-값 point (t: timestamp, v: 측정값)"""
    t: float
    v: float


@dataclass(frozen=True)
class ScalingPoint:
    """부하-비용 point (x: item 수, y: 비용)"""
    x: float
    y: float


@dataclass(frozen=True)
class TrendResult:
    """시간 추세 분석 결과"""
    is_linear_growth: bool
    stability_score: float  # 0.0 ~ 1.0
    growth_rate: float  # value per time unit
    correlation: float  # Pearson r


@dataclass(frozen=True)
class ScalingResult:
    """Scaling 분석 결과 (y = per_item_cost * x + base_overhead)"""
    linearity_score: float  # R², 0.0 ~ 1.0
    base_overhead: float  # max(0, intercept)
    per_item_cost: float  # slope


# ============================================================================
# TrendAnalyzer Class
# ============================================================================

class TrendAnalyzer:
    """시간 추세 / scaling 분석기"""

    def __init__(self, linear_growth_threshold: float = DEFAULT_LINEAR_GROWTH_THRESHOLD):
        """
        Args:
            linear_growth_threshold: |r| 임계값 (기본 0.8)

        Raises:
            ValueError: 임계값이 [0, 1] 범위 밖
        """
        if not 0.0 <= linear_growth_threshold <= 1.0:
            raise ValueError(
                f"linear_growth_threshold must be within [0, 1], got {linear_growth_threshold}"
            )
        self.linear_growth_threshold = linear_growth_threshold

    @staticmethod
    def correlation(xs: Sequence[float], ys: Sequence[float]) -> float:
        """
        Pearson correlation coefficient

        Args:
            xs: x 값 목록
            ys: y 값 목록 (xs와 길이 동일)

        Returns:
            float: r (-1.0 ~ 1.0), 상수 series이면 0.0

        Raises:
            EmptyInputError: 빈 입력
            ValueError: 길이 불일치
        """
        if len(xs) != len(ys):
            raise ValueError(f"Length mismatch: {len(xs)} x values vs {len(ys)} y values")
        if not xs:
            raise EmptyInputError("Cannot calculate correlation for empty input")

        # 평균 중심화 후 합산 (epoch timestamp 등 큰 값에서 상쇄 오차 방지)
        mean_x = statistics.fmean(xs)
        mean_y = statistics.fmean(ys)
        dx = [x - mean_x for x in xs]
        dy = [y - mean_y for y in ys]

        s_xy = sum(a * b for a, b in zip(dx, dy))
        s_xx = sum(a * a for a in dx)
        s_yy = sum(b * b for b in dy)

        if s_xx == 0 or s_yy == 0:
            # 상수 series (분산 0)
            return 0.0

        r = s_xy / math.sqrt(s_xx * s_yy)
        return max(-1.0, min(1.0, r))

    def analyze_trend(self, timed_samples: Sequence[TimedSample]) -> TrendResult:
        """
        시간 추세 분석 (leak 탐지)

        Args:
            timed_samples: 시간순 (t, v) 목록

        Returns:
            TrendResult:
                is_linear_growth: |r| > threshold
                stability_score: max(0, 1 - var/mean²), mean == 0 → 0
                growth_rate: (v_last - v_first) / (t_last - t_first), 시간 폭 0 → 0

        Raises:
            EmptyInputError: 빈 입력

        Note:
            3개 미만 → (False, 1.0, 0.0) (추세 판단 불가)
        """
        if not timed_samples:
            raise EmptyInputError("Cannot analyze trend for empty sample set")

        if len(timed_samples) < MIN_TREND_POINTS:
            return TrendResult(
                is_linear_growth=False,
                stability_score=1.0,
                growth_rate=0.0,
                correlation=0.0,
            )

        times = [s.t for s in timed_samples]
        values = [s.v for s in timed_samples]

        r = self.correlation(times, values)
        is_linear_growth = abs(r) > self.linear_growth_threshold

        stability_score = self._stability_score(values)

        time_span = times[-1] - times[0]
        growth_rate = (values[-1] - values[0]) / time_span if time_span != 0 else 0.0

        if is_linear_growth:
            logger.debug(
                f"Linear growth detected: r={r:.3f}, growth_rate={growth_rate:.6f}"
            )

        return TrendResult(
            is_linear_growth=is_linear_growth,
            stability_score=stability_score,
            growth_rate=growth_rate,
            correlation=r,
        )

    @staticmethod
    def analyze_scaling(points: Sequence[ScalingPoint]) -> ScalingResult:
        """
        OLS 선형 회귀 (y = slope * x + intercept)

        Args:
            points: (x, y) 목록

        Returns:
            ScalingResult: R² (0~1), base_overhead, per_item_cost

        Raises:
            EmptyInputError: 빈 입력

        Edge cases:
            - 1개 → (0, 0, 0)
            - x 전부 동일 → slope 0, R² 0 (기울기 정의 불가)
            - y 전부 동일 (x 다양) → 완벽한 수평 fit, R² 1
        """
        if not points:
            raise EmptyInputError("Cannot analyze scaling for empty point set")

        if len(points) < 2:
            return ScalingResult(linearity_score=0.0, base_overhead=0.0, per_item_cost=0.0)

        xs = [p.x for p in points]
        ys = [p.y for p in points]
        mean_y = statistics.fmean(ys)

        if min(xs) == max(xs):
            return ScalingResult(
                linearity_score=0.0,
                base_overhead=max(0.0, mean_y),
                per_item_cost=0.0,
            )

        if min(ys) == max(ys):
            # 수평선 완벽 fit (linregress는 r 정의 불가)
            return ScalingResult(
                linearity_score=1.0,
                base_overhead=max(0.0, mean_y),
                per_item_cost=0.0,
            )

        fit = stats.linregress(xs, ys)
        r_squared = float(fit.rvalue) ** 2

        return ScalingResult(
            linearity_score=max(0.0, min(1.0, r_squared)),
            base_overhead=max(0.0, float(fit.intercept)),
            per_item_cost=float(fit.slope),
        )

    @staticmethod
    def reclaim_efficiency(values: Sequence[float]) -> float:
        """
        회수 효율 (GC efficiency)

        연속 값 사이 감소량 합 / 증가량 합, 최대 1.0

        Args:
            values: 시간순 측정값 (예: heap used)

        Returns:
            float: 0.0 ~ 1.0 (증가 없음 또는 2개 미만 → 1.0)
        """
        if len(values) < 2:
            return 1.0

        allocated = 0.0
        reclaimed = 0.0
        for previous, current in zip(values, values[1:]):
            delta = current - previous
            if delta > 0:
                allocated += delta
            else:
                reclaimed += -delta

        if allocated == 0:
            return 1.0
        return min(1.0, reclaimed / allocated)

    @staticmethod
    def _stability_score(values: List[float]) -> float:
        try:
            relative_variance = _relative_variance(values)
        except DegenerateInputError as e:
            # 평균 0 → 전체를 unstable로 취급
            logger.debug(f"Stability fallback: {e}")
            return 0.0
        return max(0.0, min(1.0, 1.0 - relative_variance))


def _relative_variance(values: List[float]) -> float:
    """var / mean² (평균 0 → DegenerateInputError)"""
    mean = statistics.mean(values)
    if mean == 0:
        raise DegenerateInputError("Relative variance undefined for zero mean")
    return statistics.pvariance(values) / (mean ** 2)
