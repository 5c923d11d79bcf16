"""
src/analysis/sample_statistics.py
Sample Statistics — latency/return 샘플 기술통계

Purpose:
- Raw 샘플 (duration ms, return ratio) → Statistics (mean, median, std, percentiles)
- Histogram (bin 수 = min(50, ceil(sqrt(n))))
- Distribution shape (skewness, kurtosis, 분류)

원칙:
1. Percentile은 index 기반 (floor(n * p), n-1로 clamp), 선형 보간 아님
   compute([1..10]).p50 == 6 (index 5)
2. 표준편차는 population 공식 (n으로 나눔)
3. 입력은 방어적 복사 후 정렬 (호출자 데이터 변경 금지)
4. 매 호출마다 새로 계산 (캐시 없음)

Exports:
- Sample: 측정값 (value, timestamp)
- Statistics: 기술통계 결과
- Histogram / HistogramBin: 히스토그램
- DistributionShape: skewness/kurtosis/분류
- SampleStatistics: 계산기 (stateless)
"""

import math
import statistics
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from .errors import EmptyInputError


MAX_HISTOGRAM_BINS = 50

PERCENTILE_LEVELS = {
    "p50": 0.50,
    "p95": 0.95,
    "p99": 0.99,
    "p999": 0.999,
}


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class Sample:
    """
    측정값 (harness가 생성, 엔진은 읽기만)

    Attributes:
        value: 측정값 (duration ms 또는 return ratio)
        timestamp: 측정 시각 (Unix timestamp, optional)
    """
    value: float
    timestamp: Optional[float] = None


SampleLike = Union[float, int, Sample]


@dataclass(frozen=True)
class Statistics:
    """기술통계 결과 (min <= p50 <= p95 <= p99 <= p999 <= max)"""
    count: int
    mean: float
    median: float  # 중앙값 (짝수 n → 가운데 두 값 평균)
    std_dev: float  # population
    min: float
    max: float
    p50: float  # index 기반
    p95: float
    p99: float
    p999: float

    def percentiles(self) -> dict:
        """Named percentile dict (p50/p95/p99/p999)"""
        return {name: getattr(self, name) for name in PERCENTILE_LEVELS}


@dataclass(frozen=True)
class HistogramBin:
    """Histogram bin [lower_bound, lower_bound + width)"""
    lower_bound: float
    count: int


@dataclass(frozen=True)
class Histogram:
    """
    Histogram (연속, 비중첩 bin)

    Invariant:
        sum(bin.count) == sample_count
    """
    bins: Tuple[HistogramBin, ...]
    bin_width: float
    sample_count: int

    def items(self) -> List[Tuple[float, int]]:
        """(bin_lower_bound, count) 목록"""
        return [(b.lower_bound, b.count) for b in self.bins]

    @property
    def total(self) -> int:
        return sum(b.count for b in self.bins)


@dataclass(frozen=True)
class DistributionShape:
    """분포 형태 (population skewness, non-excess kurtosis)"""
    skewness: float
    kurtosis: float
    classification: str  # normal / right_skewed / left_skewed / heavy_tailed / non_normal / degenerate


# ============================================================================
# Helpers
# ============================================================================

def sample_values(samples: Iterable[SampleLike]) -> List[float]:
    """
    Sample 또는 숫자 목록 → float 목록 (새 list)

    Args:
        samples: float / int / Sample 혼합 가능

    Returns:
        List[float]: 값 목록 (방어적 복사)
    """
    return [float(s.value) if isinstance(s, Sample) else float(s) for s in samples]


def _index_percentile(sorted_values: List[float], p: float) -> float:
    index = min(int(math.floor(len(sorted_values) * p)), len(sorted_values) - 1)
    return sorted_values[index]


# ============================================================================
# SampleStatistics Class
# ============================================================================

class SampleStatistics:
    """샘플 기술통계 계산기 (stateless, thread-safe)"""

    @staticmethod
    def compute(samples: Iterable[SampleLike]) -> Statistics:
        """
        기술통계 계산

        Args:
            samples: 샘플 목록 (float 또는 Sample)

        Returns:
            Statistics: 기술통계 결과

        Raises:
            EmptyInputError: 빈 샘플
        """
        values = sorted(sample_values(samples))
        if not values:
            raise EmptyInputError("Cannot calculate statistics for empty sample set")

        return Statistics(
            count=len(values),
            mean=statistics.mean(values),
            median=statistics.median(values),
            std_dev=statistics.pstdev(values),
            min=values[0],
            max=values[-1],
            p50=_index_percentile(values, PERCENTILE_LEVELS["p50"]),
            p95=_index_percentile(values, PERCENTILE_LEVELS["p95"]),
            p99=_index_percentile(values, PERCENTILE_LEVELS["p99"]),
            p999=_index_percentile(values, PERCENTILE_LEVELS["p999"]),
        )

    @staticmethod
    def percentile(samples: Iterable[SampleLike], p: float) -> float:
        """
        단일 percentile (index 기반, 보간 없음)

        Args:
            samples: 샘플 목록
            p: 0.0 ~ 1.0

        Raises:
            EmptyInputError: 빈 샘플
            ValueError: p 범위 오류
        """
        if not 0.0 <= p <= 1.0:
            raise ValueError(f"Percentile must be within [0, 1], got {p}")

        values = sorted(sample_values(samples))
        if not values:
            raise EmptyInputError("Cannot calculate percentile for empty sample set")

        return _index_percentile(values, p)

    @staticmethod
    def histogram(samples: Iterable[SampleLike]) -> Histogram:
        """
        Histogram 생성

        Bin 수: k = min(50, ceil(sqrt(n)))
        Bin width: (max - min) / k

        Boundary rule:
            bin은 [start, end) half-open. max와 같은 샘플은 마지막 bin에 포함
            (clamp) → counts 합계 == n 유지.

        Edge case:
            모든 샘플이 동일 (max == min) → 전체 count를 담은 단일 bin

        Raises:
            EmptyInputError: 빈 샘플
        """
        values = sorted(sample_values(samples))
        if not values:
            raise EmptyInputError("Cannot build histogram for empty sample set")

        n = len(values)
        lo, hi = values[0], values[-1]

        if hi == lo:
            return Histogram(
                bins=(HistogramBin(lower_bound=lo, count=n),),
                bin_width=0.0,
                sample_count=n,
            )

        bin_count = min(MAX_HISTOGRAM_BINS, int(math.ceil(math.sqrt(n))))
        bin_width = (hi - lo) / bin_count

        counts = [0] * bin_count
        for value in values:
            index = int((value - lo) / bin_width)
            # max 샘플 (및 부동소수 오차) → 마지막 bin
            counts[min(index, bin_count - 1)] += 1

        bins = tuple(
            HistogramBin(lower_bound=lo + i * bin_width, count=count)
            for i, count in enumerate(counts)
        )
        return Histogram(bins=bins, bin_width=bin_width, sample_count=n)

    @staticmethod
    def shape(samples: Iterable[SampleLike]) -> DistributionShape:
        """
        분포 형태 (skewness, kurtosis, 분류)

        분류 규칙 (순서대로):
        - |skew| < 0.5 and |kurt - 3| < 0.5 → normal
        - skew > 1 → right_skewed (느린 응답 long tail)
        - skew < -1 → left_skewed
        - kurt > 4 → heavy_tailed (outlier 다수)
        - 그 외 → non_normal

        Edge case:
            std == 0 (상수 series) → (0, 0, "degenerate")

        Raises:
            EmptyInputError: 빈 샘플
        """
        values = sample_values(samples)
        if not values:
            raise EmptyInputError("Cannot calculate distribution shape for empty sample set")

        mean = statistics.mean(values)
        std = statistics.pstdev(values)
        if std == 0:
            return DistributionShape(skewness=0.0, kurtosis=0.0, classification="degenerate")

        n = len(values)
        skewness = sum(((v - mean) / std) ** 3 for v in values) / n
        kurtosis = sum(((v - mean) / std) ** 4 for v in values) / n

        return DistributionShape(
            skewness=skewness,
            kurtosis=kurtosis,
            classification=_classify_shape(skewness, kurtosis),
        )


def _classify_shape(skewness: float, kurtosis: float) -> str:
    if abs(skewness) < 0.5 and abs(kurtosis - 3) < 0.5:
        return "normal"
    if skewness > 1:
        return "right_skewed"
    if skewness < -1:
        return "left_skewed"
    if kurtosis > 4:
        return "heavy_tailed"
    return "non_normal"
