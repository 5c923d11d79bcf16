"""
ab_comparator.py

A/B 비교 도구

Variant A/B return 샘플 비교: 기술통계, Welch t-test, Bayesian 승률 비교, 자동 추천 로직.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .bayesian_comparator import BayesianComparator, BayesianResult
from .sample_statistics import SampleLike, SampleStatistics, Statistics, sample_values
from .stat_test import FrequentistComparator, TTestResult


MIN_SAMPLES_PER_VARIANT = 5


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class ComparisonResult:
    """A/B 비교 결과"""
    stats_a: Statistics
    stats_b: Statistics

    # 변화량 (B - A)
    mean_delta: float
    winrate_delta: float  # 0.0 ~ 1.0 스케일

    # 통계 검정 결과
    t_test: TTestResult
    bayesian: BayesianResult

    # 결론
    is_significant: bool  # t-test p < 0.05
    recommendation: str  # "Keep A", "Keep B", "Need more data"
    reasoning: str  # 추천 이유


# ============================================================================
# VariantComparator Class
# ============================================================================

class VariantComparator:
    """Variant A/B 비교 도구"""

    def __init__(self, confidence: float = 0.95):
        self.bayesian = BayesianComparator()
        self.confidence = confidence

    def compare(
        self,
        returns_a: Sequence[SampleLike],
        returns_b: Sequence[SampleLike]
    ) -> ComparisonResult:
        """
        A/B 비교 수행

        Args:
            returns_a: Variant A trial별 return
            returns_b: Variant B trial별 return

        Returns:
            ComparisonResult: 비교 결과

        Raises:
            EmptyInputError: 빈 샘플
            InsufficientSamplesError: 그룹당 2개 미만
        """
        values_a = sample_values(returns_a)
        values_b = sample_values(returns_b)

        # Step 1: 기술통계
        stats_a = SampleStatistics.compute(values_a)
        stats_b = SampleStatistics.compute(values_b)

        # Step 2: Welch t-test (A - B 기준)
        t_test = FrequentistComparator.t_test(values_a, values_b)

        # Step 3: 승률 (return > 0 → win) Bayesian 비교
        wins_a, wins_b = self._count_wins(values_a), self._count_wins(values_b)
        bayesian = self.bayesian.compare(
            trials_a=len(values_a),
            successes_a=wins_a,
            trials_b=len(values_b),
            successes_b=wins_b,
            confidence=self.confidence,
        )

        # Step 4: Delta 계산
        mean_delta = stats_b.mean - stats_a.mean
        winrate_delta = wins_b / len(values_b) - wins_a / len(values_a)

        # Step 5: 추천 로직
        recommendation, reasoning = self._generate_recommendation(
            stats_a, stats_b, mean_delta, t_test, bayesian
        )

        return ComparisonResult(
            stats_a=stats_a,
            stats_b=stats_b,
            mean_delta=mean_delta,
            winrate_delta=winrate_delta,
            t_test=t_test,
            bayesian=bayesian,
            is_significant=t_test.is_significant,
            recommendation=recommendation,
            reasoning=reasoning,
        )

    def _count_wins(self, values: List[float]) -> int:
        """return > 0 → win"""
        return sum(1 for v in values if v > 0)

    def _generate_recommendation(
        self,
        stats_a: Statistics,
        stats_b: Statistics,
        mean_delta: float,
        t_test: TTestResult,
        bayesian: BayesianResult
    ) -> Tuple[str, str]:
        """
        자동 추천 로직

        Returns:
            Tuple[str, str]: (recommendation, reasoning)
        """
        # 샘플 크기 확인
        if stats_a.count < MIN_SAMPLES_PER_VARIANT or stats_b.count < MIN_SAMPLES_PER_VARIANT:
            return (
                "Need more data",
                f"Insufficient sample size: A={stats_a.count}, B={stats_b.count}. "
                f"Need at least {MIN_SAMPLES_PER_VARIANT} samples in each variant."
            )

        # 통계적으로 유의하지 않은 경우
        if not t_test.is_significant:
            return (
                "Need more data",
                f"Difference is not statistically significant (p={t_test.p_value:.4f} >= 0.05). "
                f"P(B>A) winrate={bayesian.probability_b_beats_a:.3f}."
            )

        if mean_delta > 0:
            return (
                "Keep B",
                f"B mean return higher by {mean_delta:.6f} (p={t_test.p_value:.4f}, "
                f"effect size={-t_test.effect_size:.2f})."
            )

        return (
            "Keep A",
            f"A mean return higher by {-mean_delta:.6f} (p={t_test.p_value:.4f}, "
            f"effect size={t_test.effect_size:.2f})."
        )
