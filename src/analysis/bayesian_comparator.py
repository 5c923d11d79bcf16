"""
src/analysis/bayesian_comparator.py
Bayesian Comparator — Beta-Bernoulli A/B test (승률 비교)

Purpose:
- Prior Beta(1, 1) + 관측 (trials, successes) → Posterior
- P(θ_B > θ_A) 근사
- Credible interval (mean ± z * sd, [0, 1] clamp)

원칙:
1. Posterior는 immutable (update → 새 Posterior)
2. P(B > A)는 각 Beta를 정규분포로 근사한 뒤 차이의 표준정규 CDF
3. Credible interval은 정규 근사 (정확한 Beta quantile 역산 아님)
   (alpha, beta가 작을 때 꼬리가 부정확할 수 있음)

Exports:
- Posterior: Beta posterior (alpha, beta)
- BayesianResult: A/B 비교 결과
- BayesianComparator: 계산기 (stateless)
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

try:
    from scipy import stats
except ImportError:
    raise ImportError(
        "scipy is required for Bayesian comparison. "
        "Install it with: pip install scipy"
    )


# 자주 쓰는 신뢰 수준 → z (고정 lookup)
Z_TABLE = {
    0.90: 1.64,
    0.95: 1.96,
    0.99: 2.58,
}


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class Posterior:
    """Beta(alpha, beta) posterior"""
    alpha: float
    beta: float

    def __post_init__(self):
        if self.alpha <= 0 or self.beta <= 0:
            raise ValueError(
                f"Beta parameters must be positive, got alpha={self.alpha}, beta={self.beta}"
            )

    @classmethod
    def uniform(cls) -> "Posterior":
        """Uniform prior Beta(1, 1)"""
        return cls(alpha=1.0, beta=1.0)

    def update(self, successes: int, failures: int) -> "Posterior":
        """
        관측 반영 → 새 Posterior

        Raises:
            ValueError: 음수 관측
        """
        if successes < 0 or failures < 0:
            raise ValueError(
                f"Observations must be non-negative, got successes={successes}, failures={failures}"
            )
        return Posterior(alpha=self.alpha + successes, beta=self.beta + failures)

    @property
    def mean(self) -> float:
        return self.alpha / (self.alpha + self.beta)

    @property
    def variance(self) -> float:
        total = self.alpha + self.beta
        return (self.alpha * self.beta) / (total ** 2 * (total + 1))

    @property
    def std_dev(self) -> float:
        return math.sqrt(self.variance)


@dataclass(frozen=True)
class BayesianResult:
    """Bayesian A/B 비교 결과"""
    posterior_a: Posterior
    posterior_b: Posterior
    probability_b_beats_a: float
    credible_interval_a: Tuple[float, float]
    credible_interval_b: Tuple[float, float]
    confidence: float


# ============================================================================
# BayesianComparator Class
# ============================================================================

class BayesianComparator:
    """Beta-Bernoulli A/B 비교 (stateless)"""

    @staticmethod
    def posterior(
        trials: int,
        successes: int,
        prior: Optional[Posterior] = None
    ) -> Posterior:
        """
        Posterior 계산: (alpha + successes, beta + trials - successes)

        Args:
            trials: 총 시행 수
            successes: 성공 수 (0 ~ trials)
            prior: Prior (기본 Beta(1, 1))

        Raises:
            ValueError: successes가 [0, trials] 밖
        """
        if trials < 0 or not 0 <= successes <= trials:
            raise ValueError(
                f"Invalid observations: trials={trials}, successes={successes}"
            )
        prior = prior or Posterior.uniform()
        return prior.update(successes, trials - successes)

    @staticmethod
    def probability_b_beats_a(posterior_a: Posterior, posterior_b: Posterior) -> float:
        """
        P(θ_B > θ_A) 근사

        z = (mean_B - mean_A) / sqrt(var_A + var_B)
        P = Φ(z)

        Returns:
            float: 0.0 ~ 1.0
        """
        diff_mean = posterior_b.mean - posterior_a.mean
        diff_sd = math.sqrt(posterior_a.variance + posterior_b.variance)
        probability = float(stats.norm.cdf(diff_mean / diff_sd))
        return max(0.0, min(1.0, probability))

    @staticmethod
    def credible_interval(
        posterior: Posterior,
        confidence: float = 0.95
    ) -> Tuple[float, float]:
        """
        Credible interval (정규 근사)

        Args:
            posterior: Beta posterior
            confidence: 신뢰 수준 (0.90/0.95/0.99는 고정 z, 그 외 정규 quantile)

        Returns:
            Tuple[float, float]: (lower, upper), [0, 1] clamp

        Raises:
            ValueError: confidence 범위 오류
        """
        z = _z_for_confidence(confidence)
        margin = z * posterior.std_dev
        return (
            max(0.0, posterior.mean - margin),
            min(1.0, posterior.mean + margin),
        )

    def compare(
        self,
        trials_a: int,
        successes_a: int,
        trials_b: int,
        successes_b: int,
        confidence: float = 0.95,
    ) -> BayesianResult:
        """
        A/B 승률 비교 (uniform prior)

        Returns:
            BayesianResult: posterior, P(B > A), credible interval
        """
        posterior_a = self.posterior(trials_a, successes_a)
        posterior_b = self.posterior(trials_b, successes_b)

        return BayesianResult(
            posterior_a=posterior_a,
            posterior_b=posterior_b,
            probability_b_beats_a=self.probability_b_beats_a(posterior_a, posterior_b),
            credible_interval_a=self.credible_interval(posterior_a, confidence),
            credible_interval_b=self.credible_interval(posterior_b, confidence),
            confidence=confidence,
        )


def _z_for_confidence(confidence: float) -> float:
    if not 0.0 < confidence < 1.0:
        raise ValueError(f"Confidence must be within (0, 1), got {confidence}")
    for level, z in Z_TABLE.items():
        if math.isclose(confidence, level):
            return z
    return float(stats.norm.ppf((1 + confidence) / 2))
