"""
test_stat_test.py

FrequentistComparator 단위 테스트
- Welch t-test (평균 차이 검정)
- confidence interval (신뢰 구간)
"""

import math
import random

import pytest
from src.analysis.errors import EmptyInputError, InsufficientSamplesError
from src.analysis.stat_test import (
    FrequentistComparator,
    TTestResult,
)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def strategy_returns():
    """Strategy A (평균 ~1.0%) / B (평균 ~1.5%) return 샘플"""
    rng = random.Random(2024)
    returns_a = [0.01 + rng.uniform(-0.01, 0.01) for _ in range(100)]
    returns_b = [0.015 + rng.uniform(-0.01, 0.01) for _ in range(100)]
    return returns_a, returns_b


# ============================================================================
# Test Cases: t-test
# ============================================================================

def test_t_test_basic():
    """정상: 기본 Welch t-test"""
    sample_a = [100, 50, -30, 120, 80]  # mean=64
    sample_b = [150, 120, -10, 180, 100]  # mean=108

    result = FrequentistComparator.t_test(sample_a, sample_b)

    assert isinstance(result, TTestResult)
    assert result.mean_a == pytest.approx(64.0, abs=0.1)
    assert result.mean_b == pytest.approx(108.0, abs=0.1)
    assert 0.0 <= result.p_value <= 1.0
    # A < B → t 음수
    assert result.t_statistic < 0
    assert result.is_significant == (result.p_value < 0.05)


def test_t_test_matches_welch_formula():
    """정상: t = (mean_a - mean_b) / sqrt(var_a/n_a + var_b/n_b), var는 n-1"""
    sample_a = [1.0, 2.0, 3.0, 4.0]  # mean 2.5, var 1.6667
    sample_b = [2.0, 4.0, 6.0]  # mean 4.0, var 4.0

    result = FrequentistComparator.t_test(sample_a, sample_b)

    se = math.sqrt((5.0 / 3.0) / 4 + 4.0 / 3)
    assert result.t_statistic == pytest.approx(-1.5 / se)
    assert result.effect_size == pytest.approx(-1.5 / math.sqrt((5.0 / 3.0 + 4.0) / 2))
    lower, upper = result.confidence_interval
    assert lower == pytest.approx(-1.5 - 1.96 * se)
    assert upper == pytest.approx(-1.5 + 1.96 * se)


def test_t_test_swap_negates_statistic_keeps_p_value(strategy_returns):
    """불변식: A/B swap → t, effect_size 부호 반전, p_value 동일"""
    returns_a, returns_b = strategy_returns

    forward = FrequentistComparator.t_test(returns_a, returns_b)
    backward = FrequentistComparator.t_test(returns_b, returns_a)

    assert backward.t_statistic == pytest.approx(-forward.t_statistic)
    assert backward.effect_size == pytest.approx(-forward.effect_size)
    assert backward.p_value == pytest.approx(forward.p_value)


def test_t_test_detects_strategy_difference(strategy_returns):
    """정상: 0.5%p 차이, n=100 → 유의"""
    returns_a, returns_b = strategy_returns

    result = FrequentistComparator.t_test(returns_a, returns_b)

    assert result.is_significant is True
    assert result.confidence_interval[1] < 0  # 차이 구간 전체가 음수


def test_t_test_identical_groups():
    """정상: 동일한 그룹 → p-value ≈ 1.0"""
    sample = [100, 50, -30, 120, 80]

    result = FrequentistComparator.t_test(sample, list(sample))

    assert result.t_statistic == pytest.approx(0.0)
    assert result.p_value > 0.9
    assert result.is_significant is False


def test_t_test_zero_variance_equal_means():
    """경계: 두 그룹 분산 0, 평균 동일 → t 0, p 1"""
    result = FrequentistComparator.t_test([5.0, 5.0, 5.0], [5.0, 5.0])

    assert result.t_statistic == 0.0
    assert result.p_value == 1.0
    assert result.effect_size == 0.0


def test_t_test_zero_variance_different_means():
    """경계: 두 그룹 분산 0, 평균 다름 → |t| = inf, p 0"""
    result = FrequentistComparator.t_test([1.0, 1.0], [2.0, 2.0])

    assert result.t_statistic == -math.inf
    assert result.p_value == 0.0
    assert result.is_significant is True


def test_t_test_p_value_monotonic_in_effect():
    """정상: 평균 차이가 클수록 p-value 감소"""
    base = [0.0, 1.0, 2.0, 3.0, 4.0, 5.0]
    p_values = [
        FrequentistComparator.t_test(base, [v + shift for v in base]).p_value
        for shift in (0.5, 1.0, 2.0, 4.0)
    ]

    assert p_values == sorted(p_values, reverse=True)


def test_t_test_insufficient_samples_raises_error():
    """오류: 샘플 크기 부족 (각 그룹 최소 2개 필요)"""
    with pytest.raises(InsufficientSamplesError, match="at least 2 samples"):
        FrequentistComparator.t_test([100], [150, 120])


def test_t_test_empty_raises_error():
    """오류: 빈 그룹 → EmptyInputError"""
    with pytest.raises(EmptyInputError):
        FrequentistComparator.t_test([], [1.0, 2.0])


# ============================================================================
# Test Cases: confidence interval
# ============================================================================

def test_confidence_interval_basic():
    """정상: 기본 신뢰 구간 계산 (95%)"""
    values = [100, 50, -30, 120, 80, 60, 90, 110, 40, 70]

    lower, upper = FrequentistComparator.confidence_interval(values, confidence=0.95)

    # 95% CI should contain mean
    assert lower < 69.0 < upper


def test_confidence_interval_wider_at_higher_confidence():
    """정상: 99% 구간 ⊃ 95% 구간"""
    values = [100, 50, -30, 120, 80, 60, 90, 110, 40, 70]

    lower_95, upper_95 = FrequentistComparator.confidence_interval(values, confidence=0.95)
    lower_99, upper_99 = FrequentistComparator.confidence_interval(values, confidence=0.99)

    assert lower_99 < lower_95
    assert upper_99 > upper_95


def test_confidence_interval_single_value():
    """경계: 값이 1개만 있을 때 → (value, value) 반환"""
    lower, upper = FrequentistComparator.confidence_interval([100.0], confidence=0.95)

    assert lower == 100.0
    assert upper == 100.0


def test_confidence_interval_empty_list_raises_error():
    """오류: 빈 리스트 → EmptyInputError"""
    with pytest.raises(EmptyInputError, match="Empty values"):
        FrequentistComparator.confidence_interval([], confidence=0.95)
