"""
Statistical Experimentation & Performance-Analysis Toolkit.

Latency/return 기술통계, 추세/scaling 분석, A/B 비교 (t-test, bandit, Bayesian, sequential).
"""

from .errors import (
    EngineError,
    EmptyInputError,
    InsufficientSamplesError,
    DegenerateInputError,
    UnknownArmError,
    NoArmsRegisteredError,
)
from .sample_statistics import (
    Sample,
    Statistics,
    Histogram,
    HistogramBin,
    DistributionShape,
    SampleStatistics,
)
from .trend_analyzer import TrendAnalyzer, TimedSample, ScalingPoint, TrendResult, ScalingResult
from .stat_test import FrequentistComparator, TTestResult
from .bandit_selector import BanditSelector, ArmSnapshot
from .bayesian_comparator import BayesianComparator, Posterior, BayesianResult
from .sequential_test import (
    SequentialTestController,
    SequentialConfig,
    SequentialDecision,
    SequentialResult,
    SequentialTestState,
)
from .ab_comparator import VariantComparator, ComparisonResult
from .latency_timer import LatencyRecorder, measure_latency

__all__ = [
    "EngineError",
    "EmptyInputError",
    "InsufficientSamplesError",
    "DegenerateInputError",
    "UnknownArmError",
    "NoArmsRegisteredError",
    "Sample",
    "Statistics",
    "Histogram",
    "HistogramBin",
    "DistributionShape",
    "SampleStatistics",
    "TrendAnalyzer",
    "TimedSample",
    "ScalingPoint",
    "TrendResult",
    "ScalingResult",
    "FrequentistComparator",
    "TTestResult",
    "BanditSelector",
    "ArmSnapshot",
    "BayesianComparator",
    "Posterior",
    "BayesianResult",
    "SequentialTestController",
    "SequentialConfig",
    "SequentialDecision",
    "SequentialResult",
    "SequentialTestState",
    "VariantComparator",
    "ComparisonResult",
    "LatencyRecorder",
    "measure_latency",
]
