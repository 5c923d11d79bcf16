"""
src/infrastructure/config/__init__.py
Experiment Configuration

SSOT:
- config/experiment_limits.yaml

Exports:
- ExperimentConfig: 전체 설정
- load_experiment_config: YAML 로드
- ConfigValidationError: 검증 실패
"""

from .experiment_config import (
    ExperimentConfig,
    BanditSettings,
    SequentialSettings,
    BayesianSettings,
    TrendSettings,
    BenchmarkSettings,
    ConfigValidationError,
    load_experiment_config,
    parse_experiment_config,
)

__all__ = [
    "ExperimentConfig",
    "BanditSettings",
    "SequentialSettings",
    "BayesianSettings",
    "TrendSettings",
    "BenchmarkSettings",
    "ConfigValidationError",
    "load_experiment_config",
    "parse_experiment_config",
]
