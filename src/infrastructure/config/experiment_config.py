"""
src/infrastructure/config/experiment_config.py
Experiment Config — config/experiment_limits.yaml 로드

Purpose:
- Bandit / Sequential / Bayesian / Trend / Benchmark 기본값 로드
- 누락된 key → dataclass 기본값
- 경로 override: EXPERIMENT_CONFIG_PATH 환경 변수

SSOT:
- config/experiment_limits.yaml

Exports:
- ExperimentConfig (+ 섹션별 Settings)
- load_experiment_config(): YAML → ExperimentConfig
- ConfigValidationError: 잘못된 값
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from src.analysis.benchmark import LatencyRequirements
from src.analysis.sequential_test import SequentialConfig

logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[3] / "config" / "experiment_limits.yaml"
CONFIG_PATH_ENV = "EXPERIMENT_CONFIG_PATH"


class ConfigValidationError(Exception):
    """Config 값 검증 실패"""

    pass


@dataclass(frozen=True)
class BanditSettings:
    epsilon: float = 0.1


@dataclass(frozen=True)
class SequentialSettings:
    alpha: float = 0.05
    beta: float = 0.2
    minimum_detectable_effect: float = 0.02
    max_sample_size: int = 1000

    def to_config(self) -> SequentialConfig:
        """SequentialTestController 설정으로 변환"""
        return SequentialConfig(
            alpha=self.alpha,
            beta=self.beta,
            minimum_detectable_effect=self.minimum_detectable_effect,
            max_sample_size=self.max_sample_size,
        )


@dataclass(frozen=True)
class BayesianSettings:
    confidence: float = 0.95


@dataclass(frozen=True)
class TrendSettings:
    linear_growth_threshold: float = 0.8


@dataclass(frozen=True)
class BenchmarkSettings:
    regression_threshold_pct: float = 5.0
    requirements: Dict[str, LatencyRequirements] = field(default_factory=dict)


@dataclass(frozen=True)
class ExperimentConfig:
    bandit: BanditSettings = field(default_factory=BanditSettings)
    sequential: SequentialSettings = field(default_factory=SequentialSettings)
    bayesian: BayesianSettings = field(default_factory=BayesianSettings)
    trend: TrendSettings = field(default_factory=TrendSettings)
    benchmark: BenchmarkSettings = field(default_factory=BenchmarkSettings)


def resolve_config_path(path: Optional[str] = None) -> Path:
    """
    Config 경로 결정: 인자 > EXPERIMENT_CONFIG_PATH > 기본 경로
    """
    if path:
        return Path(path)
    env_path = os.getenv(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def load_experiment_config(path: Optional[str] = None) -> ExperimentConfig:
    """
    YAML config 로드

    Args:
        path: YAML 경로 (None → EXPERIMENT_CONFIG_PATH 또는 기본 경로)

    Returns:
        ExperimentConfig: 검증된 설정

    Raises:
        FileNotFoundError: 파일 없음
        ConfigValidationError: 값 범위 오류 / 형식 오류
    """
    config_path = resolve_config_path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Experiment config not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ConfigValidationError(f"Config root must be a mapping: {config_path}")

    logger.debug(f"Loaded experiment config from {config_path}")
    return parse_experiment_config(raw)


def parse_experiment_config(raw: Dict[str, Any]) -> ExperimentConfig:
    """
    Dict → ExperimentConfig (검증 포함)

    Raises:
        ConfigValidationError: 값 범위 오류 / 알 수 없는 key
    """
    try:
        bandit = BanditSettings(**_section(raw, "bandit"))
        sequential = SequentialSettings(**_section(raw, "sequential"))
        bayesian = BayesianSettings(**_section(raw, "bayesian"))
        trend = TrendSettings(**_section(raw, "trend"))

        benchmark_raw = dict(_section(raw, "benchmark"))
        requirements = {
            name: LatencyRequirements(**values)
            for name, values in (benchmark_raw.pop("requirements", None) or {}).items()
        }
        benchmark = BenchmarkSettings(requirements=requirements, **benchmark_raw)
    except TypeError as e:
        raise ConfigValidationError(f"Invalid config keys: {e}") from e

    config = ExperimentConfig(
        bandit=bandit,
        sequential=sequential,
        bayesian=bayesian,
        trend=trend,
        benchmark=benchmark,
    )
    _validate(config)
    return config


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = raw.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigValidationError(f"Config section '{name}' must be a mapping")
    return section


def _validate(config: ExperimentConfig) -> None:
    if not 0.0 <= config.bandit.epsilon <= 1.0:
        raise ConfigValidationError(f"bandit.epsilon must be within [0, 1], got {config.bandit.epsilon}")

    try:
        config.sequential.to_config()
    except ValueError as e:
        raise ConfigValidationError(f"sequential: {e}") from e

    if not 0.0 < config.bayesian.confidence < 1.0:
        raise ConfigValidationError(
            f"bayesian.confidence must be within (0, 1), got {config.bayesian.confidence}"
        )

    if not 0.0 <= config.trend.linear_growth_threshold <= 1.0:
        raise ConfigValidationError(
            f"trend.linear_growth_threshold must be within [0, 1], "
            f"got {config.trend.linear_growth_threshold}"
        )

    if config.benchmark.regression_threshold_pct < 0:
        raise ConfigValidationError(
            f"benchmark.regression_threshold_pct must be non-negative, "
            f"got {config.benchmark.regression_threshold_pct}"
        )

    for name, req in config.benchmark.requirements.items():
        if min(req.average_ms, req.p95_ms, req.p99_ms, req.max_ms) <= 0:
            raise ConfigValidationError(f"benchmark.requirements.{name}: limits must be positive")
