"""
src/infrastructure/logging/experiment_logger.py
Experiment Logger — Sequential 판정 / Bandit 갱신 로그 (시간에 따른 실험 진행)

원칙:
1. 로그 entry는 dict (JSONL 저장 가능)
2. Schema validation: 필수 필드 누락 시 ExperimentLogValidationError
3. Entry 생성과 동시에 module logger로 출력 (handler 구성은 호출자 책임)

Exports:
- log_sequential_decision(): Sequential test batch 판정 로그
- log_bandit_update(): Bandit arm 갱신 로그
- validate_log_schema(): Schema validation (필수 필드 검증)
- ExperimentLogValidationError: 필수 필드 누락 예외
"""

import logging
from typing import Any, Dict, List

from src.analysis.bandit_selector import ArmSnapshot
from src.analysis.sequential_test import SequentialResult

logger = logging.getLogger(__name__)


SEQUENTIAL_REQUIRED_FIELDS = [
    "event",
    "timestamp",
    "experiment_id",
    "current_sample_size",
    "p_value",
    "adjusted_alpha",
    "decision",
]

BANDIT_REQUIRED_FIELDS = [
    "event",
    "timestamp",
    "experiment_id",
    "arm_id",
    "reward",
    "selections",
    "average_reward",
]


class ExperimentLogValidationError(Exception):
    """Experiment log schema validation 실패"""

    pass


def log_sequential_decision(
    timestamp: float,
    experiment_id: str,
    result: SequentialResult,
) -> Dict[str, Any]:
    """
    Sequential test batch 판정 로그 생성

    Args:
        timestamp: 판정 시각 (UNIX timestamp)
        experiment_id: 실험 식별자
        result: SequentialTestController.analyze 결과

    Returns:
        log_entry: dict
    """
    log_entry = {
        "event": "sequential_decision",
        "timestamp": timestamp,
        "experiment_id": experiment_id,
        "current_sample_size": result.current_sample_size,
        "p_value": result.p_value,
        "adjusted_alpha": result.adjusted_alpha,
        "decision": result.decision.value,
    }

    validate_log_schema(log_entry, SEQUENTIAL_REQUIRED_FIELDS)

    if result.is_terminal:
        logger.info(f"[{experiment_id}] sequential test finished: {result.decision.value}")
    return log_entry


def log_bandit_update(
    timestamp: float,
    experiment_id: str,
    snapshot: ArmSnapshot,
    reward: float,
) -> Dict[str, Any]:
    """
    Bandit arm 갱신 로그 생성

    Args:
        timestamp: 갱신 시각 (UNIX timestamp)
        experiment_id: 실험 식별자
        snapshot: BanditSelector.update 반환 스냅샷
        reward: 이번 trial reward
    """
    log_entry = {
        "event": "bandit_update",
        "timestamp": timestamp,
        "experiment_id": experiment_id,
        "arm_id": snapshot.arm_id,
        "reward": reward,
        "selections": snapshot.selections,
        "average_reward": snapshot.average_reward,
    }

    validate_log_schema(log_entry, BANDIT_REQUIRED_FIELDS)

    logger.debug(
        f"[{experiment_id}] arm={snapshot.arm_id} reward={reward:.6f} "
        f"avg={snapshot.average_reward:.6f} n={snapshot.selections}"
    )
    return log_entry


def validate_log_schema(log_entry: Dict[str, Any], required_fields: List[str]) -> None:
    """
    Experiment log schema validation

    Raises:
        ExperimentLogValidationError: 필수 필드 누락
    """
    for field in required_fields:
        if field not in log_entry:
            raise ExperimentLogValidationError(f"Missing required field: {field}")
