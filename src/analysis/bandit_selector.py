"""
src/analysis/bandit_selector.py
Bandit Selector — Epsilon-greedy multi-armed bandit (strategy/variant 선택)

Purpose:
- 동시 실행되는 trial들이 variant(arm)를 선택하고 reward를 보고
- 확률 epsilon → 무작위 탐색 (explore)
- 그 외 → 평균 reward 최대 arm 선택 (exploit), 동점은 등록 순서

원칙:
1. Arm counter는 selector 인스턴스 소유 (module singleton 금지)
2. update는 registry lock으로 원자적 read-modify-write (lost update 금지)
3. select_arm의 평균 reward 읽기는 진행 중 update 대비 잠시 stale해도 허용
4. Reset = 새 selector 생성

Exports:
- ArmSnapshot: Arm 상태 스냅샷 (immutable)
- BanditSelector: Epsilon-greedy selector
"""

import logging
import random
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .errors import NoArmsRegisteredError, UnknownArmError

logger = logging.getLogger(__name__)


DEFAULT_EPSILON = 0.1


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class _ArmCounters:
    """Arm 내부 counter (selector lock 하에서만 변경)"""
    selections: int = 0
    cumulative_reward: float = 0.0


@dataclass(frozen=True)
class ArmSnapshot:
    """
    Arm 상태 스냅샷

    Attributes:
        arm_id: Arm 식별자
        selections: reward가 보고된 횟수
        cumulative_reward: reward 합계
    """
    arm_id: str
    selections: int
    cumulative_reward: float

    @property
    def average_reward(self) -> float:
        """cumulative_reward / selections (selections == 0 → 0.0)"""
        if self.selections == 0:
            return 0.0
        return self.cumulative_reward / self.selections


# ============================================================================
# BanditSelector Class
# ============================================================================

class BanditSelector:
    """
    Epsilon-greedy multi-armed bandit

    Usage:
        selector = BanditSelector(["strategy_a", "strategy_b"], epsilon=0.1)
        arm = selector.select_arm()
        selector.update(arm, reward=0.012)
    """

    def __init__(
        self,
        arm_ids: Iterable[str] = (),
        epsilon: float = DEFAULT_EPSILON,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            arm_ids: 초기 arm 목록 (등록 순서 = 동점 tie-break 순서)
            epsilon: 탐색 확률 (0.0 ~ 1.0, 기본 0.1)
            rng: 난수 생성기 (테스트 재현성용, 기본 random.Random())

        Raises:
            ValueError: epsilon 범위 오류 또는 arm 중복
        """
        if not 0.0 <= epsilon <= 1.0:
            raise ValueError(f"epsilon must be within [0, 1], got {epsilon}")

        self.epsilon = epsilon
        self._rng = rng or random.Random()
        self._lock = threading.Lock()
        # dict 삽입 순서 = 등록 순서
        self._arms: Dict[str, _ArmCounters] = {}

        for arm_id in arm_ids:
            self.register_arm(arm_id)

    def register_arm(self, arm_id: str) -> None:
        """
        Arm 등록

        Raises:
            ValueError: 이미 등록된 arm_id
        """
        with self._lock:
            if arm_id in self._arms:
                raise ValueError(f"Arm already registered: {arm_id}")
            self._arms[arm_id] = _ArmCounters()

    def select_arm(self) -> str:
        """
        Arm 선택 (epsilon-greedy)

        Returns:
            str: 선택된 arm_id

        Raises:
            NoArmsRegisteredError: 등록된 arm 없음
        """
        with self._lock:
            if not self._arms:
                raise NoArmsRegisteredError("Cannot select arm: no arms registered")
            arm_ids = list(self._arms)
            averages = [self._average(self._arms[arm_id]) for arm_id in arm_ids]

        # 탐색/활용 판단은 lock 밖에서 (스냅샷 기준, stale 허용)
        if self._rng.random() < self.epsilon:
            choice = arm_ids[self._rng.randrange(len(arm_ids))]
            logger.debug(f"Bandit explore: {choice}")
            return choice

        best_index = 0
        for index in range(1, len(averages)):
            # strict > → 동점은 먼저 등록된 arm 유지
            if averages[index] > averages[best_index]:
                best_index = index

        logger.debug(f"Bandit exploit: {arm_ids[best_index]} (avg={averages[best_index]:.6f})")
        return arm_ids[best_index]

    def update(self, arm_id: str, reward: float) -> ArmSnapshot:
        """
        Reward 반영 (원자적)

        Args:
            arm_id: 선택했던 arm
            reward: 관측 reward

        Returns:
            ArmSnapshot: 갱신 후 상태

        Raises:
            UnknownArmError: 등록되지 않은 arm_id
        """
        with self._lock:
            counters = self._arms.get(arm_id)
            if counters is None:
                raise UnknownArmError(f"Unknown arm: {arm_id}")
            counters.selections += 1
            counters.cumulative_reward += reward
            return self._snapshot(arm_id, counters)

    def arm(self, arm_id: str) -> ArmSnapshot:
        """
        단일 arm 스냅샷

        Raises:
            UnknownArmError: 등록되지 않은 arm_id
        """
        with self._lock:
            counters = self._arms.get(arm_id)
            if counters is None:
                raise UnknownArmError(f"Unknown arm: {arm_id}")
            return self._snapshot(arm_id, counters)

    def arms(self) -> List[ArmSnapshot]:
        """전체 arm 스냅샷 (등록 순서)"""
        with self._lock:
            return [self._snapshot(arm_id, c) for arm_id, c in self._arms.items()]

    @property
    def total_selections(self) -> int:
        with self._lock:
            return sum(c.selections for c in self._arms.values())

    # ========== Private Helper Methods ==========

    @staticmethod
    def _average(counters: _ArmCounters) -> float:
        if counters.selections == 0:
            return 0.0
        return counters.cumulative_reward / counters.selections

    @staticmethod
    def _snapshot(arm_id: str, counters: _ArmCounters) -> ArmSnapshot:
        return ArmSnapshot(
            arm_id=arm_id,
            selections=counters.selections,
            cumulative_reward=counters.cumulative_reward,
        )
