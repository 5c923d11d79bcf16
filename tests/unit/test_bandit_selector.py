"""
tests/unit/test_bandit_selector.py
Unit tests for epsilon-greedy bandit selector

Test Coverage:
1. 초기 exploit → 등록 순서 첫 arm (평균 reward 모두 0)
2. update → selections / cumulative_reward / average_reward
3. 1000 trials (A≈0.01, B≈0.02, ε=0.1) → 마지막 100 trials 중 B > 80%
4. 오류: arm 없음 / unknown arm / 중복 arm / epsilon 범위
5. 동시 update → lost update 없음
"""

import random
import threading
from unittest.mock import MagicMock

import pytest

from src.analysis.bandit_selector import ArmSnapshot, BanditSelector
from src.analysis.errors import NoArmsRegisteredError, UnknownArmError


# ============================================================================
# Test Cases: selection
# ============================================================================

def test_first_exploit_pick_is_first_registered_arm():
    """정상: 관측 전 (평균 0 동점) → 등록 순서 첫 arm"""
    selector = BanditSelector(["strategy_a", "strategy_b", "strategy_c"], epsilon=0.0)

    assert selector.select_arm() == "strategy_a"


def test_exploit_picks_highest_average_reward():
    """정상: 평균 reward 최대 arm 선택"""
    selector = BanditSelector(["a", "b", "c"], epsilon=0.0)
    selector.update("a", 0.01)
    selector.update("b", 0.03)
    selector.update("c", 0.02)

    assert selector.select_arm() == "b"


def test_exploit_tie_broken_by_registration_order():
    """정상: 동점 → 먼저 등록된 arm"""
    selector = BanditSelector(["a", "b", "c"], epsilon=0.0)
    selector.update("c", 0.05)
    selector.update("b", 0.05)

    assert selector.select_arm() == "b"


def test_full_exploration_visits_all_arms():
    """정상: ε=1 → 무작위 탐색, 모든 arm 방문"""
    selector = BanditSelector(["a", "b", "c"], epsilon=1.0, rng=random.Random(1))

    picks = {selector.select_arm() for _ in range(200)}

    assert picks == {"a", "b", "c"}


def test_explore_branch_uses_uniform_random_arm():
    """정상: rng.random() < ε → rng.randrange로 arm 선택 (평균 무시)"""
    rng = MagicMock()
    rng.random.return_value = 0.05
    rng.randrange.return_value = 2
    selector = BanditSelector(["a", "b", "c"], epsilon=0.1, rng=rng)
    selector.update("a", 1.0)

    assert selector.select_arm() == "c"
    rng.randrange.assert_called_once_with(3)


def test_exploit_branch_when_draw_above_epsilon():
    """정상: rng.random() >= ε → 최고 평균 arm"""
    rng = MagicMock()
    rng.random.return_value = 0.5
    selector = BanditSelector(["a", "b"], epsilon=0.1, rng=rng)
    selector.update("b", 1.0)

    assert selector.select_arm() == "b"
    rng.randrange.assert_not_called()


def test_bandit_converges_to_better_arm():
    """
    정상: A reward≈0.01, B reward≈0.02, 1000 trials, ε=0.1
    → 마지막 100 trials 중 B 선택 > 80%
    """
    rng = random.Random(123)
    selector = BanditSelector(["A", "B"], epsilon=0.1, rng=random.Random(456))
    mean_reward = {"A": 0.01, "B": 0.02}

    picks = []
    for _ in range(1000):
        arm = selector.select_arm()
        selector.update(arm, mean_reward[arm] + rng.uniform(-0.004, 0.004))
        picks.append(arm)

    final_100 = picks[-100:]
    assert final_100.count("B") > 80
    assert selector.total_selections == 1000


# ============================================================================
# Test Cases: update / snapshot
# ============================================================================

def test_update_accumulates_counters():
    """정상: selections++, cumulative_reward += reward"""
    selector = BanditSelector(["a"])

    selector.update("a", 0.02)
    snapshot = selector.update("a", -0.01)

    assert isinstance(snapshot, ArmSnapshot)
    assert snapshot.arm_id == "a"
    assert snapshot.selections == 2
    assert snapshot.cumulative_reward == pytest.approx(0.01)
    assert snapshot.average_reward == pytest.approx(0.005)


def test_average_reward_zero_before_observations():
    """경계: selections == 0 → average_reward 0.0"""
    selector = BanditSelector(["a", "b"])

    assert [arm.average_reward for arm in selector.arms()] == [0.0, 0.0]


def test_snapshot_is_immutable_copy():
    """정상: 스냅샷은 이후 update 영향 없음"""
    selector = BanditSelector(["a"])
    before = selector.arm("a")

    selector.update("a", 1.0)

    assert before.selections == 0
    assert selector.arm("a").selections == 1


def test_register_arm_after_construction():
    """정상: register_arm → 등록 순서 뒤에 추가"""
    selector = BanditSelector(epsilon=0.0)
    selector.register_arm("late")

    assert selector.select_arm() == "late"
    assert [arm.arm_id for arm in selector.arms()] == ["late"]


# ============================================================================
# Test Cases: errors
# ============================================================================

def test_select_arm_without_arms_raises_error():
    """오류: 등록된 arm 없음 → NoArmsRegisteredError"""
    with pytest.raises(NoArmsRegisteredError, match="no arms registered"):
        BanditSelector().select_arm()


def test_update_unknown_arm_raises_error():
    """오류: 미등록 arm → UnknownArmError"""
    selector = BanditSelector(["a"])

    with pytest.raises(UnknownArmError, match="Unknown arm: z"):
        selector.update("z", 1.0)


def test_duplicate_arm_raises_error():
    """오류: 중복 arm → ValueError"""
    with pytest.raises(ValueError, match="already registered"):
        BanditSelector(["a", "a"])


def test_invalid_epsilon_raises_error():
    """오류: epsilon 범위 밖 → ValueError"""
    with pytest.raises(ValueError, match="epsilon"):
        BanditSelector(["a"], epsilon=1.5)


# ============================================================================
# Test Cases: concurrency
# ============================================================================

def test_concurrent_updates_are_not_lost():
    """동시성: 8 threads × 500 update → selections 4000, reward 합계 정확"""
    selector = BanditSelector(["a", "b"])

    def worker(arm_id):
        for _ in range(500):
            selector.update(arm_id, 1.0)

    threads = [threading.Thread(target=worker, args=("a" if i % 2 else "b",)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert selector.arm("a").selections == 2000
    assert selector.arm("b").selections == 2000
    assert selector.arm("a").cumulative_reward == 2000.0
    assert selector.total_selections == 4000
