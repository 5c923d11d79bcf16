"""
tests/unit/test_errors.py
Unit tests for engine error taxonomy

Test Coverage:
1. 모든 엔진 예외 → EngineError로 catch 가능
2. 표준 예외 계열 호환 (ValueError / KeyError / RuntimeError)
3. UnknownArmError 메시지 (KeyError repr 없이)
"""

import pytest

from src.analysis.errors import (
    DegenerateInputError,
    EmptyInputError,
    EngineError,
    InsufficientSamplesError,
    NoArmsRegisteredError,
    UnknownArmError,
)


@pytest.mark.parametrize(
    "error_cls,builtin",
    [
        (EmptyInputError, ValueError),
        (InsufficientSamplesError, ValueError),
        (DegenerateInputError, ValueError),
        (UnknownArmError, KeyError),
        (NoArmsRegisteredError, RuntimeError),
    ],
)
def test_error_hierarchy(error_cls, builtin):
    """정상: EngineError + 표준 예외 동시 상속"""
    assert issubclass(error_cls, EngineError)
    assert issubclass(error_cls, builtin)


def test_unknown_arm_error_message_is_plain():
    """정상: str() → 메시지 그대로 (따옴표 없음)"""
    assert str(UnknownArmError("Unknown arm: z")) == "Unknown arm: z"
