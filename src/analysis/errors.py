"""
src/analysis/errors.py
Engine Errors — 통계 엔진 예외 분류

원칙:
1. 모든 예외는 동기적/로컬 실패 (retry 없음)
2. Degenerate-but-valid 입력 (상수 series, 0 reward)은 예외 대신 문서화된 fallback 반환
3. ValueError/KeyError 계열을 함께 상속 → 기존 `except ValueError` 호출부 호환

Exports:
- EngineError: 공통 base
- EmptyInputError: 빈 샘플
- InsufficientSamplesError: 샘플 수 부족 (t-test 각 그룹 최소 2개)
- DegenerateInputError: 분산 0 / 평균 0 (fallback 경로 표시용)
- UnknownArmError: 등록되지 않은 arm
- NoArmsRegisteredError: arm 0개 상태에서 select
"""


class EngineError(Exception):
    """통계 엔진 공통 예외"""

    pass


class EmptyInputError(EngineError, ValueError):
    """빈 샘플로 통계/회귀 요청 (0/NaN 반환 금지)"""

    pass


class InsufficientSamplesError(EngineError, ValueError):
    """샘플은 있으나 검정에 필요한 최소 개수 미달"""

    pass


class DegenerateInputError(EngineError, ValueError):
    """
    분산 0 / 평균 0 입력

    Note:
        Public API는 이 예외를 던지지 않고 fallback 값을 반환한다.
        내부 helper가 fallback 경로를 구분할 때만 사용 (예: trend stability).
    """

    pass


class UnknownArmError(EngineError, KeyError):
    """등록되지 않은 arm_id로 update"""

    def __str__(self) -> str:
        # KeyError는 repr()로 감싸므로 메시지를 그대로 노출
        return str(self.args[0]) if self.args else ""


class NoArmsRegisteredError(EngineError, RuntimeError):
    """등록된 arm이 없는 selector에서 select_arm 호출"""

    pass
