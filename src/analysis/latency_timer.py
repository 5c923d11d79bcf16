"""
src/analysis/latency_timer.py
Latency Timer — operation 소요 시간 측정 (샘플 생산자)

Purpose:
- 임의 operation 주변 elapsed time 측정 (ms, perf_counter_ns)
- 이름별 샘플 누적 → Statistics

원칙:
1. Operation이 예외를 던져도 elapsed time은 기록, 예외는 그대로 전파
2. Recorder는 harness가 소유 (thread-safe append)

Exports:
- measure_latency(): (result, elapsed_ms)
- LatencyRecorder: 이름별 샘플 수집기
"""

import threading
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Tuple

from .sample_statistics import SampleStatistics, Statistics

NS_PER_MS = 1_000_000


def measure_latency(operation: Callable[..., Any], *args, **kwargs) -> Tuple[Any, float]:
    """
    Operation 실행 + 소요 시간 측정

    Returns:
        (result, elapsed_ms)
    """
    start = time.perf_counter_ns()
    result = operation(*args, **kwargs)
    elapsed_ms = (time.perf_counter_ns() - start) / NS_PER_MS
    return result, elapsed_ms


class LatencyRecorder:
    """
    이름별 latency 샘플 수집기

    Usage:
        recorder = LatencyRecorder()
        with recorder.time("order_processing"):
            process(order)
        stats = recorder.statistics("order_processing")
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._samples: Dict[str, List[float]] = {}

    def record(self, name: str, elapsed_ms: float) -> None:
        with self._lock:
            self._samples.setdefault(name, []).append(elapsed_ms)

    @contextmanager
    def time(self, name: str) -> Iterator[None]:
        """Block 소요 시간 기록 (예외 발생 시에도 기록)"""
        start = time.perf_counter_ns()
        try:
            yield
        finally:
            self.record(name, (time.perf_counter_ns() - start) / NS_PER_MS)

    def measure(self, name: str, operation: Callable[..., Any], *args, **kwargs) -> Any:
        """Operation 실행, 소요 시간 기록 후 결과 반환"""
        with self.time(name):
            return operation(*args, **kwargs)

    def samples(self, name: str) -> List[float]:
        """기록된 샘플 복사본 (없으면 빈 list)"""
        with self._lock:
            return list(self._samples.get(name, []))

    def names(self) -> List[str]:
        with self._lock:
            return list(self._samples)

    def statistics(self, name: str) -> Statistics:
        """
        Raises:
            EmptyInputError: 기록된 샘플 없음
        """
        return SampleStatistics.compute(self.samples(name))
