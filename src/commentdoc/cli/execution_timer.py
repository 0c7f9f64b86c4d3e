"""
Execution Timer 모듈

빌드 단계별 실행 시간을 측정하고 중첩 구조로 출력합니다.
"""

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional


@dataclass
class TimingRecord:
    """단계 하나의 측정 기록"""

    name: str
    started: float
    ended: Optional[float] = None

    @property
    def elapsed(self) -> Optional[float]:
        if self.ended is None:
            return None
        return self.ended - self.started

    def contains(self, other: "TimingRecord") -> bool:
        """other 구간이 이 구간 안에 완전히 포함되는지 확인"""
        if self.ended is None or other.ended is None:
            return False
        return self.started <= other.started and other.ended <= self.ended


class ExecutionTimer:
    """
    실행 시간 측정기

    주요 기능:
    1. 이름별 구간 시작/종료 (같은 이름은 한 번만 측정)
    2. 다른 구간 안에 포함된 구간을 하위 단계로 표시
    3. 측정 결과 문자열 출력
    """

    def __init__(self):
        self.records: List[TimingRecord] = []

    def _find(self, name: str) -> Optional[TimingRecord]:
        for record in self.records:
            if record.name == name:
                return record
        return None

    def start(self, name: str) -> None:
        """구간 측정 시작 (이미 있는 이름이면 무시)"""
        if self._find(name) is None:
            self.records.append(TimingRecord(name, time.perf_counter()))

    def end(self, name: str) -> None:
        """
        구간 측정 종료

        Raises:
            KeyError: 시작하지 않은 구간인 경우
        """
        record = self._find(name)
        if record is None:
            raise KeyError(f"시작하지 않은 측정 구간입니다: {name}")
        if record.ended is None:
            record.ended = time.perf_counter()

    @contextmanager
    def measure(self, name: str) -> Iterator[None]:
        """with 블록 실행 시간을 측정합니다."""
        self.start(name)
        try:
            yield
        finally:
            self.end(name)

    def elapsed(self, name: str) -> Optional[float]:
        record = self._find(name)
        return record.elapsed if record else None

    def _depth(self, index: int) -> int:
        depth = 0
        child = self.records[index]
        for parent in reversed(self.records[:index]):
            if parent.contains(child):
                depth += 1
                child = parent
        return depth

    def statistics_to_string(self) -> str:
        """
        종료된 구간을 표 형태 문자열로 만듭니다.

        하위 구간 이름 앞에는 깊이만큼 "- "가 붙습니다.

        Returns:
            str: 예) "Total         1.234s\\n- Parsing     0.800s\\n"
        """
        rows = []
        for index, record in enumerate(self.records):
            if record.elapsed is None:
                continue
            rows.append(("- " * self._depth(index) + record.name, f"{record.elapsed:.3f}s"))

        if not rows:
            return ""

        name_width = max(len(name) for name, _ in rows)
        time_width = max(len(elapsed) for _, elapsed in rows)
        return "".join(f"{name.ljust(name_width)} {elapsed.rjust(time_width)}\n" for name, elapsed in rows)
