"""
Status Manager 모듈

시간이 걸리는 빌드 단계(파일 탐색, 파싱, 문서 생성)의 시작/진행/종료 상태를 출력합니다.
진행률은 tqdm 으로 표시합니다.
"""

import logging
import time
from typing import Iterable, Iterator, Optional, TypeVar

from tqdm import tqdm

T = TypeVar("T")

logger = logging.getLogger(__name__)


class StatusManager:
    """
    상태 관리자 기본 클래스

    주요 기능:
    1. 단계 시작 메시지 출력 ("  [1/3] ... 중...")
    2. tqdm 진행률 표시 (track)
    3. 종료 메시지와 소요 시간 출력 ("  ✓ ...")

    하위 클래스는 start_message(), end_message() 를 재정의합니다.
    """

    unit = "file"

    def __init__(self, step: int, total_steps: int, show_progress: bool = True):
        """
        StatusManager 초기화

        Args:
            step: 현재 단계 번호 (1부터)
            total_steps: 전체 단계 수
            show_progress: False이면 진행률 표시줄을 숨김
        """
        self.step = step
        self.total_steps = total_steps
        self.show_progress = show_progress
        self.started: Optional[float] = None
        self.ended: Optional[float] = None

    @property
    def elapsed(self) -> float:
        if self.started is None:
            return 0.0
        return (self.ended or time.perf_counter()) - self.started

    def start_message(self) -> str:
        return "작업 중..."

    def end_message(self) -> str:
        return "완료했습니다."

    def start(self) -> None:
        self.started = time.perf_counter()
        print(f"  [{self.step}/{self.total_steps}] {self.start_message()}")
        logger.info(self.start_message())

    def track(self, iterable: Iterable[T], total: Optional[int] = None) -> Iterator[T]:
        """진행률을 표시하면서 iterable 을 순회합니다."""
        return iter(
            tqdm(
                iterable,
                total=total,
                desc=f"  {self.__class__.__name__}",
                unit=self.unit,
                leave=False,
                disable=not self.show_progress,
            )
        )

    def progress_bar(self, total: int) -> tqdm:
        """콜백으로 갱신하는 진행률 표시줄 (bar.update() 호출)"""
        return tqdm(
            total=total,
            desc=f"  {self.__class__.__name__}",
            unit=self.unit,
            leave=False,
            disable=not self.show_progress,
        )

    def end(self) -> None:
        self.ended = time.perf_counter()
        print(f"  ✓ {self.end_message()} ({self.elapsed:.2f}초)")
        logger.info(f"{self.end_message()} ({self.elapsed:.2f}초)")

    def __enter__(self) -> "StatusManager":
        self.start()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        if exc_type is None:
            self.end()
        return False


class FileSearchStatus(StatusManager):
    """소스 파일 탐색 단계"""

    def __init__(self, step: int, total_steps: int, show_progress: bool = True):
        super().__init__(step, total_steps, show_progress)
        self.found = 0
        self.from_cache = False

    def start_message(self) -> str:
        return "소스 파일 탐색 중..."

    def end_message(self) -> str:
        if self.from_cache:
            return f"캐시에서 {self.found}개의 소스 파일을 로드했습니다."
        return f"{self.found}개의 소스 파일을 찾았습니다."


class ParsingStatus(StatusManager):
    """소스 파일 파싱 단계"""

    def __init__(self, step: int, total_steps: int, show_progress: bool = True):
        super().__init__(step, total_steps, show_progress)
        self.parsed = 0
        self.cached = 0
        self.topics = 0
        self.errors = 0

    def start_message(self) -> str:
        return "소스 파일 파싱 중..."

    def end_message(self) -> str:
        message = f"{self.parsed + self.cached}개의 파일에서 {self.topics}개의 토픽을 찾았습니다"
        details = []
        if self.cached:
            details.append(f"캐시 {self.cached}개")
        if self.errors:
            details.append(f"오류 {self.errors}개")
        if details:
            message += f" ({', '.join(details)})"
        return message + "."


class BuildingStatus(StatusManager):
    """HTML 문서 생성 단계"""

    def __init__(self, step: int, total_steps: int, show_progress: bool = True):
        super().__init__(step, total_steps, show_progress)
        self.pages = 0
        self.written = 0
        self.skipped = False

    def start_message(self) -> str:
        return "HTML 문서 생성 중..."

    def end_message(self) -> str:
        if self.skipped:
            return "HTML 문서 생성을 건너뛰었습니다."
        return f"{self.pages}개의 파일 페이지를 포함해 {self.written}개의 파일을 생성했습니다."
