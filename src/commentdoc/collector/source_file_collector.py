"""
Source File Collector 모듈

입력 디렉터리의 모든 소스 파일을 재귀적으로 탐색하고 언어 정보와 함께 수집합니다.
"""

import fnmatch
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional, Set

from commentdoc.config.config_manager import Configuration
from commentdoc.languages import LanguageManager
from commentdoc.models import SourceFile

logger = logging.getLogger(__name__)


class SourceFileCollector:
    """
    소스 파일을 수집하는 클래스

    주요 기능:
    1. 여러 입력 디렉터리의 재귀적 파일 탐색
    2. 설정 기반 파일 필터링 (확장자, 제외 디렉터리, 제외 파일 패턴)
    3. 확장자 없는 스크립트의 셔뱅 라인 기반 언어 판별
    4. 중복 제거
    5. 제너레이터 패턴으로 메모리 효율성 확보
    """

    # 제외할 디렉터리 목록 (빌드 디렉터리 및 버전 관리 디렉터리)
    EXCLUDED_DIRS = {
        ".git",
        ".svn",
        ".hg",  # 버전 관리
        "target",
        "build",
        "out",
        "bin",
        "obj",  # 빌드 결과물
        ".idea",
        ".vscode",
        ".settings",  # IDE 설정
        "node_modules",  # Node.js 의존성
        "__pycache__",
        ".pytest_cache",  # Python 캐시
    }

    def __init__(self, config: Configuration, language_manager: LanguageManager):
        """
        SourceFileCollector 초기화

        Args:
            config: Configuration 인스턴스
            language_manager: 파일 언어 판별에 사용할 LanguageManager
        """
        self._config = config
        self._language_manager = language_manager
        self._input_dirs = [Path(d) for d in config.input_dirs]
        self._source_file_types = config.get_source_file_types(language_manager.all_extensions())
        self._seen_files: Set[Path] = set()

        # 제외할 디렉터리: 기본값과 config에서 가져온 값 병합
        self._excluded_dirs = self.EXCLUDED_DIRS.copy()
        if config.exclude_dirs:
            self._excluded_dirs.update(config.exclude_dirs)

        # 출력/작업 디렉터리가 입력 디렉터리 안에 있으면 제외
        self._excluded_paths = {
            self._normalize_path(Path(config.output_dir)),
            self._normalize_path(Path(config.working_dir)),
        }

        self._exclude_file_patterns = config.exclude_files

    def collect(self) -> Iterator[SourceFile]:
        """
        소스 파일을 수집하는 제너레이터

        Yields:
            SourceFile: 수집된 소스 파일 메타데이터 (language 포함)

        Raises:
            ValueError: 입력 디렉터리가 없거나 디렉터리가 아닌 경우
        """
        for input_dir in self._input_dirs:
            if not input_dir.exists():
                raise ValueError(f"입력 디렉터리가 존재하지 않습니다: {input_dir}")
            if not input_dir.is_dir():
                raise ValueError(f"입력 경로가 디렉터리가 아닙니다: {input_dir}")

        for input_dir in self._input_dirs:
            for file_path in self._walk_directory(input_dir):
                language_name = self._should_collect(file_path, input_dir)
                if language_name is None:
                    continue

                # 중복 제거
                normalized_path = self._normalize_path(file_path)
                if normalized_path in self._seen_files:
                    continue
                self._seen_files.add(normalized_path)

                try:
                    yield self._extract_metadata(file_path, input_dir, language_name)
                except ValueError as e:
                    logger.warning(str(e))
                    continue

    def collect_all(self) -> List[SourceFile]:
        """
        모든 소스 파일을 수집하여 리스트로 반환

        Returns:
            List[SourceFile]: 수집된 모든 소스 파일 목록 (상대 경로 순)
        """
        return sorted(self.collect(), key=lambda f: str(f.relative_path))

    def _walk_directory(self, root_path: Path) -> Iterator[Path]:
        """
        디렉터리를 재귀적으로 탐색하는 제너레이터

        Note:
            숨김 파일, 빌드 디렉터리, 출력/작업 디렉터리는 제외합니다.
        """
        try:
            for file_path in root_path.rglob("*"):
                if file_path.is_dir():
                    continue

                # 숨김 파일 제외 (파일명이 .으로 시작)
                if file_path.name.startswith("."):
                    continue

                if self._is_excluded_directory(file_path.parent.relative_to(root_path)):
                    continue

                if any(excluded in self._normalize_path(file_path).parents for excluded in self._excluded_paths):
                    continue

                yield file_path
        except PermissionError:
            # 권한이 없는 디렉터리는 건너뜀
            logger.warning(f"디렉터리 접근 권한이 없습니다: {root_path}")

    def _is_excluded_directory(self, relative_dir: Path) -> bool:
        """
        입력 디렉터리 기준 상대 경로의 디렉터리가 제외 대상인지 확인

        Args:
            relative_dir: 확인할 디렉터리의 상대 경로

        Returns:
            bool: 제외 대상이면 True
        """
        for part in relative_dir.parts:
            if part in self._excluded_dirs:
                return True
            # 숨김 디렉터리 제외
            if part.startswith(".") and part != ".":
                return True
        return False

    def _should_collect(self, file_path: Path, input_dir: Path) -> Optional[str]:
        """
        파일이 수집 대상인지 확인하고 언어 이름을 반환합니다.

        Args:
            file_path: 확인할 파일 경로
            input_dir: 파일이 속한 입력 디렉터리

        Returns:
            Optional[str]: 수집 대상이면 언어 이름, 아니면 None
        """
        if self._exclude_file_patterns:
            file_name = file_path.name
            relative_path_str = file_path.relative_to(input_dir).as_posix()

            for pattern in self._exclude_file_patterns:
                # 파일명 패턴 매칭
                if fnmatch.fnmatch(file_name, pattern):
                    return None
                # 상대 경로 패턴 매칭 (예: "test/**/*.c")
                if fnmatch.fnmatch(relative_path_str, pattern):
                    return None

        file_extension = file_path.suffix.lower()
        if file_extension and file_extension not in self._source_file_types:
            return None

        language = self._language_manager.from_file_path(file_path)
        if language is None:
            return None
        return language.name

    def _normalize_path(self, file_path: Path) -> Path:
        """
        경로를 정규화하여 크로스 플랫폼 호환성 보장

        Returns:
            Path: 정규화된 절대 경로
        """
        try:
            return file_path.resolve()
        except (OSError, RuntimeError):
            return file_path.absolute()

    def _extract_metadata(self, file_path: Path, input_dir: Path, language_name: str) -> SourceFile:
        """
        파일의 메타데이터를 추출하여 SourceFile 객체 생성

        입력 디렉터리가 여러 개이면 상대 경로 앞에 입력 디렉터리 이름을 붙입니다.
        """
        try:
            stat_info = file_path.stat()
        except OSError as e:
            raise ValueError(f"파일 정보를 가져올 수 없습니다: {file_path} - {e}")

        absolute_path = self._normalize_path(file_path)
        relative_path = absolute_path.relative_to(self._normalize_path(input_dir))
        if len(self._input_dirs) > 1:
            relative_path = Path(self._normalize_path(input_dir).name) / relative_path

        return SourceFile(
            path=absolute_path,
            relative_path=relative_path,
            filename=file_path.name,
            extension=file_path.suffix,
            size=stat_info.st_size,
            modified_time=datetime.fromtimestamp(stat_info.st_mtime),
            language=language_name,
        )

    def get_collected_count(self) -> int:
        """
        현재까지 수집된 파일 개수 반환

        Returns:
            int: 수집된 파일 개수
        """
        return len(self._seen_files)

    def reset(self) -> None:
        """
        수집 상태 초기화 (중복 제거 Set 초기화)
        """
        self._seen_files.clear()
