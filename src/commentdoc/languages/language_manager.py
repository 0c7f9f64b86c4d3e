"""
Language Manager 모듈

languages.yaml 에 정의된 기본 언어 목록을 로드하고, 설정 파일의 확장자/셔뱅
재정의를 적용하여 파일 경로나 이름으로 언어를 조회합니다.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from .language import Language, LanguageError

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGES_FILE = Path(__file__).parent / "languages.yaml"


class LanguageManager:
    """
    언어 정의를 관리하는 클래스

    주요 기능:
    1. YAML 언어 정의 로드 및 검증
    2. 이름/별칭으로 언어 조회 (대소문자 구분 없음)
    3. 확장자 및 셔뱅 라인으로 언어 판별
    4. 설정 기반 확장자/셔뱅/열거형 위치 재정의
    """

    def __init__(
        self,
        languages_file: Optional[Union[str, Path]] = None,
        extension_overrides: Optional[Dict[str, str]] = None,
        shebang_overrides: Optional[Dict[str, str]] = None,
        enum_values: Optional[Dict[str, str]] = None,
    ):
        """
        LanguageManager 초기화

        Args:
            languages_file: 언어 정의 YAML 파일 경로 (None이면 기본 파일)
            extension_overrides: 확장자 -> 언어 이름 재정의
            shebang_overrides: 셔뱅 문자열 -> 언어 이름 재정의
            enum_values: 언어 이름 -> 열거형 값 위치 재정의

        Raises:
            LanguageError: 언어 정의 파일 로드 실패 시
        """
        self._languages: List[Language] = self._load(
            Path(languages_file) if languages_file else DEFAULT_LANGUAGES_FILE
        )
        self._by_extension: Dict[str, Language] = {}
        self._by_shebang: Dict[str, Language] = {}

        for language in self._languages:
            for extension in language.extensions:
                self._by_extension.setdefault(extension.lower(), language)
            for shebang in language.shebang_strings:
                self._by_shebang.setdefault(shebang, language)

        for language_name, placement in (enum_values or {}).items():
            language = self.from_name(language_name)
            if language is None:
                raise LanguageError(f"알 수 없는 언어입니다: {language_name}")
            if placement not in ("global", "under_type", "under_parent"):
                raise LanguageError(
                    f"열거형 값 위치가 올바르지 않습니다: {language_name} = {placement}"
                )
            language.enum_values = placement

        for extension, language_name in (extension_overrides or {}).items():
            self._by_extension[extension.lstrip(".").lower()] = self._require(
                language_name
            )

        for shebang, language_name in (shebang_overrides or {}).items():
            self._by_shebang[shebang] = self._require(language_name)

    @staticmethod
    def _load(languages_file: Path) -> List[Language]:
        if not languages_file.exists():
            raise LanguageError(f"언어 정의 파일을 찾을 수 없습니다: {languages_file}")

        try:
            with open(languages_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise LanguageError(f"언어 정의 파일의 YAML 형식이 올바르지 않습니다: {e}")

        languages = []
        for entry in data.get("languages", []):
            try:
                languages.append(Language(**entry))
            except ValidationError as e:
                raise LanguageError(
                    f"언어 정의 검증 실패 ({entry.get('name', '?')}): {e}"
                )

        logger.debug(f"언어 정의 {len(languages)}개 로드: {languages_file}")
        return languages

    def _require(self, language_name: str) -> Language:
        language = self.from_name(language_name)
        if language is None:
            raise LanguageError(f"알 수 없는 언어입니다: {language_name}")
        return language

    def from_name(self, name: str) -> Optional[Language]:
        """
        이름 또는 별칭으로 언어를 조회합니다.

        Args:
            name: 언어 이름 (대소문자 구분 없음)

        Returns:
            Optional[Language]: 일치하는 언어가 없으면 None
        """
        for language in self._languages:
            if language.matches_name(name):
                return language
        return None

    def from_extension(self, extension: str) -> Optional[Language]:
        """확장자(점 포함 여부 무관)로 언어를 조회합니다."""
        return self._by_extension.get(extension.lstrip(".").lower())

    def from_shebang(self, first_line: str) -> Optional[Language]:
        """
        셔뱅 라인으로 언어를 조회합니다.

        Args:
            first_line: 파일의 첫 줄

        Returns:
            Optional[Language]: 셔뱅이 아니거나 일치하는 언어가 없으면 None
        """
        if not first_line.startswith("#!"):
            return None

        # "#!/usr/bin/env perl -w" 와 같은 형태에서 실행 파일 이름만 비교
        candidates = [word.rsplit("/", 1)[-1] for word in first_line[2:].split()]

        for candidate in candidates:
            for shebang, language in self._by_shebang.items():
                if candidate == shebang:
                    return language
                # python3, perl5.36 등 버전 접미사 허용
                version = candidate[len(shebang):].replace(".", "")
                if candidate.startswith(shebang) and version.isdigit():
                    return language
        return None

    def from_file_path(self, file_path: Union[str, Path]) -> Optional[Language]:
        """
        파일 경로로 언어를 판별합니다. 확장자를 먼저 확인하고, 확장자가 없거나
        알 수 없으면 셔뱅 라인을 확인합니다.

        Args:
            file_path: 파일 경로

        Returns:
            Optional[Language]: 판별할 수 없으면 None
        """
        path = Path(file_path)
        if path.suffix:
            language = self.from_extension(path.suffix)
            if language is not None:
                return language

        if self._by_shebang and path.is_file():
            try:
                with open(path, "r", encoding="utf-8", errors="replace") as f:
                    first_line = f.readline()
            except OSError as e:
                logger.debug(f"셔뱅 라인을 읽을 수 없습니다: {path} - {e}")
                return None
            return self.from_shebang(first_line)

        return None

    def names(self) -> List[str]:
        """정의된 모든 언어 이름을 반환합니다."""
        return [language.name for language in self._languages]

    def all_extensions(self) -> List[str]:
        """정의된 모든 확장자를 ".ext" 형태로 반환합니다."""
        return sorted(f".{ext}" for ext in self._by_extension)

    def __iter__(self):
        return iter(self._languages)

    def __len__(self) -> int:
        return len(self._languages)
