"""
Configuration Manager 모듈

JSON 프로젝트 설정 파일(commentdoc.json)을 로드하고 검증하는 Configuration Manager를 구현합니다.
입력/출력 디렉터리, 수집할 파일 타입, 언어 재정의, 파싱 옵션을 파싱하고 스키마 검증을 수행합니다.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """설정 관련 에러를 나타내는 사용자 정의 예외 클래스"""

    pass


class Configuration(BaseModel):
    project_title: str = Field("", description="문서 제목으로 사용할 프로젝트 이름")
    input_dirs: List[str] = Field(
        ..., min_length=1, description="문서화할 소스 디렉터리 목록"
    )
    output_dir: str = Field(..., description="HTML 문서 출력 디렉터리")
    working_dir: str = Field(
        ".commentdoc", description="파싱 결과와 캐시를 저장할 작업 디렉터리"
    )
    source_file_types: Optional[List[str]] = Field(
        None, description="수집할 소스 파일 확장자 목록 (없으면 언어 정의의 모든 확장자)"
    )
    exclude_dirs: List[str] = Field(
        default_factory=list, description="제외할 디렉터리 이름 목록"
    )
    exclude_files: List[str] = Field(
        default_factory=list, description="제외할 파일 패턴 목록"
    )
    tab_width: int = Field(4, ge=1, le=16, description="탭 확장 폭")
    extension_overrides: Dict[str, str] = Field(
        default_factory=dict, description="확장자 -> 언어 이름 재정의"
    )
    shebang_overrides: Dict[str, str] = Field(
        default_factory=dict, description="셔뱅 문자열 -> 언어 이름 재정의"
    )
    enum_values: Dict[str, Literal["global", "under_type", "under_parent"]] = Field(
        default_factory=dict, description="언어 이름 -> 열거형 값 심볼 위치 재정의"
    )
    highlight_code: bool = Field(True, description="코드 블록 구문 강조 여부")
    documented_only: bool = Field(
        False, description="설명 없는 열거형 본문 값을 토픽으로 만들지 않음"
    )
    encodings: List[str] = Field(
        default_factory=lambda: ["utf-8-sig", "cp949", "latin-1"],
        min_length=1,
        description="소스 파일을 읽을 때 시도할 인코딩 순서",
    )
    languages_file: Optional[str] = Field(
        None, description="기본 언어 정의 대신 사용할 YAML 파일"
    )
    comment_types_file: Optional[str] = Field(
        None, description="기본 주석 타입 정의 대신 사용할 YAML 파일"
    )

    def get_source_file_types(self, all_extensions: List[str]) -> List[str]:
        """
        수집할 확장자 목록을 "."으로 시작하는 소문자로 반환합니다.

        Args:
            all_extensions: 언어 정의의 모든 확장자 (source_file_types 가 없을 때 사용)

        Returns:
            List[str]: 확장자 목록 (예: [".c", ".h"])
        """
        extensions = self.source_file_types if self.source_file_types else all_extensions
        return sorted({"." + ext.lstrip(".").lower() for ext in extensions if ext.strip(".")})


# 전역 설정 인스턴스
_config: Optional[Configuration] = None


def load_config(config_file_path: str) -> Configuration:
    """
    설정 파일을 로드하고 전역 설정 인스턴스를 설정합니다.

    구식 필드가 있으면 메모리에서 변환하고 경고를 남깁니다.
    파일 자체는 migrate_config_file() 로만 변경됩니다.

    Args:
        config_file_path: 설정 파일 경로

    Returns:
        Configuration: 로드된 설정 객체

    Raises:
        ConfigurationError: 설정 로드 실패 시
    """
    global _config

    path = Path(config_file_path)
    if not path.exists():
        raise ConfigurationError(f"설정 파일을 찾을 수 없습니다: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            config_data = json.load(f)

        # 하위 호환성: 마이그레이션 유틸리티를 사용하여 자동 변환
        from .config_migration import ConfigMigration

        migration_result = ConfigMigration.migrate_data(config_data)
        if migration_result["migrated"]:
            logger.warning(
                f"{path.name}에서 마이그레이션이 필요한 필드가 발견되었습니다. "
                "메모리에서 변환하여 계속 진행합니다."
            )
            for change in migration_result["changes"]:
                logger.warning(f"  - {change}")
            config_data = migration_result["config_data"]

        _config = Configuration(**config_data)
        return _config
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"설정 파일의 JSON 형식이 올바르지 않습니다: {e}")
    except ValidationError as e:
        error_messages = []
        for error in e.errors():
            loc = " -> ".join(map(str, error["loc"]))
            msg = error["msg"]
            # 주요 에러 메시지 한글화
            if error["type"] == "missing":
                msg = "필수 항목이 누락되었습니다"
            elif error["type"] == "too_short":
                msg = "최소 한 개 이상의 값이 필요합니다"
            elif "valid value" in msg or error["type"] == "literal_error":
                msg = f"유효한 값이 아닙니다 ({msg})"

            error_messages.append(f"  - 필드: {loc}, 원인: {msg}")

        formatted_error = "\n".join(error_messages)
        raise ConfigurationError(f"설정 파일 검증 실패:\n{formatted_error}")
    except IOError as e:
        raise ConfigurationError(f"설정 파일을 읽는 중 오류가 발생했습니다: {e}")


def get_config() -> Configuration:
    """
    로드된 전역 설정 객체를 반환합니다.

    Returns:
        Configuration: 설정 객체

    Raises:
        ConfigurationError: 설정이 로드되지 않은 경우
    """
    if _config is None:
        raise ConfigurationError(
            "설정이 아직 로드되지 않았습니다. load_config()를 먼저 호출하세요."
        )
    return _config
