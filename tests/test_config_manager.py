"""
Configuration Manager 단위 테스트

다음 시나리오를 검증합니다:
1. 유효한 설정 파일 로드 성공
2. 필수 필드 누락 시 예외 발생
3. 잘못된 JSON 형식 처리
4. 기본값 적용
5. 파일 없음 예외 처리
6. 구식 필드의 메모리 내 변환
"""

import json
import tempfile
from pathlib import Path

import pytest

from commentdoc.config import ConfigurationError, get_config, load_config


@pytest.fixture
def valid_config_data():
    """유효한 설정 데이터를 반환하는 픽스처"""
    return {
        "project_title": "Demo",
        "input_dirs": ["/path/to/src"],
        "output_dir": "/path/to/docs",
        "source_file_types": ["c", ".H"],
        "extension_overrides": {"inc": "Pascal"},
        "enum_values": {"C/C++": "under_type"},
    }


@pytest.fixture
def temp_config_file(valid_config_data):
    """임시 설정 파일을 생성하는 픽스처"""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
        json.dump(valid_config_data, f, ensure_ascii=False, indent=2)
        temp_path = f.name

    yield temp_path

    # 테스트 후 파일 삭제
    Path(temp_path).unlink(missing_ok=True)


def write_config(config_data) -> str:
    with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
        if isinstance(config_data, str):
            f.write(config_data)
        else:
            json.dump(config_data, f)
        return f.name


def test_load_valid_config(temp_config_file, valid_config_data):
    """유효한 설정 파일 로드 성공 테스트"""
    config = load_config(temp_config_file)

    assert config.project_title == "Demo"
    assert config.input_dirs == valid_config_data["input_dirs"]
    assert config.output_dir == valid_config_data["output_dir"]
    assert config.extension_overrides == {"inc": "Pascal"}
    assert config.enum_values == {"C/C++": "under_type"}
    assert get_config() is config


def test_default_values(temp_config_file):
    """기본값 적용 테스트"""
    config = load_config(temp_config_file)

    assert config.working_dir == ".commentdoc"
    assert config.tab_width == 4
    assert config.highlight_code is True
    assert config.documented_only is False
    assert config.encodings == ["utf-8-sig", "cp949", "latin-1"]
    assert config.exclude_dirs == []
    assert config.languages_file is None


def test_get_source_file_types(temp_config_file):
    """수집 확장자 정규화 테스트"""
    config = load_config(temp_config_file)

    assert config.get_source_file_types([".pas"]) == [".c", ".h"]

    config.source_file_types = None
    assert config.get_source_file_types([".pas", "PY"]) == [".pas", ".py"]


def test_missing_required_field():
    """필수 필드 누락 시 예외 발생 테스트"""
    # output_dir 누락
    temp_path = write_config({"input_dirs": ["/src"]})

    try:
        with pytest.raises(ConfigurationError, match="설정 파일 검증 실패") as exc_info:
            load_config(temp_path)
        assert "필수 항목이 누락되었습니다" in str(exc_info.value)
        assert "output_dir" in str(exc_info.value)
    finally:
        Path(temp_path).unlink(missing_ok=True)


def test_empty_input_dirs():
    """빈 입력 디렉터리 목록 검증 실패 테스트"""
    temp_path = write_config({"input_dirs": [], "output_dir": "/docs"})

    try:
        with pytest.raises(ConfigurationError, match="최소 한 개 이상의 값이 필요합니다"):
            load_config(temp_path)
    finally:
        Path(temp_path).unlink(missing_ok=True)


def test_invalid_enum_values_setting():
    """잘못된 열거형 값 위치 검증 실패 테스트"""
    temp_path = write_config(
        {"input_dirs": ["/src"], "output_dir": "/docs", "enum_values": {"C#": "nowhere"}}
    )

    try:
        with pytest.raises(ConfigurationError, match="유효한 값이 아닙니다"):
            load_config(temp_path)
    finally:
        Path(temp_path).unlink(missing_ok=True)


def test_invalid_json_format():
    """잘못된 JSON 형식 처리 테스트"""
    temp_path = write_config("{ invalid json }")

    try:
        with pytest.raises(ConfigurationError, match="JSON 형식이 올바르지 않습니다"):
            load_config(temp_path)
    finally:
        Path(temp_path).unlink(missing_ok=True)


def test_file_not_found():
    """파일 없음 예외 처리 테스트"""
    with pytest.raises(ConfigurationError, match="설정 파일을 찾을 수 없습니다"):
        load_config("/nonexistent/path/config.json")


def test_legacy_fields_migrated_in_memory():
    """구식 필드 메모리 내 변환 테스트 (파일은 변경하지 않음)"""
    legacy = {"project_path": "/path/to/src", "output_path": "/docs", "tab_expansion": 8}
    temp_path = write_config(legacy)

    try:
        config = load_config(temp_path)

        assert config.input_dirs == ["/path/to/src"]
        assert config.output_dir == "/docs"
        assert config.tab_width == 8

        with open(temp_path, "r", encoding="utf-8") as f:
            assert json.load(f) == legacy
    finally:
        Path(temp_path).unlink(missing_ok=True)
