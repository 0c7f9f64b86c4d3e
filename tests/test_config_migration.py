"""
Config Migration 단위 테스트

다음 시나리오를 검증합니다:
1. source_dirs / output_path / tab_expansion 이름 변경
2. project_path 를 input_dirs 목록으로 변환
3. 마이그레이션 로그 생성
4. 백업 파일 생성
5. 파일 업데이트
"""

import json
import tempfile
from pathlib import Path

import pytest

from commentdoc.config import ConfigMigration, ConfigurationError, migrate_config_file


@pytest.fixture
def temp_config_file_with_legacy_fields():
    """구식 필드가 있는 임시 설정 파일 생성"""
    config_data = {
        "project_title": "Demo",
        "source_dirs": "/path/to/src",
        "output_path": "/path/to/docs",
        "tab_expansion": 8,
    }

    with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
        json.dump(config_data, f, ensure_ascii=False, indent=2)
        temp_path = f.name

    yield temp_path

    # 테스트 후 파일 삭제
    Path(temp_path).unlink(missing_ok=True)


@pytest.fixture
def temp_config_file_already_migrated():
    """이미 마이그레이션된 설정 파일 생성"""
    config_data = {
        "input_dirs": ["/path/to/src"],
        "output_dir": "/path/to/docs",
        "tab_width": 4,
    }

    with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
        json.dump(config_data, f, ensure_ascii=False, indent=2)
        temp_path = f.name

    yield temp_path

    Path(temp_path).unlink(missing_ok=True)


def test_migration_needed_with_legacy_fields(temp_config_file_with_legacy_fields):
    """구식 필드가 있는 경우 마이그레이션 필요 확인"""
    migrator = ConfigMigration(temp_config_file_with_legacy_fields)
    needed, result = migrator.check_migration_needed()

    assert needed is True
    assert result["old_values"]["source_dirs"] == "/path/to/src"
    assert result["new_values"]["input_dirs"] == ["/path/to/src"]
    assert result["new_values"]["output_dir"] == "/path/to/docs"
    assert result["new_values"]["tab_width"] == 8


def test_migration_not_needed(temp_config_file_already_migrated):
    """이미 마이그레이션된 파일은 마이그레이션 불필요"""
    migrator = ConfigMigration(temp_config_file_already_migrated)
    needed, result = migrator.check_migration_needed()

    assert needed is False
    assert len(result["changes"]) == 0


def test_migrate_data_project_path():
    """project_path -> input_dirs 변환 테스트"""
    original = {"project_path": "/src", "output_dir": "/docs"}

    result = ConfigMigration.migrate_data(original)

    assert result["migrated"] is True
    assert result["config_data"] == {"output_dir": "/docs", "input_dirs": ["/src"]}
    # 원본은 변경되지 않음
    assert "project_path" in original


def test_migrate_data_keeps_existing_new_field():
    """새 필드가 이미 있으면 구식 필드만 제거 테스트"""
    result = ConfigMigration.migrate_data({"input_dirs": ["/a"], "source_dirs": ["/b"], "project_path": "/c"})

    assert result["config_data"] == {"input_dirs": ["/a"]}
    assert "source_dirs 제거 (input_dirs 가 이미 있음)" in result["changes"]
    assert "project_path 제거 (input_dirs 가 이미 있음)" in result["changes"]


def test_migrate_without_file_update(temp_config_file_with_legacy_fields):
    """파일 업데이트 없이 마이그레이션 확인"""
    migrator = ConfigMigration(temp_config_file_with_legacy_fields)
    result = migrator.migrate(update_file=False, backup=False)

    assert result["migrated"] is True
    assert result["backup_path"] is None

    # 원본 파일 확인 (변경되지 않아야 함)
    with open(temp_config_file_with_legacy_fields, "r", encoding="utf-8") as f:
        original_data = json.load(f)

    assert "source_dirs" in original_data
    assert "input_dirs" not in original_data


def test_migrate_with_file_update(temp_config_file_with_legacy_fields):
    """파일 업데이트와 함께 마이그레이션"""
    migrator = ConfigMigration(temp_config_file_with_legacy_fields)
    result = migrator.migrate(update_file=True, backup=False)

    assert result["migrated"] is True

    # 업데이트된 파일 확인
    with open(temp_config_file_with_legacy_fields, "r", encoding="utf-8") as f:
        updated_data = json.load(f)

    assert updated_data == {
        "project_title": "Demo",
        "input_dirs": ["/path/to/src"],
        "output_dir": "/path/to/docs",
        "tab_width": 8,
    }


def test_migrate_with_backup(temp_config_file_with_legacy_fields):
    """백업과 함께 마이그레이션"""
    migrator = ConfigMigration(temp_config_file_with_legacy_fields)
    result = migrator.migrate(update_file=True, backup=True)

    assert result["migrated"] is True
    assert result["backup_path"] is not None
    assert Path(result["backup_path"]).exists()

    with open(result["backup_path"], "r", encoding="utf-8") as f:
        assert "source_dirs" in json.load(f)

    # 백업 파일 삭제
    Path(result["backup_path"]).unlink(missing_ok=True)


def test_generate_migration_log(temp_config_file_with_legacy_fields):
    """마이그레이션 로그 생성 테스트"""
    migrator = ConfigMigration(temp_config_file_with_legacy_fields)
    result = migrator.migrate(update_file=False, backup=False)
    log = migrator.generate_migration_log(result)

    assert "Config Migration Log" in log
    assert "source_dirs" in log
    assert "input_dirs" in log
    assert "변경 사항:" in log


def test_generate_migration_log_not_needed(temp_config_file_already_migrated):
    """마이그레이션 불필요 로그 테스트"""
    migrator = ConfigMigration(temp_config_file_already_migrated)
    log = migrator.generate_migration_log(migrator.migrate())

    assert "마이그레이션이 필요하지 않습니다." in log


def test_migrate_config_file_convenience_function(temp_config_file_with_legacy_fields):
    """편의 함수 테스트 (로그 파일 저장 포함)"""
    result = migrate_config_file(
        temp_config_file_with_legacy_fields,
        update_file=True,
        backup=False,
        save_log=True,
    )

    assert result["migrated"] is True
    log_path = Path(temp_config_file_with_legacy_fields).parent / "migration_log.txt"
    assert log_path.exists()
    log_path.unlink(missing_ok=True)


def test_migration_invalid_file():
    """존재하지 않는 파일에 대한 예외 처리"""
    with pytest.raises(ConfigurationError):
        ConfigMigration("/nonexistent/file.json")
