"""
Config Migration 유틸리티

이전 버전 설정 파일의 필드명 변경 및 마이그레이션을 처리하는 유틸리티 모듈입니다.
"""

import copy
import json
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Dict, Tuple

from .config_manager import ConfigurationError

logger = logging.getLogger(__name__)


class ConfigMigration:
    """
    Config 파일 마이그레이션 클래스

    이전 설정 파일의 필드명 변경 및 값 변환을 처리합니다.
    """

    # 이전 필드 -> 새 필드 (값 변환 없이 이름만 변경)
    RENAMED_FIELDS = {
        "source_dirs": "input_dirs",
        "output_path": "output_dir",
        "tab_expansion": "tab_width",
    }

    def __init__(self, config_file_path: str):
        """
        ConfigMigration 초기화

        Args:
            config_file_path: 마이그레이션할 설정 파일 경로
        """
        self.config_file_path = Path(config_file_path)
        if not self.config_file_path.exists():
            raise ConfigurationError(f"설정 파일을 찾을 수 없습니다: {self.config_file_path}")

    @classmethod
    def migrate_data(cls, config_data: Dict) -> Dict:
        """
        설정 딕셔너리를 변환합니다. 원본은 변경하지 않습니다.

        Args:
            config_data: 설정 파일에서 읽은 딕셔너리

        Returns:
            Dict: 마이그레이션 결과 정보
                - migrated: 마이그레이션이 필요한지 여부
                - changes: 변경된 필드 목록
                - old_values: 변경 전 값들
                - new_values: 변경 후 값들
                - config_data: 변환된 설정 딕셔너리
        """
        data = copy.deepcopy(config_data)
        changes = []
        old_values = {}
        new_values = {}

        # 1. 단순 이름 변경
        for old_key, new_key in cls.RENAMED_FIELDS.items():
            if old_key not in data:
                continue
            value = data.pop(old_key)
            old_values[old_key] = value
            if new_key in data:
                changes.append(f"{old_key} 제거 ({new_key} 가 이미 있음)")
                continue
            if new_key == "input_dirs" and isinstance(value, str):
                value = [value]
            data[new_key] = value
            new_values[new_key] = value
            changes.append(f"{old_key} ({value}) -> {new_key}")

        # 2. project_path -> input_dirs (단일 경로를 목록으로)
        if "project_path" in data:
            project_path = data.pop("project_path")
            old_values["project_path"] = project_path
            if "input_dirs" not in data:
                data["input_dirs"] = [project_path]
                new_values["input_dirs"] = [project_path]
                changes.append(f"project_path ({project_path}) -> input_dirs ([{project_path}])")
            else:
                changes.append("project_path 제거 (input_dirs 가 이미 있음)")

        return {
            "migrated": bool(changes),
            "changes": changes,
            "old_values": old_values,
            "new_values": new_values,
            "config_data": data,
        }

    def migrate(self, update_file: bool = False, backup: bool = True) -> Dict:
        """
        설정 파일을 마이그레이션합니다.

        Args:
            update_file: True인 경우 파일을 실제로 업데이트 (기본값: False)
            backup: True인 경우 백업 파일 생성 (기본값: True)

        Returns:
            Dict: migrate_data() 결과에 backup_path (생성된 경우) 추가
        """
        with open(self.config_file_path, "r", encoding="utf-8") as f:
            config_data = json.load(f)

        result = self.migrate_data(config_data)

        backup_path = None
        if update_file and result["migrated"]:
            if backup:
                backup_path = self._create_backup()

            with open(self.config_file_path, "w", encoding="utf-8") as f:
                json.dump(result["config_data"], f, indent=2, ensure_ascii=False)

            logger.info(f"Config 파일이 업데이트되었습니다: {self.config_file_path}")

        result["backup_path"] = backup_path
        return result

    def _create_backup(self) -> Path:
        """
        현재 설정 파일의 백업을 생성합니다.

        Returns:
            Path: 백업 파일 경로
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_path = self.config_file_path.parent / f"{self.config_file_path.stem}_backup_{timestamp}.json"

        shutil.copy2(self.config_file_path, backup_path)

        logger.info(f"백업 파일이 생성되었습니다: {backup_path}")
        return backup_path

    def check_migration_needed(self) -> Tuple[bool, Dict]:
        """
        마이그레이션이 필요한지 확인합니다.

        Returns:
            Tuple[bool, Dict]: (마이그레이션 필요 여부, 변경 사항 정보)
        """
        result = self.migrate(update_file=False, backup=False)
        return result["migrated"], result

    def generate_migration_log(self, migration_result: Dict) -> str:
        """
        마이그레이션 로그를 생성합니다.

        Args:
            migration_result: migrate() 메서드의 반환값

        Returns:
            str: 마이그레이션 로그 문자열
        """
        log_lines = [
            "=" * 60,
            "Config Migration Log",
            "=" * 60,
            f"파일: {self.config_file_path}",
            f"마이그레이션 필요: {migration_result['migrated']}",
            "",
        ]

        if migration_result["migrated"]:
            log_lines.append("변경 사항:")
            log_lines.extend(f"  - {change}" for change in migration_result["changes"])

            log_lines.append("")
            log_lines.append("변경 전 값:")
            log_lines.extend(f"  - {key}: {value}" for key, value in migration_result["old_values"].items())

            log_lines.append("")
            log_lines.append("변경 후 값:")
            log_lines.extend(f"  - {key}: {value}" for key, value in migration_result["new_values"].items())

            if migration_result.get("backup_path"):
                log_lines.append("")
                log_lines.append(f"백업 파일: {migration_result['backup_path']}")
        else:
            log_lines.append("마이그레이션이 필요하지 않습니다.")

        log_lines.append("")
        log_lines.append("=" * 60)
        log_lines.append(f"생성 시간: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        log_lines.append("=" * 60)

        return "\n".join(log_lines)


def migrate_config_file(
    config_file_path: str,
    update_file: bool = False,
    backup: bool = True,
    save_log: bool = True,
) -> Dict:
    """
    설정 파일을 마이그레이션하는 편의 함수

    Args:
        config_file_path: 마이그레이션할 설정 파일 경로
        update_file: True인 경우 파일을 실제로 업데이트 (기본값: False)
        backup: True인 경우 백업 파일 생성 (기본값: True)
        save_log: True인 경우 마이그레이션 로그를 파일로 저장 (기본값: True)

    Returns:
        Dict: 마이그레이션 결과 정보
    """
    migrator = ConfigMigration(config_file_path)
    result = migrator.migrate(update_file=update_file, backup=backup)

    if save_log and result["migrated"]:
        log_content = migrator.generate_migration_log(result)
        log_path = Path(config_file_path).parent / "migration_log.txt"
        with open(log_path, "w", encoding="utf-8") as f:
            f.write(log_content)
        logger.info(f"마이그레이션 로그가 저장되었습니다: {log_path}")

    return result
