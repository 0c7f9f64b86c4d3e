"""
Data Persistence Manager 모듈

수집된 소스 파일 목록과 파싱 결과를 작업 디렉터리(working_dir)에 JSON 으로 저장하고 읽습니다.

작업 디렉터리 구조:
    <working_dir>/source_files.json   수집된 SourceFile 목록
    <working_dir>/topics.json         파일별 ParseResult 목록
    <working_dir>/cache/              파일별 파싱 결과 캐시 (CacheManager)
    <working_dir>/backup/             clear --backup 시 생성되는 백업
"""

import json
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .cache_manager import CacheManager
from .json_decoder import CustomJSONDecoder
from .json_encoder import CustomJSONEncoder

SOURCE_FILES_FILE = "source_files.json"
TOPICS_FILE = "topics.json"


class PersistenceError(Exception):
    """데이터 저장/로드 관련 에러"""

    pass


class DataPersistenceManager:
    """
    데이터 영속화 관리자

    주요 기능:
    1. 모델 객체 JSON 직렬화/역직렬화 (CustomJSONEncoder / CustomJSONDecoder)
    2. 작업 디렉터리 파일 저장/로드 (하위 디렉터리 지원)
    3. 손상된 파일 백업 및 복원
    4. 파싱 결과 캐시 접근 (CacheManager)
    5. 전체 삭제 (선택적 백업)
    """

    def __init__(
        self,
        working_dir: Union[Path, str],
        enable_cache: bool = True,
        cache_fingerprint: str = "",
    ):
        """
        DataPersistenceManager 초기화

        Args:
            working_dir: 작업 디렉터리
            enable_cache: 파싱 결과 캐시 사용 여부
            cache_fingerprint: 캐시 키에 포함할 설정 지문
        """
        self.output_dir = Path(working_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.logger = logging.getLogger(__name__)

        self.cache_manager: Optional[CacheManager] = None
        if enable_cache:
            self.cache_manager = CacheManager(
                self.output_dir / "cache", fingerprint=cache_fingerprint
            )

    # ------------------------------------------------------------------
    # 직렬화
    # ------------------------------------------------------------------

    def serialize_to_json(self, data: Any) -> str:
        """
        데이터를 JSON 문자열로 직렬화

        Raises:
            PersistenceError: 직렬화할 수 없는 객체가 포함된 경우
        """
        try:
            return json.dumps(data, cls=CustomJSONEncoder, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"JSON 직렬화 실패: {e}")

    def deserialize_from_json(self, json_str: str, model_class: Optional[type] = None) -> Any:
        """
        JSON 문자열을 역직렬화

        Args:
            json_str: JSON 문자열
            model_class: from_dict()를 가진 모델 클래스 (리스트이면 각 항목에 적용)

        Returns:
            모델 객체, 모델 객체 리스트 또는 디코딩된 값

        Raises:
            PersistenceError: JSON 형식이 잘못된 경우
        """
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise PersistenceError(f"JSON 역직렬화 실패: {e}")

        try:
            if model_class is None:
                return CustomJSONDecoder.decode_value(data)
            if isinstance(data, list):
                return [CustomJSONDecoder.decode_dict(item, model_class) for item in data]
            return CustomJSONDecoder.decode_dict(data, model_class)
        except (KeyError, TypeError, ValueError) as e:
            raise PersistenceError(f"JSON 역직렬화 실패: {model_class} - {e}")

    # ------------------------------------------------------------------
    # 파일
    # ------------------------------------------------------------------

    def _resolve(self, filename: str, subdirectory: Optional[str] = None) -> Path:
        directory = self.output_dir / subdirectory if subdirectory else self.output_dir
        return directory / filename

    def save_to_file(self, data: Any, filename: str, subdirectory: Optional[str] = None) -> Path:
        """
        데이터를 JSON 파일로 저장

        임시 파일에 먼저 쓴 뒤 교체하므로 쓰기 도중 실패해도 기존 파일이 남습니다.

        Args:
            data: 저장할 데이터
            filename: 파일명
            subdirectory: 작업 디렉터리 아래 하위 디렉터리 (선택)

        Returns:
            Path: 저장된 파일 경로

        Raises:
            PersistenceError: 직렬화 또는 파일 쓰기에 실패한 경우
        """
        target = self._resolve(filename, subdirectory)
        json_str = self.serialize_to_json(data)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            temp_file = target.with_suffix(target.suffix + ".tmp")
            temp_file.write_text(json_str, encoding="utf-8")
            temp_file.replace(target)
        except OSError as e:
            raise PersistenceError(f"파일 저장 실패: {target} - {e}")

        self.logger.debug(f"파일 저장 완료: {target}")
        return target

    def load_from_file(
        self,
        filename: str,
        model_class: Optional[type] = None,
        subdirectory: Optional[str] = None,
    ) -> Any:
        """
        JSON 파일 로드

        Args:
            filename: 파일명
            model_class: 복원할 모델 클래스 (선택)
            subdirectory: 하위 디렉터리 (선택)

        Returns:
            로드된 데이터

        Raises:
            PersistenceError: 파일이 없거나 형식이 잘못된 경우
        """
        target = self._resolve(filename, subdirectory)
        if not target.exists():
            raise PersistenceError(f"파일을 찾을 수 없습니다: {target}")

        try:
            json_str = target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"파일 읽기 실패: {target} - {e}")

        return self.deserialize_from_json(json_str, model_class)

    def add_timestamp(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """생성/수정 시간을 추가한 딕셔너리 사본을 반환합니다."""
        now = datetime.now().isoformat()
        stamped = dict(data)
        stamped.setdefault("created_time", now)
        stamped["modified_time"] = now
        return stamped

    def get_version_info(self, filename: str, subdirectory: Optional[str] = None) -> Dict[str, Any]:
        """
        저장된 파일의 버전 정보

        Returns:
            Dict[str, Any]: created_time, modified_time, file_size
        """
        target = self._resolve(filename, subdirectory)
        if not target.exists():
            raise PersistenceError(f"파일을 찾을 수 없습니다: {target}")

        info: Dict[str, Any] = {"created_time": None, "modified_time": None, "file_size": target.stat().st_size}
        try:
            data = json.loads(target.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return info
        if isinstance(data, dict):
            info["created_time"] = data.get("created_time")
            info["modified_time"] = data.get("modified_time")
        return info

    def create_backup(self, file_path: Path) -> Path:
        """
        파일 백업 생성 (<파일명>.bak)

        Raises:
            PersistenceError: 백업 실패 시
        """
        file_path = Path(file_path)
        backup_path = file_path.with_name(file_path.name + ".bak")
        try:
            shutil.copy2(file_path, backup_path)
        except OSError as e:
            raise PersistenceError(f"백업 생성 실패: {file_path} - {e}")
        return backup_path

    def handle_corrupted_file(self, file_path: Path) -> bool:
        """
        손상된 파일을 백업(.bak)에서 복원합니다.

        Returns:
            bool: 복원에 성공하면 True
        """
        file_path = Path(file_path)
        backup_path = file_path.with_name(file_path.name + ".bak")
        if not backup_path.exists():
            self.logger.warning(f"복원할 백업이 없습니다: {file_path}")
            return False

        try:
            json.loads(backup_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            self.logger.warning(f"백업 파일도 손상되었습니다: {backup_path}")
            return False

        shutil.copy2(backup_path, file_path)
        self.logger.info(f"백업에서 복원했습니다: {file_path}")
        return True

    # ------------------------------------------------------------------
    # 캐시
    # ------------------------------------------------------------------

    def get_cached_result(self, file_path: Path) -> Optional[Any]:
        """캐시된 파싱 결과 (캐시 비활성화 시 None)"""
        if self.cache_manager is None:
            return None
        return self.cache_manager.get_cached_result(file_path)

    def set_cached_result(self, file_path: Path, data: Any) -> None:
        """파싱 결과 캐시 저장"""
        if self.cache_manager is not None:
            self.cache_manager.set_cached_result(file_path, data)

    # ------------------------------------------------------------------
    # 삭제
    # ------------------------------------------------------------------

    def list_files(self) -> List[Path]:
        """작업 디렉터리의 백업 디렉터리를 제외한 항목 목록"""
        return sorted(p for p in self.output_dir.iterdir() if p.name != "backup")

    def clear_all(self, use_backup: bool = False) -> Optional[Path]:
        """
        작업 디렉터리의 저장 데이터와 캐시를 모두 삭제합니다.

        Args:
            use_backup: True이면 삭제 전 backup/<타임스탬프>/ 로 복사

        Returns:
            Optional[Path]: 생성된 백업 디렉터리

        Raises:
            PersistenceError: 백업 또는 삭제 실패 시
        """
        backup_dir = None
        entries = self.list_files()
        try:
            if use_backup and entries:
                backup_dir = self.output_dir / "backup" / datetime.now().strftime("%Y%m%d_%H%M%S")
                backup_dir.mkdir(parents=True, exist_ok=True)
                for entry in entries:
                    if entry.is_dir():
                        shutil.copytree(entry, backup_dir / entry.name)
                    else:
                        shutil.copy2(entry, backup_dir / entry.name)
                self.logger.info(f"백업 생성: {backup_dir}")

            for entry in entries:
                if entry.is_dir():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
        except OSError as e:
            raise PersistenceError(f"데이터 삭제 실패: {e}")

        if self.cache_manager is not None:
            self.cache_manager.memory_cache.clear()
            self.cache_manager.cache_dir.mkdir(parents=True, exist_ok=True)

        self.logger.info(f"작업 디렉터리 정리 완료: {self.output_dir} ({len(entries)}개 항목)")
        return backup_dir
