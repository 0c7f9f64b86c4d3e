"""
Cache Manager 모듈

파일별 파싱 결과를 캐싱하여 변경되지 않은 파일을 다시 파싱하지 않도록 합니다.
캐시 키는 파일 경로, 수정 시간, 설정 지문(fingerprint)의 조합입니다.
"""

import hashlib
import logging
import pickle
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, Optional, Union

PathLike = Union[Path, str, Any]


class CacheManager:
    """
    캐시 관리자 클래스

    주요 기능:
    1. 메모리 캐시 (FIFO, 최대 항목 수 제한)
    2. pickle 디스크 캐시 (<cache_dir>/<key>.cache)
    3. 파일 수정 시간과 만료 시간 기반 유효성 검사
    4. 설정이 바뀌면 다른 키를 쓰도록 fingerprint 지원
    """

    def __init__(
        self,
        cache_dir: Path,
        memory_cache_size: int = 500,
        cache_expiry_hours: int = 24 * 7,
        fingerprint: str = "",
    ):
        """
        CacheManager 초기화

        Args:
            cache_dir: 캐시 디렉터리 경로
            memory_cache_size: 메모리 캐시 최대 크기 (항목 수)
            cache_expiry_hours: 캐시 만료 시간 (시간)
            fingerprint: 파싱 결과에 영향을 주는 설정의 지문
        """
        self.cache_dir = Path(cache_dir)
        self.memory_cache: Dict[str, Dict[str, Any]] = {}
        self.memory_cache_size = memory_cache_size
        self.cache_expiry = timedelta(hours=cache_expiry_hours)
        self.fingerprint = fingerprint
        self.logger = logging.getLogger(__name__)

        self.cache_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _to_path(file_path: PathLike) -> Path:
        # SourceFile 객체가 전달될 수 있음
        if hasattr(file_path, "path"):
            return Path(file_path.path)
        return Path(file_path)

    def _get_cache_key(self, file_path: Path) -> str:
        """
        파일 경로와 수정 시간을 기반으로 캐시 키 생성

        Args:
            file_path: 파일 경로

        Returns:
            str: 캐시 키
        """
        try:
            key_data = f"{file_path}:{file_path.stat().st_mtime}:{self.fingerprint}"
        except OSError:
            key_data = f"{file_path}:{self.fingerprint}"
        return hashlib.md5(key_data.encode()).hexdigest()

    def _get_cache_file_path(self, cache_key: str) -> Path:
        """캐시 파일 경로 생성"""
        return self.cache_dir / f"{cache_key}.cache"

    def get_cached_result(self, file_path: PathLike) -> Optional[Any]:
        """
        캐시된 결과 조회

        Args:
            file_path: 원본 파일 경로 (Path, 문자열 또는 SourceFile)

        Returns:
            캐시된 결과 (없거나 만료되었으면 None)
        """
        file_path = self._to_path(file_path)
        cache_key = self._get_cache_key(file_path)

        if cache_key in self.memory_cache:
            cache_entry = self.memory_cache[cache_key]
            if self._is_cache_valid(cache_entry, file_path):
                self.logger.debug(f"메모리 캐시에서 조회: {file_path}")
                return cache_entry["data"]
            del self.memory_cache[cache_key]

        cache_file = self._get_cache_file_path(cache_key)
        if not cache_file.exists():
            return None

        try:
            with open(cache_file, "rb") as f:
                cache_entry = pickle.load(f)
        except (pickle.UnpicklingError, EOFError, AttributeError, ImportError) as e:
            self.logger.warning(f"손상된 캐시 파일 삭제: {cache_file} - {e}")
            cache_file.unlink(missing_ok=True)
            return None
        except OSError as e:
            self.logger.warning(f"캐시 파일 로드 실패: {e}")
            return None

        if not self._is_cache_valid(cache_entry, file_path):
            cache_file.unlink(missing_ok=True)
            return None

        self._add_to_memory_cache(cache_key, cache_entry)
        self.logger.debug(f"디스크 캐시에서 조회: {file_path}")
        return cache_entry["data"]

    def set_cached_result(self, file_path: PathLike, data: Any) -> None:
        """
        결과를 캐시에 저장

        Args:
            file_path: 원본 파일 경로 (Path, 문자열 또는 SourceFile)
            data: 캐시할 데이터 (pickle 불가능하면 메모리에만 저장)
        """
        file_path = self._to_path(file_path)
        cache_key = self._get_cache_key(file_path)
        cache_entry = {
            "data": data,
            "file_path": str(file_path),
            "cached_time": datetime.now(),
            "file_mtime": file_path.stat().st_mtime if file_path.exists() else 0,
        }

        self._add_to_memory_cache(cache_key, cache_entry)

        cache_file = self._get_cache_file_path(cache_key)
        try:
            with open(cache_file, "wb") as f:
                pickle.dump(cache_entry, f)
            self.logger.debug(f"캐시 저장 완료: {file_path}")
        except (pickle.PickleError, TypeError, AttributeError) as e:
            cache_file.unlink(missing_ok=True)
            self.logger.debug(f"pickle 불가능한 객체는 메모리 캐시에만 저장: {file_path} - {e}")
        except OSError as e:
            self.logger.warning(f"캐시 파일 저장 실패: {e}")

    def _add_to_memory_cache(self, cache_key: str, cache_entry: Dict[str, Any]) -> None:
        """메모리 캐시에 추가 (크기 제한 고려)"""
        if cache_key not in self.memory_cache and len(self.memory_cache) >= self.memory_cache_size:
            oldest_key = next(iter(self.memory_cache))
            del self.memory_cache[oldest_key]

        self.memory_cache[cache_key] = cache_entry

    def _is_cache_valid(self, cache_entry: Dict[str, Any], file_path: Path) -> bool:
        """
        캐시가 유효한지 확인

        파일이 없거나, 수정 시간이 다르거나, 만료된 경우 무효입니다.
        """
        if not file_path.exists():
            return False

        if file_path.stat().st_mtime != cache_entry.get("file_mtime", 0):
            return False

        cached_time = cache_entry.get("cached_time")
        if cached_time:
            if isinstance(cached_time, str):
                cached_time = datetime.fromisoformat(cached_time)
            if datetime.now() - cached_time > self.cache_expiry:
                return False

        return True

    def invalidate_cache(self, file_path: PathLike) -> None:
        """
        특정 파일의 캐시 무효화

        Args:
            file_path: 캐시를 무효화할 파일 경로
        """
        file_path = self._to_path(file_path)
        cache_key = self._get_cache_key(file_path)

        self.memory_cache.pop(cache_key, None)

        cache_file = self._get_cache_file_path(cache_key)
        if cache_file.exists():
            try:
                cache_file.unlink()
                self.logger.debug(f"캐시 무효화: {file_path}")
            except OSError as e:
                self.logger.warning(f"캐시 파일 삭제 실패: {e}")

    def clear_cache(self) -> int:
        """
        모든 캐시 삭제

        Returns:
            int: 삭제한 디스크 캐시 파일 수
        """
        self.memory_cache.clear()

        removed = 0
        try:
            for cache_file in self.cache_dir.glob("*.cache"):
                cache_file.unlink()
                removed += 1
            self.logger.info(f"모든 캐시 삭제 완료 ({removed}개)")
        except OSError as e:
            self.logger.warning(f"캐시 파일 삭제 중 오류: {e}")
        return removed
