"""
커스텀 JSON 디코더 모듈

저장된 JSON 을 읽을 때 알려진 필드를 datetime, Path 로 복원합니다.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

DATETIME_KEYS = ("modified_time", "created_time", "generated_at")
PATH_KEYS = ("path", "relative_path", "output_dir")


class CustomJSONDecoder:
    """
    커스텀 JSON 디코더 클래스

    JSON 값을 읽을 때 특수 타입으로 복원합니다:
    - DATETIME_KEYS 필드의 ISO 8601 문자열: datetime
    - PATH_KEYS 필드의 문자열: Path

    Topic.file_path 처럼 문자열로 유지해야 하는 필드는 건드리지 않습니다.
    """

    @staticmethod
    def decode_datetime(value: str) -> datetime:
        """
        ISO 8601 형식 문자열을 datetime 객체로 변환

        Args:
            value: ISO 8601 형식 문자열

        Returns:
            datetime 객체

        Raises:
            ValueError: 날짜 형식이 아닌 경우
        """
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            try:
                return datetime.strptime(value, "%Y-%m-%d %H:%M:%S")
            except ValueError:
                raise ValueError(f"날짜 형식을 파싱할 수 없습니다: {value}")

    @staticmethod
    def decode_dict(data: Dict[str, Any], model_class: Optional[type] = None) -> Any:
        """
        딕셔너리를 디코딩합니다.

        Args:
            data: 디코딩할 딕셔너리
            model_class: from_dict()를 가진 모델 클래스 (있으면 모델 객체로 복원)

        Returns:
            모델 객체 또는 디코딩된 딕셔너리
        """
        if model_class is not None and hasattr(model_class, "from_dict"):
            return model_class.from_dict(data)
        return CustomJSONDecoder.decode_value(data)

    @staticmethod
    def decode_value(value: Any) -> Any:
        """값을 재귀적으로 디코딩"""
        if isinstance(value, list):
            return [CustomJSONDecoder.decode_value(item) for item in value]

        if not isinstance(value, dict):
            return value

        result = {}
        for key, item in value.items():
            if key in DATETIME_KEYS and isinstance(item, str):
                try:
                    result[key] = CustomJSONDecoder.decode_datetime(item)
                    continue
                except ValueError:
                    pass
            if key in PATH_KEYS and isinstance(item, str):
                result[key] = Path(item)
                continue
            result[key] = CustomJSONDecoder.decode_value(item)
        return result
