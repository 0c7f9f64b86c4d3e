"""
SourceFile 데이터 모델

문서화 대상 소스 파일의 메타데이터를 저장하는 데이터 모델입니다.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional


@dataclass
class SourceFile:
    """
    소스 파일 메타데이터를 저장하는 데이터 모델

    Attributes:
        path: 파일의 절대 경로
        relative_path: 입력 디렉터리 기준 상대 경로
        filename: 파일명 (확장자 포함)
        extension: 파일 확장자 (예: .c, .pas)
        size: 파일 크기 (바이트)
        modified_time: 파일 수정 시간
        language: 판별된 언어 이름 (판별 불가 시 None)
    """

    path: Path
    relative_path: Path
    filename: str
    extension: str
    size: int
    modified_time: datetime
    language: Optional[str] = None

    def __post_init__(self):
        """데이터 검증 및 타입 변환"""
        if isinstance(self.path, str):
            self.path = Path(self.path)
        if isinstance(self.relative_path, str):
            self.relative_path = Path(self.relative_path)

    def to_dict(self) -> dict:
        """
        딕셔너리 형태로 변환

        Returns:
            dict: SourceFile의 딕셔너리 표현
        """
        return {
            "path": str(self.path),
            "relative_path": str(self.relative_path),
            "filename": self.filename,
            "extension": self.extension,
            "size": self.size,
            "modified_time": self.modified_time.isoformat(),
            "language": self.language,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SourceFile":
        """
        딕셔너리로부터 SourceFile 객체 생성

        Args:
            data: SourceFile 데이터 딕셔너리

        Returns:
            SourceFile: 생성된 SourceFile 객체
        """
        modified_time = data["modified_time"]
        if isinstance(modified_time, str):
            modified_time = datetime.fromisoformat(modified_time)

        return cls(
            path=Path(data["path"]),
            relative_path=Path(data["relative_path"]),
            filename=data["filename"],
            extension=data["extension"],
            size=data["size"],
            modified_time=modified_time,
            language=data.get("language"),
        )
