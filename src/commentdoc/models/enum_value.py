"""
EnumValue 데이터 모델
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class EnumValue:
    """
    열거형 본문에서 읽은 값 하나

    Attributes:
        name: 값 이름
        value: 명시적 값 표현식 (예: "0x01", 없으면 None)
        description: 같은 줄 주석에서 읽은 설명 (일반 텍스트, 없으면 None)
        line_number: 값이 정의된 줄 번호
    """

    name: str
    value: Optional[str] = None
    description: Optional[str] = None
    line_number: int = 0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "value": self.value,
            "description": self.description,
            "line_number": self.line_number,
        }
