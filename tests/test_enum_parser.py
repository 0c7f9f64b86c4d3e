"""
Enum Parser 단위 테스트

다음 시나리오를 검증합니다:
1. 중괄호 열거형 본문에서 값 이름, 명시적 값, 줄 번호 추출
2. 같은 줄 주석과 이어지는 주석 줄을 설명으로 연결
3. 본문 없는 선언, 중복 이름, Java 생성자 인자, C# 속성 처리
"""

import pytest

from commentdoc.languages import LanguageManager
from commentdoc.parser import EnumParser


@pytest.fixture(scope="module")
def language_manager():
    """기본 언어 관리자 픽스처"""
    return LanguageManager()


@pytest.fixture
def c_parser(language_manager):
    """C/C++ 열거형 파서 픽스처"""
    return EnumParser(language_manager.from_name("C"))


def test_values_and_descriptions(c_parser):
    """값, 명시적 값, 설명 추출 테스트"""
    text = (
        "enum Color {\n"
        "    Red,        // The red.\n"
        "    Green = 2,  /* The green. */\n"
        "    Blue        // The blue\n"
        "                // continued.\n"
        "};"
    )

    red, green, blue = c_parser.parse(text)

    assert (red.name, red.value, red.description, red.line_number) == ("Red", None, "The red.", 2)
    assert (green.name, green.value, green.description) == ("Green", "2", "The green.")
    assert green.line_number == 3
    assert blue.description == "The blue\ncontinued."


def test_first_line_number_offset(c_parser):
    """시작 줄 번호 반영 테스트"""
    values = c_parser.parse("enum E {\n  A,\n  B\n};", first_line_number=10)

    assert [v.line_number for v in values] == [11, 12]


def test_trailing_comment_after_closing_brace(c_parser):
    """닫는 괄호 뒤 주석은 마지막 값 설명 테스트"""
    values = c_parser.parse("enum E { A, B }; // The last.")

    assert values[0].description is None
    assert values[1].description == "The last."


def test_standalone_comment_line_is_ignored(c_parser):
    """값과 떨어진 주석 줄 무시 테스트"""
    values = c_parser.parse("enum E {\n    // Group of values\n    A,\n    B\n};")

    assert [v.name for v in values] == ["A", "B"]
    assert all(v.description is None for v in values)


def test_duplicate_names_are_dropped(c_parser):
    """중복 값 이름 제거 테스트"""
    values = c_parser.parse("enum E { A, B, A };")

    assert [v.name for v in values] == ["A", "B"]


def test_declaration_without_body(c_parser):
    """본문 없는 선언 테스트"""
    assert c_parser.parse("enum E;") == []


def test_java_constructor_arguments(language_manager):
    """Java 열거형 생성자 인자 테스트"""
    values = EnumParser(language_manager.from_name("Java")).parse("enum Level { LOW(1), HIGH(2) }")

    assert [(v.name, v.value) for v in values] == [("LOW", "(1)"), ("HIGH", "(2)")]


def test_csharp_attribute_is_skipped(language_manager):
    """C# 속성 건너뛰기 테스트"""
    values = EnumParser(language_manager.from_name("C#")).parse('enum E { [Description("x")] A = 1 }')

    assert [(v.name, v.value) for v in values] == [("A", "1")]
