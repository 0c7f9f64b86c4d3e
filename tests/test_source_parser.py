"""
Source Parser 단위 테스트

다음 시나리오를 검증합니다:
1. 주석 토픽에 프로토타입 연결
2. 열거형 주석 정의와 코드 본문 값 병합, 언어별 값 심볼 위치
3. 클래스 범위, 섹션, 그룹, 중복 앵커
4. 헤더 없는 Javadoc 주석의 타입/제목 추론
5. 파일 읽기 (인코딩 실패, 언어 판별 실패)
"""

import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from commentdoc.comment_types import CommentTypeManager
from commentdoc.languages import LanguageManager
from commentdoc.models import SourceFile
from commentdoc.parser import SourceParser


@pytest.fixture(scope="module")
def language_manager():
    """기본 언어 관리자 픽스처"""
    return LanguageManager()


@pytest.fixture(scope="module")
def comment_type_manager():
    """기본 주석 타입 관리자 픽스처"""
    return CommentTypeManager()


@pytest.fixture
def parser(language_manager, comment_type_manager):
    """SourceParser 픽스처"""
    return SourceParser(language_manager, comment_type_manager)


@pytest.fixture
def temp_dir():
    """임시 디렉터리를 생성하는 픽스처"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


ENUM_SOURCE = (
    "// Enum: Color\n"
    "// Values:\n"
    "//   Red - The red.\n"
    "//   Green - The green.\n"
    "enum Color { Red, Green, Blue };\n"
)


def make_source_file(path: Path, root: Path) -> SourceFile:
    stat = path.stat()
    return SourceFile(
        path=path,
        relative_path=path.relative_to(root),
        filename=path.name,
        extension=path.suffix,
        size=stat.st_size,
        modified_time=datetime.fromtimestamp(stat.st_mtime),
    )


def test_function_prototype(parser, language_manager):
    """함수 토픽 프로토타입 연결 테스트"""
    text = "// Function: Add\n// Adds numbers.\nint Add (int a, int b);\n"

    topics = parser.parse_text(text, language_manager.from_name("C"), "math.c")

    assert len(topics) == 1
    topic = topics[0]
    assert topic.prototype == "int Add (int a, int b);"
    assert topic.code_line_number == 3
    assert topic.comment_line_number == 1
    assert topic.file_path == "math.c"
    assert topic.language == "C/C++"
    assert topic.anchor == "Function:Add"
    assert topic.topic_id == 1


def test_enum_values_merged_with_code(parser, language_manager):
    """열거형 주석 정의와 코드 값 병합 테스트"""
    topics = parser.parse_text(ENUM_SOURCE, language_manager.from_name("C"))

    assert [t.title for t in topics] == ["Color", "Red", "Green", "Blue"]
    color, red, green, blue = topics
    assert color.prototype == "enum Color"
    assert [t.anchor for t in topics[1:]] == ["Constant:Red", "Constant:Green", "Constant:Blue"]
    assert red.body == "<p>The red.</p>"
    assert blue.body is None
    assert blue.is_embedded
    assert blue.code_line_number == 5
    assert all(t.parent_id == color.topic_id for t in topics[1:])
    assert color.body.endswith("<ds>Blue</ds><dd></dd></dl>")
    assert color.body.count("<dl>") == 1


def test_inline_value_description_formatting(parser, language_manager):
    """열거형 본문 주석 설명의 서식과 링크 변환 테스트"""
    text = (
        "// Enum: BasicFormatting\n"
        "enum BasicFormatting\n"
        "\t{\n"
        "\tA,\n"
        "\tB, // Inline description of B with *bold* and _underline_ and\n"
        "\t   // email@addresses.com and <https://www.naturaldocs.org> and\n"
        "\t   // <named links: https://www.naturaldocs.org>.\n"
        "\tC\n"
        "\t}\n"
    )

    topics = parser.parse_text(text, language_manager.from_name("C#"))

    b = next(t for t in topics if t.title == "B")
    assert b.body.startswith("<p>Inline description of B with <b>bold</b> and <u>underline</u> and ")
    assert '<link type="email" target="email@addresses.com" text="email@addresses.com">' in b.body
    assert (
        '<link type="url" target="https://www.naturaldocs.org" text="https://www.naturaldocs.org">'
        in b.body
    )
    assert '<link type="url" target="https://www.naturaldocs.org" text="named links">' in b.body
    assert "*bold*" not in b.body
    assert b.summary.startswith("Inline description of B with <b>bold</b>")


def test_inline_value_description_paragraphs(parser, language_manager):
    """빈 줄 주석으로 나뉜 열거형 값 설명의 문단 테스트"""
    text = (
        "// Enum: MultilineLineCommentsA\n"
        "enum MultilineLineCommentsA\n"
        "\t{\n"
        "\tA, // Line comment description of A.\n"
        "\tB, // Line comment description of B line 1.\n"
        "\t\t//\n"
        "\t\t// Line comment description of B line 3, new paragraph.\n"
        "\tC\n"
        "\t}\n"
    )

    topics = parser.parse_text(text, language_manager.from_name("C#"))

    a = next(t for t in topics if t.title == "A")
    b = next(t for t in topics if t.title == "B")
    assert a.body == "<p>Line comment description of A.</p>"
    assert b.body == (
        "<p>Line comment description of B line 1.</p>"
        "<p>Line comment description of B line 3, new paragraph.</p>"
    )


def test_documented_only_skips_undocumented_values(language_manager, comment_type_manager):
    """설명 없는 코드 값 제외 옵션 테스트"""
    parser = SourceParser(language_manager, comment_type_manager, documented_only=True)

    topics = parser.parse_text(ENUM_SOURCE, language_manager.from_name("C"))

    assert [t.title for t in topics] == ["Color", "Red", "Green"]


def test_enum_values_under_type(parser, language_manager):
    """열거형 값이 타입 아래에 놓이는 언어 테스트"""
    text = ENUM_SOURCE.replace("enum Color { Red, Green, Blue };", "public enum Color { Red, Green, Blue }")

    topics = parser.parse_text(text, language_manager.from_name("C#"))

    red = topics[1]
    assert red.anchor == "Constant:Color.Red"
    assert red.context == "Color"


def test_enum_values_setting_override(comment_type_manager):
    """열거형 값 위치 설정 덮어쓰기 테스트"""
    language_manager = LanguageManager(enum_values={"C/C++": "under_type"})
    parser = SourceParser(language_manager, comment_type_manager)

    topics = parser.parse_text(ENUM_SOURCE, language_manager.from_name("C"))

    assert topics[1].anchor == "Constant:Color.Red"


def test_class_scope(parser, language_manager):
    """클래스 범위와 멤버 심볼 테스트"""
    text = (
        "// Class: Shape\n"
        "public class Shape {\n"
        "\n"
        "    // Function: Area\n"
        "    public double Area() { return 0; }\n"
        "}\n"
    )

    shape, area = parser.parse_text(text, language_manager.from_name("C#"))

    assert shape.prototype == "public class Shape"
    assert area.symbol == "Shape.Area"
    assert area.context == "Shape"
    assert area.parent_id == shape.topic_id
    assert area.anchor == "Function:Shape.Area"
    assert area.prototype == "public double Area()"


def test_section_resets_context(parser, language_manager):
    """섹션 토픽의 범위 초기화 테스트"""
    text = "/*\n Class: A\n*/\n\n/*\n Section: Misc\n*/\n\n/*\n Function: Free\n*/\n"

    topics = parser.parse_text(text, language_manager.from_name("C"))

    assert [t.symbol for t in topics] == ["A", "Misc", "Free"]
    assert topics[2].parent_id is None


def test_group_assignment(parser, language_manager):
    """그룹 토픽 뒤 토픽의 그룹 지정 테스트"""
    text = "/*\n Group: Helpers\n*/\n\n/*\n Function: Foo\n*/\n"

    group, foo = parser.parse_text(text, language_manager.from_name("C"))

    assert group.group is None
    assert foo.group == "Helpers"


def test_group_underscore_rule_is_not_body(parser, language_manager):
    """그룹 제목 아래 밑줄 수평선은 본문이 아님 테스트"""
    text = (
        "// Group: No Descriptions\n"
        "// ____________________________________________________________\n"
        "\n"
        "\n"
        "/* Enum: NoDescriptionsA\n"
        " */\n"
        "enum NoDescriptionsA\n"
        "\t{  A, B, C  }\n"
    )

    topics = parser.parse_text(text, language_manager.from_name("C#"))

    group = topics[0]
    assert group.title == "No Descriptions"
    assert group.body is None
    assert group.summary is None


def test_duplicate_anchor_suffix(parser, language_manager):
    """중복 앵커 번호 붙이기 테스트"""
    text = "/*\n Function: Foo\n*/\n\n/*\n Function: Foo\n*/\n"

    first, second = parser.parse_text(text, language_manager.from_name("C"))

    assert first.anchor == "Function:Foo"
    assert second.anchor == "Function:Foo-2"


def test_headerless_javadoc(parser, language_manager):
    """헤더 없는 Javadoc 주석 테스트"""
    text = (
        "/**\n"
        " * Returns the sum.\n"
        " * @param a first\n"
        " */\n"
        "public int add(int a, int b) { return a + b; }\n"
    )

    topics = parser.parse_text(text, language_manager.from_name("Java"))

    assert len(topics) == 1
    topic = topics[0]
    assert topic.title == "add"
    assert topic.comment_type == "Function"
    assert topic.prototype == "public int add(int a, int b)"
    assert topic.body == (
        "<p>Returns the sum.</p><h>Parameters</h><dl><de>a</de><dd><p>first</p></dd></dl>"
    )
    assert topic.summary == "Returns the sum."


def test_plain_headerless_comment_is_ignored(parser, language_manager):
    """헤더 없는 일반 주석 무시 테스트"""
    text = "// Adds numbers.\nint Add (int a, int b);\n"

    assert parser.parse_text(text, language_manager.from_name("C")) == []


def test_list_members_inside_class(parser, language_manager):
    """클래스 안의 목록 토픽 항목 심볼 테스트"""
    text = (
        "// Class: Shape\n"
        "public class Shape {\n"
        "\n"
        "    // Enums: Options\n"
        "    //\n"
        "    //   Fast - Quick mode.\n"
        "}\n"
    )

    topics = parser.parse_text(text, language_manager.from_name("C#"))
    options, fast = topics[1], topics[2]

    assert options.is_list
    assert fast.symbol == "Shape.Fast"
    assert fast.parent_id == options.topic_id
    assert fast.anchor == "Enumeration:Shape.Fast"


def test_parse_file(parser, temp_dir):
    """파일 파싱 테스트"""
    path = temp_dir / "src" / "math.c"
    path.parent.mkdir()
    path.write_text("// Function: Add\nint Add(int a, int b);\n", encoding="utf-8")

    result = parser.parse_file(make_source_file(path, temp_dir))

    assert not result.has_errors
    assert result.source_file.language == "C/C++"
    assert result.topics[0].file_path == str(Path("src") / "math.c")


def test_parse_file_decoding_error(language_manager, comment_type_manager, temp_dir):
    """지원하지 않는 인코딩 오류 테스트"""
    parser = SourceParser(language_manager, comment_type_manager, encodings=["utf-8"])
    path = temp_dir / "bad.c"
    path.write_bytes(b"// Function: A\n\xff\xfe\n")

    result = parser.parse_file(make_source_file(path, temp_dir))

    assert result.topics == []
    assert result.errors[0].message.startswith("지원하는 인코딩으로")


def test_parse_file_unknown_language(parser, temp_dir):
    """언어 판별 실패 오류 테스트"""
    path = temp_dir / "data.unknownext"
    path.write_text("Function: A\n", encoding="utf-8")

    result = parser.parse_file(make_source_file(path, temp_dir))

    assert result.has_errors
    assert "언어를 판별할 수 없습니다" in result.errors[0].message
