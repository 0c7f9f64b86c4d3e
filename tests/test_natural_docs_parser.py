"""
Natural Docs Parser 단위 테스트

다음 시나리오를 검증합니다:
1. 토픽 라인 분석 (키워드, 복수, 접근 제한자, 언어 태그)
2. 한 주석 안의 여러 토픽 분리
3. 본문 NDMarkup 변환 (문단, 제목, 정의 목록, 글머리 목록, 코드 블록)
4. 요약 문장 추출
5. 목록/열거형 토픽의 포함 토픽 추출
"""

import pytest

from commentdoc.comment_types import CommentTypeManager
from commentdoc.comments import NaturalDocsParser
from commentdoc.languages import LanguageManager
from commentdoc.models import Topic


@pytest.fixture(scope="module")
def language_manager():
    """기본 언어 관리자 픽스처"""
    return LanguageManager()


@pytest.fixture(scope="module")
def parser(language_manager):
    """NaturalDocsParser 픽스처"""
    return NaturalDocsParser(CommentTypeManager(), language_manager)


def body_of(parser, lines, topic=None):
    return parser.parse_body(lines, topic or Topic(title="X", comment_type="Information"))


def test_parse_topic_line(parser):
    """토픽 라인 분석 테스트"""
    line = parser.parse_topic_line("Function: Foo")

    assert line.comment_type.name == "Function"
    assert not line.is_plural
    assert line.title == "Foo"
    assert line.access_level is None
    assert line.language is None


def test_parse_topic_line_tags(parser):
    """접근 제한자와 언어 태그 테스트"""
    private = parser.parse_topic_line("Private Function: Foo")
    assert private.access_level == "Private"

    internal = parser.parse_topic_line("Protected Internal Function: Bar")
    assert internal.access_level == "Protected Internal"

    perl = parser.parse_topic_line("Perl Function: Baz")
    assert perl.language.name == "Perl"

    plural = parser.parse_topic_line("Enums: Colors")
    assert plural.comment_type.name == "Enumeration"
    assert plural.is_plural


def test_not_topic_lines(parser):
    """토픽 라인이 아닌 줄 테스트"""
    assert parser.parse_topic_line("Function:Foo") is None
    assert parser.parse_topic_line("Function : Foo") is None
    assert parser.parse_topic_line("Unknown: Foo") is None
    assert parser.parse_topic_line("Static Function: Foo") is None
    assert parser.parse_topic_line("Just a sentence.") is None


def test_parse_single_topic(parser, language_manager):
    """토픽 하나 파싱 테스트"""
    topics = parser.parse(
        ["Function: Foo", "", "Does something. More text."],
        language_manager.from_name("C"),
        first_line_number=10,
    )

    assert len(topics) == 1
    topic = topics[0]
    assert topic.title == "Foo"
    assert topic.comment_type == "Function"
    assert topic.language == "C/C++"
    assert topic.comment_line_number == 10
    assert topic.body == "<p>Does something. More text.</p>"
    assert topic.summary == "Does something."


def test_parse_requires_header(parser):
    """헤더 없는 주석 무시 테스트"""
    assert parser.parse(["just a note"]) == []
    assert parser.parse(["", "  "]) == []


def test_parse_multiple_topics(parser):
    """빈 줄 뒤의 토픽 라인으로 토픽 분리 테스트"""
    topics = parser.parse(["Function: A", "Text A.", "", "Function: B", "Text B."])

    assert [t.title for t in topics] == ["A", "B"]
    assert topics[0].body == "<p>Text A.</p>"
    assert topics[1].comment_line_number == 4


def test_topic_line_without_blank_line_is_text(parser):
    """빈 줄 없이 이어진 토픽 라인은 본문 테스트"""
    topics = parser.parse(["Function: A", "Function: B"])

    assert len(topics) == 1
    assert topics[0].body == "<p>Function: B</p>"


def test_topic_line_inside_code_block_is_ignored(parser):
    """코드 블록 안의 토픽 라인 무시 테스트"""
    topics = parser.parse(["Topic: A", "", "(start code)", "", "Function: B", "(end)"])

    assert len(topics) == 1


def test_language_tag_sets_topic_language(parser, language_manager):
    """토픽 라인 언어 태그 테스트"""
    topics = parser.parse(["Perl Function: run"], language_manager.from_name("C"))

    assert topics[0].language == "Perl"


def test_paragraph_line_joining(parser):
    """문단 줄 연결 테스트 (문장 끝이면 공백 두 개)"""
    assert body_of(parser, ["First line.", "Second line", "third"]) == (
        "<p>First line.  Second line third</p>"
    )


def test_paragraphs_split_by_blank_line(parser):
    """빈 줄로 문단 분리 테스트"""
    assert body_of(parser, ["One.", "", "Two."]) == "<p>One.</p><p>Two.</p>"


def test_parameters_heading_and_definitions(parser):
    """Parameters 제목과 정의 목록 테스트"""
    body = body_of(parser, ["", "Parameters:", "a - First value.", "b - Second value."])

    assert body == (
        '<h type="parameters">Parameters</h>'
        "<dl><de>a</de><dd><p>First value.</p></dd>"
        "<de>b</de><dd><p>Second value.</p></dd></dl>"
    )


def test_parse_heading(parser):
    """제목 줄 판별 테스트"""
    assert parser.parse_heading("Parameters:") == ("Parameters", "parameters")
    assert parser.parse_heading("Return Value:") == ("Return Value", None)
    assert parser.parse_heading("Rules of the Game:") == ("Rules of the Game", None)
    assert parser.parse_heading("lowercase heading::") == ("lowercase heading", None)
    assert parser.parse_heading("not a heading:") is None
    assert parser.parse_heading("Values") is None


def test_bullet_list(parser):
    """글머리 목록 테스트"""
    assert body_of(parser, ["- one", "- two"]) == "<ul><li><p>one</p></li><li><p>two</p></li></ul>"


def test_code_block(parser):
    """코드 블록 테스트"""
    assert body_of(parser, ["(start code)", "if (a < b)", "    go();", "(end)"]) == (
        '<pre type="code">if (a &lt; b)<br>    go();</pre>'
    )


def test_code_block_with_language(parser):
    """언어 태그가 있는 코드 블록 테스트"""
    assert body_of(parser, ["(start Perl code)", "my $x;", "(end)"]) == (
        '<pre type="code" language="Perl">my $x;</pre>'
    )
    assert body_of(parser, ["(Perl)", "my $x;", "(end)"]) == (
        '<pre type="code" language="Perl">my $x;</pre>'
    )


def test_text_block(parser):
    """텍스트 블록 테스트 (강조 없음)"""
    assert body_of(parser, ["(start text)", "plain", "(end)"]) == "<pre>plain</pre>"


def test_horizontal_line_code_block(parser):
    """수평선 코드 블록 테스트"""
    assert body_of(parser, ["--- code", "x = 1;", "---"]) == '<pre type="code">x = 1;</pre>'


def test_standalone_preformatted_lines(parser):
    """">" 로 시작하는 코드 줄 테스트"""
    assert body_of(parser, ["> int a;", ">   int b;"]) == "<pre>int a;<br>  int b;</pre>"


def test_block_tag_lines(parser):
    """코드 블록 시작/종료 줄 분석 테스트"""
    tag = parser.parse_start_block_line("(start code)")
    assert (tag.block_char, tag.block_type, tag.language) == ("(", "code", None)

    perl = parser.parse_start_block_line("(Perl)")
    assert perl.language.name == "Perl"

    assert parser.parse_start_block_line("(see below)") is None
    assert parser.parse_end_block_line("(end)") == "("
    assert parser.parse_end_block_line("(end code)") == "("
    assert parser.parse_end_block_line("---") == "-"
    assert parser.parse_end_block_line("end") is None


def test_summary_skips_headings(parser):
    """요약은 제목 뒤 첫 문단에서 추출 테스트"""
    topic = Topic(title="X", comment_type="Function", body="<h>Notes</h><p>First one. Second.</p>")

    assert parser.make_summary(topic)
    assert topic.summary == "First one."


def test_summary_requires_leading_paragraph(parser):
    """첫 블록이 목록이면 요약 없음 테스트"""
    topic = Topic(title="X", comment_type="Function", body="<ul><li><p>one</p></li></ul>")

    assert not parser.make_summary(topic)
    assert topic.summary is None


def test_summary_does_not_split_inside_bold(parser):
    """굵게 안의 문장 경계에서 자르지 않음 테스트"""
    topic = Topic(title="X", comment_type="Function", body="<p><b>Warning. Read</b> this. Then go.</p>")

    parser.make_summary(topic)
    assert topic.summary == "<b>Warning. Read</b> this."


def test_enum_topic_embedded_values(parser):
    """열거형 토픽의 포함 토픽 추출 테스트"""
    topics = parser.parse(["Enum: Color", "", "Values:", "Red - The red.", "Green - The green."])

    assert [t.title for t in topics] == ["Color", "Red", "Green"]
    color, red, green = topics
    assert color.is_enum
    assert not color.is_list
    assert color.body == (
        '<h type="values">Values</h>'
        "<dl><ds>Red</ds><dd><p>The red.</p></dd>"
        "<ds>Green</ds><dd><p>The green.</p></dd></dl>"
    )
    assert red.comment_type == "Constant"
    assert red.is_embedded
    assert red.body == "<p>The red.</p>"
    assert red.summary == "The red."
    assert green.comment_type == "Constant"


def test_list_topic_embedded_members(parser):
    """목록 토픽의 포함 토픽 추출 테스트"""
    topics = parser.parse(["Functions: Helpers", "", "Foo - Does foo.", "Bar - Does bar."])

    assert topics[0].is_list
    assert not topics[0].is_enum
    assert [t.title for t in topics[1:]] == ["Foo", "Bar"]
    assert all(t.comment_type == "Function" and t.is_embedded for t in topics[1:])


def test_list_parameters_are_not_symbols(parser):
    """목록 토픽의 Parameters 정의는 포함 토픽이 아님 테스트"""
    topics = parser.parse(["Functions: Helpers", "", "Parameters:", "a - First."])

    assert len(topics) == 1
    assert "<de>a</de>" in topics[0].body
