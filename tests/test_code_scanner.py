"""
Code Scanner 단위 테스트

다음 시나리오를 검증합니다:
1. 코드/문자열/주석 구간 분리 (구간을 이으면 원문)
2. 가장 긴 주석 기호 우선
3. 문자열 안의 주석 기호 무시
4. 축자 문자열, 두 번 연속 따옴표
5. 주석 제거와 줄 번호 계산
"""

import pytest

from commentdoc.languages import LanguageManager
from commentdoc.tokenization import CodeItemType, CodeScanner, line_number_at, remove_comments


@pytest.fixture(scope="module")
def language_manager():
    """기본 언어 관리자 픽스처"""
    return LanguageManager()


def test_scan_reassembles_text(language_manager):
    """구간을 이으면 원문이 되는지 테스트"""
    text = 'int x = 1; /* block */\n// line\nchar *s = "a//b";\n'
    items = CodeScanner(language_manager.from_name("C")).scan(text)

    assert "".join(item.text for item in items) == text


def test_scan_string_hides_comment_symbol(language_manager):
    """문자열 안의 주석 기호 무시 테스트"""
    items = CodeScanner(language_manager.from_name("C")).scan('x = "a//b"; // c')

    assert [(item.type, item.text) for item in items] == [
        (CodeItemType.CODE, "x = "),
        (CodeItemType.STRING, '"a//b"'),
        (CodeItemType.CODE, "; "),
        (CodeItemType.LINE_COMMENT, "// c"),
    ]
    assert items[-1].symbol == "//"
    assert items[-1].is_comment


def test_line_comment_excludes_newline(language_manager):
    """줄 주석에 줄바꿈이 포함되지 않는지 테스트"""
    items = CodeScanner(language_manager.from_name("C")).scan("// a\nb")

    assert items[0].text == "// a"
    assert items[1].text == "\nb"


def test_longest_comment_symbol_wins(language_manager):
    """가장 긴 주석 기호 우선 테스트"""
    items = CodeScanner(language_manager.from_name("C#")).scan("/// <summary>")

    assert items[0].type == CodeItemType.LINE_COMMENT
    assert items[0].symbol == "///"


def test_javadoc_block_symbol(language_manager):
    """Javadoc 블록 주석 기호 테스트"""
    items = CodeScanner(language_manager.from_name("Java")).scan("/** doc */ int x;")

    assert items[0].type == CodeItemType.BLOCK_COMMENT
    assert items[0].symbol == "/**"
    assert items[0].text == "/** doc */"


def test_unclosed_block_comment_runs_to_end(language_manager):
    """닫히지 않은 블록 주석 테스트"""
    items = CodeScanner(language_manager.from_name("C")).scan("a /* never closed")

    assert items[-1].type == CodeItemType.BLOCK_COMMENT
    assert items[-1].end == len("a /* never closed")


def test_escaped_quote_in_string(language_manager):
    """이스케이프된 따옴표 테스트"""
    items = CodeScanner(language_manager.from_name("C")).scan(r'"a\"b" c')

    assert items[0].type == CodeItemType.STRING
    assert items[0].text == r'"a\"b"'


def test_verbatim_string(language_manager):
    """C# 축자 문자열 테스트"""
    items = CodeScanner(language_manager.from_name("C#")).scan('s = @"a\\""b"; // x')

    strings = [item.text for item in items if item.type == CodeItemType.STRING]
    assert strings == ['@"a\\""b"']


def test_doubled_quote_without_escape(language_manager):
    """이스케이프 문자가 없는 언어의 두 번 연속 따옴표 테스트"""
    items = CodeScanner(language_manager.from_name("Pascal")).scan("s := 'it''s'; { note }")

    assert [item.text for item in items if item.type == CodeItemType.STRING] == ["'it''s'"]
    assert items[-1].type == CodeItemType.BLOCK_COMMENT
    assert items[-1].text == "{ note }"


def test_plain_string_ends_at_newline(language_manager):
    """닫히지 않은 일반 문자열은 줄 끝에서 끝나는지 테스트"""
    items = CodeScanner(language_manager.from_name("C")).scan('"open\n// c')

    assert items[0].type == CodeItemType.STRING
    assert items[0].text == '"open'
    assert items[-1].type == CodeItemType.LINE_COMMENT


def test_perl_hash_is_comment_but_slashes_are_not(language_manager):
    """언어별 주석 기호만 주석으로 인식하는지 테스트"""
    items = CodeScanner(language_manager.from_name("Perl")).scan("# note\n// code")

    assert items[0].type == CodeItemType.LINE_COMMENT
    assert items[1].type == CodeItemType.CODE
    assert items[1].text == "\n// code"


def test_remove_comments(language_manager):
    """주석 제거 테스트"""
    items = CodeScanner(language_manager.from_name("C")).scan("a /* b */ c // d")

    assert remove_comments(items) == "a   c "


def test_line_number_at():
    """줄 번호 계산 테스트"""
    text = "a\nb\nc"

    assert line_number_at(text, 0) == 1
    assert line_number_at(text, 4) == 3
    assert line_number_at(text, 2, first_line=10) == 11
