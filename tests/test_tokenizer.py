"""
Tokenizer 단위 테스트

다음 시나리오를 검증합니다:
1. 텍스트/공백/줄바꿈/기호 토큰 분리
2. 토큰 위치(offset, end)
3. 공백 정리와 탭 확장
"""

from commentdoc.tokenization import Token, Tokenizer, TokenType, condense_whitespace, expand_tabs


def test_tokenize_basic_types():
    """기본 토큰 타입 분리 테스트"""
    tokens = Tokenizer.tokenize("int x=12;\n")

    assert [(t.type, t.text) for t in tokens] == [
        (TokenType.TEXT, "int"),
        (TokenType.WHITESPACE, " "),
        (TokenType.TEXT, "x"),
        (TokenType.SYMBOL, "="),
        (TokenType.TEXT, "12"),
        (TokenType.SYMBOL, ";"),
        (TokenType.LINE_BREAK, "\n"),
    ]


def test_tokenize_whitespace_run_is_one_token():
    """연속 공백/탭은 토큰 하나 테스트"""
    tokens = Tokenizer.tokenize("a \t b")

    assert len(tokens) == 3
    assert tokens[1].type == TokenType.WHITESPACE
    assert tokens[1].text == " \t "


def test_tokenize_line_breaks():
    """줄바꿈 종류별 토큰 테스트"""
    tokens = Tokenizer.tokenize("a\r\nb\rc")

    breaks = [t.text for t in tokens if t.type == TokenType.LINE_BREAK]
    assert breaks == ["\r\n", "\r"]


def test_token_offsets():
    """토큰 위치 테스트"""
    tokens = Tokenizer.tokenize("foo(bar)")

    assert tokens[0] == Token(TokenType.TEXT, "foo", 0)
    assert tokens[0].end == 3
    assert tokens[1].is_symbol("(")
    assert not tokens[2].is_symbol("bar")
    assert tokens[2].offset == 4


def test_tokenize_empty():
    """빈 문자열 토큰화 테스트"""
    assert Tokenizer.tokenize("") == []


def test_condense_whitespace():
    """공백 정리 테스트"""
    assert condense_whitespace("  int   Add (\n  int a,\tint b )  ") == "int Add ( int a, int b )"


def test_expand_tabs():
    """탭 확장 테스트"""
    assert expand_tabs("a\tb", 4) == "a   b"
    assert expand_tabs("\tx", 8) == "        x"
    assert expand_tabs("no tabs", 4) == "no tabs"
