"""
SymbolString / Link 해석 단위 테스트

다음 시나리오를 검증합니다:
1. 심볼 문자열 정규화 (구분자, 파라미터 제거)
2. 링크 해석 후보 (복수형, 소유격, 이름 붙은 링크)
3. 링크 대상 토픽 선택 (범위, 대소문자, 코드 토픽, 파일 순서)
"""

import pytest

from commentdoc.comment_types import CommentTypeManager
from commentdoc.links import LinkInterpretation, LinkInterpretations, LinkResolver
from commentdoc.models import Topic
from commentdoc.symbols import SymbolString


@pytest.fixture(scope="module")
def comment_type_manager():
    """기본 주석 타입 관리자 픽스처"""
    return CommentTypeManager()


def make_topic(symbol: str, comment_type: str = "Function") -> Topic:
    return Topic(title=symbol.split(".")[-1], comment_type=comment_type, symbol=symbol)


def test_symbol_from_text():
    """심볼 세그먼트 분리 테스트"""
    symbol = SymbolString.from_text("Namespace::Class.Method(int x)")

    assert symbol.segments == ["Namespace", "Class", "Method"]
    assert symbol.last_segment == "Method"
    assert symbol.parent == SymbolString(["Namespace", "Class"])
    assert symbol.to_export() == "Namespace.Class.Method"
    assert SymbolString.from_text("a->b  c/d").segments == ["a", "b c", "d"]


def test_symbol_operations():
    """심볼 연결, 끝 비교, 복원 테스트"""
    outer = SymbolString.from_text("Outer")
    joined = outer.join(SymbolString.from_text("Inner.Foo"))

    assert joined.to_export() == "Outer.Inner.Foo"
    assert joined.ends_with(SymbolString.from_text("inner.foo"), case_sensitive=False)
    assert not joined.ends_with(SymbolString.from_text("inner.foo"))
    assert SymbolString.from_export("Outer.Inner.Foo") == joined
    assert hash(SymbolString.from_export("Outer.Inner.Foo")) == hash(joined)
    assert joined.lower().to_export() == "outer.inner.foo"
    assert not SymbolString()
    assert not SymbolString.from_export("")


def test_parameters_only_title_is_kept():
    """괄호만 있는 제목은 그대로 유지 테스트"""
    assert SymbolString.from_text("(anonymous)").segments == ["(anonymous)"]


def test_plural_interpretation():
    """복수형 해석 후보 테스트"""
    interpretations = LinkInterpretations().interpret("<Foos>")

    assert interpretations == [
        LinkInterpretation("Foos", "Foos"),
        LinkInterpretation("Foos", "Foo", is_literal=False),
    ]


def test_alternates():
    """복수형/소유격 대안 테스트"""
    assert LinkInterpretations.alternates("Properties") == ["Property", "Properti", "Propertie"]
    assert LinkInterpretations.alternates("Foo's") == ["Foo", "Foo'"]
    assert LinkInterpretations.alternates("Bar") == []


def test_named_interpretation():
    """이름 붙은 링크 해석 테스트"""
    interpreter = LinkInterpretations()

    interpretations = interpreter.interpret("the list: Foo")
    assert len(interpretations) == 2
    assert interpretations[1] == LinkInterpretation("the list", "Foo", is_named=True)

    assert len(interpreter.interpret("http://x.com")) == 1
    assert interpreter.interpret("Click at Foo")[1].is_named
    assert interpreter.interpret("<>") == []


def test_inner_scope_wins():
    """안쪽 범위 우선 테스트"""
    outer = make_topic("Foo")
    inner = make_topic("Outer.Foo")
    resolver = LinkResolver([outer, inner])

    assert resolver.resolve("<Foo>", "Outer") is inner
    assert resolver.resolve("<Foo>", "Other") is outer
    assert resolver.resolve("<Outer.Foo>") is inner


def test_exact_case_wins():
    """대소문자 일치 우선 테스트"""
    lower = make_topic("foo")
    exact = make_topic("Foo")
    resolver = LinkResolver([lower, exact])

    assert resolver.resolve("<Foo>") is exact
    assert resolver.resolve("<FOO>") is lower


def test_plural_link_resolves():
    """복수형 링크 해석 테스트"""
    topic = make_topic("Property")

    assert LinkResolver([topic]).resolve("<Properties>") is topic


def test_code_topic_preferred(comment_type_manager):
    """코드 토픽 우선 테스트 (주석 타입 관리자 사용 시)"""
    information = make_topic("Foo", "Information")
    function = make_topic("Foo", "Function")

    assert LinkResolver([information, function], comment_type_manager).resolve("<Foo>") is function
    assert LinkResolver([information, function]).resolve("<Foo>") is information


def test_resolve_with_text():
    """이름 붙은 링크의 출력 텍스트 테스트"""
    topic = make_topic("Foo")

    assert LinkResolver([topic]).resolve_with_text("<the list: Foo>") == (topic, "the list")


def test_unresolved_link():
    """해석할 수 없는 링크 테스트"""
    resolver = LinkResolver([make_topic("Foo"), Topic(title="Untitled", comment_type="Information")])

    assert resolver.resolve("<Missing>") is None
    assert resolver.resolve("<Untitled>") is None
