"""
Prototype Parser / Prototype Layout 단위 테스트

다음 시나리오를 검증합니다:
1. 파라미터 목록 전/후 분리와 파라미터 분리 (제네릭, 중첩 괄호)
2. C 스타일 컬럼 분류 (수식어, 타입, 기호, 이름, 기본값)
3. Pascal / SQL 스타일 컬럼 분류
4. 컬럼 정렬 텍스트 출력과 기본값 구분자 간격 규칙
"""

import pytest

from commentdoc.languages import LanguageManager
from commentdoc.models import ColumnType, ParameterStyle
from commentdoc.output import PrototypeLayout
from commentdoc.parser import PrototypeParser


@pytest.fixture(scope="module")
def language_manager():
    """기본 언어 관리자 픽스처"""
    return LanguageManager()


@pytest.fixture(scope="module")
def parser():
    """PrototypeParser 픽스처"""
    return PrototypeParser()


def parse_c(parser, language_manager, text):
    return parser.parse(text, language_manager.from_name("C"))


def render(parser, language, text):
    return PrototypeLayout.build(parser.parse(text, language)).render_text()


def test_split_before_and_after(parser, language_manager):
    """파라미터 목록 전/후 분리 테스트"""
    prototype = parse_c(parser, language_manager, "int Add (int a, int b = 0);")

    assert prototype.style == ParameterStyle.C
    assert prototype.before_parameters == "int Add ("
    assert prototype.after_parameters == ");"
    assert prototype.has_parameter_list
    assert [p.text for p in prototype.parameters] == ["int a", "int b = 0"]


def test_c_cells(parser, language_manager):
    """C 스타일 컬럼 분류 테스트"""
    a, b = parse_c(parser, language_manager, "int Add (int a, int b = 0);").parameters

    assert a.cells == {ColumnType.TYPE: "int", ColumnType.NAME: "a"}
    assert b.cells == {
        ColumnType.TYPE: "int",
        ColumnType.NAME: "b",
        ColumnType.DEFAULT_VALUE_SEPARATOR: "=",
        ColumnType.DEFAULT_VALUE: "0",
    }
    assert b.name == "b"
    assert b.default_value == "0"


def test_c_symbols_modifiers_and_arrays(parser, language_manager):
    """포인터 기호, 수식어, 배열 이름 테스트"""
    prototype = parse_c(parser, language_manager, "void F (char *name, const int count, int values[], ...)")
    name, count, values, rest = prototype.parameters

    assert name.cells == {ColumnType.TYPE: "char", ColumnType.SYMBOLS: "*", ColumnType.NAME: "name"}
    assert count.cells == {ColumnType.MODIFIER: "const", ColumnType.TYPE: "int", ColumnType.NAME: "count"}
    assert values.name == "values[]"
    assert rest.cells == {ColumnType.NAME: "..."}


def test_void_parameter(parser, language_manager):
    """void 파라미터 테스트"""
    prototype = parse_c(parser, language_manager, "int F (void)")

    assert prototype.parameters[0].cells == {ColumnType.TYPE: "void"}


def test_generic_parameters_are_not_split(parser, language_manager):
    """제네릭 안의 쉼표로 분리하지 않음 테스트"""
    prototype = parser.parse("void F (Map<String, Integer> m, int n)", language_manager.from_name("C#"))

    assert [p.text for p in prototype.parameters] == ["Map<String, Integer> m", "int n"]
    assert prototype.parameters[0].type == "Map<String, Integer>"


def test_comparison_is_not_default_separator(parser, language_manager):
    """"==" 는 기본값 구분자가 아님 테스트"""
    prototype = parse_c(parser, language_manager, "void F (bool b = x == y)")

    assert prototype.parameters[0].default_value == "x == y"


def test_no_parameter_list(parser, language_manager):
    """괄호 없는 프로토타입 테스트"""
    prototype = parse_c(parser, language_manager, "int x;")

    assert not prototype.has_parameter_list
    assert prototype.before_parameters == "int x;"
    assert prototype.parameters == []


def test_pascal_cells(parser, language_manager):
    """Pascal 스타일 컬럼 분류 테스트"""
    prototype = parser.parse(
        "function Add(var a: Integer; b: Integer = 0): Integer;", language_manager.from_name("Pascal")
    )
    a, b = prototype.parameters

    assert prototype.style == ParameterStyle.PASCAL
    assert a.cells == {
        ColumnType.MODIFIER: "var",
        ColumnType.NAME: "a",
        ColumnType.TYPE_NAME_SEPARATOR: ":",
        ColumnType.TYPE: "Integer",
    }
    assert b.default_value == "0"


def test_sql_cells(parser, language_manager):
    """SQL DEFAULT 기본값 테스트"""
    prototype = parser.parse(
        "PROCEDURE P (p_id IN NUMBER DEFAULT 0, p_name VARCHAR2)", language_manager.from_name("SQL")
    )
    p_id, p_name = prototype.parameters

    assert p_id.name == "p_id"
    assert p_id.type == "IN NUMBER"
    assert p_id.get(ColumnType.DEFAULT_VALUE_SEPARATOR) == "DEFAULT"
    assert p_name.cells == {ColumnType.NAME: "p_name", ColumnType.TYPE: "VARCHAR2"}


def test_render_aligned_c(parser, language_manager):
    """C 프로토타입 정렬 출력 테스트"""
    language = language_manager.from_name("C")

    assert render(parser, language, "int Add (int a, int b = 0);") == "int Add (int a,\n         int b = 0);"
    assert render(parser, language, "void SimpleA (int a, int b=12)") == (
        "void SimpleA (int a,\n              int b = 12)"
    )


def test_default_value_spacing_is_normalized(parser, language_manager):
    """원문 공백과 무관한 기본값 구분자 간격 테스트"""
    language = language_manager.from_name("C")

    for text in ("void F (int b=12)", "void F (int b = 12)", "void F (int b  =  12)"):
        assert render(parser, language, text) == "void F (int b = 12)"


def test_default_value_separator_cell_spacing(parser, language_manager):
    """기본값 구분자 앞 공백 생략 규칙 테스트"""
    layout = PrototypeLayout.build(parse_c(parser, language_manager, "int Add (int a, int b = 0);"))

    assert layout.cells[0] == {ColumnType.TYPE: "int ", ColumnType.NAME: "a,"}
    assert layout.cells[1][ColumnType.DEFAULT_VALUE_SEPARATOR] == "= "
    assert layout.columns == [
        ColumnType.TYPE,
        ColumnType.NAME,
        ColumnType.DEFAULT_VALUE_SEPARATOR,
        ColumnType.DEFAULT_VALUE,
    ]


@pytest.mark.parametrize(
    "text, separator",
    [
        ("public void SimpleA (int a, int b = 12)", "= "),
        ("public void SimpleB (int aa, int b = 12)", "= "),
        ("public void SimpleC (int a, int bb = 12)", " = "),
        ("public void SimpleD (int a, int bbb = 12)", " = "),
        ("public void MultipleA (int a, int b = 12, int ccc = 12)", " = "),
        ("public void MultipleB (int aaa, int b = 12, int ccc = 12)", "= "),
        ("public void SymbolsA (int a[], int b[] = 12)", "= "),
        ("public void SymbolsB (int a[], int b<T> = 12)", " = "),
        ("public void SymbolsC (int a<T>, int b[] = 12)", "= "),
        ("public void SymbolsD (int a, int b[] = 12)", " = "),
        ("public void SymbolsE (int a[], int b = 12)", "= "),
        ("public void SymbolsF (int aa, int b[] = 12)", " = "),
        ("public void SymbolsG (int aaa, int b[] = 12)", "= "),
        ("public void SymbolsH (int a[], int bb = 12)", "= "),
        ("public void SymbolsI (int a[], int bbb = 12)", "= "),
        ("public void SymbolsJ (int a[], int bbbb = 12)", " = "),
        ("public void UniformityA (int a, int b=12)", "= "),
        ("public void UniformityB (int a, int b = 12)", "= "),
        ("public void UniformityC (int a, int b  =  12)", "= "),
        ("public void UniformityG (int aa, int b=12)", "= "),
        ("public void UniformityH (int aa, int b = 12)", "= "),
        ("public void UniformityI (int aa, int b  =  12)", "= "),
    ],
)
def test_default_value_separator_touching_rule(parser, language_manager, text, separator):
    """기본값 구분자가 앞 셀에 닿을 때만 앞 공백을 유지하는지 테스트"""
    layout = PrototypeLayout.build(parse_c(parser, language_manager, text))

    separators = [
        row[ColumnType.DEFAULT_VALUE_SEPARATOR]
        for row in layout.cells
        if ColumnType.DEFAULT_VALUE_SEPARATOR in row
    ]
    assert separators
    assert all(cell == separator for cell in separators)


def test_render_pascal(parser, language_manager):
    """Pascal 프로토타입 정렬 출력 테스트"""
    text = render(
        parser, language_manager.from_name("Pascal"), "function Add(a: Integer; b: Integer = 0): Integer;"
    )

    assert text == "function Add(a: Integer;\n             b: Integer = 0): Integer;"


def test_word_separator_keeps_spaces(parser, language_manager):
    """단어 구분자 (DEFAULT) 양쪽 공백 유지 테스트"""
    layout = PrototypeLayout.build(
        parser.parse("PROCEDURE P (p_id IN NUMBER DEFAULT 0, p_name VARCHAR2)", language_manager.from_name("SQL"))
    )

    assert layout.cells[0][ColumnType.DEFAULT_VALUE_SEPARATOR] == " DEFAULT "
    assert layout.cells[0][ColumnType.DEFAULT_VALUE] == "0,"


def test_layout_without_parameters(parser, language_manager):
    """파라미터 없는 배치 테스트"""
    plain = PrototypeLayout.build(parse_c(parser, language_manager, "int x;"))
    empty = PrototypeLayout.build(parse_c(parser, language_manager, "void F ()"))

    assert plain.render_text() == "int x;"
    assert not empty.has_parameters
    assert empty.before_parameters == "void F ()"
    assert empty.render_text() == "void F ()"
