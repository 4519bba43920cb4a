import pytest

from backend.translator import PLACEHOLDER_BODY, escape_identifier, extract_body_tokens, translate_body


def lines(text):
    result = translate_body(text.split())
    assert result.translated, result.reason
    return result.text.splitlines()


def reason(text):
    result = translate_body(text.split())
    assert not result.translated
    assert result.text == PLACEHOLDER_BODY
    return result.reason


def test_arrow_becomes_member_access():
    assert lines("{ return this -> x ; }") == ["return this.x;"]


def test_null_and_boolean_literals():
    assert lines("{ p = nullptr ; q = NULL ; ok = TRUE ; bad = FALSE ; }") == [
        "p = null;",
        "q = null;",
        "ok = true;",
        "bad = false;",
    ]


def test_functional_cast_becomes_prefix_cast():
    assert lines("{ return float ( i ) * 0.5F ; }") == ["return (float)(i) * 0.5F;"]


def test_static_cast_becomes_prefix_cast():
    assert lines("{ return static_cast < float > ( n ) ; }") == ["return (float)(n);"]


def test_deref_this_collapses_to_this():
    assert lines("{ x += v . x ; return ( * this ) ; }") == ["x += v.x;", "return (this);"]


def test_library_types_are_renamed_and_constructed_with_new():
    assert lines("{ return ( TSVector3D ( - x , - y , - z ) ) ; }") == ["return (new Vector3D(-x, -y, -z));"]


def test_local_declaration_keeps_type_without_new():
    assert lines("{ const TSVector3D v = TSVector3D ( x , y , 0.0F ) ; return v ; }") == [
        "Vector3D v = new Vector3D(x, y, 0.0F);",
        "return v;",
    ]


def test_fixed_width_types_in_declarations():
    assert lines("{ int32 n = 0 ; auto s = n ; return s ; }") == ["int n = 0;", "var s = n;", "return s;"]


def test_nested_blocks_are_indented():
    assert lines("{ if ( x > 0.0F ) { x = 0.0F ; } else { x = - x ; } return x ; }") == [
        "if (x > 0.0F) {",
        "    x = 0.0F;",
        "}",
        "else {",
        "    x = -x;",
        "}",
        "return x;",
    ]


def test_for_header_stays_on_one_line():
    assert lines("{ for ( int i = 0 ; i < 3 ; i ++ ) s += v [ i ] ; }") == ["for (int i = 0; i < 3; i++) s += v[i];"]


@pytest.mark.parametrize(
    "body,expected",
    [
        ("{ y = Dot ( - - a , b ) ; }", "y = Dot(- -a, b);"),
        ("{ return - - x ; }", "return - -x;"),
        ("{ return + + x ; }", "return + +x;"),
        ("{ x = a - - b ; }", "x = a - -b;"),
        ("{ x = - -- y ; }", "x = - --y;"),
    ],
)
def test_repeated_signs_stay_apart(body, expected):
    assert lines(body) == [expected]


def test_csharp_keywords_in_bodies_are_escaped():
    assert lines("{ out = v ; return in . x + base ; }") == ["@out = v;", "return @in.x + @base;"]


def test_escape_identifier():
    assert escape_identifier("ref") == "@ref"
    assert escape_identifier("scale") == "scale"


def test_trailing_artifacts_are_trimmed():
    assert lines("{ x = 1 ; ; if ( a ) { b = 1 ; } ; }") == ["x = 1;", "if (a) {", "    b = 1;", "}"]


def test_empty_body_translates_to_nothing():
    result = translate_body("{ }".split())
    assert result.translated
    assert result.text == ""


@pytest.mark.parametrize(
    "body,expected",
    [
        ("{ return * p ; }", "pointer dereference"),
        ("{ return Terathon :: Sqrt ( x ) ; }", "scope resolution"),
        ("{ float & r = x ; r = 1.0F ; }", "address-of or reference"),
        ("{ return sizeof ( x ) ; }", "sizeof"),
        ("{ TSVector3D v ( 1.0F , 0.0F , 0.0F ) ; return v ; }", "declaration without C# equivalent"),
        ("{ float a [ 3 ] ; }", "declaration without C# equivalent"),
        ("{ return bool ( flags ) ; }", "bool conversion"),
        ("{ unsigned n = 0 ; }", "unsigned integer declaration"),
        ("{ return static_cast < TSVector3D > ( v ) ; }", "static_cast to TSVector3D"),
    ],
)
def test_unsupported_constructs_become_placeholders(body, expected):
    assert reason(body) == expected


def test_missing_body_is_a_placeholder():
    assert reason("float Length ( ) const ;") == "no body"


def test_unbalanced_braces_are_a_placeholder():
    assert reason("{ if ( x ) { return 1 ; }") == "no body"


def test_body_extraction_matches_nested_braces():
    tokens = "float f ( ) { if ( a ) { b ( ) ; } return c ; } int g ;".split()
    assert extract_body_tokens(tokens) == "if ( a ) { b ( ) ; } return c ;".split()
