import pytest

from effect_fusion.reconstruction.lexer import (
    BLOCK_COMMENT,
    IDENT,
    LINE_COMMENT,
    NUMBER,
    PUNCT,
    REGEX,
    STRING,
    TEMPLATE,
    match_brackets,
    significant,
    tokenize,
    untokenize,
)

SAMPLES = [
    "",
    "const a = 1;",
    "let s = 'it\\'s'; // comment\n/* block */ x = s;",
    "const t = `a ${ {b: `c${d}`}.b } e`;",
    "if (a / b > 2) x = /[/]+/gi.test(y);",
    "const bad = 'unterminated\nnext();",
    "a?.b ?? c?.5:1",
    "/* open comment",
    "x = 1_000 + 0xFFn + .5e-3;",
    "emoji = '✨'; été = 1;",
]


@pytest.mark.parametrize("source", SAMPLES)
def test_round_trip(source):
    assert untokenize(tokenize(source)) == source


def _kinds(source):
    return [(t.kind, t.text) for t in significant(tokenize(source))]


def test_division_is_not_regex():
    kinds = _kinds("a / b / c")
    assert (PUNCT, "/") in kinds
    assert not any(k == REGEX for k, _ in kinds)


def test_regex_after_operator_and_keyword():
    assert (REGEX, "/ab+c/g") in _kinds("x = /ab+c/g.test(s)")
    assert (REGEX, "/x/") in _kinds("return /x/")
    assert (REGEX, "/[/]+/gi") in _kinds("if (a) y = /[/]+/gi")


def test_comments():
    tokens = tokenize("a // line\n/* block */ b")
    kinds = [t.kind for t in tokens]
    assert LINE_COMMENT in kinds
    assert BLOCK_COMMENT in kinds
    assert [t.text for t in significant(tokens)] == ["a", "b"]


def test_template_with_nested_substitution_is_one_token():
    source = "`a ${ {b: `c${d}`}.b } e`"
    tokens = tokenize(source)
    assert len(tokens) == 1
    assert tokens[0].kind == TEMPLATE


def test_strings_keep_comment_markers():
    tokens = significant(tokenize("s = '// not /* a */ comment'"))
    assert tokens[-1].kind == STRING
    assert tokens[-1].text == "'// not /* a */ comment'"


def test_unterminated_string_stops_at_newline():
    tokens = significant(tokenize("'abc\nfoo"))
    assert tokens[0] == (STRING, "'abc")
    assert tokens[1] == (IDENT, "foo")


def test_numbers_and_optional_chaining():
    kinds = _kinds("a?.b; c?.5:1; .5e-3")
    assert (PUNCT, "?.") in kinds
    assert (PUNCT, "?") in kinds
    assert (NUMBER, ".5") in kinds
    assert (NUMBER, ".5e-3") in kinds


def test_match_brackets():
    tokens = significant(tokenize("f(a[0], {b: 1})"))
    pairs = match_brackets(tokens)
    texts = [t.text for t in tokens]
    open_paren = texts.index("(")
    assert tokens[pairs[open_paren]].text == ")"
    assert pairs[pairs[open_paren]] == open_paren
    open_brace = texts.index("{")
    assert tokens[pairs[open_brace]].text == "}"


def test_regex_after_statement_head():
    assert (REGEX, "/a  +  b/") in _kinds("if (s) /a  +  b/.test(x)")
    assert (REGEX, "/re/g") in _kinds("while (f(x)) /re/g.exec(y)")
    assert (REGEX, "/x/") in _kinds("for (;;) /x/.test(s)")


def test_division_after_plain_parens():
    for source in ("x = (a) / 2 / b", "obj.if(a) / 2", "f(if_) / 2 / g"):
        assert not any(k == REGEX for k, _ in _kinds(source)), source


def test_statement_head_inside_template_does_not_leak():
    kinds = _kinds("`${ (a) / 2 }` / b")
    assert kinds[0][0] == TEMPLATE
    assert (PUNCT, "/") in kinds
