"""Token-level compression passes for generated JavaScript.

Every pass takes source text and returns source text. Passes work on the
token stream from ``lexer``, so string, template and regex literal contents
are never rewritten. Rewrites that need to know what a name is bound to are
only applied when a conservative scan shows the rewrite cannot change
behaviour; otherwise the pass leaves the code alone.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from ..errors import ReconstructionError
from ..models.fusion import PassStat
from .lexer import (
    BLOCK_COMMENT,
    IDENT,
    LINE_COMMENT,
    NUMBER,
    PUNCT,
    REGEX,
    STRING,
    TEMPLATE,
    WHITESPACE,
    Token,
    match_brackets,
    tokenize,
    untokenize,
)

logger = logging.getLogger(__name__)

Pass = Callable[[str], str]

ASSIGN_OPS = frozenset({
    "=", "+=", "-=", "*=", "/=", "%=", "**=", "<<=", ">>=", ">>>=",
    "&=", "|=", "^=", "&&=", "||=", "??=",
})
DECLARATORS = frozenset({"var", "let", "const"})
BLOCK_HEADERS = frozenset({"if", "for", "while", "with"})
STATEMENT_KEYWORDS = frozenset({"if", "for", "while", "with", "switch", "catch", "return", "typeof"})


def _sig_indices(tokens: Sequence[Token]) -> List[int]:
    return [i for i, t in enumerate(tokens) if not t.is_trivia]


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_$#\\" or ord(ch) > 127


# ---------------------------------------------------------------------------
# strip_comments
# ---------------------------------------------------------------------------

def strip_comments(code: str) -> str:
    out: List[Token] = []
    for tok in tokenize(code):
        if tok.kind == LINE_COMMENT:
            continue
        if tok.kind == BLOCK_COMMENT:
            out.append(Token(WHITESPACE, "\n" if "\n" in tok.text else " "))
            continue
        out.append(tok)
    return untokenize(out)


# ---------------------------------------------------------------------------
# collapse_whitespace
# ---------------------------------------------------------------------------

# A line break between these two groups may be a statement boundary.
_ASI_END_PUNCT = frozenset({")", "]", "}", "++", "--"})
_ASI_START_PUNCT = frozenset({"(", "[", "{", "+", "-", "++", "--", "/", "!", "~", "@"})
_VALUE_KINDS = (IDENT, NUMBER, STRING, TEMPLATE, REGEX)


def _may_end_statement(tok: Token) -> bool:
    return tok.kind in _VALUE_KINDS or tok.is_punct(*_ASI_END_PUNCT)


def _may_start_statement(tok: Token) -> bool:
    return tok.kind in _VALUE_KINDS or tok.is_punct(*_ASI_START_PUNCT)


def separator(prev: Token, nxt: Token, had_newline: bool) -> str:
    """Smallest whitespace that keeps ``prev`` and ``nxt`` apart."""
    if had_newline and _may_end_statement(prev) and _may_start_statement(nxt):
        return "\n"
    if prev.kind == LINE_COMMENT:
        return "\n"
    if had_newline and (prev.kind == BLOCK_COMMENT or nxt.kind in (LINE_COMMENT, BLOCK_COMMENT)):
        return "\n"
    a, b = prev.text[-1], nxt.text[0]
    if _is_word_char(b) and (_is_word_char(a) or prev.kind == REGEX):
        return " "
    if a == b and a in "+-/":
        return " "
    if prev.kind == NUMBER and b == ".":
        return " "
    if prev.is_punct("<") and nxt.text.startswith("!"):
        return " "
    if prev.text.endswith("-") and nxt.is_punct(">", ">=", ">>", ">>=", ">>>", ">>>="):
        return " "
    return ""


def collapse_whitespace(code: str) -> str:
    tokens = tokenize(code)
    out: List[Token] = []
    prev: Optional[Token] = None
    had_newline = False
    pending = False
    for tok in tokens:
        if tok.kind == WHITESPACE:
            pending = True
            had_newline = had_newline or "\n" in tok.text
            continue
        if tok.kind in (LINE_COMMENT, BLOCK_COMMENT):
            # strip_comments normally runs first; comments survive otherwise
            if pending and prev is not None:
                sep = separator(prev, tok, had_newline)
                if sep:
                    out.append(Token(WHITESPACE, sep))
            out.append(tok)
            prev = tok
            pending = had_newline = False
            continue
        if pending and prev is not None:
            sep = separator(prev, tok, had_newline)
            if sep:
                out.append(Token(WHITESPACE, sep))
        out.append(tok)
        prev = tok
        pending = had_newline = False
    return untokenize(out)


# ---------------------------------------------------------------------------
# normalize_punctuation
# ---------------------------------------------------------------------------

def _last_sig(out: List[Token], before: Optional[int] = None) -> Optional[int]:
    i = len(out) - 1 if before is None else before - 1
    while i >= 0:
        if not out[i].is_trivia:
            return i
        i -= 1
    return None


def _semicolon_removable(out: List[Token], idx: int, header_close: Set[int]) -> bool:
    """``out[idx]`` is a ``;`` directly before a ``}``."""
    prev = _last_sig(out, idx)
    if prev is None:
        return True
    if prev in header_close:
        # `if (x);` keeps its empty statement
        return False
    return not out[prev].is_word("else", "do")


def _trailing_comma(out: List[Token], idx: int) -> bool:
    before = _last_sig(out, idx)
    # keep holes like `[a,,]`
    return before is not None and not out[before].is_punct(",", "[", "{")


def normalize_punctuation(code: str) -> str:
    """Drop ``;`` before ``}`` and trailing commas in object/array literals."""
    tokens = tokenize(code)
    out: List[Token] = []
    # indices (in out) of `)` closing an if/for/while/with header
    header_close: Set[int] = set()
    paren_stack: List[bool] = []
    for tok in tokens:
        if tok.is_punct("("):
            p = _last_sig(out)
            paren_stack.append(p is not None and out[p].is_word(*BLOCK_HEADERS))
        elif tok.is_punct(")") and paren_stack:
            if paren_stack.pop():
                header_close.add(len(out))
        elif tok.is_punct("}", "]"):
            while True:
                p = _last_sig(out)
                if p is None:
                    break
                last = out[p]
                if tok.text == "}" and last.is_punct(";") and _semicolon_removable(out, p, header_close):
                    del out[p:]
                elif last.is_punct(",") and _trailing_comma(out, p):
                    del out[p:]
                else:
                    break
                header_close = {i for i in header_close if i < p}
        out.append(tok)
    return untokenize(out)


# ---------------------------------------------------------------------------
# advanced_compression
# ---------------------------------------------------------------------------

_DECIMAL = re.compile(r"^(\d*)(?:\.(\d*))?(?:[eE]([+-]?\d+))?$")


def shorten_number(text: str) -> str:
    """Shortest decimal spelling of a plain numeric literal, or ``text``."""
    m = _DECIMAL.match(text)
    if not m or "_" in text:
        return text
    int_part, frac, exp = m.group(1), m.group(2) or "", m.group(3)
    if len(int_part) > 1 and int_part.startswith("0") and "." not in text and not exp:
        # legacy octal / noctal
        return text
    exponent = int(exp) if exp else 0
    digits = (int_part + frac).lstrip("0")
    exponent -= len(frac)
    if not digits:
        return "0"
    stripped = digits.rstrip("0")
    exponent += len(digits) - len(stripped)
    digits = stripped

    candidates = []
    if exponent >= 0:
        candidates.append(digits + "0" * exponent)
        if exponent > 0:
            candidates.append(f"{digits}e{exponent}")
    else:
        point = len(digits) + exponent
        if point > 0:
            candidates.append(digits[:point] + "." + digits[point:])
        else:
            candidates.append("." + "0" * (-point) + digits)
        candidates.append(f"{digits}e{exponent}")
    best = min(candidates, key=len)
    return best if len(best) < len(text) else text


def _neighbours(sig: List[Token], k: int) -> Tuple[Optional[Token], Optional[Token]]:
    prev = sig[k - 1] if k > 0 else None
    nxt = sig[k + 1] if k + 1 < len(sig) else None
    return prev, nxt


def _is_property_position(prev: Optional[Token], nxt: Optional[Token]) -> bool:
    if prev is not None and prev.is_punct(".", "?."):
        return True
    # object keys and class members
    return nxt is not None and nxt.is_punct(":", "(") and prev is not None and prev.is_punct("{", ",")


def _param_list_ranges(tokens: List[Token]) -> List[Tuple[int, int]]:
    """Index ranges of parenthesised groups that declare parameters."""
    sig_idx = _sig_indices(tokens)
    sig = [tokens[i] for i in sig_idx]
    pairs = match_brackets(sig)
    ranges = []
    for k, tok in enumerate(sig):
        if not tok.is_punct("(") or k not in pairs:
            continue
        close = pairs[k]
        prev = sig[k - 1] if k > 0 else None
        after = sig[close + 1] if close + 1 < len(sig) else None
        is_params = False
        if after is not None and after.is_punct("=>"):
            is_params = True
        elif prev is not None and prev.is_word("function", "catch"):
            is_params = True
        elif prev is not None and k > 1 and sig[k - 2].is_word("function") and prev.kind == IDENT:
            is_params = True
        elif (
            after is not None and after.is_punct("{")
            and prev is not None and prev.kind == IDENT and prev.text not in STATEMENT_KEYWORDS
        ):
            # method definition
            is_params = True
        if is_params:
            ranges.append((sig_idx[k], sig_idx[close]))
    return ranges


def _in_ranges(i: int, ranges: List[Tuple[int, int]]) -> bool:
    return any(lo < i < hi for lo, hi in ranges)


def _binds_name(tokens: List[Token], name: str) -> bool:
    """True if ``name`` is declared or assigned anywhere in ``tokens``."""
    sig_idx = _sig_indices(tokens)
    sig = [tokens[i] for i in sig_idx]
    params = _param_list_ranges(tokens)
    for k, tok in enumerate(sig):
        if not tok.is_word(name):
            continue
        prev, nxt = _neighbours(sig, k)
        if prev is not None and prev.is_punct(".", "?."):
            continue
        if prev is not None and (prev.is_word("function", "class", *DECLARATORS) or prev.is_punct("++", "--", "...")):
            return True
        if nxt is not None and (nxt.is_punct("=>", "++", "--") or nxt.text in ASSIGN_OPS and nxt.kind == PUNCT):
            return True
        if _in_ranges(sig_idx[k], params):
            return True
    # `var a, undefined;` style declarations
    depth = 0
    in_decl = False
    for tok in sig:
        if tok.is_word(*DECLARATORS):
            in_decl, depth = True, 0
        elif in_decl:
            if tok.is_punct("(", "[", "{"):
                depth += 1
            elif tok.is_punct(")", "]", "}"):
                depth -= 1
                if depth < 0:
                    in_decl = False
            elif tok.is_punct(";") and depth == 0:
                in_decl = False
            elif tok.is_word(name):
                return True
    return False


def _fresh_name(tokens: Sequence[Token], base: str = "_l") -> str:
    used = {t.text for t in tokens if t.kind == IDENT}
    name, n = base, 0
    while name in used:
        n += 1
        name = f"{base}{n}"
    return name


CONSOLE_ALIAS_TEMPLATE = "const {name}=console.log.bind(console);"


def _console_log_sites(sig: List[Token]) -> List[int]:
    sites = []
    for k in range(len(sig) - 2):
        if sig[k].is_word("console") and sig[k + 1].is_punct(".") and sig[k + 2].is_word("log"):
            if k > 0 and sig[k - 1].is_punct(".", "?."):
                continue
            sites.append(k)
    return sites


def advanced_compression(code: str) -> str:
    """Literal shortening: numbers, booleans, ``undefined`` and ``console.log``."""
    tokens = tokenize(code)
    sig_idx = _sig_indices(tokens)
    sig = [tokens[i] for i in sig_idx]
    replace: Dict[int, str] = {}
    undefined_bound = _binds_name(tokens, "undefined")

    for k, tok in enumerate(sig):
        prev, nxt = _neighbours(sig, k)
        if tok.kind == NUMBER:
            if nxt is not None and nxt.is_punct("."):
                continue
            short = shorten_number(tok.text)
            if short != tok.text:
                replace[sig_idx[k]] = short
        elif tok.is_word("true", "false"):
            if _is_property_position(prev, nxt):
                continue
            if nxt is not None and nxt.is_punct(":", ".", "?.", "**", "===", "!==", "==", "!=", "(", "["):
                continue
            if prev is not None and prev.is_punct("===", "!==", "==", "!="):
                continue
            replace[sig_idx[k]] = "!0" if tok.text == "true" else "!1"
        elif tok.is_word("undefined") and not undefined_bound:
            if _is_property_position(prev, nxt):
                continue
            if nxt is not None and nxt.is_punct(":", ".", "?.", "**", "(", "["):
                continue
            replace[sig_idx[k]] = "void 0"

    # `void 0` glued to a following word needs a separator, e.g. `void 0in`
    out: List[Token] = []
    for i, tok in enumerate(tokens):
        text = replace.get(i, tok.text)
        glued = i in replace or (i - 1) in replace
        if glued and out and _is_word_char(out[-1].text[-1]) and _is_word_char(text[0]):
            out.append(Token(WHITESPACE, " "))
        out.append(Token(tok.kind, text))

    result = untokenize(out)
    return _alias_console_log(result)


def _alias_console_log(code: str) -> str:
    tokens = tokenize(code)
    sig_idx = _sig_indices(tokens)
    sig = [tokens[i] for i in sig_idx]
    sites = _console_log_sites(sig)
    if not sites or _binds_name(tokens, "console"):
        return code
    name = _fresh_name(tokens)
    decl = CONSOLE_ALIAS_TEMPLATE.format(name=name)
    saved = (len("console.log") - len(name)) * len(sites)
    if saved <= len(decl):
        return code

    drop: Set[int] = set()
    rename: Dict[int, str] = {}
    for k in sites:
        rename[sig_idx[k]] = name
        drop.update(range(sig_idx[k] + 1, sig_idx[k + 2] + 1))

    # the alias goes after a leading directive prologue
    insert_at = 0
    k = 0
    while k < len(sig) and sig[k].kind == STRING and k + 1 < len(sig) and sig[k + 1].is_punct(";"):
        insert_at = sig_idx[k + 1] + 1
        k += 2
    if k < len(sig) and sig[k].kind == STRING and insert_at == 0:
        # possible directive without a semicolon
        return code

    out: List[str] = []
    for i, tok in enumerate(tokens):
        if i == insert_at:
            out.append(decl)
        if i in drop:
            continue
        out.append(rename.get(i, tok.text))
    if insert_at >= len(tokens):
        out.append(decl)
    return "".join(out)


# ---------------------------------------------------------------------------
# intelligent_reformulation
# ---------------------------------------------------------------------------

ARROW_PREV = frozenset({"(", ",", "=", ":", "[", "?", "=>", "return"})
ARROW_NEXT = frozenset({",", ")", ";", "]", "}", ":"})
LEXICAL_WORDS = frozenset({"this", "arguments", "super", "yield", "await"})


def _next_sig(tokens: Sequence[Token], i: int) -> Optional[int]:
    j = i + 1
    while j < len(tokens):
        if not tokens[j].is_trivia:
            return j
        j += 1
    return None


def _uses_own_binding(body: Sequence[Token]) -> bool:
    body = [t for t in body if not t.is_trivia]
    for k, tok in enumerate(body):
        if tok.kind != IDENT:
            continue
        if tok.text in LEXICAL_WORDS:
            return True
        if tok.text == "new" and k + 2 < len(body) and body[k + 1].is_punct(".") and body[k + 2].is_word("target"):
            return True
    return False


def _join(tokens: Sequence[Token]) -> str:
    out: List[str] = []
    prev: Optional[Token] = None
    for tok in tokens:
        if tok.is_trivia:
            continue
        if prev is not None:
            out.append(separator(prev, tok, False))
        out.append(tok.text)
        prev = tok
    return "".join(out)


def _arrow_head(params: Sequence[Token]) -> str:
    sig = [t for t in params if not t.is_trivia]
    if len(sig) == 1 and sig[0].kind == IDENT:
        return sig[0].text + "=>"
    return "(" + _join(params) + ")=>"


def constructed_names(tokens: Sequence[Token]) -> Set[str]:
    """Names that may be used as constructors: `new a.B`, `extends B`, `B.prototype`."""
    sig = [t for t in tokens if not t.is_trivia]
    names: Set[str] = set()
    for k, tok in enumerate(sig):
        if tok.is_word("new", "extends"):
            j = k + 1
            while j < len(sig) and sig[j].kind == IDENT:
                names.add(sig[j].text)
                if j + 2 < len(sig) and sig[j + 1].is_punct(".", "?."):
                    j += 2
                else:
                    break
        elif tok.is_word("prototype") and k > 1 and sig[k - 1].is_punct(".") and sig[k - 2].kind == IDENT:
            names.add(sig[k - 2].text)
    return names


def functions_to_arrows(tokens: List[Token], constructed: Optional[Set[str]] = None) -> List[Token]:
    """Rewrite eligible anonymous function expressions as arrow functions.

    Eligible means: the function is in an expression position, its body and
    parameters never refer to ``this``, ``arguments``, ``super``, ``yield``,
    ``await`` or ``new.target``, and nothing calls or dereferences it directly.
    A function bound to a name that is used with ``new``, ``extends`` or
    ``.prototype`` is left alone, since arrows cannot be constructed.
    """
    if constructed is None:
        constructed = constructed_names(tokens)
    pairs = match_brackets(tokens)
    out: List[Token] = []
    i = 0
    while i < len(tokens):
        converted = _try_arrow(tokens, i, pairs, out, constructed)
        if converted is not None:
            new_tokens, i = converted
            out.extend(new_tokens)
            continue
        out.append(tokens[i])
        i += 1
    return out


def _try_arrow(tokens, i, pairs, out, constructed) -> Optional[Tuple[List[Token], int]]:
    if not tokens[i].is_word("function"):
        return None
    p = _last_sig(out)
    if p is None or out[p].text not in ARROW_PREV or out[p].kind not in (PUNCT, IDENT):
        return None
    if out[p].is_punct("=", ":"):
        q = _last_sig(out, p)
        if q is not None and out[q].kind in (IDENT, STRING) and out[q].text.strip("'\"") in constructed:
            return None
    open_paren = _next_sig(tokens, i)
    if open_paren is None or not tokens[open_paren].is_punct("(") or open_paren not in pairs:
        return None
    close_paren = pairs[open_paren]
    open_brace = _next_sig(tokens, close_paren)
    if open_brace is None or not tokens[open_brace].is_punct("{") or open_brace not in pairs:
        return None
    close_brace = pairs[open_brace]
    after = _next_sig(tokens, close_brace)
    if after is not None and not tokens[after].is_punct(*ARROW_NEXT):
        return None
    params = tokens[open_paren + 1:close_paren]
    body = tokens[open_brace + 1:close_brace]
    if _uses_own_binding(params) or _uses_own_binding(body):
        return None
    inner = functions_to_arrows(list(body), constructed)
    head = Token(PUNCT, _arrow_head(params))
    return [head, tokens[open_brace], *inner, tokens[close_brace]], close_brace + 1


# Tokens that can sit on either side of an equality operand without
# binding tighter than the comparison.
OPERAND_LEFT = frozenset({"(", ",", "=", "&&", "||", "??", "?", ":", "return", "[", "{", ";", "}"}) | ASSIGN_OPS
OPERAND_RIGHT = frozenset({")", ",", ";", "&&", "||", "??", "?", ":", "]", "}"})


def _bool_at(tokens: Sequence[Token], i: Optional[int]) -> Optional[Tuple[bool, int]]:
    """Boolean literal starting at ``i``: (value, index of its last token)."""
    if i is None or i >= len(tokens):
        return None
    tok = tokens[i]
    if tok.is_word("true"):
        return True, i
    if tok.is_word("false"):
        return False, i
    if tok.is_punct("!"):
        j = _next_sig(tokens, i)
        if j is not None and tokens[j].kind == NUMBER and tokens[j].text in ("0", "1"):
            return tokens[j].text == "0", j
    return None


def _ends_expression(sig: Sequence[Token], k: Optional[int]) -> bool:
    return k is None or k >= len(sig) or sig[k].is_punct(";", ",", ")", "}", "]")


def _in_destructuring(sig: Sequence[Token], k: int, pairs: dict) -> bool:
    for i in range(k):
        if sig[i].is_punct("{", "[") and pairs.get(i, -1) > k:
            after = pairs[i] + 1
            if after < len(sig) and sig[after].is_punct("="):
                return True
    return False


def _calls_eval(sig: Sequence[Token]) -> bool:
    # eval can assign any binding in scope from a string
    return any(
        tok.is_word("eval") and not (k > 0 and sig[k - 1].is_punct(".", "?."))
        for k, tok in enumerate(sig)
    )


def boolean_only_names(tokens: Sequence[Token]) -> Set[str]:
    """Names declared once with let/const and only ever assigned boolean literals."""
    sig = [t for t in tokens if not t.is_trivia]
    declared: Dict[str, int] = {}
    rejected: Set[str] = set()
    for k, tok in enumerate(sig):
        if tok.kind == IDENT and k > 0 and sig[k - 1].is_word(*DECLARATORS):
            declared[tok.text] = declared.get(tok.text, 0) + 1
            if sig[k - 1].text == "var":
                rejected.add(tok.text)
    candidates = {n for n, c in declared.items() if c == 1} - rejected
    if not candidates or _calls_eval(sig):
        return set()

    params = _param_list_ranges(sig)
    pairs = match_brackets(sig)
    for k, tok in enumerate(sig):
        if tok.kind != IDENT or tok.text not in candidates:
            continue
        prev, nxt = _neighbours(sig, k)
        if prev is not None and prev.is_punct(".", "?."):
            continue
        name = tok.text
        if prev is not None and (prev.is_word("function", "class", "catch") or prev.is_punct("++", "--", "...")):
            rejected.add(name)
        elif nxt is not None and nxt.is_punct("++", "--", "=>"):
            rejected.add(name)
        elif nxt is not None and nxt.kind == PUNCT and nxt.text in ASSIGN_OPS:
            value = _bool_at(sig, k + 2) if nxt.text == "=" else None
            if value is None or not _ends_expression(sig, value[1] + 1):
                rejected.add(name)
        elif prev is not None and prev.is_word(*DECLARATORS):
            # declared without an initializer
            rejected.add(name)
        elif nxt is not None and nxt.is_word("in", "of"):
            rejected.add(name)
        elif _in_ranges(k, params) or _in_destructuring(sig, k, pairs):
            rejected.add(name)
    return candidates - rejected


def elide_boolean_comparisons(tokens: List[Token], names: Optional[Set[str]] = None) -> List[Token]:
    """``x === true`` -> ``x`` and ``x === false`` -> ``!x`` for boolean-only ``x``."""
    if names is None:
        names = boolean_only_names(tokens)
    if not names:
        return tokens
    out: List[Token] = []
    i = 0
    while i < len(tokens):
        rewritten = _try_elide(tokens, i, names, out)
        if rewritten is not None:
            new_tokens, i = rewritten
            out.extend(new_tokens)
            continue
        out.append(tokens[i])
        i += 1
    return out


def _operand_end(tokens: Sequence[Token], last: int) -> bool:
    after = _next_sig(tokens, last)
    return after is None or tokens[after].text in OPERAND_RIGHT


def _try_elide(tokens, i, names, out) -> Optional[Tuple[List[Token], int]]:
    tok = tokens[i]
    if tok.is_trivia:
        return None
    p = _last_sig(out)
    if p is not None and out[p].text not in OPERAND_LEFT:
        return None
    # name OP literal
    if tok.kind == IDENT and tok.text in names:
        op = _next_sig(tokens, i)
        if op is not None and tokens[op].is_punct("===", "!=="):
            lit = _bool_at(tokens, _next_sig(tokens, op))
            if lit is not None and _operand_end(tokens, lit[1]):
                return _elided(tok, tokens[op].text, lit[0]), lit[1] + 1
        return None
    # literal OP name
    lit = _bool_at(tokens, i)
    if lit is None:
        return None
    op = _next_sig(tokens, lit[1])
    if op is None or not tokens[op].is_punct("===", "!=="):
        return None
    name = _next_sig(tokens, op)
    if name is None or tokens[name].kind != IDENT or tokens[name].text not in names:
        return None
    if not _operand_end(tokens, name):
        return None
    return _elided(tokens[name], tokens[op].text, lit[0]), name + 1


def _elided(name: Token, op: str, literal: bool) -> List[Token]:
    positive = (op == "===") == literal
    return [name] if positive else [Token(PUNCT, "!"), name]


def intelligent_reformulation(code: str) -> str:
    """Arrow functions and boolean comparison elision."""
    tokens = tokenize(code)
    # arrow heads fold parameters into one token, so scan bindings first
    names = boolean_only_names(tokens)
    tokens = functions_to_arrows(tokens)
    tokens = elide_boolean_comparisons(tokens, names)
    return untokenize(tokens)


# ---------------------------------------------------------------------------
# pipeline
# ---------------------------------------------------------------------------

NORMALIZE_PASSES: List[Tuple[str, Pass]] = [
    ("strip_comments", strip_comments),
    ("collapse_whitespace", collapse_whitespace),
    ("normalize_punctuation", normalize_punctuation),
]

COMPRESSION_PASSES: List[Tuple[str, Pass]] = NORMALIZE_PASSES + [
    ("advanced_compression", advanced_compression),
    ("intelligent_reformulation", intelligent_reformulation),
]


def normalize(code: str) -> str:
    for _, fn in NORMALIZE_PASSES:
        code = fn(code)
    return code


def run_passes(code: str, passes: Sequence[Tuple[str, Pass]] = COMPRESSION_PASSES) -> Tuple[str, List[PassStat]]:
    stats: List[PassStat] = []
    for name, fn in passes:
        before = len(code)
        code = fn(code)
        if len(code) > before:
            raise ReconstructionError(f"Compression pass {name} grew the code ({before} -> {len(code)} chars)")
        stats.append(PassStat(name=name, size=len(code)))
        logger.debug("%s: %d -> %d chars", name, before, len(code))
    return code, stats


def compress(code: str) -> str:
    return run_passes(code)[0]
