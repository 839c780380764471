"""A small JavaScript tokenizer for the compression passes.

It only needs to know where strings, template literals, regular expression
literals and comments start and end so that later passes never touch their
contents. It does not build a tree and accepts any input: characters it does
not recognise become ``OTHER`` tokens, and unterminated literals run to the
end of the line (strings, regexes) or the end of the input (comments,
templates). Joining the token texts always reproduces the input exactly.
"""
from __future__ import annotations

import re
from typing import Iterable, List, NamedTuple, Optional

WHITESPACE = "whitespace"
LINE_COMMENT = "line_comment"
BLOCK_COMMENT = "block_comment"
STRING = "string"
TEMPLATE = "template"
REGEX = "regex"
NUMBER = "number"
IDENT = "ident"
PUNCT = "punct"
OTHER = "other"

TRIVIA = (WHITESPACE, LINE_COMMENT, BLOCK_COMMENT)


class Token(NamedTuple):
    kind: str
    text: str

    @property
    def is_trivia(self) -> bool:
        return self.kind in TRIVIA

    def is_punct(self, *texts: str) -> bool:
        return self.kind == PUNCT and (not texts or self.text in texts)

    def is_word(self, *texts: str) -> bool:
        return self.kind == IDENT and (not texts or self.text in texts)


# Longest first so the scanner can take the first prefix that matches.
PUNCTUATORS = sorted(
    [
        ">>>=", "...", "===", "!==", "**=", "<<=", ">>=", ">>>", "&&=", "||=", "??=",
        "=>", "==", "!=", "<=", ">=", "&&", "||", "??", "?.", "++", "--",
        "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=", "**", "<<", ">>",
        "{", "}", "(", ")", "[", "]", ";", ",", "<", ">", "+", "-", "*", "/",
        "%", "&", "|", "^", "!", "~", "?", ":", "=", ".", "@",
    ],
    key=len,
    reverse=True,
)

# After these keywords a slash starts a regular expression, not a division.
REGEX_KEYWORDS = frozenset({
    "return", "typeof", "instanceof", "in", "of", "new", "delete", "void",
    "throw", "case", "do", "else", "yield", "await",
})
# After these punctuators a slash is a division.
DIVISION_PUNCT = frozenset({")", "]", "}", "++", "--"})
# A `)` closing the head of one of these statements ends an expression, so a
# slash right after it starts a regular expression: `if (x) /re/.test(y)`.
STATEMENT_HEADERS = frozenset({"if", "for", "while", "with"})

_NUMBER = re.compile(
    r"0[xX][0-9a-fA-F_]+n?"
    r"|0[oO][0-7_]+n?"
    r"|0[bB][01_]+n?"
    r"|(?:\d[\d_]*(?:\.[\d_]*)?|\.\d[\d_]*)(?:[eE][+-]?\d[\d_]*)?n?"
)
_IDENT = re.compile(r"#?(?:[^\W\d]|\$)(?:\w|\$)*")
_WHITESPACE = re.compile(r"\s+")
_QUOTES = "'\""


def _regex_allowed(prev: Optional[Token]) -> bool:
    if prev is None:
        return True
    if prev.kind == PUNCT:
        return prev.text not in DIVISION_PUNCT
    if prev.kind == IDENT:
        return prev.text in REGEX_KEYWORDS
    return False


class Lexer:
    def __init__(self, source: str):
        self.src = source
        self.pos = 0
        self.prev: Optional[Token] = None
        # one entry per open `(`: does it open a statement head?
        self.parens: List[bool] = []
        self.after_header = False
        # `obj.if(...)` is a call, not a statement head
        self.prev_is_member = False

    def tokens(self) -> List[Token]:
        out: List[Token] = []
        while self.pos < len(self.src):
            out.append(self._next())
        return out

    # -- scanning -----------------------------------------------------------

    def _emit(self, kind: str, start: int) -> Token:
        tok = Token(kind, self.src[start:self.pos])
        if kind not in TRIVIA:
            self._track_parens(tok)
            self.prev = tok
        return tok

    def _track_parens(self, tok: Token) -> None:
        prev = self.prev
        self.after_header = False
        if tok.is_punct("("):
            opens_header = prev is not None and prev.is_word(*STATEMENT_HEADERS) and not self.prev_is_member
            self.parens.append(opens_header)
        elif tok.is_punct(")") and self.parens:
            self.after_header = self.parens.pop()
        self.prev_is_member = prev is not None and prev.is_punct(".", "?.")

    def _next(self) -> Token:
        src, start = self.src, self.pos
        ch = src[start]

        m = _WHITESPACE.match(src, start)
        if m:
            self.pos = m.end()
            return self._emit(WHITESPACE, start)

        if src.startswith("//", start):
            end = src.find("\n", start)
            self.pos = len(src) if end < 0 else end
            return self._emit(LINE_COMMENT, start)

        if src.startswith("/*", start):
            end = src.find("*/", start + 2)
            self.pos = len(src) if end < 0 else end + 2
            return self._emit(BLOCK_COMMENT, start)

        if ch in _QUOTES:
            self.pos = self._scan_string(start, ch)
            return self._emit(STRING, start)

        if ch == "`":
            self._scan_template()
            return self._emit(TEMPLATE, start)

        if ch == "/" and (self.after_header or _regex_allowed(self.prev)):
            end = self._scan_regex(start)
            if end is not None:
                self.pos = end
                return self._emit(REGEX, start)

        if ch.isdigit() or (ch == "." and start + 1 < len(src) and src[start + 1].isdigit()):
            m = _NUMBER.match(src, start)
            if m:
                self.pos = m.end()
                return self._emit(NUMBER, start)

        m = _IDENT.match(src, start)
        if m:
            self.pos = m.end()
            return self._emit(IDENT, start)

        for p in PUNCTUATORS:
            if src.startswith(p, start):
                # `a?.5:b` is a conditional, not optional chaining
                if p == "?." and start + 2 < len(src) and src[start + 2].isdigit():
                    continue
                self.pos = start + len(p)
                return self._emit(PUNCT, start)

        self.pos = start + 1
        return self._emit(OTHER, start)

    def _scan_string(self, start: int, quote: str) -> int:
        src, i = self.src, start + 1
        while i < len(src):
            c = src[i]
            if c == "\\":
                i += 2
                continue
            if c == quote:
                return i + 1
            if c == "\n":
                return i
            i += 1
        return len(src)

    def _scan_template(self) -> None:
        src = self.src
        self.pos += 1
        while self.pos < len(src):
            c = src[self.pos]
            if c == "\\":
                self.pos += 2
            elif c == "`":
                self.pos += 1
                return
            elif src.startswith("${", self.pos):
                self.pos += 2
                self._skip_substitution()
            else:
                self.pos += 1
        self.pos = min(self.pos, len(src))

    def _skip_substitution(self) -> None:
        # Lex the embedded expression with the same rules until its closing brace.
        saved = (self.prev, self.parens, self.after_header, self.prev_is_member)
        self.prev, self.parens, self.after_header, self.prev_is_member = None, [], False, False
        depth = 0
        while self.pos < len(self.src):
            tok = self._next()
            if tok.is_punct("{"):
                depth += 1
            elif tok.is_punct("}"):
                if depth == 0:
                    break
                depth -= 1
        self.prev, self.parens, self.after_header, self.prev_is_member = saved

    def _scan_regex(self, start: int) -> Optional[int]:
        src, i = self.src, start + 1
        in_class = False
        if i < len(src) and src[i] in "*/":
            return None
        while i < len(src):
            c = src[i]
            if c == "\n":
                return None
            if c == "\\":
                i += 2
                continue
            if c == "[":
                in_class = True
            elif c == "]":
                in_class = False
            elif c == "/" and not in_class:
                i += 1
                while i < len(src) and (src[i].isalnum() or src[i] in "_$"):
                    i += 1
                return i
            i += 1
        return None


def tokenize(source: str) -> List[Token]:
    return Lexer(source).tokens()


def untokenize(tokens: Iterable[Token]) -> str:
    return "".join(t.text for t in tokens)


def significant(tokens: Iterable[Token]) -> List[Token]:
    return [t for t in tokens if not t.is_trivia]


def match_brackets(tokens: List[Token]) -> dict:
    """Map the index of every opening ``(``, ``[`` or ``{`` to its closer and back.

    Unbalanced brackets are left out of the map.
    """
    pairs = {"(": ")", "[": "]", "{": "}"}
    stack: List[int] = []
    result = {}
    for i, tok in enumerate(tokens):
        if tok.kind != PUNCT:
            continue
        if tok.text in pairs:
            stack.append(i)
        elif tok.text in (")", "]", "}"):
            if stack and pairs[tokens[stack[-1]].text] == tok.text:
                opener = stack.pop()
                result[opener] = i
                result[i] = opener
    return result
