"""
Parse textual filters such as `active == true && id == 99` into predicates.

Grammar (keywords are case-insensitive):

    expr    := and ( ("or" | "||") and )*
    and     := unary ( ("and" | "&&") unary )*
    unary   := ("not" | "!") unary | atom
    atom    := "(" expr ")"
             | IDENT OP literal
             | IDENT "in" "(" literal ("," literal)* ")"
             | IDENT "is" ["not"] "null"
    OP      := "==" | "=" | "!=" | "<" | "<=" | ">" | ">="
    literal := number | 'string' | "string" | true | false | null
"""
import re
from dataclasses import dataclass

from .errors import ExpressionError
from .predicates import Compare, In, Predicate

_TOKEN = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<number>-?\d+(?:\.\d+)?(?:[eE][-+]?\d+)?)
  | (?P<string>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
  | (?P<op>==|!=|<=|>=|&&|\|\||[=<>!(),])
  | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
    """,
    re.VERBOSE,
)

_KEYWORDS = {"and", "or", "not", "in", "is", "null", "true", "false"}
_LITERALS = {"true": True, "false": False, "null": None}

MAX_DEPTH = 64


@dataclass
class Token:
    kind: str
    value: str
    pos: int


def tokenize(text: str) -> list[Token]:
    tokens: list[Token] = []
    pos = 0
    while pos < len(text):
        m = _TOKEN.match(text, pos)
        if not m:
            raise ExpressionError(f"Unexpected character {text[pos]!r}", text, pos)
        kind = m.lastgroup
        value = m.group()
        if kind == "ident" and value.lower() in _KEYWORDS:
            kind, value = "keyword", value.lower()
        if kind != "ws":
            tokens.append(Token(kind, value, pos))
        pos = m.end()
    tokens.append(Token("end", "", len(text)))
    return tokens


class Parser:
    def __init__(self, text: str):
        self.text = text
        self.tokens = tokenize(text)
        self.i = 0
        self.depth = 0

    def parse(self) -> Predicate:
        if self._peek().kind == "end":
            raise ExpressionError("Empty expression", self.text, 0)
        pred = self._or()
        tok = self._peek()
        if tok.kind != "end":
            raise ExpressionError(f"Unexpected {tok.value!r}", self.text, tok.pos)
        return pred

    # ---------- grammar ----------
    def _or(self) -> Predicate:
        pred = self._and()
        while self._accept("keyword", "or") or self._accept("op", "||"):
            pred = pred | self._and()
        return pred

    def _and(self) -> Predicate:
        pred = self._unary()
        while self._accept("keyword", "and") or self._accept("op", "&&"):
            pred = pred & self._unary()
        return pred

    def _unary(self) -> Predicate:
        self.depth += 1
        if self.depth > MAX_DEPTH:
            raise ExpressionError(
                f"Expression nested deeper than {MAX_DEPTH}", self.text, self._peek().pos
            )
        try:
            if self._accept("keyword", "not") or self._accept("op", "!"):
                return ~self._unary()
            return self._atom()
        finally:
            self.depth -= 1

    def _atom(self) -> Predicate:
        if self._accept("op", "("):
            pred = self._or()
            self._expect("op", ")")
            return pred

        field = self._expect("ident").value

        if self._accept("keyword", "in"):
            self._expect("op", "(")
            values = [self._literal()]
            while self._accept("op", ","):
                values.append(self._literal())
            self._expect("op", ")")
            return In(field, values)

        if self._accept("keyword", "is"):
            negate = bool(self._accept("keyword", "not"))
            self._expect("keyword", "null")
            return Compare(field, "!=" if negate else "==", None)

        tok = self._peek()
        if tok.kind == "op" and tok.value in ("==", "=", "!=", "<", "<=", ">", ">="):
            self.i += 1
            op = "==" if tok.value == "=" else tok.value
            return Compare(field, op, self._literal())
        raise ExpressionError(
            f"Expected comparison after {field!r}", self.text, tok.pos
        )

    def _literal(self):
        tok = self._peek()
        self.i += 1
        match tok.kind:
            case "number":
                if re.fullmatch(r"-?\d+", tok.value):
                    return int(tok.value)
                return float(tok.value)
            case "string":
                return re.sub(r"\\(.)", r"\1", tok.value[1:-1])
            case "keyword" if tok.value in _LITERALS:
                return _LITERALS[tok.value]
        raise ExpressionError(
            f"Expected a literal, got {tok.value or 'end of input'!r}",
            self.text,
            tok.pos,
        )

    # ---------- token helpers ----------
    def _peek(self) -> Token:
        return self.tokens[self.i]

    def _accept(self, kind: str, value: str | None = None) -> Token | None:
        tok = self._peek()
        if tok.kind == kind and (value is None or tok.value == value):
            self.i += 1
            return tok
        return None

    def _expect(self, kind: str, value: str | None = None) -> Token:
        tok = self._accept(kind, value)
        if tok is None:
            got = self._peek()
            want = value or kind
            raise ExpressionError(
                f"Expected {want!r}, got {got.value or 'end of input'!r}",
                self.text,
                got.pos,
            )
        return tok


def parse(text: str) -> Predicate:
    if text is None:
        raise ExpressionError("Expression is required")
    return Parser(text).parse()
