"""
Composable predicates.

The same predicate object is used twice during a lookup: translated for the
backend (`to_sql`) when the combined fetch runs, then evaluated in-process
(`evaluate`) over the rows that came back.
"""
import operator
import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from .errors import InvalidArgument, UntranslatablePredicate

_IDENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_OPS: dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}

_SQL_OPS = {"==": "=", "!=": "<>", "<": "<", "<=": "<=", ">": ">", ">=": ">="}


def check_identifier(name: str) -> str:
    if not isinstance(name, str) or not _IDENT.match(name):
        raise InvalidArgument(f"Invalid field name: {name!r}")
    return name


def quote_identifier(name: str) -> str:
    return '"%s"' % check_identifier(name)


def read_field(item, name: str):
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _truth(value) -> bool | None:
    return None if value is None else bool(value)


def _number(text: str):
    try:
        return int(text)
    except ValueError:
        return float(text)


def _coerce(left, right):
    """Compare a number against a numeric-looking string as numbers, like SQLite's numeric affinity."""
    if isinstance(left, bool) or isinstance(right, bool):
        return left, right
    try:
        if isinstance(left, (int, float)) and isinstance(right, str):
            return left, _number(right.strip())
        if isinstance(left, str) and isinstance(right, (int, float)):
            return _number(left.strip()), right
    except ValueError:
        pass
    return left, right


class Predicate:
    """
    Base predicate.

    `evaluate` uses three-valued logic: True, False, or None for unknown
    (a comparison against a missing/NULL field). Calling a predicate maps
    unknown to False, the same way a SQL WHERE clause drops NULL rows.
    """

    name: str = "Predicate"

    def __call__(self, item) -> bool:
        return _truth(self.evaluate(item)) is True

    def evaluate(self, item) -> bool | None:
        raise NotImplementedError

    def to_sql(self) -> tuple[str, list]:
        raise UntranslatablePredicate(self)

    def describe(self) -> str:
        return self.name

    def __or__(self, other) -> "Or":
        return Or(self, as_predicate(other))

    def __ror__(self, other) -> "Or":
        return Or(as_predicate(other), self)

    def __and__(self, other) -> "And":
        return And(self, as_predicate(other))

    def __rand__(self, other) -> "And":
        return And(as_predicate(other), self)

    def __invert__(self) -> "Not":
        return Not(self)

    def __repr__(self) -> str:
        return self.describe()


class Compare(Predicate):
    def __init__(self, field: str, op: str, value):
        if op not in _OPS:
            raise InvalidArgument(f"Unknown comparison operator: {op!r}")
        self.field = check_identifier(field)
        self.op = op
        self.value = value
        self.name = "Compare"

    def evaluate(self, item) -> bool | None:
        left = read_field(item, self.field)
        if self.value is None:
            if self.op == "==":
                return left is None
            if self.op == "!=":
                return left is not None
            return False
        if left is None:
            return None
        left, right = _coerce(left, self.value)
        try:
            return bool(_OPS[self.op](left, right))
        except TypeError:
            return False

    def to_sql(self) -> tuple[str, list]:
        column = quote_identifier(self.field)
        if self.value is None:
            match self.op:
                case "==":
                    return f"{column} IS NULL", []
                case "!=":
                    return f"{column} IS NOT NULL", []
                case _:
                    return "0", []
        return f"{column} {_SQL_OPS[self.op]} ?", [self.value]

    def describe(self) -> str:
        return f"{self.field} {self.op} {self.value!r}"


class In(Predicate):
    def __init__(self, field: str, values: Iterable):
        self.field = check_identifier(field)
        self.values = [v for v in values if v is not None]
        self.name = "In"

    def evaluate(self, item) -> bool | None:
        if not self.values:
            return False
        left = read_field(item, self.field)
        if left is None:
            return None
        return any(operator.eq(*_coerce(left, v)) for v in self.values)

    def to_sql(self) -> tuple[str, list]:
        if not self.values:
            return "0", []
        marks = ", ".join("?" for _ in self.values)
        return f"{quote_identifier(self.field)} IN ({marks})", list(self.values)

    def describe(self) -> str:
        return f"{self.field} in {tuple(self.values)!r}"


class Or(Predicate):
    def __init__(self, left: Predicate, right: Predicate):
        self.left = left
        self.right = right
        self.name = "Or"

    def evaluate(self, item) -> bool | None:
        left = _truth(self.left.evaluate(item))
        if left is True:
            return True
        right = _truth(self.right.evaluate(item))
        if right is True:
            return True
        if left is None or right is None:
            return None
        return False

    def to_sql(self) -> tuple[str, list]:
        lsql, lparams = self.left.to_sql()
        rsql, rparams = self.right.to_sql()
        return f"({lsql}) OR ({rsql})", lparams + rparams

    def describe(self) -> str:
        return f"({self.left.describe()} or {self.right.describe()})"


class And(Predicate):
    def __init__(self, left: Predicate, right: Predicate):
        self.left = left
        self.right = right
        self.name = "And"

    def evaluate(self, item) -> bool | None:
        left = _truth(self.left.evaluate(item))
        if left is False:
            return False
        right = _truth(self.right.evaluate(item))
        if right is False:
            return False
        if left is None or right is None:
            return None
        return True

    def to_sql(self) -> tuple[str, list]:
        lsql, lparams = self.left.to_sql()
        rsql, rparams = self.right.to_sql()
        return f"({lsql}) AND ({rsql})", lparams + rparams

    def describe(self) -> str:
        return f"({self.left.describe()} and {self.right.describe()})"


class Not(Predicate):
    def __init__(self, inner: Predicate):
        self.inner = inner
        self.name = "Not"

    def evaluate(self, item) -> bool | None:
        inner = _truth(self.inner.evaluate(item))
        return None if inner is None else not inner

    def to_sql(self) -> tuple[str, list]:
        sql, params = self.inner.to_sql()
        return f"NOT ({sql})", params

    def describe(self) -> str:
        return f"not {self.inner.describe()}"


class Where(Predicate):
    """Wrap a plain callable. Evaluates in-process only; backends cannot translate it."""

    def __init__(self, fn: Callable[[Any], bool], name: str | None = None):
        if not callable(fn):
            raise InvalidArgument(f"Where expects a callable, got {type(fn).__name__}")
        self.fn = fn
        self.name = name or getattr(fn, "__name__", type(fn).__name__)

    def evaluate(self, item) -> bool:
        return bool(self.fn(item))

    def describe(self) -> str:
        return f"where({self.name})"


class Field:
    """Build comparisons against a named field: `F("active") == True`."""

    def __init__(self, name: str):
        self.name = check_identifier(name)

    def __eq__(self, value) -> Compare:  # type: ignore[override]
        return Compare(self.name, "==", value)

    def __ne__(self, value) -> Compare:  # type: ignore[override]
        return Compare(self.name, "!=", value)

    def __lt__(self, value) -> Compare:
        return Compare(self.name, "<", value)

    def __le__(self, value) -> Compare:
        return Compare(self.name, "<=", value)

    def __gt__(self, value) -> Compare:
        return Compare(self.name, ">", value)

    def __ge__(self, value) -> Compare:
        return Compare(self.name, ">=", value)

    __hash__ = None  # type: ignore[assignment]

    def isin(self, values: Iterable) -> In:
        return In(self.name, values)

    def is_null(self) -> Compare:
        return Compare(self.name, "==", None)

    def not_null(self) -> Compare:
        return Compare(self.name, "!=", None)

    def __repr__(self) -> str:
        return f"F({self.name!r})"


F = Field


def as_predicate(obj) -> Predicate:
    if obj is None:
        raise InvalidArgument("Predicate is required, got None")
    if isinstance(obj, Predicate):
        return obj
    if isinstance(obj, Field):
        raise InvalidArgument(f"{obj!r} is a field, not a predicate; compare it first")
    if callable(obj):
        return Where(obj)
    raise InvalidArgument(
        f"Expected a Predicate or callable, got {type(obj).__name__}"
    )
