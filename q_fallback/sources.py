import sqlite3
from collections.abc import Iterable, Sequence
from pathlib import Path

from .errors import InvalidArgument
from .predicates import Predicate, check_identifier, quote_identifier


class Source:
    name: str = "Source"

    def fetch(self, predicate: Predicate) -> list:
        raise NotImplementedError


class ListSource(Source):
    """In-memory rows, filtered in-process in their stored order."""

    def __init__(self, items: Iterable, name="ListSource"):
        if items is None:
            raise InvalidArgument("ListSource requires items, got None")
        # Sequences are kept by reference so callers can mutate them between lookups.
        self.items = items if isinstance(items, Sequence) else list(items)
        self.name = name

    def fetch(self, predicate: Predicate) -> list:
        return [item for item in self.items if predicate(item)]

    def __len__(self) -> int:
        return len(self.items)


class SqliteSource(Source):
    """
    A single SQLite table.

    Each fetch issues exactly one `SELECT * ... WHERE <predicate>` and returns
    rows as dicts in the order SQLite yields them. Pass `order_by` when the
    caller needs a deterministic "first"; no ordering is added otherwise.
    """

    def __init__(
        self,
        conn: sqlite3.Connection | str | Path,
        table: str,
        order_by: str | Sequence[str] | None = None,
        name: str | None = None,
    ):
        self.table = check_identifier(table)
        self.order_by = self._order_clause(order_by)
        if isinstance(conn, sqlite3.Connection):
            self.conn = conn
            self._owns_conn = False
        else:
            path = Path(conn)
            if not path.exists():
                raise InvalidArgument(f"SQLite database does not exist: {path}")
            self.conn = sqlite3.connect(str(path))
            self._owns_conn = True
        self.name = name or f"sqlite:{table}"
        self.last_sql: str | None = None
        self.last_params: list = []

    def fetch(self, predicate: Predicate) -> list[dict]:
        clause, params = predicate.to_sql()
        sql = f"SELECT * FROM {quote_identifier(self.table)} WHERE {clause}"
        if self.order_by:
            sql += f" ORDER BY {self.order_by}"
        self.last_sql = sql
        self.last_params = params
        cur = self.conn.execute(sql, params)
        columns = [d[0] for d in cur.description]
        return [dict(zip(columns, row)) for row in cur.fetchall()]

    def close(self):
        if self._owns_conn:
            self.conn.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # ---------- helpers ----------
    def _order_clause(self, order_by) -> str:
        if not order_by:
            return ""
        if isinstance(order_by, str):
            order_by = [order_by]
        parts = []
        for spec in order_by:
            col, direction = self._split_order(spec)
            parts.append(f"{quote_identifier(col)} {direction}")
        return ", ".join(parts)

    def _split_order(self, spec: str) -> tuple[str, str]:
        # "-col" or "col:desc" sort descending; "col" or "col:asc" ascending.
        if spec.startswith("-"):
            return spec[1:], "DESC"
        col, _, direction = spec.partition(":")
        direction = (direction or "asc").upper()
        if direction not in ("ASC", "DESC"):
            raise InvalidArgument(f"Invalid sort direction in {spec!r}")
        return col, direction


class CountingSource(Source):
    """Delegate to another source while counting fetches."""

    def __init__(self, inner):
        self.inner = as_source(inner)
        self.fetches = 0
        self.predicates: list[Predicate] = []
        self.name = f"Counting({getattr(self.inner, 'name', type(self.inner).__name__)})"

    def fetch(self, predicate: Predicate) -> list:
        self.fetches += 1
        self.predicates.append(predicate)
        return self.inner.fetch(predicate)


def as_source(obj):
    if obj is None:
        raise InvalidArgument("Source is required, got None")
    if callable(getattr(obj, "fetch", None)):
        return obj
    if isinstance(obj, (str, bytes)) or not isinstance(obj, Iterable):
        raise InvalidArgument(
            f"Expected a Source or an iterable of rows, got {type(obj).__name__}"
        )
    return ListSource(obj)
