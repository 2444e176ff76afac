import json
from pathlib import Path

from .errors import InvalidArgument
from .sources import ListSource, SqliteSource

SQLITE_SUFFIXES = {".db", ".sqlite", ".sqlite3"}


def open_source(path: str | Path, table: str | None = None, order_by=None):
    """Open a JSON, JSONL or SQLite file as a queryable source."""
    path = Path(path)
    if not path.exists():
        raise InvalidArgument(f"Source does not exist: {path}")

    suffix = path.suffix.lower()
    if suffix in SQLITE_SUFFIXES:
        if not table:
            raise InvalidArgument(f"A table name is required for {path.name}")
        return SqliteSource(path, table, order_by=order_by, name=f"{path.name}:{table}")
    if suffix == ".jsonl":
        return ListSource(read_jsonl(path), name=path.name)
    if suffix == ".json":
        try:
            rows = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise InvalidArgument(f"{path.name} is not valid JSON: {e}") from e
        if not isinstance(rows, list):
            raise InvalidArgument(f"{path.name} must contain a JSON array of records")
        return ListSource(rows, name=path.name)
    raise InvalidArgument(f"Unsupported source type: {path.suffix or path.name}")


def read_jsonl(path: Path) -> list:
    rows = []
    with path.open(encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                rows.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise InvalidArgument(f"{path.name} line {lineno}: {e.msg}") from e
    return rows
