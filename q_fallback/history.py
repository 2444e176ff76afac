import json
from datetime import datetime, timezone
from pathlib import Path

from .core import Lookup


class PersistHistory:
    """
    Append a compact record of each lookup to a JSONL log.

    Keeps both predicates, which one matched, the fetched row count, the
    selected element and the trace, so lookups can be inspected later.
    """

    def __init__(self, path: str | Path = ".q_fallback/history.jsonl", include_trace=True):
        self.path = Path(path)
        self.include_trace = include_trace
        self.name = "PersistHistory"

    def __call__(self, lookup: Lookup) -> Lookup:
        return self.record(lookup)

    def record(self, lookup: Lookup) -> Lookup:
        record = self._serialize(lookup)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            line = json.dumps(record, ensure_ascii=False, default=repr)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
            lookup.log(self.name, ok=True, path=str(self.path))
        except OSError as e:
            lookup.log(self.name, ok=False, path=str(self.path), error=str(e))
        return lookup

    # ---------- helpers ----------
    def _serialize(self, lookup: Lookup) -> dict:
        record: dict = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "predicate": _describe(lookup.predicate),
            "fallback": _describe(lookup.fallback),
            "matched": lookup.matched,
            "fetched": lookup.fetched,
            "element": self._safe(lookup.element),
        }
        if self.include_trace:
            record["trace"] = [
                {"op": ev.op, "payload": self._safe(ev.payload), "t": ev.t}
                for ev in lookup.trace
            ]
        return record

    def _safe(self, obj):
        if obj is None:
            return None
        if isinstance(obj, (str, int, float, bool)):
            return obj
        if isinstance(obj, dict):
            return {str(k): self._safe(v) for k, v in obj.items()}
        if isinstance(obj, (list, tuple, set)):
            return [self._safe(v) for v in obj]
        if hasattr(obj, "__dict__"):
            return {k: self._safe(v) for k, v in vars(obj).items()}
        return repr(obj)


def _describe(predicate) -> str | None:
    if predicate is None:
        return None
    describe = getattr(predicate, "describe", None)
    return describe() if callable(describe) else repr(predicate)
