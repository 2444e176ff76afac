import time
from dataclasses import dataclass, field
from typing import Any


@dataclass
class TraceEvent:
    op: str
    payload: dict[str, Any]
    t: float = field(default_factory=time.time)


@dataclass
class Lookup:
    predicate: Any
    fallback: Any
    element: Any = None
    matched: str | None = None
    fetched: int = 0
    trace: list[TraceEvent] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.matched is not None

    def log(self, op, **payload):
        self.trace.append(TraceEvent(op, payload))

    def explain_trace(self):
        for ev in self.trace:
            print(ev.op, ev.payload)
