from .core import Lookup
from .errors import InvalidArgument
from .predicates import Predicate, as_predicate
from .sources import as_source
from .utils import timer


class FirstOrFallback:
    """
    Find the first row matching `predicate`, else the first matching `fallback`.

    Both predicates are OR-ed into one condition and fetched from the source in
    a single call. The two scans then run in-process over the fetched rows, in
    the order the source returned them. Errors raised by the source propagate
    untouched.
    """

    def __init__(self, predicate, fallback, name="FirstOrFallback"):
        self.predicate: Predicate = self._require(predicate, "predicate")
        self.fallback: Predicate = self._require(fallback, "fallback")
        self.combined = self.predicate | self.fallback
        self.name = name

    def __call__(self, source) -> Lookup:
        return self.forward(as_source(source))

    def forward(self, source) -> Lookup:
        lookup = Lookup(predicate=self.predicate, fallback=self.fallback)
        with timer() as t_all:
            with timer() as t:
                rows = list(source.fetch(self.combined))
            lookup.fetched = len(rows)
            lookup.log(
                "fetch",
                source=getattr(source, "name", type(source).__name__),
                where=self.combined.describe(),
                rows=len(rows),
                seconds=t(),
            )

            for label, predicate in (
                ("primary", self.predicate),
                ("fallback", self.fallback),
            ):
                index = _first_index(rows, predicate)
                if index is not None:
                    lookup.element = rows[index]
                    lookup.matched = label
                    lookup.log("select", matched=label, index=index)
                    break
            else:
                lookup.log("select", matched=None, index=None)
        lookup.log("time_overall", name=self.name, seconds=t_all())
        return lookup

    def _require(self, predicate, label: str) -> Predicate:
        if predicate is None:
            raise InvalidArgument(f"{label} is required, got None")
        return as_predicate(predicate)


def first_or_fallback(source, predicate, fallback):
    """Return the first `predicate` match, else the first `fallback` match, else None."""
    source = as_source(source)
    return FirstOrFallback(predicate, fallback)(source).element


def _first_index(rows: list, predicate: Predicate) -> int | None:
    for i, row in enumerate(rows):
        if predicate(row):
            return i
    return None
