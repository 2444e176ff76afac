import time
from contextlib import contextmanager


@contextmanager
def timer():
    start = time.perf_counter()
    yield lambda: (time.perf_counter() - start)


def summarize_timings(lookup):
    """Return total seconds per op name, based on events that carry a 'seconds' payload."""
    totals = {}
    for ev in getattr(lookup, "trace", []):
        if ev.op != "time_overall" and "seconds" in ev.payload:
            totals[ev.op] = totals.get(ev.op, 0.0) + ev.payload["seconds"]
    overall = next(
        (ev.payload.get("seconds") for ev in lookup.trace if ev.op == "time_overall"),
        None,
    )
    return {"per_op": totals, "overall": overall}
