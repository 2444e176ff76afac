import json

import q_fallback as qf


def test_persist_history_writes_jsonl(tmp_path):
    path = tmp_path / "history.jsonl"
    op = qf.PersistHistory(path=path)
    lookup = qf.FirstOrFallback(qf.F("active") == True, qf.F("id") == 3)(  # noqa: E712
        [{"id": 3, "active": False}]
    )

    out = op(lookup)
    assert out is lookup

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1

    record = json.loads(lines[0])
    assert record["predicate"] == "active == True"
    assert record["fallback"] == "id == 3"
    assert record["matched"] == "fallback"
    assert record["fetched"] == 1
    assert record["element"] == {"id": 3, "active": False}
    assert [ev["op"] for ev in record["trace"]] == ["fetch", "select", "time_overall"]
    assert lookup.trace[-1].op == "PersistHistory"


def test_persist_history_logs_write_failure(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    op = qf.PersistHistory(path=blocker / "history.jsonl", include_trace=False)
    lookup = qf.FirstOrFallback(qf.F("id") == 1, qf.F("id") == 2)([])

    op.record(lookup)

    assert lookup.trace[-1].payload["ok"] is False
