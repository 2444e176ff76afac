import q_fallback as qf

rows = [
    {"id": 1, "active": False},
    {"id": 2, "active": True},
    {"id": 3, "active": False},
]

active_or_three = qf.FirstOrFallback(qf.F("active") == True, qf.F("id") == 3)  # noqa: E712
inactive_ninety_nine_or_three = qf.FirstOrFallback(
    qf.parse("active == true && id == 99"), qf.parse("id == 3")
)

if __name__ == "__main__":
    for op in (active_or_three, inactive_ninety_nine_or_three):
        lookup = op(rows)
        print(lookup.matched, lookup.element)
        lookup.explain_trace()
