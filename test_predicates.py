import pytest

import q_fallback as qf


class Row:
    def __init__(self, **kw):
        self.__dict__.update(kw)


def test_field_comparisons_evaluate_on_dicts_and_objects():
    pred = qf.F("score") >= 10

    assert pred({"score": 10})
    assert not pred({"score": 9})
    assert pred(Row(score=11))
    assert not pred(Row())


def test_null_semantics_match_sql():
    assert not (qf.F("n") > 1)({"n": None})
    assert not (qf.F("n") != 1)({})
    assert qf.F("n").is_null()({})
    assert qf.F("n").not_null()({"n": 0})


def test_mismatched_types_do_not_match():
    assert not (qf.F("n") < 3)({"n": "abc"})


def test_boolean_composition():
    pred = ~(qf.F("a") == 1) | ((qf.F("b") == 2) & (qf.F("c") == 3))

    assert pred({"a": 2})
    assert pred({"a": 1, "b": 2, "c": 3})
    assert not pred({"a": 1, "b": 2, "c": 4})


def test_callable_combines_with_predicate():
    pred = (lambda r: r.get("x") == 1) | (qf.F("y") == 2)

    assert isinstance(pred, qf.Or)
    assert pred({"y": 2})
    assert pred({"x": 1})


def test_isin_ignores_none_and_empty_never_matches():
    assert qf.F("k").isin([1, None, 3])({"k": 3})
    assert not qf.F("k").isin([None])({"k": None})
    assert qf.F("k").isin([]).to_sql() == ("0", [])


def test_to_sql_binds_values_and_quotes_fields():
    pred = (qf.F("active") == True) | (qf.F("id").isin([1, 2]))  # noqa: E712

    sql, params = pred.to_sql()

    assert sql == '("active" = ?) OR ("id" IN (?, ?))'
    assert params == [True, 1, 2]


def test_to_sql_null_tests():
    assert qf.F("x").is_null().to_sql() == ('"x" IS NULL', [])
    assert (~qf.F("x").not_null()).to_sql() == ('NOT ("x" IS NOT NULL)', [])


def test_where_is_not_translatable():
    pred = qf.Where(lambda r: True, name="anything")

    with pytest.raises(qf.UntranslatablePredicate):
        pred.to_sql()
    with pytest.raises(qf.UntranslatablePredicate):
        ((qf.F("a") == 1) | pred).to_sql()


def test_invalid_field_names_rejected():
    with pytest.raises(qf.InvalidArgument):
        qf.F('a"; DROP TABLE t; --')


def test_as_predicate_rejects_fields_and_non_callables():
    with pytest.raises(qf.InvalidArgument):
        qf.as_predicate(qf.F("a"))
    with pytest.raises(qf.InvalidArgument):
        qf.as_predicate(42)
    with pytest.raises(qf.InvalidArgument):
        qf.as_predicate(None)


def test_describe():
    pred = (qf.F("active") == True) | (qf.F("id") == 3)  # noqa: E712

    assert pred.describe() == "(active == True or id == 3)"
    assert repr(qf.Where(len)) == "where(len)"


def test_unknown_propagates_through_not_and_or():
    row = {"n": None, "id": 1}

    assert (~(qf.F("n") == 1)).evaluate(row) is None
    assert not (~(qf.F("n") == 1))(row)
    assert ((qf.F("n") == 1) | (qf.F("id") == 1))(row)
    assert ((qf.F("n") == 1) | (qf.F("id") == 2)).evaluate(row) is None
    assert ((qf.F("n") == 1) & (qf.F("id") == 2)).evaluate(row) is False
    assert (~qf.F("n").isin([1, 2])).evaluate(row) is None


def test_numeric_strings_compare_as_numbers():
    assert (qf.F("id") == "2")({"id": 2})
    assert (qf.F("id") < "10")({"id": 9})
    assert (qf.F("code") == 7)({"code": "7"})
    assert qf.F("id").isin(["2"])({"id": 2})
    assert not (qf.F("flag") == "1")({"flag": True})
    assert not (qf.F("id") == "two")({"id": 2})
