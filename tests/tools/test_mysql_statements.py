import datetime
from decimal import Decimal

import pytest

from mysql_adaptor.tools.mysql.statements import (
    SqlFragment,
    assignment_fragment,
    insert_fragment,
    quote_identifier,
    quote_table,
    render,
    upsert_fragment,
)


def test_quote_identifier():
    assert quote_identifier("name") == "`name`"
    assert quote_identifier("we`ird") == "`we``ird`"


def test_quote_identifier_rejects_empty():
    with pytest.raises(ValueError):
        quote_identifier("")


def test_quote_table_with_schema():
    assert quote_table("shop.orders") == "`shop`.`orders`"


def test_insert_fragment_is_parameterized():
    fragment = insert_fragment("t", {"a": 1, "b": "x"})

    assert fragment.text == "INSERT INTO `t` (`a`, `b`) VALUES (%s, %s)"
    assert fragment.params == (1, "x")


def test_render_insert_quotes_values():
    statement = render(insert_fragment("t", {"a": 1, "b": "x"}))

    assert statement == "INSERT INTO `t` (`a`, `b`) VALUES (1, 'x')"


def test_render_escapes_string_values():
    statement = render(insert_fragment("t", {"note": "it's; DROP TABLE t"}))

    assert statement == "INSERT INTO `t` (`note`) VALUES ('it\\'s; DROP TABLE t')"


def test_render_common_types():
    statement = render(insert_fragment("t", {
        "n": None,
        "flag": True,
        "price": Decimal("9.50"),
        "day": datetime.date(2024, 3, 1),
        "pct": "100%",
    }))

    assert "VALUES (NULL, 1, 9.50, '2024-03-01', '100%')" in statement


def test_nested_values_are_sent_as_json():
    fragment = insert_fragment("t", {"meta": {"k": [1, 2]}})

    assert fragment.params == ('{"k": [1, 2]}',)


@pytest.mark.parametrize("tags", [("a", "b"), {"b", "a"}, frozenset({"a", "b"})])
def test_tuple_and_set_values_are_sent_as_json(tags):
    statement = render(insert_fragment("t", {"tags": tags}))

    assert statement == "INSERT INTO `t` (`tags`) VALUES ('[\\\"a\\\", \\\"b\\\"]')"


def test_percent_in_column_name_survives_render():
    assert render(insert_fragment("t", {"50%": 1})) == "INSERT INTO `t` (`50%`) VALUES (1)"


def test_assignment_fragment():
    fragment = assignment_fragment({"a": 1, "b": "x"})

    assert fragment.text == "`a` = %s, `b` = %s"
    assert fragment.params == (1, "x")


def test_upsert_has_one_update_clause_matching_insert_columns():
    statement = render(upsert_fragment("t", {"a": 1}))

    assert statement == "INSERT INTO `t` (`a`) VALUES (1) ON DUPLICATE KEY UPDATE `a` = 1"
    assert statement.count("ON DUPLICATE KEY UPDATE") == 1


def test_upsert_params_follow_placeholder_order():
    fragment = upsert_fragment("t", {"a": 1, "b": "x"})

    assert fragment.params == (1, "x", 1, "x")
    assert fragment.text.count("%s") == 4


def test_fragments_concatenate():
    combined = SqlFragment("SELECT %s", (1,)) + SqlFragment("UNION SELECT %s", (2,))

    assert combined == SqlFragment("SELECT %s UNION SELECT %s", (1, 2))


@pytest.mark.parametrize("values", [{}, None, ["a"]])
def test_empty_or_invalid_values_are_rejected(values):
    with pytest.raises((ValueError, TypeError)):
        insert_fragment("t", values)
