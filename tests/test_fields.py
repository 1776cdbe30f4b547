import math

from merchlens.utils.fields import (
    as_set,
    distinct_values,
    field_value,
    margin_amount,
    margin_percent,
    render_value,
    to_number,
)


def test_as_set_normalizes_scalars_and_collections():
    assert as_set("Navy") == ("Navy",)
    assert as_set(["White", "Navy", "White"]) == ("White", "Navy")
    assert as_set(("S", None, "M")) == ("S", "M")
    assert as_set(None) == ()
    assert as_set(float("nan")) == ()
    assert as_set([]) == ()


def test_to_number_never_raises():
    assert to_number(12) == 12.0
    assert to_number("12.5") == 12.5
    assert math.isnan(to_number("n/a"))
    assert math.isnan(to_number(""))
    assert math.isnan(to_number(None))
    assert math.isnan(to_number(True))
    assert math.isnan(to_number(["1"]))


def test_margin_percent_guards_zero_price():
    assert margin_percent({"price": 50, "cost": 20}) == 60.0
    assert math.isnan(margin_percent({"price": 0, "cost": 10}))
    assert math.isnan(margin_percent({"cost": 10}))


def test_margin_amount_uses_quantity():
    assert margin_amount({"quantity_sold": 10, "price": 50, "cost": 20}) == 300.0
    assert math.isnan(margin_amount({"price": 50, "cost": 20}))


def test_field_value_derives_margins():
    record = {"quantity_sold": 2, "price": 10, "cost": 5, "season": "SS24"}
    assert field_value(record, "margin_percent") == 50.0
    assert field_value(record, "margin_amount") == 10.0
    assert field_value(record, "season") == "SS24"
    assert field_value(record, "missing") is None


def test_render_value():
    assert render_value(["White", "Navy"]) == "White, Navy"
    assert render_value(50.0) == "50"
    assert render_value(49.5) == "49.5"
    assert render_value(None) is None


def test_distinct_values_match_by_string_form():
    records = [
        {"available_sizes": (8, "M")},
        {"available_sizes": "8"},
        {"available_sizes": 8.0},
        {"available_sizes": None},
        {},
    ]
    assert distinct_values(records, "available_sizes") == [8, "M"]
    assert distinct_values([], "available_sizes") == []
