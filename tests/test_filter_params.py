import pytest

from merchlens.services.facets import build_facets
from merchlens.utils.filter_params import (
    ALL,
    CategoricalFilter,
    FilterCriteria,
    RangeFilter,
    evaluate,
)

MULTI = ["season", "line", "category", "color", "available_sizes", "fabric", "buyer", "status"]
RANGES = ["price", "cost", "margin_percent"]


@pytest.fixture
def defaults(catalogue):
    return FilterCriteria.from_facets(build_facets(catalogue, MULTI, RANGES))


def styles(records):
    return [r["style_number"] for r in records]


SCENARIO = [
    {"season": "SS24", "category": "Tops", "price": 50, "cost": 20, "quantity_sold": 10},
    {"season": "SS24", "category": "Bottoms", "price": 80, "cost": 40, "quantity_sold": 5},
]


def test_season_selection_scenario():
    criteria = FilterCriteria.from_facets(build_facets(SCENARIO, ["season", "category"], RANGES))
    assert evaluate(SCENARIO, criteria.with_selection("season", ["SS24"])) == SCENARIO
    assert evaluate(SCENARIO, criteria.with_selection("season", ["FW24"])) == []


def test_default_criteria_match_everything(catalogue, defaults):
    assert defaults.is_empty
    assert evaluate(catalogue, defaults) == catalogue


def test_empty_selection_is_no_restriction(catalogue, defaults):
    criteria = defaults.with_selection("season", [])
    assert evaluate(catalogue, criteria) == catalogue


def test_set_valued_field_matches_on_intersection(catalogue, defaults):
    criteria = defaults.with_selection("color", ["Navy"])
    assert styles(evaluate(catalogue, criteria)) == ["ST-100", "ST-200"]


def test_selections_and_across_fields_or_within(catalogue, defaults):
    criteria = defaults.with_selection("category", ["Tops", "Bottoms"]).with_selection("buyer", ["Ben"])
    assert styles(evaluate(catalogue, criteria)) == ["ST-101", "ST-201"]


def test_values_compare_as_strings():
    records = [{"size": 8}, {"size": 10}]
    criteria = FilterCriteria().with_selection("size", ["8"])
    assert evaluate(records, criteria) == [{"size": 8}]


def test_missing_field_fails_selection(defaults):
    records = [{"style_number": "X", "category": "Tops"}]
    assert evaluate(records, defaults.with_selection("season", ["SS24"])) == []


def test_search_is_case_insensitive_across_fields(catalogue, defaults):
    assert styles(evaluate(catalogue, defaults.with_search("NAVY"))) == ["ST-100", "ST-200"]
    assert styles(evaluate(catalogue, defaults.with_search("linen"))) == ["ST-100"]
    assert styles(evaluate(catalogue, defaults.with_search("300"))) == ["ST-200"]
    assert evaluate(catalogue, defaults.with_search("")) == catalogue


def test_range_is_inclusive(catalogue, defaults):
    criteria = defaults.with_range("price", 50, 80)
    assert styles(evaluate(catalogue, criteria)) == ["ST-100", "ST-101"]


def test_zero_price_excluded_by_margin_range_but_kept_by_category(catalogue, defaults):
    narrowed = defaults.with_range("margin_percent", 1, 60)
    assert "ST-201" not in styles(evaluate(catalogue, narrowed))

    by_category = defaults.with_selection("category", ["Tops"])
    assert styles(evaluate(catalogue, by_category)) == ["ST-100", "ST-201"]


def test_malformed_number_fails_active_range():
    records = [{"price": "n/a"}, {"price": 20}]
    criteria = FilterCriteria().with_range("price", 0, 100)
    assert evaluate(records, criteria) == [{"price": 20}]


def test_evaluate_is_idempotent_and_order_preserving(catalogue, defaults):
    criteria = defaults.with_selection("season", ["FW24", "SS24"]).with_range("cost", 0, 100)
    first = evaluate(catalogue, criteria)
    assert first == evaluate(catalogue, criteria)
    assert styles(first) == ["ST-100", "ST-101", "ST-201"]


def test_narrowing_a_selection_never_grows_the_result(catalogue, defaults):
    wide = defaults.with_selection("category", ["Tops", "Bottoms", "Outerwear"])
    narrow = defaults.with_selection("category", ["Tops", "Bottoms"])
    narrower = defaults.with_selection("category", ["Tops"])
    sizes = [len(evaluate(catalogue, c)) for c in (wide, narrow, narrower)]
    assert sizes == sorted(sizes, reverse=True)


def test_toggle_and_all_sentinel(defaults):
    criteria = defaults.toggle_value("color", "Navy").toggle_value("color", "White")
    assert criteria.entry("color").value == ["Navy", "White"]
    assert criteria.toggle_value("color", "Navy").entry("color").value == ["White"]
    assert criteria.toggle_value("color", ALL).entry("color").value == []


def test_chips_and_removal(defaults):
    criteria = defaults.toggle_value("color", "Navy").with_range("price", 0, 100)
    assert criteria.chips() == [
        {"field": "color", "kind": "categorical", "value": "Navy"},
        {"field": "price", "kind": "range", "value": "0 - 100"},
    ]

    removed = criteria.remove_value("color", "Navy").remove_value("price")
    assert removed.chips() == []
    assert removed.entry("price").value == {"min": 0.0, "max": 300.0}


def test_clear_restores_defaults(defaults):
    criteria = defaults.with_search("coat").toggle_value("season", "FW24").with_range("cost", 5, 50)
    assert not criteria.is_empty
    assert criteria.clear() == defaults


def test_entries_are_tagged_variants(defaults):
    kinds = {e.field: e.kind for e in defaults.entries}
    assert kinds["season"] == "categorical"
    assert kinds["margin_percent"] == "range"
    assert isinstance(defaults.entry("color"), CategoricalFilter)
    assert isinstance(defaults.entry("price"), RangeFilter)
    assert defaults.entry("nope") is None
