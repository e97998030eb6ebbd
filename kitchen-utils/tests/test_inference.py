import json

import pytest

from kitchen_utils.exceptions import RuleTableError
from kitchen_utils.ingredients.inference import draft_ingredient, infer_category, infer_unit
from kitchen_utils.ingredients.models import InferredDraft
from kitchen_utils.ingredients.rules import CATEGORIES, UNITS, load_rule_tables


@pytest.mark.parametrize(
    "name, expected_category",
    [
        ("Atlantic Salmon Fillet", "Seafood"),
        ("smoked salmon", "Seafood"),
        ("Chicken Thighs", "Protein"),
        ("fish sauce", "Pantry"),
        ("chicken stock", "Pantry"),
        ("black pepper", "Spices"),
        ("Red Bell Pepper", "Produce"),
        ("eggplant", "Produce"),
        ("Eggs", "Protein"),
        ("butternut squash", "Produce"),
        ("Cheddar Cheese", "Dairy"),
        ("Strawberries", "Fruit"),
        ("Sourdough Loaf", "Bakery"),
        ("Plain Flour", "Pantry"),
        ("Sparkling Water", "Beverages"),
        ("xyzzy123", "Other"),
        ("", "Other"),
    ],
)
def test_infer_category(name, expected_category):
    assert infer_category(name) == expected_category


@pytest.mark.parametrize(
    "name, expected_unit",
    [
        ("Fresh Basil", "bunch"),
        ("Whole Milk", "ml"),
        ("chicken stock", "L"),
        ("vanilla extract", "tsp"),
        ("Plain Flour", "g"),
        ("cream cheese", "g"),
        ("Eggs", "each"),
        ("red capsicum", "each"),
        ("xyzzy", "each"),
    ],
)
def test_infer_unit(name, expected_unit):
    assert infer_unit(name) == expected_unit


def test_inference_is_stable_across_calls():
    assert [infer_category("Atlantic Salmon Fillet") for _ in range(3)] == ["Seafood"] * 3
    assert [infer_unit("Fresh Basil") for _ in range(3)] == ["bunch"] * 3


def test_draft_ingredient_keeps_user_spelling():
    assert draft_ingredient("  Fresh Basil ") == InferredDraft(
        suggested_name="Fresh Basil",
        suggested_category="Spices",
        suggested_unit="bunch",
    )


def test_bundled_rule_labels_are_known():
    tables = load_rule_tables()
    assert {rule.label for rule in tables.category_rules} <= set(CATEGORIES)
    assert {rule.label for rule in tables.unit_rules} <= set(UNITS)
    assert "extra virgin" in tables.stopwords


def _write_tables(directory, category_rules):
    (directory / "stopwords.json").write_text(json.dumps(["fresh"]))
    (directory / "synonyms.json").write_text(json.dumps([["coriander", "cilantro"]]))
    (directory / "category_rules.json").write_text(json.dumps(category_rules))
    (directory / "unit_rules.json").write_text(
        json.dumps([{"label": "g", "keywords": ["flour"]}])
    )


def test_load_rule_tables_from_custom_directory(tmp_path):
    _write_tables(tmp_path, [{"label": "Pantry", "keywords": ["flour"]}])
    tables = load_rule_tables(str(tmp_path))
    assert tables.stopwords == ("fresh",)
    assert tables.category_rules[0].label == "Pantry"
    assert tables.category_rules[0].keywords == ("flour",)


def test_load_rule_tables_rejects_unknown_label(tmp_path):
    _write_tables(tmp_path, [{"label": "Snacks", "keywords": ["chips"]}])
    with pytest.raises(RuleTableError, match="unknown label"):
        load_rule_tables(str(tmp_path))


def test_load_rule_tables_rejects_missing_file(tmp_path):
    with pytest.raises(RuleTableError):
        load_rule_tables(str(tmp_path))
