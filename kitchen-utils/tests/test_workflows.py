from decimal import Decimal

import pytest

from kitchen_utils.exceptions import InvalidArgumentError
from kitchen_utils.ingredients.models import InferredDraft, MatchResult, MatchType
from kitchen_utils.ingredients.workflows import (
    EXACT_MATCH_MESSAGE,
    NO_MATCH_MESSAGE,
    SIMILAR_MATCHES_MESSAGE,
    ExtractedIngredient,
    bind_extracted_ingredients,
    build_new_ingredient,
    match_label,
    recipe_ingredient_rows,
    request_new_ingredient,
    search_ingredients,
)


@pytest.mark.parametrize(
    "match_type, similarity, expected",
    [
        (MatchType.EXACT, 1.0, "Exact Match"),
        (MatchType.ALIAS, 0.9, "Variation"),
        (MatchType.PARTIAL, 0.5, "Contains"),
        (MatchType.FUZZY, 0.625, "63% Similar"),
        (MatchType.FUZZY, 0.5, "50% Similar"),
    ],
)
def test_match_label(match_type, similarity, expected):
    assert match_label(MatchResult("1", "Tomato", match_type, similarity)) == expected


def test_search_ingredients(catalog):
    assert [entry.name for entry in search_ingredients("oil", catalog)] == ["Olive Oil"]
    assert search_ingredients("tom", catalog, exclude_ids=["1", "2", "3"]) == [catalog[6]]


def test_request_new_ingredient_with_exact_match(catalog):
    prompt = request_new_ingredient("Tomatoes", catalog)

    assert prompt.has_exact_match is True
    assert prompt.should_offer_create is False
    assert prompt.message == EXACT_MATCH_MESSAGE
    assert prompt.matches[0][1] == "Exact Match"
    assert prompt.draft == InferredDraft("Tomatoes", "Produce", "each")


def test_request_new_ingredient_with_similar_matches(catalog):
    prompt = request_new_ingredient("cilantro", catalog)

    assert prompt.message == SIMILAR_MATCHES_MESSAGE
    assert [(m.name, label) for m, label in prompt.matches] == [("Coriander", "Variation")]
    assert prompt.should_offer_create is True
    assert prompt.draft.suggested_unit == "bunch"


def test_request_new_ingredient_without_matches(catalog):
    prompt = request_new_ingredient("Dragon Fruit", catalog)

    assert prompt.matches == ()
    assert prompt.message == NO_MATCH_MESSAGE
    assert prompt.draft == InferredDraft("Dragon Fruit", "Other", "each")


def test_build_new_ingredient_uses_draft_defaults():
    request = build_new_ingredient(InferredDraft("Fresh Basil", "Spices", "bunch"))

    assert request.as_record() == {
        "name": "Fresh Basil",
        "unit": "bunch",
        "category": "Spices",
        "cost_per_unit": Decimal("0"),
    }


def test_build_new_ingredient_applies_edits():
    draft = InferredDraft("Fresh Basil", "Spices", "bunch")

    request = build_new_ingredient(
        draft, name="  Thai Basil ", category="Produce", unit="g", cost_per_unit="0.25"
    )

    assert request.name == "Thai Basil"
    assert request.category == "Produce"
    assert request.unit == "g"
    assert request.cost_per_unit == Decimal("0.25")


@pytest.mark.parametrize(
    "edits",
    [
        {"name": "   "},
        {"category": "Snacks"},
        {"unit": "pinch"},
        {"cost_per_unit": -1},
        {"cost_per_unit": "abc"},
        {"cost_per_unit": "nan"},
    ],
)
def test_build_new_ingredient_rejects_invalid_edits(edits):
    with pytest.raises(InvalidArgumentError):
        build_new_ingredient(InferredDraft("Basil", "Spices", "bunch"), **edits)


@pytest.fixture
def bindings(catalog):
    extracted = [
        "Tomatoes",
        {"name": "cilantro", "quantity": "2", "unit": "bunch"},
        ExtractedIngredient("Olive Oil", 30.0, "ml"),
    ]
    return bind_extracted_ingredients(extracted, catalog, max_workers=1)


def test_bind_extracted_ingredients(bindings):
    tomato, cilantro, oil = bindings

    assert (tomato.ingredient_id, tomato.ingredient_name) == ("1", "Tomato")
    assert not tomato.needs_review
    assert tomato.draft is None

    assert cilantro.needs_review
    assert cilantro.extracted == ExtractedIngredient("cilantro", 2.0, "bunch")
    assert cilantro.draft == InferredDraft("cilantro", "Spices", "bunch")
    assert cilantro.outcome.best_match.name == "Coriander"

    assert oil.ingredient_id == "5"


def test_bind_extracted_ingredients_honours_exclusions(catalog):
    (binding,) = bind_extracted_ingredients(["Tomato"], catalog, exclude_ids=["1"])
    assert binding.needs_review


def test_bind_extracted_ingredients_rejects_bad_items(catalog):
    with pytest.raises(InvalidArgumentError):
        bind_extracted_ingredients([42], catalog)
    with pytest.raises(InvalidArgumentError):
        bind_extracted_ingredients(None, catalog)


def test_recipe_ingredient_rows(bindings):
    rows = recipe_ingredient_rows(bindings, recipe_id="r1")

    assert rows == [
        {
            "recipe_id": "r1",
            "ingredient_id": "1",
            "quantity": None,
            "unit": None,
            "notes": "Original: Tomatoes",
        },
        {
            "recipe_id": "r1",
            "ingredient_id": "5",
            "quantity": 30.0,
            "unit": "ml",
            "notes": None,
        },
    ]


@pytest.mark.parametrize("quantity", ["1/2", "a pinch", [2]])
def test_extracted_ingredient_rejects_unreadable_quantity(quantity):
    with pytest.raises(InvalidArgumentError, match="Invalid quantity"):
        ExtractedIngredient.from_record({"name": "salt", "quantity": quantity})


def test_bind_extracted_ingredients_rejects_string_exclusions(catalog):
    with pytest.raises(InvalidArgumentError):
        bind_extracted_ingredients(["Tomato"], catalog, exclude_ids="12")
