"""Ingredient normalization, matching and catalog resolution."""

from .batch import resolve_many
from .inference import draft_ingredient, infer_category, infer_unit
from .matching import classify
from .models import (
    CatalogEntry,
    InferredDraft,
    MatchResult,
    MatchType,
    ResolutionOutcome,
)
from .normalization import NormalizedName, normalize
from .resolution import filter_catalog, find_similar_ingredients
from .rules import CATEGORIES, UNITS, load_rule_tables
from .workflows import (
    ExtractedIngredient,
    IngredientBinding,
    NewIngredientPrompt,
    NewIngredientRequest,
    bind_extracted_ingredients,
    build_new_ingredient,
    match_label,
    prepare_new_ingredient_prompt,
    recipe_ingredient_rows,
    request_new_ingredient,
    search_ingredients,
)

__all__ = [
    "normalize",
    "NormalizedName",
    "classify",
    "find_similar_ingredients",
    "filter_catalog",
    "resolve_many",
    "infer_category",
    "infer_unit",
    "draft_ingredient",
    "load_rule_tables",
    "CATEGORIES",
    "UNITS",
    "CatalogEntry",
    "MatchResult",
    "MatchType",
    "ResolutionOutcome",
    "InferredDraft",
    "match_label",
    "search_ingredients",
    "request_new_ingredient",
    "prepare_new_ingredient_prompt",
    "build_new_ingredient",
    "bind_extracted_ingredients",
    "recipe_ingredient_rows",
    "ExtractedIngredient",
    "IngredientBinding",
    "NewIngredientPrompt",
    "NewIngredientRequest",
]
