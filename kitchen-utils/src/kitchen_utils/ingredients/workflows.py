"""Helpers shaping resolution results for the three places that consume them.

- the inline add-ingredient control (live dropdown + explicit "add new")
- the new-ingredient confirmation dialog
- the bulk importer for AI-extracted recipes

Nothing here writes to the catalog; selecting, creating and binding stay with
the caller.
"""

import dataclasses
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

from kitchen_utils.exceptions import InvalidArgumentError
from kitchen_utils.ingredients.batch import resolve_many
from kitchen_utils.ingredients.inference import draft_ingredient
from kitchen_utils.ingredients.models import (
    CatalogEntry,
    InferredDraft,
    MatchResult,
    MatchType,
    ResolutionOutcome,
)
from kitchen_utils.ingredients.resolution import filter_catalog, find_similar_ingredients
from kitchen_utils.ingredients.rules import CATEGORIES, UNITS

DROPDOWN_LIMIT = 50

MATCH_LABELS = {
    MatchType.EXACT: "Exact Match",
    MatchType.ALIAS: "Variation",
    MatchType.PARTIAL: "Contains",
}

EXACT_MATCH_MESSAGE = "An exact match was found in your ingredients database."
SIMILAR_MATCHES_MESSAGE = "Similar ingredients found. Did you mean one of these?"
NO_MATCH_MESSAGE = "This ingredient doesn't exist yet. Create it?"


def match_label(match: MatchResult) -> str:
    """User-facing badge text for a match, e.g. "Variation" or "62% Similar"."""
    if match.match_type in MATCH_LABELS:
        return MATCH_LABELS[match.match_type]
    return f"{int(match.similarity * 100 + 0.5)}% Similar"


# --- Inline add-ingredient control ---


def search_ingredients(
    search: str,
    catalog: Sequence[Any],
    exclude_ids: Optional[Iterable[Hashable]] = None,
    limit: int = DROPDOWN_LIMIT,
) -> List[CatalogEntry]:
    """Entries to list in the live dropdown while the user types."""
    return filter_catalog(search, catalog, exclude_ids, limit=limit)


@dataclasses.dataclass(frozen=True)
class NewIngredientPrompt:
    ingredient_name: str
    matches: Tuple[Tuple[MatchResult, str], ...]
    draft: InferredDraft
    has_exact_match: bool
    should_offer_create: bool

    @property
    def message(self) -> str:
        if self.has_exact_match:
            return EXACT_MATCH_MESSAGE
        if self.matches:
            return SIMILAR_MATCHES_MESSAGE
        return NO_MATCH_MESSAGE


def prepare_new_ingredient_prompt(
    ingredient_name: str, outcome: ResolutionOutcome
) -> NewIngredientPrompt:
    """Combine a resolution outcome with a pre-filled creation draft."""
    return NewIngredientPrompt(
        ingredient_name=ingredient_name,
        matches=tuple((m, match_label(m)) for m in outcome.matches),
        draft=draft_ingredient(ingredient_name),
        has_exact_match=outcome.has_exact_match,
        should_offer_create=outcome.should_offer_create,
    )


def request_new_ingredient(
    search: str,
    catalog: Sequence[Any],
    exclude_ids: Optional[Iterable[Hashable]] = None,
) -> NewIngredientPrompt:
    """Resolve the typed text once the user explicitly asks to add it."""
    outcome = find_similar_ingredients(search, catalog, exclude_ids)
    return prepare_new_ingredient_prompt(search, outcome)


# --- New-ingredient confirmation dialog ---


@dataclasses.dataclass(frozen=True)
class NewIngredientRequest:
    name: str
    unit: str
    category: str
    cost_per_unit: Decimal

    def as_record(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


def build_new_ingredient(
    draft: InferredDraft,
    name: Optional[str] = None,
    category: Optional[str] = None,
    unit: Optional[str] = None,
    cost_per_unit: Any = 0,
) -> NewIngredientRequest:
    """Apply the user's edits to a draft and validate the result.

    Any field left as None keeps the drafted suggestion.

    Raises:
        InvalidArgumentError: On a blank name, an unknown category or unit, or
            a negative or non-numeric cost.
    """
    name = (draft.suggested_name if name is None else name).strip()
    category = draft.suggested_category if category is None else category
    unit = draft.suggested_unit if unit is None else unit

    if not name:
        raise InvalidArgumentError("Ingredient name must not be blank")
    if category not in CATEGORIES:
        raise InvalidArgumentError(f"Unknown category {category!r}")
    if unit not in UNITS:
        raise InvalidArgumentError(f"Unknown unit {unit!r}")
    try:
        cost = Decimal(str(cost_per_unit))
    except InvalidOperation as e:
        raise InvalidArgumentError(f"Invalid cost_per_unit: {cost_per_unit!r}") from e
    if not cost.is_finite() or cost < 0:
        raise InvalidArgumentError(f"cost_per_unit must be a non-negative number: {cost_per_unit!r}")

    return NewIngredientRequest(name=name, unit=unit, category=category, cost_per_unit=cost)


# --- Bulk AI-extraction importer ---


@dataclasses.dataclass(frozen=True)
class ExtractedIngredient:
    name: str
    quantity: Optional[float] = None
    unit: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping) -> "ExtractedIngredient":
        if not isinstance(record.get("name"), str):
            raise InvalidArgumentError(f"Extracted ingredient needs a string 'name': {record!r}")
        quantity = record.get("quantity")
        try:
            quantity = None if quantity is None else float(quantity)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(
                f"Invalid quantity {quantity!r} for extracted ingredient: {record!r}"
            ) from e
        return cls(
            name=record["name"],
            quantity=quantity,
            unit=record.get("unit"),
        )


@dataclasses.dataclass(frozen=True)
class IngredientBinding:
    extracted: ExtractedIngredient
    outcome: ResolutionOutcome
    ingredient_id: Optional[Hashable] = None
    ingredient_name: Optional[str] = None
    draft: Optional[InferredDraft] = None

    @property
    def needs_review(self) -> bool:
        return self.ingredient_id is None


def _as_extracted(item: Any) -> ExtractedIngredient:
    if isinstance(item, ExtractedIngredient):
        return item
    if isinstance(item, Mapping):
        return ExtractedIngredient.from_record(item)
    if isinstance(item, str):
        return ExtractedIngredient(name=item)
    raise InvalidArgumentError(f"Unsupported extracted ingredient: {item!r}")


def bind_extracted_ingredients(
    extracted: Iterable[Any],
    catalog: Sequence[Any],
    exclude_ids: Optional[Iterable[Hashable]] = None,
    max_workers: Optional[int] = None,
    show_progress: bool = False,
) -> List[IngredientBinding]:
    """Bind AI-extracted ingredients to catalog entries where it is safe.

    An item is bound to its top match only when the resolution found an
    exact (or effectively exact) match; extraction volume rules out asking
    the user about each one. Everything else is left unbound with a draft for
    the manual-resolution form.

    Returns:
        One binding per extracted item, in input order.
    """
    if extracted is None:
        raise InvalidArgumentError("extracted must be a sequence of ingredients, not None")

    items = [_as_extracted(item) for item in extracted]
    outcomes = resolve_many(
        [item.name for item in items],
        catalog,
        exclude_ids,
        max_workers=max_workers,
        show_progress=show_progress,
    )

    bindings = []
    for item, outcome in zip(items, outcomes):
        if outcome.has_exact_match:
            top = outcome.best_match
            bindings.append(IngredientBinding(item, outcome, top.id, top.name))
        else:
            bindings.append(IngredientBinding(item, outcome, draft=draft_ingredient(item.name)))
    return bindings


def recipe_ingredient_rows(
    bindings: Iterable[IngredientBinding], recipe_id: Hashable
) -> List[Dict[str, Any]]:
    """Recipe-ingredient rows for the bound items, ready for the caller to insert.

    When the extracted wording differs from the catalog name the original
    text is kept in ``notes``.
    """
    rows = []
    for binding in bindings:
        if binding.needs_review:
            continue
        extracted = binding.extracted
        rows.append(
            {
                "recipe_id": recipe_id,
                "ingredient_id": binding.ingredient_id,
                "quantity": extracted.quantity,
                "unit": extracted.unit,
                "notes": None
                if extracted.name == binding.ingredient_name
                else f"Original: {extracted.name}",
            }
        )
    return rows
