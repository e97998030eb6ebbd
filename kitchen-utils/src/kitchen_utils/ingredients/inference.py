"""Category and unit suggestions for new catalog entries.

Both suggestions come from ordered keyword tables where the first matching
rule wins. Rules are authored most-specific-first ("fish sauce" is listed
under Pantry ahead of the Seafood rule that knows "fish"), so the table order
is what makes an ambiguous name resolve the same way every time.
"""

import functools
from typing import Tuple

from kitchen_utils.ingredients.models import InferredDraft
from kitchen_utils.ingredients.normalization import (
    clean_text,
    normalize,
    stem_word,
    tokenize,
)
from kitchen_utils.ingredients.rules import (
    DEFAULT_CATEGORY,
    DEFAULT_UNIT,
    KeywordRule,
    load_rule_tables,
)

CompiledRule = Tuple[str, Tuple[Tuple[str, ...], ...]]


def _keyword_tokens(keyword: str) -> Tuple[str, ...]:
    return tuple(stem_word(t) for t in tokenize(clean_text(keyword)))


def _compile(rules: Tuple[KeywordRule, ...]) -> Tuple[CompiledRule, ...]:
    return tuple(
        (rule.label, tuple(_keyword_tokens(k) for k in rule.keywords)) for rule in rules
    )


@functools.lru_cache(maxsize=1)
def _category_rules() -> Tuple[CompiledRule, ...]:
    return _compile(load_rule_tables().category_rules)


@functools.lru_cache(maxsize=1)
def _unit_rules() -> Tuple[CompiledRule, ...]:
    return _compile(load_rule_tables().unit_rules)


def _contains_sequence(tokens: Tuple[str, ...], keyword: Tuple[str, ...]) -> bool:
    """Check whether ``keyword`` appears as a contiguous run of ``tokens``."""
    width = len(keyword)
    return any(
        tokens[start : start + width] == keyword
        for start in range(len(tokens) - width + 1)
    )


def _first_matching_label(name: str, rules: Tuple[CompiledRule, ...], default: str) -> str:
    tokens = tuple(stem_word(t) for t in normalize(name).tokens)
    for label, keywords in rules:
        if any(_contains_sequence(tokens, keyword) for keyword in keywords):
            return label
    return default


def infer_category(name: str) -> str:
    """Suggest a catalog category for an ingredient name.

    Keywords match whole tokens, never raw substrings, so "eggplant" is not
    mistaken for "egg" nor "butternut squash" for "butter".

    Examples:
        >>> infer_category("Atlantic Salmon Fillet")
        'Seafood'
        >>> infer_category("fish sauce")
        'Pantry'
        >>> infer_category("xyzzy")
        'Other'
    """
    return _first_matching_label(name, _category_rules(), DEFAULT_CATEGORY)


def infer_unit(name: str) -> str:
    """Suggest a default measurement unit for an ingredient name.

    Examples:
        >>> infer_unit("Fresh Basil")
        'bunch'
        >>> infer_unit("chicken stock")
        'L'
    """
    return _first_matching_label(name, _unit_rules(), DEFAULT_UNIT)


def draft_ingredient(name: str) -> InferredDraft:
    """Pre-fill values for a new-ingredient form; the user's spelling is kept."""
    return InferredDraft(
        suggested_name=name.strip(),
        suggested_category=infer_category(name),
        suggested_unit=infer_unit(name),
    )
