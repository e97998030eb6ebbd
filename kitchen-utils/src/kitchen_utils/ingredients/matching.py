"""Comparison of a normalized query against a single catalog entry.

Strategies run in a fixed order and the first one that succeeds decides the
verdict:

1. exact   - normalized names are identical (similarity 1.0)
2. alias   - names share a synonym group, or differ by at most 10% of their
             characters (similarity >= 0.90)
3. partial - one token sequence contains the other (similarity in [0.5, 0.95))
4. fuzzy   - token sets overlap (Jaccard similarity, reported only when > 0)
"""

import functools
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Tuple

from rapidfuzz.distance import Levenshtein

from kitchen_utils.exceptions import RuleTableError
from kitchen_utils.ingredients.models import CatalogEntry, MatchResult, MatchType
from kitchen_utils.ingredients.normalization import NormalizedName, normalize
from kitchen_utils.ingredients.rules import load_rule_tables

ALIAS_FLOOR = 0.90
PARTIAL_FLOOR = 0.5
# Partial and fuzzy verdicts stay below the 0.95 "effectively exact" band
NON_EXACT_CEILING = 0.94


@functools.lru_cache(maxsize=1)
def synonym_index() -> Mapping[str, FrozenSet[str]]:
    """Map every normalized synonym to the full group it belongs to."""
    index = {}
    for group in load_rule_tables().synonyms:
        names = frozenset(normalize(name).text for name in group)
        for name in names:
            if name in index and index[name] != names:
                raise RuleTableError(f"Synonym {name!r} appears in more than one group")
            index[name] = names
    return MappingProxyType(index)


def edit_similarity(a: str, b: str) -> float:
    """Levenshtein similarity: ``1 - distance / len(longer)``."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1 - Levenshtein.distance(a, b) / longest


def _is_close_spelling(a: str, b: str) -> bool:
    """``distance / len(longer) <= 0.10``, compared without floats."""
    distance = Levenshtein.distance(a, b)
    return distance * 10 <= max(len(a), len(b))


def _is_contiguous_run(shorter: Tuple[str, ...], longer: Tuple[str, ...]) -> bool:
    width = len(shorter)
    return any(
        longer[start : start + width] == shorter
        for start in range(len(longer) - width + 1)
    )


def _alias_similarity(query: NormalizedName, name: NormalizedName) -> Optional[float]:
    group = synonym_index().get(name.text)
    if (group is not None and query.text in group) or _is_close_spelling(
        query.text, name.text
    ):
        return max(ALIAS_FLOOR, edit_similarity(query.text, name.text))
    return None


def _partial_similarity(query: NormalizedName, name: NormalizedName) -> Optional[float]:
    shorter, longer = sorted((query.tokens, name.tokens), key=len)
    if not shorter or not _is_contiguous_run(shorter, longer):
        return None
    ratio = len(shorter) / len(longer)
    return min(max(ratio, PARTIAL_FLOOR), NON_EXACT_CEILING)


def _fuzzy_similarity(query: NormalizedName, name: NormalizedName) -> Optional[float]:
    union = query.token_set | name.token_set
    if not union:
        return None
    jaccard = len(query.token_set & name.token_set) / len(union)
    if jaccard <= 0:
        return None
    return min(jaccard, NON_EXACT_CEILING)


def classify(query: NormalizedName, entry: CatalogEntry) -> Optional[MatchResult]:
    """Classify how well a normalized query matches one catalog entry.

    Args:
        query: The query, already passed through ``normalize``.
        entry: The catalog entry to compare against.

    Returns:
        A MatchResult for the first strategy that succeeds, or None when the
        names share nothing at all.
    """
    name = normalize(entry.name)
    if not query or not name:
        return None

    if query.text == name.text:
        return MatchResult(entry.id, entry.name, MatchType.EXACT, 1.0)

    strategies = (
        (MatchType.ALIAS, _alias_similarity),
        (MatchType.PARTIAL, _partial_similarity),
        (MatchType.FUZZY, _fuzzy_similarity),
    )
    for match_type, strategy in strategies:
        similarity = strategy(query, name)
        if similarity is not None:
            return MatchResult(entry.id, entry.name, match_type, similarity)
    return None
