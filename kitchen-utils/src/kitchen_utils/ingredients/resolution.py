"""Deciding whether a free-text ingredient name already exists in a catalog."""

import logging
import numbers
from collections.abc import Mapping
from typing import Any, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

from kitchen_utils.exceptions import InvalidArgumentError
from kitchen_utils.ingredients import matching
from kitchen_utils.ingredients.models import (
    CatalogEntry,
    MatchResult,
    MatchType,
    ResolutionOutcome,
)
from kitchen_utils.ingredients.normalization import normalize

logger = logging.getLogger(__name__)

MAX_SIMILAR_MATCHES = 5
EFFECTIVELY_EXACT = 0.95
MIN_CREATE_LENGTH = 2


def coerce_catalog(catalog: Iterable[Any]) -> List[CatalogEntry]:
    """Turn a catalog snapshot into a list of CatalogEntry objects.

    Items may already be CatalogEntry instances or store rows (mappings).

    Raises:
        InvalidArgumentError: If the catalog is None or holds anything else.
    """
    if catalog is None:
        raise InvalidArgumentError("catalog must be a sequence of entries, not None")
    if isinstance(catalog, (str, bytes, Mapping)):
        raise InvalidArgumentError(
            f"catalog must be a sequence of entries, got {type(catalog).__name__}"
        )

    entries = []
    for item in catalog:
        if isinstance(item, CatalogEntry):
            entries.append(item)
        elif isinstance(item, Mapping):
            entries.append(CatalogEntry.from_record(item))
        else:
            raise InvalidArgumentError(f"Unsupported catalog item: {item!r}")
    return entries


def exclusion_set(exclude_ids: Optional[Iterable[Hashable]]) -> frozenset:
    """Freeze ``exclude_ids``; a bare string is rejected rather than split into characters."""
    if exclude_ids is None:
        return frozenset()
    if isinstance(exclude_ids, (str, bytes)):
        raise InvalidArgumentError("exclude_ids must be a collection of ids, not a string")
    return frozenset(exclude_ids)


def _id_key(ingredient_id: Hashable) -> Tuple[int, Any]:
    # Numeric ids sort numerically (9 before 10) and ahead of any other id
    if isinstance(ingredient_id, numbers.Real) and not isinstance(ingredient_id, bool):
        return (0, ingredient_id)
    return (1, str(ingredient_id))


def ranking_key(match: MatchResult) -> Tuple[int, float, str, Tuple[int, Any]]:
    """Sort key: tier, then similarity (both descending), then name and id."""
    return (-match.match_type.rank, -match.similarity, match.name.lower(), _id_key(match.id))


def _is_effectively_exact(match: MatchResult) -> bool:
    return match.match_type is MatchType.EXACT or match.similarity >= EFFECTIVELY_EXACT


def find_similar_ingredients(
    query: str,
    catalog: Sequence[Any],
    exclude_ids: Optional[Iterable[Hashable]] = None,
    limit: int = MAX_SIMILAR_MATCHES,
) -> ResolutionOutcome:
    """Rank the catalog entries that may be the ingredient named by ``query``.

    Every non-excluded entry is classified against the normalized query; the
    verdicts are sorted by tier (exact > alias > partial > fuzzy), similarity,
    name and id. Only the best ``limit`` are exposed as ``matches``, while the
    full ranking is kept on ``ranked``.

    Args:
        query: Free-text ingredient name.
        catalog: Snapshot of catalog entries (CatalogEntry objects or rows).
        exclude_ids: Ids that must not be offered, e.g. ingredients already
            used in the recipe being edited.
        limit: Maximum number of matches to expose.

    Returns:
        A ResolutionOutcome. ``has_exact_match`` is set when any verdict is
        exact or at least 0.95 similar; ``should_offer_create`` when there is
        no such verdict and the normalized query has two or more characters.

    Raises:
        InvalidArgumentError: On a non-string query, a None catalog, or a
            limit below 1.
    """
    if not isinstance(query, str):
        raise InvalidArgumentError(f"query must be a string, got {type(query).__name__}")
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise InvalidArgumentError(f"limit must be a positive integer, got {limit!r}")

    entries = coerce_catalog(catalog)
    excluded = exclusion_set(exclude_ids)

    normalized = normalize(query)
    if not normalized:
        return ResolutionOutcome(matches=(), has_exact_match=False, should_offer_create=False)

    best_by_id: Dict[Hashable, MatchResult] = {}
    for entry in entries:
        if entry.id in excluded:
            continue
        result = matching.classify(normalized, entry)
        if result is None:
            continue
        current = best_by_id.get(result.id)
        if current is None or ranking_key(result) < ranking_key(current):
            best_by_id[result.id] = result

    ranked = tuple(sorted(best_by_id.values(), key=ranking_key))
    has_exact_match = any(_is_effectively_exact(m) for m in ranked)
    should_offer_create = len(normalized) >= MIN_CREATE_LENGTH and not has_exact_match

    logger.debug(
        "Resolved %r (normalized %r): %d candidates, exact=%s, offer_create=%s",
        query,
        normalized.text,
        len(ranked),
        has_exact_match,
        should_offer_create,
    )
    return ResolutionOutcome(
        matches=ranked[:limit],
        has_exact_match=has_exact_match,
        should_offer_create=should_offer_create,
        ranked=ranked,
    )


def filter_catalog(
    query: str,
    catalog: Sequence[Any],
    exclude_ids: Optional[Iterable[Hashable]] = None,
    limit: Optional[int] = None,
) -> List[CatalogEntry]:
    """Case-insensitive substring filter for incremental-search dropdowns.

    Unlike ``find_similar_ingredients`` it neither normalizes nor ranks, and
    catalog order is preserved. An empty query returns every
    non-excluded entry.
    """
    if not isinstance(query, str):
        raise InvalidArgumentError(f"query must be a string, got {type(query).__name__}")
    if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit < 1):
        raise InvalidArgumentError(f"limit must be a positive integer, got {limit!r}")

    entries = coerce_catalog(catalog)
    excluded = exclusion_set(exclude_ids)
    needle = query.strip().lower()

    filtered = [
        entry
        for entry in entries
        if entry.id not in excluded and needle in entry.name.lower()
    ]
    return filtered if limit is None else filtered[:limit]
