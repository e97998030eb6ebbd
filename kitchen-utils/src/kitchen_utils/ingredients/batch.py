"""Resolving many ingredient names against one catalog snapshot."""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Hashable, Iterable, List, Optional, Sequence

from tqdm import tqdm

from kitchen_utils.exceptions import InvalidArgumentError
from kitchen_utils.ingredients.models import ResolutionOutcome
from kitchen_utils.ingredients.resolution import (
    MAX_SIMILAR_MATCHES,
    coerce_catalog,
    exclusion_set,
    find_similar_ingredients,
)


def resolve_many(
    queries: Sequence[str],
    catalog: Sequence[Any],
    exclude_ids: Optional[Iterable[Hashable]] = None,
    max_workers: Optional[int] = None,
    show_progress: bool = False,
    limit: int = MAX_SIMILAR_MATCHES,
) -> List[ResolutionOutcome]:
    """Resolve every query in parallel against the same catalog.

    Each resolution only reads the (coerced once, immutable) snapshot, so the
    work can be spread over a thread pool without locking.

    Args:
        queries: Ingredient names to resolve.
        catalog: Catalog snapshot shared by every query.
        exclude_ids: Ids excluded from every resolution.
        max_workers: Thread pool size; None lets the executor decide and 1
            resolves sequentially in the calling thread.
        show_progress: Display a tqdm progress bar.
        limit: Maximum number of matches per outcome.

    Returns:
        Outcomes in the same order as ``queries``.
    """
    if queries is None:
        raise InvalidArgumentError("queries must be a sequence of names, not None")
    if isinstance(queries, str):
        raise InvalidArgumentError("queries must be a sequence of names, not a single string")
    if max_workers is not None and max_workers < 1:
        raise InvalidArgumentError(f"max_workers must be at least 1, got {max_workers!r}")

    queries = list(queries)
    entries = coerce_catalog(catalog)
    excluded = exclusion_set(exclude_ids)

    if max_workers == 1:
        iterator = tqdm(queries, desc="Resolving ingredients", disable=not show_progress)
        return [find_similar_ingredients(q, entries, excluded, limit) for q in iterator]

    results: List[Optional[ResolutionOutcome]] = [None] * len(queries)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_index = {
            executor.submit(find_similar_ingredients, query, entries, excluded, limit): index
            for index, query in enumerate(queries)
        }

        with tqdm(
            total=len(queries), desc="Resolving ingredients", disable=not show_progress
        ) as pbar:
            for future in as_completed(future_to_index):
                results[future_to_index[future]] = future.result()
                pbar.update(1)

    return results
