"""CSV helpers for catalog snapshots and bulk-import reports."""

import pathlib
from typing import Iterable, List, Union

import pandas as pd

from kitchen_utils.exceptions import InvalidArgumentError
from kitchen_utils.ingredients.models import CatalogEntry
from kitchen_utils.ingredients.workflows import ExtractedIngredient, IngredientBinding

CATALOG_COLUMNS = ["id", "name", "unit", "cost_per_unit", "category"]
BINDING_COLUMNS = [
    "original_name",
    "quantity",
    "unit",
    "ingredient_id",
    "ingredient_name",
    "match_type",
    "similarity",
    "needs_review",
    "suggested_category",
    "suggested_unit",
]


def _read_records(path: Union[str, pathlib.Path], required: List[str]) -> List[dict]:
    # Read everything as text so ids keep their exact spelling ("007")
    df = pd.read_csv(path, dtype=str, keep_default_na=False, na_values=[""])
    missing = [column for column in required if column not in df.columns]
    if missing:
        raise InvalidArgumentError(f"{path} is missing required columns: {', '.join(missing)}")

    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict(orient="records")


def load_catalog_csv(path: Union[str, pathlib.Path]) -> List[CatalogEntry]:
    """Load a catalog snapshot from CSV.

    Args:
        path: CSV file with ``id`` and ``name`` columns and optional
            ``unit``, ``cost_per_unit`` and ``category`` columns.

    Returns:
        The catalog entries in file order.

    Raises:
        InvalidArgumentError: If a required column is missing or a row is
            unusable.
    """
    return [CatalogEntry.from_record(row) for row in _read_records(path, ["id", "name"])]


def load_extracted_csv(path: Union[str, pathlib.Path]) -> List[ExtractedIngredient]:
    """Load AI-extracted ingredients (``name`` plus optional ``quantity``/``unit``)."""
    return [ExtractedIngredient.from_record(row) for row in _read_records(path, ["name"])]


def bindings_dataframe(bindings: Iterable[IngredientBinding]) -> pd.DataFrame:
    """Tabulate bindings, one row per extracted ingredient."""
    data = []
    for binding in bindings:
        best = binding.outcome.best_match
        data.append(
            {
                "original_name": binding.extracted.name,
                "quantity": binding.extracted.quantity,
                "unit": binding.extracted.unit,
                "ingredient_id": binding.ingredient_id,
                "ingredient_name": binding.ingredient_name,
                "match_type": best.match_type.value if best else None,
                "similarity": best.similarity if best else None,
                "needs_review": binding.needs_review,
                "suggested_category": binding.draft.suggested_category
                if binding.draft
                else None,
                "suggested_unit": binding.draft.suggested_unit if binding.draft else None,
            }
        )
    return pd.DataFrame(data, columns=BINDING_COLUMNS)


def write_bindings_csv(
    bindings: Iterable[IngredientBinding], output_file: Union[str, pathlib.Path]
) -> int:
    """Write bindings to CSV and return the number of rows written."""
    df = bindings_dataframe(bindings)
    df.to_csv(output_file, index=False)
    return len(df)
