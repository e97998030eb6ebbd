"""Loading of the static rule tables bundled with the ingredient engine.

The tables live as JSON files in the ``data`` directory next to this module:

- ``stopwords.json``: qualifier words/phrases that do not change identity
- ``synonyms.json``: groups of names that refer to the same ingredient
- ``category_rules.json`` / ``unit_rules.json``: ordered keyword rules

Tables are read once per directory and handed out as immutable structures.
"""

import functools
import json
import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from kitchen_utils.exceptions import RuleTableError

logger = logging.getLogger(__name__)

DATA_DIR = os.path.join(os.path.dirname(__file__), "data")

CATEGORIES = (
    "Protein",
    "Dairy",
    "Produce",
    "Fruit",
    "Pantry",
    "Spices",
    "Seafood",
    "Bakery",
    "Beverages",
    "Other",
)

UNITS = ("g", "kg", "ml", "L", "each", "lb", "oz", "bunch", "tbsp", "tsp", "cup")

DEFAULT_CATEGORY = "Other"
DEFAULT_UNIT = "each"


@dataclass(frozen=True)
class KeywordRule:
    """One ``label <- keywords`` rule; keywords are kept as raw strings."""

    label: str
    keywords: Tuple[str, ...]


@dataclass(frozen=True)
class RuleTables:
    stopwords: Tuple[str, ...]
    synonyms: Tuple[Tuple[str, ...], ...]
    category_rules: Tuple[KeywordRule, ...]
    unit_rules: Tuple[KeywordRule, ...]


def _read_json(data_dir: str, filename: str):
    path = os.path.join(data_dir, filename)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise RuleTableError(f"Could not read rule table {path}: {e}") from e


def _parse_keyword_rules(raw, filename: str, allowed_labels) -> Tuple[KeywordRule, ...]:
    if not isinstance(raw, list):
        raise RuleTableError(f"{filename} must contain a list of rules")

    rules = []
    for position, item in enumerate(raw):
        try:
            label = item["label"]
            keywords = item["keywords"]
        except (KeyError, TypeError) as e:
            raise RuleTableError(
                f"{filename} rule #{position} needs 'label' and 'keywords'"
            ) from e
        if label not in allowed_labels:
            raise RuleTableError(f"{filename} rule #{position} has unknown label {label!r}")
        if not keywords or not all(isinstance(k, str) and k.strip() for k in keywords):
            raise RuleTableError(f"{filename} rule #{position} has empty keywords")
        rules.append(KeywordRule(label, tuple(keywords)))
    return tuple(rules)


@functools.lru_cache(maxsize=None)
def load_rule_tables(data_dir: Optional[str] = None) -> RuleTables:
    """Load and validate the rule tables.

    Args:
        data_dir: Directory holding the four JSON tables. Defaults to the
            tables bundled with the package.

    Returns:
        A frozen RuleTables instance, shared between callers.

    Raises:
        RuleTableError: If a table is missing or malformed.
    """
    data_dir = data_dir or DATA_DIR

    stopwords = _read_json(data_dir, "stopwords.json")
    if not isinstance(stopwords, list) or not all(isinstance(w, str) for w in stopwords):
        raise RuleTableError("stopwords.json must be a list of strings")

    synonyms = _read_json(data_dir, "synonyms.json")
    if not isinstance(synonyms, list) or not all(
        isinstance(group, list) and len(group) >= 2 for group in synonyms
    ):
        raise RuleTableError("synonyms.json must be a list of name groups")

    tables = RuleTables(
        stopwords=tuple(stopwords),
        synonyms=tuple(tuple(group) for group in synonyms),
        category_rules=_parse_keyword_rules(
            _read_json(data_dir, "category_rules.json"), "category_rules.json", CATEGORIES
        ),
        unit_rules=_parse_keyword_rules(
            _read_json(data_dir, "unit_rules.json"), "unit_rules.json", UNITS
        ),
    )
    logger.debug(
        "Loaded rule tables from %s: %d stopwords, %d synonym groups, "
        "%d category rules, %d unit rules",
        data_dir,
        len(tables.stopwords),
        len(tables.synonyms),
        len(tables.category_rules),
        len(tables.unit_rules),
    )
    return tables
