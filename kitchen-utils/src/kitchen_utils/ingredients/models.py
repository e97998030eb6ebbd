import dataclasses
import enum
from decimal import Decimal, InvalidOperation
from typing import Any, Hashable, Mapping, Tuple

from kitchen_utils.exceptions import InvalidArgumentError


@dataclasses.dataclass(frozen=True)
class CatalogEntry:
    id: Hashable
    name: str
    unit: str = "each"
    cost_per_unit: Decimal = Decimal("0")
    category: str = "Other"

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "CatalogEntry":
        """Build an entry from a catalog store row.

        Only ``id`` and ``name`` are required; ``unit``, ``cost_per_unit`` and
        ``category`` fall back to the catalog defaults when missing or null.
        """
        if record.get("id") is None or not isinstance(record.get("name"), str):
            raise InvalidArgumentError(
                f"Catalog record needs an 'id' and a string 'name': {record!r}"
            )

        cost = record.get("cost_per_unit")
        try:
            cost = Decimal("0") if cost is None else Decimal(str(cost))
        except InvalidOperation as e:
            raise InvalidArgumentError(f"Invalid cost_per_unit: {cost!r}") from e

        return cls(
            id=record["id"],
            name=record["name"],
            unit=record.get("unit") or "each",
            cost_per_unit=cost,
            category=record.get("category") or "Other",
        )


class MatchType(str, enum.Enum):
    EXACT = "exact"
    ALIAS = "alias"
    PARTIAL = "partial"
    FUZZY = "fuzzy"

    @property
    def rank(self) -> int:
        """Higher ranks are more confident; exact > alias > partial > fuzzy."""
        return _MATCH_TYPE_RANK[self]


_MATCH_TYPE_RANK = {
    MatchType.EXACT: 3,
    MatchType.ALIAS: 2,
    MatchType.PARTIAL: 1,
    MatchType.FUZZY: 0,
}


@dataclasses.dataclass(frozen=True)
class MatchResult:
    id: Hashable
    name: str
    match_type: MatchType
    similarity: float


@dataclasses.dataclass(frozen=True)
class ResolutionOutcome:
    matches: Tuple[MatchResult, ...]
    has_exact_match: bool
    should_offer_create: bool
    ranked: Tuple[MatchResult, ...] = dataclasses.field(default=(), repr=False)

    @property
    def best_match(self):
        return self.matches[0] if self.matches else None


@dataclasses.dataclass(frozen=True)
class InferredDraft:
    suggested_name: str
    suggested_category: str
    suggested_unit: str
