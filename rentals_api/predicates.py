# rentals_api/predicates.py
"""
Declarative query description for the listings search.

build_listing_query() turns a ListingFilterSpec into plain predicate
records plus sort and row window. Nothing here knows about SQLAlchemy;
repository/listings.py translates the records into a statement.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Tuple

from rentals_api.pagination import window_for
from rentals_api.search import ListingFilterSpec


class Operator(str, Enum):
    GTE = "gte"
    LTE = "lte"
    EQ = "eq"
    IN = "in"
    IS_NULL = "is_null"


@dataclass(frozen=True)
class Predicate:
    field: str
    op: Operator
    value: Any = None


@dataclass(frozen=True)
class ListingQuery:
    predicates: Tuple[Predicate, ...]
    sort: str
    ascending: bool
    start: int
    end: int

    @property
    def limit(self) -> int:
        return self.end - self.start + 1


def build_listing_query(spec: ListingFilterSpec) -> ListingQuery:
    preds: List[Predicate] = [
        # min bounds always apply; 0 means "unset"
        Predicate("market_rent", Operator.GTE, spec.rent_min),
        Predicate("deposit", Operator.GTE, spec.deposit_min),
        Predicate("square_feet", Operator.GTE, spec.sq_ft_min),
        # unlisted rows are soft-deleted
        Predicate("unlisted_at", Operator.IS_NULL),
    ]

    if spec.rent_max > 0:
        preds.append(Predicate("market_rent", Operator.LTE, spec.rent_max))
    if spec.deposit_max > 0:
        preds.append(Predicate("deposit", Operator.LTE, spec.deposit_max))
    if spec.sq_ft_max > 0:
        preds.append(Predicate("square_feet", Operator.LTE, spec.sq_ft_max))

    if spec.bedrooms:
        preds.append(Predicate("bedrooms", Operator.IN, tuple(sorted(spec.bedrooms))))
    if spec.bathrooms:
        preds.append(Predicate("bathrooms", Operator.IN, tuple(sorted(spec.bathrooms))))

    if spec.dogs_required:
        preds.append(Predicate("dogs", Operator.EQ, True))
    if spec.cats_required:
        preds.append(Predicate("cats", Operator.EQ, True))

    if spec.cities:
        preds.append(Predicate("address_city", Operator.IN, tuple(sorted(spec.cities))))

    if spec.available_from is not None:
        preds.append(Predicate("available_date", Operator.GTE, spec.available_from))
    if spec.available_to is not None:
        preds.append(Predicate("available_date", Operator.LTE, spec.available_to))

    window = window_for(spec.page_size, spec.page_number)
    return ListingQuery(
        predicates=tuple(preds),
        sort=spec.sort,
        ascending=spec.ascending,
        start=window.start,
        end=window.end,
    )
