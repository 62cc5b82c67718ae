import logging
from typing import Dict, Any, Tuple, List

from sqlalchemy import and_, asc, desc, func
from sqlalchemy.engine import Connection
from sqlalchemy.sql import select

from rentals_api.predicates import ListingQuery, Operator, Predicate
from rentals_api.sql import (
    PM_PREFIX,
    base_select,                # listings LEFT JOIN property_managements
    current_stats_by_bedrooms,
    listings,                   # table object for filter/sort columns
    property_managements,
)

LOG = logging.getLogger("repo")

_ALLOWED_SORT = {
    "market_rent": listings.c.market_rent,
    "bedrooms":    listings.c.bedrooms,
    "bathrooms":   listings.c.bathrooms,
}

_OPERATORS = {
    Operator.GTE:     lambda col, v: col >= v,
    Operator.LTE:     lambda col, v: col <= v,
    Operator.EQ:      lambda col, v: col == v,
    Operator.IN:      lambda col, v: col.in_(v),
    Operator.IS_NULL: lambda col, v: col.is_(None),
}

TOTAL_COUNT = "total_count"


def _condition(pred: Predicate):
    return _OPERATORS[pred.op](listings.c[pred.field], pred.value)


def _apply_filters(stmt, query: ListingQuery):
    """Attach WHEREs + ORDER BY to a Core statement built by base_select()."""
    conds = [_condition(p) for p in query.predicates]
    if conds:
        stmt = stmt.where(and_(*conds))

    # Sorting (whitelisted); ties keep the table's natural order
    col = _ALLOWED_SORT.get(query.sort, listings.c.market_rent)
    return stmt.order_by(asc(col) if query.ascending else desc(col))


def _row_to_listing(row: Dict[str, Any]) -> Dict[str, Any]:
    """Flat joined row -> listing dict with a nested property_management."""
    listing: Dict[str, Any] = {}
    pm: Dict[str, Any] = {}
    for key, value in row.items():
        if key == TOTAL_COUNT:
            continue
        if key.startswith(PM_PREFIX):
            pm[key[len(PM_PREFIX):]] = value
        else:
            listing[key] = value
    listing["property_management"] = pm if pm.get("id") is not None else None
    listing["photos"] = listing.get("photos") or []
    return listing


def search(conn: Connection, query: ListingQuery) -> Tuple[List[Dict[str, Any]], int]:
    """
    Returns (rows, total) for one page of `query`.
    The exact total rides along on every row (count(*) OVER ()), so a page
    with results costs a single round trip.
    """
    stmt = _apply_filters(base_select(), query)
    paged = (
        stmt.add_columns(func.count().over().label(TOTAL_COUNT))
        .limit(query.limit)
        .offset(query.start)
    )
    rows = conn.execute(paged).mappings().all()

    if rows:
        total = int(rows[0][TOTAL_COUNT])
    else:
        # past the last page (or nothing matches): count separately
        total = conn.execute(stmt.with_only_columns(func.count()).order_by(None)).scalar_one()

    LOG.debug("search %s..%s sort=%s asc=%s -> %s/%s",
              query.start, query.end, query.sort, query.ascending, len(rows), total)
    return [_row_to_listing(dict(r)) for r in rows], total


def get_by_uid(conn: Connection, listable_uid: str) -> Dict[str, Any]:
    """
    Returns one listed (not unlisted) listing by its uid as a dict,
    or {} if not found.
    """
    stmt = base_select().where(
        listings.c.listable_uid == listable_uid,
        listings.c.unlisted_at.is_(None),
    )
    row = conn.execute(stmt).mappings().first()
    return _row_to_listing(dict(row)) if row else {}


def _distinct(conn: Connection, col) -> List[Any]:
    stmt = (
        select(col)
        .distinct()
        .where(col.is_not(None), listings.c.unlisted_at.is_(None))
        .order_by(col)
    )
    return list(conn.execute(stmt).scalars())


def distinct_cities(conn: Connection) -> List[str]:
    return [c for c in _distinct(conn, listings.c.address_city) if c]


def distinct_bedrooms(conn: Connection) -> List[int]:
    return _distinct(conn, listings.c.bedrooms)


def distinct_bathrooms(conn: Connection) -> List[int]:
    return _distinct(conn, listings.c.bathrooms)


def bedroom_stats(conn: Connection) -> List[Dict[str, Any]]:
    stmt = (
        select(current_stats_by_bedrooms)
        .where(current_stats_by_bedrooms.c.bedrooms >= 0)
        .order_by(current_stats_by_bedrooms.c.bedrooms)
    )
    return [dict(r) for r in conn.execute(stmt).mappings().all()]


def list_property_managements(conn: Connection) -> List[Dict[str, Any]]:
    stmt = select(property_managements).order_by(property_managements.c.display_name)
    return [dict(r) for r in conn.execute(stmt).mappings().all()]
