# rentals_api/routers/listings.py
import logging
from typing import List
from urllib.parse import parse_qsl

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.engine import Connection

from rentals_api.deps import get_conn
from rentals_api.models import (
    BedroomStat,
    FilterOptions,
    Listing,
    ListingsResponse,
    PropertyManagement,
    SearchLinkRequest,
    SearchLinkResponse,
)
from rentals_api.pagination import derive_pagination
from rentals_api.predicates import build_listing_query
from rentals_api.querystring import build_filter_chips, build_page_links, create_query_string
from rentals_api.repository import listings as repo
from rentals_api.routers.preferences import get_theme
from rentals_api.search import apply_updates, normalize_params, params_from_query

router = APIRouter(prefix="/api", tags=["listings"])

LOG = logging.getLogger("api")

# where the front end renders the listings page; chip/page links point here
LISTINGS_PATH = "/listings"


@router.get("/listings", response_model=ListingsResponse)
def list_listings(
    request: Request,
    conn: Connection = Depends(get_conn),
    theme: str = Depends(get_theme),
):
    """
    Thin endpoint:
      - normalize the raw query string (never fails on bad input)
      - build the declarative query and run it
      - derive pagination, filter chips and page links
    """
    spec = normalize_params(params_from_query(request.query_params))
    query = build_listing_query(spec)

    rows, total = repo.search(conn, query)
    pagination = derive_pagination(total, spec.page_size, spec.page_number)
    LOG.info("listings page=%s size=%s total=%s filters=%s",
             spec.page_number, spec.page_size, total, len(query.predicates))

    return ListingsResponse(
        filters=spec,
        pagination=pagination,
        items=[Listing(**row) for row in rows],  # Pydantic validates/serializes
        chips=build_filter_chips(spec, LISTINGS_PATH),
        links=build_page_links(spec, pagination, LISTINGS_PATH),
        query=create_query_string(spec, {}),
        theme=theme,
    )


@router.post("/listings/search-link", response_model=SearchLinkResponse)
def search_link(payload: SearchLinkRequest):
    """Apply form updates to the current search and return the new query string."""
    current = normalize_params(params_from_query(parse_qsl(payload.query.lstrip("?"), keep_blank_values=True)))
    spec = apply_updates(current, payload.updates)
    return SearchLinkResponse(query=create_query_string(spec, {}), filters=spec)


@router.get("/listings/filter-options", response_model=FilterOptions)
def filter_options(conn: Connection = Depends(get_conn)):
    return FilterOptions(
        cities=repo.distinct_cities(conn),
        bedrooms=repo.distinct_bedrooms(conn),
        bathrooms=repo.distinct_bathrooms(conn),
    )


@router.get("/listings/{listable_uid}", response_model=Listing)
def get_listing(listable_uid: str, conn: Connection = Depends(get_conn)):
    row = repo.get_by_uid(conn, listable_uid)
    if not row:
        raise HTTPException(status_code=404, detail="Listing not found")
    return Listing(**row)


@router.get("/stats/bedrooms", response_model=List[BedroomStat])
def bedroom_stats(conn: Connection = Depends(get_conn)):
    return [BedroomStat(label=f"{row['bedrooms']} bd", **row) for row in repo.bedroom_stats(conn)]


@router.get("/property-managements", response_model=List[PropertyManagement])
def property_managements(conn: Connection = Depends(get_conn)):
    return [PropertyManagement(**row) for row in repo.list_property_managements(conn)]
