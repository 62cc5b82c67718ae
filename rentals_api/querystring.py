# rentals_api/querystring.py
"""
Query-string reconstruction for links: apply/remove filters, pagination,
page size. Overrides replace a key (None removes it); list values are
comma-joined, the same convention search.normalize_params splits on.
"""
from typing import Any, List, Mapping, Tuple, Union
from urllib.parse import parse_qsl, urlencode

from rentals_api.models import FilterChip, PageLinks
from rentals_api.pagination import Pagination
from rentals_api.search import ListingFilterSpec, format_param, spec_to_params

ParamSource = Union[str, Mapping[str, Any], ListingFilterSpec]


def _to_pairs(params: ParamSource) -> List[Tuple[str, str]]:
    if isinstance(params, ListingFilterSpec):
        return list(spec_to_params(params).items())
    if isinstance(params, str):
        return parse_qsl(params.lstrip("?"), keep_blank_values=True)
    if hasattr(params, "multi_items"):
        return [(k, v) for k, v in params.multi_items()]
    return [(key, format_param(value)) for key, value in params.items() if value is not None]


def create_query_string(params: ParamSource, overrides: Mapping[str, Any]) -> str:
    """
    Current params + overrides -> url-encoded query string (no leading '?').

      create_query_string("?rentMin=500&cities=Arcata", {"rentMin": None})
      -> "cities=Arcata"
    """
    pairs = _to_pairs(params)
    for key, value in overrides.items():
        if value is None:
            pairs = [(k, v) for k, v in pairs if k != key]
            continue
        new = (key, format_param(value))
        idx = next((i for i, (k, _) in enumerate(pairs) if k == key), None)
        if idx is None:
            pairs.append(new)
        else:
            # replace in place, drop any repeats of the key
            pairs = [p for i, p in enumerate(pairs) if i <= idx or p[0] != key]
            pairs[idx] = new
    return urlencode(pairs)


def _href(path: str, query: str) -> str:
    return f"{path}?{query}" if query else path


def _amount(value: float) -> str:
    num = int(value) if float(value).is_integer() else value
    return f"{num:,}"


def _day(value) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def build_filter_chips(spec: ListingFilterSpec, path: str) -> List[FilterChip]:
    """
    One chip per active filter; its href is the current search without it,
    back on the first page.
    """
    chips: List[FilterChip] = []

    def chip(label: str, overrides: Mapping[str, Any]) -> None:
        query = create_query_string(spec, {**overrides, "pageNumber": None})
        chips.append(FilterChip(label=label, href=_href(path, query)))

    bounds = [
        ("rent_min", "rentMin", "Min rent ${}"),
        ("rent_max", "rentMax", "Max rent ${}"),
        ("deposit_min", "depositMin", "Min deposit ${}"),
        ("deposit_max", "depositMax", "Max deposit ${}"),
        ("sq_ft_min", "sqFtMin", "Min square ft {}"),
        ("sq_ft_max", "sqFtMax", "Max square ft {}"),
    ]
    for attr, key, template in bounds:
        value = getattr(spec, attr)
        if value:
            chip(template.format(_amount(value)), {key: None})

    choices = [
        ("bedrooms", "{} bed"),
        ("bathrooms", "{} bath"),
        ("cities", "{}"),
    ]
    for key, template in choices:
        selected = getattr(spec, key)
        if not selected:
            continue
        for value in sorted(selected):
            rest = sorted(v for v in selected if v != value)
            chip(template.format(value), {key: rest or None})

    if spec.available_from is not None:
        chip("Available since " + _day(spec.available_from), {"availableFrom": None})
    if spec.available_to is not None:
        chip("Available up to " + _day(spec.available_to), {"availableTo": None})
    if spec.cats_required:
        chip("Cats required", {"cats": None})
    if spec.dogs_required:
        chip("Dogs required", {"dogs": None})

    return chips


def build_page_links(spec: ListingFilterSpec, pagination: Pagination, path: str) -> PageLinks:
    def link(page: int) -> str:
        return _href(path, create_query_string(spec, {"pageNumber": page}))

    return PageLinks(
        first=link(1),
        prev=link(pagination.prev_page),
        next=link(pagination.next_page),
        last=link(max(pagination.total_pages, 1)),
    )
