# rentals_api/search.py
"""
Search parameters for the listings page.

Turns the raw query-string map (str or list-of-str values) into a fully
defaulted ListingFilterSpec, and back into URL parameters.

Normalization is total: bad numbers, unknown sort keys and garbled dates
fall back to "no constraint" instead of raising, so a hand-edited URL can
never take the listings page down.
"""
import math
from datetime import date, datetime, timezone
from typing import Annotated, Any, Dict, FrozenSet, Iterable, List, Literal, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

SORT_OPTIONS = ("market_rent", "bedrooms", "bathrooms")
SortOption = Literal["market_rent", "bedrooms", "bathrooms"]

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
MAX_PAGE_NUMBER = 1_000_000
NULL_SENTINEL = "null"

RawParams = Mapping[str, Union[str, Sequence[str], None]]

# attribute -> URL key (order is the order of the canonical query string)
PARAM_KEYS: Dict[str, str] = {
    "rent_min": "rentMin",
    "rent_max": "rentMax",
    "deposit_min": "depositMin",
    "deposit_max": "depositMax",
    "sq_ft_min": "sqFtMin",
    "sq_ft_max": "sqFtMax",
    "bedrooms": "bedrooms",
    "bathrooms": "bathrooms",
    "dogs_required": "dogs",
    "cats_required": "cats",
    "cities": "cities",
    "available_from": "availableFrom",
    "available_to": "availableTo",
    "sort": "sort",
    "ascending": "asc",
    "page_size": "pageSize",
    "page_number": "pageNumber",
}


Count = Annotated[int, Field(ge=0)]


class ListingFilterSpec(BaseModel):
    """
    Normalized search intent. A 0 bound or a None set means "not set".

    Only values a query string can carry are accepted, so every spec
    comes back unchanged from normalize_params(spec_to_params(spec)).
    """
    model_config = ConfigDict(frozen=True)

    rent_min: float = Field(0, ge=0, allow_inf_nan=False)
    rent_max: float = Field(0, ge=0, allow_inf_nan=False)
    deposit_min: float = Field(0, ge=0, allow_inf_nan=False)
    deposit_max: float = Field(0, ge=0, allow_inf_nan=False)
    sq_ft_min: float = Field(0, ge=0, allow_inf_nan=False)
    sq_ft_max: float = Field(0, ge=0, allow_inf_nan=False)

    bedrooms: Optional[FrozenSet[Count]] = None
    bathrooms: Optional[FrozenSet[Count]] = None
    cities: Optional[FrozenSet[str]] = None

    dogs_required: bool = False
    cats_required: bool = False

    available_from: Optional[datetime] = None
    available_to: Optional[datetime] = None

    sort: SortOption = SORT_OPTIONS[0]
    ascending: bool = False
    page_size: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    page_number: int = Field(1, ge=1, le=MAX_PAGE_NUMBER)

    @field_validator("bedrooms", "bathrooms")
    @classmethod
    def _empty_counts_are_unset(cls, value):
        return value or None

    @field_validator("cities")
    @classmethod
    def _clean_cities(cls, value):
        return _string_set(value)

    @field_validator("available_from", "available_to")
    @classmethod
    def _as_utc(cls, value):
        if value is None:
            return None
        parsed = to_datetime(value)
        if parsed is None:
            raise ValueError("date is out of range once converted to UTC")
        return parsed

    @field_serializer("bedrooms", "bathrooms", "cities", when_used="json")
    def _sorted(self, value):
        return None if value is None else sorted(value)


# ---------- Tolerant coercion ----------

def to_number(value: Any, default: Optional[float] = 0) -> Optional[float]:
    """
    Coerce anything to a finite number, or return `default`.

      to_number("42")          -> 42
      to_number("abc", 5)      -> 5
      to_number(None, -1)      -> -1
      to_number(["12.5"])      -> 12.5
    """
    if isinstance(value, (list, tuple)):
        if len(value) != 1:
            return default
        value = value[0]

    if isinstance(value, (int, float)):
        num = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return default
        try:
            num = float(text)
        except ValueError:
            return default
    else:
        return default

    if not math.isfinite(num):
        return default
    return int(num) if num.is_integer() else num


def to_datetime(value: Any) -> Optional[datetime]:
    """ISO-8601 date or date-time -> aware UTC datetime; anything else -> None."""
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None

    try:
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, date):
            parsed = datetime(value.year, value.month, value.day)
        elif isinstance(value, str) and value.strip():
            text = value.strip()
            if text[-1] in "Zz":
                text = text[:-1] + "+00:00"
            parsed = datetime.fromisoformat(text)
        else:
            return None

        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


def _round_half_up(num: float) -> int:
    return int(math.floor(num + 0.5))


def _bound(value: Any) -> float:
    num = to_number(value, 0)
    return num if num > 0 else 0


def _flag(value: Any) -> bool:
    return value == "true"


def _tokens(value: Any) -> List[str]:
    if value is None:
        return []
    items: Iterable[Any] = value if isinstance(value, (list, tuple, set, frozenset)) else [value]
    out = []
    for item in items:
        for token in str(item).split(","):
            token = token.strip()
            if token and token != NULL_SENTINEL:
                out.append(token)
    return out


def _number_set(value: Any) -> Optional[FrozenSet[int]]:
    nums = set()
    for token in _tokens(value):
        num = to_number(token, None)
        if num is not None and num >= 0 and float(num).is_integer():
            nums.add(int(num))
    return frozenset(nums) or None


def _string_set(value: Any) -> Optional[FrozenSet[str]]:
    return frozenset(_tokens(value)) or None


def _sort(value: Any) -> str:
    return value if value in SORT_OPTIONS else SORT_OPTIONS[0]


def _page_size(value: Any) -> int:
    size = _round_half_up(to_number(value, DEFAULT_PAGE_SIZE))
    if size < 1:
        return DEFAULT_PAGE_SIZE
    return min(size, MAX_PAGE_SIZE)


def _page_number(value: Any) -> int:
    number = _round_half_up(to_number(value, 1))
    if number < 1:
        return 1
    return min(number, MAX_PAGE_NUMBER)


# ---------- Public API ----------

def params_from_query(query_params: Any) -> Dict[str, Union[str, List[str]]]:
    """
    Collapse a multi-dict (Starlette QueryParams, or a list of pairs) into
    the raw map: one value -> str, a repeated key -> list of str.
    """
    pairs = query_params.multi_items() if hasattr(query_params, "multi_items") else query_params
    raw: Dict[str, Union[str, List[str]]] = {}
    for key, value in pairs:
        if key in raw:
            prev = raw[key]
            raw[key] = (prev if isinstance(prev, list) else [prev]) + [value]
        else:
            raw[key] = value
    return raw


def normalize_params(raw: RawParams) -> ListingFilterSpec:
    """Raw URL parameters -> ListingFilterSpec. Never raises on input shape."""
    return ListingFilterSpec(
        rent_min=_bound(raw.get("rentMin")),
        rent_max=_bound(raw.get("rentMax")),
        deposit_min=_bound(raw.get("depositMin")),
        deposit_max=_bound(raw.get("depositMax")),
        sq_ft_min=_bound(raw.get("sqFtMin")),
        sq_ft_max=_bound(raw.get("sqFtMax")),
        bedrooms=_number_set(raw.get("bedrooms")),
        bathrooms=_number_set(raw.get("bathrooms")),
        cities=_string_set(raw.get("cities")),
        dogs_required=_flag(raw.get("dogs")),
        cats_required=_flag(raw.get("cats")),
        available_from=to_datetime(raw.get("availableFrom")),
        available_to=to_datetime(raw.get("availableTo")),
        sort=_sort(raw.get("sort")),
        ascending=_flag(raw.get("asc")),
        page_size=_page_size(raw.get("pageSize")),
        page_number=_page_number(raw.get("pageNumber")),
    )


def format_param(value: Any) -> str:
    """Python value -> URL parameter string, in the form normalize_params reads back."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return ",".join(format_param(v) for v in sorted(value))
    if isinstance(value, (list, tuple)):
        return ",".join(format_param(v) for v in value)
    return str(value)


def spec_to_params(spec: ListingFilterSpec) -> Dict[str, str]:
    """Non-default fields of `spec` as URL key -> value (defaults are left out)."""
    defaults = ListingFilterSpec()
    params: Dict[str, str] = {}
    for attr, key in PARAM_KEYS.items():
        value = getattr(spec, attr)
        if value == getattr(defaults, attr):
            continue
        params[key] = format_param(value)
    return params


# ---------- Filter updates ----------

class RangeUpdate(BaseModel):
    field: Literal["rent_min", "rent_max", "deposit_min", "deposit_max", "sq_ft_min", "sq_ft_max"]
    value: Optional[float] = None


class ChoiceUpdate(BaseModel):
    field: Literal["bedrooms", "bathrooms", "cities"]
    value: Optional[List[Union[int, str]]] = None


class FlagUpdate(BaseModel):
    field: Literal["dogs_required", "cats_required", "ascending"]
    value: bool = False


class DateUpdate(BaseModel):
    field: Literal["available_from", "available_to"]
    value: Optional[datetime] = None


class SortUpdate(BaseModel):
    field: Literal["sort"]
    value: str = SORT_OPTIONS[0]


class PageUpdate(BaseModel):
    field: Literal["page_size", "page_number"]
    value: Optional[int] = None


FilterUpdate = Annotated[
    Union[RangeUpdate, ChoiceUpdate, FlagUpdate, DateUpdate, SortUpdate, PageUpdate],
    Field(discriminator="field"),
]

# changing any of these leaves the current page alone
_PAGING_FIELDS = ("page_number",)


def apply_update(spec: ListingFilterSpec, update: FilterUpdate) -> ListingFilterSpec:
    """
    Return a new spec with one field replaced. The new value goes through
    the same normalization as a URL parameter; None clears the field.
    Any change other than the page number sends the user back to page 1.
    """
    params: Dict[str, Any] = dict(spec_to_params(spec))
    key = PARAM_KEYS[update.field]
    if update.value is None:
        params.pop(key, None)
    else:
        params[key] = format_param(update.value)
    if update.field not in _PAGING_FIELDS:
        params.pop(PARAM_KEYS["page_number"], None)
    return normalize_params(params)


def apply_updates(spec: ListingFilterSpec, updates: Iterable[FilterUpdate]) -> ListingFilterSpec:
    for update in updates:
        spec = apply_update(spec, update)
    return spec
