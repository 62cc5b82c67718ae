from typing import Any, Dict, List, Literal, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from rentals_api.pagination import Pagination
from rentals_api.search import FilterUpdate, ListingFilterSpec

Theme = Literal["system", "light", "dark"]


class PropertyManagement(BaseModel):
    id: int
    name: Optional[str] = None
    display_name: Optional[str] = None
    url: Optional[str] = None
    listing_item_url: Optional[str] = None
    logo_url: Optional[str] = None
    accent_color: Optional[str] = None
    accent_color_foreground: Optional[str] = None


class Listing(BaseModel):
    # Business key from the property management's feed (required)
    listable_uid: str = Field(..., description="Listing id in the management's feed")

    marketing_title: Optional[str] = None
    full_address: Optional[str] = None
    address_address1: Optional[str] = None
    address_address2: Optional[str] = None
    address_city: Optional[str] = None
    address_state: Optional[str] = None
    address_postal_code: Optional[str] = None
    market_rent: Optional[float] = None
    deposit: Optional[float] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    square_feet: Optional[float] = None
    dogs: Optional[bool] = None
    cats: Optional[bool] = None
    available_date: Optional[datetime] = None
    default_photo_thumbnail_url: Optional[str] = None
    photos: List[Dict[str, Any]] = Field(default_factory=list)
    property_management: Optional[PropertyManagement] = None


class FilterChip(BaseModel):
    label: str
    href: str = Field(..., description="Listings URL with this filter removed")


class PageLinks(BaseModel):
    first: str
    prev: str
    next: str
    last: str


class ListingsResponse(BaseModel):
    filters: ListingFilterSpec
    pagination: Pagination
    items: List[Listing]
    chips: List[FilterChip]
    links: PageLinks
    query: str = Field(..., description="Canonical query string for the current search")
    theme: Theme = "system"


class FilterOptions(BaseModel):
    cities: List[str]
    bedrooms: List[int]
    bathrooms: List[int]


class BedroomStat(BaseModel):
    bedrooms: int
    label: str
    avg_market_rent: Optional[float] = None
    median_market_rent: Optional[float] = None
    count: Optional[int] = None


class SearchLinkRequest(BaseModel):
    query: str = Field("", description="Current query string, with or without '?'")
    updates: List[FilterUpdate] = Field(default_factory=list)


class SearchLinkResponse(BaseModel):
    query: str
    filters: ListingFilterSpec


class ThemePreference(BaseModel):
    theme: Theme
