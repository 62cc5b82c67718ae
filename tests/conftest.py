from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from rentals_api.deps import get_conn
from rentals_api.main import app
from rentals_api.sql import current_stats_by_bedrooms, listings, metadata, property_managements


def _day(year, month, day):
    return datetime(year, month, day, tzinfo=timezone.utc)


PROPERTY_MANAGEMENTS = [
    {
        "id": 1, "name": "kramer", "display_name": "Kramer Properties",
        "url": "https://kramer.example", "listing_item_url": "https://kramer.example/listings/",
        "logo_url": "https://kramer.example/logo.png",
        "accent_color": "#0a3d62", "accent_color_foreground": "#ffffff",
    },
    {
        "id": 2, "name": "hpm", "display_name": "Humboldt Property Management",
        "url": "https://hpm.example", "listing_item_url": "https://hpm.example/l/",
        "logo_url": None, "accent_color": "#2d6a4f", "accent_color_foreground": "#f1faee",
    },
]


def _listing(uid, city, rent, deposit, beds, baths, sq_ft, dogs, cats, available, pm_id, unlisted_at=None):
    return {
        "listable_uid": uid,
        "property_management_id": pm_id,
        "full_address": f"{uid.upper()} Main St, {city}, CA",
        "address_address1": f"{uid.upper()} Main St",
        "address_address2": None,
        "address_city": city,
        "address_state": "CA",
        "address_postal_code": "95521",
        "marketing_title": f"{beds} bed in {city}",
        "market_rent": rent,
        "deposit": deposit,
        "bedrooms": beds,
        "bathrooms": baths,
        "square_feet": sq_ft,
        "dogs": dogs,
        "cats": cats,
        "available_date": available,
        "default_photo_thumbnail_url": None,
        "photos": [{"url": f"https://img.example/{uid}.jpg"}],
        "unlisted_at": unlisted_at,
    }


# market_rent desc: e1, a2, f1, a1, e2 (u1 is unlisted)
LISTINGS = [
    _listing("a1", "Arcata", 1200, 1200, 1, 1, 600, False, True, _day(2024, 5, 1), 1),
    _listing("a2", "Arcata", 1800, 1800, 2, 1, 900, True, True, _day(2024, 6, 1), 1),
    _listing("e1", "Eureka", 2200, 2500, 3, 2, 1300, True, False, _day(2024, 7, 15), 2),
    _listing("e2", "Eureka", 950, 1000, 0, 1, 400, False, False, _day(2024, 4, 1), 2),
    _listing("f1", "Fortuna", 1500, 1500, 2, 2, 1000, False, True, _day(2024, 5, 20), 2),
    _listing("u1", "McKinleyville", 1600, 1600, 2, 1, 950, True, True, _day(2024, 5, 1), 1,
             unlisted_at=_day(2024, 5, 10)),
]

BEDROOM_STATS = [
    {"bedrooms": -1, "avg_market_rent": 0, "median_market_rent": 0, "count": 1},
    {"bedrooms": 0, "avg_market_rent": 950, "median_market_rent": 950, "count": 1},
    {"bedrooms": 1, "avg_market_rent": 1200, "median_market_rent": 1200, "count": 1},
    {"bedrooms": 2, "avg_market_rent": 1650, "median_market_rent": 1650, "count": 2},
    {"bedrooms": 3, "avg_market_rent": 2200, "median_market_rent": 2200, "count": 1},
]


@pytest.fixture()
def engine():
    """In-memory SQLite standing in for the Postgres database."""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    metadata.create_all(eng)
    with eng.begin() as conn:
        conn.execute(property_managements.insert(), PROPERTY_MANAGEMENTS)
        conn.execute(listings.insert(), LISTINGS)
        conn.execute(current_stats_by_bedrooms.insert(), BEDROOM_STATS)
    yield eng
    eng.dispose()


@pytest.fixture()
def conn(engine):
    with engine.connect() as c:
        yield c


@pytest.fixture()
def client(engine):
    def _get_conn():
        c = engine.connect()
        try:
            yield c
        finally:
            c.close()

    app.dependency_overrides[get_conn] = _get_conn
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
