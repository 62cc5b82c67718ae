from sqlalchemy import (
    JSON, MetaData, Table, Column, ForeignKey, Integer, String, Numeric, Boolean, DateTime,
)
from sqlalchemy.sql import select

metadata = MetaData()

# ---------- Tables (as synced from the property managements' feeds) ----------
property_managements = Table(
    "property_managements", metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String),
    Column("display_name", String),
    Column("url", String),
    Column("listing_item_url", String),
    Column("logo_url", String),
    Column("accent_color", String),
    Column("accent_color_foreground", String),
)

listings = Table(
    "listings", metadata,
    Column("listable_uid", String, primary_key=True),
    Column("property_management_id", Integer, ForeignKey("property_managements.id")),

    # address
    Column("full_address", String),
    Column("address_address1", String),
    Column("address_address2", String),
    Column("address_city", String),
    Column("address_state", String),
    Column("address_postal_code", String),

    Column("marketing_title", String),
    Column("market_rent", Numeric(asdecimal=False)),
    Column("deposit", Numeric(asdecimal=False)),
    Column("bedrooms", Integer),
    Column("bathrooms", Integer),
    Column("square_feet", Numeric(asdecimal=False)),
    Column("dogs", Boolean),
    Column("cats", Boolean),
    Column("available_date", DateTime(timezone=True)),
    Column("default_photo_thumbnail_url", String),
    Column("photos", JSON),

    # soft delete: set when a listing disappears from its feed
    Column("unlisted_at", DateTime(timezone=True)),
)

# view in PG; read-only here
current_stats_by_bedrooms = Table(
    "current_stats_by_bedrooms", metadata,
    Column("bedrooms", Integer),
    Column("avg_market_rent", Numeric(asdecimal=False)),
    Column("median_market_rent", Numeric(asdecimal=False)),
    Column("count", Integer),
)

# ---------- Column list reused across queries ----------

LISTING_COLS = [
    listings.c.listable_uid,
    listings.c.marketing_title,
    listings.c.full_address,
    listings.c.address_address1,
    listings.c.address_address2,
    listings.c.address_city,
    listings.c.address_state,
    listings.c.address_postal_code,
    listings.c.market_rent,
    listings.c.deposit,
    listings.c.bedrooms,
    listings.c.bathrooms,
    listings.c.square_feet,
    listings.c.dogs,
    listings.c.cats,
    listings.c.available_date,
    listings.c.default_photo_thumbnail_url,
    listings.c.photos,
]

# branding, prefixed so they don't collide with listing columns
PM_PREFIX = "pm_"
PM_COLS = [c.label(PM_PREFIX + c.name) for c in property_managements.c]

# ---------- Public selectors ----------

def base_select():
    """
    Listing rows with their property management's branding (LEFT JOIN, so
    a listing whose management row is missing still shows up).
    """
    return select(*LISTING_COLS, *PM_COLS).select_from(
        listings.outerjoin(
            property_managements,
            property_managements.c.id == listings.c.property_management_id,
        )
    )
