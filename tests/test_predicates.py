from datetime import datetime, timezone

from rentals_api.predicates import ListingQuery, Operator, Predicate, build_listing_query
from rentals_api.search import ListingFilterSpec, normalize_params

ALWAYS = (
    Predicate("market_rent", Operator.GTE, 0),
    Predicate("deposit", Operator.GTE, 0),
    Predicate("square_feet", Operator.GTE, 0),
    Predicate("unlisted_at", Operator.IS_NULL),
)


def test_default_spec_only_has_standing_predicates():
    query = build_listing_query(ListingFilterSpec())
    assert query == ListingQuery(predicates=ALWAYS, sort="market_rent", ascending=False, start=0, end=9)
    assert query.limit == 10


def test_every_filter_becomes_a_predicate():
    spec = ListingFilterSpec(
        rent_min=500, rent_max=2000,
        deposit_min=100, deposit_max=1500,
        sq_ft_min=300, sq_ft_max=1200,
        bedrooms={3, 2}, bathrooms={1},
        dogs_required=True, cats_required=True,
        cities={"Eureka", "Arcata"},
        available_from=datetime(2024, 5, 1, tzinfo=timezone.utc),
        available_to=datetime(2024, 6, 1, tzinfo=timezone.utc),
        sort="bedrooms", ascending=True,
        page_size=25, page_number=3,
    )
    query = build_listing_query(spec)

    assert set(query.predicates) == {
        Predicate("market_rent", Operator.GTE, 500),
        Predicate("deposit", Operator.GTE, 100),
        Predicate("square_feet", Operator.GTE, 300),
        Predicate("unlisted_at", Operator.IS_NULL),
        Predicate("market_rent", Operator.LTE, 2000),
        Predicate("deposit", Operator.LTE, 1500),
        Predicate("square_feet", Operator.LTE, 1200),
        Predicate("bedrooms", Operator.IN, (2, 3)),
        Predicate("bathrooms", Operator.IN, (1,)),
        Predicate("dogs", Operator.EQ, True),
        Predicate("cats", Operator.EQ, True),
        Predicate("address_city", Operator.IN, ("Arcata", "Eureka")),
        Predicate("available_date", Operator.GTE, datetime(2024, 5, 1, tzinfo=timezone.utc)),
        Predicate("available_date", Operator.LTE, datetime(2024, 6, 1, tzinfo=timezone.utc)),
    }
    assert (query.sort, query.ascending) == ("bedrooms", True)
    assert (query.start, query.end) == (50, 74)


def test_unrequired_pets_add_no_predicate():
    query = build_listing_query(ListingFilterSpec(dogs_required=False))
    assert not [p for p in query.predicates if p.field in ("dogs", "cats")]


def test_inverted_range_is_passed_through():
    query = build_listing_query(ListingFilterSpec(rent_min=2000, rent_max=1000))
    assert Predicate("market_rent", Operator.GTE, 2000) in query.predicates
    assert Predicate("market_rent", Operator.LTE, 1000) in query.predicates


def test_same_params_build_same_query():
    raw = {"rentMin": "500", "bedrooms": "3,2", "cities": "Eureka,Arcata", "pageNumber": "2"}
    assert build_listing_query(normalize_params(raw)) == build_listing_query(normalize_params(dict(raw)))
