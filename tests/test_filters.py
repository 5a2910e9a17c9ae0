from datetime import date

import pytest

from conftest import NOW, RECIPIENT, expiring_in, offset_north
from foodmatch.models.dto import ListingFilters
from foodmatch.services.filters import apply_filters
from foodmatch.services.ranking_service import rank

ROWS = [
    {
        "id": "rice",
        "food_name": "Vegetable Biryani",
        "description": "Fresh from the wedding hall",
        "pickup_city": "Bangalore",
        "food_type": "cooked",
        "urgency_level": "high",
        "created_at": "2025-02-27T09:30:00+00:00",
        "pickup_latitude": offset_north(1.0),
        "pickup_longitude": RECIPIENT["lng"],
        "expiry_datetime": expiring_in(60),
    },
    {
        "id": "bread",
        "food_name": "Whole wheat loaves",
        "description": "Bakery surplus",
        "pickup_city": "Mysore",
        "food_type": "bakery",
        "created_at": "2025-03-01T08:00:00+00:00",
        "pickup_latitude": offset_north(4.0),
        "pickup_longitude": RECIPIENT["lng"],
        "expiry_datetime": expiring_in(1000),
    },
    {
        "id": "fruit",
        "food_name": "Bananas",
        "description": "Ripe, needs pickup today",
        "pickup_state": "Karnataka",
        "food_type": "produce",
        "urgency_level": "medium",
        "expiry_datetime": expiring_in(400),
    },
]

@pytest.fixture
def ranked():
    return rank(ROWS, RECIPIENT, "distance", now=NOW)

def ids(items):
    return [d.id for d in items]

def test_no_filters_keeps_everything(ranked):
    assert ids(apply_filters(ranked, None)) == ids(ranked)
    assert ids(apply_filters(ranked, ListingFilters())) == ids(ranked)

def test_filtering_preserves_ranked_order(ranked):
    assert ids(ranked) == ["rice", "bread", "fruit"]
    result = apply_filters(ranked, ListingFilters(search="b"))
    assert ids(result) == ["rice", "bread", "fruit"]

@pytest.mark.parametrize("term,expected", [
    ("biryani", ["rice"]),
    ("BAKERY", ["bread"]),
    ("mysore", ["bread"]),
    ("karnataka", ["fruit"]),
    ("pizza", []),
    ("   ", ["rice", "bread", "fruit"]),
])
def test_search(ranked, term, expected):
    assert ids(apply_filters(ranked, ListingFilters(search=term))) == expected

def test_category(ranked):
    assert ids(apply_filters(ranked, ListingFilters(category="Produce"))) == ["fruit"]
    assert ids(apply_filters(ranked, ListingFilters(category="all"))) == ids(ranked)

def test_urgency_level_falls_back_to_computed_band(ranked):
    # "bread" declares no level; 1000 minutes left scores about 0.31, i.e. low
    assert ids(apply_filters(ranked, ListingFilters(urgency="low"))) == ["bread"]
    assert ids(apply_filters(ranked, ListingFilters(urgency="high"))) == ["rice"]
    assert ids(apply_filters(ranked, ListingFilters(urgency="medium"))) == ["fruit"]

def test_date_range_is_inclusive_and_ignores_undated_rows(ranked):
    window = ListingFilters(start_date=date(2025, 2, 28), end_date=date(2025, 3, 1))
    assert ids(apply_filters(ranked, window)) == ["bread", "fruit"]
    same_day = ListingFilters(start_date=date(2025, 2, 27), end_date=date(2025, 2, 27))
    assert ids(apply_filters(ranked, same_day)) == ["rice", "fruit"]

def test_filters_combine(ranked):
    combined = ListingFilters(search="fresh", category="cooked", urgency="high")
    assert ids(apply_filters(ranked, combined)) == ["rice"]
