# Listing filters applied to an already ranked list. Filtering never reorders.

from datetime import date, datetime
from typing import Any, List, Optional, Sequence

from foodmatch.models.dto import ListingFilters, RankedDonation, coerce_datetime
from foodmatch.services.urgency import urgency_band

SEARCH_FIELDS = ("food_name", "description", "pickup_city", "pickup_state")

def _enabled(value: Optional[str]) -> bool:
    return bool(value) and value.strip().lower() != "all"

def _extra(donation: RankedDonation, name: str) -> Any:
    return (donation.model_extra or {}).get(name)

def _posted_on(donation: RankedDonation) -> Optional[date]:
    created = _extra(donation, "created_at")
    if isinstance(created, datetime):
        return created.date()
    parsed = coerce_datetime(created)
    return parsed.date() if parsed else None

def matches_search(donation: RankedDonation, term: str) -> bool:
    needle = term.strip().lower()
    for name in SEARCH_FIELDS:
        value = _extra(donation, name)
        if isinstance(value, str) and needle in value.lower():
            return True
    return False

def matches_urgency(donation: RankedDonation, level: str) -> bool:
    # Rows posted without an urgency level fall back to the computed band
    declared = _extra(donation, "urgency_level") or urgency_band(donation.urgency_score)
    return isinstance(declared, str) and declared.lower() == level.strip().lower()

def matches(donation: RankedDonation, filters: ListingFilters) -> bool:
    if filters.search and filters.search.strip() and not matches_search(donation, filters.search):
        return False

    if _enabled(filters.category):
        category = _extra(donation, "food_type")
        if not isinstance(category, str) or category.lower() != filters.category.strip().lower():
            return False

    if _enabled(filters.urgency) and not matches_urgency(donation, filters.urgency):
        return False

    if filters.start_date or filters.end_date:
        posted = _posted_on(donation)
        if posted is not None:
            if filters.start_date and posted < filters.start_date:
                return False
            # end_date covers the whole day
            if filters.end_date and posted > filters.end_date:
                return False

    return True

def apply_filters(donations: Sequence[RankedDonation], filters: Optional[ListingFilters]) -> List[RankedDonation]:
    """Keep the donations that pass every enabled filter, in their ranked order."""
    if filters is None:
        return list(donations)
    return [d for d in donations if matches(d, filters)]
