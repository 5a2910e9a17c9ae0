# Data models for the donation matching engine and its HTTP surface.

import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator, model_validator

from foodmatch.models.strategy import Strategy
from foodmatch.utils.geo import is_valid_coordinate

_DATETIME = TypeAdapter(datetime)

def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None

def coerce_coordinate(lat: Any, lng: Any) -> Tuple[Optional[float], Optional[float]]:
    """Return a usable (lat, lng) pair or (None, None); half a coordinate is no coordinate."""
    lat_f, lng_f = _to_float(lat), _to_float(lng)
    if lat_f is None or lng_f is None or not is_valid_coordinate(lat_f, lng_f):
        return None, None
    return lat_f, lng_f

# Postgres renders timestamptz with an hour-only offset ("+00", "-05")
_SHORT_OFFSET = re.compile(r"(\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?[+-]\d{2})$")

def coerce_datetime(value: Any) -> Optional[datetime]:
    """Parse a timestamp the way pydantic would, yielding None for anything unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = _SHORT_OFFSET.sub(r"\1:00", value.strip())
    try:
        return _DATETIME.validate_python(value)
    except ValidationError:
        return None

def coerce_id(value: Any) -> Optional[str]:
    """Any scalar id (int, float, UUID, ...) becomes its string form; None stays None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value if value.strip() else None
    if isinstance(value, (dict, list, tuple, set)):
        return None
    return str(value)

# --- Domain Models ---

class Coordinate(BaseModel):
    """A recipient (or pickup) position in decimal degrees."""
    model_config = ConfigDict(allow_inf_nan=False, frozen=True)

    lat: float = Field(..., ge=-90, le=90, description="Latitude.")
    lng: float = Field(..., ge=-180, le=180, description="Longitude.")

class DonationRecord(BaseModel):
    """
    One active donation row as returned by the data store.

    Only the pickup coordinate and the expiry drive ranking; every other column
    rides along untouched. Bad ids, coordinates or timestamps are degraded to
    None here instead of failing validation, so one broken row never sinks a batch.
    """
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = Field(None, description="Donation identifier, None when the row has no usable one.")
    pickup_latitude: Optional[float] = Field(None, description="Pickup latitude, None when unknown.")
    pickup_longitude: Optional[float] = Field(None, description="Pickup longitude, None when unknown.")
    expiry_datetime: Optional[datetime] = Field(None, description="When the food stops being safe to collect.")

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> Optional[str]:
        return coerce_id(value)

    @model_validator(mode="before")
    @classmethod
    def _normalize_row(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        row = dict(data)
        # The donor's live location wins over the flat pickup columns
        lat, lng = None, None
        nested = row.get("donorLocation") or row.get("donor_location")
        if isinstance(nested, dict):
            lat, lng = coerce_coordinate(nested.get("lat"), nested.get("lng"))
        if lat is None:
            lat, lng = coerce_coordinate(row.get("pickup_latitude"), row.get("pickup_longitude"))
        row["pickup_latitude"], row["pickup_longitude"] = lat, lng
        row["expiry_datetime"] = coerce_datetime(row.get("expiry_datetime"))
        return row

    @property
    def pickup_coordinate(self) -> Optional[Coordinate]:
        if self.pickup_latitude is None or self.pickup_longitude is None:
            return None
        return Coordinate(lat=self.pickup_latitude, lng=self.pickup_longitude)

class RankedDonation(DonationRecord):
    """A donation row annotated with the derived matching metrics. Higher priority_score is better."""
    distance_km: Optional[float] = Field(None, ge=0, description="Straight-line distance to the recipient.")
    travel_time_minutes: Optional[float] = Field(None, ge=0, description="Estimated pickup travel time.")
    time_until_expiry_minutes: Optional[float] = Field(None, description="Negative once expired.")
    urgency_score: Optional[float] = Field(None, ge=0, le=1, description="0 = not urgent, 1 = expiring now.")
    priority_score: Optional[float] = Field(None, description="Strategy-dependent composite score.")

class RankingSummary(BaseModel):
    """Counts a caller needs to describe the outcome of a ranking pass."""
    total: int
    ranked: int = Field(..., description="Records with a priority score.")
    unlocated: int = Field(..., description="Records without a usable pickup coordinate.")
    strategy: Strategy
    optimized: bool = Field(..., description="False when no recipient location was available.")

class ListingFilters(BaseModel):
    """Dashboard filter bar. 'all' or an empty value disables a filter."""
    search: Optional[str] = None
    category: Optional[str] = None
    urgency: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

# --- API Request / Response Models ---

class RankRequest(BaseModel):
    """Request body for /api/rank."""
    donations: List[Dict[str, Any]] = Field(default_factory=list, description="Active donation rows.")
    recipient_location: Optional[Dict[str, Any]] = Field(None, description="Recipient {lat, lng}.")
    strategy: Optional[str] = Field(None, description="distance, urgency or balanced.")
    use_default_location: bool = Field(False, description="Fall back to the configured location when none is given.")
    filters: Optional[ListingFilters] = None

class RankResponse(BaseModel):
    """Response body for /api/rank."""
    results: List[RankedDonation]
    strategy: Strategy
    recipient_location: Optional[Coordinate] = None
    summary: RankingSummary

# --- Error Response Model ---

class ErrorResponse(BaseModel):
    """Standardized error response model."""
    error: str = Field(..., description="A machine-readable error code.")
    detail: str = Field(..., description="A human-readable explanation.")
    error_id: Optional[str] = Field(None, description="Correlation id for unexpected failures.")
