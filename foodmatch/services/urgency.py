# Perishability urgency: a linear, bounded decay from expiry time.

from datetime import datetime, timezone
from typing import Optional

from foodmatch.core.config import settings

def _as_utc(value: datetime) -> datetime:
    # Naive timestamps from the data store are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value

def time_until_expiry_minutes(now: datetime, expiry: Optional[datetime]) -> Optional[float]:
    """Minutes from ``now`` until ``expiry``; negative once expired, None without an expiry."""
    if expiry is None:
        return None
    return (_as_utc(expiry) - _as_utc(now)).total_seconds() / 60.0

def urgency_score(now: datetime, expiry: Optional[datetime], horizon_minutes: Optional[float] = None) -> Optional[float]:
    """
    Map time-to-expiry onto [0, 1].

    1.0 at or after expiry, 0.0 at or beyond the urgency horizon, and a straight
    line in between: ``1 - minutes_left / horizon``.
    """
    minutes_left = time_until_expiry_minutes(now, expiry)
    if minutes_left is None:
        return None
    horizon = settings.URGENCY_HORIZON_MINUTES if horizon_minutes is None else horizon_minutes
    if minutes_left <= 0:
        return 1.0
    if minutes_left >= horizon:
        return 0.0
    return 1.0 - (minutes_left / horizon)

def urgency_band(score: Optional[float]) -> Optional[str]:
    """Bucket an urgency score into the high/medium/low levels used by listing filters."""
    if score is None:
        return None
    if score >= settings.HIGH_URGENCY_THRESHOLD:
        return "high"
    if score >= settings.MEDIUM_URGENCY_THRESHOLD:
        return "medium"
    return "low"
