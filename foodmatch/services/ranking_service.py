# Ranks active donations for a recipient by pickup proximity and expiry urgency.

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import structlog
from pydantic import ValidationError

from foodmatch.core.config import Settings, settings
from foodmatch.core.errors import InvalidArgument
from foodmatch.models.dto import Coordinate, DonationRecord, RankedDonation, RankingSummary
from foodmatch.models.strategy import Strategy
from foodmatch.services.urgency import time_until_expiry_minutes, urgency_score
from foodmatch.utils.geo import distance_km, estimate_travel_time_minutes

logger = structlog.get_logger(__name__)

DonationInput = Union[DonationRecord, Mapping[str, Any]]
LocationInput = Union[Coordinate, Mapping[str, Any], None]

class RankingService:
    """
    Scores and orders donation records for one recipient.

    - Distance and travel time come from a haversine estimate.
    - Urgency decays linearly towards the configured horizon.
    - The strategy decides how both signals become a single priority score.

    The service only holds read-only tunables, so one instance can be shared
    by any number of concurrent callers.
    """

    def __init__(self, config: Settings = settings):
        self.average_speed_kmh = config.AVERAGE_SPEED_KMH
        self.distance_horizon_km = config.DISTANCE_HORIZON_KM
        self.urgency_horizon_minutes = config.URGENCY_HORIZON_MINUTES
        self.distance_weight = config.BALANCED_DISTANCE_WEIGHT
        self.urgency_weight = config.BALANCED_URGENCY_WEIGHT
        self.default_strategy = config.DEFAULT_STRATEGY

    def parse_strategy(self, value: Union[Strategy, str, None]) -> Strategy:
        """Resolve a strategy selector, falling back to the default when unset."""
        if value is None:
            value = self.default_strategy
        try:
            return Strategy(value)
        except ValueError:
            raise InvalidArgument(
                f"Unknown strategy {value!r}; expected one of: {', '.join(s.value for s in Strategy)}.",
                field="strategy",
            )

    def parse_location(self, value: LocationInput) -> Optional[Coordinate]:
        if value is None or isinstance(value, Coordinate):
            return value
        if not isinstance(value, Mapping):
            raise InvalidArgument("Recipient location must be an object with lat and lng.", field="recipient_location")
        try:
            return Coordinate.model_validate(dict(value))
        except ValidationError as e:
            raise InvalidArgument(
                f"Recipient location is malformed: {e.error_count()} invalid field(s).",
                field="recipient_location",
            )

    def _records(self, donations: Sequence[DonationInput]) -> List[DonationRecord]:
        records: List[DonationRecord] = []
        for i, row in enumerate(donations):
            if isinstance(row, DonationRecord):
                record = row
            elif isinstance(row, Mapping):
                record = DonationRecord.model_validate(dict(row))
            else:
                # Not a row at all; keep its slot so the output stays a permutation
                logger.warning("record_degraded", position=i, reason="not_a_mapping")
                record = DonationRecord()
            if record.id is None:
                logger.warning("record_degraded", position=i, reason="missing_id")
            records.append(record)
        return records

    def priority(self, strategy: Strategy, distance: float, urgency: Optional[float]) -> float:
        """Higher is better. A missing urgency counts as 'not urgent'."""
        proximity = 1.0 - min(distance / self.distance_horizon_km, 1.0)
        urgency = 0.0 if urgency is None else urgency
        if strategy == Strategy.DISTANCE:
            return proximity
        if strategy == Strategy.URGENCY:
            return urgency
        return self.distance_weight * proximity + self.urgency_weight * urgency

    def score(self, record: DonationRecord, recipient: Optional[Coordinate], strategy: Strategy, now: datetime) -> RankedDonation:
        """Annotate one record. Never raises for missing or bad per-record data."""
        expiry = record.expiry_datetime
        derived: Dict[str, Optional[float]] = {
            "distance_km": None,
            "travel_time_minutes": None,
            "time_until_expiry_minutes": time_until_expiry_minutes(now, expiry),
            "urgency_score": urgency_score(now, expiry, self.urgency_horizon_minutes),
            "priority_score": None,
        }
        if expiry is None:
            logger.debug("record_degraded", donation_id=record.id, reason="missing_expiry")

        if recipient is not None:
            distance = distance_km(recipient, record.pickup_coordinate)
            if distance is None:
                logger.debug("record_degraded", donation_id=record.id, reason="missing_pickup_coordinate")
            else:
                derived["distance_km"] = distance
                derived["travel_time_minutes"] = estimate_travel_time_minutes(distance, self.average_speed_kmh)
                derived["priority_score"] = self.priority(strategy, distance, derived["urgency_score"])

        return RankedDonation.model_validate({**record.model_dump(), **derived})

    def rank(
        self,
        donations: Sequence[DonationInput],
        recipient_location: LocationInput = None,
        strategy: Union[Strategy, str, None] = None,
        now: Optional[datetime] = None,
    ) -> List[RankedDonation]:
        """
        Return every donation annotated and ordered best-first.

        Scored records sort by priority (desc), then distance (asc), then input
        position. Records without a pickup coordinate follow in input order.
        Without a recipient location nothing is scored and input order is kept.

        Raises:
            InvalidArgument: unknown strategy or malformed recipient location.
        """
        resolved = self.parse_strategy(strategy)
        recipient = self.parse_location(recipient_location)
        if now is None:
            now = datetime.now(timezone.utc)

        records = self._records(donations)
        scored: List[Tuple[float, float, int, RankedDonation]] = []
        unscored: List[RankedDonation] = []
        for index, record in enumerate(records):
            ranked = self.score(record, recipient, resolved, now)
            if ranked.priority_score is None:
                unscored.append(ranked)
            else:
                scored.append((-ranked.priority_score, ranked.distance_km, index, ranked))

        scored.sort(key=lambda x: x[:3])
        results = [item[3] for item in scored] + unscored

        logger.info(
            "ranking_completed",
            strategy=resolved.value,
            optimized=recipient is not None,
            total=len(results),
            ranked=len(scored),
            unscored=len(unscored),
        )
        return results

    def summarize(self, ranked: Sequence[RankedDonation], strategy: Union[Strategy, str, None], optimized: bool) -> RankingSummary:
        """Counts for the caller's status line (how many ranked, how many lack GPS)."""
        with_priority = sum(1 for d in ranked if d.priority_score is not None)
        unlocated = sum(1 for d in ranked if d.pickup_coordinate is None)
        return RankingSummary(
            total=len(ranked),
            ranked=with_priority,
            unlocated=unlocated,
            strategy=self.parse_strategy(strategy),
            optimized=optimized,
        )

_service = RankingService()

def rank(
    donations: Sequence[DonationInput],
    recipient_location: LocationInput = None,
    strategy: Union[Strategy, str, None] = None,
    now: Optional[datetime] = None,
) -> List[RankedDonation]:
    """Rank with the process-wide settings; strategy None means DEFAULT_STRATEGY. See RankingService.rank."""
    return _service.rank(donations, recipient_location, strategy, now)

def summarize(ranked: Sequence[RankedDonation], strategy: Union[Strategy, str, None], optimized: bool) -> RankingSummary:
    return _service.summarize(ranked, strategy, optimized)
