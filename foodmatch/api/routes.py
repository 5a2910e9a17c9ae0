# foodmatch/api/routes.py

from fastapi import APIRouter, HTTPException, Request, status
import logging

from foodmatch.core.config import settings
from foodmatch.core.errors import InvalidArgument
from foodmatch.models.dto import Coordinate, ErrorResponse, RankRequest, RankResponse
from foodmatch.services.filters import apply_filters
from foodmatch.services.ranking_service import RankingService

router = APIRouter()
logger = logging.getLogger(__name__)

def get_ranking_service(request: Request) -> RankingService:
    service = getattr(request.app.state, "ranking_service", None)
    if service is None:
        service = RankingService(settings)
        request.app.state.ranking_service = service
    return service

# ----------------------------------------------------------------------
# Rank Endpoint
# ----------------------------------------------------------------------
@router.post(
    "/rank",
    response_model=RankResponse,
    responses={400: {"model": ErrorResponse}},
)
async def rank_donations(request: Request, data: RankRequest):
    """Rank the posted donation rows for one recipient, then apply the listing filters."""
    service = get_ranking_service(request)

    location = data.recipient_location
    if location is None and data.use_default_location:
        location = {"lat": settings.DEFAULT_RECIPIENT_LAT, "lng": settings.DEFAULT_RECIPIENT_LNG}
        logger.info("No recipient location supplied; using the configured default location.")

    try:
        strategy = service.parse_strategy(data.strategy)
        recipient = service.parse_location(location)
        ranked = service.rank(data.donations, recipient, strategy)
    except InvalidArgument as e:
        logger.warning(f"Rejected rank request ({e.field}): {e.detail}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ErrorResponse(
                error="INVALID_ARGUMENT",
                detail=e.detail,
            ).model_dump(),
        )

    summary = service.summarize(ranked, strategy, optimized=recipient is not None)
    results = apply_filters(ranked, data.filters)

    return RankResponse(
        results=results,
        strategy=strategy,
        recipient_location=recipient,
        summary=summary,
    )
