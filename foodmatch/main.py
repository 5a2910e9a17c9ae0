from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import uuid

from foodmatch.core.config import settings
from foodmatch.logging import configure_logging
from foodmatch.middleware.logging import LoggingMiddleware
from foodmatch.api.routes import router as api_router
from foodmatch.models.dto import ErrorResponse
from foodmatch.services.ranking_service import RankingService

configure_logging()
logger = logging.getLogger(__name__)

# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Application startup: v{settings.VERSION}")
    app.state.ranking_service = RankingService(settings)
    logger.info(
        f"Ranking service ready (speed={settings.AVERAGE_SPEED_KMH} km/h, "
        f"distance horizon={settings.DISTANCE_HORIZON_KM} km, "
        f"urgency horizon={settings.URGENCY_HORIZON_MINUTES} min)"
    )

    yield

    logger.info("Application shutdown.")

# --- FastAPI Application Initialization ---
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=settings.BRIEF_DESCRIPTION,
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)

# --- API Routes ---
app.include_router(api_router, prefix="/api")

# --- Health Check Endpoint ---
@app.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "ok", "version": settings.VERSION}

# --- Global Exception Handler (for unhandled errors) ---
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    error_id = str(uuid.uuid4())
    logger.error(f"Unhandled exception (ID: {error_id}): {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": ErrorResponse(
                error="INTERNAL_SERVER_ERROR",
                detail="An unexpected error occurred. Please report this error ID.",
                error_id=error_id,
            ).model_dump()
        }
    )
