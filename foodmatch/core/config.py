# Matching engine configuration: every tunable of the ranking pass lives here
# so it can be overridden from the environment or a .env file.

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from foodmatch.models.strategy import Strategy

class Settings(BaseSettings):
    PROJECT_NAME: str = "FoodMatch"
    VERSION: str = "0.2.0"
    BRIEF_DESCRIPTION: str = "Ranks active food donations for a recipient by pickup distance and expiry urgency."

    ENV: str = Field("development", description="Application environment (e.g., production, development)")

    # --- Geo ---
    AVERAGE_SPEED_KMH: float = Field(30.0, gt=0, description="Assumed urban pickup speed used for travel-time estimates")
    DISTANCE_HORIZON_KM: float = Field(10.0, gt=0, description="Distance at which proximity is treated as maximally unfavorable")

    # --- Urgency ---
    URGENCY_HORIZON_MINUTES: float = Field(1440.0, gt=0, description="Time-to-expiry at or beyond which urgency is 0")
    HIGH_URGENCY_THRESHOLD: float = Field(0.75, ge=0, le=1)
    MEDIUM_URGENCY_THRESHOLD: float = Field(0.4, ge=0, le=1)

    # --- Ranking ---
    BALANCED_DISTANCE_WEIGHT: float = Field(0.5, ge=0, description="Proximity weight of the balanced strategy")
    BALANCED_URGENCY_WEIGHT: float = Field(0.5, ge=0, description="Urgency weight of the balanced strategy")
    DEFAULT_STRATEGY: Strategy = Field(Strategy.BALANCED, description="Strategy used when the caller does not pick one")

    # Fallback recipient position when the device cannot report one (Bangalore city centre)
    DEFAULT_RECIPIENT_LAT: float = Field(12.9716, ge=-90, le=90)
    DEFAULT_RECIPIENT_LNG: float = Field(77.5946, ge=-180, le=180)

    # Pydantic configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

settings = Settings()
