"""
Configuration module for the clinic tool router.
Loads settings from environment variables (and an optional .env file).
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server
    app_host: str = Field(
        default="0.0.0.0",
        alias="HOST",
        description="Host to bind the application"
    )
    port: int = Field(
        default=3000,
        alias="PORT",
        description="Port to bind the application"
    )
    log_level: str = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level"
    )

    # Emergency forwarding
    crisis_line_number: Optional[str] = Field(
        default=None,
        alias="CRISIS_LINE_NUMBER",
        description="Number that emergency.transfer forwards 988 calls to"
    )

    # Seed slots
    seed_slots_path: Optional[str] = Field(
        default=None,
        alias="SEED_SLOTS_PATH",
        description="JSON file with a list of {provider, mode, start} slots"
    )
    seed_providers: str = Field(
        default="Dr. Chen,Dr. Rivera,Dr. Patel",
        alias="SEED_PROVIDERS",
        description="Comma separated providers used when generating slots"
    )
    seed_days: int = Field(
        default=5,
        alias="SEED_DAYS",
        description="Number of days of generated slots"
    )
    seed_day_start_hour: int = Field(default=9, alias="SEED_DAY_START_HOUR")
    seed_day_end_hour: int = Field(default=17, alias="SEED_DAY_END_HOUR")

    # Booking policy
    enforce_single_booking: bool = Field(
        default=False,
        alias="ENFORCE_SINGLE_BOOKING",
        description="Reject bookings against a slot that already has an appointment"
    )

    default_timezone: str = Field(
        default="America/Chicago",
        alias="DEFAULT_TIMEZONE",
        description="Timezone used by /timenow when none is requested"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
        populate_by_name = True

    @property
    def providers(self) -> List[str]:
        return [p.strip() for p in self.seed_providers.split(",") if p.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
