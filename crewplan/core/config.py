import warnings
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )
    PROJECT_NAME: str = "crewplan"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "console"
    ENABLE_METRICS: bool = True

    # Organization time context
    ORG_TIMEZONE: str = "UTC"

    # Workday bounds, in hours from midnight. Minute offsets used by the
    # placement engine are relative to WORKDAY_START_HOUR.
    WORKDAY_START_HOUR: int = 6
    WORKDAY_END_HOUR: int = 18

    # Placement grid
    GRID_MINUTES: int = 15
    MIN_TRAVEL_MINUTES: int = 15

    # Crew-day capacity thresholds (minutes of booked work)
    NORMAL_CAPACITY_MINUTES: int = 480  # 8 hours
    WARNING_CAPACITY_MINUTES: int = 540  # 9 hours

    @computed_field  # type: ignore[prop-decorator]
    @property
    def WORKDAY_LENGTH_MINUTES(self) -> int:
        return (self.WORKDAY_END_HOUR - self.WORKDAY_START_HOUR) * 60

    @model_validator(mode="after")
    def _validate_workday(self) -> Self:
        if not (0 <= self.WORKDAY_START_HOUR <= 23):
            raise ValueError("WORKDAY_START_HOUR must be between 0 and 23")
        if not (1 <= self.WORKDAY_END_HOUR <= 24):
            raise ValueError("WORKDAY_END_HOUR must be between 1 and 24")
        if self.WORKDAY_END_HOUR <= self.WORKDAY_START_HOUR:
            raise ValueError("WORKDAY_END_HOUR must be after WORKDAY_START_HOUR")
        if self.GRID_MINUTES <= 0:
            raise ValueError("GRID_MINUTES must be positive")
        if self.MIN_TRAVEL_MINUTES < 0:
            raise ValueError("MIN_TRAVEL_MINUTES cannot be negative")
        if self.WARNING_CAPACITY_MINUTES < self.NORMAL_CAPACITY_MINUTES:
            raise ValueError(
                "WARNING_CAPACITY_MINUTES must not be below NORMAL_CAPACITY_MINUTES"
            )
        return self

    @model_validator(mode="after")
    def _check_timezone(self) -> Self:
        try:
            ZoneInfo(self.ORG_TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError):
            message = (
                f'ORG_TIMEZONE "{self.ORG_TIMEZONE}" is not a known IANA zone, '
                "day keys will fall back to UTC."
            )
            if self.ENVIRONMENT == "local":
                warnings.warn(message, stacklevel=1)
            else:
                raise ValueError(message)
        return self


settings = Settings()  # type: ignore
