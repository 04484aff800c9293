import os
from functools import lru_cache

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    window_start_hour: int = Field(18, ge=0, le=23, alias="STUDY_PLANNER_WINDOW_START_HOUR")
    window_end_hour: int = Field(22, ge=1, le=24, alias="STUDY_PLANNER_WINDOW_END_HOUR")
    break_minutes: int = Field(10, ge=0, alias="STUDY_PLANNER_BREAK_MINUTES")
    lookahead_days: int = Field(365, ge=1, alias="STUDY_PLANNER_LOOKAHEAD_DAYS")
    weekly_target_hours: float = Field(8.0, gt=0, alias="STUDY_PLANNER_WEEKLY_TARGET_HOURS")
    timezone: str = Field("UTC", alias="STUDY_PLANNER_TIMEZONE")
    debug_endpoints: bool = Field(False, alias="STUDY_PLANNER_DEBUG_ENDPOINTS")

    model_config = SettingsConfigDict(
        env_file=os.getenv("ENV_FILE", ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check_window(self) -> "Settings":
        if self.window_end_hour <= self.window_start_hour:
            raise ValueError("STUDY_PLANNER_WINDOW_END_HOUR must be later than STUDY_PLANNER_WINDOW_START_HOUR.")
        return self


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as exc:
        raise RuntimeError(f"Invalid planner configuration: {exc}") from exc
