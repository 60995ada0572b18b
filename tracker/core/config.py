from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from tracker.schemas.timeline import TimeWindow


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Work Tracker Timeline"
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    json_logs: bool = True

    # Timeline
    default_window: TimeWindow = TimeWindow.ALL  # env: DEFAULT_WINDOW


@lru_cache
def get_settings() -> Settings:
    return Settings()
