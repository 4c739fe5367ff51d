# lottery/config/settings.py

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    SERVICE_NAME: str = "lottery-matching"
    GROUP_SIZE_MIN_DEFAULT: int = 2
    GROUP_SIZE_MAX_DEFAULT: int = 3
    REPEAT_WINDOW_RUNS_DEFAULT: int = 3
    # history lookback: newest max(window * per_run, floor) recent groups
    RECENT_MATCHES_PER_RUN: int = 20
    RECENT_MATCHES_FLOOR: int = 40

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
