from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./autoshift.db"

    # Scheduling
    SCHEDULE_MAX_CONSECUTIVE_DAYS: int = 6
    SCHEDULE_MAX_WEEKLY_HOURS: float = 48.0
    SCHEDULE_ALLOW_MULTIPLE_SHIFTS_PER_DAY: bool = True
    SCHEDULE_SHUFFLE_WORKERS: bool = True
    SCHEDULE_COVERAGE_SEARCH_NODES: int = 100_000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )


settings = Settings()
