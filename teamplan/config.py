"""Application configuration, loaded from the environment or a ``.env`` file."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Team Resource Scheduler"
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Booking defaults
    DEFAULT_HOURS_PER_DAY: float = 8.0
    DEFAULT_LEAVE_TYPE: str = "other"

    # Directory defaults
    DEFAULT_CAPACITY_HOURS: float = 8.0
    DEFAULT_RESOURCE_COLOR: str = "#3B82F6"
    DEFAULT_PROJECT_COLOR: str = "#8B5CF6"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
