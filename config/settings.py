"""Application settings loaded from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Data source
    api_base_url: str = "http://localhost:3000/api/data"
    request_timeout_seconds: float = 30.0

    # Table
    default_rows_per_page: int = 8

    # Logging
    log_level: str = "INFO"


settings = Settings()
