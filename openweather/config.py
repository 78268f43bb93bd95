from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    app_name: str = "openweather"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # OpenWeatherMap API
    api_key: Optional[str] = None
    base_url: str = "https://api.openweathermap.org/data/2.5"
    units: str = "metric"

    # Requests
    request_timeout_s: float = Field(2.0, gt=0)
    max_workers: int = Field(4, gt=0)

    # .env support and prefix for clarity
    model_config = SettingsConfigDict(
        env_prefix="OWM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
