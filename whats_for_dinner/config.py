"""Service settings, read from the environment (and .env) via pydantic-settings."""

from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the dinner ideas service."""

    gemini_api_key: str = ""
    gemini_model: str = "gemini-3-flash-preview"
    inference_timeout: float = 60.0  # seconds per Gemini call

    # Largest accepted photo upload
    max_image_size: int = 10 * 1024 * 1024

    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    cors_origins: str = "*"  # comma-separated, or "*"
    rate_limit_per_hour: int = 100

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> List[str]:
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


settings = Settings()
