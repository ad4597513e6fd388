from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration.

    Values are loaded from environment variables and optional .env file.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    # App
    app_name: str = "DMP Booking Service"
    environment: str = "dev"  # dev|test|staging|prod
    api_prefix: str = "/api"

    # Database
    database_url: str = "sqlite:///./dmp_booking.db"

    # Security / JWT
    secret_key: str = "CHANGE_ME"  # change in prod
    access_token_exp_minutes: int = 60 * 24
    jwt_algorithm: str = "HS256"

    # Password hashing
    bcrypt_rounds: int = 12

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Registration
    supplier_requires_approval: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
