import os
from enum import StrEnum

from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"
    STAGING = "staging"


ENVIRONMENT = os.getenv("RENDER_ENV", Environment.DEVELOPMENT)


class Settings(BaseSettings):
    app_name: str = "YardLoop API"
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_name: str = "yardloop"
    db_host: str = "localhost"
    db_port: int = 5432
    render_env: str = ENVIRONMENT

    log_level: str = "INFO"
    firebase_credentials: str = "yardloop-service-account.json"
    cors_origins: list[str] = ["http://localhost:5173"]

    # minutes between runs of the job that closes past sales
    sale_expiry_interval_minutes: int = 30
    nearby_default_radius_km: float = 10
    # region assumed for phone numbers entered without a country code
    default_phone_region: str = "US"

    model_config = SettingsConfigDict(
        env_file=".env" if ENVIRONMENT != Environment.PRODUCTION else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )


config = Settings()
