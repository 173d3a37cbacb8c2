"""Application configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # so DB_HOST works regardless of case
    )

    # Database fields (read from .env)
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "leadhub"
    db_user: str = "postgres"
    db_password: str = "postgres"
    # Full SQLAlchemy URL; wins over the db_* fields when set
    database_url: str | None = None

    # Auth: no fallback secret, startup fails without one
    jwt_secret: str = Field(..., min_length=16)
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 7
    password_hash_iterations: int = 260_000

    # App
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"


settings = Settings()
