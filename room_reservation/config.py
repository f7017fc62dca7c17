from functools import lru_cache
from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings.

    Values come from environment variables first, then a `.env` file,
    then the defaults below.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    host: str = Field(default="0.0.0.0", description="Interface to listen on")
    port: int = Field(default=5000, description="Listening port")

    database_url: str = Field(
        default="sqlite:///./data/room_reservation.db",
        description="SQLAlchemy database URL",
    )
    pool_size: int = Field(default=10, description="Maximum open connections")
    pool_timeout: float = Field(
        default=30, description="Seconds to wait for a free connection"
    )

    upload_dir: str = Field(default="uploads", description="Root of uploaded files")
    timezone: str = Field(
        default="Asia/Jakarta", description="Civil timezone for display and filtering"
    )

    cors_origins: List[str] = Field(default=["*"])
    log_level: str = Field(default="INFO")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
