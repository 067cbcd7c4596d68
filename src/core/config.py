"""
Configuration management using Pydantic Settings
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.shared_types import OpponentType


class Settings(BaseSettings):
    """Application settings. Every field can be overridden with a CYCLING_* environment variable."""

    model_config = SettingsConfigDict(
        env_prefix="CYCLING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "風馳電掣"
    version: str = "0.1.0"
    log_level: str = Field(default="INFO", description="Logging level")

    # Server
    api_host: str = "127.0.0.1"
    api_port: int = Field(default=8000, ge=1, le=65535)

    # Database
    database_url: str = "sqlite:///./cycling_race.sqlite3"
    database_echo: bool = False

    # Player defaults
    default_player_name: str = "玩家1"
    default_opponent_type: OpponentType = OpponentType.AI

    # Opponent "thinking" delays (seconds)
    draft_thinking_delay: float = Field(default=1.0, ge=0)
    board_thinking_delay: float = Field(default=1.5, ge=0)

    # Race placeholders
    track_name: str = "隨機賽道"
    track_length: int = Field(default=30, ge=1)
    starting_stamina: int = Field(default=100, ge=1)

    @field_validator("log_level")
    @classmethod
    def normalise_log_level(cls, value: str) -> str:
        return value.upper()


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance"""
    return Settings()
