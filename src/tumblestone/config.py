"""Tumblestone solver configuration."""

from dotenv import find_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine the environment file path, or None if not found
ENV_FILE = find_dotenv(usecwd=True) or None


class Settings(BaseSettings):
    """Settings read from ``TUMBLESTONE_*`` environment variables or ``.env``."""

    host: str = "127.0.0.1"
    """Interface the HTTP API binds to. Default: 127.0.0.1."""

    port: int = 8000
    """Port the HTTP API listens on. Default: 8000."""

    log_level: str = "WARNING"
    """Root logging level for the command line and the HTTP API. Default: WARNING."""

    color: bool = True
    """Whether frames use ANSI colors. Default: True."""

    model_config = SettingsConfigDict(
        env_prefix="TUMBLESTONE_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )


def get_settings() -> Settings:
    return Settings()
