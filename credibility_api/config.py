"""
Configuration settings for Credibility API Service.
"""

import json
import os
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL


DEFAULT_SQLITE_URL = "sqlite:///./credibility.db"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Settings
    app_name: str = "Credibility API"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    hostname: str = "localhost"  # Public name, reported by the root endpoint
    host: str = "0.0.0.0"
    port: int = 8080
    keep_alive_seconds: int = 60
    shutdown_timeout_seconds: int = 15

    # Database (full URL wins over the individual PostgreSQL parts)
    database_url: Optional[str] = None
    db_host: Optional[str] = None
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "credibility"

    allowed_origins: str = "http://localhost:8000,http://localhost:3000"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "CRED_"

    @property
    def database_url_resolved(self) -> str:
        """SQLAlchemy URL for the configured store."""
        if self.database_url:
            return self.database_url
        if self.db_host:
            return URL.create(
                "postgresql+psycopg2",
                username=self.db_user,
                password=self.db_password or None,
                host=self.db_host,
                port=self.db_port,
                database=self.db_name,
            ).render_as_string(hide_password=False)
        return DEFAULT_SQLITE_URL


# CamelCase keys accepted in JSON config files
LEGACY_CONFIG_KEYS = {
    "Hostname": "hostname",
    "Port": "port",
    "DBHost": "db_host",
    "DBPort": "db_port",
    "DBUser": "db_user",
    "DBPassword": "db_password",
    "DBName": "db_name",
}


def load_settings(config_file: Optional[str] = None) -> Settings:
    """
    Build settings, optionally starting from a JSON config file.

    The file may use either field names (``db_host``) or the legacy keys in
    ``LEGACY_CONFIG_KEYS`` (``DBHost``). Environment variables and ``.env``
    take precedence over values from the file.
    """
    if not config_file:
        return Settings()

    with open(config_file, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_file} must contain a JSON object")

    file_values = {LEGACY_CONFIG_KEYS.get(key, key): value for key, value in data.items()}

    from_env = Settings()
    env_values = from_env.model_dump(include=from_env.model_fields_set)

    return Settings(**{**file_values, **env_values})


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings(os.environ.get("CRED_CONFIG_FILE"))
