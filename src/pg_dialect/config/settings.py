"""
Configuration management for pg_dialect.

Environment-based configuration using Pydantic BaseSettings. Values are read
from environment variables with the PGD_ prefix or from a .env file.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .connection import PostgresParameters

# Determine project root for resolving .env by default
PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_ENV_FILE = PROJECT_ROOT / ".env"
ENV_FILE_OVERRIDE = os.getenv("PGD_ENV_FILE")
if ENV_FILE_OVERRIDE:
    env_file_candidate = Path(ENV_FILE_OVERRIDE).expanduser()
    if not env_file_candidate.is_absolute():
        env_file_candidate = PROJECT_ROOT / env_file_candidate
    SETTINGS_ENV_FILE = env_file_candidate
else:
    SETTINGS_ENV_FILE = DEFAULT_ENV_FILE


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Environment variables are loaded with the PGD_ prefix, for example
    PGD_DATABASE_HOST overrides database_host. LOG_LEVEL and ENVIRONMENT
    are also read without prefix.
    """

    ENVIRONMENT: Literal["dev", "staging", "prod"] = Field(
        default="dev",
        validation_alias=AliasChoices("PGD_ENVIRONMENT", "ENVIRONMENT"),
        description="Deployment environment",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        validation_alias=AliasChoices("PGD_LOG_LEVEL", "LOG_LEVEL"),
        description="Logging level (uppercase)",
    )

    # SQL generation
    compact_sql: bool = Field(
        default=False,
        description="Render generated DDL/DML on a single line",
    )

    # Database configuration consumed by the pool provisioning layer
    database_host: str = Field(default="localhost", description="Database host")
    database_port: int = Field(default=5432, description="Database port")
    database_user: str = Field(default="postgres", description="Database user")
    database_password: Optional[str] = Field(
        default=None, description="Database password"
    )
    database_db: str = Field(default="postgres", description="Database name")
    database_uri: Optional[str] = Field(
        default=None,
        description="Complete database URI",
        validation_alias=AliasChoices("PGD_DATABASE__URI", "PGD_DATABASE_URI"),
    )

    model_config = SettingsConfigDict(
        env_prefix="PGD_",
        env_file=str(SETTINGS_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def database(self) -> PostgresParameters:
        """
        Connection parameters assembled from configuration.

        A configured URI wins over the individual database_* fields.
        """
        if self.database_uri:
            parsed = PostgresParameters.from_url(self.database_uri)
            if parsed is not None:
                return parsed
        return PostgresParameters(
            host=self.database_host,
            port=self.database_port,
            database=self.database_db,
            username=self.database_user,
            password=self.database_password,
        )

    def get_database_connection_string(self) -> str:
        """
        Get the PostgreSQL connection string.

        Priority order:
        1) database_uri
        2) Constructed from the individual database_* fields

        'postgres://' is rewritten to 'postgresql://' for SQLAlchemy
        compatibility.
        """
        final_uri = self.database_uri or self.database.get_connection_string()
        if final_uri.startswith("postgres://"):
            final_uri = final_uri.replace("postgres://", "postgresql://", 1)
        return final_uri


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings instance.

    Returns:
        Settings instance with loaded configuration
    """
    return Settings()
