"""
PostgreSQL connection parameters.

Plain configuration for whoever provisions the connection pool: the dialect
itself never connects. URLs are parsed and built through SQLAlchemy so that
escaping of credentials follows the driver's rules.
"""

from typing import Optional

from pydantic import BaseModel, Field
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

JDBC_PREFIX = "jdbc:"
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 5432
DEFAULT_DATABASE = "postgres"
DEFAULT_USERNAME = "postgres"


class PostgresParameters(BaseModel):
    """Connection parameters for a PostgreSQL database."""

    host: str = Field(default=DEFAULT_HOST, description="Database host")
    port: int = Field(default=DEFAULT_PORT, description="Database port")
    database: str = Field(default=DEFAULT_DATABASE, description="Database name")
    username: str = Field(default=DEFAULT_USERNAME, description="Database user")
    password: Optional[str] = Field(default=None, description="Database password")

    @classmethod
    def from_url(
        cls,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> Optional["PostgresParameters"]:
        """
        Read connection parameters from a database URL.

        Both ``jdbc:postgresql://host:port/db`` and SQLAlchemy style
        ``postgresql+psycopg2://user:pw@host:port/db`` URLs are accepted.
        Explicit ``username``/``password`` arguments win over credentials
        embedded in the URL.

        Returns:
            Parameters, or None if the URL does not point at PostgreSQL

        Raises:
            ValueError: If the URL cannot be parsed
        """
        if url.startswith(JDBC_PREFIX):
            url = url[len(JDBC_PREFIX):]
        try:
            parsed = make_url(url)
        except ArgumentError as e:
            raise ValueError(f"Invalid database URL: {e}") from e

        if parsed.get_backend_name() not in ("postgresql", "postgres"):
            return None

        return cls(
            host=parsed.host or DEFAULT_HOST,
            port=parsed.port or DEFAULT_PORT,
            database=(parsed.database or DEFAULT_DATABASE).lstrip("/") or DEFAULT_DATABASE,
            username=username or parsed.username or DEFAULT_USERNAME,
            password=password if password is not None else parsed.password,
        )

    def to_url(self, drivername: str = "postgresql+psycopg2") -> URL:
        """Build a SQLAlchemy URL for these parameters."""
        return URL.create(
            drivername=drivername,
            username=self.username,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )

    def get_connection_string(self) -> str:
        """Connection string including the password, for driver use only."""
        return self.to_url(drivername="postgresql").render_as_string(hide_password=False)

    @property
    def jdbc_url(self) -> str:
        """JDBC style URL without credentials."""
        return f"{JDBC_PREFIX}postgresql://{self.host}:{self.port}/{self.database}"


__all__ = [
    "PostgresParameters",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_DATABASE",
    "DEFAULT_USERNAME",
]
