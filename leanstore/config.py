"""
Configuration Settings
Credentials, table name and resolved endpoints for one client instance
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from .endpoints import Endpoints, resolve_endpoints
from .exceptions import ConfigurationInvalid

DEFAULT_HTTP_TIMEOUT = 30.0


class Settings(BaseSettings):
    """Raw values read from the environment and the .env file"""

    model_config = SettingsConfigDict(
        env_prefix="LEANCLOUD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_id: Optional[str] = None
    app_key: Optional[str] = None
    table_name: Optional[str] = None
    write_user_session: Optional[str] = None

    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    escape_search_keywords: bool = False

    def to_configuration(self) -> "Configuration":
        return Configuration.from_credentials(
            app_id=self.app_id,
            app_key=self.app_key,
            table_name=self.table_name,
            write_session_token=self.write_user_session,
            http_timeout=self.http_timeout,
            escape_search_keywords=self.escape_search_keywords,
        )


class Configuration(BaseModel):
    """
    Immutable client configuration

    Example:
        >>> config = Configuration.from_credentials(
        ...     app_id="abc", app_key="secret", table_name="Books"
        ... )
        >>> config.batch_endpoint
        'https://abc.api.lncldglobal.com/1.1/batch'
    """

    model_config = ConfigDict(frozen=True)

    table_name: str
    app_id: str
    app_key: str
    write_session_token: Optional[str] = None

    collection_endpoint: str
    search_endpoint: str
    batch_endpoint: str

    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    escape_search_keywords: bool = False

    @classmethod
    def from_credentials(
        cls,
        app_id: Optional[str],
        app_key: Optional[str],
        table_name: Optional[str],
        write_session_token: Optional[str] = None,
        http_timeout: float = DEFAULT_HTTP_TIMEOUT,
        escape_search_keywords: bool = False,
    ) -> "Configuration":
        """
        Build a configuration from explicit values

        Raises:
            ConfigurationInvalid: If app id, app key or table name is missing
        """
        required = {
            "app_id": app_id,
            "app_key": app_key,
            "table_name": table_name,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ConfigurationInvalid(
                f"Invalid configuration, missing: {', '.join(missing)}",
                missing=missing,
            )
        if http_timeout <= 0:
            raise ConfigurationInvalid("http_timeout must be positive")

        endpoints = resolve_endpoints(app_id, table_name)
        return cls(
            table_name=table_name,
            app_id=app_id,
            app_key=app_key,
            write_session_token=write_session_token or None,
            collection_endpoint=endpoints.collection,
            search_endpoint=endpoints.search,
            batch_endpoint=endpoints.batch,
            http_timeout=http_timeout,
            escape_search_keywords=escape_search_keywords,
        )

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Configuration":
        """
        Load configuration from LEANCLOUD_* environment variables

        Args:
            env_file: Optional .env file to read instead of ./.env
        """
        if env_file:
            settings = Settings(_env_file=env_file)
        else:
            settings = Settings()
        return settings.to_configuration()

    @property
    def endpoints(self) -> Endpoints:
        return Endpoints(
            collection=self.collection_endpoint,
            search=self.search_endpoint,
            batch=self.batch_endpoint,
        )

    @property
    def can_write(self) -> bool:
        return bool(self.write_session_token)

    def __repr__(self):
        return f"Configuration(app_id={self.app_id}, table_name={self.table_name}, can_write={self.can_write})"

    def __str__(self):
        return repr(self)
