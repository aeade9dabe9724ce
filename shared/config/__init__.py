"""Shared configuration base classes.

Provides common configuration patterns used across the dashboard and its
tooling to reduce duplication and ensure consistency.
"""

from pydantic_settings import BaseSettings


class BaseLoggingConfig(BaseSettings):
    """Common logging configuration."""

    app_log_level: str = "INFO"
    app_log_redaction_patterns: list[str] = [
        "password",
        "token",
        "secret",
        "key",
        "authorization",
        "cookie",
        "session",
    ]
    app_environment: str = "production"


class BaseClickHouseConfig(BaseSettings):
    """Common ClickHouse connection configuration."""

    clickhouse_host: str = "clickhouse"
    clickhouse_port: int = 8123
    clickhouse_db: str = "rideau"
    clickhouse_user: str = "default"
    clickhouse_password: str = ""


class BaseServiceConfig(BaseLoggingConfig, BaseClickHouseConfig):
    """Base configuration combining logging and ClickHouse settings.

    Services should inherit from this and add their own specific settings.
    The otel_service_name should be overridden by each service.
    """

    otel_service_name: str = "unknown"  # Should be overridden by service


__all__ = ["BaseLoggingConfig", "BaseClickHouseConfig", "BaseServiceConfig"]
