"""Shared utilities and components for the dashboard service and its tooling."""

from .config import BaseClickHouseConfig, BaseLoggingConfig, BaseServiceConfig
from .constants import Environment, Locations

__all__ = [
    "Environment",
    "Locations",
    "BaseServiceConfig",
    "BaseLoggingConfig",
    "BaseClickHouseConfig",
]
