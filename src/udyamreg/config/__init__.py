from .settings import (
    ApiConfig,
    AuditConfig,
    DatabaseConfig,
    LoggingConfig,
    Settings,
    UpstreamConfig,
    create_settings,
)
from .validated_settings import load_validated_settings

__all__ = [
    "ApiConfig",
    "AuditConfig",
    "DatabaseConfig",
    "LoggingConfig",
    "Settings",
    "UpstreamConfig",
    "create_settings",
    "load_validated_settings",
]
