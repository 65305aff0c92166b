# udyamreg/config/settings.py

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_DB_URL = "sqlite:///data/udyamreg.db"
DEFAULT_UPSTREAM_URL = "https://api.postalpincode.in"


@dataclass
class DatabaseConfig:
    """Database settings"""
    url: str = DEFAULT_DB_URL


@dataclass
class UpstreamConfig:
    """Public PIN code registry"""
    base_url: str = DEFAULT_UPSTREAM_URL
    timeout_seconds: float = 5.0
    user_agent: str = "UdyamRegistration/0.1"


@dataclass
class ApiConfig:
    """HTTP API settings"""
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    # Produced by the external schema extractor; fallback schema is served when absent.
    form_schema_path: Optional[str] = None


@dataclass
class LoggingConfig:
    """Logging settings"""
    level: str = "INFO"
    file: Optional[str] = None
    max_size: int = 10485760  # 10MB
    backup_count: int = 5
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class AuditConfig:
    """Audit sinks: any of "logging", "database", "memory"."""
    sinks: List[str] = field(default_factory=lambda: ["logging", "database"])
    log_request_payload: bool = True


@dataclass
class Settings:
    """Top-level settings"""
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    upstream: UpstreamConfig = field(default_factory=UpstreamConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    audit: AuditConfig = field(default_factory=AuditConfig)

    @classmethod
    def from_dict(cls, config_data: Dict[str, Any]) -> "Settings":
        """Build settings from a plain dict; unknown sections are ignored."""
        settings = cls()

        if "database" in config_data:
            settings.database = DatabaseConfig(**config_data["database"])

        if "upstream" in config_data:
            settings.upstream = UpstreamConfig(**config_data["upstream"])

        if "api" in config_data:
            settings.api = ApiConfig(**config_data["api"])

        if "logging" in config_data:
            settings.logging = LoggingConfig(**config_data["logging"])

        if "audit" in config_data:
            settings.audit = AuditConfig(**config_data["audit"])

        return settings

    def load_environment_variables(self) -> "Settings":
        """Apply UDYAM_* environment overrides in place."""
        db_url = os.getenv("UDYAM_DB_URL")
        if db_url:
            self.database.url = db_url

        upstream_url = os.getenv("UDYAM_UPSTREAM_URL")
        if upstream_url:
            self.upstream.base_url = upstream_url

        upstream_timeout = os.getenv("UDYAM_UPSTREAM_TIMEOUT")
        if upstream_timeout:
            try:
                self.upstream.timeout_seconds = float(upstream_timeout)
            except ValueError:
                pass

        log_level = os.getenv("UDYAM_LOG_LEVEL")
        if log_level:
            self.logging.level = log_level.upper()

        schema_path = os.getenv("UDYAM_FORM_SCHEMA_PATH")
        if schema_path:
            self.api.form_schema_path = schema_path

        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "database": self.database.__dict__,
            "upstream": self.upstream.__dict__,
            "api": self.api.__dict__,
            "logging": self.logging.__dict__,
            "audit": self.audit.__dict__,
        }


def create_settings(config_path: Optional[str] = None) -> Settings:
    """Load the YAML file (validated), then apply environment overrides."""
    from .validated_settings import load_validated_settings

    settings = load_validated_settings(config_path or os.getenv("UDYAM_CONFIG"))
    return settings.load_environment_variables()
