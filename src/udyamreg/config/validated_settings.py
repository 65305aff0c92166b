"""
Pydantic validation for the YAML config file.

``SettingsModel`` ignores unknown keys and converts to the ``Settings`` dataclasses.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

from .settings import (
    DEFAULT_DB_URL,
    DEFAULT_UPSTREAM_URL,
    ApiConfig,
    AuditConfig,
    DatabaseConfig,
    LoggingConfig,
    Settings,
    UpstreamConfig,
)


class DatabaseConfigModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    url: str = DEFAULT_DB_URL


class UpstreamConfigModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    base_url: str = DEFAULT_UPSTREAM_URL
    timeout_seconds: float = Field(5.0, gt=0)
    user_agent: str = "UdyamRegistration/0.1"


class ApiConfigModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    host: str = "0.0.0.0"
    port: int = Field(5000, ge=1, le=65535)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    form_schema_path: Optional[str] = None


class LoggingConfigModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    level: str = "INFO"
    file: Optional[str] = None
    max_size: int = 10485760
    backup_count: int = 5
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AuditConfigModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sinks: List[str] = Field(default_factory=lambda: ["logging", "database"])
    log_request_payload: bool = True


class SettingsModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    database: DatabaseConfigModel = DatabaseConfigModel()
    upstream: UpstreamConfigModel = UpstreamConfigModel()
    api: ApiConfigModel = ApiConfigModel()
    logging: LoggingConfigModel = LoggingConfigModel()
    audit: AuditConfigModel = AuditConfigModel()

    def to_dataclass(self) -> Settings:
        s = Settings()
        s.database = DatabaseConfig(**self.database.model_dump())
        s.upstream = UpstreamConfig(**self.upstream.model_dump())
        s.api = ApiConfig(**self.api.model_dump())
        s.logging = LoggingConfig(**self.logging.model_dump())
        s.audit = AuditConfig(**self.audit.model_dump())
        return s


def load_validated_settings(config_path: Optional[str] = None) -> Settings:
    """Validate the YAML file with pydantic and return the Settings dataclass."""
    cfg_file = Path(config_path) if config_path else Path(__file__).parent / "config.yaml"
    data = {}
    if cfg_file.exists():
        data = yaml.safe_load(cfg_file.read_text(encoding="utf-8")) or {}
    model = SettingsModel(**data)
    return model.to_dataclass()
