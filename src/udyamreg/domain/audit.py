"""Audit log entries: one per request attempt, success or failure."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ClientMeta:
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"ipAddress": self.ip_address, "userAgent": self.user_agent}


@dataclass
class SubmissionLogEntry:
    endpoint: str
    method: str
    status_code: int
    duration_ms: int
    client_meta: ClientMeta = field(default_factory=ClientMeta)
    request_payload: Optional[Dict[str, Any]] = None
    error_message: Optional[str] = None
    # e.g. resolution status/source, so "not found" and "unavailable" stay distinct
    details: Dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "endpoint": self.endpoint,
            "method": self.method,
            "statusCode": self.status_code,
            "durationMs": self.duration_ms,
            "clientMeta": self.client_meta.to_dict(),
            "requestPayload": self.request_payload,
            "errorMessage": self.error_message,
            "details": self.details,
            "createdAt": self.created_at.isoformat(),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"), default=str)
