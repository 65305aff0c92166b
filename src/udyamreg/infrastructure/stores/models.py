from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class PostalCodeModel(Base):
    """Write-once PIN code cache. The primary key enforces first-write-wins."""

    __tablename__ = "postal_codes"

    pincode: Mapped[str] = mapped_column(String(6), primary_key=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    district: Mapped[str] = mapped_column(String(100))
    state: Mapped[str] = mapped_column(String(100))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class RegistrationModel(Base):
    __tablename__ = "udyam_registrations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)

    # Stage 1
    aadhaar_number: Mapped[str] = mapped_column(String(12), index=True)
    applicant_name: Mapped[str] = mapped_column(String(100))
    mobile_number: Mapped[str] = mapped_column(String(10))
    email_address: Mapped[str] = mapped_column(String(255))
    pan_number: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)

    # Stage 2
    business_name: Mapped[str] = mapped_column(String(200))
    business_type: Mapped[str] = mapped_column(String(64))
    business_address: Mapped[str] = mapped_column(Text)
    pincode: Mapped[str] = mapped_column(String(6), index=True)
    state: Mapped[str] = mapped_column(String(100))
    district: Mapped[str] = mapped_column(String(100))
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    gstin_number: Mapped[Optional[str]] = mapped_column(String(15), nullable=True)
    bank_account_number: Mapped[Optional[str]] = mapped_column(String(18), nullable=True)
    ifsc_code: Mapped[Optional[str]] = mapped_column(String(11), nullable=True)

    submission_step: Mapped[int] = mapped_column(Integer, default=2)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=True)

    ip_address: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)


class SubmissionLogModel(Base):
    __tablename__ = "form_submission_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    endpoint: Mapped[str] = mapped_column(String(128), index=True)
    method: Mapped[str] = mapped_column(String(8))
    status_code: Mapped[int] = mapped_column(Integer)
    duration_ms: Mapped[int] = mapped_column(Integer, default=0)

    ip_address: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    request_payload_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    details_json: Mapped[str] = mapped_column(Text, default="{}")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)

    def set_details(self, data: Dict[str, Any]) -> None:
        self.details_json = json.dumps(data or {}, ensure_ascii=False)

    def get_details(self) -> Dict[str, Any]:
        try:
            return json.loads(self.details_json or "{}")
        except ValueError:
            return {}

    def set_request_payload(self, data: Optional[Dict[str, Any]]) -> None:
        self.request_payload_json = None if data is None else json.dumps(data, ensure_ascii=False, default=str)

    def get_request_payload(self) -> Optional[Dict[str, Any]]:
        if not self.request_payload_json:
            return None
        try:
            return json.loads(self.request_payload_json)
        except ValueError:
            return None
