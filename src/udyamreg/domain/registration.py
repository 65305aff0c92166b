"""
Registration data contracts.

``RegistrationIdentity`` and ``RegistrationEnterprise`` are the only
definition of the stage-1/stage-2 validation rules. Field errors are mapped
from pydantic into ``FieldError`` codes, and the fallback form schema served
to the presentation tier is generated from the models (see ``describe_contract``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Literal, Mapping, Optional, Tuple, Type, TypeVar, get_args

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from udyamreg.core.errors import FieldError, Result, ValidationFailedError

from .audit import ClientMeta
from .location import LocationRecord

BusinessType = Literal[
    "proprietorship",
    "partnership",
    "llp",
    "private_limited",
    "public_limited",
    "cooperative",
]
BUSINESS_TYPES: Tuple[str, ...] = get_args(BusinessType)

# state/district/city: overwritten by PIN code resolution
DERIVED_FIELDS: Tuple[str, ...] = ("state", "district", "city")

VALIDATION_ERROR_MESSAGE = "Validation error"

_ERROR_CODES = {
    "missing": "required",
    "string_type": "invalid_type",
    "string_too_short": "too_short",
    "string_too_long": "too_long",
    "string_pattern_mismatch": "invalid_format",
    "literal_error": "invalid_choice",
}

ContractT = TypeVar("ContractT", bound="RegistrationContract")


def _field(alias: str, label: str, *, messages: Optional[Dict[str, str]] = None, **constraints: Any) -> Any:
    extra: Dict[str, Any] = {"errorMessages": dict(messages or {})}
    if alias in DERIVED_FIELDS:
        extra["autoFill"] = "pincode"
    return Field(alias=alias, title=label, json_schema_extra=extra, **constraints)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class RegistrationContract(BaseModel):
    """Base for the stage payloads: camelCase on the wire, blank values count as absent."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_blank_values(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {k: v for k, v in data.items() if not _is_blank(v)}
        return data

    @classmethod
    def parse(cls: Type[ContractT], data: Mapping[str, Any]) -> Result[ContractT, ValidationFailedError]:
        try:
            return Result.ok(cls.model_validate(data))
        except ValidationError as e:
            return Result.err(_failed(field_errors(cls, e)))

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


def _length_bounds(info: Any) -> Tuple[Optional[int], Optional[int]]:
    min_length = max_length = None
    for meta in info.metadata:
        min_length = getattr(meta, "min_length", min_length)
        max_length = getattr(meta, "max_length", max_length)
    return min_length, max_length


def field_errors(model: Type[RegistrationContract], exc: ValidationError) -> List[FieldError]:
    """Map a pydantic ValidationError onto one FieldError per failing field."""
    by_alias = {info.alias or name: info for name, info in model.model_fields.items()}
    errors: List[FieldError] = []
    seen = set()
    for item in exc.errors():
        name = str(item["loc"][0]) if item["loc"] else "body"
        if name in seen:
            continue
        seen.add(name)
        info = by_alias.get(name)
        label = info.title if info is not None and info.title else name
        code = _ERROR_CODES.get(item["type"], item["type"])
        if code in ("too_short", "too_long") and info is not None:
            min_length, max_length = _length_bounds(info)
            if min_length is not None and min_length == max_length:
                code = "invalid_length"
        messages = (info.json_schema_extra or {}).get("errorMessages", {}) if info is not None else {}
        errors.append(FieldError(field=name, message=messages.get(code) or _default_message(code, label, item), code=code))
    return errors


def _default_message(code: str, label: str, item: Mapping[str, Any]) -> str:
    ctx = item.get("ctx") or {}
    if code == "required":
        return f"{label} is required"
    if code == "invalid_type":
        return f"{label} must be a string"
    if code == "invalid_length":
        return f"{label} must be exactly {ctx.get('min_length', ctx.get('max_length'))} characters"
    if code == "too_short":
        return f"{label} must be at least {ctx.get('min_length')} characters long"
    if code == "too_long":
        return f"{label} must not exceed {ctx.get('max_length')} characters"
    if code == "invalid_choice":
        return f"Please select a valid {label.lower()}"
    if code == "invalid_format":
        return f"{label} has an invalid format"
    return str(item.get("msg", f"{label} is invalid"))


def check_fields(
    model: Type[RegistrationContract],
    data: Mapping[str, Any],
    *,
    skip: Iterable[str] = (),
) -> List[FieldError]:
    """Validate ``data`` against ``model`` and return every field error not in ``skip``."""
    try:
        model.model_validate(data)
    except ValidationError as e:
        skipped = set(skip)
        return [err for err in field_errors(model, e) if err.field not in skipped]
    return []


def _failed(errors: List[FieldError]) -> ValidationFailedError:
    return ValidationFailedError(message=VALIDATION_ERROR_MESSAGE, details=errors)


class RegistrationIdentity(RegistrationContract):
    """Stage 1: the applicant."""

    aadhaar_number: str = _field(
        "aadhaarNumber",
        "Aadhaar number",
        min_length=12,
        max_length=12,
        pattern=r"^[0-9]{12}$",
        messages={
            "invalid_length": "Aadhaar number must be exactly 12 digits",
            "invalid_format": "Aadhaar number must contain only digits",
        },
    )
    applicant_name: str = _field(
        "applicantName",
        "Name",
        min_length=2,
        max_length=100,
        pattern=r"^[a-zA-Z\s\.]+$",
        messages={
            "too_short": "Name must be at least 2 characters long",
            "too_long": "Name must not exceed 100 characters",
            "invalid_format": "Name must contain only letters, spaces, and dots",
        },
    )
    mobile_number: str = _field(
        "mobileNumber",
        "Mobile number",
        min_length=10,
        max_length=10,
        pattern=r"^[6-9][0-9]{9}$",
        messages={
            "invalid_length": "Mobile number must be exactly 10 digits",
            "invalid_format": "Mobile number must start with 6-9 and be 10 digits long",
        },
    )
    email_address: str = _field(
        "emailAddress",
        "Email address",
        max_length=255,
        pattern=r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$",
        messages={
            "too_long": "Email address is too long",
            "invalid_format": "Please provide a valid email address",
        },
    )
    pan_number: Optional[str] = _field(
        "panNumber",
        "PAN number",
        default=None,
        min_length=10,
        max_length=10,
        pattern=r"^[A-Z]{5}[0-9]{4}[A-Z]$",
        messages={
            "invalid_length": "PAN number must be exactly 10 characters",
            "invalid_format": "PAN must be in format ABCDE1234F",
        },
    )


class RegistrationEnterprise(RegistrationContract):
    """Stage 2: the business. state/district/city are derived from the PIN code."""

    business_name: str = _field(
        "businessName",
        "Business name",
        min_length=2,
        max_length=200,
        messages={
            "too_short": "Business name must be at least 2 characters long",
            "too_long": "Business name must not exceed 200 characters",
        },
    )
    business_type: BusinessType = _field(
        "businessType",
        "Business type",
        messages={
            "required": "Business type is required",
            "invalid_choice": "Please select a valid business type",
        },
    )
    business_address: str = _field(
        "businessAddress",
        "Business address",
        min_length=10,
        max_length=500,
        messages={
            "too_short": "Business address must be at least 10 characters long",
            "too_long": "Business address must not exceed 500 characters",
        },
    )
    pincode: str = _field(
        "pincode",
        "PIN code",
        min_length=6,
        max_length=6,
        pattern=r"^[0-9]{6}$",
        messages={
            "invalid_length": "PIN code must be exactly 6 digits",
            "invalid_format": "PIN code must contain only digits",
        },
    )
    state: str = _field(
        "state",
        "State",
        min_length=2,
        max_length=100,
        messages={"too_short": "State name must be at least 2 characters long", "too_long": "State name is too long"},
    )
    district: str = _field(
        "district",
        "District",
        min_length=2,
        max_length=100,
        messages={
            "too_short": "District name must be at least 2 characters long",
            "too_long": "District name is too long",
        },
    )
    city: Optional[str] = _field(
        "city",
        "City",
        default=None,
        min_length=2,
        max_length=100,
        messages={"too_short": "City name must be at least 2 characters long", "too_long": "City name is too long"},
    )
    gstin_number: Optional[str] = _field(
        "gstinNumber",
        "GSTIN",
        default=None,
        min_length=15,
        max_length=15,
        pattern=r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z][1-9A-Z]Z[0-9A-Z]$",
        messages={"invalid_length": "GSTIN must be exactly 15 characters", "invalid_format": "Invalid GSTIN format"},
    )
    bank_account_number: Optional[str] = _field(
        "bankAccountNumber",
        "Bank account number",
        default=None,
        pattern=r"^[0-9]{9,18}$",
        messages={"invalid_format": "Bank account number must be 9 to 18 digits"},
    )
    ifsc_code: Optional[str] = _field(
        "ifscCode",
        "IFSC code",
        default=None,
        min_length=11,
        max_length=11,
        pattern=r"^[A-Z]{4}0[A-Z0-9]{6}$",
        messages={"invalid_length": "IFSC code must be exactly 11 characters", "invalid_format": "Invalid IFSC code format"},
    )


def _non_null(prop: Mapping[str, Any]) -> Dict[str, Any]:
    merged = {k: v for k, v in prop.items() if k != "anyOf"}
    for option in prop.get("anyOf", ()):
        if option.get("type") != "null":
            merged.update(option)
    return merged


def describe_contract(model: Type[RegistrationContract]) -> Dict[str, Dict[str, Any]]:
    """Render a contract's JSON schema in the ``validationRules`` shape the form client expects."""
    schema = model.model_json_schema(by_alias=True)
    required = set(schema.get("required", ()))
    out: Dict[str, Dict[str, Any]] = {}
    for name, prop in schema["properties"].items():
        prop = _non_null(prop)
        entry: Dict[str, Any] = {"required": name in required, "label": prop.get("title", name)}
        if "pattern" in prop:
            entry["pattern"] = prop["pattern"]
            entry["message"] = prop.get("errorMessages", {}).get("invalid_format", f"{entry['label']} has an invalid format")
        if "minLength" in prop:
            entry["minLength"] = prop["minLength"]
        if "maxLength" in prop:
            entry["maxLength"] = prop["maxLength"]
        if "enum" in prop:
            entry["options"] = list(prop["enum"])
        if "autoFill" in prop:
            entry["autoFill"] = prop["autoFill"]
        out[name] = entry
    return out


def apply_location(data: Mapping[str, Any], record: LocationRecord) -> Dict[str, Any]:
    """Overwrite the derived fields of a raw stage-2 payload with a resolved record."""
    merged = dict(data)
    merged["state"] = record.state
    merged["district"] = record.district
    merged["city"] = record.city
    return merged


@dataclass(frozen=True)
class RegistrationRecord:
    """Append-only union of both stages, created once per successful full pass."""

    id: str
    identity: RegistrationIdentity
    enterprise: RegistrationEnterprise
    created_at: datetime
    is_completed: bool = True
    submission_step: int = 2
    client_meta: ClientMeta = field(default_factory=ClientMeta)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            **self.identity.to_dict(),
            **self.enterprise.to_dict(),
            "createdAt": self.created_at.isoformat(),
            "submissionStep": self.submission_step,
            "isCompleted": self.is_completed,
        }

    def to_summary(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "createdAt": self.created_at.isoformat(),
            "submissionStep": self.submission_step,
            "isCompleted": self.is_completed,
        }
