from .location import (
    LocationRecord,
    Resolution,
    ResolutionSource,
    ResolutionStatus,
    UpstreamOutcome,
    is_valid_postal_code,
    validate_postal_code,
)
from .registration import (
    BUSINESS_TYPES,
    DERIVED_FIELDS,
    RegistrationEnterprise,
    RegistrationIdentity,
    RegistrationRecord,
)
from .audit import ClientMeta, SubmissionLogEntry

__all__ = [
    "LocationRecord",
    "Resolution",
    "ResolutionSource",
    "ResolutionStatus",
    "UpstreamOutcome",
    "is_valid_postal_code",
    "validate_postal_code",
    "BUSINESS_TYPES",
    "DERIVED_FIELDS",
    "RegistrationEnterprise",
    "RegistrationIdentity",
    "RegistrationRecord",
    "ClientMeta",
    "SubmissionLogEntry",
]
