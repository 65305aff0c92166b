"""
Two-stage registration flow.

    STAGE1_PENDING --SubmitIdentity(ok)--> STAGE1_VALIDATED
    STAGE1_VALIDATED / STAGE2_PENDING --SubmitEnterprise--> STAGE2_PENDING
        (syntax check of the non-derived fields, then the resolved location
        is merged in and the whole enterprise contract is validated)
    STAGE2_PENDING (enterprise valid) --RegistrationPersisted--> COMPLETED
    STAGE1_VALIDATED / STAGE2_PENDING --GoBack--> STAGE1_PENDING

Failed validation never leaves the current stage; the state carries the
field errors and the caller may resubmit. ``reduce`` is pure; all I/O
(resolution, persistence, audit) happens in ``SubmissionPipeline``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from udyamreg.application.ports.registration_repository_port import RegistrationRepositoryPort
from udyamreg.application.services.audit import AuditLogger
from udyamreg.application.services.location_resolution import LocationResolutionService
from udyamreg.core.errors import (
    FieldError,
    PersistenceError,
    PipelineTransitionError,
)
from udyamreg.domain.audit import ClientMeta, SubmissionLogEntry
from udyamreg.domain.location import Resolution
from udyamreg.domain.registration import (
    DERIVED_FIELDS,
    VALIDATION_ERROR_MESSAGE,
    RegistrationEnterprise,
    RegistrationIdentity,
    RegistrationRecord,
    apply_location,
    check_fields,
)

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    STAGE1_PENDING = "stage1_pending"
    STAGE1_VALIDATED = "stage1_validated"
    STAGE2_PENDING = "stage2_pending"
    COMPLETED = "completed"


@dataclass(frozen=True)
class PipelineState:
    stage: Stage = Stage.STAGE1_PENDING
    identity_data: Dict[str, Any] = field(default_factory=dict)
    enterprise_data: Dict[str, Any] = field(default_factory=dict)
    identity: Optional[RegistrationIdentity] = None
    enterprise: Optional[RegistrationEnterprise] = None
    resolution: Optional[Resolution] = None
    record: Optional[RegistrationRecord] = None
    errors: Tuple[FieldError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class SubmitIdentity:
    payload: Mapping[str, Any]


@dataclass(frozen=True)
class SubmitEnterprise:
    payload: Mapping[str, Any]
    resolution: Optional[Resolution] = None


@dataclass(frozen=True)
class RegistrationPersisted:
    record: RegistrationRecord


@dataclass(frozen=True)
class GoBack:
    pass


Action = Union[SubmitIdentity, SubmitEnterprise, RegistrationPersisted, GoBack]

_ENTERPRISE_STAGES = (Stage.STAGE1_VALIDATED, Stage.STAGE2_PENDING)


def _reject(state: PipelineState, action: Action) -> PipelineTransitionError:
    return PipelineTransitionError(
        message=f"{type(action).__name__} is not allowed in {state.stage.value}",
        context={"stage": state.stage.value, "action": type(action).__name__},
    )


def reduce(state: PipelineState, action: Action) -> PipelineState:
    """Apply one action. Raises PipelineTransitionError for actions the stage does not accept."""
    if isinstance(action, SubmitIdentity):
        if state.stage is not Stage.STAGE1_PENDING:
            raise _reject(state, action)
        data = dict(action.payload)
        parsed = RegistrationIdentity.parse(data)
        if not parsed.is_ok():
            return replace(state, identity_data=data, identity=None, errors=tuple(parsed.error().details))
        return replace(
            state,
            stage=Stage.STAGE1_VALIDATED,
            identity_data=data,
            identity=parsed.unwrap(),
            errors=(),
        )

    if isinstance(action, SubmitEnterprise):
        if state.stage not in _ENTERPRISE_STAGES:
            raise _reject(state, action)
        data = dict(action.payload)
        syntax_errors = check_fields(RegistrationEnterprise, data, skip=DERIVED_FIELDS)
        if syntax_errors:
            return replace(
                state,
                stage=Stage.STAGE2_PENDING,
                enterprise_data=data,
                enterprise=None,
                resolution=None,
                errors=tuple(syntax_errors),
            )
        # Resolved location takes precedence over anything the user typed.
        if action.resolution is not None and action.resolution.found:
            data = apply_location(data, action.resolution.record)
        parsed = RegistrationEnterprise.parse(data)
        return replace(
            state,
            stage=Stage.STAGE2_PENDING,
            enterprise_data=data,
            enterprise=parsed.unwrap() if parsed.is_ok() else None,
            resolution=action.resolution,
            errors=() if parsed.is_ok() else tuple(parsed.error().details),
        )

    if isinstance(action, RegistrationPersisted):
        if state.stage is not Stage.STAGE2_PENDING or state.enterprise is None:
            raise _reject(state, action)
        return replace(state, stage=Stage.COMPLETED, record=action.record, errors=())

    if isinstance(action, GoBack):
        if state.stage not in _ENTERPRISE_STAGES:
            raise _reject(state, action)
        return replace(state, stage=Stage.STAGE1_PENDING, identity=None, errors=())

    raise TypeError(f"Unknown pipeline action: {action!r}")


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class SubmissionPipeline:
    """
    Drives ``reduce`` with the side effects attached: PIN code resolution
    once the stage-2 payload is syntactically valid, one registration write per completed pass,
    and one audit entry per stage-2 attempt.
    """

    def __init__(
        self,
        resolver: LocationResolutionService,
        repository: RegistrationRepositoryPort,
        audit: AuditLogger,
        *,
        log_request_payload: bool = True,
    ):
        self._resolver = resolver
        self._repository = repository
        self._audit = audit
        self._log_request_payload = log_request_payload

    def submit_identity(self, state: PipelineState, payload: Mapping[str, Any]) -> PipelineState:
        return reduce(state, SubmitIdentity(payload))

    def go_back(self, state: PipelineState) -> PipelineState:
        return reduce(state, GoBack())

    async def submit_enterprise(
        self,
        state: PipelineState,
        payload: Mapping[str, Any],
        *,
        client_meta: ClientMeta = ClientMeta(),
        endpoint: str = "/api/submit",
        method: str = "POST",
    ) -> PipelineState:
        if state.stage not in _ENTERPRISE_STAGES:
            raise _reject(state, SubmitEnterprise(payload))

        started = time.perf_counter()
        resolution: Optional[Resolution] = None
        if not check_fields(RegistrationEnterprise, payload, skip=DERIVED_FIELDS):
            resolution = await self._resolver.resolve(payload["pincode"])
        state = reduce(state, SubmitEnterprise(payload, resolution))

        if state.errors:
            self._record(endpoint, method, 400, started, client_meta, payload,
                         VALIDATION_ERROR_MESSAGE, resolution)
            return state

        try:
            record = self._repository.create(state.identity, state.enterprise, client_meta)
        except PersistenceError as e:
            self._record(endpoint, method, 500, started, client_meta, payload, e.message, resolution)
            raise

        state = reduce(state, RegistrationPersisted(record))
        logger.info("Registration %s stored (pincode %s)", record.id, record.enterprise.pincode)
        self._record(endpoint, method, 201, started, client_meta, payload, None, resolution)
        return state

    async def submit_complete(
        self,
        payload: Mapping[str, Any],
        *,
        client_meta: ClientMeta = ClientMeta(),
        endpoint: str = "/api/submit",
        method: str = "POST",
    ) -> PipelineState:
        """
        Run both stages against one union payload.

        When stage 1 fails, the stage-2 fields are still checked syntactically
        so the returned errors cover every failing field of the payload. No
        PIN code lookup happens in that case.
        """
        state = self.submit_identity(PipelineState(), payload)
        if state.stage is Stage.STAGE1_VALIDATED:
            return await self.submit_enterprise(
                state, payload, client_meta=client_meta, endpoint=endpoint, method=method
            )

        started = time.perf_counter()
        errors: List[FieldError] = list(state.errors)
        errors.extend(check_fields(RegistrationEnterprise, payload, skip=DERIVED_FIELDS))

        self._record(endpoint, method, 400, started, client_meta, payload, VALIDATION_ERROR_MESSAGE, None)
        return replace(state, enterprise_data=dict(payload), errors=tuple(errors))

    def _record(
        self,
        endpoint: str,
        method: str,
        status_code: int,
        started: float,
        client_meta: ClientMeta,
        payload: Mapping[str, Any],
        error_message: Optional[str],
        resolution: Optional[Resolution],
    ) -> None:
        self._audit.emit(
            SubmissionLogEntry(
                endpoint=endpoint,
                method=method,
                status_code=status_code,
                duration_ms=_elapsed_ms(started),
                client_meta=client_meta,
                request_payload=dict(payload) if self._log_request_payload else None,
                error_message=error_message,
                details=resolution.to_audit_details() if resolution is not None else {},
            )
        )
