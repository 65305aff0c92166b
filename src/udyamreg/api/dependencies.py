"""
Service wiring for the HTTP process.

The container is built once at startup and stored on ``app.state``; tests pass
a container of fakes to ``create_app`` instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from fastapi import Request

from udyamreg.application.ports import (
    AuditLogPort,
    LocationCachePort,
    RegistrationRepositoryPort,
    UpstreamResolverPort,
)
from udyamreg.application.services import AuditLogger, FormSchemaProvider, LocationResolutionService
from udyamreg.application.workflows import SubmissionPipeline
from udyamreg.config.settings import Settings
from udyamreg.domain.audit import ClientMeta
from udyamreg.infrastructure.api_clients import PostalPincodeClient
from udyamreg.infrastructure.event_log import (
    CompositeAuditLog,
    InMemoryAuditLog,
    LoggingAuditLog,
    SqlAlchemyAuditLog,
)
from udyamreg.infrastructure.stores import SqlAlchemyLocationCache, SqlAlchemyRegistrationStore

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    settings: Settings
    cache: LocationCachePort
    upstream: UpstreamResolverPort
    repository: RegistrationRepositoryPort
    audit: AuditLogger
    resolver: LocationResolutionService
    pipeline: SubmissionPipeline
    form_schema: FormSchemaProvider

    @classmethod
    def assemble(
        cls,
        settings: Settings,
        *,
        cache: LocationCachePort,
        upstream: UpstreamResolverPort,
        repository: RegistrationRepositoryPort,
        audit_sink: AuditLogPort,
    ) -> "ServiceContainer":
        audit = AuditLogger(audit_sink)
        resolver = LocationResolutionService(cache, upstream)
        return cls(
            settings=settings,
            cache=cache,
            upstream=upstream,
            repository=repository,
            audit=audit,
            resolver=resolver,
            pipeline=SubmissionPipeline(
                resolver,
                repository,
                audit,
                log_request_payload=settings.audit.log_request_payload,
            ),
            form_schema=FormSchemaProvider(settings.api.form_schema_path),
        )

    async def close(self) -> None:
        await self.audit.drain()
        self.audit.close()
        await self.upstream.close()
        for store in (self.cache, self.repository):
            close = getattr(store, "close", None)
            if close is not None:
                close()


def build_audit_sink(settings: Settings) -> AuditLogPort:
    backends: List[AuditLogPort] = []
    for name in settings.audit.sinks:
        if name == "logging":
            backends.append(LoggingAuditLog())
        elif name == "database":
            backends.append(SqlAlchemyAuditLog(settings.database.url))
        elif name == "memory":
            backends.append(InMemoryAuditLog())
        else:
            logger.warning(f"Unknown audit sink {name!r} ignored")
    if len(backends) == 1:
        return backends[0]
    return CompositeAuditLog(backends)


def build_container(settings: Settings) -> ServiceContainer:
    db_url = settings.database.url
    return ServiceContainer.assemble(
        settings,
        cache=SqlAlchemyLocationCache(db_url),
        upstream=PostalPincodeClient.from_config(settings.upstream),
        repository=SqlAlchemyRegistrationStore(db_url),
        audit_sink=build_audit_sink(settings),
    )


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def client_meta(request: Request) -> ClientMeta:
    return ClientMeta(
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
