from .audit_log_port import AuditLogPort
from .location_cache_port import LocationCachePort
from .registration_repository_port import RegistrationRepositoryPort
from .upstream_resolver_port import UpstreamResolverPort

__all__ = [
    "AuditLogPort",
    "LocationCachePort",
    "RegistrationRepositoryPort",
    "UpstreamResolverPort",
]
