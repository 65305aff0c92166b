from .audit import AuditLogger
from .form_schema import FormSchemaProvider, build_fallback_schema
from .location_resolution import LocationResolutionService

__all__ = ["AuditLogger", "FormSchemaProvider", "LocationResolutionService", "build_fallback_schema"]
