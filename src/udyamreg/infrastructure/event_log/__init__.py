from .composite_audit_log import CompositeAuditLog
from .logging_audit_log import LoggingAuditLog
from .memory_audit_log import InMemoryAuditLog
from .sqlalchemy_audit_log import SqlAlchemyAuditLog

__all__ = [
    "CompositeAuditLog",
    "InMemoryAuditLog",
    "LoggingAuditLog",
    "SqlAlchemyAuditLog",
]
