from .audit_service import AUDIT_LOGGER_NAME, AuditService, extract_client_info
from .schemas import AuthAuditEntry, AuthEvent, EventOutcome

__all__ = [
    "AUDIT_LOGGER_NAME",
    "AuditService",
    "AuthAuditEntry",
    "AuthEvent",
    "EventOutcome",
    "extract_client_info",
]
