"""
Audit trail for the authorization flows.

Entries are written as single-line JSON records on the ``oauth_relay.audit``
logger so they can be shipped by whatever handler the deployment attaches.
"""

import logging
from typing import Optional

from fastapi import Request

from .schemas import AuthAuditEntry, AuthEvent, EventOutcome

AUDIT_LOGGER_NAME = "oauth_relay.audit"


def extract_client_info(request: Request) -> dict:
    """Client address and user agent, preferring proxy-forwarded addresses."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        ip_address = forwarded_for.split(",")[0].strip()
    else:
        ip_address = request.client.host if request.client else None

    return {
        "ip_address": ip_address,
        "user_agent": request.headers.get("user-agent"),
    }


class AuditService:
    """Writes AuthAuditEntry records to the audit logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(AUDIT_LOGGER_NAME)

    async def log_auth(self, entry: AuthAuditEntry) -> None:
        level = (
            logging.INFO if entry.outcome == EventOutcome.SUCCESS else logging.WARNING
        )
        self.logger.log(level, entry.model_dump_json(exclude_none=True))

    async def record(
        self,
        event: AuthEvent,
        outcome: EventOutcome,
        request: Optional[Request] = None,
        app: Optional[str] = None,
        error_code: Optional[str] = None,
        **metadata,
    ) -> AuthAuditEntry:
        client_info = extract_client_info(request) if request is not None else {}
        entry = AuthAuditEntry(
            event_type=event,
            outcome=outcome,
            app=app,
            error_code=error_code,
            metadata=metadata or None,
            **client_info,
        )
        await self.log_auth(entry)
        return entry
