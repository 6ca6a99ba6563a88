from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


# ============================================
# ENUMS FOR TYPE SAFETY
# ============================================


class EventOutcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class AuthEvent(str, Enum):
    AUTHORIZATION_STARTED = "authorization_started"
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILURE = "login_failure"
    INSTALLATION_COMPLETED = "installation_completed"
    INSTALLATION_FAILED = "installation_failed"
    TOKEN_REFRESHED = "token_refreshed"
    TOKEN_REFRESH_FAILED = "token_refresh_failed"
    LOGOUT = "logout"


# ============================================
# PYDANTIC MODELS
# ============================================


class AuthAuditEntry(BaseModel):
    """Authentication-specific audit entry. Never carries token material."""

    event_type: AuthEvent
    outcome: EventOutcome
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    app: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
