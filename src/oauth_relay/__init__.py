from .exceptions import (
    AuthenticationError,
    ClientRequestError,
    ConfigurationError,
    CryptoError,
    InvalidStateError,
    ProviderError,
    ProviderUnavailableError,
    RelayError,
    SessionDecodeError,
    SessionExpiredError,
    SessionTamperedError,
)
from .schemas import AuthorizationKind, PendingAuth, Session, TenantConfig, TokenGrant
from .services.audit import AuditService, AuthAuditEntry, AuthEvent, EventOutcome
from .services.auth import (
    CallbackResolver,
    TenantRegistry,
    TokenService,
    apply_refresh,
    begin_authorization,
    classify_callback,
    needs_refresh,
)
from .services.provider import ProviderClient
from .services.session import SessionCodec, SessionStore

__all__ = [
    "AuthenticationError",
    "ClientRequestError",
    "ConfigurationError",
    "CryptoError",
    "InvalidStateError",
    "ProviderError",
    "ProviderUnavailableError",
    "RelayError",
    "SessionDecodeError",
    "SessionExpiredError",
    "SessionTamperedError",
    "AuthorizationKind",
    "PendingAuth",
    "Session",
    "TenantConfig",
    "TokenGrant",
    "AuditService",
    "AuthAuditEntry",
    "AuthEvent",
    "EventOutcome",
    "CallbackResolver",
    "TenantRegistry",
    "TokenService",
    "apply_refresh",
    "begin_authorization",
    "classify_callback",
    "needs_refresh",
    "ProviderClient",
    "SessionCodec",
    "SessionStore",
]
