from oauth_relay.schemas import (
    AuthorizationKind,
    TenantConfig,
    PendingAuth,
    Session,
    TokenGrant,
)
from .tenant_config import TenantRegistry, label_prefix
from .pkce import (
    PKCEPair,
    generate_code_verifier,
    create_code_challenge,
    generate_state,
    generate_pkce_pair,
)
from .pending import (
    PRE_AUTH_COOKIE,
    PRE_AUTH_TTL_SECONDS,
    encode_pending_auth,
    decode_pending_auth,
    verify_pending_auth,
)
from .initiator import AuthorizationRequest, begin_authorization
from .callback import (
    CallbackKind,
    CallbackResolver,
    InstallResult,
    UserFlowResult,
    build_session,
    classify_callback,
)
from .refresh import (
    REFRESH_SKEW_SECONDS,
    TokenReadResult,
    TokenService,
    apply_refresh,
    needs_refresh,
)

__all__ = [
    "AuthorizationKind",
    "TenantConfig",
    "PendingAuth",
    "Session",
    "TokenGrant",
    "TenantRegistry",
    "label_prefix",
    "PKCEPair",
    "generate_code_verifier",
    "create_code_challenge",
    "generate_state",
    "generate_pkce_pair",
    "PRE_AUTH_COOKIE",
    "PRE_AUTH_TTL_SECONDS",
    "encode_pending_auth",
    "decode_pending_auth",
    "verify_pending_auth",
    "AuthorizationRequest",
    "begin_authorization",
    "CallbackKind",
    "CallbackResolver",
    "InstallResult",
    "UserFlowResult",
    "build_session",
    "classify_callback",
    "REFRESH_SKEW_SECONDS",
    "TokenReadResult",
    "TokenService",
    "apply_refresh",
    "needs_refresh",
]
