from dataclasses import dataclass
from typing import Optional

from oauth_relay.exceptions import ClientRequestError
from oauth_relay.schemas import PendingAuth, TenantConfig
from oauth_relay.services.provider import ProviderClient

from .pending import encode_pending_auth, new_pending_auth
from .pkce import generate_pkce_pair
from .tenant_config import TenantRegistry


@dataclass(frozen=True)
class AuthorizationRequest:
    tenant: TenantConfig
    pending: PendingAuth
    authorization_url: str

    @property
    def cookie_value(self) -> str:
        return encode_pending_auth(self.pending)


def begin_authorization(
    registry: TenantRegistry,
    provider: ProviderClient,
    requested_label: Optional[str],
    now_ms: Optional[int] = None,
) -> AuthorizationRequest:
    """
    Resolve the tenant, mint PKCE material and build the provider URL.

    The verifier is only ever placed in the returned PendingAuth.
    """
    label = registry.resolve_label(requested_label)
    if not label:
        raise ClientRequestError(
            "Missing or invalid ?app=",
            code="INVALID_TENANT",
            details={"allowed": registry.labels},
        )

    config = registry.get_config(label)
    pkce = generate_pkce_pair()
    pending = new_pending_auth(
        state=pkce.state, code_verifier=pkce.code_verifier, app=label, now_ms=now_ms
    )

    return AuthorizationRequest(
        tenant=config,
        pending=pending,
        authorization_url=provider.authorization_url(
            config, state=pkce.state, code_challenge=pkce.code_challenge
        ),
    )
