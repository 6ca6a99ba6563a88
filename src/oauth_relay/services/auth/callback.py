"""
Authorization callback state machine.

Every callback is first classified from its query parameters alone:

    installation_uid + code, no state  -> INSTALL_HANDSHAKE
    code + state                       -> USER_FLOW
    anything else                      -> MALFORMED

An installation handshake is exchanged without a PKCE verifier and never
produces a session. A user flow must pass the pre_auth state gate before the
code is exchanged; a session is built only from a successful exchange.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from oauth_relay.exceptions import ClientRequestError, ProviderError
from oauth_relay.schemas import AuthorizationKind, Session, TenantConfig, TokenGrant
from oauth_relay.services.provider import ProviderClient

from .pending import verify_pending_auth
from .tenant_config import TenantRegistry

logger = logging.getLogger(__name__)

DEFAULT_EXPIRES_IN = 3600


class CallbackKind(str, Enum):
    INSTALL_HANDSHAKE = "install_handshake"
    USER_FLOW = "user_flow"
    MALFORMED = "malformed"


def classify_callback(params: Mapping[str, str]) -> CallbackKind:
    code = params.get("code")
    state = params.get("state")
    installation_uid = params.get("installation_uid")

    if installation_uid and code and not state:
        return CallbackKind.INSTALL_HANDSHAKE
    if code and state:
        return CallbackKind.USER_FLOW
    return CallbackKind.MALFORMED


@dataclass(frozen=True)
class InstallResult:
    installation_uid: str
    tenant: TenantConfig
    grant: TokenGrant

    def to_dict(self) -> dict:
        return {
            "ok": True,
            "installation_uid": self.installation_uid,
            "region": self.tenant.region,
            "app": self.tenant.label,
            "authorization_type": AuthorizationKind.APP.value,
        }


@dataclass(frozen=True)
class UserFlowResult:
    tenant: TenantConfig
    session: Session


def build_session(
    tenant: TenantConfig, grant: TokenGrant, now: Optional[int] = None
) -> Session:
    now = int(now if now is not None else time.time())
    return Session(
        app=tenant.label,
        access_token=grant.access_token,
        refresh_token=grant.refresh_token,
        token_type=grant.token_type or "Bearer",
        scope=grant.scope or tenant.scope or None,
        expires_at=now + (grant.expires_in or DEFAULT_EXPIRES_IN),
        obtained_at=now,
        authorization_kind=AuthorizationKind.USER,
        organization_uid=grant.organization_uid,
        location=grant.location,
    )


class CallbackResolver:
    def __init__(self, registry: TenantRegistry, provider: ProviderClient):
        self.registry = registry
        self.provider = provider

    async def resolve(
        self,
        params: Mapping[str, str],
        pre_auth_cookie: Optional[str],
        now: Optional[int] = None,
    ):
        kind = classify_callback(params)

        if kind is CallbackKind.INSTALL_HANDSHAKE:
            return await self.install_handshake(params)
        if kind is CallbackKind.USER_FLOW:
            return await self.user_flow(params, pre_auth_cookie, now=now)
        raise ClientRequestError("Missing code/state", code="MISSING_CODE_OR_STATE")

    async def install_handshake(self, params: Mapping[str, str]) -> InstallResult:
        label = self.registry.resolve_install_label(params.get("app"))
        tenant = self.registry.get_config(label)

        grant = await self.provider.exchange_install_code(tenant, params["code"])
        logger.info(
            "Installation handshake completed",
            extra={"tenant": label, "installation_uid": params["installation_uid"]},
        )
        return InstallResult(
            installation_uid=params["installation_uid"], tenant=tenant, grant=grant
        )

    async def user_flow(
        self,
        params: Mapping[str, str],
        pre_auth_cookie: Optional[str],
        now: Optional[int] = None,
    ) -> UserFlowResult:
        now = int(now if now is not None else time.time())
        pending = verify_pending_auth(
            pre_auth_cookie, params["state"], now_ms=now * 1000
        )

        tenant = self.registry.get_config(pending.app)
        grant = await self.provider.exchange_user_code(
            tenant, params["code"], pending.code_verifier
        )
        if not grant.access_token:
            raise ProviderError("Provider returned no access token", status_code=502)

        return UserFlowResult(tenant=tenant, session=build_session(tenant, grant, now))
