"""
Lazy token refresh.

Sessions are refreshed only when read and within REFRESH_SKEW_SECONDS of
expiry. A failed refresh leaves the stored session untouched.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from oauth_relay.schemas import Session, TokenGrant
from oauth_relay.services.provider import ProviderClient
from oauth_relay.services.session import SessionStore

from .callback import DEFAULT_EXPIRES_IN
from .tenant_config import TenantRegistry

logger = logging.getLogger(__name__)

REFRESH_SKEW_SECONDS = 60


def needs_refresh(session: Session, now: Optional[int] = None) -> bool:
    now = int(now if now is not None else time.time())
    return (session.expires_at - now) < REFRESH_SKEW_SECONDS


def apply_refresh(session: Session, grant: TokenGrant, now: int) -> Session:
    """
    Merge a refresh grant into a session.

    Each field takes the provider's new value when present and keeps the old
    one otherwise. Expiry is always recomputed from ``expires_in``.
    """
    return session.model_copy(
        update={
            "access_token": grant.access_token or session.access_token,
            "refresh_token": grant.refresh_token or session.refresh_token,
            "token_type": grant.token_type or session.token_type,
            "scope": grant.scope or session.scope,
            "organization_uid": grant.organization_uid or session.organization_uid,
            "location": grant.location or session.location,
            "expires_at": now + (grant.expires_in or DEFAULT_EXPIRES_IN),
            "obtained_at": now,
        }
    )


@dataclass(frozen=True)
class TokenReadResult:
    session: Session
    refreshed: bool
    # Set only when the session changed and the cookie must be re-issued.
    cookie_value: Optional[str] = None

    def to_dict(self) -> dict:
        session = self.session
        return {
            "app": session.app,
            "tokenType": session.token_type or "Bearer",
            "accessToken": session.access_token,
            "expiresAt": session.expires_at,
            "scope": session.scope,
            "organizationUid": session.organization_uid,
            "location": session.location,
        }


class TokenService:
    def __init__(
        self,
        registry: TenantRegistry,
        provider: ProviderClient,
        store: SessionStore,
    ):
        self.registry = registry
        self.provider = provider
        self.store = store

    async def read(self, cookie_value: str, now: Optional[int] = None) -> TokenReadResult:
        now = int(now if now is not None else time.time())
        session = self.store.decode(cookie_value, now=now)
        tenant = self.registry.get_config(session.app)

        if not needs_refresh(session, now) or not session.refresh_token:
            return TokenReadResult(session=session, refreshed=False)

        grant = await self.provider.refresh(tenant, session.refresh_token)
        refreshed = apply_refresh(session, grant, now)
        logger.info(
            "Access token refreshed",
            extra={"tenant": session.app, "expires_at": refreshed.expires_at},
        )
        return TokenReadResult(
            session=refreshed,
            refreshed=True,
            cookie_value=self.store.encode(refreshed, now=now),
        )
