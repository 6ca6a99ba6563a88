"""
This module defines the dependency injection system for the OAuth relay API
using FastAPI.

"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated, Optional

import httpx
from fastapi import Depends, HTTPException, status

from oauth_relay.config import AppSettings, get_settings
from oauth_relay.services.audit import AuditService
from oauth_relay.services.auth import CallbackResolver, TenantRegistry, TokenService
from oauth_relay.services.provider import ProviderClient
from oauth_relay.services.session import SessionCodec, SessionStore

logger = logging.getLogger(__name__)


# Application State Management
# ----------------------------


class AppState:
    """
    Centralized application state container.

    Holds the tenant registry snapshot and the pooled outbound HTTP client
    shared by every request.
    """

    def __init__(self):
        self.registry: Optional[TenantRegistry] = None
        self.http_client: Optional[httpx.AsyncClient] = None
        self.provider: Optional[ProviderClient] = None
        self.audit_service: Optional[AuditService] = None
        self._initialized: bool = False

    async def initialize(self, settings: AppSettings) -> None:
        """Initialize all application components."""
        if self._initialized:
            return

        self.registry = TenantRegistry.from_environment(settings.tenants.labels)

        self.http_client = httpx.AsyncClient(
            timeout=settings.provider.timeout_seconds
        )
        self.provider = ProviderClient(
            self.http_client, base_url_template=settings.provider.base_url
        )

        self.audit_service = AuditService()
        self._initialized = True

    async def shutdown(self) -> None:
        """Clean up all resources."""
        if self.http_client:
            await self.http_client.aclose()
            self.http_client = None

        self.provider = None
        self.registry = None
        self.audit_service = None
        self._initialized = False


_app_state = AppState()


def get_app_state() -> AppState:
    return _app_state


@asynccontextmanager
async def app_lifespan(app):
    settings = get_settings()
    state = get_app_state()

    await state.initialize(settings)

    logger.info(
        f"{settings.app_name} started",
        extra={
            "environment": settings.environment,
            "tenants": len(state.registry.labels),
        },
    )

    yield

    await state.shutdown()
    logger.info(f"{settings.app_name} shutdown complete")


#       DEPENDENCY PROVIDERS
# ------------------------------------


def get_settings_dep() -> AppSettings:
    """Dependency for settings - allows override in tests."""
    return get_settings()


SettingsDep = Annotated[AppSettings, Depends(get_settings_dep)]


def get_tenant_registry(
    state: Annotated[AppState, Depends(get_app_state)],
) -> TenantRegistry:
    """Dependency for the tenant registry snapshot."""
    if not state.registry:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Tenant registry not initialized",
        )
    return state.registry


TenantRegistryDep = Annotated[TenantRegistry, Depends(get_tenant_registry)]


def get_provider_client(
    state: Annotated[AppState, Depends(get_app_state)],
) -> ProviderClient:
    """Dependency for the provider token API client."""
    if not state.provider:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Provider client not initialized",
        )
    return state.provider


ProviderDep = Annotated[ProviderClient, Depends(get_provider_client)]


def get_audit_service(
    state: Annotated[AppState, Depends(get_app_state)],
) -> AuditService:
    """Dependency for audit service."""
    if not state.audit_service:
        return AuditService()
    return state.audit_service


AuditServiceDep = Annotated[AuditService, Depends(get_audit_service)]


def get_session_store(settings: AppSettings) -> SessionStore:
    """
    Build the session cookie codec from settings.

    Built inside route bodies: preflight and install-handshake requests must
    succeed without COOKIE_SECRET.
    """
    return SessionCodec.from_secret(settings.cookies.secret)


#       COMPOSITE DEPENDENCIES
# ------------------------------------


def get_callback_resolver(
    registry: TenantRegistryDep, provider: ProviderDep
) -> CallbackResolver:
    return CallbackResolver(registry, provider)


CallbackResolverDep = Annotated[CallbackResolver, Depends(get_callback_resolver)]


def build_token_service(
    registry: TenantRegistry, provider: ProviderClient, settings: AppSettings
) -> TokenService:
    return TokenService(registry, provider, get_session_store(settings))
