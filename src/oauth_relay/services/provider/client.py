"""
Client for the provider's authorization and token endpoints.

Endpoints, relative to the tenant's region base URL:
    GET  /apps/{app_uid}/authorize          interactive authorization
    POST /apps-api/apps/{app_uid}/tokens    user code exchange (JSON body)
    POST /apps-api/token                    install exchange and refresh (form body)

4xx and 5xx answers raise ProviderError carrying the provider's status and
its error description. Other non-2xx answers, such as redirects, become 502.
Nothing is retried: authorization codes are single-use.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from authlib.common.urls import add_params_to_uri
from pydantic import ValidationError

from oauth_relay.exceptions import ProviderError, ProviderUnavailableError
from oauth_relay.schemas import TenantConfig, TokenGrant

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://{region}-app.contentstack.com"


class ProviderClient:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url_template: str = DEFAULT_BASE_URL,
    ):
        self._http = http_client
        self._base_url_template = base_url_template

    # --- URLs ---

    def base_url(self, config: TenantConfig) -> str:
        return self._base_url_template.format(region=config.region).rstrip("/")

    def authorize_endpoint(self, config: TenantConfig) -> str:
        return f"{self.base_url(config)}/apps/{config.app_uid}/authorize"

    def user_token_endpoint(self, config: TenantConfig) -> str:
        return f"{self.base_url(config)}/apps-api/apps/{config.app_uid}/tokens"

    def token_endpoint(self, config: TenantConfig) -> str:
        return f"{self.base_url(config)}/apps-api/token"

    def authorization_url(
        self, config: TenantConfig, state: str, code_challenge: str
    ) -> str:
        params = [
            ("response_type", "code"),
            ("client_id", config.client_id),
            ("redirect_uri", config.redirect_uri),
        ]
        if config.scope:
            params.append(("scope", config.scope))
        params += [
            ("state", state),
            ("code_challenge", code_challenge),
            ("code_challenge_method", "S256"),
        ]
        return add_params_to_uri(self.authorize_endpoint(config), params)

    # --- Grants ---

    async def exchange_user_code(
        self, config: TenantConfig, code: str, code_verifier: str
    ) -> TokenGrant:
        body = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": config.redirect_uri,
            "client_id": config.client_id,
            "client_secret": config.client_secret,
            "code_verifier": code_verifier,
        }
        return await self._post(
            self.user_token_endpoint(config),
            json=body,
            grant="authorization_code",
            tenant=config.label,
        )

    async def exchange_install_code(self, config: TenantConfig, code: str) -> TokenGrant:
        """Installation handshakes carry no PKCE verifier."""
        body = {
            "grant_type": "authorization_code",
            "client_id": config.client_id,
            "client_secret": config.client_secret,
            "redirect_uri": config.redirect_uri,
            "code": code,
        }
        return await self._post(
            self.token_endpoint(config),
            data=body,
            grant="installation",
            tenant=config.label,
        )

    async def refresh(self, config: TenantConfig, refresh_token: str) -> TokenGrant:
        body = {
            "grant_type": "refresh_token",
            "client_id": config.client_id,
            "redirect_uri": config.redirect_uri,
            "refresh_token": refresh_token,
        }
        # PKCE-only tenants have no secret to send.
        if config.client_secret:
            body["client_secret"] = config.client_secret
        return await self._post(
            self.token_endpoint(config),
            data=body,
            grant="refresh_token",
            tenant=config.label,
            fallback_error="Failed to refresh token",
            prefer_description=False,
        )

    async def _post(
        self,
        url: str,
        *,
        grant: str,
        tenant: str,
        json: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        fallback_error: str = "Token exchange failed",
        prefer_description: bool = True,
    ) -> TokenGrant:
        try:
            response = await self._http.post(
                url, json=json, data=data, headers={"Accept": "application/json"}
            )
        except httpx.RequestError as e:
            logger.error(
                f"Provider request failed: {type(e).__name__}",
                extra={"grant": grant, "tenant": tenant},
            )
            raise ProviderUnavailableError() from e

        payload = _parse_body(response)

        if not response.is_success:
            message = _error_message(payload, fallback_error, prefer_description)
            logger.warning(
                f"Provider rejected {grant} grant",
                extra={
                    "grant": grant,
                    "tenant": tenant,
                    "provider_status": response.status_code,
                },
            )
            # Only client and server errors are relayed with the provider status.
            status_code = (
                response.status_code if 400 <= response.status_code < 600 else 502
            )
            raise ProviderError(message, status_code=status_code)

        if not isinstance(payload, dict):
            raise ProviderError("Invalid token response from provider", status_code=502)
        try:
            return TokenGrant.model_validate(payload)
        except ValidationError as e:
            raise ProviderError(
                "Invalid token response from provider", status_code=502
            ) from e


def _parse_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


def _error_message(payload: Any, fallback: str, prefer_description: bool) -> Any:
    if isinstance(payload, dict):
        keys = ("error_description", "error") if prefer_description else ("error",)
        for key in keys:
            if payload.get(key):
                return payload[key]
        return payload if prefer_description and payload else fallback
    return payload or fallback
