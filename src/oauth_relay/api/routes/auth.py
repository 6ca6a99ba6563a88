"""
Browser-facing OAuth relay endpoints, mounted under /auth.

    GET  /auth/start         begin the PKCE authorization code flow
    GET  /auth/callback      provider redirect target (user flow or install handshake)
    GET  /auth/token         current access token, refreshed lazily (credentialed CORS)
    GET  /auth/logout        drop both cookies
    GET  /auth/success       landing page for popup-less completions
"""

from typing import Optional

from fastapi import APIRouter, Query, Request, Response
from fastapi.responses import JSONResponse, RedirectResponse

from oauth_relay.api.cookies import (
    clear_pre_auth_cookie,
    clear_session_cookie,
    set_pre_auth_cookie,
    set_session_cookie,
)
from oauth_relay.api.cors import apply_cors
from oauth_relay.api.dependencies import (
    AuditServiceDep,
    CallbackResolverDep,
    ProviderDep,
    SettingsDep,
    TenantRegistryDep,
    build_token_service,
    get_session_store,
)
from oauth_relay.api.pages import completion_page, success_page
from oauth_relay.api.schemas import (
    ErrorResponse,
    InstallResponse,
    LogoutResponse,
    TokenResponse,
)
from oauth_relay.exceptions import AuthenticationError, ProviderError, RelayError
from oauth_relay.services.audit import AuthEvent, EventOutcome
from oauth_relay.services.auth import (
    PRE_AUTH_COOKIE,
    CallbackKind,
    InstallResult,
    begin_authorization,
    classify_callback,
)
from oauth_relay.services.session import SESSION_COOKIE

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


@router.get("/start", status_code=302, responses=ERROR_RESPONSES)
async def start(
    request: Request,
    settings: SettingsDep,
    registry: TenantRegistryDep,
    provider: ProviderDep,
    audit_service: AuditServiceDep,
    app: Optional[str] = Query(default=None),
):
    """
    Begin an authorization: resolve the tenant, bind PKCE material to the
    browser through the pre_auth cookie and redirect to the provider.
    """
    auth_request = begin_authorization(registry, provider, app)

    response = RedirectResponse(auth_request.authorization_url, status_code=302)
    set_pre_auth_cookie(response, auth_request.cookie_value, settings)

    await audit_service.record(
        AuthEvent.AUTHORIZATION_STARTED,
        EventOutcome.SUCCESS,
        request,
        app=auth_request.tenant.label,
        state_prefix=auth_request.pending.state[:8],
    )
    return response


@router.get(
    "/callback",
    responses={200: {"model": InstallResponse}, **ERROR_RESPONSES},
)
async def callback(
    request: Request,
    settings: SettingsDep,
    resolver: CallbackResolverDep,
    audit_service: AuditServiceDep,
):
    """
    Provider redirect target.

    An installation handshake answers with JSON and touches no cookie. A user
    flow answers with the completion page, setting the session cookie and
    clearing pre_auth in the same response.
    """
    params = dict(request.query_params)
    kind = classify_callback(params)

    # The session key must be usable before a single-use code is spent.
    store = get_session_store(settings) if kind is CallbackKind.USER_FLOW else None

    try:
        result = await resolver.resolve(params, request.cookies.get(PRE_AUTH_COOKIE))
    except RelayError as e:
        await audit_service.record(
            AuthEvent.INSTALLATION_FAILED
            if kind is CallbackKind.INSTALL_HANDSHAKE
            else AuthEvent.LOGIN_FAILURE,
            EventOutcome.FAILURE,
            request,
            app=params.get("app"),
            error_code=e.code,
            callback_kind=kind.value,
        )
        raise

    if isinstance(result, InstallResult):
        await audit_service.record(
            AuthEvent.INSTALLATION_COMPLETED,
            EventOutcome.SUCCESS,
            request,
            app=result.tenant.label,
            installation_uid=result.installation_uid,
        )
        return JSONResponse(InstallResponse(**result.to_dict()).model_dump())

    response = completion_page(settings.success_path)
    set_session_cookie(response, store.encode(result.session), settings)
    clear_pre_auth_cookie(response, settings)

    await audit_service.record(
        AuthEvent.LOGIN_SUCCESS,
        EventOutcome.SUCCESS,
        request,
        app=result.tenant.label,
        authorization_kind=result.session.authorization_kind.value,
    )
    return response


@router.api_route(
    "/token",
    methods=["GET", "OPTIONS"],
    response_model=TokenResponse,
    responses=ERROR_RESPONSES,
)
async def token(
    request: Request,
    response: Response,
    settings: SettingsDep,
    registry: TenantRegistryDep,
    provider: ProviderDep,
    audit_service: AuditServiceDep,
):
    """
    Return the current access token for the session cookie, refreshing it
    first when it is within a minute of expiry.
    """
    headers = apply_cors(request, settings.cors.allowed_origins)
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=headers)

    service = build_token_service(registry, provider, settings)

    cookie_value = request.cookies.get(SESSION_COOKIE)
    if not cookie_value:
        raise AuthenticationError()

    try:
        result = await service.read(cookie_value)
    except ProviderError as e:
        await audit_service.record(
            AuthEvent.TOKEN_REFRESH_FAILED,
            EventOutcome.FAILURE,
            request,
            error_code=e.code,
        )
        raise

    response.headers.update(headers)
    response.headers["Cache-Control"] = "no-store"

    if result.refreshed:
        set_session_cookie(response, result.cookie_value, settings)
        await audit_service.record(
            AuthEvent.TOKEN_REFRESHED,
            EventOutcome.SUCCESS,
            request,
            app=result.session.app,
        )

    return TokenResponse.model_validate(result.to_dict())


@router.get("/logout", response_model=LogoutResponse)
async def logout(request: Request, settings: SettingsDep, audit_service: AuditServiceDep):
    """Clear both cookies. Idempotent and unauthenticated."""
    response = JSONResponse(LogoutResponse().model_dump())
    clear_session_cookie(response, settings)
    clear_pre_auth_cookie(response, settings)

    await audit_service.record(AuthEvent.LOGOUT, EventOutcome.SUCCESS, request)
    return response


@router.get("/success", include_in_schema=False)
async def success():
    return success_page()
