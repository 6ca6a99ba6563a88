from fastapi import Response

from oauth_relay.config import AppSettings
from oauth_relay.services.auth import PRE_AUTH_COOKIE, PRE_AUTH_TTL_SECONDS
from oauth_relay.services.session import SESSION_COOKIE, SESSION_TTL_SECONDS


def _attributes(settings: AppSettings) -> dict:
    return {
        "httponly": True,
        "secure": settings.cookies.secure,
        "samesite": settings.cookies.samesite,
        "path": "/",
    }


def set_pre_auth_cookie(response: Response, value: str, settings: AppSettings) -> None:
    response.set_cookie(
        PRE_AUTH_COOKIE, value, max_age=PRE_AUTH_TTL_SECONDS, **_attributes(settings)
    )


def set_session_cookie(response: Response, value: str, settings: AppSettings) -> None:
    response.set_cookie(
        SESSION_COOKIE, value, max_age=SESSION_TTL_SECONDS, **_attributes(settings)
    )


def clear_pre_auth_cookie(response: Response, settings: AppSettings) -> None:
    response.set_cookie(PRE_AUTH_COOKIE, "", max_age=0, **_attributes(settings))


def clear_session_cookie(response: Response, settings: AppSettings) -> None:
    response.set_cookie(SESSION_COOKIE, "", max_age=0, **_attributes(settings))
