"""
Encoding of the ``pre_auth`` cookie.

The cookie holds compact JSON ``{"state","codeVerifier","app","t"}``,
percent-encoded the way browser-side cookie serializers encode values.
"""

import hmac
import json
import time
from typing import Optional
from urllib.parse import quote, unquote

from pydantic import ValidationError

from oauth_relay.exceptions import InvalidStateError
from oauth_relay.schemas import PendingAuth

PRE_AUTH_COOKIE = "pre_auth"
PRE_AUTH_TTL_SECONDS = 5 * 60


def new_pending_auth(
    state: str, code_verifier: str, app: str, now_ms: Optional[int] = None
) -> PendingAuth:
    return PendingAuth(
        state=state,
        code_verifier=code_verifier,
        app=app,
        t=now_ms if now_ms is not None else int(time.time() * 1000),
    )


def encode_pending_auth(pending: PendingAuth) -> str:
    payload = json.dumps(
        pending.model_dump(by_alias=True), separators=(",", ":")
    )
    return quote(payload, safe="")


def decode_pending_auth(raw: Optional[str]) -> Optional[PendingAuth]:
    """Return the PendingAuth in the cookie, or None if absent or unreadable."""
    if not raw:
        return None
    try:
        data = json.loads(unquote(raw))
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    try:
        return PendingAuth.model_validate(data)
    except ValidationError:
        return None


def verify_pending_auth(
    raw: Optional[str], returned_state: str, now_ms: Optional[int] = None
) -> PendingAuth:
    """
    Anti-forgery gate for the user-flow callback.

    Raises InvalidStateError when the cookie is absent, malformed, older than
    its TTL, or bound to a different state.
    """
    pending = decode_pending_auth(raw)
    if pending is None:
        raise InvalidStateError()

    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    if now_ms - pending.t > PRE_AUTH_TTL_SECONDS * 1000:
        raise InvalidStateError()

    if not hmac.compare_digest(
        pending.state.encode("utf-8"), returned_state.encode("utf-8")
    ):
        raise InvalidStateError()

    return pending
