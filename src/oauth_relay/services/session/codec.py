"""
Session cookie codec.

The session is carried as a compact JWE (``dir`` key management, ``A256GCM``
content encryption) whose claims are the Session fields plus ``iat`` and
``exp``. Decoding is the only way to read session fields.
"""

import base64
import binascii
import time
from typing import Optional, Protocol

from authlib.jose import JsonWebToken
from authlib.jose.errors import ExpiredTokenError, JoseError
from cryptography.exceptions import InvalidTag
from pydantic import ValidationError

from oauth_relay.exceptions import (
    ConfigurationError,
    SessionDecodeError,
    SessionExpiredError,
    SessionTamperedError,
)
from oauth_relay.schemas import Session

SESSION_COOKIE = "oauth_token"
SESSION_TTL_SECONDS = 30 * 24 * 60 * 60

KEY_ALGORITHM = "dir"
CONTENT_ENCRYPTION = "A256GCM"
KEY_BYTES = 32


class SessionStore(Protocol):
    """Interface for turning a Session into a cookie value and back."""

    def encode(self, session: Session, now: Optional[int] = None) -> str: ...

    def decode(self, token: str, now: Optional[int] = None) -> Session: ...


def decode_secret(secret: str) -> bytes:
    """Decode a base64 (standard or URL-safe) cookie secret into key bytes."""
    if not secret:
        raise ConfigurationError("Missing COOKIE_SECRET")
    normalized = secret.strip().replace("-", "+").replace("_", "/")
    normalized += "=" * (-len(normalized) % 4)
    try:
        key = base64.b64decode(normalized)
    except (binascii.Error, ValueError) as e:
        raise ConfigurationError("COOKIE_SECRET is not valid base64") from e
    if len(key) != KEY_BYTES:
        raise ConfigurationError(
            f"COOKIE_SECRET must decode to {KEY_BYTES} bytes for {CONTENT_ENCRYPTION}"
        )
    return key


class SessionCodec:
    """Authenticated encryption of Session records."""

    def __init__(self, key: bytes, ttl_seconds: int = SESSION_TTL_SECONDS):
        if len(key) != KEY_BYTES:
            raise ConfigurationError(f"Session key must be {KEY_BYTES} bytes")
        self._key = key
        self.ttl_seconds = ttl_seconds
        self._jwt = JsonWebToken([KEY_ALGORITHM, CONTENT_ENCRYPTION])

    @classmethod
    def from_secret(cls, secret: str) -> "SessionCodec":
        return cls(decode_secret(secret))

    def encode(self, session: Session, now: Optional[int] = None) -> str:
        issued_at = int(now if now is not None else time.time())
        claims = session.to_claims()
        claims["iat"] = issued_at
        claims["exp"] = issued_at + self.ttl_seconds

        header = {"alg": KEY_ALGORITHM, "enc": CONTENT_ENCRYPTION}
        # Claims are encrypted, so the plaintext-claims check does not apply.
        token = self._jwt.encode(header, claims, self._key, check=False)
        return token.decode("ascii")

    def decode(self, token: str, now: Optional[int] = None) -> Session:
        if not token or token.count(".") != 4:
            raise SessionDecodeError()

        try:
            claims = self._jwt.decode(
                token,
                self._key,
                claims_options={
                    "exp": {"essential": True},
                    "iat": {"essential": True},
                },
            )
        except InvalidTag as e:
            raise SessionTamperedError() from e
        except (JoseError, ValueError, TypeError, KeyError) as e:
            raise SessionDecodeError() from e

        if claims.header.get("enc") != CONTENT_ENCRYPTION:
            raise SessionDecodeError()

        try:
            claims.validate(now=int(now if now is not None else time.time()))
        except ExpiredTokenError as e:
            raise SessionExpiredError() from e
        except JoseError as e:
            raise SessionDecodeError() from e

        try:
            return Session.model_validate(dict(claims))
        except ValidationError as e:
            raise SessionDecodeError() from e
