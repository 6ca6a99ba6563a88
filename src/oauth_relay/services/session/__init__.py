from .codec import (
    SESSION_COOKIE,
    SESSION_TTL_SECONDS,
    SessionCodec,
    SessionStore,
    decode_secret,
)

__all__ = [
    "SESSION_COOKIE",
    "SESSION_TTL_SECONDS",
    "SessionCodec",
    "SessionStore",
    "decode_secret",
]
