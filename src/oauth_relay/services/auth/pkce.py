"""
PKCE (RFC 7636) helpers.

Only the S256 challenge method is supported.
"""

import base64
import secrets
import uuid
from dataclasses import dataclass

from authlib.oauth2.rfc7636 import create_s256_code_challenge

VERIFIER_BYTES = 64
CHALLENGE_METHOD = "S256"


@dataclass(frozen=True)
class PKCEPair:
    code_verifier: str
    code_challenge: str
    state: str


def generate_code_verifier(num_bytes: int = VERIFIER_BYTES) -> str:
    if num_bytes < VERIFIER_BYTES:
        raise ValueError(f"Verifier needs at least {VERIFIER_BYTES} random bytes")
    raw = secrets.token_bytes(num_bytes)
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def create_code_challenge(code_verifier: str, method: str = CHALLENGE_METHOD) -> str:
    if method != CHALLENGE_METHOD:
        raise ValueError(f"Unsupported code_challenge_method: {method}")
    return create_s256_code_challenge(code_verifier)


def generate_state() -> str:
    return str(uuid.uuid4())


def generate_pkce_pair() -> PKCEPair:
    verifier = generate_code_verifier()
    return PKCEPair(
        code_verifier=verifier,
        code_challenge=create_code_challenge(verifier),
        state=generate_state(),
    )
