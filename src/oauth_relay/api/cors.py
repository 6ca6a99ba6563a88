"""
Credentialed CORS for the token endpoint.

Allowlist entries are either exact origins (``https://app.example.com``) or
wildcard suffixes (``*.example.com``), which match any origin ending in
``.example.com``. Only a matching origin is echoed back.
"""

from typing import Dict, Iterable, Optional

from fastapi import Request

ALLOW_METHODS = "GET, OPTIONS"
ALLOW_HEADERS = "Content-Type"


def origin_allowed(origin: Optional[str], allowed: Iterable[str]) -> bool:
    if not origin:
        return False
    allowed = list(allowed)
    if origin in allowed:
        return True
    return any(
        entry.startswith("*.") and origin.endswith(entry[1:]) for entry in allowed
    )


def cors_headers(origin: Optional[str], allowed: Iterable[str]) -> Dict[str, str]:
    headers = {
        "Vary": "Origin",
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Access-Control-Allow-Methods": ALLOW_METHODS,
    }
    if origin_allowed(origin, allowed):
        headers["Access-Control-Allow-Origin"] = origin
    return headers


def apply_cors(request: Request, allowed: Iterable[str]) -> Dict[str, str]:
    """
    Compute CORS headers for the request and remember them on request.state,
    where the exception handlers pick them up for error responses.
    """
    headers = cors_headers(request.headers.get("origin"), allowed)
    request.state.cors_headers = headers
    return headers
