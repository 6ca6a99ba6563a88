from typing import Any, Dict, Optional


#       BASE EXCEPTIONS
# ------------------------------


class RelayError(Exception):
    """
    Base exception for all OAuth relay errors.
    """

    def __init__(
        self,
        message: str,
        code: str = "RELAY_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)


#       CONFIGURATION EXCEPTIONS
# -------------------------------------


class ConfigurationError(RelayError):
    """Raised when tenant or server configuration is missing or invalid."""

    def __init__(self, message: str = "Invalid configuration", **kwargs):
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            status_code=500,
            **kwargs,
        )


#       CLIENT REQUEST EXCEPTIONS
# -------------------------------------


class ClientRequestError(RelayError):
    """Raised when query parameters are missing or invalid."""

    def __init__(
        self,
        message: str = "Bad request",
        code: str = "CLIENT_REQUEST_ERROR",
        **kwargs,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=400,
            **kwargs,
        )


class InvalidStateError(ClientRequestError):
    """Raised when the callback state does not match the pending authorization."""

    def __init__(self, message: str = "Invalid state", **kwargs):
        super().__init__(message=message, code="INVALID_STATE", **kwargs)


#       AUTHENTICATION EXCEPTIONS
# -------------------------------------


class AuthenticationError(RelayError):
    """Raised when no usable session accompanies the request."""

    def __init__(
        self,
        message: str = "Not authenticated",
        code: str = "AUTHENTICATION_FAILED",
        **kwargs,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=401,
            **kwargs,
        )


class CryptoError(AuthenticationError):
    """Raised when a session cookie cannot be decrypted or validated."""

    def __init__(
        self,
        message: str = "Not authenticated",
        code: str = "SESSION_INVALID",
        **kwargs,
    ):
        super().__init__(message=message, code=code, **kwargs)


class SessionDecodeError(CryptoError):
    """The session cookie is not a well-formed encrypted token."""

    def __init__(self, message: str = "Not authenticated", **kwargs):
        super().__init__(message=message, code="SESSION_MALFORMED", **kwargs)


class SessionTamperedError(CryptoError):
    """The authentication tag of the session cookie does not verify."""

    def __init__(self, message: str = "Not authenticated", **kwargs):
        super().__init__(message=message, code="SESSION_TAMPERED", **kwargs)


class SessionExpiredError(CryptoError):
    """The session cookie is past its embedded expiration."""

    def __init__(self, message: str = "Not authenticated", **kwargs):
        super().__init__(message=message, code="SESSION_EXPIRED", **kwargs)


#       PROVIDER EXCEPTIONS
# ----------------------------------


class ProviderError(RelayError):
    """
    Raised when the provider token API answers with a non-2xx status.

    The provider's status code is propagated as-is.
    """

    def __init__(
        self,
        message: str = "Provider request failed",
        status_code: int = 502,
        code: str = "PROVIDER_ERROR",
        **kwargs,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status_code,
            **kwargs,
        )


class ProviderUnavailableError(ProviderError):
    """Raised when the provider cannot be reached at all."""

    def __init__(self, message: str = "Provider unreachable", **kwargs):
        super().__init__(
            message=message,
            status_code=502,
            code="PROVIDER_UNAVAILABLE",
            **kwargs,
        )
