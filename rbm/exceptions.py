"""Custom exceptions for the RBM backend"""
from typing import Any, Dict, Optional


class RBMError(Exception):
    """Base exception for errors that map onto an HTTP response"""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to the uniform error body"""
        return {"error": self.message}


class ValidationError(RBMError):
    """Missing or malformed required input"""

    status_code = 400
    default_message = "Invalid request"


class AuthError(RBMError):
    """Missing or invalid caller identity"""

    status_code = 401
    default_message = "Invalid authentication credentials"


class NotFoundOrForbidden(RBMError):
    """Resource absent or not owned by the caller.

    Both cases share one 404 so callers cannot test for existence.
    """

    status_code = 404
    default_message = "Not found"


class UpstreamError(RBMError):
    """A dependent provider call failed"""

    status_code = 500
    default_message = "Upstream provider error"
    MAX_BODY_CHARS = 500

    def __init__(
        self,
        message: Optional[str] = None,
        provider: Optional[str] = None,
        provider_status: Optional[int] = None,
        body: Optional[str] = None,
        redact: Optional[str] = None,
    ):
        self.provider = provider
        self.provider_status = provider_status
        if body and redact:
            body = body.replace(redact, "[redacted]")
        self.body = body[: self.MAX_BODY_CHARS] if body else None

        status_code = provider_status if provider_status and 400 <= provider_status <= 599 else 500
        if message is None:
            message = f"{provider or 'Upstream'} API error"
            if provider_status:
                message += f" ({provider_status})"
        if self.body:
            message = f"{message}: {self.body}"
        super().__init__(message, status_code=status_code)


class CryptoError(RBMError):
    """Secret encryption or decryption failed.

    The message is fixed: callers never learn whether the payload was
    malformed, tampered with, or encrypted under another key.
    """

    status_code = 500
    default_message = "Invalid secret"

    def __init__(self, message: Optional[str] = None):
        # Detail stays on the exception chain for server logs only
        self.detail = message
        super().__init__(self.default_message)


class InternalError(RBMError):
    """Unexpected failure"""

    status_code = 500
    default_message = "Internal server error"


class ConfigurationError(Exception):
    """Fatal misconfiguration detected at startup"""
    pass
