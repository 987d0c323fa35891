"""Error taxonomy for the order proxy.

Every error knows its HTTP status and a machine-readable code so the API
layer can render it without inspecting the type.
"""

from typing import Optional

# Upstream bodies are embedded for diagnosis, but never in full.
MAX_BODY_CHARS = 500


def truncate_body(body: Optional[str]) -> Optional[str]:
    if body is None:
        return None
    return body[:MAX_BODY_CHARS]


class CerberusError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class ClientInputError(CerberusError):
    """Missing or malformed request parameter."""

    status_code = 400
    code = "BAD_REQUEST"

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"Param '{field}' required")
        self.field = field

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["field"] = self.field
        return data


class PolicyDenied(CerberusError):
    """Safety gate rejected the asset pair."""

    # Denylist/allowlist are policy (forbidden); a risk flag is a bad request.
    STATUS_BY_CODE = {"BLOCKED": 403, "NOT_ALLOWED": 403, "FLAGGED": 400}

    def __init__(self, code: str, reason: str):
        super().__init__(reason)
        self.code = code
        self.status_code = self.STATUS_BY_CODE.get(code, 403)


class RateLimited(CerberusError):
    status_code = 429
    code = "RATE_LIMIT"

    def __init__(self, message: str = "Too many requests"):
        super().__init__(message)


class UpstreamError(CerberusError):
    """Base class for failures talking to the aggregator."""

    status_code = 502
    code = "UPSTREAM_ERROR"

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        body: Optional[str] = None,
        backend: Optional[str] = None,
    ):
        super().__init__(message)
        self.status = status
        self.body = truncate_body(body)
        self.backend = backend

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["upstream"] = {"status": self.status, "body": self.body}
        return data

    def describe(self) -> dict:
        """Compact record used when aggregating per-backend failures."""
        return {
            "backend": self.backend,
            "status": self.status,
            "error": self.message,
            "body": self.body,
        }


class UpstreamTransientError(UpstreamError):
    """429/5xx, timeout or connection failure. Retryable."""

    code = "UPSTREAM_TRANSIENT"


class UpstreamPermanentError(UpstreamError):
    """Any other non-success status, or a non-JSON success body."""

    code = "UPSTREAM_ERROR"


class UpstreamUnavailable(UpstreamError):
    """Every configured backend exhausted its attempts."""

    code = "UPSTREAM_UNAVAILABLE"

    def __init__(self, failures: list[dict]):
        super().__init__(f"All {len(failures)} quote backend(s) failed")
        self.failures = failures

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "failures": self.failures}


class InternalError(CerberusError):
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
