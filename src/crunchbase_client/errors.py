"""Exception hierarchy for the Crunchbase client.

Every failure the client can report derives from :class:`CrunchbaseError` and
carries the structured fields callers need to branch on (status codes, the
offending kind tag, hop counts) in addition to a human-readable message.
"""

from __future__ import annotations


class CrunchbaseError(Exception):
    """Base class for all client errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(CrunchbaseError):
    """Raised when the client is invoked with invalid arguments."""


class MissingParamsError(CrunchbaseError):
    """Raised when a required argument is present but empty."""


class MissingCredentialError(CrunchbaseError):
    """Raised before any network call when no user key is configured."""

    def __init__(
        self, message: str = "User key required, visit http://data.crunchbase.com"
    ) -> None:
        super().__init__(message)


class TransportError(CrunchbaseError):
    """Raised for HTTP statuses that are neither passed through nor redirects.

    ``status_code`` is ``None`` when no response was received at all.
    """

    def __init__(self, status_code: int | None, reason: str, uri: str | None = None) -> None:
        prefix = f"HTTP {status_code}" if status_code is not None else "HTTP request failed:"
        super().__init__(f"{prefix} {reason}".strip())
        self.status_code = status_code
        self.reason = reason
        self.uri = uri


class RedirectLoopError(CrunchbaseError):
    """Raised when the redirect budget runs out before a terminal response."""

    def __init__(self, uri: str, hops: int) -> None:
        super().__init__(f"HTTP redirect too deep after {hops} hop(s)")
        self.uri = uri
        self.hops = hops


class RequestTimeoutError(CrunchbaseError, TimeoutError):
    """Raised when the overall fetch deadline elapses."""

    def __init__(self, timeout: float, uri: str | None = None) -> None:
        super().__init__(f"Request exceeded {timeout:g}s deadline")
        self.timeout = timeout
        self.uri = uri


class MalformedResponseError(CrunchbaseError):
    """Raised when a response body is not valid JSON."""

    def __init__(self, message: str, preview: str = "") -> None:
        super().__init__(message)
        self.preview = preview


class ApiError(CrunchbaseError):
    """Raised when the response envelope reports a failure."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (status {self.status_code})"


class UnsupportedEntityError(CrunchbaseError):
    """Raised when a kind tag has no registered entity model."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"Unsupported Entity Type: {kind!r}")
        self.kind = kind


class RelationshipDepthError(CrunchbaseError):
    """Raised when nested relationships exceed the configured depth."""

    def __init__(self, kind: str, depth: int) -> None:
        super().__init__(f"Relationship nesting too deep resolving {kind!r} at depth {depth}")
        self.kind = kind
        self.depth = depth
