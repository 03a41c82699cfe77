"""
Error types shared by the greeting card modules.

Lookup errors are raised by the GitHub client and recovered from by the
request handlers (they fall back to a degraded card). Composition errors mean
no image can be produced and are surfaced as HTTP 500.
"""

from typing import Optional


class GreetingCardError(Exception):
    """Base class for all greeting card errors."""


# ========= PROFILE LOOKUP ERRORS =========

class UpstreamLookupError(GreetingCardError):
    """A profile lookup against the GitHub API failed."""

    def __init__(self, username: str, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.username = username
        self.status_code = status_code


class ProfileNotFound(UpstreamLookupError):
    """The API reports that the user does not exist."""

    def __init__(self, username: str):
        super().__init__(username, f"GitHub user '{username}' not found", status_code=404)


class RateLimited(UpstreamLookupError):
    """The API quota is exhausted."""

    def __init__(self, username: str, status_code: int = 403, reset_at: Optional[int] = None):
        super().__init__(username, "GitHub API rate limit exceeded", status_code=status_code)
        self.reset_at = reset_at


class UpstreamTimeout(UpstreamLookupError):
    """The request exceeded the configured timeout."""

    def __init__(self, username: str, timeout: float):
        super().__init__(username, f"GitHub API request timed out after {timeout:g}s")
        self.timeout = timeout


class UpstreamError(UpstreamLookupError):
    """Any other non-2xx response or network failure."""


# ========= COMPOSITION ERRORS =========

class InternalCompositionError(GreetingCardError):
    """Building or serializing a scene failed."""


class SceneError(InternalCompositionError):
    """The scene builder was used incorrectly (drawing after serialization, dangling references)."""
