"""Crumbs exception hierarchy.

Shared across the jar, the views, and the middleware so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class CrumbsError(Exception):
    """Base for all crumbs-specific errors."""


class ConfigurationError(CrumbsError):
    """Raised when middleware configuration or key material is invalid.

    Typically raised at construction time, never per request.
    """


class CookieParseError(CrumbsError, ValueError):
    """Raised by ``Cookie.parse`` when a cookie string is malformed.

    The request-side parser catches this and drops the offending segment.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(CrumbsError):
    """An error that maps directly to an HTTP status code."""

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class CookiesNotInstalled(HTTPError):  # noqa: N818
    """500 — the cookie jar was requested but ``CookieManager`` is not in the stack.

    Signals misconfiguration, never a transient error. The detail message
    is fixed so it can be matched in logs and tests.
    """

    DETAIL = "Can't extract cookies. Is `CookieManager` enabled?"

    def __init__(self) -> None:
        super().__init__(status=500, detail=self.DETAIL)
