"""Sieve exception hierarchy.

Shared by the cookie resolver, the response factory, and the form model
so every module raises and catches the same types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sieve.responses.types import ResponseType, WebResponse


class SieveError(Exception):
    """Base for all sieve-specific errors."""


class UsageError(SieveError, ValueError):
    """Raised when a caller passes an invalid argument.

    Always raised before any parsing happens, e.g. a blank host name
    handed to ``extract_cookies``.
    """


class CookieAttributeError(SieveError, ValueError):
    """A cookie attribute value could not be interpreted.

    Only raised in strict mode; the lenient default ignores the attribute.
    """

    def __init__(self, name: str, value: str, detail: str = "") -> None:
        self.name = name
        self.value = value
        message = f"Invalid {name} attribute value {value!r}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class ResponseStatusError(SieveError):
    """The server answered with an error status."""

    status: int
    url: str = ""
    reason: str = ""

    def __str__(self) -> str:
        text = f"{self.status} {self.reason}".rstrip()
        if self.url:
            return f"{text} ({self.url})"
        return text


class ScrapeError(SieveError):
    """Scraping failed.

    Carries the HTML being scraped, when there is any, so the caller can
    inspect what the page actually looked like.
    """

    def __init__(self, message: str, html: str | None = None) -> None:
        super().__init__(message)
        self.html = html


class UnexpectedResponseError(ScrapeError):
    """A response was not one of the expected types.

    ``__cause__`` describes what was received instead.
    """

    def __init__(
        self,
        message: str,
        response: WebResponse,
        expected: tuple[ResponseType, ...],
        html: str | None = None,
    ) -> None:
        super().__init__(message, html)
        self.response = response
        self.expected = expected


class FormNotFoundError(UsageError, LookupError):
    """No form matched the requested ordinal or attribute filter."""


class PostBackError(SieveError):
    """An ASP.NET postback was attempted on a form that cannot post back."""
