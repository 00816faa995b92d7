"""Sieve: web-scraping support.

Parses ``Set-Cookie`` headers the way real servers write them, normalizes
HTTP dates, turns received responses into typed objects, and models HTML
forms so they can be filled in and submitted.

Basic usage::

    from sieve import extract_cookies

    cookies = extract_cookies(
        "sid=abc; expires=Sun, 06 Nov 1994 08:49:37 GMT; HttpOnly",
        "example.com",
    )

Forms::

    from sieve import HtmlForm

    form = HtmlForm.find(url, html, "id", "search")
    form.control("q").value = "xbox"
    request = form.submit().to_request()
"""

__version__ = "0.1.0"
__all__ = [
    "AspxForm",
    "Cookie",
    "CookieAttributeError",
    "FormNotFoundError",
    "Headers",
    "HtmlForm",
    "ParsedCookie",
    "ParsedSetCookieHeader",
    "PostBackError",
    "ResponseFactory",
    "ResponseStatusError",
    "ResponseType",
    "ScrapeConfig",
    "ScrapeError",
    "Scraper",
    "SieveError",
    "UnexpectedResponseError",
    "UsageError",
    "extract_cookies",
    "parse_http_date",
    "parse_set_cookie_header",
    "resolve_cookie",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import sieve`` fast while providing a clean top-level API.
    """
    if name in ("Cookie", "extract_cookies", "resolve_cookie"):
        from sieve.http import cookies as _cookies

        return getattr(_cookies, name)

    if name in ("ParsedCookie", "ParsedSetCookieHeader", "parse_set_cookie_header"):
        from sieve.http import setcookie as _setcookie

        return getattr(_setcookie, name)

    if name == "parse_http_date":
        from sieve.http.dates import parse_http_date

        return parse_http_date

    if name == "Headers":
        from sieve.http.headers import Headers

        return Headers

    if name == "ScrapeConfig":
        from sieve.config import ScrapeConfig

        return ScrapeConfig

    if name in ("ResponseFactory", "ResponseType"):
        from sieve import responses as _responses

        return getattr(_responses, name)

    if name == "Scraper":
        from sieve.scraper import Scraper

        return Scraper

    if name in ("HtmlForm", "AspxForm"):
        from sieve import forms as _forms

        return getattr(_forms, name)

    if name in (
        "CookieAttributeError",
        "FormNotFoundError",
        "PostBackError",
        "ResponseStatusError",
        "ScrapeError",
        "SieveError",
        "UnexpectedResponseError",
        "UsageError",
    ):
        from sieve import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
