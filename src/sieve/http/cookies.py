"""Cookie resolution.

Folds the pairs of a ParsedCookie into a Cookie record, applying the
attribute rules servers actually rely on rather than the letter of
RFC 6265: ``Max-Age`` beats ``Expires`` wherever it appears, empty
``Path``/``Domain`` reset to their defaults, and values nobody can
interpret are dropped instead of failing the cookie.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from sieve.errors import CookieAttributeError, UsageError
from sieve.http.dates import parse_http_date
from sieve.http.setcookie import ParsedCookie, parse_set_cookie_header

if TYPE_CHECKING:
    from sieve.config import ScrapeConfig
    from sieve.http.headers import Headers

logger = logging.getLogger("sieve.cookies")

_INTEGER = re.compile(r"[+-]?\d+", re.ASCII)
_LINE_BREAKS = str.maketrans("", "", "\r\n")


def _now() -> datetime:
    return datetime.now(UTC)


def _utc(now: datetime | None) -> datetime:
    """*now*, or the current time; a naive *now* is taken as UTC."""
    if now is None:
        return _now()
    if now.tzinfo is None:
        return now.replace(tzinfo=UTC)
    return now.astimezone(UTC)


@dataclass(frozen=True, slots=True)
class Cookie:
    """A cookie resolved from a ``Set-Cookie`` header.

    ``expires`` is an aware UTC datetime, or ``None`` for a session cookie.
    ``created`` records when the cookie was resolved and takes no part in
    equality.
    """

    name: str
    value: str
    domain: str
    path: str = "/"
    expires: datetime | None = None
    secure: bool = False
    http_only: bool = False
    version: int = 0
    created: datetime = field(default_factory=_now, compare=False)

    @property
    def is_session(self) -> bool:
        return self.expires is None

    def is_expired(self, now: datetime | None = None) -> bool:
        """Return True if the cookie has expired at *now* (default: current time).

        A naive *now* is taken as UTC.
        """
        if self.expires is None:
            return False
        return self.expires <= _utc(now)


def _parse_int(value: str) -> int | None:
    if _INTEGER.fullmatch(value.strip()) is None:
        return None
    try:
        return int(value)
    except ValueError:
        # Longer than sys.get_int_max_str_digits() allows.
        return None


def _expiry_from_max_age(name: str, value: str, now: datetime) -> datetime:
    seconds = _parse_int(value)
    if seconds is None:
        raise CookieAttributeError(name, value, "not an integer")
    try:
        return now + timedelta(seconds=seconds)
    except OverflowError as exc:
        raise CookieAttributeError(name, value, "out of range") from exc


def _require_host(host_name: str) -> None:
    if not host_name or not host_name.strip():
        raise UsageError("host_name must be a non-empty host name")


def resolve_cookie(
    parsed: ParsedCookie,
    host_name: str,
    *,
    now: datetime | None = None,
    strict_max_age: bool = False,
) -> Cookie | None:
    """Build a Cookie from *parsed*, or return None if it has no pairs.

    Attributes are folded left to right; a repeated attribute overwrites
    the earlier one, except that ``Expires`` is ignored once ``Max-Age``
    has been seen.

    Raises:
        CookieAttributeError: ``Max-Age`` is not an integer and
            *strict_max_age* is set.
    """
    if not parsed.pairs:
        return None
    now = _utc(now)
    first, *attributes = parsed.pairs

    domain = host_name
    path = "/"
    expires: datetime | None = None
    secure = False
    http_only = False
    version = 0
    has_max_age = False

    for pair in attributes:
        match pair.name.lower():
            case "httponly":
                http_only = True
            case "secure":
                secure = True
            case "path":
                path = pair.value or "/"
            case "domain":
                domain = pair.value or host_name
            case "max-age":
                try:
                    expires = _expiry_from_max_age(pair.name, pair.value, now)
                except CookieAttributeError:
                    if strict_max_age:
                        raise
                    logger.debug("Ignoring %s=%r on cookie %r", pair.name, pair.value, first.name)
                else:
                    has_max_age = True
            case "expires":
                if has_max_age:
                    continue
                parsed_date = parse_http_date(pair.value)
                if parsed_date is not None:
                    expires = parsed_date
                else:
                    logger.debug("Ignoring unparseable expires %r on cookie %r", pair.value, first.name)
            case "version":
                parsed_version = _parse_int(pair.value)
                if parsed_version is not None:
                    version = parsed_version
            case _:
                pass

    return Cookie(
        name=first.name,
        value=first.value,
        domain=domain,
        path=path,
        expires=expires,
        secure=secure,
        http_only=http_only,
        version=version,
    )


def extract_cookies(
    header: str | None,
    host_name: str,
    *,
    config: ScrapeConfig | None = None,
    now: datetime | None = None,
) -> list[Cookie]:
    """Resolve every cookie in a raw ``Set-Cookie`` header value.

    *host_name* is the domain given to cookies without a ``Domain``
    attribute. Line breaks are stripped from *header* first, so folded
    headers parse as one line. Each cookie is resolved on its own; one bad
    cookie never costs the others.

    Raises:
        UsageError: *host_name* is empty or blank.
    """
    _require_host(host_name)
    strict = config.strict_max_age if config is not None else False
    now = _utc(now)

    cookies: list[Cookie] = []
    for parsed in parse_set_cookie_header((header or "").translate(_LINE_BREAKS)):
        try:
            cookie = resolve_cookie(parsed, host_name, now=now, strict_max_age=strict)
        except CookieAttributeError as exc:
            logger.warning("Dropping cookie %r: %s", parsed.pairs[0].name, exc)
            continue
        if cookie is not None:
            cookies.append(cookie)
    return cookies


def extract_response_cookies(
    headers: Headers,
    host_name: str,
    *,
    config: ScrapeConfig | None = None,
    now: datetime | None = None,
) -> list[Cookie]:
    """Resolve the cookies of every ``Set-Cookie`` header in *headers*."""
    _require_host(host_name)
    cookies: list[Cookie] = []
    for value in headers.get_list("set-cookie"):
        cookies.extend(extract_cookies(value, host_name, config=config, now=now))
    return cookies
