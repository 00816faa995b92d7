"""Set-Cookie header grammar.

A small recursive-descent parser over a cursor into the header text.
``Set-Cookie`` uses ``,`` both to separate cookies and inside legal
``Expires`` dates, so the ``expires`` rule gets its own value grammar and
is always tried before the generic ``name=value`` rule::

    name          = 1*( any char except "=" ";" "," )
    value         = *( any char except ";" "," )
    date-value    = *letter [","] whitespace *( any char except ";" "," )

    expires-pair  = "expires" "=" date-value [";"]   ; case-insensitive
    name-value    = name "=" value [";"]
    name-only     = name [";"]
    attribute     = expires-pair / name-value / name-only
    cookie        = name-value *attribute [","]
    set-cookie    = *cookie

Whitespace around ``=`` and ``;`` is insignificant and names and values
are trimmed. Alternatives backtrack; repetitions stop at the first
position where nothing matches, and whatever is left of the input is
dropped. The parser never raises on malformed input.

Every rule is a function ``(text, pos) -> (result, new_pos) | None``.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass

_WHITESPACE = re.compile(r"\s*")
_NAME = re.compile(r"[^=;,]+")
_VALUE = re.compile(r"[^;,]*")
_EXPIRES = re.compile(r"expires", re.IGNORECASE)
_DATE_VALUE = re.compile(r"[^\W\d_]*,?\s[^;,]*")


@dataclass(frozen=True, slots=True)
class NameValuePair:
    """A ``name`` or ``name=value`` token from a Set-Cookie header."""

    name: str
    value: str = ""


@dataclass(frozen=True, slots=True)
class ParsedCookie:
    """One cookie's pairs, in header order.

    ``pairs[0]`` is the cookie's own name/value; the rest are attributes.
    """

    pairs: tuple[NameValuePair, ...] = ()

    @property
    def cookie_pair(self) -> NameValuePair | None:
        return self.pairs[0] if self.pairs else None

    @property
    def attributes(self) -> tuple[NameValuePair, ...]:
        return self.pairs[1:]


@dataclass(frozen=True, slots=True)
class ParsedSetCookieHeader:
    """Every cookie found in a header, in header order."""

    cookies: tuple[ParsedCookie, ...] = ()

    def __iter__(self) -> Iterator[ParsedCookie]:
        return iter(self.cookies)

    def __len__(self) -> int:
        return len(self.cookies)


type _Result[T] = tuple[T, int] | None


def _skip_whitespace(text: str, pos: int) -> int:
    return _WHITESPACE.match(text, pos).end()  # type: ignore[union-attr]


def _equals(text: str, pos: int) -> int | None:
    pos = _skip_whitespace(text, pos)
    if not text.startswith("=", pos):
        return None
    return _skip_whitespace(text, pos + 1)


def _delimiter(text: str, pos: int) -> int:
    """Optional ``;`` with surrounding whitespace. Always succeeds."""
    pos = _skip_whitespace(text, pos)
    if text.startswith(";", pos):
        pos += 1
    return _skip_whitespace(text, pos)


def _name(text: str, pos: int) -> _Result[str]:
    pos = _skip_whitespace(text, pos)
    match = _NAME.match(text, pos)
    if match is None:
        return None
    return match.group().strip(), match.end()


def _value(text: str, pos: int) -> tuple[str, int]:
    pos = _skip_whitespace(text, pos)
    match = _VALUE.match(text, pos)
    return match.group().strip(), match.end()  # type: ignore[union-attr]


def _expires_pair(text: str, pos: int) -> _Result[NameValuePair]:
    keyword = _EXPIRES.match(text, pos)
    if keyword is None:
        return None
    after_equals = _equals(text, keyword.end())
    if after_equals is None:
        return None
    date = _DATE_VALUE.match(text, after_equals)
    if date is None:
        return None
    pair = NameValuePair(keyword.group(), date.group().strip())
    return pair, _delimiter(text, date.end())


def _name_value(text: str, pos: int) -> _Result[NameValuePair]:
    name = _name(text, pos)
    if name is None:
        return None
    name_text, pos = name
    after_equals = _equals(text, pos)
    if after_equals is None:
        return None
    value_text, pos = _value(text, after_equals)
    return NameValuePair(name_text, value_text), _delimiter(text, pos)


def _name_only(text: str, pos: int) -> _Result[NameValuePair]:
    name = _name(text, pos)
    if name is None:
        return None
    name_text, pos = name
    return NameValuePair(name_text), _delimiter(text, pos)


_ATTRIBUTE_RULES = (_expires_pair, _name_value, _name_only)


def _attribute(text: str, pos: int) -> _Result[NameValuePair]:
    for rule in _ATTRIBUTE_RULES:
        result = rule(text, pos)
        if result is not None:
            return result
    return None


def _cookie(text: str, pos: int) -> _Result[ParsedCookie]:
    first = _name_value(text, pos)
    if first is None:
        return None
    pair, pos = first
    pairs = [pair]
    while (attribute := _attribute(text, pos)) is not None:
        pair, pos = attribute
        pairs.append(pair)
    if text.startswith(",", pos):
        pos += 1
    return ParsedCookie(tuple(pairs)), pos


def parse_set_cookie_header(raw: str | None) -> ParsedSetCookieHeader:
    """Parse a raw ``Set-Cookie`` header value into its cookies.

    Malformed input never raises; it yields fewer cookies, or cookies with
    fewer attributes, than a well-formed header would.
    """
    if not raw:
        return ParsedSetCookieHeader()
    cookies: list[ParsedCookie] = []
    pos = 0
    while (cookie := _cookie(raw, pos)) is not None:
        parsed, pos = cookie
        cookies.append(parsed)
    return ParsedSetCookieHeader(tuple(cookies))
