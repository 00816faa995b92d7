"""HTTP date parsing.

Servers send ``Expires`` dates in the three formats RFC 7231 section
7.1.1.1 lists, and in plenty of others besides. The strict formats are
tried first, against fixed English name tables so that the result never
depends on the process locale:

    Sun, 06 Nov 1994 08:49:37 GMT    ; IMF-fixdate
    Sunday, 06-Nov-94 08:49:37 GMT   ; obsolete RFC 850 format
    Sun Nov  6 08:49:37 1994         ; ANSI C's asctime() format

Anything else goes through ``email.utils.parsedate_to_datetime``, then
``datetime.fromisoformat``, then ``dateutil``. That last parser takes the
free-form dates some servers write, like
``Sunday, July 2, 2017 10:07:33pm``. Every result is an aware UTC
``datetime``.
"""

import re
from collections.abc import Callable
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

from dateutil import parser as dateutil_parser

_MONTHS = {
    name: number
    for number, name in enumerate(
        ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"),
        start=1,
    )
}
_SHORT_DAYS = "Mon|Tue|Wed|Thu|Fri|Sat|Sun"
_LONG_DAYS = "Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday"
_MONTH = "Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec"
_TIME = r"(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"

_IMF_FIXDATE = re.compile(
    rf"(?:{_SHORT_DAYS}), (?P<day>\d{{2}}) (?P<month>{_MONTH}) (?P<year>\d{{4}}) {_TIME} GMT",
    re.IGNORECASE | re.ASCII,
)
_RFC850_DATE = re.compile(
    rf"(?:{_LONG_DAYS}), (?P<day>\d{{2}})-(?P<month>{_MONTH})-(?P<year>\d{{2}}) {_TIME} GMT",
    re.IGNORECASE | re.ASCII,
)
_ASCTIME_DATE = re.compile(
    rf"(?:{_SHORT_DAYS}) (?P<month>{_MONTH}) (?P<day>[ \d]?\d) {_TIME} (?P<year>\d{{4}})",
    re.IGNORECASE | re.ASCII,
)

_STRICT_FORMATS = (_IMF_FIXDATE, _RFC850_DATE, _ASCTIME_DATE)

# Two-digit years: 00-68 -> 20xx, 69-99 -> 19xx (same window as email.utils).
TWO_DIGIT_YEAR_PIVOT = 69


def expand_year(year: int) -> int:
    """Expand a two-digit year using the fixed century window."""
    if year >= 100:
        return year
    if year >= TWO_DIGIT_YEAR_PIVOT:
        return 1900 + year
    return 2000 + year


def _from_match(match: re.Match[str]) -> datetime:
    return datetime(
        expand_year(int(match["year"])),
        _MONTHS[match["month"].lower()],
        int(match["day"]),
        int(match["hour"]),
        int(match["minute"]),
        int(match["second"]),
        tzinfo=UTC,
    )


def _parse_strict(value: str) -> datetime | None:
    for pattern in _STRICT_FORMATS:
        match = pattern.fullmatch(value)
        if match is not None:
            try:
                return _from_match(match)
            except ValueError:
                # 31 Feb and friends; let the lenient parsers have a go.
                return None
    return None


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class _ParserInfo(dateutil_parser.parserinfo):
    """English name tables with the fixed two-digit year window."""

    def convertyear(self, year: int, century_specified: bool = False) -> int:
        if century_specified:
            return year
        return expand_year(year)


_DATEUTIL_PARSER = dateutil_parser.parser(_ParserInfo())


def _parse_free_form(value: str) -> datetime:
    return _DATEUTIL_PARSER.parse(value)


_LENIENT_PARSERS: tuple[Callable[[str], datetime], ...] = (
    parsedate_to_datetime,
    datetime.fromisoformat,
    _parse_free_form,
)


def _parse_lenient(value: str) -> datetime | None:
    for parser in _LENIENT_PARSERS:
        try:
            parsed = parser(value)
        except (TypeError, ValueError, IndexError, ArithmeticError):
            continue
        if parsed is None:
            continue
        try:
            return _to_utc(parsed)
        except (ValueError, OverflowError):
            continue
    return None


def parse_http_date(value: str | None) -> datetime | None:
    """Parse an HTTP date into an aware UTC ``datetime``.

    Returns ``None`` for ``None``, empty, or unparseable input. Never
    raises for string input.
    """
    if not value:
        return None
    value = value.strip()
    if not value:
        return None
    parsed = _parse_strict(value)
    if parsed is not None:
        return parsed
    return _parse_lenient(value)


def try_parse_http_date(value: str | None) -> tuple[datetime | None, bool]:
    """Parse an HTTP date, returning ``(timestamp, ok)``."""
    parsed = parse_http_date(value)
    return parsed, parsed is not None


def format_http_date(value: datetime) -> str:
    """Format *value* as an IMF-fixdate (``Sun, 06 Nov 1994 08:49:37 GMT``)."""
    value = _to_utc(value)
    day = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")[value.weekday()]
    month = tuple(_MONTHS)[value.month - 1].title()
    return f"{day}, {value.day:02d} {month} {value.year:04d} {value:%H:%M:%S} GMT"
