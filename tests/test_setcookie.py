"""Tests for sieve.http.setcookie: the Set-Cookie header grammar."""

import pytest

from sieve.http.setcookie import (
    NameValuePair,
    ParsedCookie,
    ParsedSetCookieHeader,
    _expires_pair,
    _name_only,
    _name_value,
    parse_set_cookie_header,
)

PREFERRED_DATE = "Sun, 06 Nov 1994 08:49:37 GMT"
RFC850_DATE = "Sunday, 06-Nov-94 08:49:37 GMT"
ASCTIME_DATE = "Sun Nov  6 08:49:37 1994"


def _pairs(raw: str) -> list[list[tuple[str, str]]]:
    """Shorthand: the (name, value) pairs of every cookie in *raw*."""
    return [[(p.name, p.value) for p in cookie.pairs] for cookie in parse_set_cookie_header(raw)]


class TestNameValueRule:
    @pytest.mark.parametrize("suffix", ["", ";", ",", ";,"])
    def test_basic(self, suffix: str) -> None:
        result = _name_value(f"foo=bar{suffix}", 0)
        assert result is not None
        assert result[0] == NameValuePair("foo", "bar")

    @pytest.mark.parametrize("suffix", [";", ";,"])
    def test_empty_value(self, suffix: str) -> None:
        result = _name_value(f"foo={suffix}", 0)
        assert result is not None
        assert result[0] == NameValuePair("foo", "")

    def test_case_preserved(self) -> None:
        result = _name_value("FOO=BAR", 0)
        assert result is not None
        assert result[0] == NameValuePair("FOO", "BAR")

    def test_nothing_to_parse(self) -> None:
        assert _name_value("", 0) is None

    def test_name_without_equals(self) -> None:
        assert _name_value("foo;", 0) is None

    def test_stops_before_comma(self) -> None:
        result = _name_value("foo=bar,baz=qux", 0)
        assert result is not None
        assert result[1] == len("foo=bar")


class TestNameOnlyRule:
    @pytest.mark.parametrize("text", ["foo", "foo;", "foo,", " foo ; "])
    def test_basic(self, text: str) -> None:
        result = _name_only(text, 0)
        assert result is not None
        assert result[0] == NameValuePair("foo", "")

    def test_nothing_to_parse(self) -> None:
        assert _name_only("", 0) is None

    def test_consumes_delimiter(self) -> None:
        result = _name_only("secure; HttpOnly", 0)
        assert result is not None
        assert result[1] == len("secure; ")


class TestExpiresRule:
    @pytest.mark.parametrize("name", ["expires", "EXPIRES", "Expires"])
    @pytest.mark.parametrize("date", [PREFERRED_DATE, RFC850_DATE, ASCTIME_DATE])
    def test_date_formats_and_name_case(self, name: str, date: str) -> None:
        result = _expires_pair(f"{name}={date}", 0)
        assert result is not None
        assert result[0] == NameValuePair(name, date)

    @pytest.mark.parametrize("date", [PREFERRED_DATE, RFC850_DATE, ASCTIME_DATE])
    def test_stops_at_cookie_separator(self, date: str) -> None:
        text = f"expires={date},next=1"
        result = _expires_pair(text, 0)
        assert result is not None
        assert result[0].value == date
        assert text[result[1]] == ","

    def test_spaces_around_equals(self) -> None:
        result = _expires_pair(f"expires = {PREFERRED_DATE}", 0)
        assert result is not None
        assert result[0].value == PREFERRED_DATE

    def test_other_name_rejected(self) -> None:
        assert _expires_pair(f"max-age={PREFERRED_DATE}", 0) is None

    def test_value_without_whitespace_rejected(self) -> None:
        assert _expires_pair("expires=tomorrow", 0) is None


class TestParseSetCookieHeader:
    def test_none_and_empty(self) -> None:
        assert len(parse_set_cookie_header(None)) == 0
        assert len(parse_set_cookie_header("")) == 0

    def test_returns_typed_result(self) -> None:
        header = parse_set_cookie_header("foo=bar; path=/")
        assert isinstance(header, ParsedSetCookieHeader)
        cookie = header.cookies[0]
        assert isinstance(cookie, ParsedCookie)
        assert cookie.cookie_pair == NameValuePair("foo", "bar")
        assert cookie.attributes == (NameValuePair("path", "/"),)

    def test_assorted_header(self) -> None:
        raw = (
            "a=1; expires=Sun, 06 Nov 1994 08:49:37 GMT; path=/,"
            "b=2; domain=example.com,"
            "c=3; secure,"
            f"d=4; Expires={RFC850_DATE},"
            f"e=5; EXPIRES={ASCTIME_DATE},"
            "f=6"
        )
        cookies = list(parse_set_cookie_header(raw))
        assert [len(c.pairs) for c in cookies] == [3, 2, 2, 2, 2, 1]
        assert [c.cookie_pair.name for c in cookies if c.cookie_pair] == list("abcdef")

    def test_comma_inside_expires_is_not_a_separator(self) -> None:
        assert _pairs(f"foo=bar; expires={PREFERRED_DATE}, baz=qux") == [
            [("foo", "bar"), ("expires", PREFERRED_DATE)],
            [("baz", "qux")],
        ]

    def test_trailing_comma(self) -> None:
        assert _pairs("aaa=bbb;,") == [[("aaa", "bbb")]]

    def test_comma_separated_cookies_with_attribute(self) -> None:
        assert _pairs("aaa=bbb,ccc=ddd;xxx=yyy") == [
            [("aaa", "bbb")],
            [("ccc", "ddd"), ("xxx", "yyy")],
        ]

    def test_empty_value(self) -> None:
        assert _pairs("foo=;") == [[("foo", "")]]

    def test_whitespace_trimmed(self) -> None:
        assert _pairs("  foo  =  bar  ;  path = /  ") == [[("foo", "bar"), ("path", "/")]]

    def test_equals_inside_value(self) -> None:
        assert _pairs("token=abc==; path=/") == [[("token", "abc=="), ("path", "/")]]

    def test_name_only_attributes(self) -> None:
        assert _pairs("foo=bar; secure; HttpOnly") == [
            [("foo", "bar"), ("secure", ""), ("HttpOnly", "")],
        ]

    @pytest.mark.parametrize(
        "raw",
        [
            "xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx",
            "xxxxxxxxxxxxxxxxxx,xxxxxxxxxxxxxxxxxxx,xxxxxxxxxxxxxxx",
            "xxxxxxxx; xxxxxxxxxx,xxxxxxx; xxxxxxxxxxxx,xxxxx; xxxxxxxxxx",
            ";;;",
            ",,,",
            "=bar",
        ],
    )
    def test_garbage_yields_no_cookies(self, raw: str) -> None:
        assert len(parse_set_cookie_header(raw)) == 0

    def test_garbage_after_valid_cookie_dropped(self) -> None:
        assert _pairs("foo=bar,,baz=qux") == [[("foo", "bar")]]

    def test_unknown_attributes_kept(self) -> None:
        cookies = list(parse_set_cookie_header("foo=bar; xxxxxxxxxx; xxxxxxx"))
        assert len(cookies) == 1
        assert [p.name for p in cookies[0].attributes] == ["xxxxxxxxxx", "xxxxxxx"]
