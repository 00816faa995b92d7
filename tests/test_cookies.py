"""Tests for sieve.http.cookies: resolving parsed Set-Cookie headers."""

import logging
from datetime import UTC, datetime, timedelta

import pytest

from sieve.config import ScrapeConfig
from sieve.errors import CookieAttributeError, UsageError
from sieve.http.cookies import Cookie, extract_cookies, extract_response_cookies, resolve_cookie
from sieve.http.headers import Headers
from sieve.http.setcookie import NameValuePair, ParsedCookie

HOST = "DefaultDomainWhenNotSuppliedInCookie.com"
NOW = datetime(2016, 6, 9, 2, 8, 36, tzinfo=UTC)

GITHUB_1 = (
    "_octo=GH1.1.1471152791.1465438116; domain=.github.com; path=/; "
    "expires=Sat, 09 Jun 2018 02:08:36 -0000"
)
GITHUB_2 = (
    "logged_in=no; domain=.github.com; path=/; "
    "expires=Mon, 09 Jun 2036 02:08:36 -0000; secure; HttpOnly"
)
GITHUB_3 = "_gh_sess=eyJzZXNzaW9uX2lkIjoiMDRj%2BIn19fQ%3D%3D--f9dbdf5ad33c; path=/; secure; HttpOnly"
STACK_OVERFLOW = "s=541E2101-B768-45C8-B814-34A00525E50F; Domain=example.com; Path=/; Version=1"
FREDERIK = (
    "ADCDownloadAuth=[long token];Version=1;Comment=;Domain=apple.com;Path=/;"
    "Max-Age=108000;HttpOnly;Expires=Tue, 03 May 2016 13:30:57 GMT"
)

CFDUID = "__cfduid=d9de9c2173f6f46cc6a9457aada153ace1467497253"
ODD_EXPIRES = [
    f"{CFDUID}; expires=Sun 02-Jul-17 22:07:33 GMT; path=/; domain=.typicode.com; HttpOnly",
    f"{CFDUID}; expires=Sun, 02-Jul-17 22:07:33 GMT; path=/; domain=.typicode.com; HttpOnly",
    f"{CFDUID}; expires=Sun Jul  2 22:07:33 2017; path=/; domain=.typicode.com; HttpOnly",
    f"{CFDUID}; expires=Sunday, 02-Jul-17 22:07:33 GMT; path=/; domain=.typicode.com; HttpOnly",
]
JUL_2_2017 = datetime(2017, 7, 2, 22, 7, 33, tzinfo=UTC)


def _one(header: str) -> Cookie:
    """Shorthand: extract exactly one cookie from *header*."""
    cookies = extract_cookies(header, HOST, now=NOW)
    assert len(cookies) == 1
    return cookies[0]


def _parsed(*pairs: tuple[str, str]) -> ParsedCookie:
    return ParsedCookie(tuple(NameValuePair(n, v) for n, v in pairs))


class TestRealWorldCookies:
    def test_github_with_expires(self) -> None:
        cookie = _one(GITHUB_1)
        assert cookie == Cookie(
            name="_octo",
            value="GH1.1.1471152791.1465438116",
            domain=".github.com",
            path="/",
            expires=datetime(2018, 6, 9, 2, 8, 36, tzinfo=UTC),
        )

    def test_github_secure_http_only(self) -> None:
        cookie = _one(GITHUB_2)
        assert cookie.name == "logged_in"
        assert cookie.value == "no"
        assert cookie.expires == datetime(2036, 6, 9, 2, 8, 36, tzinfo=UTC)
        assert cookie.secure
        assert cookie.http_only

    def test_github_session_cookie(self) -> None:
        cookie = _one(GITHUB_3)
        assert cookie.name == "_gh_sess"
        assert cookie.value == "eyJzZXNzaW9uX2lkIjoiMDRj%2BIn19fQ%3D%3D--f9dbdf5ad33c"
        assert cookie.domain == HOST
        assert cookie.is_session
        assert cookie.secure
        assert cookie.http_only

    def test_version_attribute(self) -> None:
        cookie = _one(STACK_OVERFLOW)
        assert cookie.name == "s"
        assert cookie.domain == "example.com"
        assert cookie.version == 1
        assert cookie.is_session

    def test_max_age_beats_later_expires(self) -> None:
        cookie = _one(FREDERIK)
        assert cookie.value == "[long token]"
        assert cookie.domain == "apple.com"
        assert cookie.expires == NOW + timedelta(seconds=108000)
        assert cookie.http_only
        assert cookie.version == 1

    def test_multiple_cookies_in_order(self) -> None:
        header = ",".join([GITHUB_1, GITHUB_2, GITHUB_3])
        cookies = extract_cookies(header, HOST, now=NOW)
        assert [c.name for c in cookies] == ["_octo", "logged_in", "_gh_sess"]
        assert cookies[0] == _one(GITHUB_1)
        assert cookies[1] == _one(GITHUB_2)
        assert cookies[2] == _one(GITHUB_3)


class TestOddExpiresDates:
    @pytest.mark.parametrize("header", ODD_EXPIRES)
    def test_single(self, header: str) -> None:
        cookie = _one(header)
        assert cookie.name == "__cfduid"
        assert cookie.value == "d9de9c2173f6f46cc6a9457aada153ace1467497253"
        assert cookie.domain == ".typicode.com"
        assert cookie.expires == JUL_2_2017
        assert cookie.http_only
        assert not cookie.secure
        assert cookie.is_expired(datetime(2018, 1, 1, tzinfo=UTC))

    @pytest.mark.parametrize(
        ("first", "second"),
        [(ODD_EXPIRES[0], ODD_EXPIRES[1]), (ODD_EXPIRES[1], ODD_EXPIRES[0])],
    )
    def test_joined(self, first: str, second: str) -> None:
        cookies = extract_cookies(f"{first},{second}", HOST, now=NOW)
        assert len(cookies) == 2
        assert all(c.expires == JUL_2_2017 for c in cookies)
        assert all(c.domain == ".typicode.com" for c in cookies)


class TestMalformedInput:
    @pytest.mark.parametrize("header", [None, ""])
    def test_empty_header(self, header: str | None) -> None:
        assert extract_cookies(header, HOST) == []

    @pytest.mark.parametrize("host", ["", "   "])
    def test_blank_host_raises(self, host: str) -> None:
        with pytest.raises(UsageError, match="host_name"):
            extract_cookies("foo=bar", host)

    def test_blank_host_raises_even_without_header(self) -> None:
        with pytest.raises(UsageError):
            extract_cookies(None, "")

    def test_usage_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            extract_cookies("foo=bar", "")

    @pytest.mark.parametrize(
        "header",
        [
            "xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx",
            "xxxxxxxxxxxxxxxxxx,xxxxxxxxxxxxxxxxxxx,xxxxxxxxxxxxxxx",
            "xxxxxxxx; xxxxxxxxxx,xxxxxxx; xxxxxxxxxxxx,xxxxx; xxxxxxxxxx",
        ],
    )
    def test_bad_header(self, header: str) -> None:
        assert extract_cookies(header, HOST) == []

    def test_unknown_attributes_ignored(self) -> None:
        cookie = _one("foo=bar; xxxxxxxxxx; xxxxxxx; xxxxx; xxxxxxxxxx")
        assert cookie == Cookie(name="foo", value="bar", domain=HOST)

    def test_bad_expires_is_session_cookie(self) -> None:
        cookie = _one("foo=bar; expires=Xxx, 00-Xxx-00 00:00:00 GMT; path=/")
        assert cookie == Cookie(name="foo", value="bar", domain=HOST)
        assert cookie.is_session

    def test_newlines_stripped(self) -> None:
        cookie = _one("foo=\rline1\nline2\rline3\r\nline4\r\rline5\n")
        assert cookie.value == "line1line2line3line4line5"

    def test_empty_path_and_domain_reset(self) -> None:
        cookie = _one("foo=bar; path=; domain=")
        assert cookie.path == "/"
        assert cookie.domain == HOST

    def test_bad_version_ignored(self) -> None:
        assert _one("foo=bar; version=one").version == 0


class TestMaxAge:
    def test_max_age_before_expires(self) -> None:
        cookie = _one("foo=bar; max-age=60; expires=Sun, 06 Nov 1994 08:49:37 GMT")
        assert cookie.expires == NOW + timedelta(seconds=60)

    def test_max_age_after_expires(self) -> None:
        cookie = _one("foo=bar; expires=Sun, 06 Nov 1994 08:49:37 GMT; max-age=60")
        assert cookie.expires == NOW + timedelta(seconds=60)

    def test_zero_max_age_expires_now(self) -> None:
        cookie = _one("foo=bar; Max-Age=0")
        assert cookie.expires == NOW
        assert cookie.is_expired(NOW)

    def test_naive_now_gives_aware_max_age_expiry(self) -> None:
        [cookie] = extract_cookies("foo=bar; max-age=60", HOST, now=NOW.replace(tzinfo=None))
        assert cookie.expires == NOW + timedelta(seconds=60)
        assert cookie.expires is not None
        assert cookie.expires.tzinfo is not None

    def test_negative_max_age(self) -> None:
        cookie = _one("foo=bar; Max-Age=-1")
        assert cookie.expires == NOW - timedelta(seconds=1)

    def test_invalid_max_age_ignored(self) -> None:
        cookie = _one("foo=bar; max-age=soon; expires=Sun, 06 Nov 1994 08:49:37 GMT")
        assert cookie.expires == datetime(1994, 11, 6, 8, 49, 37, tzinfo=UTC)

    def test_invalid_max_age_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="sieve.cookies"):
            _one("foo=bar; max-age=soon")
        assert "max-age" in caplog.text

    def test_overflowing_max_age_ignored(self) -> None:
        cookie = _one(f"foo=bar; max-age={10**20}")
        assert cookie.is_session

    def test_strict_drops_only_bad_cookie(self, caplog: pytest.LogCaptureFixture) -> None:
        config = ScrapeConfig(strict_max_age=True)
        with caplog.at_level(logging.WARNING, logger="sieve.cookies"):
            cookies = extract_cookies("foo=bar; max-age=soon,baz=qux", HOST, config=config, now=NOW)
        assert [c.name for c in cookies] == ["baz"]
        assert "Dropping cookie 'foo'" in caplog.text

    def test_strict_resolve_raises(self) -> None:
        parsed = _parsed(("foo", "bar"), ("Max-Age", "soon"))
        with pytest.raises(CookieAttributeError, match="Max-Age") as exc_info:
            resolve_cookie(parsed, HOST, now=NOW, strict_max_age=True)
        assert exc_info.value.name == "Max-Age"
        assert exc_info.value.value == "soon"


class TestResolveCookie:
    def test_empty_parsed_cookie(self) -> None:
        assert resolve_cookie(ParsedCookie(), HOST) is None

    def test_later_attribute_wins(self) -> None:
        parsed = _parsed(("foo", "bar"), ("path", "/a"), ("path", "/b"))
        cookie = resolve_cookie(parsed, HOST, now=NOW)
        assert cookie is not None
        assert cookie.path == "/b"

    def test_attribute_names_case_insensitive(self) -> None:
        parsed = _parsed(("foo", "bar"), ("SECURE", ""), ("hTtPoNlY", ""), ("DOMAIN", "x.org"))
        cookie = resolve_cookie(parsed, HOST, now=NOW)
        assert cookie is not None
        assert cookie.secure
        assert cookie.http_only
        assert cookie.domain == "x.org"

    def test_idempotent_with_fixed_now(self) -> None:
        header = ",".join([GITHUB_1, FREDERIK, *ODD_EXPIRES])
        assert extract_cookies(header, HOST, now=NOW) == extract_cookies(header, HOST, now=NOW)

    def test_created_ignored_by_equality(self) -> None:
        a = Cookie(name="a", value="1", domain=HOST, created=NOW)
        b = Cookie(name="a", value="1", domain=HOST, created=NOW + timedelta(days=1))
        assert a == b


class TestCookie:
    def test_session_never_expires(self) -> None:
        cookie = Cookie(name="a", value="1", domain=HOST)
        assert cookie.is_session
        assert not cookie.is_expired(datetime(9999, 1, 1, tzinfo=UTC))

    def test_is_expired(self) -> None:
        cookie = Cookie(name="a", value="1", domain=HOST, expires=NOW)
        assert not cookie.is_expired(NOW - timedelta(seconds=1))
        assert cookie.is_expired(NOW)

    def test_is_expired_naive_now_taken_as_utc(self) -> None:
        cookie = Cookie(name="a", value="1", domain=HOST, expires=NOW)
        naive = NOW.replace(tzinfo=None)
        assert cookie.is_expired(naive)
        assert not cookie.is_expired(naive - timedelta(seconds=1))

    def test_frozen(self) -> None:
        cookie = Cookie(name="a", value="1", domain=HOST)
        with pytest.raises(AttributeError):
            cookie.value = "2"  # type: ignore[misc]


class TestExtractResponseCookies:
    def test_every_set_cookie_header(self) -> None:
        headers = Headers(
            [
                ("Content-Type", "text/html"),
                ("Set-Cookie", GITHUB_1),
                ("set-cookie", "a=1, b=2"),
            ]
        )
        cookies = extract_response_cookies(headers, HOST, now=NOW)
        assert [c.name for c in cookies] == ["_octo", "a", "b"]

    def test_no_set_cookie(self) -> None:
        assert extract_response_cookies(Headers({"Accept": "*/*"}), HOST) == []

    def test_blank_host_raises(self) -> None:
        with pytest.raises(UsageError):
            extract_response_cookies(Headers(), " ")
