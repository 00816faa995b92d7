"""Scraper base: pull values out of a page that has already been received.

Subclass ``Scraper`` once per kind of page. Read ``self.html`` with
regexes or string methods, and use ``require`` for the values the page
must contain. A miss raises ``ScrapeError`` with the page attached, so
the caller can see what actually came back.

Usage::

    class ProductPage(Scraper):
        @property
        def price(self) -> str:
            return self.require(r'<span class="price">(.*?)</span>', "price")

    page = ProductPage.from_response(response)
    page.price
"""

from __future__ import annotations

import html as html_module
import re
from typing import Self

from sieve.errors import ScrapeError
from sieve.responses.types import WebResponse
from sieve.responses.validator import expect_html

_FLAGS = re.IGNORECASE | re.DOTALL


class Scraper:
    """Base for page scrapers.

    Raises:
        ScrapeError: *html* is empty or whitespace.
    """

    def __init__(self, html: str) -> None:
        if not html or not html.strip():
            raise ScrapeError("Page is empty", html)
        self.html = html

    @classmethod
    def from_response(cls, response: WebResponse) -> Self:
        """Scrape an HTML response.

        Raises:
            UnexpectedResponseError: *response* is not an HTML page.
        """
        return cls(expect_html(response).html)

    def search(self, pattern: str | re.Pattern[str], group: int | str = 1) -> str | None:
        """Return *group* of the first match of *pattern*, HTML-unescaped.

        String patterns are compiled case-insensitively with ``.`` matching
        newlines. Returns ``None`` if nothing matches or the group did not
        take part in the match.
        """
        if isinstance(pattern, str):
            pattern = re.compile(pattern, _FLAGS)
        match = pattern.search(self.html)
        if match is None or match.group(group) is None:
            return None
        return html_module.unescape(match.group(group))

    def search_all(self, pattern: str | re.Pattern[str], group: int | str = 1) -> list[str]:
        """Return *group* of every match of *pattern*, in document order."""
        if isinstance(pattern, str):
            pattern = re.compile(pattern, _FLAGS)
        return [
            html_module.unescape(match.group(group))
            for match in pattern.finditer(self.html)
            if match.group(group) is not None
        ]

    def require(
        self, pattern: str | re.Pattern[str], what: str, group: int | str = 1
    ) -> str:
        """Like ``search``, but a miss is an error.

        Raises:
            ScrapeError: *pattern* does not match. The error carries the page.
        """
        value = self.search(pattern, group)
        if value is None:
            raise ScrapeError(f"Could not find {what} on the page", self.html)
        return value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self.html)} chars)"
