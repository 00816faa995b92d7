"""Response dispatch: raw status, headers and body in, typed response out.

The factory never touches the network. Hand it what a transport already
received (or an ``httpx.Response`` via ``from_httpx``) and it picks the
response type from the status code and the ``Content-Type`` header.
Handlers are registered by content-type prefix; the longest matching
prefix wins, so ``register("image/svg", ...)`` beats the built-in
``image/``.
"""

from __future__ import annotations

import codecs
import gzip
import html as html_module
import logging
import re
import zlib
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import urljoin

from python_multipart.multipart import parse_options_header

from sieve.config import ScrapeConfig
from sieve.errors import ResponseStatusError
from sieve.http.headers import HeaderPair, Headers
from sieve.responses.types import (
    BinaryResponse,
    ExceptionResponse,
    HtmlResponse,
    ImageResponse,
    JavaScriptResponse,
    JsonResponse,
    PlainTextResponse,
    RedirectedResponse,
    TextResponse,
    UnsupportedResponse,
    WebResponse,
    XmlResponse,
)

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger("sieve.responses")

_NOSCRIPT = re.compile(r"<noscript\b.*?</noscript\s*>", re.IGNORECASE | re.DOTALL)
META_REFRESH = re.compile(
    r"""<meta\s+http-equiv\s*=\s*["']?refresh["']?[^>]*?
        url\s*=\s*["']?(?P<url>[^"'>\s]+)[^>]*>""",
    re.IGNORECASE | re.DOTALL | re.VERBOSE,
)


def find_meta_refresh(html: str) -> str | None:
    """Return the target of the first meta refresh outside ``<noscript>``."""
    match = META_REFRESH.search(_NOSCRIPT.sub("", html))
    if match is None:
        return None
    return html_module.unescape(match["url"])


@dataclass(frozen=True, slots=True)
class ResponseBody:
    """A decoded response body plus the Content-Type parameters."""

    content: bytes
    media_type: str
    charset: str

    def text(self) -> str:
        return self.content.decode(self.charset, errors="replace")


type ResponseBuilder = Callable[[str, int, Headers, ResponseBody], WebResponse]


def _text_builder(cls: type[TextResponse]) -> ResponseBuilder:
    def build(url: str, status: int, headers: Headers, body: ResponseBody) -> WebResponse:
        return cls(url=url, status=status, headers=headers, text=body.text(), encoding=body.charset)

    return build


def _image(url: str, status: int, headers: Headers, body: ResponseBody) -> WebResponse:
    return ImageResponse(
        url=url, status=status, headers=headers, content=body.content, content_type=body.media_type
    )


def _binary(url: str, status: int, headers: Headers, body: ResponseBody) -> WebResponse:
    return BinaryResponse(
        url=url, status=status, headers=headers, content=body.content, content_type=body.media_type
    )


def _parse_content_type(value: str) -> tuple[str, dict[str, str]]:
    media_type, raw_options = parse_options_header(value.encode("latin-1", errors="replace"))
    options = {
        key.decode("latin-1").lower(): val.decode("latin-1") for key, val in raw_options.items()
    }
    return media_type.decode("latin-1").lower(), options


def _decode_content(content: bytes, content_encoding: str) -> bytes:
    """Undo ``Content-Encoding``. Raises on corrupt or unsupported data."""
    for coding in reversed([c.strip().lower() for c in content_encoding.split(",") if c.strip()]):
        match coding:
            case "gzip" | "x-gzip":
                content = gzip.decompress(content)
            case "deflate":
                try:
                    content = zlib.decompress(content)
                except zlib.error:
                    content = zlib.decompress(content, -zlib.MAX_WBITS)
            case "identity":
                pass
            case _:
                raise ValueError(f"Unsupported content encoding {coding!r}")
    return content


class ResponseFactory:
    """Builds typed responses from already-received HTTP data.

    Usage::

        factory = ResponseFactory()
        response = factory.create(url, 200, headers, body)
        if isinstance(response, HtmlResponse):
            ...
    """

    __slots__ = ("_builders", "config")

    def __init__(self, config: ScrapeConfig | None = None) -> None:
        self.config = config or ScrapeConfig()
        self._builders: dict[str, ResponseBuilder] = {
            "image/": _image,
            "text/xml": _text_builder(XmlResponse),
            "application/xml": _text_builder(XmlResponse),
            "text/plain": _text_builder(PlainTextResponse),
            "text/javascript": _text_builder(JavaScriptResponse),
            "application/javascript": _text_builder(JavaScriptResponse),
            "application/x-javascript": _text_builder(JavaScriptResponse),
            "application/json": _text_builder(JsonResponse),
            "application/octet-stream": _binary,
            "text/html": self._html,
        }

    def register(self, content_type_prefix: str, builder: ResponseBuilder) -> None:
        """Handle media types starting with *content_type_prefix* with *builder*.

        Replaces any existing handler for the same prefix.
        """
        self._builders[content_type_prefix.lower()] = builder

    def builder_for(self, media_type: str) -> ResponseBuilder | None:
        """Return the handler with the longest prefix matching *media_type*."""
        media_type = media_type.lower()
        matches = [prefix for prefix in self._builders if media_type.startswith(prefix)]
        if not matches:
            return None
        return self._builders[max(matches, key=len)]

    def create(
        self,
        url: str,
        status: int,
        headers: Headers | Mapping[str, str] | Iterable[HeaderPair],
        body: bytes = b"",
    ) -> WebResponse:
        """Build the response for *status*, *headers* and *body* received from *url*."""
        if not isinstance(headers, Headers):
            headers = Headers(headers)

        location = headers.get("location")
        if status in self.config.redirect_statuses and location:
            redirect_url = urljoin(url, location.strip())
            logger.debug("%s redirected (%d) to %s", url, status, redirect_url)
            return RedirectedResponse(
                url=url, status=status, headers=headers, redirect_url=redirect_url
            )

        if status >= self.config.error_status_threshold:
            return ExceptionResponse(
                url=url, status=status, headers=headers, error=ResponseStatusError(status, url)
            )

        try:
            content = _decode_content(body, headers.get("content-encoding", "") or "")
        except (OSError, EOFError, ValueError, zlib.error) as exc:
            logger.debug("Could not decode body of %s: %s", url, exc)
            return ExceptionResponse(url=url, status=status, headers=headers, error=exc)

        content_type = headers.get("content-type", "") or ""
        media_type, options = _parse_content_type(content_type)
        body_info = ResponseBody(content, media_type, self._charset(options.get("charset")))

        builder = self.builder_for(media_type)
        if builder is None:
            logger.debug("Unsupported content type %r from %s", content_type, url)
            return UnsupportedResponse(
                url=url, status=status, headers=headers, content_type=content_type, content=content
            )
        return builder(url, status, headers, body_info)

    def from_httpx(self, response: httpx.Response) -> WebResponse:
        """Build the response for an already-received ``httpx.Response``.

        httpx has already undone any ``Content-Encoding``, so the header is
        dropped before dispatch.
        """
        headers = Headers.from_httpx(response.headers).without("content-encoding")
        return self.create(str(response.url), response.status_code, headers, response.content)

    def _charset(self, charset: str | None) -> str:
        if charset:
            try:
                return codecs.lookup(charset.strip("\"' ")).name
            except LookupError:
                logger.debug("Unknown charset %r; using %s", charset, self.config.default_charset)
        return self.config.default_charset

    def _html(self, url: str, status: int, headers: Headers, body: ResponseBody) -> WebResponse:
        html = body.text()
        refresh = find_meta_refresh(html) if self.config.follow_meta_refresh else None
        if refresh is not None:
            redirect_url = urljoin(url, refresh)
            logger.debug("%s refreshes to %s", url, redirect_url)
            return RedirectedResponse(
                url=url, status=status, headers=headers, redirect_url=redirect_url
            )
        return HtmlResponse(
            url=url, status=status, headers=headers, text=html, encoding=body.charset
        )
