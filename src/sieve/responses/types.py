"""Typed web responses.

Every response the factory builds is one of these frozen dataclasses.
``response_type`` is a class attribute, so callers can dispatch on it or
on ``isinstance`` as they prefer.
"""

import json as json_module
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, ClassVar
from xml.etree import ElementTree

from sieve.http.headers import Headers


class ResponseType(StrEnum):
    EXCEPTION = "exception"
    HTML = "html"
    IMAGE = "image"
    JAVASCRIPT = "javascript"
    JSON = "json"
    REDIRECT = "redirect"
    PLAINTEXT = "plaintext"
    UNSUPPORTED = "unsupported"
    XML = "xml"
    BINARY = "binary"


@dataclass(frozen=True, slots=True, kw_only=True)
class WebResponse:
    """Base for all responses.

    ``url`` is the URL the response was received from, after any redirects
    the transport followed itself.
    """

    response_type: ClassVar[ResponseType]

    url: str
    status: int = 200
    headers: Headers = field(default_factory=Headers)
    success: bool = True


@dataclass(frozen=True, slots=True, kw_only=True)
class TextResponse(WebResponse):
    """A response whose body was decoded to text."""

    text: str
    encoding: str = "iso-8859-1"


@dataclass(frozen=True, slots=True, kw_only=True)
class HtmlResponse(TextResponse):
    response_type: ClassVar[ResponseType] = ResponseType.HTML

    @property
    def html(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True, kw_only=True)
class XmlResponse(TextResponse):
    response_type: ClassVar[ResponseType] = ResponseType.XML

    @property
    def xml(self) -> ElementTree.Element:
        """The parsed document root. Parsed on each access."""
        return ElementTree.fromstring(self.text)


@dataclass(frozen=True, slots=True, kw_only=True)
class JsonResponse(TextResponse):
    response_type: ClassVar[ResponseType] = ResponseType.JSON

    @property
    def json(self) -> str:
        return self.text

    @property
    def data(self) -> Any:
        """The decoded JSON document. Decoded on each access."""
        return json_module.loads(self.text)


@dataclass(frozen=True, slots=True, kw_only=True)
class JavaScriptResponse(TextResponse):
    response_type: ClassVar[ResponseType] = ResponseType.JAVASCRIPT

    @property
    def script(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True, kw_only=True)
class PlainTextResponse(TextResponse):
    response_type: ClassVar[ResponseType] = ResponseType.PLAINTEXT


@dataclass(frozen=True, slots=True, kw_only=True)
class ImageResponse(WebResponse):
    response_type: ClassVar[ResponseType] = ResponseType.IMAGE

    content: bytes
    content_type: str


@dataclass(frozen=True, slots=True, kw_only=True)
class BinaryResponse(WebResponse):
    response_type: ClassVar[ResponseType] = ResponseType.BINARY

    content: bytes
    content_type: str = "application/octet-stream"


@dataclass(frozen=True, slots=True, kw_only=True)
class RedirectedResponse(WebResponse):
    """A redirect the caller has to follow.

    Built from a 3xx status with a ``Location`` header, or from an HTML
    meta refresh (in which case ``status`` is the page's own status).
    ``redirect_url`` is always absolute.
    """

    response_type: ClassVar[ResponseType] = ResponseType.REDIRECT

    redirect_url: str


@dataclass(frozen=True, slots=True, kw_only=True)
class UnsupportedResponse(WebResponse):
    response_type: ClassVar[ResponseType] = ResponseType.UNSUPPORTED

    content_type: str
    content: bytes = b""
    success: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class ExceptionResponse(WebResponse):
    """A response that could not be turned into anything useful.

    ``error`` says why: an error status, an undecodable body, and so on.
    """

    response_type: ClassVar[ResponseType] = ResponseType.EXCEPTION

    error: Exception
    success: bool = False
