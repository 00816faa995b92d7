"""Responses: typed results, content-type dispatch, and validation."""

from sieve.responses.factory import ResponseFactory, find_meta_refresh
from sieve.responses.types import (
    BinaryResponse,
    ExceptionResponse,
    HtmlResponse,
    ImageResponse,
    JavaScriptResponse,
    JsonResponse,
    PlainTextResponse,
    RedirectedResponse,
    ResponseType,
    TextResponse,
    UnsupportedResponse,
    WebResponse,
    XmlResponse,
)
from sieve.responses.validator import (
    expect_binary,
    expect_html,
    expect_image,
    expect_javascript,
    expect_json,
    expect_plaintext,
    expect_redirect,
    expect_response,
    expect_xml,
)

__all__ = [
    "BinaryResponse",
    "ExceptionResponse",
    "HtmlResponse",
    "ImageResponse",
    "JavaScriptResponse",
    "JsonResponse",
    "PlainTextResponse",
    "RedirectedResponse",
    "ResponseFactory",
    "ResponseType",
    "TextResponse",
    "UnsupportedResponse",
    "WebResponse",
    "XmlResponse",
    "expect_binary",
    "expect_html",
    "expect_image",
    "expect_javascript",
    "expect_json",
    "expect_plaintext",
    "expect_redirect",
    "expect_response",
    "expect_xml",
    "find_meta_refresh",
]
