"""Response validation.

Scrapers usually know exactly what a request should come back as. These
helpers turn "anything else" into an ``UnexpectedResponseError`` whose
``__cause__`` says what arrived instead.
"""

from sieve.errors import ScrapeError, UnexpectedResponseError
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
    UnsupportedResponse,
    WebResponse,
    XmlResponse,
)

_UNEXPECTED: dict[ResponseType, str] = {
    ResponseType.HTML: "Unexpected HTML page",
    ResponseType.IMAGE: "Unexpected image",
    ResponseType.REDIRECT: "Unexpected redirect",
    ResponseType.PLAINTEXT: "Unexpected plain text",
    ResponseType.XML: "Unexpected XML",
    ResponseType.JSON: "Unexpected JSON",
    ResponseType.JAVASCRIPT: "Unexpected JavaScript",
    ResponseType.BINARY: "Unexpected binary content",
}


def _cause(response: WebResponse) -> Exception:
    match response:
        case ExceptionResponse(error=error):
            return error
        case UnsupportedResponse(content_type=content_type):
            return ScrapeError(f"Unsupported response content type {content_type!r}")
        case RedirectedResponse(redirect_url=redirect_url):
            return ScrapeError(f"Unexpected redirect to {redirect_url}")
        case _:
            message = _UNEXPECTED.get(response.response_type)
            if message is None:
                return ScrapeError(f"Unsupported response type {response.response_type!r}")
            html = response.html if isinstance(response, HtmlResponse) else None
            return ScrapeError(message, html)


def expect_response(
    response: WebResponse,
    *types: ResponseType,
    message: str | None = None,
) -> WebResponse:
    """Return *response* if its type is one of *types*.

    Raises:
        UnexpectedResponseError: The response is of any other type. The
            error chains a cause describing the actual response.
    """
    if response.response_type in types:
        return response
    expected = ", ".join(str(t) for t in types)
    html = response.html if isinstance(response, HtmlResponse) else None
    raise UnexpectedResponseError(
        message or f"Expected {expected} response from {response.url}, got {response.response_type}",
        response,
        types,
        html,
    ) from _cause(response)


def _expect[R: WebResponse](response: WebResponse, cls: type[R], message: str | None) -> R:
    validated = expect_response(response, cls.response_type, message=message)
    assert isinstance(validated, cls)
    return validated


def expect_html(response: WebResponse, message: str | None = None) -> HtmlResponse:
    return _expect(response, HtmlResponse, message)


def expect_json(response: WebResponse, message: str | None = None) -> JsonResponse:
    return _expect(response, JsonResponse, message)


def expect_xml(response: WebResponse, message: str | None = None) -> XmlResponse:
    return _expect(response, XmlResponse, message)


def expect_redirect(response: WebResponse, message: str | None = None) -> RedirectedResponse:
    return _expect(response, RedirectedResponse, message)


def expect_plaintext(response: WebResponse, message: str | None = None) -> PlainTextResponse:
    return _expect(response, PlainTextResponse, message)


def expect_javascript(response: WebResponse, message: str | None = None) -> JavaScriptResponse:
    return _expect(response, JavaScriptResponse, message)


def expect_image(response: WebResponse, message: str | None = None) -> ImageResponse:
    return _expect(response, ImageResponse, message)


def expect_binary(response: WebResponse, message: str | None = None) -> BinaryResponse:
    return _expect(response, BinaryResponse, message)
