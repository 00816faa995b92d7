"""HTML forms: fill in controls, then build the submission.

Nothing here sends anything. ``HtmlForm.submit()`` returns a
``FormSubmission`` describing the request a browser would make, and
``FormSubmission.to_request()`` turns that into an ``httpx.Request`` for
whatever client the caller uses.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Self
from urllib.parse import urljoin, urlsplit, urlunsplit

import httpx

from sieve.config import ScrapeConfig
from sieve.errors import FormNotFoundError, PostBackError
from sieve.forms import _patterns
from sieve.forms.controls import (
    CheckableControl,
    CheckboxControl,
    FormControl,
    InputControl,
    InputType,
    RadioControl,
    SelectControl,
    TextAreaControl,
)
from sieve.forms.definition import FormDefinition

if TYPE_CHECKING:
    from sieve.responses.types import HtmlResponse

logger = logging.getLogger("sieve.forms")

FORM_URLENCODED = "application/x-www-form-urlencoded"

EVENT_TARGET = "__EVENTTARGET"
EVENT_ARGUMENT = "__EVENTARGUMENT"


@dataclass(frozen=True, slots=True)
class FormSubmission:
    """The request a form submission would make.

    For ``GET`` the data is already in ``url``'s query string; ``data``
    holds it too, for inspection.
    """

    method: str
    url: str
    data: str
    content_type: str | None = None
    referer: str | None = None
    xhr: bool = False

    @property
    def headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.referer:
            headers["Referer"] = self.referer
        if self.content_type:
            headers["Content-Type"] = self.content_type
        if self.xhr:
            headers["X-Requested-With"] = "XMLHttpRequest"
        return headers

    def to_request(self) -> httpx.Request:
        """Build the equivalent ``httpx.Request`` (not sent)."""
        content = self.data.encode("ascii") if self.method == "POST" else None
        return httpx.Request(self.method, self.url, headers=self.headers, content=content)


def _definitions(html: str, config: ScrapeConfig | None) -> list[FormDefinition]:
    strip_comments = config.strip_comments if config is not None else True
    return FormDefinition.parse(html, strip_comments=strip_comments)


class HtmlForm:
    """A form loaded from a page, with mutable controls.

    Usage::

        form = HtmlForm.find(url, html, "id", "search")
        form.control("query").value = "xbox"
        request = form.submit().to_request()
    """

    def __init__(self, url: str, definition: FormDefinition) -> None:
        self.url = url
        self.html = definition.page_html
        self._attributes = dict(definition.attributes)
        self._controls: list[FormControl] = copy.deepcopy(list(definition.controls))

    # -- Loading --

    @classmethod
    def from_definition(cls, url: str, definition: FormDefinition) -> Self:
        return cls(url, definition)

    @classmethod
    def from_html(
        cls, url: str, html: str, ordinal: int = 0, *, config: ScrapeConfig | None = None
    ) -> Self:
        """Load the *ordinal*-th form (zero-based) in *html*.

        Raises:
            FormNotFoundError: The page has no form at *ordinal*.
        """
        definitions = _definitions(html, config)
        if not 0 <= ordinal < len(definitions):
            raise FormNotFoundError(
                f"No form at ordinal {ordinal} on {url} ({len(definitions)} forms found)"
            )
        return cls(url, definitions[ordinal])

    @classmethod
    def find(
        cls,
        url: str,
        html: str,
        attribute: str,
        value: str,
        *,
        config: ScrapeConfig | None = None,
    ) -> Self:
        """Load the first form whose *attribute* equals *value* exactly.

        Raises:
            FormNotFoundError: No form matches.
        """
        key = attribute.lower()
        for definition in _definitions(html, config):
            if definition.attributes.get(key) == value:
                return cls(url, definition)
        raise FormNotFoundError(f"No form with {attribute.upper()}={value!r} on {url}")

    @classmethod
    def from_response(
        cls,
        response: HtmlResponse,
        ordinal: int = 0,
        *,
        attribute: str | None = None,
        value: str | None = None,
        config: ScrapeConfig | None = None,
    ) -> Self:
        """Load a form from an HTML response, by *attribute*/*value* or *ordinal*."""
        if attribute is not None and value is not None:
            return cls.find(response.url, response.html, attribute, value, config=config)
        return cls.from_html(response.url, response.html, ordinal, config=config)

    # -- Attributes and controls --

    @property
    def attributes(self) -> Mapping[str, str]:
        return MappingProxyType(self._attributes)

    @property
    def id(self) -> str | None:
        return self._attributes.get("id")

    @property
    def method(self) -> str:
        """``POST`` if the form says so; anything else submits as ``GET``."""
        if self._attributes.get("method", "").strip().upper() == "POST":
            return "POST"
        return "GET"

    @property
    def action_url(self) -> str:
        """Absolute submission URL. A missing ``action`` means the form's own URL."""
        return urljoin(self.url, self._attributes.get("action", "").strip())

    @property
    def controls(self) -> list[FormControl]:
        return list(self._controls)

    @property
    def inputs(self) -> list[InputControl]:
        """Plain ``<input>`` controls; checkboxes and radios are listed separately."""
        return [c for c in self._controls if type(c) is InputControl]

    @property
    def checkboxes(self) -> list[CheckboxControl]:
        return [c for c in self._controls if isinstance(c, CheckboxControl)]

    @property
    def radios(self) -> list[RadioControl]:
        return [c for c in self._controls if isinstance(c, RadioControl)]

    @property
    def selects(self) -> list[SelectControl]:
        return [c for c in self._controls if isinstance(c, SelectControl)]

    @property
    def textareas(self) -> list[TextAreaControl]:
        return [c for c in self._controls if isinstance(c, TextAreaControl)]

    def control(self, name: str) -> FormControl:
        """Return the first control named *name*.

        Raises:
            KeyError: The form has no such control.
        """
        for control in self._controls:
            if control.name == name:
                return control
        raise KeyError(name)

    def add_control(self, control: FormControl) -> None:
        """Append a control the page would have added by script."""
        self._controls.append(control)

    # -- Submission --

    def build_request(self, submit_button: str | None = None) -> str:
        """URL-encode the successful controls, in document order.

        With *submit_button*, only the submit or image button of that name
        (compared case-insensitively) is included; pass ``""`` to include
        none. With ``None`` every submit button is included.
        """
        parts = []
        for control in self._controls:
            if not _is_successful(control, submit_button):
                continue
            data = control.encoded_data
            if data:
                parts.append(data)
        return "&".join(parts)

    def submit(self, submit_button: str | None = None, *, xhr: bool = False) -> FormSubmission:
        """Describe the request submitting this form would make."""
        return self._submission(self.build_request(submit_button), xhr=xhr)

    def _submission(self, data: str, *, xhr: bool) -> FormSubmission:
        method = self.method
        if method == "POST":
            submission = FormSubmission(
                method, self.action_url, data, FORM_URLENCODED, self.url, xhr
            )
        else:
            url = urlunsplit(urlsplit(self.action_url)._replace(query=data))
            submission = FormSubmission(method, url, data, None, self.url, xhr)
        logger.debug("Submitting form %s %s", submission.method, submission.url)
        return submission

    def __repr__(self) -> str:
        return f"{type(self).__name__}(url={self.url!r}, id={self.id!r}, controls={len(self._controls)})"


def _is_successful(control: FormControl, submit_button: str | None) -> bool:
    if control.disabled:
        return False
    if isinstance(control, CheckableControl):
        return control.checked
    if isinstance(control, InputControl):
        match control.type:
            case InputType.BUTTON | InputType.RESET:
                return False
            case InputType.SUBMIT | InputType.IMAGE:
                if submit_button is None:
                    return True
                return (control.name or "").casefold() == submit_button.casefold()
    return True


class AspxForm(HtmlForm):
    """An ASP.NET WebForms form, which posts back through ``__doPostBack()``."""

    def postback(
        self, event_target: str, event_argument: str = "", *, xhr: bool = False
    ) -> FormSubmission:
        """Describe the request ``__doPostBack(event_target, event_argument)`` makes.

        No submit button is included. The event fields are cleared again
        afterwards so later submissions are unaffected.

        Raises:
            PostBackError: The form lacks ``__EVENTTARGET`` or
                ``__EVENTARGUMENT``.
        """
        target = self._event_field(EVENT_TARGET)
        argument = self._event_field(EVENT_ARGUMENT)

        if _patterns.DO_POSTBACK_SPLIT.search(self.html):
            event_target = event_target.replace("$", ":")
        target.value = event_target
        argument.value = event_argument
        try:
            data = self.build_request("")
        finally:
            target.value = ""
            argument.value = ""
        return self._submission(data, xhr=xhr)

    def _event_field(self, name: str) -> InputControl:
        fields = [c for c in self._controls if c.name == name and isinstance(c, InputControl)]
        if len(fields) != 1:
            raise PostBackError(f"Cannot post back: form needs exactly one {name} input")
        return fields[0]
