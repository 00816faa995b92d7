"""Form definitions: every ``<form>`` found in a page, as parsed."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from sieve.forms import _patterns
from sieve.forms.attributes import parse_attributes
from sieve.forms.controls import FormControl, InputControl, SelectControl, TextAreaControl

logger = logging.getLogger("sieve.forms")


def _control_from_match(match: re.Match[str]) -> FormControl:
    if match["input"] is not None:
        return InputControl.from_html(match.group())
    if match["select"] is not None:
        return SelectControl.from_html(match.group())
    return TextAreaControl.from_html(match.group())


@dataclass(frozen=True, slots=True)
class FormDefinition:
    """One ``<form>`` element: its attributes and named controls in document order.

    ``page_html`` is the whole page the form came from.
    """

    attributes: Mapping[str, str] = field(default_factory=dict)
    controls: tuple[FormControl, ...] = ()
    page_html: str = ""

    @property
    def id(self) -> str | None:
        return self.attributes.get("id")

    @classmethod
    def parse(cls, html: str, *, strip_comments: bool = True) -> list[FormDefinition]:
        """Find every form in *html*.

        Controls without a ``name`` are dropped since they can never be
        submitted. With *strip_comments*, commented-out markup is removed
        first so its controls are not picked up.
        """
        source = _patterns.COMMENT.sub("", html) if strip_comments else html
        definitions = []
        for form in _patterns.FORM.finditer(source):
            controls = []
            for match in _patterns.CONTROL.finditer(form["body"]):
                control = _control_from_match(match)
                if control.name is None:
                    logger.debug("Skipping unnamed control %r", match.group()[:80])
                    continue
                controls.append(control)
            definitions.append(
                cls(
                    attributes=parse_attributes(form["attributes"]),
                    controls=tuple(controls),
                    page_html=html,
                )
            )
        return definitions
