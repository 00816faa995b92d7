"""Form controls: inputs, checkboxes, radios, selects and textareas.

Controls are mutable: set ``value``, ``checked``, ``selected`` or ``text``
before building a submission. Attributes stay as parsed.
"""

from __future__ import annotations

import html as html_module
from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from urllib.parse import quote_plus

from sieve.forms import _patterns
from sieve.forms.attributes import parse_attributes


class InputType(StrEnum):
    """``<input type=...>`` values (HTML4 and HTML5)."""

    BUTTON = "button"
    CHECKBOX = "checkbox"
    FILE = "file"
    HIDDEN = "hidden"
    IMAGE = "image"
    PASSWORD = "password"
    RADIO = "radio"
    RESET = "reset"
    SUBMIT = "submit"
    TEXT = "text"
    COLOR = "color"
    DATE = "date"
    DATETIME = "datetime"
    DATETIME_LOCAL = "datetime-local"
    EMAIL = "email"
    MONTH = "month"
    NUMBER = "number"
    RANGE = "range"
    SEARCH = "search"
    TEL = "tel"
    TIME = "time"
    URL = "url"
    WEEK = "week"
    UNKNOWN = "unknown"

    @classmethod
    def from_attribute(cls, value: str | None) -> InputType:
        """Missing means ``text``; anything unrecognized is ``unknown``."""
        if value is None:
            return cls.TEXT
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


def encode_pair(name: str, value: str) -> str:
    """URL-encode one ``name=value`` pair (``application/x-www-form-urlencoded``)."""
    return f"{quote_plus(name)}={quote_plus(value)}"


class FormControl:
    """Base for every form control.

    ``disabled`` starts from the ``disabled`` attribute and can be changed;
    disabled controls are never submitted.
    """

    def __init__(self, attributes: Mapping[str, str]) -> None:
        self._attributes = dict(attributes)
        self.disabled = "disabled" in self._attributes

    @property
    def attributes(self) -> Mapping[str, str]:
        return MappingProxyType(self._attributes)

    @property
    def name(self) -> str | None:
        return self.attributes.get("name")

    @property
    def id(self) -> str | None:
        return self.attributes.get("id")

    @property
    def encoded_data(self) -> str:
        """The URL-encoded ``name=value`` text this control submits."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class InputControl(FormControl):
    """An ``<input>`` of any type without its own class."""

    def __init__(self, attributes: Mapping[str, str], type: InputType | None = None) -> None:
        super().__init__(attributes)
        self.type = type or InputType.from_attribute(self.attributes.get("type"))
        self.value: str = self.attributes.get("value", "")

    @classmethod
    def from_html(cls, html: str) -> InputControl:
        """Build the right input class for an ``<input ...>`` tag."""
        found = _patterns.INPUT.search(html)
        if found is None:
            raise ValueError(f"Not an <input> control: {html!r}")
        attributes = parse_attributes(found["attributes"])
        control_type = InputType.from_attribute(attributes.get("type"))
        match control_type:
            case InputType.CHECKBOX:
                return CheckboxControl(attributes)
            case InputType.RADIO:
                return RadioControl(attributes)
            case _:
                return InputControl(attributes, control_type)

    @classmethod
    def create(cls, type: InputType, name: str, value: str = "") -> InputControl:
        """Build a control that was not in the page, e.g. one added by script."""
        return cls({"type": str(type), "name": name, "value": value}, type)

    @property
    def encoded_data(self) -> str:
        if not self.name:
            return ""
        return encode_pair(self.name, self.value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, value={self.value!r}, type={self.type!s})"


class CheckableControl(InputControl):
    """A checkbox or radio button. Only submitted when ``checked``."""

    def __init__(self, attributes: Mapping[str, str], type: InputType | None = None) -> None:
        super().__init__(attributes, type)
        self.checked = "checked" in self.attributes
        if "value" not in self.attributes:
            self.value = "on"


class CheckboxControl(CheckableControl):
    def __init__(self, attributes: Mapping[str, str], type: InputType | None = None) -> None:
        super().__init__(attributes, InputType.CHECKBOX)


class RadioControl(CheckableControl):
    def __init__(self, attributes: Mapping[str, str], type: InputType | None = None) -> None:
        super().__init__(attributes, InputType.RADIO)


class HtmlOption:
    """One ``<option>`` of a ``<select>``."""

    def __init__(self, attributes: Mapping[str, str], label: str) -> None:
        self._attributes = dict(attributes)
        self.label = label
        self.value = self._attributes.get("value", "")
        self.selected = "selected" in self._attributes

    @property
    def attributes(self) -> Mapping[str, str]:
        return MappingProxyType(self._attributes)

    @classmethod
    def from_match(cls, attributes_html: str, label_html: str) -> HtmlOption:
        label = html_module.unescape(_patterns.TAG.sub("", label_html)).strip()
        return cls(parse_attributes(attributes_html), label)

    @property
    def submitted_value(self) -> str:
        """The value sent for this option: ``value``, or the label if that is empty."""
        return self.value or self.label

    def __repr__(self) -> str:
        return f"HtmlOption(value={self.value!r}, label={self.label!r}, selected={self.selected})"


class SelectControl(FormControl):
    """A ``<select>``. Submits one pair per selected option."""

    def __init__(self, attributes: Mapping[str, str], options: tuple[HtmlOption, ...]) -> None:
        super().__init__(attributes)
        self.options = options

    @classmethod
    def from_html(cls, html: str) -> SelectControl:
        match = _patterns.SELECT.search(html)
        if match is None:
            raise ValueError(f"Not a <select> control: {html!r}")
        options = tuple(
            HtmlOption.from_match(option["attributes"], option["label"])
            for option in _patterns.OPTION.finditer(match["options"])
        )
        return cls(parse_attributes(match["attributes"]), options)

    @property
    def multiple(self) -> bool:
        return "multiple" in self.attributes

    @property
    def selected_options(self) -> list[HtmlOption]:
        return [option for option in self.options if option.selected]

    def unselect_all(self) -> None:
        for option in self.options:
            option.selected = False

    def select(self, value: str | None = None, *, label: str | None = None) -> HtmlOption:
        """Select the first option with *value* (or *label*).

        Unless the select allows ``multiple``, every other option is
        unselected first.

        Raises:
            KeyError: No option matches.
        """
        for option in self.options:
            if (value is not None and option.value == value) or (
                label is not None and option.label == label
            ):
                break
        else:
            raise KeyError(value if value is not None else label)
        if not self.multiple:
            self.unselect_all()
        option.selected = True
        return option

    @property
    def encoded_data(self) -> str:
        if not self.name:
            return ""
        return "&".join(
            encode_pair(self.name, option.submitted_value) for option in self.selected_options
        )


class TextAreaControl(FormControl):
    """A ``<textarea>``; ``text`` starts as the element's content."""

    def __init__(self, attributes: Mapping[str, str], text: str = "") -> None:
        super().__init__(attributes)
        self.text = text

    @classmethod
    def from_html(cls, html: str) -> TextAreaControl:
        match = _patterns.TEXTAREA.search(html)
        if match is None:
            raise ValueError(f"Not a <textarea> control: {html!r}")
        return cls(parse_attributes(match["attributes"]), html_module.unescape(match["text"]))

    @property
    def encoded_data(self) -> str:
        if not self.name:
            return ""
        return encode_pair(self.name, self.text)
