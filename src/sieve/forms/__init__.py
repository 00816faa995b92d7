"""Forms: a regex-based model of HTML forms and their controls.

Good enough for the forms scrapers meet, tolerant of broken markup, and
entirely offline: submitting a form produces a request description.
"""

from sieve.forms.attributes import parse_attributes
from sieve.forms.controls import (
    CheckableControl,
    CheckboxControl,
    FormControl,
    HtmlOption,
    InputControl,
    InputType,
    RadioControl,
    SelectControl,
    TextAreaControl,
)
from sieve.forms.definition import FormDefinition
from sieve.forms.form import AspxForm, FormSubmission, HtmlForm

__all__ = [
    "AspxForm",
    "CheckableControl",
    "CheckboxControl",
    "FormControl",
    "FormDefinition",
    "FormSubmission",
    "HtmlForm",
    "HtmlOption",
    "InputControl",
    "InputType",
    "RadioControl",
    "SelectControl",
    "TextAreaControl",
    "parse_attributes",
]
