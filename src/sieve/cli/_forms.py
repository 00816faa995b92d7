"""``sieve forms``: describe every form in an HTML file as JSON."""

import argparse
import json
import sys
from pathlib import Path

from sieve.config import ScrapeConfig
from sieve.forms import (
    CheckableControl,
    FormControl,
    HtmlForm,
    InputControl,
    SelectControl,
    TextAreaControl,
)
from sieve.forms.definition import FormDefinition


def control_to_dict(control: FormControl) -> dict[str, object]:
    data: dict[str, object] = {"name": control.name, "disabled": control.disabled}
    match control:
        case CheckableControl():
            data.update(kind=str(control.type), value=control.value, checked=control.checked)
        case InputControl():
            data.update(kind=str(control.type), value=control.value)
        case SelectControl():
            data.update(
                kind="select",
                options=[
                    {"value": o.value, "label": o.label, "selected": o.selected}
                    for o in control.options
                ],
            )
        case TextAreaControl():
            data.update(kind="textarea", text=control.text)
    return data


def form_to_dict(form: HtmlForm) -> dict[str, object]:
    return {
        "id": form.id,
        "method": form.method,
        "action": form.action_url,
        "attributes": dict(form.attributes),
        "controls": [control_to_dict(c) for c in form.controls],
    }


def run_forms(args: argparse.Namespace) -> None:
    """Print a JSON description of the forms in ``args.file``."""
    try:
        html = sys.stdin.read() if args.file == "-" else Path(args.file).read_text()
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    config = ScrapeConfig.from_env()
    definitions = FormDefinition.parse(html, strip_comments=config.strip_comments)
    forms = [HtmlForm.from_definition(args.url, d) for d in definitions]
    print(json.dumps([form_to_dict(f) for f in forms], indent=2))
