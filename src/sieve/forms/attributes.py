"""HTML attribute parsing."""

import html as html_module

from sieve.forms._patterns import ATTRIBUTE


def parse_attributes(html: str) -> dict[str, str]:
    """Parse the attribute text of a start tag into a name-value dict.

    Accepts quoted, unquoted, empty (``disabled``) and the non-standard
    ``name=`` forms. Names are lowercased; when an attribute is repeated
    the first occurrence wins, as in browsers. Values are unescaped.
    """
    attributes: dict[str, str] = {}
    for match in ATTRIBUTE.finditer(html):
        name = match["name"].lower()
        if name in attributes:
            continue
        value = match["quoted"] if match["quoted"] is not None else match["unquoted"] or ""
        attributes[name] = html_module.unescape(value)
    return attributes
