"""Compiled HTML patterns for the form model.

Compiled once at import; regex objects are safe to share between threads.
These are deliberately forgiving, not an HTML parser: they find forms and
controls in markup that would make a validator weep.
"""

import re

_FLAGS = re.IGNORECASE | re.DOTALL

# name, then one of: "quoted" / 'quoted', unquoted, non-standard `x=`, empty.
ATTRIBUTE = re.compile(
    r"""(?P<name>[^\s=/"'<>]+)
        (?:
            \s*=\s*(?P<quote>["'])(?P<quoted>.*?)(?P=quote)
          | \s*=\s*(?P<unquoted>[^\s"'=<>`]+)
          | \s*=(?=\s|$)
          | (?=\s|$)
        )""",
    _FLAGS | re.VERBOSE,
)

FORM = re.compile(r"<form\b(?P<attributes>[^>]*)>(?P<body>.*?)</form\s*>", _FLAGS)

CONTROL = re.compile(
    r"""<input\b(?P<input>[^>]*?)/?>
      | <select\b(?P<select>[^>]*>.*?)</select\s*>
      | <textarea\b(?P<textarea>[^>]*>.*?)</textarea\s*>""",
    _FLAGS | re.VERBOSE,
)

INPUT = re.compile(r"<input\b(?P<attributes>[^>]*?)/?>", _FLAGS)

SELECT = re.compile(r"<select\b(?P<attributes>[^>]*)>(?P<options>.*?)</select\s*>", _FLAGS)

# </option> is optional in HTML; an option also ends at the next option.
OPTION = re.compile(
    r"<option\b(?P<attributes>[^>]*)>(?P<label>.*?)(?=</option\s*>|<option\b|</select\s*>|\Z)",
    _FLAGS,
)

TEXTAREA = re.compile(r"<textarea\b(?P<attributes>[^>]*)>(?P<text>.*?)</textarea\s*>", _FLAGS)

COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)

TAG = re.compile(r"<[^>]*>")

# ASP.NET's __doPostBack() sometimes unescapes the event target itself.
DO_POSTBACK_SPLIT = re.compile(r"__EVENTTARGET\.value\s*=\s*eventTarget\.split", _FLAGS)
