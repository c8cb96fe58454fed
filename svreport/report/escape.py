# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Double-quoted YAML scalars for the report.

`escape` is lossless: `yaml.safe_load(escape(s)) == s` for any text whose
non-ASCII characters are printable. Only ASCII control characters, the
quote and the backslash are rewritten; everything else, multi-byte UTF-8
included, passes through untouched.
"""

import yaml

_SHORT_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\b": "\\b",
    "\f": "\\f",
}


def _escape_char(ch: str) -> str:
    short = _SHORT_ESCAPES.get(ch)
    if short is not None:
        return short
    code = ord(ch)
    if code < 0x20 or code == 0x7F:
        return f"\\u{code:04x}"
    return ch


def escape(value: str | bytes) -> str:
    """Quote value as a YAML double-quoted scalar."""
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    return '"' + "".join(_escape_char(ch) for ch in value) + '"'


def unescape(text: str) -> str:
    """Resolve backslash escapes in an unquoted value (e.g. `-d A=1\\n2`).

    Raises:
        ValueError: If text is not a valid double-quoted scalar body.
    """
    try:
        result = yaml.safe_load(f'"{text}"')
    except yaml.YAMLError as e:
        raise ValueError(f"invalid escape sequence in {text!r}") from e
    return result
