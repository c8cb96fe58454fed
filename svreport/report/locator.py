# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Render a byte offset inside a source file as a caret diagnostic.

Example, for offset 5 in b"a\\nb\\ncd":

     top.sv:3:2
      |
    3 | cd
      |  ^
"""

from dataclasses import dataclass
from pathlib import Path

CHAR_CR = 0x0D
CHAR_LF = 0x0A


@dataclass(frozen=True)
class ErrorLocation:
    """Line/column view of a byte offset.

    Attributes:
        line: 1-based line number
        column: 1-based column, in bytes
        line_start: Offset of the first byte of the line
        line_end: Offset of the CR/LF ending the line, or the input length
        line_text: Bytes of the line without its terminator
        caret_len: Number of carets to draw under the offset
    """
    line: int
    column: int
    line_start: int
    line_end: int
    line_text: bytes
    caret_len: int


def locate_error(source: bytes, offset: int) -> ErrorLocation:
    """Find the line and column of offset in source.

    Offsets past the end of source are clamped to the end.
    """
    offset = max(0, min(offset, len(source)))

    line = 1
    last_lf = None
    for pos in range(offset):
        if source[pos] == CHAR_LF:
            line += 1
            last_lf = pos

    line_start = last_lf + 1 if last_lf is not None else 0

    line_end = offset
    while line_end < len(source) and source[line_end] not in (CHAR_CR, CHAR_LF):
        line_end += 1

    return ErrorLocation(
        line=line,
        column=offset - line_start + 1,
        line_start=line_start,
        line_end=line_end,
        line_text=source[line_start:line_end],
        caret_len=min(offset + 1, line_end) - offset,
    )


def render_parse_error(origin_path: Path, source: bytes, offset: int) -> str:
    """Four-line diagnostic: header, gutter, source line, caret line."""
    loc = locate_error(source, offset)
    gutter = " " * (len(str(loc.line)) + 1)
    caret_pad = " " * (loc.column - 1)
    text = loc.line_text.decode("utf-8", errors="replace")

    return "\n".join([
        f" {origin_path}:{loc.line}:{loc.column}",
        f"{gutter}|",
        f"{loc.line} | {text}",
        f"{gutter}| {caret_pad}{'^' * loc.caret_len}",
    ])
