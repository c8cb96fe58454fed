# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Indentation-aware line buffer for the YAML report."""

from typing import TextIO

INDENT = "  "


class ReportWriter:
    """Collects report lines for one file until the file is known to be good.

    Lines are indented in units of two spaces. Nothing reaches the output
    stream before flush(), so a file that fails halfway leaves no trace.
    """

    def __init__(self):
        self.lines: list[str] = []

    def emit(self, depth: int, text: str) -> None:
        self.lines.append(f"{INDENT * depth}{text}")

    def getvalue(self) -> str:
        return "".join(f"{line}\n" for line in self.lines)

    def flush(self, stream: TextIO) -> None:
        stream.write(self.getvalue())
        stream.flush()
        self.lines.clear()
