# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Macro table snapshot for the `macro_defs:` block."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .escape import escape
from .writer import ReportWriter

if TYPE_CHECKING:
    from ..parser.defines import DefineTable

MACRO_DEPTH = 3


def print_macro_defs(defines: DefineTable, writer: ReportWriter) -> None:
    """One escaped record per defined macro; entries without a definition are skipped."""
    writer.emit(2, "macro_defs:")
    for define in defines.values():
        if define is None:
            continue
        writer.emit(MACRO_DEPTH, f"- {escape(repr(define))}")
