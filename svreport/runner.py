# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Per-file report loop.

Files are processed strictly in order because the macro table left by one
file is the starting table of the next (unless files are isolated). A failed
file contributes a diagnostic and a nonzero status, never a partial report
entry, and never stops the remaining files.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Protocol, Sequence, TextIO

from .errors import SvReportError, SyntaxParseError
from .parser.defines import DefineTable
from .parser.syntax import SyntaxTree
from .report.escape import escape
from .report.locator import render_parse_error
from .report.macros import print_macro_defs
from .report.walker import ReportMode, report_tree
from .report.writer import ReportWriter

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class Frontend(Protocol):
    def parse_sv(
        self, path: Path, defines: DefineTable, includes: Sequence[Path], ignore_include: bool
    ) -> tuple[SyntaxTree, DefineTable]:
        ...


@dataclass
class RunOptions:
    """What to report and how to parse.

    Attributes:
        full_tree: Dump the syntax tree instead of module definitions
        include_whitespace: Keep comment subtrees in the dump
        separate: Start every file from the initial macro table
        show_macro_defs: Append the macro table after each file
        includes: Directories searched by `include
        ignore_include: Do not follow `include directives
    """
    full_tree: bool = False
    include_whitespace: bool = False
    separate: bool = False
    show_macro_defs: bool = False
    includes: list[Path] = field(default_factory=list)
    ignore_include: bool = False

    @property
    def mode(self) -> ReportMode:
        return ReportMode.FULL_TREE if self.full_tree else ReportMode.DEFINITIONS


def format_cause_chain(path: Path, error: BaseException) -> str:
    """`parse failed` line followed by one `Caused by` line per chained cause."""
    lines = [f"parse failed: {escape(str(path))} ({error})"]
    cause = error.__cause__
    while cause is not None:
        lines.append(f"  Caused by {cause}")
        cause = cause.__cause__
    return "\n".join(lines)


def format_parse_error(path: Path, error: SyntaxParseError) -> str:
    """Caret diagnostic for error, or its cause chain if the origin is unreadable."""
    try:
        source = error.origin_path.read_bytes()
    except OSError as e:
        logger.debug(f"Cannot re-read {error.origin_path} for diagnostics: {e}")
        return format_cause_chain(path, error)
    return "\n".join([
        f"parse failed: {escape(str(path))}",
        render_parse_error(error.origin_path, source, error.origin_pos),
    ])


def report_file(
    path: Path, tree: SyntaxTree, defines: DefineTable, options: RunOptions
) -> ReportWriter:
    """Build the complete report entry of one parsed file."""
    writer = ReportWriter()
    writer.emit(1, f"- file_name: {escape(str(path))}")
    report_tree(tree, writer, options.mode, options.include_whitespace)
    if options.show_macro_defs:
        print_macro_defs(defines, writer)
    return writer


def run(
    files: Iterable[Path],
    defines: DefineTable,
    options: RunOptions,
    frontend: Frontend,
    out: TextIO,
    err: TextIO,
) -> int:
    """Report every file; return 0 if all succeeded, 1 otherwise."""
    status = EXIT_SUCCESS
    initial_defines = dict(defines)
    current_defines = dict(defines)

    out.write("files:\n")
    for path in files:
        path = Path(path)
        start_defines = initial_defines if options.separate else current_defines
        diagnostic: Optional[str] = None

        try:
            tree, new_defines = frontend.parse_sv(path, start_defines, options.includes, options.ignore_include)
            writer = report_file(path, tree, new_defines, options)
        except SyntaxParseError as e:
            diagnostic = format_parse_error(path, e)
        except SvReportError as e:
            diagnostic = format_cause_chain(path, e)

        if diagnostic is not None:
            logger.info(f"Failed to report {path}")
            err.write(diagnostic + "\n")
            err.flush()
            status = EXIT_FAILURE
            continue

        writer.flush(out)
        if not options.separate:
            current_defines = new_defines
        logger.info(f"Reported {path}")

    return status
