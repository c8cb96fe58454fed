# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""
svreport: SystemVerilog module hierarchy reporter

Parses SystemVerilog sources and reports, per file, the modules they
declare (ports with direction and width, submodule instances) as YAML on
stdout. Diagnostics go to stderr.

Main Features:
    - Definition report (`defs:`) or full syntax tree dump (`syntax_tree:`)
    - Macro definitions threaded from file to file, optionally isolated
    - Caret diagnostics for syntax errors

Quick Start:
    >>> from pathlib import Path
    >>> from svreport.parser.frontend import SvFrontend
    >>> from svreport.report.walker import extract_definitions
    >>> tree, defines = SvFrontend().parse_sv(Path("top.sv"), {})
    >>> [module.name for module in extract_definitions(tree)]
"""

__version__ = "0.1.0"

from .errors import (
    ExtractionError,
    FrontendError,
    SvReportError,
    SyntaxParseError,
    WidthFormatError,
)

__all__ = [
    "__version__",
    "SvReportError",
    "FrontendError",
    "SyntaxParseError",
    "ExtractionError",
    "WidthFormatError",
]
