# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""
Error handling for svreport.

Front-end failures (anything the grammar collaborator can raise) and
extraction failures share one base so the runner can catch a single type
per file and keep going.
"""

from pathlib import Path


class SvReportError(Exception):
    """Base exception for all svreport errors."""
    pass


class FrontendError(SvReportError):
    """Error raised while turning a source file into a syntax tree."""
    pass


class SyntaxParseError(FrontendError):
    """Source text did not match the grammar.

    Attributes:
        origin_path: File the failure was localized in (may be an included file)
        origin_pos: Byte offset of the failure inside origin_path
    """

    def __init__(self, origin_path: Path, origin_pos: int):
        self.origin_path = Path(origin_path)
        self.origin_pos = origin_pos
        super().__init__(f"syntax error in {self.origin_path} at byte {origin_pos}")


class SourceReadError(FrontendError):
    """Source file could not be read."""
    pass


class IncludeError(FrontendError):
    """An `include directive could not be resolved."""
    pass


class GrammarLoadError(FrontendError):
    """The tree-sitter grammar could not be loaded."""
    pass


class ExtractionError(SvReportError):
    """Error while extracting definitions from a syntax tree."""
    pass


class WidthFormatError(ExtractionError, ValueError):
    """A bit-range bound is not a non-negative decimal integer."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"cannot parse range bound {text!r} as a port width")
