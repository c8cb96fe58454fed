# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""YAML report generation: definition extraction, tree dump, macro snapshot."""

from .escape import escape, unescape
from .writer import ReportWriter

__all__ = [
    "ReportWriter",
    "escape",
    "unescape",
]
