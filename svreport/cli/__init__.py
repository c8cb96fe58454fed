# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""svreport command-line interface.

Entry point `svreport` (see setup.py) runs main(), which wraps the click
command with consistent exit codes and error formatting.
"""

from .cli import main, svreport

__all__ = [
    "main",
    "svreport",
]
