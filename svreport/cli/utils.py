# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Console shared by the CLI for user-facing (non-report) output."""

from rich.console import Console

# stdout belongs to the YAML report
console = Console(stderr=True)
