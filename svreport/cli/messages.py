# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""User-facing messages and strings for CLI output."""

GRAMMAR_HINTS = [
    "Install the default grammar: pip install tree-sitter-verilog",
    "Or pass a compiled grammar library with --grammar PATH",
    "A compiled library must export the tree_sitter_verilog symbol",
]

CONFIG_HINTS = [
    "Check svreport.yaml (or the file given with --config)",
    "Check SVREPORT_* environment variables",
]

DEFINE_HINT = "Use -d NAME or -d NAME=VALUE; VALUE may contain backslash escapes"
