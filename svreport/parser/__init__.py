# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""SystemVerilog front end.

Key Components:
    - syntax: Closed syntax tree model (NodeKind, SyntaxNode, SyntaxTree)
    - grammar: tree-sitter grammar loading and node classification
    - frontend: SvFrontend, parsing files into trees plus macro tables
    - defines: Macro definition records and command line `-d` parsing

`frontend` and `grammar` need tree-sitter and are not imported here.
"""

from .defines import Define, DefineTable, build_define_table
from .syntax import NodeKind, SyntaxNode, SyntaxTree

__all__ = [
    "Define",
    "DefineTable",
    "build_define_table",
    "NodeKind",
    "SyntaxNode",
    "SyntaxTree",
]
