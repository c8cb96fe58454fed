# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Full syntax tree dump.

Every grammar node becomes a `- <name>:` key and every terminal token a
`- Token:` / `Line:` pair, nested by depth. Comment subtrees are left out
unless whitespace is requested.
"""

from ..parser.syntax import Enter, Leave, NodeKind, SyntaxTree
from .escape import escape
from .writer import ReportWriter

# Depth of the first entry under `files: / - file_name: / syntax_tree:`
TREE_DEPTH = 3


def print_full_tree(tree: SyntaxTree, writer: ReportWriter, include_whitespace: bool = False) -> None:
    skip = False
    depth = TREE_DEPTH
    for event in tree.events():
        match event:
            case Enter(node) if node.kind is NodeKind.TOKEN:
                if not skip:
                    writer.emit(depth, f"- Token: {escape(tree.get_bytes(node))}")
                    writer.emit(depth, f"  Line: {node.line}")
                depth += 1
            case Enter(node) if node.kind is NodeKind.WHITE_SPACE and not include_whitespace:
                skip = True
                depth += 1
            case Leave(node) if node.kind is NodeKind.WHITE_SPACE and not include_whitespace:
                skip = False
                depth -= 1
            case Enter(node):
                if not skip:
                    writer.emit(depth, f"- {node.name}:")
                depth += 1
            case Leave(_):
                depth -= 1
