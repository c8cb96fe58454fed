# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Syntax tree model consumed by the reporting layer.

The front end converts tree-sitter's concrete syntax tree into this small,
closed model: every node carries a `NodeKind` (the handful of grammar
constructs the reporters care about, everything else is `OTHER`), its
grammar name and its byte span. Terminal tokens are `NodeKind.TOKEN` leaves
that additionally carry a 1-based line number.

Lookups follow one rule: they return the node or `None`, never raise.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional


class NodeKind(Enum):
    """Grammar constructs the reporting layer distinguishes."""

    SOURCE_FILE = "source_file"
    MODULE_DECLARATION_NONANSI = "module_declaration_nonansi"
    MODULE_DECLARATION_ANSI = "module_declaration_ansi"
    MODULE_HEADER = "module_header"
    MODULE_NONANSI_HEADER = "module_nonansi_header"
    MODULE_ANSI_HEADER = "module_ansi_header"
    MODULE_IDENTIFIER = "module_identifier"
    MODULE_INSTANTIATION = "module_instantiation"
    NAME_OF_INSTANCE = "name_of_instance"
    INSTANCE_IDENTIFIER = "instance_identifier"
    PORT_DECLARATION = "port_declaration"
    ANSI_PORT_DECLARATION = "ansi_port_declaration"
    INPUT_DECLARATION = "input_declaration"
    OUTPUT_DECLARATION = "output_declaration"
    PORT_DIRECTION = "port_direction"
    CONSTANT_RANGE = "constant_range"
    LIST_OF_PORT_IDENTIFIERS = "list_of_port_identifiers"
    PORT_IDENTIFIER = "port_identifier"
    SIMPLE_IDENTIFIER = "simple_identifier"
    ESCAPED_IDENTIFIER = "escaped_identifier"
    TEXT_MACRO_DEFINITION = "text_macro_definition"
    TEXT_MACRO_NAME = "text_macro_name"
    TEXT_MACRO_IDENTIFIER = "text_macro_identifier"
    FORMAL_ARGUMENT = "formal_argument"
    MACRO_TEXT = "macro_text"
    UNDEFINE_DIRECTIVE = "undefine_compiler_directive"
    UNDEFINEALL_DIRECTIVE = "undefineall_compiler_directive"
    INCLUDE_DIRECTIVE = "include_compiler_directive"
    WHITE_SPACE = "white_space"
    ERROR = "ERROR"
    TOKEN = "token"
    OTHER = "other"


IDENTIFIER_KINDS = (NodeKind.SIMPLE_IDENTIFIER, NodeKind.ESCAPED_IDENTIFIER)


@dataclass(eq=False)
class SyntaxNode:
    """One node of the syntax tree.

    Attributes:
        kind: Closed classification used for dispatch
        name: Grammar name of the node as produced by the grammar
        start_byte: Start of the node's source span
        end_byte: End (exclusive) of the node's source span
        children: Child nodes in source order
        line: 1-based line of the span start
    """

    kind: NodeKind
    name: str
    start_byte: int
    end_byte: int
    children: list[SyntaxNode] = field(default_factory=list)
    line: int = 1

    @property
    def is_token(self) -> bool:
        return self.kind is NodeKind.TOKEN

    def __repr__(self) -> str:
        return f"SyntaxNode({self.kind.name}, {self.name!r}, {self.start_byte}..{self.end_byte})"


@dataclass(frozen=True)
class Enter:
    node: SyntaxNode


@dataclass(frozen=True)
class Leave:
    node: SyntaxNode


NodeEvent = Enter | Leave


def iter_nodes(node: SyntaxNode) -> Iterator[SyntaxNode]:
    """Pre-order, source-order iteration over node and its descendants."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def iter_events(node: SyntaxNode) -> Iterator[NodeEvent]:
    """Enter/Leave events for node and its descendants, depth first."""
    stack: list[tuple[SyntaxNode, bool]] = [(node, False)]
    while stack:
        current, leaving = stack.pop()
        if leaving:
            yield Leave(current)
            continue
        yield Enter(current)
        stack.append((current, True))
        stack.extend((child, False) for child in reversed(current.children))


def unwrap_node(node: Optional[SyntaxNode], *kinds: NodeKind) -> Optional[SyntaxNode]:
    """Return the first node (node itself included, pre-order) of one of kinds."""
    if node is None:
        return None
    for candidate in iter_nodes(node):
        if candidate.kind in kinds:
            return candidate
    return None


def first_child(node: Optional[SyntaxNode], *kinds: NodeKind) -> Optional[SyntaxNode]:
    """Return the first direct child of node with one of kinds."""
    if node is None:
        return None
    for child in node.children:
        if child.kind in kinds:
            return child
    return None


def get_identifier(node: Optional[SyntaxNode]) -> Optional[SyntaxNode]:
    """Return the token of the nearest simple or escaped identifier under node."""
    identifier = unwrap_node(node, *IDENTIFIER_KINDS)
    if identifier is None:
        return None
    if identifier.is_token:
        return identifier
    return unwrap_node(identifier, NodeKind.TOKEN)


class SyntaxTree:
    """A parsed source file: the root node plus the bytes it spans.

    Iterating a SyntaxTree yields every node in source order.
    """

    def __init__(self, root: SyntaxNode, source: bytes, path: Optional[Path] = None):
        self.root = root
        self.source = source
        self.path = path

    def __iter__(self) -> Iterator[SyntaxNode]:
        return iter_nodes(self.root)

    def events(self) -> Iterator[NodeEvent]:
        return iter_events(self.root)

    def get_bytes(self, node: SyntaxNode) -> bytes:
        return self.source[node.start_byte:node.end_byte]

    def get_str(self, node: Optional[SyntaxNode]) -> Optional[str]:
        """Source text spanned by node, or None for a missing node."""
        if node is None:
            return None
        return self.get_bytes(node).decode("utf-8", errors="replace")
