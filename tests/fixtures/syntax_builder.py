# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Builds SyntaxTrees by hand, without a grammar.

Nodes are opened as context managers and tokens are appended in source
order, so every span and line number matches the bytes actually written:

    b = TreeBuilder()
    with ansi_module(b, "top", [("a", "input", None)]):
        add_instance(b, "sub", "u0")
    tree = b.tree()
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Sequence

from svreport.parser.syntax import NodeKind, SyntaxNode, SyntaxTree


class TreeBuilder:
    def __init__(self, path: Path = Path("test.sv")):
        self.path = path
        self.source = bytearray()
        self.line = 1
        self.root = SyntaxNode(NodeKind.SOURCE_FILE, "source_file", 0, 0)
        self._stack = [self.root]
        self._last_end = 0

    def text(self, raw: str) -> None:
        """Append bytes that belong to no token."""
        self.source += raw.encode()
        self.line += raw.count("\n")

    def tok(self, text: str, sep: str = " ") -> SyntaxNode:
        start = len(self.source)
        data = text.encode()
        node = SyntaxNode(NodeKind.TOKEN, text, start, start + len(data), line=self.line)
        self._stack[-1].children.append(node)
        self.text(text)
        self._last_end = node.end_byte
        if sep:
            self.text(sep)
        return node

    @contextmanager
    def node(self, kind: NodeKind, name: Optional[str] = None) -> Iterator[SyntaxNode]:
        start = len(self.source)
        node = SyntaxNode(kind, name or kind.value, start, start, line=self.line)
        self._stack[-1].children.append(node)
        self._stack.append(node)
        try:
            yield node
        finally:
            self._stack.pop()
            node.end_byte = max(self._last_end, start)

    def leaf(self, kind: NodeKind, text: str, name: Optional[str] = None, sep: str = " ") -> SyntaxNode:
        """A named node holding a single token."""
        with self.node(kind, name) as node:
            self.tok(text, sep)
        return node

    def ident(self, text: str, sep: str = " ") -> SyntaxNode:
        return self.leaf(NodeKind.SIMPLE_IDENTIFIER, text, sep=sep)

    def tree(self) -> SyntaxTree:
        self.root.end_byte = len(self.source)
        return SyntaxTree(self.root, bytes(self.source), self.path)


def add_packed_range(b: TreeBuilder, msb: str, lsb: str = "0") -> None:
    with b.node(NodeKind.OTHER, "packed_dimension"):
        b.tok("[", sep="")
        with b.node(NodeKind.CONSTANT_RANGE):
            b.leaf(NodeKind.OTHER, msb, name="constant_primary", sep="")
            b.tok(":", sep="")
            b.leaf(NodeKind.OTHER, lsb, name="constant_primary", sep="")
        b.tok("]")


def add_ansi_port(b: TreeBuilder, name: str, direction: Optional[str] = None, msb: Optional[str] = None) -> None:
    with b.node(NodeKind.ANSI_PORT_DECLARATION):
        if direction is not None or msb is not None:
            with b.node(NodeKind.OTHER, "net_port_header"):
                if direction is not None:
                    b.leaf(NodeKind.PORT_DIRECTION, direction)
                if msb is not None:
                    add_packed_range(b, msb)
        with b.node(NodeKind.PORT_IDENTIFIER):
            b.ident(name, sep="")


def add_module_header(b: TreeBuilder, name: str, kind: NodeKind = NodeKind.SIMPLE_IDENTIFIER) -> None:
    """`module <name>` as the grammar shapes it: keyword and a bare identifier."""
    with b.node(NodeKind.MODULE_HEADER):
        b.leaf(NodeKind.OTHER, "module", name="module_keyword")
        b.leaf(kind, name, sep="")


@contextmanager
def ansi_module(
    b: TreeBuilder,
    name: str,
    ports: Sequence[tuple[str, Optional[str], Optional[str]]] = (),
) -> Iterator[SyntaxNode]:
    """`module name(<ports>); ... endmodule`; ports are (name, direction, msb)."""
    with b.node(NodeKind.MODULE_DECLARATION_ANSI, "module_declaration") as module:
        add_module_header(b, name)
        with b.node(NodeKind.MODULE_ANSI_HEADER):
            with b.node(NodeKind.OTHER, "list_of_port_declarations"):
                b.tok("(", sep="")
                for i, port in enumerate(ports):
                    if i:
                        b.tok(",")
                    add_ansi_port(b, *port)
                b.tok(")", sep="")
            b.tok(";", sep="\n")
        yield module
        b.tok("endmodule", sep="\n")


@contextmanager
def nonansi_module(b: TreeBuilder, name: str, port_names: Sequence[str] = ()) -> Iterator[SyntaxNode]:
    """`module name(a, b); ... endmodule`; directions come from body declarations.

    Without port_names this is `module name;`, which has no port-style header.
    """
    with b.node(NodeKind.MODULE_DECLARATION_NONANSI, "module_declaration") as module:
        add_module_header(b, name)
        if port_names:
            with b.node(NodeKind.MODULE_NONANSI_HEADER):
                with b.node(NodeKind.OTHER, "list_of_ports"):
                    b.tok("(", sep="")
                    for i, port in enumerate(port_names):
                        if i:
                            b.tok(",")
                        with b.node(NodeKind.OTHER, "port"):
                            b.ident(port, sep="")
                    b.tok(")", sep="")
                b.tok(";", sep="\n")
        else:
            b.tok(";", sep="\n")
        yield module
        b.tok("endmodule", sep="\n")


def add_port_declaration(b: TreeBuilder, direction: str, names: Sequence[str], msb: Optional[str] = None) -> None:
    """Non-ANSI body declaration such as `output [3:0] q, r;`."""
    kind = NodeKind.INPUT_DECLARATION if direction == "input" else NodeKind.OUTPUT_DECLARATION
    with b.node(NodeKind.PORT_DECLARATION):
        with b.node(kind):
            b.tok(direction)
            if msb is not None:
                add_packed_range(b, msb)
            with b.node(NodeKind.LIST_OF_PORT_IDENTIFIERS):
                for i, name in enumerate(names):
                    if i:
                        b.tok(",")
                    with b.node(NodeKind.PORT_IDENTIFIER):
                        b.ident(name, sep="")
        b.tok(";", sep="\n")


def add_instance(b: TreeBuilder, module: str, instance: str) -> None:
    """`module instance();` with the module name as a bare identifier."""
    with b.node(NodeKind.MODULE_INSTANTIATION):
        b.ident(module)
        with b.node(NodeKind.OTHER, "hierarchical_instance"):
            with b.node(NodeKind.NAME_OF_INSTANCE):
                with b.node(NodeKind.INSTANCE_IDENTIFIER):
                    b.ident(instance, sep="")
            b.tok("(", sep="")
            b.tok(")", sep="")
        b.tok(";", sep="\n")


def add_comment(b: TreeBuilder, text: str) -> None:
    with b.node(NodeKind.WHITE_SPACE, "comment"):
        b.tok(text, sep="\n")
