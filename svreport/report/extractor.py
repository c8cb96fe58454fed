# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Module definition extraction.

The extractor is a small state machine fed by the tree walker. It holds the
record of the module currently open and hands it to its sink as soon as the
next module declaration (or the end of the tree) closes it.

Port direction and width live in the traversal state, not in the port: a
port declared without a direction keyword or range inherits whatever the
previous port of the same module resolved, so `module m(input a, b)`
reports both ports as inputs.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator, Optional

from ..errors import WidthFormatError
from ..parser.syntax import (
    IDENTIFIER_KINDS,
    NodeKind,
    SyntaxNode,
    SyntaxTree,
    first_child,
    get_identifier,
    unwrap_node,
)
from .escape import escape
from .writer import ReportWriter

logger = logging.getLogger(__name__)

# Depth of a `- mod_name:` entry under `files: / - file_name: / defs:`
MODULE_DEPTH = 3

# Parents under which the grammar may list port names as bare identifiers
_BARE_PORT_ID_PARENTS = (NodeKind.LIST_OF_PORT_IDENTIFIERS, NodeKind.ANSI_PORT_DECLARATION)


class Direction(Enum):
    INPUT = "input"
    OUTPUT = "output"


@dataclass
class PortRecord:
    name: str
    direction: Direction
    width: int


@dataclass
class InstRecord:
    module_name: str
    instance_name: str


@dataclass
class ModuleRecord:
    name: str
    ports: list[PortRecord] = field(default_factory=list)
    insts: list[InstRecord] = field(default_factory=list)


@dataclass
class TraversalState:
    """Per-file extraction state.

    Attributes:
        port_list_started: The open module has emitted its `ports:` header
        inst_list_started: The open module has emitted its `insts:` header
        current_direction: Direction applied to the next port identifier
        current_width: Width applied to the next port identifier
        module: Record of the module currently open, if any
    """
    port_list_started: bool = False
    inst_list_started: bool = False
    current_direction: Direction = Direction.INPUT
    current_width: int = 1
    module: Optional[ModuleRecord] = None


def parse_range_bound(text: str) -> int:
    """Parse the upper bound of a constant range.

    Raises:
        WidthFormatError: If text is not a non-negative decimal integer.
    """
    stripped = text.strip()
    if not (stripped.isascii() and stripped.isdigit()):
        raise WidthFormatError(text)
    return int(stripped)


def iter_port_identifiers(node: SyntaxNode) -> Iterator[SyntaxNode]:
    """Port identifier nodes under a port declaration, in source order."""
    for child in node.children:
        if child.kind is NodeKind.PORT_IDENTIFIER:
            yield child
        elif child.kind in IDENTIFIER_KINDS and node.kind in _BARE_PORT_ID_PARENTS:
            yield child
        else:
            yield from iter_port_identifiers(child)


class DefinitionExtractor:
    """Accumulates module, port and instance records from dispatched nodes.

    Args:
        tree: Tree the dispatched nodes belong to (for source text)
        on_module: Called with every closed ModuleRecord, in declaration order
    """

    def __init__(self, tree: SyntaxTree, on_module: Callable[[ModuleRecord], None]):
        self.tree = tree
        self.on_module = on_module
        self.state = TraversalState()

    def on_module_declaration(self, node: SyntaxNode) -> None:
        name = self._module_name(node)
        if name is None:
            logger.debug(f"Module declaration without identifier at byte {node.start_byte}")
            return

        self._close_module()
        self.state.module = ModuleRecord(name)
        self.state.port_list_started = False
        self.state.inst_list_started = False

    def on_module_instantiation(self, node: SyntaxNode) -> None:
        # The instantiated type is always the first identifier of the statement
        module_id = unwrap_node(node, NodeKind.MODULE_IDENTIFIER)
        if module_id is None:
            module_id = node
        module_name = self.tree.get_str(get_identifier(module_id))
        if module_name is None:
            return

        instance_id = unwrap_node(node, NodeKind.INSTANCE_IDENTIFIER, NodeKind.NAME_OF_INSTANCE)
        instance_name = self.tree.get_str(get_identifier(instance_id))
        if instance_name is None:
            return

        if self.state.module is None:
            logger.debug(f"Instance '{instance_name}' outside of any module, skipped")
            return

        self.state.inst_list_started = True
        self.state.module.insts.append(InstRecord(module_name, instance_name))

    def on_port_declaration(self, node: SyntaxNode) -> None:
        # Independent checks: a later one may override an earlier one on the same node.
        direction = unwrap_node(node, NodeKind.PORT_DIRECTION)
        if direction is not None:
            keyword = self.tree.get_str(direction).strip()
            self.state.current_direction = Direction.INPUT if keyword == "input" else Direction.OUTPUT
            self.state.current_width = 1

        if unwrap_node(node, NodeKind.INPUT_DECLARATION) is not None:
            self.state.current_direction = Direction.INPUT
            self.state.current_width = 1

        if unwrap_node(node, NodeKind.OUTPUT_DECLARATION) is not None:
            self.state.current_direction = Direction.OUTPUT
            self.state.current_width = 1

        constant_range = unwrap_node(node, NodeKind.CONSTANT_RANGE)
        if constant_range is not None:
            upper = next((c for c in constant_range.children if c.kind is not NodeKind.WHITE_SPACE), None)
            if upper is not None:
                self.state.current_width = parse_range_bound(self.tree.get_str(upper)) + 1

        for port_id in iter_port_identifiers(node):
            self.on_port_identifier(port_id)

    def on_port_identifier(self, node: SyntaxNode) -> None:
        name = self.tree.get_str(get_identifier(node))
        if name is None:
            return

        if self.state.module is None:
            logger.debug(f"Port '{name}' outside of any module, skipped")
            return

        self.state.port_list_started = True
        self.state.module.ports.append(
            PortRecord(name, self.state.current_direction, self.state.current_width)
        )

    def finish(self) -> None:
        """Close the last module of the tree."""
        self._close_module()

    def _module_name(self, node: SyntaxNode) -> Optional[str]:
        # `module_header` holds the name, beside or inside the port-style header
        port_header = first_child(node, NodeKind.MODULE_ANSI_HEADER, NodeKind.MODULE_NONANSI_HEADER)
        scopes = (
            first_child(node, NodeKind.MODULE_HEADER),
            first_child(port_header, NodeKind.MODULE_HEADER),
            port_header,
            node,
        )
        for scope in scopes:
            if scope is None:
                continue
            module_id = unwrap_node(scope, NodeKind.MODULE_IDENTIFIER)
            if module_id is None:
                module_id = first_child(scope, *IDENTIFIER_KINDS)
            if module_id is not None:
                return self.tree.get_str(get_identifier(module_id))
        return None

    def _close_module(self) -> None:
        if self.state.module is not None:
            self.on_module(self.state.module)
        self.state.module = None


def write_module(writer: ReportWriter, record: ModuleRecord, depth: int = MODULE_DEPTH) -> None:
    """Render one closed module under a `defs:` key."""
    writer.emit(depth, f"- mod_name: {escape(record.name)}")

    if record.ports:
        writer.emit(depth + 1, "ports:")
        for port in record.ports:
            writer.emit(depth + 2, f"- port_name: {escape(port.name)}")
            writer.emit(depth + 3, f"port_dir: {escape(port.direction.value)}")
            writer.emit(depth + 3, f"port_width: {port.width}")
    else:
        writer.emit(depth + 1, "ports: []")

    if record.insts:
        writer.emit(depth + 1, "insts:")
        for inst in record.insts:
            writer.emit(depth + 2, f"- mod_name: {escape(inst.module_name)}")
            writer.emit(depth + 3, f"inst_name: {escape(inst.instance_name)}")
    else:
        writer.emit(depth + 1, "insts: []")
