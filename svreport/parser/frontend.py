# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""SystemVerilog front end built on tree-sitter.

Turns a source file into a `SyntaxTree` and an updated macro table. Macro
definitions are recorded, never expanded; `include directives are followed
only to pick up the definitions of the included file.
"""

import logging
import re
from pathlib import Path
from typing import Optional, Sequence

from tree_sitter import Node, Parser

from ..errors import FrontendError, IncludeError, SourceReadError, SyntaxParseError
from . import grammar
from .defines import Define, DefineOrigin, DefineTable, DefineText, split_formal_arguments
from .syntax import (
    IDENTIFIER_KINDS,
    NodeKind,
    SyntaxNode,
    SyntaxTree,
    get_identifier,
    iter_nodes,
    unwrap_node,
)

logger = logging.getLogger(__name__)

MAX_INCLUDE_DEPTH = 64

_INCLUDE_RE = re.compile(r'`include\s*(?:"([^"]*)"|<([^>]*)>)')


def _make_node(ts_node: Node) -> SyntaxNode:
    line = ts_node.start_point[0] + 1
    if ts_node.child_count == 0:
        token = SyntaxNode(NodeKind.TOKEN, ts_node.type, ts_node.start_byte, ts_node.end_byte, line=line)
        if not ts_node.is_named:
            return token
        kind = grammar.classify(ts_node.type, [])
        return SyntaxNode(kind, ts_node.type, ts_node.start_byte, ts_node.end_byte, [token], line)

    kind = grammar.classify(ts_node.type, [child.type for child in ts_node.children])
    return SyntaxNode(kind, ts_node.type, ts_node.start_byte, ts_node.end_byte, line=line)


def convert_tree(ts_root: Node) -> SyntaxNode:
    """Copy a tree-sitter tree into the SyntaxNode model."""
    root = _make_node(ts_root)
    stack = [(ts_root, root)]
    while stack:
        ts_node, node = stack.pop()
        if ts_node.child_count == 0:
            continue
        for ts_child in ts_node.children:
            child = _make_node(ts_child)
            node.children.append(child)
            stack.append((ts_child, child))
    return root


def find_first_error(ts_root: Node) -> Optional[Node]:
    """First ERROR or missing node in source order."""
    stack = [ts_root]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current
        if current.has_error:
            stack.extend(reversed(current.children))
    return None


class SvFrontend:
    """Parses SystemVerilog files with tree-sitter.

    Attributes:
        parser: tree-sitter Parser instance
    """

    def __init__(self, grammar_path: Optional[str] = None):
        language = grammar.load_language(grammar_path)
        self.parser = Parser(language)
        logger.debug("SystemVerilog grammar loaded successfully.")

    def parse_sv(
        self,
        path: Path,
        defines: DefineTable,
        includes: Sequence[Path] = (),
        ignore_include: bool = False,
    ) -> tuple[SyntaxTree, DefineTable]:
        """Parse path starting from the macro table defines.

        Returns:
            The syntax tree of path and the macro table after it. The table
            passed in is left untouched.

        Raises:
            SyntaxParseError: If path (or a file it includes) does not parse
            FrontendError: For read and include failures
        """
        new_defines = dict(defines)
        tree = self._parse_into(Path(path), new_defines, [Path(p) for p in includes], ignore_include, 0)
        return tree, new_defines

    def parse_source(self, source: bytes, path: Path) -> SyntaxTree:
        """Parse source bytes; path is only used to localize errors."""
        try:
            ts_tree = self.parser.parse(source)
        except (ValueError, TypeError) as e:
            raise FrontendError(f"tree-sitter failed on {path}") from e

        if ts_tree.root_node.has_error:
            error_node = find_first_error(ts_tree.root_node)
            offset = error_node.start_byte if error_node is not None else 0
            logger.debug(f"Syntax error in {path} at byte {offset}")
            raise SyntaxParseError(path, offset)

        return SyntaxTree(convert_tree(ts_tree.root_node), source, path)

    def _parse_into(
        self,
        path: Path,
        defines: DefineTable,
        includes: list[Path],
        ignore_include: bool,
        depth: int,
    ) -> SyntaxTree:
        try:
            source = path.read_bytes()
        except OSError as e:
            raise SourceReadError(f"cannot read {path}") from e

        tree = self.parse_source(source, path)

        for node in tree:
            match node.kind:
                case NodeKind.TEXT_MACRO_DEFINITION:
                    define = _define_from_node(tree, node)
                    if define is not None:
                        defines[define.identifier] = define
                case NodeKind.UNDEFINE_DIRECTIVE:
                    name = _macro_name(tree, node)
                    if name is not None:
                        defines.pop(name, None)
                case NodeKind.UNDEFINEALL_DIRECTIVE:
                    defines.clear()
                case NodeKind.INCLUDE_DIRECTIVE if not ignore_include:
                    target = self._resolve_include(tree, node, includes)
                    if target is None:
                        continue
                    if depth >= MAX_INCLUDE_DEPTH:
                        raise IncludeError(f"`include nested deeper than {MAX_INCLUDE_DEPTH} levels at {target}")
                    logger.debug(f"Following `include {target}")
                    self._parse_into(target, defines, includes, ignore_include, depth + 1)
                case _:
                    pass

        return tree

    def _resolve_include(self, tree: SyntaxTree, node: SyntaxNode, includes: list[Path]) -> Optional[Path]:
        found = _INCLUDE_RE.search(tree.get_str(node))
        if found is None:
            logger.warning(f"Unrecognized `include directive in {tree.path} line {node.line}")
            return None

        name = Path(found.group(1) if found.group(1) is not None else found.group(2))
        if name.is_absolute():
            candidates = [name]
        else:
            candidates = [tree.path.parent / name] + [inc / name for inc in includes]

        for candidate in candidates:
            if candidate.is_file():
                return candidate
        raise IncludeError(f"include file {str(name)!r} not found (included from {tree.path})")


def _macro_name(tree: SyntaxTree, node: SyntaxNode) -> Optional[str]:
    ident = unwrap_node(node, NodeKind.TEXT_MACRO_IDENTIFIER, *IDENTIFIER_KINDS)
    text = tree.get_str(ident)
    return text.strip() if text is not None else None


def _define_from_node(tree: SyntaxTree, node: SyntaxNode) -> Optional[Define]:
    name_node = unwrap_node(node, NodeKind.TEXT_MACRO_NAME)
    name = _macro_name(tree, name_node)
    if name is None:
        return None

    arguments = []
    for arg in iter_nodes(name_node):
        if arg.kind is NodeKind.FORMAL_ARGUMENT:
            ident = get_identifier(arg)
            arguments.append(tree.get_str(ident if ident is not None else arg).strip())

    macro_text = unwrap_node(node, NodeKind.MACRO_TEXT)
    if macro_text is None:
        return Define(name, tuple(arguments), None)

    body_start = macro_text.start_byte
    if not arguments:
        # The grammar leaves the parameter list of `define F(a, b) in the macro
        # text; it is one only when the parenthesis touches the name.
        after_name = tree.source[name_node.end_byte:macro_text.end_byte].decode("utf-8", errors="replace")
        split = split_formal_arguments(after_name)
        if split is not None:
            found, end = split
            arguments = list(found)
            body_start = name_node.end_byte + len(after_name[:end].encode("utf-8"))

    body = tree.source[body_start:macro_text.end_byte].decode("utf-8", errors="replace")
    origin = DefineOrigin(tree.path, body_start, macro_text.end_byte)
    return Define(name, tuple(arguments), DefineText(body.strip(), origin))
