# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Tree walker: one source-order pass over a syntax tree per report mode."""

import logging
from enum import Enum

from ..parser.syntax import NodeKind, SyntaxTree
from .dumper import print_full_tree
from .extractor import DefinitionExtractor, ModuleRecord, write_module
from .writer import ReportWriter

logger = logging.getLogger(__name__)


class ReportMode(Enum):
    DEFINITIONS = "defs"
    FULL_TREE = "syntax_tree"


def walk_definitions(tree: SyntaxTree, extractor: DefinitionExtractor) -> None:
    """Dispatch module, instantiation and port declaration nodes to extractor."""
    for node in tree:
        match node.kind:
            case NodeKind.MODULE_DECLARATION_NONANSI | NodeKind.MODULE_DECLARATION_ANSI:
                extractor.on_module_declaration(node)
            case NodeKind.MODULE_INSTANTIATION:
                extractor.on_module_instantiation(node)
            case NodeKind.PORT_DECLARATION | NodeKind.ANSI_PORT_DECLARATION:
                extractor.on_port_declaration(node)
            case _:
                pass
    extractor.finish()


def extract_definitions(tree: SyntaxTree) -> list[ModuleRecord]:
    """Module records of tree, in declaration order."""
    modules: list[ModuleRecord] = []
    walk_definitions(tree, DefinitionExtractor(tree, modules.append))
    return modules


def report_tree(
    tree: SyntaxTree,
    writer: ReportWriter,
    mode: ReportMode = ReportMode.DEFINITIONS,
    include_whitespace: bool = False,
) -> None:
    """Write the `defs:` or `syntax_tree:` block of one file."""
    writer.emit(2, f"{mode.value}:")
    match mode:
        case ReportMode.DEFINITIONS:
            extractor = DefinitionExtractor(tree, lambda record: write_module(writer, record))
            walk_definitions(tree, extractor)
        case ReportMode.FULL_TREE:
            print_full_tree(tree, writer, include_whitespace)
    logger.debug(f"Reported {tree.path} in {mode.name.lower()} mode")
