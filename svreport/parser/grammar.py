# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Handles SystemVerilog grammar loading and node type constants for tree-sitter.

Grammar Source: by default the grammar bundled with the `tree-sitter-verilog`
distribution. A pre-compiled grammar library (e.g. sv.so) can be given
instead; it is loaded through ctypes because tree-sitter no longer builds a
Language straight from a shared library since 0.23.0:
https://github.com/tree-sitter/py-tree-sitter/discussions/251
The library's `tree_sitter_verilog` function pointer is wrapped into the
capsule the tree-sitter binding expects.
"""

import ctypes
import logging
import os
from ctypes import c_char_p, c_void_p, py_object, pythonapi
from typing import Optional

from tree_sitter import Language

from ..errors import GrammarLoadError
from .syntax import NodeKind

logger = logging.getLogger(__name__)

LANGUAGE_FUNCTION_NAME = "tree_sitter_verilog"

# tree-sitter node types mapped onto the closed NodeKind set. `module_declaration`
# is absent on purpose: it is split by header style in classify().
KIND_BY_TYPE = {
    "source_file": NodeKind.SOURCE_FILE,
    "module_header": NodeKind.MODULE_HEADER,
    "module_nonansi_header": NodeKind.MODULE_NONANSI_HEADER,
    "module_ansi_header": NodeKind.MODULE_ANSI_HEADER,
    "module_identifier": NodeKind.MODULE_IDENTIFIER,
    "module_instantiation": NodeKind.MODULE_INSTANTIATION,
    # `foo u0 (...)` is ambiguous before elaboration; the grammar may pick any of these
    "interface_instantiation": NodeKind.MODULE_INSTANTIATION,
    "program_instantiation": NodeKind.MODULE_INSTANTIATION,
    "checker_instantiation": NodeKind.MODULE_INSTANTIATION,
    "name_of_instance": NodeKind.NAME_OF_INSTANCE,
    "instance_identifier": NodeKind.INSTANCE_IDENTIFIER,
    "port_declaration": NodeKind.PORT_DECLARATION,
    "ansi_port_declaration": NodeKind.ANSI_PORT_DECLARATION,
    "input_declaration": NodeKind.INPUT_DECLARATION,
    "output_declaration": NodeKind.OUTPUT_DECLARATION,
    "port_direction": NodeKind.PORT_DIRECTION,
    "constant_range": NodeKind.CONSTANT_RANGE,
    "list_of_port_identifiers": NodeKind.LIST_OF_PORT_IDENTIFIERS,
    "port_identifier": NodeKind.PORT_IDENTIFIER,
    "simple_identifier": NodeKind.SIMPLE_IDENTIFIER,
    "escaped_identifier": NodeKind.ESCAPED_IDENTIFIER,
    "text_macro_definition": NodeKind.TEXT_MACRO_DEFINITION,
    "text_macro_name": NodeKind.TEXT_MACRO_NAME,
    "text_macro_identifier": NodeKind.TEXT_MACRO_IDENTIFIER,
    "formal_argument": NodeKind.FORMAL_ARGUMENT,
    "macro_text": NodeKind.MACRO_TEXT,
    "undefine_compiler_directive": NodeKind.UNDEFINE_DIRECTIVE,
    "undefineall_compiler_directive": NodeKind.UNDEFINEALL_DIRECTIVE,
    "include_compiler_directive": NodeKind.INCLUDE_DIRECTIVE,
    "comment": NodeKind.WHITE_SPACE,
    "ERROR": NodeKind.ERROR,
}

MODULE_DECLARATION_TYPE = "module_declaration"

# Directives taking an identifier (`id_directive`) or nothing (`zero_directive`)
# share one node type each; the directive keyword child tells them apart.
GENERIC_DIRECTIVE_TYPES = ("id_directive", "zero_directive")
KIND_BY_DIRECTIVE = {
    "directive_undef": NodeKind.UNDEFINE_DIRECTIVE,
    "`undef": NodeKind.UNDEFINE_DIRECTIVE,
    "directive_undefineall": NodeKind.UNDEFINEALL_DIRECTIVE,
    "`undefineall": NodeKind.UNDEFINEALL_DIRECTIVE,
}


def classify(node_type: str, child_types: list[str]) -> NodeKind:
    """Map a tree-sitter node type onto a NodeKind.

    A module declaration is ANSI when its header is an ANSI header; any other
    shape (including a missing header) is handled as non-ANSI.
    Generic directive nodes are classified by their directive keyword.
    """
    if node_type == MODULE_DECLARATION_TYPE:
        if "module_ansi_header" in child_types:
            return NodeKind.MODULE_DECLARATION_ANSI
        return NodeKind.MODULE_DECLARATION_NONANSI
    if node_type in GENERIC_DIRECTIVE_TYPES:
        for child_type in child_types:
            if child_type in KIND_BY_DIRECTIVE:
                return KIND_BY_DIRECTIVE[child_type]
        return NodeKind.OTHER
    return KIND_BY_TYPE.get(node_type, NodeKind.OTHER)


def load_language(grammar_path: Optional[str] = None) -> Language:
    """Load the SystemVerilog grammar.

    Args:
        grammar_path: Path to a compiled grammar library (.so, .dll, .dylib), or
                      None to use the grammar shipped with tree-sitter-verilog.

    Returns:
        A tree-sitter Language object.

    Raises:
        GrammarLoadError: If the grammar cannot be found or initialized.
    """
    if grammar_path is None:
        import tree_sitter_verilog

        logger.debug("Grammar path not provided, using tree-sitter-verilog")
        return Language(tree_sitter_verilog.language())

    grammar_path = str(grammar_path)
    if not os.path.exists(grammar_path):
        raise GrammarLoadError(f"Grammar library not found at: {grammar_path}")

    try:
        lib = ctypes.cdll.LoadLibrary(grammar_path)
        logger.debug(f"Loaded grammar library: {grammar_path}")

        if not hasattr(lib, LANGUAGE_FUNCTION_NAME):
            raise GrammarLoadError(
                f"Language function '{LANGUAGE_FUNCTION_NAME}' not found in '{grammar_path}'. "
                "Check grammar compilation."
            )
        lang_ptr_func = getattr(lib, LANGUAGE_FUNCTION_NAME)
        lang_ptr_func.restype = c_void_p
        lang_ptr = lang_ptr_func()

        # The capsule name "tree_sitter.Language" is what the binding expects
        PyCapsule_New = pythonapi.PyCapsule_New
        PyCapsule_New.restype = py_object
        PyCapsule_New.argtypes = (c_void_p, c_char_p, c_void_p)
        capsule = PyCapsule_New(lang_ptr, b"tree_sitter.Language", None)

        language = Language(capsule)
        logger.info(f"Successfully created Language object from '{grammar_path}'")
        return language

    except GrammarLoadError:
        raise
    except (OSError, ValueError, TypeError) as e:
        logger.error(f"Failed to load grammar from '{grammar_path}': {e}")
        raise GrammarLoadError(f"Failed to load grammar from '{grammar_path}'") from e
