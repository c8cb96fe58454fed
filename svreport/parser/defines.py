# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Macro definition records and the macro table threaded between files."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..report.escape import unescape


@dataclass(frozen=True)
class DefineOrigin:
    """Where a definition's replacement text came from."""
    path: Path
    start_byte: int
    end_byte: int


@dataclass(frozen=True)
class DefineText:
    text: str
    origin: Optional[DefineOrigin] = None


@dataclass(frozen=True)
class Define:
    """One `define.

    Attributes:
        identifier: Macro name
        arguments: Formal argument names of a function-like macro, in order
        text: Replacement text, None for a macro defined without a body
    """
    identifier: str
    arguments: tuple[str, ...] = ()
    text: Optional[DefineText] = None


# A key mapped to None is declared without a payload; an absent key was never seen.
DefineTable = dict[str, Optional[Define]]


def parse_define_arg(arg: str) -> tuple[str, Define]:
    """Turn a command line `NAME[=VALUE]` into a table entry.

    VALUE may use backslash escapes; it becomes the replacement text.
    """
    name, sep, value = arg.partition("=")
    text = DefineText(unescape(value)) if sep else None
    return name, Define(name, (), text)


def build_define_table(args: list[str]) -> DefineTable:
    defines: DefineTable = {}
    for arg in args:
        name, define = parse_define_arg(arg)
        defines[name] = define
    return defines


def split_formal_arguments(text: str) -> Optional[tuple[tuple[str, ...], int]]:
    """Split a leading `(a, b = 1)` parameter list off macro text.

    Returns the argument names (defaults dropped) and the index just past the
    closing parenthesis, or None if text does not open with a complete list.
    """
    if not text.startswith("("):
        return None

    depth = 0
    names = []
    current = []
    for pos, ch in enumerate(text):
        if ch == "(":
            depth += 1
            if depth == 1:
                continue
        elif ch == ")":
            depth -= 1
            if depth == 0:
                names.append("".join(current))
                arguments = tuple(arg.partition("=")[0].strip() for arg in names)
                return tuple(arg for arg in arguments if arg), pos + 1
        elif ch == "," and depth == 1:
            names.append("".join(current))
            current = []
            continue
        current.append(ch)
    return None
