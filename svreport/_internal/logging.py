# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Console logging for svreport, rendered with Rich on stderr.

stdout is reserved for the YAML report, so every record goes to stderr.

Usage:
    from svreport._internal.logging import setup_logging

    setup_logging(level="info")      # once, from the CLI

    logger = logging.getLogger(__name__)
    logger.info(f"Reported {path}")
"""

import logging

LEVEL_MAP = {
    'error': logging.ERROR,
    'warning': logging.WARNING,
    'info': logging.INFO,
    'debug': logging.DEBUG
}


def _stderr_handler(log_level: int) -> logging.Handler:
    from rich.console import Console
    from rich.logging import RichHandler

    # Source text in messages may contain [brackets]; never parse markup
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=(log_level == logging.DEBUG),
        show_path=False,
        show_time=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def setup_logging(level: str = "warning") -> None:
    """Set the root logger to level ('error', 'warning', 'info' or 'debug').

    Unknown names fall back to warning. The Rich handler is installed once;
    later calls only change levels.
    """
    log_level = LEVEL_MAP.get(level.lower(), logging.WARNING)

    root = logging.getLogger()
    root.setLevel(log_level)

    if not root.handlers:
        root.addHandler(_stderr_handler(log_level))

    for handler in root.handlers:
        handler.setLevel(log_level)
