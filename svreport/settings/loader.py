# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Configuration loading for svreport."""

from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError
from rich.console import Console

from .schema import ReportConfig

console = Console(stderr=True)


def _resolve_cli_paths(cli_overrides: dict[str, Any]) -> dict[str, Any]:
    """Resolve relative CLI paths against the current working directory."""
    cwd = Path.cwd()
    result = dict(cli_overrides)

    if result.get("includes") is not None:
        result["includes"] = [p if Path(p).is_absolute() else cwd / p for p in result["includes"]]
    if result.get("grammar_path") is not None:
        path = Path(result["grammar_path"])
        result["grammar_path"] = path if path.is_absolute() else cwd / path

    return result


def load_config(config_file: Optional[Path] = None, **cli_overrides) -> ReportConfig:
    """Load configuration with hierarchical priority.

    Priority order (highest to lowest):
    1. CLI arguments (passed as kwargs; None means "not given")
    2. Environment variables (SVREPORT_* prefix)
    3. Project config file (svreport.yaml or config_file)
    4. Built-in defaults

    Raises:
        ValidationError: If any source holds an invalid value (details are
            printed to stderr first)
    """
    overrides = {key: value for key, value in cli_overrides.items() if value is not None}

    try:
        overrides = _resolve_cli_paths(overrides)
        if config_file is not None:
            overrides["config_file"] = config_file
        return ReportConfig(**overrides)

    except ValidationError as e:
        console.print("[bold red]Configuration validation failed:[/bold red]")
        for error in e.errors():
            field = " → ".join(str(x) for x in error["loc"])
            console.print(f"  [red]{field}: {error['msg']}[/red]")
        raise
