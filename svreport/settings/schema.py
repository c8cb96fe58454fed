# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""svreport configuration schema using Pydantic.

Configuration Priority
----------------------
Settings are loaded from multiple sources with the following priority (highest to lowest):
1. CLI arguments (passed to ReportConfig constructor)
2. Environment variables (SVREPORT_* prefix)
3. Project config file (svreport.yaml, or the file given with --config)
4. Built-in defaults

The project config file is found by walking up from the CWD. Relative
include paths and grammar paths from the file resolve against the file's
directory; everything else resolves against the CWD.
"""

import logging
import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILE = "svreport.yaml"

LogLevel = Literal["error", "warning", "info", "debug"]


def _find_project_config() -> Path | None:
    """Walk up from CWD to find svreport.yaml.

    If SVREPORT_PROJECT_DIR is set, only that directory is checked.
    """
    if project_dir_override := os.environ.get("SVREPORT_PROJECT_DIR"):
        candidate = Path(project_dir_override).resolve() / PROJECT_CONFIG_FILE
        return candidate if candidate.exists() else None

    current = Path.cwd().resolve()
    while current != current.parent:
        candidate = current / PROJECT_CONFIG_FILE
        if candidate.exists():
            return candidate
        current = current.parent

    return None


def _resolve_relative(value: Any, base: Path) -> Any:
    if value is None:
        return None
    path = Path(value)
    return str(path if path.is_absolute() else (base / path))


class YamlSettingsSource(PydanticBaseSettingsSource):
    """Settings source for the project YAML file."""

    def __init__(self, settings_cls: type[BaseSettings], config_file: Path | None = None):
        super().__init__(settings_cls)
        self.config_file = config_file if config_file is not None else _find_project_config()
        self._data = self._load_yaml_file() if self.config_file else {}

    def _load_yaml_file(self) -> dict[str, Any]:
        """Load the YAML file and anchor its relative paths to its directory.

        Raises:
            yaml.YAMLError: If the config file has syntax errors
        """
        try:
            with open(self.config_file) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            if hasattr(e, "problem_mark"):
                mark = e.problem_mark
                location = f"line {mark.line + 1}, column {mark.column + 1}"
            else:
                location = "unknown location"
            raise yaml.YAMLError(
                f"\n\nInvalid YAML in config file: {self.config_file}\n"
                f"Error at {location}: {getattr(e, 'problem', None) or str(e)}\n\n"
                f"Fix the syntax error and try again."
            ) from e

        if not isinstance(data, dict):
            raise yaml.YAMLError(f"Config file {self.config_file} must contain a mapping")

        base = Path(self.config_file).resolve().parent
        if isinstance(data.get("includes"), list):
            data["includes"] = [_resolve_relative(p, base) for p in data["includes"]]
        if "grammar_path" in data:
            data["grammar_path"] = _resolve_relative(data["grammar_path"], base)

        logger.debug(f"Loaded settings from {self.config_file}")
        return data

    def get_field_value(self, field_name: str, field_info: Any) -> tuple[Any, str, bool]:
        if field_name in self._data:
            return self._data[field_name], field_name, True
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._data.copy()


class ReportConfig(BaseSettings):
    """Configuration schema with hierarchical priority.

    Priority order (highest to lowest):
    1. CLI arguments (passed to constructor)
    2. Environment variables (SVREPORT_* prefix)
    3. Project config (svreport.yaml)
    4. Built-in defaults
    """

    defines: list[str] = Field(default_factory=list, description="Macro definitions as NAME[=VALUE]")
    includes: list[Path] = Field(default_factory=list, description="Directories searched by `include")
    ignore_include: bool = Field(default=False, description="Do not follow `include directives")
    full_tree: bool = Field(default=False, description="Dump the syntax tree instead of definitions")
    include_whitespace: bool = Field(default=False, description="Keep comment subtrees in the tree dump")
    separate: bool = Field(default=False, description="Isolate macro definitions per file")
    show_macro_defs: bool = Field(default=False, description="Append the macro table after each file")
    grammar_path: Path | None = Field(
        default=None, description="Compiled tree-sitter grammar library (default: tree-sitter-verilog)"
    )
    log_level: LogLevel = Field(default="warning", description="Console verbosity: error | warning | info | debug")
    config_file: Path | None = Field(default=None, description="Project config file to load instead of searching")

    model_config = SettingsConfigDict(
        env_prefix="SVREPORT_",
        validate_assignment=True,
        extra="forbid",
        case_sensitive=False,
        env_file=None,  # Config files are handled by YamlSettingsSource
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _lower_log_level(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Priority order (first source wins): init, environment, YAML file."""
        config_file = init_settings().get("config_file")

        return (
            init_settings,
            env_settings,
            YamlSettingsSource(settings_cls, config_file=Path(config_file) if config_file else None),
        )
