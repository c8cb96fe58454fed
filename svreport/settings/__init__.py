# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""svreport configuration module.

Provides type-safe configuration management with Pydantic Settings.
"""

from .loader import load_config
from .schema import ReportConfig

__all__ = [
    "ReportConfig",
    "load_config",
]
