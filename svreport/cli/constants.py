# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

from enum import IntEnum

CLI_NAME = "svreport"
PACKAGE_NAME = "svreport"


class ExitCode(IntEnum):
    """Process exit codes (BSD sysexits.h where one applies)."""
    SUCCESS = 0
    FAILURE = 1  # at least one file could not be reported
    USAGE = 64
    DATAERR = 65
    SOFTWARE = 70
    CONFIG = 78
    INTERRUPTED = 130  # Standard SIGINT exit code
