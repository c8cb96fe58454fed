# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

from .cli import main

main()
