# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Shared pytest fixtures."""

import logging
import os

import pytest

from tests.fixtures.syntax_builder import TreeBuilder


@pytest.fixture
def builder():
    return TreeBuilder()


@pytest.fixture
def isolated_env(monkeypatch, tmp_path):
    """Run in tmp_path with no SVREPORT_* variables and no project config above it."""
    for key in list(os.environ):
        if key.startswith("SVREPORT_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("SVREPORT_PROJECT_DIR", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def reset_logging():
    """Reset logging system between tests."""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    root.setLevel(logging.WARNING)
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
