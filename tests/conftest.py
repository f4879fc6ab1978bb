"""Pytest configuration: make ``src/`` importable and provide node sessions.

Tests that need a real ``node`` binary take the ``session`` fixture, which
skips when the runtime is not installed.
"""

import os
import shutil
import sys

import pytest

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SRC = os.path.join(PROJECT_ROOT, "src")

if SRC not in sys.path:
    sys.path.insert(0, SRC)

from nodebridge import Session  # noqa: E402


@pytest.fixture
def node_bin():
    path = os.environ.get("NODE_BIN") or shutil.which("node") or shutil.which("nodejs")
    if not path:
        pytest.skip("node runtime not installed")
    return path


@pytest.fixture
def session(node_bin):
    return Session.create(node_bin=node_bin)
