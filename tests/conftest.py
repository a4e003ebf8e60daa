"""
Pytest configuration for the flat repository layout.

Puts the repository root on sys.path so tests can import ``database``,
``services``, ``dashboard`` etc. directly, and provides isolated stores.
"""

import itertools
import os
import sys

import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from database.manager import LocalStore  # noqa: E402
from database.storage import FileStorage, MemoryStorage  # noqa: E402


def make_clock():
    """Clock returning strictly increasing ISO timestamps."""
    counter = itertools.count()
    return lambda: f"2024-01-01T00:00:{next(counter):02d}.000Z"


@pytest.fixture()
def memory_storage():
    return MemoryStorage()


@pytest.fixture()
def store(memory_storage):
    return LocalStore(memory_storage, clock=make_clock())


@pytest.fixture()
def file_store(tmp_path):
    return LocalStore(FileStorage(tmp_path / "data"), clock=make_clock())
