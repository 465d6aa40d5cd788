from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for stores, type databases and class packages.
"""

import os
import sys
from pathlib import Path

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from assetpathdumper.core.services.type_database import (  # noqa: E402
    ClassDatabasePackage,
    TypeDatabase,
    TypeDatabaseCache,
)
from helpers import ENGINE_VERSION, MemoryObjectStore  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def memory_store() -> MemoryObjectStore:
    return MemoryObjectStore()


@pytest.fixture
def type_database() -> TypeDatabase:
    return TypeDatabase(ENGINE_VERSION)


@pytest.fixture
def class_package_file(tmp_path: Path) -> str:
    """Write a minimal class package carrying the TPK magic."""
    path = tmp_path / "classdata.tpk"
    path.write_bytes(b"TPK*" + b"\x00" * 28)
    return str(path)


@pytest.fixture
def type_cache(class_package_file: str) -> TypeDatabaseCache:
    return TypeDatabaseCache(ClassDatabasePackage.load(class_package_file))
