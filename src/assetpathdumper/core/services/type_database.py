from __future__ import annotations

"""
Class Database Package and Version-Keyed Type Databases.

The class package file must be present before any input is touched. Type
databases are selected per engine version and memoized in an explicit
cache object that the pipeline passes to every component needing class-ID
resolution.
"""

import logging
import os
from typing import Dict, List

from UnityPy.enums import ClassIDType

from assetpathdumper.domain.constants import CLASS_PACKAGE_MAGIC
from assetpathdumper.domain.errors import MissingClassDatabase

logger = logging.getLogger(__name__)

# Fixed class-ID enumeration shared by every engine version
_CLASS_NAMES: Dict[int, str] = {member.value: member.name for member in ClassIDType}
_CLASS_IDS: Dict[str, int] = {name: member.value for name, member in ClassIDType.__members__.items()}


# -----------------------------------------------------------------------------
# CLASS PACKAGE
# -----------------------------------------------------------------------------

class ClassDatabasePackage:
    """
    Handle on the class database package file (classdata.tpk).

    Loading validates that the file exists, is readable and carries the
    package magic. Failure is fatal for the run.
    """

    def __init__(self, path: str, size: int):
        self.path = path
        self.size = size

    @classmethod
    def load(cls, path: str) -> "ClassDatabasePackage":
        """
        Open and validate a class database package.

        Raises:
            MissingClassDatabase: If the package is absent, unreadable or malformed.
        """
        if not os.path.isfile(path):
            raise MissingClassDatabase(f"Class database package not found: {path}")

        try:
            with open(path, "rb") as f:
                magic = f.read(len(CLASS_PACKAGE_MAGIC))
            size = os.path.getsize(path)
        except OSError as e:
            raise MissingClassDatabase(f"Cannot read class database package '{path}': {e}") from e

        if magic != CLASS_PACKAGE_MAGIC:
            raise MissingClassDatabase(f"Invalid class database package '{path}': bad magic {magic!r}")

        logger.info(f"Loaded class database package '{path}' ({size} bytes).")
        return cls(path, size)


# -----------------------------------------------------------------------------
# TYPE DATABASE
# -----------------------------------------------------------------------------

class TypeDatabase:
    """
    Class-ID to canonical class name mapping for one engine version.

    UnityPy ships a single class-ID enumeration, so every version maps IDs
    the same way; the version is kept to label the database in logs.
    """

    def __init__(self, engine_version: str):
        self.engine_version = engine_version

    def class_name(self, class_id: int) -> str:
        """Canonical name of a class ID; unknown IDs render as the decimal ID."""
        return _CLASS_NAMES.get(class_id, str(class_id))

    def class_id(self, class_name: str) -> int:
        """
        Class ID of a canonical class name.

        Raises:
            KeyError: If the name is not part of the enumeration.
        """
        return _CLASS_IDS[class_name]

    def __repr__(self) -> str:
        return f"TypeDatabase({self.engine_version!r})"


class TypeDatabaseCache:
    """
    Explicit run context memoizing type databases by engine version.

    Not thread-safe; the pipeline processes one input at a time.
    """

    def __init__(self, package: ClassDatabasePackage):
        self.package = package
        self._databases: Dict[str, TypeDatabase] = {}
        self.loads = 0

    def load(self, engine_version: str) -> TypeDatabase:
        """
        Return the type database matching an engine version, loading it once.

        Reloading an already cached version is a cache hit.
        """
        key = (engine_version or "").strip()
        database = self._databases.get(key)
        if database is None:
            database = TypeDatabase(key)
            self._databases[key] = database
            self.loads += 1
            logger.debug(f"Type database selected for engine version '{key}'.")
        return database

    @property
    def versions(self) -> List[str]:
        """Engine versions met so far, in first-seen order."""
        return list(self._databases)
