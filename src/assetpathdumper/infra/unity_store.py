from __future__ import annotations

"""
UnityPy-backed Object Store.

Adapts UnityPy environments to the ObjectStore interface. Serialized files
are indexed by name so that cross-file references (file_id > 0) can be
followed through the externals table of the referencing file. Externals
not present in the loaded archive are looked up next to the input file and
loaded on demand.

Object fields are deserialized lazily: most container targets only need
their class ID, and reading the type tree of large assets is expensive.
"""

import collections.abc
import logging
import os
from typing import Any, Dict, Iterator, List, Optional, Sequence

import UnityPy
from UnityPy.files import SerializedFile

from assetpathdumper.domain.errors import StoreLoadError, UnresolvableReference
from assetpathdumper.domain.models import FileClassification, ObjectReference, StoredObject
from assetpathdumper.domain.store import ObjectStore, SerializedFileInfo

logger = logging.getLogger(__name__)


class _LazyFields(collections.abc.Mapping):
    """Field tree of an object, read from the type tree on first access."""

    def __init__(self, reader: Any, file_name: str):
        self._reader = reader
        self._file_name = file_name
        self._data: Optional[Dict[str, Any]] = None

    def _load(self) -> Dict[str, Any]:
        if self._data is None:
            try:
                data = self._reader.read_typetree()
            except Exception as e:
                raise UnresolvableReference(
                    f"<{self._file_name}:0:{self._reader.path_id}>", f"cannot read fields: {e}"
                ) from e
            self._data = data if isinstance(data, dict) else {}
        return self._data

    def __getitem__(self, key: str) -> Any:
        return self._load()[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._load())

    def __len__(self) -> int:
        return len(self._load())


class UnityObjectStore(ObjectStore):
    """
    Object store over the serialized files of one input file.

    Args:
        source_path: Input file the store was opened for.
        environment: Loaded UnityPy environment.
    """

    def __init__(self, source_path: str, environment: Any):
        self.source_path = source_path
        self._environments = [environment]
        self._files: Dict[str, SerializedFile] = {}
        self._order: List[str] = []
        self._missing: set = set()
        self._register(environment)

    # -------------------------------------------------------------------------
    # OBJECT STORE API
    # -------------------------------------------------------------------------

    def serialized_files(self) -> Sequence[SerializedFileInfo]:
        return [
            SerializedFileInfo(name=key, engine_version=str(getattr(self._files[key], "unity_version", "") or ""))
            for key in self._order
        ]

    def find_objects(self, file_name: str, class_id: int) -> List[StoredObject]:
        serialized = self._files.get(file_name.lower())
        if serialized is None:
            return []
        return [
            self._wrap(reader, file_name.lower())
            for path_id, reader in sorted(serialized.objects.items())
            if reader.class_id == class_id
        ]

    def resolve(self, reference: ObjectReference) -> StoredObject:
        if reference.is_null:
            raise UnresolvableReference(reference, "null reference")

        origin = self._files.get(reference.origin.lower())
        if origin is None:
            raise UnresolvableReference(reference, f"unknown origin file '{reference.origin}'")

        if reference.file_id == 0:
            target_name = reference.origin.lower()
        else:
            externals = getattr(origin, "externals", None) or []
            if reference.file_id > len(externals):
                raise UnresolvableReference(reference, f"file id out of range ({len(externals)} externals)")
            target_name = _external_name(externals[reference.file_id - 1])

        target = self._files.get(target_name) or self._load_external(target_name)
        if target is None:
            raise UnresolvableReference(reference, f"file '{target_name}' is not loaded")

        reader = target.objects.get(reference.path_id)
        if reader is None:
            raise UnresolvableReference(reference, "no such object")
        return self._wrap(reader, target_name)

    def close(self) -> None:
        self._files.clear()
        self._order.clear()
        self._environments.clear()

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _register(self, environment: Any) -> None:
        for serialized in _iter_serialized(getattr(environment, "files", {}).values()):
            key = os.path.basename(str(serialized.name)).lower()
            if key in self._files:
                continue
            self._files[key] = serialized
            self._order.append(key)

    def _load_external(self, name: str) -> Optional[SerializedFile]:
        """Load a dependency that sits next to the input file."""
        if name in self._missing:
            return None

        directory = os.path.dirname(os.path.abspath(self.source_path))
        candidate = _find_case_insensitive(directory, name)
        if candidate is None:
            self._missing.add(name)
            return None

        logger.debug(f"Loading external dependency '{candidate}'.")
        try:
            environment = UnityPy.load(candidate)
        except Exception as e:
            logger.warning(f"Cannot load external dependency '{candidate}': {e}")
            self._missing.add(name)
            return None

        self._environments.append(environment)
        for serialized in _iter_serialized(getattr(environment, "files", {}).values()):
            self._files.setdefault(name, serialized)
            break
        return self._files.get(name)

    @staticmethod
    def _wrap(reader: Any, file_name: str) -> StoredObject:
        return StoredObject(
            file=file_name,
            path_id=int(reader.path_id),
            class_id=int(reader.class_id),
            fields=_LazyFields(reader, file_name),
        )


# -----------------------------------------------------------------------------
# LOADER
# -----------------------------------------------------------------------------

def open_store(file_path: str, kind: FileClassification) -> UnityObjectStore:
    """
    Parse an input file with UnityPy and wrap it as an object store.

    Raises:
        StoreLoadError: If UnityPy cannot parse the file or finds no
                        serialized object file inside it.
    """
    try:
        environment = UnityPy.load(file_path)
    except Exception as e:
        raise StoreLoadError(f"UnityPy failed to load '{file_path}': {e}") from e

    store = UnityObjectStore(file_path, environment)
    if not store.serialized_files() and kind == FileClassification.SERIALIZED_OBJECT_FILE:
        raise StoreLoadError(f"No serialized object file found in '{file_path}'.")
    return store


def _iter_serialized(files: Any) -> Iterator[SerializedFile]:
    """Flatten nested bundle/web containers into their serialized files."""
    for f in files:
        if isinstance(f, SerializedFile):
            yield f
        elif isinstance(getattr(f, "files", None), dict):
            yield from _iter_serialized(f.files.values())


def _external_name(identifier: Any) -> str:
    path = getattr(identifier, "path", None) or getattr(identifier, "name", "") or ""
    return os.path.basename(str(path).replace("\\", "/")).lower()


def _find_case_insensitive(directory: str, name: str) -> Optional[str]:
    try:
        entries = os.listdir(directory)
    except OSError:
        return None
    for entry in entries:
        if entry.lower() == name:
            path = os.path.join(directory, entry)
            if os.path.isfile(path):
                return path
    return None
