from __future__ import annotations

"""
Shared test doubles and byte builders.

Provides an in-memory ObjectStore standing in for parsed Unity files and
helpers that build the raw header layouts the classifier inspects.
"""

import struct
from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Sequence, Tuple

from UnityPy.enums import ClassIDType

from assetpathdumper.domain.errors import UnresolvableReference
from assetpathdumper.domain.models import ObjectReference, StoredObject
from assetpathdumper.domain.store import ObjectStore, SerializedFileInfo

ENGINE_VERSION = "2021.3.16f1"


class UnreadableFields(Mapping):
    """Field tree whose every access fails like a corrupt type tree."""

    def __init__(self, file: str, path_id: int):
        self._where = f"<{file}:0:{path_id}>"

    def _fail(self):
        raise UnresolvableReference(self._where, "cannot read fields: corrupt type tree")

    def __getitem__(self, key: str) -> Any:
        self._fail()

    def __iter__(self) -> Iterator[str]:
        self._fail()

    def __len__(self) -> int:
        self._fail()


class MemoryObjectStore(ObjectStore):
    """Object store over hand-built serialized files."""

    def __init__(self) -> None:
        self._files: Dict[str, Tuple[str, Dict[int, StoredObject]]] = {}
        self._externals: Dict[str, List[str]] = {}
        self.closed = False
        self.resolve_calls = 0

    def add_file(self, name: str, version: str = ENGINE_VERSION, externals: Sequence[str] = ()) -> None:
        self._files[name] = (version, {})
        self._externals[name] = list(externals)

    def add(self, file: str, path_id: int, class_name: str, **fields: Any) -> ObjectReference:
        if file not in self._files:
            self.add_file(file)
        class_id = ClassIDType[class_name].value
        self._files[file][1][path_id] = StoredObject(file, path_id, class_id, fields)
        return ObjectReference(0, path_id, file)

    def add_unreadable(self, file: str, path_id: int, class_name: str) -> ObjectReference:
        """Add an object whose field tree fails to deserialize."""
        if file not in self._files:
            self.add_file(file)
        class_id = ClassIDType[class_name].value
        self._files[file][1][path_id] = StoredObject(file, path_id, class_id, UnreadableFields(file, path_id))
        return ObjectReference(0, path_id, file)

    def serialized_files(self) -> Sequence[SerializedFileInfo]:
        return [SerializedFileInfo(name, version) for name, (version, _) in self._files.items()]

    def find_objects(self, file_name: str, class_id: int) -> List[StoredObject]:
        _, objects = self._files.get(file_name, ("", {}))
        return [obj for _, obj in sorted(objects.items()) if obj.class_id == class_id]

    def resolve(self, reference: ObjectReference) -> StoredObject:
        self.resolve_calls += 1
        if reference.file_id == 0:
            target = reference.origin
        else:
            externals = self._externals.get(reference.origin, [])
            if reference.file_id > len(externals):
                raise UnresolvableReference(reference, "file id out of range")
            target = externals[reference.file_id - 1]

        obj = self._files.get(target, ("", {}))[1].get(reference.path_id)
        if obj is None:
            raise UnresolvableReference(reference, "no such object")
        return obj

    def close(self) -> None:
        self.closed = True


def pptr(path_id: int, file_id: int = 0) -> Dict[str, int]:
    return {"m_FileID": file_id, "m_PathID": path_id}


def asset_info(path_id: int, file_id: int = 0) -> Dict[str, Any]:
    return {"preloadIndex": 0, "preloadSize": 0, "asset": pptr(path_id, file_id)}


def serialized_header(format_version: int = 17, version: bytes = b"2021.3.16f1", size: int = 64) -> bytes:
    """Build a minimal big-endian serialized file header."""
    data = bytearray(size)
    struct.pack_into(">i", data, 0x08, format_version)
    data[0x14:0x14 + len(version)] = version
    return bytes(data)


def bundle_header(size: int = 64) -> bytes:
    data = bytearray(size)
    data[:8] = b"UnityFS\x00"
    return bytes(data)
