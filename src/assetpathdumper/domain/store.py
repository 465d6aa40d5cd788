from __future__ import annotations

"""
Object Store Interface.

Abstract boundary between the analysis core and the library that actually
deserializes bundles and serialized object files. The core never follows
live object pointers: every relationship is expressed as an ObjectReference
and resolved through this interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Sequence

from assetpathdumper.domain.models import FileClassification, ObjectReference, StoredObject


@dataclass(frozen=True)
class SerializedFileInfo:
    """
    Identity of one serialized object file held by a store.

    Attributes:
        name: File name used to resolve cross-file references.
        engine_version: Engine version string recorded in the file header.
    """
    name: str
    engine_version: str


class ObjectStore(ABC):
    """
    Abstract access to the parsed objects of one input file.

    A bundle archive exposes one SerializedFileInfo per serialized sub-file;
    a plain serialized object file exposes exactly one.
    """

    @abstractmethod
    def serialized_files(self) -> Sequence[SerializedFileInfo]:
        """List the serialized object files reachable in this store."""

    @abstractmethod
    def find_objects(self, file_name: str, class_id: int) -> List[StoredObject]:
        """
        Return the objects of a given class inside one serialized file.

        Args:
            file_name: Name of a file listed by serialized_files().
            class_id: Engine class identifier to filter on.

        Returns:
            List[StoredObject]: Matches in ascending local identifier order.
        """

    @abstractmethod
    def resolve(self, reference: ObjectReference) -> StoredObject:
        """
        Follow a reference to the object it designates.

        Raises:
            UnresolvableReference: If the reference is null, dangling or
                                   points to a file that is not loaded.
        """

    def close(self) -> None:
        """Release any resources held by the store."""

    def __enter__(self) -> "ObjectStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


# Opens the store for one input file
StoreLoader = Callable[[str, FileClassification], ObjectStore]
