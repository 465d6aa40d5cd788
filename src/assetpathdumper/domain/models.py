from __future__ import annotations

"""
Core Domain Data Models.

Defines the value objects exchanged between the classifier, the object
store, the container extractor and the aggregator, plus the result objects
handed from the pipeline engine to the interface layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from assetpathdumper.domain.constants import PPTR_FILE_ID, PPTR_PATH_ID

# Path -> (type label -> occurrence count), insertion ordered
PathTypeIndex = Dict[str, Dict[str, int]]

# -----------------------------------------------------------------------------
# CLASSIFICATION
# -----------------------------------------------------------------------------

class FileClassification(Enum):
    """Coarse kind of a raw input file, decided from its header bytes."""
    BUNDLE_ARCHIVE = "bundle"
    SERIALIZED_OBJECT_FILE = "serialized"
    UNRECOGNIZED = "unrecognized"


# -----------------------------------------------------------------------------
# OBJECT GRAPH
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ObjectReference:
    """
    Tagged pointer to an object, relative to the file it was read from.

    Attributes:
        file_id: 0 for the origin file itself, N for its N-th external dependency.
        path_id: Local object identifier inside the target file.
        origin: Name of the serialized file holding the reference.
    """
    file_id: int
    path_id: int
    origin: str = ""

    @property
    def is_null(self) -> bool:
        return self.file_id == 0 and self.path_id == 0

    def __str__(self) -> str:
        return f"<{self.origin}:{self.file_id}:{self.path_id}>"


def reference_from_pptr(value: Any, origin: str) -> Optional[ObjectReference]:
    """
    Build an ObjectReference from a deserialized PPtr mapping.

    Returns None when the value does not look like a PPtr.
    """
    if not isinstance(value, Mapping):
        return None
    if PPTR_FILE_ID not in value or PPTR_PATH_ID not in value:
        return None
    return ObjectReference(
        file_id=int(value[PPTR_FILE_ID]),
        path_id=int(value[PPTR_PATH_ID]),
        origin=origin,
    )


@dataclass(frozen=True)
class StoredObject:
    """
    Read-only view of an object parsed by the object store.

    Attributes:
        file: Name of the serialized file that owns the object.
        path_id: Local identifier of the object.
        class_id: Declared engine class identifier.
        fields: Deserialized field tree of the object.
    """
    file: str
    path_id: int
    class_id: int
    fields: Mapping[str, Any] = field(default_factory=dict)

    def reference(self, field_name: str) -> Optional[ObjectReference]:
        """Read a PPtr field of this object as a reference rooted at its file."""
        return reference_from_pptr(self.fields.get(field_name), self.file)


@dataclass(frozen=True)
class ContainerEntry:
    """A raw container table row, before type resolution."""
    path: str
    reference: ObjectReference


# -----------------------------------------------------------------------------
# RESULTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FileReport:
    """
    One report section: the counted index of a single processed input file.

    Attributes:
        name: Base name of the input file (section heading).
        source_path: Absolute path of the input file.
        kind: Classification that made the file eligible.
        index: Finalized path/type index.
        unresolved: Container rows whose reference could not be resolved.
    """
    name: str
    source_path: str
    kind: FileClassification
    index: PathTypeIndex
    unresolved: int = 0

    @property
    def entry_count(self) -> int:
        return sum(sum(types.values()) for types in self.index.values())


@dataclass(frozen=True)
class FileFailure:
    """Technical failure details of a file skipped by the failure boundary."""
    file_path: str
    error: str


@dataclass(frozen=True)
class PipelineResult:
    """
    Unified result of a complete dump run.

    Attributes:
        input_path: Normalized file or directory processed.
        report_path: Location of the generated HTML report.
        reports: Report sections in processing order.
        scanned: Number of files inspected.
        skipped: Files skipped as ineligible or unrecognized.
        failures: Files that raised inside their failure boundary.
    """
    input_path: str
    report_path: str = ""
    reports: List[FileReport] = field(default_factory=list)
    scanned: int = 0
    skipped: int = 0
    failures: List[FileFailure] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.reports)

    @property
    def unresolved_entries(self) -> int:
        return sum(r.unresolved for r in self.reports)

    def summary(self) -> Dict[str, Any]:
        """Flatten the result into a JSON-friendly dictionary."""
        return {
            "input_path": self.input_path,
            "report_path": self.report_path,
            "scanned": self.scanned,
            "processed": self.processed,
            "skipped": self.skipped,
            "failed": len(self.failures),
            "unresolved_entries": self.unresolved_entries,
            "files": [
                {
                    "name": r.name,
                    "kind": r.kind.value,
                    "paths": len(r.index),
                    "entries": r.entry_count,
                }
                for r in self.reports
            ],
            "errors": [{"file": f.file_path, "error": f.error} for f in self.failures],
        }
