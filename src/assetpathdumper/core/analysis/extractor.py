from __future__ import annotations

"""
Container Extractor.

Walks the container table of an AssetBundle or ResourceManager object and
emits one (path, type label) pair per table row, in table order, without
deduplication. Rows whose reference cannot be resolved are either skipped
or labelled with a placeholder, depending on the configured policy.
"""

import logging
from typing import Any, Iterator, Mapping, Optional, Tuple

from assetpathdumper.core.analysis.resolver import TypeResolver
from assetpathdumper.domain.constants import (
    ASSET_INFO_FIELD,
    CONTAINER_FIELD,
    DEFAULT_UNKNOWN_LABEL,
    DEFAULT_UNRESOLVED_POLICY,
)
from assetpathdumper.domain.errors import UnresolvableReference
from assetpathdumper.domain.models import ContainerEntry, StoredObject, reference_from_pptr
from assetpathdumper.domain.store import ObjectStore

logger = logging.getLogger(__name__)


class ContainerExtractor:
    """
    Extracts (path, label) pairs from container-bearing objects.

    Attributes:
        resolved: Rows that produced a real type label.
        unresolved: Rows skipped or placeholder-labelled because their
                    reference could not be followed.
    """

    def __init__(
            self,
            resolver: TypeResolver,
            *,
            unresolved_policy: str = DEFAULT_UNRESOLVED_POLICY,
            unknown_label: str = DEFAULT_UNKNOWN_LABEL,
    ):
        if unresolved_policy not in ("skip", "label"):
            raise ValueError(f"Unknown unresolved policy: {unresolved_policy!r}")
        self.resolver = resolver
        self.unresolved_policy = unresolved_policy
        self.unknown_label = unknown_label or DEFAULT_UNKNOWN_LABEL
        self.resolved = 0
        self.unresolved = 0

    # -------------------------------------------------------------------------
    # PUBLIC API
    # -------------------------------------------------------------------------

    @staticmethod
    def has_container(container_object: StoredObject) -> bool:
        return isinstance(container_object.fields.get(CONTAINER_FIELD), (list, tuple))

    def entries(self, container_object: StoredObject) -> Iterator[ContainerEntry]:
        """
        Yield the raw container rows of an object, before type resolution.

        An object without a container table yields nothing. Malformed rows
        are logged and counted as unresolved.
        """
        rows = container_object.fields.get(CONTAINER_FIELD)
        if not isinstance(rows, (list, tuple)):
            logger.debug(f"Object {container_object.path_id} in '{container_object.file}' has no container table.")
            return

        for position, row in enumerate(rows):
            entry = _parse_row(row, container_object.file)
            if entry is None:
                logger.warning(f"Malformed container row #{position} in '{container_object.file}'; skipped.")
                self.unresolved += 1
                continue
            yield entry

    def extract(self, container_object: StoredObject, store: ObjectStore) -> Iterator[Tuple[str, str]]:
        """
        Yield (path, label) for every container row, in table order.

        Args:
            container_object: AssetBundle or ResourceManager object.
            store: Object store used to follow the row references.
        """
        for entry in self.entries(container_object):
            label = self._label_for(entry, store)
            if label is not None:
                yield entry.path, label

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _label_for(self, entry: ContainerEntry, store: ObjectStore) -> Optional[str]:
        try:
            label = self.resolver.resolve(entry.reference, store)
        except UnresolvableReference as e:
            self.unresolved += 1
            logger.warning(f"Unresolvable container entry '{entry.path}': {e}")
            if self.unresolved_policy == "label":
                return self.unknown_label
            return None

        self.resolved += 1
        return label


def _parse_row(row: Any, origin: str) -> Optional[ContainerEntry]:
    """Split a container row into its path and object reference."""
    if isinstance(row, Mapping):
        path, value = row.get("first"), row.get("second")
    elif isinstance(row, (list, tuple)) and len(row) == 2:
        path, value = row
    else:
        return None

    if not isinstance(path, str) or not path:
        return None

    # AssetBundle rows wrap the pointer in an AssetInfo structure
    if isinstance(value, Mapping) and ASSET_INFO_FIELD in value:
        value = value[ASSET_INFO_FIELD]

    reference = reference_from_pptr(value, origin)
    if reference is None:
        return None
    return ContainerEntry(path=path, reference=reference)
