from __future__ import annotations

"""
Path/Type Aggregator.

Counts (path, label) observations for a single input file into an
insertion-ordered index. An aggregator is finalized once and never reused.
"""

from typing import Dict, Iterable, Tuple

from assetpathdumper.domain.models import PathTypeIndex


class PathTypeAggregator:
    """Accumulates the counted path/type index of one input file."""

    def __init__(self) -> None:
        self._index: PathTypeIndex = {}
        self._finalized = False
        self.total = 0

    def observe(self, path: str, label: str) -> None:
        """
        Count one occurrence of label under path.

        Raises:
            RuntimeError: If the aggregator was already finalized.
        """
        if self._finalized:
            raise RuntimeError("Aggregator already finalized.")

        types: Dict[str, int] = self._index.setdefault(path, {})
        types[label] = types.get(label, 0) + 1
        self.total += 1

    def observe_all(self, pairs: Iterable[Tuple[str, str]]) -> None:
        for path, label in pairs:
            self.observe(path, label)

    def finalize(self) -> PathTypeIndex:
        """Close the aggregator and return the accumulated index."""
        self._finalized = True
        return self._index
