from __future__ import annotations

"""
Unit tests for the Container Extractor.

Verifies table-order extraction, both container row layouts, and the
handling of unresolvable and malformed rows.
"""

import pytest

from assetpathdumper.core.analysis.aggregator import PathTypeAggregator
from assetpathdumper.core.analysis.extractor import ContainerExtractor
from assetpathdumper.core.analysis.resolver import TypeResolver
from assetpathdumper.domain.models import ContainerEntry, ObjectReference, StoredObject
from helpers import MemoryObjectStore, asset_info, pptr


@pytest.fixture
def extractor(type_database) -> ContainerExtractor:
    return ContainerExtractor(TypeResolver(type_database))


def _bundle(store: MemoryObjectStore, rows) -> StoredObject:
    store.add("CAB-main", 1, "AssetBundle", m_Container=rows)
    return store.find_objects("CAB-main", 142)[0]


def test_asset_bundle_container_extraction(memory_store: MemoryObjectStore, extractor: ContainerExtractor) -> None:
    memory_store.add("CAB-main", 2, "Texture2D")
    memory_store.add("CAB-main", 3, "Material")
    bundle = _bundle(memory_store, [
        ("assets/a.png", asset_info(2)),
        ("assets/b.mat", asset_info(3)),
    ])

    pairs = list(extractor.extract(bundle, memory_store))

    assert pairs == [("assets/a.png", "Texture2D"), ("assets/b.mat", "Material")]

    aggregator = PathTypeAggregator()
    aggregator.observe_all(pairs)
    assert aggregator.finalize() == {
        "assets/a.png": {"Texture2D": 1},
        "assets/b.mat": {"Material": 1},
    }


def test_resource_manager_rows_hold_plain_pointers(memory_store: MemoryObjectStore, extractor: ContainerExtractor) -> None:
    memory_store.add("globalgamemanagers", 7, "Shader")
    memory_store.add("globalgamemanagers", 1, "ResourceManager", m_Container=[
        ("shaders/standard", pptr(7)),
    ])
    manager = memory_store.find_objects("globalgamemanagers", 147)[0]

    assert list(extractor.extract(manager, memory_store)) == [("shaders/standard", "Shader")]


def test_rows_keep_order_and_multiplicity(memory_store: MemoryObjectStore, extractor: ContainerExtractor) -> None:
    memory_store.add("CAB-main", 2, "Mesh")
    memory_store.add("CAB-main", 3, "GameObject")
    bundle = _bundle(memory_store, [
        ("assets/shared.fbx", asset_info(3)),
        ("assets/shared.fbx", asset_info(2)),
        ("assets/shared.fbx", asset_info(2)),
    ])

    pairs = list(extractor.extract(bundle, memory_store))

    assert pairs == [
        ("assets/shared.fbx", "GameObject"),
        ("assets/shared.fbx", "Mesh"),
        ("assets/shared.fbx", "Mesh"),
    ]


def test_pair_mapping_rows_are_accepted(memory_store: MemoryObjectStore, extractor: ContainerExtractor) -> None:
    memory_store.add("CAB-main", 2, "AudioClip")
    bundle = _bundle(memory_store, [{"first": "assets/s.wav", "second": asset_info(2)}])

    assert list(extractor.entries(bundle)) == [
        ContainerEntry("assets/s.wav", ObjectReference(0, 2, "CAB-main")),
    ]


def test_missing_container_yields_nothing(memory_store: MemoryObjectStore, extractor: ContainerExtractor) -> None:
    memory_store.add("CAB-main", 1, "AssetBundle")
    bundle = memory_store.find_objects("CAB-main", 142)[0]

    assert ContainerExtractor.has_container(bundle) is False
    assert list(extractor.extract(bundle, memory_store)) == []


def test_unresolvable_rows_are_skipped(memory_store: MemoryObjectStore, extractor: ContainerExtractor) -> None:
    memory_store.add("CAB-main", 2, "Texture2D")
    bundle = _bundle(memory_store, [
        ("assets/ok.png", asset_info(2)),
        ("assets/gone.png", asset_info(404)),
        ("assets/ext.png", asset_info(2, file_id=3)),
    ])

    pairs = list(extractor.extract(bundle, memory_store))

    assert pairs == [("assets/ok.png", "Texture2D")]
    assert extractor.resolved == 1
    assert extractor.unresolved == 2


def test_unresolvable_rows_can_be_labelled(memory_store: MemoryObjectStore, type_database) -> None:
    extractor = ContainerExtractor(TypeResolver(type_database), unresolved_policy="label", unknown_label="Missing")
    bundle = _bundle(memory_store, [("assets/gone.png", asset_info(404))])

    assert list(extractor.extract(bundle, memory_store)) == [("assets/gone.png", "Missing")]
    assert extractor.unresolved == 1


def test_malformed_rows_are_counted(memory_store: MemoryObjectStore, extractor: ContainerExtractor) -> None:
    memory_store.add("CAB-main", 2, "Texture2D")
    bundle = _bundle(memory_store, [
        ("", asset_info(2)),
        ("assets/no_ptr.png", {"preloadIndex": 0}),
        "garbage",
        ("assets/ok.png", asset_info(2)),
    ])

    assert list(extractor.extract(bundle, memory_store)) == [("assets/ok.png", "Texture2D")]
    assert extractor.unresolved == 3


def test_invalid_policy_rejected(type_database) -> None:
    with pytest.raises(ValueError):
        ContainerExtractor(TypeResolver(type_database), unresolved_policy="abort")


def test_resolved_count_matches_index_total(memory_store: MemoryObjectStore, extractor: ContainerExtractor) -> None:
    """Sum of all counts equals the number of rows that resolved."""
    memory_store.add("CAB-main", 2, "Texture2D")
    memory_store.add("CAB-main", 3, "Sprite")
    memory_store.add("CAB-main", 10, "MonoScript", m_ClassName="Spawner")
    memory_store.add("CAB-main", 11, "MonoBehaviour", m_Script=pptr(10))
    rows = [
        ("assets/ui/icon.png", asset_info(2)),
        ("assets/ui/icon.png", asset_info(3)),
        ("assets/ui/icon.png", asset_info(3)),
        ("assets/prefabs/spawner.prefab", asset_info(11)),
        ("assets/broken", asset_info(500)),
    ]
    bundle = _bundle(memory_store, rows)

    aggregator = PathTypeAggregator()
    aggregator.observe_all(extractor.extract(bundle, memory_store))
    index = aggregator.finalize()

    assert sum(c for types in index.values() for c in types.values()) == extractor.resolved == 4
    assert index["assets/ui/icon.png"] == {"Texture2D": 1, "Sprite": 2}
    assert index["assets/prefabs/spawner.prefab"] == {"Spawner": 1}
