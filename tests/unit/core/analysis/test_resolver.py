from __future__ import annotations

"""
Unit tests for the Type Resolver.

Verifies built-in labels, the single script indirection and the failure
modes of dangling references and scripts.
"""

import pytest

from assetpathdumper.core.analysis.extractor import ContainerExtractor
from assetpathdumper.core.analysis.resolver import Direct, NeedsScriptLookup, TypeResolver
from assetpathdumper.domain.errors import UnresolvableReference
from assetpathdumper.domain.models import ObjectReference, StoredObject
from helpers import MemoryObjectStore, asset_info, pptr


def test_builtin_object_uses_class_name(memory_store: MemoryObjectStore, type_database) -> None:
    ref = memory_store.add("CAB-a", 1, "Texture2D")
    assert TypeResolver(type_database).resolve(ref, memory_store) == "Texture2D"


def test_script_component_uses_script_class_name(memory_store: MemoryObjectStore, type_database) -> None:
    memory_store.add("CAB-a", 10, "MonoScript", m_ClassName="PlayerController")
    ref = memory_store.add("CAB-a", 11, "MonoBehaviour", m_Script=pptr(10))

    label = TypeResolver(type_database).resolve(ref, memory_store)

    assert label == "PlayerController"
    assert label != "MonoBehaviour"


def test_script_lookup_follows_external_reference(type_database) -> None:
    store = MemoryObjectStore()
    store.add_file("CAB-a", externals=["CAB-scripts"])
    store.add("CAB-scripts", 5, "MonoScript", m_ClassName="EnemyAI")
    ref = store.add("CAB-a", 1, "MonoBehaviour", m_Script=pptr(5, file_id=1))

    assert TypeResolver(type_database).resolve(ref, store) == "EnemyAI"


def test_script_indirection_is_single_step(memory_store: MemoryObjectStore, type_database) -> None:
    """The resolved script is never itself re-resolved, whatever its fields."""
    memory_store.add("CAB-a", 10, "MonoScript", m_ClassName="Outer", m_Script=pptr(99))
    ref = memory_store.add("CAB-a", 11, "MonoBehaviour", m_Script=pptr(10))

    assert TypeResolver(type_database).resolve(ref, memory_store) == "Outer"
    assert memory_store.resolve_calls == 2


def test_empty_script_class_name_falls_back(memory_store: MemoryObjectStore, type_database) -> None:
    memory_store.add("CAB-a", 10, "MonoScript", m_ClassName="")
    ref = memory_store.add("CAB-a", 11, "MonoBehaviour", m_Script=pptr(10))

    assert TypeResolver(type_database).resolve(ref, memory_store) == "MonoBehaviour"


def test_dangling_reference_raises(memory_store: MemoryObjectStore, type_database) -> None:
    memory_store.add_file("CAB-a")
    with pytest.raises(UnresolvableReference):
        TypeResolver(type_database).resolve(ObjectReference(0, 404, "CAB-a"), memory_store)


def test_dangling_script_reference_keeps_generic_label(memory_store: MemoryObjectStore, type_database) -> None:
    ref = memory_store.add("CAB-a", 11, "MonoBehaviour", m_Script=pptr(404))
    assert TypeResolver(type_database).resolve(ref, memory_store) == "MonoBehaviour"


def test_script_component_without_script_field_keeps_generic_label(
    memory_store: MemoryObjectStore, type_database
) -> None:
    ref = memory_store.add("CAB-a", 11, "MonoBehaviour")
    assert TypeResolver(type_database).resolve(ref, memory_store) == "MonoBehaviour"


def test_script_in_unloaded_file_keeps_row(type_database) -> None:
    """A script living in a bundle that is not loaded still yields a row."""
    store = MemoryObjectStore()
    store.add_file("CAB-a", externals=["CAB-scripts"])
    store.add_file("CAB-scripts")
    store.add("CAB-a", 2, "MonoBehaviour", m_Script=pptr(5, file_id=1))
    bundle = store.add("CAB-a", 1, "AssetBundle", m_Container=[("assets/settings.asset", asset_info(2))])

    extractor = ContainerExtractor(TypeResolver(type_database))
    pairs = list(extractor.extract(store.resolve(bundle), store))

    assert pairs == [("assets/settings.asset", "MonoBehaviour")]
    assert extractor.unresolved == 0


def test_classify_object_outcomes(type_database) -> None:
    resolver = TypeResolver(type_database)
    mesh = StoredObject("f", 1, type_database.class_id("Mesh"))
    behaviour = StoredObject("f", 2, type_database.class_id("MonoBehaviour"), {"m_Script": pptr(3)})

    assert resolver.classify_object(mesh) == Direct("Mesh")
    outcome = resolver.classify_object(behaviour)
    assert isinstance(outcome, NeedsScriptLookup)
    assert outcome.script == ObjectReference(0, 3, "f")


def test_unknown_class_id_renders_as_number(type_database) -> None:
    resolver = TypeResolver(type_database)
    assert resolver.classify_object(StoredObject("f", 1, 987654)) == Direct("987654")
