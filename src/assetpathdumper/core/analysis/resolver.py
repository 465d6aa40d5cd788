from __future__ import annotations

"""
Type Resolver.

Turns an object reference into a display label. Built-in objects are
labelled with their canonical class name. Script components take one more
bounded step: their script reference is followed and the script's declared
class name becomes the label.
"""

import logging
from dataclasses import dataclass
from typing import Union

from assetpathdumper.core.services.type_database import TypeDatabase
from assetpathdumper.domain.constants import (
    SCRIPT_CLASS_NAME_FIELD,
    SCRIPT_COMPONENT_CLASS,
    SCRIPT_FIELD,
)
from assetpathdumper.domain.errors import UnresolvableReference
from assetpathdumper.domain.models import ObjectReference, StoredObject
from assetpathdumper.domain.store import ObjectStore

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# RESOLUTION OUTCOMES
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Direct:
    """The object's label is known without further lookups."""
    label: str


@dataclass(frozen=True)
class NeedsScriptLookup:
    """The object is a script component; its script must be read."""
    script: ObjectReference
    fallback: str


Resolution = Union[Direct, NeedsScriptLookup]


# -----------------------------------------------------------------------------
# RESOLVER
# -----------------------------------------------------------------------------

class TypeResolver:
    """
    Resolves references to type labels against one type database.

    Args:
        database: Type database of the engine version being processed.
    """

    def __init__(self, database: TypeDatabase):
        self.database = database

    def resolve(self, reference: ObjectReference, store: ObjectStore) -> str:
        """
        Resolve a reference to its display label.

        Raises:
            UnresolvableReference: If the reference itself cannot be followed.
                                   A missing or dangling script falls back
                                   to the generic script component label.
        """
        target = store.resolve(reference)
        outcome = self.classify_object(target)

        if isinstance(outcome, Direct):
            return outcome.label
        return self._resolve_script(outcome, store)

    def classify_object(self, target: StoredObject) -> Resolution:
        """First resolution step: decide whether a script lookup is needed."""
        class_name = self.database.class_name(target.class_id)
        if class_name != SCRIPT_COMPONENT_CLASS:
            return Direct(class_name)

        try:
            script = target.reference(SCRIPT_FIELD)
        except UnresolvableReference as e:
            logger.warning(f"Cannot read {SCRIPT_FIELD} of <{target.file}:0:{target.path_id}>: {e}")
            return Direct(class_name)

        if script is None:
            logger.warning(f"<{target.file}:0:{target.path_id}> has no {SCRIPT_FIELD}; using '{class_name}'.")
            return Direct(class_name)
        return NeedsScriptLookup(script=script, fallback=class_name)

    def _resolve_script(self, outcome: NeedsScriptLookup, store: ObjectStore) -> str:
        """Second and last resolution step. Script failures keep the generic label."""
        try:
            script = store.resolve(outcome.script)
            class_name = script.fields.get(SCRIPT_CLASS_NAME_FIELD)
        except UnresolvableReference as e:
            logger.warning(f"Script {outcome.script} unavailable ({e}); using '{outcome.fallback}'.")
            return outcome.fallback

        if not isinstance(class_name, str) or not class_name:
            logger.debug(f"Script {outcome.script} declares no class name; using '{outcome.fallback}'.")
            return outcome.fallback
        return class_name
