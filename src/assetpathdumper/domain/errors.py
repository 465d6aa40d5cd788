from __future__ import annotations

"""
Domain Error Taxonomy.

Fatal conditions (invalid input path, missing class database) abort the run
at startup. Per-file and per-entry conditions are raised by the analysis
components and caught at the pipeline boundary.
"""

from typing import Optional


class AssetPathDumperError(Exception):
    """Base class for every error raised by the dumper."""


# -----------------------------------------------------------------------------
# FATAL (STARTUP)
# -----------------------------------------------------------------------------

class InvalidInputPath(AssetPathDumperError):
    """The CLI target is missing or is neither a file nor a directory."""


class MissingClassDatabase(AssetPathDumperError):
    """The class database package could not be loaded."""


# -----------------------------------------------------------------------------
# PER FILE
# -----------------------------------------------------------------------------

class StoreLoadError(AssetPathDumperError):
    """The object store could not parse an input file."""


class MissingEligibleObject(AssetPathDumperError):
    """No AssetBundle/ResourceManager object was found in a parsed file."""

    def __init__(self, file_name: str, class_name: str):
        super().__init__(f"No {class_name} object found in '{file_name}'.")
        self.file_name = file_name
        self.class_name = class_name


class MissingContainerField(AssetPathDumperError):
    """A container-bearing object does not expose a container table."""


# -----------------------------------------------------------------------------
# PER ENTRY
# -----------------------------------------------------------------------------

class UnresolvableReference(AssetPathDumperError):
    """An object reference is dangling or points outside the loaded files."""

    def __init__(self, reference: object, reason: Optional[str] = None):
        msg = f"Cannot resolve {reference}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
        self.reference = reference
