from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Centralizes header signatures, well-known engine class names, field names
of the container-bearing objects, and the default artifact locations used
by the pipeline and the CLI.
"""

from typing import FrozenSet

# -----------------------------------------------------------------------------
# HEADER PROBE
# -----------------------------------------------------------------------------

BUNDLE_SIGNATURE = b"UnityFS"
MIN_HEADER_SIZE = 0x20
FORMAT_VERSION_OFFSET = 0x08
VERSION_STRING_OFFSET = 0x14
VERSION_STRING_MAX_LEN = 0xFF
MAX_FORMAT_VERSION = 0xFF

# Bytes needed to answer every classification question
HEADER_PROBE_SIZE = VERSION_STRING_OFFSET + VERSION_STRING_MAX_LEN

# -----------------------------------------------------------------------------
# ENGINE CLASSES AND FIELDS
# -----------------------------------------------------------------------------

ASSET_BUNDLE_CLASS = "AssetBundle"
RESOURCE_MANAGER_CLASS = "ResourceManager"
SCRIPT_COMPONENT_CLASS = "MonoBehaviour"

CONTAINER_FIELD = "m_Container"
ASSET_INFO_FIELD = "asset"
SCRIPT_FIELD = "m_Script"
SCRIPT_CLASS_NAME_FIELD = "m_ClassName"

PPTR_FILE_ID = "m_FileID"
PPTR_PATH_ID = "m_PathID"

# -----------------------------------------------------------------------------
# DEFAULTS
# -----------------------------------------------------------------------------

CLASS_PACKAGE_FILE = "classdata.tpk"
CLASS_PACKAGE_MAGIC = b"TPK*"
REPORT_FILE = "assetPathsDump.html"

ELIGIBLE_SERIALIZED_NAMES: FrozenSet[str] = frozenset({"globalgamemanagers"})

UNRESOLVED_POLICIES = ("skip", "label")
DEFAULT_UNRESOLVED_POLICY = "skip"
DEFAULT_UNKNOWN_LABEL = "Unknown"

VERSION_SCAN_MODES = ("full", "compat")
DEFAULT_VERSION_SCAN = "full"
