from __future__ import annotations

"""
Configuration Domain Defaults.

The dumper keeps no state between runs: the effective configuration is
the default dictionary below, merged with CLI overrides and normalized by
the pipeline validator.
"""

import os
from typing import Any, Dict

from assetpathdumper.domain.constants import (
    CLASS_PACKAGE_FILE,
    DEFAULT_UNKNOWN_LABEL,
    DEFAULT_UNRESOLVED_POLICY,
    DEFAULT_VERSION_SCAN,
    ELIGIBLE_SERIALIZED_NAMES,
    REPORT_FILE,
)


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Artifact locations are resolved against the current working directory,
    where the class package is expected and the report is written.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    base = os.getcwd()
    return {
        # IO Paths
        "input_path": "",
        "class_package": os.path.join(base, CLASS_PACKAGE_FILE),
        "report_path": os.path.join(base, REPORT_FILE),

        # Eligibility
        "eligible_serialized_names": sorted(ELIGIBLE_SERIALIZED_NAMES),

        # Resolution
        "unresolved_policy": DEFAULT_UNRESOLVED_POLICY,
        "unknown_label": DEFAULT_UNKNOWN_LABEL,

        # Classification
        "version_scan": DEFAULT_VERSION_SCAN,
    }
