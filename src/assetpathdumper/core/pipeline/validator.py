from __future__ import annotations

"""
Configuration Validation Service.

Normalizes the configuration dictionary before the pipeline runs: fills
missing keys with domain defaults, coerces untrusted CLI values and
rejects unknown choices with a warning and a fallback.
"""

import logging
import os
from typing import Any, Dict, List, Sequence, Tuple

from assetpathdumper.domain.config import get_default_config
from assetpathdumper.domain.constants import UNRESOLVED_POLICIES, VERSION_SCAN_MODES

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions on type mismatch instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized configuration and warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update({k: v for k, v in config.items() if v is not None})

    for field in ("class_package", "report_path", "unknown_label"):
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    # input_path may legitimately be empty; the CLI reports it
    raw_input = merged.get("input_path")
    merged["input_path"] = raw_input.strip() if isinstance(raw_input, str) else ""

    merged["unresolved_policy"] = _as_choice(
        merged.get("unresolved_policy"), UNRESOLVED_POLICIES,
        defaults["unresolved_policy"], "unresolved_policy", warnings, strict
    )
    merged["version_scan"] = _as_choice(
        merged.get("version_scan"), VERSION_SCAN_MODES,
        defaults["version_scan"], "version_scan", warnings, strict
    )

    names = _as_list_str(
        merged.get("eligible_serialized_names"), defaults["eligible_serialized_names"],
        "eligible_serialized_names", warnings, strict
    )
    merged["eligible_serialized_names"] = [n.lower() for n in names]

    for field in ("class_package", "report_path"):
        merged[field] = os.path.abspath(merged[field])

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_choice(
        value: Any,
        choices: Sequence[str],
        fallback: str,
        field: str,
        warnings: List[str],
        strict: bool,
) -> str:
    """Accept only one of a fixed set of keywords (case-insensitive)."""
    if isinstance(value, str) and value.strip().lower() in choices:
        return value.strip().lower()

    msg = f"Invalid field '{field}': expected one of {', '.join(choices)}, received {value!r}."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using '{fallback}'.")
    return fallback


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Ensure input is a list of sanitized strings, supporting CSV parsing."""
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        items = [x.strip() for x in value.split(",") if x.strip()]
        if items:
            warnings.append(f"Field '{field}' converted from CSV string to list.")
            return items
        return list(fallback)

    if isinstance(value, (list, tuple)):
        out: List[str] = []
        for i, item in enumerate(value):
            if isinstance(item, str):
                s = item.strip()
                if s:
                    out.append(s)
            else:
                msg = f"Invalid item in '{field}[{i}]': expected str."
                if strict:
                    raise TypeError(msg)
                warnings.append(f"{msg} Item discarded.")
        return out if out else list(fallback)

    msg = f"Invalid field '{field}': expected list[str], received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return list(fallback)
