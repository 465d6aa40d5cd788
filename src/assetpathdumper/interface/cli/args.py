from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed namespace into
configuration overrides understood by the pipeline validator.
"""

import argparse
from typing import Any, Dict

from assetpathdumper.domain.constants import (
    CLASS_PACKAGE_FILE,
    REPORT_FILE,
    UNRESOLVED_POLICIES,
    VERSION_SCAN_MODES,
)

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the dumper CLI.

    The input target is optional at the parser level so that a missing
    argument is reported with the dumper's own diagnostic and exit code.
    """
    p = argparse.ArgumentParser(
        prog="assetpathdumper",
        description="Dump container paths and the object types stored under them "
                    "for Unity asset bundles and globalgamemanagers files.",
    )

    p.add_argument(
        "input_path",
        nargs="?",
        default=None,
        help="File or directory to scan (directories are walked recursively).",
    )

    # --- Artifacts ---
    p.add_argument(
        "-o", "--output",
        dest="report_path",
        default=None,
        help=f"HTML report location (default: ./{REPORT_FILE}).",
    )
    p.add_argument(
        "--class-package",
        dest="class_package",
        default=None,
        help=f"Class database package (default: ./{CLASS_PACKAGE_FILE}).",
    )

    # --- Resolution ---
    p.add_argument(
        "--unresolved",
        dest="unresolved_policy",
        choices=UNRESOLVED_POLICIES,
        default=None,
        help="What to do with container rows whose object cannot be resolved.",
    )
    p.add_argument(
        "--unknown-label",
        dest="unknown_label",
        default=None,
        help="Type label used for unresolved rows with '--unresolved label'.",
    )
    p.add_argument(
        "--version-scan",
        dest="version_scan",
        choices=VERSION_SCAN_MODES,
        default=None,
        help="Header version-string check: 'full' string or 'compat' first character only.",
    )

    # --- Diagnostics ---
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write diagnostics to a rotating log file.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log per-file progress (INFO).",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print a JSON run summary before finishing.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Unset options are left out so that domain defaults apply.
    """
    overrides: Dict[str, Any] = {"input_path": args.input_path or ""}

    for key in ("report_path", "class_package", "unresolved_policy", "unknown_label", "version_scan"):
        value = getattr(args, key)
        if value is not None:
            overrides[key] = value

    return overrides


def log_level(args: argparse.Namespace) -> str:
    if args.debug:
        return "DEBUG"
    if args.verbose:
        return "INFO"
    return "WARNING"
