from __future__ import annotations

"""
Input Discovery Service.

Expands the CLI target into the ordered list of files to inspect. A single
file is used as-is; a directory is walked recursively in sorted order so
that reports are reproducible across runs.
"""

import logging
import os
from typing import Iterable, List

from assetpathdumper.domain.errors import InvalidInputPath

logger = logging.getLogger(__name__)


def collect_input_files(input_path: str) -> List[str]:
    """
    Resolve the input target into absolute file paths.

    Args:
        input_path: File or directory given on the command line.

    Returns:
        List[str]: Files to classify, in deterministic order.

    Raises:
        InvalidInputPath: If the target is empty or neither a file nor a directory.
    """
    if not input_path:
        raise InvalidInputPath("No file/directory specified")

    target = os.path.abspath(input_path)
    if os.path.isfile(target):
        return [target]
    if os.path.isdir(target):
        files = list(yield_directory_files(target))
        logger.debug(f"Discovered {len(files)} files under '{target}'.")
        return files

    raise InvalidInputPath("Specified file/directory was not found")


def yield_directory_files(root_dir: str) -> Iterable[str]:
    """Walk a directory tree and yield every regular file, sorted per level."""
    for root, dirs, files in os.walk(root_dir):
        dirs.sort()
        files.sort()
        for file_name in files:
            file_path = os.path.join(root, file_name)
            if os.path.isfile(file_path):
                yield file_path
