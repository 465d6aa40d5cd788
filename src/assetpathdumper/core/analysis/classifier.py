from __future__ import annotations

"""
File Type Classifier.

Decides from the first bytes of a file whether it is a bundle archive, a
serialized object file, or something the dumper does not understand. The
probe is a pure function of the header bytes.
"""

import logging
import re
import struct
from typing import Optional

from assetpathdumper.domain.constants import (
    BUNDLE_SIGNATURE,
    DEFAULT_VERSION_SCAN,
    FORMAT_VERSION_OFFSET,
    HEADER_PROBE_SIZE,
    MAX_FORMAT_VERSION,
    MIN_HEADER_SIZE,
    VERSION_STRING_MAX_LEN,
    VERSION_STRING_OFFSET,
)
from assetpathdumper.domain.models import FileClassification

logger = logging.getLogger(__name__)

_VERSION_CHARS_RX = re.compile(r"[a-zA-Z0-9.]")
_FORMAT_STRUCT = struct.Struct(">i")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def classify(data: bytes, *, version_scan: str = DEFAULT_VERSION_SCAN) -> FileClassification:
    """
    Classify a file from its header bytes.

    The length check comes first: anything shorter than 32 bytes is
    unrecognized, even when it starts with the bundle signature.

    Args:
        data: Leading bytes of the file (at least the header probe).
        version_scan: 'full' validates the whole version string, 'compat'
                      only samples its first character.

    Returns:
        FileClassification: Coarse kind of the file.
    """
    if len(data) < MIN_HEADER_SIZE:
        return FileClassification.UNRECOGNIZED

    if data[:len(BUNDLE_SIGNATURE)] == BUNDLE_SIGNATURE:
        return FileClassification.BUNDLE_ARCHIVE

    (format_version,) = _FORMAT_STRUCT.unpack_from(data, FORMAT_VERSION_OFFSET)
    version = read_version_string(data, single_char=(version_scan == "compat"))

    if format_version < MAX_FORMAT_VERSION and not _VERSION_CHARS_RX.sub("", version):
        return FileClassification.SERIALIZED_OBJECT_FILE
    return FileClassification.UNRECOGNIZED


def classify_file(file_path: str, *, version_scan: str = DEFAULT_VERSION_SCAN) -> FileClassification:
    """
    Classify a file on disk by probing its header.

    Reads only the bytes needed by classify() and releases the handle
    before returning.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    with open(file_path, "rb") as f:
        header = f.read(HEADER_PROBE_SIZE)
    kind = classify(header, version_scan=version_scan)
    logger.debug(f"Classified '{file_path}' as {kind.value}.")
    return kind


def read_version_string(data: bytes, *, single_char: bool = False, offset: Optional[int] = None) -> str:
    """
    Read the NUL-terminated engine version string of a serialized file header.

    Characters are accumulated until a NUL byte, the end of the data or the
    length cap. With single_char the scan stops after the first character.
    """
    start = VERSION_STRING_OFFSET if offset is None else offset
    limit = 1 if single_char else VERSION_STRING_MAX_LEN

    chars = []
    for byte in data[start:]:
        if byte == 0x00:
            break
        chars.append(chr(byte))
        if len(chars) >= limit:
            break
    return "".join(chars)
