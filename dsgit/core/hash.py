"""Hash utilities for dsgit."""

import hashlib
import re

OID_RE = re.compile(r'[0-9a-fA-F]{40}')


def hash_object(kind: str, data: bytes) -> str:
    """
    Compute the object id of typed content.

    Objects are hashed as ``<kind>\\0<content>``.

    Args:
        kind: Object kind ('blob', 'tree' or 'commit')
        data: Raw object content

    Returns:
        40-character hex string
    """
    return hashlib.sha1(kind.encode() + b'\0' + data).hexdigest()


def hash_file(filepath: str) -> str:
    """
    Compute the blob id of a file's content.

    Args:
        filepath: Path to file

    Returns:
        40-character hex string
    """
    with open(filepath, 'rb') as f:
        return hash_object('blob', f.read())


def is_oid(value: str) -> bool:
    """Return True if value is exactly 40 hexadecimal characters."""
    return OID_RE.fullmatch(value) is not None
