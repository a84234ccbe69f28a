"""Content-addressed object store for dsgit.

Objects live uncompressed at ``.dsgit/objects/<oid>`` as
``<kind>\\0<content>``. The store is append-only: writing the same object
twice is a no-op.
"""

import logging
from pathlib import Path
from typing import Optional

from .errors import Corrupt, IOFailure, NotFound, TypeMismatch
from .hash import hash_object
from .objects import OBJECT_KINDS

logger = logging.getLogger(__name__)


class ObjectStore:
    """Reads and writes raw typed content keyed by its hash."""

    def __init__(self, objects_dir: Path):
        """
        Initialize object store.

        Args:
            objects_dir: Directory holding one file per object
        """
        self.objects_dir = objects_dir

    def object_path(self, oid: str) -> Path:
        """Get filesystem path for an object."""
        return self.objects_dir / oid

    def exists(self, oid: str) -> bool:
        """Check if object exists in the store."""
        return self.object_path(oid).is_file()

    def put(self, kind: str, content: bytes) -> str:
        """
        Store typed content.

        Args:
            kind: Object kind ('blob', 'tree' or 'commit')
            content: Raw content

        Returns:
            str: Object id of the content

        Raises:
            TypeMismatch: If kind is not a known object kind
            IOFailure: If the object file cannot be written
        """
        if kind not in OBJECT_KINDS:
            raise TypeMismatch('<new>', '|'.join(OBJECT_KINDS), kind)

        oid = hash_object(kind, content)
        path = self.object_path(oid)

        if path.exists():
            logger.debug("object %s (%s) already stored", oid, kind)
            return oid

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(kind.encode() + b'\0' + content)
        except OSError as err:
            raise IOFailure(f"Failed to write object {oid}", str(path), err) from err

        logger.debug("stored %s %s (%d bytes)", kind, oid, len(content))
        return oid

    def read(self, oid: str):
        """
        Read an object and split off its kind header.

        Returns:
            Tuple of (kind, content)

        Raises:
            NotFound: If no object exists at oid
            Corrupt: If the object file has no valid kind header
            IOFailure: If the object file cannot be read
        """
        path = self.object_path(oid)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            raise NotFound(f"Object {oid} not found") from None
        except IsADirectoryError:
            raise NotFound(f"Object {oid} not found") from None
        except OSError as err:
            raise IOFailure(f"Failed to read object {oid}", str(path), err) from err

        kind, sep, content = raw.partition(b'\0')
        if not sep:
            raise Corrupt(f"Object {oid} has no kind header")

        kind = kind.decode('ascii', errors='replace')
        if kind not in OBJECT_KINDS:
            raise Corrupt(f"Object {oid} has unknown kind {kind!r}")

        return kind, content

    def get(self, oid: str, expected_kind: Optional[str]) -> bytes:
        """
        Read the content of an object.

        Args:
            oid: Object id
            expected_kind: Kind the caller requires, or None to accept any

        Returns:
            bytes: Raw content without the kind header

        Raises:
            NotFound: If no object exists at oid
            TypeMismatch: If the stored kind differs from expected_kind
            Corrupt: If the object file is malformed
        """
        kind, content = self.read(oid)
        if expected_kind is not None and kind != expected_kind:
            raise TypeMismatch(oid, expected_kind, kind)
        return content

    def read_kind(self, oid: str) -> str:
        """Return the kind of a stored object."""
        return self.read(oid)[0]
