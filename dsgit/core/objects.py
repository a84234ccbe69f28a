"""Object model for dsgit."""

from abc import ABC, abstractmethod
from typing import List, Optional

from .errors import Corrupt
from .hash import hash_object

BLOB = 'blob'
TREE = 'tree'
COMMIT = 'commit'

OBJECT_KINDS = (BLOB, TREE, COMMIT)


class DsgitObject(ABC):
    """Base class for all dsgit objects."""

    def __init__(self):
        self._hash: Optional[str] = None

    @abstractmethod
    def serialize(self) -> bytes:
        """
        Serialize object to bytes.

        Returns:
            bytes: Object content without the kind header
        """

    @abstractmethod
    def deserialize(self, data: bytes) -> None:
        """
        Deserialize object from bytes.

        Args:
            data: Object content without the kind header
        """

    @property
    def type(self) -> str:
        """Return object kind name (blob, tree, commit)."""
        return self.__class__.__name__.lower()

    def compute_hash(self) -> str:
        """
        Compute and cache object hash.

        Objects are hashed with their kind as a header.
        Format: <kind>\\0<content>

        Returns:
            str: 40-character SHA-1 hash
        """
        if self._hash is None:
            self._hash = hash_object(self.type, self.serialize())
        return self._hash

    @property
    def hash(self) -> str:
        """Get object hash."""
        return self.compute_hash()


class Blob(DsgitObject):
    """
    Represents file content.

    A blob stores the raw bytes of a file without its name.
    """

    def __init__(self, data: Optional[bytes] = None):
        super().__init__()
        self.data = data or b''

    def serialize(self) -> bytes:
        return self.data

    def deserialize(self, data: bytes) -> None:
        self.data = data
        self._hash = None

    def __repr__(self) -> str:
        return f"Blob(hash={self.hash[:7]}, size={len(self.data)})"


class TreeEntry:
    """
    Represents a single entry in a tree.

    Each entry contains:
    - type: Object kind ('blob' or 'tree')
    - hash: Object id of the blob or subtree
    - path: Path relative to the repository root
    """

    def __init__(self, obj_type: str, obj_hash: str, path: str):
        self.type = obj_type
        self.hash = obj_hash
        self.path = path

    def serialize(self) -> str:
        """Return the entry as one tree line."""
        return f"{self.type} {self.hash} {self.path}\n"

    @classmethod
    def parse(cls, line: str) -> 'TreeEntry':
        """
        Parse one tree line.

        The path is the remainder after the second space, so paths
        may contain spaces.

        Raises:
            Corrupt: If the line is malformed or names an unknown kind
        """
        parts = line.split(' ', 2)
        if len(parts) != 3 or not parts[2]:
            raise Corrupt(f"Malformed tree entry: {line!r}")
        obj_type, obj_hash, path = parts
        if obj_type not in (BLOB, TREE):
            raise Corrupt(f"Unknown tree entry kind {obj_type!r} for {path}")
        return cls(obj_type, obj_hash, path)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TreeEntry):
            return NotImplemented
        return (self.path, self.hash, self.type) == (other.path, other.hash, other.type)

    def __lt__(self, other: 'TreeEntry') -> bool:
        """Sort entries by path for consistent ordering."""
        return self.path < other.path

    def __repr__(self) -> str:
        return f"TreeEntry({self.type} {self.hash[:7]} {self.path})"


class Tree(DsgitObject):
    """
    Represents a directory snapshot.

    A tree contains entries pointing to blobs (files) and other trees
    (subdirectories). Entries are kept sorted by path.
    """

    def __init__(self):
        super().__init__()
        self.entries: List[TreeEntry] = []

    def add_entry(self, obj_type: str, obj_hash: str, path: str) -> None:
        """
        Add entry to tree.

        Args:
            obj_type: Object kind ('blob' or 'tree')
            obj_hash: Object id
            path: Path relative to the repository root
        """
        self.entries.append(TreeEntry(obj_type, obj_hash, path))
        self.entries.sort()
        self._hash = None

    def serialize(self) -> bytes:
        """
        Serialize tree.

        Format: one ``<kind> <oid> <path>\\n`` line per entry, sorted by path.

        Returns:
            bytes: Serialized tree data
        """
        return ''.join(entry.serialize() for entry in sorted(self.entries)).encode()

    def deserialize(self, data: bytes) -> None:
        try:
            text = data.decode()
        except UnicodeDecodeError as err:
            raise Corrupt(f"Tree is not valid UTF-8: {err}") from err
        self.entries = [TreeEntry.parse(line) for line in text.split('\n') if line]
        self._hash = None

    def __repr__(self) -> str:
        return f"Tree(entries={len(self.entries)})"


class Commit(DsgitObject):
    """
    Represents a commit.

    A commit captures a tree, an optional parent commit and a message.
    History is a singly linked list of parents ending at the root commit.
    """

    def __init__(self, tree: str = '', parent: Optional[str] = None, message: str = ''):
        super().__init__()
        self.tree = tree
        self.parent = parent
        self.message = message

    def serialize(self) -> bytes:
        """
        Serialize commit.

        Format:
        tree <tree-hash>
        parent <parent-hash>  (absent on the first commit)

        <commit message>

        Returns:
            bytes: Serialized commit data
        """
        content = f"tree {self.tree}\n"
        if self.parent:
            content += f"parent {self.parent}\n"
        content += f"\n{self.message}\n"
        return content.encode()

    def deserialize(self, data: bytes) -> None:
        try:
            lines = data.decode().split('\n')
        except UnicodeDecodeError as err:
            raise Corrupt(f"Commit is not valid UTF-8: {err}") from err

        if not lines[0].startswith('tree '):
            raise Corrupt(f"Commit must start with a tree line, got {lines[0]!r}")
        self.tree = lines[0][5:]

        self.parent = None
        if len(lines) > 1 and lines[1].startswith('parent '):
            self.parent = lines[1][7:]

        try:
            separator = lines.index('')
        except ValueError:
            raise Corrupt("Commit has no blank line before its message") from None

        message = lines[separator + 1:]
        if message and message[-1] == '':
            message.pop()
        self.message = '\n'.join(message)
        self._hash = None

    def __eq__(self, other) -> bool:
        if not isinstance(other, Commit):
            return NotImplemented
        return (self.tree, self.parent, self.message) == (other.tree, other.parent, other.message)

    def __repr__(self) -> str:
        parent_info = f", parent={self.parent[:7]}" if self.parent else ""
        msg_preview = self.message.split('\n')[0][:50]
        return f"Commit(tree={self.tree[:7]}{parent_info}, msg='{msg_preview}')"
