"""Tree snapshot and restore for dsgit.

A tree object lists ``<kind> <oid> <path>`` lines sorted by path. Paths are
relative to the repository root, so a nested tree repeats its directory
prefix in every entry. Flattening a tree therefore needs no path joining:
blob entries are collected as they are and tree entries are expanded.
"""

import enum
import logging
import os
import shutil
from pathlib import Path, PurePosixPath
from typing import Callable, Iterator, List, Optional, Tuple

from .errors import Corrupt, IOFailure
from .hash import hash_file
from .objects import BLOB, TREE, Tree

logger = logging.getLogger(__name__)

TreeItems = List[Tuple[str, str]]


class EntryKind(enum.Enum):
    """Kind of a directory entry, decided once per entry."""

    FILE = 'file'
    DIRECTORY = 'directory'
    OTHER = 'other'


def _storable(rel_path: str) -> bool:
    """Check a path survives a tree line: no newline, encodable as UTF-8."""
    if '\n' in rel_path:
        return False
    try:
        rel_path.encode()
    except UnicodeEncodeError:
        return False
    return True


def classify(entry: os.DirEntry) -> EntryKind:
    """Classify a directory entry without following symlinks."""
    if entry.is_symlink():
        return EntryKind.OTHER
    if entry.is_file(follow_symlinks=False):
        return EntryKind.FILE
    if entry.is_dir(follow_symlinks=False):
        return EntryKind.DIRECTORY
    return EntryKind.OTHER


class TreeEngine:
    """
    Builds tree objects from the work tree and restores the work tree
    from tree objects.
    """

    def __init__(self, repo):
        """
        Initialize tree engine.

        Args:
            repo: Repository instance
        """
        self.repo = repo

    def _scan(self, directory: Path,
              ignore: Callable[[str], bool]) -> Iterator[Tuple[Path, str, EntryKind]]:
        """Yield (path, relative path, kind) for non-ignored entries of a directory."""
        try:
            with os.scandir(directory) as it:
                entries = [(Path(entry.path), classify(entry)) for entry in it]
        except OSError as err:
            raise IOFailure(f"Failed to read directory {directory}", str(directory), err) from err

        for path, kind in entries:
            rel_path = self.repo.relative_path(path)
            if ignore(rel_path):
                continue
            if not _storable(rel_path):
                logger.debug("skipping %r: name cannot be stored in a tree line", rel_path)
                continue
            yield path, rel_path, kind

    def snapshot(self, directory: Optional[Path] = None,
                 ignore: Optional[Callable[[str], bool]] = None) -> str:
        """
        Store a directory as a tree object.

        Regular files become blobs, subdirectories become nested trees,
        anything else (symlinks, sockets, ...) is skipped, as are names
        containing a newline.

        Args:
            directory: Directory inside the work tree (defaults to the root);
                a relative path is taken from the work tree root
            ignore: Predicate on relative paths (defaults to the repository's)

        Returns:
            str: Object id of the tree
        """
        if directory is None:
            directory = self.repo.work_tree
        if ignore is None:
            ignore = self.repo.ignore

        tree = Tree()
        for path, rel_path, kind in self._scan(self.repo.work_tree / directory, ignore):
            if kind is EntryKind.FILE:
                try:
                    data = path.read_bytes()
                except OSError as err:
                    raise IOFailure(f"Failed to read {rel_path}", str(path), err) from err
                tree.add_entry(BLOB, self.repo.objects.put(BLOB, data), rel_path)
            elif kind is EntryKind.DIRECTORY:
                tree.add_entry(TREE, self.snapshot(path, ignore), rel_path)
            else:
                logger.debug("skipping %s: not a regular file or directory", rel_path)

        return self.repo.write_object(tree)

    def flatten(self, data: bytes) -> TreeItems:
        """
        Expand a serialized tree into (path, blob oid) pairs.

        Blob entries are collected in order; tree entries are read from the
        object store and expanded depth-first.

        Raises:
            Corrupt: If an entry line is malformed or of an unknown kind
        """
        tree = Tree()
        tree.deserialize(data)

        items: TreeItems = []
        for entry in tree.entries:
            if entry.type == BLOB:
                items.append((entry.path, entry.hash))
            elif entry.type == TREE:
                items.extend(self.flatten(self.repo.objects.get(entry.hash, TREE)))
            else:
                raise Corrupt(f"Unknown tree entry kind {entry.type!r} for {entry.path}")
        return items

    def read_tree(self, oid: str) -> TreeItems:
        """Materialize a tree object as (path, blob oid) pairs."""
        return self.flatten(self.repo.objects.get(oid, TREE))

    def iter_files(self, ignore: Optional[Callable[[str], bool]] = None,
                   directory: Optional[Path] = None) -> Iterator[Tuple[str, Path]]:
        """Yield (relative path, path) for every non-ignored regular file."""
        if directory is None:
            directory = self.repo.work_tree
        if ignore is None:
            ignore = self.repo.ignore

        for path, rel_path, kind in self._scan(self.repo.work_tree / directory, ignore):
            if kind is EntryKind.FILE:
                yield rel_path, path
            elif kind is EntryKind.DIRECTORY:
                yield from self.iter_files(ignore, path)

    def working_tree(self, ignore: Optional[Callable[[str], bool]] = None) -> TreeItems:
        """
        Materialize the work tree without writing objects.

        Returns:
            Sorted list of (path, blob oid) pairs
        """
        items = []
        for rel_path, path in self.iter_files(ignore):
            try:
                items.append((rel_path, hash_file(str(path))))
            except OSError as err:
                raise IOFailure(f"Failed to read {rel_path}", str(path), err) from err
        return sorted(items)

    def clear(self, ignore: Optional[Callable[[str], bool]] = None) -> None:
        """
        Remove every non-ignored file and directory from the work tree root.

        Directories are removed recursively.
        """
        if ignore is None:
            ignore = self.repo.ignore

        for path, rel_path, kind in self._scan(self.repo.work_tree, ignore):
            try:
                if kind is EntryKind.FILE:
                    path.unlink()
                elif kind is EntryKind.DIRECTORY:
                    shutil.rmtree(path)
            except OSError as err:
                raise IOFailure(f"Failed to remove {rel_path}", str(path), err) from err

    def restore(self, oid: str, ignore: Optional[Callable[[str], bool]] = None) -> int:
        """
        Replace the work tree with the content of a tree object.

        The tree is resolved before anything is removed. The work tree is
        then cleared and every blob written out, creating parent
        directories. An I/O failure part way leaves the work tree partially
        restored.

        Returns:
            int: Number of files written
        """
        if ignore is None:
            ignore = self.repo.ignore

        items = self.read_tree(oid)
        for path, _ in items:
            pure = PurePosixPath(path)
            if pure.is_absolute() or '..' in pure.parts:
                raise Corrupt(f"Tree {oid} has an entry outside the work tree: {path}")

        self.clear(ignore)

        for path, blob_oid in items:
            target = self.repo.work_tree / path
            data = self.repo.objects.get(blob_oid, BLOB)
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(data)
            except OSError as err:
                raise IOFailure(f"Failed to write {path}", str(target), err) from err

        logger.debug("restored %d file(s) from tree %s", len(items), oid)
        return len(items)
