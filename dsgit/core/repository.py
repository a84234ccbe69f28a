"""Repository management for dsgit."""

import logging
from pathlib import Path
from typing import List, Optional

from .errors import IOFailure, RepositoryError, TypeMismatch
from .objects import BLOB, COMMIT, TREE, Blob, Commit, DsgitObject, Tree

logger = logging.getLogger(__name__)

DSGIT_DIR = '.dsgit'

_OBJECT_CLASSES = {
    BLOB: Blob,
    TREE: Tree,
    COMMIT: Commit,
}


class Repository:
    """
    Represents a dsgit repository.

    A repository is an explicit handle on a work tree and its .dsgit
    directory. Every component (object store, refs, trees, commits,
    diff) is reached through it rather than through the current
    directory.
    """

    def __init__(self, path: str = '.', ignore_patterns: Optional[List[str]] = None):
        """
        Initialize repository.

        Args:
            path: Path to repository root (defaults to current directory)
            ignore_patterns: Substring patterns to ignore; when omitted they
                are read from .dsgitignore on every use
        """
        self.work_tree = Path(path).resolve()
        self.dsgit_dir = self.work_tree / DSGIT_DIR
        self.objects_dir = self.dsgit_dir / 'objects'
        self.refs_dir = self.dsgit_dir / 'refs'
        self.heads_dir = self.refs_dir / 'heads'
        self.tags_dir = self.refs_dir / 'tags'
        self.head_file = self.dsgit_dir / 'HEAD'
        self.config_file = self.dsgit_dir / 'config'
        self.ignore_patterns = ignore_patterns

        # Lazy loading to avoid circular imports
        self._object_store = None
        self._ref_manager = None
        self._tree_engine = None
        self._commit_graph = None
        self._diff_engine = None
        self._config = None

    @property
    def objects(self):
        """Get ObjectStore instance."""
        if self._object_store is None:
            from .store import ObjectStore
            self._object_store = ObjectStore(self.objects_dir)
        return self._object_store

    @property
    def refs(self):
        """Get RefManager instance."""
        if self._ref_manager is None:
            from .refs import RefManager
            self._ref_manager = RefManager(self)
        return self._ref_manager

    @property
    def trees(self):
        """Get TreeEngine instance."""
        if self._tree_engine is None:
            from .tree import TreeEngine
            self._tree_engine = TreeEngine(self)
        return self._tree_engine

    @property
    def commits(self):
        """Get CommitGraph instance."""
        if self._commit_graph is None:
            from .commits import CommitGraph
            self._commit_graph = CommitGraph(self)
        return self._commit_graph

    @property
    def diff(self):
        """Get DiffEngine instance."""
        if self._diff_engine is None:
            from dsgit.operations.diff import DiffEngine
            self._diff_engine = DiffEngine(self)
        return self._diff_engine

    @property
    def config(self):
        """Get Config instance."""
        if self._config is None:
            from .config import get_config
            self._config = get_config(self)
        return self._config

    @property
    def ignore(self):
        """Build the ignore predicate for this repository."""
        from dsgit.utils.ignore import IgnoreMatcher, get_ignore_matcher

        glob = self.config.get_bool('core', 'globignore')
        if self.ignore_patterns is not None:
            return IgnoreMatcher(self.ignore_patterns, glob=glob)
        return get_ignore_matcher(self.work_tree, glob=glob)

    def init(self) -> 'Repository':
        """
        Initialize a new repository.

        Creates the .dsgit directory structure:
        .dsgit/
        ├── objects/       # Object database
        ├── refs/
        │   ├── heads/     # Branch references
        │   └── tags/      # Tag references
        ├── HEAD           # Symbolic ref to the default branch
        └── config         # Repository configuration

        Returns:
            Repository: self for method chaining

        Raises:
            RepositoryError: If repository already exists
            IOFailure: If the directories cannot be created
        """
        if self.dsgit_dir.exists():
            raise RepositoryError(f"Repository already exists at {self.dsgit_dir}")

        try:
            self.dsgit_dir.mkdir(parents=True)
            self.objects_dir.mkdir()
            self.refs_dir.mkdir()
            self.heads_dir.mkdir()
            self.tags_dir.mkdir()
            self.config_file.write_text('[core]\n\trepositoryformatversion = 0\n')
        except OSError as err:
            raise IOFailure(f"Failed to initialize repository at {self.work_tree}",
                            str(self.dsgit_dir), err) from err

        branch = self.config.get('init', 'defaultbranch')
        self.refs.set_head(f'refs/heads/{branch}', symbolic=True)

        logger.debug("initialized repository at %s (HEAD -> %s)", self.dsgit_dir, branch)
        return self

    @classmethod
    def find_repository(cls, path: str = '.') -> Optional['Repository']:
        """
        Find repository by searching up the directory tree.

        Searches from the given path upwards until it finds a .dsgit directory
        or reaches the filesystem root.

        Args:
            path: Starting path for search

        Returns:
            Repository if found, None otherwise
        """
        current = Path(path).resolve()

        while True:
            if (current / DSGIT_DIR).is_dir():
                return cls(str(current))

            if current == current.parent:
                return None

            current = current.parent

    def relative_path(self, path: Path) -> str:
        """Return a work tree path as a '/' separated relative string."""
        return path.relative_to(self.work_tree).as_posix()

    def write_object(self, obj: DsgitObject) -> str:
        """
        Write object to the object store.

        Args:
            obj: Object to write

        Returns:
            str: Object id
        """
        return self.objects.put(obj.type, obj.serialize())

    def read_object(self, oid: str, expected_kind: Optional[str] = None) -> DsgitObject:
        """
        Read object from the object store.

        Args:
            oid: 40-character object id
            expected_kind: Required kind, or None to accept any

        Returns:
            DsgitObject: Deserialized object (Blob, Tree, or Commit)

        Raises:
            NotFound: If object not found
            TypeMismatch: If the object is not of expected_kind
            Corrupt: If the object cannot be parsed
        """
        kind, content = self.objects.read(oid)
        if expected_kind is not None and kind != expected_kind:
            raise TypeMismatch(oid, expected_kind, kind)

        obj = _OBJECT_CLASSES[kind]()
        obj.deserialize(content)
        return obj

    def __repr__(self) -> str:
        return f"Repository(path={self.work_tree})"
