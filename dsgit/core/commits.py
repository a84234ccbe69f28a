"""Commit creation and history traversal for dsgit."""

import logging
from typing import Callable, Iterator, Optional, Tuple

from .objects import COMMIT, Commit
from .refs import HEAD, RefValue

logger = logging.getLogger(__name__)


class CommitGraph:
    """
    Records snapshots as commits and walks the linear parent chain.
    """

    def __init__(self, repo):
        """
        Initialize commit graph.

        Args:
            repo: Repository instance
        """
        self.repo = repo

    def commit(self, message: str, ignore: Optional[Callable[[str], bool]] = None) -> str:
        """
        Snapshot the work tree and record it as a commit on HEAD.

        The parent is whatever HEAD resolves to (none for the first commit).
        HEAD is updated through its symbolic chain, so committing on a
        branch moves the branch.

        Args:
            message: Commit message
            ignore: Predicate on relative paths (defaults to the repository's)

        Returns:
            str: Object id of the new commit
        """
        tree_oid = self.repo.trees.snapshot(ignore=ignore)
        parent = self.repo.refs.head_oid()

        oid = self.repo.write_object(Commit(tree_oid, parent, message))
        target = self.repo.refs.update(HEAD, RefValue(False, oid), deref=True)

        logger.debug("committed %s (tree %s, parent %s) on %s", oid, tree_oid, parent, target)
        return oid

    def parse(self, oid: str) -> Commit:
        """
        Read a commit object.

        Raises:
            NotFound: If the object does not exist
            TypeMismatch: If the object is not a commit
            Corrupt: If the commit is malformed
        """
        return self.repo.read_object(oid, COMMIT)

    def iter_log(self, oid: Optional[str] = None) -> Iterator[Tuple[str, Commit]]:
        """
        Walk history from a commit (default HEAD) back to the root commit.

        Yields:
            (oid, Commit) pairs, newest first
        """
        if oid is None:
            oid = self.repo.refs.head_oid()

        while oid:
            commit = self.parse(oid)
            yield oid, commit
            oid = commit.parent

    def tree_of(self, oid: str):
        """Materialize the tree recorded by a commit."""
        return self.repo.trees.read_tree(self.parse(oid).tree)

    def head_tree(self):
        """Materialize the HEAD commit's tree, empty before the first commit."""
        oid = self.repo.refs.head_oid()
        if oid is None:
            return []
        return self.tree_of(oid)
