"""Reference management for dsgit."""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from .errors import CycleDetected, IOFailure, NameResolutionFailure, RepositoryError
from .hash import is_oid
from .objects import COMMIT

logger = logging.getLogger(__name__)

HEAD = 'HEAD'
HEADS_PREFIX = 'refs/heads/'
TAGS_PREFIX = 'refs/tags/'
SYMBOLIC_MARKER = 'ref:'


class RefValue:
    """
    Value of a reference.

    A symbolic ref holds another ref name in ``value``; a direct ref
    holds an object id. ``name`` is the ref the value was read from.
    """

    def __init__(self, symbolic: bool, value: str, name: Optional[str] = None):
        self.symbolic = symbolic
        self.value = value
        self.name = name

    def serialize(self) -> str:
        """Return the on-disk form of the value."""
        if self.symbolic:
            return f"{SYMBOLIC_MARKER}{self.value}"
        return self.value

    def __eq__(self, other) -> bool:
        if not isinstance(other, RefValue):
            return NotImplemented
        return (self.symbolic, self.value) == (other.symbolic, other.value)

    def __repr__(self) -> str:
        kind = 'symbolic' if self.symbolic else 'direct'
        return f"RefValue({kind} {self.value} @ {self.name})"


def is_ref_name(name: str) -> bool:
    """
    Check whether name may be stored as a ref.

    Only HEAD and names under refs/ are refs. Empty components and '..'
    are rejected so a ref never points outside the refs namespace.
    """
    if name == HEAD:
        return True
    if not name.startswith('refs/'):
        return False
    parts = name.split('/')
    return all(part and part not in ('.', '..') for part in parts)


class RefManager:
    """
    Manages references (branches, tags, HEAD).

    Handles:
    - Symbolic references (HEAD pointing to a branch)
    - Direct references (detached HEAD, branches, tags)
    - Revision name resolution
    - Moving HEAD by switch and reset
    """

    def __init__(self, repo):
        """
        Initialize reference manager.

        Args:
            repo: Repository instance
        """
        self.repo = repo
        self.dsgit_dir = repo.dsgit_dir
        self.refs_dir = repo.refs_dir

    def ref_path(self, name: str) -> Path:
        """Get filesystem path for a ref name."""
        return self.dsgit_dir / name

    def _read(self, name: str) -> Optional[RefValue]:
        if not is_ref_name(name):
            return None

        path = self.ref_path(name)
        if not path.is_file():
            return None

        try:
            content = path.read_text().strip()
        except OSError as err:
            raise IOFailure(f"Failed to read ref {name}", str(path), err) from err

        if content.startswith(SYMBOLIC_MARKER):
            return RefValue(True, content[len(SYMBOLIC_MARKER):].strip(), name)
        return RefValue(False, content, name)

    def _walk(self, name: str, deref: bool) -> Tuple[str, Optional[RefValue]]:
        """
        Follow a ref, returning the last name reached and its value.

        Raises:
            CycleDetected: If a symbolic ref chain revisits a name
        """
        visited = []
        while True:
            if name in visited:
                raise CycleDetected(visited + [name])
            visited.append(name)

            ref = self._read(name)
            if ref is None or not ref.symbolic or not deref:
                return name, ref
            name = ref.value

    def resolve(self, name: str, deref: bool = True) -> Optional[RefValue]:
        """
        Read a reference.

        Args:
            name: Ref name (e.g., 'HEAD', 'refs/heads/main')
            deref: Follow symbolic refs to the final direct ref

        Returns:
            RefValue, or None if the ref (or the end of its chain) does not
            exist yet
        """
        return self._walk(name, deref)[1]

    def update(self, name: str, ref: RefValue, deref: bool = True) -> str:
        """
        Write a reference.

        With deref, the value is written to the last ref in the symbolic
        chain starting at name, so updating a symbolic HEAD moves its
        branch.

        Args:
            name: Ref name to update
            ref: New value
            deref: Follow symbolic refs before writing

        Returns:
            str: Name of the ref actually written

        Raises:
            NameResolutionFailure: If name is not a valid ref name
            IOFailure: If the ref file cannot be written
        """
        if not ref.value:
            raise ValueError(f"Refusing to write an empty value to {name}")

        target = self._walk(name, deref)[0] if deref else name
        if not is_ref_name(target):
            raise NameResolutionFailure(target)

        path = self.ref_path(target)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(ref.serialize())
        except OSError as err:
            raise IOFailure(f"Failed to write ref {target}", str(path), err) from err

        logger.debug("updated %s -> %s", target, ref.serialize())
        return target

    def delete_ref(self, name: str) -> bool:
        """
        Delete a reference.

        Returns:
            True if deleted, False if not found
        """
        if not is_ref_name(name):
            return False

        path = self.ref_path(name)
        if not path.is_file():
            return False

        try:
            path.unlink()
        except OSError as err:
            raise IOFailure(f"Failed to delete ref {name}", str(path), err) from err

        logger.debug("deleted %s", name)
        return True

    def set_head(self, target: str, symbolic: bool = True) -> None:
        """
        Point HEAD at a branch ref name or directly at a commit.

        HEAD itself is always rewritten; the branch it may point to is left
        alone.
        """
        self.update(HEAD, RefValue(symbolic, target), deref=False)

    def head_oid(self) -> Optional[str]:
        """Return the commit HEAD resolves to, or None before the first commit."""
        ref = self.resolve(HEAD)
        return ref.value if ref else None

    def current_branch(self) -> Optional[str]:
        """
        Get the current branch name.

        Returns:
            Branch name or None if in detached HEAD state
        """
        ref = self.resolve(HEAD, deref=False)
        if ref is None or not ref.symbolic:
            return None
        if ref.value.startswith(HEADS_PREFIX):
            return ref.value[len(HEADS_PREFIX):]
        return None

    def is_detached(self) -> bool:
        """Check if HEAD points directly at a commit."""
        ref = self.resolve(HEAD, deref=False)
        return ref is not None and not ref.symbolic

    def is_branch(self, name: str) -> bool:
        """Check if a branch with this name exists."""
        return self.resolve(HEADS_PREFIX + name) is not None

    def resolve_name_to_oid(self, name: str) -> str:
        """
        Resolve a revision name to an object id.

        Tries, in order: the literal name, refs/<name>, refs/tags/<name>,
        refs/heads/<name>. The first existing ref wins. Otherwise a name of
        exactly 40 hex characters is taken as a raw object id. '@' is an
        alias for HEAD.

        Raises:
            NameResolutionFailure: If nothing matches
        """
        if name == '@':
            name = HEAD

        candidates = [name, f'refs/{name}', f'{TAGS_PREFIX}{name}', f'{HEADS_PREFIX}{name}']
        for candidate in candidates:
            ref = self.resolve(candidate)
            if ref is not None:
                logger.debug("resolved %s via %s to %s", name, candidate, ref.value)
                return ref.value

        if is_oid(name):
            return name

        raise NameResolutionFailure(name)

    def switch(self, name: str) -> str:
        """
        Check out a branch, tag or commit.

        Restores the commit's tree into the work tree, then attaches HEAD to
        the branch if name is one, otherwise detaches HEAD at the commit.

        Returns:
            str: Commit id now checked out
        """
        oid = self.resolve_name_to_oid(name)
        commit = self.repo.commits.parse(oid)
        self.repo.trees.restore(commit.tree)

        branch = name[len(HEADS_PREFIX):] if name.startswith(HEADS_PREFIX) else name
        if self.is_branch(branch):
            self.set_head(HEADS_PREFIX + branch, symbolic=True)
        else:
            self.set_head(oid, symbolic=False)

        return oid

    def reset(self, oid: str) -> None:
        """
        Move HEAD directly to a commit, detaching it from any branch.

        The work tree is left untouched.
        """
        self.repo.read_object(oid, COMMIT)
        self.set_head(oid, symbolic=False)

    def create_branch(self, name: str, oid: str) -> str:
        """
        Create (or overwrite) a branch pointing at a commit.

        HEAD is not moved.

        Returns:
            str: Full ref name of the branch
        """
        return self._create(HEADS_PREFIX + name, oid)

    def create_tag(self, name: str, oid: str) -> str:
        """
        Create (or overwrite) a tag pointing at a commit.

        Tags are always direct refs.

        Returns:
            str: Full ref name of the tag
        """
        return self._create(TAGS_PREFIX + name, oid)

    def _create(self, ref_name: str, oid: str) -> str:
        if not is_ref_name(ref_name):
            raise NameResolutionFailure(ref_name)
        self.repo.read_object(oid, COMMIT)
        return self.update(ref_name, RefValue(False, oid), deref=False)

    def delete_branch(self, name: str) -> bool:
        """
        Delete a branch.

        Raises:
            RepositoryError: If the branch is checked out
        """
        if self.current_branch() == name:
            raise RepositoryError(f"Cannot delete the checked out branch '{name}'")
        return self.delete_ref(HEADS_PREFIX + name)

    def delete_tag(self, name: str) -> bool:
        """Delete a tag."""
        return self.delete_ref(TAGS_PREFIX + name)

    def list_refs(self, deref: bool = True, prefix: str = '') -> List[Tuple[str, RefValue]]:
        """
        List HEAD and every ref under refs/.

        Refs whose chain ends at a missing ref (an unborn branch) are left
        out.

        Args:
            deref: Follow symbolic refs
            prefix: Only list names starting with this prefix

        Returns:
            List of (ref_name, RefValue) tuples sorted by name
        """
        names = [HEAD]
        if self.refs_dir.exists():
            names.extend(
                path.relative_to(self.dsgit_dir).as_posix()
                for path in self.refs_dir.rglob('*') if path.is_file()
            )

        refs = []
        for name in sorted(names):
            if not name.startswith(prefix):
                continue
            ref = self.resolve(name, deref)
            if ref is not None:
                refs.append((name, ref))
        return refs

    def list_branches(self) -> List[Tuple[str, str]]:
        """
        List all branches.

        Returns:
            List of (branch_name, commit_hash) tuples
        """
        return [(name[len(HEADS_PREFIX):], ref.value)
                for name, ref in self.list_refs(prefix=HEADS_PREFIX)]

    def list_tags(self) -> List[Tuple[str, str]]:
        """
        List all tags.

        Returns:
            List of (tag_name, commit_hash) tuples
        """
        return [(name[len(TAGS_PREFIX):], ref.value)
                for name, ref in self.list_refs(prefix=TAGS_PREFIX)]
