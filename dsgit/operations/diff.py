"""Diff engine for comparing trees and files."""

from difflib import SequenceMatcher
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from colorama import Fore, Style

from dsgit.core.errors import IOFailure
from dsgit.core.objects import BLOB

TreeLike = Union[Dict[str, str], Iterable[Tuple[str, str]]]
Span = Tuple[int, int]

DEFAULT_CONTEXT = 3


class TreeDiff:
    """Paths that differ between two trees, each list sorted."""

    def __init__(self, modified: List[str], created: List[str], removed: List[str]):
        self.modified = modified
        self.created = created
        self.removed = removed

    def __bool__(self) -> bool:
        return bool(self.modified or self.created or self.removed)

    def __iter__(self):
        return iter((self.modified, self.created, self.removed))

    def __repr__(self) -> str:
        return (f"TreeDiff(modified={self.modified}, created={self.created}, "
                f"removed={self.removed})")


class DiffLine:
    """One rendered line of a hunk."""

    def __init__(self, sign: str, text: str, old_lineno: Optional[int],
                 new_lineno: Optional[int], emphasis: Optional[List[Span]] = None):
        self.sign = sign
        self.text = text
        self.old_lineno = old_lineno
        self.new_lineno = new_lineno
        self.emphasis = emphasis or []

    def __str__(self) -> str:
        return f"{self.sign}{self.text}"


class DiffHunk:
    """Represents a single hunk (continuous block of changes) in a diff."""

    def __init__(self, old_start: int, old_count: int, new_start: int, new_count: int):
        self.old_start = old_start
        self.old_count = old_count
        self.new_start = new_start
        self.new_count = new_count
        self.lines: List[DiffLine] = []

    def add_line(self, line: DiffLine):
        """Add a line to this hunk."""
        self.lines.append(line)

    def __str__(self):
        return f"@@ -{self.old_start},{self.old_count} +{self.new_start},{self.new_count} @@"


def _split_lines(content: Optional[bytes]) -> List[str]:
    if not content:
        return []
    return content.decode('utf-8', errors='replace').splitlines()


def _emphasis(old: str, new: str) -> Tuple[List[Span], List[Span]]:
    """Character spans that differ between a removed and an inserted line."""
    old_spans, new_spans = [], []
    for tag, i1, i2, j1, j2 in SequenceMatcher(None, old, new).get_opcodes():
        if tag == 'equal':
            continue
        if i2 > i1:
            old_spans.append((i1, i2))
        if j2 > j1:
            new_spans.append((j1, j2))
    return old_spans, new_spans


class FileDiff:
    """Represents the diff for a single file."""

    def __init__(self, path: str, old_content: Optional[bytes], new_content: Optional[bytes]):
        self.path = path
        self.old_content = old_content
        self.new_content = new_content
        self.is_new = old_content is None
        self.is_deleted = new_content is None
        self.is_modified = old_content is not None and new_content is not None
        self.hunks: List[DiffHunk] = []

    def compute_diff(self, context: int = DEFAULT_CONTEXT):
        """
        Compute diff hunks for this file.

        A missing side counts as empty content. Lines are aligned with
        difflib and grouped into hunks with ``context`` lines around each
        change. Replaced line pairs get intra-line emphasis spans.
        """
        old_lines = _split_lines(self.old_content)
        new_lines = _split_lines(self.new_content)
        matcher = SequenceMatcher(None, old_lines, new_lines, autojunk=False)

        self.hunks = []
        if old_lines == new_lines:
            return

        for group in matcher.get_grouped_opcodes(context):
            first, last = group[0], group[-1]
            old_count = last[2] - first[1]
            new_count = last[4] - first[3]
            hunk = DiffHunk(first[1] + 1 if old_count else first[1], old_count,
                            first[3] + 1 if new_count else first[3], new_count)

            for tag, i1, i2, j1, j2 in group:
                if tag == 'equal':
                    for offset in range(i2 - i1):
                        hunk.add_line(DiffLine(' ', old_lines[i1 + offset],
                                               i1 + offset + 1, j1 + offset + 1))
                    continue

                removed = [DiffLine('-', old_lines[i], i + 1, None) for i in range(i1, i2)]
                inserted = [DiffLine('+', new_lines[j], None, j + 1) for j in range(j1, j2)]
                if tag == 'replace':
                    for old_line, new_line in zip(removed, inserted):
                        old_line.emphasis, new_line.emphasis = _emphasis(old_line.text, new_line.text)

                for line in removed + inserted:
                    hunk.add_line(line)

            self.hunks.append(hunk)


class DiffEngine:
    """
    Engine for comparing trees, commits and the work tree.

    Supports:
    - Tree diffing (path classification into modified/created/removed)
    - Line-level file diffs with intra-line emphasis
    - Colored unified-style output
    """

    def __init__(self, repo):
        """
        Initialize diff engine.

        Args:
            repo: Repository instance
        """
        self.repo = repo

    @property
    def context(self) -> int:
        return self.repo.config.get_int('diff', 'context', DEFAULT_CONTEXT)

    def diff_trees(self, from_tree: TreeLike, to_tree: TreeLike) -> TreeDiff:
        """
        Classify every path of two materialized trees.

        Args:
            from_tree: {path: oid} or (path, oid) pairs
            to_tree: {path: oid} or (path, oid) pairs

        Returns:
            TreeDiff; unchanged paths are left out
        """
        old = dict(from_tree)
        new = dict(to_tree)

        modified, created, removed = [], [], []
        for path in sorted(old.keys() | new.keys()):
            if path in old and path in new:
                if old[path] != new[path]:
                    modified.append(path)
            elif path in new:
                created.append(path)
            else:
                removed.append(path)

        return TreeDiff(modified, created, removed)

    def read_blob(self, path: str, oid: str) -> bytes:
        """Read blob content from the object store."""
        return self.repo.objects.get(oid, BLOB)

    def read_working(self, path: str, oid: str) -> bytes:
        """Read file content from the work tree."""
        target = self.repo.work_tree / path
        try:
            return target.read_bytes()
        except OSError as err:
            raise IOFailure(f"Failed to read {path}", str(target), err) from err

    def file_diffs(self, from_tree: TreeLike, to_tree: TreeLike,
                   read_new: Optional[Callable[[str, str], bytes]] = None) -> List[FileDiff]:
        """
        Compute line-level diffs for every changed path.

        Args:
            from_tree: Old materialized tree
            to_tree: New materialized tree
            read_new: Loads new-side content; defaults to the object store

        Returns:
            List of FileDiff objects sorted by path
        """
        old = dict(from_tree)
        new = dict(to_tree)
        if read_new is None:
            read_new = self.read_blob

        changes = self.diff_trees(old, new)
        diffs = []
        for path in sorted(changes.modified + changes.created + changes.removed):
            old_content = self.read_blob(path, old[path]) if path in old else None
            new_content = read_new(path, new[path]) if path in new else None

            diff = FileDiff(path, old_content, new_content)
            diff.compute_diff(self.context)
            diffs.append(diff)

        return diffs

    def diff_commits(self, old_commit_hash: Optional[str], new_commit_hash: str) -> List[FileDiff]:
        """
        Compute diff between two commits.

        Args:
            old_commit_hash: Old commit hash (None for the empty tree)
            new_commit_hash: New commit hash

        Returns:
            List of FileDiff objects
        """
        old_tree = self.repo.commits.tree_of(old_commit_hash) if old_commit_hash else []
        new_tree = self.repo.commits.tree_of(new_commit_hash)
        return self.file_diffs(old_tree, new_tree)

    def diff_working(self, commit_hash: Optional[str] = None) -> List[FileDiff]:
        """
        Compute diff between a commit (default HEAD) and the work tree.

        Returns:
            List of FileDiff objects
        """
        if commit_hash is None:
            commit_hash = self.repo.refs.head_oid()
        old_tree = self.repo.commits.tree_of(commit_hash) if commit_hash else []
        return self.file_diffs(old_tree, self.repo.trees.working_tree(), self.read_working)

    def status(self) -> TreeDiff:
        """Classify work tree paths against the HEAD commit."""
        return self.diff_trees(self.repo.commits.head_tree(), self.repo.trees.working_tree())

    def _format_line(self, line: DiffLine, color: bool) -> str:
        if not color:
            return str(line)
        if line.sign == '+':
            tint = Fore.GREEN
        elif line.sign == '-':
            tint = Fore.RED
        else:
            return f"{Style.DIM}{line}{Style.RESET_ALL}"

        text, pos, parts = line.text, 0, []
        for start, end in line.emphasis:
            parts.append(text[pos:start])
            parts.append(f"{Style.BRIGHT}{text[start:end]}{Style.NORMAL}")
            pos = end
        parts.append(text[pos:])
        return f"{tint}{line.sign}{''.join(parts)}{Style.RESET_ALL}"

    def format_diff(self, diffs: List[FileDiff], color: bool = True) -> str:
        """
        Format diffs as unified diff output.

        Args:
            diffs: List of FileDiff objects
            color: Whether to use color output

        Returns:
            Formatted diff string
        """
        output = []

        for diff in diffs:
            output.append(f"diff --dsgit a/{diff.path} b/{diff.path}")
            if diff.is_new:
                output.append("new file")
                output.append("--- /dev/null")
                output.append(f"+++ b/{diff.path}")
            elif diff.is_deleted:
                output.append("deleted file")
                output.append(f"--- a/{diff.path}")
                output.append("+++ /dev/null")
            else:
                output.append(f"--- a/{diff.path}")
                output.append(f"+++ b/{diff.path}")

            for hunk in diff.hunks:
                if color:
                    output.append(f"{Fore.CYAN}{hunk}{Style.RESET_ALL}")
                else:
                    output.append(str(hunk))

                for line in hunk.lines:
                    output.append(self._format_line(line, color))

        return '\n'.join(output)
