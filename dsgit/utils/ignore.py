"""Ignore pattern matching for .dsgitignore files.

Patterns are plain substrings: a path is ignored when its
repository-relative string contains any pattern. Glob matching can be
switched on as an extra rule, but substring containment always applies.
"""

import fnmatch
from pathlib import Path
from typing import Iterable, List

IGNORE_FILE = '.dsgitignore'

# Internal storage and neighbouring VCS metadata, always ignored.
RESERVED_PATTERNS = (
    '.dsgit',
    '.dsgitignore',
    '.git',
    '.gitignore',
    '.github',
)


class IgnoreMatcher:
    """Matches paths against reserved names and user patterns."""

    def __init__(self, patterns: Iterable[str] = (), glob: bool = False):
        """
        Initialize matcher.

        Args:
            patterns: Substring patterns, in file order
            glob: Also match patterns as fnmatch globs
        """
        self.patterns: List[str] = []
        self.glob = glob
        self._cache: dict = {}
        self.add_patterns(patterns)

    def add_pattern(self, pattern: str) -> None:
        """Add one pattern. Empty patterns are dropped."""
        if not pattern:
            return
        self.patterns.append(pattern)
        self._cache.clear()

    def add_patterns(self, patterns: Iterable[str]) -> None:
        """Add multiple patterns."""
        for pattern in patterns:
            self.add_pattern(pattern)

    def _glob_match(self, path: str, pattern: str) -> bool:
        if fnmatch.fnmatchcase(path, pattern):
            return True
        return any(fnmatch.fnmatchcase(part, pattern) for part in path.split('/'))

    def is_ignored(self, path: str) -> bool:
        """
        Check if a path should be ignored.

        Args:
            path: Path relative to the repository root, '/' separated

        Returns:
            True if the path should be ignored
        """
        if path in self._cache:
            return self._cache[path]

        ignored = any(reserved in path for reserved in RESERVED_PATTERNS)
        if not ignored:
            ignored = any(pattern in path for pattern in self.patterns)
        if not ignored and self.glob:
            ignored = any(self._glob_match(path, pattern) for pattern in self.patterns)

        self._cache[path] = ignored
        return ignored

    __call__ = is_ignored


def read_ignore_file(path: Path) -> List[str]:
    """
    Read an ignore file into a list of patterns.

    Blank lines and lines starting with '#' are skipped. Surrounding
    whitespace is stripped. A missing file yields no patterns.
    """
    if not path.exists():
        return []

    patterns = []
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        patterns.append(line)
    return patterns


def get_ignore_matcher(repo_root: Path, glob: bool = False) -> IgnoreMatcher:
    """
    Create an IgnoreMatcher for a repository.

    Args:
        repo_root: Path to repository root
        glob: Enable glob matching on top of substring matching

    Returns:
        Configured IgnoreMatcher instance
    """
    return IgnoreMatcher(read_ignore_file(repo_root / IGNORE_FILE), glob=glob)
