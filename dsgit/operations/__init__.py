"""Operations module for high-level dsgit operations.

This module contains the business logic for:
- Tree, commit and work tree diffing
"""

from dsgit.operations.diff import DiffEngine, TreeDiff, FileDiff, DiffHunk, DiffLine

__all__ = [
    'DiffEngine', 'TreeDiff', 'FileDiff', 'DiffHunk', 'DiffLine',
]
