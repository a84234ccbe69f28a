"""Utilities module for common helper functions.

This module contains:
- Ignore file handling (.dsgitignore)
"""

from dsgit.utils.ignore import IgnoreMatcher, get_ignore_matcher, read_ignore_file

__all__ = [
    'IgnoreMatcher', 'get_ignore_matcher', 'read_ignore_file',
]
