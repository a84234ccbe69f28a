"""Core functionality for dsgit.

This module contains the core data structures:
- Objects (Blob, Tree, Commit) and the content-addressed store
- Repository handle
- Tree snapshot/restore
- Commit history
- Reference management
- Configuration management
- Hashing utilities

For diffing, see dsgit.operations
For ignore handling, see dsgit.utils
"""

from dsgit.core.objects import DsgitObject, Blob, Tree, TreeEntry, Commit
from dsgit.core.repository import Repository
from dsgit.core.store import ObjectStore
from dsgit.core.tree import TreeEngine
from dsgit.core.commits import CommitGraph
from dsgit.core.hash import hash_object, hash_file, is_oid
from dsgit.core.refs import RefManager, RefValue
from dsgit.core.config import Config, get_config
from dsgit.core.errors import (
    DsgitError, RepositoryError, NotFound, TypeMismatch, Corrupt,
    IOFailure, NameResolutionFailure, CycleDetected, ConfigError,
)

__all__ = [
    'DsgitObject',
    'Blob',
    'Tree',
    'TreeEntry',
    'Commit',
    'Repository',
    'ObjectStore',
    'TreeEngine',
    'CommitGraph',
    'RefManager',
    'RefValue',
    'Config',
    'get_config',
    'hash_object',
    'hash_file',
    'is_oid',
    'DsgitError',
    'RepositoryError',
    'NotFound',
    'TypeMismatch',
    'Corrupt',
    'IOFailure',
    'NameResolutionFailure',
    'CycleDetected',
    'ConfigError',
]
