"""dsgit - a small content-addressed version control engine."""

__version__ = '0.1.0'

from dsgit.core.repository import Repository
from dsgit.core.objects import DsgitObject, Blob, Tree, Commit

__all__ = [
    'Repository',
    'DsgitObject',
    'Blob',
    'Tree',
    'Commit',
]
