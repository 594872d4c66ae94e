"""Core functionality for CG.

This module contains the core data structures:
- Repository discovery and layout
- Index/staging area and its lock
- Path normalization
- Object store interface and its git implementation
- Configuration management
- Error types

For operations like status, add and commit, see cg.operations
"""

from cg.core.repository import Repository
from cg.core.index import Index, IndexEntry
from cg.core.lock import IndexLock
from cg.core.paths import normalize_path, ROOT_KEY
from cg.core.store import ObjectStore, GitObjectStore
from cg.core.config import Config, Identity, get_config
from cg.core.hash import is_valid_hash

__all__ = [
    'Repository',
    'Index',
    'IndexEntry',
    'IndexLock',
    'normalize_path',
    'ROOT_KEY',
    'ObjectStore',
    'GitObjectStore',
    'Config',
    'Identity',
    'get_config',
    'is_valid_hash',
]
