"""CG - a lightweight Git front-end with its own staging index."""

__version__ = '0.2.0'
__author__ = 'Flambeau Iriho'
__email__ = 'irihoflambeau@gmail.com'

from cg.core.repository import Repository
from cg.core.index import Index, IndexEntry

__all__ = [
    'Repository',
    'Index',
    'IndexEntry',
]
