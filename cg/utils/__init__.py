"""Utilities module for common helper functions.

This module contains:
- Atomic file replacement used by the staging index
"""

from cg.utils.atomic_io import write_bytes_atomic

__all__ = ['write_bytes_atomic']
