"""Hash format helpers for CG.

CG never computes content hashes itself; the object store does. The only
thing the core needs is a way to recognise a well-formed hash.
"""

import string

# Length of a hex-encoded SHA-1 object id
HASH_HEX_LENGTH = 40

_HEX_DIGITS = frozenset(string.hexdigits)


def is_valid_hash(text: str, length: int = HASH_HEX_LENGTH) -> bool:
    """
    Check whether text looks like an object hash.
    
    Args:
        text: Candidate hash
        length: Expected number of hex characters
        
    Returns:
        True if text is exactly `length` hexadecimal characters
    """
    return len(text) == length and all(c in _HEX_DIGITS for c in text)
