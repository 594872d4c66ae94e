"""Checkout: delegate to the object store, then resync the index."""

from dataclasses import dataclass
from typing import Optional

from cg.core.errors import IndexIOError, ObjectStoreError
from cg.operations.sync import sync_index_from_head


@dataclass
class CheckoutResult:
    output: str
    resync_warning: Optional[str] = None


def checkout_target(repo, target: str) -> CheckoutResult:
    """
    Check out a branch or commit and reset the staging index to match.

    The checkout itself is the store's business; a failure there aborts.
    Once it succeeded, failing to resync the index is only a warning.

    Raises:
        CheckoutError: If the store refuses the checkout
    """
    output = repo.store.checkout(target)

    try:
        with repo.lock_index():
            sync_index_from_head(repo)
    except (ObjectStoreError, IndexIOError) as e:
        return CheckoutResult(output, f"failed to sync cg-index with HEAD: {e}")

    return CheckoutResult(output)
