"""Operations module for high-level CG operations.

This module contains the business logic behind the commands:
- Working tree traversal
- Status computation
- Staging (add)
- Commit orchestration
- Checkout and index resync
"""

from cg.operations.walker import iter_working_files, walk_working_tree
from cg.operations.status import StatusEngine, StatusReport, compute_status
from cg.operations.stage import stage_paths, collect_add_inputs
from cg.operations.commit import CommitOrchestrator, CommitResult, CommitState, commit_staged
from cg.operations.checkout import CheckoutResult, checkout_target
from cg.operations.sync import sync_index_from_head

__all__ = [
    'iter_working_files', 'walk_working_tree',
    'StatusEngine', 'StatusReport', 'compute_status',
    'stage_paths', 'collect_add_inputs',
    'CommitOrchestrator', 'CommitResult', 'CommitState', 'commit_staged',
    'CheckoutResult', 'checkout_target',
    'sync_index_from_head',
]
