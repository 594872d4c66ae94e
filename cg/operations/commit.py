"""Commit orchestration: drain the staging index into a new commit."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from loguru import logger

from cg.core.config import Identity
from cg.core.errors import EmptyStageError, IndexIOError, ObjectStoreError, UsageError
from cg.operations.sync import sync_index_from_head


class CommitState(Enum):
    """Progress of a commit. Each step is entered only after the previous one succeeded."""
    IDLE = 'idle'
    INDEX_LOADED = 'index-loaded'
    TREE_WRITTEN = 'tree-written'
    COMMIT_WRITTEN = 'commit-written'
    REF_UPDATED = 'ref-updated'
    RESYNCED = 'resynced'


@dataclass
class CommitResult:
    """Outcome of a successful commit."""
    commit_hash: str
    tree_hash: str
    parent: Optional[str]
    branch: Optional[str]
    message: str
    author: Identity
    files: int
    state: CommitState
    resync_warning: Optional[str] = None

    @property
    def is_root(self) -> bool:
        return self.parent is None


class CommitOrchestrator:
    """
    Turns the staging index into a commit and moves the current branch.

    Steps: load index, write tree, write commit, update ref, resync index.
    A failure in any step up to the ref update aborts the commit and leaves
    the index on disk as it was. Once the ref has moved the commit stands;
    a failure to resync the index afterwards is only reported as a warning.
    """

    def __init__(self, repo):
        self.repo = repo
        self.state = CommitState.IDLE

    def _advance(self, state: CommitState) -> None:
        logger.debug(f"commit: {self.state.value} -> {state.value}")
        self.state = state

    def run(self, message: str, author: Optional[Identity] = None) -> CommitResult:
        """
        Create a commit from everything staged.

        Args:
            message: Commit message, must not be empty
            author: Identity to record; defaults to the configured user

        Returns:
            CommitResult describing the new commit

        Raises:
            UsageError: If message is empty
            EmptyStageError: If nothing is staged
            TreeBuildError, CommitWriteError, RefUpdateError: On store failures
            IndexIOError: If the index cannot be read or locked
        """
        if not message:
            raise UsageError("commit message is required")

        repo = self.repo
        store = repo.store
        if author is None:
            author = repo.config.get_user_identity()

        with repo.lock_index():
            index = repo.load_index()
            if len(index) == 0:
                raise EmptyStageError("nothing staged")
            self._advance(CommitState.INDEX_LOADED)

            tree_hash = store.write_tree(index.items())
            self._advance(CommitState.TREE_WRITTEN)

            parent = store.resolve_head()
            commit_hash = store.commit_tree(tree_hash, parent, message, author)
            self._advance(CommitState.COMMIT_WRITTEN)

            store.update_ref('HEAD', commit_hash)
            self._advance(CommitState.REF_UPDATED)

            resync_warning = None
            try:
                store.sync_native_index()
                sync_index_from_head(repo)
                self._advance(CommitState.RESYNCED)
            except (ObjectStoreError, IndexIOError) as e:
                resync_warning = f"failed to sync cg-index with HEAD: {e}"
                logger.debug(resync_warning)

        return CommitResult(
            commit_hash=commit_hash,
            tree_hash=tree_hash,
            parent=parent,
            branch=store.current_branch(),
            message=message,
            author=author,
            files=len(index),
            state=self.state,
            resync_warning=resync_warning,
        )


def commit_staged(repo, message: str, author: Optional[Identity] = None) -> CommitResult:
    """Convenience wrapper around CommitOrchestrator.run."""
    return CommitOrchestrator(repo).run(message, author=author)
