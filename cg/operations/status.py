"""Status computation: HEAD tree vs staging index vs working tree."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Mapping

from cg.core.index import path_sort_key
from cg.operations.walker import walk_working_tree


@dataclass
class StatusReport:
    """
    Result of comparing HEAD, the staging index and the working tree.

    Staged categories compare the index with HEAD; unstaged categories
    compare the working tree with the index. The two axes are independent,
    so one path can be both staged and unstaged, but it never appears
    twice on the same axis.
    """
    staged_new: List[str] = field(default_factory=list)
    staged_modified: List[str] = field(default_factory=list)
    staged_deleted: List[str] = field(default_factory=list)
    unstaged_modified: List[str] = field(default_factory=list)
    unstaged_deleted: List[str] = field(default_factory=list)
    untracked: List[str] = field(default_factory=list)

    @property
    def has_staged(self) -> bool:
        return bool(self.staged_new or self.staged_modified or self.staged_deleted)

    @property
    def has_unstaged(self) -> bool:
        return bool(self.unstaged_modified or self.unstaged_deleted)

    @property
    def is_clean(self) -> bool:
        """True when there is nothing to commit and nothing untracked."""
        return not (self.has_staged or self.has_unstaged or self.untracked)


class StatusEngine:
    """
    Computes a StatusReport.

    Working tree files are only re-hashed when they are staged; everything
    else is classified from the path sets alone.
    """

    def __init__(self, store, repo_root):
        """
        Args:
            store: Object store used for non-persisting hashes
            repo_root: Repository root the staged paths are relative to
        """
        self.store = store
        self.repo_root = Path(repo_root)

    def diff(self, head: Mapping[str, str], staged: Mapping[str, str],
             working: Iterable[str]) -> StatusReport:
        """
        Compare the three snapshots.

        Args:
            head: Path -> hash of HEAD's tree (empty before the first commit)
            staged: Path -> hash of the staging index
            working: Path keys present in the working tree

        Returns:
            StatusReport with every category sorted by path bytes, the order
            the index is saved in

        Raises:
            ObjectStoreError: If a staged file cannot be hashed
        """
        report = StatusReport()

        for path in sorted(staged, key=path_sort_key):
            if path not in head:
                report.staged_new.append(path)
            elif head[path] != staged[path]:
                report.staged_modified.append(path)

        for path in sorted(head, key=path_sort_key):
            if path not in staged:
                report.staged_deleted.append(path)

        for path in sorted(staged, key=path_sort_key):
            if not (self.repo_root / path).is_file():
                report.unstaged_deleted.append(path)
            elif self.store.hash_object(path, write=False) != staged[path]:
                report.unstaged_modified.append(path)

        for path in sorted(set(working), key=path_sort_key):
            if path not in staged and path not in head:
                report.untracked.append(path)

        return report


def compute_status(repo) -> StatusReport:
    """
    Load HEAD, the index and the working tree for repo and diff them.

    Raises:
        IndexIOError: If the index cannot be read
        WalkError: If the working tree cannot be scanned
        ObjectStoreError: If HEAD cannot be listed or a file cannot be hashed
    """
    staged = repo.load_index().as_dict()
    head = repo.store.read_head_tree()
    working = walk_working_tree(repo.work_tree, metadata_dir=repo.git_dir)
    return StatusEngine(repo.store, repo.work_tree).diff(head, staged, working)
