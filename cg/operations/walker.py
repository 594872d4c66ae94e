"""Working tree traversal."""

import os
import stat
from pathlib import Path
from typing import Iterator, List, Optional

from cg.core.errors import WalkError


def iter_working_files(repo_root, start=None, metadata_dir=None) -> Iterator[str]:
    """
    Yield the path key of every regular file under start.

    The traversal is depth-first and lazy; each call starts over. The
    metadata directory is pruned by comparing absolute paths, so it is
    skipped wherever it lives. Symlinks, devices, sockets and fifos are
    ignored without complaint.

    Args:
        repo_root: Canonical repository root
        start: Absolute file or directory to walk (defaults to repo_root)
        metadata_dir: Absolute path of the directory to prune

    Yields:
        Path keys relative to repo_root with `/` separators

    Raises:
        WalkError: If a directory cannot be listed or an entry cannot be stat'ed
    """
    root = os.fspath(repo_root)
    top = os.fspath(start) if start is not None else root
    pruned = os.fspath(metadata_dir) if metadata_dir is not None else None

    try:
        mode = os.lstat(top).st_mode
    except OSError as e:
        raise WalkError(f"cannot stat {top}: {e}") from e

    if stat.S_ISREG(mode):
        yield _relative_key(root, top)
    elif stat.S_ISDIR(mode):
        yield from _walk_dir(root, top, pruned)


def _walk_dir(root: str, directory: str, pruned: Optional[str]) -> Iterator[str]:
    if directory == pruned:
        return

    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        raise WalkError(f"cannot open directory {directory}: {e}") from e

    for entry in entries:
        try:
            mode = entry.stat(follow_symlinks=False).st_mode
        except OSError as e:
            raise WalkError(f"cannot stat {entry.path}: {e}") from e

        if stat.S_ISDIR(mode):
            yield from _walk_dir(root, entry.path, pruned)
        elif stat.S_ISREG(mode):
            yield _relative_key(root, entry.path)


def _relative_key(root: str, path: str) -> str:
    return Path(os.path.relpath(path, root)).as_posix()


def walk_working_tree(repo_root, start=None, metadata_dir=None) -> List[str]:
    """
    Collect the working file set.

    All or nothing: if the traversal fails part way, WalkError propagates
    and nothing is returned.

    Returns:
        Sorted, duplicate free list of path keys
    """
    return sorted(set(iter_working_files(repo_root, start, metadata_dir)))
