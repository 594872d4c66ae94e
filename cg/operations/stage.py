"""Staging files into the CG index."""

from typing import List, Optional, Sequence

from loguru import logger

from cg.core.errors import UsageError
from cg.core.paths import normalize_path, ROOT_KEY
from cg.operations.walker import iter_working_files


def collect_add_inputs(repo, paths: Sequence[str], cwd: Optional[str] = None) -> List[str]:
    """
    Expand user supplied paths into the regular files to stage.

    The repository root expands to the whole working tree, a directory to
    every regular file below it, a file to itself. Order of first
    appearance is kept and duplicates are dropped.

    Raises:
        NotFoundError: If a path does not exist
        OutsideRepositoryError: If a path is outside the working tree
        WalkError: If a directory cannot be scanned
    """
    files: List[str] = []
    seen = set()

    for raw in paths:
        key = normalize_path(repo.work_tree, raw, cwd=cwd, metadata_dir=repo.git_dir)
        start = repo.work_tree if key == ROOT_KEY else repo.work_tree / key

        for path in iter_working_files(repo.work_tree, start, metadata_dir=repo.git_dir):
            if path not in seen:
                seen.add(path)
                files.append(path)

    return files


def stage_paths(repo, paths: Sequence[str], cwd: Optional[str] = None) -> List[str]:
    """
    Hash the given paths into the object store and stage them.

    Nothing is saved unless every file was hashed, so a failure leaves the
    index on disk untouched.

    Args:
        repo: Repository instance
        paths: Files or directories, absolute or relative to cwd
        cwd: Directory relative paths start from

    Returns:
        Path keys that were staged

    Raises:
        UsageError: If no path was given or nothing matched
        CgError: Any path, walk, hashing or index failure
    """
    if not paths:
        raise UsageError("expected at least one path")

    with repo.lock_index():
        index = repo.load_index()
        files = collect_add_inputs(repo, paths, cwd=cwd)
        if not files:
            raise UsageError("no files matched")

        for path in files:
            sha1 = repo.store.hash_object(path, write=True)
            try:
                index.add_entry(path, sha1)
            except ValueError as e:
                raise UsageError(str(e)) from e
            logger.debug(f"staged {sha1[:7]} {path}")

        repo.save_index(index)

    return files
