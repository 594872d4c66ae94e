"""Turning user supplied paths into repository path keys."""

import os
from pathlib import Path
from typing import Optional

from cg.core.errors import NotFoundError, OutsideRepositoryError

# Path key standing for the repository root itself. Never stored in an index.
ROOT_KEY = '.'


def normalize_path(repo_root, path: str, cwd: Optional[str] = None,
                   metadata_dir: Optional[str] = None) -> str:
    """
    Resolve a path to a repository-relative path key.

    Relative paths are taken from cwd (the process working directory by
    default). Symlinks are resolved, so the key names the real location.

    Args:
        repo_root: Canonical repository root
        path: Absolute or relative path given by the user
        cwd: Directory relative paths start from
        metadata_dir: Metadata directory; paths inside it are rejected

    Returns:
        Path key with `/` separators, or ROOT_KEY for the root itself

    Raises:
        NotFoundError: If the path does not exist
        OutsideRepositoryError: If the path is not inside the working tree
    """
    root = Path(repo_root)
    candidate = Path(path)
    if not candidate.is_absolute():
        candidate = Path(cwd if cwd is not None else os.getcwd()) / candidate

    try:
        resolved = candidate.resolve(strict=True)
    except (FileNotFoundError, NotADirectoryError) as e:
        raise NotFoundError(f"path not found: {path}") from e
    except (OSError, RuntimeError) as e:
        raise NotFoundError(f"cannot resolve {path}: {e}") from e

    if resolved == root:
        return ROOT_KEY

    try:
        relative = resolved.relative_to(root)
    except ValueError as e:
        raise OutsideRepositoryError(f"path outside repository: {path}") from e

    if metadata_dir is not None:
        meta = Path(metadata_dir)
        if resolved == meta or meta in resolved.parents:
            raise OutsideRepositoryError(f"path inside repository metadata: {path}")

    return relative.as_posix()
