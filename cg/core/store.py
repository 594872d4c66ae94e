"""Object store collaborator.

CG owns the staging index and the status logic only. Hashing blobs,
writing trees and commits, moving refs and checking out are delegated to
an object store. `ObjectStore` is the narrow interface the core relies on;
`GitObjectStore` implements it by running the `git` executable.
"""

import os
import subprocess
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Sequence, Tuple, Type

from loguru import logger

from cg.core.config import Identity
from cg.core.errors import (
    BranchError,
    CheckoutError,
    CommitWriteError,
    HashObjectError,
    ObjectStoreError,
    RefUpdateError,
    TreeBuildError,
)
from cg.core.hash import is_valid_hash

# Mode recorded for every blob written into a tree
BLOB_MODE = '100644'


class ObjectStore(Protocol):
    """Capabilities the core needs from a content-addressable store."""

    def is_valid_hash(self, text: str) -> bool:
        ...

    def hash_object(self, path: str, write: bool = False) -> str:
        """Hash the file at repo-relative path, storing the blob if write."""
        ...

    def write_tree(self, entries: Sequence[Tuple[str, str]]) -> str:
        """Build a tree object from sorted (path, hash) pairs."""
        ...

    def commit_tree(self, tree: str, parent: Optional[str], message: str, author: Identity) -> str:
        """Create a commit object and return its hash."""
        ...

    def resolve_head(self) -> Optional[str]:
        """Commit hash HEAD points at, or None before the first commit."""
        ...

    def current_branch(self) -> Optional[str]:
        """Name of the checked out branch, or None when HEAD is detached."""
        ...

    def update_ref(self, ref: str, commit: str) -> None:
        ...

    def read_head_tree(self) -> Dict[str, str]:
        """Flat path -> hash listing of HEAD's tree (empty without HEAD)."""
        ...

    def sync_native_index(self) -> None:
        """Best-effort refresh of the store's own index from HEAD."""
        ...

    def checkout(self, target: str) -> str:
        ...

    def log(self) -> str:
        ...

    def list_branches(self) -> str:
        ...

    def create_branch(self, name: str) -> str:
        ...

    def delete_branch(self, name: str) -> str:
        ...


def _first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ''


class GitObjectStore:
    """
    Object store backed by the git command line client.

    Every call runs `git -C <work tree> ...` synchronously; there is no
    timeout, so a hung git process hangs the command.
    """

    def __init__(self, work_tree, git_dir, git: str = 'git'):
        """
        Args:
            work_tree: Repository root
            git_dir: Metadata directory (scratch files are created there)
            git: Git executable to run
        """
        self.work_tree = Path(work_tree)
        self.git_dir = Path(git_dir)
        self.git = git

    def _run(self, args: List[str], env: Optional[Dict[str, str]] = None,
             input: Optional[str] = None) -> subprocess.CompletedProcess:
        command = [self.git, '-C', str(self.work_tree)] + args
        logger.debug(f"running {' '.join(command)}")
        full_env = None
        if env:
            full_env = dict(os.environ)
            full_env.update(env)
        return subprocess.run(
            command,
            input=input,
            capture_output=True,
            encoding='utf-8',
            errors='surrogateescape',
            env=full_env,
            check=False,
        )

    def _git(self, args: List[str], error: Type[ObjectStoreError] = ObjectStoreError,
             env: Optional[Dict[str, str]] = None, input: Optional[str] = None) -> str:
        """Run git and return stdout, raising `error` on any failure."""
        try:
            result = self._run(args, env=env, input=input)
        except OSError as e:
            raise error(f"cannot run {self.git}: {e}") from e

        if result.returncode != 0:
            detail = _first_line(result.stderr) or f"exit status {result.returncode}"
            logger.debug(f"git {args[0]} failed: {result.stderr.strip()}")
            raise error(f"git {args[0]} failed: {detail}")
        return result.stdout

    def _git_hash(self, args: List[str], error: Type[ObjectStoreError], **kwargs) -> str:
        output = self._git(args, error=error, **kwargs).strip()
        if not self.is_valid_hash(output):
            raise error(f"git {args[0]} returned an invalid hash: {output!r}")
        return output

    def is_valid_hash(self, text: str) -> bool:
        return is_valid_hash(text)

    def hash_object(self, path: str, write: bool = False) -> str:
        args = ['hash-object']
        if write:
            args.append('-w')
        args += ['--', path]
        return self._git_hash(args, HashObjectError)

    def write_tree(self, entries: Sequence[Tuple[str, str]]) -> str:
        """
        Build a tree from (path, hash) pairs.

        Uses a throwaway index file inside the metadata directory so the
        user's git index is never touched.
        """
        records = ''.join(f"{BLOB_MODE} {sha1}\t{path}\0" for path, sha1 in entries)
        try:
            scratch = tempfile.TemporaryDirectory(prefix='cg-tree-', dir=str(self.git_dir))
        except OSError as e:
            raise TreeBuildError(f"cannot create scratch index: {e}") from e

        with scratch as tmp:
            env = {'GIT_INDEX_FILE': os.path.join(tmp, 'index')}
            if records:
                self._git(['update-index', '--add', '-z', '--index-info'],
                          error=TreeBuildError, env=env, input=records)
            return self._git_hash(['write-tree'], TreeBuildError, env=env)

    def commit_tree(self, tree: str, parent: Optional[str], message: str, author: Identity) -> str:
        env = {
            'GIT_AUTHOR_NAME': author.name,
            'GIT_AUTHOR_EMAIL': author.email,
            'GIT_COMMITTER_NAME': author.name,
            'GIT_COMMITTER_EMAIL': author.email,
        }
        args = ['commit-tree', tree]
        if parent:
            args += ['-p', parent]
        args += ['-m', message]
        return self._git_hash(args, CommitWriteError, env=env)

    def resolve_head(self) -> Optional[str]:
        try:
            result = self._run(['rev-parse', '--verify', '-q', 'HEAD'])
        except OSError:
            return None
        output = result.stdout.strip()
        if result.returncode != 0 or not self.is_valid_hash(output):
            return None
        return output

    def current_branch(self) -> Optional[str]:
        try:
            result = self._run(['symbolic-ref', '--short', '-q', 'HEAD'])
        except OSError:
            return None
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def update_ref(self, ref: str, commit: str) -> None:
        self._git(['update-ref', ref, commit], error=RefUpdateError)

    def read_head_tree(self) -> Dict[str, str]:
        """
        List every blob reachable from HEAD's tree.

        Output of `ls-tree -r -z` is `<mode> <type> <hash>\\t<path>` records
        separated by NUL; submodules and other non-blob entries are skipped.
        """
        if self.resolve_head() is None:
            return {}

        output = self._git(['ls-tree', '-r', '-z', 'HEAD'])
        files = {}
        for record in output.split('\0'):
            meta, sep, path = record.partition('\t')
            if not sep or not path:
                continue
            fields = meta.split()
            if len(fields) != 3:
                continue
            _, obj_type, sha1 = fields
            if obj_type == 'blob' and self.is_valid_hash(sha1):
                files[path] = sha1
        return files

    def sync_native_index(self) -> None:
        try:
            result = self._run(['read-tree', 'HEAD'])
        except OSError as e:
            logger.debug(f"read-tree HEAD not run: {e}")
            return
        if result.returncode != 0:
            logger.debug(f"read-tree HEAD failed: {result.stderr.strip()}")

    def checkout(self, target: str) -> str:
        return self._git_output(['checkout', target], CheckoutError)

    def log(self) -> str:
        try:
            result = self._run(['--no-pager', 'log', '--decorate', '--oneline', '--graph'])
        except OSError:
            return ''
        if result.returncode != 0:
            return ''
        return result.stdout

    def list_branches(self) -> str:
        return self._git(['branch'], error=BranchError)

    def create_branch(self, name: str) -> str:
        return self._git_output(['branch', name], BranchError)

    def delete_branch(self, name: str) -> str:
        return self._git_output(['branch', '-d', name], BranchError)

    def _git_output(self, args: List[str], error: Type[ObjectStoreError]) -> str:
        # Porcelain commands report progress on stderr
        try:
            result = self._run(args)
        except OSError as e:
            raise error(f"cannot run {self.git}: {e}") from e
        if result.returncode != 0:
            detail = _first_line(result.stderr) or f"exit status {result.returncode}"
            raise error(f"git {args[0]} failed: {detail}")
        return result.stdout + result.stderr

    def __repr__(self) -> str:
        return f"GitObjectStore(work_tree={self.work_tree})"
