"""Shared pytest fixtures for CG tests."""

import hashlib
import shutil
import tempfile
from pathlib import Path

import pytest

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
from cg.core.repository import Repository


class FakeObjectStore:
    """
    In-memory stand-in for the git object store.

    Blob hashes match git's (`sha1("blob <size>\\0" + data)`), trees and
    commits are kept in dictionaries. Put a method name in `failing` to make
    that call raise the matching store error.
    """

    def __init__(self, work_tree):
        self.work_tree = Path(work_tree)
        self.blobs = {}
        self.trees = {}
        self.commits = {}
        self.refs = {}
        self.head_ref = 'refs/heads/main'
        self.detached = None
        self.failing = set()
        self.hashed = []
        self.native_syncs = 0

    def _check(self, name, error):
        if name in self.failing:
            raise error(f"{name} failed")

    @staticmethod
    def blob_hash(data: bytes) -> str:
        return hashlib.sha1(b'blob %d\0' % len(data) + data).hexdigest()

    def is_valid_hash(self, text):
        return is_valid_hash(text)

    def hash_object(self, path, write=False):
        self._check('hash_object', HashObjectError)
        try:
            data = (self.work_tree / path).read_bytes()
        except OSError as e:
            raise HashObjectError(f"cannot hash {path}: {e}")
        sha1 = self.blob_hash(data)
        self.hashed.append(path)
        if write:
            self.blobs[sha1] = data
        return sha1

    def write_tree(self, entries):
        self._check('write_tree', TreeBuildError)
        entries = list(entries)
        for _, sha1 in entries:
            if sha1 not in self.blobs:
                raise TreeBuildError(f"missing blob {sha1}")
        sha1 = hashlib.sha1(repr(sorted(entries)).encode()).hexdigest()
        self.trees[sha1] = dict(entries)
        return sha1

    def commit_tree(self, tree, parent, message, author):
        self._check('commit_tree', CommitWriteError)
        payload = repr((tree, parent, message, str(author), len(self.commits)))
        sha1 = hashlib.sha1(payload.encode()).hexdigest()
        self.commits[sha1] = {'tree': tree, 'parent': parent, 'message': message, 'author': author}
        return sha1

    def resolve_head(self):
        if self.head_ref is None:
            return self.detached
        return self.refs.get(self.head_ref)

    def current_branch(self):
        if self.head_ref is None:
            return None
        return self.head_ref[len('refs/heads/'):]

    def update_ref(self, ref, commit):
        self._check('update_ref', RefUpdateError)
        if ref == 'HEAD':
            if self.head_ref is None:
                self.detached = commit
            else:
                self.refs[self.head_ref] = commit
        else:
            self.refs[ref] = commit

    def read_head_tree(self):
        self._check('read_head_tree', ObjectStoreError)
        head = self.resolve_head()
        if head is None:
            return {}
        return dict(self.trees[self.commits[head]['tree']])

    def sync_native_index(self):
        self.native_syncs += 1

    def checkout(self, target):
        self._check('checkout', CheckoutError)
        old_files = self.read_head_tree()

        ref = f'refs/heads/{target}'
        if ref in self.refs:
            self.head_ref, self.detached = ref, None
        elif target in self.commits:
            self.head_ref, self.detached = None, target
        else:
            raise CheckoutError(f"pathspec '{target}' did not match")

        new_files = self.read_head_tree()
        for path in old_files:
            if path not in new_files:
                (self.work_tree / path).unlink()
        for path, sha1 in new_files.items():
            target_path = self.work_tree / path
            target_path.parent.mkdir(parents=True, exist_ok=True)
            target_path.write_bytes(self.blobs[sha1])
        return f"Switched to '{target}'\n"

    def log(self):
        lines = []
        commit = self.resolve_head()
        while commit:
            lines.append(f"* {commit[:7]} {self.commits[commit]['message']}")
            commit = self.commits[commit]['parent']
        return '\n'.join(lines) + '\n' if lines else ''

    def list_branches(self):
        current = self.current_branch()
        lines = []
        for ref in sorted(self.refs):
            name = ref[len('refs/heads/'):]
            marker = '*' if name == current else ' '
            lines.append(f"{marker} {name}")
        return '\n'.join(lines) + '\n' if lines else ''

    def create_branch(self, name):
        head = self.resolve_head()
        if head is None:
            raise BranchError(f"not a valid object name: '{self.current_branch()}'")
        ref = f'refs/heads/{name}'
        if ref in self.refs:
            raise BranchError(f"a branch named '{name}' already exists")
        self.refs[ref] = head
        return ''

    def delete_branch(self, name):
        ref = f'refs/heads/{name}'
        if ref not in self.refs:
            raise BranchError(f"branch '{name}' not found")
        if ref == self.head_ref:
            raise BranchError(f"cannot delete branch '{name}' checked out")
        commit = self.refs.pop(ref)
        return f"Deleted branch {name} (was {commit[:7]}).\n"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir).resolve()
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def store(temp_dir):
    """Fake object store rooted at temp_dir."""
    return FakeObjectStore(temp_dir)


@pytest.fixture
def repo(temp_dir, store):
    """Create an initialized repository backed by the fake store."""
    return Repository(str(temp_dir), store=store).init()


@pytest.fixture
def cli_repo(repo, store, monkeypatch):
    """
    Repository the CLI will find from the current directory.

    The CLI builds its own Repository, so the git backed store is swapped
    for the fake one.
    """
    monkeypatch.setattr('cg.core.store.GitObjectStore', lambda *args, **kwargs: store)
    monkeypatch.chdir(repo.work_tree)
    return repo


@pytest.fixture
def git_repo(temp_dir, monkeypatch):
    """Repository backed by the real git executable."""
    if shutil.which('git') is None:
        pytest.skip("git executable not available")
    monkeypatch.setenv('CG_USER_NAME', 'Test User')
    monkeypatch.setenv('CG_USER_EMAIL', 'test@example.com')
    monkeypatch.setenv('GIT_CONFIG_NOSYSTEM', '1')
    monkeypatch.setenv('HOME', str(temp_dir))
    work_tree = temp_dir / 'work'
    repo = Repository(str(work_tree)).init()
    monkeypatch.chdir(repo.work_tree)
    return repo


def write_file(repo, path, content):
    """Create path (relative to the work tree) with content."""
    target = repo.work_tree / path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content)
    return target


@pytest.fixture
def make_file(repo):
    """Helper writing files into the fake-backed repository."""
    def _make(path, content):
        return write_file(repo, path, content)
    return _make
