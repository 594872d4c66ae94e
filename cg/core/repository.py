"""Repository management for CG."""

from pathlib import Path
from typing import Optional

from cg.core.errors import IndexIOError, NotARepositoryError, RepositoryExistsError
from cg.core.index import Index

METADATA_DIR = '.git'
INDEX_NAME = 'cg-index'

_CONFIG_TEMPLATE = (
    '[core]\n'
    '\trepositoryformatversion = 0\n'
    '\tfilemode = true\n'
    '\tbare = false\n'
    '\tlogallrefupdates = true\n'
)
_DESCRIPTION = 'Unnamed repository; edit this file to name it.\n'


class Repository:
    """
    Represents a CG repository.

    A CG repository is a git repository whose `.git` directory also holds
    the CG staging index (`cg-index`). Git objects and refs are handled by
    the object store; this class knows where things live and loads and
    saves the staging index.
    """

    def __init__(self, path: str = '.', store=None):
        """
        Initialize repository.

        Args:
            path: Path to repository root (defaults to current directory)
            store: Object store to use instead of the git backed one
        """
        self.work_tree = Path(path).resolve()
        self.git_dir = self.work_tree / METADATA_DIR
        self.objects_dir = self.git_dir / 'objects'
        self.refs_dir = self.git_dir / 'refs'
        self.heads_dir = self.refs_dir / 'heads'
        self.tags_dir = self.refs_dir / 'tags'
        self.head_file = self.git_dir / 'HEAD'
        self.config_file = self.git_dir / 'config'
        self.description_file = self.git_dir / 'description'
        self.index_file = self.git_dir / INDEX_NAME

        # Lazy loading to avoid spawning anything until needed
        self._store = store
        self._config = None

    @property
    def config(self):
        """Get Config instance."""
        if self._config is None:
            from .config import get_config
            self._config = get_config(self)
        return self._config

    @property
    def store(self):
        """Get the object store."""
        if self._store is None:
            from .store import GitObjectStore
            self._store = GitObjectStore(self.work_tree, self.git_dir, git=self.config.git_executable)
        return self._store

    def init(self) -> 'Repository':
        """
        Initialize a new repository.

        Creates the directory itself if needed and the .git structure:
        .git/
        ├── objects/
        ├── refs/
        │   ├── heads/
        │   └── tags/
        ├── HEAD           # ref: refs/heads/main
        ├── config
        ├── description
        └── cg-index       # Empty staging index

        Returns:
            Repository: self for method chaining

        Raises:
            RepositoryExistsError: If .git already exists
        """
        if self.git_dir.exists():
            raise RepositoryExistsError(f"repository already exists at '{self.git_dir}'")

        self.work_tree.mkdir(parents=True, exist_ok=True)
        self.git_dir.mkdir()
        for directory in (self.objects_dir, self.refs_dir, self.heads_dir, self.tags_dir):
            directory.mkdir(exist_ok=True)

        self.head_file.write_text('ref: refs/heads/main\n')
        self.config_file.write_text(_CONFIG_TEMPLATE)
        self.description_file.write_text(_DESCRIPTION)
        self.index_file.write_text('')

        return self

    @classmethod
    def find_repository(cls, path: str = '.', store=None) -> Optional['Repository']:
        """
        Find repository by searching up the directory tree.

        Searches from the given path upwards until it finds a .git directory
        or reaches the filesystem root.

        Args:
            path: Starting path for search
            store: Object store passed on to the repository

        Returns:
            Repository if found, None otherwise
        """
        current = Path(path).resolve()

        while True:
            if (current / METADATA_DIR).is_dir():
                return cls(str(current), store=store)

            # Reached filesystem root
            if current == current.parent:
                return None

            current = current.parent

    @classmethod
    def discover(cls, path: str = '.', store=None) -> 'Repository':
        """
        Like find_repository, but failing loudly.

        Raises:
            NotARepositoryError: If no repository contains path
        """
        repo = cls.find_repository(path, store=store)
        if repo is None:
            raise NotARepositoryError("not inside a CG repository")
        return repo

    def load_index(self) -> Index:
        """
        Read the staging index.

        Raises:
            IndexIOError: If the index exists but cannot be read
        """
        index = Index()
        index.read(str(self.index_file), self.store.is_valid_hash)
        return index

    def save_index(self, index: Index) -> None:
        """
        Persist the staging index.

        Raises:
            IndexIOError: If the index cannot be written
        """
        if not self.git_dir.is_dir():
            raise IndexIOError(f"metadata directory {self.git_dir} is missing")
        index.write(str(self.index_file))

    def lock_index(self):
        """Exclusive lock guarding load/modify/save of the index."""
        from .lock import IndexLock
        return IndexLock(self.index_file)

    def __repr__(self) -> str:
        """String representation of repository."""
        return f"Repository(path={self.work_tree})"
