"""Index (staging area) implementation."""

from pathlib import Path
from typing import Callable, Dict, Iterator, Mapping, Optional, List, Tuple
from dataclasses import dataclass

from loguru import logger

from cg.core.errors import IndexIOError
from cg.core.hash import is_valid_hash
from cg.utils.atomic_io import write_bytes_atomic

# Paths are stored as UTF-8; undecodable bytes from the filesystem survive a
# round trip through surrogate escapes.
ENCODING = 'utf-8'
ENCODING_ERRORS = 'surrogateescape'


def path_sort_key(path: str) -> bytes:
    """Byte-wise ordering key, the order entries are persisted in."""
    return path.encode(ENCODING, ENCODING_ERRORS)


@dataclass
class IndexEntry:
    """A single staged file: its path key and content hash."""
    path: str           # Path relative to the repository root
    sha1: str           # Content hash reported by the object store

    def __repr__(self) -> str:
        """String representation."""
        return f"IndexEntry({self.sha1[:7]} {self.path})"


class Index:
    """
    CG staging index.

    Maps path keys to the content hash staged for the next commit. On disk
    the index is a text file with one `<hash> <path>` record per line,
    always written sorted by path so that saving an unchanged index
    reproduces the same bytes.
    """

    def __init__(self):
        """Initialize empty index."""
        self.entries: Dict[str, IndexEntry] = {}

    def add_entry(self, path: str, sha1: str) -> None:
        """
        Add or update entry in index.

        A path that is already staged keeps its single entry and only the
        hash is replaced.

        Args:
            path: File path relative to repository root
            sha1: Content hash of the file

        Raises:
            ValueError: If path cannot be represented in the index file
        """
        if not path or '\n' in path or '\r' in path:
            raise ValueError(f"Cannot stage path {path!r}")

        entry = self.entries.get(path)
        if entry is not None:
            entry.sha1 = sha1
        else:
            self.entries[path] = IndexEntry(path=path, sha1=sha1)

    def get_entry(self, path: str) -> Optional[IndexEntry]:
        """Get entry by path."""
        return self.entries.get(path)

    def clear(self) -> None:
        """Clear all entries from index."""
        self.entries.clear()

    def replace(self, files: Mapping[str, str]) -> None:
        """
        Replace the whole index with the given path -> hash mapping.

        Paths the line format cannot hold (a newline in the name) are left
        out, as they would be when loading.

        Args:
            files: New contents, e.g. the flat tree of HEAD
        """
        self.entries.clear()
        for path in sorted(files, key=path_sort_key):
            try:
                self.add_entry(path, files[path])
            except ValueError:
                logger.warning(f"not tracking {path!r}: the index cannot store this name")

    def sorted_entries(self) -> List[IndexEntry]:
        """Entries ordered by path, byte-wise."""
        return [self.entries[path] for path in sorted(self.entries, key=path_sort_key)]

    def items(self) -> List[Tuple[str, str]]:
        """Sorted (path, hash) pairs, the shape the tree builder expects."""
        return [(entry.path, entry.sha1) for entry in self.sorted_entries()]

    def as_dict(self) -> Dict[str, str]:
        """Path -> hash mapping in sorted order."""
        return dict(self.items())

    def serialize(self) -> bytes:
        """
        Render the on-disk representation.

        Format: one `<hash> <path>\\n` line per entry, sorted by path.
        The path is written verbatim, spaces included.
        """
        lines = [f"{entry.sha1} {entry.path}\n" for entry in self.sorted_entries()]
        return ''.join(lines).encode(ENCODING, ENCODING_ERRORS)

    def write(self, index_path: str) -> None:
        """
        Write index to disk.

        The file is fully rewritten on every save and replaced atomically.

        Args:
            index_path: Path to index file

        Raises:
            IndexIOError: If the file cannot be written
        """
        try:
            write_bytes_atomic(Path(index_path), self.serialize())
        except OSError as e:
            raise IndexIOError(f"cannot write index {index_path}: {e}") from e

    def read(self, index_path: str, is_valid: Callable[[str], bool] = is_valid_hash) -> None:
        """
        Read index from disk.

        A missing file is an empty index. Lines that are blank, have no
        space separator, carry a malformed hash or an empty path are
        skipped. When a path appears twice the later line wins.

        Args:
            index_path: Path to index file
            is_valid: Hash format predicate of the object store

        Raises:
            IndexIOError: If the file exists but cannot be read
        """
        self.entries.clear()

        try:
            with open(index_path, 'rb') as f:
                for raw in f:
                    self._parse_line(raw.rstrip(b'\r\n').decode(ENCODING, ENCODING_ERRORS), is_valid)
        except FileNotFoundError:
            self.entries.clear()
        except OSError as e:
            raise IndexIOError(f"cannot read index {index_path}: {e}") from e

    def _parse_line(self, line: str, is_valid: Callable[[str], bool]) -> None:
        sha1, sep, path = line.partition(' ')
        if not sep or not path or '\r' in path or not is_valid(sha1):
            return
        self.add_entry(path, sha1)

    def __contains__(self, path: str) -> bool:
        return path in self.entries

    def __iter__(self) -> Iterator[IndexEntry]:
        return iter(self.sorted_entries())

    def __len__(self) -> int:
        """Number of entries in index."""
        return len(self.entries)

    def __repr__(self) -> str:
        """String representation."""
        return f"Index(entries={len(self.entries)})"
