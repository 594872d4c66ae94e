"""Exclusive lock around staging index updates."""

import contextlib
import os
import types
from pathlib import Path
from typing import Optional, Type

from loguru import logger

from cg.core.errors import IndexIOError, IndexLockedError


class IndexLock:
    """
    Hold `<index>.lock` while the index is loaded, modified and saved.

    Works as a context manager. The lock file is created with O_EXCL so a
    second CG process fails fast instead of racing on the index. The lock
    is always released on exit, whether or not the block raised.
    """

    def __init__(self, index_path):
        self.index_path = Path(index_path)
        self.lock_path = self.index_path.with_name(self.index_path.name + '.lock')
        self._fd: Optional[int] = None

    @property
    def held(self) -> bool:
        return self._fd is not None

    def acquire(self) -> None:
        try:
            self._fd = os.open(self.lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError as e:
            raise IndexLockedError(
                f"index is locked by another process ({self.lock_path}); "
                "remove the file if no other cg command is running"
            ) from e
        except OSError as e:
            raise IndexIOError(f"cannot create lock {self.lock_path}: {e}") from e
        try:
            os.write(self._fd, f"{os.getpid()}\n".encode())
        except OSError as e:
            os.close(self._fd)
            self._fd = None
            with contextlib.suppress(OSError):
                self.lock_path.unlink()
            raise IndexIOError(f"cannot write lock {self.lock_path}: {e}") from e
        logger.debug(f"acquired {self.lock_path}")

    def release(self) -> None:
        if self._fd is None:
            return
        os.close(self._fd)
        self._fd = None
        try:
            self.lock_path.unlink()
        except FileNotFoundError:
            pass
        logger.debug(f"released {self.lock_path}")

    def __enter__(self) -> 'IndexLock':
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[types.TracebackType],
    ) -> None:
        self.release()
