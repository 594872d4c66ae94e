"""Atomic filesystem write helpers."""

import contextlib
import os
from pathlib import Path


def write_bytes_atomic(path: Path, data: bytes) -> None:
    """
    Replace the contents of path with data in one step.
    
    The data goes to a `.tmp` sibling first, is flushed to disk and then
    renamed over the target, so readers see either the old or the new file.
    
    Args:
        path: Destination file
        data: Bytes to write
    """
    path = Path(path)
    tmp = path.with_name(path.name + '.tmp')
    try:
        with open(tmp, 'wb') as handle:
            handle.write(data)
            handle.flush()
            with contextlib.suppress(OSError):
                os.fsync(handle.fileno())
        os.replace(tmp, path)
    except BaseException:
        with contextlib.suppress(OSError):
            tmp.unlink()
        raise
    _fsync_dir(path.parent)


def _fsync_dir(path: Path) -> None:
    try:
        fd = os.open(path, getattr(os, 'O_DIRECTORY', 0))
    except OSError:
        return
    try:
        os.fsync(fd)
    except OSError:
        pass
    finally:
        os.close(fd)
