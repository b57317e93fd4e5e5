"""Whole-file advisory locking around entry reads and writes.

Readers take a shared `flock`, writers an exclusive one, so processes sharing
a cache directory never observe a half-written entry as long as they all go
through these helpers. Locks are released and handles closed on every exit
path.

POSIX only (`fcntl`).
"""

import contextlib
import fcntl
import logging
import os
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from filecache.domain.exceptions import LockError, ShortWriteError

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

DEFAULT_FILE_MODE = 0o644


@contextlib.contextmanager
def file_lock(handle: BinaryIO, exclusive: bool = False) -> Iterator[BinaryIO]:
    """Holds a blocking shared or exclusive lock on an open file.

    Raises:
        LockError: If the lock cannot be acquired.
    """
    operation = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
    try:
        fcntl.flock(handle.fileno(), operation)
    except OSError as e:
        raise LockError(f"Failed to lock {getattr(handle, 'name', handle)}: {e}") from e
    try:
        yield handle
    finally:
        fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


def locked_read(path: PathLike) -> Optional[bytes]:
    """Reads a whole file under a shared lock.

    Returns:
        The file contents, or None if the file does not exist.

    Raises:
        OSError: If the file exists but cannot be opened, locked or read.
    """
    try:
        handle = open(path, "rb")
    except FileNotFoundError:
        return None

    with handle:
        with file_lock(handle, exclusive=False):
            data = handle.read()
    logger.debug(f"Read {len(data)} bytes from {path}")
    return data


def _is_linked(handle: BinaryIO, path: PathLike) -> bool:
    """Checks that an open handle still refers to the file currently at `path`."""
    opened = os.fstat(handle.fileno())
    try:
        current = os.stat(path)
    except FileNotFoundError:
        return False
    return (opened.st_dev, opened.st_ino) == (current.st_dev, current.st_ino)


def locked_write(path: PathLike, data: bytes, mode: int = DEFAULT_FILE_MODE) -> None:
    """Replaces a file's contents under an exclusive lock.

    The file is created if missing, then truncated and rewritten in place. The
    data is synced to disk before the lock is released. If the file is
    unlinked while the writer waits for its lock, the write is retried against
    a freshly created file so it is not lost.

    Raises:
        ShortWriteError: If not every byte was written.
        OSError: If the file cannot be opened, locked or written.
    """
    while True:
        fd = os.open(path, os.O_RDWR | os.O_CREAT, mode)
        try:
            handle = os.fdopen(fd, "r+b", buffering=0)
        except Exception:
            os.close(fd)
            raise

        with handle:
            with file_lock(handle, exclusive=True):
                if not _is_linked(handle, path):
                    logger.debug(f"{path} was removed while waiting for its lock, retrying")
                    continue
                handle.truncate(0)
                handle.seek(0)
                written = handle.write(data)
                if written != len(data):
                    raise ShortWriteError(Path(path), written or 0, len(data))
                os.fsync(handle.fileno())
        logger.debug(f"Wrote {len(data)} bytes to {path}")
        return


def locked_remove_if_unchanged(path: PathLike, expected: bytes) -> bool:
    """Unlinks a file under an exclusive lock, but only if it still holds `expected`.

    Used to evict a stale entry without discarding a write that landed after
    the entry was read.

    Returns:
        True if the file is gone afterwards (removed now or already absent),
        False if it was left in place because its contents changed.

    Raises:
        OSError: If the file cannot be opened, locked, read or removed.
    """
    try:
        handle = open(path, "rb")
    except FileNotFoundError:
        return True

    with handle:
        with file_lock(handle, exclusive=True):
            if not _is_linked(handle, path):
                return True
            if handle.read() != expected:
                logger.debug(f"{path} changed since it was read, leaving it in place")
                return False
            os.unlink(path)
    logger.debug(f"Removed {path}")
    return True
