"""Concrete implementation of the CacheInterface backed by the local filesystem.

Each entry is a single file `<md5(key)>.cache` directly inside the cache
directory, holding an envelope of the value and its absolute expiry. Reads
take a shared lock and writes an exclusive lock on the entry file, so several
processes can share one directory. Expired and corrupt entries are removed
lazily, when they are read, or on an explicit `prune()`.

Runtime I/O problems never raise out of the steady-state operations: they are
logged and reported as False or as the caller's default. Invalid keys and an
unusable cache directory raise immediately.
"""

import hashlib
import logging
import os
import pickle
import re
import tempfile
import time
from collections.abc import Mapping
from datetime import timedelta
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Tuple, Union

# Domain Layer Imports
from filecache.domain.exceptions import (
    CacheDirectoryError,
    CorruptEntryError,
    InvalidArgumentError,
    InvalidKeyError,
)
from filecache.domain.interfaces.cache import CacheInterface
from filecache.domain.models.common import ENTRY_SUFFIX, CacheKey, ExpireAt, Ttl

# Infrastructure Imports
from filecache.infrastructure.cache import envelope
from filecache.infrastructure.filesystem.locked_file import (
    locked_read,
    locked_remove_if_unchanged,
    locked_write,
)

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = Path(tempfile.gettempdir()) / "cache"
KEY_PATTERN = re.compile(r"[A-Za-z0-9_.]+")

# pickle.dumps failures for values that cannot be serialized
_ENCODE_ERRORS = (pickle.PicklingError, TypeError, AttributeError, RecursionError)


class FileCache(CacheInterface):
    """File-per-entry cache with TTL support and cross-process locking."""

    def __init__(
        self,
        cache_dir: Union[str, Path] = DEFAULT_CACHE_DIR,
        clock: Callable[[], float] = time.time,
    ):
        """Initializes the cache, creating the directory if needed.

        Args:
            cache_dir: Directory holding the entry files.
            clock: Returns the current epoch time in seconds.

        Raises:
            CacheDirectoryError: If the directory cannot be created or is not writable.
        """
        self._cache_dir = Path(cache_dir)
        self._clock = clock
        self._setup_cache_dir()
        logger.info(f"FileCache initialized at {self._cache_dir}")

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def _setup_cache_dir(self) -> None:
        """Creates the cache directory if it doesn't exist and checks it is writable."""
        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create cache directory {self._cache_dir}: {e}")
            raise CacheDirectoryError(f"Cannot create cache directory: {self._cache_dir}") from e
        if not self._cache_dir.is_dir():
            raise CacheDirectoryError(f"Cache path is not a directory: {self._cache_dir}")
        if not os.access(self._cache_dir, os.W_OK | os.X_OK):
            raise CacheDirectoryError(f"Cache directory is not writable: {self._cache_dir}")

    # --- Key handling ---

    @staticmethod
    def _validate_key(key: Any) -> CacheKey:
        if not isinstance(key, str) or not KEY_PATTERN.fullmatch(key):
            raise InvalidKeyError(key)
        return CacheKey(key)

    def _path(self, key: CacheKey) -> Path:
        # md5 keeps the name flat and fixed-length whatever the key contains
        hashed_key = hashlib.md5(key.encode("utf-8")).hexdigest()
        return self._cache_dir / f"{hashed_key}{ENTRY_SUFFIX}"

    def path_for(self, key: str) -> Path:
        """Returns the file that backs `key`, whether or not it exists."""
        return self._path(self._validate_key(key))

    def _expire_at(self, ttl: Ttl) -> ExpireAt:
        """Converts a caller TTL into an absolute expiry instant."""
        if ttl is None:
            return None
        if isinstance(ttl, timedelta):
            return self._clock() + ttl.total_seconds()
        if isinstance(ttl, int) and not isinstance(ttl, bool):
            return self._clock() + ttl
        raise InvalidArgumentError(f"TTL must be None, int seconds or timedelta, got {type(ttl).__name__}")

    def _entry_files(self) -> List[Path]:
        return [p for p in self._cache_dir.glob(f"*{ENTRY_SUFFIX}") if p.is_file()]

    def _evict(self, path: Path, stale: bytes) -> bool:
        """Removes an expired or corrupt entry unless it was rewritten meanwhile."""
        try:
            return locked_remove_if_unchanged(path, stale)
        except OSError as e:
            logger.warning(f"Failed to remove stale cache file {path}: {e}")
            return False

    # --- CacheInterface Implementation ---

    def get(self, key: str, default: Any = None) -> Any:
        """Retrieves a value, evicting the entry if it is expired or corrupt."""
        path = self._path(self._validate_key(key))

        try:
            data = locked_read(path)
        except OSError as e:
            logger.warning(f"Failed to read cache file {path}: {e}")
            return default

        if data is None:
            logger.debug(f"Cache miss for key: {key}")
            return default

        try:
            entry = envelope.decode(data)
        except CorruptEntryError as e:
            logger.warning(f"Corrupt cache file {path} for key {key}: {e}. Removing.")
            self._evict(path, data)
            return default

        if entry.is_expired(self._clock()):
            logger.debug(f"Cache expired for key: {key}. Removing file.")
            self._evict(path, data)
            return default

        logger.debug(f"Cache hit for key: {key}")
        return entry.value

    def set(self, key: str, value: Any, ttl: Ttl = None) -> bool:
        """Stores a value, overwriting any previous entry for the key."""
        path = self._path(self._validate_key(key))
        expire_at = self._expire_at(ttl)

        try:
            data = envelope.encode(value, expire_at)
        except _ENCODE_ERRORS as e:
            logger.error(f"Failed to serialize value for key {key}: {e}")
            return False

        try:
            locked_write(path, data)
        except OSError as e:
            logger.error(f"Failed to write cache file {path}: {e}", exc_info=True)
            return False

        logger.debug(f"Stored item in cache: key={key}, expire_at={expire_at}")
        return True

    def has(self, key: str) -> bool:
        return self.get(key, None) is not None

    def delete(self, key: str) -> bool:
        """Deletes an entry. A missing entry counts as success."""
        path = self._path(self._validate_key(key))
        try:
            path.unlink()
        except FileNotFoundError:
            return True
        except OSError as e:
            logger.warning(f"Failed to delete cache file {path}: {e}")
            return False
        logger.debug(f"Deleted item from cache: key={key}")
        return True

    def clear(self) -> bool:
        """Removes every entry file, carrying on past individual failures."""
        success = True
        removed = 0
        for path in self._entry_files():
            try:
                path.unlink()
                removed += 1
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning(f"Failed to delete cache file {path}: {e}")
                success = False
        logger.info(f"Cleared {removed} entries from cache at {self._cache_dir}")
        return success

    def get_multiple(self, keys: Iterable[str], default: Any = None) -> Dict[str, Any]:
        keys = list(keys)
        for key in keys:
            self._validate_key(key)
        return {key: self.get(key, default) for key in keys}

    def set_multiple(
        self,
        values: Union[Mapping, Iterable[Tuple[str, Any]]],
        ttl: Ttl = None
    ) -> bool:
        items = list(values.items()) if isinstance(values, Mapping) else list(values)
        for key, _ in items:
            self._validate_key(key)
        self._expire_at(ttl)

        success = True
        for key, value in items:
            if not self.set(key, value, ttl):
                success = False
        return success

    def delete_multiple(self, keys: Iterable[str]) -> bool:
        keys = list(keys)
        for key in keys:
            self._validate_key(key)

        success = True
        for key in keys:
            if not self.delete(key):
                success = False
        return success

    # --- Maintenance ---

    def prune(self) -> int:
        """Sweeps the directory once, removing expired and corrupt entries.

        Returns:
            The number of entry files removed.
        """
        now = self._clock()
        removed = 0
        for path in self._entry_files():
            try:
                data = locked_read(path)
            except OSError as e:
                logger.warning(f"Failed to read cache file {path} during prune: {e}")
                continue
            if data is None:
                continue

            try:
                stale = envelope.decode(data).is_expired(now)
            except CorruptEntryError as e:
                logger.warning(f"Corrupt cache file {path}: {e}. Removing.")
                stale = True

            if stale and self._evict(path, data):
                removed += 1

        logger.info(f"Pruned {removed} stale entries from {self._cache_dir}")
        return removed
