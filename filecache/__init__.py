"""filecache: a filesystem-backed key/value cache with per-entry expiration.

Entries live as individual files under a cache directory and are guarded by
advisory file locks, so several processes may share one directory.
"""

from filecache.domain.exceptions import (
    CacheDirectoryError,
    CacheError,
    InvalidArgumentError,
    InvalidKeyError,
)
from filecache.infrastructure.cache.file_cache import FileCache

__all__ = [
    "FileCache",
    "CacheError",
    "CacheDirectoryError",
    "InvalidArgumentError",
    "InvalidKeyError",
]

__version__ = "0.1.0"
