"""Exception hierarchy for the cache.

Only `InvalidArgumentError` (and its `InvalidKeyError` subclass) and
`CacheDirectoryError` ever reach callers of the store. The remaining errors
are raised by the codec and the locked file helpers and are absorbed by the
store, which reports them through boolean results or the caller's default.
"""


class CacheError(Exception):
    """Base class for every error raised by filecache."""


class InvalidArgumentError(CacheError, ValueError):
    """An argument passed to a cache operation is not acceptable."""


class InvalidKeyError(InvalidArgumentError):
    """A cache key is empty, not a string, or contains disallowed characters."""

    def __init__(self, key: object):
        self.key = key
        super().__init__(f"Invalid cache key: {key!r}")


class CacheDirectoryError(CacheError, OSError):
    """The cache directory cannot be created or is not writable."""


class CorruptEntryError(CacheError):
    """An entry file could not be decoded into a valid envelope."""


class LockError(CacheError, OSError):
    """An advisory lock could not be acquired on an entry file."""


class ShortWriteError(CacheError, OSError):
    """Fewer bytes than requested were written to an entry file."""

    def __init__(self, path: object, written: int, expected: int):
        self.path = path
        self.written = written
        self.expected = expected
        super().__init__(f"Short write to {path}: {written} of {expected} bytes")
