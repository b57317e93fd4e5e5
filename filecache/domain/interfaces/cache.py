"""Interface for caching mechanisms.

Defines the contract for storing, retrieving, and removing cached data with
optional per-entry TTLs, mirroring the usual "simple cache" contract of
single-key and batch operations.
"""

import abc
from typing import Any, Dict, Iterable, Mapping, Tuple, Union

# Import relevant domain models
from ..models.common import Ttl


class CacheInterface(abc.ABC):
    """Abstract Base Class for key/value cache operations."""

    @abc.abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Fetches a value from the cache.

        Args:
            key: The cache key to retrieve.
            default: Value returned when the key is missing, expired or unreadable.

        Returns:
            The cached value, or `default`.

        Raises:
            InvalidKeyError: If the key is not a legal cache key.
        """
        pass

    @abc.abstractmethod
    def set(self, key: str, value: Any, ttl: Ttl = None) -> bool:
        """Persists a value in the cache.

        Args:
            key: The cache key to store the value under.
            value: Any serializable value.
            ttl: None for no expiry, integer seconds, or a timedelta.

        Returns:
            True on success, False on any storage failure.

        Raises:
            InvalidKeyError: If the key is not a legal cache key.
            InvalidArgumentError: If the ttl is of an unsupported type.
        """
        pass

    @abc.abstractmethod
    def delete(self, key: str) -> bool:
        """Removes an item from the cache.

        Returns:
            True if the item is gone afterwards, False if removal failed.
        """
        pass

    @abc.abstractmethod
    def clear(self) -> bool:
        """Wipes every entry. Returns False if any entry could not be removed."""
        pass

    @abc.abstractmethod
    def get_multiple(self, keys: Iterable[str], default: Any = None) -> Dict[str, Any]:
        """Fetches several values at once, keyed by the requested keys."""
        pass

    @abc.abstractmethod
    def set_multiple(
        self,
        values: Union[Mapping[str, Any], Iterable[Tuple[str, Any]]],
        ttl: Ttl = None
    ) -> bool:
        """Persists several values with a shared TTL. True only if all succeeded."""
        pass

    @abc.abstractmethod
    def delete_multiple(self, keys: Iterable[str]) -> bool:
        """Removes several items. True only if all removals succeeded."""
        pass

    @abc.abstractmethod
    def has(self, key: str) -> bool:
        """Determines whether an item is present in the cache.

        Note: a stored None is indistinguishable from a missing entry.
        """
        pass

    @abc.abstractmethod
    def prune(self) -> int:
        """Removes every expired or unreadable entry.

        Returns:
            The number of entries removed.
        """
        pass
