"""Defines common Value Objects used across the cache layers.

These objects represent simple values like cache keys and the persisted
envelope, ensuring consistency and type safety.
"""

import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, NewType, Optional, Union

# === Caching Context ===
CacheKey = NewType("CacheKey", str)      # Validated key, [A-Za-z0-9_.]+
ExpireAt = Optional[float]               # Epoch seconds, None means "never expires"
Ttl = Optional[Union[int, timedelta]]    # Caller-supplied time-to-live

# Suffix shared by every entry file in a cache directory
ENTRY_SUFFIX = ".cache"


@dataclass(frozen=True)
class Envelope:
    """The persisted unit: a value together with its absolute expiry."""
    value: Any
    expire_at: ExpireAt = None

    def is_expired(self, now: Optional[float] = None) -> bool:
        """Checks whether the envelope has passed its expiry instant."""
        if self.expire_at is None:
            return False
        current = time.time() if now is None else now
        return self.expire_at < current
