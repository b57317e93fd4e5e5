"""File Cache Implementation.

Provides the concrete implementation of the CacheInterface: one file per
entry, holding a pickled envelope of value and expiry, guarded by advisory
file locks.
Bounded Context: Cache Management
"""
