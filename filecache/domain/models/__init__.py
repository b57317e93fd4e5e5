"""Value objects shared across the cache layers."""
