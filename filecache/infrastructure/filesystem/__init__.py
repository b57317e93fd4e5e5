"""Low-level file access helpers (advisory locking)."""
