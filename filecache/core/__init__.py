"""Core Layer: command orchestration on top of the cache store."""
