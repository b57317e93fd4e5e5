"""Domain Layer: interfaces (ports), value objects and errors.

Nothing in here touches the filesystem; infrastructure implements the
contracts defined below.
"""
