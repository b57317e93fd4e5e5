"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the cache to the outside world (the local filesystem, configuration
files, the console) by implementing the interfaces defined in the domain layer.
"""
