"""
Basecore - Shared runtime utilities.

Settings, logging setup and the Redis client used by the
in-app messaging engine, its CLI and its stream worker.
"""
