"""
Persistence Infrastructure Module

Data persistence implementations (Redis).

Exports:
    From redis:
        - RedisTaskStatusStore
"""

from .redis import RedisTaskStatusStore

__all__ = [
    "RedisTaskStatusStore",
]
