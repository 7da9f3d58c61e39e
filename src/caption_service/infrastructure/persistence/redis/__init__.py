"""
Redis Infrastructure Module

Redis-based task status store and connection pool management.

Exports:
    - RedisTaskStatusStore: Durable task records with forward-only transitions
    - get_redis_client: Get Redis client with connection pooling
    - health_check: Check Redis health with PING test
    - close_connections: Close all Redis connections
"""

from .connection import close_connections, get_redis_client, health_check
from .status_store import RedisTaskStatusStore

__all__ = [
    "RedisTaskStatusStore",
    "get_redis_client",
    "health_check",
    "close_connections",
]
