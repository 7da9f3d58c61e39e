"""
Redis Connection Pool Management.

Provides the process-wide connection pool used by the task status store.
The API creates it on startup, each Celery worker process creates it in
worker_process_init, and both close it on shutdown.

Responsibility:
    - Manage one Redis connection pool per process
    - Health check with PING
    - Retry logic with exponential backoff on first contact
    - Thread-safe singleton pattern

Business Rules:
    - Pool size, timeouts and retry attempts come from Settings
    - Exponential backoff: 1s, 2s, 4s (base=1s, multiplier=2)
    - Decode responses: True (return strings not bytes)

Error Handling:
    - ConnectionError / TimeoutError: log and retry with exponential backoff
    - After all retries: raise InfrastructureError
    - Health check failure: return False (don't raise exception)

Examples:
    >>> client = get_redis_client(settings)
    >>> if health_check(settings):
    ...     print("Redis is healthy")
    >>> close_connections()
"""

import logging
import threading
import time
from typing import Optional

from redis import ConnectionPool, Redis
from redis.exceptions import ConnectionError, RedisError, TimeoutError

from caption_service.config import Settings
from caption_service.domain.shared.exceptions import InfrastructureError

# Configure logger for this module
logger = logging.getLogger(__name__)

# Singleton connection pool (thread-safe)
_redis_pool: Optional[ConnectionPool] = None
_pool_lock = threading.Lock()


def get_redis_client(settings: Settings, verify: bool = True) -> Redis:
    """
    Get Redis client backed by the process-wide connection pool.

    Creates the pool on first call, reuses it on subsequent calls.

    Args:
        settings: Service settings (host, port, db, pool size, timeouts)
        verify: PING the server (with retries) before returning

    Returns:
        Redis client instance sharing the pool

    Raises:
        InfrastructureError: If PING fails after all retry attempts
    """
    global _redis_pool

    # Create connection pool if not exists (thread-safe singleton)
    if _redis_pool is None:
        with _pool_lock:
            # Double-check locking pattern
            if _redis_pool is None:
                logger.info(
                    f"Creating Redis connection pool: "
                    f"host={settings.redis_host}, port={settings.redis_port}, "
                    f"db={settings.redis_db}, "
                    f"max_connections={settings.redis_max_connections}, "
                    f"timeout={settings.redis_timeout}s"
                )

                _redis_pool = ConnectionPool(
                    host=settings.redis_host,
                    port=settings.redis_port,
                    db=settings.redis_db,
                    max_connections=settings.redis_max_connections,
                    socket_timeout=settings.redis_timeout,
                    socket_connect_timeout=settings.redis_timeout,
                    socket_keepalive=True,
                    decode_responses=True,  # Return strings not bytes
                )

    client = Redis(connection_pool=_redis_pool)
    if not verify:
        return client

    retry_attempts = max(1, settings.redis_retry_attempts)
    backoff_base = 1  # Base delay in seconds
    last_error: Optional[Exception] = None

    for attempt in range(retry_attempts):
        try:
            client.ping()
            logger.debug(f"Redis connection established (attempt {attempt + 1})")
            return client

        except (ConnectionError, TimeoutError) as e:
            last_error = e
            if attempt < retry_attempts - 1:
                delay = backoff_base * (2**attempt)
                logger.warning(
                    f"Redis connection failed (attempt {attempt + 1}/{retry_attempts}): {e}. "
                    f"Retrying in {delay}s..."
                )
                time.sleep(delay)
            else:
                logger.error(
                    f"Redis connection failed after {retry_attempts} attempts: {e}"
                )

    raise InfrastructureError(
        f"Failed to connect to Redis after {retry_attempts} attempts",
        original_error=last_error,
    )


def health_check(settings: Settings) -> bool:
    """
    Check Redis health with PING test.

    Returns:
        True if Redis responds to PING, False otherwise (never raises)
    """
    try:
        client = get_redis_client(settings, verify=False)
        if client.ping():
            logger.debug("Redis health check: OK")
            return True
        logger.warning("Redis health check: PING returned False")
        return False

    except RedisError as e:
        logger.warning(f"Redis health check failed: {e}")
        return False


def close_connections() -> None:
    """
    Close all Redis connections in the pool and reset the singleton.

    Safe to call multiple times (idempotent).
    """
    global _redis_pool

    with _pool_lock:
        if _redis_pool is not None:
            logger.info("Closing Redis connection pool")

            try:
                _redis_pool.disconnect()

            except RedisError as e:
                logger.error(f"Error closing Redis connection pool: {e}")

            finally:
                _redis_pool = None
                logger.info("Redis connection pool closed")

        else:
            logger.debug("Redis connection pool already closed or not initialized")
