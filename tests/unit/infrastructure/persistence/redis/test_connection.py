"""
Tests for Redis Connection Pool Management.

Covers:
- Singleton connection pool
- Thread-safe pool creation
- Retry logic with exponential backoff
- Health check with PING
- Connection cleanup
- Configuration from Settings
"""

import threading
from unittest.mock import MagicMock, patch

import pytest
from redis.exceptions import ConnectionError, RedisError, TimeoutError

from caption_service.config import Settings
from caption_service.domain.shared.exceptions import InfrastructureError
from caption_service.infrastructure.persistence.redis.connection import (
    close_connections,
    get_redis_client,
    health_check,
)

MODULE = "caption_service.infrastructure.persistence.redis.connection"


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture(autouse=True)
def reset_singleton():
    """Reset singleton pool before and after each test."""
    import caption_service.infrastructure.persistence.redis.connection as conn_module

    conn_module._redis_pool = None
    yield
    conn_module._redis_pool = None


@pytest.fixture
def redis_settings():
    return Settings(
        redis_host="redis.example.com",
        redis_port=6380,
        redis_db=2,
        redis_max_connections=15,
        redis_timeout=7,
        redis_retry_attempts=3,
    )


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.ping.return_value = True
    return client


# ============================================================================
# HAPPY PATH TESTS - get_redis_client()
# ============================================================================


def test_get_redis_client_creates_pool_from_settings(redis_settings, mock_client):
    """Test get_redis_client builds the pool from Settings."""
    with patch(f"{MODULE}.ConnectionPool") as pool_class:
        with patch(f"{MODULE}.Redis", return_value=mock_client):
            client = get_redis_client(redis_settings)

    assert client is mock_client
    call_kwargs = pool_class.call_args[1]
    assert call_kwargs["host"] == "redis.example.com"
    assert call_kwargs["port"] == 6380
    assert call_kwargs["db"] == 2
    assert call_kwargs["max_connections"] == 15
    assert call_kwargs["socket_timeout"] == 7
    assert call_kwargs["socket_keepalive"] is True
    assert call_kwargs["decode_responses"] is True


def test_get_redis_client_reuses_pool_on_subsequent_calls(redis_settings, mock_client):
    """Test get_redis_client reuses pool (singleton pattern)."""
    with patch(f"{MODULE}.ConnectionPool") as pool_class:
        with patch(f"{MODULE}.Redis", return_value=mock_client):
            get_redis_client(redis_settings)
            get_redis_client(redis_settings)

    assert pool_class.call_count == 1


def test_get_redis_client_pings_when_verifying(redis_settings, mock_client):
    with patch(f"{MODULE}.ConnectionPool"):
        with patch(f"{MODULE}.Redis", return_value=mock_client):
            get_redis_client(redis_settings)

    mock_client.ping.assert_called_once()


def test_get_redis_client_skips_ping_without_verify(redis_settings, mock_client):
    with patch(f"{MODULE}.ConnectionPool"):
        with patch(f"{MODULE}.Redis", return_value=mock_client):
            get_redis_client(redis_settings, verify=False)

    mock_client.ping.assert_not_called()


# ============================================================================
# RETRY LOGIC TESTS - get_redis_client()
# ============================================================================


def test_get_redis_client_retries_on_connection_error(redis_settings, mock_client):
    """Test get_redis_client retries on ConnectionError."""
    mock_client.ping.side_effect = [
        ConnectionError("Connection refused"),
        ConnectionError("Connection refused"),
        True,
    ]
    with patch(f"{MODULE}.ConnectionPool"):
        with patch(f"{MODULE}.Redis", return_value=mock_client):
            with patch("time.sleep"):
                client = get_redis_client(redis_settings)

    assert client is mock_client
    assert mock_client.ping.call_count == 3


def test_get_redis_client_retries_on_timeout_error(redis_settings, mock_client):
    mock_client.ping.side_effect = [TimeoutError("Connection timeout"), True]
    with patch(f"{MODULE}.ConnectionPool"):
        with patch(f"{MODULE}.Redis", return_value=mock_client):
            with patch("time.sleep"):
                get_redis_client(redis_settings)

    assert mock_client.ping.call_count == 2


def test_get_redis_client_uses_exponential_backoff(mock_client):
    """Test get_redis_client uses exponential backoff (1s, 2s, 4s)."""
    mock_client.ping.side_effect = [
        ConnectionError("Failed"),
        ConnectionError("Failed"),
        ConnectionError("Failed"),
        True,
    ]
    with patch(f"{MODULE}.ConnectionPool"):
        with patch(f"{MODULE}.Redis", return_value=mock_client):
            with patch("time.sleep") as mock_sleep:
                get_redis_client(Settings(redis_retry_attempts=4))

    assert [c[0][0] for c in mock_sleep.call_args_list] == [1, 2, 4]


def test_get_redis_client_raises_after_max_retries(redis_settings, mock_client):
    """Test get_redis_client raises InfrastructureError after all retries."""
    mock_client.ping.side_effect = ConnectionError("Connection refused")
    with patch(f"{MODULE}.ConnectionPool"):
        with patch(f"{MODULE}.Redis", return_value=mock_client):
            with patch("time.sleep"):
                with pytest.raises(
                    InfrastructureError,
                    match="Failed to connect to Redis after 3 attempts",
                ) as exc_info:
                    get_redis_client(redis_settings)

    assert isinstance(exc_info.value.original_error, ConnectionError)
    assert mock_client.ping.call_count == 3


# ============================================================================
# THREAD SAFETY TESTS - get_redis_client()
# ============================================================================


def test_get_redis_client_is_thread_safe(redis_settings, mock_client):
    """Test get_redis_client creates pool only once across threads."""
    pool_creation_count = 0

    def mock_pool_init(*args, **kwargs):
        nonlocal pool_creation_count
        pool_creation_count += 1
        return MagicMock()

    with patch(f"{MODULE}.ConnectionPool", side_effect=mock_pool_init):
        with patch(f"{MODULE}.Redis", return_value=mock_client):
            threads = [
                threading.Thread(target=get_redis_client, args=(redis_settings,))
                for _ in range(10)
            ]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

    assert pool_creation_count == 1


# ============================================================================
# TESTS - health_check()
# ============================================================================


def test_health_check_returns_true_when_redis_healthy(redis_settings, mock_client):
    with patch(f"{MODULE}.get_redis_client", return_value=mock_client):
        assert health_check(redis_settings) is True


def test_health_check_returns_false_when_ping_fails(redis_settings, mock_client):
    mock_client.ping.return_value = False
    with patch(f"{MODULE}.get_redis_client", return_value=mock_client):
        assert health_check(redis_settings) is False


def test_health_check_returns_false_on_redis_error(redis_settings, mock_client):
    """Test health_check returns False on RedisError (doesn't raise)."""
    mock_client.ping.side_effect = RedisError("Connection lost")
    with patch(f"{MODULE}.get_redis_client", return_value=mock_client):
        assert health_check(redis_settings) is False


# ============================================================================
# TESTS - close_connections()
# ============================================================================


def test_close_connections_disconnects_pool(redis_settings, mock_client):
    pool = MagicMock()
    with patch(f"{MODULE}.ConnectionPool", return_value=pool):
        with patch(f"{MODULE}.Redis", return_value=mock_client):
            get_redis_client(redis_settings)

    close_connections()

    pool.disconnect.assert_called_once()
    import caption_service.infrastructure.persistence.redis.connection as conn_module

    assert conn_module._redis_pool is None


def test_close_connections_is_idempotent():
    close_connections()
    close_connections()
