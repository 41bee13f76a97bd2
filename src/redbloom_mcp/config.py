"""Environment-driven configuration."""

import os
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from dotenv import load_dotenv

from .constants import DEFAULT_CAPACITY, DEFAULT_ERROR_RATE, DEFAULT_RATE_LIMIT, DEFAULT_TIMEOUT
from .transport import AsyncRedisTransport, HttpGatewayTransport, RedisTransport
from .utils.validators import validate_capacity, validate_error_rate

TRANSPORTS = ("redis", "http")


@dataclass
class Settings:
    """Runtime settings for transports and the MCP server.

    Attributes:
        transport: Which transport to build, "redis" or "http"
        redis_url: redis-py connection URL
        http_endpoint: Base URL of the HTTP gateway
        http_username: Optional basic auth user for the gateway
        http_password: Optional basic auth password for the gateway
        timeout: Socket / request timeout in seconds
        default_error_rate: Error rate used by bf_reserve when none is given
        default_capacity: Capacity used by bf_reserve when none is given
        rate_limit: Tool calls per second
        rate_burst: Tool call burst capacity
    """

    transport: str = "redis"
    redis_url: str = "redis://localhost:6379/0"
    http_endpoint: str = "http://localhost:7379"
    http_username: Optional[str] = None
    http_password: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    default_error_rate: float = DEFAULT_ERROR_RATE
    default_capacity: int = DEFAULT_CAPACITY
    rate_limit: float = DEFAULT_RATE_LIMIT[0]
    rate_burst: int = DEFAULT_RATE_LIMIT[1]

    @property
    def http_auth(self) -> Optional[Tuple[str, str]]:
        if self.http_username and self.http_password:
            return (self.http_username, self.http_password)
        return None


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _check_settings(settings: Settings) -> None:
    if not settings.timeout > 0:
        raise ValueError(f"REDBLOOM_TIMEOUT must be greater than 0, got {settings.timeout!r}")
    if not validate_error_rate(settings.default_error_rate):
        raise ValueError(
            f"REDBLOOM_DEFAULT_ERROR_RATE must be between 0 and 1 (exclusive), got {settings.default_error_rate!r}"
        )
    if not validate_capacity(settings.default_capacity):
        raise ValueError(f"REDBLOOM_DEFAULT_CAPACITY must be a positive integer, got {settings.default_capacity!r}")
    if not settings.rate_limit > 0:
        raise ValueError(f"REDBLOOM_RATE_LIMIT must be greater than 0, got {settings.rate_limit!r}")
    if settings.rate_burst < 1:
        raise ValueError(f"REDBLOOM_RATE_BURST must be at least 1, got {settings.rate_burst!r}")


def load_settings(dotenv: bool = True) -> Settings:
    """Load settings from the environment, reading a .env file first.

    Args:
        dotenv: Whether to load a .env file before reading variables

    Returns:
        Populated Settings

    Raises:
        ValueError: For unknown transports, malformed numbers or out-of-range values
    """
    if dotenv:
        load_dotenv()

    transport = os.getenv("REDBLOOM_TRANSPORT", "redis").strip().lower()
    if transport not in TRANSPORTS:
        raise ValueError(f"REDBLOOM_TRANSPORT must be one of {', '.join(TRANSPORTS)}, got {transport!r}")

    settings = Settings(
        transport=transport,
        redis_url=os.getenv("REDBLOOM_REDIS_URL", "redis://localhost:6379/0"),
        http_endpoint=os.getenv("REDBLOOM_HTTP_ENDPOINT", "http://localhost:7379"),
        http_username=os.getenv("REDBLOOM_HTTP_USERNAME") or None,
        http_password=os.getenv("REDBLOOM_HTTP_PASSWORD") or None,
        timeout=_get_float("REDBLOOM_TIMEOUT", DEFAULT_TIMEOUT),
        default_error_rate=_get_float("REDBLOOM_DEFAULT_ERROR_RATE", DEFAULT_ERROR_RATE),
        default_capacity=_get_int("REDBLOOM_DEFAULT_CAPACITY", DEFAULT_CAPACITY),
        rate_limit=_get_float("REDBLOOM_RATE_LIMIT", DEFAULT_RATE_LIMIT[0]),
        rate_burst=_get_int("REDBLOOM_RATE_BURST", DEFAULT_RATE_LIMIT[1]),
    )
    _check_settings(settings)
    return settings


def create_transport(settings: Settings) -> Union[RedisTransport, HttpGatewayTransport]:
    """Build the synchronous transport selected by settings."""
    if settings.transport == "http":
        return HttpGatewayTransport(settings.http_endpoint, timeout=settings.timeout, auth=settings.http_auth)
    return RedisTransport.from_url(settings.redis_url, timeout=settings.timeout)


def create_async_transport(settings: Settings) -> AsyncRedisTransport:
    """Build the asynchronous transport; only redis supports async delivery."""
    if settings.transport != "redis":
        raise ValueError(f"No asynchronous transport for {settings.transport!r}")
    return AsyncRedisTransport.from_url(settings.redis_url, timeout=settings.timeout)
