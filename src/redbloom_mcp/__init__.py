"""redbloom-mcp - client and MCP tools for remote scalable Bloom filters."""

__version__ = "0.1.0"

from .exceptions import (
    CapacityExceededError,
    EmptyBatchError,
    FilterAlreadyExistsError,
    FilterError,
    FilterNotFoundError,
    InvalidArgumentError,
    ItemTooLargeError,
    ProtocolError,
    ReplyError,
    TransportError,
)
from .filters import AsyncBloomFilter, BloomFilter
from .protocol import BloomInfo, InsertOptions
from .transport import AsyncRedisTransport, AsyncTransport, HttpGatewayTransport, RedisTransport, Transport

__all__ = [
    # Clients
    "BloomFilter",
    "AsyncBloomFilter",
    "InsertOptions",
    "BloomInfo",
    # Transports
    "Transport",
    "AsyncTransport",
    "RedisTransport",
    "AsyncRedisTransport",
    "HttpGatewayTransport",
    # Errors
    "FilterError",
    "InvalidArgumentError",
    "EmptyBatchError",
    "FilterAlreadyExistsError",
    "FilterNotFoundError",
    "ItemTooLargeError",
    "CapacityExceededError",
    "ReplyError",
    "ProtocolError",
    "TransportError",
]
