"""Transports that deliver filter commands to the service.

A transport accepts the full positional argument list of one command and
returns the raw reply. Service error replies surface as ReplyError and
connection problems as TransportError; nothing is retried here.
"""

import logging
from typing import Any, Awaitable, Optional, Protocol, Sequence, Tuple, runtime_checkable
from urllib.parse import quote

import redis
import redis.asyncio
import requests

from .constants import DEFAULT_TIMEOUT
from .exceptions import ProtocolError, ReplyError, TransportError

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Synchronous command transport."""

    def submit(self, args: Sequence[Any]) -> Any:
        """Send one command and return its raw reply."""
        ...


@runtime_checkable
class AsyncTransport(Protocol):
    """Asynchronous command transport."""

    def submit(self, args: Sequence[Any]) -> Awaitable[Any]:
        """Send one command and resolve to its raw reply."""
        ...


class RedisTransport:
    """Transport over a redis-py client."""

    def __init__(self, client: redis.Redis) -> None:
        self.client = client

    @classmethod
    def from_url(cls, url: str, timeout: float = DEFAULT_TIMEOUT) -> "RedisTransport":
        """Create a transport with its own connection pool.

        Args:
            url: Redis URL, e.g. ``redis://localhost:6379/0``
            timeout: Socket connect and read timeout in seconds
        """
        client = redis.Redis.from_url(url, socket_timeout=timeout, socket_connect_timeout=timeout)
        return cls(client)

    def submit(self, args: Sequence[Any]) -> Any:
        command = str(args[0]) if args else None
        try:
            return self.client.execute_command(*args)
        except redis.exceptions.ResponseError as e:
            raise ReplyError(str(e), command=command) from e
        except redis.exceptions.RedisError as e:
            logger.error(f"Redis transport failure on {command}: {e}")
            raise TransportError(str(e), command=command) from e

    def close(self) -> None:
        self.client.close()


class AsyncRedisTransport:
    """Transport over a redis.asyncio client."""

    def __init__(self, client: redis.asyncio.Redis) -> None:
        self.client = client

    @classmethod
    def from_url(cls, url: str, timeout: float = DEFAULT_TIMEOUT) -> "AsyncRedisTransport":
        client = redis.asyncio.Redis.from_url(url, socket_timeout=timeout, socket_connect_timeout=timeout)
        return cls(client)

    async def submit(self, args: Sequence[Any]) -> Any:
        command = str(args[0]) if args else None
        try:
            return await self.client.execute_command(*args)
        except redis.exceptions.ResponseError as e:
            raise ReplyError(str(e), command=command) from e
        except redis.exceptions.RedisError as e:
            logger.error(f"Redis transport failure on {command}: {e}")
            raise TransportError(str(e), command=command) from e

    async def close(self) -> None:
        await self.client.aclose()


def _quote(arg: Any) -> str:
    if isinstance(arg, (str, bytes)):
        return quote(arg, safe="")
    return quote(str(arg), safe="")


class HttpGatewayTransport:
    """Transport over a Webdis-style HTTP gateway.

    Commands are sent as ``GET {endpoint}/{COMMAND}/{arg}/...`` and replies
    come back as ``{"COMMAND": value}``. Status and error replies are wrapped
    as ``[true, "OK"]`` and ``[false, "ERR ..."]``.
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = DEFAULT_TIMEOUT,
        auth: Optional[Tuple[str, str]] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the gateway transport.

        Args:
            endpoint: Gateway base URL, e.g. ``http://localhost:7379``
            timeout: Request timeout in seconds
            auth: Optional (username, password) for HTTP basic auth
            session: Optional requests session to reuse connections
        """
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        if auth:
            self.session.auth = auth

    def build_url(self, args: Sequence[Any]) -> str:
        return f"{self.endpoint}/" + "/".join(_quote(arg) for arg in args)

    def submit(self, args: Sequence[Any]) -> Any:
        command = str(args[0]) if args else None
        url = self.build_url(args)

        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "unknown"
            logger.error(f"Gateway HTTP error on {command}: status={status}")
            raise TransportError(f"Gateway returned HTTP {status}", command=command) from e
        except requests.RequestException as e:
            logger.error(f"Gateway request failed on {command}: {e}")
            raise TransportError(str(e), command=command) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise ProtocolError(f"Gateway reply is not JSON: {e}", command=command) from e

        return self._unwrap(payload, command)

    @staticmethod
    def _unwrap(payload: Any, command: Optional[str]) -> Any:
        if not isinstance(payload, dict) or not payload:
            raise ProtocolError(f"Unexpected gateway reply: {payload!r}", command=command)

        value = payload[command] if command in payload else next(iter(payload.values()))

        if isinstance(value, list) and len(value) == 2 and isinstance(value[0], bool):
            ok, message = value
            if not ok:
                raise ReplyError(str(message), command=command)
            return message
        return value

    def close(self) -> None:
        self.session.close()
