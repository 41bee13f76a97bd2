"""Shared fixtures: an in-memory stand-in for the RedisBloom service."""

from typing import Any, Dict, List, Sequence

import pytest

from redbloom_mcp.exceptions import ReplyError


def _key(item: Any) -> bytes:
    if isinstance(item, bytes):
        return item
    return str(item).encode()


class FakeBloomService:
    """Emulates BF.* replies closely enough for client behaviour tests.

    Membership is exact here; false positives are the service's business.
    """

    DEFAULT_CAPACITY = 100
    DEFAULT_EXPANSION = 2

    def __init__(self) -> None:
        self.filters: Dict[str, Dict[str, Any]] = {}
        self.calls: List[List[Any]] = []

    def _create(self, name: str, capacity: int, expansion: Any) -> Dict[str, Any]:
        bloom = {"capacity": capacity, "expansion": expansion, "items": set(), "filters": 1}
        self.filters[name] = bloom
        return bloom

    def _add(self, bloom: Dict[str, Any], item: Any) -> Any:
        key = _key(item)
        if key in bloom["items"]:
            return 0
        if len(bloom["items"]) >= bloom["capacity"] * bloom["filters"]:
            if bloom["expansion"] is None:
                return ReplyError("ERR non scaling filter is full")
            bloom["filters"] += 1
        bloom["items"].add(key)
        return 1

    def _raise(self, reply: Any) -> Any:
        if isinstance(reply, Exception):
            raise reply
        return reply

    def submit(self, args: Sequence[Any]) -> Any:
        self.calls.append(list(args))
        command, name, rest = args[0], args[1], list(args[2:])
        bloom = self.filters.get(name)

        if command == "BF.RESERVE":
            if bloom is not None:
                raise ReplyError("ERR item exists")
            expansion = None if rest[2] == "NONSCALING" else rest[3]
            self._create(name, rest[1], expansion)
            return b"OK"

        if command in ("BF.ADD", "BF.MADD"):
            if bloom is None:
                bloom = self._create(name, self.DEFAULT_CAPACITY, self.DEFAULT_EXPANSION)
            replies = [self._add(bloom, item) for item in rest]
            return self._raise(replies[0]) if command == "BF.ADD" else replies

        if command in ("BF.EXISTS", "BF.MEXISTS"):
            found = [int(bloom is not None and _key(item) in bloom["items"]) for item in rest]
            return found[0] if command == "BF.EXISTS" else found

        if command == "BF.INFO":
            if bloom is None:
                raise ReplyError("ERR not found")
            return [
                b"Capacity", bloom["capacity"] * bloom["filters"],
                b"Size", 240,
                b"Number of filters", bloom["filters"],
                b"Number of items inserted", len(bloom["items"]),
                b"Expansion rate", bloom["expansion"],
            ]

        if command == "BF.INSERT":
            items_at = rest.index("ITEMS")
            flags, items = rest[:items_at], rest[items_at + 1:]
            if bloom is None:
                if "NOCREATE" in flags:
                    raise ReplyError("ERR not found")
                capacity = flags[flags.index("CAPACITY") + 1] if "CAPACITY" in flags else self.DEFAULT_CAPACITY
                if "NONSCALING" in flags:
                    expansion = None
                elif "EXPANSION" in flags:
                    expansion = flags[flags.index("EXPANSION") + 1]
                else:
                    expansion = self.DEFAULT_EXPANSION
                bloom = self._create(name, capacity, expansion)
            return [self._add(bloom, item) for item in items]

        raise ReplyError(f"ERR unknown command '{command}'")


class AsyncFakeBloomService(FakeBloomService):
    async def submit(self, args: Sequence[Any]) -> Any:  # type: ignore[override]
        return FakeBloomService.submit(self, args)


@pytest.fixture
def service():
    """Fresh in-memory filter service."""
    return FakeBloomService()


@pytest.fixture
def async_service():
    """Fresh in-memory filter service with a coroutine submit."""
    return AsyncFakeBloomService()
