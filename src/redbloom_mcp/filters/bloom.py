"""Scalable Bloom filter clients."""

from typing import Any, Iterable, List, Optional

from ..constants import COMMANDS, DEFAULT_EXPANSION_RATE
from ..protocol.commands import (
    InsertOptions,
    build_add,
    build_exists,
    build_info,
    build_insert,
    build_madd,
    build_mexists,
    build_reserve,
    collect_items,
)
from ..protocol.encoding import Item
from ..protocol.replies import BloomInfo, decode_info_fields, decode_int, decode_int_list, decode_ok, parse_info
from ..transport import AsyncTransport, Transport
from .base import AsyncFilterKey, FilterKey


class BloomFilter:
    """Client for one remote scalable Bloom filter.

    Every method makes exactly one round trip. The client keeps no filter
    state; the service is the only source of truth.
    """

    def __init__(self, transport: Transport, name: str) -> None:
        """Initialize the client.

        Args:
            transport: Synchronous transport used for every command
            name: Remote filter name
        """
        self.key = FilterKey(transport, name)

    @property
    def name(self) -> str:
        return self.key.name

    def reserve(
        self,
        error_rate: float,
        capacity: int,
        expansion_rate: int = DEFAULT_EXPANSION_RATE,
    ) -> bool:
        """Create the filter.

        Args:
            error_rate: Desired false-positive probability, in (0, 1)
            capacity: Number of entries intended to be added
            expansion_rate: Growth factor; zero or below makes the filter non-scaling

        Returns:
            True once the service acknowledges

        Raises:
            InvalidArgumentError: Bad arguments, before anything is sent
            FilterAlreadyExistsError: The name is already taken
        """
        command = build_reserve(self.name, error_rate, capacity, expansion_rate)
        return decode_ok(self.key.submit(command), command=command[0])

    def add(self, item: Item) -> int:
        """Add an item.

        Returns:
            1 if the item was newly added, 0 if it may have already existed
        """
        command = build_add(self.name, item)
        return decode_int(self.key.submit(command), command=command[0])

    def madd(self, items: Iterable[Item]) -> List[int]:
        """Add several items in one round trip.

        Returns:
            One 1/0 flag per item, in input order
        """
        items = collect_items(COMMANDS["madd"], items)
        command = build_madd(self.name, items)
        return decode_int_list(self.key.submit(command), len(items), command=command[0])

    def exists(self, item: Item) -> int:
        """Check whether an item may exist.

        Returns:
            1 if the item may exist, 0 if it certainly does not
        """
        command = build_exists(self.name, item)
        return decode_int(self.key.submit(command), command=command[0])

    def mexists(self, items: Iterable[Item]) -> List[int]:
        """Check several items in one round trip."""
        items = collect_items(COMMANDS["mexists"], items)
        command = build_mexists(self.name, items)
        return decode_int_list(self.key.submit(command), len(items), command=command[0])

    def info_fields(self) -> List[Any]:
        """Return the raw BF.INFO label/value list."""
        command = build_info(self.name)
        return decode_info_fields(self.key.submit(command), command=command[0])

    def info(self) -> BloomInfo:
        """Return the decoded filter info."""
        return parse_info(self.info_fields(), command=COMMANDS["info"])

    def insert(self, items: Iterable[Item], options: Optional[InsertOptions] = None) -> List[int]:
        """Add items, creating the filter first if permitted.

        Creation arguments in ``options`` only matter when the filter does not
        exist yet. With ``upsert=False`` a missing filter is an error and
        nothing is created.

        Returns:
            One 1/0 flag per item, in input order

        Raises:
            InvalidArgumentError: items is a bare str or bytes, or not iterable
            EmptyBatchError: No items, before anything is sent
            FilterNotFoundError: ``upsert=False`` and the filter does not exist
        """
        items = collect_items(COMMANDS["insert"], items)
        command = build_insert(self.name, items, options)
        return decode_int_list(self.key.submit(command), len(items), command=command[0])

    def __repr__(self) -> str:
        return f"BloomFilter({self.name!r})"


class AsyncBloomFilter:
    """Asynchronous client for one remote scalable Bloom filter.

    Concurrent calls are not ordered by the client. Await a call before
    issuing one that depends on it, e.g. reserve before add.
    """

    def __init__(self, transport: AsyncTransport, name: str) -> None:
        self.key = AsyncFilterKey(transport, name)

    @property
    def name(self) -> str:
        return self.key.name

    async def reserve(
        self,
        error_rate: float,
        capacity: int,
        expansion_rate: int = DEFAULT_EXPANSION_RATE,
    ) -> bool:
        command = build_reserve(self.name, error_rate, capacity, expansion_rate)
        return decode_ok(await self.key.submit(command), command=command[0])

    async def add(self, item: Item) -> int:
        command = build_add(self.name, item)
        return decode_int(await self.key.submit(command), command=command[0])

    async def madd(self, items: Iterable[Item]) -> List[int]:
        items = collect_items(COMMANDS["madd"], items)
        command = build_madd(self.name, items)
        return decode_int_list(await self.key.submit(command), len(items), command=command[0])

    async def exists(self, item: Item) -> int:
        command = build_exists(self.name, item)
        return decode_int(await self.key.submit(command), command=command[0])

    async def mexists(self, items: Iterable[Item]) -> List[int]:
        items = collect_items(COMMANDS["mexists"], items)
        command = build_mexists(self.name, items)
        return decode_int_list(await self.key.submit(command), len(items), command=command[0])

    async def info_fields(self) -> List[Any]:
        command = build_info(self.name)
        return decode_info_fields(await self.key.submit(command), command=command[0])

    async def info(self) -> BloomInfo:
        return parse_info(await self.info_fields(), command=COMMANDS["info"])

    async def insert(self, items: Iterable[Item], options: Optional[InsertOptions] = None) -> List[int]:
        items = collect_items(COMMANDS["insert"], items)
        command = build_insert(self.name, items, options)
        return decode_int_list(await self.key.submit(command), len(items), command=command[0])

    def __repr__(self) -> str:
        return f"AsyncBloomFilter({self.name!r})"
